"""Tests for JSX rendering and component emission."""
from tailwind_codegen.config import GeneratorOptions
from tailwind_codegen.emitter import (
    JsxAttribute,
    JsxElement,
    JsxText,
    classify_structure,
    generate_component,
    generate_cva_definitions,
    generate_props_interface,
    generate_variant_component,
    render_jsx,
)
from tailwind_codegen.structure import ComponentStructureNode, ElementKind
from tailwind_codegen.variants import VariantKey, get_variant_props


class RecordingFormatter:
    def __init__(self):
        self.languages = []

    def format(self, text, language):
        self.languages.append(language)
        return text + '// formatted\n'


class TestRenderJsx:
    """Tests for render_jsx."""

    def test_inline_text(self):
        element = JsxElement('div', [JsxAttribute('className', 'p-2')], [JsxText('Hi')])
        assert render_jsx(element) == '<div className="p-2">Hi</div>'

    def test_self_closing(self):
        assert render_jsx(JsxElement('img', [JsxAttribute('src', 'a.png')])) == '<img src="a.png" />'

    def test_nested_indentation(self):
        element = JsxElement('div', children=[JsxElement('span', children=[JsxText('a')])])
        assert render_jsx(element) == '<div>\n  <span>a</span>\n</div>'

    def test_text_with_braces_is_quoted(self):
        assert render_jsx(JsxElement('p', children=[JsxText('a {b}')])) == '<p>{"a {b}"}</p>'

    def test_condition(self):
        assert render_jsx(JsxElement('span', condition='open')) == '{open && (\n  <span />\n)}'

    def test_attribute_kinds(self):
        assert JsxAttribute('props', kind='spread').render() == '{...props}'
        assert JsxAttribute('disabled', kind='boolean').render() == 'disabled'
        assert JsxAttribute('size', 'size', 'expression').render() == 'size={size}'


class TestPropsInterface:
    """Tests for generate_props_interface."""

    def test_no_variants(self):
        assert generate_props_interface('Card', {}) == (
            'interface CardProps extends React.HTMLAttributes<HTMLDivElement> {\n'
            '  className?: string;\n'
            '}'
        )

    def test_variant_unions(self):
        text = generate_props_interface('Chip', {'Size': ['Small', 'Large'], 'State': ['Default']})
        assert text.startswith('interface ChipProps extends Omit<React.HTMLAttributes<HTMLDivElement>, "size" | "state"> {')
        assert '  size?: "small" | "large";' in text
        assert '  state?: "default";' in text


class TestCvaDefinitions:
    """Tests for generate_cva_definitions."""

    def test_compound_variants(self):
        styles = {
            VariantKey.parse('size=sm:state=default'): 'p-2',
            VariantKey.parse('size=sm:state=hover'): 'p-2',
            VariantKey.parse('size=lg:state=default'): 'p-4',
            VariantKey.parse('size=lg:state=hover'): 'p-4 ring-2',
        }
        root = ComponentStructureNode(
            id='root', name='Chip', kind=ElementKind.CONTAINER, tag='div',
            styles=styles, present={key: True for key in styles},
        )
        props = get_variant_props(styles)
        code = generate_cva_definitions(root, 'Chip', props, classify_structure(root, props))

        assert code.startswith('const chipVariants = cva("", {')
        assert '      "lg": "p-4",' in code
        assert '  compoundVariants: [' in code
        assert '    { size: "lg", state: "hover", class: "ring-2" },' in code
        assert '    size: "sm",' in code


class TestGenerateVariantComponent:
    """Tests for generate_variant_component."""

    def test_button(self, button_family):
        component = generate_variant_component(button_family)
        code = component.code

        assert component.name == 'Button'
        assert 'import { cva } from "class-variance-authority";' in code
        assert 'import { cn } from "@/lib/utils";' in code
        assert 'interface ButtonProps extends Omit<React.HTMLAttributes<HTMLDivElement>, "state"> {' in code
        assert '  state?: "default" | "disabled";' in code
        assert 'const buttonVariants = cva("bg-blue-500 flex items-center pt-2 pr-4 pb-2 pl-4", {' in code
        assert '"disabled": "opacity-50",' in code
        assert '"default": "",' in code
        assert 'export function Button({\n  state = "default",\n  className,\n  ...props\n}: ButtonProps) {' in code
        assert '<div className={cn(buttonVariants({ state }), className)} {...props}>' in code

    def test_text_switches_with_variant(self, button_family):
        code = generate_variant_component(button_family).code
        expected = (
            '<span className="text-white text-sm">'
            '{({ "default": "Buy now", "disabled": "Unavailable" } as Record<string, string>)[state] ?? "Buy now"}'
            '</span>'
        )
        assert expected in code

    def test_variant_only_element_is_conditional(self, button_family):
        component = generate_variant_component(button_family)
        assert '      {state === "disabled" && (' in component.code
        assert '<img src="assets/lock.svg" alt="Lock" className="w-[16px] h-[16px]" />' in component.code
        assert [asset.path for asset in component.assets] == ['assets/lock.svg']

    def test_formatter_receives_typescript(self, button_family):
        formatter = RecordingFormatter()
        component = generate_variant_component(button_family, formatter=formatter)
        assert formatter.languages == ['typescript']
        assert component.code.endswith('// formatted\n')

    def test_fallbacks_are_opt_in(self):
        family = {
            'name': 'Pill',
            'type': 'COMPONENT_SET',
            'children': [
                {'name': 'State=Default', 'type': 'COMPONENT', 'style': {'backgroundColor': '#3b82f6'}},
                {'name': 'State=Hover', 'type': 'COMPONENT', 'style': {'backgroundColor': '#ef4444'}},
                {'name': 'State=Disabled', 'type': 'COMPONENT', 'style': {'backgroundColor': '#3b82f6'}},
            ],
        }
        plain = generate_variant_component(family)
        assert plain.classifications['root'].fabricated == set()
        assert '"disabled": "",' in plain.code

        guessed = generate_variant_component(family, options=GeneratorOptions(use_variant_fallbacks=True))
        assert guessed.classifications['root'].fabricated == {('State', 'Disabled')}
        assert '"disabled": "opacity-50 cursor-not-allowed",' in guessed.code
        assert '"hover": "bg-red-500",' in guessed.code

    def test_instances(self):
        def variant(name, show_badge):
            return {
                'name': name,
                'type': 'COMPONENT',
                'children': [
                    {'name': 'Icon/Arrow', 'type': 'INSTANCE'},
                    {'name': 'Badge', 'type': 'INSTANCE', 'componentProperties': {'Show Badge#1:0': show_badge}},
                ],
            }

        family = {
            'name': 'Nav Item',
            'type': 'COMPONENT_SET',
            'children': [variant('State=Default', False), variant('State=Hover', True)],
        }
        code = generate_variant_component(family).code
        assert 'export function NavItem({' in code
        assert '<IconArrow state={state} />' in code
        assert (
            '<Badge showBadge={({ "default": false, "hover": true } as Record<string, boolean>)[state] ?? false} />'
            in code
        )


class TestGenerateComponent:
    """Tests for generate_component."""

    def test_plain_node(self, card_node):
        component = generate_component(card_node)
        code = component.code

        assert 'class-variance-authority' not in code
        assert 'interface CardProps extends React.HTMLAttributes<HTMLDivElement> {' in code
        assert 'export function Card({\n  className,\n  ...props\n}: CardProps) {' in code
        assert '<div className={cn("bg-white p-4 rounded-lg", className)} {...props}>' in code
        assert '<h4 className="text-2xl font-bold">Hello</h4>' in code
        assert '<span className="text-sm">Short copy</span>' in code
        assert '&&' not in code
        assert component.assets == []
