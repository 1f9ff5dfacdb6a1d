"""Tests for the component-structure synthesizer."""
from tailwind_codegen.config import GeneratorOptions
from tailwind_codegen.structure import (
    ROOT_ID,
    ElementKind,
    analyze_component_structure,
    analyze_node_structure,
)
from tailwind_codegen.variants import VariantKey, classify_variant_styles, get_variant_props


DEFAULT = VariantKey.parse('State=Default')
DISABLED = VariantKey.parse('State=Disabled')


def _by_id(root):
    return {node.id: node for node in root.iter_nodes()}


class TestAnalyzeComponentStructure:
    """Tests for analyze_component_structure."""

    def test_root(self, button_family):
        root = analyze_component_structure(button_family)
        assert root.id == ROOT_ID
        assert root.name == 'Button'
        assert list(root.styles) == [DEFAULT, DISABLED]
        assert root.styles[DEFAULT] == 'bg-blue-500 flex items-center pt-2 pr-4 pb-2 pl-4'
        assert root.styles[DISABLED] == 'bg-blue-500 flex items-center pt-2 pr-4 pb-2 pl-4 opacity-50'

    def test_paths_link_into_tree(self, button_family):
        root = analyze_component_structure(button_family)
        assert [child.id for child in root.children] == ['node_0', 'node_1']
        assert all(child.parent_id == ROOT_ID for child in root.children)

    def test_text_content_per_variant(self, button_family):
        label = _by_id(analyze_component_structure(button_family))['node_0']
        assert label.kind == ElementKind.TEXT
        assert label.tag == 'span'
        assert label.name == 'label'
        assert label.content == {DEFAULT: 'Buy now', DISABLED: 'Unavailable'}
        assert label.styles[DEFAULT] == 'text-white text-sm'

    def test_variant_only_asset(self, button_family):
        lock = _by_id(analyze_component_structure(button_family))['node_1']
        assert lock.kind == ElementKind.IMAGE
        assert lock.tag == 'img'
        assert lock.present == {DISABLED: True}
        assert lock.asset.path == 'assets/lock.svg'
        assert lock.asset.format == 'svg'

    def test_asset_dir_option(self, button_family):
        root = analyze_component_structure(button_family, options=GeneratorOptions(asset_dir='static/icons'))
        assert _by_id(root)['node_1'].asset.path == 'static/icons/lock.svg'

    def test_opacity_becomes_a_variant_class(self, button_family):
        root = analyze_component_structure(button_family)
        result = classify_variant_styles(root.styles, get_variant_props(root.styles))
        assert result.variants['State']['Disabled'] == 'opacity-50'
        assert 'opacity-50' not in result.base.split()

    def test_hidden_layers_keep_their_index(self):
        family = {
            'name': 'Row',
            'type': 'COMPONENT_SET',
            'children': [{
                'name': 'State=Default',
                'type': 'COMPONENT',
                'children': [
                    {'name': 'Ghost', 'type': 'FRAME', 'visible': False},
                    {'name': 'Label', 'type': 'TEXT', 'characters': 'Hi'},
                ],
            }],
        }
        root = analyze_component_structure(family)
        assert [child.id for child in root.children] == ['node_1']

    def test_instances_are_opaque(self):
        family = {
            'name': 'Toolbar',
            'type': 'COMPONENT_SET',
            'children': [{
                'name': 'State=Default',
                'type': 'COMPONENT',
                'children': [{
                    'name': 'Icon/Arrow, Size=sm',
                    'type': 'INSTANCE',
                    'componentProperties': {'Show Badge#12:0': True},
                    'children': [{'name': 'Inner', 'type': 'TEXT', 'characters': 'x'}],
                }],
            }],
        }
        root = analyze_component_structure(family)
        nodes = _by_id(root)
        icon = nodes['node_0']
        assert icon.kind == ElementKind.COMPONENT
        assert icon.component_name == 'IconArrow'
        assert icon.component_props[DEFAULT] == {'Show Badge#12:0': True}
        assert 'node_0_0' not in nodes

    def test_variant_props_restrict_keys(self):
        family = {
            'name': 'Chip',
            'type': 'COMPONENT_SET',
            'children': [
                {'name': 'Size=sm, State=Default', 'type': 'COMPONENT'},
                {'name': 'Size=lg, State=Default', 'type': 'COMPONENT'},
            ],
        }
        root = analyze_component_structure(family, variant_props={'Size': ['sm', 'lg']})
        assert list(root.styles) == [VariantKey.parse('Size=sm'), VariantKey.parse('Size=lg')]

    def test_variant_properties_preferred_over_name(self):
        family = {
            'name': 'Chip',
            'type': 'COMPONENT_SET',
            'children': [{'name': 'whatever', 'type': 'COMPONENT', 'variantProperties': {'Tone': 'Warm'}}],
        }
        root = analyze_component_structure(family)
        assert list(root.styles) == [VariantKey.parse('Tone=Warm')]


class TestAnalyzeNodeStructure:
    """Tests for analyze_node_structure."""

    def test_single_unnamed_variant(self, card_node):
        root = analyze_node_structure(card_node)
        assert list(root.styles) == [VariantKey()]
        assert root.styles[VariantKey()] == 'bg-white p-4 rounded-lg'
        title = root.children[0]
        assert title.tag == 'h4'
        assert title.content == {VariantKey(): 'Hello'}

    def test_max_depth(self):
        node = {
            'name': 'Outer',
            'type': 'FRAME',
            'children': [{
                'name': 'Inner',
                'type': 'FRAME',
                'children': [{'name': 'Deep', 'type': 'TEXT', 'characters': 'x'}],
            }],
        }
        shallow = analyze_node_structure(node, options=GeneratorOptions(max_depth=1))
        assert [n.id for n in shallow.iter_nodes()] == ['root', 'node_0']
        deep = analyze_node_structure(node)
        assert [n.id for n in deep.iter_nodes()] == ['root', 'node_0', 'node_0_0']
