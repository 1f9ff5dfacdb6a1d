"""
React component emitter.

Turns a ComponentStructureNode tree into TSX: a props interface, one cva()
declaration per node whose classes vary, and a render tree. The render tree
is built as JsxElement objects first and serialized by render_jsx at the end.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Set, Tuple, Union

from tailwind_codegen.config import GeneratorOptions
from tailwind_codegen.names import prop_identifier, sanitize_identifier, value_literal
from tailwind_codegen.structure import (
    AssetRef,
    ComponentStructureNode,
    ElementKind,
    analyze_component_structure,
    analyze_node_structure,
)
from tailwind_codegen.variants import VariantKey, VariantStyles, classify_variant_styles, get_variant_props

INDENT = '  '


# ============================================================================
# Formatting boundary
# ============================================================================

class Formatter(Protocol):
    """External pretty-printer, e.g. a Prettier bridge."""

    def format(self, text: str, language: str) -> str:
        ...


class PassthroughFormatter:
    """Returns source unchanged."""

    def format(self, text: str, language: str) -> str:
        return text


# ============================================================================
# JSX tree
# ============================================================================

@dataclass
class JsxAttribute:
    name: str
    value: Optional[str] = None
    kind: str = 'string'  # "string" | "expression" | "boolean" | "spread"

    def render(self) -> str:
        if self.kind == 'spread':
            return f'{{...{self.name}}}'
        if self.kind == 'boolean':
            return self.name
        if self.kind == 'expression':
            return f'{self.name}={{{self.value}}}'
        return f'{self.name}={json.dumps(self.value)}'


@dataclass
class JsxText:
    text: str


@dataclass
class JsxExpression:
    code: str


@dataclass
class JsxElement:
    tag: str
    attributes: List[JsxAttribute] = field(default_factory=list)
    children: List[Union['JsxElement', JsxText, JsxExpression]] = field(default_factory=list)
    # Rendered only when this expression is truthy
    condition: Optional[str] = None


JsxChild = Union[JsxElement, JsxText, JsxExpression]


def _render_leaf(node: Union[JsxText, JsxExpression]) -> str:
    if isinstance(node, JsxExpression):
        return f'{{{node.code}}}'
    text = node.text
    if not text or any(ch in text for ch in '{}<>\n') or text != text.strip():
        return f'{{{json.dumps(text)}}}'
    return text


def render_jsx(node: JsxChild, indent: int = 0) -> str:
    """Serialize a JSX tree; one element per line, two-space indentation."""
    pad = INDENT * indent
    if not isinstance(node, JsxElement):
        return pad + _render_leaf(node)

    if node.condition:
        inner = render_jsx(JsxElement(node.tag, node.attributes, node.children), indent + 1)
        return f'{pad}{{{node.condition} && (\n{inner}\n{pad})}}'

    attrs = ''.join(' ' + attr.render() for attr in node.attributes)
    if not node.children:
        return f'{pad}<{node.tag}{attrs} />'
    if len(node.children) == 1 and not isinstance(node.children[0], JsxElement):
        return f'{pad}<{node.tag}{attrs}>{_render_leaf(node.children[0])}</{node.tag}>'

    lines = [f'{pad}<{node.tag}{attrs}>']
    lines.extend(render_jsx(child, indent + 1) for child in node.children)
    lines.append(f'{pad}</{node.tag}>')
    return '\n'.join(lines)


# ============================================================================
# Classification of the whole tree
# ============================================================================

def classify_structure(
    root: ComponentStructureNode,
    variant_props: Mapping[str, List[str]],
    fallbacks: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> Dict[str, VariantStyles]:
    """VariantStyles per node id. Nodes with identical classes everywhere are static."""
    result: Dict[str, VariantStyles] = {}
    for node in root.iter_nodes():
        distinct = set(node.styles.values())
        if len(distinct) <= 1 or not variant_props:
            result[node.id] = VariantStyles(base=next(iter(distinct), ''))
            continue
        result[node.id] = classify_variant_styles(node.styles, variant_props, fallbacks)
    return result


# ============================================================================
# Declarations
# ============================================================================

def generate_props_interface(component_name: str, variant_props: Mapping[str, List[str]]) -> str:
    """TS props interface with one optional string-literal union per variant property."""
    prop_names = [prop_identifier(p) for p in variant_props]
    if prop_names:
        omitted = ' | '.join(json.dumps(p) for p in prop_names)
        base = f'Omit<React.HTMLAttributes<HTMLDivElement>, {omitted}>'
    else:
        base = 'React.HTMLAttributes<HTMLDivElement>'

    lines = [f'interface {component_name}Props extends {base} {{']
    for prop, values in variant_props.items():
        union = ' | '.join(_unique(json.dumps(value_literal(v)) for v in values))
        lines.append(f'{INDENT}{prop_identifier(prop)}?: {union};')
    lines.append(f'{INDENT}className?: string;')
    lines.append('}')
    return '\n'.join(lines)


def _unique(items) -> List[str]:
    seen: Dict[str, None] = {}
    for item in items:
        seen.setdefault(item, None)
    return list(seen)


def _cva_declaration(
    const_name: str,
    styles: VariantStyles,
    variant_props: Mapping[str, List[str]],
) -> str:
    lines = [f'const {const_name} = cva({json.dumps(styles.base)}, {{']
    lines.append(f'{INDENT}variants: {{')
    for prop, values in variant_props.items():
        slot = styles.variants.get(prop, {})
        lines.append(f'{INDENT * 2}{prop_identifier(prop)}: {{')
        for value in values:
            lines.append(f'{INDENT * 3}{json.dumps(value_literal(value))}: {json.dumps(slot.get(value, ""))},')
        lines.append(f'{INDENT * 2}}},')
    lines.append(f'{INDENT}}},')

    if styles.compound_variants:
        lines.append(f'{INDENT}compoundVariants: [')
        for compound in styles.compound_variants:
            conditions = ', '.join(
                f'{prop_identifier(name)}: {json.dumps(value_literal(value))}'
                for name, value in compound.conditions
            )
            lines.append(f'{INDENT * 2}{{ {conditions}, class: {json.dumps(compound.classes)} }},')
        lines.append(f'{INDENT}],')

    lines.append(f'{INDENT}defaultVariants: {{')
    for prop, values in variant_props.items():
        if values:
            lines.append(f'{INDENT * 2}{prop_identifier(prop)}: {json.dumps(value_literal(values[0]))},')
    lines.append(f'{INDENT}}},')
    lines.append('});')
    return '\n'.join(lines)


def _cva_names(root: ComponentStructureNode, component_name: str, classifications: Dict[str, VariantStyles]) -> Dict[str, str]:
    names: Dict[str, str] = {}
    used: Set[str] = set()
    for node in root.iter_nodes():
        if not classifications[node.id].varies:
            continue
        stem = component_name if node.id == root.id else node.name
        stem = sanitize_identifier(stem[:1].lower() + stem[1:])
        candidate = f'{stem}Variants'
        suffix = 2
        while candidate in used:
            candidate = f'{stem}{suffix}Variants'
            suffix += 1
        used.add(candidate)
        names[node.id] = candidate
    return names


def generate_cva_definitions(
    root: ComponentStructureNode,
    component_name: str,
    variant_props: Mapping[str, List[str]],
    classifications: Dict[str, VariantStyles],
) -> str:
    """One cva() declaration per node whose classes vary between variants."""
    names = _cva_names(root, component_name, classifications)
    return '\n\n'.join(
        _cva_declaration(names[node.id], classifications[node.id], variant_props)
        for node in root.iter_nodes()
        if node.id in names
    )


# ============================================================================
# Render tree
# ============================================================================

def _governing_mapping(
    values: Mapping[VariantKey, Any],
    variant_props: Mapping[str, List[str]],
) -> Tuple[str, Dict[str, Any]]:
    """First property whose value alone decides `values`; else the first property."""
    for prop in variant_props:
        mapping: Dict[str, Any] = {}
        consistent = True
        for key, value in values.items():
            prop_value = key.get(prop)
            if prop_value is None or mapping.setdefault(prop_value, value) != value:
                consistent = False
                break
        if consistent:
            return prop, mapping

    prop = next(iter(variant_props))
    mapping = {}
    for key, value in values.items():
        mapping.setdefault(key.get(prop) or '', value)
    return prop, mapping


def select_expression(values: Mapping[VariantKey, Any], variant_props: Mapping[str, List[str]]) -> str:
    """JS expression picking the per-variant value from the current props."""
    prop, mapping = _governing_mapping(values, variant_props)
    entries = ', '.join(f'{json.dumps(value_literal(k))}: {json.dumps(v)}' for k, v in mapping.items())
    fallback = json.dumps(next(iter(mapping.values())))
    return f'({{ {entries} }} as Record<string, {_ts_type(mapping.values())}>)[{prop_identifier(prop)}] ?? {fallback}'


def _ts_type(values) -> str:
    kinds = {'boolean' if isinstance(v, bool) else 'string' for v in values}
    return ' | '.join(sorted(kinds)) or 'string'


def presence_condition(
    node: ComponentStructureNode,
    all_keys: Sequence[VariantKey],
    variant_props: Mapping[str, List[str]],
) -> Optional[str]:
    """Condition under which a node exists, or None when it is in every variant."""
    present = [k for k in all_keys if node.present.get(k)]
    absent = [k for k in all_keys if not node.present.get(k)]
    if not absent:
        return None

    for prop in variant_props:
        present_values = _unique(k.get(prop) for k in present)
        absent_values = set(k.get(prop) for k in absent)
        if None in present_values or set(present_values) & absent_values:
            continue
        ident = prop_identifier(prop)
        if len(present_values) == 1:
            return f'{ident} === {json.dumps(value_literal(present_values[0]))}'
        literals = ', '.join(json.dumps(value_literal(v)) for v in present_values)
        return f'[{literals}].includes({ident})'

    clauses = []
    for key in present:
        parts = [f'{prop_identifier(n)} === {json.dumps(value_literal(v))}' for n, v in key.pairs]
        clauses.append('(' + ' && '.join(parts) + ')')
    return ' || '.join(clauses) or 'false'


class _RenderContext:
    def __init__(
        self,
        variant_props: Mapping[str, List[str]],
        classifications: Dict[str, VariantStyles],
        cva_names: Dict[str, str],
        all_keys: List[VariantKey],
    ):
        self.variant_props = variant_props
        self.classifications = classifications
        self.cva_names = cva_names
        self.all_keys = all_keys
        self.call_args = '{ ' + ', '.join(prop_identifier(p) for p in variant_props) + ' }'

    def class_attribute(self, node: ComponentStructureNode) -> Optional[JsxAttribute]:
        if node.id in self.cva_names:
            return JsxAttribute('className', f'{self.cva_names[node.id]}({self.call_args})', 'expression')
        base = self.classifications[node.id].base
        return JsxAttribute('className', base) if base else None


def _component_attributes(node: ComponentStructureNode, ctx: _RenderContext) -> List[JsxAttribute]:
    names = _unique(name for props in node.component_props.values() for name in props)
    if not names:
        return [JsxAttribute(prop_identifier(p), prop_identifier(p), 'expression') for p in ctx.variant_props]

    attributes = []
    for raw_name in names:
        ident = prop_identifier(raw_name.split('#', 1)[0])
        values = {k: props[raw_name] for k, props in node.component_props.items() if raw_name in props}
        distinct = _unique(json.dumps(v) for v in values.values())
        if len(distinct) > 1 and ctx.variant_props:
            attributes.append(JsxAttribute(ident, select_expression(values, ctx.variant_props), 'expression'))
            continue
        value = next(iter(values.values()))
        if value is True:
            attributes.append(JsxAttribute(ident, kind='boolean'))
        elif value is False:
            attributes.append(JsxAttribute(ident, 'false', 'expression'))
        else:
            attributes.append(JsxAttribute(ident, str(value)))
    return attributes


def _build_element(node: ComponentStructureNode, ctx: _RenderContext) -> JsxElement:
    attributes: List[JsxAttribute] = []
    children: List[JsxChild] = []

    if node.kind == ElementKind.COMPONENT:
        tag = node.component_name or node.tag
        attributes.extend(_component_attributes(node, ctx))
    else:
        tag = node.tag
        if node.kind == ElementKind.IMAGE and node.asset is not None:
            attributes.append(JsxAttribute('src', node.asset.path))
            attributes.append(JsxAttribute('alt', node.layer_name))

    class_attr = ctx.class_attribute(node)
    if class_attr is not None:
        attributes.append(class_attr)

    if node.kind == ElementKind.TEXT and node.content:
        distinct = _unique(node.content.values())
        if len(distinct) > 1 and ctx.variant_props:
            children.append(JsxExpression(select_expression(node.content, ctx.variant_props)))
        else:
            children.append(JsxText(distinct[0]))

    children.extend(_build_element(child, ctx) for child in node.children)
    return JsxElement(
        tag=tag,
        attributes=attributes,
        children=children,
        condition=presence_condition(node, ctx.all_keys, ctx.variant_props),
    )


def build_render_tree(
    root: ComponentStructureNode,
    variant_props: Mapping[str, List[str]],
    classifications: Dict[str, VariantStyles],
    cva_names: Dict[str, str],
) -> JsxElement:
    """JSX tree of the component body; the root merges in the caller's className."""
    ctx = _RenderContext(variant_props, classifications, cva_names, list(root.styles))
    element = JsxElement(tag=root.tag)
    if root.id in cva_names:
        root_classes = f'{cva_names[root.id]}({ctx.call_args})'
    else:
        root_classes = json.dumps(classifications[root.id].base)
    element.attributes.append(JsxAttribute('className', f'cn({root_classes}, className)', 'expression'))
    element.attributes.append(JsxAttribute('props', kind='spread'))
    element.children.extend(_build_element(child, ctx) for child in root.children)
    return element


# ============================================================================
# Components
# ============================================================================

@dataclass
class GeneratedComponent:
    name: str
    code: str
    assets: List[AssetRef] = field(default_factory=list)
    classifications: Dict[str, VariantStyles] = field(default_factory=dict)


def _imports(uses_cva: bool) -> str:
    lines = ['import * as React from "react";']
    if uses_cva:
        lines.append('import { cva } from "class-variance-authority";')
    lines.append('import { cn } from "@/lib/utils";')
    return '\n'.join(lines)


def _function_signature(component_name: str, variant_props: Mapping[str, List[str]]) -> str:
    params = [
        f'{INDENT}{prop_identifier(p)} = {json.dumps(value_literal(values[0]))},'
        for p, values in variant_props.items() if values
    ]
    params += [f'{INDENT}className,', f'{INDENT}...props']
    return f'export function {component_name}({{\n' + '\n'.join(params) + f'\n}}: {component_name}Props) {{'


def render_component(
    root: ComponentStructureNode,
    variant_props: Optional[Mapping[str, List[str]]] = None,
    options: Optional[GeneratorOptions] = None,
    formatter: Optional[Formatter] = None,
) -> GeneratedComponent:
    """Emit the TSX module for an already-synthesized structure."""
    options = options or GeneratorOptions()
    if variant_props is None:
        variant_props = get_variant_props(root.styles)
    classifications = classify_structure(root, variant_props, options.active_fallbacks)
    cva_names = _cva_names(root, root.name, classifications)

    sections = [
        _imports(bool(cva_names)),
        generate_props_interface(root.name, variant_props),
    ]
    if cva_names:
        sections.append(generate_cva_definitions(root, root.name, variant_props, classifications))

    tree = build_render_tree(root, variant_props, classifications, cva_names)
    body = '\n'.join([
        _function_signature(root.name, variant_props),
        f'{INDENT}return (',
        render_jsx(tree, indent=2),
        f'{INDENT});',
        '}',
    ])
    sections.append(body)

    code = '\n\n'.join(sections) + '\n'
    code = (formatter or PassthroughFormatter()).format(code, 'typescript')
    assets = _unique_assets(node.asset for node in root.iter_nodes() if node.asset is not None)
    return GeneratedComponent(name=root.name, code=code, assets=assets, classifications=classifications)


def _unique_assets(assets) -> List[AssetRef]:
    seen: Dict[str, AssetRef] = {}
    for asset in assets:
        seen.setdefault(asset.path, asset)
    return list(seen.values())


def generate_variant_component(
    family: Any,
    tokens: Any = None,
    options: Optional[GeneratorOptions] = None,
    formatter: Optional[Formatter] = None,
) -> GeneratedComponent:
    """Component set -> TSX component with cva variants."""
    options = options or GeneratorOptions()
    root = analyze_component_structure(family, tokens, options=options)
    return render_component(root, options=options, formatter=formatter)


def generate_component(
    node: Any,
    tokens: Any = None,
    options: Optional[GeneratorOptions] = None,
    formatter: Optional[Formatter] = None,
) -> GeneratedComponent:
    """Plain node tree -> TSX component with static classes."""
    options = options or GeneratorOptions()
    root = analyze_node_structure(node, tokens, options=options)
    return render_component(root, variant_props={}, options=options, formatter=formatter)
