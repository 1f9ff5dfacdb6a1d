"""
Component-structure synthesizer.

Pass 1 walks every variant of a component family and accumulates, per
structural path (node_0, node_0_1, ...), the element kind, the sanitized
classes, text content, asset and component references seen in each variant.
Pass 2 links the paths into a tree: a node's parent is its path minus the
last segment.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from tailwind_codegen.config import GeneratorOptions
from tailwind_codegen.models import DesignTokenSet, SceneNode
from tailwind_codegen.names import generate_component_name, generate_semantic_name, style_name_to_variable
from tailwind_codegen.tailwind import get_tailwind_classes
from tailwind_codegen.variants import VariantKey

logger = logging.getLogger(__name__)

ROOT_ID = 'root'
PATH_PREFIX = 'node'

VECTOR_TYPES = frozenset({'VECTOR', 'STAR', 'ELLIPSE', 'BOOLEAN_OPERATION', 'REGULAR_POLYGON', 'LINE'})
LONG_TEXT_LENGTH = 100


class ElementKind(str, Enum):
    CONTAINER = "container"
    TEXT = "text"
    IMAGE = "image"
    COMPONENT = "component"


@dataclass(frozen=True)
class AssetRef:
    """Name and format of an exported asset; bytes are handled elsewhere."""
    name: str
    format: str
    node_id: str
    path: str


@dataclass
class ComponentStructureNode:
    id: str
    name: str
    kind: ElementKind
    tag: str
    layer_name: str = ''
    parent_id: Optional[str] = None
    present: Dict[VariantKey, bool] = field(default_factory=dict)
    styles: Dict[VariantKey, str] = field(default_factory=dict)
    content: Dict[VariantKey, str] = field(default_factory=dict)
    asset: Optional[AssetRef] = None
    component_name: Optional[str] = None
    component_props: Dict[VariantKey, Dict[str, Union[bool, str]]] = field(default_factory=dict)
    children: List['ComponentStructureNode'] = field(default_factory=list)

    def iter_nodes(self) -> Iterator['ComponentStructureNode']:
        """Pre-order traversal including self."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    @property
    def variant_keys(self) -> List[VariantKey]:
        return list(self.styles)


@dataclass
class _PathInfo:
    """Per-path accumulator filled during pass 1."""
    kind: ElementKind
    tag: str
    node_type: str
    layer_name: str
    parent_layer_name: Optional[str]
    present: Dict[VariantKey, bool] = field(default_factory=dict)
    styles: Dict[VariantKey, str] = field(default_factory=dict)
    content: Dict[VariantKey, str] = field(default_factory=dict)
    asset: Optional[AssetRef] = None
    component_name: Optional[str] = None
    component_props: Dict[VariantKey, Dict[str, Union[bool, str]]] = field(default_factory=dict)


# ============================================================================
# Node classification
# ============================================================================

def is_image_node(node: SceneNode) -> bool:
    if node.has_image_fill or node.type in VECTOR_TYPES:
        return True
    return node.type == 'RECTANGLE' and 'image' in node.name.lower()


def asset_for(node: SceneNode, asset_dir: str = 'assets') -> AssetRef:
    """Asset metadata: svg for vector shapes, png for raster image fills."""
    fmt = 'svg' if node.type in VECTOR_TYPES and not node.has_image_fill else 'png'
    name = style_name_to_variable(node.name) or f"image-{style_name_to_variable(node.id) or 'asset'}"
    return AssetRef(name=name, format=fmt, node_id=node.id, path=f'{asset_dir}/{name}.{fmt}')


def text_tag(node: SceneNode, classes: str) -> str:
    """h4 for headings, p for long or multi-line copy, span otherwise."""
    class_set = set(classes.split())
    if 'heading' in node.name.lower() or class_set & {'text-2xl', 'text-3xl'}:
        return 'h4'
    text = node.characters or ''
    if len(text) > LONG_TEXT_LENGTH or '\n' in text:
        return 'p'
    return 'span'


def instance_name(node: SceneNode) -> str:
    """Referenced component name: the part before the first comma."""
    source = node.component_name or node.name
    return generate_component_name(source.split(',')[0].strip())


def _classify(node: SceneNode, classes: str) -> Tuple[ElementKind, str]:
    if node.type == 'INSTANCE':
        return ElementKind.COMPONENT, instance_name(node)
    if node.type == 'TEXT':
        return ElementKind.TEXT, text_tag(node, classes)
    if is_image_node(node):
        return ElementKind.IMAGE, 'img'
    return ElementKind.CONTAINER, 'div'


# ============================================================================
# Pass 1
# ============================================================================

def _collect(
    children: List[SceneNode],
    key: VariantKey,
    infos: Dict[str, _PathInfo],
    tokens: DesignTokenSet,
    options: GeneratorOptions,
    parent_path: str,
    parent_name: Optional[str],
    depth: int,
) -> None:
    for index, child in enumerate(children):
        path = f'{parent_path}_{index}'
        # Hidden layers keep their index so paths line up across variants
        if not child.visible:
            continue

        classes = get_tailwind_classes(child.style, tokens)
        kind, tag = _classify(child, classes)
        info = infos.get(path)
        if info is None:
            info = _PathInfo(
                kind=kind,
                tag=tag,
                node_type=child.type,
                layer_name=child.name,
                parent_layer_name=parent_name,
            )
            infos[path] = info
        elif info.kind != kind:
            logger.debug("Path %s is %s in %s but %s earlier; keeping %s", path, kind.value, key, info.kind.value, info.kind.value)

        info.present[key] = True
        info.styles[key] = classes

        if info.kind == ElementKind.TEXT:
            info.content[key] = child.characters or ''
        elif info.kind == ElementKind.IMAGE:
            if info.asset is None:
                info.asset = asset_for(child, options.asset_dir)
            continue
        elif info.kind == ElementKind.COMPONENT:
            info.component_name = info.component_name or tag
            info.component_props[key] = dict(child.component_properties)
            # Instances are opaque references
            continue

        if child.children and depth < options.max_depth:
            _collect(child.children, key, infos, tokens, options, path, child.name, depth + 1)


# ============================================================================
# Pass 2
# ============================================================================

def _path_order(path: str) -> Tuple[int, ...]:
    return tuple(int(segment) for segment in path.split('_')[1:])


def _link(root: ComponentStructureNode, infos: Dict[str, _PathInfo]) -> ComponentStructureNode:
    nodes: Dict[str, ComponentStructureNode] = {}
    for path in sorted(infos, key=_path_order):
        info = infos[path]
        node = ComponentStructureNode(
            id=path,
            name=generate_semantic_name(info.layer_name, info.node_type, info.parent_layer_name),
            kind=info.kind,
            tag=info.tag,
            layer_name=info.layer_name,
            present=dict(info.present),
            styles=dict(info.styles),
            content=dict(info.content),
            asset=info.asset,
            component_name=info.component_name,
            component_props={k: dict(v) for k, v in info.component_props.items()},
        )
        nodes[path] = node

        parent_path = path.rsplit('_', 1)[0]
        parent = nodes.get(parent_path)
        if parent is None:
            if parent_path != PATH_PREFIX:
                logger.debug("No parent for %s; attaching to root", path)
            parent = root
        node.parent_id = parent.id
        parent.children.append(node)
    return root


# ============================================================================
# Public API
# ============================================================================

def _variant_key(component: SceneNode, variant_props: Optional[Mapping[str, Any]]) -> VariantKey:
    if component.variant_properties:
        key = VariantKey.from_properties(component.variant_properties)
    else:
        key = VariantKey.parse(component.name.replace(',', ':'))
    if variant_props:
        key = VariantKey(tuple((p, key.get(p)) for p in variant_props if key.get(p) is not None))
    return key


def _synthesize(
    name: str,
    variants: List[Tuple[VariantKey, SceneNode]],
    tokens: DesignTokenSet,
    options: GeneratorOptions,
) -> ComponentStructureNode:
    root = ComponentStructureNode(
        id=ROOT_ID,
        name=generate_component_name(name),
        kind=ElementKind.CONTAINER,
        tag='div',
        layer_name=name,
    )
    infos: Dict[str, _PathInfo] = {}
    for key, component in variants:
        root.present[key] = True
        root.styles[key] = get_tailwind_classes(component.style, tokens)
        _collect(component.children, key, infos, tokens, options, PATH_PREFIX, component.name, 1)
    return _link(root, infos)


def analyze_component_structure(
    family: Any,
    tokens: Any = None,
    variant_props: Optional[Mapping[str, Any]] = None,
    options: Optional[GeneratorOptions] = None,
) -> ComponentStructureNode:
    """
    Build the unified structure tree of a component set.

    Each COMPONENT child of the family is one variant. When `variant_props`
    is given, variant keys are restricted to (and ordered by) those
    properties.
    """
    family = family if isinstance(family, SceneNode) else SceneNode.model_validate(family)
    token_set = DesignTokenSet.coerce(tokens)
    options = options or GeneratorOptions()

    variants = [
        (_variant_key(child, variant_props), child)
        for child in family.children
        if child.type == 'COMPONENT' or child.variant_properties
    ]
    return _synthesize(family.name, variants, token_set, options)


def analyze_node_structure(
    node: Any,
    tokens: Any = None,
    options: Optional[GeneratorOptions] = None,
) -> ComponentStructureNode:
    """Structure tree of a plain node, treated as a family of one unnamed variant."""
    node = node if isinstance(node, SceneNode) else SceneNode.model_validate(node)
    return _synthesize(node.name, [(VariantKey(), node)], DesignTokenSet.coerce(tokens), options or GeneratorOptions())
