"""
Extraction from Figma REST payloads.

Reads `GET /v1/files/:key` (or `/nodes`) JSON and the optional
`GET /v1/files/:key/variables/local` JSON through a SceneReader, and produces
the StyleRecord / SceneNode / DesignTokenSet snapshots the engine consumes.
The engine never talks to a reader directly.
"""

import logging
import re
from typing import Any, Dict, Iterator, List, Optional, Protocol

from tailwind_codegen.colors import color_to_rgb
from tailwind_codegen.models import DesignTokenSet, SceneNode, StyleRecord

logger = logging.getLogger(__name__)

MAX_ALIAS_HOPS = 10

_PRIMARY_AXIS_ALIGN = {
    'MIN': 'flex-start',
    'CENTER': 'center',
    'MAX': 'flex-end',
    'SPACE_BETWEEN': 'space-between',
}

_COUNTER_AXIS_ALIGN = {
    'MIN': 'flex-start',
    'CENTER': 'center',
    'MAX': 'flex-end',
    'BASELINE': 'baseline',
}

_SCALE_MODES = {
    'FILL': ('cover', 'no-repeat'),
    'FIT': ('contain', 'no-repeat'),
    'CROP': ('cover', 'no-repeat'),
    'TILE': ('auto', 'repeat'),
}

_BLEND_MODES = {
    'DARKEN': 'darken',
    'MULTIPLY': 'multiply',
    'LINEAR_BURN': 'color-burn',
    'COLOR_BURN': 'color-burn',
    'LIGHTEN': 'lighten',
    'SCREEN': 'screen',
    'LINEAR_DODGE': 'color-dodge',
    'COLOR_DODGE': 'color-dodge',
    'OVERLAY': 'overlay',
    'SOFT_LIGHT': 'soft-light',
    'HARD_LIGHT': 'hard-light',
    'DIFFERENCE': 'difference',
    'EXCLUSION': 'exclusion',
    'HUE': 'hue',
    'SATURATION': 'saturation',
    'COLOR': 'color',
    'LUMINOSITY': 'luminosity',
}

# Keys of a node's `styles` map -> StyleReferences field
_STYLE_KEYS = {
    'fill': 'fill',
    'fills': 'fill',
    'text': 'text',
    'effect': 'effect',
    'stroke': 'stroke',
    'strokes': 'stroke',
    'grid': 'grid',
}


# ============================================================================
# Scene reader
# ============================================================================

class SceneReader(Protocol):
    """Read-only access to a design file."""

    def get_style(self, style_id: str) -> Optional[Dict[str, Any]]:
        """Style metadata ({'name', 'styleType'}) or None."""
        ...

    def get_variable(self, variable_id: str) -> Optional[Dict[str, Any]]:
        """Variable as {'id', 'name', 'resolvedType', 'value'} with aliases resolved, or None."""
        ...

    def get_component(self, component_id: str) -> Optional[Dict[str, Any]]:
        """Main component metadata ({'name', 'componentSetId'}) or None."""
        ...

    def iter_nodes(self) -> Iterator[Dict[str, Any]]:
        """Every node of the file, pre-order."""
        ...

    def iter_variables(self) -> Iterator[Dict[str, Any]]:
        """Every local variable, shaped like get_variable."""
        ...


class FigmaFileReader:
    """SceneReader over Figma REST responses."""

    def __init__(self, file_json: Dict[str, Any], variables_json: Optional[Dict[str, Any]] = None):
        self._roots: List[Dict[str, Any]] = []
        self._styles: Dict[str, Dict[str, Any]] = dict(file_json.get('styles') or {})
        self._components: Dict[str, Dict[str, Any]] = dict(file_json.get('components') or {})
        self._component_sets: Dict[str, Dict[str, Any]] = dict(file_json.get('componentSets') or {})

        if 'document' in file_json:
            self._roots.append(file_json['document'])
        # /files/:key/nodes wraps each requested node with its own style maps
        for entry in (file_json.get('nodes') or {}).values():
            if not entry:
                continue
            self._roots.append(entry.get('document') or {})
            self._styles.update(entry.get('styles') or {})
            self._components.update(entry.get('components') or {})
            self._component_sets.update(entry.get('componentSets') or {})

        meta = (variables_json or {}).get('meta') or {}
        self._variables: Dict[str, Dict[str, Any]] = dict(meta.get('variables') or {})
        self._collections: Dict[str, Dict[str, Any]] = dict(meta.get('variableCollections') or {})

    def get_style(self, style_id: str) -> Optional[Dict[str, Any]]:
        return self._styles.get(style_id)

    def get_component(self, component_id: str) -> Optional[Dict[str, Any]]:
        component = self._components.get(component_id)
        if component is None:
            return None
        component_set = self._component_sets.get(component.get('componentSetId') or '')
        if component_set:
            return {**component, 'name': component_set.get('name', component.get('name'))}
        return component

    def _variable_name(self, variable: Dict[str, Any]) -> str:
        collection = self._collections.get(variable.get('variableCollectionId') or '', {})
        name = variable.get('name', '')
        if collection.get('name'):
            return f"{collection['name']}/{name}"
        return name

    def _default_value(self, variable: Dict[str, Any]) -> Any:
        collection = self._collections.get(variable.get('variableCollectionId') or '', {})
        values = variable.get('valuesByMode') or {}
        mode = collection.get('defaultModeId')
        if mode in values:
            return values[mode]
        return next(iter(values.values()), None)

    def get_variable(self, variable_id: str) -> Optional[Dict[str, Any]]:
        variable = self._variables.get(variable_id)
        if variable is None:
            return None

        value = self._default_value(variable)
        hops = 0
        while isinstance(value, dict) and value.get('type') == 'VARIABLE_ALIAS' and hops < MAX_ALIAS_HOPS:
            target = self._variables.get(value.get('id') or '')
            if target is None:
                logger.debug("Alias of %s points at unknown variable %s", variable_id, value.get('id'))
                value = None
                break
            value = self._default_value(target)
            hops += 1

        return {
            'id': variable_id,
            'name': self._variable_name(variable),
            'resolvedType': variable.get('resolvedType'),
            'value': value,
        }

    def iter_nodes(self) -> Iterator[Dict[str, Any]]:
        stack = list(reversed(self._roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.get('children') or []))

    def iter_variables(self) -> Iterator[Dict[str, Any]]:
        for variable_id, variable in self._variables.items():
            if variable.get('remote'):
                continue
            resolved = self.get_variable(variable_id)
            if resolved is not None:
                yield resolved


# ============================================================================
# Style records
# ============================================================================

def _first_visible(paints: Optional[List[Dict[str, Any]]], *types: str) -> Optional[Dict[str, Any]]:
    for paint in paints or []:
        if not paint.get('visible', True):
            continue
        if not types or paint.get('type') in types:
            return paint
    return None


def _paint_color(paint: Dict[str, Any]) -> str:
    return color_to_rgb(paint.get('color', {}), paint.get('opacity', 1))


def _line_height(style: Dict[str, Any]) -> Optional[str]:
    unit = style.get('lineHeightUnit', 'PIXELS')
    if unit == 'INTRINSIC_%':
        return None
    if unit == 'FONT_SIZE_%' and style.get('lineHeightPercentFontSize') is not None:
        return f"{style['lineHeightPercentFontSize']:g}%"
    if style.get('lineHeightPx') is not None:
        return f"{style['lineHeightPx']:g}px"
    return None


def _fill_fields(node: Dict[str, Any], data: Dict[str, Any]) -> None:
    fills = node.get('fills') or []
    solid = _first_visible(fills, 'SOLID')
    if solid is not None:
        key = 'color' if node.get('type') == 'TEXT' else 'backgroundColor'
        data[key] = _paint_color(solid)

    image = _first_visible(fills, 'IMAGE')
    if image is not None and image.get('imageRef') and node.get('type') != 'TEXT':
        size, repeat = _SCALE_MODES.get(image.get('scaleMode', 'FILL'), ('cover', 'no-repeat'))
        data['backgroundImageHash'] = image['imageRef']
        data['backgroundSize'] = size
        data['backgroundRepeat'] = repeat

    if _first_visible(fills) is not None and solid is None and image is None:
        logger.debug("Node %s has only gradient fills; not mapped", node.get('id'))


def _stroke_fields(node: Dict[str, Any], data: Dict[str, Any]) -> None:
    stroke = _first_visible(node.get('strokes'), 'SOLID')
    if stroke is None:
        return
    data['borderColor'] = _paint_color(stroke)
    data['borderWidth'] = node.get('strokeWeight', 1)
    data['borderStyle'] = 'dashed' if node.get('strokeDashes') else 'solid'


def _corner_fields(node: Dict[str, Any], data: Dict[str, Any]) -> None:
    radii = node.get('rectangleCornerRadii')
    if radii and len(radii) == 4 and len(set(radii)) > 1:
        for field, value in zip(('topLeftRadius', 'topRightRadius', 'bottomRightRadius', 'bottomLeftRadius'), radii):
            data[field] = value
    elif radii:
        data['borderRadius'] = radii[0]
    elif node.get('cornerRadius'):
        data['borderRadius'] = node['cornerRadius']


def _effect_fields(node: Dict[str, Any], data: Dict[str, Any]) -> None:
    effects = []
    for effect in node.get('effects') or []:
        offset = effect.get('offset') or {}
        color = effect.get('color')
        effects.append({
            'type': effect.get('type', ''),
            'visible': effect.get('visible', True),
            'radius': effect.get('radius', 0),
            'spread': effect.get('spread', 0),
            'offsetX': offset.get('x', 0),
            'offsetY': offset.get('y', 0),
            'color': color_to_rgb(color) if color else None,
        })
    if effects:
        data['effects'] = effects


def _layout_fields(node: Dict[str, Any], data: Dict[str, Any]) -> None:
    mode = node.get('layoutMode')
    if mode in ('HORIZONTAL', 'VERTICAL'):
        data['display'] = 'flex'
        data['flexDirection'] = 'row' if mode == 'HORIZONTAL' else 'column'
        for side in ('Top', 'Right', 'Bottom', 'Left'):
            if node.get(f'padding{side}'):
                data[f'padding{side}'] = node[f'padding{side}']
        if node.get('itemSpacing'):
            data['gap'] = node['itemSpacing']
        primary = _PRIMARY_AXIS_ALIGN.get(node.get('primaryAxisAlignItems', 'MIN'))
        if primary and primary != 'flex-start':
            data['justifyContent'] = primary
        counter = _COUNTER_AXIS_ALIGN.get(node.get('counterAxisAlignItems', 'MIN'))
        if counter and counter != 'flex-start':
            data['alignItems'] = counter
        if node.get('layoutWrap') == 'WRAP':
            data['flexWrap'] = 'wrap'

    if node.get('layoutPositioning') == 'ABSOLUTE':
        data['layoutPositioning'] = 'ABSOLUTE'
    if node.get('layoutGrow') == 1:
        data['flexGrow'] = 1
    if node.get('layoutAlign') == 'STRETCH':
        data['alignSelf'] = 'stretch'
    if node.get('clipsContent'):
        data['clipsContent'] = True

    for field in ('minWidth', 'maxWidth', 'minHeight', 'maxHeight'):
        if node.get(field) is not None:
            data[field] = node[field]


def _size_fields(node: Dict[str, Any], data: Dict[str, Any]) -> None:
    box = node.get('absoluteBoundingBox') or {}
    if box.get('width') is not None:
        data['width'] = box['width']
    if box.get('height') is not None:
        data['height'] = box['height']
    if node.get('layoutSizingHorizontal'):
        data['layoutSizingHorizontal'] = node['layoutSizingHorizontal']
    if node.get('layoutSizingVertical'):
        data['layoutSizingVertical'] = node['layoutSizingVertical']
    if node.get('targetAspectRatio'):
        ratio = node['targetAspectRatio']
        if isinstance(ratio, dict) and ratio.get('y'):
            data['targetAspectRatio'] = round(ratio['x'] / ratio['y'], 4)


def _text_fields(node: Dict[str, Any], data: Dict[str, Any]) -> None:
    if node.get('type') != 'TEXT':
        return
    style = node.get('style') or {}
    if style.get('fontFamily'):
        data['fontFamily'] = style['fontFamily']
    if style.get('fontSize') is not None:
        data['fontSize'] = style['fontSize']
    if style.get('fontWeight') is not None:
        data['fontWeight'] = int(style['fontWeight'])
    if style.get('italic'):
        data['fontStyle'] = 'italic'
    line_height = _line_height(style)
    if line_height:
        data['lineHeight'] = line_height
    if style.get('letterSpacing'):
        data['letterSpacing'] = style['letterSpacing']
    if style.get('textAlignHorizontal'):
        data['textAlign'] = style['textAlignHorizontal'].lower()
    if style.get('textCase'):
        data['textCase'] = style['textCase']
    if style.get('textDecoration'):
        data['textDecoration'] = style['textDecoration']


def _reference_fields(node: Dict[str, Any], reader: Optional[SceneReader], data: Dict[str, Any]) -> None:
    if reader is None:
        return

    references: Dict[str, str] = {}
    for key, style_id in (node.get('styles') or {}).items():
        field = _STYLE_KEYS.get(key.lower())
        if field is None:
            continue
        style = reader.get_style(style_id)
        if style is None or not style.get('name'):
            logger.debug("Style %s of node %s not found", style_id, node.get('id'))
            continue
        references[field] = style['name']
    if references:
        data['styleReferences'] = references

    variables: Dict[str, str] = {}
    for prop, binding in (node.get('boundVariables') or {}).items():
        if isinstance(binding, list):
            binding = next((b for b in binding if isinstance(b, dict)), None)
        if not isinstance(binding, dict) or not binding.get('id'):
            continue
        variable = reader.get_variable(binding['id'])
        if variable is None:
            logger.debug("Variable %s bound to %s.%s not found", binding['id'], node.get('id'), prop)
            continue
        variables[prop] = variable['name']
    if variables:
        data['variableReferences'] = variables


def extract_style_record(node: Dict[str, Any], reader: Optional[SceneReader] = None) -> StyleRecord:
    """Flatten one REST node's visual properties into a StyleRecord."""
    data: Dict[str, Any] = {}
    _size_fields(node, data)
    _layout_fields(node, data)
    _fill_fields(node, data)
    _stroke_fields(node, data)
    _corner_fields(node, data)
    _effect_fields(node, data)
    _text_fields(node, data)
    _reference_fields(node, reader, data)

    opacity = node.get('opacity')
    if opacity is not None and opacity < 1:
        data['opacity'] = opacity
    blend = _BLEND_MODES.get(node.get('blendMode', ''))
    if blend:
        data['blendMode'] = blend

    return StyleRecord.model_validate(data)


# ============================================================================
# Scene nodes
# ============================================================================

def parse_variant_name(name: str) -> Dict[str, str]:
    """'Size=Large, State=Hover' -> {'Size': 'Large', 'State': 'Hover'}."""
    properties: Dict[str, str] = {}
    for part in name.split(','):
        key, sep, value = part.partition('=')
        if sep and key.strip() and value.strip():
            properties[key.strip()] = value.strip()
    return properties


def _component_properties(node: Dict[str, Any]) -> Dict[str, Any]:
    properties = {}
    for name, prop in (node.get('componentProperties') or {}).items():
        if not isinstance(prop, dict) or prop.get('type') == 'INSTANCE_SWAP':
            continue
        properties[name] = prop.get('value')
    return properties


def to_scene_node(
    node: Dict[str, Any],
    reader: Optional[SceneReader] = None,
    max_depth: int = 25,
    _depth: int = 0,
) -> SceneNode:
    """Snapshot a REST node subtree for the structure synthesizer."""
    node_type = node.get('type', 'FRAME')
    component_name = None
    if node_type == 'INSTANCE' and reader is not None and node.get('componentId'):
        component = reader.get_component(node['componentId'])
        if component is not None:
            component_name = component.get('name')

    variant_properties = parse_variant_name(node.get('name', '')) if node_type == 'COMPONENT' else {}

    children = []
    if _depth < max_depth:
        children = [
            to_scene_node(child, reader, max_depth, _depth + 1)
            for child in node.get('children') or []
        ]

    return SceneNode(
        id=node.get('id', ''),
        name=node.get('name', ''),
        type=node_type,
        visible=node.get('visible', True),
        style=extract_style_record(node, reader),
        characters=node.get('characters'),
        has_image_fill=_first_visible(node.get('fills'), 'IMAGE') is not None,
        component_name=component_name,
        variant_properties=variant_properties,
        component_properties=_component_properties(node),
        children=children,
    )


# ============================================================================
# Design tokens
# ============================================================================

def _typography_token(style: Dict[str, Any]) -> Dict[str, Any]:
    token: Dict[str, Any] = {
        'fontFamily': style.get('fontFamily'),
        'fontSize': style.get('fontSize'),
        'fontWeight': style.get('fontWeight'),
        'lineHeight': _line_height(style),
    }
    if style.get('letterSpacing') is not None:
        token['letterSpacing'] = style['letterSpacing']
    return token


def _shadow_token(effect: Dict[str, Any]) -> Dict[str, Any]:
    offset = effect.get('offset') or {}
    return {
        'offsetX': offset.get('x', 0),
        'offsetY': offset.get('y', 0),
        'blur': effect.get('radius', 0),
        'spread': effect.get('spread', 0),
        'color': color_to_rgb(effect.get('color') or {'r': 0, 'g': 0, 'b': 0, 'a': 0.25}),
    }


def _number_catalog(name: str) -> str:
    lowered = name.lower()
    if 'radius' in lowered:
        return 'borderRadius'
    if re.search(r'width|stroke|border', lowered):
        return 'borderWidth'
    return 'spacing'


def _style_tokens(node: Dict[str, Any], reader: SceneReader, catalogs: Dict[str, Dict[str, Any]], seen: set) -> None:
    for key, style_id in (node.get('styles') or {}).items():
        field = _STYLE_KEYS.get(key.lower())
        if field is None or style_id in seen:
            continue
        style = reader.get_style(style_id)
        if style is None or not style.get('name'):
            continue
        name = style['name']
        kind = (style.get('styleType') or field).upper()

        if kind in ('FILL', 'STROKE'):
            paints = node.get('fills') if field == 'fill' else node.get('strokes')
            paint = _first_visible(paints, 'SOLID')
            if paint is None:
                continue
            catalogs['colors'].setdefault(name, _paint_color(paint))
        elif kind == 'TEXT':
            catalogs['typography'].setdefault(name, _typography_token(node.get('style') or {}))
        elif kind == 'EFFECT':
            effect = _first_visible(node.get('effects'), 'DROP_SHADOW', 'INNER_SHADOW')
            if effect is None:
                continue
            catalogs['effects'].setdefault(name, _shadow_token(effect))
        else:
            continue
        seen.add(style_id)


def extract_design_tokens(reader: SceneReader) -> DesignTokenSet:
    """
    Token catalogs from shared styles (read off the nodes that use them) and
    local variables.

    Color variables become colors. Float variables are sorted by name:
    anything mentioning radius is a border radius, width/stroke/border a
    border width, everything else spacing. Variable tokens are named
    'Collection/name'.
    """
    catalogs: Dict[str, Dict[str, Any]] = {
        'colors': {},
        'typography': {},
        'spacing': {},
        'effects': {},
        'borderRadius': {},
        'borderWidth': {},
    }

    seen: set = set()
    for node in reader.iter_nodes():
        _style_tokens(node, reader, catalogs, seen)

    for variable in reader.iter_variables():
        name, value = variable.get('name'), variable.get('value')
        if not name or value is None:
            continue
        kind = variable.get('resolvedType')
        if kind == 'COLOR' and isinstance(value, dict):
            catalogs['colors'].setdefault(name, color_to_rgb(value))
        elif kind == 'FLOAT' and isinstance(value, (int, float)):
            catalogs[_number_catalog(name)].setdefault(name, value)

    return DesignTokenSet.model_validate(catalogs)


def find_node(reader: SceneReader, node_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """Node by id ('1:2' or '1-2'); the first root when no id is given."""
    wanted = node_id.replace('-', ':') if node_id else None
    for node in reader.iter_nodes():
        if wanted is None or node.get('id') == wanted:
            return node
    return None

