"""
Naming helpers shared by the compiler, the synthesizer and the emitter.

Converts design-tool names (style names, layer names, variant values) into
token names, JS identifiers, component names and TS literal values.
"""

import re
from typing import Optional

JS_RESERVED_WORDS = frozenset({
    'break', 'case', 'catch', 'class', 'const', 'continue', 'debugger', 'default',
    'delete', 'do', 'else', 'export', 'extends', 'finally', 'for', 'function',
    'if', 'import', 'in', 'instanceof', 'new', 'return', 'super', 'switch',
    'this', 'throw', 'try', 'typeof', 'var', 'void', 'while', 'with', 'yield',
    'let', 'static', 'enum', 'await', 'implements', 'package', 'protected',
    'interface', 'private', 'public', 'null', 'true', 'false',
})

_GENERIC_LAYER_NAME = re.compile(
    r'^(frame|group|rectangle|ellipse|vector|text|instance|component)\s*\d*$',
    re.IGNORECASE,
)


def style_name_to_variable(name: Optional[str]) -> str:
    """Normalize a style or token name to lowercase hyphen-separated form."""
    if not name:
        return ''
    value = name.lower()
    value = re.sub(r'\s+', '-', value)
    value = re.sub(r'[^a-z0-9-]', '-', value)
    value = re.sub(r'-+', '-', value)
    return value.strip('-')


def sanitize_identifier(name: Optional[str]) -> str:
    """Turn an arbitrary string into a valid JS identifier."""
    value = re.sub(r'[^a-zA-Z0-9_$]', '', (name or '').replace('-', '_').replace(' ', '_'))
    value = re.sub(r'_+', '_', value).strip('_')
    if not value:
        return 'element'
    if value[0].isdigit():
        value = f'_{value}'
    if value in JS_RESERVED_WORDS:
        value = f'{value}_'
    return value


def to_camel_case(name: str) -> str:
    """Convert 'Primary Button / Label' to 'primaryButtonLabel'."""
    parts = [p for p in re.split(r'[^a-zA-Z0-9]+', name) if p]
    if not parts:
        return ''
    head, *tail = parts
    return head[0].lower() + head[1:] + ''.join(p[0].upper() + p[1:] for p in tail)


def generate_component_name(name: Optional[str]) -> str:
    """PascalCase component name, prefixed when it would start with a digit."""
    parts = [p for p in re.split(r'[^a-zA-Z0-9]+', name or '') if p]
    value = ''.join(p[0].upper() + p[1:] for p in parts)
    if not value:
        return 'Component'
    if value[0].isdigit():
        value = 'Component' + value
    return value


def generate_semantic_name(name: Optional[str], node_type: str = '', parent_name: Optional[str] = None) -> str:
    """Pick a readable identifier for a layer, avoiding generic tool names like 'Frame 12'."""
    raw = (name or '').strip()
    if raw and not _GENERIC_LAYER_NAME.match(raw):
        return sanitize_identifier(to_camel_case(raw) or raw)

    kind = {
        'TEXT': 'label',
        'VECTOR': 'icon',
        'ELLIPSE': 'shape',
        'RECTANGLE': 'box',
        'INSTANCE': 'instance',
    }.get(node_type, 'container')
    if parent_name:
        return sanitize_identifier(to_camel_case(f'{parent_name} {kind}'))
    return kind


def prop_identifier(prop_name: str) -> str:
    """Variant property name as used for props and cva keys."""
    return sanitize_identifier(to_camel_case(prop_name) or prop_name.lower())


def value_literal(value: str) -> str:
    """Variant value as used inside TS string-literal unions and cva maps."""
    value = re.sub(r'[^a-z0-9]+', '-', value.strip().lower()).strip('-')
    return value or 'default'
