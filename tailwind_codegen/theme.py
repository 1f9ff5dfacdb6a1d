"""
Theme outputs: a CSS custom-property block and a Tailwind theme config that
points every token at its custom property.
"""

import json
from typing import Any, Dict, List

from tailwind_codegen.models import DesignTokenSet
from tailwind_codegen.names import style_name_to_variable

# TypographyToken field -> CSS variable suffix / Tailwind theme key
_TYPOGRAPHY_FIELDS = (
    ('font_family', 'fontFamily'),
    ('font_size', 'fontSize'),
    ('font_weight', 'fontWeight'),
    ('line_height', 'lineHeight'),
    ('letter_spacing', 'letterSpacing'),
)


def tokens_to_css(tokens: Any) -> str:
    """`:root { --color-...; --typography-...; ... }` for every token."""
    tokens = DesignTokenSet.coerce(tokens)
    lines: List[str] = [':root {']

    for name, token in tokens.colors.items():
        lines.append(f'  --color-{style_name_to_variable(name)}: {token.value};')

    for name, token in tokens.typography.items():
        base = style_name_to_variable(name)
        for field, suffix in _TYPOGRAPHY_FIELDS:
            value = getattr(token, field)
            if value is not None:
                lines.append(f'  --typography-{base}-{suffix}: {value};')

    for name, token in tokens.spacing.items():
        lines.append(f'  --spacing-{style_name_to_variable(name)}: {token.value};')

    for name, token in tokens.effects.items():
        lines.append(f'  --effect-{style_name_to_variable(name)}: {token.css};')

    for name, token in tokens.border_radius.items():
        lines.append(f'  --radius-{style_name_to_variable(name)}: {token.value};')

    for name, token in tokens.border_width.items():
        lines.append(f'  --border-width-{style_name_to_variable(name)}: {token.value};')

    lines.append('}')
    return '\n'.join(lines) + '\n'


def build_tailwind_theme(tokens: Any) -> Dict[str, Any]:
    """The `theme.extend` mapping as plain data."""
    tokens = DesignTokenSet.coerce(tokens)
    extend: Dict[str, Dict[str, str]] = {
        'colors': {},
        'fontFamily': {},
        'fontSize': {},
        'fontWeight': {},
        'lineHeight': {},
        'letterSpacing': {},
        'boxShadow': {},
        'borderRadius': {},
        'borderWidth': {},
        'spacing': {},
    }

    for name in tokens.colors:
        key = style_name_to_variable(name)
        extend['colors'][key] = f'var(--color-{key})'

    for name, token in tokens.typography.items():
        key = style_name_to_variable(name)
        for field, theme_key in _TYPOGRAPHY_FIELDS:
            if getattr(token, field) is not None:
                extend[theme_key][key] = f'var(--typography-{key}-{theme_key})'

    for name in tokens.spacing:
        key = style_name_to_variable(name)
        extend['spacing'][key] = f'var(--spacing-{key})'

    for name in tokens.effects:
        key = style_name_to_variable(name)
        extend['boxShadow'][key] = f'var(--effect-{key})'

    for name in tokens.border_radius:
        key = style_name_to_variable(name)
        extend['borderRadius'][key] = f'var(--radius-{key})'

    for name in tokens.border_width:
        key = style_name_to_variable(name)
        extend['borderWidth'][key] = f'var(--border-width-{key})'

    return {'theme': {'extend': extend}}


def tokens_to_tailwind(tokens: Any) -> str:
    """Tailwind config module source: `module.exports = {...}`."""
    return f'module.exports = {json.dumps(build_tailwind_theme(tokens), indent=2)};\n'
