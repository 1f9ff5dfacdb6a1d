"""
Style-to-utility compiler.

Maps a StyleRecord to Tailwind utility classes. Every property handler tries,
first success wins:

1. the explicit style reference or bound variable, resolved against the
   token catalog by normalized name
2. the token matcher on the raw value
3. a fixed scale (spacing, font size, radius, ...) or a bracketed
   arbitrary value

Handlers are independent and may produce conflicting classes;
cleanup_tailwind_classes settles those afterwards.
"""

import logging
import math
import re
from typing import Any, Dict, List, Optional, Set, Tuple

from tailwind_codegen.colors import match_to_tailwind_color
from tailwind_codegen.models import (
    DesignTokenSet,
    StyleRecord,
    TokenType,
    format_number,
    format_px,
)
from tailwind_codegen.sanitizer import cleanup_tailwind_classes
from tailwind_codegen.tokens import find_matching_token

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Scales
# ---------------------------------------------------------------------------

SPACING_SCALE: Dict[float, str] = {
    0: '0', 1: 'px', 2: '0.5', 4: '1', 6: '1.5', 8: '2', 10: '2.5', 12: '3',
    14: '3.5', 16: '4', 20: '5', 24: '6', 28: '7', 32: '8', 36: '9', 40: '10',
    44: '11', 48: '12', 56: '14', 64: '16', 80: '20', 96: '24',
}

FONT_SIZE_SCALE: List[Tuple[float, str]] = [
    (12, 'xs'), (14, 'sm'), (16, 'base'), (18, 'lg'), (20, 'xl'), (24, '2xl'),
    (30, '3xl'), (36, '4xl'), (48, '5xl'), (60, '6xl'), (72, '7xl'), (96, '8xl'),
]
FONT_SIZE_TOLERANCE = 2

FONT_WEIGHTS: Dict[int, str] = {
    100: 'thin', 200: 'extralight', 300: 'light', 400: 'normal', 500: 'medium',
    600: 'semibold', 700: 'bold', 800: 'extrabold', 900: 'black',
}
DEFAULT_FONT_WEIGHT = 400

_NAMED_WEIGHTS: Dict[str, int] = {
    'thin': 100, 'hairline': 100, 'extralight': 200, 'ultralight': 200,
    'light': 300, 'regular': 400, 'normal': 400, 'book': 400, 'medium': 500,
    'semibold': 600, 'demibold': 600, 'bold': 700, 'extrabold': 800,
    'ultrabold': 800, 'heavy': 800, 'black': 900,
}

# Upper bound (px) -> rounded suffix; '' is the bare `rounded` class
RADIUS_TIERS: List[Tuple[float, str]] = [
    (2, 'sm'), (4, ''), (6, 'md'), (8, 'lg'), (12, 'xl'), (16, '2xl'), (24, '3xl'),
]

BORDER_WIDTHS: Dict[float, str] = {1: '', 2: '2', 4: '4', 8: '8'}

LINE_HEIGHT_RATIOS: Dict[float, str] = {
    1: 'none', 1.25: 'tight', 1.375: 'snug', 1.5: 'normal', 1.625: 'relaxed', 2: 'loose',
}
LINE_HEIGHT_PX: Dict[float, str] = {
    12: '3', 16: '4', 20: '5', 24: '6', 28: '7', 32: '8', 36: '9', 40: '10',
}

TRACKING_EM: Dict[float, str] = {
    -0.05: 'tighter', -0.025: 'tight', 0.025: 'wide', 0.05: 'wider', 0.1: 'widest',
}

BLEND_MODES = frozenset({
    'multiply', 'screen', 'overlay', 'darken', 'lighten', 'color-dodge',
    'color-burn', 'hard-light', 'soft-light', 'difference', 'exclusion',
    'hue', 'saturation', 'color', 'luminosity', 'plus-lighter',
})

DISPLAY_CLASSES: Dict[str, str] = {
    'flex': 'flex', 'inline-flex': 'inline-flex', 'grid': 'grid',
    'inline-grid': 'inline-grid', 'block': 'block', 'inline-block': 'inline-block',
    'inline': 'inline', 'none': 'hidden', 'contents': 'contents',
}

FLEX_DIRECTIONS: Dict[str, str] = {
    'row': 'flex-row', 'column': 'flex-col', 'col': 'flex-col',
    'row-reverse': 'flex-row-reverse', 'column-reverse': 'flex-col-reverse',
}

_JUSTIFY_VALUES = frozenset({'start', 'end', 'center', 'between', 'around', 'evenly', 'stretch', 'normal'})
_ALIGN_VALUES = frozenset({'start', 'end', 'center', 'baseline', 'stretch'})
_SELF_VALUES = frozenset({'auto', 'start', 'end', 'center', 'stretch', 'baseline'})

_BG_SIZES = frozenset({'cover', 'contain', 'auto'})
_BG_POSITIONS = frozenset({
    'center', 'top', 'bottom', 'left', 'right',
    'left-top', 'left-bottom', 'right-top', 'right-bottom',
})
_BG_REPEATS = frozenset({'repeat', 'no-repeat', 'repeat-x', 'repeat-y', 'repeat-round', 'repeat-space'})

_PX_RE = re.compile(r'^(-?\d+(?:\.\d+)?)(px)?$')
_SIDES = ('t', 'r', 'b', 'l')


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

def _px_value(value: Any) -> Optional[float]:
    """Numeric pixel value of '16px', '16' or 16, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _PX_RE.match(str(value).strip().lower())
    return float(match.group(1)) if match else None


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip().rstrip('%'))
    except ValueError:
        return None


def arbitrary(value: Any) -> str:
    """Bracketed arbitrary value; whitespace becomes underscores."""
    text = str(value).strip()
    text = re.sub(r'\s*,\s*', ',', text)
    return '[' + re.sub(r'\s+', '_', text) + ']'


def _is_zero(value: Optional[str]) -> bool:
    px = _px_value(value)
    return px is not None and px == 0


def spacing_suffix(value: str, tokens: DesignTokenSet) -> str:
    """Spacing scale step for a length: token, fixed px table, else arbitrary."""
    token = find_matching_token(value, TokenType.SPACING, tokens)
    if token:
        return token
    px = _px_value(value)
    if px is not None and px in SPACING_SCALE:
        return SPACING_SCALE[px]
    return arbitrary(value)


def expand_box_shorthand(value: str) -> Optional[Dict[str, str]]:
    """Expand 1-4 value CSS box shorthand into {'t','r','b','l'}."""
    parts = value.split()
    if len(parts) == 1:
        top = right = bottom = left = parts[0]
    elif len(parts) == 2:
        top, right = parts
        bottom, left = top, right
    elif len(parts) == 3:
        top, right, bottom = parts
        left = right
    elif len(parts) == 4:
        top, right, bottom, left = parts
    else:
        return None
    return dict(zip(_SIDES, (top, right, bottom, left)))


def _strip_flex_prefix(value: str) -> str:
    value = value.strip().lower().replace('_', '-')
    if value.startswith('flex-'):
        value = value[len('flex-'):]
    if value.startswith('space-'):
        value = value[len('space-'):]
    return value


def color_class(prefix: str, value: str, tokens: DesignTokenSet) -> str:
    """Color utility: token, palette quantization, else arbitrary value."""
    lowered = value.strip().lower()
    if lowered == 'transparent':
        return f'{prefix}-transparent'
    if lowered in ('currentcolor', 'current'):
        return f'{prefix}-current'
    if lowered == 'inherit':
        return f'{prefix}-inherit'
    token = find_matching_token(value, TokenType.COLORS, tokens)
    if token:
        return f'{prefix}-{token}'
    match = match_to_tailwind_color(value)
    if match is not None:
        return match.to_class(prefix)
    return f'{prefix}-{arbitrary(value)}'


def _is_text_color_token(token_name: str, record: StyleRecord) -> bool:
    if 'text' in token_name:
        return True
    return bool(record.color) and not record.background_color


# ---------------------------------------------------------------------------
# Tier 1: style references and bound variables
# ---------------------------------------------------------------------------

def _reference_classes(record: StyleRecord, tokens: DesignTokenSet, claimed: Set[str]) -> List[str]:
    refs = record.style_references
    classes: List[str] = []

    if refs.fill:
        if 'transparent' in refs.fill.lower():
            classes.append('bg-transparent')
            claimed.add('bg')
        else:
            token = tokens.lookup(TokenType.COLORS, refs.fill) or find_matching_token(
                refs.fill, TokenType.COLORS, tokens
            )
            if token and _is_text_color_token(token, record):
                classes.append(f'text-{token}')
                claimed.add('text-color')
            elif token:
                classes.append(f'bg-{token}')
                claimed.add('bg')
            else:
                logger.debug("Fill style %r not in token set", refs.fill)

    if refs.text:
        token = tokens.lookup(TokenType.TYPOGRAPHY, refs.text)
        if token:
            classes.extend([f'font-{token}', f'text-{token}', f'leading-{token}', f'tracking-{token}'])
            claimed.update({'font-size', 'font-weight', 'font-family', 'line-height', 'letter-spacing'})
        else:
            logger.debug("Text style %r not in token set", refs.text)

    if refs.effect:
        token = tokens.lookup(TokenType.EFFECTS, refs.effect)
        if token:
            classes.append(f'shadow-{token}')
            claimed.add('shadow')
        else:
            logger.debug("Effect style %r not in token set", refs.effect)

    if refs.stroke:
        token = tokens.lookup(TokenType.COLORS, refs.stroke)
        if token:
            classes.append(f'border-{token}')
            claimed.add('border-color')
        else:
            logger.debug("Stroke style %r not in token set", refs.stroke)

    return classes


# Figma boundVariables field -> (catalog, class prefix, claimed slot).
# A None prefix means the slot is inferred (background vs text color).
VARIABLE_SLOTS: Dict[str, Tuple[TokenType, Optional[str], str]] = {
    'fills': (TokenType.COLORS, None, 'fill'),
    'color': (TokenType.COLORS, 'text', 'text-color'),
    'textcolor': (TokenType.COLORS, 'text', 'text-color'),
    'backgroundcolor': (TokenType.COLORS, 'bg', 'bg'),
    'strokes': (TokenType.COLORS, 'border', 'border-color'),
    'itemspacing': (TokenType.SPACING, 'gap', 'gap'),
    'gap': (TokenType.SPACING, 'gap', 'gap'),
    'paddingtop': (TokenType.SPACING, 'pt', 'padding-t'),
    'paddingright': (TokenType.SPACING, 'pr', 'padding-r'),
    'paddingbottom': (TokenType.SPACING, 'pb', 'padding-b'),
    'paddingleft': (TokenType.SPACING, 'pl', 'padding-l'),
    'width': (TokenType.SPACING, 'w', 'width'),
    'height': (TokenType.SPACING, 'h', 'height'),
    'cornerradius': (TokenType.BORDER_RADIUS, 'rounded', 'radius'),
    'topleftradius': (TokenType.BORDER_RADIUS, 'rounded-tl', 'radius-tl'),
    'toprightradius': (TokenType.BORDER_RADIUS, 'rounded-tr', 'radius-tr'),
    'bottomrightradius': (TokenType.BORDER_RADIUS, 'rounded-br', 'radius-br'),
    'bottomleftradius': (TokenType.BORDER_RADIUS, 'rounded-bl', 'radius-bl'),
    'strokeweight': (TokenType.BORDER_WIDTH, 'border', 'border-width'),
    'effects': (TokenType.EFFECTS, 'shadow', 'shadow'),
}


def _resolve_variable(token_type: TokenType, names: Tuple[str, ...], tokens: DesignTokenSet) -> Optional[str]:
    for name in names:
        token = tokens.lookup(token_type, name) or find_matching_token(name, token_type, tokens)
        if token:
            return token
    return None


def _variable_classes(record: StyleRecord, tokens: DesignTokenSet, claimed: Set[str]) -> List[str]:
    classes: List[str] = []
    for field, variable_name in record.variable_references.items():
        slot = VARIABLE_SLOTS.get(field.replace('_', '').lower())
        candidates = (variable_name, field)

        if slot is not None:
            token_type, prefix, claim = slot
            token = _resolve_variable(token_type, candidates, tokens)
            if not token:
                logger.debug("Variable %r bound to %s not in token set", variable_name, field)
                continue
            if prefix is None:
                prefix, claim = ('text', 'text-color') if _is_text_color_token(token, record) else ('bg', 'bg')
            if claim in claimed:
                continue
            classes.append(f'{prefix}-{token}')
            claimed.add(claim)
            continue

        # Free-form binding: infer the slot from whichever catalog knows the name
        color = _resolve_variable(TokenType.COLORS, candidates, tokens)
        if color:
            is_text = _is_text_color_token(color, record)
            claim = 'text-color' if is_text else 'bg'
            if claim not in claimed:
                classes.append(f"{'text' if is_text else 'bg'}-{color}")
                claimed.add(claim)
            continue
        spacing = _resolve_variable(TokenType.SPACING, candidates, tokens)
        if spacing:
            if 'gap' not in claimed:
                classes.append(f'gap-{spacing}')
                claimed.add('gap')
            continue
        typography = _resolve_variable(TokenType.TYPOGRAPHY, candidates, tokens)
        if typography:
            classes.extend([
                f'font-{typography}', f'text-{typography}',
                f'leading-{typography}', f'tracking-{typography}',
            ])
            claimed.update({'font-size', 'font-weight', 'font-family', 'line-height', 'letter-spacing'})
            continue
        logger.debug("Variable %r (%s) not in token set", variable_name, field)
    return classes


# ---------------------------------------------------------------------------
# Tiers 2 and 3, per property family
# ---------------------------------------------------------------------------

def opacity_class(value: Any) -> Optional[str]:
    """Bucket opacity to a multiple of 10; fully opaque is a no-op."""
    number = _number(value)
    if number is None:
        return f'opacity-{arbitrary(value)}'
    percent = number if (isinstance(value, str) and value.strip().endswith('%')) or number > 1 else number * 100
    if percent <= 5:
        return 'opacity-0'
    if percent >= 95:
        return None
    bucket = int(math.ceil(percent / 10 - 0.5)) * 10
    return f'opacity-{min(max(bucket, 0), 100)}'


def _background_classes(record: StyleRecord, tokens: DesignTokenSet, claimed: Set[str]) -> List[str]:
    if 'bg' in claimed or not record.background_color:
        return []
    claimed.add('bg')
    return [color_class('bg', record.background_color, tokens)]


def _background_image_classes(record: StyleRecord) -> List[str]:
    if record.background_image_hash:
        classes = [f'bg-[image:var(--img-{record.background_image_hash})]']
    elif record.background_image_url:
        classes = [f"bg-[url('{record.background_image_url}')]"]
    else:
        return []

    size = (record.background_size or 'cover').strip().lower()
    classes.append(f'bg-{size}' if size in _BG_SIZES else f'bg-[length:{arbitrary(size)[1:-1]}]')

    if record.background_position:
        position = re.sub(r'\s+', '-', record.background_position.strip().lower())
        classes.append(
            f'bg-{position}' if position in _BG_POSITIONS
            else f'bg-[position:{arbitrary(record.background_position)[1:-1]}]'
        )

    repeat = (record.background_repeat or 'no-repeat').strip().lower()
    classes.append(f'bg-{repeat}' if repeat in _BG_REPEATS else f'[background-repeat:{repeat}]')
    return classes


def _layout_classes(record: StyleRecord, tokens: DesignTokenSet, claimed: Set[str]) -> List[str]:
    classes: List[str] = []

    if record.display:
        display = record.display.strip().lower()
        classes.append(DISPLAY_CLASSES.get(display, f'[display:{display}]'))

    position = (record.position or '').strip().lower()
    if (record.layout_positioning or '').upper() == 'ABSOLUTE':
        position = 'absolute'
    if position in ('relative', 'absolute', 'fixed', 'sticky'):
        classes.append(position)
    elif position and position != 'static':
        classes.append(f'[position:{position}]')

    for inset in ('top', 'right', 'bottom', 'left'):
        value = getattr(record, inset)
        if value is None:
            continue
        px = _px_value(value)
        if px is not None and px in SPACING_SCALE:
            classes.append(f'{inset}-{SPACING_SCALE[px]}')
        else:
            classes.append(f'{inset}-{arbitrary(value)}')

    if record.flex_direction:
        direction = record.flex_direction.strip().lower()
        classes.append(FLEX_DIRECTIONS.get(direction, f'[flex-direction:{direction}]'))

    if record.flex_wrap:
        wrap = record.flex_wrap.strip().lower()
        if wrap in ('wrap', 'wrap-reverse'):
            classes.append(f'flex-{wrap}')
        elif wrap not in ('nowrap', 'no-wrap', 'no_wrap'):
            classes.append(f'[flex-wrap:{wrap}]')

    if record.justify_content:
        value = _strip_flex_prefix(record.justify_content)
        classes.append(f'justify-{value}' if value in _JUSTIFY_VALUES else f'[justify-content:{value}]')
    if record.align_items:
        value = _strip_flex_prefix(record.align_items)
        classes.append(f'items-{value}' if value in _ALIGN_VALUES else f'[align-items:{value}]')
    if record.align_self:
        value = _strip_flex_prefix(record.align_self)
        classes.append(f'self-{value}' if value in _SELF_VALUES else f'[align-self:{value}]')

    if record.flex_grow is not None:
        grow = _number(record.flex_grow)
        if grow == 1:
            classes.append('grow')
        elif grow == 0:
            classes.append('grow-0')
        else:
            classes.append(f'grow-{arbitrary(format_number(grow) if grow is not None else record.flex_grow)}')

    if record.gap and 'gap' not in claimed and not _is_zero(record.gap):
        classes.append(f'gap-{spacing_suffix(record.gap, tokens)}')

    if record.overflow:
        overflow = record.overflow.strip().lower()
        if overflow in ('hidden', 'auto', 'scroll', 'clip'):
            classes.append(f'overflow-{overflow}')
        elif overflow != 'visible':
            classes.append(f'[overflow:{overflow}]')
    elif record.clips_content:
        classes.append('overflow-hidden')

    return classes


def _dimension_class(prefix: str, value: str, tokens: DesignTokenSet) -> str:
    lowered = value.strip().lower()
    if lowered == '100%':
        return f'{prefix}-full'
    if lowered in ('auto', 'fit-content', 'min-content', 'max-content'):
        return f"{prefix}-{lowered.replace('-content', '')}"
    token = find_matching_token(value, TokenType.SPACING, tokens)
    if token:
        return f'{prefix}-{token}'
    return f'{prefix}-{arbitrary(value)}'


def _size_classes(record: StyleRecord, tokens: DesignTokenSet, claimed: Set[str]) -> List[str]:
    classes: List[str] = []

    sizing = {
        'w': ((record.layout_sizing_horizontal or '').upper(), record.width, 'width'),
        'h': ((record.layout_sizing_vertical or '').upper(), record.height, 'height'),
    }
    for prefix, (mode, value, claim) in sizing.items():
        if claim in claimed:
            continue
        if mode == 'FILL':
            classes.append(f'{prefix}-full')
        elif mode == 'HUG':
            continue
        elif value:
            classes.append(_dimension_class(prefix, value, tokens))

    for prefix, value in (
        ('min-w', record.min_width), ('max-w', record.max_width),
        ('min-h', record.min_height), ('max-h', record.max_height),
    ):
        if value is None:
            continue
        classes.append(f'{prefix}-0' if _is_zero(value) else _dimension_class(prefix, value, tokens))

    if record.target_aspect_ratio is not None:
        ratio = _number(record.target_aspect_ratio)
        if ratio == 1:
            classes.append('aspect-square')
        elif ratio is not None:
            classes.append(f'aspect-[{format_number(ratio)}]')
        else:
            classes.append(f'aspect-{arbitrary(str(record.target_aspect_ratio).replace(" ", ""))}')

    return classes


def _box_classes(
    prefix: str,
    shorthand: Optional[str],
    sides: Dict[str, Optional[str]],
    tokens: DesignTokenSet,
    claimed: Set[str],
) -> List[str]:
    """Padding or margin: one unified class when all sides agree."""
    claim_prefix = 'padding' if prefix == 'p' else 'margin'
    if shorthand:
        token = find_matching_token(shorthand, TokenType.SPACING, tokens)
        if token and not any(f'{claim_prefix}-{s}' in claimed for s in _SIDES):
            return [f'{prefix}-{token}']
        values = expand_box_shorthand(shorthand)
        if values is None:
            return [f'[{claim_prefix}:{arbitrary(shorthand)[1:-1]}]']
    else:
        values = {side: value for side, value in sides.items() if value}
        if not values:
            return []

    values = {s: v for s, v in values.items() if f'{claim_prefix}-{s}' not in claimed}
    if len(values) == 4 and len(set(values.values())) == 1:
        value = values['t']
        return [] if _is_zero(value) else [f'{prefix}-{spacing_suffix(value, tokens)}']

    return [
        f'{prefix}{side}-{spacing_suffix(values[side], tokens)}'
        for side in _SIDES
        if side in values and not _is_zero(values[side])
    ]


def _spacing_classes(record: StyleRecord, tokens: DesignTokenSet, claimed: Set[str]) -> List[str]:
    padding = _box_classes(
        'p', record.padding,
        {'t': record.padding_top, 'r': record.padding_right, 'b': record.padding_bottom, 'l': record.padding_left},
        tokens, claimed,
    )
    margin = _box_classes(
        'm', record.margin,
        {'t': record.margin_top, 'r': record.margin_right, 'b': record.margin_bottom, 'l': record.margin_left},
        tokens, claimed,
    )
    return padding + margin


def font_size_class(value: str, tokens: DesignTokenSet) -> str:
    token = find_matching_token(value, TokenType.TYPOGRAPHY, tokens)
    if token:
        return f'text-{token}'
    px = _px_value(value)
    if px is not None:
        for size, name in FONT_SIZE_SCALE:
            if abs(px - size) <= FONT_SIZE_TOLERANCE:
                return f'text-{name}'
    return f'text-{arbitrary(value)}'


def font_weight_class(value: Any) -> Optional[str]:
    """Weight utility; the default weight is a no-op."""
    text = str(value).strip().lower()
    if text.isdigit():
        weight: Optional[int] = int(text)
    else:
        weight = _NAMED_WEIGHTS.get(re.sub(r'[\s_-]+', '', text))
    if weight == DEFAULT_FONT_WEIGHT:
        return None
    if weight in FONT_WEIGHTS:
        return f'font-{FONT_WEIGHTS[weight]}'
    return f'font-{arbitrary(value)}'


def _line_height_class(value: str) -> Optional[str]:
    text = value.strip().lower()
    if text in ('normal', 'auto'):
        return None
    if text.endswith('%'):
        ratio = _number(text)
        if ratio is not None and ratio / 100 in LINE_HEIGHT_RATIOS:
            return f'leading-{LINE_HEIGHT_RATIOS[ratio / 100]}'
        return f'leading-{arbitrary(text)}'
    if text.endswith('px'):
        px = _px_value(text)
        if px is not None and px in LINE_HEIGHT_PX:
            return f'leading-{LINE_HEIGHT_PX[px]}'
        return f'leading-{arbitrary(text)}'
    ratio = _number(text)
    if ratio is not None and ratio in LINE_HEIGHT_RATIOS:
        return f'leading-{LINE_HEIGHT_RATIOS[ratio]}'
    return f'leading-{arbitrary(text)}'


def _letter_spacing_class(value: str) -> Optional[str]:
    text = value.strip().lower()
    if text in ('normal', '0', '0px', '0%', '0em'):
        return None
    if text.endswith('%'):
        number = _number(text)
        if number is None:
            return f'tracking-{arbitrary(text)}'
        em = round(number / 100, 3)
        if em in TRACKING_EM:
            return f'tracking-{TRACKING_EM[em]}'
        return f'tracking-[{em:g}em]'
    if text.endswith('em') and not text.endswith('rem'):
        number = _number(text[:-2])
        if number is not None and number in TRACKING_EM:
            return f'tracking-{TRACKING_EM[number]}'
    return f'tracking-{arbitrary(text)}'


def _typography_classes(record: StyleRecord, tokens: DesignTokenSet, claimed: Set[str]) -> List[str]:
    classes: List[str] = []

    if record.color and 'text-color' not in claimed:
        classes.append(color_class('text', record.color, tokens))

    if record.font_family and 'font-family' not in claimed:
        classes.append(f'font-{arbitrary(record.font_family)}')

    if record.font_size and 'font-size' not in claimed:
        classes.append(font_size_class(record.font_size, tokens))

    if record.font_weight is not None and 'font-weight' not in claimed:
        weight = font_weight_class(record.font_weight)
        if weight:
            classes.append(weight)

    if record.font_style and record.font_style.strip().lower() == 'italic':
        classes.append('italic')

    if record.line_height and 'line-height' not in claimed:
        leading = _line_height_class(record.line_height)
        if leading:
            classes.append(leading)

    if record.letter_spacing and 'letter-spacing' not in claimed:
        tracking = _letter_spacing_class(record.letter_spacing)
        if tracking:
            classes.append(tracking)

    if record.text_align:
        align = record.text_align.strip().lower()
        align = {'justified': 'justify'}.get(align, align)
        if align in ('center', 'right', 'justify', 'end'):
            classes.append(f'text-{align}')
        elif align not in ('left', 'start'):
            classes.append(f'[text-align:{align}]')

    if record.text_case:
        case = record.text_case.strip().lower()
        mapped = {
            'upper': 'uppercase', 'uppercase': 'uppercase',
            'lower': 'lowercase', 'lowercase': 'lowercase',
            'title': 'capitalize', 'capitalize': 'capitalize',
        }.get(case)
        if mapped:
            classes.append(mapped)
        elif case not in ('original', 'none'):
            classes.append(f'[text-transform:{case}]')

    if record.text_decoration:
        decoration = record.text_decoration.strip().lower()
        if decoration == 'underline':
            classes.append('underline')
        elif decoration in ('strikethrough', 'line-through'):
            classes.append('line-through')
        elif decoration != 'none':
            classes.append(f'[text-decoration:{decoration}]')

    return classes


_BORDER_RE = re.compile(r'^\s*(\S+)\s+(solid|dashed|dotted|double|none)\s+(.+?)\s*$', re.IGNORECASE)


def _border_width_class(value: str, tokens: DesignTokenSet) -> Optional[str]:
    token = find_matching_token(value, TokenType.BORDER_WIDTH, tokens)
    if token:
        return f'border-{token}'
    px = _px_value(value)
    if px == 0:
        return None
    if px is not None and px in BORDER_WIDTHS:
        suffix = BORDER_WIDTHS[px]
        return f'border-{suffix}' if suffix else 'border'
    return f'border-{arbitrary(value)}'


def _border_classes(record: StyleRecord, tokens: DesignTokenSet, claimed: Set[str]) -> List[str]:
    width, style, color = record.border_width, record.border_style, record.border_color
    if record.border:
        match = _BORDER_RE.match(record.border)
        if match is None:
            return [f'[border:{arbitrary(record.border)[1:-1]}]']
        width = width or match.group(1)
        style = style or match.group(2)
        color = color or match.group(3)

    if width is not None and _is_zero(width):
        return []

    classes: List[str] = []
    if width and 'border-width' not in claimed:
        width_class = _border_width_class(width, tokens)
        if width_class:
            classes.append(width_class)
    if style:
        lowered = style.strip().lower()
        if lowered in ('dashed', 'dotted', 'double', 'none'):
            classes.append(f'border-{lowered}')
    if color and 'border-color' not in claimed:
        classes.append(color_class('border', color, tokens))
    return classes


def radius_suffix(px: float) -> Optional[str]:
    """Radius tier for a pixel value; None for zero (no-op)."""
    if px == 0:
        return None
    for limit, suffix in RADIUS_TIERS:
        if px <= limit:
            return suffix
    return 'full'


def _radius_class(prefix: str, value: str) -> Optional[str]:
    px = _px_value(value)
    if px is None:
        return f'{prefix}-{arbitrary(value)}'
    suffix = radius_suffix(px)
    if suffix is None:
        return None
    return f'{prefix}-{suffix}' if suffix else prefix


def _radius_classes(record: StyleRecord, tokens: DesignTokenSet, claimed: Set[str]) -> List[str]:
    if 'radius' in claimed:
        return []
    if record.border_radius:
        token = find_matching_token(record.border_radius, TokenType.BORDER_RADIUS, tokens)
        if token:
            return [f'rounded-{token}']
        corners = record.border_radius.split()
        if len(corners) in (2, 3, 4):
            expanded = expand_box_shorthand(record.border_radius) or {}
            # Box order t/r/b/l maps onto tl/tr/br/bl for radii
            corner_values = dict(zip(('tl', 'tr', 'br', 'bl'), (expanded[s] for s in _SIDES)))
        else:
            single = _radius_class('rounded', record.border_radius)
            return [single] if single else []
    else:
        corner_values = {
            'tl': record.top_left_radius, 'tr': record.top_right_radius,
            'br': record.bottom_right_radius, 'bl': record.bottom_left_radius,
        }
        corner_values = {k: v for k, v in corner_values.items() if v}
        if not corner_values:
            return []

    if len(corner_values) == 4 and len(set(corner_values.values())) == 1:
        single = _radius_class('rounded', corner_values['tl'])
        return [single] if single else []

    classes = []
    for corner, value in corner_values.items():
        if f'radius-{corner}' in claimed:
            continue
        corner_class = _radius_class(f'rounded-{corner}', value)
        if corner_class:
            classes.append(corner_class)
    return classes


def _shadow_css(effect) -> str:
    inset = 'inset ' if effect.type.upper() == 'INNER_SHADOW' else ''
    return (
        f'{inset}{format_px(effect.offset_x)} {format_px(effect.offset_y)} '
        f'{format_px(effect.radius)} {format_px(effect.spread)} {effect.color or "rgba(0, 0, 0, 0.25)"}'
    )


def _effect_classes(record: StyleRecord, tokens: DesignTokenSet, claimed: Set[str]) -> List[str]:
    classes: List[str] = []

    if record.opacity is not None:
        opacity = opacity_class(record.opacity)
        if opacity:
            classes.append(opacity)

    if 'shadow' not in claimed:
        if record.box_shadow:
            token = find_matching_token(record.box_shadow, TokenType.EFFECTS, tokens)
            classes.append(f'shadow-{token}' if token else f'shadow-{arbitrary(record.box_shadow)}')
        else:
            shadows = [
                _shadow_css(e) for e in record.effects
                if e.visible and e.type.upper() in ('DROP_SHADOW', 'INNER_SHADOW')
            ]
            if shadows:
                classes.append(f"shadow-{arbitrary(', '.join(shadows))}")

    for effect in record.effects:
        if not effect.visible:
            continue
        kind = effect.type.upper()
        if kind == 'LAYER_BLUR':
            classes.append(f'blur-[{format_px(effect.radius)}]')
        elif kind == 'BACKGROUND_BLUR':
            classes.append(f'backdrop-blur-[{format_px(effect.radius)}]')

    if record.blend_mode:
        mode = record.blend_mode.strip().lower().replace('_', '-')
        if mode in BLEND_MODES:
            classes.append(f'mix-blend-{mode}')
        elif mode not in ('normal', 'pass-through'):
            classes.append(f'[mix-blend-mode:{mode}]')

    return classes


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def styles_to_tailwind(styles: Any, tokens: Any = None) -> str:
    """
    Compile one style record into a space-separated utility class string.

    The output is not sanitized; conflicting classes may appear and are
    resolved by cleanup_tailwind_classes.
    """
    record = StyleRecord.coerce(styles)
    token_set = DesignTokenSet.coerce(tokens)
    claimed: Set[str] = set()

    classes: List[str] = []
    classes += _reference_classes(record, token_set, claimed)
    classes += _variable_classes(record, token_set, claimed)
    classes += _background_classes(record, token_set, claimed)
    classes += _background_image_classes(record)
    classes += _layout_classes(record, token_set, claimed)
    classes += _size_classes(record, token_set, claimed)
    classes += _spacing_classes(record, token_set, claimed)
    classes += _typography_classes(record, token_set, claimed)
    classes += _border_classes(record, token_set, claimed)
    classes += _radius_classes(record, token_set, claimed)
    classes += _effect_classes(record, token_set, claimed)
    return ' '.join(c for c in classes if c)


def get_tailwind_classes(styles: Any, tokens: Any = None) -> str:
    """Compiled and sanitized classes for one style record."""
    token_set = DesignTokenSet.coerce(tokens)
    return cleanup_tailwind_classes(styles_to_tailwind(styles, token_set), token_set)
