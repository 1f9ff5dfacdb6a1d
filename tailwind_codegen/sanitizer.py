"""
Class sanitizer.

Removes exact duplicates, then keeps at most one class per exclusivity group
(the last one emitted wins). Background-image classes are layers rather than
replacements and are always kept, first.
"""

import re
from typing import Dict, FrozenSet, List, Optional, Tuple

from tailwind_codegen.colors import palette_names
from tailwind_codegen.models import DesignTokenSet, TokenType

BACKGROUND_IMAGE_GROUP = 'bg-image'

_PALETTE = palette_names()

_DISPLAY = frozenset({
    'block', 'inline-block', 'inline', 'flex', 'inline-flex', 'grid', 'inline-grid',
    'hidden', 'contents', 'table', 'flow-root', 'list-item',
})
_POSITION = frozenset({'static', 'fixed', 'absolute', 'relative', 'sticky'})
_FLEX_DIRECTION = frozenset({'flex-row', 'flex-col', 'flex-row-reverse', 'flex-col-reverse'})
_FLEX_WRAP = frozenset({'flex-wrap', 'flex-nowrap', 'flex-wrap-reverse'})
_TEXT_ALIGN = frozenset({'left', 'center', 'right', 'justify', 'start', 'end'})
_TEXT_SIZES = frozenset({'xs', 'sm', 'base', 'lg', 'xl', '2xl', '3xl', '4xl', '5xl', '6xl', '7xl', '8xl', '9xl'})
_FONT_WEIGHTS = frozenset({
    'thin', 'extralight', 'light', 'normal', 'medium', 'semibold', 'bold', 'extrabold', 'black',
})
_FONT_FAMILIES = frozenset({'sans', 'serif', 'mono'})
_BG_SIZE = frozenset({'cover', 'contain', 'auto'})
_BG_POSITION = frozenset({
    'center', 'top', 'bottom', 'left', 'right',
    'left-top', 'left-bottom', 'right-top', 'right-bottom',
})
_BG_REPEAT = frozenset({'repeat', 'no-repeat', 'repeat-x', 'repeat-y', 'repeat-round', 'repeat-space'})
_BORDER_STYLE = frozenset({'solid', 'dashed', 'dotted', 'double', 'none', 'hidden'})
_OVERFLOW = frozenset({'hidden', 'visible', 'auto', 'scroll', 'clip'})

_LENGTH_ARBITRARY = re.compile(r'^\[(length:)?-?[\d.]+(px|rem|em|%|vh|vw)?\]$')
_COLOR_ARBITRARY = re.compile(r'^\[(color:|#|rgb|hsl)')
_BOX_SPACING = re.compile(r'^(p|m)([xytrblse]?)-')
_ROUNDED_CORNER = re.compile(r'^rounded-(tl|tr|br|bl|ss|se|ee|es|t|r|b|l|s|e)(-|$)')
_BORDER_SIDE_WIDTH = re.compile(r'^border-([xytrblse])(-(\d+|\[[^\]]*\]))?$')
_BORDER_WIDTH = re.compile(r'^border(-(0|2|4|8|\[(length:)?-?[\d.]+(px|rem|em)?\]))?$')

_TEXT_TRANSFORM = frozenset({'uppercase', 'lowercase', 'capitalize', 'normal-case'})
_TEXT_DECORATION = frozenset({'underline', 'overline', 'line-through', 'no-underline'})
_FONT_STYLE = frozenset({'italic', 'not-italic'})


def _split_variant(cls: str) -> Tuple[str, str]:
    """Split 'hover:bg-red-500' into ('hover:', 'bg-red-500'); brackets are opaque."""
    depth = 0
    split_at = -1
    for index, char in enumerate(cls):
        if char == '[':
            depth += 1
        elif char == ']':
            depth -= 1
        elif char == ':' and depth == 0:
            split_at = index
    if split_at < 0:
        return '', cls
    return cls[:split_at + 1], cls[split_at + 1:]


def _strip_modifier(rest: str) -> str:
    """Drop an opacity modifier such as '/50' or '/[0.3]'."""
    if rest.startswith('['):
        return rest
    return rest.split('/', 1)[0]


class _TokenNames:
    """Normalized token names used to classify token-derived classes."""

    def __init__(self, tokens: Optional[DesignTokenSet]):
        if tokens is None:
            self.colors: FrozenSet[str] = frozenset()
            self.typography: FrozenSet[str] = frozenset()
            self.border_width: FrozenSet[str] = frozenset()
        else:
            self.colors = frozenset(tokens.names(TokenType.COLORS))
            self.typography = frozenset(tokens.names(TokenType.TYPOGRAPHY))
            self.border_width = frozenset(tokens.names(TokenType.BORDER_WIDTH))

    def is_color(self, rest: str) -> bool:
        rest = _strip_modifier(rest)
        return rest in _PALETTE or rest in self.colors or bool(_COLOR_ARBITRARY.match(rest))


def _background_group(rest: str) -> str:
    if rest.startswith(('[image:', '[url(', 'gradient-', 'linear-', 'radial-')) or rest == 'none':
        return BACKGROUND_IMAGE_GROUP
    if rest in _BG_SIZE or rest.startswith('[length:'):
        return 'bg-size'
    if rest in _BG_POSITION or rest.startswith('[position:'):
        return 'bg-position'
    if rest in _BG_REPEAT:
        return 'bg-repeat'
    if rest in ('fixed', 'local', 'scroll'):
        return 'bg-attachment'
    if rest.startswith(('clip-', 'origin-', 'blend-')):
        return 'bg-' + rest.split('-', 1)[0]
    return 'bg-color'


def _text_group(rest: str, names: _TokenNames) -> Optional[str]:
    if rest in _TEXT_ALIGN:
        return 'text-align'
    if rest in _TEXT_SIZES or _LENGTH_ARBITRARY.match(rest) or rest in names.typography:
        return 'font-size'
    if names.is_color(rest):
        return 'text-color'
    if rest in ('ellipsis', 'clip'):
        return 'text-overflow'
    if rest in ('wrap', 'nowrap', 'balance', 'pretty'):
        return 'text-wrap'
    return None


def _font_group(rest: str, names: _TokenNames) -> Optional[str]:
    if rest in _FONT_WEIGHTS or re.match(r'^\[\d+\]$', rest):
        return 'font-weight'
    if rest in _FONT_FAMILIES or rest.startswith('[') or rest in names.typography:
        return 'font-family'
    return None


def _border_group(base: str, names: _TokenNames) -> Optional[str]:
    if _BORDER_WIDTH.match(base):
        return 'border-width'
    side = _BORDER_SIDE_WIDTH.match(base)
    if side:
        return f'border-width-{side.group(1)}'
    rest = base[len('border-'):]
    if rest in _BORDER_STYLE:
        return 'border-style'
    if rest in names.border_width:
        return 'border-width'
    if rest in ('collapse', 'separate') or rest.startswith('spacing-'):
        return None
    return 'border-color'


def class_group(cls: str, tokens: Optional[DesignTokenSet] = None, names: Optional[_TokenNames] = None) -> Optional[str]:
    """Exclusivity group of a class, or None when it conflicts with nothing."""
    names = names or _TokenNames(tokens)
    variant, base = _split_variant(cls)
    base = base.lstrip('!')
    if base.startswith('-'):
        base = base[1:]

    group: Optional[str] = None
    if base.startswith('bg-'):
        group = _background_group(base[3:])
    elif base.startswith('text-'):
        group = _text_group(base[5:], names)
    elif base.startswith('font-'):
        group = _font_group(base[5:], names)
    elif base.startswith('leading-'):
        group = 'line-height'
    elif base.startswith('tracking-'):
        group = 'letter-spacing'
    elif base.startswith(('min-w-', 'max-w-', 'min-h-', 'max-h-')):
        group = base[:5]
    elif base.startswith('w-'):
        group = 'width'
    elif base.startswith('h-'):
        group = 'height'
    elif _BOX_SPACING.match(base):
        match = _BOX_SPACING.match(base)
        kind = 'padding' if match.group(1) == 'p' else 'margin'
        group = f'{kind}-{match.group(2)}' if match.group(2) else kind
    elif base in _DISPLAY:
        group = 'display'
    elif base in _POSITION:
        group = 'position'
    elif base in _FLEX_DIRECTION:
        group = 'flex-direction'
    elif base in _FLEX_WRAP:
        group = 'flex-wrap'
    elif base == 'grow' or base.startswith('grow-'):
        group = 'flex-grow'
    elif base.startswith(('justify-items-', 'justify-self-')):
        group = base.rsplit('-', 1)[0]
    elif base.startswith('justify-'):
        group = 'justify-content'
    elif base.startswith('items-'):
        group = 'align-items'
    elif base.startswith('self-'):
        group = 'align-self'
    elif base.startswith('content-'):
        group = 'align-content'
    elif base == 'rounded' or base.startswith('rounded-'):
        corner = _ROUNDED_CORNER.match(base)
        group = f'rounded-{corner.group(1)}' if corner else 'rounded'
    elif base == 'border' or base.startswith('border-'):
        group = _border_group(base, names)
    elif base.startswith('overflow-'):
        rest = base[len('overflow-'):]
        if rest in _OVERFLOW:
            group = 'overflow'
        elif rest.startswith(('x-', 'y-')):
            group = f'overflow-{rest[0]}'
    elif base.startswith(('gap-x-', 'gap-y-')):
        group = base[:5]
    elif base.startswith('gap-'):
        group = 'gap'
    elif base.startswith('opacity-'):
        group = 'opacity'
    elif base == 'shadow' or base.startswith('shadow-'):
        group = 'shadow'
    elif base.startswith(('top-', 'right-', 'bottom-', 'left-', 'inset-')):
        group = base.split('-', 1)[0]
    elif base.startswith('mix-blend-'):
        group = 'mix-blend'
    elif base.startswith('backdrop-blur'):
        group = 'backdrop-blur'
    elif base == 'blur' or base.startswith('blur-'):
        group = 'blur'
    elif base.startswith('aspect-'):
        group = 'aspect'
    elif base in _TEXT_TRANSFORM:
        group = 'text-transform'
    elif base in _TEXT_DECORATION:
        group = 'text-decoration'
    elif base in _FONT_STYLE:
        group = 'font-style'
    elif base.startswith('[') and ':' in base:
        group = base[1:base.index(':')]

    if group is None:
        return None
    return f'{variant}{group}'


def cleanup_tailwind_classes(class_string: Optional[str], tokens: Optional[DesignTokenSet] = None) -> str:
    """
    Deduplicate and resolve conflicts in a utility class string.

    Output order: background-image classes, then one class per exclusivity
    group, then ungrouped classes, each bucket in original relative order.
    Passing the token set lets token-derived classes such as `text-heading`
    be placed in the right group; without it they are left ungrouped.
    """
    if not class_string:
        return ''

    seen = set()
    ordered: List[str] = []
    for cls in class_string.split():
        if cls not in seen:
            seen.add(cls)
            ordered.append(cls)

    names = _TokenNames(tokens)
    images: List[str] = []
    winners: Dict[str, Tuple[int, str]] = {}
    ungrouped: List[str] = []
    for index, cls in enumerate(ordered):
        group = class_group(cls, names=names)
        if group is None:
            ungrouped.append(cls)
        elif group.rsplit(':', 1)[-1] == BACKGROUND_IMAGE_GROUP:
            images.append(cls)
        else:
            winners[group] = (index, cls)

    representatives = [cls for _, cls in sorted(winners.values())]
    return ' '.join(images + representatives + ungrouped)
