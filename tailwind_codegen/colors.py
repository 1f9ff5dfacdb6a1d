"""
Color parsing and palette quantization.

Parses hex and rgb()/rgba() strings into 0-255 channels and snaps them to the
nearest named Tailwind palette entry when it is close enough to be readable.
"""

import math
import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------

# Maximum Euclidean RGB distance for snapping to a palette entry
COLOR_MATCH_THRESHOLD = 30.0

TAILWIND_COLORS: Dict[str, Dict[int, Tuple[int, int, int]]] = {
    'slate': {
        50: (248, 250, 252), 100: (241, 245, 249), 200: (226, 232, 240),
        300: (203, 213, 225), 400: (148, 163, 184), 500: (100, 116, 139),
        600: (71, 85, 105), 700: (51, 65, 85), 800: (30, 41, 59),
        900: (15, 23, 42), 950: (2, 6, 23),
    },
    'gray': {
        50: (249, 250, 251), 100: (243, 244, 246), 200: (229, 231, 235),
        300: (209, 213, 219), 400: (156, 163, 175), 500: (107, 114, 128),
        600: (75, 85, 99), 700: (55, 65, 81), 800: (31, 41, 55),
        900: (17, 24, 39), 950: (3, 7, 18),
    },
    'red': {
        50: (254, 242, 242), 100: (254, 226, 226), 200: (254, 202, 202),
        300: (252, 165, 165), 400: (248, 113, 113), 500: (239, 68, 68),
        600: (220, 38, 38), 700: (185, 28, 28), 800: (153, 27, 27),
        900: (127, 29, 29), 950: (69, 10, 10),
    },
    'orange': {
        50: (255, 247, 237), 100: (255, 237, 213), 200: (254, 215, 170),
        300: (253, 186, 116), 400: (251, 146, 60), 500: (249, 115, 22),
        600: (234, 88, 12), 700: (194, 65, 12), 800: (154, 52, 18),
        900: (124, 45, 18), 950: (67, 20, 7),
    },
    'yellow': {
        50: (254, 252, 232), 100: (254, 249, 195), 200: (254, 240, 138),
        300: (253, 224, 71), 400: (250, 204, 21), 500: (234, 179, 8),
        600: (202, 138, 4), 700: (161, 98, 7), 800: (133, 77, 14),
        900: (113, 63, 18), 950: (66, 32, 6),
    },
    'green': {
        50: (240, 253, 244), 100: (220, 252, 231), 200: (187, 247, 208),
        300: (134, 239, 172), 400: (74, 222, 128), 500: (34, 197, 94),
        600: (22, 163, 74), 700: (21, 128, 61), 800: (22, 101, 52),
        900: (20, 83, 45), 950: (5, 46, 22),
    },
    'teal': {
        50: (240, 253, 250), 100: (204, 251, 241), 200: (153, 246, 228),
        300: (94, 234, 212), 400: (45, 212, 191), 500: (20, 184, 166),
        600: (13, 148, 136), 700: (15, 118, 110), 800: (17, 94, 89),
        900: (19, 78, 74), 950: (4, 47, 46),
    },
    'blue': {
        50: (239, 246, 255), 100: (219, 234, 254), 200: (191, 219, 254),
        300: (147, 197, 253), 400: (96, 165, 250), 500: (59, 130, 246),
        600: (37, 99, 235), 700: (29, 78, 216), 800: (30, 64, 175),
        900: (30, 58, 138), 950: (23, 37, 84),
    },
    'indigo': {
        50: (238, 242, 255), 100: (224, 231, 255), 200: (199, 210, 254),
        300: (165, 180, 252), 400: (129, 140, 248), 500: (99, 102, 241),
        600: (79, 70, 229), 700: (67, 56, 202), 800: (55, 48, 163),
        900: (49, 46, 129), 950: (30, 27, 75),
    },
    'purple': {
        50: (250, 245, 255), 100: (243, 232, 255), 200: (233, 213, 255),
        300: (216, 180, 254), 400: (192, 132, 252), 500: (168, 85, 247),
        600: (147, 51, 234), 700: (126, 34, 206), 800: (107, 33, 168),
        900: (88, 28, 135), 950: (59, 7, 100),
    },
    'pink': {
        50: (253, 242, 248), 100: (252, 231, 243), 200: (251, 207, 232),
        300: (249, 168, 212), 400: (244, 114, 182), 500: (236, 72, 153),
        600: (219, 39, 119), 700: (190, 24, 93), 800: (157, 23, 77),
        900: (131, 24, 67), 950: (80, 7, 36),
    },
}

_SPECIAL_COLORS: Dict[str, Tuple[int, int, int]] = {
    'black': (0, 0, 0),
    'white': (255, 255, 255),
}

_HEX_RE = re.compile(r'^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$')
_RGB_RE = re.compile(r'^rgba?\(\s*([^)]*)\)$')


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

RGBA = Tuple[int, int, int, float]


def _parse_channel(raw: str) -> float:
    raw = raw.strip()
    if raw.endswith('%'):
        return float(raw[:-1]) * 255 / 100
    return float(raw)


def _parse_alpha(raw: str) -> float:
    raw = raw.strip()
    if raw.endswith('%'):
        return float(raw[:-1]) / 100
    return float(raw)


def parse_color(value: Optional[str]) -> Optional[RGBA]:
    """Parse a hex or rgb()/rgba() string into (r, g, b, a), or None if unparseable."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip().lower()
    if text == 'transparent':
        return (0, 0, 0, 0.0)

    hex_match = _HEX_RE.match(text)
    if hex_match:
        digits = hex_match.group(1)
        if len(digits) in (3, 4):
            digits = ''.join(ch * 2 for ch in digits)
        r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
        a = round(int(digits[6:8], 16) / 255, 3) if len(digits) == 8 else 1.0
        return (r, g, b, a)

    rgb_match = _RGB_RE.match(text)
    if rgb_match:
        parts = [p for p in re.split(r'[\s,/]+', rgb_match.group(1)) if p]
        if len(parts) not in (3, 4):
            return None
        try:
            r, g, b = (int(round(_parse_channel(p))) for p in parts[:3])
            a = _parse_alpha(parts[3]) if len(parts) == 4 else 1.0
        except ValueError:
            return None
        if not all(0 <= c <= 255 for c in (r, g, b)) or not 0 <= a <= 1:
            return None
        return (r, g, b, round(a, 3))

    return None


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Format 0-255 channels as a lowercase #rrggbb string."""
    return f'#{r:02x}{g:02x}{b:02x}'


def color_to_rgb(color: Dict[str, float], opacity: float = 1.0) -> str:
    """Convert a Figma 0..1 color dict to an rgb()/rgba() string."""
    r = round(color.get('r', 0) * 255)
    g = round(color.get('g', 0) * 255)
    b = round(color.get('b', 0) * 255)
    a = round(color.get('a', 1) * opacity, 2)
    if a < 1:
        return f'rgba({r}, {g}, {b}, {a})'
    return f'rgb({r}, {g}, {b})'


def colors_equal(left: Optional[str], right: Optional[str]) -> bool:
    """True when both strings parse and normalize to the same RGBA value."""
    parsed_left = parse_color(left)
    return parsed_left is not None and parsed_left == parse_color(right)


# ---------------------------------------------------------------------------
# Quantization
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ColorMatch:
    """Nearest palette entry for a color, with alpha surfaced as a percentage."""
    name: str
    shade: Optional[int] = None
    opacity: Optional[int] = None
    distance: float = 0.0

    @property
    def token(self) -> str:
        return self.name if self.shade is None else f'{self.name}-{self.shade}'

    def to_class(self, prefix: str) -> str:
        suffix = f'/{self.opacity}' if self.opacity is not None else ''
        return f'{prefix}-{self.token}{suffix}'


def _distance(a: Tuple[int, int, int], b: Tuple[int, int, int]) -> float:
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


def match_to_tailwind_color(value: Optional[str]) -> Optional[ColorMatch]:
    """Snap a color string to the closest palette entry within COLOR_MATCH_THRESHOLD."""
    parsed = parse_color(value)
    if parsed is None:
        return None
    r, g, b, a = parsed
    rgb = (r, g, b)
    opacity = int(round(a * 100)) if a < 1 else None

    for name, reference in _SPECIAL_COLORS.items():
        dist = _distance(rgb, reference)
        if dist < COLOR_MATCH_THRESHOLD:
            return ColorMatch(name=name, opacity=opacity, distance=dist)

    best: Optional[ColorMatch] = None
    for name, shades in TAILWIND_COLORS.items():
        for shade, reference in shades.items():
            dist = _distance(rgb, reference)
            if best is None or dist < best.distance:
                best = ColorMatch(name=name, shade=shade, opacity=opacity, distance=dist)

    if best is not None and best.distance < COLOR_MATCH_THRESHOLD:
        return best
    return None


def palette_names() -> frozenset:
    """Every class suffix the palette can produce, e.g. 'red-500' and 'white'."""
    names = {f'{hue}-{shade}' for hue, shades in TAILWIND_COLORS.items() for shade in shades}
    names.update(_SPECIAL_COLORS)
    names.update({'transparent', 'current', 'inherit'})
    return frozenset(names)
