"""
Input records consumed by the translation engine.

StyleRecord is the flat, all-optional snapshot of one node's visual properties
for one variant. DesignTokenSet holds the named token catalogs built once per
run. SceneNode is the plain tree snapshot the structure synthesizer walks.
All three are immutable once built.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from tailwind_codegen.names import style_name_to_variable


def format_number(value: float) -> str:
    """Render 16.0 as '16' and 0.333333 as '0.33'."""
    if float(value).is_integer():
        return str(int(value))
    return f'{value:.2f}'.rstrip('0').rstrip('.')


def format_px(value: float) -> str:
    return f'{format_number(value)}px'


_RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra='ignore',
)


# ============================================================================
# Style records
# ============================================================================

class StyleReferences(BaseModel):
    """Named shared-style pointers attached to a node."""
    model_config = _RECORD_CONFIG

    fill: Optional[str] = None
    text: Optional[str] = None
    effect: Optional[str] = None
    stroke: Optional[str] = None
    grid: Optional[str] = None


class EffectSpec(BaseModel):
    """A single shadow or blur effect."""
    model_config = _RECORD_CONFIG

    type: str
    visible: bool = True
    radius: float = 0
    spread: float = 0
    offset_x: float = 0
    offset_y: float = 0
    color: Optional[str] = None


_PIXEL_FIELDS = (
    'width', 'height', 'min_width', 'max_width', 'min_height', 'max_height',
    'top', 'right', 'bottom', 'left', 'gap', 'padding', 'padding_top',
    'padding_right', 'padding_bottom', 'padding_left', 'margin', 'margin_top',
    'margin_right', 'margin_bottom', 'margin_left', 'font_size', 'line_height',
    'letter_spacing', 'border_radius', 'top_left_radius', 'top_right_radius',
    'bottom_right_radius', 'bottom_left_radius', 'border_width',
)


class StyleRecord(BaseModel):
    """
    Semantic style properties of one node in one variant.

    Every field is optional. Dimensions are CSS strings ('16px', '100%');
    bare numbers are read as pixels. Field names accept both snake_case and
    the camelCase keys produced by the extraction stage.
    """
    model_config = _RECORD_CONFIG

    # Dimensions
    width: Optional[str] = None
    height: Optional[str] = None
    min_width: Optional[str] = None
    max_width: Optional[str] = None
    min_height: Optional[str] = None
    max_height: Optional[str] = None
    target_aspect_ratio: Optional[Union[float, str]] = None

    # Positioning
    display: Optional[str] = None
    position: Optional[str] = None
    top: Optional[str] = None
    right: Optional[str] = None
    bottom: Optional[str] = None
    left: Optional[str] = None
    layout_positioning: Optional[str] = None
    layout_sizing_horizontal: Optional[str] = None
    layout_sizing_vertical: Optional[str] = None

    # Flex layout
    flex_direction: Optional[str] = None
    flex_wrap: Optional[str] = None
    justify_content: Optional[str] = None
    align_items: Optional[str] = None
    align_self: Optional[str] = None
    flex_grow: Optional[Union[float, str]] = None
    gap: Optional[str] = None
    overflow: Optional[str] = None
    clips_content: Optional[bool] = None

    # Spacing
    padding: Optional[str] = None
    padding_top: Optional[str] = None
    padding_right: Optional[str] = None
    padding_bottom: Optional[str] = None
    padding_left: Optional[str] = None
    margin: Optional[str] = None
    margin_top: Optional[str] = None
    margin_right: Optional[str] = None
    margin_bottom: Optional[str] = None
    margin_left: Optional[str] = None

    # Typography
    color: Optional[str] = None
    font_family: Optional[str] = None
    font_size: Optional[str] = None
    font_weight: Optional[Union[int, str]] = None
    font_style: Optional[str] = None
    line_height: Optional[str] = None
    letter_spacing: Optional[str] = None
    text_align: Optional[str] = None
    text_case: Optional[str] = None
    text_decoration: Optional[str] = None

    # Background
    background_color: Optional[str] = None
    background_image_hash: Optional[str] = None
    background_image_url: Optional[str] = None
    background_size: Optional[str] = None
    background_position: Optional[str] = None
    background_repeat: Optional[str] = None

    # Border
    border_radius: Optional[str] = None
    top_left_radius: Optional[str] = None
    top_right_radius: Optional[str] = None
    bottom_right_radius: Optional[str] = None
    bottom_left_radius: Optional[str] = None
    border: Optional[str] = None
    border_width: Optional[str] = None
    border_color: Optional[str] = None
    border_style: Optional[str] = None

    # Effects
    opacity: Optional[Union[float, str]] = None
    box_shadow: Optional[str] = None
    effects: List[EffectSpec] = Field(default_factory=list)
    blend_mode: Optional[str] = None

    # References to shared styles and bound variables
    style_references: StyleReferences = Field(default_factory=StyleReferences)
    variable_references: Dict[str, str] = Field(default_factory=dict)

    @field_validator(*_PIXEL_FIELDS, mode='before')
    @classmethod
    def numbers_are_pixels(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return format_px(v)
        return v

    @field_validator('style_references', mode='before')
    @classmethod
    def none_references_are_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @model_validator(mode='after')
    def check_exclusive_image_sources(self) -> 'StyleRecord':
        if self.background_image_hash and self.background_image_url:
            raise ValueError(
                "backgroundImageHash and backgroundImageUrl are mutually exclusive; "
                "a node has one background image source"
            )
        return self

    @classmethod
    def coerce(cls, value: Any) -> 'StyleRecord':
        """Accept a StyleRecord or a mapping; anything else is a caller error."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        raise TypeError(
            f"Expected a style record mapping, got {type(value).__name__}"
        )


# ============================================================================
# Design tokens
# ============================================================================

class TokenType(str, Enum):
    """Token catalogs of a DesignTokenSet."""
    COLORS = "colors"
    TYPOGRAPHY = "typography"
    SPACING = "spacing"
    EFFECTS = "effects"
    BORDER_RADIUS = "borderRadius"
    BORDER_WIDTH = "borderWidth"


class ValueToken(BaseModel):
    """Token with a single canonical CSS value (color, spacing, radius, width)."""
    model_config = _RECORD_CONFIG

    value: str
    type: str = 'value'


class TypographyToken(BaseModel):
    model_config = _RECORD_CONFIG

    font_family: Optional[str] = None
    font_size: Optional[str] = None
    font_weight: Optional[Union[int, str]] = None
    line_height: Optional[str] = None
    letter_spacing: Optional[str] = None
    type: str = 'typography'

    @field_validator('font_size', 'line_height', 'letter_spacing', mode='before')
    @classmethod
    def numbers_are_pixels(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return format_px(v)
        return v


class EffectToken(BaseModel):
    model_config = _RECORD_CONFIG

    offset_x: float = 0
    offset_y: float = 0
    blur: float = 0
    spread: float = 0
    color: str = 'rgba(0, 0, 0, 0.25)'
    type: str = 'shadow'

    @property
    def css(self) -> str:
        return (
            f'{format_px(self.offset_x)} {format_px(self.offset_y)} '
            f'{format_px(self.blur)} {format_px(self.spread)} {self.color}'
        )


class DesignTokenSet(BaseModel):
    """
    Named token catalogs. Names are kept as authored; every lookup normalizes
    both sides with style_name_to_variable.
    """
    model_config = _RECORD_CONFIG

    colors: Dict[str, ValueToken] = Field(default_factory=dict)
    typography: Dict[str, TypographyToken] = Field(default_factory=dict)
    spacing: Dict[str, ValueToken] = Field(default_factory=dict)
    effects: Dict[str, EffectToken] = Field(default_factory=dict)
    border_radius: Dict[str, ValueToken] = Field(default_factory=dict)
    border_width: Dict[str, ValueToken] = Field(default_factory=dict)

    @field_validator('colors', 'spacing', 'border_radius', 'border_width', mode='before')
    @classmethod
    def plain_values_are_tokens(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            return {
                name: {'value': format_px(token) if isinstance(token, (int, float)) else token}
                if isinstance(token, (str, int, float)) else token
                for name, token in v.items()
            }
        return v

    @classmethod
    def coerce(cls, value: Any) -> 'DesignTokenSet':
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        raise TypeError(
            f"Expected a design token set mapping, got {type(value).__name__}"
        )

    def catalog(self, token_type: Union[TokenType, str]) -> Dict[str, BaseModel]:
        token_type = TokenType(token_type)
        return {
            TokenType.COLORS: self.colors,
            TokenType.TYPOGRAPHY: self.typography,
            TokenType.SPACING: self.spacing,
            TokenType.EFFECTS: self.effects,
            TokenType.BORDER_RADIUS: self.border_radius,
            TokenType.BORDER_WIDTH: self.border_width,
        }[token_type]

    def lookup(self, token_type: Union[TokenType, str], name: Optional[str]) -> Optional[str]:
        """Normalized token name if a token of this type is called `name`."""
        wanted = style_name_to_variable(name)
        if not wanted:
            return None
        for token_name in self.catalog(token_type):
            if style_name_to_variable(token_name) == wanted:
                return wanted
        return None

    def names(self, token_type: Union[TokenType, str]) -> List[str]:
        return [style_name_to_variable(n) for n in self.catalog(token_type)]


# ============================================================================
# Scene snapshot
# ============================================================================

class SceneNode(BaseModel):
    """
    Plain snapshot of one node subtree: its style record, text content and
    component metadata. Produced by the extraction collaborator.
    """
    model_config = _RECORD_CONFIG

    id: str = ''
    name: str = ''
    type: str = 'FRAME'
    visible: bool = True
    style: StyleRecord = Field(default_factory=StyleRecord)
    characters: Optional[str] = None
    has_image_fill: bool = False
    component_name: Optional[str] = None
    variant_properties: Dict[str, str] = Field(default_factory=dict)
    component_properties: Dict[str, Union[bool, str]] = Field(default_factory=dict)
    children: List['SceneNode'] = Field(default_factory=list)


SceneNode.model_rebuild()
