"""Tests for the style-to-utility compiler."""
import pytest

from tailwind_codegen.sanitizer import class_group
from tailwind_codegen.tailwind import get_tailwind_classes, opacity_class, styles_to_tailwind


class TestBackground:
    """Tests for background color and image handling."""

    def test_white_background(self):
        assert get_tailwind_classes({'backgroundColor': '#ffffff'}) == 'bg-white'

    def test_no_fill_emits_no_background(self):
        classes = get_tailwind_classes({'color': '#111827'})
        assert classes == 'text-gray-900'
        assert not any(c.startswith('bg-') for c in classes.split())

    def test_unparseable_color_is_arbitrary(self):
        assert get_tailwind_classes({'backgroundColor': 'hsl(10, 20%, 30%)'}) == 'bg-[hsl(10,20%,30%)]'

    def test_image_hash_is_layered_first(self):
        classes = get_tailwind_classes({'backgroundImageHash': 'abc123', 'backgroundColor': '#ffffff'})
        assert classes == 'bg-[image:var(--img-abc123)] bg-white bg-cover bg-no-repeat'

    def test_image_url(self):
        classes = get_tailwind_classes({'backgroundImageUrl': '/hero.png', 'backgroundSize': 'contain'})
        assert classes.split()[0] == "bg-[url('/hero.png')]"
        assert 'bg-contain' in classes.split()

    def test_image_hash_and_url_are_exclusive(self):
        with pytest.raises(ValueError):
            styles_to_tailwind({'backgroundImageHash': 'a', 'backgroundImageUrl': '/b.png'})


class TestSpacing:
    """Tests for padding, margin and gap."""

    def test_uniform_padding_unifies(self):
        assert get_tailwind_classes({'padding': '8px 8px 8px 8px'}) == 'p-2'

    def test_per_side_padding(self):
        record = {'paddingTop': 8, 'paddingBottom': 8, 'paddingLeft': 16, 'paddingRight': 16}
        assert get_tailwind_classes(record) == 'pt-2 pr-4 pb-2 pl-4'

    def test_off_scale_padding_is_arbitrary(self):
        assert get_tailwind_classes({'padding': 13}) == 'p-[13px]'

    def test_zero_values_are_no_ops(self):
        assert get_tailwind_classes({'padding': 0, 'gap': 0, 'margin': '0px'}) == ''

    def test_gap(self):
        assert get_tailwind_classes({'gap': 12}) == 'gap-3'


class TestRadius:
    """Tests for border radius tiers."""

    def test_zero_radius_is_no_op(self):
        assert get_tailwind_classes({'borderRadius': '0px'}) == ''

    @pytest.mark.parametrize('value,expected', [
        ('2px', 'rounded-sm'),
        ('4px', 'rounded'),
        ('5px', 'rounded-md'),
        ('8px', 'rounded-lg'),
        ('30px', 'rounded-full'),
    ])
    def test_tiers(self, value, expected):
        assert get_tailwind_classes({'borderRadius': value}) == expected

    def test_per_corner(self):
        classes = get_tailwind_classes({'topLeftRadius': 8, 'topRightRadius': 8})
        assert classes == 'rounded-tl-lg rounded-tr-lg'


class TestTypography:
    """Tests for font size, weight, leading and tracking."""

    def test_font_size_within_tolerance(self):
        assert get_tailwind_classes({'fontSize': 15}) == 'text-sm'

    def test_font_size_off_scale(self):
        assert get_tailwind_classes({'fontSize': 100}) == 'text-[100px]'

    def test_default_weight_is_no_op(self):
        assert get_tailwind_classes({'fontWeight': 400}) == ''

    def test_numeric_and_named_weights(self):
        assert get_tailwind_classes({'fontWeight': 700}) == 'font-bold'
        assert get_tailwind_classes({'fontWeight': 'SemiBold'}) == 'font-semibold'

    def test_line_height_and_tracking(self):
        assert get_tailwind_classes({'lineHeight': '24px'}) == 'leading-6'
        assert get_tailwind_classes({'lineHeight': '150%'}) == 'leading-normal'
        assert get_tailwind_classes({'letterSpacing': '5%'}) == 'tracking-wider'

    def test_left_alignment_is_default(self):
        assert get_tailwind_classes({'textAlign': 'left'}) == ''
        assert get_tailwind_classes({'textAlign': 'center'}) == 'text-center'


class TestLayout:
    """Tests for flex layout and sizing."""

    def test_flex_prefixes_are_stripped(self):
        record = {'display': 'flex', 'justifyContent': 'flex-start', 'alignItems': 'flex-end'}
        assert get_tailwind_classes(record) == 'flex justify-start items-end'

    def test_space_between(self):
        assert get_tailwind_classes({'justifyContent': 'space-between'}) == 'justify-between'

    def test_hug_sizing_skips_dimension(self):
        record = {'width': '120px', 'height': '40px', 'layoutSizingHorizontal': 'HUG'}
        assert get_tailwind_classes(record) == 'h-[40px]'

    def test_fill_sizing(self):
        assert get_tailwind_classes({'width': '120px', 'layoutSizingHorizontal': 'FILL'}) == 'w-full'


class TestEffects:
    """Tests for opacity and shadows."""

    @pytest.mark.parametrize('value,expected', [
        (0.47, 'opacity-50'),
        (0.44, 'opacity-40'),
        ('50%', 'opacity-50'),
        (0.03, 'opacity-0'),
        (0.96, None),
    ])
    def test_opacity_buckets(self, value, expected):
        assert opacity_class(value) == expected

    def test_drop_shadow_is_arbitrary(self):
        record = {'effects': [{'type': 'DROP_SHADOW', 'offsetY': 4, 'radius': 8, 'color': 'rgba(0, 0, 0, 0.25)'}]}
        assert get_tailwind_classes(record) == 'shadow-[0px_4px_8px_0px_rgba(0,0,0,0.25)]'

    def test_hidden_effects_ignored(self):
        record = {'effects': [{'type': 'DROP_SHADOW', 'visible': False, 'radius': 8}]}
        assert get_tailwind_classes(record) == ''


class TestTokenReferences:
    """Tests for style references and bound variables."""

    def test_fill_reference_wins_over_raw_value(self):
        tokens = {'colors': {'Brand/Primary': '#123456'}}
        record = {'styleReferences': {'fill': 'Brand/Primary'}, 'backgroundColor': '#ff0000'}
        assert get_tailwind_classes(record, tokens) == 'bg-brand-primary'

    def test_text_named_fill_token_is_text_color(self):
        tokens = {'colors': {'Text/Primary': '#111111'}}
        record = {'styleReferences': {'fill': 'Text/Primary'}}
        assert get_tailwind_classes(record, tokens) == 'text-text-primary'

    def test_unresolved_reference_falls_through(self):
        assert get_tailwind_classes({'styleReferences': {'fill': 'Missing'}, 'backgroundColor': '#ef4444'}) == 'bg-red-500'

    def test_text_style_reference(self, token_set):
        classes = get_tailwind_classes({'styleReferences': {'text': 'Heading 1'}, 'fontSize': 99}, token_set)
        assert classes.split() == ['font-heading-1', 'text-heading-1', 'leading-heading-1', 'tracking-heading-1']

    def test_effect_reference(self, token_set):
        assert get_tailwind_classes({'styleReferences': {'effect': 'Card Shadow'}}, token_set) == 'shadow-card-shadow'

    def test_bound_spacing_variable(self, token_set):
        record = {'variableReferences': {'itemSpacing': 'Spacing/md'}, 'gap': '13px'}
        assert get_tailwind_classes(record, token_set) == 'gap-spacing-md'

    def test_raw_color_matches_token_before_palette(self, token_set):
        assert get_tailwind_classes({'backgroundColor': '#3b82f6'}, token_set) == 'bg-brand-primary'


class TestCompilerContract:
    """Tests for input validation and sanitized output."""

    def test_non_mapping_rejected(self):
        with pytest.raises(TypeError):
            styles_to_tailwind('bg-red-500')
        with pytest.raises(TypeError):
            styles_to_tailwind({}, tokens=42)

    def test_empty_record(self):
        assert get_tailwind_classes({}) == ''

    def test_output_has_one_class_per_group(self, token_set):
        record = {
            'display': 'flex',
            'flexDirection': 'column',
            'padding': '8px 16px',
            'backgroundColor': '#ffffff',
            'color': '#111827',
            'fontSize': 16,
            'fontWeight': 600,
            'borderRadius': 8,
            'border': '1px solid #e5e7eb',
            'opacity': 0.5,
        }
        classes = get_tailwind_classes(record, token_set).split()
        groups = [class_group(c) for c in classes if class_group(c)]
        assert len(groups) == len(set(groups))
