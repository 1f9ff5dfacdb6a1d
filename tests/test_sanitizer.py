"""Tests for the class sanitizer."""
import pytest

from tailwind_codegen.models import DesignTokenSet
from tailwind_codegen.sanitizer import class_group, cleanup_tailwind_classes


SAMPLES = [
    'p-2 p-4',
    'bg-red-500 bg-blue-500 text-sm text-lg',
    "bg-red-500 bg-[url('/a.png')] bg-cover",
    'flex flex items-center hover:bg-red-600 bg-red-500',
    'rounded rounded-lg rounded-tl-sm border border-2 border-dashed',
    'custom-class w-full w-[20px] h-4',
]


class TestCleanupTailwindClasses:
    """Tests for cleanup_tailwind_classes."""

    def test_last_in_group_wins(self):
        assert cleanup_tailwind_classes('p-2 p-4') == 'p-4'
        assert cleanup_tailwind_classes('bg-red-500 bg-blue-500') == 'bg-blue-500'

    def test_exact_duplicates_removed(self):
        assert cleanup_tailwind_classes('flex flex items-center') == 'flex items-center'

    def test_background_image_kept_and_placed_first(self):
        result = cleanup_tailwind_classes("bg-red-500 bg-[url('/a.png')]")
        assert result == "bg-[url('/a.png')] bg-red-500"

    def test_distinct_sides_coexist(self):
        assert cleanup_tailwind_classes('pt-2 pb-4 px-3') == 'pt-2 pb-4 px-3'

    def test_state_variants_are_separate_groups(self):
        assert cleanup_tailwind_classes('bg-red-500 hover:bg-red-600') == 'bg-red-500 hover:bg-red-600'

    def test_text_classes_split_by_role(self):
        result = cleanup_tailwind_classes('text-sm text-lg text-red-500 text-center')
        assert result == 'text-lg text-red-500 text-center'

    def test_ungrouped_classes_go_last(self):
        assert cleanup_tailwind_classes('custom-class p-2') == 'p-2 custom-class'

    def test_border_groups(self):
        assert cleanup_tailwind_classes('border border-2') == 'border-2'
        assert cleanup_tailwind_classes('border-red-500 border-dashed border') == 'border-red-500 border-dashed border'

    def test_corner_radius_is_its_own_group(self):
        assert cleanup_tailwind_classes('rounded rounded-lg rounded-tl-sm') == 'rounded-lg rounded-tl-sm'

    def test_empty_input(self):
        assert cleanup_tailwind_classes('') == ''
        assert cleanup_tailwind_classes(None) == ''

    def test_token_classes_need_the_token_set(self):
        tokens = DesignTokenSet.coerce({'colors': {'Text Primary': '#111111'}})
        assert cleanup_tailwind_classes('text-text-primary text-red-500', tokens) == 'text-red-500'
        assert cleanup_tailwind_classes('text-text-primary text-red-500') == 'text-red-500 text-text-primary'

    @pytest.mark.parametrize('classes', SAMPLES)
    def test_idempotent(self, classes):
        once = cleanup_tailwind_classes(classes)
        assert cleanup_tailwind_classes(once) == once

    @pytest.mark.parametrize('classes', SAMPLES)
    def test_at_most_one_class_per_group(self, classes):
        groups = [class_group(c) for c in cleanup_tailwind_classes(classes).split()]
        grouped = [g for g in groups if g and g != 'bg-image']
        assert len(grouped) == len(set(grouped))


class TestClassGroup:
    """Tests for class_group."""

    @pytest.mark.parametrize('cls,group', [
        ('p-4', 'padding'),
        ('px-2', 'padding-x'),
        ('text-sm', 'font-size'),
        ('text-white', 'text-color'),
        ('text-red-500/50', 'text-color'),
        ('font-bold', 'font-weight'),
        ('bg-[image:var(--img-x)]', 'bg-image'),
        ('hover:bg-red-500', 'hover:bg-color'),
        ('rounded-tl-lg', 'rounded-tl'),
        ('w-[16px]', 'width'),
        ('custom-thing', None),
    ])
    def test_groups(self, cls, group):
        assert class_group(cls) == group
