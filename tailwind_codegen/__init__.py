"""
Figma style to Tailwind/React translation engine.

Style records and design tokens in, sanitized utility classes, cva variant
definitions and TSX components out. Nothing in this package does I/O; the
extractor module adapts Figma REST payloads into its input records.
"""

from tailwind_codegen.emitter import generate_component, generate_variant_component
from tailwind_codegen.models import DesignTokenSet, SceneNode, StyleRecord
from tailwind_codegen.sanitizer import cleanup_tailwind_classes
from tailwind_codegen.tailwind import get_tailwind_classes, styles_to_tailwind

__all__ = [
    'DesignTokenSet',
    'SceneNode',
    'StyleRecord',
    'cleanup_tailwind_classes',
    'generate_component',
    'generate_variant_component',
    'get_tailwind_classes',
    'styles_to_tailwind',
]
