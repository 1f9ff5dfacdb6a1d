"""
Variant differ.

Set differences between utility class strings, per-slot diffs of variant
class maps, and a structural diff of rendered JSX that pairs className
attributes by element path (sibling index at each nesting level).
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


# ============================================================================
# Class and text diffs
# ============================================================================

@dataclass
class ClassesDiff:
    """Classes added, removed and kept between two class strings."""
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed)


def diff_tailwind_classes(old_classes: Optional[str], new_classes: Optional[str]) -> ClassesDiff:
    """Whitespace-tokenized set difference; lists follow input order."""
    old = (old_classes or '').split()
    new = (new_classes or '').split()
    old_set, new_set = set(old), set(new)
    return ClassesDiff(
        added=[cls for cls in new if cls not in old_set],
        removed=[cls for cls in old if cls not in new_set],
        unchanged=[cls for cls in old if cls in new_set],
    )


@dataclass
class DiffPart:
    text: str
    operation: str  # "added" | "removed" | "unchanged"


def diff_strings(old: str, new: str) -> List[DiffPart]:
    """Positional line diff: line i of old against line i of new."""
    old_lines = old.split('\n')
    new_lines = new.split('\n')
    parts: List[DiffPart] = []
    for index in range(max(len(old_lines), len(new_lines))):
        old_line = old_lines[index] if index < len(old_lines) else ''
        new_line = new_lines[index] if index < len(new_lines) else ''
        if old_line == new_line:
            parts.append(DiffPart(old_line, 'unchanged'))
            continue
        if old_line:
            parts.append(DiffPart(f'- {old_line}', 'removed'))
        if new_line:
            parts.append(DiffPart(f'+ {new_line}', 'added'))
    return parts


@dataclass
class VariantSlotDiff:
    slot: str
    diff: ClassesDiff


@dataclass
class VariantDiff:
    variant_key: str
    slot_diffs: List[VariantSlotDiff]


def _union_keys(*mappings: Dict[str, object]) -> List[str]:
    keys: Dict[str, None] = {}
    for mapping in mappings:
        for key in mapping or {}:
            keys.setdefault(key, None)
    return list(keys)


def diff_variant_option(old_option: Dict[str, str], new_option: Dict[str, str]) -> List[VariantSlotDiff]:
    """Slots (e.g. root, label, icon) whose classes differ between two option configs."""
    old_option, new_option = old_option or {}, new_option or {}
    slot_diffs = []
    for slot in _union_keys(old_option, new_option):
        slot_diff = diff_tailwind_classes(old_option.get(slot, ''), new_option.get(slot, ''))
        if slot_diff.has_changes:
            slot_diffs.append(VariantSlotDiff(slot=slot, diff=slot_diff))
    return slot_diffs


def diff_variants(
    old_variants: Dict[str, Dict[str, str]],
    new_variants: Dict[str, Dict[str, str]],
) -> List[VariantDiff]:
    """Per-variant slot diffs; variants with no changes are left out."""
    diffs = []
    for key in _union_keys(old_variants, new_variants):
        slot_diffs = diff_variant_option(old_variants.get(key, {}), new_variants.get(key, {}))
        if slot_diffs:
            diffs.append(VariantDiff(variant_key=key, slot_diffs=slot_diffs))
    return diffs


# ============================================================================
# JSX structural diff
# ============================================================================

_TAG_NAME = re.compile(r'[A-Za-z][\w.:-]*')
_CLASS_NAME_ATTR = re.compile(
    r'''className=(?:"([^"]*)"|'([^']*)'|\{\s*"([^"]*)"\s*\})'''
)


@dataclass
class ClassNameLocation:
    """A literal className attribute and where it sits in the source."""
    class_name: str
    index: int
    end: int
    element_path: str


@dataclass
class _Tag:
    name: str
    closing: bool
    self_closing: bool
    attrs: str
    attrs_offset: int


@dataclass
class _Scope:
    name: Optional[str]
    path: Tuple[int, ...]
    child_count: int = 0


def _scan_tags(jsx: str) -> Iterator[_Tag]:
    """Yield tags in document order; quotes and {...} inside a tag are opaque."""
    position = 0
    length = len(jsx)
    while position < length:
        start = jsx.find('<', position)
        if start < 0:
            return
        cursor = start + 1
        closing = cursor < length and jsx[cursor] == '/'
        if closing:
            cursor += 1
        name_match = _TAG_NAME.match(jsx, cursor)
        if name_match is None and not (cursor < length and jsx[cursor] == '>'):
            # A comparison such as `a < b`, not a tag
            position = start + 1
            continue
        name = name_match.group(0) if name_match else ''
        attrs_start = name_match.end() if name_match else cursor

        end = attrs_start
        depth = 0
        quote = None
        while end < length:
            char = jsx[end]
            if quote:
                if char == quote:
                    quote = None
            elif char in '"\'`':
                quote = char
            elif char == '{':
                depth += 1
            elif char == '}':
                depth -= 1
            elif char == '>' and depth == 0:
                break
            end += 1

        attrs = jsx[attrs_start:end]
        yield _Tag(
            name=name,
            closing=closing,
            self_closing=attrs.rstrip().endswith('/'),
            attrs=attrs,
            attrs_offset=attrs_start,
        )
        position = end + 1


def extract_class_names(jsx: str) -> List[ClassNameLocation]:
    """
    Literal className values with their element paths.

    A path is the sibling index at each nesting level, joined with '.', so the
    second child of the first root element is '0.1'. A closing tag pops back to
    the nearest open tag of the same name; a closing tag with no open match is
    an orphan and leaves the current scope as it is.
    """
    results: List[ClassNameLocation] = []
    stack: List[_Scope] = [_Scope(name=None, path=())]

    for tag in _scan_tags(jsx):
        if tag.closing:
            for depth in range(len(stack) - 1, 0, -1):
                if stack[depth].name == tag.name:
                    del stack[depth:]
                    break
            else:
                logger.debug("Orphan closing tag </%s> ignored", tag.name)
            continue

        parent = stack[-1]
        path = parent.path + (parent.child_count,)
        parent.child_count += 1

        match = _CLASS_NAME_ATTR.search(tag.attrs)
        if match:
            value = next(g for g in match.groups() if g is not None)
            results.append(ClassNameLocation(
                class_name=value,
                index=tag.attrs_offset + match.start(),
                end=tag.attrs_offset + match.end(),
                element_path='.'.join(str(i) for i in path),
            ))

        if not tag.self_closing:
            stack.append(_Scope(name=tag.name, path=path))

    return results


@dataclass
class JsxElementChange:
    path: str
    old_value: Optional[str]
    new_value: Optional[str]
    type: str  # "added" | "removed" | "changed" | "unchanged"


@dataclass
class JsxDiff:
    element_changes: List[JsxElementChange] = field(default_factory=list)
    added_elements: List[str] = field(default_factory=list)
    removed_elements: List[str] = field(default_factory=list)
    changed_elements: List[str] = field(default_factory=list)
    unchanged_elements: List[str] = field(default_factory=list)


def diff_jsx(base_jsx: str, variant_jsx: str) -> JsxDiff:
    """Classify every className-bearing element path of two renders."""
    base_map = {loc.element_path: loc.class_name for loc in extract_class_names(base_jsx)}
    variant_map = {loc.element_path: loc.class_name for loc in extract_class_names(variant_jsx)}

    result = JsxDiff()
    for path in _union_keys(base_map, variant_map):
        old = base_map.get(path)
        new = variant_map.get(path)
        if old is not None and new is not None:
            kind = 'unchanged' if old == new else 'changed'
        elif old is not None:
            kind = 'removed'
        else:
            kind = 'added'
        result.element_changes.append(JsxElementChange(path=path, old_value=old, new_value=new, type=kind))
        getattr(result, f'{kind}_elements').append(path)
    return result


def parameter_name(element_path: str) -> str:
    return 'param_' + element_path.replace('.', '_')


def identify_parameters(diffs: Iterable[JsxDiff]) -> Dict[str, List[str]]:
    """Changed element paths as named parameters, with each distinct change pattern."""
    parameters: Dict[str, List[str]] = {}
    for jsx_diff in diffs:
        for change in jsx_diff.element_changes:
            if change.type != 'changed':
                continue
            class_diff = diff_tailwind_classes(change.old_value, change.new_value)
            if not class_diff.has_changes:
                continue
            pattern = json.dumps(
                {'added': class_diff.added, 'removed': class_diff.removed},
                separators=(',', ':'),
            )
            patterns = parameters.setdefault(parameter_name(change.path), [])
            if pattern not in patterns:
                patterns.append(pattern)
    return parameters


@dataclass
class VariantRenderAnalysis:
    base_variant: Optional[str]
    diffs: Dict[str, JsxDiff]
    parameters: Dict[str, List[str]]


def analyze_variant_renders(variant_renders: Dict[str, str]) -> VariantRenderAnalysis:
    """Diff every variant render against the first one."""
    names = list(variant_renders)
    if len(names) <= 1:
        return VariantRenderAnalysis(base_variant=names[0] if names else None, diffs={}, parameters={})

    base = names[0]
    diffs = {name: diff_jsx(variant_renders[base], variant_renders[name]) for name in names[1:]}
    return VariantRenderAnalysis(
        base_variant=base,
        diffs=diffs,
        parameters=identify_parameters(diffs.values()),
    )


def generate_parameterized_template(base_render: str, diffs: Dict[str, JsxDiff]) -> str:
    """
    Rewrite the base render so every className that changes in some variant
    becomes `className={cn("<base classes>", param_<path>)}`.
    """
    changed = {path for d in diffs.values() for path in d.changed_elements}
    locations = [loc for loc in extract_class_names(base_render) if loc.element_path in changed]

    template = base_render
    for loc in sorted(locations, key=lambda l: l.index, reverse=True):
        replacement = f'className={{cn({json.dumps(loc.class_name)}, {parameter_name(loc.element_path)})}}'
        template = template[:loc.index] + replacement + template[loc.end:]
    return template
