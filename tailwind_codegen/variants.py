"""
Variant keys and base-vs-variant class classification.

A class is specific to value V of property P when every variant with P=V
has it and no variant with another value of P does. Everything shared by all
variants is base. Classes explained by neither end up as compound variants
for the concrete combination that carries them.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

logger = logging.getLogger(__name__)

PAIR_DELIMITER = ':'
VALUE_DELIMITER = '='

# Layout classes that describe structure rather than a variant's look
STRUCTURAL_CLASSES = frozenset({'flex', 'inline-flex', 'grid', 'inline-grid'})
STRUCTURAL_PREFIXES = ('items-', 'justify-', 'content-', 'place-')


# ============================================================================
# Variant keys
# ============================================================================

@dataclass(frozen=True, eq=False)
class VariantKey:
    """
    Ordered (property, value) pairs naming one concrete variant, rendered as
    'size=Large:state=Hover'. Property names compare case-insensitively and
    keep their original spelling for display.
    """
    pairs: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def parse(cls, text: Optional[str]) -> 'VariantKey':
        """Parse 'a=b:c=d'; malformed pairs are skipped."""
        pairs = []
        for chunk in (text or '').split(PAIR_DELIMITER):
            name, sep, value = chunk.partition(VALUE_DELIMITER)
            name, value = name.strip(), value.strip()
            if not sep or not name or not value:
                if chunk.strip():
                    logger.debug("Skipping malformed variant pair %r in %r", chunk, text)
                continue
            pairs.append((name, value))
        return cls(tuple(pairs))

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> 'VariantKey':
        return cls(tuple((str(k), str(v)) for k, v in properties.items()))

    def get(self, prop: str) -> Optional[str]:
        wanted = prop.casefold()
        for name, value in self.pairs:
            if name.casefold() == wanted:
                return value
        return None

    def properties(self) -> Dict[str, str]:
        return dict(self.pairs)

    def _identity(self) -> Tuple[Tuple[str, str], ...]:
        return tuple((name.casefold(), value) for name, value in self.pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VariantKey):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __str__(self) -> str:
        return PAIR_DELIMITER.join(f'{name}{VALUE_DELIMITER}{value}' for name, value in self.pairs)


def get_variant_props(keys: Iterable[VariantKey]) -> Dict[str, List[str]]:
    """Property -> distinct values, both in first-seen order."""
    props: Dict[str, List[str]] = {}
    folded: Dict[str, str] = {}
    for key in keys:
        for name, value in key.pairs:
            display = folded.setdefault(name.casefold(), name)
            values = props.setdefault(display, [])
            if value not in values:
                values.append(value)
    return props


def extract_common_classes(class_strings: Iterable[str]) -> List[str]:
    """Classes present in every string, in the order of the first one."""
    lists = [s.split() for s in class_strings]
    if not lists:
        return []
    shared = set(lists[0]).intersection(*map(set, lists[1:]))
    seen: Set[str] = set()
    result = []
    for cls in lists[0]:
        if cls in shared and cls not in seen:
            seen.add(cls)
            result.append(cls)
    return result


def is_structural(cls: str) -> bool:
    return cls in STRUCTURAL_CLASSES or cls.startswith(STRUCTURAL_PREFIXES)


# ============================================================================
# Classification
# ============================================================================

@dataclass
class CompoundVariant:
    conditions: Tuple[Tuple[str, str], ...]
    classes: str


@dataclass
class VariantStyles:
    """Base classes plus per-property-value and per-combination classes of one node."""
    base: str = ''
    variants: Dict[str, Dict[str, str]] = field(default_factory=dict)
    compound_variants: List[CompoundVariant] = field(default_factory=list)
    # (property, value) slots filled from the fallback table rather than data
    fabricated: Set[Tuple[str, str]] = field(default_factory=set)

    @property
    def varies(self) -> bool:
        return bool(self.compound_variants) or any(
            classes for values in self.variants.values() for classes in values.values()
        )

    def classes_for(self, key: VariantKey) -> List[str]:
        """Every class cva would apply for this concrete variant."""
        applied = self.base.split()
        for prop, values in self.variants.items():
            value = key.get(prop)
            if value is not None:
                applied.extend(values.get(value, '').split())
        for compound in self.compound_variants:
            if all(key.get(name) == value for name, value in compound.conditions):
                applied.extend(compound.classes.split())
        return applied


def _lookup_fallback(
    fallbacks: Optional[Mapping[str, Mapping[str, str]]], prop: str, value: str
) -> Optional[str]:
    for fallback_prop, table in (fallbacks or {}).items():
        if fallback_prop.casefold() != prop.casefold():
            continue
        for fallback_value, classes in table.items():
            if fallback_value.casefold() == value.casefold():
                return classes
    return None


def classify_variant_styles(
    styles: Mapping[VariantKey, str],
    variant_props: Mapping[str, List[str]],
    fallbacks: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> VariantStyles:
    """
    Split per-variant class strings of one node into base, per-value and
    compound classes.

    A property value with no qualifying classes gets an empty slot and a
    warning. `fallbacks` ({property: {value: classes}}) fills such slots
    instead; those slots are recorded in `fabricated`.
    """
    class_lists = {key: classes.split() for key, classes in styles.items()}
    common = extract_common_classes(styles.values())
    common_set = set(common)

    base = list(common)
    for classes in class_lists.values():
        for cls in classes:
            if is_structural(cls) and cls not in base:
                base.append(cls)
    base_set = set(base)

    result = VariantStyles(base=' '.join(base))
    for prop, values in variant_props.items():
        slot: Dict[str, str] = {}
        for value in values:
            matching = [cl for key, cl in class_lists.items() if key.get(prop) == value]
            others = [
                set(cl) for key, cl in class_lists.items()
                if key.get(prop) is not None and key.get(prop) != value
            ]
            qualifying: List[str] = []
            if matching:
                in_every = set(matching[0]).intersection(*map(set, matching[1:]))
                in_others = set().union(*others)
                for cls in matching[0]:
                    if (cls in in_every and cls not in in_others and cls not in common_set
                            and not is_structural(cls) and cls not in qualifying):
                        qualifying.append(cls)

            classes = ' '.join(qualifying)
            if not classes:
                fallback = _lookup_fallback(fallbacks, prop, value)
                if fallback:
                    classes = fallback
                    result.fabricated.add((prop, value))
                elif matching:
                    logger.warning(
                        "No classes specific to %s=%s; leaving the variant slot empty", prop, value
                    )
            slot[value] = classes
        result.variants[prop] = slot

    for key, classes in class_lists.items():
        explained = set(base_set)
        for prop, slot in result.variants.items():
            value = key.get(prop)
            if value is not None and (prop, value) not in result.fabricated:
                explained.update(slot.get(value, '').split())
        residual = []
        for cls in classes:
            if cls not in explained and cls not in residual:
                residual.append(cls)
        if residual:
            result.compound_variants.append(CompoundVariant(conditions=key.pairs, classes=' '.join(residual)))

    return result
