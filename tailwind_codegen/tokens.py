"""Token matcher: resolve a raw style value to a named design token."""

import re
from typing import Optional, Union

from tailwind_codegen.colors import colors_equal
from tailwind_codegen.models import DesignTokenSet, TokenType
from tailwind_codegen.names import style_name_to_variable


def find_matching_token(
    value: Optional[str],
    token_type: Union[TokenType, str],
    tokens: Optional[DesignTokenSet],
) -> Optional[str]:
    """
    Find the token of `token_type` that `value` refers to.

    Passes, first success wins:
      1. exact match on the normalized token name
      2. match after turning inner whitespace into hyphens (and any remaining
         punctuation, so 'Primary/Hover' finds 'primary-hover')
      3. colors only: both sides parse to the same RGBA value

    Returns the normalized token name, or None.
    """
    if not value or tokens is None:
        return None
    text = str(value).strip().lower()
    if not text:
        return None

    catalog = tokens.catalog(token_type)
    if not catalog:
        return None
    normalized = [(style_name_to_variable(name), token) for name, token in catalog.items()]

    for name, _ in normalized:
        if name == text:
            return name

    hyphenated = re.sub(r'\s+', '-', text)
    punctuation_free = style_name_to_variable(text)
    for name, _ in normalized:
        if name == hyphenated or name == punctuation_free:
            return name

    if TokenType(token_type) == TokenType.COLORS:
        for name, token in normalized:
            if colors_equal(token.value, text):
                return name

    return None
