"""
Generator options.

Options come from a JSON file whose path is taken from the
TAILWIND_CODEGEN_CONFIG environment variable (default
~/.config/figma-tailwind-mcp/config.json). A missing file means defaults.
"""

import json
import os
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

CONFIG_DEFAULT_PATH = os.path.expanduser("~/.config/figma-tailwind-mcp/config.json")

# Guessed state styles for variant slots that have no distinguishing classes.
# Only applied when use_variant_fallbacks is enabled.
DEFAULT_STATE_FALLBACKS: Dict[str, Dict[str, str]] = {
    'state': {
        'disabled': 'opacity-50 cursor-not-allowed',
        'hover': 'hover:opacity-80',
        'focus': 'focus:ring-2 focus:ring-offset-2',
    },
}


class GeneratorOptions(BaseModel):
    """Tunable behavior of the structure synthesizer and emitter."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True, extra='forbid')

    use_variant_fallbacks: bool = Field(
        default=False,
        description="Fill empty variant slots from variant_fallbacks instead of leaving them empty",
    )
    variant_fallbacks: Dict[str, Dict[str, str]] = Field(
        default_factory=lambda: {k: dict(v) for k, v in DEFAULT_STATE_FALLBACKS.items()},
        description="Fallback classes per variant property and value",
    )
    asset_dir: str = Field(default="assets", min_length=1, description="Directory for referenced assets")
    max_depth: int = Field(default=25, ge=1, le=100, description="Maximum node nesting to traverse")

    @property
    def active_fallbacks(self) -> Optional[Dict[str, Dict[str, str]]]:
        return self.variant_fallbacks if self.use_variant_fallbacks else None


def get_config_path() -> str:
    """Get the path to the options file."""
    return os.environ.get("TAILWIND_CODEGEN_CONFIG", CONFIG_DEFAULT_PATH)


def load_options(path: Optional[str] = None) -> GeneratorOptions:
    """Load options from disk; defaults when the file does not exist."""
    path = path or get_config_path()
    if not os.path.exists(path):
        return GeneratorOptions()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return GeneratorOptions.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ValueError(f"Invalid generator config at {path}: {e}") from e
