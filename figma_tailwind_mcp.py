#!/usr/bin/env python3
"""
Figma Tailwind MCP Server - Model Context Protocol server that turns Figma
designs into Tailwind classes and React components.

This server provides tools to:
- Compile node styles into sanitized Tailwind utility classes
- Generate React + cva components from component sets (or plain nodes)
- Generate CSS variables and a Tailwind theme from design tokens
- Diff and clean up Tailwind class strings
"""

import os
import sys
import json
import re
import logging
from typing import Optional, List, Dict, Any
from enum import Enum

import httpx
from pydantic import BaseModel, Field, field_validator, ConfigDict
from mcp.server.fastmcp import FastMCP

from tailwind_codegen.config import load_options
from tailwind_codegen.diff import diff_tailwind_classes
from tailwind_codegen.emitter import generate_component, generate_variant_component
from tailwind_codegen.extractor import (
    FigmaFileReader,
    extract_design_tokens,
    extract_style_record,
    find_node,
    to_scene_node,
)
from tailwind_codegen.models import DesignTokenSet
from tailwind_codegen.sanitizer import cleanup_tailwind_classes
from tailwind_codegen.tailwind import get_tailwind_classes
from tailwind_codegen.theme import tokens_to_css, tokens_to_tailwind

logger = logging.getLogger(__name__)

# ============================================================================
# Constants
# ============================================================================

FIGMA_API_BASE = "https://api.figma.com/v1"
CHARACTER_LIMIT = 25000
DEFAULT_TIMEOUT = 30.0

# ============================================================================
# Initialize MCP Server
# ============================================================================

mcp = FastMCP("figma_tailwind_mcp")

# ============================================================================
# Enums and Types
# ============================================================================

class ResponseFormat(str, Enum):
    """Output format for tool responses."""
    MARKDOWN = "markdown"
    JSON = "json"


# ============================================================================
# Pydantic Input Models
# ============================================================================

def _extract_file_key(v: str) -> str:
    # Extract file key from URL if full URL provided
    if 'figma.com' in v:
        match = re.search(r'figma\.com/(?:design|file)/([a-zA-Z0-9]+)', v)
        if match:
            return match.group(1)
        raise ValueError("Could not extract file key from Figma URL")
    return v


class FigmaTailwindClassesInput(BaseModel):
    """Input model for Tailwind class extraction."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(
        ...,
        description="Figma file key (from URL: figma.com/design/FILE_KEY/...)",
        min_length=10,
        max_length=50
    )
    node_id: Optional[str] = Field(
        default=None,
        description="Node ID (e.g., '1:2' or '1-2'); defaults to the document root"
    )
    depth: int = Field(
        default=5,
        description="Depth of the subtree to compile (1-25)",
        ge=1,
        le=25
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' or 'json'"
    )

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)

    @field_validator('node_id')
    @classmethod
    def normalize_node_id(cls, v: Optional[str]) -> Optional[str]:
        # Convert 1-2 format to 1:2
        return v.replace('-', ':') if v else v


class FigmaComponentInput(BaseModel):
    """Input model for component generation."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(
        ...,
        description="Figma file key",
        min_length=10,
        max_length=50
    )
    node_id: str = Field(
        ...,
        description="Component set or node ID (e.g., '1:2' or '1-2')",
        min_length=1
    )
    component_name: Optional[str] = Field(
        default=None,
        description="Custom component name (defaults to the node name)"
    )
    use_variant_fallbacks: Optional[bool] = Field(
        default=None,
        description="Fill empty variant slots from the configured fallback table (overrides the config file)"
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format"
    )

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)

    @field_validator('node_id')
    @classmethod
    def normalize_node_id(cls, v: str) -> str:
        return v.replace('-', ':')


class FigmaThemeInput(BaseModel):
    """Input model for theme generation."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(
        ...,
        description="Figma file key",
        min_length=10,
        max_length=50
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format"
    )

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)


class TailwindDiffInput(BaseModel):
    """Input model for class diffs."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    old_classes: str = Field(default="", description="Original class string")
    new_classes: str = Field(default="", description="Updated class string")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format"
    )


class TailwindCleanupInput(BaseModel):
    """Input model for class cleanup."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    classes: str = Field(..., description="Space-separated Tailwind classes to sanitize")


# ============================================================================
# Helper Functions
# ============================================================================

def _get_figma_token() -> str:
    """Get Figma API token from environment."""
    token = os.environ.get("FIGMA_ACCESS_TOKEN") or os.environ.get("FIGMA_TOKEN")
    if not token:
        raise ValueError(
            "Figma API token not found. Set FIGMA_ACCESS_TOKEN or FIGMA_TOKEN environment variable. "
            "Get your token from: https://www.figma.com/developers/api#access-tokens"
        )
    return token


async def _make_figma_request(
    endpoint: str,
    method: str = "GET",
    params: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Make authenticated request to Figma API."""
    token = _get_figma_token()

    async with httpx.AsyncClient() as client:
        response = await client.request(
            method=method,
            url=f"{FIGMA_API_BASE}/{endpoint}",
            headers={"X-Figma-Token": token},
            params=params,
            timeout=DEFAULT_TIMEOUT
        )
        response.raise_for_status()
        return response.json()


def _handle_api_error(e: Exception) -> str:
    """Format API errors for user-friendly messages."""
    if isinstance(e, httpx.HTTPStatusError):
        status = e.response.status_code
        if status == 401:
            return "Error: Invalid Figma API token. Check your FIGMA_ACCESS_TOKEN environment variable."
        elif status == 403:
            return "Error: Access denied. You don't have permission to view this file."
        elif status == 404:
            return "Error: File or node not found. Check the file key and node ID."
        elif status == 429:
            return "Error: Rate limit exceeded. Please wait before making more requests."
        return f"Error: Figma API returned status {status}"
    elif isinstance(e, httpx.TimeoutException):
        return "Error: Request timed out. The file might be too large."
    elif isinstance(e, ValueError):
        return f"Error: {str(e)}"
    return f"Error: {type(e).__name__}: {str(e)}"


async def _load_reader(file_key: str) -> FigmaFileReader:
    """Fetch the file and, when the plan allows it, its local variables."""
    data = await _make_figma_request(f"files/{file_key}")
    try:
        variables = await _make_figma_request(f"files/{file_key}/variables/local")
    except httpx.HTTPStatusError as e:
        # Variables REST API is Enterprise-only
        if e.response.status_code not in (403, 404):
            raise
        logger.warning(
            "Variables endpoint unavailable for %s (status %s); continuing without variables",
            file_key, e.response.status_code
        )
        variables = None
    return FigmaFileReader(data, variables)


def _truncate(result: str) -> str:
    if len(result) > CHARACTER_LIMIT:
        return result[:CHARACTER_LIMIT] + "\n\n... (truncated)"
    return result


def _collect_classes(
    node: Dict[str, Any],
    reader: FigmaFileReader,
    tokens: DesignTokenSet,
    depth: int,
    current_depth: int = 0
) -> Dict[str, Any]:
    """Node subtree with the sanitized classes of each node."""
    entry: Dict[str, Any] = {
        'id': node.get('id'),
        'name': node.get('name'),
        'type': node.get('type'),
        'classes': get_tailwind_classes(extract_style_record(node, reader), tokens),
    }
    if current_depth < depth and node.get('children'):
        entry['children'] = [
            _collect_classes(child, reader, tokens, depth, current_depth + 1)
            for child in node['children']
            if child.get('visible', True)
        ]
    return entry


def _classes_to_markdown(entry: Dict[str, Any], lines: List[str], indent: int = 0) -> None:
    prefix = "  " * indent
    classes = entry['classes'] or "(none)"
    lines.append(f"{prefix}- **{entry['name']}** ({entry['type']}, `{entry['id']}`): `{classes}`")
    for child in entry.get('children', []):
        _classes_to_markdown(child, lines, indent + 1)


# ============================================================================
# Tools
# ============================================================================

@mcp.tool(
    name="figma_get_tailwind_classes",
    annotations={
        "title": "Get Tailwind Classes from Figma",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_get_tailwind_classes(params: FigmaTailwindClassesInput) -> str:
    """
    Compile every node of a Figma subtree into Tailwind utility classes.

    Classes resolve against the file's design tokens first (shared styles and
    local variables), then the default Tailwind palette and scales, and fall
    back to arbitrary values. Output is deduplicated and conflict-free.

    Args:
        params: FigmaTailwindClassesInput containing:
            - file_key (str): Figma file key
            - node_id (Optional[str]): Root node of the subtree
            - depth (int): Levels below the root to include
            - response_format: 'markdown' or 'json'

    Returns:
        str: Node tree with the classes of each node
    """
    try:
        reader = await _load_reader(params.file_key)
        node = find_node(reader, params.node_id)
        if not node:
            return f"Error: Node '{params.node_id}' not found."

        tokens = extract_design_tokens(reader)
        tree = _collect_classes(node, reader, tokens, params.depth)

        if params.response_format == ResponseFormat.JSON:
            return _truncate(json.dumps(tree, indent=2))

        lines = [
            f"# Tailwind Classes: {node.get('name', 'Unknown')}",
            f"**Node ID:** `{node.get('id')}`",
            "",
        ]
        _classes_to_markdown(tree, lines)
        return _truncate("\n".join(lines))

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="figma_generate_component",
    annotations={
        "title": "Generate React Component from Figma",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_generate_component(params: FigmaComponentInput) -> str:
    """
    Generate a React + Tailwind component from a Figma node.

    A component set becomes one component with class-variance-authority
    variants: classes shared by every variant go to the base, classes tied to
    a single property value go to that value, and anything else becomes a
    compound variant. Layers missing from some variants render conditionally.
    Any other node becomes a plain component with static classes.

    Args:
        params: FigmaComponentInput containing:
            - file_key (str): Figma file key
            - node_id (str): Component set or node ID
            - component_name (Optional[str]): Custom component name
            - use_variant_fallbacks (Optional[bool]): Fill empty variant slots with guessed state styles
            - response_format: 'markdown' or 'json'

    Returns:
        str: Generated TSX code with the list of referenced assets
    """
    try:
        options = load_options()
        if params.use_variant_fallbacks is not None:
            options = options.model_copy(update={'use_variant_fallbacks': params.use_variant_fallbacks})

        reader = await _load_reader(params.file_key)
        node = find_node(reader, params.node_id)
        if not node:
            return f"Error: Node '{params.node_id}' not found."

        tokens = extract_design_tokens(reader)
        scene = to_scene_node(node, reader, options.max_depth)
        if params.component_name:
            scene = scene.model_copy(update={'name': params.component_name})

        if scene.type == 'COMPONENT_SET':
            component = generate_variant_component(scene, tokens, options)
        else:
            component = generate_component(scene, tokens, options)

        fabricated = sorted({
            f"{prop}={value}"
            for styles in component.classifications.values()
            for prop, value in styles.fabricated
        })

        if params.response_format == ResponseFormat.JSON:
            return _truncate(json.dumps({
                'name': component.name,
                'code': component.code,
                'assets': [
                    {'name': a.name, 'format': a.format, 'nodeId': a.node_id, 'path': a.path}
                    for a in component.assets
                ],
                'fabricatedSlots': fabricated,
            }, indent=2))

        lines = [
            f"# Generated Component: {component.name}",
            f"**Source Node:** `{params.node_id}`",
            "",
            "```tsx",
            component.code.rstrip("\n"),
            "```",
        ]
        if component.assets:
            lines.extend(["", "## Assets", ""])
            for asset in component.assets:
                lines.append(f"- `{asset.path}` (node `{asset.node_id}`, {asset.format})")
        if fabricated:
            lines.extend([
                "",
                "## Fallback Styles",
                "",
                "These variant slots had no distinguishing classes in the design and use guessed styles:",
                "",
            ])
            lines.extend(f"- `{slot}`" for slot in fabricated)

        return _truncate("\n".join(lines))

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="figma_generate_theme",
    annotations={
        "title": "Generate Tailwind Theme from Figma",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_generate_theme(params: FigmaThemeInput) -> str:
    """
    Generate CSS custom properties and a Tailwind theme from a file's tokens.

    Tokens come from shared paint, text and effect styles and from local
    variables (color and number). Every theme entry points at its CSS
    variable, so class names produced by figma_get_tailwind_classes resolve.

    Args:
        params: FigmaThemeInput containing:
            - file_key (str): Figma file key
            - response_format: 'markdown' or 'json'

    Returns:
        str: A `:root` CSS block and a `tailwind.config.js` module
    """
    try:
        reader = await _load_reader(params.file_key)
        tokens = extract_design_tokens(reader)
        css = tokens_to_css(tokens)
        config = tokens_to_tailwind(tokens)

        if params.response_format == ResponseFormat.JSON:
            return _truncate(json.dumps({
                'css': css,
                'tailwindConfig': config,
                'tokens': tokens.model_dump(by_alias=True),
            }, indent=2))

        lines = [
            "# Design Theme",
            "",
            "## CSS Variables",
            "",
            "```css",
            css.rstrip("\n"),
            "```",
            "",
            "## tailwind.config.js",
            "",
            "```js",
            config.rstrip("\n"),
            "```",
        ]
        return _truncate("\n".join(lines))

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="tailwind_diff_classes",
    annotations={
        "title": "Diff Tailwind Classes",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def tailwind_diff_classes(params: TailwindDiffInput) -> str:
    """
    Compare two Tailwind class strings.

    Args:
        params: TailwindDiffInput containing:
            - old_classes (str): Original class string
            - new_classes (str): Updated class string
            - response_format: 'markdown' or 'json'

    Returns:
        str: Added, removed and unchanged classes
    """
    try:
        result = diff_tailwind_classes(params.old_classes, params.new_classes)

        if params.response_format == ResponseFormat.JSON:
            return json.dumps({
                'added': result.added,
                'removed': result.removed,
                'unchanged': result.unchanged,
                'hasChanges': result.has_changes,
            }, indent=2)

        lines = ["# Class Diff", ""]
        if not result.has_changes:
            lines.append("No changes.")
        lines.extend(f"+ {cls}" for cls in result.added)
        lines.extend(f"- {cls}" for cls in result.removed)
        if result.unchanged:
            lines.extend(["", f"**Unchanged:** `{' '.join(result.unchanged)}`"])
        return "\n".join(lines)

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="tailwind_cleanup_classes",
    annotations={
        "title": "Clean Up Tailwind Classes",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def tailwind_cleanup_classes(params: TailwindCleanupInput) -> str:
    """
    Deduplicate a Tailwind class string and keep only the last class of each
    conflicting group (e.g. `p-2 p-4` -> `p-4`). Background images stay first.

    Args:
        params: TailwindCleanupInput containing:
            - classes (str): Space-separated classes

    Returns:
        str: The sanitized class string
    """
    try:
        return cleanup_tailwind_classes(params.classes)
    except Exception as e:
        return _handle_api_error(e)


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    """Run the server over stdio; logs go to stderr."""
    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get("FIGMA_TAILWIND_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    mcp.run()


if __name__ == "__main__":
    main()
