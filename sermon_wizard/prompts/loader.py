"""
Prompt template loader.

Loads .md prompt templates from sermon_wizard/prompts/ and renders them
by substituting {{VARIABLE_NAME}} placeholders.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

# Directory where prompt template .md files live
_PROMPTS_DIR = Path(__file__).parent

# Pattern to match {{VARIABLE_NAME}} placeholders
_PLACEHOLDER_RE = re.compile(r"\{\{([A-Z_][A-Z0-9_]*)\}\}")


@lru_cache(maxsize=16)
def load_prompt(template_name: str) -> str:
    """Load a prompt template by name.

    Args:
        template_name: Name of the template file (without .md extension).
            Example: "sermon_v1"

    Returns:
        The raw template string with {{PLACEHOLDER}} markers intact.

    Raises:
        FileNotFoundError: If the template file does not exist.
    """
    path = _PROMPTS_DIR / f"{template_name}.md"
    if not path.is_file():
        available = sorted(p.stem for p in _PROMPTS_DIR.glob("*.md"))
        raise FileNotFoundError(
            f"Prompt template '{template_name}' not found at {path}. "
            f"Available templates: {available}"
        )
    return path.read_text(encoding="utf-8")


def render_prompt(template_name: str, **variables: str) -> str:
    """Load a template and fill in {{VARIABLE}} placeholders.

    Uses simple string replacement (not str.format or f-strings) so that
    user-supplied values containing braces are inserted verbatim. Values are
    substituted in a single pass, so text inside a value is never re-expanded.

    Raises:
        FileNotFoundError: If the template file does not exist.
        ValueError: If a placeholder in the template has no matching variable.
    """
    template = load_prompt(template_name)
    template_placeholders = set(_PLACEHOLDER_RE.findall(template))
    for var_name in variables:
        if var_name not in template_placeholders:
            logger.warning(
                "Variable '%s' provided but not found in template '%s'",
                var_name,
                template_name,
            )
    missing = template_placeholders - variables.keys()
    if missing:
        raise ValueError(
            f"Unfilled placeholders in template '{template_name}': "
            f"{sorted(missing)}. "
            f"Provide these as keyword arguments."
        )
    return _PLACEHOLDER_RE.sub(lambda m: str(variables[m.group(1)]), template)
