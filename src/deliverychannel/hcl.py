"""HCL loading: render with Jinja2, parse with hcl2, expand ${...} variables."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

import hcl2
import jinja2

logger = logging.getLogger(__name__)

_VAR_PATTERN = re.compile(r"\$\{(?:env\.(\w+)|(\w+))\}")

_BUILTIN_VARS: dict[str, Callable[[], str]] = {
    "CWD": os.getcwd,
}


def load(
    file: Path,
    *,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Load and parse a single HCL file, rendering Jinja2 templates with context."""
    text = file.read_text()
    ctx = context if context is not None else {}
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    try:
        text = env.from_string(text).render(ctx)
    except jinja2.TemplateError as exc:
        raise ValueError(f"{file}: {exc}") from exc
    try:
        return hcl2.loads(text)
    except Exception as exc:
        raise ValueError(f"{file}: {exc}") from exc


def _expand_var(match: re.Match) -> str:
    """Expand a single ${...} variable reference."""
    env_name = match.group(1)
    builtin_name = match.group(2)
    if env_name is not None:
        if env_name not in os.environ:
            logger.warning("Environment variable '%s' is not set", env_name)
        return os.environ.get(env_name, "")
    if builtin_name is not None and builtin_name in _BUILTIN_VARS:
        return _BUILTIN_VARS[builtin_name]()
    logger.warning("Unknown variable '%s'", builtin_name)
    return match.group(0)


def interpolate(value: Any) -> Any:
    """Expand ${env.VAR} and ${CWD} references in a string value."""
    if isinstance(value, str) and "${" in value:
        return _VAR_PATTERN.sub(_expand_var, value)
    return value


def block(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return the attributes of a single unlabeled top-level block, with variables expanded.

    hcl2 parses `name { ... }` as {"name": [{...}]}; a missing block yields {}.
    """
    blocks = data.get(name, [])
    if len(blocks) > 1:
        raise ValueError(f"Duplicate block: '{name}'")
    attrs = blocks[0] if blocks else {}
    return {k: interpolate(v) for k, v in attrs.items()}
