"""Template definition parsing and serialization (JSON or YAML)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import ValidationError

from ..rendering.io import atomic_write_text
from .models import TemplateDefinition

logger = logging.getLogger(__name__)

Format = Literal["json", "yaml"]

_YAML_SUFFIXES = {".yaml", ".yml"}


class TemplateLoadError(ValueError):
    """Raised when a template definition cannot be parsed."""


def format_for_path(path: Path) -> Format:
    return "yaml" if path.suffix.lower() in _YAML_SUFFIXES else "json"


def parse_template_definition(
    text: str, fmt: Format = "json", *, source: str = "<string>"
) -> TemplateDefinition:
    """Parse a template definition document.

    Args:
        text: Document text
        fmt: "json" or "yaml"
        source: Name used in error messages

    Returns:
        Parsed template definition
    """
    try:
        raw: Any = yaml.safe_load(text) if fmt == "yaml" else json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise TemplateLoadError(f"Invalid {fmt.upper()} in {source}: {e}") from e

    if not isinstance(raw, dict):
        raise TemplateLoadError(
            f"Template definition in {source} must be an object, got {type(raw).__name__}"
        )

    try:
        return TemplateDefinition.model_validate(raw)
    except ValidationError as e:
        raise TemplateLoadError(f"Invalid template definition in {source}: {e}") from e


def template_to_dict(template: TemplateDefinition) -> dict[str, Any]:
    """Dump only the fields that were set, under their persisted names."""
    return template.model_dump(mode="json", by_alias=True, exclude_unset=True)


def serialize_template_definition(
    template: TemplateDefinition, fmt: Format = "json"
) -> str:
    payload = template_to_dict(template)
    if fmt == "yaml":
        return yaml.safe_dump(
            payload,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def load_template_definition(path: Path) -> TemplateDefinition:
    """Load a template definition file; the format follows the file suffix."""
    if not path.exists():
        raise FileNotFoundError(f"Template definition not found: {path}")

    logger.debug(f"Loading template definition: {path}")
    text = path.read_text(encoding="utf-8")
    return parse_template_definition(text, format_for_path(path), source=str(path))


def save_template_definition(template: TemplateDefinition, path: Path) -> Path:
    atomic_write_text(path, serialize_template_definition(template, format_for_path(path)))
    logger.info(f"Saved template definition → {path}")
    return path
