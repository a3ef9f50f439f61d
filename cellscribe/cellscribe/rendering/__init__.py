"""Template engine adapter, filters, starter templates and output delivery."""

from .engine import OutputRenderError, TemplateRenderer, create_environment, mime_type_for

__all__ = [
    "OutputRenderError",
    "TemplateRenderer",
    "create_environment",
    "mime_type_for",
]
