"""Cellscribe - spreadsheet data to document renderer.

Reads Excel tables and named values, binds them into a Jinja2 context and
renders user-authored templates into JSON, XML, CSV, HTML or text files.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .core.models import RenderedOutput, TemplateContext, TemplateDefinition
from .orchestration import DataOrchestrator
from .rendering import TemplateRenderer

__all__ = [
    "DataOrchestrator",
    "RenderedOutput",
    "TemplateContext",
    "TemplateDefinition",
    "TemplateRenderer",
]
