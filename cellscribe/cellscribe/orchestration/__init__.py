"""Context building, multi-output generation and template validation."""

from .orchestrator import DataOrchestrator, format_timestamp
from .validation import validate_data_availability, validate_template_structure

__all__ = [
    "DataOrchestrator",
    "format_timestamp",
    "validate_data_availability",
    "validate_template_structure",
]
