"""HTTP service exposing cellscribe rendering and validation."""

__version__ = "0.1.0"
