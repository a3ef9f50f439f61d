"""Data model, value mapping and template definition I/O."""
