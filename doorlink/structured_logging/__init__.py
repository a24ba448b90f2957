"""
Structured logging package for doorlink.

All imports should use explicit paths like
'from doorlink.structured_logging.enhanced_logging_config import get_logger'.

The directory is named 'structured_logging' rather than 'logging' to avoid
shadowing the standard library module.
"""

__all__: list[str] = []
