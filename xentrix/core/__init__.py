"""
Core infrastructure package for the Xentrix KPI backend.

Provides:
- Configuration management via pydantic-settings

Re-exports the settings so callers can write:

    from xentrix.core import get_settings

The FastAPI dependencies live in xentrix.core.dependencies and are imported
from there directly; they depend on the services package, which itself reads
configuration from this package.
"""

from xentrix.core.config import Settings, get_settings

__all__ = [
    'Settings',
    'get_settings',
]
