"""
FastAPI dependency injection module for the Xentrix KPI backend.

Key Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- get_insight_builder: Returns the insight builder wired into overviews
- SettingsDep: Type alias for injecting Settings into endpoints
- InsightBuilderDep: Type alias for injecting the insight builder

The insight builder is a dependency rather than a hard import so the overview
endpoint can be served with a different rule set, or with the no-op builder,
by overriding it:

    app.dependency_overrides[get_insight_builder] = lambda: no_insights
"""

from typing import Annotated

from fastapi import Depends

from xentrix.core.config import Settings, get_settings
from xentrix.services.insights import build_insights
from xentrix.services.overview import InsightBuilder


def get_settings_dependency() -> Settings:
    """Return the Settings singleton instance."""
    return get_settings()


def get_insight_builder() -> InsightBuilder:
    """Return the insight builder used by the overview endpoint."""
    return build_insights


SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]

InsightBuilderDep = Annotated[InsightBuilder, Depends(get_insight_builder)]
