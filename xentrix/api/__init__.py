"""
API package for the Xentrix KPI backend.

Routers:
    - kpi: Summary, agent stats, quantile ranking, overview and daily trend
"""

from xentrix.api.kpi import router as kpi_router

__all__ = ['kpi_router']
