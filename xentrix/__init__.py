"""
Xentrix KPI Backend Package.

Metrics-and-insights engine for call-center activity records, with a thin
FastAPI service layer.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration and dependencies
    - models: Pydantic schemas and enums
    - services: Normalizer, metric computers, aggregation, ranking, insights
"""

__version__ = "1.0.0"
