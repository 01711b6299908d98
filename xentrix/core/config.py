"""
Settings and environment management module for the Xentrix KPI backend.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Sensible defaults matching the v1 rule set of the KPI engine
- Singleton pattern via @lru_cache for efficient access

Policy Defaults:
- min_sample_calls: 30 (Minimum calls before an agent is judged by agent rules)
- csat_target / csat_critical: 85 / 80 (Center CSAT warn / critical bounds)
- fcr_target / fcr_critical: 80 / 70 (Center FCR warn / critical bounds)
- aht_too_low_sec / aht_too_high_sec: 300 / 900 (Agent AHT band, seconds)
- aht_many_nulls_min_rows / aht_many_nulls_rate: 10 / 0.3 (Null-rate flagging)
- rank_ratio / rank_min_items / rank_min_sample: 0.1 / 2 / 30 (Quantile ranking)

All thresholds are policy, not invariants: override them through the
environment (e.g. ``AHT_TOO_HIGH_SEC=720``) without touching engine code.

Usage:
    from xentrix.core.config import get_settings

    settings = get_settings()
    min_calls = settings.min_sample_calls
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        api_title: Title reported by the FastAPI application.
        cors_origins: Origins allowed by the CORS middleware.
        min_sample_calls: Minimum calls for an agent to be eligible for agent rules.
        csat_target: Center CSAT below this value raises a warning insight.
        csat_critical: Center CSAT below this value raises a critical insight.
        fcr_target: Center FCR below this value raises a warning insight.
        fcr_critical: Center FCR below this value raises a critical insight.
        aht_too_low_sec: Agent average AHT below this is a quality risk.
        aht_too_high_sec: Agent average AHT above this is an efficiency risk.
        aht_many_nulls_min_rows: Minimum rows before null-rate flags apply.
        aht_many_nulls_rate: Null rate at or above which a metric is flagged.
        max_problems: Maximum number of problem labels returned.
        rank_ratio: Default quantile ratio for top/bottom agent selection.
        rank_min_items: Minimum members guaranteed on each ranking side.
        rank_min_sample: Minimum calls for an agent to be ranked.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    # =========================================================================
    # Service
    # =========================================================================

    api_title: str = 'Xentrix KPI API'

    # Next.js dev server by default; override in production
    cors_origins: List[str] = [
        'http://localhost:3000',
        'http://127.0.0.1:3000',
    ]

    # =========================================================================
    # Insight rule policy
    # =========================================================================

    min_sample_calls: int = 30

    csat_target: float = 85.0
    csat_critical: float = 80.0

    fcr_target: float = 80.0
    fcr_critical: float = 70.0

    aht_too_low_sec: float = 300.0
    aht_too_high_sec: float = 900.0

    max_problems: int = 8

    # =========================================================================
    # Metric flagging
    # =========================================================================

    aht_many_nulls_min_rows: int = 10
    aht_many_nulls_rate: float = 0.3

    # =========================================================================
    # Quantile ranking
    # =========================================================================

    rank_ratio: float = 0.1
    rank_min_items: int = 2
    rank_min_sample: int = 30


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The cached settings instance.

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
