"""Configuration management for the finance tracker.

This module centralizes all configuration values including paths,
thresholds, display defaults and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in finance_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("FINANCE_TRACKER_DATA_DIR", _PROJECT_ROOT / "data"))
EXPORTS_DIR = DATA_DIR / "exports"

# JSON seed used by the in-memory store
SEED_PATH = Path(
    os.getenv("FINANCE_TRACKER_SEED_PATH", DATA_DIR / "seed.json")
).resolve()

# Transaction list pagination
PAGE_SIZE = int(os.getenv("FINANCE_TRACKER_PAGE_SIZE", "10"))

# Budget status thresholds (percent of budget spent)
NEAR_LIMIT_THRESHOLD = 80.0
OVER_BUDGET_THRESHOLD = 100.0

# Substitution used when a transaction or budget lost its category
FALLBACK_CATEGORY_NAME = "Other"
FALLBACK_CATEGORY_COLOR = "#6b7280"

INCOME_COLOR = "#10b981"
EXPENSE_COLOR = "#ef4444"

CHART_COLORS = [
    '#3b82f6', '#10b981', '#f59e0b', '#ef4444',
    '#8b5cf6', '#06b6d4', '#84cc16', '#f97316',
]

# Series lengths used by the dashboard, income and report views
DASHBOARD_TREND_DAYS = 7
DASHBOARD_RECENT_COUNT = 5
INCOME_TREND_DAYS = 30
REPORT_TREND_MONTHS = 6
REPORT_CATEGORY_LIMIT = 8
REPORT_TOP_CATEGORY_LIMIT = 5
REPORT_DAILY_BUCKETS = 14


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, EXPORTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


def get_seed_path() -> Path:
    """Get the seed file path, re-reading the environment override."""
    override = os.getenv("FINANCE_TRACKER_SEED_PATH")
    return Path(override).resolve() if override else SEED_PATH
