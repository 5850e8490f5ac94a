"""
Core Utilities Package

Modules:
    - time: Epoch timestamp normalization to UTC datetimes
"""

from core.utils.time import to_utc_datetime, current_utc_datetime

__all__ = ["to_utc_datetime", "current_utc_datetime"]
