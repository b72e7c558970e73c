"""Shared utilities: datetime and id generators."""

from portal.shared.utils.datetime import ensure_utc, utc_now, whole_years_since
from portal.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "whole_years_since",
]
