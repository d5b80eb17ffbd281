"""Allocation normalization."""

from __future__ import annotations

import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from etf_portfolio_server.portfolio.errors import InvalidAllocation
from etf_portfolio_server.portfolio.models import EtfEntry

TARGET_TOTAL = 100.0
TOLERANCE = 0.1
DECIMALS = 2
_QUANTUM = Decimal(1).scaleb(-DECIMALS)


def total_allocation(entries: Sequence[EtfEntry]) -> float:
    return sum(entry.allocation_percentage for entry in entries)


def round_allocation(value: float) -> float:
    """Round to two decimals with exact ties going away from zero."""
    return float(Decimal(value).quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def normalize_allocations(entries: Sequence[EtfEntry]) -> list[EtfEntry]:
    """Rescale allocations so they sum to 100 while keeping their ratios.

    Totals already within 0.1 of 100 are returned untouched. Each rescaled
    value is rounded to two decimals on its own, so the rounded sum may drift
    from 100 by a few hundredths.
    """
    if not entries:
        return []
    total = total_allocation(entries)
    scale = 1.0
    if not math.isfinite(total):
        # Finite allocations whose sum overflows; shrink them before summing.
        scale = max(abs(entry.allocation_percentage) for entry in entries)
        total = sum(entry.allocation_percentage / scale for entry in entries)
    if total <= 0:
        raise InvalidAllocation(total)
    if scale == 1.0 and abs(TARGET_TOTAL - total) <= TOLERANCE:
        return list(entries)
    return [
        entry.with_allocation(round_allocation(entry.allocation_percentage / scale / total * TARGET_TOTAL))
        for entry in entries
    ]
