# bar_solver/metrics.py
# Metrics for bar cutting:
# - totals across opened bars (length, used, waste, utilization)
# - purchase list (how many bars of each catalog length to buy)
#
# These metrics are strategy-agnostic: they work for any packing strategy.

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

from .types import CuttingPlan, OptimizedStock


@dataclass(frozen=True)
class PlanTotals:
    total_length: float
    total_used: float
    total_waste: float
    overall_utilization: float


def compute_plan_totals(stocks: Iterable[OptimizedStock]) -> PlanTotals:
    """
    Aggregate over opened bars. Utilization is 0 when no bar was opened.
    """
    total_length = 0.0
    total_used = 0.0
    for s in stocks:
        total_length += s.length
        total_used += s.length - s.remaining_length

    waste = total_length - total_used
    utilization = (total_used / total_length) * 100 if total_length > 0 else 0.0
    return PlanTotals(
        total_length=total_length,
        total_used=total_used,
        total_waste=waste,
        overall_utilization=utilization,
    )


def compute_purchase_list(plan: CuttingPlan) -> Dict[float, int]:
    """
    Bars to buy per catalog length, including the bars consumed by oversize join parts.
    Keys are sorted ascending.
    """
    counts: Dict[float, int] = {}
    for s in plan.stocks:
        counts[s.length] = counts.get(s.length, 0) + 1
    for group in plan.oversized_pieces:
        for part in group:
            if part.stock_length is None:
                continue
            counts[part.stock_length] = counts.get(part.stock_length, 0) + 1
    return dict(sorted(counts.items()))
