# bar_solver/optimizer.py
# The cutting optimizer: (pieces, catalog settings, stock type) -> CuttingPlan.
#
# Steps:
#   1. keep pieces of the target stock type, expand quantities into unit demands
#   2. stable sort, longest first
#   3. oversized demands (> catalog max) are split into join groups
#   4. the rest is packed by the strategy (first-fit-decreasing by default)
#   5. totals
#
# Pure and synchronous: no I/O, no state shared between calls.

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .ids import IdFactory, UuidIds
from .metrics import compute_plan_totals
from .oversize import is_oversized, split_oversized
from .packing import FirstFitDecreasing, PackingStrategy
from .types import CuttingPlan, Demand, Piece, StockSettings, StockType, expand_pieces


def optimize_cutting(
    pieces: Iterable[Piece],
    settings: StockSettings,
    stock_type: StockType,
    *,
    strategy: Optional[PackingStrategy] = None,
    ids: Optional[IdFactory] = None,
) -> CuttingPlan:
    """
    Build the cutting plan for one stock type.
    Pieces of other stock types are ignored.
    """
    strategy = strategy or FirstFitDecreasing()
    ids = ids or UuidIds()

    matching = [p for p in pieces if p.stock_type.matches(stock_type)]
    demands = sorted(expand_pieces(matching), key=lambda d: -d.length)

    plan = CuttingPlan(stock_type=stock_type)
    to_pack: List[Demand] = []
    for d in demands:
        if is_oversized(d, settings):
            plan.oversized_pieces.append(split_oversized(d, settings, ids))
        else:
            to_pack.append(d)

    packed = strategy.pack(to_pack, settings, stock_type, ids)
    plan.stocks = packed.stocks
    plan.unplaced = packed.unplaced

    totals = compute_plan_totals(plan.stocks)
    plan.total_used = totals.total_used
    plan.total_waste = totals.total_waste
    plan.overall_utilization = totals.overall_utilization
    return plan


def stock_types_in(pieces: Iterable[Piece]) -> List[StockType]:
    """Distinct stock types in first-seen order."""
    out: List[StockType] = []
    seen = set()
    for p in pieces:
        if p.stock_type.id not in seen:
            seen.add(p.stock_type.id)
            out.append(p.stock_type)
    return out


def optimize_all(
    pieces: Iterable[Piece],
    settings: StockSettings,
    *,
    stock_types: Optional[Iterable[StockType]] = None,
    strategy: Optional[PackingStrategy] = None,
    ids: Optional[IdFactory] = None,
) -> Dict[str, CuttingPlan]:
    """
    One plan per stock type, keyed by stock type id.
    Without `stock_types`, every stock type present in `pieces` is planned.
    """
    pieces = list(pieces)
    types = list(stock_types) if stock_types is not None else stock_types_in(pieces)
    ids = ids or UuidIds()
    return {
        t.id: optimize_cutting(pieces, settings, t, strategy=strategy, ids=ids)
        for t in types
    }
