# bar_solver/packing.py
# Bin packing of (non-oversized) demands onto catalog bars.
#
# Strategies share one interface:
#   strategy.pack(demands, settings, stock_type, ids) -> PackResult
# The default is first-fit over demands already sorted longest-first
# (first-fit-decreasing). It is a greedy heuristic, not an optimal packing.
#
# Charging rules:
# - existing bar: kerf is charged unless the bar is still empty; margin is
#   charged unless the bar already has pieces and the piece fits flush
# - new bar: the first piece is charged length + kerf + margin

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .ids import IdFactory
from .logger import get_logger
from .types import Demand, OptimizedPiece, OptimizedStock, StockSettings, StockType


@dataclass
class PackResult:
    stocks: List[OptimizedStock] = field(default_factory=list)
    unplaced: List[Demand] = field(default_factory=list)


class PackingStrategy:
    """Interface for packing strategies."""

    name = "base"

    def pack(
        self,
        demands: Sequence[Demand],
        settings: StockSettings,
        stock_type: StockType,
        ids: IdFactory,
    ) -> PackResult:
        raise NotImplementedError


def fit_on_stock(stock: OptimizedStock, demand: Demand) -> Optional[Tuple[float, float]]:
    """
    Return (applied_kerf, applied_margin) if the demand fits on an existing bar,
    otherwise None.
    """
    has_pieces = len(stock.pieces) > 0
    kerf = demand.kerf if has_pieces else 0
    effective = demand.length + kerf

    # A flush follow-up piece has nothing after it to space away from.
    flush = has_pieces and stock.remaining_length == effective
    margin = 0 if flush else demand.margin

    if stock.remaining_length >= effective + margin:
        return kerf, margin
    return None


def place_on_stock(
    stock: OptimizedStock,
    demand: Demand,
    applied_kerf: float,
    applied_margin: float,
    ids: IdFactory,
) -> OptimizedPiece:
    """Append the demand at the current end of the bar and deduct its footprint."""
    piece = OptimizedPiece(
        id=ids("piece"),
        original_id=demand.piece.id,
        length=demand.length,
        position=stock.length - stock.remaining_length,
        stock_type=demand.stock_type,
        kerf=demand.kerf,
        margin=demand.margin,
        applied_kerf=applied_kerf,
        applied_margin=applied_margin,
    )
    stock.pieces.append(piece)
    stock.remaining_length -= piece.footprint
    return piece


def open_stock(
    demand: Demand,
    settings: StockSettings,
    ids: IdFactory,
) -> Optional[OptimizedStock]:
    """
    Open a new bar with the smallest catalog length holding the demand and place it.
    Returns None if no catalog length is long enough.
    """
    length = settings.smallest_length_at_least(demand.length)
    if length is None:
        return None

    stock = OptimizedStock(
        id=ids("stock"),
        length=length,
        stock_type=demand.stock_type,
        remaining_length=length,
    )
    # Kerf and margin are charged in full, truncated only where they would
    # run past the end of the bar (remaining never goes negative).
    room = length - demand.length
    applied_kerf = min(demand.kerf, room)
    applied_margin = min(demand.margin, room - applied_kerf)
    place_on_stock(stock, demand, applied_kerf, applied_margin, ids)
    return stock


class FirstFitDecreasing(PackingStrategy):
    """
    Place each demand (in the given, longest-first order) into the first open bar
    that accepts it; open a new bar when none does.
    """

    name = "ffd"

    def pack(
        self,
        demands: Sequence[Demand],
        settings: StockSettings,
        stock_type: StockType,
        ids: IdFactory,
    ) -> PackResult:
        res = PackResult()
        for demand in demands:
            placed = False
            for stock in res.stocks:
                if not stock.stock_type.matches(demand.stock_type):
                    continue
                charge = fit_on_stock(stock, demand)
                if charge is not None:
                    place_on_stock(stock, demand, charge[0], charge[1], ids)
                    placed = True
                    break

            if placed:
                continue

            stock = open_stock(demand, settings, ids)
            if stock is None:
                get_logger("packing").warn(
                    "no catalog length long enough; demand skipped", uid=demand.uid, length=demand.length
                )
                res.unplaced.append(demand)
                continue
            res.stocks.append(stock)
        return res
