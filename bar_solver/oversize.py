# bar_solver/oversize.py
# Pieces longer than the longest catalog bar are split into join parts:
# - every non-final part takes a full max-length bar (and is charged kerf for the join cut)
# - the final part takes the smallest catalog bar that holds the remainder (no kerf)
#
# Join groups are reported separately from the packed bars; each group is one
# physical piece assembled from several bars.

from __future__ import annotations

from dataclasses import replace
from typing import List

from .ids import IdFactory
from .types import Demand, OptimizedPiece, StockSettings


def is_oversized(demand: Demand, settings: StockSettings) -> bool:
    return demand.length > settings.max_length


def split_oversized(demand: Demand, settings: StockSettings, ids: IdFactory) -> List[OptimizedPiece]:
    """
    Split one oversized demand into sequential join parts covering it end-to-end.
    """
    max_length = settings.max_length
    remaining = demand.length
    parts: List[OptimizedPiece] = []

    while remaining > 0:
        if remaining <= max_length:
            # Final part; falls back to a max-length bar if the catalog is empty.
            stock_length = settings.smallest_length_at_least(remaining)
            if stock_length is None:
                stock_length = max_length
            part_length = remaining
        else:
            stock_length = max_length
            part_length = max_length

        is_final = part_length >= remaining
        kerf = 0 if is_final else demand.kerf
        parts.append(
            OptimizedPiece(
                id=ids("piece"),
                original_id=demand.piece.id,
                length=part_length,
                position=0,
                stock_type=demand.stock_type,
                kerf=kerf,
                margin=demand.margin,
                applied_kerf=kerf,
                is_join_part=True,
                join_part_number=len(parts) + 1,
                stock_length=stock_length,
                original_length=demand.length,
            )
        )
        remaining -= part_length

    return [replace(p, total_join_parts=len(parts)) for p in parts]
