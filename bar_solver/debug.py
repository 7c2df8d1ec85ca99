# bar_solver/debug.py
# Debug / inspection helpers:
# - pretty-print bars and their pieces
# - oversize join groups
# - helpful when comparing strategies

from __future__ import annotations

from typing import Iterable, List

from .metrics import compute_purchase_list
from .types import CuttingPlan, OptimizedPiece, OptimizedStock


def print_pieces(pieces: Iterable[OptimizedPiece]) -> None:
    for p in pieces:
        print(
            f"  {p.original_id:20s} pos={p.position:8g} len={p.length:8g} "
            f"kerf={p.applied_kerf:g} margin={p.applied_margin:g}"
        )


def print_stock(stock: OptimizedStock, index: int) -> None:
    print(
        f"Bar {index + 1}: {stock.length:g}  pieces={len(stock.pieces)}  "
        f"remaining={stock.remaining_length:g}  util={stock.utilization:.1f}%"
    )
    print_pieces(stock.pieces)


def print_join_group(group: List[OptimizedPiece]) -> None:
    head = group[0]
    total = sum(p.length for p in group)
    print(f"Joined {head.original_id}: {total:g} from {len(group)} parts")
    for p in group:
        print(f"  part {p.join_part_number}/{p.total_join_parts}: {p.length:g} from bar {p.stock_length:g}")


def print_plan(plan: CuttingPlan, title: str = "") -> None:
    print(f"=== {title or plan.stock_type.name} ===")
    for i, s in enumerate(plan.stocks):
        print_stock(s, i)
    for group in plan.oversized_pieces:
        print_join_group(group)
    for d in plan.unplaced:
        print(f"UNPLACED {d.uid}: {d.length:g}")
    buy = ", ".join(f"{n} x {L:g}" for L, n in compute_purchase_list(plan).items())
    print(f"Buy: {buy or '-'}")
    print(
        f"Used {plan.total_used:g}  waste {plan.total_waste:g}  "
        f"utilization {plan.overall_utilization:.1f}%"
    )
