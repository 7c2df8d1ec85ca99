# bar_solver/utils.py
# Small utilities used across the project:
# - timing context manager
# - JSON export for plans (bars + join groups + totals)
#
# Keeps dependencies minimal (stdlib only).

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from .metrics import compute_purchase_list
from .types import CuttingPlan, OptimizedPiece


@contextmanager
def timer(label: str = "timer") -> Iterator[Dict[str, float]]:
    """
    Usage:
      with timer("optimize") as t:
          ...
      print(t["seconds"])
    """
    t0 = time.perf_counter()
    payload: Dict[str, float] = {}
    try:
        yield payload
    finally:
        payload["seconds"] = time.perf_counter() - t0


def _piece_to_dict(p: OptimizedPiece) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": p.id,
        "original_id": p.original_id,
        "length": p.length,
        "position": p.position,
        "kerf": p.kerf,
        "margin": p.margin,
        "applied_kerf": p.applied_kerf,
        "applied_margin": p.applied_margin,
    }
    if p.is_join_part:
        out.update(
            {
                "join_part_number": p.join_part_number,
                "total_join_parts": p.total_join_parts,
                "stock_length": p.stock_length,
                "original_length": p.original_length,
            }
        )
    return out


def plan_to_dict(plan: CuttingPlan) -> Dict[str, Any]:
    """
    Convert CuttingPlan to a JSON-friendly dict.
    """
    st = plan.stock_type
    return {
        "stock_type": {"id": st.id, "name": st.name, "width": st.width, "height": st.height},
        "stocks": [
            {
                "id": s.id,
                "length": s.length,
                "remaining_length": s.remaining_length,
                "utilization": s.utilization,
                "pieces": [_piece_to_dict(p) for p in s.pieces],
            }
            for s in plan.stocks
        ],
        "oversized_pieces": [[_piece_to_dict(p) for p in group] for group in plan.oversized_pieces],
        "unplaced": [d.uid for d in plan.unplaced],
        "totals": {
            "num_stocks": plan.num_stocks(),
            "total_used": plan.total_used,
            "total_waste": plan.total_waste,
            "overall_utilization": plan.overall_utilization,
            "purchase": [{"length": L, "count": n} for L, n in compute_purchase_list(plan).items()],
        },
    }


def save_plans_json(plans: Iterable[Tuple[str, CuttingPlan]], path: str | Path, *, indent: int = 2) -> None:
    """Save labelled plans into JSON for debugging/integration."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload: List[Dict[str, Any]] = [{"group": g, **plan_to_dict(p)} for g, p in plans]
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=indent)
