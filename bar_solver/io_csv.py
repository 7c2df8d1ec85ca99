# bar_solver/io_csv.py
# CSV import/export helpers:
# - read requested pieces
# - export placed pieces per bar (the cut list)
# - export oversize join parts
# - export a one-row-per-plan summary
#
# Exports take labelled plans: [(group_name, CuttingPlan), ...].

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from .metrics import compute_purchase_list
from .config import find_stock_type, parse_quantity
from .types import CuttingPlan, Piece, StockSettings, StockType

LabelledPlans = Sequence[Tuple[str, CuttingPlan]]


def read_pieces_csv(path: str | Path, stock_types: List[StockType], settings: StockSettings) -> List[Piece]:
    """
    Header required: id,length,stock_type[,quantity,kerf,margin]
    stock_type may be an id or a name (e.g. 45x95). Missing kerf uses settings.default_kerf.
    """
    path = Path(path)
    pieces: List[Piece] = []
    with path.open("r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        required = {"id", "length", "stock_type"}
        if not required.issubset(set(reader.fieldnames or [])):
            raise ValueError(f"CSV must contain at least columns: {sorted(required)}")
        for row in reader:
            pid = (row.get("id") or "").strip()
            if not pid:
                continue
            kerf = (row.get("kerf") or "").strip()
            pieces.append(
                Piece(
                    id=pid,
                    length=float(row["length"]),
                    stock_type=find_stock_type(stock_types, row["stock_type"].strip()),
                    quantity=parse_quantity(row.get("quantity") or "1", piece_id=pid),
                    kerf=float(kerf) if kerf else float(settings.default_kerf),
                    margin=float(row.get("margin") or "0"),
                )
            )
    return pieces


def export_stocks_csv(plans: LabelledPlans, path: str | Path) -> None:
    """
    One row per placed piece, bars numbered per plan starting at 1.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = [
        "group",
        "stock_type",
        "bar",
        "bar_length",
        "piece_id",
        "length",
        "position",
        "applied_kerf",
        "applied_margin",
    ]

    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for group, plan in plans:
            for bar_no, stock in enumerate(plan.stocks, start=1):
                for p in stock.pieces:
                    w.writerow(
                        {
                            "group": group,
                            "stock_type": plan.stock_type.name,
                            "bar": bar_no,
                            "bar_length": stock.length,
                            "piece_id": p.original_id,
                            "length": p.length,
                            "position": p.position,
                            "applied_kerf": p.applied_kerf,
                            "applied_margin": p.applied_margin,
                        }
                    )


def export_oversize_csv(plans: LabelledPlans, path: str | Path) -> None:
    """
    One row per join part of each oversized piece.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = ["group", "stock_type", "piece_id", "part", "total_parts", "length", "bar_length", "kerf"]

    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for group, plan in plans:
            for parts in plan.oversized_pieces:
                for p in parts:
                    w.writerow(
                        {
                            "group": group,
                            "stock_type": plan.stock_type.name,
                            "piece_id": p.original_id,
                            "part": p.join_part_number,
                            "total_parts": p.total_join_parts,
                            "length": p.length,
                            "bar_length": p.stock_length,
                            "kerf": p.applied_kerf,
                        }
                    )


def export_summary_csv(plans: LabelledPlans, path: str | Path) -> None:
    """
    One row per plan (useful for ordering material).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = [
        "group",
        "stock_type",
        "num_bars",
        "num_oversized",
        "num_unplaced",
        "total_length",
        "total_used",
        "total_waste",
        "utilization_pct",
        "purchase",
    ]

    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for group, plan in plans:
            purchase = compute_purchase_list(plan)
            w.writerow(
                {
                    "group": group,
                    "stock_type": plan.stock_type.name,
                    "num_bars": plan.num_stocks(),
                    "num_oversized": len(plan.oversized_pieces),
                    "num_unplaced": len(plan.unplaced),
                    "total_length": plan.total_stock_length,
                    "total_used": plan.total_used,
                    "total_waste": plan.total_waste,
                    "utilization_pct": round(plan.overall_utilization, 2),
                    "purchase": " ".join(f"{n}x{L:g}" for L, n in purchase.items()),
                }
            )


def export_all(plans: Iterable[Tuple[str, CuttingPlan]], out_dir: str | Path, prefix: str = "plan") -> None:
    """
    Export cut list, oversize join parts, and per-plan summary into out_dir.
    """
    plans = list(plans)
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    export_stocks_csv(plans, out_dir / f"{prefix}_stocks.csv")
    export_oversize_csv(plans, out_dir / f"{prefix}_oversize.csv")
    export_summary_csv(plans, out_dir / f"{prefix}_summary.csv")
