# bar_solver/io_json.py
# Load a cutting job from JSON into StockSettings + stock types + piece groups.
#
# Expected JSON shape:
# {
#   "settings": {"min_length": 2700, "max_length": 5400, "increment": 300, "default_kerf": 3, "unit": "mm"},
#   "stock_types": [{"id": "8", "name": "35x70", "width": 35, "height": 70}],
#   "groups": [
#     {"name": "Frame", "items": [{"id": "stud", "length": 2400, "stock_type": "3", "quantity": 12, "margin": 5}]}
#   ]
# }
# A flat "pieces": [...] list may be given instead of "groups". Keys are also
# accepted in camelCase (minLength, stockType, defaultKerf, ...).

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import DEFAULTS, find_stock_type, make_default_settings, merge_stock_types, parse_quantity
from .types import Piece, PieceGroup, StockSettings, StockType


@dataclass(frozen=True)
class JobSpec:
    settings: StockSettings
    stock_types: List[StockType]
    groups: List[PieceGroup] = field(default_factory=list)

    def all_pieces(self) -> List[Piece]:
        return [p for g in self.groups for p in g.items]


def _get(d: Dict[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in d:
        return d[snake]
    return d.get(camel, default)


def parse_settings(data: Optional[Dict[str, Any]]) -> StockSettings:
    data = data or {}
    return make_default_settings(
        min_length=_get(data, "min_length", "minLength"),
        max_length=_get(data, "max_length", "maxLength"),
        increment=data.get("increment"),
        default_kerf=_get(data, "default_kerf", "defaultKerf"),
        unit=data.get("unit"),
    )


def parse_stock_type(data: Dict[str, Any]) -> StockType:
    sid = str(data.get("id") or data.get("name") or "").strip()
    if not sid:
        raise ValueError(f"Stock type missing id/name: {data}")
    return StockType(
        id=sid,
        name=str(data.get("name") or sid),
        width=float(data["width"]),
        height=float(data["height"]),
        is_default=bool(_get(data, "is_default", "isDefault", False)),
    )


def parse_piece(
    data: Dict[str, Any],
    stock_types: List[StockType],
    settings: StockSettings,
    *,
    fallback_id: str = "",
) -> Piece:
    pid = str(data.get("id") or data.get("name") or fallback_id).strip()
    if not pid:
        raise ValueError(f"Piece missing id/name: {data}")

    st = _get(data, "stock_type", "stockType")
    if isinstance(st, dict):
        st = st.get("id") or st.get("name")
    if st is None:
        raise ValueError(f"Piece {pid} missing stock_type")
    stock_type = find_stock_type(stock_types, str(st))

    kerf = data.get("kerf")
    return Piece(
        id=pid,
        length=float(data["length"]),
        stock_type=stock_type,
        quantity=parse_quantity(data.get("quantity", data.get("qty", 1)), piece_id=pid),
        kerf=float(kerf) if kerf is not None else float(settings.default_kerf),
        margin=float(data.get("margin", DEFAULTS.default_margin)),
    )


def parse_job(data: Dict[str, Any]) -> JobSpec:
    settings = parse_settings(data.get("settings"))
    user_types = [parse_stock_type(t) for t in (_get(data, "stock_types", "stockTypes") or [])]
    stock_types = merge_stock_types(user_types)

    groups: List[PieceGroup] = []
    for gi, g in enumerate(data.get("groups") or []):
        name = str(g.get("name") or f"Group {gi + 1}")
        items = [
            parse_piece(it, stock_types, settings, fallback_id=f"{name}-{k + 1}")
            for k, it in enumerate(g.get("items") or [])
        ]
        groups.append(PieceGroup(name=name, items=items))

    flat = data.get("pieces") or []
    if flat:
        items = [
            parse_piece(it, stock_types, settings, fallback_id=f"piece-{k + 1}")
            for k, it in enumerate(flat)
        ]
        groups.append(PieceGroup(name="", items=items))

    if not groups:
        raise ValueError("JSON job has no 'groups' or 'pieces'.")

    return JobSpec(settings=settings, stock_types=stock_types, groups=groups)


def load_job_json(path: str | Path) -> JobSpec:
    """
    Load a job definition from a JSON file.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("JSON job must be an object.")
    return parse_job(data)
