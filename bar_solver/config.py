# bar_solver/config.py
# Centralized defaults and configuration helpers.
# Keeps "magic numbers" (catalog bounds, kerf, solver budgets) in one place.

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple

from .types import StockSettings, StockType


@dataclass(frozen=True)
class Defaults:
    # Typical lumber yard catalog: 2.7 m .. 5.4 m in 30 cm steps
    min_length: int = 2700
    max_length: int = 5400
    increment: int = 300
    unit: str = "mm"

    # Typical circular/miter saw blade
    default_kerf: int = 3
    default_margin: int = 0

    # Exact (CP-SAT) strategy budgets
    cp_sat_time_limit_s: float = 5.0
    cp_sat_max_demands: int = 40


DEFAULTS = Defaults()


DEFAULT_STOCK_TYPES: List[StockType] = [
    StockType(id="1", name="45×45", width=45, height=45, is_default=True),
    StockType(id="2", name="45×70", width=45, height=70, is_default=True),
    StockType(id="3", name="45×95", width=45, height=95, is_default=True),
    StockType(id="4", name="45×145", width=45, height=145, is_default=True),
    StockType(id="5", name="45×195", width=45, height=195, is_default=True),
    StockType(id="6", name="45×220", width=45, height=220, is_default=True),
    StockType(id="7", name="70×70", width=70, height=70, is_default=True),
]


def make_default_settings(
    *,
    min_length: Optional[float] = None,
    max_length: Optional[float] = None,
    increment: Optional[float] = None,
    default_kerf: Optional[float] = None,
    unit: Optional[str] = None,
) -> StockSettings:
    """
    Convenience factory for the default catalog, with optional overrides.
    """
    settings = StockSettings(
        min_length=DEFAULTS.min_length,
        max_length=DEFAULTS.max_length,
        increment=DEFAULTS.increment,
        default_kerf=DEFAULTS.default_kerf,
        unit=DEFAULTS.unit,
    )
    overrides = {
        k: v
        for k, v in {
            "min_length": min_length,
            "max_length": max_length,
            "increment": increment,
            "default_kerf": default_kerf,
            "unit": unit,
        }.items()
        if v is not None
    }
    return replace(settings, **overrides) if overrides else settings


def parse_section_text(section_text: str) -> Tuple[float, float]:
    """
    Parse '45x95' (or '45×95') -> (45, 95)
    """
    s = section_text.lower().replace(" ", "").replace("×", "x")
    if "x" not in s:
        raise ValueError("section_text must be like '45x95'")
    a, b = s.split("x", 1)
    return float(a), float(b)


def merge_stock_types(user_types: Iterable[StockType]) -> List[StockType]:
    """
    Default stock types are always present; user-defined (non-default) types
    are appended. A user type reusing a default id is ignored.
    """
    out = list(DEFAULT_STOCK_TYPES)
    known = {t.id for t in out}
    for t in user_types:
        if t.is_default or t.id in known:
            continue
        out.append(t)
        known.add(t.id)
    return out


def find_stock_type(types: Iterable[StockType], key: str) -> StockType:
    """Look up a stock type by id, then by name (the '×' and 'x' spellings are equivalent)."""
    types = list(types)
    for t in types:
        if t.id == key:
            return t
    norm = key.replace("×", "x").replace(" ", "").lower()
    for t in types:
        if t.name.replace("×", "x").replace(" ", "").lower() == norm:
            return t
    raise ValueError(f"Unknown stock type: {key!r}")


def parse_quantity(value: object, *, piece_id: str = "") -> int:
    """
    Parse a piece quantity; accepts 3, 3.0, "3" but rejects 2.5 instead of truncating it.
    """
    q = float(value)  # type: ignore[arg-type]
    if not q.is_integer():
        raise ValueError(f"quantity must be a whole number for {piece_id or 'piece'}: {value!r}")
    return int(q)
