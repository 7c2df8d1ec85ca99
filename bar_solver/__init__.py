# bar_solver/__init__.py
"""
Bar Solver package (linear stock / lumber cutting).

Current state:
- First-fit-decreasing packing of requested pieces onto catalog bar lengths
  - kerf charged per interior cut, margin after each piece (waived on a flush fit)
  - pieces longer than the longest bar split into join parts
- Exact CP-SAT strategy for small jobs (minimum purchased length)
- Validation, purchase list, CSV/JSON export, JSON/CSV job runners
"""

from .types import (
    StockType,
    StockSettings,
    Piece,
    PieceGroup,
    Demand,
    expand_pieces,
    OptimizedPiece,
    OptimizedStock,
    CuttingPlan,
)

from .ids import SequenceIds, UuidIds

from .config import DEFAULTS, DEFAULT_STOCK_TYPES, make_default_settings

from .metrics import PlanTotals, compute_plan_totals, compute_purchase_list

from .packing import FirstFitDecreasing, PackingStrategy, PackResult

from .solver_cp_sat import CpSatExact, CpSatParams

from .optimizer import optimize_cutting, optimize_all

__all__ = [
    # types
    "StockType",
    "StockSettings",
    "Piece",
    "PieceGroup",
    "Demand",
    "expand_pieces",
    "OptimizedPiece",
    "OptimizedStock",
    "CuttingPlan",
    # ids
    "SequenceIds",
    "UuidIds",
    # config
    "DEFAULTS",
    "DEFAULT_STOCK_TYPES",
    "make_default_settings",
    # metrics
    "PlanTotals",
    "compute_plan_totals",
    "compute_purchase_list",
    # strategies
    "PackingStrategy",
    "PackResult",
    "FirstFitDecreasing",
    "CpSatExact",
    "CpSatParams",
    # optimizer
    "optimize_cutting",
    "optimize_all",
]
