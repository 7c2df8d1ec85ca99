# bar_solver/types.py
# Core data structures for linear (1D) bar cutting.
# Keep this file dependency-light so it can be imported everywhere.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional


# ----------------------------
# Inputs
# ----------------------------

@dataclass(frozen=True)
class StockType:
    """Cross-section of the material, e.g. 45x95. Used only as a partition key."""
    id: str
    name: str
    width: float
    height: float
    is_default: bool = False

    def matches(self, other: StockType) -> bool:
        return self.id == other.id


@dataclass(frozen=True)
class StockSettings:
    """
    Catalog of purchasable bar lengths:
      min_length, min_length + increment, ... <= max_length
    """
    min_length: float
    max_length: float
    increment: float
    default_kerf: float = 3
    unit: str = "mm"

    def __post_init__(self):
        if self.increment <= 0:
            raise ValueError(f"increment must be > 0 (got {self.increment})")
        if self.min_length <= 0 or self.max_length <= 0:
            raise ValueError(
                f"Invalid catalog bounds: min_length={self.min_length}, max_length={self.max_length}"
            )

    def available_lengths(self) -> List[float]:
        # Index based so float increments do not accumulate rounding error.
        out: List[float] = []
        k = 0
        while True:
            length = self.min_length + k * self.increment
            if length > self.max_length:
                break
            out.append(length)
            k += 1
        return out

    def smallest_length_at_least(self, length: float) -> Optional[float]:
        for candidate in self.available_lengths():
            if candidate >= length:
                return candidate
        return None


@dataclass(frozen=True)
class Piece:
    """A requested linear piece (quantity N = N identical unit demands)."""
    id: str
    length: float
    stock_type: StockType
    quantity: int = 1
    kerf: float = 0
    margin: float = 0

    def __post_init__(self):
        if self.length <= 0:
            raise ValueError(f"Invalid length for {self.id}: {self.length}")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError(f"quantity must be an integer >= 1 for {self.id}")
        if self.kerf < 0 or self.margin < 0:
            raise ValueError(f"kerf/margin must be >= 0 for {self.id}: kerf={self.kerf}, margin={self.margin}")


@dataclass(frozen=True)
class PieceGroup:
    """Named collection of pieces (e.g. 'Frame', 'Roof')."""
    name: str
    items: List[Piece] = field(default_factory=list)


@dataclass(frozen=True)
class Demand:
    """A single unit of demand (expanded from quantity)."""
    uid: str              # e.g. "rafter#3"
    piece: Piece

    @property
    def length(self) -> float:
        return self.piece.length

    @property
    def kerf(self) -> float:
        return self.piece.kerf

    @property
    def margin(self) -> float:
        return self.piece.margin

    @property
    def stock_type(self) -> StockType:
        return self.piece.stock_type


def expand_pieces(pieces: Iterable[Piece]) -> List[Demand]:
    """Expand quantity into unit demands (stable order)."""
    out: List[Demand] = []
    for p in pieces:
        for k in range(1, p.quantity + 1):
            out.append(Demand(uid=f"{p.id}#{k}", piece=p))
    return out


# ----------------------------
# Outputs / plan objects
# ----------------------------

@dataclass(frozen=True)
class OptimizedPiece:
    """
    A placed piece. `kerf`/`margin` are the piece's own settings (for display);
    `applied_kerf`/`applied_margin` are what was actually deducted from the bar.
    Join metadata is only set for parts of a split oversized piece.
    """
    id: str
    original_id: str
    length: float
    position: float
    stock_type: StockType
    kerf: float = 0
    margin: float = 0
    applied_kerf: float = 0
    applied_margin: float = 0
    is_join_part: bool = False
    join_part_number: Optional[int] = None
    total_join_parts: Optional[int] = None
    stock_length: Optional[float] = None
    original_length: Optional[float] = None  # length of the split demand

    @property
    def footprint(self) -> float:
        return self.length + self.applied_kerf + self.applied_margin


@dataclass
class OptimizedStock:
    """One purchased bar and the pieces laid out on it (placement order = position order)."""
    id: str
    length: float
    stock_type: StockType
    pieces: List[OptimizedPiece] = field(default_factory=list)
    remaining_length: float = 0

    @property
    def used_length(self) -> float:
        return self.length - self.remaining_length

    @property
    def utilization(self) -> float:
        return (self.used_length / self.length) * 100 if self.length > 0 else 0.0


@dataclass
class CuttingPlan:
    """Full plan for one stock type."""
    stock_type: StockType
    stocks: List[OptimizedStock] = field(default_factory=list)
    oversized_pieces: List[List[OptimizedPiece]] = field(default_factory=list)
    total_waste: float = 0
    total_used: float = 0
    overall_utilization: float = 0.0

    # Demands the packer could not place (no catalog length large enough)
    unplaced: List[Demand] = field(default_factory=list)

    def num_stocks(self) -> int:
        return len(self.stocks)

    def placed_count(self) -> int:
        return sum(len(s.pieces) for s in self.stocks)

    @property
    def total_stock_length(self) -> float:
        return sum(s.length for s in self.stocks)
