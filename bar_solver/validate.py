# bar_solver/validate.py
# Validation utilities:
# - bar accounting (used == sum of footprints, remaining >= 0, cumulative positions)
# - bar lengths drawn from the catalog
# - oversize join groups cover the original piece end-to-end
# - reconciliation of requested vs planned unit demands
#
# Useful both during development and to sanity-check strategy output.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .types import CuttingPlan, OptimizedPiece, OptimizedStock, Piece, StockSettings

_TOL = 1e-6


@dataclass(frozen=True)
class ValidationIssue:
    level: str   # "ERROR" or "WARN"
    message: str
    stock_index: Optional[int] = None
    piece_id: Optional[str] = None


def _close(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=0.0, abs_tol=_TOL)


def validate_stock(stock: OptimizedStock, index: int, settings: StockSettings) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    if stock.remaining_length < -_TOL:
        issues.append(
            ValidationIssue(
                level="ERROR",
                message=f"Negative remaining length {stock.remaining_length} on bar of {stock.length}",
                stock_index=index,
            )
        )

    if not any(_close(stock.length, L) for L in settings.available_lengths()):
        issues.append(
            ValidationIssue(
                level="ERROR",
                message=f"Bar length {stock.length} is not a catalog length",
                stock_index=index,
            )
        )

    offset = 0.0
    for p in stock.pieces:
        if not _close(p.position, offset):
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=f"Piece position {p.position} != expected {offset}",
                    stock_index=index,
                    piece_id=p.original_id,
                )
            )
        if not p.stock_type.matches(stock.stock_type):
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=f"Piece of stock type {p.stock_type.name} on bar of {stock.stock_type.name}",
                    stock_index=index,
                    piece_id=p.original_id,
                )
            )
        offset += p.footprint

    if not _close(offset, stock.used_length):
        issues.append(
            ValidationIssue(
                level="ERROR",
                message=f"Sum of footprints {offset} != used length {stock.used_length}",
                stock_index=index,
            )
        )
    return issues


def validate_oversize_group(
    group: List[OptimizedPiece],
    settings: StockSettings,
    original_length: Optional[float] = None,
) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    if not group:
        return [ValidationIssue(level="ERROR", message="Empty oversize group")]

    pid = group[0].original_id
    n = len(group)
    for k, part in enumerate(group, start=1):
        final = k == n
        if part.total_join_parts != n or part.join_part_number != k:
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=f"Join part numbering {part.join_part_number}/{part.total_join_parts} != {k}/{n}",
                    piece_id=pid,
                )
            )
        if final:
            if part.length > settings.max_length + _TOL:
                issues.append(
                    ValidationIssue(level="ERROR", message=f"Final part {part.length} exceeds max", piece_id=pid)
                )
            if part.applied_kerf != 0:
                issues.append(
                    ValidationIssue(level="ERROR", message="Kerf charged on final join part", piece_id=pid)
                )
        elif not _close(part.length, settings.max_length):
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=f"Non-final join part {part.length} != max length {settings.max_length}",
                    piece_id=pid,
                )
            )

    if original_length is not None and not _close(sum(p.length for p in group), original_length):
        issues.append(
            ValidationIssue(
                level="ERROR",
                message=f"Join parts sum {sum(p.length for p in group)} != piece length {original_length}",
                piece_id=pid,
            )
        )
    return issues


def reconcile_demands(plan: CuttingPlan, pieces: Iterable[Piece]) -> List[ValidationIssue]:
    """
    Requested unit demands (of the plan's stock type) must equal
    placed pieces + oversize groups + unplaced demands.
    """
    issues: List[ValidationIssue] = []
    requested = sum(p.quantity for p in pieces if p.stock_type.matches(plan.stock_type))
    accounted = plan.placed_count() + len(plan.oversized_pieces) + len(plan.unplaced)
    if requested != accounted:
        issues.append(
            ValidationIssue(
                level="ERROR",
                message=f"Requested {requested} pieces, plan accounts for {accounted}",
            )
        )
    for d in plan.unplaced:
        issues.append(
            ValidationIssue(
                level="WARN",
                message=f"Demand {d.uid} ({d.length}) was not placed: no catalog length is long enough",
                piece_id=d.piece.id,
            )
        )
    return issues


def validate_plan(
    plan: CuttingPlan,
    settings: StockSettings,
    pieces: Optional[Iterable[Piece]] = None,
) -> List[ValidationIssue]:
    """
    Validate a whole plan. Returns a list of issues (empty if OK).
    """
    issues: List[ValidationIssue] = []
    if pieces is not None:
        pieces = list(pieces)

    for idx, stock in enumerate(plan.stocks):
        issues.extend(validate_stock(stock, idx, settings))

    for group in plan.oversized_pieces:
        # Checked against the demand each group was split from (piece ids may repeat).
        original = group[0].original_length if group else None
        issues.extend(validate_oversize_group(group, settings, original))

    if not _close(plan.total_waste + plan.total_used, plan.total_stock_length):
        issues.append(ValidationIssue(level="ERROR", message="total_waste + total_used != total bar length"))
    if not (0.0 <= plan.overall_utilization <= 100.0 + _TOL):
        issues.append(
            ValidationIssue(level="ERROR", message=f"Utilization out of range: {plan.overall_utilization}")
        )

    if pieces is not None:
        issues.extend(reconcile_demands(plan, pieces))

    return issues


def raise_on_errors(issues: List[ValidationIssue]) -> None:
    errs = [i for i in issues if i.level.upper() == "ERROR"]
    if errs:
        msg = "\n".join(
            f"[{e.level}] bar={e.stock_index} piece={e.piece_id} :: {e.message}" for e in errs
        )
        raise ValueError("Validation failed:\n" + msg)
