# bar_solver/ids.py
# Identity generation for placed pieces and bars.
# The optimizer takes any callable `ids(kind) -> str`; kinds used are "stock" and "piece".

from __future__ import annotations

import uuid
from typing import Callable, Dict

IdFactory = Callable[[str], str]


class UuidIds:
    """Random UUID4 ids (default)."""

    def __call__(self, kind: str) -> str:
        return str(uuid.uuid4())


class SequenceIds:
    """Deterministic ids: 'stock-1', 'stock-2', 'piece-1', ... (one counter per kind)."""

    def __init__(self) -> None:
        self.counters: Dict[str, int] = {}

    def __call__(self, kind: str) -> str:
        n = self.counters.get(kind, 0) + 1
        self.counters[kind] = n
        return f"{kind}-{n}"
