# bar_solver/logger.py
# Per-module loggers for the planner:
#   get_logger("packing").warn("demand skipped", uid="stud#3", length=6100)
#   -> [BAR:packing] WARNING: demand skipped uid=stud#3 length=6100
# Info goes to stdout, warnings/errors to stderr. One global switch silences
# info and warnings for every module (errors are always printed).

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Dict

_state = {"enabled": True}
_loggers: Dict[str, "Logger"] = {}


def _fields(fields: Dict[str, object]) -> str:
    if not fields:
        return ""
    return " " + " ".join(f"{k}={v:g}" if isinstance(v, float) else f"{k}={v}" for k, v in fields.items())


@dataclass
class Logger:
    name: str = ""

    @property
    def prefix(self) -> str:
        return f"[BAR:{self.name}]" if self.name else "[BAR]"

    def info(self, msg: str, **fields: object) -> None:
        if _state["enabled"]:
            print(f"{self.prefix} {msg}{_fields(fields)}", file=sys.stdout)

    def warn(self, msg: str, **fields: object) -> None:
        if _state["enabled"]:
            print(f"{self.prefix} WARNING: {msg}{_fields(fields)}", file=sys.stderr)

    def error(self, msg: str, **fields: object) -> None:
        print(f"{self.prefix} ERROR: {msg}{_fields(fields)}", file=sys.stderr)


def set_enabled(flag: bool) -> None:
    _state["enabled"] = bool(flag)


def is_enabled() -> bool:
    return _state["enabled"]


def get_logger(name: str = "") -> Logger:
    if name not in _loggers:
        _loggers[name] = Logger(name=name)
    return _loggers[name]
