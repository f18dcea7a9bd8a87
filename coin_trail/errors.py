# coin_trail/errors.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    DATA_INTEGRITY = "data_integrity"
    STORAGE = "storage"


@dataclass
class ActionResult:
    """Outcome of a create/delete action, handed back to the page instead of raising."""

    error: bool = False
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def success(cls, id: Optional[int] = None) -> "ActionResult":
        return cls(id=id)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "ActionResult":
        return cls(error=True, kind=kind, message=message)
