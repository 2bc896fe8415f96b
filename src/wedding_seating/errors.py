"""Result codes and the errors the seating core raises."""
from __future__ import annotations

from enum import Enum


class Status(str, Enum):
    OK = "ok"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    TABLE_FULL = "table_full"
    NO_OP = "no_op"


class SeatingError(Exception):
    """Base class for business conditions that leave the state unchanged."""

    status = Status.VALIDATION_ERROR


class ValidationError(SeatingError):
    """Empty or invalid input, e.g. a blank name or a seat out of range."""

    status = Status.VALIDATION_ERROR


class NotFoundError(SeatingError):
    status = Status.NOT_FOUND


class TableFullError(SeatingError):
    status = Status.TABLE_FULL


class NoOpError(SeatingError):
    """The operation would not change anything."""

    status = Status.NO_OP
