"""Errors raised by the data access layer.

Driver errors (``sqlalchemy.exc.SQLAlchemyError``) are never wrapped; they
propagate to the caller after the session has been rolled back.
"""
from __future__ import annotations

from typing import Any


class InfraDBError(Exception):
    """Base class for data access errors."""


class DoesNotExistError(InfraDBError):
    """Raised when a single-row lookup finds no row."""

    def __init__(self, entity: str, key: Any):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} does not exist")


class InvalidParamsError(InfraDBError, ValueError):
    """Raised for filter, page or input combinations the query layer rejects."""
