"""Cache operations (query, insert, update)."""

from .base import BaseOperation
from .insert import InsertOperations
from .query import QueryOperations
from .update import UpdateOperations

__all__ = [
    "BaseOperation",
    "InsertOperations",
    "QueryOperations",
    "UpdateOperations",
]
