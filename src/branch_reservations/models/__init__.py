"""
Models package - Pydantic schemas for the branch hierarchy and update payloads.
"""
from .schemas import (
    Branch,
    Section,
    Table,
    BranchesResponse,
    BranchUpdate,
    TableUpdate,
    ReservationTimes,
    validate_hierarchy,
    iter_tables,
    find_branch,
    find_table,
)

__all__ = [
    # Hierarchy
    "Branch",
    "Section",
    "Table",
    "BranchesResponse",
    "ReservationTimes",
    # Update payloads
    "BranchUpdate",
    "TableUpdate",
    # Snapshot helpers
    "validate_hierarchy",
    "iter_tables",
    "find_branch",
    "find_table",
]
