"""
Services package - API transport, single-entity operations and bulk updates.
"""
from .api_client import ApiClient
from .branch_service import fetch_hierarchy, update_branch
from .table_service import update_table
from .batch_coordinator import (
    BatchOutcome,
    BranchUpdateResult,
    disable_all_branches,
    enable_all_branches,
    set_reservations_for_branches,
)

__all__ = [
    "ApiClient",
    "fetch_hierarchy",
    "update_branch",
    "update_table",
    "BatchOutcome",
    "BranchUpdateResult",
    "disable_all_branches",
    "enable_all_branches",
    "set_reservations_for_branches",
]
