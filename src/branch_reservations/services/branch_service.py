"""
Branch service - reads the branch hierarchy and updates single branches.

This service handles:
- Fetching the full branch -> section -> table tree in one request
- Partial updates of one branch's reservation settings
"""
from typing import List, Mapping, Union
from urllib.parse import quote

from loguru import logger
from pydantic import ValidationError

from ..models.schemas import Branch, BranchesResponse, BranchUpdate, validate_hierarchy
from ..error_handling.exceptions import RequestRejected
from ..error_handling.logging_config import log_performance
from .api_client import ApiClient


BRANCHES_PATH = "/branches"

# Eager-load sections and their tables so the tree arrives in one round trip
HIERARCHY_INCLUDES = {
    "include[0]": "sections",
    "include[1]": "sections.tables",
}


def branch_path(branch_id: str) -> str:
    """Path of one branch, with the id encoded as a single segment."""
    return f"{BRANCHES_PATH}/{quote(branch_id, safe='')}"


@log_performance("fetch_hierarchy")
async def fetch_hierarchy(client: ApiClient) -> List[Branch]:
    """
    Fetch every branch with its sections and tables.

    Args:
        client: Configured API client

    Returns:
        Branches in the order the server returned them

    Raises:
        TransportFailure: If the server could not be reached
        RequestRejected: If the server rejected the request or sent a body
            that is not a branch listing
        HierarchyIntegrityError: If a back-reference points at the wrong parent
    """
    status_code, body = await client.send("GET", BRANCHES_PATH, params=HIERARCHY_INCLUDES)

    try:
        response = BranchesResponse.model_validate(body)
    except ValidationError as e:
        logger.error(f"Unexpected branch listing body: {e}")
        raise RequestRejected(
            status_code=status_code,
            server_message="The server returned an unexpected branch listing.",
            body=body,
            method="GET",
            url=f"{client.base_url}{BRANCHES_PATH}",
            original_error=e,
        ) from e

    branches = validate_hierarchy(response.data)
    logger.info(f"Fetched {len(branches)} branches")
    return branches


async def update_branch(
    client: ApiClient,
    branch_id: str,
    patch: Union[BranchUpdate, Mapping],
) -> None:
    """
    Send a partial update for one branch.

    Only the fields present in `patch` are sent; the server leaves the rest
    untouched. Nothing is retried.

    Args:
        client: Configured API client
        branch_id: Identifier of the branch to update
        patch: Fields to change

    Raises:
        ValueError: If branch_id is empty or patch sets no fields
        pydantic.ValidationError: If patch contains unknown or invalid fields
        TransportFailure: If the server could not be reached
        RequestRejected: If the server rejected the update
    """
    if not branch_id:
        raise ValueError("branch_id cannot be empty")

    if not isinstance(patch, BranchUpdate):
        patch = BranchUpdate.model_validate(dict(patch))

    payload = patch.to_payload()
    if not payload:
        raise ValueError("Branch update must set at least one field")

    await client.put(branch_path(branch_id), json=payload)
    logger.debug(f"Updated branch {branch_id}: {sorted(payload)}")
