"""
Batch coordinator - bulk reservation toggles across many branches.

One update request per branch, all in flight at once. The coordinator
waits for every request to settle before returning, so one failing branch
never stops the others, and reports exactly which branches failed.
Successful updates are never rolled back and nothing is retried.
"""
import asyncio
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from loguru import logger

from ..models.schemas import Branch, BranchUpdate
from ..error_handling.exceptions import BatchPartialFailure, RequestFailure
from ..error_handling.error_messages import get_error_message
from ..error_handling.logging_config import LogContext, log_batch_event
from .api_client import ApiClient
from .branch_service import update_branch


@dataclass(frozen=True)
class BranchUpdateResult:
    """Terminal outcome of one branch's update request."""
    branch_id: str
    branch_name: str
    error: Optional[RequestFailure] = None
    message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class BatchOutcome:
    """
    Aggregate outcome of a bulk update.

    `results` has one entry per input branch, in input order, whatever
    order the requests completed in.
    """
    results: List[BranchUpdateResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> bool:
        """True only when every branch update succeeded."""
        return all(r.succeeded for r in self.results)

    @property
    def successes(self) -> List[BranchUpdateResult]:
        return [r for r in self.results if r.succeeded]

    @property
    def failures(self) -> List[BranchUpdateResult]:
        return [r for r in self.results if not r.succeeded]

    @property
    def succeeded_ids(self) -> List[str]:
        return [r.branch_id for r in self.successes]

    @property
    def failed_ids(self) -> List[str]:
        return [r.branch_id for r in self.failures]

    def raise_for_failures(self) -> None:
        """
        Raise if any branch update failed.

        Raises:
            BatchPartialFailure: Carrying this outcome
        """
        if not self.succeeded:
            raise BatchPartialFailure(self)


async def _settle_branch_update(
    client: ApiClient,
    branch: Branch,
    patch: BranchUpdate,
) -> BranchUpdateResult:
    """Run one update and capture its failure instead of raising it."""
    try:
        await update_branch(client, branch.id, patch)
    except RequestFailure as e:
        message = get_error_message(e)
        logger.warning(f"Branch {branch.id} ({branch.name}) update failed: {message}")
        return BranchUpdateResult(branch.id, branch.name, error=e, message=message)
    return BranchUpdateResult(branch.id, branch.name)


async def set_reservations_for_branches(
    client: ApiClient,
    branches: Sequence[Branch],
    accepts_reservations: bool,
) -> BatchOutcome:
    """
    Set `accepts_reservations` on every branch in the collection.

    Only the branch-level flag changes; section and table flags are left
    alone. The input is not modified: refresh the snapshot after the batch
    settles to see the new state.

    Args:
        client: Configured API client
        branches: Branches to update
        accepts_reservations: Flag value to send to every branch

    Returns:
        BatchOutcome with one result per branch
    """
    patch = BranchUpdate(accepts_reservations=accepts_reservations)
    event = "DISABLE_ALL" if not accepts_reservations else "ENABLE_ALL"

    if not branches:
        log_batch_event(f"{event} SKIPPED", total=0, details={"reason": "no branches"})
        return BatchOutcome()

    with LogContext(operation=event.lower(), batch_size=len(branches)):
        log_batch_event(f"{event} STARTED", total=len(branches))

        async with asyncio.TaskGroup() as tg:
            tasks = [
                tg.create_task(_settle_branch_update(client, branch, patch))
                for branch in branches
            ]

        outcome = BatchOutcome(results=[task.result() for task in tasks])

        if outcome.succeeded:
            log_batch_event(f"{event} COMPLETED", total=outcome.total)
        else:
            log_batch_event(
                f"{event} PARTIAL_FAILURE",
                total=outcome.total,
                failed_ids=outcome.failed_ids,
                details={"succeeded": len(outcome.succeeded_ids)},
            )

    return outcome


async def disable_all_branches(
    client: ApiClient,
    branches: Sequence[Branch],
) -> BatchOutcome:
    """
    Stop every branch in the collection from accepting reservations.

    Safe to repeat: every request carries `accepts_reservations: false`
    whatever the branch's current state.

    Args:
        client: Configured API client
        branches: Branches to disable

    Returns:
        BatchOutcome; check `.succeeded` or call `.raise_for_failures()`
    """
    return await set_reservations_for_branches(client, branches, accepts_reservations=False)


async def enable_all_branches(
    client: ApiClient,
    branches: Sequence[Branch],
) -> BatchOutcome:
    """Let every branch in the collection accept reservations again."""
    return await set_reservations_for_branches(client, branches, accepts_reservations=True)
