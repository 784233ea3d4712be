"""
Example usage of the bulk disable flow.

Fetches the branch hierarchy, disables reservations on every branch and
reports per-branch results, then re-fetches to show the server's state.
Reads RESERVATIONS_API_URL and RESERVATIONS_API_TOKEN from the environment.
"""
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from branch_reservations.config import get_settings
from branch_reservations.error_handling import RequestFailure, classify, init_logging
from branch_reservations.models import find_branch
from branch_reservations.services import ApiClient, disable_all_branches, fetch_hierarchy


async def run_example() -> int:
    settings = get_settings()

    async with ApiClient(settings) as client:
        try:
            branches = await fetch_hierarchy(client)
        except RequestFailure as e:
            print(f"Could not load branches: {classify(e)}")
            return 1

        print(f"Loaded {len(branches)} branches")
        print("-" * 70)

        outcome = await disable_all_branches(client, branches)
        for result in outcome.results:
            status = "disabled" if result.succeeded else f"failed ({result.message})"
            print(f"{result.branch_name:<30} {status}")
        print("-" * 70)

        # The local snapshot is stale after the batch; read it again
        refreshed = await fetch_hierarchy(client)
        for result in outcome.failures:
            current = find_branch(refreshed, result.branch_id)
            if current is not None:
                state = "open" if current.accepts_reservations else "closed"
                print(f"{current.name:<30} still {state} on the server")
        still_open = [b.name for b in refreshed if b.accepts_reservations]
        print(f"Branches still accepting reservations: {still_open or 'none'}")

    return 0 if outcome.succeeded else 1


def main():
    init_logging("development")
    sys.exit(asyncio.run(run_example()))


if __name__ == "__main__":
    main()
