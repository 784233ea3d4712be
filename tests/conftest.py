"""
Pytest configuration and shared fixtures.
"""
import sys
import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set
from urllib.parse import unquote

import httpx
import pytest
from loguru import logger

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from branch_reservations.config import Settings
from branch_reservations.models import Branch
from branch_reservations.services import ApiClient


API_ROOT = "https://reservations.test/api"


def entity_id(request: httpx.Request) -> str:
    """Decoded last path segment, so encoded slashes stay inside the id."""
    raw_path = request.url.raw_path.split(b"?", 1)[0].decode("ascii")
    return unquote(raw_path.rsplit("/", 1)[-1])


class FakeReservationsApi:
    """
    In-memory stand-in for the reservations API behind httpx.MockTransport.

    Records every request and can be told to reject specific branches or
    tables, or to fail at the network level.
    """

    def __init__(self, branches: Optional[List[Dict[str, Any]]] = None):
        self.branches = branches if branches is not None else []
        self.requests: List[httpx.Request] = []
        self.failing_branches: Dict[str, tuple] = {}
        self.failing_tables: Dict[str, tuple] = {}
        self.unreachable_branches: Set[str] = set()
        self.listing_response: Optional[httpx.Response] = None
        self.before_response: Optional[Callable] = None

    def reject_branch(self, branch_id: str, status: int = 404, message: str = "Branch not found") -> None:
        self.failing_branches[branch_id] = (status, message)

    def reject_table(self, table_id: str, status: int = 404, message: str = "Table not found") -> None:
        self.failing_tables[table_id] = (status, message)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def put_requests(self, prefix: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == "PUT" and r.url.path.startswith(f"/api/{prefix}/")
        ]

    def put_bodies(self, prefix: str) -> Dict[str, dict]:
        return {
            entity_id(r): json.loads(r.content)
            for r in self.put_requests(prefix)
        }

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.before_response is not None:
            await self.before_response(request)

        path = request.url.path
        if request.method == "GET" and path == "/api/branches":
            if self.listing_response is not None:
                return self.listing_response
            return httpx.Response(200, json={"data": self.branches})

        if request.method == "PUT" and path.startswith("/api/branches/"):
            branch_id = entity_id(request)
            if branch_id in self.unreachable_branches:
                raise httpx.ConnectError("connection refused", request=request)
            if branch_id in self.failing_branches:
                status, message = self.failing_branches[branch_id]
                return httpx.Response(status, json={"message": message})
            return httpx.Response(200, json={"data": {"id": branch_id}})

        if request.method == "PUT" and path.startswith("/api/tables/"):
            table_id = entity_id(request)
            if table_id in self.failing_tables:
                status, message = self.failing_tables[table_id]
                return httpx.Response(status, json={"message": message})
            return httpx.Response(204)

        return httpx.Response(404, json={"message": "Not Found"})


def make_branch(branch_id: str, name: Optional[str] = None, accepts: bool = True, sections=None) -> Dict[str, Any]:
    """Build a branch payload as the API returns it."""
    return {
        "id": branch_id,
        "name": name or f"Branch {branch_id}",
        "reference": f"REF-{branch_id}",
        "accepts_reservations": accepts,
        "reservation_duration": 90,
        "reservation_times": {
            "saturday": [["12:00", "15:00"], ["19:00", "23:00"]],
            "sunday": [["12:00", "22:00"]],
        },
        "sections": sections if sections is not None else [],
    }


@pytest.fixture(autouse=True)
def quiet_logs():
    """Keep loguru output to warnings and above during tests."""
    logger.remove()
    handler_id = logger.add(sys.stderr, level="WARNING")
    yield
    logger.remove(handler_id)


@pytest.fixture
def settings() -> Settings:
    """Explicit settings, independent of the environment."""
    return Settings(
        RESERVATIONS_API_URL=API_ROOT,
        RESERVATIONS_API_TOKEN="test-token",
        RESERVATIONS_API_TIMEOUT=5,
        _env_file=None,
    )


@pytest.fixture
def hierarchy_payload() -> List[Dict[str, Any]]:
    """Two branches, the second one without sections."""
    return [
        make_branch(
            "br-1",
            name="Downtown",
            sections=[
                {
                    "id": "sec-1",
                    "branch_id": "br-1",
                    "name": "Terrace",
                    "tables": [
                        {"id": "tb-1", "section_id": "sec-1", "name": "T1", "accepts_reservations": True},
                        {"id": "tb-2", "section_id": "sec-1", "name": "T2", "accepts_reservations": False},
                    ],
                },
                {"id": "sec-2", "branch_id": "br-1", "name": "Hall", "tables": []},
            ],
        ),
        make_branch("br-2", name="Airport", accepts=False, sections=[]),
    ]


@pytest.fixture
def fake_api(hierarchy_payload) -> FakeReservationsApi:
    return FakeReservationsApi(hierarchy_payload)


@pytest.fixture
async def api_client(settings, fake_api):
    """ApiClient wired to the fake API."""
    async with ApiClient(settings, transport=fake_api.transport) as client:
        yield client


@pytest.fixture
def branches_abc() -> List[Branch]:
    return [Branch.model_validate(make_branch(i, name=i)) for i in ("A", "B", "C")]
