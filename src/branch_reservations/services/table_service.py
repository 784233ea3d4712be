"""
Table service - toggles reservation acceptance on a single table.
"""
from typing import Mapping, Union
from urllib.parse import quote

from loguru import logger

from ..models.schemas import TableUpdate
from .api_client import ApiClient


TABLES_PATH = "/tables"


def table_path(table_id: str) -> str:
    """Path of one table, with the id encoded as a single segment."""
    return f"{TABLES_PATH}/{quote(table_id, safe='')}"


async def update_table(
    client: ApiClient,
    table_id: str,
    patch: Union[TableUpdate, Mapping],
) -> None:
    """
    Set a table's `accepts_reservations` flag.

    Args:
        client: Configured API client
        table_id: Identifier of the table to update
        patch: `{"accepts_reservations": bool}`

    Raises:
        ValueError: If table_id is empty
        pydantic.ValidationError: If patch is not a valid table update
        TransportFailure: If the server could not be reached
        RequestRejected: If the server rejected the update
    """
    if not table_id:
        raise ValueError("table_id cannot be empty")

    if not isinstance(patch, TableUpdate):
        patch = TableUpdate.model_validate(dict(patch))

    await client.put(table_path(table_id), json=patch.to_payload())
    logger.debug(f"Table {table_id} accepts_reservations={patch.accepts_reservations}")
