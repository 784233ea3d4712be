"""
Pydantic models for the branch → section → table hierarchy.
"""
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, ConfigDict

from ..error_handling.exceptions import HierarchyIntegrityError


# Weekday key -> ordered [start, end] windows, e.g. {"saturday": [("12:00", "15:00")]}
ReservationTimes = Dict[str, List[Tuple[str, str]]]


class Table(BaseModel):
    """
    Leaf seating unit with its own reservation-acceptance flag.
    """
    id: str = Field(..., min_length=1)
    section_id: Optional[str] = Field(None, description="Owning section (back-reference)")
    name: str = ""
    accepts_reservations: bool = False

    model_config = ConfigDict(extra="ignore")


class Section(BaseModel):
    """
    Named subdivision of a branch owning a set of tables.
    """
    id: str = Field(..., min_length=1)
    branch_id: Optional[str] = Field(None, description="Owning branch (back-reference)")
    name: str = ""
    tables: List[Table] = Field(default_factory=list)

    @field_validator("tables", mode="before")
    @classmethod
    def null_tables_to_empty(cls, v):
        """The API sends null instead of [] for sections without tables."""
        return [] if v is None else v

    model_config = ConfigDict(extra="ignore")


class Branch(BaseModel):
    """
    Physical restaurant location with its reservation policy.
    """
    id: str = Field(..., min_length=1)
    name: str = ""
    reference: str = ""
    accepts_reservations: bool = False
    reservation_duration: int = Field(0, ge=0, description="Reservation length in minutes")
    reservation_times: ReservationTimes = Field(default_factory=dict)
    sections: List[Section] = Field(default_factory=list)

    @field_validator("sections", mode="before")
    @classmethod
    def null_sections_to_empty(cls, v):
        return [] if v is None else v

    @field_validator("reservation_times", mode="before")
    @classmethod
    def null_times_to_empty(cls, v):
        # Branches without a schedule come back as null or []
        return {} if v in (None, []) else v

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": "8d82b48a",
                "name": "Downtown",
                "reference": "B01",
                "accepts_reservations": True,
                "reservation_duration": 90,
                "reservation_times": {
                    "saturday": [["12:00", "15:00"], ["19:00", "23:00"]]
                },
                "sections": [
                    {
                        "id": "a1c0",
                        "branch_id": "8d82b48a",
                        "name": "Terrace",
                        "tables": [
                            {
                                "id": "t-01",
                                "section_id": "a1c0",
                                "name": "T1",
                                "accepts_reservations": True
                            }
                        ]
                    }
                ]
            }
        }
    )


class BranchesResponse(BaseModel):
    """
    Envelope returned by the branch listing endpoint.
    """
    data: List[Branch]

    model_config = ConfigDict(extra="ignore")


class BranchUpdate(BaseModel):
    """
    Partial update for a branch. Only fields explicitly set are sent.
    """
    name: Optional[str] = None
    reference: Optional[str] = None
    accepts_reservations: Optional[bool] = None
    reservation_duration: Optional[int] = Field(None, ge=0)
    reservation_times: Optional[ReservationTimes] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("*", mode="before")
    @classmethod
    def set_fields_not_null(cls, v, info):
        """Defaults are not validated, so None here was passed explicitly."""
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null; omit it to leave it unchanged")
        return v

    def to_payload(self) -> dict:
        """JSON body containing only the fields that were set."""
        return self.model_dump(mode="json", exclude_unset=True)


class TableUpdate(BaseModel):
    """
    Tables only expose the reservation-acceptance toggle.
    """
    accepts_reservations: bool

    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> dict:
        return self.model_dump(mode="json")


# ============================================================================
# Snapshot helpers
# ============================================================================

def validate_hierarchy(branches: List[Branch]) -> List[Branch]:
    """
    Check that every back-reference points at its containing entity.

    Back-references the server omitted are not checked.

    Args:
        branches: Hierarchy snapshot

    Returns:
        The same list, for chaining

    Raises:
        HierarchyIntegrityError: On the first mismatched back-reference
    """
    for branch in branches:
        for section in branch.sections:
            if section.branch_id is not None and section.branch_id != branch.id:
                raise HierarchyIntegrityError(
                    entity="section",
                    entity_id=section.id,
                    expected_parent=branch.id,
                    actual_parent=section.branch_id,
                )
            for table in section.tables:
                if table.section_id is not None and table.section_id != section.id:
                    raise HierarchyIntegrityError(
                        entity="table",
                        entity_id=table.id,
                        expected_parent=section.id,
                        actual_parent=table.section_id,
                    )
    return branches


def iter_tables(branches: List[Branch]) -> Iterator[Tuple[Branch, Section, Table]]:
    """Yield every table with its owning branch and section, in snapshot order."""
    for branch in branches:
        for section in branch.sections:
            for table in section.tables:
                yield branch, section, table


def find_branch(branches: List[Branch], branch_id: str) -> Optional[Branch]:
    """Return the branch with the given id, or None."""
    return next((b for b in branches if b.id == branch_id), None)


def find_table(branches: List[Branch], table_id: str) -> Optional[Table]:
    """Return the table with the given id, or None."""
    return next((t for _, _, t in iter_tables(branches) if t.id == table_id), None)
