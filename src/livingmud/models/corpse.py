"""Corpse entity left behind when a living dies."""

from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Corpse(BaseModel):
    """Transient container holding what a dead living carried.

    The corpse's contents are the items whose ``container_uid`` is the
    corpse's uid. A corpse lying in a room has ``location`` set; one that
    has been picked up has ``container_uid`` set instead and will not decay
    until it is put down again.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
    )

    uid: UUID = Field(default_factory=uuid4, description="Unique identifier")
    corpse_of: str = Field(description="Short description of the deceased")
    original_uid: UUID | None = Field(default=None, description="Uid of the deceased")
    location: str | None = Field(default=None, description="Room the corpse lies in")
    container_uid: UUID | None = Field(default=None, description="Living carrying the corpse")
    decay_at: int | None = Field(default=None, description="Tick the next decay check is due")

    @computed_field(description="Name used in messages")
    @property
    def short(self) -> str:
        return f"the corpse of {self.corpse_of}"


__all__ = ["Corpse"]
