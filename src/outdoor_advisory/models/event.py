"""Event records supplied by the scheduling subsystem."""

from __future__ import annotations

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from outdoor_advisory.models.location import Coordinate


class EventRecord(BaseModel):
    """A scheduled outdoor event that needs a weather advisory.

    Only the fields the advisory engine reads are modelled here; participants,
    venue details and the rest of the event live with the caller.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Event identifier from the scheduling system")
    scheduled_time: AwareDatetime = Field(..., description="When the event starts")
    coordinate: Coordinate = Field(..., description="Where the event takes place")
    activity: str | None = Field(
        default=None,
        description="Activity profile name (None = the default profile)",
    )
