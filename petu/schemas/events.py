from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


# ---------- Event ----------
class EventCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    category: str = "other"
    date: str = Field(min_length=1, max_length=64)
    location: str = Field(min_length=1, max_length=200)
    max_players: int = Field(ge=1)
    min_quorum: int = Field(ge=1)
    host_name: Optional[str] = Field(default=None, max_length=120)
    requires_approval: bool = False

    @model_validator(mode="after")
    def check_quorum_within_capacity(self):
        if self.max_players < self.min_quorum:
            raise ValueError("minQuorum cannot be greater than maxPlayers")
        return self


class EventOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int | str
    title: str
    description: str = ""
    category: str
    date: str
    location: str
    max_players: int
    min_quorum: int
    current_players: int = 0
    status: str
    requires_approval: bool = False
    host_name: Optional[str] = None
    created_at: Optional[datetime] = None
    quorum_percentage: int
    quorum_status: str


class EventCreatedOut(BaseModel):
    success: bool = True
    event: EventOut


# ---------- Join ----------
class JoinOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    event_id: int | str
    requires_approval: bool
    request_id: Optional[int | str] = None
    event: Optional[EventOut] = None
