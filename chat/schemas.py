from datetime import datetime
from typing import Any, Dict, List, Optional
from ninja import Schema
from pydantic import BaseModel, ConfigDict, Field


class MessageIn(Schema):
    receiver_id: int
    body: str


class MarkReadIn(Schema):
    # The counterpart whose messages to the caller are being read.
    sender_id: int
    connection_id: Optional[str] = None


class MessageOut(BaseModel):
    id: int
    sender: int = Field(validation_alias="sender_id")
    sender_variant: str
    receiver: int = Field(validation_alias="receiver_id")
    receiver_variant: str
    organization: int = Field(validation_alias="organization_id")
    body: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConnectionOut(Schema):
    id: str
    rooms: List[str]


class EventsOut(Schema):
    events: List[Dict[str, Any]]
    unread: Dict[str, int]


class MarkReadOut(Schema):
    updated: int
