# plantshop/models/handoff.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class HandoffEntry(SQLModel, table=True):
    """
    One-shot message between checkout and the confirmation view.

    Written once at order completion, read once, then deleted.
    (channel, key) is unique; channel is the order id.
    """

    __tablename__ = "handoff_entries"
    __table_args__ = (UniqueConstraint("channel", "key"),)

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    channel: str = Field(
        index=True,
        description="Order id the entry belongs to",
    )

    # datiCliente | ultimoOrdine
    key: str = Field(
        index=True,
        description="Entry name within the channel",
    )

    payload: str = Field(
        description="JSON document",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
