# plantshop/repositories/handoff_repo.py
import json
from datetime import datetime, timezone
from typing import Any

from sqlmodel import Session, select

from plantshop.models.handoff import HandoffEntry


class HandoffRepository:
    """
    Data access layer for the one-shot handoff channel.

    take() is destructive: an entry can be read exactly once.
    Entries nobody reads are removed by purge_older_than().
    """

    def get_entry(
        self, session: Session, channel: str, key: str
    ) -> HandoffEntry | None:
        stmt = select(HandoffEntry).where(
            HandoffEntry.channel == channel, HandoffEntry.key == key
        )
        return session.exec(stmt).first()

    def put(
        self,
        session: Session,
        channel: str,
        key: str,
        payload: dict[str, Any],
    ) -> HandoffEntry:
        entry = self.get_entry(session, channel, key)
        if entry is None:
            entry = HandoffEntry(channel=channel, key=key, payload=json.dumps(payload))
        else:
            entry.payload = json.dumps(payload)
            entry.created_at = datetime.now(timezone.utc)

        session.add(entry)
        session.commit()
        session.refresh(entry)
        return entry

    def take(self, session: Session, channel: str, key: str) -> dict[str, Any] | None:
        entry = self.get_entry(session, channel, key)
        if entry is None:
            return None

        payload = json.loads(entry.payload)
        session.delete(entry)
        session.commit()
        return payload

    def purge_older_than(self, session: Session, cutoff: datetime) -> int:
        """
        Delete entries created before cutoff.

        Returns:
            Number of rows removed.
        """
        stmt = select(HandoffEntry).where(HandoffEntry.created_at < cutoff)
        stale = session.exec(stmt).all()
        for entry in stale:
            session.delete(entry)
        session.commit()
        return len(stale)
