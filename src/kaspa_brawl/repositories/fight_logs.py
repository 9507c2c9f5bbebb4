"""Data access helpers for fight logs."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from kaspa_brawl.models.fight_log import FightLog

__all__ = ["FightLogRepository"]


class FightLogRepository:
    """Thin wrapper around database access for fight logs."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, fight_id: str) -> FightLog | None:
        """Return a fight log by identifier."""
        result = self.session.execute(select(FightLog).where(FightLog.id == fight_id))
        return result.scalars().first()

    def list_recent(self, limit: int) -> list[FightLog]:
        """Return fight logs sorted newest first."""
        result = self.session.execute(
            select(FightLog).order_by(FightLog.created_at.desc()).limit(limit)
        )
        return list(result.scalars().unique())
