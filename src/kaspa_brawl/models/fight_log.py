# src/kaspa_brawl/models/fight_log.py
"""Stored results of arena fights."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kaspa_brawl.db.session import Base
from kaspa_brawl.db.time import utcnow

from .user import User

logger = logging.getLogger(__name__)


def _new_fight_id() -> str:
    return uuid.uuid4().hex


class FightLog(Base):
    """A finished fight between two players.

    ``log`` holds the JSON-encoded list of fight steps; the step whose
    ``type`` is ``"end"`` names the winner in its ``attacker`` field.
    """

    __tablename__ = "fight_log"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_fight_id)
    player_a_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    player_b_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    log: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )

    player_a: Mapped[User] = relationship("User", foreign_keys=[player_a_id], lazy="joined")
    player_b: Mapped[User] = relationship("User", foreign_keys=[player_b_id], lazy="joined")

    @property
    def steps(self) -> list[dict[str, Any]]:
        """Return the decoded fight steps, or an empty list for corrupt logs."""
        try:
            parsed = json.loads(self.log)
        except json.JSONDecodeError:
            logger.warning("Fight log %s holds invalid JSON", self.id)
            return []
        return parsed if isinstance(parsed, list) else []

    @property
    def winner(self) -> str:
        """Return the attacker of the final step, or an empty string."""
        for step in self.steps:
            if isinstance(step, dict) and step.get("type") == "end":
                return str(step.get("attacker", ""))
        return ""
