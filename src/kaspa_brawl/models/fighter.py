# src/kaspa_brawl/models/fighter.py
"""Player fighters, one per wallet."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kaspa_brawl.db.session import Base
from kaspa_brawl.db.time import utcnow

logger = logging.getLogger(__name__)


class Fighter(Base):
    """The fighter a wallet has registered.

    Searchable fields get their own columns; everything else the game keeps
    about the fighter (stats, equipment, skills) lives in ``data`` as JSON.
    """

    __tablename__ = "fighter"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    address: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    fighter_class: Mapped[str] = mapped_column(String(16), nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    experience: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    data: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    @property
    def attributes(self) -> dict[str, Any]:
        """Return the decoded free-form fighter data."""
        try:
            parsed = json.loads(self.data)
        except json.JSONDecodeError:
            logger.warning("Fighter %s holds invalid JSON", self.address)
            return {}
        return parsed if isinstance(parsed, dict) else {}
