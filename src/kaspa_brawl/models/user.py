# src/kaspa_brawl/models/user.py
"""SQLAlchemy models for wallet identities."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from kaspa_brawl.db.session import Base
from kaspa_brawl.db.time import utcnow


class User(Base):
    """Player identity keyed by a Kaspa wallet address."""

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    address: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
