# src/kaspa_brawl/models/nonce.py
"""Login challenge records."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kaspa_brawl.db.session import Base
from kaspa_brawl.db.time import utcnow


class Nonce(Base):
    """Single-use challenge a wallet signs to prove key ownership.

    ``used`` only ever flips from False to True, and only through the
    conditional update in the nonce store.
    """

    __tablename__ = "nonce"
    __table_args__ = (Index("ix_nonce_expires_at_used", "expires_at", "used"),)

    value: Mapped[str] = mapped_column(String(128), primary_key=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
