# src/kaspa_brawl/services/matchmaking.py
"""Opponent selection for a new fight."""

from __future__ import annotations

import logging
import secrets

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from kaspa_brawl.models import User

logger = logging.getLogger(__name__)


def guest_opponent_id() -> str:
    return f"guest-{secrets.token_hex(4)}"


def find_opponent(db: Session, player_address: str) -> str:
    """Return the address of a random other player, or a guest id if there is none."""
    opponent = db.execute(
        select(User.address)
        .where(User.address != player_address)
        .order_by(func.random())
        .limit(1)
    ).scalar_one_or_none()
    if opponent is None:
        opponent = guest_opponent_id()
        logger.info("No opponent available for %s, matched with %s", player_address, opponent)
    return opponent
