"""CRUD-style helpers for managing wallet users."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from kaspa_brawl.core.errors import StorageError
from kaspa_brawl.models.user import User

__all__ = [
    "get_user_by_address",
    "get_or_create_user",
]

logger = logging.getLogger(__name__)


def get_user_by_address(db: Session, address: str) -> User | None:
    """Return the user owning ``address``, if any."""
    return db.execute(select(User).where(User.address == address)).scalar_one_or_none()


def get_or_create_user(db: Session, address: str) -> tuple[User, bool]:
    """Return the user for ``address``, inserting it on first login.

    A concurrent insert of the same address loses on the unique constraint
    and falls back to reading the winner's row.

    Returns:
        Tuple of (user, created).
    """
    try:
        user = get_user_by_address(db, address)
        if user is not None:
            return user, False

        user = User(address=address)
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            existing = get_user_by_address(db, address)
            if existing is None:
                raise
            return existing, False
        db.refresh(user)
        logger.info("Created user for address %s", address)
        return user, True
    except SQLAlchemyError as err:
        db.rollback()
        logger.exception("User store failed for address %s", address)
        raise StorageError("User storage unavailable") from err
