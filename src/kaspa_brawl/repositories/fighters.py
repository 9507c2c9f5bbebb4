"""Data access helpers for fighters."""
from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from kaspa_brawl.core.errors import StorageError, ValidationError
from kaspa_brawl.models.fighter import Fighter

__all__ = ["FighterRepository"]

logger = logging.getLogger(__name__)


class FighterRepository:
    """Persistence for the one fighter each wallet may own."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as err:
            self.session.rollback()
            logger.exception("Fighter store failed to %s", action)
            raise StorageError("Fighter storage unavailable") from err

    def get_by_address(self, address: str) -> Fighter | None:
        result = self.session.execute(select(Fighter).where(Fighter.address == address))
        return result.scalar_one_or_none()

    def exists(self, address: str) -> bool:
        result = self.session.execute(select(Fighter.id).where(Fighter.address == address))
        return result.first() is not None

    def create(
        self,
        address: str,
        *,
        name: str,
        fighter_class: str,
        level: int,
        experience: int,
        attributes: dict[str, Any],
    ) -> Fighter:
        """Insert the fighter for ``address``.

        Raises:
            ValidationError: If the wallet already has a fighter.
            StorageError: If the database is unavailable.
        """
        fighter = Fighter(
            address=address,
            name=name,
            fighter_class=fighter_class,
            level=level,
            experience=experience,
            data=json.dumps(attributes),
        )
        self.session.add(fighter)
        try:
            self.session.commit()
        except IntegrityError as err:
            self.session.rollback()
            raise ValidationError(
                "Wallet already has a registered fighter", code="fighter_exists"
            ) from err
        except SQLAlchemyError as err:
            self.session.rollback()
            logger.exception("Fighter store failed to register %s", address)
            raise StorageError("Fighter storage unavailable") from err
        logger.info("Registered fighter %r for %s", name, address)
        return fighter

    def update(
        self,
        fighter: Fighter,
        *,
        name: str,
        fighter_class: str,
        level: int,
        experience: int,
        attributes: dict[str, Any],
    ) -> Fighter:
        fighter.name = name
        fighter.fighter_class = fighter_class
        fighter.level = level
        fighter.experience = experience
        fighter.data = json.dumps(attributes)
        self._commit("save fighter")
        return fighter

    def delete(self, fighter: Fighter) -> None:
        self.session.delete(fighter)
        self._commit("delete fighter")
        logger.info("Deleted fighter for %s", fighter.address)
