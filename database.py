"""
Database Operations
Persistence for saved calculator configurations and the last calculator state
"""

import json
import logging
import secrets
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import AppState, SavedConfiguration

logger = logging.getLogger(__name__)

LAST_STATE_KEY = "last_state"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Unique id: base-36 millisecond timestamp followed by random hex"""
    return _to_base36(int(time.time() * 1000)) + secrets.token_hex(5)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)
        except ValueError:
            return None
    return None


class CalculatorStore:
    """Database operations for calculator configurations and state"""

    def __init__(self, session: Session):
        self.session = session

    # ==================== SAVED CONFIGURATIONS ====================

    def save_config(self, config: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Insert or update a saved configuration

        Args:
            config: Nested record {name, peptide{id, customName},
                    vial{mgInVial, waterMl}, dose{amount, unit, syringeSize}},
                    optionally with id and createdAt

        Returns:
            The stored record with id and timestamps, or None on failure
        """
        peptide = config.get("peptide") or {}
        vial = config.get("vial") or {}
        dose = config.get("dose") or {}
        config_id = config.get("id") or generate_id()

        try:
            row = self.session.get(SavedConfiguration, config_id)
            if row is None:
                position = self.session.query(func.max(SavedConfiguration.position)).scalar()
                row = SavedConfiguration(
                    id=config_id,
                    position=(position or 0) + 1,
                    created_at=_parse_timestamp(config.get("createdAt")) or datetime.utcnow(),
                )
                self.session.add(row)

            row.name = config.get("name") or ""
            row.peptide_id = peptide.get("id") or "custom"
            row.custom_peptide_name = peptide.get("customName") or ""
            row.mg_in_vial = vial.get("mgInVial")
            row.water_ml = vial.get("waterMl")
            row.dose_amount = dose.get("amount")
            row.dose_unit = dose.get("unit")
            row.syringe_size = dose.get("syringeSize")
            row.updated_at = datetime.utcnow()

            self.session.commit()
            return row.to_dict()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Failed to save config %s", config_id)
            return None

    def get_all_configs(self) -> List[Dict[str, Any]]:
        """List saved configurations in the order they were first saved"""
        try:
            rows = self.session.query(SavedConfiguration).order_by(SavedConfiguration.position).all()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Failed to load configs")
            return []
        return [row.to_dict() for row in rows]

    def get_config_by_id(self, config_id: str) -> Optional[Dict[str, Any]]:
        """Get a saved configuration by ID"""
        try:
            row = self.session.get(SavedConfiguration, config_id)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Failed to load config %s", config_id)
            return None
        return row.to_dict() if row else None

    def delete_config(self, config_id: str) -> bool:
        """Delete a saved configuration; deleting an unknown id still succeeds"""
        try:
            self.session.query(SavedConfiguration).filter(
                SavedConfiguration.id == config_id
            ).delete()
            self.session.commit()
            return True
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Failed to delete config %s", config_id)
            return False

    # ==================== LAST STATE ====================

    def save_state(self, state: Dict[str, Any]) -> None:
        """Overwrite the last-state slot"""
        try:
            row = self.session.get(AppState, LAST_STATE_KEY)
            if row is None:
                row = AppState(key=LAST_STATE_KEY)
                self.session.add(row)
            row.payload = json.dumps(state)
            row.updated_at = datetime.utcnow()
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Failed to save state")

    def get_last_state(self) -> Optional[Dict[str, Any]]:
        """Get the last saved state, or None"""
        try:
            row = self.session.get(AppState, LAST_STATE_KEY)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Failed to load state")
            return None
        if row is None:
            return None
        try:
            return json.loads(row.payload)
        except ValueError:
            logger.warning("Discarding unreadable saved state")
            return None

    def clear_state(self) -> None:
        """Clear the last saved state"""
        try:
            self.session.query(AppState).filter(AppState.key == LAST_STATE_KEY).delete()
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Failed to clear state")

    def clear_all(self) -> None:
        """Clear every saved configuration and the last state"""
        try:
            self.session.query(SavedConfiguration).delete()
            self.session.query(AppState).delete()
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Failed to clear storage")
