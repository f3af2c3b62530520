from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from qiyao.domain.repositories import SaveSlotRepository
from .connection import create_session_factory


def _dialect(session) -> str:
    return session.bind.dialect.name if session.bind is not None else "sqlite"


class SqlSaveSlotRepository(SaveSlotRepository):
    """Save slots kept as whole JSON documents, one row per slot."""

    def __init__(self, session_factory: sessionmaker | None = None) -> None:
        self.SessionLocal = session_factory or create_session_factory()
        self.ensure_schema()

    def ensure_schema(self) -> None:
        with self.SessionLocal.begin() as session:
            document_type = "LONGTEXT" if _dialect(session) == "mysql" else "TEXT"
            session.execute(
                text(
                    f"""
                    CREATE TABLE IF NOT EXISTS save_slot (
                        slot_name VARCHAR(120) PRIMARY KEY,
                        day INTEGER NOT NULL,
                        document {document_type} NOT NULL,
                        saved_at VARCHAR(40) NOT NULL
                    )
                    """
                )
            )

    def save(self, slot_name: str, document: str, day: int) -> None:
        with self.SessionLocal.begin() as session:
            if _dialect(session) == "mysql":
                statement = text(
                    """
                    INSERT INTO save_slot (slot_name, day, document, saved_at)
                    VALUES (:slot, :day, :document, :saved_at)
                    ON DUPLICATE KEY UPDATE
                        day = VALUES(day),
                        document = VALUES(document),
                        saved_at = VALUES(saved_at)
                    """
                )
            else:
                statement = text(
                    """
                    INSERT INTO save_slot (slot_name, day, document, saved_at)
                    VALUES (:slot, :day, :document, :saved_at)
                    ON CONFLICT(slot_name) DO UPDATE SET
                        day = excluded.day,
                        document = excluded.document,
                        saved_at = excluded.saved_at
                    """
                )
            session.execute(
                statement,
                {
                    "slot": str(slot_name),
                    "day": int(day),
                    "document": str(document),
                    "saved_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
                },
            )

    def load(self, slot_name: str) -> Optional[str]:
        with self.SessionLocal() as session:
            row = session.execute(
                text("SELECT document FROM save_slot WHERE slot_name = :slot"),
                {"slot": str(slot_name)},
            ).first()
        if row is None:
            return None
        return str(row.document)

    def list_slots(self) -> List[str]:
        with self.SessionLocal() as session:
            rows = session.execute(text("SELECT slot_name FROM save_slot ORDER BY slot_name")).all()
        return [str(row.slot_name) for row in rows]
