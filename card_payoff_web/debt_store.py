"""Persistence layer for debt records collected by the intake form.

Each visitor is identified by an anonymous session token; the records they
enter (creditor, debt type, balance, interest rate) are kept in a relational
database so they can be fed into the payoff calculator later. It defaults to
SQLite for local development, but accepts any SQLAlchemy-compatible URL
(e.g. MySQL/PostgreSQL).
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, Numeric, String, create_engine, delete, select
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()

DEBT_TYPES = ("credit_card", "personal_loan", "medical", "student_loan", "auto_loan", "other")


class DebtRecordModel(Base):
    __tablename__ = "debts"

    id = Column(String(64), primary_key=True)
    user_token = Column(String(64), index=True, nullable=False)
    creditor_name = Column(String(255), nullable=False)
    debt_type = Column(String(32), nullable=False)
    balance = Column(Numeric(14, 2), nullable=False)
    interest_rate = Column(Numeric(6, 3), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class DebtStore:
    """Database-backed debt record store."""

    def __init__(self, url: str) -> None:
        self._engine = create_engine(url, future=True)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False, future=True)

    def list_debts(self, user_token: str) -> List[Dict[str, Any]]:
        """Return the user's debts, oldest first."""
        if not user_token:
            return []
        query = (
            select(DebtRecordModel)
            .where(DebtRecordModel.user_token == user_token)
            .order_by(DebtRecordModel.created_at, DebtRecordModel.id)
        )
        with self._session_factory() as session:
            return [self._to_dict(row) for row in session.scalars(query)]

    def add_debt(
        self,
        user_token: str,
        debt_id: str,
        creditor_name: str,
        debt_type: str,
        balance: Decimal,
        interest_rate: Decimal,
    ) -> Optional[Dict[str, Any]]:
        """Persist one debt record and return it; every record is kept."""
        if not user_token:
            return None
        record = DebtRecordModel(
            id=debt_id,
            user_token=user_token,
            creditor_name=creditor_name,
            debt_type=debt_type,
            balance=balance,
            interest_rate=interest_rate,
            created_at=datetime.utcnow(),
        )
        with self._session_factory.begin() as session:
            session.add(record)
        logger.info("Saved %s debt record %s", debt_type, debt_id)
        return self._to_dict(record)

    def remove_debt(self, user_token: str, debt_id: str) -> bool:
        if not user_token:
            return False
        with self._session_factory.begin() as session:
            record = session.get(DebtRecordModel, debt_id)
            if record is None or record.user_token != user_token:
                return False
            session.delete(record)
        logger.info("Removed debt record %s", debt_id)
        return True

    def clear_debts(self, user_token: str) -> int:
        """Delete all of the user's debts and return how many were removed."""
        if not user_token:
            return 0
        with self._session_factory.begin() as session:
            result = session.execute(
                delete(DebtRecordModel).where(DebtRecordModel.user_token == user_token)
            )
        logger.info("Cleared %d debt records", result.rowcount)
        return result.rowcount

    @staticmethod
    def _to_dict(row: DebtRecordModel) -> Dict[str, Any]:
        return {
            "id": row.id,
            "creditor_name": row.creditor_name,
            "debt_type": row.debt_type,
            "balance": float(row.balance),
            "interest_rate": float(row.interest_rate),
            "created_at": row.created_at.isoformat(),
        }


def create_store_from_env(url: str | None) -> DebtStore:
    return DebtStore(url or "sqlite:///debt_records.sqlite3")
