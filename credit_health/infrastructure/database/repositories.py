"""Data access layer for a user's financial records"""

from typing import List
from sqlalchemy.orm import Session
from credit_health.infrastructure.database.models import LinkedAccount, BudgetRecord, TransactionRecord
from credit_health.domain.models import Account, Budget, Transaction


class FinancialDataRepository:
    """Read access to accounts, budgets and transactions, plus refresh upserts"""

    def __init__(self, db: Session):
        self.db = db

    def get_accounts(self, user_id: str) -> List[Account]:
        """Connected accounts for a user"""
        rows = (
            self.db.query(LinkedAccount)
            .filter(LinkedAccount.user_id == user_id, LinkedAccount.is_connected.is_(True))
            .order_by(LinkedAccount.id)
            .all()
        )
        return [
            Account(
                external_id=row.external_id,
                name=row.name,
                account_type=row.account_type,
                balance=row.balance,
                institution_name=row.institution_name,
            )
            for row in rows
        ]

    def get_budgets(self, user_id: str) -> List[Budget]:
        rows = self.db.query(BudgetRecord).filter(BudgetRecord.user_id == user_id).all()
        return [Budget(category=row.category, amount=row.amount, period=row.period) for row in rows]

    def get_transactions(self, user_id: str) -> List[Transaction]:
        rows = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.user_id == user_id)
            .order_by(TransactionRecord.date.desc())
            .all()
        )
        return [
            Transaction(
                amount=row.amount,
                date=row.date,
                category=row.category,
                description=row.description,
            )
            for row in rows
        ]

    def upsert_accounts(self, user_id: str, accounts: List[Account]) -> int:
        """Insert or update refreshed accounts by external id; returns rows touched"""
        existing = {
            row.external_id: row
            for row in self.db.query(LinkedAccount).filter(LinkedAccount.user_id == user_id).all()
        }

        for acc in accounts:
            row = existing.get(acc.external_id)
            if row is None:
                row = LinkedAccount(user_id=user_id, external_id=acc.external_id)
                self.db.add(row)
            row.name = acc.name
            row.account_type = acc.account_type
            row.balance = acc.balance
            row.institution_name = acc.institution_name
            row.is_connected = True

        self.db.flush()
        return len(accounts)
