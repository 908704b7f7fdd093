"""SQLAlchemy ORM models for linked accounts, budgets and transactions"""

from sqlalchemy import Column, String, Boolean, Float, DateTime, Integer, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class LinkedAccount(Base):
    """Financial account linked through the aggregation provider"""

    __tablename__ = "linked_account"
    __table_args__ = (UniqueConstraint("user_id", "external_id", name="uq_linked_account_user_external"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)
    external_id = Column(String(128), nullable=False)
    name = Column(Text, nullable=False)
    account_type = Column(String(32), nullable=False)  # checking, savings, credit
    balance = Column(Float, nullable=False, default=0.0)
    institution_name = Column(Text, nullable=False, default="")
    is_connected = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class BudgetRecord(Base):
    """Budget allocation for one spending category"""

    __tablename__ = "budget"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)
    category = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    period = Column(String(16), nullable=False, default="monthly")


class TransactionRecord(Base):
    """Posted transaction on a linked account"""

    __tablename__ = "account_transaction"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    category = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    date = Column(DateTime, nullable=False, index=True)
