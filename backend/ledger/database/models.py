"""
SQLAlchemy ORM Models
"""
from sqlalchemy import Column, String, Float, DateTime, Text, Enum as SQLEnum
from sqlalchemy.orm import declarative_base
from datetime import datetime
import enum

Base = declarative_base()


class TransactionTypeEnum(str, enum.Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    title = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)  # Signed: credits as submitted, debits negated
    type = Column(
        SQLEnum(
            TransactionTypeEnum,
            name="transaction_type",
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
