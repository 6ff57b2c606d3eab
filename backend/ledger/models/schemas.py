from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from enum import Enum


class TransactionType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class TransactionCreate(BaseModel):
    title: str = Field(strict=True)
    amount: float = Field(strict=True, allow_inf_nan=False)
    type: TransactionType

    @field_validator("title")
    @classmethod
    def _validate_title(cls, value):
        """Reject text the database cannot store, such as lone surrogates."""
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("title must be valid UTF-8 text")
        return value


class Transaction(BaseModel):
    id: str
    title: str
    amount: float  # Signed: credits as submitted, debits negated
    type: TransactionType
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionSummary(BaseModel):
    amount: float
