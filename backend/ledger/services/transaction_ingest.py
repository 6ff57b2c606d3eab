"""
Transaction Ingest Service

Persists one transaction per call with its amount signed by type:

- credit: stored as submitted
- debit: stored negated

The sign rule is applied unconditionally; a negative credit stays negative and
a negative debit is stored positive.
"""
import logging
import uuid
from typing import Dict

from ledger.database.db_service import DatabaseService
from ledger.models.schemas import TransactionCreate, TransactionType

logger = logging.getLogger(__name__)


def signed_amount(amount: float, transaction_type: TransactionType) -> float:
    """
    Compute the stored amount for a transaction.

    Args:
        amount: Amount as submitted by the caller
        transaction_type: credit or debit

    Returns:
        amount for credits, amount * -1 for debits
    """
    if TransactionType(transaction_type) == TransactionType.CREDIT:
        return amount
    return amount * -1


def ingest_transaction(db: DatabaseService, transaction: TransactionCreate) -> Dict:
    """
    Insert a new transaction row. Every call creates a distinct row.

    The caller owns the session and decides when to commit.
    """
    created = db.insert(
        "transactions",
        {
            "id": str(uuid.uuid4()),
            "title": transaction.title,
            "amount": signed_amount(transaction.amount, transaction.type),
            "type": transaction.type.value,
        },
    )
    logger.info(f"Created {created['type']} transaction {created['id']}")
    return created
