from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List
from sqlalchemy import func
from sqlalchemy.orm import Session
from ledger.models.schemas import Transaction, TransactionCreate, TransactionSummary
from ledger.database.models import Transaction as TransactionModel
from ledger.database.session import get_db as get_session
from ledger.database.db_service import get_db_service
from ledger.services.transaction_ingest import ingest_transaction

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("", status_code=status.HTTP_201_CREATED, response_class=Response)
def create_transaction(
    transaction: TransactionCreate,
    session: Session = Depends(get_session)
):
    db = get_db_service(session)
    ingest_transaction(db, transaction)
    session.commit()
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("", response_model=List[Transaction])
def get_transactions(session: Session = Depends(get_session)):
    transactions = session.query(TransactionModel).order_by(
        TransactionModel.created_at.desc(),
        TransactionModel.id.desc()
    ).all()
    return [
        Transaction(
            id=txn.id,
            title=txn.title,
            amount=txn.amount,
            type=txn.type.value,
            created_at=txn.created_at
        )
        for txn in transactions
    ]


@router.get("/summary", response_model=TransactionSummary)
def get_summary(session: Session = Depends(get_session)):
    total = session.query(func.coalesce(func.sum(TransactionModel.amount), 0.0)).scalar()
    return TransactionSummary(amount=total)


@router.get("/{transaction_id}", response_model=Transaction)
def get_transaction(
    transaction_id: str,
    session: Session = Depends(get_session)
):
    db = get_db_service(session)

    transaction = db.find_one("transactions", {"id": transaction_id})
    if not transaction:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found"
        )

    return Transaction(**transaction)
