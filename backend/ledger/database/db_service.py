"""
Database Service Layer - document-style access to the ORM tables
"""
from typing import List, Optional, Dict, Any
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import and_
import uuid
import logging

from ledger.database.models import Transaction as TransactionModel, TransactionTypeEnum

logger = logging.getLogger(__name__)

# Collection to model mapping
COLLECTION_MODEL_MAP = {
    "transactions": TransactionModel,
}


class DatabaseService:
    """Database service for table operations."""

    def __init__(self, session: Session):
        """
        Initialize database service.

        Args:
            session: SQLAlchemy session (required)
        """
        if session is None:
            raise ValueError("Session is required")
        self.session = session

    def _model_class(self, collection: str):
        model_class = COLLECTION_MODEL_MAP.get(collection)
        if not model_class:
            raise ValueError(f"Unknown collection: {collection}")
        return model_class

    def _model_to_dict(self, model_instance) -> Optional[Dict[str, Any]]:
        """Convert SQLAlchemy model instance to dictionary."""
        if model_instance is None:
            return None

        result = {}
        for column in model_instance.__table__.columns:
            value = getattr(model_instance, column.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, TransactionTypeEnum):
                value = value.value
            result[column.name] = value
        return result

    def _build_query_filters(self, model_class, query: Dict[str, Any]):
        """Build SQLAlchemy filter conditions from query dict."""
        filters = []
        for key, value in query.items():
            if hasattr(model_class, key):
                filters.append(getattr(model_class, key) == value)
        return filters

    def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a document into the collection."""
        model_class = self._model_class(collection)
        document = dict(document)

        # Add ID if not present
        if 'id' not in document:
            document['id'] = str(uuid.uuid4())

        # Add created_at timestamp only if the model has this field
        if 'created_at' not in document and hasattr(model_class, 'created_at'):
            document['created_at'] = datetime.utcnow()

        if collection == "transactions" and 'type' in document:
            document['type'] = TransactionTypeEnum(document['type'])

        instance = model_class(**document)
        self.session.add(instance)
        self.session.flush()

        return self._model_to_dict(instance)

    def find(self, collection: str, query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Find documents matching the query."""
        model_class = self._model_class(collection)

        q = self.session.query(model_class)

        if query:
            filters = self._build_query_filters(model_class, query)
            if filters:
                q = q.filter(and_(*filters))

        return [self._model_to_dict(r) for r in q.all()]

    def find_one(self, collection: str, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Find the first document matching the query."""
        model_class = self._model_class(collection)

        q = self.session.query(model_class)
        filters = self._build_query_filters(model_class, query)

        if filters:
            q = q.filter(and_(*filters))

        return self._model_to_dict(q.first())

    def count(self, collection: str, query: Optional[Dict[str, Any]] = None) -> int:
        """Count documents matching the query."""
        model_class = self._model_class(collection)

        q = self.session.query(model_class)
        if query:
            filters = self._build_query_filters(model_class, query)
            if filters:
                q = q.filter(and_(*filters))

        return q.count()


def get_db_service(session: Session) -> DatabaseService:
    """
    Get database service instance.

    Args:
        session: SQLAlchemy session (required)

    Returns:
        DatabaseService instance
    """
    return DatabaseService(session)
