"""Metadata store over the translations table."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from translator import db
from translator.models import TranslationRecord

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50
EXPORT_LIMIT = 2000


class StoreError(Exception):
    """The metadata store could not be read or written."""


class TranslationStore:
    """Insert and list TranslationRecord rows through the Flask-SQLAlchemy session."""

    def insert(self, **fields) -> TranslationRecord:
        record = TranslationRecord(**fields)
        try:
            db.session.add(record)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError('insert failed') from e
        return record

    def recent(self, user_id, limit: int = HISTORY_LIMIT) -> list[TranslationRecord]:
        """Newest rows first, only those belonging to user_id."""
        try:
            return (
                TranslationRecord.query
                .filter_by(user_id=user_id)
                .order_by(TranslationRecord.created_at.desc(), TranslationRecord.id.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError('select failed') from e
