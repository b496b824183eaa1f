"""Metadata row written once per translate request.

Only lengths, hashes, timings and outcomes are stored. The source and
translated text never reach this table.
"""
from datetime import datetime, timezone
from translator import db

HISTORY_COLUMNS = [
    'id',
    'created_at',
    'source_lang',
    'detected_source_lang',
    'target_lang',
    'chars_in',
    'provider',
    'latency_ms',
    'status',
]

EXPORT_COLUMNS = HISTORY_COLUMNS + ['error_code', 'text_hash']


class TranslationRecord(db.Model):
    """One translate attempt (cache hit, provider success or provider failure)."""

    __tablename__ = 'translations'

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    source_lang = db.Column(db.String(8), nullable=False)
    detected_source_lang = db.Column(db.String(8), nullable=True)
    target_lang = db.Column(db.String(8), nullable=False)
    chars_in = db.Column(db.Integer, nullable=False)
    provider = db.Column(db.String(40), nullable=False)
    latency_ms = db.Column(db.Integer, nullable=True)
    status = db.Column(db.String(10), nullable=False)  # 'success', 'error'
    error_code = db.Column(db.String(60), nullable=True)
    text_hash = db.Column(db.String(64), nullable=False)

    def to_dict(self, columns=None):
        """Convert record to dictionary, limited to the given columns."""
        data = {
            'id': self.id,
            'created_at': self.created_at.isoformat(),
            'source_lang': self.source_lang,
            'detected_source_lang': self.detected_source_lang,
            'target_lang': self.target_lang,
            'chars_in': self.chars_in,
            'provider': self.provider,
            'latency_ms': self.latency_ms,
            'status': self.status,
            'error_code': self.error_code,
            'text_hash': self.text_hash,
        }
        if columns is None:
            return data
        return {c: data[c] for c in columns}

    def __repr__(self):
        return f'<TranslationRecord {self.id}: {self.status}>'
