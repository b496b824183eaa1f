"""History routes: recent translation metadata and CSV export."""

import csv
import io
import logging
from datetime import date

from flask import Blueprint, jsonify, Response

from translator.models.translation_record import HISTORY_COLUMNS, EXPORT_COLUMNS
from translator.services.history import TranslationStore, StoreError, HISTORY_LIMIT, EXPORT_LIMIT
from translator.utils import token_required

logger = logging.getLogger(__name__)

translations_bp = Blueprint('translations', __name__)


def to_csv(rows, columns):
    """Render dict rows as CSV with every cell quoted; None becomes empty."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow(columns)
    for row in rows:
        writer.writerow(['' if row[c] is None else row[c] for c in columns])
    return buffer.getvalue()


@translations_bp.route('', methods=['GET'])
@token_required
def list_translations(current_user_id):
    """Most recent metadata rows of the signed-in user."""
    try:
        records = TranslationStore().recent(current_user_id, limit=HISTORY_LIMIT)
    except StoreError:
        logger.exception(f"Failed to load history for user {current_user_id}")
        return jsonify({'error': 'Failed to load history.'}), 500

    return jsonify({'items': [r.to_dict(HISTORY_COLUMNS) for r in records]}), 200


@translations_bp.route('/export', methods=['GET'])
@token_required
def export_translations(current_user_id):
    """CSV download of the signed-in user's metadata rows."""
    try:
        records = TranslationStore().recent(current_user_id, limit=EXPORT_LIMIT)
    except StoreError:
        logger.exception(f"Failed to export history for user {current_user_id}")
        return jsonify({'error': 'Failed to export history.'}), 500

    csv_body = to_csv([r.to_dict(EXPORT_COLUMNS) for r in records], EXPORT_COLUMNS)
    filename = f"translations-{date.today():%Y%m%d}.csv"

    return Response(
        csv_body,
        status=200,
        headers={
            'Content-Type': 'text/csv; charset=utf-8',
            'Content-Disposition': f'attachment; filename={filename}',
            'Cache-Control': 'no-store',
        },
    )
