"""Translate route: POST /api/translate, plus the language list."""

from flask import Blueprint, request, jsonify, current_app

from translator.constants import SUPPORTED_LANGUAGES
from translator.services.history import TranslationStore
from translator.services.translate_service import TranslateService, get_client_ip
from translator.utils import authenticate

translate_bp = Blueprint('translate', __name__)


def get_translate_service():
    """Wire the handler to the process-wide stores owned by the app."""
    ext = current_app.extensions
    return TranslateService(
        config=current_app.config,
        user_limiter=ext['translate_rate_limiter'],
        ip_limiter=ext['translate_ip_rate_limiter'],
        cache=ext['translation_cache'],
        provider=ext['translation_provider'],
        store=TranslationStore(),
    )


@translate_bp.route('/translate', methods=['POST'])
def translate():
    """Translate text for the signed-in user.

    Body: {"text": str, "sourceLang": "auto" | code, "targetLang": code}
    """
    user = authenticate(request)
    service = get_translate_service()
    result = service.handle(
        user.id if user else None,
        get_client_ip(request.headers),
        lambda: request.get_json(silent=True),
    )
    response = jsonify(result.body)
    response.status_code = result.status
    for name, value in result.headers.items():
        response.headers[name] = value
    return response


@translate_bp.route('/languages', methods=['GET'])
def languages():
    """List supported languages for the UI selectors."""
    return jsonify({
        'languages': [{'code': code, 'label': label} for code, label in SUPPORTED_LANGUAGES]
    }), 200
