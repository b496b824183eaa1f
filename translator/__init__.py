from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
limiter = Limiter(key_func=get_remote_address, storage_uri='memory://')

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    app = Flask(__name__)

    # Config
    from translator.config import config_by_name
    config_name = config_name or os.getenv('FLASK_ENV', 'development')
    config_class = config_by_name.get(config_name, config_by_name['development'])
    app.config.from_object(config_class())

    logging.basicConfig(level=app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    limiter.init_app(app)
    CORS(app, supports_credentials=True)

    # Process-wide stores, owned by the app and handed to the handler
    from translator.services.rate_limit import FixedWindowRateLimiter
    from translator.services.translation_cache import TranslationCache
    from translator.services.translation import get_translation_provider

    app.extensions['translate_rate_limiter'] = FixedWindowRateLimiter()
    app.extensions['translate_ip_rate_limiter'] = FixedWindowRateLimiter()
    app.extensions['translation_cache'] = TranslationCache(
        ttl_ms=app.config['TRANSLATION_CACHE_TTL_MS'],
        max_entries=app.config['TRANSLATION_CACHE_MAX_ENTRIES'],
    )
    app.extensions['translation_provider'] = get_translation_provider(app.config)
    logger.info(f"Translation provider: {app.extensions['translation_provider'].name}")

    with app.app_context():
        from translator import models  # noqa: F401  (registers tables)
        db.create_all()

    # Register routes
    from translator.routes import register_routes
    register_routes(app)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        # Redirects (e.g. trailing-slash) pass through untouched
        if e.code is None or e.code < 400:
            return e
        return jsonify({'error': e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception('Unhandled error')
        return jsonify({'error': 'Internal server error'}), 500

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200

    return app
