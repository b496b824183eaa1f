"""Routes package for the translator application."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .auth import auth_bp
    from .translate import translate_bp
    from .translations import translations_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(translate_bp, url_prefix='/api')
    app.register_blueprint(translations_bp, url_prefix='/api/translations')
