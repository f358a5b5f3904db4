"""DealerDesk Flask application factory."""

import logging

from flask import Flask, current_app, jsonify, request
from flask_compress import Compress
from flask_login import LoginManager

from . import __version__, database
from .config import AppConfig
from .core.auth.identity import IdentityVerifier, bearer_token
from .core.utils.logging_config import setup_logging

logger = logging.getLogger('dealerdesk.app')

DEV_SECRET_KEY = 'dev-secret-key-for-local-only'

compress = Compress()
login_manager = LoginManager()


@login_manager.request_loader
def load_identity(req):
    """Authenticate the request from its bearer token. Never touches the database."""
    verifier = current_app.extensions['dealerdesk.identity']
    return verifier.verify(bearer_token(req))


def _secret_key(config):
    if config.SECRET_KEY:
        return config.SECRET_KEY
    if config.DEBUG or config.TESTING:
        logger.warning('Using development secret key; set FLASK_SECRET_KEY for production')
        return DEV_SECRET_KEY
    raise RuntimeError('FLASK_SECRET_KEY environment variable is required')


def _register_error_handlers(app):

    @app.errorhandler(404)
    def handle_404(e):
        return jsonify({'success': False, 'error': 'Not found'}), 404

    @app.errorhandler(405)
    def handle_405(e):
        return jsonify({'success': False, 'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def handle_500(e):
        logger.exception('Unhandled 500 error')
        return jsonify({'success': False, 'error': 'An internal error occurred'}), 500


def create_app(config=None, identity_verifier=None):
    """Build the WSGI app.

    Args:
        config: AppConfig, defaults to AppConfig.from_env()
        identity_verifier: overrides the verifier built from config (tests)
    """
    config = config or AppConfig.from_env()
    setup_logging(level=config.LOG_LEVEL, json_format=config.LOG_JSON)

    app = Flask(__name__)
    app.secret_key = _secret_key(config)
    app.config['TESTING'] = config.TESTING
    app.config['DEALERDESK'] = config

    database.configure(config)

    compress.init_app(app)
    login_manager.init_app(app)
    app.extensions['dealerdesk.identity'] = identity_verifier or IdentityVerifier.from_config(config)

    from .core.auth import auth_bp
    from .customers import customers_bp
    from .test_drives import test_drives_bp
    from .stock_actions import stock_actions_bp
    from .company import company_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(test_drives_bp)
    app.register_blueprint(stock_actions_bp)
    app.register_blueprint(company_bp)

    _register_error_handlers(app)

    @app.after_request
    def no_cache_health(response):
        if request.path == '/health':
            response.headers['Cache-Control'] = 'no-cache'
        return response

    @app.route('/health')
    def health_check():
        """Health probe. Only checks DB connectivity."""
        checks = {'database': database.ping_db()}
        status = 'healthy' if checks['database'] else 'unhealthy'
        return jsonify({
            'status': status,
            'checks': checks,
            'service': 'dealerdesk',
            'version': __version__,
        }), 200 if status == 'healthy' else 503

    logger.info(f'DealerDesk startup complete: {len(list(app.url_map.iter_rules()))} routes registered')
    return app
