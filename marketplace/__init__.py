from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_talisman import Talisman
from datetime import timedelta
import os
from dotenv import load_dotenv
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from marketplace.services.cache_service import ResponseCache

load_dotenv()

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per day", "50 per hour"]
)
cache = ResponseCache()


def create_app(config=None):
    app = Flask(__name__)

    # Trust reverse proxy headers
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    # Configuration
    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv('DATABASE_URL', 'sqlite:///marketplace.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }
    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'jwt-secret-key-change-in-production')
    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = timedelta(days=30)
    app.config['REDIS_URL'] = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
    app.config['RATELIMIT_STORAGE_URI'] = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    if config:
        app.config.update(config)

    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)
    cache.init_app(app)

    # CORS configuration
    CORS(app, resources={
        r"/api/*": {
            "origins": os.getenv('FRONTEND_URL', 'http://localhost:5173').split(','),
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"]
        }
    })

    # Security headers (only in production)
    if os.getenv('FLASK_ENV') == 'production':
        Talisman(
            app,
            force_https=True,
            content_security_policy=None
        )

    # Primary key segments in URLs
    from marketplace.utils.converters import RecordIdConverter
    app.url_map.converters['id'] = RecordIdConverter

    # Register blueprints
    from marketplace.api.auth import auth_bp
    from marketplace.api.properties import properties_bp
    from marketplace.api.favorites import favorites_bp
    from marketplace.api.recommendations import recommendations_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(properties_bp, url_prefix='/api/properties')
    app.register_blueprint(favorites_bp, url_prefix='/api/favorites')
    app.register_blueprint(recommendations_bp, url_prefix='/api/recommendations')

    register_error_handlers(app)
    register_jwt_handlers()

    # Health check endpoint
    @app.route('/health')
    def health_check():
        if not cache.enabled:
            cache_status = 'disabled'
        else:
            cache_status = 'up' if cache.ping() else 'down'
        return {'status': 'healthy', 'service': 'property-marketplace-api', 'cache': cache_status}, 200

    # Create tables
    with app.app_context():
        from marketplace import models  # noqa: F401
        db.create_all()

    return app


def register_error_handlers(app):
    from marketplace.utils.errors import ApiError

    @app.errorhandler(ApiError)
    def api_error_handler(e):
        return e.to_dict(), e.status_code

    @app.errorhandler(429)
    def ratelimit_handler(e):
        return {'message': 'Rate limit exceeded. Please try again later.'}, 429

    @app.errorhandler(UnicodeDecodeError)
    def decode_error_handler(e):
        return {'message': 'Request could not be decoded'}, 400

    @app.errorhandler(HTTPException)
    def http_error_handler(e):
        return {'message': e.description}, e.code

    @app.errorhandler(Exception)
    def internal_error(error):
        db.session.rollback()
        app.logger.exception('Unhandled error: %s', error)
        return {'message': 'Internal server error'}, 500


def register_jwt_handlers():
    @jwt.unauthorized_loader
    def missing_token_callback(reason):
        return {'message': 'No token, authorization denied'}, 401

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return {'message': 'Token is not valid'}, 401

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return {'message': 'Token is not valid'}, 401
