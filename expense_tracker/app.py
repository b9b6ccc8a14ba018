# expense_tracker/app.py

import logging
import os
from datetime import datetime, timedelta

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager, current_user, jwt_required

from . import analytics, db, store
from .auth import auth_bp
from .errors import ExpenseTrackerError, ValidationError
from .expenses import expenses_bp
from .models import CATEGORIES, DEFAULT_PERIOD, PERIODS

# ---------------- Configuration ----------------
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("expense-tracker")

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:5000"


def load_config():
    """Settings from the environment, with development defaults."""
    return {
        'JWT_SECRET_KEY': os.environ.get('JWT_SECRET_KEY', "dev-key-change-me-before-deploying-anywhere"),
        'JWT_ACCESS_TOKEN_EXPIRES': timedelta(days=int(os.environ.get('JWT_EXPIRES_DAYS', 30))),
        'DB_PATH': os.environ.get('DB_PATH', db.DEFAULT_DB_PATH),
        'CORS_ORIGINS': os.environ.get('CORS_ORIGINS', DEFAULT_CORS_ORIGINS),
        # single source of "now" for every request
        'CLOCK': datetime.now,
        'PAGE_SIZE': 50,
        'MAX_PAGE_SIZE': 500,
    }


def register_jwt_handlers(jwt):
    """Every authentication failure answers 401 before any handler runs."""

    @jwt.user_lookup_loader
    def load_user(_jwt_header, jwt_data):
        return store.get_user_by_id(int(jwt_data["sub"]))

    @jwt.user_lookup_error_loader
    def user_not_found(_jwt_header, _jwt_data):
        return jsonify({"msg": "User not found"}), 401

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({"msg": "No token, authorization denied"}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({"msg": "Token is not valid"}), 401

    @jwt.expired_token_loader
    def expired_token(_jwt_header, _jwt_data):
        return jsonify({"msg": "Token has expired"}), 401


def register_error_handlers(app):
    @app.errorhandler(ExpenseTrackerError)
    def handle_app_error(error):
        if error.status_code >= 500:
            logger.error(f"{request.method} {request.path} failed: {error.message}")
        return jsonify({"msg": error.message}), error.status_code

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify({"msg": "Route not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return jsonify({"msg": "Method not allowed"}), 405

    @app.errorhandler(500)
    def server_error(error):
        logger.error(f"Unhandled error on {request.method} {request.path}: {getattr(error, 'original_exception', error)}")
        return jsonify({"msg": "Something went wrong"}), 500


# ---------------- Flask App Factory ----------------
def create_app(test_config=None):
    app = Flask(__name__)

    app.config.update(load_config())
    if test_config:
        app.config.update(test_config)

    register_jwt_handlers(JWTManager(app))

    # CORS
    origins = [o.strip() for o in app.config['CORS_ORIGINS'].split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins}}, supports_credentials=True)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(expenses_bp, url_prefix='/api/expenses')

    register_error_handlers(app)

    # Initialize DB
    db.init_db(app.config['DB_PATH'])
    logger.info(f"Database initialized at {app.config['DB_PATH']}")

    app.teardown_appcontext(db.close_db)

    @app.cli.command("init-db")
    def init_db_command():
        db.init_db(app.config['DB_PATH'])
        print("Database initialized!")

    # ---------------- Core Endpoints ----------------
    @app.route('/api/health')
    def health():
        database_ok = db.ping()
        return jsonify({
            "status": "ok",
            "database": "ok" if database_ok else "unavailable",
            "timestamp": app.config['CLOCK']().isoformat(),
        })

    @app.route('/api/categories')
    def categories():
        return jsonify({"categories": CATEGORIES})

    # ---------------- Analytics ----------------
    @app.route('/api/analytics/summary', methods=['GET'])
    @jwt_required()
    def analytics_summary():
        period = request.args.get('period') or DEFAULT_PERIOD
        if period not in PERIODS:
            raise ValidationError(f"Invalid period '{period}', expected one of: {', '.join(PERIODS)}")

        now = app.config['CLOCK']()
        return jsonify(analytics.build_summary(current_user.id, period, now))

    @app.route('/api/analytics/categories', methods=['GET'])
    @jwt_required()
    def analytics_categories():
        logger.info(f"Category insights for user {current_user.id}")
        return jsonify(analytics.category_insights(current_user.id))

    @app.route('/api/analytics/compare', methods=['GET'])
    @jwt_required()
    def analytics_compare():
        now = app.config['CLOCK']()
        logger.info(f"Month comparison for user {current_user.id} at {now:%Y-%m}")
        return jsonify(analytics.compare_months(current_user.id, now))

    return app

