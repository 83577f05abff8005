"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials, firestore
from flask import Flask, g, session
from werkzeug.middleware.proxy_fix import ProxyFix

from .auth.context import ANONYMOUS, resolve_auth_context
from .core.constants import DEFAULT_SESSION_WEEKDAY
from .extensions import csrf


def _init_firebase(app):
    """Initialize the Firebase Admin SDK from the best available credentials."""
    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    cred_info = json.load(f)
                project_id = cred_info.get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    # If both methods fail, fallback to default credentials
    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = os.environ.get("FIREBASE_PROJECT_ID")
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    if cred and not firebase_admin._apps:
        try:
            options = {"projectId": project_id} if project_id else None
            firebase_admin.initialize_app(cred, options)
        except ValueError:
            # This can happen if the app is already initialized, which is fine.
            app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        SESSION_WEEKDAY=int(
            os.environ.get("SESSION_WEEKDAY") or DEFAULT_SESSION_WEEKDAY
        ),
    )
    app.json.sort_keys = False

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        _init_firebase(app)

    # Initialize extensions
    csrf.init_app(app)

    # Register blueprints
    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import classes as classes_bp

    app.register_blueprint(classes_bp.bp)

    from . import reports as reports_bp

    app.register_blueprint(reports_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.before_request
    def load_auth_context():
        """Resolve the signed-in user and role once for this request."""
        g.auth = ANONYMOUS
        user_id = session.get("user_id")
        if user_id is None:
            return

        try:
            g.auth = resolve_auth_context(firestore.client(), user_id)
        except Exception as e:
            app.logger.error(f"Error loading user from session: {e}")
            session.clear()  # Clear session on error to be safe
            return

        if not g.auth.is_authenticated:
            # User ID in session but no user in DB. Clear the session.
            session.clear()
            app.logger.warning(f"User {user_id} in session but not found in Firestore.")

    @app.route("/health")
    def health_check():
        """Perform a simple health check."""
        return "OK", 200

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
