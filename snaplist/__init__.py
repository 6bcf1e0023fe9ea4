# snaplist/__init__.py

import logging

import click
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from snaplist.config import Config, check_required
from snaplist.extensions import db, cors, init_redis
from snaplist.utils.error_handler import register_error_handlers
from snaplist.routes.auth_routes import auth_bp
from snaplist.routes.core_routes import core_bp
from snaplist.routes.qr_routes import qr_bp
from snaplist.routes.redirect_routes import redirect_bp
from snaplist.routes.cart_routes import cart_bp
from snaplist.routes.order_routes import order_bp
from snaplist.routes.admin_routes import admin_bp
from snaplist.routes.subscription_routes import subscription_bp


def create_app(config_object=Config) -> Flask:
    """
    Build the SnapList API.

    Tables are created and, when SEED_ON_STARTUP is set, membership tiers are
    seeded here, before the app is handed to the WSGI server.
    """
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config_object)
    check_required(app.config)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    cors.init_app(app, supports_credentials=True)
    db.init_app(app)
    init_redis(app)

    # Fix proxy headers
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    register_error_handlers(app)

    # Register blueprints
    app.register_blueprint(core_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(qr_bp)
    app.register_blueprint(redirect_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(order_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(subscription_bp, url_prefix="/api/subscriptions")

    register_commands(app)

    with app.app_context():
        from snaplist import models  # noqa: F401
        db.create_all()

        if app.config.get("SEED_ON_STARTUP"):
            from snaplist.services.seed_service import seed_membership_tiers
            seed_membership_tiers()

    return app


def register_commands(app):
    @app.cli.command("seed-tiers")
    def seed_tiers_command():
        """Insert or refresh the FREE / STANDARD / PRO membership tiers."""
        from snaplist.services.seed_service import seed_membership_tiers

        summary = seed_membership_tiers()
        click.echo(
            f"created: {', '.join(summary['created']) or '-'}; "
            f"updated: {', '.join(summary['updated']) or '-'}; "
            f"failed: {', '.join(summary['failed']) or '-'}"
        )

    @app.cli.command("make-admin")
    @click.argument("email")
    def make_admin_command(email):
        """Grant admin rights to the user with EMAIL."""
        from snaplist.repositories.user_repository import get_user_by_email

        user = get_user_by_email(email.strip().lower())
        if not user:
            raise click.ClickException(f"No user with email {email}")
        user.is_admin = True
        db.session.commit()
        click.echo(f"{user.email} is now an admin")
