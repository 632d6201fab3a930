import os
from flask import Flask, request
from clinicsync.extensions import db, bcrypt, migrate, jwt, limiter, cors, socketio
from clinicsync.utils.broadcaster import broadcaster
from clinicsync.utils.encryption_util import encryptor
from clinicsync.utils.error_handlers import register_error_handlers
from clinicsync.utils.token_service import token_service
from clinicsync.commands import register_commands
# Handlers must be declared before the first socketio.init_app so that every
# app built in this process gets them registered on its own server.
from clinicsync.socket_handlers import broadcast_handler  # noqa: F401
from config import config


def create_app(config_name=None):
    app = Flask(__name__)
    config_name = config_name or os.getenv('FLASK_CONFIG', 'default')
    config_class = config[config_name]
    app.config.from_object(config_class)

    # Logging first so extension warnings land in the configured handlers
    config_class.init_app(app)

    # Initialize extensions
    db.init_app(app)
    bcrypt.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)
    cors.init_app(app,
                  origins=app.config['ALLOWED_ORIGINS'],
                  allow_headers=['Content-Type', 'Authorization'],
                  methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'])

    origins = app.config['ALLOWED_ORIGINS']
    socketio.init_app(app,
                      cors_allowed_origins='*' if '*' in origins else origins,
                      async_mode=app.config['SOCKETIO_ASYNC_MODE'])

    # Initialize custom utilities
    token_service.init_app(app)
    encryptor.init_app(app)
    broadcaster.init_app(app, socketio)

    # Register models with SQLAlchemy metadata
    from clinicsync import models  # noqa: F401

    from clinicsync.api import api_bp
    app.register_blueprint(api_bp)

    register_error_handlers(app)
    register_commands(app)

    @app.before_request
    def log_request():
        app.logger.info(f"[{request.method}] {request.path}")

    return app
