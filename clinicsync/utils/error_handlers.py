# /clinicsync/utils/error_handlers.py
from flask import jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from clinicsync.extensions import db
from clinicsync.exceptions import ClinicError, StoreFailure


def register_error_handlers(app):
    @app.errorhandler(ClinicError)
    def handle_clinic_error(error):
        if error.status_code >= 500:
            db.session.rollback()
            current_app.logger.error(f"{error.__class__.__name__}: {error}")
        return jsonify({'error': error.message}), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error):
        db.session.rollback()
        current_app.logger.error(f"Store failure: {error}")
        return jsonify({'error': StoreFailure.message}), StoreFailure.status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Resource not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(429)
    def rate_limited(error):
        return jsonify({'error': 'Too many requests'}), 429

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        current_app.logger.error(f"Internal server error: {str(error)}")
        return jsonify({'error': 'Internal server error'}), 500
