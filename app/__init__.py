"""
Pacchetto principale dell'applicazione Flask.
"""

from flask import Flask, jsonify
from config import DevConfig
from .extensions import init_extensions
from .services.invoice_sync import (
    AlreadyLinkedError,
    ExcludedTypeError,
    InvoiceNotFoundError,
    PersistenceError,
    StatusMappingUnresolvedError,
    SyncError,
    ValidationError,
)

# Codice HTTP per ciascun errore del motore di sincronizzazione
ERROR_STATUS_CODES = {
    ValidationError: 400,
    InvoiceNotFoundError: 404,
    AlreadyLinkedError: 409,
    ExcludedTypeError: 422,
    StatusMappingUnresolvedError: 422,
    PersistenceError: 500,
}


def create_app(config_class=DevConfig) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)
    init_extensions(app)

    _register_blueprints(app)
    _register_error_handlers(app)

    app.logger.info("Applicazione Flask inizializzata.")

    @app.route("/health")
    def healthcheck():
        return jsonify({"status": "ok"}), 200

    return app


def _register_blueprints(app: Flask) -> None:
    from .api import api_invoices_bp, api_movements_bp

    app.register_blueprint(api_invoices_bp, url_prefix="/api/invoices")
    app.register_blueprint(api_movements_bp, url_prefix="/api/movements")


def error_body(exc: SyncError) -> dict:
    """Corpo JSON della risposta di errore (busta success/message/payload)."""
    body = {
        "success": False,
        "message": str(exc),
        "error": exc.code,
        "payload": None,
    }
    if isinstance(exc, AlreadyLinkedError):
        body["existingMovementId"] = exc.existing_movement_id
        body["hint"] = exc.hint
        body["payload"] = {
            "existing_movement_id": exc.existing_movement_id,
            "matched_rule": exc.matched_rule,
        }
    elif isinstance(exc, ValidationError):
        body["errors"] = list(exc.errors)
    elif isinstance(exc, ExcludedTypeError):
        body["payload"] = {"invoice_type_code": exc.type_code}
    elif isinstance(exc, StatusMappingUnresolvedError):
        body["payload"] = {
            "invoice_status": exc.invoice_status,
            "candidates": list(exc.candidates),
        }
    return body


def _register_error_handlers(app: Flask) -> None:
    def handle_sync_error(exc: SyncError):
        status_code = 500
        for error_class, code in ERROR_STATUS_CODES.items():
            if isinstance(exc, error_class):
                status_code = code
                break
        if status_code >= 500:
            app.logger.error("Errore sincronizzazione movimento: %s", exc, exc_info=exc)
        return jsonify(error_body(exc)), status_code

    app.register_error_handler(SyncError, handle_sync_error)
