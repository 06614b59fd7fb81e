#!/usr/bin/env python3
"""
Script di gestione per il servizio flussi di cassa da fatture.

Uso:
    python manage.py runserver      # Avvia il server di sviluppo
    python manage.py create-db      # Crea le tabelle del database MySQL
    python manage.py seed-catalogs  # Inserisce stati movimento e causali predefiniti
"""

import argparse
import logging
import os

from sqlalchemy.exc import OperationalError as SAOperationalError, SQLAlchemyError
from pymysql.err import OperationalError as MySQLOperationalError

from app import create_app
from app.extensions import db
from app.services import seed_default_catalogs
from config import DevConfig, ProdConfig

# ---------------------------------------------------------------------
# Logger CLI (fuori dal contesto Flask)
# ---------------------------------------------------------------------
cli_logger = logging.getLogger("manage_cli")
cli_logger.setLevel(logging.INFO)

if not cli_logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(levelname)s: %(name)s: %(message)s")
    )
    cli_logger.addHandler(handler)


# ---------------------------------------------------------------------
# Utility
# ---------------------------------------------------------------------
def _import_all_models() -> None:
    """Assicura che tutti i modelli siano registrati prima di create_all()."""
    import app.models  # noqa: F401


# ---------------------------------------------------------------------
# Comandi
# ---------------------------------------------------------------------
def create_db(app) -> bool:
    """Crea tutte le tabelle del database definite nei modelli SQLAlchemy."""
    with app.app_context():
        cli_logger.info("Tentativo di creare tutte le tabelle nel database...")
        try:
            _import_all_models()
            db.create_all()
        except (SAOperationalError, MySQLOperationalError) as e:
            cli_logger.error("Errore di connessione o permessi MySQL: %s", e)
            cli_logger.info(
                "Verifica che MySQL sia attivo e che l'utente '%s' abbia accesso al DB '%s'.",
                app.config.get("DB_USER"),
                app.config.get("DB_NAME"),
            )
            return False
        except SQLAlchemyError as e:
            cli_logger.error("Errore durante la creazione del database: %s", e)
            return False
    cli_logger.info("Database creato con successo.")
    return True


def seed_catalogs(app) -> bool:
    """Inserisce gli stati movimento e le causali predefiniti (idempotente)."""
    with app.app_context():
        try:
            created = seed_default_catalogs()
        except SQLAlchemyError as e:
            cli_logger.error("Errore durante l'inserimento dei cataloghi: %s", e)
            cli_logger.info("Le tabelle esistono? Esegui prima 'create-db'.")
            return False
    cli_logger.info(
        "Cataloghi inseriti: %s stati, %s causali.",
        created["statuses"],
        created["reasons"],
    )
    return True


def run_server(app) -> None:
    """Avvia il server di sviluppo Flask (LAN-ready)."""
    host = os.environ.get("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.environ.get("FLASK_RUN_PORT", "5000"))
    debug = app.config.get("DEBUG", False)

    app.logger.info("Avvio del server su http://%s:%s", host, port)
    app.run(host=host, port=port, debug=debug)


# ---------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------
def main() -> int:
    parser = argparse.ArgumentParser(
        description="Gestione del servizio flussi di cassa da fatture elettroniche."
    )
    parser.add_argument(
        "command",
        choices=["runserver", "create-db", "seed-catalogs"],
        help="Comando da eseguire.",
    )
    parser.add_argument(
        "--prod",
        action="store_true",
        help="Usa la configurazione di produzione (default: sviluppo).",
    )

    args = parser.parse_args()

    app = create_app(ProdConfig if args.prod else DevConfig)

    if args.command == "runserver":
        run_server(app)
        return 0
    if args.command == "create-db":
        return 0 if create_db(app) else 1
    return 0 if seed_catalogs(app) else 1


if __name__ == "__main__":
    raise SystemExit(main())
