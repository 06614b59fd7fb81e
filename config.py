"""
Modulo di configurazione per l'applicazione Flask.
"""

import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Configurazione base, comune a tutti gli ambienti."""

    # Chiave segreta: in produzione deve essere sovrascritta da variabile d'ambiente
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # --- CONFIGURAZIONE DATABASE MYSQL --------------------------------------
    DB_USER = os.environ.get("DB_USER", "flussi")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "flussi")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = os.environ.get("DB_PORT", "3306")
    DB_NAME = os.environ.get("DB_NAME", "flussi_cassa")

    # Stringa di connessione composta in modo parametrico
    DEFAULT_DB_URL = (
        f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    )

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", DEFAULT_DB_URL)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Limite dimensione richieste (XML FatturaPA inviati in JSON)
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    # --- SINCRONIZZAZIONE FATTURA -> MOVIMENTO -------------------------------
    # Etichette candidate per stato fattura, in JSON. Esempio:
    # {"paid": ["Incassato", "Saldato"], "draft": ["Da Saldare"]}
    # Se vuoto si usano le etichette predefinite del motore.
    MOVEMENT_STATUS_CANDIDATES = os.environ.get("MOVEMENT_STATUS_CANDIDATES", "")

    # --- LOGGING -------------------------------------------------------------
    LOG_DIR = os.environ.get("LOG_DIR", str(BASE_DIR / "logs"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FILE_NAME = os.environ.get("LOG_FILE_NAME", "app.log")
    LOG_TO_FILE = _env_flag("LOG_TO_FILE", True)


class DevConfig(Config):
    """Configurazione per ambiente di sviluppo."""
    DEBUG = True
    ENV = "development"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class ProdConfig(Config):
    """Configurazione per ambiente di produzione."""
    DEBUG = False
    ENV = "production"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    """Configurazione per i test: SQLite in memoria, niente log su file."""
    TESTING = True
    DEBUG = False
    ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    MOVEMENT_STATUS_CANDIDATES = ""
    LOG_LEVEL = "WARNING"
    LOG_TO_FILE = False
