"""Configuración de la conexión a la base de datos usando SQLAlchemy."""

import logging
from fastapi import Request
from sqlalchemy import create_engine, exc
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from .errors import InternalFailure

logger = logging.getLogger(__name__)

# Los modelos de tabla (User, Score) heredan de esta clase.
Base = declarative_base()


def make_engine(database_url: str) -> Engine:
    """
    Crea el motor (Engine) de SQLAlchemy para la URL dada.
    pool_pre_ping=True ayuda a manejar conexiones inactivas en el pool.
    """
    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # SQLite en memoria: una sola conexión compartida, si no cada sesión ve una BD vacía
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return create_engine(database_url, **options)
    return create_engine(database_url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    """Fábrica de sesiones: cada petición web usará su propia sesión."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine):
    """Crea las tablas si no existen."""
    # Registra los modelos en Base.metadata
    from . import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables verified/created.")
    except exc.SQLAlchemyError as e:
        logger.error(f"Error initializing database: {e}", exc_info=True)
        raise


# --- Función de Dependencia para FastAPI ---
def get_db(request: Request):
    """
    Generador de dependencia de FastAPI para obtener una sesión de base de datos.
    Asegura que la sesión se cierre correctamente después de cada petición.
    """
    db = request.app.state.SessionLocal()
    try:
        yield db
    except exc.SQLAlchemyError as e:
        logger.error(f"Database error during request: {e}", exc_info=True)
        db.rollback()
        raise InternalFailure("Internal database error.")
    finally:
        db.close()
