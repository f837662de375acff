"""Acceso a datos: usuarios (credenciales), puntajes y el ranking agregado."""

import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, defer

from .errors import DuplicateEmail
from .models import Score, User
from .utils import get_password_hash, verify_password

logger = logging.getLogger(__name__)

USER_FIELDS = {"name", "age", "class_name", "email", "password", "avatar_url"}

LEADERBOARD_SIZE = 10


# --- Usuarios ---

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """Busca un usuario por ID sin cargar el hash de la contraseña."""
    return (
        db.query(User)
        .options(defer(User.hashed_password))
        .filter(User.id == user_id)
        .first()
    )


def _apply_fields(user: User, fields: Dict):
    unknown = set(fields) - USER_FIELDS
    if unknown:
        raise ValueError(f"Unknown user fields: {', '.join(sorted(unknown))}")

    for key, value in fields.items():
        if key == "password":
            # Solo se recalcula el hash cuando la contraseña forma parte de esta escritura
            user.hashed_password = get_password_hash(value)
        else:
            setattr(user, key, value)


def _commit_user(db: Session, user: User) -> User:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Email {user.email} already exists (unique constraint).")
        raise DuplicateEmail()
    db.refresh(user)
    return user


def create_user(db: Session, fields: Dict) -> User:
    """
    Crea un usuario. La contraseña recibida se guarda como hash bcrypt.

    Raises:
        DuplicateEmail: si ya existe un usuario con ese email.
    """
    if get_user_by_email(db, fields.get("email")):
        raise DuplicateEmail()

    user = User(avatar_url="")
    _apply_fields(user, fields)
    db.add(user)
    return _commit_user(db, user)


def update_user(db: Session, user: User, fields: Dict) -> User:
    """Actualización parcial; el hash cambia solo si 'password' viene en `fields`."""
    new_email = fields.get("email")
    if new_email and new_email != user.email:
        if get_user_by_email(db, new_email):
            raise DuplicateEmail()

    _apply_fields(user, fields)
    return _commit_user(db, user)


def verify_user_password(user: User, candidate: str) -> bool:
    return verify_password(candidate, user.hashed_password)


# --- Puntajes ---

def create_score(db: Session, user_id: int, score: float) -> Score:
    record = Score(user_id=user_id, score=score)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def top_scores(db: Session, limit: int = LEADERBOARD_SIZE) -> List:
    """
    Ranking por puntaje total: agrupa los puntajes por usuario, suma, ordena
    descendente, toma los primeros `limit` y une con 'users' para nombre y avatar.

    Los empates quedan en el orden que devuelva la base de datos. Usuarios sin
    puntajes (o con total 0) no aparecen.
    """
    if limit < 1:
        return []

    total = func.sum(Score.score)
    totals = (
        db.query(Score.user_id.label("user_id"), total.label("total"))
        .group_by(Score.user_id)
        .having(total != 0)
        .order_by(total.desc())
        .limit(limit)
        .subquery()
    )

    return (
        db.query(
            User.name.label("name"),
            User.avatar_url.label("avatar_url"),
            totals.c.total.label("total_score"),
        )
        .join(totals, totals.c.user_id == User.id)
        .order_by(totals.c.total.desc())
        .all()
    )
