"""Define los modelos de las tablas 'users' y 'scores' usando SQLAlchemy ORM."""

from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship

from .db import Base


class User(Base):
    """
    Modelo SQLAlchemy que representa la tabla 'users'.
    Almacena el perfil y las credenciales de cada jugador.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    age = Column(Integer, nullable=False)

    # 'class' es palabra reservada en Python; la columna se llama 'class'
    class_name = Column("class", String(50), nullable=False)

    # Identificador único para el login
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Hash bcrypt; nunca se guarda la contraseña en texto plano
    hashed_password = Column(String(255), nullable=False)

    avatar_url = Column(String(500), nullable=False, default="")

    scores = relationship("Score", back_populates="user")


class Score(Base):
    """
    Modelo SQLAlchemy para la tabla 'scores'.
    Cada fila es un evento inmutable: un puntaje de un usuario en un momento dado.
    """
    __tablename__ = "scores"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    score = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="scores")
