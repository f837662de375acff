"""Modelos Pydantic (schemas) para validación de datos de entrada/salida del servicio de leaderboard."""

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# --- Schemas de Usuario ---

class UserCreate(BaseModel):
    """
    Datos de registro. Todos los campos son opcionales a nivel de schema:
    la ruta responde 'Missing fields' (400) en lugar de un 422 de validación.
    """
    name: Optional[str] = None
    age: Optional[int] = None
    class_name: Optional[str] = Field(None, alias="class")
    email: Optional[str] = None
    password: Optional[str] = None
    avatar: Optional[str] = Field(None, description="Imagen (data URI o URL) a subir como avatar")

    model_config = ConfigDict(populate_by_name=True)

    def is_complete(self) -> bool:
        """True si los cinco campos obligatorios vienen presentes y no vacíos."""
        return all([self.name, self.age, self.class_name, self.email, self.password])


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Datos públicos de un usuario (excluye el hash de la contraseña)."""
    id: int
    name: str
    age: int
    class_name: str = Field(
        validation_alias=AliasChoices("class_name", "class"),
        serialization_alias="class",
    )
    email: str
    avatar_url: str = Field(
        "",
        validation_alias=AliasChoices("avatar_url", "avatarUrl"),
        serialization_alias="avatarUrl",
    )

    # Permite mapeo desde modelos ORM (SQLAlchemy)
    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Respuesta de registro y login: token de sesión y el usuario."""
    token: str
    user: UserResponse


# --- Schemas de Puntajes ---

class ScoreCreate(BaseModel):
    # Any: un valor no numérico debe terminar en 'Score required' (400), no en 422
    score: Any = None


class ScoreResponse(BaseModel):
    id: int
    user_id: int = Field(validation_alias=AliasChoices("user_id"), serialization_alias="user")
    score: float
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )

    model_config = ConfigDict(from_attributes=True)


class LeaderboardEntry(BaseModel):
    """Una fila del ranking: nombre, avatar y puntaje total acumulado."""
    name: str
    avatar_url: str = Field(
        "",
        validation_alias=AliasChoices("avatar_url", "avatarUrl"),
        serialization_alias="avatarUrl",
    )
    total_score: float = Field(
        validation_alias=AliasChoices("total_score", "totalScore"),
        serialization_alias="totalScore",
    )

    model_config = ConfigDict(from_attributes=True)
