"""Funciones de utilidad del servicio: hash de contraseñas y manejo de tokens JWT."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from .errors import InvalidToken

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# Validez fija de los tokens de sesión
ACCESS_TOKEN_EXPIRE = timedelta(days=7)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica una contraseña plana contra un hash almacenado."""
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Genera el hash de una contraseña plana usando bcrypt."""
    return pwd_context.hash(password)


# --- Utilidades para Tokens JWT ---

class TokenService:
    """Emite y valida tokens de sesión firmados que llevan el ID del usuario en 'sub'."""

    def __init__(self, secret_key: str, algorithm: str = ALGORITHM, expires: timedelta = ACCESS_TOKEN_EXPIRE):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires = expires

    def issue(self, user_id: int, issued_at: Optional[datetime] = None) -> str:
        """
        Genera un token de acceso JWT para el usuario.

        Args:
            user_id: ID del usuario (se guarda como string en 'sub').
            issued_at: Momento de emisión; por defecto, ahora (UTC).

        Returns:
            String del JWT codificado.
        """
        issued_at = issued_at or datetime.now(timezone.utc)
        to_encode = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.expires,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """
        Decodifica y valida un token JWT.

        Returns:
            El ID del usuario contenido en el token.

        Raises:
            InvalidToken: si el token está mal formado, expiró, tiene firma inválida
                o no trae un 'sub' numérico. Las causas no se distinguen hacia el cliente.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"Token decoding failed: {e}")
            raise InvalidToken()

        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            logger.warning("Token payload has no valid 'sub'.")
            raise InvalidToken()
