"""Errores del servicio. Cada uno lleva su código HTTP y el mensaje que ve el cliente."""

from fastapi import HTTPException, status


class MissingFields(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing fields")


class DuplicateEmail(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists")


class InvalidCredentials(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


class MissingToken(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token")


class InvalidToken(HTTPException):
    """Token mal formado, expirado, con firma inválida o de un usuario inexistente."""
    def __init__(self):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


class MissingScore(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="Score required")


class InternalFailure(HTTPException):
    """Fallo de una dependencia externa (base de datos, media host, hashing)."""
    def __init__(self, detail: str = "Internal Server Error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class AvatarUploadError(InternalFailure):
    def __init__(self, detail: str = "Could not upload avatar."):
        super().__init__(detail=detail)
