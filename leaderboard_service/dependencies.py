"""Dependencias de FastAPI: servicios de la aplicación y autenticación por token Bearer."""

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from . import crud
from .avatars import AvatarUploader
from .db import get_db
from .errors import InvalidToken, MissingToken
from .models import User
from .utils import TokenService

logger = logging.getLogger(__name__)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_avatar_uploader(request: Request) -> AvatarUploader:
    return request.app.state.avatar_uploader


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> User:
    """
    Resuelve el usuario autenticado a partir de 'Authorization: Bearer <token>'.
    Un token inválido y un token de un usuario inexistente dan el mismo error.
    """
    authorization = request.headers.get("Authorization")
    token = None
    if authorization and authorization.startswith("Bearer "):
        token = authorization.split(" ", 1)[1].strip()

    if not token:
        logger.warning(f"Rejected request to {request.url.path}: no bearer token.")
        raise MissingToken()

    user_id = tokens.verify(token)
    user = crud.get_user_by_id(db, user_id)
    if user is None:
        logger.warning(f"Rejected request to {request.url.path}: token for unknown user_id {user_id}.")
        raise InvalidToken()

    return user
