import logging
import math
import numbers
import time
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from sqlalchemy.orm import Session

# Importaciones locales
from . import crud, schemas
from .avatars import AvatarUploader
from .config import Settings
from .db import get_db, init_db, make_engine, make_session_factory
from .dependencies import get_avatar_uploader, get_current_user, get_token_service
from .errors import DuplicateEmail, InvalidCredentials, MissingFields, MissingScore
from .models import User
from .utils import TokenService

# Configura logger
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# --- Métricas Prometheus ---
REQUEST_COUNT = Counter(
    "leaderboard_requests_total",
    "Total requests processed by Leaderboard Service",
    ["method", "endpoint", "status_code"]
)
REQUEST_LATENCY = Histogram(
    "leaderboard_request_latency_seconds",
    "Request latency in seconds for Leaderboard Service",
    ["endpoint"]
)

router = APIRouter()


# --- Endpoints de Salud y Métricas ---
@router.get("/metrics", tags=["Monitoring"])
def metrics():
    """Exposes application metrics for Prometheus."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/health", tags=["Monitoring"])
def health_check():
    """Performs a basic health check of the service."""
    return {"status": "ok", "service": "leaderboard_service"}


# --- Endpoints de API ---

@router.post("/api/auth/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED, tags=["Authentication"])
async def register(
    payload: Optional[schemas.UserCreate] = None,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    uploader: AvatarUploader = Depends(get_avatar_uploader),
):
    """
    Registers a new user, uploading the avatar first when one is supplied.
    Returns a session token together with the created user.
    """
    if payload is None or not payload.is_complete():
        logger.warning("Registration failed: missing fields.")
        raise MissingFields()

    logger.info(f"Registration attempt for email: {payload.email}")
    # Consultas síncronas y bcrypt corren en el threadpool para no bloquear el event loop
    if await run_in_threadpool(crud.get_user_by_email, db, payload.email):
        logger.warning(f"Registration failed: Email {payload.email} already exists.")
        raise DuplicateEmail()

    avatar_url = ""
    if payload.avatar:
        avatar_url = await uploader.upload(payload.avatar)

    user = await run_in_threadpool(crud.create_user, db, {
        "name": payload.name,
        "age": payload.age,
        "class_name": payload.class_name,
        "email": payload.email,
        "password": payload.password,
        "avatar_url": avatar_url,
    })
    logger.info(f"User created with ID: {user.id} for email: {user.email}")

    return schemas.AuthResponse(token=tokens.issue(user.id), user=schemas.UserResponse.model_validate(user))


@router.post("/api/auth/login", response_model=schemas.AuthResponse, tags=["Authentication"])
def login(
    payload: Optional[schemas.UserLogin] = None,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Authenticates a user by email and password and returns a session token."""
    email = payload.email if payload else None
    password = payload.password if payload else None
    logger.info(f"Login attempt for user: {email}")

    user = crud.get_user_by_email(db, email) if email else None
    if not user or not crud.verify_user_password(user, password):
        logger.warning(f"Login failed for user: {email}")
        raise InvalidCredentials()

    logger.info(f"Login successful for user_id: {user.id}")
    return schemas.AuthResponse(token=tokens.issue(user.id), user=schemas.UserResponse.model_validate(user))


def is_valid_score(score) -> bool:
    """Número JSON finito y distinto de cero; Infinity, NaN y enteros fuera del rango de float no cuentan."""
    # bool es subclase de int; no cuenta como puntaje
    if isinstance(score, bool) or not isinstance(score, numbers.Real) or not score:
        return False
    try:
        return math.isfinite(float(score))
    except OverflowError:
        return False


@router.post("/api/scores", response_model=schemas.ScoreResponse, status_code=status.HTTP_201_CREATED, tags=["Scores"])
def submit_score(
    payload: Optional[schemas.ScoreCreate] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Records a score for the authenticated user."""
    score = payload.score if payload else None
    if not is_valid_score(score):
        logger.warning(f"Score rejected for user_id {current_user.id}: {score!r}")
        raise MissingScore()

    record = crud.create_score(db, current_user.id, float(score))
    logger.info(f"Score {record.score} recorded for user_id: {current_user.id}")
    return record


@router.get("/api/leaderboard", response_model=List[schemas.LeaderboardEntry], tags=["Leaderboard"])
def leaderboard(db: Session = Depends(get_db)):
    """Returns the top 10 users by total score."""
    return [schemas.LeaderboardEntry.model_validate(row) for row in crud.top_scores(db)]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Construye la aplicación con sus recursos (motor de BD, servicio de tokens,
    subida de avatares) guardados en app.state.
    """
    settings = settings or Settings.from_env()
    engine = make_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Crea las tablas si no existen al iniciar
        init_db(engine)
        yield
        engine.dispose()

    app = FastAPI(
        title="Leaderboard Service",
        description="Handles player registration, authentication, score submission and the leaderboard.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.SessionLocal = make_session_factory(engine)
    app.state.token_service = TokenService(settings.jwt_secret_key)
    app.state.avatar_uploader = AvatarUploader(
        settings.cloudinary_cloud_name,
        settings.cloudinary_api_key,
        settings.cloudinary_api_secret,
    )

    # --- Middleware para Métricas ---
    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        start_time = time.time()
        response = None

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(f"Unhandled exception during request processing: {exc}", exc_info=True)
            response = JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
        finally:
            latency = time.time() - start_time
            endpoint = request.url.path
            final_status_code = getattr(response, 'status_code', 500)

            REQUEST_LATENCY.labels(endpoint=endpoint).observe(latency)
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=final_status_code
            ).inc()

        return response

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
