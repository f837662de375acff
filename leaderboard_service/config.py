"""Configuración del servicio leída desde variables de entorno (.env)."""

import os
import logging
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)

INSECURE_DEV_SECRET = "clave_secreta_insegura_por_defecto_cambiar_urgentemente"


class Settings(BaseModel):
    """Valores de configuración que la aplicación recibe al construirse."""
    database_url: str = "sqlite:///./leaderboard.db"
    jwt_secret_key: str = INSECURE_DEV_SECRET
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 5000

    @classmethod
    def from_env(cls) -> "Settings":
        """Carga el .env y construye la configuración a partir del entorno."""
        load_dotenv()

        secret_key = os.getenv("JWT_SECRET_KEY")
        if not secret_key:
            logger.warning("JWT_SECRET_KEY is not set. Using an insecure default key for development.")
            secret_key = INSECURE_DEV_SECRET

        cloudinary_vars = ["CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"]
        missing = [var for var in cloudinary_vars if not os.getenv(var)]
        if missing:
            logger.warning(f"Missing Cloudinary variables: {', '.join(missing)}. Avatar uploads will fail.")

        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./leaderboard.db"),
            jwt_secret_key=secret_key,
            cloudinary_cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME"),
            cloudinary_api_key=os.getenv("CLOUDINARY_API_KEY"),
            cloudinary_api_secret=os.getenv("CLOUDINARY_API_SECRET"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 5000)),
        )
