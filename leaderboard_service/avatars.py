"""Subida de avatares al media host (Cloudinary) usando httpx."""

import hashlib
import logging
import time
from typing import Optional

import httpx

from .errors import AvatarUploadError

logger = logging.getLogger(__name__)

CLOUDINARY_API_URL = "https://api.cloudinary.com/v1_1"


def sign_params(params: dict, api_secret: str) -> str:
    """Firma de Cloudinary: SHA-1 de los parámetros ordenados (k=v unidos por '&') más el secreto."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class AvatarUploader:
    """Sube una imagen y devuelve su URL pública (secure_url)."""

    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        folder: str = "avatars",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    @property
    def upload_url(self) -> str:
        return f"{CLOUDINARY_API_URL}/{self.cloud_name}/image/upload"

    async def upload(self, image: str) -> str:
        """
        Sube `image` (data URI, URL remota o base64) a la carpeta configurada.
        Cualquier fallo se propaga como AvatarUploadError; no hay reintentos.
        """
        if not self.configured:
            logger.error("Cannot upload avatar: Cloudinary credentials are not configured.")
            raise AvatarUploadError("Avatar storage is not configured.")

        params = {"folder": self.folder, "timestamp": int(time.time())}
        payload = {
            **params,
            "file": image,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }

        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.post(self.upload_url, data=payload)
                response.raise_for_status()
            except (httpx.RequestError, httpx.HTTPStatusError) as exc:
                logger.error(f"Error uploading avatar to Cloudinary: {exc}")
                if isinstance(exc, httpx.HTTPStatusError):
                    logger.error(f"Cloudinary response: {exc.response.text}")
                raise AvatarUploadError()

        secure_url = response.json().get("secure_url")
        if not secure_url:
            logger.error(f"Cloudinary response has no secure_url: {response.text}")
            raise AvatarUploadError()

        logger.info(f"Avatar uploaded: {secure_url}")
        return secure_url
