import base64
import logging
from typing import Optional

import requests

from common.utils.constants import IMGBB_API_KEY, IMGBB_TIMEOUT_SECONDS, IMGBB_UPLOAD_URL
from common.utils.custom_exceptions import ImageUploadFailed

logger = logging.getLogger(__name__)


class ImageService:
    def __init__(
        self,
        api_key: Optional[str] = IMGBB_API_KEY,
        upload_url: str = IMGBB_UPLOAD_URL,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.upload_url = upload_url
        self.session = session or requests.Session()

    def upload(self, image: bytes | str, filename: str = "image") -> str:
        """Upload raw bytes or a base64 string and return the hosted URL."""
        if not self.api_key:
            raise RuntimeError("IMGBB_API_KEY environment variable is not set")
        if isinstance(image, str):
            try:
                image = base64.b64decode(image, validate=True)
            except ValueError as err:
                raise ImageUploadFailed("image is not valid base64") from err

        try:
            resp = self.session.post(
                self.upload_url,
                params={"key": self.api_key},
                files={"image": (filename, image)},
                timeout=IMGBB_TIMEOUT_SECONDS,
            )
        except requests.RequestException as err:
            logger.error(f"Image upload to {self.upload_url} failed: {err}")
            raise ImageUploadFailed(str(err)) from err

        try:
            body = resp.json()
        except ValueError:
            body = {}

        if resp.ok and body.get("success"):
            url = body.get("data", {}).get("url")
            logger.info(f"Uploaded {filename} to {url}")
            return url

        message = (body.get("error") or {}).get("message") or f"HTTP {resp.status_code}"
        logger.error(f"Image upload rejected: {message}")
        raise ImageUploadFailed(message)
