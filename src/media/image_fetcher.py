import base64
from io import BytesIO
from typing import Optional

import requests
from PIL import Image, UnidentifiedImageError

from src.specs.common.errors import ImageFetchError
from src.specs.models.generation import EncodedImage


FALLBACK_MIME_TYPE = "application/octet-stream"


def _sniff_mime_type(data: bytes) -> str:
    # Only reads the header; the image is never decoded
    try:
        with Image.open(BytesIO(data)) as img:
            mime = Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError):
        mime = None
    return mime or FALLBACK_MIME_TYPE


def _declared_mime_type(response: requests.Response) -> Optional[str]:
    content_type = response.headers.get("Content-Type") or ""
    mime = content_type.split(";")[0].strip().lower()
    return mime or None


def fetch_encoded_image(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> EncodedImage:
    """Download `url` and return it base64-encoded with its MIME type.

    Raises ImageFetchError for transport failures and non-2xx statuses. The
    body is buffered fully in memory; there is no retry.
    """
    http = session or requests
    try:
        response = http.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise ImageFetchError(url, str(exc)) from exc
    if not response.ok:
        raise ImageFetchError(url, response.reason or str(response.status_code), status_code=response.status_code)

    data = response.content
    mime_type = _declared_mime_type(response) or _sniff_mime_type(data)
    return EncodedImage(
        mimeType=mime_type,
        base64Data=base64.b64encode(data).decode("ascii"),
        sourceUrl=url,
    )
