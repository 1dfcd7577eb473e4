"""
Client for the Gemini generateContent endpoint used to render product mockups
"""
from typing import Any, Dict, Optional

import requests

from src.shared.settings import Settings
from src.shared.logging_utils import info as log_info, error as log_error
from src.specs.common.errors import GenerationApiError, GenerationTransportError
from src.specs.models.generation import (
    Content,
    EncodedImage,
    GenerationConfig,
    GenerationRequest,
    Part,
)


MOCKUP_PROMPT = (
    "You are a master product photographer and mockup artist. Your primary goal is to make the turtle art "
    "the hero of the image. Place the turtle graphic from the first image onto the blank hat in the second "
    "image as a premium, vibrant, and photorealistic screenprinted transfer. The artwork should be the "
    "undeniable star of the final product shot. Position the design with precision in the absolute lower "
    "right corner of the hat's front panel, right where the panel meets the bill. The lighting must be "
    "flawless, making the art pop while casting realistic, subtle shadows on the hat's texture. The final "
    "image must be a high-end, commercial-quality product photo that showcases the stunning detail of the "
    "art on the hat."
)


def build_generation_request(art_image: EncodedImage, target_image: EncodedImage, prompt: str = MOCKUP_PROMPT) -> GenerationRequest:
    """Prompt first, then the reference art, then the caller's product image."""
    return GenerationRequest(
        contents=[
            Content(parts=[Part(text=prompt), art_image.to_part(), target_image.to_part()])
        ],
        generationConfig=GenerationConfig(responseModalities=["IMAGE"]),
    )


class GenerationClient:
    def __init__(self, settings: Settings, *, session: Optional[requests.Session] = None, invocation_id: Optional[str] = None) -> None:
        self.settings = settings
        self._http = session or requests
        self._invocation_id = invocation_id

    def generate(self, request: GenerationRequest) -> Dict[str, Any]:
        """POST the request and return the decoded JSON response.

        Raises GenerationApiError with the downstream status and body text when
        the API does not answer 2xx, and GenerationTransportError when it cannot
        be reached.
        """
        # Never log the URL with its query string; it carries the key
        log_info(self._invocation_id, "generation:request", model=self.settings.model)
        try:
            response = self._http.post(
                self.settings.generate_content_url,
                params={"key": self.settings.api_key},
                headers={"Content-Type": "application/json"},
                json=request.to_payload(),
                timeout=self.settings.api_timeout,
            )
        except requests.RequestException as exc:
            log_error(self._invocation_id, "generation:transport_error", errorType=type(exc).__name__)
            raise GenerationTransportError(type(exc).__name__) from None
        if not response.ok:
            body = response.text
            log_error(self._invocation_id, "generation:api_error", statusCode=response.status_code, body=body)
            raise GenerationApiError(response.status_code, body)
        log_info(self._invocation_id, "generation:completed", statusCode=response.status_code)
        return response.json()
