"""
Request handler for the generate-image function.

Steps run in a fixed order: method check, credential check, input parse,
reference and target image fetch, generation call, relay. Each step that can
fail returns a StepResult, and `_failure_response` decides the HTTP status for
every error code. Only exceptions nobody anticipated reach the catch-all.
"""
import json
from dataclasses import dataclass
from typing import Any, Optional, Union

import requests
from pydantic import ValidationError

from src.media.image_fetcher import fetch_encoded_image
from src.shared.settings import Settings
from src.shared.logging_utils import (
    info as log_info,
    warning as log_warning,
    error as log_error,
    exception as log_exception,
)
from src.specs.common.envelope import ErrorInfo, StepResult
from src.specs.common.errors import (
    ConfigurationError,
    GenerationApiError,
    GenerationTransportError,
    ImageFetchError,
    InvalidInputError,
    MalformedRequestError,
)
from src.specs.models.http import ErrorBody, GenerateImageRequest
from src.tools.generation_client import GenerationClient, build_generation_request


MISSING_URL_MESSAGE = "Missing baseImageUrl"
INVALID_URL_MESSAGE = "Invalid baseImageUrl"


@dataclass(frozen=True)
class HandlerResponse:
    status_code: int
    body: str
    mimetype: str = "text/plain"

    @classmethod
    def text(cls, status_code: int, body: str) -> "HandlerResponse":
        return cls(status_code=status_code, body=body, mimetype="text/plain")

    @classmethod
    def json(cls, status_code: int, payload: Any) -> "HandlerResponse":
        return cls(status_code=status_code, body=json.dumps(payload), mimetype="application/json")


def _error_json(status_code: int, message: str) -> HandlerResponse:
    return HandlerResponse.json(status_code, ErrorBody(error=message).model_dump())


def _failure_response(error: ErrorInfo) -> HandlerResponse:
    details = error.details or {}
    if error.code == "INVALID_INPUT":
        return HandlerResponse.text(400, error.message)
    if error.code == "GENERATION_API_ERROR":
        return HandlerResponse.text(details["statusCode"], details.get("body", ""))
    if error.code == "CONFIGURATION_ERROR":
        return HandlerResponse.text(500, error.message)
    # Malformed JSON, image fetch and transport failures stay 500 with a JSON body
    return _error_json(500, error.message)


class GenerateImageHandler:
    """Turns one inbound request into one generation call.

    `settings` may be passed explicitly (tests) or left out, in which case it is
    read from the environment once the method check has passed. `session` is
    used for all outbound HTTP; when omitted a fresh one is opened and closed
    per call to `handle`.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        session: Optional[requests.Session] = None,
        invocation_id: Optional[str] = None,
    ) -> None:
        self._settings = settings
        self._session = session
        self._invocation_id = invocation_id

    def handle(self, method: str, body: Union[bytes, str, None]) -> HandlerResponse:
        inv = self._invocation_id
        log_info(inv, "generate:request", method=method)

        if (method or "").upper() != "POST":
            log_warning(inv, "generate:method_not_allowed", method=method)
            return HandlerResponse.text(405, "Method Not Allowed")

        loaded = self._load_settings()
        # The credential diagnostic wins over a broken optional setting
        settings = loaded.result if loaded.ok else Settings.credentials_from_env()
        if not settings.has_usable_api_key:
            log_error(inv, "generate:credential_misconfigured", keyLength=settings.api_key_length)
            return self._misconfigured_response(settings)
        if not loaded.ok:
            return _failure_response(loaded.error)

        session = self._session or requests.Session()
        try:
            return self._run(settings, session, body)
        except Exception as exc:
            log_exception(inv, "generate:unexpected_error", error=str(exc))
            return _error_json(500, str(exc))
        finally:
            if self._session is None:
                session.close()

    def _run(self, settings: Settings, session: requests.Session, body: Union[bytes, str, None]) -> HandlerResponse:
        parsed = self._parse_request(body)
        if not parsed.ok:
            log_warning(self._invocation_id, "generate:input_rejected", code=parsed.error.code, error=parsed.error.message)
            return _failure_response(parsed.error)

        fetched = self._fetch_images(settings, session, parsed.result.baseImageUrl)
        if not fetched.ok:
            log_error(self._invocation_id, "generate:fetch_failed", **(fetched.error.details or {}))
            return _failure_response(fetched.error)
        art_image, target_image = fetched.result

        generated = self._call_generation(settings, session, art_image, target_image)
        if not generated.ok:
            return _failure_response(generated.error)

        log_info(self._invocation_id, "generate:completed")
        return HandlerResponse.json(200, generated.result)

    def _load_settings(self) -> StepResult:
        if self._settings is not None:
            return StepResult.completed(self._settings)
        try:
            return StepResult.completed(Settings.from_env())
        except ConfigurationError as exc:
            log_error(self._invocation_id, "generate:settings_invalid", error=str(exc))
            return StepResult.failed(exc)

    @staticmethod
    def _misconfigured_response(settings: Settings) -> HandlerResponse:
        if settings.diagnostic_errors:
            message = (
                "API key is not configured correctly. "
                f"The function found an API key with length: {settings.api_key_length}. "
                "Please verify the GEMINI_API_KEY application setting."
            )
        else:
            message = "API key is not configured correctly."
        return HandlerResponse.text(500, message)

    @staticmethod
    def _parse_request(body: Union[bytes, str, None]) -> StepResult:
        try:
            data = json.loads(body or "")
        except ValueError as exc:
            return StepResult.failed(MalformedRequestError(f"Invalid JSON body: {exc}"))
        # null, "" and other falsy values count as missing
        if not isinstance(data, dict) or not data.get("baseImageUrl"):
            return StepResult.failed(InvalidInputError(MISSING_URL_MESSAGE))
        try:
            request = GenerateImageRequest.model_validate(data)
        except ValidationError as exc:
            return StepResult.failed(InvalidInputError(INVALID_URL_MESSAGE, details={"errors": exc.errors(include_url=False)}))
        return StepResult.completed(request)

    def _fetch_images(self, settings: Settings, session: requests.Session, target_url: str) -> StepResult:
        try:
            art_image = fetch_encoded_image(settings.reference_image_url, session=session, timeout=settings.fetch_timeout)
            target_image = fetch_encoded_image(target_url, session=session, timeout=settings.fetch_timeout)
        except ImageFetchError as exc:
            return StepResult.failed(exc)
        for image in (art_image, target_image):
            log_info(
                self._invocation_id,
                "generate:image_fetched",
                url=image.sourceUrl,
                mimeType=image.mimeType,
                encodedLength=len(image.base64Data),
            )
        return StepResult.completed((art_image, target_image))

    def _call_generation(self, settings: Settings, session: requests.Session, art_image, target_image) -> StepResult:
        client = GenerationClient(settings, session=session, invocation_id=self._invocation_id)
        request = build_generation_request(art_image, target_image)
        try:
            return StepResult.completed(client.generate(request))
        except (GenerationApiError, GenerationTransportError) as exc:
            return StepResult.failed(exc)
