import logging
from typing import Any, Dict, Optional


_LOGGER = logging.getLogger("mockup")


def log(level: int, invocation_id: Optional[str], message: str, exc_info: bool = False, **dimensions: Any) -> None:
    dims: Dict[str, Any] = {"invocationId": invocation_id} if invocation_id else {}
    dims.update(dimensions)
    try:
        _LOGGER.log(level, message, exc_info=exc_info, extra={"custom_dimensions": dims})
    except Exception:
        # Fallback if extra/custom_dimensions not supported in the environment
        _LOGGER.log(level, f"{message} | {dims}", exc_info=exc_info)


def info(invocation_id: Optional[str], message: str, **dimensions: Any) -> None:
    log(logging.INFO, invocation_id, message, **dimensions)


def warning(invocation_id: Optional[str], message: str, **dimensions: Any) -> None:
    log(logging.WARNING, invocation_id, message, **dimensions)


def error(invocation_id: Optional[str], message: str, **dimensions: Any) -> None:
    log(logging.ERROR, invocation_id, message, **dimensions)


def exception(invocation_id: Optional[str], message: str, **dimensions: Any) -> None:
    log(logging.ERROR, invocation_id, message, exc_info=True, **dimensions)
