from pydantic import BaseModel
from typing import Any, Optional, Dict, Literal

from src.specs.common.errors import MockupError


class ErrorInfo(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class StepResult(BaseModel):
    """Outcome of one handler step: either a result or the error that stopped it."""

    status: Literal["completed", "failed"]
    result: Optional[Any] = None
    error: Optional[ErrorInfo] = None

    @classmethod
    def completed(cls, result: Any) -> "StepResult":
        return cls(status="completed", result=result)

    @classmethod
    def failed(cls, exc: MockupError) -> "StepResult":
        return cls(
            status="failed",
            error=ErrorInfo(code=exc.code, message=str(exc), details=exc.details or None),
        )

    @property
    def ok(self) -> bool:
        return self.status == "completed"
