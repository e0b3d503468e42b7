from __future__ import annotations

from dataclasses import dataclass

VALIDATION_ERROR = "VALIDATION_ERROR"


@dataclass
class ApiError(Exception):
    """Error surfaced to clients as ``{"success": false, "error": {...}}``."""

    code: str
    message: str
    status_code: int = 400

    @classmethod
    def validation(cls, message: str) -> ApiError:
        return cls(VALIDATION_ERROR, message, 422)
