"""Errors raised by StepWalker."""

from typing import Any, Dict, Optional


class StepWalkerError(Exception):
    code = "STEPWALKER_ERROR"

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error_code": self.code, "error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class WalkCancelledError(StepWalkerError):
    """The caller asked the walk to stop between two steps"""
    code = "WALK_CANCELLED"


class PositionUpdateError(StepWalkerError):
    code = "POSITION_UPDATE_FAILED"


class ConfigError(StepWalkerError, ValueError):
    code = "CONFIG_ERROR"
