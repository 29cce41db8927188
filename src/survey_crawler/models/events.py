from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


__all__ = [
    "Severity",
    "LogEvent",
]


class Severity(str, Enum):
    """Severity of a progress event."""
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"
    DEBUG = "debug"


class LogEvent(BaseModel):
    """
    A timestamped progress line for the external sink.

    Attributes:
        timestamp: When the event was emitted.
        message: Human-readable status line.
        severity: info, success, error or debug.
    """
    timestamp: datetime = Field(default_factory=datetime.now, description="Emission time")
    message: str = Field(description="Status line")
    severity: Severity = Field(default=Severity.INFO, description="Event severity")

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"[{self.timestamp.strftime('%H:%M:%S')}] {self.message}"
