from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field

from .events import LogEvent


__all__ = [
    "RunState",
    "CrawlResult",
]


class RunState(str, Enum):
    """Lifecycle state of a traversal run."""
    RUNNING = "running"
    COMPLETED = "completed"    # Coupon page reached
    FAILED = "failed"          # Fatal error, see error_message
    STOPPED = "stopped"        # Stop requested by the caller


class CrawlResult(BaseModel):
    """
    Complete result of a survey traversal run.

    Attributes:
        success: Whether the coupon page was reached.
        state: Terminal run state.
        survey_url: URL the run started from.
        final_url: URL of the last request sent.
        pages_visited: Number of pages parsed.
        requests_sent: Number of requests sent, redirects included.
        start_time: When the run started.
        end_time: When the run finished.
        events: Progress events emitted during the run.
        error_message: Error message (if failed).
    """
    success: bool = Field(description="Whether the coupon page was reached")
    state: RunState = Field(description="Terminal run state")
    survey_url: str = Field(description="Starting survey URL")
    final_url: Optional[str] = Field(default=None, description="Last requested URL")
    pages_visited: int = Field(default=0, description="Pages parsed")
    requests_sent: int = Field(default=0, description="Requests sent")
    start_time: datetime = Field(
        default_factory=datetime.now,
        description="Run start time"
    )
    end_time: Optional[datetime] = Field(
        default=None,
        description="Run end time"
    )
    events: List[LogEvent] = Field(
        default_factory=list,
        description="Progress events"
    )
    error_message: Optional[str] = Field(
        default=None,
        description="Error message if failed"
    )

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration of the run in seconds."""
        if self.end_time and self.start_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def to_summary(self) -> dict:
        """Get a summary dictionary."""
        return {
            "success": self.success,
            "state": self.state.value,
            "survey_url": self.survey_url,
            "final_url": self.final_url,
            "pages_visited": self.pages_visited,
            "requests_sent": self.requests_sent,
            "duration_seconds": self.duration_seconds,
            "error": self.error_message,
        }
