# =============================================================================
# Wire Models (Transport Adapter)
# Used for: Requests handed to a transport and the replies it returns
# =============================================================================
from .envelope import (
    HttpMethod,  # Enum: GET, POST
    PageEnvelope,  # Status, redirect location, body, Set-Cookie values
    REDIRECT_STATUSES,  # Statuses followed as redirects
    TransportRequest,  # URL, method, headers, body
)

# =============================================================================
# Page Models (Classifier / Synthesizer)
# Used for: Classifying pages and describing the next submission
# =============================================================================
from .page_kind import (
    FormSubmission,  # Next request synthesized from a page
    PageKind,  # Enum: INIT, QUESTION, TRANSITION, COMPLETION
)

# =============================================================================
# Run Models (Traversal Loop)
# Used for: Session state, progress events and the final result
# =============================================================================
from .session import Session
from .events import LogEvent, Severity
from .crawl_result import CrawlResult, RunState

# =============================================================================
# Public API
# =============================================================================
__all__ = [
    # Wire
    "HttpMethod",
    "PageEnvelope",
    "REDIRECT_STATUSES",
    "TransportRequest",

    # Pages
    "FormSubmission",
    "PageKind",

    # Run
    "CrawlResult",
    "LogEvent",
    "RunState",
    "Session",
    "Severity",
]
