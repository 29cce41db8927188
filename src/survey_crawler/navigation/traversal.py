"""
Traversal loop for survey completion.

This module implements the automaton that walks the survey:
1. SEND: Deliver the pending request through the transport
2. COOKIES: Store any Set-Cookie values
3. REDIRECT: Follow 301/302/303/307 without parsing the body
4. CLASSIFY: Decide what kind of page came back
5. SYNTHESIZE: Build the next form submission
6. WAIT: Pause before the next request

The loop stops on the coupon page (COMPLETED), on the first fatal error
(FAILED) or when a stop was requested (STOPPED). Each page's content
decides the next request, so exactly one request is in flight at a time.

Example Usage:
    >>> from survey_crawler.navigation import TraversalLoop
    >>> from survey_crawler.transport import DirectTransport
    >>>
    >>> async with DirectTransport() as transport:
    ...     loop = TraversalLoop(transport)
    ...     result = await loop.run("https://survey.example.jp/s/RJP0001")
    ...     print(result.state)
"""
from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime
from typing import Optional
from urllib.parse import urlparse

from ..config import CrawlerConfig
from ..errors import RejectionLoopError, PageLimitError, SurveyCrawlerError
from ..models.crawl_result import CrawlResult, RunState
from ..models.envelope import HttpMethod, PageEnvelope
from ..models.page_kind import FormSubmission, PageKind
from ..models.session import Session
from ..pages.classifier import PageClassifier
from ..pages.parsed import ParsedPage
from ..pages.synthesizer import FormSynthesizer
from ..progress import ProgressIndicator
from ..transport.base import TransportAdapter


__all__ = [
    "TraversalLoop",
    "run_survey_traversal",
    "validate_survey_url",
]

logger = logging.getLogger(__name__)


# Longest page title shown in progress output
TITLE_PREVIEW_LENGTH = 50


def validate_survey_url(survey_url: str) -> str:
    """
    Check that a survey URL can start a run.

    Returns:
        The stripped URL.

    Raises:
        ValueError: The URL is empty or not an absolute http(s) URL.
    """
    url = (survey_url or "").strip()
    if not url:
        raise ValueError("survey_url is required")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"survey_url must be an absolute http(s) URL: {url}")
    return url


class TraversalLoop:
    """
    Walks a survey from its first page to the coupon page.

    The loop owns the Session for the duration of a run; nothing else
    keeps state between pages. A stop may be requested from any thread
    and takes effect before the next request is sent.

    Attributes:
        transport: Adapter that delivers requests.
        config: Delay, request budget and other settings.
        progress: Sink for progress events.
        classifier: Page classifier.
        synthesizer: Form synthesizer.
        state: Current run state.
    """

    def __init__(
        self,
        transport: TransportAdapter,
        config: Optional[CrawlerConfig] = None,
        progress: Optional[ProgressIndicator] = None,
        classifier: Optional[PageClassifier] = None,
        synthesizer: Optional[FormSynthesizer] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Initialize the TraversalLoop.

        Args:
            transport: Transport used for every request.
            config: Crawler settings (environment defaults if None).
            progress: Progress sink (a silent one is created if None).
            classifier: PageClassifier instance (created if None).
            synthesizer: FormSynthesizer instance (created if None).
            stop_event: Shared stop flag (created if None).
        """
        self.transport = transport
        self.config = config or CrawlerConfig.from_env()
        self.progress = progress or ProgressIndicator(verbose=False)
        self.classifier = classifier or PageClassifier()
        self.synthesizer = synthesizer or FormSynthesizer()
        self.state = RunState.RUNNING
        self.session: Optional[Session] = None
        self._stop_event = stop_event or threading.Event()

        logger.debug(
            f"TraversalLoop initialized: delay={self.config.request_delay_ms}ms, "
            f"max_requests={self.config.max_requests}"
        )

    def request_stop(self) -> None:
        """Ask the loop to stop before its next request. Safe from any thread."""
        self._stop_event.set()

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    async def run(self, survey_url: str) -> CrawlResult:
        """
        Run the survey from its start URL until a terminal state.

        Args:
            survey_url: Absolute URL of the survey's first page.

        Returns:
            CrawlResult with the terminal state and the emitted events.

        Raises:
            ValueError: survey_url is empty or not an absolute http(s) URL.
        """
        survey_url = validate_survey_url(survey_url)
        start_time = datetime.now()
        events_before = len(self.progress.events)

        session = Session(current_url=survey_url)
        self.session = session
        self.state = RunState.RUNNING
        error_message: Optional[str] = None

        self.progress.info(f"Survey run started: {survey_url}")

        try:
            self.state = await self._traverse(session)
        except SurveyCrawlerError as e:
            self.state = RunState.FAILED
            error_message = str(e)
            self.progress.error(f"Stopped: {error_message}")
        except Exception as e:
            self.state = RunState.FAILED
            error_message = f"Unexpected error: {e}"
            logger.exception("Survey traversal failed")
            self.progress.error(error_message)

        return CrawlResult(
            success=self.state is RunState.COMPLETED,
            state=self.state,
            survey_url=survey_url,
            final_url=session.current_url,
            pages_visited=session.page_counter,
            requests_sent=session.requests_sent,
            start_time=start_time,
            end_time=datetime.now(),
            events=self.progress.events[events_before:],
            error_message=error_message,
        )

    async def _traverse(self, session: Session) -> RunState:
        """Loop until the coupon page or a stop; errors propagate."""
        while True:
            if self.stop_requested:
                self.progress.info("Stop requested, run stopped")
                return RunState.STOPPED

            if session.requests_sent >= self.config.max_requests:
                raise PageLimitError(self.config.max_requests)

            envelope = await self._send(session)
            session.cookies.ingest(envelope.set_cookie_headers)

            if envelope.is_redirect:
                target = session.follow_redirect(envelope.redirect_location or "")
                self.progress.debug(f"Redirect {envelope.http_status} -> {target}")
                continue

            page = ParsedPage(envelope.body_html)
            kind = self.classifier.classify(page)
            session.page_counter += 1

            if kind is PageKind.COMPLETION:
                self.progress.success("Reached the coupon page")
                return RunState.COMPLETED

            if kind is PageKind.INIT and session.method is HttpMethod.POST:
                raise RejectionLoopError(session.pending_body)

            submission = self.synthesizer.synthesize(kind, page, session.current_url)
            self._report_page(session, submission)
            session.advance(submission)

            await asyncio.sleep(self.config.request_delay_seconds)

    async def _send(self, session: Session) -> PageEnvelope:
        request = session.build_request()
        session.requests_sent += 1
        logger.debug(f"Request #{session.requests_sent}: {request.method.value} {request.url}")
        envelope = await self.transport.send(request)
        logger.debug(
            f"Response: status={envelope.http_status}, "
            f"cookies={len(envelope.set_cookie_headers)}, body={len(envelope.body_html)} chars"
        )
        return envelope

    def _report_page(self, session: Session, submission: FormSubmission) -> None:
        """Emit the progress lines for one handled page."""
        if submission.kind is PageKind.INIT:
            self.progress.info(">>> [Init] Submitting receipt details")
        elif submission.kind is PageKind.QUESTION:
            title = submission.title or f"Page {session.page_counter}"
            if len(title) > TITLE_PREVIEW_LENGTH:
                title = title[:TITLE_PREVIEW_LENGTH] + "..."
            self.progress.info(f"[P{session.page_counter}] {title}")
        else:
            self.progress.info(
                f"[P{session.page_counter}] Transition page, submitting {len(submission.fields)} fields"
            )

        for answer in submission.answers:
            self.progress.info(f"   └ {answer}")


async def run_survey_traversal(
    transport: TransportAdapter,
    survey_url: str,
    config: Optional[CrawlerConfig] = None,
    progress: Optional[ProgressIndicator] = None,
    stop_event: Optional[threading.Event] = None,
) -> CrawlResult:
    """
    Run a complete survey traversal.

    Convenience function that creates the loop and runs it.

    Args:
        transport: Open transport adapter.
        survey_url: URL of the survey.
        config: Crawler settings.
        progress: Progress sink.
        stop_event: Shared stop flag.

    Returns:
        Final CrawlResult.
    """
    loop = TraversalLoop(
        transport=transport,
        config=config,
        progress=progress,
        stop_event=stop_event,
    )
    return await loop.run(survey_url)
