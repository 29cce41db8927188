"""
Survey Crawler Main Module - Survey Traversal Pipeline.

This module provides the SurveyCrawler class which ties the pieces of a
run together:
1. Configuration: Resolve relay, delay, timeout and request budget
2. Transport: Open a relay or direct HTTP transport
3. Traversal: Walk the survey until the coupon page
4. Result: Report the terminal state and the progress log

CLI Usage:
    $ python -m survey_crawler run --url https://survey.example.jp/s/RJP0001
    $ python -m survey_crawler run -u https://survey.example.jp/s/RJP0001 --relay-url https://relay.example.com
    $ python -m survey_crawler web --port 5000

Example Python Usage:
    >>> from survey_crawler.main import SurveyCrawler
    >>>
    >>> crawler = SurveyCrawler(verbose=True)
    >>> result = await crawler.run("https://survey.example.jp/s/RJP0001")
    >>>
    >>> if result.success:
    ...     print(f"Coupon page: {result.final_url}")
"""
from __future__ import annotations

import asyncio
import logging
import sys
import threading
from typing import Optional

import click

from .config import CrawlerConfig
from .models.crawl_result import CrawlResult, RunState
from .navigation.traversal import TraversalLoop, validate_survey_url
from .progress import ProgressCallback, ProgressIndicator
from .transport.base import TransportAdapter
from .transport.direct import DirectTransport
from .transport.relay import RelayTransport


__all__ = ["SurveyCrawler", "run_cli"]

logger = logging.getLogger(__name__)

__version__ = "0.1.0"


# =============================================================================
# SURVEY CRAWLER CLASS
# =============================================================================

class SurveyCrawler:
    """
    Main orchestrator for one survey run at a time.

    Builds the transport from the configuration, runs the traversal loop
    and exposes a thread-safe stop control.

    Attributes:
        config: Crawler settings.
        progress: Progress sink shared with the traversal loop.
    """

    def __init__(
        self,
        config: Optional[CrawlerConfig] = None,
        verbose: bool = True,
        progress_callback: Optional[ProgressCallback] = None,
        transport: Optional[TransportAdapter] = None,
        show_debug: bool = False,
    ) -> None:
        """
        Initialize SurveyCrawler.

        Args:
            config: Crawler settings (environment defaults if None).
            verbose: Show progress messages in console.
            progress_callback: Optional callback for every progress event.
            transport: Transport to use instead of one built from config.
            show_debug: Also print debug events such as redirect hops.
        """
        self.config = config or CrawlerConfig.from_env()
        self.progress = ProgressIndicator(
            verbose=verbose,
            callback=progress_callback,
            show_debug=show_debug,
        )
        self._transport = transport
        self._stop_event = threading.Event()

        logger.debug(
            f"SurveyCrawler initialized: relay={'yes' if self.config.uses_relay else 'no'}"
        )

    def build_transport(self) -> TransportAdapter:
        """Create the transport described by the configuration."""
        if self._transport is not None:
            return self._transport
        if self.config.relay_url:
            return RelayTransport(
                self.config.relay_url,
                timeout_ms=self.config.request_timeout_ms,
            )
        return DirectTransport(
            timeout_ms=self.config.request_timeout_ms,
            user_agent=self.config.user_agent,
        )

    def request_stop(self) -> None:
        """Stop the current or next run before its next request. Safe from any thread."""
        self._stop_event.set()

    async def run(self, survey_url: str) -> CrawlResult:
        """
        Run the survey from its start URL.

        Args:
            survey_url: Absolute URL of the survey's first page.

        Returns:
            CrawlResult with the terminal state.

        Raises:
            ValueError: survey_url is empty or not an absolute http(s) URL.
        """
        survey_url = validate_survey_url(survey_url)

        try:
            async with self.build_transport() as transport:
                loop = TraversalLoop(
                    transport=transport,
                    config=self.config,
                    progress=self.progress,
                    stop_event=self._stop_event,
                )
                return await loop.run(survey_url)
        finally:
            # A stop flag covers one run only
            self._stop_event.clear()


# =============================================================================
# CLI INTERFACE
# =============================================================================

@click.group()
@click.version_option(version=__version__, prog_name="survey-crawler")
def cli():
    """
    Survey Crawler - Automated Survey Completion.

    Walks a receipt survey page by page and stops on the coupon screen.
    """
    pass


@cli.command()
@click.option(
    "-u", "--url",
    required=True,
    help="Survey URL to complete.",
)
@click.option(
    "--relay-url",
    default=None,
    help="Relay endpoint that performs requests (env: SURVEY_RELAY_URL).",
)
@click.option(
    "--delay-ms",
    type=int,
    default=None,
    help="Delay between pages in ms (default: 300).",
)
@click.option(
    "--timeout-ms",
    type=int,
    default=None,
    help="Per-request timeout in ms (default: 30000).",
)
@click.option(
    "--max-requests",
    type=int,
    default=None,
    help="Request budget for the run (default: 200).",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    default=False,
    help="Show debug output, including redirect hops.",
)
def run(
    url: str,
    relay_url: Optional[str],
    delay_ms: Optional[int],
    timeout_ms: Optional[int],
    max_requests: Optional[int],
    verbose: bool,
):
    """
    Complete a survey from its URL.

    Example:

        $ python -m survey_crawler run -u https://survey.example.jp/s/RJP0001

        $ python -m survey_crawler run -u https://survey.example.jp/s/RJP0001 --delay-ms 500 -v
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = CrawlerConfig.from_env(
            relay_url=relay_url,
            request_delay_ms=delay_ms,
            request_timeout_ms=timeout_ms,
            max_requests=max_requests,
        )
        validate_survey_url(url)
    except ValueError as e:
        click.echo(click.style(f"[ERROR] {e}", fg="red"))
        sys.exit(1)

    click.echo()
    click.echo(click.style("=" * 50, fg="blue"))
    click.echo(click.style("  SURVEY CRAWLER - Automated Survey Completion", fg="blue", bold=True))
    click.echo(click.style("=" * 50, fg="blue"))
    click.echo()
    click.echo(f"[URL] {url}")
    click.echo(f"[Mode] {'Relay: ' + config.relay_url if config.relay_url else 'Direct'}")
    click.echo()

    crawler = SurveyCrawler(config=config, verbose=True, show_debug=verbose)

    try:
        result = asyncio.run(crawler.run(url))
    except KeyboardInterrupt:
        click.echo()
        click.echo(click.style("Interrupted by user", fg="yellow"))
        sys.exit(130)

    click.echo()
    click.echo(click.style("=" * 50, fg="blue"))
    click.echo(click.style("  RESULTS", fg="blue", bold=True))
    click.echo(click.style("=" * 50, fg="blue"))
    click.echo()

    if result.success:
        click.echo(click.style("[SUCCESS] Coupon page reached!", fg="green", bold=True))
        click.echo(f"[Coupon] Open: {result.final_url}")
    elif result.state is RunState.STOPPED:
        click.echo(click.style("[STOPPED] Run stopped", fg="yellow", bold=True))
    else:
        click.echo(click.style("[FAILED] Survey failed", fg="red", bold=True))
        if result.error_message:
            click.echo(f"Error: {result.error_message}")

    click.echo(f"[Pages] {result.pages_visited} pages, {result.requests_sent} requests")
    if result.duration_seconds is not None:
        click.echo(f"[Time] Duration: {result.duration_seconds:.1f}s")
    click.echo()

    if result.success:
        sys.exit(0)
    sys.exit(130 if result.state is RunState.STOPPED else 1)


@cli.command()
def version():
    """Show version information."""
    click.echo(f"Survey Crawler v{__version__}")
    click.echo("Automated Survey Completion")
    click.echo()
    click.echo("Modules:")
    click.echo("  - Transport: Relay envelope or direct HTTP")
    click.echo("  - Classifier: Init / Question / Transition / Completion")
    click.echo("  - Synthesizer: Form submission per page kind")
    click.echo("  - Traversal: Cookie, redirect and page loop")


@cli.command()
@click.option(
    "-p", "--port",
    type=int,
    default=5000,
    help="Port to run on (default: 5000).",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode.",
)
def web(port: int, debug: bool):
    """
    Start the web API server.

    Example:

        $ python -m survey_crawler web

        $ python -m survey_crawler web --port 8080 --debug
    """
    from .web.app import app

    click.echo()
    click.echo(click.style("=" * 63, fg="cyan"))
    click.echo(click.style("           SURVEY CRAWLER WEB API", fg="cyan"))
    click.echo(click.style("=" * 63, fg="cyan"))
    click.echo(click.style(f"  Health: http://localhost:{port}/api/health", fg="cyan"))
    click.echo(click.style("  Press Ctrl+C to stop", fg="cyan"))
    click.echo(click.style("=" * 63, fg="cyan"))
    click.echo()

    app.run(host="0.0.0.0", port=port, debug=debug, threaded=True)


def run_cli():
    """Entry point for CLI."""
    cli()


# =============================================================================
# MODULE ENTRY POINT
# =============================================================================

if __name__ == "__main__":
    run_cli()
