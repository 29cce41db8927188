"""
Survey Crawler - Automated Survey Completion.

Walks a multi-page receipt survey over plain HTTP until the coupon page:
1. Submit the receipt details on the init page
2. Answer each question page with the first available option
3. Resubmit transition pages unchanged
4. Stop when the coupon page is reached

Quick Start:
    >>> from survey_crawler import SurveyCrawler
    >>>
    >>> crawler = SurveyCrawler(verbose=True)
    >>> result = await crawler.run("https://survey.example.jp/s/RJP0001")

CLI Usage:
    $ python -m survey_crawler run -u https://survey.example.jp/s/RJP0001

Modules:
    - transport: Relay and direct HTTP transports, cookie jar
    - pages: HTML parsing, page classification, form synthesis
    - navigation: The traversal loop
    - models: Data models (PageEnvelope, Session, CrawlResult)
"""
from .config import CrawlerConfig
from .main import SurveyCrawler, run_cli, __version__

__author__ = "Survey Crawler Team"

__all__ = [
    "CrawlerConfig",
    "SurveyCrawler",
    "run_cli",
    "__version__",
]
