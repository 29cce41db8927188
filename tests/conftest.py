"""
Pytest configuration and fixtures for survey_crawler tests.

This module provides reusable test fixtures including:
- Parsed survey pages for each page kind
- A fast crawler configuration (no delay between pages)
- The mock survey host, served in-process over httpx
"""
from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from src.survey_crawler.config import CrawlerConfig
from src.survey_crawler.pages.classifier import PageClassifier
from src.survey_crawler.pages.parsed import ParsedPage
from src.survey_crawler.pages.synthesizer import FormSynthesizer
from tests.mock_server import (
    COUPON_PAGE,
    EMPTY_PAGE,
    INIT_PAGE,
    QUESTION_PAGE,
    TRANSITION_PAGE,
    create_app,
    mock_transport,
)


# =============================================================================
# PAGE FIXTURES
# =============================================================================

@pytest.fixture
def init_page() -> ParsedPage:
    """Init page with an empty receipt code and a coupon notice in its copy."""
    return ParsedPage(INIT_PAGE)


@pytest.fixture
def question_page() -> ParsedPage:
    """Question page with a radio, a checkbox and a text question."""
    return ParsedPage(QUESTION_PAGE)


@pytest.fixture
def transition_page() -> ParsedPage:
    return ParsedPage(TRANSITION_PAGE)


@pytest.fixture
def empty_page() -> ParsedPage:
    """Page with no named form fields at all."""
    return ParsedPage(EMPTY_PAGE)


@pytest.fixture
def coupon_page() -> ParsedPage:
    return ParsedPage(COUPON_PAGE)


# =============================================================================
# COMPONENT FIXTURES
# =============================================================================

@pytest.fixture
def classifier() -> PageClassifier:
    return PageClassifier()


@pytest.fixture
def synthesizer() -> FormSynthesizer:
    return FormSynthesizer()


@pytest.fixture
def fast_config() -> CrawlerConfig:
    """Config without delay between pages."""
    return CrawlerConfig(request_delay_ms=0, max_requests=50)


# =============================================================================
# MOCK SURVEY HOST FIXTURES
# =============================================================================

@pytest.fixture
def survey_app():
    """Mock survey Flask application."""
    return create_app()


@pytest_asyncio.fixture
async def survey_client(survey_app):
    """httpx client whose requests are served by the mock survey app."""
    async with httpx.AsyncClient(transport=mock_transport(survey_app)) as client:
        yield client


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "e2e: mark test as end-to-end test (runs against the mock survey)"
    )
