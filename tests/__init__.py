"""
Test suite for Survey Crawler.

This package contains all tests for the survey_crawler application.

Test Structure:
- test_cookies.py: Session cookie jar
- test_pages.py: HTML parsing helpers and form field accumulation
- test_classifier.py: Page classification
- test_synthesizer.py: Form synthesis per page kind
- test_session.py: Request construction and redirects
- test_transport.py: Relay and direct transports
- test_traversal.py: The traversal loop against scripted replies
- test_e2e.py: Full runs against the mock survey in mock_server.py
- test_web_app.py / test_cli.py: Outer surfaces

Run all tests:
    pytest tests/ -v

Run with coverage:
    pytest tests/ -v --cov=src/survey_crawler
"""
