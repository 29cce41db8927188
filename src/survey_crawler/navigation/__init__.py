"""
Survey traversal for the survey crawler.

The traversal loop is the automaton that sends requests, follows
redirects, classifies each page and submits the synthesized form until
the coupon page is reached.
"""
from .traversal import (
    TraversalLoop,
    run_survey_traversal,
    validate_survey_url,
)

__all__ = [
    "TraversalLoop",
    "run_survey_traversal",
    "validate_survey_url",
]
