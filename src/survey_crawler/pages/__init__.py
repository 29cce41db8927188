from .classifier import PageClassifier
from .form_data import FormFields
from .parsed import ParsedPage
from .synthesizer import FormSynthesizer

__all__ = [
    "FormFields",
    "FormSynthesizer",
    "PageClassifier",
    "ParsedPage",
]
