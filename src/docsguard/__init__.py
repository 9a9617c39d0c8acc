"""docsguard - Detects drift between source-code functions and their documentation."""

from docsguard.base import (
    BaselineError,
    ConfigError,
    DocsguardError,
    FileTooLargeError,
    InputError,
    ParseError,
    UnsupportedLanguageError,
)
from docsguard.baseline import (
    Baseline,
    BaselineEntry,
    filter_baseline,
    load_baseline,
    save_baseline,
)
from docsguard.config import Settings
from docsguard.extractors import extract_code, extract_docs
from docsguard.heuristic import find_candidates
from docsguard.models import (
    Argument,
    CandidateLink,
    CodeEntity,
    DocSection,
    Severity,
    ValidationFinding,
)
from docsguard.validators import has_errors, validate

__all__ = [
    "Argument",
    "Baseline",
    "BaselineEntry",
    "BaselineError",
    "CandidateLink",
    "CodeEntity",
    "ConfigError",
    "DocSection",
    "DocsguardError",
    "FileTooLargeError",
    "InputError",
    "ParseError",
    "Settings",
    "Severity",
    "UnsupportedLanguageError",
    "ValidationFinding",
    "extract_code",
    "extract_docs",
    "filter_baseline",
    "find_candidates",
    "has_errors",
    "load_baseline",
    "save_baseline",
    "validate",
]
