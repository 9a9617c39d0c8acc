"""docsguard.extractors - Entity extraction from source code and markdown."""

from docsguard.extractors.code import (
    SourceLanguage,
    extract_code,
    extract_code_source,
    extract_docs_id_from_comment,
    find_docs_annotation,
)
from docsguard.extractors.docs import (
    extract_docs,
    extract_docs_id_from_html,
    extract_docs_source,
)

__all__ = [
    "SourceLanguage",
    "extract_code",
    "extract_code_source",
    "extract_docs",
    "extract_docs_source",
    "extract_docs_id_from_comment",
    "extract_docs_id_from_html",
    "find_docs_annotation",
]
