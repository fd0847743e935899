"""Utilities for cleaning generated website code."""

from __future__ import annotations

import logging
import re

from src.sitesmith.prompts.site_rules import DOCUMENT_START_MARKER

logger = logging.getLogger(__name__)


class CodeSanitizer:
    """Strip markdown formatting artifacts from model output."""

    _LEADING_FENCE_PATTERN = re.compile(r"^\s*```[\w-]*[ \t]*\n?")
    _TRAILING_FENCE_PATTERN = re.compile(r"\n?[ \t]*```\s*$")

    def strip_code_fences(self, text: str) -> str:
        """Remove a leading fence opener and a trailing fence marker from a block of text."""
        cleaned = (text or "").strip()
        cleaned = self._LEADING_FENCE_PATTERN.sub("", cleaned, count=1)
        cleaned = self._TRAILING_FENCE_PATTERN.sub("", cleaned, count=1)
        return cleaned.strip()

    def looks_like_html_document(self, text: str) -> bool:
        return (text or "").lstrip().lower().startswith(DOCUMENT_START_MARKER.lower())

    def sanitize_html(self, raw: str) -> str:
        """
        Return the HTML document inside ``raw``.

        A result that does not start with the doctype is logged and returned as-is.
        """
        cleaned = self.strip_code_fences(raw)
        if not self.looks_like_html_document(cleaned):
            logger.warning(
                "Generated code doesn't start with %s. The model may have ignored the output format.",
                DOCUMENT_START_MARKER,
            )
        return cleaned
