"""Prompt augmentation, text extraction and output cleanup helpers."""
from __future__ import annotations
from typing import Callable

from classroom_proxy.common.schema import UpstreamResponse

FORMAT_NOTE = (
    "Formatting: write all math in plain text that can be pasted anywhere "
    "(for example 3/4, x^2, sqrt(2), a*b). Do not use LaTeX or \\( \\) / \\[ \\] delimiters."
)

# Applied in order. Delimiters go first so "\(" is removed whole instead of
# leaving a lone backslash for the collapse rule.
CLEANUP_RULES: tuple[tuple[str, str], ...] = (
    ("\\(", ""),
    ("\\)", ""),
    ("\\[", ""),
    ("\\]", ""),
    ("\\\\", "\\"),
)


def augment_system(system: str) -> str:
    """
    Append the plain-text math note to system text.

    Args:
        system: Caller's system text, already capped.

    Returns:
        System text and note separated by a blank line, or the note alone.
    """
    return "\n\n".join(part for part in (system, FORMAT_NOTE) if part)


def clean_text(text: str) -> str:
    for pattern, replacement in CLEANUP_RULES:
        text = text.replace(pattern, replacement)
    return text


def _flat_output_text(upstream: UpstreamResponse) -> str:
    if upstream.output_text and upstream.output_text.strip():
        return upstream.output_text
    return ""


def _nested_output_content(upstream: UpstreamResponse) -> str:
    if not upstream.output:
        return ""
    parts = [text for item in upstream.output for text in item]
    return "\n".join(parts).strip()


EXTRACTORS: tuple[Callable[[UpstreamResponse], str], ...] = (
    _flat_output_text,
    _nested_output_content,
)


def extract_text(upstream: UpstreamResponse) -> str:
    """Return text from the first extractor that yields any, else an empty string."""
    for extractor in EXTRACTORS:
        text = extractor(upstream)
        if text:
            return text
    return ""
