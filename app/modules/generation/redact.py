"""Replace links and email addresses before text is sent to a model."""

from __future__ import annotations

import re

LINK_PLACEHOLDER = "[LINK]"
EMAIL_PLACEHOLDER = "[EMAIL]"

_URL_RE = re.compile(r"https?://\S+", re.IGNORECASE)
_WWW_RE = re.compile(r"www\.\S+", re.IGNORECASE)
_EMAIL_RE = re.compile(r"[\w.-]+@[\w.-]+\.[A-Za-z]{2,6}", re.IGNORECASE)


def redact(text: str) -> str:
    if not text:
        return text
    text = _URL_RE.sub(LINK_PLACEHOLDER, text)
    text = _WWW_RE.sub(LINK_PLACEHOLDER, text)
    return _EMAIL_RE.sub(EMAIL_PLACEHOLDER, text)
