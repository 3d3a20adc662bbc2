"""Log sanitizer - removes secrets and account PII from log messages.

AEZA responses carry the account email and requests carry the API key;
neither may end up in the log files.
"""

import json
import re
from typing import Any

# Patterns to detect and redact sensitive data
SENSITIVE_PATTERNS = [
    # Email addresses
    (r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b', '[EMAIL]'),

    # X-API-Key header values, in either dict or header-line form
    (r'(x-api-key)(["\']?\s*[:=]\s*["\']?)[^\s,}"\']+', r'\1\2[REDACTED]'),

    # Secrets in key=value format
    (r'(password|secret|token|api_key|apikey)(["\']?\s*[:=]\s*["\']?)[^\s,}"\']{8,}',
     r'\1\2[REDACTED]'),

    # Bearer tokens
    (r'(Bearer|Basic)\s+[A-Za-z0-9\-_\.]+', r'\1 [REDACTED]'),

    # Generic long alphanumeric strings that look like keys (32+ chars)
    (r'\b[A-Za-z0-9]{32,}\b', '[LONG_TOKEN]'),
]

# Compiled patterns for efficiency
_COMPILED_PATTERNS = [(re.compile(p, re.IGNORECASE), r) for p, r in SENSITIVE_PATTERNS]


def sanitize_log(text: str) -> str:
    """Remove sensitive data from text for safe logging.

    Args:
        text: The text to sanitize

    Returns:
        Sanitized text with sensitive data replaced by placeholders
    """
    if not text:
        return text

    for pattern, replacement in _COMPILED_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def sanitize_for_log(value: Any, max_length: int = 300) -> str:
    """Render any value (dict, bytes, str) as a sanitized, truncated log string."""
    if value is None:
        return "None"

    if isinstance(value, bytes):
        text = value.decode("utf-8", errors="replace")
    elif isinstance(value, (dict, list)):
        text = json.dumps(value, ensure_ascii=False, default=str)
    else:
        text = str(value)

    text = sanitize_log(text)
    if len(text) > max_length:
        text = text[:max_length] + f"... [{len(text) - max_length} more chars]"
    return text
