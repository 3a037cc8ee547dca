"""
Input sanitizers for comment form fields.

Every sanitizer is pure and total: it takes any value, never raises,
and returns a string. Invalid email addresses and URLs become "" rather
than errors. Applying a sanitizer to its own output returns it unchanged.
"""

import html
import re
import unicodedata
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from functools import partial
from typing import Any

import bleach
from email_validator import EmailNotValidError, validate_email
from pydantic import AnyHttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from pycomments.core.config import settings

_SCRIPT_STYLE_RE = re.compile(r"<(script|style)[^>]*?>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")

_http_url_adapter = TypeAdapter(AnyHttpUrl)

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)
    # Lone surrogates can't be stored or re-encoded
    return value.encode("utf-8", "ignore").decode("utf-8")


def _strip_controls(value: str) -> str:
    return "".join(
        ch for ch in value if ch.isspace() or unicodedata.category(ch) != "Cc"
    )


def _strip_markup(text: str) -> str:
    text = _SCRIPT_STYLE_RE.sub("", text)
    text = bleach.clean(text, tags=set(), attributes={}, strip=True, strip_comments=True)
    text = _strip_controls(html.unescape(text))
    return _WHITESPACE_RE.sub(" ", text).strip()


def sanitize_text(value: Any) -> str:
    """
    Reduce a value to a single line of plain text.

    Drops <script>/<style> blocks with their contents, strips all other
    tags, decodes entities, removes control characters and collapses runs
    of whitespace.
    """
    text = _strip_markup(_strip_controls(_as_text(value)))
    # Decoded entities can spell out new tags, so repeat until stable
    for _ in range(len(text)):
        again = _strip_markup(text)
        if again == text:
            break
        text = again
    return text


def sanitize_email(value: Any) -> str:
    """Return the normalized address, or "" if it is not a valid email."""
    candidate = _as_text(value).strip()
    if not candidate:
        return ""

    try:
        result = validate_email(candidate, check_deliverability=False)
    except EmailNotValidError:
        return ""
    return result.normalized


def sanitize_url(value: Any) -> str:
    """
    Return an absolute http(s) URL, or "" if the value is not one.

    Bare host names such as ``example.com/blog`` get an ``http://`` prefix
    first. Anything carrying another scheme is rejected.
    """
    candidate = _as_text(value).strip()
    if not candidate:
        return ""

    if any(ch.isspace() or unicodedata.category(ch) == "Cc" for ch in candidate):
        return ""

    if ":" not in candidate and candidate[0] not in "/#?":
        candidate = f"http://{candidate}"

    try:
        _http_url_adapter.validate_python(candidate)
    except PydanticValidationError:
        return ""
    return candidate


def sanitize_restricted_html(
    value: Any,
    tags: Iterable[str] | None = None,
    attributes: Mapping[str, list[str]] | None = None,
) -> str:
    """
    Keep only allow-listed HTML in a comment body.

    Disallowed tags are stripped (their text is kept), disallowed attributes
    and link protocols are dropped, and HTML comments are removed.
    """
    text = _as_text(value).strip()
    if not text:
        return ""

    cleaned = bleach.clean(
        text,
        tags=frozenset(tags if tags is not None else settings.comment_allowed_tags),
        attributes=dict(attributes if attributes is not None else settings.comment_allowed_attributes),
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )
    return cleaned.strip()


@dataclass(frozen=True)
class Sanitizers:
    """The four field sanitizers the comment handler is built with."""

    text: Callable[[Any], str] = sanitize_text
    email: Callable[[Any], str] = sanitize_email
    url: Callable[[Any], str] = sanitize_url
    restricted_html: Callable[[Any], str] = sanitize_restricted_html


def get_sanitizers() -> Sanitizers:
    """Sanitizers configured with the allow-list from settings."""
    return Sanitizers(
        restricted_html=partial(
            sanitize_restricted_html,
            tags=settings.comment_allowed_tags,
            attributes=settings.comment_allowed_attributes,
        ),
    )
