from __future__ import annotations
import re
from typing import List, Pattern, Tuple

from .model import Parser

Rule = Tuple[Pattern[str], Parser]          # (media-type pattern, parser)


class ContentTypeRouter:
    """Ordered media-type rules; the first matching rule picks the parser."""

    def __init__(self) -> None:
        self._rules: List[Rule] = []

    def register(self, pattern: str, parser: Parser) -> None:
        self._rules.append((re.compile(pattern, re.IGNORECASE), parser))

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules)

    def choose(self, content_type: str | None) -> Parser | None:
        """Return the parser for ``content_type``, or None when unsupported."""
        if not content_type:
            return None
        for pattern, parser in self._rules:
            if pattern.search(content_type):
                return parser
        return None


# singleton used project-wide; json must come before the broader text rules
_ROUTER = ContentTypeRouter()
_ROUTER.register(r"application/json", "json")
_ROUTER.register(r"text/plain", "text")
_ROUTER.register(r"text/html", "text")
_ROUTER.register(r"application/xml", "text")
_ROUTER.register(r"multipart/form-data", "formData")
_ROUTER.register(r"application/x-www-form-urlencoded", "formData")
_ROUTER.register(r"image/.*", "blob")


def choose_parser(content_type: str | None) -> Parser | None:
    return _ROUTER.choose(content_type)
