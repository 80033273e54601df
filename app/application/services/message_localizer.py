"""Rewrite backend messages so permission codes read as human labels.

"User lacks ORDERS_READ permission" -> "User lacks View Orders permission".
Only whole tokens are replaced; a code inside a longer identifier is left alone.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from app.application.services.label_catalog import LabelCatalog
from app.application.services.translation_lookup import format_permission_code
from app.domain.value_objects.core import PermissionCode

_TOKEN_RE = re.compile(r"\b[A-Z][A-Z0-9_]{2,}\b")


class MessageLocalizer:
    """Replaces permission-code tokens in free text with LabelCatalog labels."""

    def __init__(self, catalog: LabelCatalog) -> None:
        self._catalog = catalog

    def is_permission_code(self, token: str) -> bool:
        """True when token is a known label key or has a MODULE_<known action> shape.

        Other upper-case words (HTTP, PREORDERS_READING) are not codes.
        """
        if self._catalog.resolve_label(token) is not None:
            return True
        return PermissionCode.is_valid(token) and PermissionCode(token).has_known_action()

    def label_for(self, code: str) -> str:
        """Label used in messages; never the raw code."""
        label = self._catalog.display_name(code)
        if label == code:
            return format_permission_code(code)
        return label

    def localize(self, text: str) -> str:
        """Return text with every permission-code token replaced by its label."""
        if not text or not isinstance(text, str):
            return text
        replacements: dict[str, str] = {}
        for token in dict.fromkeys(_TOKEN_RE.findall(text)):
            if self.is_permission_code(token):
                replacements[token] = self.label_for(token)
        if not replacements:
            return text
        return _TOKEN_RE.sub(
            lambda match: replacements.get(match.group(0), match.group(0)), text
        )

    def describe_missing(self, codes: Iterable[str]) -> str:
        """Sentence for permission guards: 'Missing permission: A, B'."""
        labels = list(dict.fromkeys(self.label_for(code) for code in codes if code))
        if not labels:
            return "You do not have access to this page"
        noun = "permission" if len(labels) == 1 else "permissions"
        return f"Missing {noun}: {', '.join(labels)}"
