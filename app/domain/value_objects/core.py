"""Domain value objects for the access core.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

# MODULE_ACTION: uppercase alphanumeric segments joined by underscores.
_PERMISSION_CODE_RE = re.compile(r"^[A-Z][A-Z0-9]*(_[A-Z0-9]+)*$")

# Verbs the backend uses for permission codes (e.g. ORDERS_UPDATE_STATUS).
KNOWN_ACTIONS: frozenset[str] = frozenset({
    "VIEW",
    "READ",
    "CREATE",
    "UPDATE",
    "DELETE",
    "MANAGE",
    "ALL",
    "IMPORT",
    "EXPORT",
    "APPROVE",
    "STATUS",
    "PASSWORD",
    "ASSIGN",
    "PRINT",
    "CANCEL",
    "CONFIRM",
})

# Segments allowed after the verb (PRODUCTS_IMPORT_EXCEL, ORDERS_EXPORT_PDF).
ACTION_QUALIFIERS: frozenset[str] = frozenset({
    "EXCEL",
    "CSV",
    "PDF",
    "FILE",
    "TEMPLATE",
    "BULK",
    "OWN",
})


def _normalize_segment(value: str) -> str:
    """Upper-case a module or action name and turn '-' / spaces into '_'."""
    return re.sub(r"[\s\-]+", "_", value.strip()).upper()


@dataclass(frozen=True)
class PermissionCode:
    """Value object for a backend permission code (MODULE_ACTION).

    Codes are never renamed; identity is the code string itself.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not _PERMISSION_CODE_RE.match(self.value):
            raise ValueError(
                f"Permission code must be MODULE_ACTION in uppercase, got: {self.value!r}"
            )

    @staticmethod
    def is_valid(value: str) -> bool:
        """Return True when value has the MODULE_ACTION shape."""
        return bool(value) and bool(_PERMISSION_CODE_RE.match(value))

    @property
    def action(self) -> str:
        """Last underscore-delimited segment (VIEW, READ, ...)."""
        return self.value.rsplit("_", 1)[-1]

    def has_known_action(self) -> bool:
        """Return True when a segment after the module is a known verb.

        Only qualifiers (EXCEL, PDF, ...) may follow that verb, so
        PREORDERS_READ_X and PREORDERS_READING are not codes.
        """
        segments = self.value.split("_")
        for index in range(len(segments) - 1, 0, -1):
            if segments[index] in KNOWN_ACTIONS:
                return True
            if segments[index] not in ACTION_QUALIFIERS:
                return False
        return False

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Capability:
    """Value object for an access request.

    Either a `module.action` descriptor (module and action set) or a literal
    permission code / legacy name (module and action None). The raw string is
    kept for special-case table lookup.
    """

    raw: str
    module: str | None = None
    action: str | None = None

    SEPARATOR: ClassVar[str] = "."

    @classmethod
    def parse(cls, raw: str) -> "Capability":
        """Parse a capability string.

        'orders.read' -> descriptor (module='orders', action='read');
        'ORDERS_READ' -> literal. Anything after a second dot belongs to the action.
        """
        text = (raw or "").strip()
        module, sep, action = text.partition(cls.SEPARATOR)
        if sep and module and action:
            return cls(raw=text, module=module.lower(), action=action.lower())
        return cls(raw=text)

    @property
    def is_descriptor(self) -> bool:
        """True for `module.action` capabilities."""
        return self.module is not None and self.action is not None

    @property
    def key(self) -> str:
        """Normalized key used for the special-case table (lower-case raw)."""
        return self.raw.lower()

    @property
    def module_code(self) -> str:
        """MODULE part in code form ('stock-levels' -> 'STOCK_LEVELS'); '' for literals."""
        return _normalize_segment(self.module) if self.module else ""

    @property
    def action_code(self) -> str:
        """ACTION part in code form ('view' -> 'VIEW'); '' for literals."""
        return _normalize_segment(self.action) if self.action else ""

    def base_code(self) -> str:
        """Return MODULE_ACTION for a descriptor, or the raw literal."""
        if self.is_descriptor:
            return f"{self.module_code}_{self.action_code}"
        return self.raw
