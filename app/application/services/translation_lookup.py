"""Permission label lookup helpers (pure functions).

format_permission_code is the deterministic last-resort label.
lookup_translation probes a translation catalog whose key scheme is not
guaranteed (exact code, prefixed, lower-cased, dotted, then partial match);
it is heuristic by nature and kept free of state so it can be tested in
isolation.
"""

from __future__ import annotations

from collections.abc import Mapping

# Page-specific keys the role editor shows for these codes; probed first.
PAGE_KEY_ALIASES: dict[str, tuple[str, ...]] = {
    "REVENUE_VIEW": ("View Revenue Page", "View Revenue", "REVENUE_VIEW"),
    "DASHBOARD_VIEW": ("View Dashboard Page", "View Dashboard", "DASHBOARD_VIEW"),
}


def format_permission_code(code: str) -> str:
    """Format a code for display: DASHBOARD_VIEW -> 'Dashboard View'."""
    if not code:
        return code
    return " ".join(
        part[:1].upper() + part[1:].lower() for part in code.split("_") if part
    )


def candidate_keys(code: str) -> list[str]:
    """Key shapes the translation catalog may use for code, in probe order."""
    lower = code.lower()
    return [
        code,
        f"permission.{code}",
        f"permissions.{code}",
        lower,
        f"permission.{lower}",
        f"permissions.{lower}",
        code.replace("_", "."),
        lower.replace("_", "."),
    ]


def _probe(
    key: str,
    translations: Mapping[str, str],
    lowered_index: Mapping[str, str],
) -> str | None:
    """Exact match, then case-insensitive match. Empty values count as misses."""
    value = translations.get(key)
    if value:
        return value
    original = lowered_index.get(key.lower())
    if original is not None:
        return translations.get(original) or None
    return None


def _partial_match(code: str, translations: Mapping[str, str]) -> str | None:
    """Key containing every underscore segment of code; keys with 'page' win."""
    parts = [part.lower() for part in code.split("_") if part]
    if len(parts) < 2:
        return None
    matching = [
        key
        for key in translations
        if translations[key] and all(part in key.lower() for part in parts)
    ]
    if not matching:
        return None
    for key in matching:
        if "page" in key.lower():
            return translations[key]
    return translations[matching[0]]


def lookup_translation(code: str, translations: Mapping[str, str]) -> str | None:
    """Return the best translation for code, or None when nothing plausible exists.

    Order: page aliases, candidate_keys (each exact then case-insensitive),
    partial segment match. Does not apply the formatted-fallback guard; callers
    decide whether a hit is acceptable.
    """
    if not code or not translations:
        return None
    # First key wins for case-insensitive collisions (insertion order).
    lowered_index: dict[str, str] = {}
    for key in translations:
        lowered_index.setdefault(key.lower(), key)

    for alias in PAGE_KEY_ALIASES.get(code, ()):
        hit = _probe(alias, translations, lowered_index)
        if hit:
            return hit
    for key in candidate_keys(code):
        hit = _probe(key, translations, lowered_index)
        if hit:
            return hit
    return _partial_match(code, translations)
