"""Phrase routing: maps inbound message text to an outbound template name."""

from __future__ import annotations

from collections.abc import Iterable

# Ordered (phrase, template) pairs. Earlier entries take priority.
ROUTING_TABLE: tuple[tuple[str, str], ...] = (
    ("What is Dianetics?", "toxic_survey"),
    ("I'm interested in the Purif", "toxic_survey"),
    ("What is the Toxic Survey?", "purif_template"),
)


class PhraseRouter:
    """First-match substring router over an ordered routing table.

    Inbound text is expected to be lowercased by the caller. With
    ``lowercase_phrases`` disabled, phrases are compared as stored, so any
    phrase containing an uppercase letter never matches lowercased text.
    """

    def __init__(
        self,
        routes: Iterable[tuple[str, str]] = ROUTING_TABLE,
        lowercase_phrases: bool = True,
    ) -> None:
        self._routes: tuple[tuple[str, str], ...] = tuple(routes)
        for phrase, _ in self._routes:
            if not phrase:
                raise ValueError("Routing phrases must be non-empty")
        self._lowercase_phrases = lowercase_phrases
        self._needles = tuple(
            (phrase.lower() if lowercase_phrases else phrase, template)
            for phrase, template in self._routes
        )

    @property
    def routes(self) -> tuple[tuple[str, str], ...]:
        return self._routes

    def route(self, text: str) -> str | None:
        """Return the template for the first phrase found in text, or None."""
        for needle, template in self._needles:
            if needle in text:
                return template
        return None
