"""Filtragem de listas de classes CSS."""

from __future__ import annotations

from collections.abc import Sequence

from limpador_core.domain.contracts import AttributeCleaner, CleaningOutcome


class ClassAttributeCleaner(AttributeCleaner):
    """Mantém apenas as classes permitidas.

    O resultado segue a ordem declarada na whitelist, não a ordem do autor:
    ``["foo", "bar"]`` aplicado a ``"bar baz foo"`` produz ``"foo bar"``.
    """

    def clean_attribute(
        self,
        element_name: str,
        attribute_name: str,
        value: str,
        options: Sequence[str],
    ) -> CleaningOutcome:
        current = value.split(" ")
        kept = [allowed for allowed in options if allowed in current]
        cleaned = " ".join(kept).strip()
        return cleaned or None
