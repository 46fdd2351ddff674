"""Estratégia padrão: o atributo só é aceito com um valor literal."""

from __future__ import annotations

from typing import Any

from limpador_core.domain.contracts import AttributeCleaner, CleaningOutcome


class DefaultAttributeCleaner(AttributeCleaner):
    """Mantém o valor apenas quando é idêntico ao literal configurado."""

    def clean_attribute(
        self,
        element_name: str,
        attribute_name: str,
        value: str,
        options: Any,
    ) -> CleaningOutcome:
        if value == options:
            return value
        return None
