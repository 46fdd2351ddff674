"""Contratos compartilhados entre o orquestrador e os adaptadores de HTML."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import Any, Protocol

# Decisão por atributo: ``str`` mantém o atributo com o valor retornado,
# ``None`` remove o atributo.
CleaningOutcome = str | None


class Element(Protocol):
    """Elemento de um documento já interpretado."""

    @property
    def name(self) -> str:
        """Nome da tag, como entregue pelo parser."""

    def attributes(self) -> Sequence[tuple[str, str]]:
        """Retorna uma cópia ordenada dos pares ``(nome, valor)``."""

    def set_attribute(self, name: str, value: str) -> None:
        """Define o valor de um atributo existente ou novo."""

    def remove_attribute(self, name: str) -> None:
        """Remove o atributo caso exista."""


class FragmentDocument(Protocol):
    """Árvore de um fragmento HTML (apenas o conteúdo do ``body``)."""

    def elements(self) -> Sequence[Element]:
        """Lista fixa de elementos em pré-ordem, capturada no momento da chamada."""

    def remove_elements(self, names: Collection[str]) -> int:
        """Remove elementos (e descendentes) cujo nome esteja em ``names``."""

    def serialize(self) -> str:
        """Serializa o fragmento de volta para HTML."""


class FragmentParser(Protocol):
    """Interface para transformar texto em ``FragmentDocument``."""

    def parse(self, html: str | bytes) -> FragmentDocument:
        """Interpreta o fragmento ou levanta ``ParseError``."""


class AttributeCleaner(Protocol):
    """Estratégia pura de limpeza de um atributo."""

    def clean_attribute(
        self,
        element_name: str,
        attribute_name: str,
        value: str,
        options: Any,
    ) -> CleaningOutcome:
        """Retorna o novo valor do atributo ou ``None`` para descartá-lo."""


__all__ = (
    "AttributeCleaner",
    "CleaningOutcome",
    "Element",
    "FragmentDocument",
    "FragmentParser",
)
