"""Aplicação das estratégias de limpeza aos atributos de cada elemento."""

from __future__ import annotations

from collections.abc import Mapping

from limpador_core.domain.contracts import AttributeCleaner, Element
from limpador_core.domain.policy import CLASS_ATTRIBUTE, STYLE_ATTRIBUTE, CleanerPolicy

from .class_cleaner import ClassAttributeCleaner
from .default_cleaner import DefaultAttributeCleaner
from .style_cleaner import StyleAttributeCleaner


class AttributeCleaningDispatcher:
    """Seleciona a estratégia pelo nome do atributo e aplica a decisão.

    Atributos sem entrada na whitelist são descartados sem consultar
    nenhuma estratégia.
    """

    def __init__(
        self,
        policy: CleanerPolicy,
        *,
        cleaners: Mapping[str, AttributeCleaner] | None = None,
        default: AttributeCleaner | None = None,
    ) -> None:
        self._policy = policy
        self._cleaners = dict(cleaners) if cleaners is not None else build_registry()
        self._default = default or DefaultAttributeCleaner()

    def cleaner_for(self, attribute_name: str) -> AttributeCleaner:
        return self._cleaners.get(attribute_name, self._default)

    def clean_element(self, element: Element) -> int:
        """Limpa os atributos de ``element`` e retorna quantos foram removidos."""

        element_name = element.name
        to_remove: list[str] = []
        to_update: list[tuple[str, str]] = []

        for attribute_name, value in element.attributes():
            options = self._policy.options_for(element_name, attribute_name)
            if options is None:
                to_remove.append(attribute_name)
                continue

            cleaner = self.cleaner_for(attribute_name)
            new_value = cleaner.clean_attribute(element_name, attribute_name, value, options)
            if new_value is None:
                to_remove.append(attribute_name)
            elif new_value != value:
                to_update.append((attribute_name, new_value))

        for attribute_name, new_value in to_update:
            element.set_attribute(attribute_name, new_value)
        for attribute_name in to_remove:
            element.remove_attribute(attribute_name)
        return len(to_remove)


def build_registry() -> dict[str, AttributeCleaner]:
    """Registro padrão: ``class`` e ``style`` têm estratégias próprias."""

    return {
        CLASS_ATTRIBUTE: ClassAttributeCleaner(),
        STYLE_ATTRIBUTE: StyleAttributeCleaner(),
    }
