"""Filtragem de declarações do atributo ``style``."""

from __future__ import annotations

from collections.abc import Mapping

from limpador_core.domain.contracts import AttributeCleaner, CleaningOutcome


def parse_declarations(value: str) -> dict[str, str]:
    """Converte ``"a: 1; b: 2"`` em ``{"a": "1", "b": "2"}``.

    Declarações sem propriedade ou sem valor são ignoradas e, quando uma
    propriedade se repete, a última ocorrência prevalece.
    """

    declarations: dict[str, str] = {}
    for chunk in value.split(";"):
        prop, _, prop_value = chunk.partition(":")
        prop = prop.strip()
        prop_value = prop_value.strip()
        if not prop or not prop_value:
            continue
        declarations[prop] = prop_value
    return declarations


class StyleAttributeCleaner(AttributeCleaner):
    """Mantém as propriedades CSS permitidas, na ordem da whitelist.

    As opções mapeiam propriedade -> valor exigido; ``None`` aceita qualquer
    valor para a propriedade.
    """

    def clean_attribute(
        self,
        element_name: str,
        attribute_name: str,
        value: str,
        options: Mapping[str, str | None],
    ) -> CleaningOutcome:
        declarations = parse_declarations(value)

        kept: list[tuple[str, str]] = []
        for prop, required in options.items():
            if prop not in declarations:
                continue
            current = declarations[prop]
            if not required or current == required:
                kept.append((prop, current))

        if not kept:
            return None
        return "".join(f"{prop}:{prop_value};" for prop, prop_value in kept)
