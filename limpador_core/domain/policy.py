"""Configuração imutável da whitelist de tags e atributos."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from limpador_core.domain.errors import PolicyError

CLASS_ATTRIBUTE = "class"
STYLE_ATTRIBUTE = "style"


@dataclass(frozen=True, slots=True)
class CleanerPolicy:
    """Whitelist (``valid_tags``) e lista negra (``invalid_tags_to_delete``).

    ``valid_tags`` mapeia tag -> atributo -> opções da estratégia. Tags
    ausentes nunca sobrevivem à limpeza; atributos ausentes sob uma tag
    presente são sempre removidos. Os valores são congelados na construção,
    de modo que uma mesma instância pode ser compartilhada entre threads.
    """

    valid_tags: Mapping[str, Mapping[str, Any]]
    invalid_tags_to_delete: tuple[str, ...] = ()
    structural_banned_removal: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "valid_tags", _freeze_whitelist(self.valid_tags))
        object.__setattr__(
            self, "invalid_tags_to_delete", _freeze_banned(self.invalid_tags_to_delete)
        )
        if not isinstance(self.structural_banned_removal, bool):
            raise PolicyError("'structuralBannedRemoval' deve ser booleano")

    @property
    def allowed_tags(self) -> frozenset[str]:
        return frozenset(self.valid_tags)

    def options_for(self, tag: str, attribute: str) -> Any | None:
        attributes = self.valid_tags.get(tag)
        if attributes is None:
            return None
        return attributes.get(attribute)

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, object], *, structural_banned_removal: bool = True
    ) -> CleanerPolicy:
        """Cria a política a partir das chaves ``validTags``/``invalidTagsToDelete``.

        ``structural_banned_removal`` vale quando ``structuralBannedRemoval``
        não aparece em ``data``.
        """

        if not isinstance(data, Mapping):
            raise PolicyError("Configuração da política deve ser um objeto")

        valid_tags = _first_present(data, "validTags", "valid_tags")
        if valid_tags is None:
            raise PolicyError("Campo 'validTags' obrigatório na política")
        banned = _first_present(data, "invalidTagsToDelete", "invalid_tags_to_delete")
        structural = _first_present(
            data, "structuralBannedRemoval", "structural_banned_removal"
        )
        return cls(
            valid_tags=valid_tags,  # type: ignore[arg-type]
            invalid_tags_to_delete=banned or (),  # type: ignore[arg-type]
            structural_banned_removal=(  # type: ignore[arg-type]
                structural_banned_removal if structural is None else structural
            ),
        )


def _first_present(data: Mapping[str, object], *keys: str) -> object | None:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _freeze_whitelist(value: object) -> Mapping[str, Mapping[str, Any]]:
    if not isinstance(value, Mapping):
        raise PolicyError("'validTags' deve mapear tags para atributos")

    frozen: dict[str, Mapping[str, Any]] = {}
    for tag, attributes in value.items():
        if not isinstance(tag, str) or not tag:
            raise PolicyError(f"Nome de tag inválido na whitelist: {tag!r}")
        frozen[tag] = _freeze_attributes(tag, attributes)
    return MappingProxyType(frozen)


def _freeze_attributes(tag: str, value: object) -> Mapping[str, Any]:
    if value is None:
        return MappingProxyType({})
    # lista vazia equivale a nenhum atributo
    if isinstance(value, (list, tuple)) and not value:
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        raise PolicyError(f"Atributos da tag '{tag}' devem ser um objeto")

    frozen: dict[str, Any] = {}
    for attribute, options in value.items():
        if not isinstance(attribute, str) or not attribute:
            raise PolicyError(f"Nome de atributo inválido na tag '{tag}': {attribute!r}")
        if options is None:
            continue
        frozen[attribute] = _freeze_options(tag, attribute, options)
    return MappingProxyType(frozen)


def _freeze_options(tag: str, attribute: str, options: object) -> Any:
    if attribute == CLASS_ATTRIBUTE:
        if isinstance(options, str):
            return tuple(options.split())
        if isinstance(options, Iterable) and not isinstance(options, (bytes, Mapping)):
            return tuple(str(token) for token in options)
        raise PolicyError(f"Opções de '{tag}.class' devem ser uma lista de classes")

    if attribute == STYLE_ATTRIBUTE:
        if not isinstance(options, Mapping):
            raise PolicyError(f"Opções de '{tag}.style' devem mapear propriedades CSS")
        return MappingProxyType(
            {
                str(prop): None if required is None else str(required)
                for prop, required in options.items()
            }
        )

    if isinstance(options, (Mapping, list, tuple, set, frozenset)):
        raise PolicyError(f"Opção de '{tag}.{attribute}' deve ser um valor literal")
    return str(options)


def _freeze_banned(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, Iterable):
        raise PolicyError("'invalidTagsToDelete' deve ser uma lista de tags")

    result: list[str] = []
    for tag in value:
        name = str(tag).strip()
        if name and name not in result:
            result.append(name)
    return tuple(result)


__all__ = ["CLASS_ATTRIBUTE", "STYLE_ATTRIBUTE", "CleanerPolicy"]
