"""Seleção do backend de parsing a partir da configuração."""

from __future__ import annotations

from collections.abc import Callable, Collection

from limpador_core.domain.contracts import FragmentParser
from limpador_core.domain.errors import PolicyError
from limpador_core.infrastructure.parsing.html_tree import HtmlTreeFragmentParser
from limpador_core.infrastructure.parsing.selectolax_parser import SelectolaxFragmentParser

DEFAULT_BACKEND = "html_tree"

_BACKENDS: dict[str, Callable[[Collection[str]], FragmentParser]] = {
    "html_tree": lambda banned: HtmlTreeFragmentParser(banned=banned),
    # o lexbor segue o HTML5: script/style já são texto bruto do próprio elemento
    "selectolax": lambda banned: SelectolaxFragmentParser(),
}


def available_backends() -> tuple[str, ...]:
    return tuple(_BACKENDS)


def build_fragment_parser(
    name: str | None = None, *, banned: Collection[str] = ()
) -> FragmentParser:
    """Instancia o parser ``name`` (``html_tree`` por padrão).

    ``banned`` são as tags que o cleaner removerá estruturalmente da árvore.
    """

    key = (name or DEFAULT_BACKEND).strip().lower()
    try:
        factory = _BACKENDS[key]
    except KeyError as exc:
        raise PolicyError(f"Backend de parsing desconhecido: '{name}'", cause=exc) from exc
    return factory(banned)
