"""Parser de fragmentos baseado no backend lexbor do selectolax (HTML5)."""

from __future__ import annotations

import re
from collections.abc import Collection, Iterator
from typing import Any, cast

from limpador_core.domain.contracts import FragmentDocument, FragmentParser
from limpador_core.domain.errors import ParseError
from limpador_core.infrastructure.parsing.html_tree import normalize_encoding

try:  # pragma: no cover - dependência opcional em tempo de execução
    from selectolax.lexbor import LexborHTMLParser as _HTMLParser
except ImportError:
    _HTMLParser = None

HTMLParser = cast(type[Any] | None, _HTMLParser)

_BODY_RE = re.compile(r"\A<body\b[^>]*>(.*)</body>\Z", re.DOTALL | re.IGNORECASE)


def _is_element(node: Any) -> bool:
    # nós que não são elementos têm nomes como "-text", "_comment" ou "!comment"
    tag = node.tag or ""
    return not tag.startswith(("-", "_", "!", "#"))


class SelectolaxElement:
    """Adapta um nó do selectolax ao contrato ``Element``."""

    def __init__(self, node: Any) -> None:
        self._node = node

    @property
    def name(self) -> str:
        return str(self._node.tag)

    def attributes(self) -> list[tuple[str, str]]:
        return [(key, value or "") for key, value in self._node.attributes.items()]

    def set_attribute(self, name: str, value: str) -> None:
        self._node.attrs[name] = value

    def remove_attribute(self, name: str) -> None:
        if name in self._node.attrs:
            del self._node.attrs[name]


class SelectolaxFragment(FragmentDocument):
    def __init__(self, tree: Any) -> None:
        self._tree = tree
        self._body = tree.body

    def elements(self) -> list[SelectolaxElement]:
        return [SelectolaxElement(node) for node in self._walk(self._body)]

    def remove_elements(self, names: Collection[str]) -> int:
        wanted = {name.lower() for name in names}
        removed = 0
        # cada passagem remove os nós mais externos; repete até estabilizar
        while True:
            targets = [node for node in self._walk(self._body) if node.tag.lower() in wanted]
            if not targets:
                return removed
            targets[0].decompose()
            removed += 1

    def serialize(self) -> str:
        html = self._body.html or ""
        match = _BODY_RE.match(html)
        return match.group(1) if match else html

    def _walk(self, node: Any) -> Iterator[Any]:
        for child in node.iter(include_text=False):
            if not _is_element(child):
                continue
            yield child
            yield from self._walk(child)


class SelectolaxFragmentParser(FragmentParser):
    """Interpreta fragmentos com o parser HTML5 (lexbor) do selectolax."""

    def __init__(self) -> None:
        if HTMLParser is None:
            raise ImportError("selectolax não está disponível")
        self._parser_cls: type[Any] = HTMLParser

    def parse(self, html: str | bytes) -> SelectolaxFragment:
        text = normalize_encoding(html)
        try:
            tree = self._parser_cls(text)
        except Exception as exc:  # noqa: BLE001
            raise ParseError(
                "Não foi possível inicializar o parser HTML", cause=exc
            ) from exc

        if tree.body is None:
            raise ParseError("Fragmento HTML sem conteúdo interpretável")
        return SelectolaxFragment(tree)


__all__ = ["SelectolaxElement", "SelectolaxFragment", "SelectolaxFragmentParser"]
