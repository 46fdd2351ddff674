"""Parser de fragmentos HTML baseado em ``html.parser``."""

from __future__ import annotations

from collections.abc import Collection, Iterator
from dataclasses import dataclass, field
from html import escape
from html.parser import HTMLParser
from typing import Any

from limpador_core.domain.contracts import FragmentDocument, FragmentParser
from limpador_core.domain.errors import ParseError

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

_ROOT_TAG = "__root__"


@dataclass(eq=False)
class HTMLNode:
    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    parent: HTMLNode | None = field(default=None, repr=False)
    children: list[HTMLNode | str] = field(default_factory=list)
    raw_text: bool = field(default=False, repr=False)

    @property
    def name(self) -> str:
        return self.tag

    def attributes(self) -> list[tuple[str, str]]:
        return list(self.attrs.items())

    def set_attribute(self, name: str, value: str) -> None:
        self.attrs[name] = value

    def remove_attribute(self, name: str) -> None:
        self.attrs.pop(name, None)

    def append_child(self, child: HTMLNode | str) -> None:
        if isinstance(child, HTMLNode):
            child.parent = self
        self.children.append(child)

    def iter_descendants(self, *, include_self: bool = True) -> Iterator[HTMLNode]:
        if include_self and self.tag != _ROOT_TAG:
            yield self
        for child in self.children:
            if isinstance(child, HTMLNode):
                yield from child.iter_descendants(include_self=True)

    def find_all(self, names: Collection[str]) -> list[HTMLNode]:
        wanted = {name.lower() for name in names}
        return [
            node
            for node in self.iter_descendants(include_self=False)
            if node.tag.lower() in wanted
        ]

    def decompose(self) -> None:
        if not self.parent:
            return
        self.parent.children = [child for child in self.parent.children if child is not self]
        self.parent = None

    def __str__(self) -> str:
        return _node_to_html(self)


class _TreeBuilder(HTMLParser):
    """Monta a árvore do fragmento.

    Tags em ``banned`` viram contêineres comuns: o conteúdo de ``<script>``
    ou ``<style>`` proibidos é tokenizado como marcação, ``<tag/>`` não se
    fecha sozinho e só a própria tag de fechamento encerra o elemento.
    Assim uma remoção posterior leva junto tudo o que estava aninhado.
    """

    def __init__(self, banned: Collection[str] = ()) -> None:
        self.banned = frozenset(name.lower() for name in banned)
        super().__init__(convert_charrefs=True)
        self.root = HTMLNode(_ROOT_TAG)
        self.stack: list[HTMLNode] = [self.root]

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        node_attrs: dict[str, str] = {}
        for key, value in attrs:
            # atributo repetido: vale a primeira ocorrência
            node_attrs.setdefault(key, value or "")
        node = HTMLNode(tag, node_attrs)
        self.stack[-1].append_child(node)
        if tag not in VOID_ELEMENTS:
            self.stack.append(node)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.handle_starttag(tag, attrs)
        if tag not in self.banned:
            self.handle_endtag(tag)

    def handle_endtag(self, tag: str) -> None:
        for index in range(len(self.stack) - 1, 0, -1):
            current = self.stack[index].tag
            if current == tag:
                self.stack = self.stack[:index]
                break
            if current in self.banned:
                break

    def set_cdata_mode(self, elem: str, *args: Any, **kwargs: Any) -> None:
        if elem in self.banned:
            return
        super().set_cdata_mode(elem, *args, **kwargs)
        # conteúdo RCDATA (textarea, title) tem entidades decodificadas
        if not kwargs.get("escapable", False) and self.stack[-1].tag == elem:
            self.stack[-1].raw_text = True

    def handle_data(self, data: str) -> None:
        if not data:
            return
        self.stack[-1].append_child(data)


@dataclass
class HTMLFragment(FragmentDocument):
    root: HTMLNode

    def elements(self) -> list[HTMLNode]:
        return list(self.root.iter_descendants(include_self=False))

    def remove_elements(self, names: Collection[str]) -> int:
        removed = 0
        for node in self.root.find_all(names):
            # descendentes de um nó já removido saem junto com ele
            if not _is_attached(node):
                continue
            node.decompose()
            removed += 1
        return removed

    def serialize(self) -> str:
        return _node_children_to_html(self.root)

    def __str__(self) -> str:
        return self.serialize()


class HtmlTreeFragmentParser(FragmentParser):
    """Interpreta fragmentos usando o tokenizador da biblioteca padrão.

    ``banned`` lista as tags que serão removidas da árvore depois do parsing;
    veja ``_TreeBuilder`` para o tratamento que recebem.
    """

    def __init__(self, *, banned: Collection[str] = ()) -> None:
        self._banned = tuple(banned)

    def parse(self, html: str | bytes) -> HTMLFragment:
        text = normalize_encoding(html)
        builder = _TreeBuilder(self._banned)
        try:
            builder.feed(text)
            builder.close()
        except Exception as exc:  # noqa: BLE001
            raise ParseError("Não foi possível interpretar o fragmento HTML", cause=exc) from exc
        return HTMLFragment(builder.root)


def normalize_encoding(html: str | bytes) -> str:
    """Garante texto Unicode válido (UTF-8) antes do parsing."""

    if isinstance(html, bytes):
        try:
            return html.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError("Fragmento não está codificado em UTF-8", cause=exc) from exc
    try:
        html.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ParseError("Fragmento contém caracteres inválidos", cause=exc) from exc
    return html


def _is_attached(node: HTMLNode) -> bool:
    current: HTMLNode | None = node
    while current is not None:
        if current.tag == _ROOT_TAG:
            return True
        current = current.parent
    return False


def _node_to_html(node: HTMLNode) -> str:
    attrs = "".join(
        f' {key}="{escape(value, quote=True)}"' for key, value in node.attrs.items()
    )
    if node.tag in VOID_ELEMENTS:
        return f"<{node.tag}{attrs}>"
    inner = _node_children_to_html(node)
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"


def _node_children_to_html(node: HTMLNode) -> str:
    parts: list[str] = []
    for child in node.children:
        if isinstance(child, HTMLNode):
            parts.append(_node_to_html(child))
        elif node.raw_text:
            # o tokenizador nunca entrega a tag de fechamento dentro do texto bruto
            parts.append(child)
        else:
            parts.append(escape(child, quote=False))
    return "".join(parts)


__all__ = [
    "HTMLFragment",
    "HTMLNode",
    "HtmlTreeFragmentParser",
    "VOID_ELEMENTS",
    "normalize_encoding",
]
