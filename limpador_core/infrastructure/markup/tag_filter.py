"""Remoção textual de tags fora da whitelist, preservando o texto."""

from __future__ import annotations

import re
from collections.abc import Iterable

_MARKUP_RE = re.compile(
    r"<!--.*?(?:-->|\Z)"
    r"|<[!?][^>]*>?"
    r"|</?([A-Za-z][^\s/>]*)(?:[^>\"']|\"[^\"]*\"|'[^']*')*>",
    re.DOTALL,
)


class TagWhitelistFilter:
    """Equivalente a ``strip_tags`` com lista de tags permitidas.

    Comentários, doctypes e instruções de processamento são sempre
    removidos. A comparação de nomes não diferencia maiúsculas.
    """

    def __init__(self, allowed_tags: Iterable[str]) -> None:
        self._allowed = frozenset(tag.lower() for tag in allowed_tags)

    @property
    def allowed_tags(self) -> frozenset[str]:
        return self._allowed

    def filter(self, html: str) -> str:
        return _MARKUP_RE.sub(self._replace, html)

    def _replace(self, match: re.Match[str]) -> str:
        name = match.group(1)
        if name is not None and name.lower() in self._allowed:
            return match.group(0)
        return ""
