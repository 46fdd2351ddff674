"""Remoção textual de elementos proibidos antes do parsing."""

from __future__ import annotations

import re
from collections.abc import Iterable


def _banned_pattern(tag: str) -> re.Pattern[str]:
    name = re.escape(tag)
    return re.compile(rf"<{name}\b[^>]*>.*?</{name}\s*>", re.IGNORECASE | re.DOTALL)


class BannedElementStripper:
    """Remove ``<tag ...>...</tag>`` (com o conteúdo) para cada tag proibida.

    Cada ocorrência vai da tag de abertura até o primeiro fechamento
    correspondente, sem considerar aninhamento. É um pré-filtro: a whitelist
    de tags é aplicada novamente depois do parsing.
    """

    def __init__(self, banned_tags: Iterable[str]) -> None:
        self._patterns = tuple(_banned_pattern(tag) for tag in banned_tags)

    def strip(self, html: str) -> str:
        for pattern in self._patterns:
            html = pattern.sub("", html)
        return html
