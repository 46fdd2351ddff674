"""Enumeração dos elementos de um fragmento já interpretado."""

from __future__ import annotations

from collections.abc import Sequence

from limpador_core.domain.contracts import Element, FragmentDocument
from limpador_core.domain.errors import CleanerError, TraversalError


def walk_elements(document: FragmentDocument) -> Sequence[Element]:
    """Retorna todos os elementos em pré-ordem, como uma lista fixa.

    A lista é capturada antes de qualquer alteração de atributos, de modo que
    modificar um elemento durante a iteração não pula nem repete outros.
    """

    try:
        return tuple(document.elements())
    except CleanerError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise TraversalError("Falha ao enumerar elementos do fragmento", cause=exc) from exc
