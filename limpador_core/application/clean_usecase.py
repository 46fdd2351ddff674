"""Caso de uso responsável pela limpeza completa de um fragmento HTML."""

from __future__ import annotations

from logging import Logger
from typing import TYPE_CHECKING

from limpador_core.domain.contracts import FragmentParser
from limpador_core.domain.errors import CleanerError, EmptyInputError, TraversalError
from limpador_core.domain.policy import CleanerPolicy
from limpador_core.infrastructure.attributes import AttributeCleaningDispatcher
from limpador_core.infrastructure.logging.logger import configure_logger
from limpador_core.infrastructure.markup import BannedElementStripper, TagWhitelistFilter
from limpador_core.infrastructure.parsing.factory import build_fragment_parser
from limpador_core.infrastructure.parsing.html_tree import (
    HtmlTreeFragmentParser,
    normalize_encoding,
)
from limpador_core.infrastructure.parsing.walker import walk_elements

if TYPE_CHECKING:
    from config.settings import CleanerSettings


class HtmlCleaner:
    """Orquestra as etapas de limpeza de um fragmento.

    Fluxo: whitelist textual, parsing, remoção estrutural de tags proibidas,
    limpeza de atributos elemento a elemento, serialização e aplicação final
    da whitelist de tags. A whitelist textual inicial deixa passar as tags
    proibidas para que a remoção estrutural as encontre na árvore. Com
    ``structural_banned_removal=False`` vale o fluxo legado: remoção textual
    das tags proibidas antes da whitelist e nenhuma remoção na árvore.

    ``clean`` devolve ``None`` para qualquer falha (entrada vazia, marcação
    ininterpretável ou erro de travessia) sem distinguir a causa;
    ``clean_or_raise`` expõe a falha como ``CleanerError``.

    A instância não guarda estado entre chamadas e pode ser compartilhada.
    """

    def __init__(
        self,
        policy: CleanerPolicy,
        *,
        parser: FragmentParser | None = None,
        dispatcher: AttributeCleaningDispatcher | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._policy = policy
        self._structural_banned = structural_banned_tags(policy)
        self._parser = parser or HtmlTreeFragmentParser(banned=self._structural_banned)
        self._dispatcher = dispatcher or AttributeCleaningDispatcher(policy)
        self._banned_stripper = BannedElementStripper(policy.invalid_tags_to_delete)
        self._pre_filter = TagWhitelistFilter(policy.allowed_tags | set(self._structural_banned))
        self._tag_filter = TagWhitelistFilter(policy.allowed_tags)
        self._logger = logger or configure_logger()

    @property
    def policy(self) -> CleanerPolicy:
        return self._policy

    def clean(self, html: str | bytes | None) -> str | None:
        """Retorna o HTML limpo ou ``None`` quando não há resultado seguro."""

        try:
            return self.clean_or_raise(html)
        except CleanerError as exc:
            self._logger.warning(
                "clean.rejected",
                extra={"extra": {"error": exc.__class__.__name__, "reason": str(exc)}},
            )
            return None

    def clean_or_raise(self, html: str | bytes | None) -> str:
        if not html:
            raise EmptyInputError("Fragmento HTML vazio ou ausente")

        text = normalize_encoding(html)
        self._logger.debug("clean.start", extra={"extra": {"length": len(text)}})

        if not self._structural_banned:
            text = self._banned_stripper.strip(text)
        text = self._pre_filter.filter(text)

        document = self._parser.parse(text)

        removed = 0
        if self._structural_banned:
            try:
                removed = document.remove_elements(self._structural_banned)
            except Exception as exc:  # noqa: BLE001
                raise TraversalError("Falha ao remover elementos proibidos", cause=exc) from exc

        elements = walk_elements(document)

        try:
            dropped = sum(self._dispatcher.clean_element(element) for element in elements)
            serialized = document.serialize()
        except CleanerError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise TraversalError("Falha ao limpar atributos do fragmento", cause=exc) from exc

        result = self._tag_filter.filter(serialized)

        self._logger.debug(
            "clean.finish",
            extra={
                "extra": {
                    "elements": len(elements),
                    "attributes_dropped": dropped,
                    "banned_removed": removed,
                }
            },
        )
        return result


def build_cleaner(settings: CleanerSettings, *, logger: Logger | None = None) -> HtmlCleaner:
    """Monta um ``HtmlCleaner`` a partir das configurações carregadas."""

    policy = settings.to_policy()
    parser = build_fragment_parser(
        settings.parser_backend, banned=structural_banned_tags(policy)
    )
    return HtmlCleaner(policy, parser=parser, logger=logger)


def structural_banned_tags(policy: CleanerPolicy) -> tuple[str, ...]:
    """Tags removidas da árvore após o parsing (vazio no modo legado)."""

    if not policy.structural_banned_removal:
        return ()
    return tuple(tag.lower() for tag in policy.invalid_tags_to_delete)
