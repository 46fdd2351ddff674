"""Definições de exceções para o domínio do Limpador."""

from __future__ import annotations


class CleanerError(Exception):
    """Exceção base para falhas conhecidas da limpeza de HTML."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class EmptyInputError(CleanerError):
    """Fragmento vazio ou ausente."""


class ParseError(CleanerError):
    """O fragmento não pôde ser interpretado como marcação."""


class TraversalError(CleanerError):
    """Falha ao enumerar os elementos do documento."""


class PolicyError(CleanerError):
    """Configuração de whitelist em formato inválido."""
