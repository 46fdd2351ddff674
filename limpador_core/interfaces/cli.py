"""Composition root CLI para limpar fragmentos HTML."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

from config.settings import apply_policy_file, load_settings
from limpador_core.application.clean_usecase import HtmlCleaner, build_cleaner
from limpador_core.domain.errors import CleanerError
from limpador_core.infrastructure.logging.logger import configure_logger
from limpador_core.infrastructure.parsing.factory import available_backends

_STDIN = "-"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Limpa fragmentos HTML usando uma whitelist")
    parser.add_argument(
        "inputs",
        nargs="*",
        help="Arquivos HTML a limpar ('-' ou nenhum para ler da entrada padrão).",
    )
    parser.add_argument(
        "--policy",
        help="Arquivo JSON com 'validTags' e 'invalidTagsToDelete'.",
    )
    parser.add_argument(
        "--parser",
        choices=available_backends(),
        help="Backend de parsing que sobrescreve LIMPADOR_PARSER.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Registra o motivo da rejeição em vez de apenas omitir a saída.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Valida a configuração sem limpar nenhum fragmento.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except RuntimeError as exc:
        configure_logger().error("cli.config_error", extra={"extra": {"error": str(exc)}})
        return 1

    level = getattr(logging, settings.logging.level, logging.INFO)
    logger = configure_logger(settings.logging.name, level=level)
    logger.info("cli.start", extra={"extra": {"inputs": len(args.inputs), "strict": args.strict}})

    try:
        if args.policy:
            apply_policy_file(settings.cleaner, args.policy)
        if args.parser:
            settings.cleaner.parser_backend = args.parser
        cleaner = build_cleaner(settings.cleaner, logger=logger)
    except (RuntimeError, CleanerError, ImportError) as exc:
        logger.exception("cli.config_error", extra={"extra": {"error": str(exc)}})
        return 1

    if args.dry_run:
        logger.info(
            "cli.finish",
            extra={
                "extra": {
                    "count": 0,
                    "dry_run": True,
                    "tags": sorted(cleaner.policy.allowed_tags),
                }
            },
        )
        return 0

    exit_code = 0
    count = 0
    for source, payload in _read_inputs(args.inputs or [_STDIN]):
        result = _clean_one(cleaner, source, payload, strict=args.strict, logger=logger)
        if result is None:
            exit_code = 1
            continue
        count += 1
        print(result)

    logger.info(
        "cli.finish",
        extra={"extra": {"count": count, "dry_run": False, "exit_code": exit_code}},
    )
    return exit_code


def _clean_one(
    cleaner: HtmlCleaner,
    source: str,
    payload: str | bytes,
    *,
    strict: bool,
    logger: logging.Logger,
) -> str | None:
    if not strict:
        return cleaner.clean(payload)
    try:
        return cleaner.clean_or_raise(payload)
    except CleanerError as exc:
        logger.error(
            "cli.rejected",
            extra={"extra": {"source": source, "error": exc.__class__.__name__}},
        )
        return None


def _read_inputs(entries: Iterable[str]) -> Iterable[tuple[str, str | bytes]]:
    for entry in entries:
        if entry == _STDIN:
            yield "<stdin>", sys.stdin.read()
            continue
        path = Path(entry)
        if not path.is_file():
            raise SystemExit(f"Arquivo inexistente: {entry}")
        yield entry, path.read_bytes()


if __name__ == "__main__":  # pragma: no cover - entrypoint manual
    raise SystemExit(main())
