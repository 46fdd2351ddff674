"""Configuração de logging estruturado para o Limpador."""

from __future__ import annotations

import json
import logging
from logging import Logger, LogRecord
from typing import IO


class StructuredFormatter(logging.Formatter):
    """Formatter que serializa o atributo ``extra`` como JSON."""

    def format(self, record: LogRecord) -> str:  # noqa: D401
        extra_value = getattr(record, "extra", {})
        if not isinstance(extra_value, dict):
            extra_value = {"value": extra_value}
        record.__dict__["extra_json"] = json.dumps(extra_value, ensure_ascii=False, default=str)
        return super().format(record)


def configure_logger(
    name: str = "limpador",
    *,
    level: int = logging.INFO,
    stream: IO[str] | None = None,
) -> Logger:
    """Cria (uma única vez por nome) um logger com saída estruturada."""

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(level)

    handler = logging.StreamHandler(stream)
    formatter = StructuredFormatter(
        fmt="%(asctime)s %(name)s %(levelname)s %(message)s | extra=%(extra_json)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger
