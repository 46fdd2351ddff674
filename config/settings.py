"""Carregamento de configurações para o serviço Limpador."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from limpador_core.domain.errors import PolicyError
from limpador_core.domain.policy import CleanerPolicy

DEFAULT_VALID_TAGS: Mapping[str, Mapping[str, object]] = {
    "p": {},
    "br": {},
    "strong": {},
    "em": {},
    "ul": {},
    "ol": {},
    "li": {},
    "a": {},
}

DEFAULT_INVALID_TAGS: tuple[str, ...] = ("script", "style", "iframe", "object", "embed")

_TRUE_VALUES = frozenset({"1", "true", "yes", "on", "sim"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", "nao", "não"})


@dataclass(slots=True)
class CleanerSettings:
    valid_tags: Mapping[str, object] = field(default_factory=lambda: dict(DEFAULT_VALID_TAGS))
    invalid_tags_to_delete: Sequence[str] = DEFAULT_INVALID_TAGS
    parser_backend: str = "html_tree"
    structural_banned_removal: bool = True

    def to_policy(self) -> CleanerPolicy:
        try:
            return CleanerPolicy(
                valid_tags=self.valid_tags,  # type: ignore[arg-type]
                invalid_tags_to_delete=tuple(self.invalid_tags_to_delete),
                structural_banned_removal=self.structural_banned_removal,
            )
        except PolicyError as exc:
            raise RuntimeError(f"Política de limpeza inválida: {exc}") from exc


@dataclass(slots=True)
class LoggingSettings:
    level: str = "INFO"
    name: str = "limpador"


@dataclass(slots=True)
class Settings:
    cleaner: CleanerSettings
    logging: LoggingSettings


def _load_json_object(value: str | None, *, source: str) -> Mapping[str, object] | None:
    if not value:
        return None
    try:
        parsed = json.loads(value)
        if not isinstance(parsed, dict):
            raise ValueError
    except ValueError as exc:  # noqa: PERF203 - trata entrada malformada
        raise RuntimeError(f"JSON inválido em {source}: esperado objeto") from exc
    return parsed


def _load_tags(value: str | None) -> Sequence[str] | None:
    if not value:
        return None
    try:
        parsed = json.loads(value)
        if isinstance(parsed, list):
            return tuple(str(tag) for tag in parsed)
    except json.JSONDecodeError:
        pass
    return tuple(tag.strip() for tag in value.split(",") if tag.strip())


def _load_flag(value: str | None, *, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise RuntimeError(f"Valor booleano inválido: '{value}'")


def load_policy_file(path: str | Path) -> Mapping[str, object]:
    """Lê um arquivo JSON com as chaves ``validTags`` e ``invalidTagsToDelete``."""

    file_path = Path(path)
    if not file_path.is_file():
        raise RuntimeError(f"Arquivo de política inexistente: {path}")
    data = _load_json_object(file_path.read_text("utf-8"), source=str(file_path))
    if data is None:
        raise RuntimeError(f"Arquivo de política vazio: {path}")
    return data


def apply_policy_file(cleaner: CleanerSettings, path: str | Path) -> CleanerSettings:
    """Sobrescreve whitelist e lista negra com o conteúdo do arquivo."""

    data = load_policy_file(path)
    try:
        policy = CleanerPolicy.from_mapping(
            data, structural_banned_removal=cleaner.structural_banned_removal
        )
    except PolicyError as exc:
        raise RuntimeError(f"Arquivo de política inválido em {path}: {exc}") from exc

    cleaner.valid_tags = policy.valid_tags
    cleaner.invalid_tags_to_delete = policy.invalid_tags_to_delete
    cleaner.structural_banned_removal = policy.structural_banned_removal
    return cleaner


def load_settings() -> Settings:
    """Carrega configurações a partir de variáveis de ambiente."""

    valid_tags = _load_json_object(
        os.environ.get("LIMPADOR_VALID_TAGS"), source="LIMPADOR_VALID_TAGS"
    )
    invalid_tags = _load_tags(os.environ.get("LIMPADOR_INVALID_TAGS"))

    cleaner = CleanerSettings(
        valid_tags=dict(valid_tags) if valid_tags is not None else dict(DEFAULT_VALID_TAGS),
        invalid_tags_to_delete=invalid_tags if invalid_tags is not None else DEFAULT_INVALID_TAGS,
        parser_backend=os.environ.get("LIMPADOR_PARSER", "html_tree").strip() or "html_tree",
        structural_banned_removal=_load_flag(
            os.environ.get("LIMPADOR_STRUCTURAL_REMOVAL"), default=True
        ),
    )

    policy_file = os.environ.get("LIMPADOR_POLICY_FILE")
    if policy_file:
        apply_policy_file(cleaner, policy_file)

    logging_settings = LoggingSettings(
        level=os.environ.get("LIMPADOR_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )

    return Settings(cleaner=cleaner, logging=logging_settings)
