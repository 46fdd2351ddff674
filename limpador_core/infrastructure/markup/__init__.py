"""Filtros textuais aplicados antes e depois do parsing."""

from .banned_stripper import BannedElementStripper
from .tag_filter import TagWhitelistFilter

__all__ = ["BannedElementStripper", "TagWhitelistFilter"]
