"""Estratégias de limpeza de atributos HTML."""

from .class_cleaner import ClassAttributeCleaner
from .default_cleaner import DefaultAttributeCleaner
from .dispatcher import AttributeCleaningDispatcher, build_registry
from .style_cleaner import StyleAttributeCleaner, parse_declarations

__all__ = [
    "AttributeCleaningDispatcher",
    "ClassAttributeCleaner",
    "DefaultAttributeCleaner",
    "StyleAttributeCleaner",
    "build_registry",
    "parse_declarations",
]
