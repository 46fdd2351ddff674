from limpador_core.infrastructure.attributes import DefaultAttributeCleaner


def test_default_cleaner_keeps_exact_literal() -> None:
    cleaner = DefaultAttributeCleaner()

    assert cleaner.clean_attribute("a", "target", "_blank", "_blank") == "_blank"


def test_default_cleaner_drops_different_value() -> None:
    cleaner = DefaultAttributeCleaner()

    assert cleaner.clean_attribute("a", "target", "_self", "_blank") is None
    assert cleaner.clean_attribute("a", "target", "_BLANK", "_blank") is None
    assert cleaner.clean_attribute("a", "target", " _blank", "_blank") is None
