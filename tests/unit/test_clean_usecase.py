from __future__ import annotations

import re

import pytest

from limpador_core.application.clean_usecase import HtmlCleaner
from limpador_core.domain.errors import EmptyInputError, ParseError, TraversalError
from limpador_core.domain.policy import CleanerPolicy


class _LoggerStub:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict[str, object]]] = []

    def _record(self, level: str, message: str, extra: dict[str, object]) -> None:
        self.calls.append((level, message, extra["extra"]))  # type: ignore[arg-type]

    def debug(self, message: str, *, extra: dict[str, object]) -> None:
        self._record("debug", message, extra)

    def info(self, message: str, *, extra: dict[str, object]) -> None:
        self._record("info", message, extra)

    def warning(self, message: str, *, extra: dict[str, object]) -> None:
        self._record("warning", message, extra)

    def messages(self, level: str) -> list[str]:
        return [message for call_level, message, _ in self.calls if call_level == level]


class _FailingParser:
    def parse(self, html: str | bytes) -> object:
        raise ParseError("marcação ininterpretável")


class _ExplodingDispatcher:
    def clean_element(self, element: object) -> int:
        raise RuntimeError("falha inesperada")


def _policy(**overrides: object) -> CleanerPolicy:
    options: dict[str, object] = {
        "valid_tags": {
            "p": {
                "class": ["lead", "note"],
                "style": {"color": None, "font-weight": "bold"},
            },
            "a": {"href": "https://example.com", "target": "_blank"},
            "strong": {},
            "br": {},
        },
        "invalid_tags_to_delete": ["script", "style"],
    }
    options.update(overrides)
    return CleanerPolicy(**options)  # type: ignore[arg-type]


def _cleaner(policy: CleanerPolicy | None = None, **kwargs: object) -> HtmlCleaner:
    kwargs.setdefault("logger", _LoggerStub())
    return HtmlCleaner(policy or _policy(), **kwargs)  # type: ignore[arg-type]


def test_clean_removes_banned_elements_with_content() -> None:
    cleaner = _cleaner(CleanerPolicy(valid_tags={"p": {}}, invalid_tags_to_delete=["script"]))

    assert cleaner.clean("<p>ok</p><script>alert(1)</script>") == "<p>ok</p>"


def test_clean_filters_style_declarations() -> None:
    html = '<p style="color: red; font-weight: bold; display:none">x</p>'

    assert _cleaner().clean(html) == '<p style="color:red;font-weight:bold;">x</p>'


def test_clean_filters_classes_in_policy_order() -> None:
    assert _cleaner().clean('<p class="baz note qux lead">x</p>') == '<p class="lead note">x</p>'


def test_clean_strips_unknown_tags_but_keeps_text() -> None:
    html = '<div><p>a</p><span onclick="x">b</span></div>'

    assert _cleaner().clean(html) == "<p>a</p>b"


def test_clean_drops_unlisted_and_event_attributes() -> None:
    assert _cleaner().clean('<p onclick="alert(1)" id="x">a</p>') == "<p>a</p>"


def test_clean_applies_literal_attribute_policy() -> None:
    cleaner = _cleaner()

    assert cleaner.clean('<a href="https://example.com" target="_self">x</a>') == (
        '<a href="https://example.com">x</a>'
    )
    assert cleaner.clean('<a href="javascript:alert(1)">x</a>') == "<a>x</a>"


def test_clean_normalizes_tag_and_attribute_case() -> None:
    assert _cleaner().clean('<P CLASS="lead">x</P>') == '<p class="lead">x</p>'


def test_clean_keeps_escaped_markup_as_text() -> None:
    html = "<p>&lt;script&gt;alert(1)&lt;/script&gt;</p>"

    assert _cleaner().clean(html) == "<p>&lt;script&gt;alert(1)&lt;/script&gt;</p>"


def test_clean_preserves_non_ascii_text() -> None:
    assert _cleaner().clean("<p>coração &amp; ñ</p>") == "<p>coração &amp; ñ</p>"


def test_clean_accepts_text_only_fragment() -> None:
    assert _cleaner().clean("apenas texto") == "apenas texto"


def test_clean_output_only_contains_whitelisted_tags() -> None:
    policy = _policy()
    html = (
        "<div><iframe src=x></iframe><img src=x onerror=alert(1)>"
        '<p class="lead" onmouseover="x">a</p><svg><script>1</script></svg>'
        "<form><input name=q></form><strong>b</strong></div>"
    )

    result = _cleaner(policy).clean(html)

    assert result == '<p class="lead">a</p><strong>b</strong>'
    names = {name.lower() for name in re.findall(r"</?([A-Za-z][A-Za-z0-9]*)", result or "")}
    assert names <= policy.allowed_tags


@pytest.mark.parametrize(
    "html",
    [
        '<div><p class="note lead x" style="font-weight:bold;color:blue">a &amp; b</p><br></div>',
        '<a href="https://example.com" target="_blank" onclick="x">l</a><script>x</script>',
        "1 < 2 & <strong>3</strong>",
        '<p title="a">"aspas" e \'apóstrofos\'</p>',
    ],
)
def test_clean_is_idempotent(html: str) -> None:
    cleaner = _cleaner()

    once = cleaner.clean(html)

    assert once is not None
    assert cleaner.clean(once) == once


@pytest.mark.parametrize("html", [None, "", b""])
def test_clean_rejects_empty_input(html: str | bytes | None) -> None:
    logger = _LoggerStub()

    assert _cleaner(logger=logger).clean(html) is None
    assert logger.messages("warning") == ["clean.rejected"]
    assert logger.calls[-1][2]["error"] == "EmptyInputError"


def test_clean_or_raise_reports_empty_input() -> None:
    with pytest.raises(EmptyInputError):
        _cleaner().clean_or_raise("")


def test_clean_rejects_undecodable_input() -> None:
    cleaner = _cleaner()

    assert cleaner.clean(b"\xff\xfe<p>x</p>") is None
    assert cleaner.clean("<p>\udcff</p>") is None
    with pytest.raises(ParseError):
        cleaner.clean_or_raise(b"\xc3")


def test_clean_rejects_when_parser_fails() -> None:
    logger = _LoggerStub()
    cleaner = _cleaner(parser=_FailingParser(), logger=logger)

    assert cleaner.clean("<p>x</p>") is None
    assert logger.calls[-1][2]["error"] == "ParseError"


def test_clean_wraps_unexpected_attribute_failures() -> None:
    cleaner = _cleaner(dispatcher=_ExplodingDispatcher())

    assert cleaner.clean("<p>x</p>") is None
    with pytest.raises(TraversalError) as exc_info:
        cleaner.clean_or_raise("<p>x</p>")
    assert isinstance(exc_info.value.cause, RuntimeError)


def test_structural_removal_catches_whitelisted_banned_tags() -> None:
    valid_tags = {"p": {}, "iframe": {"src": "x"}}
    html = "<p>a</p><iframe src=x>"

    strengthened = _cleaner(CleanerPolicy(valid_tags=valid_tags, invalid_tags_to_delete=["iframe"]))
    legacy = _cleaner(
        CleanerPolicy(
            valid_tags=valid_tags,
            invalid_tags_to_delete=["iframe"],
            structural_banned_removal=False,
        )
    )

    assert strengthened.clean(html) == "<p>a</p>"
    assert legacy.clean(html) == '<p>a</p><iframe src="x"></iframe>'


def test_clean_logs_finish_with_counters() -> None:
    logger = _LoggerStub()

    _cleaner(logger=logger).clean('<p id="x" onclick="y">a<strong>b</strong></p>')

    level, message, extra = logger.calls[-1]
    assert (level, message) == ("debug", "clean.finish")
    assert extra == {"elements": 2, "attributes_dropped": 2, "banned_removed": 0}


def test_clean_with_selectolax_backend() -> None:
    pytest.importorskip("selectolax.lexbor")
    from limpador_core.infrastructure.parsing.selectolax_parser import SelectolaxFragmentParser

    cleaner = _cleaner(parser=SelectolaxFragmentParser())

    html = '<p class="note lead" onclick="x">a</p><script>x</script><div>b</div>'

    assert cleaner.clean(html) == '<p class="lead note">a</p>b'


@pytest.mark.parametrize(
    "html",
    [
        "<p>a<script>alert(1)",
        "<p>a</p><script><script>x</script>steal()</script>",
        "<p>a</p><script/>alert(1)",
        "<p>a<script>x='</p>';evil()</script></p>",
        "<p>a</p><STYLE>body{}</STYLE >",
    ],
)
def test_structural_removal_catches_unlisted_banned_tags(html: str) -> None:
    cleaner = _cleaner(CleanerPolicy(valid_tags={"p": {}}, invalid_tags_to_delete=["script", "style"]))

    assert cleaner.clean(html) == "<p>a</p>"


def test_legacy_mode_keeps_textual_removal_only() -> None:
    cleaner = _cleaner(
        CleanerPolicy(
            valid_tags={"p": {}},
            invalid_tags_to_delete=["script"],
            structural_banned_removal=False,
        )
    )

    assert cleaner.clean("<p>ok</p><script>alert(1)</script>") == "<p>ok</p>"
    assert cleaner.clean("<p>a</p><script><script>x</script>steal()</script>") == (
        "<p>a</p>steal()"
    )


def test_clean_counts_structural_removals() -> None:
    logger = _LoggerStub()
    cleaner = _cleaner(
        CleanerPolicy(valid_tags={"p": {}}, invalid_tags_to_delete=["script"]), logger=logger
    )

    cleaner.clean("<p>a</p><script><script>x</script></script><script>y</script>")

    assert logger.calls[-1][2]["banned_removed"] == 2


@pytest.mark.parametrize(
    "html",
    ["<style>a>b{}</style>", "<style>p{content:'&amp;'}</style><p>x &amp; y</p>"],
)
def test_clean_is_idempotent_for_whitelisted_raw_text(html: str) -> None:
    cleaner = _cleaner(CleanerPolicy(valid_tags={"style": {}, "p": {}}))

    once = cleaner.clean(html)

    assert once == html
    assert cleaner.clean(once) == once
