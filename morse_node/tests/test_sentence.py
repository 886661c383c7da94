"""Unit tests for the sentence builder and its edit operations."""

from __future__ import annotations

import pytest

from morse_node.events import EventKind, EventNotifier
from morse_node.sentence import SentenceBuilder, drop_last_segment, last_segment


def make_builder(text: str = "") -> tuple[SentenceBuilder, list]:
    notifier = EventNotifier()
    builder = SentenceBuilder(notifier)
    for symbol in text:
        builder.append(symbol)
    changes: list = []
    notifier.subscribe(EventKind.SENTENCE_CHANGED, lambda cur, prev: changes.append((cur, prev)))
    return builder, changes


@pytest.mark.parametrize("text", ["", ".", ". -", ". - ", "  ", "-/. -", ".-/-", "/ /"])
@pytest.mark.parametrize("delimiter", [" ", "/"])
def test_segment_helpers_match_split(text: str, delimiter: str) -> None:
    parts = text.split(delimiter)
    assert last_segment(text, delimiter) == parts[-1]
    assert drop_last_segment(text, delimiter) == delimiter.join(parts[:-1])


def test_append_fires_sentence_changed() -> None:
    builder, changes = make_builder()
    builder.append(".")
    builder.append("-")
    assert builder.current_text() == ".-"
    assert changes == [(".", ""), (".-", ".")]


def test_character_end_carries_closed_segment() -> None:
    builder, _ = make_builder(". -.")
    characters: list = []
    builder.notifier.subscribe(EventKind.CHARACTER_END, characters.append)
    builder.append(" ")
    assert characters == ["-."]
    assert builder.current_text() == ". -. "


def test_character_end_after_word_uses_split_semantics() -> None:
    builder, _ = make_builder("-/.")
    characters: list = []
    builder.notifier.subscribe(EventKind.CHARACTER_END, characters.append)
    builder.append(" ")
    assert characters == ["-/."]


def test_word_end_replacing_character_delimiter() -> None:
    builder, changes = make_builder(".- -/. ")
    words: list = []
    builder.notifier.subscribe(EventKind.WORD_END, words.append)
    builder.append("/", replacing=" ")
    assert builder.current_text() == ".- -/./"
    assert words == ["."]
    assert changes == [(".- -/./", ".- -/.")]


def test_replacing_only_strips_matching_suffix() -> None:
    builder, _ = make_builder(".-")
    builder.append("/", replacing=" ")
    assert builder.current_text() == ".-/"


def test_trailing_delimiter_queries() -> None:
    builder, _ = make_builder()
    assert builder.is_empty()
    assert not builder.ends_with_delimiter()
    builder.append(".")
    builder.append(" ")
    assert builder.ends_with_character_delimiter()
    assert not builder.ends_with_word_delimiter()
    builder.append("/", replacing=" ")
    assert builder.ends_with_word_delimiter()
    assert builder.ends_with_delimiter()


@pytest.mark.parametrize(
    "text, expected",
    [
        (". -", "."),
        (". -..", "."),
        (".", ""),
        (". ", "."),
        ("", ""),
    ],
)
def test_delete_last_character(text: str, expected: str) -> None:
    builder, changes = make_builder(text)
    builder.delete_last_character()
    assert builder.current_text() == expected
    assert changes == [(expected, text)]


def test_delete_last_character_repeated_on_empty_is_noop() -> None:
    builder, _ = make_builder(". -")
    for _ in range(5):
        builder.delete_last_character()
    assert builder.current_text() == ""


@pytest.mark.parametrize(
    "text, expected",
    [
        ("-/. -", "-"),
        ("-/", "-"),
        (". -", ""),
        ("", ""),
    ],
)
def test_delete_last_word(text: str, expected: str) -> None:
    builder, _ = make_builder(text)
    builder.delete_last_word()
    assert builder.current_text() == expected


def test_clear_fires_exactly_one_event() -> None:
    builder, changes = make_builder(".- -/")
    builder.clear()
    assert builder.current_text() == ""
    assert changes == [("", ".- -/")]


def test_custom_delimiters() -> None:
    builder = SentenceBuilder(character_delimiter="|", word_delimiter="#")
    words: list = []
    builder.notifier.subscribe(EventKind.WORD_END, words.append)
    for symbol in ".|-":
        builder.append(symbol)
    builder.append("#", replacing="|")
    assert builder.current_text() == ".|-#"
    assert words == [".|-"]
    builder.delete_last_word()
    assert builder.current_text() == ".|-"


def test_handlers_may_read_sentence_reentrantly() -> None:
    builder = SentenceBuilder()
    seen: list = []
    builder.notifier.subscribe(
        EventKind.SENTENCE_CHANGED, lambda cur, prev: seen.append(builder.current_text())
    )
    builder.append("-")
    assert seen == ["-"]


def test_sentence_changed_fires_when_segment_handler_raises() -> None:
    builder, changes = make_builder(".")

    def boom(_segment: str) -> None:
        raise RuntimeError("handler failed")

    builder.notifier.subscribe(EventKind.CHARACTER_END, boom)
    with pytest.raises(RuntimeError):
        builder.append(" ")
    assert builder.current_text() == ". "
    assert changes == [(". ", ".")]
