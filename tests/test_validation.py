from pathlib import Path
from typing import Final

import orjson
import pytest

from morphcore.config import KnownProblems
from morphcore.errors import ConfigurationError, DecodeError, ResourceFormatError, ResourceNotFoundError
from morphcore.tagging.resolver import TagResolver
from morphcore.tagging.validation import DictionaryEntry, read_dictionary_dump, validate_dictionary

_SAMPLE_ENTRY_COUNT: Final[int] = 28
_SAMPLE_SKIPPED_COUNT: Final[int] = 4


def _write_dump(*, path: Path, rows: list[tuple[str, str, str]]) -> Path:
    """Write rows as a tab-separated dictionary dump.

    Args:
        path: Destination file
        rows: (word, lemma, tag) triples

    Returns:
        The written path
    """
    path.write_text("".join("\t".join(row) + "\n" for row in rows), encoding="utf-8")
    return path


def test_read_dictionary_dump(dictionary_dump_path: Path) -> None:
    """Test that the sample dump streams every entry."""
    entries = list(read_dictionary_dump(path=dictionary_dump_path))

    assert len(entries) == _SAMPLE_ENTRY_COUNT
    assert entries[0] == DictionaryEntry(word="Frau", lemma="Frau", tag="SUB:NOM:SIN:FEM")


def test_read_dump_skips_blank_lines(tmp_path: Path) -> None:
    """Test that blank lines in a dump are ignored."""
    dump = tmp_path / "dump.tsv"
    dump.write_text("nicht\tnicht\tNEG\n\n   \nusw\tusw\tABK", encoding="utf-8")

    assert [entry.tag for entry in read_dictionary_dump(path=dump)] == ["NEG", "ABK"]


def test_read_dump_rejects_malformed_line(tmp_path: Path) -> None:
    """Test that a line without three columns raises ResourceFormatError."""
    dump = tmp_path / "dump.tsv"
    dump.write_text("nicht\tnicht\tNEG\nkaputt NEG\n", encoding="utf-8")

    with pytest.raises(ResourceFormatError) as exc_info:
        list(read_dictionary_dump(path=dump))

    assert exc_info.value.line_number == 2


def test_read_missing_dump_raises(tmp_path: Path) -> None:
    """Test that a missing dump raises ResourceNotFoundError."""
    with pytest.raises(ResourceNotFoundError):
        list(read_dictionary_dump(path=tmp_path / "absent.tsv"))


def test_known_problem_allow_list() -> None:
    """Test the default allow-list of known dictionary defects."""
    known = KnownProblems()

    assert known.is_known_problem(word="Nummerierungen", tag="SUB:NOM:PLU:FEM")
    assert known.is_known_problem(word="höher", tag="ADJ:PRD")
    assert not known.is_known_problem(word="höher", tag="ADJ:PRD:KOM")
    assert known.is_known_problem(word="Schmidt", tag="EIG:NOM:SIN:MAS:llemma")
    assert known.is_known_problem(word="darum", tag="ADV:DAR:PRO")
    assert not known.is_known_problem(word="Frau", tag="SUB:NOM:SIN:FEM")


def test_sample_dictionary_is_fully_covered(
    strict_resolver: TagResolver, dictionary_dump_path: Path, log_messages: list[str]
) -> None:
    """Test that every non-allow-listed tag in the sample dump decodes."""
    report = validate_dictionary(
        resolver=strict_resolver, entries=read_dictionary_dump(path=dictionary_dump_path)
    )

    assert report.ok, report.to_json()
    assert len(report.skipped) == _SAMPLE_SKIPPED_COUNT
    assert report.checked_entries == _SAMPLE_ENTRY_COUNT - _SAMPLE_SKIPPED_COUNT
    assert report.distinct_tags == report.checked_entries
    assert "Ignoring: ADJ:PRD for word 'höher'" in log_messages


def test_validation_requires_strict_resolver(resolver: TagResolver) -> None:
    """Test that coverage validation refuses a non-strict resolver."""
    with pytest.raises(ConfigurationError):
        validate_dictionary(resolver=resolver, entries=[])


def test_failures_are_collected_once_per_tag(strict_resolver: TagResolver, tmp_path: Path) -> None:
    """Test that each undecodable tag is reported once, with the first word carrying it."""
    dump = _write_dump(
        path=tmp_path / "dump.tsv",
        rows=[
            ("Haus", "Haus", "SUB:NOM:SIN:NEU"),
            ("foo", "foo", "SUB:XXX:SIN:NEU"),
            ("bar", "bar", "SUB:XXX:SIN:NEU"),
            ("baz", "baz", "QQQ"),
        ],
    )

    report = validate_dictionary(resolver=strict_resolver, entries=read_dictionary_dump(path=dump))

    assert not report.ok
    assert report.checked_entries == 4
    assert report.distinct_tags == 3
    assert [(f.entry.word, f.segment_index) for f in report.failures] == [("foo", 1), ("baz", 0)]


def test_report_serializes_to_json(strict_resolver: TagResolver) -> None:
    """Test that the report renders as JSON with failure details."""
    report = validate_dictionary(
        resolver=strict_resolver,
        entries=[DictionaryEntry(word="x", lemma="x", tag="SUB")],
    )

    payload = orjson.loads(report.to_json())

    assert payload["ok"] is False
    assert payload["failures"][0]["tag"] == "SUB"
    assert payload["failures"][0]["segment_index"] == 1


def test_fail_fast_names_the_word(strict_resolver: TagResolver) -> None:
    """Test that fail-fast validation raises on the first failure with the word."""
    entries = [
        DictionaryEntry(word="gut", lemma="gut", tag="NEG"),
        DictionaryEntry(word="kaputt", lemma="kaputt", tag="ADJ:XXX"),
        DictionaryEntry(word="später", lemma="später", tag="QQQ"),
    ]

    with pytest.raises(DecodeError) as exc_info:
        validate_dictionary(resolver=strict_resolver, entries=entries, fail_fast=True)

    assert exc_info.value.raw_tag == "ADJ:XXX"
    assert "kaputt" in str(exc_info.value)


def test_custom_allow_list(strict_resolver: TagResolver) -> None:
    """Test that a custom allow-list replaces the default one."""
    known = KnownProblems(words=frozenset({"kaputt"}), word_tags=frozenset(), tag_markers=())
    entries = [
        DictionaryEntry(word="kaputt", lemma="kaputt", tag="ADJ:XXX"),
        DictionaryEntry(word="Nummerierungen", lemma="Nummerierung", tag="SUB:NOM:PLU:FEM"),
    ]

    report = validate_dictionary(resolver=strict_resolver, entries=entries, known_problems=known)

    assert report.ok
    assert [entry.word for entry in report.skipped] == ["kaputt"]
