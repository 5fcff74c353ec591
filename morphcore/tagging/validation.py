"""Coverage validation of the tag resolver against a tagger dictionary.

The dictionary is read from a tab-separated dump (``word<TAB>lemma<TAB>tag``),
the export format of finite-state tagger dictionaries. Every distinct tag must
decode with a strict resolver; entries on the known-problem allow-list are
skipped so that data defects do not hide decoder defects.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

import orjson

from morphcore.config import KnownProblems
from morphcore.errors import ConfigurationError, DecodeError, ResourceFormatError, ResourceNotFoundError
from morphcore.logging import get_logger
from morphcore.tagging.resolver import TagResolver

logger = get_logger(__name__)

DUMP_COLUMN_SEPARATOR: Final[str] = "\t"
DUMP_COLUMN_COUNT: Final[int] = 3


@dataclass(frozen=True)
class DictionaryEntry:
    """One analysis of a word-form in the tagger dictionary."""

    word: str
    lemma: str
    tag: str


@dataclass(frozen=True)
class ValidationFailure:
    """A distinct tag that failed to decode, with the first word carrying it."""

    entry: DictionaryEntry
    segment_index: int | None
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "word": self.entry.word,
            "lemma": self.entry.lemma,
            "tag": self.entry.tag,
            "segment_index": self.segment_index,
            "reason": self.reason,
        }


@dataclass
class ValidationReport:
    """Outcome of a coverage validation run."""

    checked_entries: int = 0
    distinct_tags: int = 0
    skipped: list[DictionaryEntry] = field(default_factory=list)
    failures: list[ValidationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_json(self) -> str:
        payload = {
            "ok": self.ok,
            "checked_entries": self.checked_entries,
            "distinct_tags": self.distinct_tags,
            "skipped": [
                {"word": e.word, "lemma": e.lemma, "tag": e.tag} for e in self.skipped
            ],
            "failures": [failure.to_dict() for failure in self.failures],
        }
        return orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8")


def read_dictionary_dump(*, path: str | Path) -> Iterator[DictionaryEntry]:
    """Stream entries from a tab-separated dictionary dump.

    Args:
        path: Path to a UTF-8 dump with one ``word<TAB>lemma<TAB>tag`` line per analysis

    Yields:
        Dictionary entries in file order; blank lines are skipped

    Raises:
        ResourceNotFoundError: If the dump cannot be opened
        ResourceFormatError: If a line is not valid UTF-8 or lacks three columns
    """
    resource = Path(path)
    try:
        handle = resource.open("r", encoding="utf-8")
    except OSError as e:
        raise ResourceNotFoundError(resource=str(resource), reason=str(e)) from e

    with handle:
        line_number = 0
        try:
            for line_number, raw_line in enumerate(handle, start=1):
                line = raw_line.rstrip("\r\n")
                if not line.strip():
                    continue
                columns = line.split(DUMP_COLUMN_SEPARATOR)
                if len(columns) != DUMP_COLUMN_COUNT:
                    raise ResourceFormatError(
                        resource=str(resource),
                        line_number=line_number,
                        reason=f"expected {DUMP_COLUMN_COUNT} tab-separated columns, "
                        f"got {len(columns)}",
                    )
                word, lemma, tag = columns
                yield DictionaryEntry(word=word, lemma=lemma, tag=tag)
        except UnicodeDecodeError as e:
            raise ResourceFormatError(
                resource=str(resource), line_number=line_number + 1, reason=str(e)
            ) from e


def validate_dictionary(
    *,
    resolver: TagResolver,
    entries: Iterable[DictionaryEntry],
    known_problems: KnownProblems | None = None,
    fail_fast: bool = False,
) -> ValidationReport:
    """Check that every tag in a dictionary decodes.

    Args:
        resolver: Resolver under test; must be in strict mode
        entries: Dictionary entries to check
        known_problems: Allow-list of entries to skip; defaults to the known data defects
        fail_fast: Raise on the first failure instead of collecting all of them

    Returns:
        Report of checked, skipped and failed entries

    Raises:
        ConfigurationError: If the resolver is not in strict mode
        DecodeError: With ``fail_fast``, for the first undecodable tag
    """
    if not resolver.strict:
        raise ConfigurationError(msg="Coverage validation requires a resolver in strict mode")

    allow_list = known_problems if known_problems is not None else KnownProblems()
    report = ValidationReport()
    outcomes: dict[str, DecodeError | None] = {}

    for entry in entries:
        if allow_list.is_known_problem(word=entry.word, tag=entry.tag):
            logger.info(f"Ignoring: {entry.tag} for word '{entry.word}'")
            report.skipped.append(entry)
            continue

        report.checked_entries += 1
        if entry.tag in outcomes:
            continue

        result = resolver.try_resolve(raw_tag=entry.tag)
        outcomes[entry.tag] = result.error
        if result.error is None:
            continue

        if fail_fast:
            raise DecodeError(
                raw_tag=entry.tag,
                segment_index=result.error.segment_index,
                segment=result.error.segment,
                reason=f"{result.error.reason} (word '{entry.word}')",
            ) from result.error
        logger.error(f"Could not resolve '{entry.tag}' for word '{entry.word}': {result.error}")
        report.failures.append(
            ValidationFailure(
                entry=entry,
                segment_index=result.error.segment_index,
                reason=result.error.reason,
            )
        )

    report.distinct_tags = len(outcomes)
    log = logger.success if report.ok else logger.warning
    log(
        f"Validated {report.distinct_tags} distinct tags from {report.checked_entries} entries: "
        f"{len(report.failures)} failures, {len(report.skipped)} skipped"
    )
    return report
