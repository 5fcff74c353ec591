"""Category templates that drive tag decoding.

A raw tag is split on ``:``. Its first segment selects a ``Category``; each of
the category's ``Template`` objects describes how the remaining segments map
onto feature keys. Positions come in three kinds:

- ``CodePosition``: one segment looked up in a code dictionary, optionally
  split into several sub-codes (``MOD+TMP``) or letters (``B/S``) whose values
  are unioned.
- ``CompoundPosition``: one segment whose code contributes to several keys
  (``PRÄ`` is both indicative mood and present tense).
- ``PersonNumberPosition``: two adjacent segments (``1:SIN``) for the verb
  person and number.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import ClassVar, Final

from toolz import concat

from morphcore.errors import ConfigurationError, DecodeError
from morphcore.features import FeatureKey, FeatureValueSet
from morphcore.tagging import codes
from morphcore.tagging.codes import (
    LETTER_JOINER,
    SEGMENT_DELIMITER,
    SUBCODE_JOINER,
    CodeTable,
    CompoundCodeTable,
)

Contribution = Mapping[FeatureKey, frozenset[str]]


class Multiplicity(StrEnum):
    """How many codes a single segment may carry."""

    SINGLE = "single"
    SUBCODES = "subcodes"
    LETTERS = "letters"

    @property
    def joiner(self) -> str | None:
        match self:
            case Multiplicity.SUBCODES:
                return SUBCODE_JOINER
            case Multiplicity.LETTERS:
                return LETTER_JOINER
            case _:
                return None


@dataclass(frozen=True)
class CodePosition:
    """Segment decoded through one code dictionary into one feature key.

    Attributes:
        key: Feature key the segment fills
        table: Code dictionary for the segment
        multiplicity: Whether the segment may join several codes
        optional: Whether the position may be absent
    """

    key: FeatureKey
    table: CodeTable
    multiplicity: Multiplicity = Multiplicity.SINGLE
    optional: bool = False

    width: ClassVar[int] = 1

    def decode(self, *, raw_tag: str, segments: Sequence[str], start: int) -> Contribution:
        segment = segments[start]
        joiner = self.multiplicity.joiner
        sub_codes = segment.split(joiner) if joiner else [segment]
        for code in sub_codes:
            if code not in self.table:
                raise DecodeError(
                    raw_tag=raw_tag,
                    segment_index=start,
                    segment=segment,
                    reason=f"unknown {self.key.value} code '{code}'",
                )
        return {self.key: frozenset(concat(self.table[code] for code in sub_codes))}


@dataclass(frozen=True)
class CompoundPosition:
    """Segment whose code contributes values to several feature keys.

    Attributes:
        table: Code to per-key values
        optional: Whether the position may be absent
    """

    table: CompoundCodeTable
    optional: bool = False

    width: ClassVar[int] = 1

    def decode(self, *, raw_tag: str, segments: Sequence[str], start: int) -> Contribution:
        segment = segments[start]
        if segment not in self.table:
            keys = "/".join(sorted({key.value for entry in self.table.values() for key in entry}))
            raise DecodeError(
                raw_tag=raw_tag,
                segment_index=start,
                segment=segment,
                reason=f"unknown {keys} code '{segment}'",
            )
        return self.table[segment]


@dataclass(frozen=True)
class PersonNumberPosition:
    """Two adjacent segments holding the verb person and the number."""

    optional: bool = False

    person: ClassVar[CodeTable] = codes.PERSON
    number: ClassVar[CodeTable] = codes.NUMBER
    width: ClassVar[int] = 2

    def decode(self, *, raw_tag: str, segments: Sequence[str], start: int) -> Contribution:
        person, number = segments[start], segments[start + 1]
        if person not in self.person:
            raise DecodeError(
                raw_tag=raw_tag,
                segment_index=start,
                segment=person,
                reason=f"unknown person code '{person}'",
            )
        if number not in self.number:
            raise DecodeError(
                raw_tag=raw_tag,
                segment_index=start + 1,
                segment=number,
                reason=f"unknown numerus code '{number}'",
            )
        return {FeatureKey.PERSON: self.person[person], FeatureKey.NUMBER: self.number[number]}


Position = CodePosition | CompoundPosition | PersonNumberPosition


@dataclass(frozen=True)
class Template:
    """Ordered positions following the category segment.

    An optional position is skipped when its segment is missing or is not one
    of its codes.

    Attributes:
        name: Template name, unique within its category
        positions: Positions in segment order
    """

    name: str
    positions: tuple[Position, ...] = ()

    def decode(self, *, raw_tag: str, segments: Sequence[str]) -> list[Contribution]:
        """Decode ``segments[1:]`` against this template.

        Args:
            raw_tag: Original tag, for error reporting
            segments: All segments of the tag, category segment included

        Returns:
            One contribution per matched position

        Raises:
            DecodeError: If a segment is unknown, missing or superfluous
        """
        contributions: list[Contribution] = []
        index = 1
        for position in self.positions:
            if index + position.width > len(segments):
                if position.optional:
                    continue
                raise DecodeError(
                    raw_tag=raw_tag,
                    segment_index=len(segments),
                    segment=None,
                    reason=f"missing segment for template '{self.name}'",
                )
            try:
                contributions.append(
                    position.decode(raw_tag=raw_tag, segments=segments, start=index)
                )
            except DecodeError:
                if position.optional:
                    continue
                raise
            index += position.width

        if index < len(segments):
            raise DecodeError(
                raw_tag=raw_tag,
                segment_index=index,
                segment=segments[index],
                reason=f"unexpected segment for template '{self.name}'",
            )
        return contributions


BARE_TEMPLATE: Final[Template] = Template(name="bare")


@dataclass(frozen=True)
class Category:
    """Primary grammatical category selected by the first tag segment.

    Attributes:
        code: First-segment code (e.g. "SUB")
        pos: Part-of-speech values contributed by the category
        templates: Alternative layouts of the remaining segments
    """

    code: str
    pos: FeatureValueSet
    templates: tuple[Template, ...] = (BARE_TEMPLATE,)


Grammar = MappingProxyType[str, Category]


def _validate_table(*, table: Mapping[str, frozenset[str]], where: str) -> None:
    if not table:
        raise ConfigurationError(msg=f"{where}: code table is empty")
    for code, values in table.items():
        if not code:
            raise ConfigurationError(msg=f"{where}: empty code")
        if not values or not all(values):
            raise ConfigurationError(msg=f"{where}: code '{code}' has no values")


def _validate_position(*, position: Position, where: str) -> None:
    match position:
        case CodePosition(table=table, multiplicity=multiplicity):
            _validate_table(table=table, where=where)
            if multiplicity == Multiplicity.LETTERS:
                for code, values in table.items():
                    if len(code) != 1 or len(values) != 1:
                        raise ConfigurationError(
                            msg=f"{where}: letter code '{code}' must be one letter with one value"
                        )
            joiner = multiplicity.joiner
            for code in table:
                if SEGMENT_DELIMITER in code or (joiner is not None and joiner in code):
                    raise ConfigurationError(msg=f"{where}: code '{code}' contains a delimiter")
        case CompoundPosition(table=table):
            if not table:
                raise ConfigurationError(msg=f"{where}: compound table is empty")
            for code, features in table.items():
                if not features:
                    raise ConfigurationError(msg=f"{where}: compound code '{code}' has no values")
                for key, values in features.items():
                    _validate_table(table={code: values}, where=f"{where}[{key.value}]")
        case PersonNumberPosition():
            _validate_table(table=position.person, where=f"{where}[person]")
            _validate_table(table=position.number, where=f"{where}[numerus]")
        case _:
            raise ConfigurationError(msg=f"{where}: unsupported position {position!r}")


def validate_category(*, category: Category) -> None:
    """Check a category for table and template defects.

    Args:
        category: Category to check

    Raises:
        ConfigurationError: If the category is malformed
    """
    code = category.code
    if not code or any(d in code for d in (SEGMENT_DELIMITER, SUBCODE_JOINER, LETTER_JOINER)):
        raise ConfigurationError(msg=f"Invalid category code {code!r}")
    if not category.templates:
        raise ConfigurationError(msg=f"Category '{code}' has no templates")

    names = [template.name for template in category.templates]
    if len(set(names)) != len(names):
        raise ConfigurationError(msg=f"Category '{code}' has duplicate template names {names}")

    for template in category.templates:
        for offset, position in enumerate(template.positions, start=1):
            _validate_position(position=position, where=f"{code}/{template.name}#{offset}")


def build_grammar(*, categories: Iterable[Category]) -> Grammar:
    """Validate categories and index them by code.

    Args:
        categories: Categories making up the grammar

    Returns:
        Immutable mapping of category code to category

    Raises:
        ConfigurationError: If the grammar is empty, malformed or declares a code twice
    """
    grammar: dict[str, Category] = {}
    for category in categories:
        validate_category(category=category)
        if category.code in grammar:
            raise ConfigurationError(msg=f"Category '{category.code}' is declared twice")
        grammar[category.code] = category
    if not grammar:
        raise ConfigurationError(msg="Grammar has no categories")
    return MappingProxyType(grammar)


_CASE: Final[CodePosition] = CodePosition(key=FeatureKey.CASE, table=codes.CASE)
_NUMBER: Final[CodePosition] = CodePosition(key=FeatureKey.NUMBER, table=codes.NUMBER)
_GENDER: Final[CodePosition] = CodePosition(key=FeatureKey.GENDER, table=codes.GENDER)
_COMPARISON: Final[CodePosition] = CodePosition(key=FeatureKey.COMPARISON, table=codes.COMPARISON)
_CONJUGATION: Final[CodePosition] = CodePosition(
    key=FeatureKey.CONJUGATION, table=codes.CONJUGATION
)
_VERB_TYPE: Final[CodePosition] = CodePosition(
    key=FeatureKey.VERB_TYPE, table=codes.VERB_TYPE, optional=True
)
_VERB_USAGE: Final[CodePosition] = CodePosition(
    key=FeatureKey.USAGE, table=codes.VERB_USAGE, optional=True
)
_PRONOUN_TYPE: Final[CodePosition] = CodePosition(
    key=FeatureKey.PRONOUN, table=codes.PRONOUN_TYPE
)
_PRONOUN_POSITION: Final[CodePosition] = CodePosition(
    key=FeatureKey.POSITION,
    table=codes.PRONOUN_POSITION,
    multiplicity=Multiplicity.LETTERS,
    optional=True,
)

GERMAN_CATEGORIES: Final[tuple[Category, ...]] = (
    Category(
        code="SUB",
        pos=FeatureValueSet.of("nomen"),
        templates=(Template(name="noun", positions=(_CASE, _NUMBER, _GENDER)),),
    ),
    Category(
        code="EIG",
        pos=FeatureValueSet.of("eigenname"),
        templates=(
            Template(
                name="proper_noun",
                positions=(
                    _CASE,
                    _NUMBER,
                    _GENDER,
                    CompoundPosition(table=codes.PROPER_NOUN_ARTICLE),
                    CodePosition(key=FeatureKey.PROPER_NOUN, table=codes.PROPER_NOUN_TYPE),
                ),
            ),
        ),
    ),
    Category(
        code="VER",
        pos=FeatureValueSet.of("verb"),
        templates=(
            Template(
                name="finite",
                positions=(
                    _VERB_TYPE,
                    PersonNumberPosition(),
                    CompoundPosition(table=codes.MOOD_TENSE),
                    _CONJUGATION,
                    _VERB_USAGE,
                ),
            ),
            Template(
                name="nonfinite",
                positions=(
                    _VERB_TYPE,
                    CodePosition(key=FeatureKey.VERB_FORM, table=codes.NONFINITE_FORM),
                    _CONJUGATION,
                    _VERB_USAGE,
                ),
            ),
            Template(
                name="imperative",
                positions=(
                    CodePosition(key=FeatureKey.VERB_FORM, table=codes.IMPERATIVE_FORM),
                    _NUMBER,
                    _CONJUGATION,
                    _VERB_USAGE,
                ),
            ),
        ),
    ),
    Category(
        code="ADJ",
        pos=FeatureValueSet.of("adjektiv"),
        templates=(
            Template(
                name="predicative",
                positions=(
                    CodePosition(key=FeatureKey.USAGE, table=codes.ADJECTIVE_USAGE),
                    _COMPARISON,
                ),
            ),
            Template(
                name="attributive",
                positions=(
                    _CASE,
                    _NUMBER,
                    _GENDER,
                    _COMPARISON,
                    CodePosition(key=FeatureKey.DEFINITENESS, table=codes.DEFINITENESS),
                ),
            ),
        ),
    ),
    Category(
        code="ART",
        pos=FeatureValueSet.of("artikel"),
        templates=(
            Template(
                name="article",
                positions=(
                    CodePosition(key=FeatureKey.ARTICLE, table=codes.ARTICLE_TYPE),
                    _CASE,
                    _NUMBER,
                    _GENDER,
                ),
            ),
        ),
    ),
    Category(
        code="PRO",
        pos=FeatureValueSet.of("pronomen"),
        templates=(
            Template(
                name="declined",
                positions=(_PRONOUN_TYPE, _CASE, _NUMBER, _GENDER, _PRONOUN_POSITION),
            ),
            Template(name="case_gender", positions=(_PRONOUN_TYPE, _CASE, _GENDER)),
            Template(name="indeclinable", positions=(_PRONOUN_TYPE, _PRONOUN_POSITION)),
        ),
    ),
    Category(
        code="ADV",
        pos=FeatureValueSet.of("adverb"),
        templates=(
            Template(
                name="adverb",
                positions=(
                    CodePosition(
                        key=FeatureKey.ADVERB,
                        table=codes.ADVERB_TYPE,
                        multiplicity=Multiplicity.SUBCODES,
                    ),
                ),
            ),
        ),
    ),
    Category(
        code="PRP",
        pos=FeatureValueSet.of("präposition"),
        templates=(
            Template(
                name="preposition",
                positions=(
                    CodePosition(
                        key=FeatureKey.PREPOSITION,
                        table=codes.PREPOSITION_TYPE,
                        multiplicity=Multiplicity.SUBCODES,
                    ),
                    CodePosition(
                        key=FeatureKey.CASE,
                        table=codes.CASE,
                        multiplicity=Multiplicity.SUBCODES,
                    ),
                ),
            ),
        ),
    ),
    Category(
        code="KON",
        pos=FeatureValueSet.of("konjunktion"),
        templates=(
            Template(
                name="conjunction",
                positions=(
                    CodePosition(key=FeatureKey.CONJUNCTION, table=codes.CONJUNCTION_TYPE),
                ),
            ),
        ),
    ),
    Category(code="NEG", pos=FeatureValueSet.of("negationspartikel")),
    Category(code="ABK", pos=FeatureValueSet.of("abkürzung")),
    Category(code="ZAL", pos=FeatureValueSet.of("zahlwort")),
    Category(code="INJ", pos=FeatureValueSet.of("interjektion")),
    Category(code="ZUS", pos=FeatureValueSet.of("verbzusatz")),
)
