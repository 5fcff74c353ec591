"""Feature bundles produced by the tag resolver.

A decoded tag is a ``TagFeatureBundle``: a mapping from a grammatical category
(``FeatureKey``) to the set of values that simultaneously hold for the word
(``FeatureValueSet``). A value set is never empty; a code that contributes
nothing is simply absent from the bundle.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Final


class FeatureKey(StrEnum):
    """Grammatical categories a bundle can carry, named as in the German tag set."""

    POS = "pos"
    CASE = "kasus"
    NUMBER = "numerus"
    GENDER = "genus"
    MOOD = "modus"
    TENSE = "tempus"
    CONJUGATION = "konjugation"
    USAGE = "gebrauch"
    COMPARISON = "komparation"
    DEFINITENESS = "art"
    ARTICLE = "artikel"
    ADVERB = "adverb"
    PREPOSITION = "präposition"
    PRONOUN = "pronomen"
    POSITION = "stellung"
    PERSON = "person"
    PROPER_NOUN = "eigenname"
    VERB_FORM = "form"
    VERB_TYPE = "verbtyp"
    CONJUNCTION = "konjunktion"


VALUE_SEPARATOR: Final[str] = "|"


@dataclass(frozen=True)
class FeatureValueSet:
    """Non-empty set of values that all hold for one feature key.

    Attributes:
        values: The distinct values; order carries no meaning
    """

    values: frozenset[str]

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError("FeatureValueSet must contain at least one value")

    @classmethod
    def of(cls, *values: str) -> "FeatureValueSet":
        """Create a value set from individual values, collapsing duplicates."""
        return cls(values=frozenset(values))

    def union(self, other: "FeatureValueSet") -> "FeatureValueSet":
        return FeatureValueSet(values=self.values | other.values)

    def sorted(self) -> list[str]:
        return sorted(self.values)

    def __contains__(self, value: object) -> bool:
        return value in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.sorted())

    def __len__(self) -> int:
        return len(self.values)

    def __str__(self) -> str:
        return VALUE_SEPARATOR.join(self.sorted())


class TagFeatureBundle:
    """One complete grammatical interpretation of a raw tag.

    Bundles are immutable and compare equal when they hold the same keys with
    the same value sets, independent of insertion order.

    Args:
        features: Mapping of feature key to its value set
    """

    __slots__ = ("_features",)

    def __init__(self, *, features: Mapping[FeatureKey, FeatureValueSet]) -> None:
        self._features: MappingProxyType[FeatureKey, FeatureValueSet] = MappingProxyType(
            dict(features)
        )

    @property
    def features(self) -> Mapping[FeatureKey, FeatureValueSet]:
        return self._features

    def values_for(self, key: FeatureKey) -> FeatureValueSet | None:
        """Get the value set for ``key``.

        Args:
            key: Feature key to query

        Returns:
            The value set, or None when the bundle does not carry the key
        """
        return self._features.get(key)

    def keys(self) -> frozenset[FeatureKey]:
        return frozenset(self._features)

    def to_dict(self) -> dict[str, list[str]]:
        """Convert to a JSON-friendly mapping with sorted values."""
        return {key.value: value_set.sorted() for key, value_set in self._features.items()}

    def describe(self) -> str:
        """Render as ``key=value|value, key=value`` in insertion order."""
        return ", ".join(f"{key.value}={value_set}" for key, value_set in self._features.items())

    def __contains__(self, key: object) -> bool:
        return key in self._features

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagFeatureBundle):
            return NotImplemented
        return dict(self._features) == dict(other._features)

    def __hash__(self) -> int:
        return hash(frozenset(self._features.items()))

    def __repr__(self) -> str:
        return f"TagFeatureBundle({self.describe()})"


class FeatureBundleBuilder:
    """Mutable accumulator used while decoding a single tag.

    Values added under the same key are unioned; empty contributions are ignored.
    """

    def __init__(self) -> None:
        self._values: dict[FeatureKey, set[str]] = {}

    def add(self, *, key: FeatureKey, values: Iterable[str]) -> None:
        new_values = set(values)
        if not new_values:
            return
        self._values.setdefault(key, set()).update(new_values)

    def add_all(self, *, contributions: Mapping[FeatureKey, Iterable[str]]) -> None:
        for key, values in contributions.items():
            self.add(key=key, values=values)

    def build(self) -> TagFeatureBundle:
        return TagFeatureBundle(
            features={
                key: FeatureValueSet(values=frozenset(values)) for key, values in self._values.items()
            }
        )
