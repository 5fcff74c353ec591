from collections.abc import Iterable
from dataclasses import dataclass

from morphcore.errors import DecodeError
from morphcore.features import FeatureBundleBuilder, FeatureKey, TagFeatureBundle
from morphcore.logging import get_logger
from morphcore.tagging.codes import SEGMENT_DELIMITER
from morphcore.tagging.grammar import GERMAN_CATEGORIES, Category, Grammar, build_grammar

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResolveResult:
    """Outcome of decoding one raw tag, as a value instead of an exception.

    Attributes:
        raw_tag: The decoded tag
        bundles: Decoded interpretations, empty on failure
        error: The decode failure, None on success
    """

    raw_tag: str
    bundles: tuple[TagFeatureBundle, ...] = ()
    error: DecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> list[TagFeatureBundle]:
        """Get the bundles, raising the stored error if decoding failed."""
        if self.error is not None:
            raise self.error
        return list(self.bundles)


def _progress(error: DecodeError) -> int:
    return -1 if error.segment_index is None else error.segment_index


class TagResolver:
    """Decode raw morphological tags into feature bundles.

    The grammar is validated once at construction and never mutated, so one
    resolver can be shared between threads. ``strict`` only changes how
    ``resolve_all`` treats failures; ``resolve`` raises in both modes.

    Args:
        categories: Grammar categories; defaults to the German tag set
        strict: Whether bulk decoding treats any failure as fatal

    Raises:
        ConfigurationError: If the grammar is malformed
    """

    def __init__(
        self, *, categories: Iterable[Category] | None = None, strict: bool = False
    ) -> None:
        self._grammar: Grammar = build_grammar(
            categories=GERMAN_CATEGORIES if categories is None else categories
        )
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    @strict.setter
    def strict(self, value: bool) -> None:
        self._strict = value

    @property
    def grammar(self) -> Grammar:
        return self._grammar

    def resolve(self, *, raw_tag: str) -> list[TagFeatureBundle]:
        """Decode a raw tag.

        Every template of the tag's category is tried; each one that fits
        yields a bundle, and identical bundles collapse.

        Args:
            raw_tag: Tag string such as "SUB:AKK:SIN:FEM"

        Returns:
            One bundle per distinct interpretation (almost always exactly one)

        Raises:
            DecodeError: If no template of the category fits the tag
        """
        segments = raw_tag.split(SEGMENT_DELIMITER)
        category = self._grammar.get(segments[0])
        if category is None:
            raise DecodeError(
                raw_tag=raw_tag,
                segment_index=0,
                segment=segments[0],
                reason="unknown category code",
            )

        bundles: list[TagFeatureBundle] = []
        failures: list[DecodeError] = []
        for template in category.templates:
            try:
                contributions = template.decode(raw_tag=raw_tag, segments=segments)
            except DecodeError as e:
                failures.append(e)
                continue

            builder = FeatureBundleBuilder()
            builder.add(key=FeatureKey.POS, values=category.pos.values)
            for contribution in contributions:
                builder.add_all(contributions=contribution)
            bundle = builder.build()
            if bundle not in bundles:
                bundles.append(bundle)

        if not bundles:
            raise max(failures, key=_progress)
        return bundles

    def try_resolve(self, *, raw_tag: str) -> ResolveResult:
        """Decode a raw tag, returning failures as values.

        Args:
            raw_tag: Tag string to decode

        Returns:
            Result holding either the bundles or the decode error
        """
        try:
            return ResolveResult(raw_tag=raw_tag, bundles=tuple(self.resolve(raw_tag=raw_tag)))
        except DecodeError as e:
            return ResolveResult(raw_tag=raw_tag, error=e)

    def resolve_all(self, *, raw_tags: Iterable[str]) -> dict[str, list[TagFeatureBundle]]:
        """Decode many tags, each distinct tag once.

        In non-strict mode undecodable tags are logged and left out of the
        result; in strict mode the first failure is raised.

        Args:
            raw_tags: Tags to decode, duplicates allowed

        Returns:
            Mapping of each decodable tag to its bundles, in first-seen order

        Raises:
            DecodeError: In strict mode, for the first undecodable tag
        """
        resolved: dict[str, list[TagFeatureBundle]] = {}
        failed: set[str] = set()
        for raw_tag in raw_tags:
            if raw_tag in resolved or raw_tag in failed:
                continue
            result = self.try_resolve(raw_tag=raw_tag)
            if result.error is not None:
                if self._strict:
                    raise result.error
                logger.warning(f"Skipping undecodable tag: {result.error}")
                failed.add(raw_tag)
                continue
            resolved[raw_tag] = list(result.bundles)
        return resolved
