"""Groups of words that writers commonly confuse with one another.

The resource format is one group per line, members separated by a comma with
optional whitespace after it (``their, there, they're``). A word-form maps to
exactly one group; when a later line declares it again the later group wins.
"""

import importlib.resources as ilr
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Final

from morphcore.errors import ResourceFormatError, ResourceNotFoundError
from morphcore.logging import get_logger

logger = get_logger(__name__)

CONFUSION_SPLIT_PATTERN: Final[re.Pattern[str]] = re.compile(r",\s*")
BUNDLED_RESOURCE_PACKAGE: Final[str] = "morphcore.data"
BUNDLED_RESOURCE_TEMPLATE: Final[str] = "confusion_sets_{language}.txt"
MIN_GROUP_SIZE: Final[int] = 2


@dataclass(frozen=True)
class ConfusionGroup:
    """Ordered, immutable sequence of word-forms that are confused with each other.

    Attributes:
        members: The word-forms in declaration order
    """

    members: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.members) < MIN_GROUP_SIZE:
            raise ValueError(
                f"A confusion group needs at least {MIN_GROUP_SIZE} members, got {self.members!r}"
            )

    def alternatives_for(self, word: str) -> tuple[str, ...]:
        """Members other than ``word``, in declaration order."""
        return tuple(member for member in self.members if member != word)

    def __contains__(self, word: object) -> bool:
        return word in self.members

    def __iter__(self) -> Iterator[str]:
        return iter(self.members)

    def __len__(self) -> int:
        return len(self.members)


class ConfusionRegistry:
    """Read-only lookup from a word-form to its confusion group.

    Args:
        groups: Mapping of word-form to the group it belongs to
    """

    def __init__(self, *, groups: Mapping[str, ConfusionGroup]) -> None:
        self._groups: MappingProxyType[str, ConfusionGroup] = MappingProxyType(dict(groups))

    def lookup(self, word: str) -> ConfusionGroup | None:
        """Get the group ``word`` belongs to, or None if it is not a confusable word."""
        return self._groups.get(word)

    @property
    def words(self) -> frozenset[str]:
        return frozenset(self._groups)

    @property
    def groups(self) -> tuple[ConfusionGroup, ...]:
        """Distinct groups still referenced by at least one word, in first-reference order."""
        return tuple(dict.fromkeys(self._groups.values()))

    def __contains__(self, word: object) -> bool:
        return word in self._groups

    def __len__(self) -> int:
        return len(self._groups)


def _split_line(*, line: str) -> list[str]:
    return [token for token in CONFUSION_SPLIT_PATTERN.split(line) if token]


def parse_confusion_sets(
    *,
    lines: Iterable[str],
    source: str = "<memory>",
    warn_on_overwrite: bool = True,
) -> ConfusionRegistry:
    """Build a registry from confusion-set lines.

    Blank lines and lines with fewer than two members are ignored. A word-form
    declared again on a later line is remapped to the later group.

    Args:
        lines: Resource lines, with or without trailing line terminators
        source: Resource identifier used in log messages
        warn_on_overwrite: Whether to log a warning when a word changes group

    Returns:
        Registry of all loaded groups
    """
    mapping: dict[str, ConfusionGroup] = {}
    ignored_lines = 0

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")
        if not line.strip():
            logger.debug(f"{source}:{line_number}: skipping blank line")
            ignored_lines += 1
            continue

        words = _split_line(line=line)
        if len(words) < MIN_GROUP_SIZE:
            logger.warning(
                f"{source}:{line_number}: ignoring degenerate confusion group {line!r}"
            )
            ignored_lines += 1
            continue

        group = ConfusionGroup(members=tuple(words))
        for word in words:
            previous = mapping.get(word)
            if warn_on_overwrite and previous is not None and previous != group:
                logger.warning(
                    f"{source}:{line_number}: '{word}' moves from group {list(previous.members)} "
                    f"to {list(group.members)}"
                )
            mapping[word] = group

    registry = ConfusionRegistry(groups=mapping)
    logger.info(
        f"Loaded {len(registry.groups)} confusion groups covering {len(registry)} words "
        f"from {source} ({ignored_lines} lines ignored)"
    )
    return registry


def load_confusion_sets(*, path: str | Path, warn_on_overwrite: bool = True) -> ConfusionRegistry:
    """Load a confusion-set resource from the filesystem.

    Args:
        path: Path to a UTF-8 confusion-set file
        warn_on_overwrite: Whether to log a warning when a word changes group

    Returns:
        Registry of all loaded groups

    Raises:
        ResourceNotFoundError: If the file cannot be opened
        ResourceFormatError: If the file is not valid UTF-8
    """
    resource = Path(path)
    try:
        handle = resource.open("r", encoding="utf-8")
    except OSError as e:
        raise ResourceNotFoundError(resource=str(resource), reason=str(e)) from e

    with handle:
        try:
            return parse_confusion_sets(
                lines=handle, source=str(resource), warn_on_overwrite=warn_on_overwrite
            )
        except UnicodeDecodeError as e:
            raise ResourceFormatError(resource=str(resource), line_number=None, reason=str(e)) from e


def load_bundled_confusion_sets(*, language: str) -> ConfusionRegistry:
    """Load one of the confusion-set resources shipped with the package.

    Args:
        language: Language code of the bundled resource (e.g. "en", "de")

    Returns:
        Registry of all loaded groups

    Raises:
        ResourceNotFoundError: If no resource is bundled for ``language``
    """
    name = BUNDLED_RESOURCE_TEMPLATE.format(language=language)
    resource = ilr.files(BUNDLED_RESOURCE_PACKAGE).joinpath(name)
    if not resource.is_file():
        raise ResourceNotFoundError(
            resource=f"{BUNDLED_RESOURCE_PACKAGE}/{name}",
            reason=f"no confusion sets bundled for language '{language}'",
        )
    text = resource.read_text(encoding="utf-8")
    return parse_confusion_sets(
        lines=text.splitlines(), source=f"{BUNDLED_RESOURCE_PACKAGE}/{name}"
    )
