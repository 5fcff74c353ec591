import os
from pathlib import Path
from typing import Any, Final

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from morphcore.errors import ConfigurationError, ResourceNotFoundError
from morphcore.logging import get_logger

logger = get_logger(__name__)

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


class ResolverConfig(BaseModel):
    """Tag resolver configuration."""

    strict: bool = False


class ConfusionConfig(BaseModel):
    """Confusion-set registry configuration.

    ``path`` takes precedence over the bundled resource selected by ``language``.
    """

    path: Path | None = None
    language: str = "en"
    warn_on_overwrite: bool = True

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Validate the language code is a short identifier."""
        if not v or not v.isalpha():
            raise ValueError("language must be an alphabetic code such as 'en' or 'de'")
        return v.lower()


class KnownProblems(BaseModel):
    """Dictionary entries with known data defects, skipped during coverage validation."""

    model_config = ConfigDict(frozen=True)

    words: frozenset[str] = frozenset({"Nummerierungen"})
    word_tags: frozenset[tuple[str, str]] = frozenset({("höher", "ADJ:PRD")})
    tag_markers: tuple[str, ...] = ("llemma", ":DAR:")

    def is_known_problem(self, *, word: str, tag: str) -> bool:
        """Check whether an analysis is on the allow-list.

        Args:
            word: Inflected word-form of the entry
            tag: Raw tag of the entry

        Returns:
            True if the entry should be skipped
        """
        if word in self.words or (word, tag) in self.word_tags:
            return True
        return any(marker in tag for marker in self.tag_markers)


class ValidationConfig(BaseModel):
    """Dictionary coverage validation configuration."""

    dictionary_path: Path | None = None
    fail_fast: bool = False
    known_problems: KnownProblems = Field(default_factory=KnownProblems)


class MorphConfig(BaseModel):
    """Complete configuration."""

    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    confusion: ConfusionConfig = Field(default_factory=ConfusionConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)


def _parse_bool(value: str) -> bool:
    return value.lower() in _TRUTHY


def _apply_env_overrides(*, config: MorphConfig) -> MorphConfig:
    """Override configuration values with environment variables.

    Args:
        config: Configuration loaded from defaults or file

    Returns:
        The same configuration object, updated in place
    """
    if os.getenv("MORPH_STRICT"):
        config.resolver.strict = _parse_bool(os.getenv("MORPH_STRICT", "false"))
    if os.getenv("MORPH_CONFUSION_PATH"):
        config.confusion.path = Path(os.getenv("MORPH_CONFUSION_PATH", ""))
    if os.getenv("MORPH_CONFUSION_LANGUAGE"):
        config.confusion.language = os.getenv("MORPH_CONFUSION_LANGUAGE", "en").lower()
    if os.getenv("MORPH_DICTIONARY_PATH"):
        config.validation.dictionary_path = Path(os.getenv("MORPH_DICTIONARY_PATH", ""))
    if os.getenv("MORPH_FAIL_FAST"):
        config.validation.fail_fast = _parse_bool(os.getenv("MORPH_FAIL_FAST", "false"))
    return config


def load_config(*, config_path: str | Path | None = None) -> MorphConfig:
    """Load configuration from a YAML file, then apply environment overrides.

    Args:
        config_path: Path to the YAML configuration file; defaults only when None

    Returns:
        Configuration object

    Raises:
        ResourceNotFoundError: If the config file doesn't exist
        ConfigurationError: If the YAML cannot be parsed or holds invalid values
    """
    if config_path is None:
        config = MorphConfig()
    else:
        config_file = Path(config_path)
        if not config_file.is_file():
            raise ResourceNotFoundError(resource=str(config_file), reason="config file not found")

        try:
            with config_file.open("r", encoding="utf-8") as file:
                raw_config: dict[str, Any] | None = yaml.safe_load(file)
        except yaml.YAMLError as e:
            raise ConfigurationError(msg=f"Failed to parse YAML config {config_file}: {e}") from e

        try:
            config = MorphConfig(**(raw_config or {}))
        except (ValidationError, TypeError) as e:
            raise ConfigurationError(msg=f"Invalid configuration in {config_file}: {e}") from e

        logger.info(f"Config loaded from {config_file}")

    return _apply_env_overrides(config=config)
