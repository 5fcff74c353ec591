"""German morphological tag decoding and confusion-set lookup."""

from morphcore.confusion import (
    ConfusionGroup,
    ConfusionRegistry,
    load_bundled_confusion_sets,
    load_confusion_sets,
    parse_confusion_sets,
)
from morphcore.errors import (
    ConfigurationError,
    DecodeError,
    MorphCoreError,
    ResourceFormatError,
    ResourceNotFoundError,
)
from morphcore.features import FeatureKey, FeatureValueSet, TagFeatureBundle
from morphcore.tagging import ResolveResult, TagResolver

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ConfusionGroup",
    "ConfusionRegistry",
    "DecodeError",
    "FeatureKey",
    "FeatureValueSet",
    "MorphCoreError",
    "ResolveResult",
    "ResourceFormatError",
    "ResourceNotFoundError",
    "TagFeatureBundle",
    "TagResolver",
    "load_bundled_confusion_sets",
    "load_confusion_sets",
    "parse_confusion_sets",
]
