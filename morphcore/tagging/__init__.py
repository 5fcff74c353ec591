from morphcore.tagging.grammar import (
    GERMAN_CATEGORIES,
    Category,
    CodePosition,
    CompoundPosition,
    Multiplicity,
    PersonNumberPosition,
    Template,
    build_grammar,
    validate_category,
)
from morphcore.tagging.resolver import ResolveResult, TagResolver
from morphcore.tagging.validation import (
    DictionaryEntry,
    ValidationFailure,
    ValidationReport,
    read_dictionary_dump,
    validate_dictionary,
)

__all__ = [
    "GERMAN_CATEGORIES",
    "Category",
    "CodePosition",
    "CompoundPosition",
    "DictionaryEntry",
    "Multiplicity",
    "PersonNumberPosition",
    "ResolveResult",
    "TagResolver",
    "Template",
    "ValidationFailure",
    "ValidationReport",
    "build_grammar",
    "read_dictionary_dump",
    "validate_category",
    "validate_dictionary",
]
