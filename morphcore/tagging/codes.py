from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from morphcore.features import FeatureKey

CodeStr = str
CodeTable = MappingProxyType[CodeStr, frozenset[str]]
CompoundCodeTable = MappingProxyType[CodeStr, MappingProxyType[FeatureKey, frozenset[str]]]

SEGMENT_DELIMITER: Final[str] = ":"
SUBCODE_JOINER: Final[str] = "+"
LETTER_JOINER: Final[str] = "/"


def code_table(entries: Mapping[CodeStr, str | tuple[str, ...]]) -> CodeTable:
    """Freeze a code dictionary; a tuple value means the code stands for all of its values."""
    return MappingProxyType(
        {
            code: frozenset((values,) if isinstance(values, str) else values)
            for code, values in entries.items()
        }
    )


def compound_table(
    entries: Mapping[CodeStr, Mapping[FeatureKey, str | tuple[str, ...]]],
) -> CompoundCodeTable:
    """Freeze a dictionary whose codes contribute to several feature keys at once."""
    return MappingProxyType(
        {code: code_table(features) for code, features in entries.items()}
    )


CASE: Final[CodeTable] = code_table(
    {
        "NOM": "nominativ",
        "AKK": "akkusativ",
        "DAT": "dativ",
        "GEN": "genitiv",
    }
)

NUMBER: Final[CodeTable] = code_table(
    {
        "SIN": "singular",
        "PLU": "plural",
    }
)

GENDER: Final[CodeTable] = code_table(
    {
        "MAS": "maskulinum",
        "FEM": "femininum",
        "NEU": "neutrum",
        "NOG": "ohne",
        "ALG": ("maskulinum", "femininum", "neutrum"),
    }
)

COMPARISON: Final[CodeTable] = code_table(
    {
        "GRU": "positiv",
        "KOM": "komparativ",
        "SUP": "superlativ",
    }
)

DEFINITENESS: Final[CodeTable] = code_table(
    {
        "DEF": "bestimmt",
        "IND": "unbestimmt",
        "SOL": "ohne",
    }
)

ARTICLE_TYPE: Final[CodeTable] = code_table(
    {
        "DEF": "bestimmt",
        "IND": "unbestimmt",
    }
)

PROPER_NOUN_ARTICLE: Final[CompoundCodeTable] = compound_table(
    {
        "ART": {FeatureKey.ARTICLE: "mit", FeatureKey.DEFINITENESS: "bestimmt"},
        "NOA": {FeatureKey.ARTICLE: "ohne"},
    }
)

PROPER_NOUN_TYPE: Final[CodeTable] = code_table(
    {
        "COU": "land",
        "STD": "stadt",
        "GEB": "gebiet",
        "NAC": "nachname",
        "VOR": "vorname",
    }
)

ADVERB_TYPE: Final[CodeTable] = code_table(
    {
        "TMP": "temporal",
        "MOD": "modal",
        "LOK": "lokal",
        "KAU": "kausal",
        "INR": "interrogativ",
    }
)

PREPOSITION_TYPE: Final[CodeTable] = code_table(
    {
        "TMP": "temporal",
        "MOD": "modal",
        "LOK": "lokal",
        "KAU": "kausal",
    }
)

PRONOUN_TYPE: Final[CodeTable] = code_table(
    {
        "PER": "personal",
        "REF": "reflexiv",
        "DEM": "demonstrativ",
        "POS": "possessiv",
        "IND": "indefinit",
        "INR": "interrogativ",
        "REL": "relativ",
        "RIN": ("interrogativ", "relativ"),
    }
)

# single letters, joined with LETTER_JOINER ("B/S")
PRONOUN_POSITION: Final[CodeTable] = code_table(
    {
        "B": "begleitend",
        "S": "stellvertretend",
    }
)

PERSON: Final[CodeTable] = code_table(
    {
        "1": "1",
        "2": "2",
        "3": "3",
    }
)

MOOD_TENSE: Final[CompoundCodeTable] = compound_table(
    {
        "PRÄ": {FeatureKey.MOOD: "indikativ", FeatureKey.TENSE: "präsens"},
        "PRT": {FeatureKey.MOOD: "indikativ", FeatureKey.TENSE: "präteritum"},
        "KJ1": {FeatureKey.MOOD: "konjunktiv1"},
        "KJ2": {FeatureKey.MOOD: "konjunktiv2"},
    }
)

CONJUGATION: Final[CodeTable] = code_table(
    {
        "SFT": "schwach",
        "NON": "stark",
    }
)

NONFINITE_FORM: Final[CodeTable] = code_table(
    {
        "INF": "infinitiv",
        "EIZ": "zu-infinitiv",
        "PA1": "partizip1",
        "PA2": "partizip2",
    }
)

IMPERATIVE_FORM: Final[CodeTable] = code_table({"IMP": "imperativ"})

VERB_TYPE: Final[CodeTable] = code_table(
    {
        "AUX": "hilfsverb",
        "MOD": "modalverb",
    }
)

VERB_USAGE: Final[CodeTable] = code_table({"NEB": "nebensatz"})

ADJECTIVE_USAGE: Final[CodeTable] = code_table({"PRD": "prädikativ"})

CONJUNCTION_TYPE: Final[CodeTable] = code_table(
    {
        "NEB": "nebenordnend",
        "UNT": "unterordnend",
        "VGL": "vergleichend",
        "INF": "infinitiv",
    }
)
