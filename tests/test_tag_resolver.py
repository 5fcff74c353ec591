from concurrent.futures import ThreadPoolExecutor
from typing import Final

import pytest

from morphcore.errors import DecodeError
from morphcore.features import FeatureKey, TagFeatureBundle
from morphcore.tagging.resolver import ResolveResult, TagResolver

_REFERENCE_TAGS: Final[dict[str, dict[str, set[str]]]] = {
    "SUB:AKK:SIN:FEM": {
        "pos": {"nomen"},
        "kasus": {"akkusativ"},
        "numerus": {"singular"},
        "genus": {"femininum"},
    },
    "EIG:AKK:SIN:NEU:ART:STD": {
        "pos": {"eigenname"},
        "kasus": {"akkusativ"},
        "numerus": {"singular"},
        "genus": {"neutrum"},
        "artikel": {"mit"},
        "art": {"bestimmt"},
        "eigenname": {"stadt"},
    },
    "VER:1:SIN:KJ2:SFT:NEB": {
        "pos": {"verb"},
        "person": {"1"},
        "numerus": {"singular"},
        "modus": {"konjunktiv2"},
        "konjugation": {"schwach"},
        "gebrauch": {"nebensatz"},
    },
    "VER:PA1:SFT": {"pos": {"verb"}, "form": {"partizip1"}, "konjugation": {"schwach"}},
    "VER:INF:SFT": {"pos": {"verb"}, "form": {"infinitiv"}, "konjugation": {"schwach"}},
    "VER:IMP:SIN:SFT": {
        "pos": {"verb"},
        "form": {"imperativ"},
        "numerus": {"singular"},
        "konjugation": {"schwach"},
    },
    "ADJ:PRD:KOM": {"pos": {"adjektiv"}, "gebrauch": {"prädikativ"}, "komparation": {"komparativ"}},
    "ADJ:DAT:SIN:MAS:SUP:DEF": {
        "pos": {"adjektiv"},
        "kasus": {"dativ"},
        "numerus": {"singular"},
        "genus": {"maskulinum"},
        "komparation": {"superlativ"},
        "art": {"bestimmt"},
    },
    "ART:DEF:NOM:PLU:FEM": {
        "pos": {"artikel"},
        "artikel": {"bestimmt"},
        "kasus": {"nominativ"},
        "numerus": {"plural"},
        "genus": {"femininum"},
    },
    "PRO:RIN:DAT:FEM": {
        "pos": {"pronomen"},
        "pronomen": {"interrogativ", "relativ"},
        "kasus": {"dativ"},
        "genus": {"femininum"},
    },
    "PRO:RIN:GEN:SIN:NEU:B/S": {
        "pos": {"pronomen"},
        "pronomen": {"interrogativ", "relativ"},
        "kasus": {"genitiv"},
        "numerus": {"singular"},
        "genus": {"neutrum"},
        "stellung": {"begleitend", "stellvertretend"},
    },
    "ADV:TMP": {"pos": {"adverb"}, "adverb": {"temporal"}},
    "ADV:MOD+TMP+LOK": {"pos": {"adverb"}, "adverb": {"lokal", "modal", "temporal"}},
    "PRP:MOD:GEN+DAT": {
        "pos": {"präposition"},
        "präposition": {"modal"},
        "kasus": {"dativ", "genitiv"},
    },
    "NEG": {"pos": {"negationspartikel"}},
    "ABK": {"pos": {"abkürzung"}},
    "ZAL": {"pos": {"zahlwort"}},
    "INJ": {"pos": {"interjektion"}},
    "ZUS": {"pos": {"verbzusatz"}},
}


def _as_sets(bundle: TagFeatureBundle) -> dict[str, set[str]]:
    """Convert a bundle into plain string keys and value sets for comparison.

    Args:
        bundle: Bundle to convert

    Returns:
        Mapping of feature key name to its values
    """
    return {key: set(values) for key, values in bundle.to_dict().items()}


def _single_bundle(*, resolver: TagResolver, raw_tag: str) -> TagFeatureBundle:
    """Resolve a tag that must have exactly one interpretation.

    Args:
        resolver: Resolver under test
        raw_tag: Tag to decode

    Returns:
        The only bundle
    """
    bundles = resolver.resolve(raw_tag=raw_tag)
    assert len(bundles) == 1, f"Expected one bundle for {raw_tag}, got {bundles}"
    return bundles[0]


@pytest.mark.parametrize(("raw_tag", "expected"), list(_REFERENCE_TAGS.items()))
def test_reference_tags_decode_to_expected_features(
    resolver: TagResolver, raw_tag: str, expected: dict[str, set[str]]
) -> None:
    """Test that reference dictionary tags decode to their documented features."""
    bundle = _single_bundle(resolver=resolver, raw_tag=raw_tag)

    assert _as_sets(bundle) == expected


def test_every_bundle_carries_part_of_speech(resolver: TagResolver) -> None:
    """Test that the category always contributes the part-of-speech feature."""
    for raw_tag in _REFERENCE_TAGS:
        for bundle in resolver.resolve(raw_tag=raw_tag):
            assert FeatureKey.POS in bundle


def test_finite_verb_with_auxiliary_marker(resolver: TagResolver) -> None:
    """Test that an optional leading verb type is picked up when present."""
    bundle = _single_bundle(resolver=resolver, raw_tag="VER:AUX:3:SIN:PRÄ:NON")

    assert _as_sets(bundle) == {
        "pos": {"verb"},
        "verbtyp": {"hilfsverb"},
        "person": {"3"},
        "numerus": {"singular"},
        "modus": {"indikativ"},
        "tempus": {"präsens"},
        "konjugation": {"stark"},
    }


def test_compound_code_fills_several_keys(resolver: TagResolver) -> None:
    """Test that a mood/tense code contributes to both mood and tense."""
    bundle = _single_bundle(resolver=resolver, raw_tag="VER:3:PLU:PRT:SFT")

    assert str(bundle.values_for(FeatureKey.MOOD)) == "indikativ"
    assert str(bundle.values_for(FeatureKey.TENSE)) == "präteritum"


def test_gender_wildcard_expands_to_all_genders(resolver: TagResolver) -> None:
    """Test that the all-genders code expands to every gender value."""
    bundle = _single_bundle(resolver=resolver, raw_tag="SUB:NOM:PLU:ALG")

    assert bundle.values_for(FeatureKey.GENDER) is not None
    assert set(bundle.values_for(FeatureKey.GENDER)) == {"maskulinum", "femininum", "neutrum"}


def test_subcode_order_does_not_matter(resolver: TagResolver) -> None:
    """Test that joined sub-codes decode to the same bundle regardless of order."""
    first = resolver.resolve(raw_tag="ADV:MOD+TMP+LOK")
    second = resolver.resolve(raw_tag="ADV:LOK+MOD+TMP")

    assert first == second


def test_multi_valued_features_render_sorted(resolver: TagResolver) -> None:
    """Test that multi-valued features render in sorted order joined by pipes."""
    bundle = _single_bundle(resolver=resolver, raw_tag="ADV:MOD+TMP+LOK")

    assert bundle.describe() == "pos=adverb, adverb=lokal|modal|temporal"


def test_resolve_is_deterministic(resolver: TagResolver) -> None:
    """Test that decoding the same tag twice yields equal results."""
    raw_tag = "PRO:RIN:GEN:SIN:NEU:B/S"

    assert resolver.resolve(raw_tag=raw_tag) == resolver.resolve(raw_tag=raw_tag)


def test_concurrent_resolution_matches_sequential(resolver: TagResolver) -> None:
    """Test that a shared resolver gives identical results across threads."""
    tags = list(_REFERENCE_TAGS) * 20
    expected = [resolver.resolve(raw_tag=tag) for tag in tags]

    with ThreadPoolExecutor(max_workers=8) as executor:
        actual = list(executor.map(lambda tag: resolver.resolve(raw_tag=tag), tags))

    assert actual == expected


@pytest.mark.parametrize(
    ("raw_tag", "segment_index", "segment"),
    [
        ("XYZ:AKK", 0, "XYZ"),
        ("", 0, ""),
        ("SUB:FOO:SIN:FEM", 1, "FOO"),
        ("SUB:AKK:SIN:FEM:EXTRA", 4, "EXTRA"),
        ("ADV:MOD+XXX", 1, "MOD+XXX"),
        ("PRO:RIN:GEN:SIN:NEU:B/X", 5, "B/X"),
        ("NEG:AKK", 1, "AKK"),
    ],
)
def test_decode_error_points_at_offending_segment(
    resolver: TagResolver, raw_tag: str, segment_index: int, segment: str
) -> None:
    """Test that decode failures identify the tag and the offending segment."""
    with pytest.raises(DecodeError) as exc_info:
        resolver.resolve(raw_tag=raw_tag)

    assert exc_info.value.raw_tag == raw_tag
    assert exc_info.value.segment_index == segment_index
    assert exc_info.value.segment == segment


def test_missing_segment_is_reported_past_the_end(resolver: TagResolver) -> None:
    """Test that a truncated tag reports the position after its last segment."""
    with pytest.raises(DecodeError) as exc_info:
        resolver.resolve(raw_tag="SUB:AKK:SIN")

    assert exc_info.value.segment_index == 3
    assert exc_info.value.segment is None
    assert "SUB:AKK:SIN" in str(exc_info.value)


def test_known_problem_tag_fails_to_decode(resolver: TagResolver) -> None:
    """Test that a predicative adjective without comparison is rejected."""
    with pytest.raises(DecodeError):
        resolver.resolve(raw_tag="ADJ:PRD")


def test_strict_mode_does_not_change_single_tag_failures() -> None:
    """Test that resolve raises identically in strict and non-strict mode."""
    lenient = TagResolver(strict=False)
    strict = TagResolver(strict=True)

    with pytest.raises(DecodeError) as lenient_error:
        lenient.resolve(raw_tag="SUB:XXX")
    with pytest.raises(DecodeError) as strict_error:
        strict.resolve(raw_tag="SUB:XXX")

    assert str(lenient_error.value) == str(strict_error.value)


def test_strict_flag_is_settable(resolver: TagResolver) -> None:
    """Test that the strict flag can be changed independently of any call."""
    assert resolver.strict is False

    resolver.strict = True

    assert resolver.strict is True


def test_try_resolve_returns_failures_as_values(resolver: TagResolver) -> None:
    """Test that try_resolve wraps both outcomes in a ResolveResult."""
    success = resolver.try_resolve(raw_tag="NEG")
    failure = resolver.try_resolve(raw_tag="XYZ")

    assert isinstance(success, ResolveResult)
    assert success.ok
    assert success.unwrap() == resolver.resolve(raw_tag="NEG")
    assert not failure.ok
    assert failure.bundles == ()
    with pytest.raises(DecodeError):
        failure.unwrap()


def test_resolve_all_skips_failures_when_not_strict(
    resolver: TagResolver, log_messages: list[str]
) -> None:
    """Test that bulk decoding logs and skips undecodable tags in non-strict mode."""
    resolved = resolver.resolve_all(raw_tags=["NEG", "XYZ", "ADV:TMP", "NEG"])

    assert list(resolved) == ["NEG", "ADV:TMP"]
    assert any("XYZ" in message for message in log_messages)


def test_resolve_all_raises_first_failure_when_strict(strict_resolver: TagResolver) -> None:
    """Test that bulk decoding raises on the first undecodable tag in strict mode."""
    with pytest.raises(DecodeError) as exc_info:
        strict_resolver.resolve_all(raw_tags=["NEG", "SUB:FOO:SIN:FEM", "XYZ"])

    assert exc_info.value.raw_tag == "SUB:FOO:SIN:FEM"
