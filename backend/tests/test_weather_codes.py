from app.schemas import GeoCandidate
from app.services.weather_client import (
    NIGHT_WEATHER_CODES,
    WEATHER_CODES,
    describe_weather_code,
    select_best_candidate,
)


def test_every_supported_code_has_description_and_icon() -> None:
    for code in WEATHER_CODES:
        for is_day in (True, False):
            description, icon = describe_weather_code(code, is_day)
            assert description
            assert len(icon) == 3
            assert icon[-1] in {"d", "n"}
            assert icon[:2].isdigit()


def test_night_variants_only_apply_to_clear_and_partly_cloudy_codes() -> None:
    assert set(NIGHT_WEATHER_CODES) == {0, 1, 2}
    assert describe_weather_code(0, True) == ("Clear sky", "01d")
    assert describe_weather_code(0, False) == ("Clear night", "01n")
    assert describe_weather_code(2, False) == ("Partly cloudy night", "02n")
    assert describe_weather_code(63, False) == ("Moderate rain", "10d")


def test_unknown_code_falls_back_to_day_or_night_default() -> None:
    assert describe_weather_code(42, True) == ("Unknown", "01d")
    assert describe_weather_code(42, False) == ("Unknown", "01n")
    assert describe_weather_code(None, False) == ("Unknown", "01n")


def test_exact_name_match_outranks_population() -> None:
    candidates = [
        GeoCandidate(name="Paris", latitude=48.8534, longitude=2.3488, population=2000000),
        GeoCandidate(name="Paris", latitude=33.6609, longitude=-95.5555, population=500),
    ]
    assert select_best_candidate(candidates, "Paris") is candidates[0]

    reversed_candidates = list(reversed(candidates))
    assert select_best_candidate(reversed_candidates, "paris") is reversed_candidates[0]


def test_exact_match_is_case_insensitive_and_beats_earlier_results() -> None:
    candidates = [
        GeoCandidate(name="Londonderry", latitude=55.0, longitude=-7.3, population=90000, feature_code="PPL"),
        GeoCandidate(name="London", latitude=51.5085, longitude=-0.1257, population=8961989, feature_code="PPLC"),
    ]
    assert select_best_candidate(candidates, "  LONDON ") is candidates[1]


def test_most_populous_populated_place_wins_without_exact_match() -> None:
    candidates = [
        GeoCandidate(name="Springfield", latitude=39.8, longitude=-89.6, population=100000, feature_code="PPLA"),
        GeoCandidate(name="Springfield", latitude=37.2, longitude=-93.3, population=500000, feature_code="PPLA"),
    ]
    assert select_best_candidate(candidates, "Springfield MO") is candidates[1]


def test_population_ties_keep_first_seen_candidate() -> None:
    candidates = [
        GeoCandidate(name="Alpha Town", latitude=1.0, longitude=1.0, population=1000, feature_code="PPL"),
        GeoCandidate(name="Alpha Village", latitude=2.0, longitude=2.0, population=1000, feature_code="PPL"),
    ]
    assert select_best_candidate(candidates, "Alpha") is candidates[0]


def test_non_populated_features_fall_back_to_first_result() -> None:
    candidates = [
        GeoCandidate(name="Mont Blanc", latitude=45.83, longitude=6.86, feature_code="MT"),
        GeoCandidate(name="Mont Blanc Tunnel", latitude=45.9, longitude=6.9, population=10, feature_code="TNL"),
    ]
    assert select_best_candidate(candidates, "blanc") is candidates[0]


def test_no_candidates_selects_nothing() -> None:
    assert select_best_candidate([], "Atlantis") is None
