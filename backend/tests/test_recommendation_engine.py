import threading
import time

import pytest

from pantry_match.exceptions import (
    CatalogUnavailableError,
    InvalidLimitError,
    RecommendationTimeoutError,
)
from pantry_match.models.recipe import MatchFilters, RecipeDifficulty
from pantry_match.models.substitution import SubstitutionEdge
from pantry_match.services.catalog import InMemoryRecipeCatalog
from pantry_match.services.recommendation_engine import RecommendationEngine

from conftest import make_recipe


def titles(results):
    return [getattr(r, "recipe", r).id for r in results]


# ----------------------------------------------------------------------------
# recommend
# ----------------------------------------------------------------------------

def test_recommend_ranks_by_match_score(engine):
    results = engine.recommend(["tomato", "rice"])

    assert titles(results) == ["tomato-rice", "pasta-pomodoro"]
    assert results[0].match_score == 1.0
    assert results[1].match_score == pytest.approx(0.25 + 0.15)


def test_recommend_excludes_unpublished_recipes(engine):
    results = engine.recommend(["tomato", "cucumber"])

    assert "draft-salad" not in titles(results)


def test_recommend_applies_hard_filters(engine):
    quick = engine.recommend(["tomato", "rice"], MatchFilters(max_cooking_time=25))
    assert titles(quick) == ["pasta-pomodoro"]

    inclusive = engine.recommend(["tomato", "rice"], MatchFilters(max_cooking_time=30))
    assert "tomato-rice" in titles(inclusive)

    hard = engine.recommend(["beef", "carrot"], MatchFilters(difficulty=RecipeDifficulty.HARD))
    assert titles(hard) == ["beef-stew"]


def test_recommend_drops_scores_at_or_below_threshold(tomato_rice):
    engine = RecommendationEngine(InMemoryRecipeCatalog([tomato_rice]))

    # waste bonus alone is exactly 0.2
    assert engine.recommend(["bread"]) == []


def test_recommend_never_returns_low_scores(engine):
    for available in (["tomato"], ["onion"], ["basil", "garlic"], ["stock"]):
        for rec in engine.recommend(available):
            assert rec.match_score > 0.2


def test_recommend_dietary_bonus_changes_ranking():
    catalog = InMemoryRecipeCatalog([
        make_recipe("plain-toast", ["bread", "butter", "jam", "salt"]),
        make_recipe("vegan-toast", ["bread", "avocado", "lemon", "salt"], tags=["vegan"]),
    ])
    engine = RecommendationEngine(catalog)

    without = engine.recommend(["bread"])
    with_dietary = engine.recommend(["bread"], MatchFilters(dietary=["Vegan"]))

    assert titles(without) == ["plain-toast", "vegan-toast"]
    assert titles(with_dietary) == ["vegan-toast", "plain-toast"]


def test_recommend_keeps_catalog_order_on_ties():
    catalog = InMemoryRecipeCatalog([
        make_recipe("first", ["egg", "milk"]),
        make_recipe("second", ["egg", "milk"]),
        make_recipe("third", ["egg", "flour"]),
    ])
    engine = RecommendationEngine(catalog)

    assert titles(engine.recommend(["egg", "milk"])) == ["first", "second", "third"]


def test_recommend_truncates_to_limit(engine):
    assert len(engine.recommend(["tomato", "rice"], limit=1)) == 1


@pytest.mark.parametrize("limit", [0, -1])
def test_recommend_rejects_non_positive_limit(engine, limit):
    with pytest.raises(InvalidLimitError):
        engine.recommend(["tomato"], limit=limit)


def test_recommend_clamps_large_limit(engine):
    assert len(engine.recommend(["tomato", "rice"], limit=500)) == 2


def test_recommend_reports_substitutions(engine):
    results = engine.recommend(["tomato", "quinoa", "shallot"])
    top = results[0]

    assert top.recipe.id == "tomato-rice"
    assert [s.substitute for s in top.substitutions] == ["quinoa", "shallot"]
    assert top.missing_ingredients == []


def test_recommend_is_idempotent(engine):
    first = engine.recommend(["tomato", "rice", "garlic"], MatchFilters(dietary=["vegetarian"]))
    second = engine.recommend(["tomato", "rice", "garlic"], MatchFilters(dietary=["vegetarian"]))

    assert [r.model_dump() for r in first] == [r.model_dump() for r in second]


def test_recommend_looks_up_each_substitution_once(mocker, catalog):
    spy = mocker.spy(catalog, "find_substitutions")
    engine = RecommendationEngine(catalog)

    engine.recommend(["garlic"])

    looked_up = [call.args[0] for call in spy.call_args_list]
    assert len(looked_up) == len(set(looked_up))


def test_recommend_propagates_catalog_failure(mocker):
    catalog = mocker.Mock()
    catalog.find_published_recipes.side_effect = CatalogUnavailableError("down")
    engine = RecommendationEngine(catalog)

    with pytest.raises(CatalogUnavailableError):
        engine.recommend(["tomato"])


def test_recommend_fails_on_substitution_lookup_failure(mocker, tomato_rice):
    catalog = mocker.Mock()
    catalog.find_published_recipes.return_value = [tomato_rice]
    catalog.find_substitutions.side_effect = CatalogUnavailableError("down")
    engine = RecommendationEngine(catalog)

    with pytest.raises(CatalogUnavailableError):
        engine.recommend(["tomato"])


def test_recommend_times_out_as_a_whole(mocker):
    def slow_lookup(name):
        time.sleep(0.1)
        return [SubstitutionEdge(substitute="quinoa", confidence=0.9)]

    catalog = mocker.Mock()
    catalog.find_published_recipes.return_value = [
        make_recipe("one", ["rice"]),
        make_recipe("two", ["barley"]),
        make_recipe("three", ["farro"]),
    ]
    catalog.find_substitutions.side_effect = slow_lookup
    engine = RecommendationEngine(catalog, timeout=0.05)

    with pytest.raises(RecommendationTimeoutError):
        engine.recommend(["quinoa"])


def test_recommend_times_out_on_single_candidate(mocker):
    release = threading.Event()

    def slow_lookup(name):
        release.wait(2)
        return [SubstitutionEdge(substitute="quinoa", confidence=0.9)]

    catalog = mocker.Mock()
    catalog.find_published_recipes.return_value = [make_recipe("one", ["rice", "tomato"])]
    catalog.find_substitutions.side_effect = slow_lookup
    engine = RecommendationEngine(catalog, timeout=0.05)

    started = time.monotonic()
    try:
        with pytest.raises(RecommendationTimeoutError):
            engine.recommend(["quinoa", "tomato"])
    finally:
        release.set()
    assert time.monotonic() - started < 1


def test_recommend_fails_when_scoring_overruns_deadline(mocker, tomato_rice):
    catalog = InMemoryRecipeCatalog([tomato_rice])
    engine = RecommendationEngine(catalog, timeout=0.05)
    original_score = engine.matcher.score

    def slow_score(*args, **kwargs):
        time.sleep(0.1)
        return original_score(*args, **kwargs)

    mocker.patch.object(engine.matcher, "score", side_effect=slow_score)

    with pytest.raises(RecommendationTimeoutError):
        engine.recommend(["tomato", "rice", "onion"])


# ----------------------------------------------------------------------------
# recommend_for_expiring
# ----------------------------------------------------------------------------

def test_expiring_scores_against_expiring_list(engine):
    results = engine.recommend_for_expiring(["Tomato", "onion"])

    assert titles(results) == ["tomato-rice", "pasta-pomodoro", "beef-stew"]
    assert [r.match_score for r in results] == [1.0, 0.5, 0.5]
    assert all(r.urgency == "high" for r in results)
    assert all(r.substitutions == [] and r.missing_ingredients == [] for r in results)
    assert results[0].matched_ingredients == ["tomato", "onion"]


def test_expiring_results_use_an_expiring_ingredient(engine):
    expiring = {"garlic", "potato"}
    results = engine.recommend_for_expiring(list(expiring))

    assert titles(results) == ["pasta-pomodoro", "beef-stew"]
    for rec in results:
        names = {i.name for i in rec.recipe.ingredients}
        assert names & expiring


def test_expiring_has_no_score_floor(engine):
    results = engine.recommend_for_expiring(["basil", "a", "b", "c", "d", "e", "f", "g", "h", "i"])

    assert titles(results) == ["pasta-pomodoro"]
    assert results[0].match_score == pytest.approx(0.1)


def test_expiring_respects_limit(engine):
    assert len(engine.recommend_for_expiring(["tomato", "onion"], limit=2)) == 2
    assert len(engine.recommend_for_expiring(["tomato", "onion"], limit=100)) == 3

    with pytest.raises(InvalidLimitError):
        engine.recommend_for_expiring(["tomato"], limit=0)


def test_expiring_with_no_ingredients(engine):
    assert engine.recommend_for_expiring([]) == []


# ----------------------------------------------------------------------------
# trending
# ----------------------------------------------------------------------------

def test_trending_orders_by_likes_saves_views(engine):
    results = engine.trending()

    assert titles(results) == ["beef-stew", "pasta-pomodoro", "tomato-rice"]


def test_trending_ordering_property():
    catalog = InMemoryRecipeCatalog([
        make_recipe("a", ["x"], likes=5, saves=1, views=10),
        make_recipe("b", ["x"], likes=5, saves=1, views=30),
        make_recipe("c", ["x"], likes=9, saves=0, views=0),
        make_recipe("d", ["x"], likes=5, saves=3, views=0),
        make_recipe("e", ["x"], likes=0, saves=0, views=999),
    ])
    results = RecommendationEngine(catalog).trending(limit=10)

    assert titles(results) == ["c", "d", "b", "a", "e"]
    for a, b in zip(results, results[1:]):
        assert (a.likes, a.saves, a.views) >= (b.likes, b.saves, b.views)


def test_trending_limit(engine):
    assert titles(engine.trending(limit=1)) == ["beef-stew"]

    with pytest.raises(InvalidLimitError):
        engine.trending(limit=-5)


# ----------------------------------------------------------------------------
# substitutions_for
# ----------------------------------------------------------------------------

def test_substitutions_for(engine):
    edges = engine.substitutions_for("onion")

    assert [(e.substitute, e.confidence) for e in edges] == [("shallot", 0.8), ("scallion", 0.7)]


def test_get_statistics(engine):
    stats = engine.get_statistics()

    assert stats["min_match_score"] == 0.2
    assert stats["score_weights"] == {
        "base": 1.0,
        "utilization": 0.3,
        "waste_reduction": 0.2,
        "dietary": 0.3,
    }
