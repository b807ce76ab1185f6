"""
Recipe recommendation engine.

This module ranks catalog recipes against the ingredients a user has on
hand. It exposes three strategies:

- recommend: general ranking by composite match score (see RecipeMatcher),
  with hard filters on cooking time and difficulty and a 20% score floor
- recommend_for_expiring: ranks recipes by how many of the user's expiring
  ingredients they use up, with no score floor
- trending: engagement ordering (likes, then saves, then views)

All strategies are read-only and stateless: each call is a pure function of
its inputs and the current catalog snapshot. Sorting is stable, so recipes
with equal scores keep catalog order.
"""

import logging
import time
from typing import Dict, List, Optional

from pantry_match.exceptions import InvalidLimitError
from pantry_match.models.recipe import Recipe, MatchFilters
from pantry_match.models.recommendation import Recommendation
from pantry_match.models.substitution import SubstitutionEdge
from pantry_match.services.catalog import CatalogQuery, RecipeCatalog
from pantry_match.services.recipe_matcher import RecipeMatcher
from pantry_match.services.substitution_resolver import SubstitutionResolver, remaining_time
from pantry_match.utils.constants import (
    MIN_MATCH_SCORE,
    EXPIRING_URGENCY,
    DEFAULT_RECOMMENDATION_LIMIT,
    MAX_RECOMMENDATION_LIMIT,
    DEFAULT_EXPIRING_LIMIT,
    MAX_EXPIRING_LIMIT,
    DEFAULT_TRENDING_LIMIT,
    MAX_TRENDING_LIMIT,
    MAX_SUBSTITUTIONS_PER_INGREDIENT,
    MATCH_SCORE_WEIGHTS,
)
from pantry_match.utils.helpers import normalize_ingredient_name, normalize_ingredient_list, safe_ratio
from pantry_match.utils.validators import validate_limit

# Configure logging
logger = logging.getLogger(__name__)


class RecommendationEngine:
    """
    Engine for finding and ranking recipes by available ingredients.

    Uses the injected catalog for candidate recipes and substitution edges
    and RecipeMatcher for scoring.

    Attributes:
        catalog: Recipe catalog
        resolver: Substitution resolver
        matcher: Recipe matcher
        min_match_score: Score floor for general recommendations (exclusive)
        timeout: Per-call deadline in seconds (None = no deadline)
    """

    def __init__(
        self,
        catalog: RecipeCatalog,
        matcher: Optional[RecipeMatcher] = None,
        timeout: Optional[float] = None,
        substitution_workers: int = 4,
    ):
        """
        Initialize recommendation engine with required services.

        Args:
            catalog: Recipe catalog
            matcher: Recipe matcher (built from the catalog if omitted)
            timeout: Per-call deadline in seconds
            substitution_workers: Thread pool size for substitution lookups
        """
        self.catalog = catalog
        self.resolver = matcher.resolver if matcher else SubstitutionResolver(
            catalog, max_workers=substitution_workers
        )
        self.matcher = matcher or RecipeMatcher(self.resolver)
        self.min_match_score = MIN_MATCH_SCORE
        self.timeout = timeout

        logger.info(
            f"RecommendationEngine initialized with "
            f"min_match_score={self.min_match_score}, timeout={self.timeout}"
        )

    def _deadline(self) -> Optional[float]:
        """Absolute deadline for one call, or None."""
        if self.timeout is None:
            return None
        return time.monotonic() + self.timeout

    def recommend(
        self,
        available_ingredients: List[str],
        filters: Optional[MatchFilters] = None,
        limit: int = DEFAULT_RECOMMENDATION_LIMIT,
    ) -> List[Recommendation]:
        """
        Rank published recipes by how well they match the user's ingredients.

        This is the main entry point for recommendations.

        Algorithm:
        1. Fetch published candidates passing the hard filters
           (cooking time <= max_cooking_time, difficulty ==)
        2. Score every candidate with RecipeMatcher
        3. Drop recommendations scoring 0.2 or less
        4. Sort by match score (descending, stable)
        5. Return the top N

        Args:
            available_ingredients: Ingredients the user has
            filters: Optional filter bundle
            limit: Maximum number of recommendations (clamped to 50)

        Returns:
            List[Recommendation]: Ranked recommendations (best first).
                                  Empty if nothing cleared the score floor.

        Raises:
            InvalidLimitError: If limit is zero or negative
            CatalogUnavailableError: If the catalog cannot be read
            RecommendationTimeoutError: If the call exceeds its deadline

        Example:
            engine = RecommendationEngine(catalog)
            recommendations = engine.recommend(
                ["tomato", "rice"],
                MatchFilters(max_cooking_time=30),
                limit=5
            )
        """
        limit = validate_limit(limit, MAX_RECOMMENDATION_LIMIT)
        filters = filters or MatchFilters()
        available = normalize_ingredient_list(available_ingredients)
        deadline = self._deadline()

        logger.info(
            f"Recommending recipes for {len(available)} ingredient(s), "
            f"max_cooking_time={filters.max_cooking_time}, "
            f"difficulty={filters.difficulty}, dietary={filters.dietary}, limit={limit}"
        )

        # Step 1: Fetch candidates
        candidates = self.catalog.find_published_recipes(
            CatalogQuery(
                max_cooking_time=filters.max_cooking_time,
                difficulty=filters.difficulty,
            )
        )

        if not candidates:
            logger.warning("No candidate recipes found")
            return []

        logger.info(f"Found {len(candidates)} candidate recipes")

        # Step 2: Score every candidate; substitution lookups are shared across recipes
        edge_cache: Dict[str, List[SubstitutionEdge]] = {}
        scored = []
        for recipe in candidates:
            remaining_time(deadline)
            scored.append(
                self.matcher.score(
                    recipe,
                    available,
                    filters,
                    deadline=deadline,
                    edge_cache=edge_cache,
                )
            )
        remaining_time(deadline)

        # Step 3: Score floor
        passing = [rec for rec in scored if rec.match_score > self.min_match_score]

        logger.info(
            f"{len(passing)} out of {len(scored)} recipes scored above "
            f"{self.min_match_score}"
        )

        # Step 4 & 5: Rank and truncate
        ranked = self.rank_recommendations(passing)[:limit]

        logger.info(
            f"Top recommendation: {ranked[0].recipe.title} "
            f"(score={ranked[0].match_score:.2f})"
            if ranked else "No recommendations"
        )

        return ranked

    def recommend_for_expiring(
        self,
        expiring_ingredients: List[str],
        limit: int = DEFAULT_EXPIRING_LIMIT,
    ) -> List[Recommendation]:
        """
        Rank recipes that use up ingredients close to spoilage.

        Score = expiring ingredients the recipe uses / expiring ingredients
        given. A recipe that uses every item of a short expiring list scores
        1.0 however many other ingredients it needs. No substitutions, no
        bonuses and no score floor: using even one expiring ingredient is
        worth surfacing.

        Args:
            expiring_ingredients: Ingredients about to expire
            limit: Maximum number of recommendations (clamped to 20)

        Returns:
            List[Recommendation]: Ranked recommendations, each with urgency="high"

        Raises:
            InvalidLimitError: If limit is zero or negative
            CatalogUnavailableError: If the catalog cannot be read
            RecommendationTimeoutError: If the call exceeds its deadline
        """
        limit = validate_limit(limit, MAX_EXPIRING_LIMIT)
        expiring = normalize_ingredient_list(expiring_ingredients)
        deadline = self._deadline()

        logger.info(
            f"Recommending recipes for {len(expiring)} expiring ingredient(s), limit={limit}"
        )

        if not expiring:
            logger.warning("No expiring ingredients given")
            return []

        candidates = self.catalog.find_published_recipes(
            CatalogQuery(must_include_any_ingredient=expiring)
        )
        remaining_time(deadline)

        expiring_set = set(expiring)
        recommendations = []
        for recipe in candidates:
            used = [
                normalize_ingredient_name(name) for name in recipe.ingredient_names
                if normalize_ingredient_name(name) in expiring_set
            ]
            if not used:
                # Catalog pre-filter should have excluded it
                logger.debug(f"Skipping {recipe.title}: uses no expiring ingredient")
                continue

            used_unique = normalize_ingredient_list(used)
            recommendations.append(
                Recommendation(
                    recipe=recipe,
                    match_score=min(safe_ratio(len(used_unique), len(expiring)), 1.0),
                    matched_ingredients=used,
                    missing_ingredients=[],
                    substitutions=[],
                    urgency=EXPIRING_URGENCY,
                )
            )
        remaining_time(deadline)

        ranked = self.rank_recommendations(recommendations)[:limit]

        logger.info(
            f"Returning {len(ranked)} expiring-ingredient recommendation(s) "
            f"out of {len(recommendations)} candidates"
        )
        return ranked

    def trending(self, limit: int = DEFAULT_TRENDING_LIMIT) -> List[Recipe]:
        """
        Published recipes ordered by engagement.

        Ordering is likes (desc), then saves (desc), then views (desc); each
        level is only consulted when the previous one ties. Remaining ties
        keep catalog order.

        Args:
            limit: Maximum number of recipes (clamped to 50)

        Returns:
            List[Recipe]: Trending recipes

        Raises:
            InvalidLimitError: If limit is zero or negative
            CatalogUnavailableError: If the catalog cannot be read
        """
        limit = validate_limit(limit, MAX_TRENDING_LIMIT)

        recipes = self.catalog.find_published_recipes(CatalogQuery())
        ranked = sorted(recipes, key=lambda r: (-r.likes, -r.saves, -r.views))[:limit]

        logger.info(f"Returning {len(ranked)} trending recipe(s)")
        return ranked

    def substitutions_for(
        self,
        ingredient: str,
        limit: int = MAX_SUBSTITUTIONS_PER_INGREDIENT,
    ) -> List[SubstitutionEdge]:
        """
        Declared substitutes for one ingredient, highest confidence first.

        Raises:
            InvalidLimitError: If limit is zero or negative
            CatalogUnavailableError: If the catalog cannot be read
        """
        limit = validate_limit(limit, MAX_SUBSTITUTIONS_PER_INGREDIENT)
        return self.resolver.substitutes_for(ingredient, limit=limit)

    def rank_recommendations(
        self,
        recommendations: List[Recommendation]
    ) -> List[Recommendation]:
        """
        Sort recommendations by match score (descending).

        Python's sort is stable, so equal scores keep their input (catalog)
        order.
        """
        return sorted(recommendations, key=lambda rec: rec.match_score, reverse=True)

    def get_statistics(self) -> Dict:
        """
        Get statistics about the recommendation engine.

        Returns:
            Dict: Scoring weights and thresholds
        """
        return {
            "min_match_score": self.min_match_score,
            "timeout": self.timeout,
            "score_weights": {
                "base": 1.0,
                **MATCH_SCORE_WEIGHTS,
            },
            "limits": {
                "recommend": MAX_RECOMMENDATION_LIMIT,
                "expiring": MAX_EXPIRING_LIMIT,
                "trending": MAX_TRENDING_LIMIT,
            },
        }
