"""
Recipe matcher.

Scores one recipe against the ingredients a user has on hand. The match
score is an additive combination of four parts:

- Base score: matched / recipe ingredients
- Utilization bonus (x0.3): matched / available ingredients
- Waste-reduction bonus (x0.2): mean wastage reduction of the recipe
- Dietary bonus (x0.3): share of requested dietary tags the recipe carries

The sum is capped at 1.0. Every ratio guards against a zero denominator, so
degenerate input (no ingredients on either side, no dietary filter) scores
zero for that part instead of failing.
"""

import logging
from typing import Dict, List, Optional

from pantry_match.models.recipe import Recipe, MatchFilters
from pantry_match.models.recommendation import Recommendation, ScoreBreakdown
from pantry_match.models.substitution import SubstitutionEdge
from pantry_match.services.substitution_resolver import SubstitutionResolver
from pantry_match.utils.constants import MATCH_SCORE_WEIGHTS, MAX_MATCH_SCORE
from pantry_match.utils.helpers import (
    normalize_ingredient_name,
    normalize_ingredient_list,
    safe_ratio,
)

# Configure logging
logger = logging.getLogger(__name__)


class RecipeMatcher:
    """
    Computes the composite match score of a recipe.

    Attributes:
        resolver: Substitution resolver for missing ingredients
        utilization_weight: Weight of the utilization bonus
        waste_reduction_weight: Weight of the waste-reduction bonus
        dietary_weight: Weight of the dietary bonus
    """

    def __init__(self, resolver: SubstitutionResolver):
        self.resolver = resolver

        self.utilization_weight = MATCH_SCORE_WEIGHTS["utilization"]
        self.waste_reduction_weight = MATCH_SCORE_WEIGHTS["waste_reduction"]
        self.dietary_weight = MATCH_SCORE_WEIGHTS["dietary"]

        logger.info(
            f"RecipeMatcher initialized with "
            f"utilization_weight={self.utilization_weight}, "
            f"waste_reduction_weight={self.waste_reduction_weight}, "
            f"dietary_weight={self.dietary_weight}"
        )

    def score(
        self,
        recipe: Recipe,
        available_ingredients: List[str],
        filters: Optional[MatchFilters] = None,
        deadline: Optional[float] = None,
        edge_cache: Optional[Dict[str, List[SubstitutionEdge]]] = None,
    ) -> Recommendation:
        """
        Score one recipe against the user's ingredients.

        Algorithm:
        1. Normalize recipe and available ingredient names
        2. Split recipe ingredients into matched and missing
        3. Resolve substitutions for the missing ones
        4. Compute the four sub-scores and cap their sum at 1.0
        5. Drop ingredients with at least one substitution from the
           reported missing list

        Args:
            recipe: Recipe to score
            available_ingredients: Ingredients the user has
            filters: Optional filter bundle (only dietary is scored)
            deadline: Optional time.monotonic() deadline for catalog lookups
            edge_cache: Optional substitution lookup cache shared across recipes

        Returns:
            Recommendation: Scored recommendation for this recipe

        Example:
            matcher.score(tomato_rice, ["tomato", "rice"])
            # match_score=1.0, missing_ingredients=["onion"]
        """
        filters = filters or MatchFilters()

        recipe_ingredients = [
            normalize_ingredient_name(name) for name in recipe.ingredient_names
        ]
        available = normalize_ingredient_list(available_ingredients)
        available_set = set(available)

        matched = [ing for ing in recipe_ingredients if ing in available_set]
        missing = [ing for ing in recipe_ingredients if ing not in available_set]

        substitutions = self.resolver.resolve(
            missing,
            available,
            deadline=deadline,
            edge_cache=edge_cache,
        )

        breakdown = ScoreBreakdown(
            base=safe_ratio(len(matched), len(recipe_ingredients)),
            utilization=safe_ratio(len(matched), len(available)) * self.utilization_weight,
            waste_reduction=self._waste_reduction_score(recipe) * self.waste_reduction_weight,
            dietary=self._dietary_score(recipe, filters) * self.dietary_weight,
        )
        match_score = min(breakdown.total, MAX_MATCH_SCORE)

        substituted = {sub.original for sub in substitutions}
        reported_missing = [ing for ing in missing if ing not in substituted]

        logger.debug(
            f"Scored {recipe.title}: base={breakdown.base:.3f}, "
            f"utilization={breakdown.utilization:.3f}, "
            f"waste={breakdown.waste_reduction:.3f}, "
            f"dietary={breakdown.dietary:.3f} -> {match_score:.3f}"
        )

        return Recommendation(
            recipe=recipe,
            match_score=match_score,
            matched_ingredients=matched,
            missing_ingredients=reported_missing,
            substitutions=substitutions,
            score_breakdown=breakdown,
        )

    @staticmethod
    def _waste_reduction_score(recipe: Recipe) -> float:
        """Mean wastage reduction across the recipe's ingredient uses (0 when none)."""
        total = sum(ing.wastage_reduction for ing in recipe.ingredients)
        return safe_ratio(total, len(recipe.ingredients))

    @staticmethod
    def _dietary_score(recipe: Recipe, filters: MatchFilters) -> float:
        """Share of requested dietary tags present on the recipe (0 when none requested)."""
        dietary = normalize_ingredient_list(filters.dietary)
        if not dietary:
            return 0.0

        recipe_tags = set(normalize_ingredient_list(recipe.tags))
        matches = [tag for tag in dietary if tag in recipe_tags]
        return safe_ratio(len(matches), len(dietary))
