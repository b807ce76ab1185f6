"""
Pydantic models for recommendations.

This module defines the ranked recommendation record returned by the
engine, the request bodies of the recommendation endpoints, and the
response envelope shared by all endpoints.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, List, Optional

from pantry_match.models.recipe import Recipe, RecipeDifficulty, MatchFilters
from pantry_match.models.substitution import SubstitutionMatch
from pantry_match.utils.validators import validate_ingredient_list
from pantry_match.utils.constants import (
    DEFAULT_RECOMMENDATION_LIMIT,
    MAX_RECOMMENDATION_LIMIT,
    DEFAULT_EXPIRING_LIMIT,
    MAX_EXPIRING_LIMIT,
)


class ScoreBreakdown(BaseModel):
    """
    The four additive parts of a match score, before capping.

    Attributes:
        base: matched / recipe ingredients
        utilization: (matched / available) * 0.3
        waste_reduction: mean wastage reduction * 0.2
        dietary: (matching dietary tags / requested tags) * 0.3
    """
    base: float = 0.0
    utilization: float = 0.0
    waste_reduction: float = 0.0
    dietary: float = 0.0

    @property
    def total(self) -> float:
        """Uncapped sum of all parts."""
        return self.base + self.utilization + self.waste_reduction + self.dietary


class Recommendation(BaseModel):
    """
    A recipe ranked against the caller's ingredients.

    Recomputed per request and never persisted.

    Attributes:
        recipe: The recommended recipe
        match_score: Composite score (0-1)
        matched_ingredients: Recipe ingredients the caller has
        missing_ingredients: Recipe ingredients the caller lacks and cannot substitute
        substitutions: Substitutions the caller can make
        urgency: Caller-facing hint, set for expiring-ingredient recommendations
        score_breakdown: Sub-scores behind match_score
    """
    recipe: Recipe = Field(..., description="Recommended recipe")
    match_score: float = Field(..., ge=0.0, le=1.0, description="Match score (0-1)")
    matched_ingredients: List[str] = Field(default_factory=list)
    missing_ingredients: List[str] = Field(default_factory=list)
    substitutions: List[SubstitutionMatch] = Field(default_factory=list)
    urgency: Optional[str] = Field(None, description="Urgency hint")
    score_breakdown: Optional[ScoreBreakdown] = Field(None, description="Sub-scores")


class RecommendByIngredientsRequest(BaseModel):
    """
    Request body for POST /recommendations/by-ingredients.

    Attributes:
        ingredients: Ingredients the user has on hand
        max_cooking_time: Optional cooking time bound (minutes); sent as
                          maxCookingTime, max_cooking_time also accepted
        difficulty: Optional difficulty
        dietary: Dietary preference tags
        cuisine: Cuisine tags (informational)
        limit: Number of recommendations (1-50)
    """
    ingredients: List[str] = Field(..., description="Available ingredients")
    max_cooking_time: Optional[int] = Field(
        None,
        ge=1,
        alias="maxCookingTime",
        description="Max cooking time (minutes)"
    )
    difficulty: Optional[RecipeDifficulty] = Field(None, description="Difficulty")
    dietary: Optional[List[str]] = Field(None, description="Dietary preferences")
    cuisine: Optional[List[str]] = Field(None, description="Cuisine tags")
    limit: int = Field(
        DEFAULT_RECOMMENDATION_LIMIT,
        ge=1,
        le=MAX_RECOMMENDATION_LIMIT,
        description="Maximum number of recommendations"
    )

    @field_validator('ingredients')
    @classmethod
    def validate_ingredients(cls, v: List[str]) -> List[str]:
        return validate_ingredient_list(v)

    def to_filters(self) -> MatchFilters:
        """Extract the filter bundle from the request."""
        return MatchFilters(
            max_cooking_time=self.max_cooking_time,
            difficulty=self.difficulty,
            dietary=self.dietary,
            cuisine=self.cuisine,
        )

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "ingredients": ["tomato", "rice", "garlic"],
                "maxCookingTime": 30,
                "difficulty": "EASY",
                "dietary": ["vegan"],
                "limit": 10
            }
        }
    }


class ExpiringIngredientsRequest(BaseModel):
    """
    Request body for POST /recommendations/expiring.

    Attributes:
        ingredients: Ingredients close to spoilage
        limit: Number of recommendations (1-20)
    """
    ingredients: List[str] = Field(..., description="Expiring ingredients")
    limit: int = Field(
        DEFAULT_EXPIRING_LIMIT,
        ge=1,
        le=MAX_EXPIRING_LIMIT,
        description="Maximum number of recommendations"
    )

    @field_validator('ingredients')
    @classmethod
    def validate_ingredients(cls, v: List[str]) -> List[str]:
        return validate_ingredient_list(v)


class ApiResponse(BaseModel):
    """Response envelope shared by all endpoints."""
    success: bool = True
    message: str = ""
    data: Any = None
