"""
Pydantic models for recipe data.

This module defines the catalog-facing recipe models and the filter bundle
callers supply with a recommendation request. All models use Pydantic for
automatic validation, serialization, and type safety.
"""

from enum import Enum
from pydantic import BaseModel, Field, computed_field, field_validator
from typing import List, Optional


class RecipeStatus(str, Enum):
    """Publication state of a recipe. Only PUBLISHED recipes are recommended."""
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class RecipeDifficulty(str, Enum):
    """Recipe difficulty levels."""
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class RecipeIngredient(BaseModel):
    """
    A single ingredient use inside a recipe.

    Attributes:
        name: Ingredient name as declared by the recipe
        quantity: Optional amount
        unit: Optional unit of measurement
        wastage_reduction: Estimated food waste prevented by using this
                           ingredient in the recipe (0 = no special value)
    """
    name: str = Field(..., min_length=1, description="Ingredient name")
    quantity: Optional[float] = Field(None, ge=0, description="Amount used")
    unit: Optional[str] = Field(None, description="Unit of measurement")
    wastage_reduction: float = Field(
        0.0,
        ge=0.0,
        description="Waste-reduction estimate (non-negative)"
    )

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        """Blank names fail the min_length check once stripped."""
        return v.strip() if isinstance(v, str) else v

    @field_validator('wastage_reduction', mode='before')
    @classmethod
    def default_wastage_reduction(cls, v):
        """Treat a missing wastage estimate as zero."""
        return 0.0 if v is None else v


class RecipeStats(BaseModel):
    """Engagement counters, reported alongside a recipe."""
    views: int = 0
    likes: int = 0
    saves: int = 0
    completions: int = 0


class Recipe(BaseModel):
    """
    Recipe as read from the catalog.

    The matching engine never writes recipes; it only reads the fields
    below.

    Attributes:
        id: Unique recipe identifier
        title: Recipe title
        status: Publication state
        cooking_time: Cooking time in minutes
        difficulty: Difficulty level
        ingredients: Ingredient uses
        tags: Tag names (dietary, cuisine, ...)
        views: View counter
        likes: Like counter
        saves: Save counter
        completions: "I cooked this" counter
    """
    id: str = Field(..., description="Unique recipe identifier")
    title: str = Field(..., description="Recipe title")
    status: RecipeStatus = Field(RecipeStatus.PUBLISHED, description="Publication state")
    cooking_time: Optional[int] = Field(None, ge=0, description="Cooking time in minutes")
    difficulty: Optional[RecipeDifficulty] = Field(None, description="Difficulty level")
    ingredients: List[RecipeIngredient] = Field(
        default_factory=list,
        description="Ingredient uses"
    )
    tags: List[str] = Field(default_factory=list, description="Tag names")
    views: int = Field(0, ge=0)
    likes: int = Field(0, ge=0)
    saves: int = Field(0, ge=0)
    completions: int = Field(0, ge=0)

    @computed_field
    @property
    def stats(self) -> RecipeStats:
        """Engagement counters grouped together; serialized with the recipe."""
        return RecipeStats(
            views=self.views,
            likes=self.likes,
            saves=self.saves,
            completions=self.completions,
        )

    @property
    def ingredient_names(self) -> List[str]:
        """Declared ingredient names, in recipe order."""
        return [ingredient.name for ingredient in self.ingredients]

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "r-101",
                "title": "Tomato Rice",
                "status": "PUBLISHED",
                "cooking_time": 25,
                "difficulty": "EASY",
                "ingredients": [
                    {"name": "tomato", "quantity": 2, "unit": "pcs", "wastage_reduction": 2},
                    {"name": "rice", "quantity": 1, "unit": "cup", "wastage_reduction": 0},
                    {"name": "onion", "quantity": 1, "unit": "pcs", "wastage_reduction": 1}
                ],
                "tags": ["vegan", "indian"],
                "views": 120,
                "likes": 14,
                "saves": 6
            }
        }
    }


class MatchFilters(BaseModel):
    """
    Optional constraints supplied with a recommendation request.

    max_cooking_time and difficulty are hard filters applied when fetching
    candidates. dietary is a soft bonus applied during scoring. cuisine is
    accepted and passed through but not scored.

    Attributes:
        max_cooking_time: Inclusive upper bound on cooking time (minutes)
        difficulty: Exact difficulty match
        dietary: Dietary preference tags
        cuisine: Cuisine tags (informational)
    """
    max_cooking_time: Optional[int] = Field(
        None,
        ge=1,
        description="Maximum cooking time in minutes (inclusive)"
    )
    difficulty: Optional[RecipeDifficulty] = Field(None, description="Required difficulty")
    dietary: List[str] = Field(default_factory=list, description="Dietary preference tags")
    cuisine: List[str] = Field(default_factory=list, description="Cuisine tags (not scored)")

    @field_validator('dietary', 'cuisine', mode='before')
    @classmethod
    def default_tag_list(cls, v):
        """Accept None for tag lists."""
        return [] if v is None else v
