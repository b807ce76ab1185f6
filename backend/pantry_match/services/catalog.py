"""
Recipe catalog interface and in-memory implementation.

The matching engine reads recipes and substitution edges through the narrow
RecipeCatalog interface below and never talks to storage directly. The
catalog is injected into the engine at construction time, so tests (and
local runs without a catalog service) can use InMemoryRecipeCatalog while
production points HttpRecipeCatalog at the catalog API.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pantry_match.exceptions import CatalogUnavailableError
from pantry_match.models.recipe import Recipe, RecipeDifficulty, RecipeStatus
from pantry_match.models.substitution import SubstitutionEdge
from pantry_match.utils.helpers import normalize_ingredient_name, normalize_ingredient_list

# Configure logging
logger = logging.getLogger(__name__)


@dataclass
class CatalogQuery:
    """
    Hard filters for fetching published recipes.

    Attributes:
        max_cooking_time: Inclusive cooking time bound (minutes)
        difficulty: Exact difficulty match
        must_include_any_ingredient: Normalized names; a recipe qualifies if
                                     it uses at least one of them
    """
    max_cooking_time: Optional[int] = None
    difficulty: Optional[RecipeDifficulty] = None
    must_include_any_ingredient: Optional[List[str]] = field(default=None)

    def matches(self, recipe: Recipe) -> bool:
        """Check a recipe against every filter (status is checked separately)."""
        if self.max_cooking_time is not None:
            if recipe.cooking_time is None or recipe.cooking_time > self.max_cooking_time:
                return False

        if self.difficulty is not None and recipe.difficulty != self.difficulty:
            return False

        if self.must_include_any_ingredient is not None:
            wanted = set(self.must_include_any_ingredient)
            names = {normalize_ingredient_name(name) for name in recipe.ingredient_names}
            if not wanted & names:
                return False

        return True


class RecipeCatalog(ABC):
    """Abstract read-only access to recipes and substitution edges."""

    @abstractmethod
    def find_published_recipes(self, query: Optional[CatalogQuery] = None) -> List[Recipe]:
        """
        Fetch PUBLISHED recipes passing the query's hard filters.

        Args:
            query: Hard filters (None = all published recipes)

        Returns:
            List[Recipe]: Matching recipes in catalog order

        Raises:
            CatalogUnavailableError: If the catalog cannot be read
        """
        pass

    @abstractmethod
    def find_substitutions(self, original_name: str) -> List[SubstitutionEdge]:
        """
        Fetch every declared substitute for one ingredient.

        Args:
            original_name: Normalized ingredient name

        Returns:
            List[SubstitutionEdge]: Declared edges (possibly empty)

        Raises:
            CatalogUnavailableError: If the catalog cannot be read
        """
        pass


class InMemoryRecipeCatalog(RecipeCatalog):
    """
    Catalog backed by in-process lists.

    Recipes keep insertion order, which is the "catalog order" used as the
    ranking tie-break. Substitution edges are keyed by normalized original
    name; self-substitutions are rejected on insert.

    Attributes:
        recipes: Stored recipes
        substitutions: Edges keyed by normalized original name
    """

    def __init__(
        self,
        recipes: Optional[Iterable[Recipe]] = None,
        substitutions: Optional[Dict[str, List[SubstitutionEdge]]] = None,
    ):
        self.recipes: List[Recipe] = list(recipes or [])
        self.substitutions: Dict[str, List[SubstitutionEdge]] = {}

        for original, edges in (substitutions or {}).items():
            for edge in edges:
                self.add_substitution(original, edge.substitute, edge.confidence, edge.notes)

        logger.info(
            f"InMemoryRecipeCatalog initialized with {len(self.recipes)} recipe(s), "
            f"{sum(len(e) for e in self.substitutions.values())} substitution edge(s)"
        )

    def add_recipe(self, recipe: Recipe) -> None:
        """Append a recipe to the catalog."""
        self.recipes.append(recipe)

    def add_substitution(
        self,
        original: str,
        substitute: str,
        confidence: float,
        notes: Optional[str] = None,
    ) -> None:
        """
        Declare a directed substitution edge.

        Raises:
            ValueError: If original and substitute normalize to the same name
        """
        key = normalize_ingredient_name(original)
        if key == normalize_ingredient_name(substitute):
            raise ValueError(f"Ingredient '{original}' cannot substitute for itself")

        self.substitutions.setdefault(key, []).append(
            SubstitutionEdge(substitute=substitute, confidence=confidence, notes=notes)
        )

    def find_published_recipes(self, query: Optional[CatalogQuery] = None) -> List[Recipe]:
        query = query or CatalogQuery()
        if query.must_include_any_ingredient is not None:
            query = CatalogQuery(
                max_cooking_time=query.max_cooking_time,
                difficulty=query.difficulty,
                must_include_any_ingredient=normalize_ingredient_list(
                    query.must_include_any_ingredient
                ),
            )

        results = [
            recipe for recipe in self.recipes
            if recipe.status == RecipeStatus.PUBLISHED and query.matches(recipe)
        ]
        logger.debug(f"In-memory catalog returned {len(results)} published recipe(s)")
        return results

    def find_substitutions(self, original_name: str) -> List[SubstitutionEdge]:
        return list(self.substitutions.get(normalize_ingredient_name(original_name), []))

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InMemoryRecipeCatalog":
        """
        Load a catalog from a JSON seed file.

        Expected shape:
            {
              "recipes": [{...Recipe fields...}],
              "substitutions": [
                {"original": "rice", "substitute": "quinoa", "confidence": 0.9}
              ]
            }

        Raises:
            CatalogUnavailableError: If the file cannot be read or parsed
        """
        path = Path(path)
        logger.info(f"Loading catalog seed data from {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                payload = json.load(f)

            # pydantic ValidationError is a ValueError
            catalog = cls(Recipe(**r) for r in payload.get("recipes", []))
            for row in payload.get("substitutions", []):
                catalog.add_substitution(
                    row["original"],
                    row["substitute"],
                    row.get("confidence", 1.0),
                    row.get("notes"),
                )
        except (OSError, ValueError, KeyError) as e:
            raise CatalogUnavailableError(
                f"Failed to load catalog seed file {path}: {e}",
                operation="load_seed",
            ) from e

        logger.info(
            f"Loaded {len(catalog.recipes)} recipe(s) and "
            f"{len(payload.get('substitutions', []))} substitution(s) from seed file"
        )
        return catalog
