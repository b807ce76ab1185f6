"""
Common utility helper functions.

This module provides the ingredient name normalization used for every
equality comparison in the matching pipeline, plus a few small helpers
for working with ingredient and tag lists.
"""

import logging
from typing import Iterable, List, Optional

# Configure logging
logger = logging.getLogger(__name__)


def normalize_ingredient_name(ingredient: Optional[str]) -> str:
    """
    Standardize ingredient names for consistent matching.

    Performs exactly two steps:
    1. Remove leading/trailing whitespace
    2. Convert to lowercase

    There is deliberately no stemming, plural handling or synonym
    expansion. "Tomatoes" and "tomato" are different ingredients; the only
    way to bridge them is a declared substitution.

    Args:
        ingredient: Raw ingredient string

    Returns:
        str: Normalized ingredient name ("" for None)

    Example:
        >>> normalize_ingredient_name("  Cherry Tomato ")
        "cherry tomato"
    """
    if not ingredient:
        return ""

    return ingredient.strip().lower()


def normalize_ingredient_list(ingredients: Optional[Iterable[str]]) -> List[str]:
    """
    Normalize a list of ingredient names.

    Blank entries are dropped and duplicates (after normalization) are
    removed, keeping the first occurrence so the result order follows the
    caller's order.

    Args:
        ingredients: Raw ingredient strings (may be None)

    Returns:
        List[str]: Unique normalized names
    """
    if not ingredients:
        return []

    raw = list(ingredients)
    seen = set()
    normalized: List[str] = []
    for ingredient in raw:
        name = normalize_ingredient_name(ingredient)
        if name and name not in seen:
            seen.add(name)
            normalized.append(name)

    if len(normalized) != len(raw):
        logger.debug(f"Normalized {len(normalized)} unique ingredient(s) from input")

    return normalized


def safe_ratio(numerator: float, denominator: float) -> float:
    """
    Divide, returning 0.0 when the denominator is zero.

    Example:
        >>> safe_ratio(2, 0)
        0.0
    """
    if not denominator:
        return 0.0
    return numerator / denominator
