"""
Input validation utilities.

This module provides validation functions for caller input at the engine
and API boundaries.
"""

import re
import logging
from typing import List

from pantry_match.exceptions import InvalidLimitError

# Configure logging
logger = logging.getLogger(__name__)


def validate_limit(limit: int, maximum: int) -> int:
    """
    Validate a result-count limit.

    Zero and negative limits are rejected rather than coerced, so a caller
    never silently gets an empty result. Limits above the maximum are
    clamped to bound the work done per request.

    Args:
        limit: Requested number of results
        maximum: Largest number of results this strategy returns

    Returns:
        int: The limit to apply

    Raises:
        InvalidLimitError: If limit is not a positive integer

    Example:
        >>> validate_limit(100, 50)
        50
    """
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidLimitError(f"Limit must be an integer, got {type(limit).__name__}")

    if limit <= 0:
        raise InvalidLimitError(f"Limit must be a positive integer, got {limit}")

    if limit > maximum:
        logger.debug(f"Clamping limit {limit} to {maximum}")
        return maximum

    return limit


def validate_ingredient_list(ingredients: List[str]) -> List[str]:
    """
    Validate and trim an ingredient list from a request.

    Ensures ingredient list:
    - Is not empty
    - Each ingredient is a non-empty string
    - No ingredient is excessively long
    - Total number is reasonable

    Args:
        ingredients: List of ingredient strings

    Returns:
        List[str]: Ingredients with surrounding whitespace removed

    Raises:
        ValueError: If validation fails with specific error message
    """
    # Check for empty list
    if not ingredients:
        raise ValueError("Ingredient list cannot be empty")

    # Check maximum number of ingredients
    if len(ingredients) > 100:
        raise ValueError(
            "Ingredient list cannot exceed 100 items "
            "(got {})".format(len(ingredients))
        )

    cleaned = []
    for i, ingredient in enumerate(ingredients):
        if not isinstance(ingredient, str):
            raise ValueError(
                f"Ingredient at index {i} must be a string, "
                f"got {type(ingredient).__name__}"
            )

        if not ingredient.strip():
            raise ValueError(f"Ingredient at index {i} cannot be empty")

        if len(ingredient) > 200:
            raise ValueError(
                f"Ingredient at index {i} exceeds maximum length of 200 characters"
            )

        if re.search(r'[<>]', ingredient):
            raise ValueError(
                f"Ingredient at index {i} contains invalid characters"
            )

        cleaned.append(ingredient.strip())

    logger.debug(f"Ingredient list validated: {len(cleaned)} ingredients")
    return cleaned
