"""
Centralized constants for recipe matching.

This module contains the scoring weights, thresholds, result limits and
catalog endpoint paths used throughout the application. Centralizing these
values makes them easy to modify and maintain.

Categories:
- Match score weights
- Ranking thresholds
- Result limits
- Catalog API endpoints
"""

from typing import Dict

# ==============================================================================
# MATCH SCORE WEIGHTS
# ==============================================================================

# Base score (matched / recipe ingredients) carries an implicit weight of 1.0.
# The bonuses below are added on top of it and the total is capped at 1.0.
MATCH_SCORE_WEIGHTS: Dict[str, float] = {
    "utilization": 0.3,      # matched / available
    "waste_reduction": 0.2,  # mean wastage reduction of the recipe
    "dietary": 0.3,          # dietary tag overlap
}

MAX_MATCH_SCORE: float = 1.0


# ==============================================================================
# RANKING THRESHOLDS
# ==============================================================================

# Recommendations must score strictly above this to be returned
MIN_MATCH_SCORE: float = 0.2

# Urgency hint attached to expiring-ingredient recommendations
EXPIRING_URGENCY: str = "high"

PUBLISHED_STATUS: str = "PUBLISHED"


# ==============================================================================
# RESULT LIMITS
# ==============================================================================

DEFAULT_RECOMMENDATION_LIMIT: int = 10
MAX_RECOMMENDATION_LIMIT: int = 50

DEFAULT_EXPIRING_LIMIT: int = 5
MAX_EXPIRING_LIMIT: int = 20

DEFAULT_TRENDING_LIMIT: int = 10
MAX_TRENDING_LIMIT: int = 50

MAX_SUBSTITUTIONS_PER_INGREDIENT: int = 10


# ==============================================================================
# CATALOG API CONFIGURATION
# ==============================================================================

# API endpoint paths (relative to CATALOG_BASE_URL)
CATALOG_ENDPOINTS: Dict[str, str] = {
    "recipes": "recipes",
    "substitutions": "substitutions",
}
