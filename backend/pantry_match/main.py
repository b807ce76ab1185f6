"""
FastAPI application entry point and endpoint definitions.

This module initializes the FastAPI application and defines the API routes
for ingredient-based recipe recommendations.

Responsibilities:
- Initialize FastAPI application with CORS and error handling
- Build the catalog and recommendation engine from settings
- Define the recommendation, substitution and trending endpoints
- Translate engine errors into HTTP responses
"""

from fastapi import Depends, FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from functools import lru_cache
from pathlib import Path
from typing import Optional
import logging

from pantry_match.config import settings
from pantry_match.exceptions import (
    CatalogUnavailableError,
    InvalidLimitError,
    RecommendationTimeoutError,
)
from pantry_match.models.recommendation import (
    ApiResponse,
    ExpiringIngredientsRequest,
    RecommendByIngredientsRequest,
)
from pantry_match.models.substitution import SubstitutionSuggestion
from pantry_match.services.catalog import InMemoryRecipeCatalog, RecipeCatalog
from pantry_match.services.catalog_api_service import HttpRecipeCatalog
from pantry_match.services.recommendation_engine import RecommendationEngine
from pantry_match.utils.constants import (
    DEFAULT_TRENDING_LIMIT,
    MAX_TRENDING_LIMIT,
    MAX_SUBSTITUTIONS_PER_INGREDIENT,
)
from pantry_match.utils.helpers import normalize_ingredient_name

# Configure logging
logger = logging.getLogger(__name__)


def build_catalog() -> RecipeCatalog:
    """
    Create the catalog configured in settings.

    Uses the catalog API when CATALOG_BASE_URL is set, otherwise an
    in-memory catalog loaded from CATALOG_SEED_PATH (empty if the file does
    not exist).
    """
    if settings.CATALOG_BASE_URL:
        return HttpRecipeCatalog()

    seed_path = settings.CATALOG_SEED_PATH
    if seed_path and Path(seed_path).is_file():
        return InMemoryRecipeCatalog.from_json_file(seed_path)

    logger.warning(f"No catalog configured and seed file not found ({seed_path}); catalog is empty")
    return InMemoryRecipeCatalog()


@lru_cache(maxsize=1)
def get_recommendation_engine() -> RecommendationEngine:
    """Recommendation engine shared by all requests."""
    return RecommendationEngine(
        build_catalog(),
        timeout=settings.RECOMMENDATION_TIMEOUT,
        substitution_workers=settings.SUBSTITUTION_WORKERS,
    )


def _engine_error_to_http(exc: Exception, action: str) -> HTTPException:
    """Map engine exceptions onto HTTP errors."""
    if isinstance(exc, CatalogUnavailableError):
        logger.error(f"Catalog unavailable while {action}: {exc}")
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Recipe catalog is unavailable, please try again later"
        )
    if isinstance(exc, RecommendationTimeoutError):
        logger.error(f"Timed out while {action}: {exc}")
        return HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Recommendation request timed out"
        )
    if isinstance(exc, InvalidLimitError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc)
        )
    logger.error(f"Error {action}: {str(exc)}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed {action}"
    )


def create_app() -> FastAPI:
    """
    Initialize and configure the FastAPI application.

    Sets up:
    - CORS middleware for frontend communication
    - Exception handlers for consistent error responses
    - Application metadata

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title="Pantry Match Recipe Recommendation API",
        description="Rank recipes by the ingredients you have, with substitutions and expiring-ingredient prioritization",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Configure CORS to allow frontend communication
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handler for consistent error responses
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Handle all uncaught exceptions with consistent error format.

        Args:
            request: The incoming request object
            exc: The exception that was raised

        Returns:
            JSONResponse: Formatted error response
        """
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "Internal server error occurred",
            }
        )

    return app


# Initialize FastAPI application
app = create_app()


@app.get("/")
async def root():
    """
    Root endpoint for health check.

    Returns:
        dict: API status and version information
    """
    return {
        "message": "Pantry Match Recipe Recommendation API",
        "version": "1.0.0",
        "status": "running"
    }


@app.post("/recommendations/by-ingredients", response_model=ApiResponse)
def recommend_by_ingredients(
    request: RecommendByIngredientsRequest,
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> ApiResponse:
    """
    Rank recipes by how well they can be cooked with the given ingredients.

    Args:
        request: Ingredients, optional filters and limit

    Returns:
        ApiResponse: data is the ranked list of recommendations

    Raises:
        HTTPException: 503 if the catalog is down, 504 on timeout
    """
    logger.info(f"Recommendation request with {len(request.ingredients)} ingredient(s)")
    try:
        recommendations = engine.recommend(
            request.ingredients,
            request.to_filters(),
            limit=request.limit,
        )
    except Exception as e:
        raise _engine_error_to_http(e, "generating recommendations") from e

    return ApiResponse(
        message="Recommendations generated successfully",
        data=[rec.model_dump(mode="json") for rec in recommendations],
    )


@app.post("/recommendations/expiring", response_model=ApiResponse)
def recommend_for_expiring(
    request: ExpiringIngredientsRequest,
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> ApiResponse:
    """
    Rank recipes that use up ingredients close to spoilage.

    Args:
        request: Expiring ingredients and limit

    Returns:
        ApiResponse: data is the ranked list, each item with urgency="high"
    """
    logger.info(f"Expiring-ingredient request with {len(request.ingredients)} ingredient(s)")
    try:
        recommendations = engine.recommend_for_expiring(
            request.ingredients,
            limit=request.limit,
        )
    except Exception as e:
        raise _engine_error_to_http(e, "finding recipes for expiring ingredients") from e

    return ApiResponse(
        message="Expiring ingredient recipes retrieved successfully",
        data=[rec.model_dump(mode="json") for rec in recommendations],
    )


@app.get("/recommendations/substitutions", response_model=ApiResponse)
def get_ingredient_substitutions(
    ingredient: Optional[str] = Query(None, description="Ingredient to find substitutes for"),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> ApiResponse:
    """
    List declared substitutes for one ingredient, highest confidence first.

    Raises:
        HTTPException: 400 if the ingredient parameter is missing,
                       404 if the ingredient has no declared substitutes
    """
    if not ingredient or not ingredient.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Ingredient parameter is required"
        )

    try:
        edges = engine.substitutions_for(ingredient, limit=MAX_SUBSTITUTIONS_PER_INGREDIENT)
    except Exception as e:
        raise _engine_error_to_http(e, "retrieving substitutions") from e

    if not edges:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No substitutions found for '{ingredient.strip()}'"
        )

    original = normalize_ingredient_name(ingredient)
    return ApiResponse(
        message="Substitutions retrieved successfully",
        data=[
            SubstitutionSuggestion(
                original=original,
                substitute=edge.substitute,
                confidence=edge.confidence,
                notes=edge.notes,
            ).model_dump()
            for edge in edges
        ],
    )


@app.get("/recipes/trending", response_model=ApiResponse)
def get_trending_recipes(
    limit: int = Query(DEFAULT_TRENDING_LIMIT, ge=1, le=MAX_TRENDING_LIMIT),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> ApiResponse:
    """Published recipes ordered by likes, saves, then views."""
    try:
        recipes = engine.trending(limit=limit)
    except Exception as e:
        raise _engine_error_to_http(e, "retrieving trending recipes") from e

    return ApiResponse(
        message="Trending recipes retrieved successfully",
        data=[recipe.model_dump(mode="json") for recipe in recipes],
    )


@app.get("/stats")
async def get_engine_statistics(
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """Scoring weights, thresholds and limits in use."""
    return engine.get_statistics()
