"""
Recipe catalog API client.

Implements the RecipeCatalog interface on top of the catalog service's REST
API:

- GET {base}/recipes        - published recipes, with optional hard filters
                              (max_cooking_time, difficulty, ingredients)
- GET {base}/substitutions  - declared substitutes for one ingredient

Transient failures (timeouts, connection errors, 5xx, 429) are retried with
exponential backoff. Once retries are exhausted, or on any other 4xx, the
failure is raised as CatalogUnavailableError; a failed fetch is never
reported as an empty result.
"""

import time
import requests
import logging
from typing import Dict, List, Optional, Union

from pantry_match.config import settings
from pantry_match.exceptions import CatalogUnavailableError
from pantry_match.models.recipe import Recipe, RecipeStatus
from pantry_match.models.substitution import SubstitutionEdge
from pantry_match.services.catalog import CatalogQuery, RecipeCatalog
from pantry_match.utils.constants import CATALOG_ENDPOINTS
from pantry_match.utils.helpers import normalize_ingredient_name, normalize_ingredient_list

# Configure logging
logger = logging.getLogger(__name__)


class HttpRecipeCatalog(RecipeCatalog):
    """
    Catalog client for the recipe catalog REST API.

    Attributes:
        base_url: Base URL for the catalog API
        timeout: Request timeout in seconds
        max_retries: Maximum number of retry attempts for failed requests
        retry_delay: Initial backoff delay in seconds (doubled per attempt)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[int] = None,
        max_retries: Optional[int] = None,
        retry_delay: float = 1.0,
    ):
        """
        Initialize the catalog client, falling back to settings for any
        argument left as None.
        """
        self.base_url = (base_url or settings.CATALOG_BASE_URL or "").rstrip("/")
        if not self.base_url:
            raise ValueError("HttpRecipeCatalog requires a base URL (set CATALOG_BASE_URL)")

        self.api_key = api_key if api_key is not None else settings.CATALOG_API_KEY
        self.timeout = timeout or settings.API_TIMEOUT
        self.max_retries = settings.CATALOG_MAX_RETRIES if max_retries is None else max_retries
        self.retry_delay = retry_delay

        logger.info(
            f"Catalog API client initialized with base URL: {self.base_url} "
            f"(timeout: {self.timeout}s, max_retries: {self.max_retries})"
        )
        if not self.api_key:
            logger.warning("CATALOG_API_KEY is not configured; requests are sent unauthenticated")

    def _make_request(
        self,
        endpoint: str,
        params: Optional[Dict] = None,
        retry_count: int = 0
    ) -> Union[Dict, List]:
        """
        Make HTTP GET request to the catalog API with retry logic.

        Args:
            endpoint: API endpoint path (e.g., "recipes")
            params: Query parameters as dictionary
            retry_count: Current retry attempt number (for internal use)

        Returns:
            Parsed JSON response

        Raises:
            CatalogUnavailableError: When the request fails and cannot be retried
        """
        url = f"{self.base_url}/{endpoint}"

        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key

        try:
            logger.debug(f"Making catalog request to {url} with params: {params}")

            response = requests.get(
                url,
                params=params,
                timeout=self.timeout,
                headers=headers,
            )

            # Check for HTTP errors
            response.raise_for_status()

            return response.json()

        except requests.exceptions.Timeout as e:
            logger.warning(f"Request timeout for {url}")
            return self._handle_retry(endpoint, params, retry_count, "timeout", e)

        except requests.exceptions.ConnectionError as e:
            logger.warning(f"Connection error for {url}")
            return self._handle_retry(endpoint, params, retry_count, "connection_error", e)

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"HTTP error for {url}: Status {status_code if status_code else 'unknown'}")

            # Don't retry on 4xx errors (client errors), except rate limiting
            if status_code and 400 <= status_code < 500 and status_code != 429:
                raise CatalogUnavailableError(
                    f"Catalog request to {endpoint} failed with status {status_code}",
                    operation=endpoint,
                ) from e
            return self._handle_retry(endpoint, params, retry_count, "http_error", e)

        except requests.exceptions.JSONDecodeError as e:
            # Subclass of RequestException; a malformed body is not retried
            logger.error(f"Failed to parse JSON response from {url}: {str(e)}")
            raise CatalogUnavailableError(
                f"Catalog returned an invalid response for {endpoint}",
                operation=endpoint,
            ) from e

        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed for {url}: {str(e)}")
            return self._handle_retry(endpoint, params, retry_count, "request_exception", e)

        except ValueError as e:
            logger.error(f"Failed to parse JSON response from {url}: {str(e)}")
            raise CatalogUnavailableError(
                f"Catalog returned an invalid response for {endpoint}",
                operation=endpoint,
            ) from e

    def _handle_retry(
        self,
        endpoint: str,
        params: Optional[Dict],
        retry_count: int,
        error_type: str,
        error: Exception,
    ) -> Union[Dict, List]:
        """
        Handle retry logic for failed requests.

        Implements exponential backoff strategy for retries.

        Raises:
            CatalogUnavailableError: If max retries exceeded
        """
        if retry_count < self.max_retries:
            wait_time = self.retry_delay * (2 ** retry_count)  # Exponential backoff
            logger.info(
                f"Retrying request (attempt {retry_count + 1}/{self.max_retries}) "
                f"after {wait_time}s due to {error_type}"
            )
            time.sleep(wait_time)
            return self._make_request(endpoint, params, retry_count + 1)

        logger.error(f"Max retries ({self.max_retries}) exceeded for {endpoint}")
        raise CatalogUnavailableError(
            f"Catalog request to {endpoint} failed after {retry_count + 1} attempt(s): {error_type}",
            operation=endpoint,
        ) from error

    @staticmethod
    def _extract_list(response: Union[Dict, List], endpoint: str) -> List[Dict]:
        """Unwrap a list payload from a bare list or a {"data": [...]} envelope."""
        if isinstance(response, list):
            return response
        if isinstance(response, dict):
            for key in ("data", "results", "items"):
                val = response.get(key)
                if isinstance(val, list):
                    return val
        raise CatalogUnavailableError(
            f"Unexpected response shape from {endpoint}",
            operation=endpoint,
        )

    def find_published_recipes(self, query: Optional[CatalogQuery] = None) -> List[Recipe]:
        query = query or CatalogQuery()

        params: Dict[str, Union[str, int]] = {"status": RecipeStatus.PUBLISHED.value}
        if query.max_cooking_time is not None:
            params["max_cooking_time"] = query.max_cooking_time
        if query.difficulty is not None:
            params["difficulty"] = query.difficulty.value
        if query.must_include_any_ingredient is not None:
            params["ingredients"] = ",".join(
                normalize_ingredient_list(query.must_include_any_ingredient)
            )

        endpoint = CATALOG_ENDPOINTS["recipes"]
        rows = self._extract_list(self._make_request(endpoint, params), endpoint)

        try:
            recipes = [Recipe(**row) for row in rows]
        except (TypeError, ValueError) as e:
            raise CatalogUnavailableError(
                f"Catalog returned malformed recipe data: {e}",
                operation=endpoint,
            ) from e

        # The API is trusted for filtering, but a non-published recipe must never leak through
        recipes = [r for r in recipes if r.status == RecipeStatus.PUBLISHED]

        logger.info(f"Catalog API returned {len(recipes)} published recipe(s)")
        return recipes

    def find_substitutions(self, original_name: str) -> List[SubstitutionEdge]:
        endpoint = CATALOG_ENDPOINTS["substitutions"]
        name = normalize_ingredient_name(original_name)
        rows = self._extract_list(
            self._make_request(endpoint, {"ingredient": name}),
            endpoint,
        )

        try:
            edges = [
                SubstitutionEdge(
                    substitute=row["substitute"],
                    confidence=row.get("confidence", 1.0),
                    notes=row.get("notes"),
                )
                for row in rows
            ]
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise CatalogUnavailableError(
                f"Catalog returned malformed substitution data for '{name}': {e}",
                operation=endpoint,
            ) from e

        logger.debug(f"Catalog API returned {len(edges)} substitution(s) for '{name}'")
        return edges
