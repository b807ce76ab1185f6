"""
Substitution resolver.

For each ingredient a recipe needs but the user does not have, looks up the
declared substitution edges in the catalog and keeps the ones whose
substitute the user does have.

Lookups for different missing ingredients are independent, so they are
fanned out on a thread pool. A deadline (time.monotonic() value) bounds the
whole fan-out; when it passes, outstanding lookups are cancelled and the
call fails with RecommendationTimeoutError rather than returning a partial
result.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed, TimeoutError as FuturesTimeoutError
from typing import Dict, Iterable, List, Optional

from pantry_match.exceptions import RecommendationTimeoutError
from pantry_match.models.substitution import SubstitutionEdge, SubstitutionMatch
from pantry_match.services.catalog import RecipeCatalog
from pantry_match.utils.helpers import normalize_ingredient_name, normalize_ingredient_list

# Configure logging
logger = logging.getLogger(__name__)


def remaining_time(deadline: Optional[float]) -> Optional[float]:
    """
    Seconds left until a deadline.

    Raises:
        RecommendationTimeoutError: If the deadline has already passed
    """
    if deadline is None:
        return None
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise RecommendationTimeoutError("Recommendation deadline exceeded")
    return remaining


class SubstitutionResolver:
    """
    Finds available substitutes for missing ingredients.

    Attributes:
        catalog: Catalog used for substitution edge lookups
        max_workers: Thread pool size for concurrent lookups
    """

    def __init__(self, catalog: RecipeCatalog, max_workers: int = 4):
        self.catalog = catalog
        self.max_workers = max(1, max_workers)

        logger.info(f"SubstitutionResolver initialized with max_workers={self.max_workers}")

    def resolve(
        self,
        missing_ingredients: Iterable[str],
        available_ingredients: Iterable[str],
        deadline: Optional[float] = None,
        edge_cache: Optional[Dict[str, List[SubstitutionEdge]]] = None,
    ) -> List[SubstitutionMatch]:
        """
        Find substitutions the user can make for missing ingredients.

        A missing ingredient can yield zero, one, or several records (one
        per declared substitute the user has). Records are ordered by
        missing-ingredient order, then by the catalog's edge order; callers
        that want the best substitute first must sort by confidence.

        Args:
            missing_ingredients: Ingredient names the recipe needs
            available_ingredients: Ingredient names the user has
            deadline: Optional time.monotonic() value bounding the lookups
            edge_cache: Optional dict reused across calls to avoid repeat lookups

        Returns:
            List[SubstitutionMatch]: Available substitutions

        Raises:
            CatalogUnavailableError: If a lookup fails
            RecommendationTimeoutError: If the deadline passes

        Example:
            resolver.resolve(["rice"], ["quinoa", "tomato"])
            # [SubstitutionMatch(original="rice", substitute="quinoa", confidence=0.9)]
        """
        missing = normalize_ingredient_list(missing_ingredients)
        available = set(normalize_ingredient_list(available_ingredients))

        if not missing or not available:
            return []

        edges_by_original = self._fetch_edges(missing, deadline, edge_cache)

        matches: List[SubstitutionMatch] = []
        for original in missing:
            for edge in edges_by_original.get(original, []):
                substitute = normalize_ingredient_name(edge.substitute)
                if substitute == original:
                    logger.warning(f"Ignoring self-substitution edge for '{original}'")
                    continue
                if substitute in available:
                    matches.append(
                        SubstitutionMatch(
                            original=original,
                            substitute=edge.substitute,
                            confidence=edge.confidence,
                        )
                    )

        logger.debug(
            f"Resolved {len(matches)} substitution(s) for {len(missing)} missing ingredient(s)"
        )
        return matches

    def _fetch_edges(
        self,
        names: List[str],
        deadline: Optional[float],
        edge_cache: Optional[Dict[str, List[SubstitutionEdge]]],
    ) -> Dict[str, List[SubstitutionEdge]]:
        """Look up edges for every name not already cached."""
        cache = edge_cache if edge_cache is not None else {}
        pending = [name for name in names if name not in cache]

        if pending:
            cache.update(self._fetch_concurrently(pending, deadline))

        return {name: cache[name] for name in names}

    def _fetch_concurrently(
        self,
        names: List[str],
        deadline: Optional[float],
    ) -> Dict[str, List[SubstitutionEdge]]:
        """Fan lookups out on a thread pool and collect them before the deadline."""
        results: Dict[str, List[SubstitutionEdge]] = {}

        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(names)))
        try:
            future_to_name = {
                executor.submit(self.catalog.find_substitutions, name): name
                for name in names
            }
            try:
                for future in as_completed(future_to_name, timeout=remaining_time(deadline)):
                    results[future_to_name[future]] = future.result()
            except FuturesTimeoutError as e:
                raise RecommendationTimeoutError(
                    f"Substitution lookups did not finish before the deadline "
                    f"({len(results)}/{len(names)} completed)"
                ) from e
        finally:
            # Drop queued lookups on failure; running ones finish in the background
            executor.shutdown(wait=False, cancel_futures=True)

        return results

    def substitutes_for(self, ingredient: str, limit: int = 10) -> List[SubstitutionEdge]:
        """
        List every declared substitute for one ingredient, best first.

        Args:
            ingredient: Ingredient name
            limit: Maximum number of substitutes

        Returns:
            List[SubstitutionEdge]: Edges sorted by confidence (descending)
        """
        original = normalize_ingredient_name(ingredient)
        if not original:
            return []

        edges = [
            edge for edge in self.catalog.find_substitutions(original)
            if normalize_ingredient_name(edge.substitute) != original
        ]
        edges.sort(key=lambda e: e.confidence, reverse=True)
        return edges[:limit]
