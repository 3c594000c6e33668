# =============================================================================
# core/services/search_service.py - Medicine Search Aggregator
# =============================================================================
# Combines three sources into one result list:
# 1. The built-in catalog (core.catalog)
# 2. openFDA drug labels, six search expressions per query
# 3. RxNav drug concepts
#
# Sources are queried one after another. A failing call (network error,
# non-2xx, unparseable body) is logged and skipped; the search carries on
# with whatever the other calls returned. There is no retry or backoff.
#
# Results are deduplicated on the lowercased display name, first one wins,
# so catalog entries shadow API entries with the same name.
# =============================================================================

import logging
from typing import Any

import httpx

from app.config import settings
from core.catalog import search_local_catalog
from core.medicine_icons import get_medicine_icon, get_medicine_image
from core.models.medicine import MedicineResult, SearchResponse
from lib.utils import truncate

logger = logging.getLogger(__name__)

API_CATEGORY = "API Result"


def _first(values: Any) -> Any:
    """First element of an openFDA list field, or None."""
    if isinstance(values, list) and values:
        return values[0]
    return None


def fda_search_expressions(query: str) -> list[str]:
    """openFDA `search=` expressions tried for one query, in order."""
    return [
        f'openfda.brand_name:"{query}"',
        f'openfda.generic_name:"{query}"',
        f'active_ingredient:"{query}"',
        f"openfda.brand_name:{query}*",
        f"openfda.generic_name:{query}*",
        f"active_ingredient:{query}*",
    ]


def recent_queries(history: list[str], query: str, limit: int = 5) -> list[str]:
    """
    Put `query` at the front of the recent-searches list.

    `history` is newest first. Repeats and blanks are dropped and the
    list is capped at `limit`.

    Example:
        recent_queries(["advil", "tylenol", "advil"], "tylenol")  # ["tylenol", "advil"]
    """
    recent: list[str] = []
    for item in [query, *history]:
        if item and item not in recent:
            recent.append(item)
    return recent[:limit]


class MedicineSearchService:
    """
    Search the catalog, openFDA and RxNav for a medicine name.

    The HTTP client is injectable so tests can route calls through
    httpx.MockTransport.

    Example:
        service = MedicineSearchService()
        response = service.search("tylenol")
        print(response.total)
    """

    def __init__(self, http_client: httpx.Client | None = None):
        self._client = http_client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)

    def close(self) -> None:
        self._client.close()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def search(self, query: str, category: str = "all") -> SearchResponse:
        """
        Run one search across all sources.

        Args:
            query: Medicine name or fragment typed by the user
            category: Restrict the catalog part to one category ("all" = no restriction)

        Returns:
            SearchResponse with at most SEARCH_RESULT_LIMIT unique results
        """
        query = (query or "").strip()
        if not query:
            return SearchResponse(query=query, category=category)

        local = []
        for medicine in search_local_catalog(query, category):
            medicine["source"] = "local"
            medicine["imageUrl"] = get_medicine_image(medicine["name"], "local", medicine["category"])
            local.append(medicine)

        raw: list[dict[str, Any]] = []
        for expression in fda_search_expressions(query):
            raw.extend(self._fetch_fda(expression))
        raw.extend(self._fetch_rxnav(query))

        results = self._merge(local, raw)
        logger.info(
            f"Search '{query}' ({category}): {len(local)} local, {len(raw)} API, {len(results)} returned"
        )
        return SearchResponse(
            query=query,
            category=category,
            results=[MedicineResult(**item) for item in results],
            total=len(results),
        )

    # -------------------------------------------------------------------------
    # Sources
    # -------------------------------------------------------------------------

    def _get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any] | None:
        try:
            response = self._client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Request to {url} failed ({params}): {e}")
            return None

    def _fetch_fda(self, expression: str) -> list[dict[str, Any]]:
        url = f"{settings.OPENFDA_BASE_URL.rstrip('/')}/drug/label.json"
        data = self._get_json(url, {"search": expression, "limit": settings.FDA_RESULTS_PER_QUERY})
        if not data:
            return []

        labels = data.get("results") or []
        logger.debug(f"openFDA '{expression}': {len(labels)} labels")
        for label in labels:
            label["_source"] = "fda"
        return labels

    def _fetch_rxnav(self, query: str) -> list[dict[str, Any]]:
        """Fetch RxNav concepts and reshape them like openFDA labels."""
        url = f"{settings.RXNAV_BASE_URL.rstrip('/')}/REST/drugs.json"
        data = self._get_json(url, {"name": query})
        if not data:
            return []

        groups = (data.get("drugGroup") or {}).get("conceptGroup") or []
        concepts = []
        for group in groups:
            for concept in group.get("conceptProperties") or []:
                name = concept.get("name", "")
                concepts.append({
                    "openfda": {
                        "brand_name": [name],
                        "generic_name": [name],
                        "rxcui": [concept.get("rxcui")],
                    },
                    "description": [f"RxNav drug: {name}"],
                    "_source": "rxnav",
                    "_rxcui": concept.get("rxcui"),
                    "_tty": group.get("tty"),
                })
        logger.debug(f"RxNav '{query}': {len(concepts)} concepts")
        return concepts

    # -------------------------------------------------------------------------
    # Merging / formatting
    # -------------------------------------------------------------------------

    @staticmethod
    def _label_name(label: dict[str, Any]) -> str:
        openfda = label.get("openfda") or {}
        return _first(openfda.get("brand_name")) or _first(openfda.get("generic_name")) or "Unknown"

    def _merge(
        self,
        local: list[dict[str, Any]],
        labels: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        seen: set[str] = set()
        merged: list[dict[str, Any]] = []

        for medicine in local:
            key = medicine["name"].lower()
            if key not in seen:
                seen.add(key)
                merged.append(medicine)

        for label in labels:
            key = self._label_name(label).lower()
            if key not in seen:
                seen.add(key)
                merged.append(label)

        limited = merged[: settings.SEARCH_RESULT_LIMIT]
        return [
            item if item.get("source") == "local" else self.format_label(item, index)
            for index, item in enumerate(limited)
        ]

    def format_label(self, label: dict[str, Any], index: int) -> dict[str, Any]:
        """Turn a raw openFDA label (or reshaped RxNav concept) into a result dict."""
        openfda = label.get("openfda") or {}
        name = self._label_name(label)
        source = label.get("_source", "fda")
        rxcui = _first(openfda.get("rxcui")) or label.get("_rxcui")

        return {
            "id": label.get("_rxcui") or f"{source}_{index}",
            "name": name,
            "genericName": _first(openfda.get("generic_name")) or _first(openfda.get("brand_name")) or "Unknown",
            "manufacturer": _first(openfda.get("manufacturer_name")) or "Unknown",
            "dosage": truncate(_first(label.get("dosage_and_administration")), 100),
            "indications": truncate(_first(label.get("indications_and_usage")), 200),
            "warnings": truncate(_first(label.get("warnings")), 200),
            "adverseReactions": truncate(_first(label.get("adverse_reactions")), 200),
            "description": truncate(_first(label.get("description")), 300, default="No description available"),
            "activeIngredient": _first(label.get("active_ingredient")) or "Not specified",
            "purpose": _first(label.get("purpose")) or "Not specified",
            "routeOfAdministration": _first(openfda.get("route")) or "Not specified",
            "substanceCategory": _first(openfda.get("substance_name")) or "Not specified",
            "rxcui": str(rxcui) if rxcui else None,
            "source": source,
            "tty": label.get("_tty"),
            "category": API_CATEGORY,
            "icon": get_medicine_icon(name),
            "imageUrl": get_medicine_image(name, source, API_CATEGORY),
        }
