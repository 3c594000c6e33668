# =============================================================================
# tests/test_catalog.py - Built-in Catalog and Icon Lookup Tests
# =============================================================================
# This module contains tests for:
# - Local catalog search (name, generic name, category, category filter)
# - Medicine icon / placeholder image selection
# - Admin category icons and colors
# =============================================================================

from core.catalog import ADMIN_CATEGORIES, MEDICINE_CATEGORIES, search_local_catalog
from core.medicine_icons import (
    DEFAULT_ICON,
    get_category_color,
    get_category_icon,
    get_medicine_icon,
    get_medicine_image,
)


# =============================================================================
# Catalog Search Tests
# =============================================================================

class TestSearchLocalCatalog:
    """Test search_local_catalog."""

    def test_catalog_has_seven_categories_of_three(self):
        assert len(MEDICINE_CATEGORIES) == 7
        assert all(len(medicines) == 3 for medicines in MEDICINE_CATEGORIES.values())

    def test_matches_brand_name_case_insensitively(self):
        results = search_local_catalog("TYLENOL")

        assert [m["name"] for m in results] == ["Tylenol"]

    def test_matches_generic_name(self):
        results = search_local_catalog("ibuprofen")

        assert [m["name"] for m in results] == ["Advil"]

    def test_matches_category(self):
        results = search_local_catalog("allergy")

        assert {m["name"] for m in results} == {"Zyrtec", "Claritin", "Allegra"}

    def test_category_filter_restricts_search(self):
        # "in" appears in Insulin (Diabetes) and Aspirin (Pain Relief)
        results = search_local_catalog("in", category="Diabetes")

        assert results
        assert all(m["category"] == "Diabetes" for m in results)

    def test_blank_query_returns_nothing(self):
        assert search_local_catalog("") == []
        assert search_local_catalog("   ") == []

    def test_results_are_copies(self):
        results = search_local_catalog("tylenol")
        results[0]["source"] = "local"

        assert "source" not in MEDICINE_CATEGORIES["Pain Relief"][0]

    def test_admin_categories(self):
        assert len(ADMIN_CATEGORIES) == 11
        assert ADMIN_CATEGORIES[-1] == "Other"


# =============================================================================
# Icon Tests
# =============================================================================

class TestMedicineIcons:
    """Test icon and image lookup."""

    def test_exact_name(self):
        assert get_medicine_icon("Tylenol") == "🟡"

    def test_partial_name(self):
        assert get_medicine_icon("Metformin HCl ER") == "📊"

    def test_category_keyword_fallback(self):
        assert get_medicine_icon("Unknownix", category="Mental Health") == "🧠"

    def test_default_icon(self):
        assert get_medicine_icon("Unknownix") == DEFAULT_ICON

    def test_image_uses_category_color(self):
        url = get_medicine_image("Tylenol", "local", "Pain Relief")

        assert "/ff6b6b/" in url
        assert url.endswith("text=Tylenol")

    def test_image_rxnav_color_and_truncated_name(self):
        url = get_medicine_image("Acetaminophen", "rxnav", "API Result")

        assert "/007bff/" in url
        # First eight characters, then "..."
        assert url.endswith("text=Acetamin...")

    def test_image_matches_name_when_category_unknown(self):
        url = get_medicine_image("aspirin 81", "fda", "API Result")

        assert "/45b7d1/" in url

    def test_admin_category_icon_and_color(self):
        assert get_category_icon("Respiratory") == "🫁"
        assert get_category_color("Respiratory") == "#3b82f6"
        assert get_category_icon("Homeopathy") == DEFAULT_ICON
        assert get_category_color("Homeopathy") == "#6b7280"
