# =============================================================================
# core/catalog.py - Built-in Medicine Catalog
# =============================================================================
# A small, static set of common medicines grouped by category. The search
# aggregator checks it before calling openFDA/RxNav so that everyday names
# ("tylenol", "zyrtec") always resolve, even when the public APIs are down.
#
# ADMIN_CATEGORIES is the category list offered by the admin medicine form;
# it is independent of the built-in grouping.
# =============================================================================

from typing import Any


def _medicine(
    id: str,
    name: str,
    generic_name: str,
    manufacturer: str,
    dosage: str,
    description: str,
    icon: str,
    category: str,
) -> dict[str, Any]:
    return {
        "id": id,
        "name": name,
        "genericName": generic_name,
        "manufacturer": manufacturer,
        "dosage": dosage,
        "description": description,
        "icon": icon,
        "category": category,
    }


MEDICINE_CATEGORIES: dict[str, list[dict[str, Any]]] = {
    "Pain Relief": [
        _medicine("pain_1", "Tylenol", "Acetaminophen", "Johnson & Johnson", "500mg",
                  "Pain reliever and fever reducer", "🟡", "Pain Relief"),
        _medicine("pain_2", "Advil", "Ibuprofen", "Pfizer", "200mg",
                  "Anti-inflammatory pain reliever", "🔴", "Pain Relief"),
        _medicine("pain_3", "Aspirin", "Acetylsalicylic acid", "Bayer", "325mg",
                  "Pain reliever and blood thinner", "⚪", "Pain Relief"),
    ],
    "Cardiovascular": [
        _medicine("cardio_1", "Lisinopril", "Lisinopril", "Merck", "10mg",
                  "ACE inhibitor for high blood pressure", "❤️", "Cardiovascular"),
        _medicine("cardio_2", "Lipitor", "Atorvastatin", "Pfizer", "20mg",
                  "Cholesterol-lowering medication", "💊", "Cardiovascular"),
        _medicine("cardio_3", "Metoprolol", "Metoprolol", "AstraZeneca", "50mg",
                  "Beta-blocker for heart conditions", "💓", "Cardiovascular"),
    ],
    "Diabetes": [
        _medicine("diabetes_1", "Metformin", "Metformin HCl", "Bristol Myers Squibb", "500mg",
                  "Type 2 diabetes medication", "📊", "Diabetes"),
        _medicine("diabetes_2", "Glipizide", "Glipizide", "Pfizer", "5mg",
                  "Sulfonylurea diabetes medication", "📊", "Diabetes"),
        _medicine("diabetes_3", "Insulin", "Human Insulin", "Eli Lilly", "100 units/mL",
                  "Hormone for diabetes management", "💉", "Diabetes"),
    ],
    "Antibiotics": [
        _medicine("antibiotic_1", "Amoxicillin", "Amoxicillin", "GSK", "250mg",
                  "Penicillin antibiotic", "💊", "Antibiotics"),
        _medicine("antibiotic_2", "Azithromycin", "Azithromycin", "Pfizer", "250mg",
                  "Macrolide antibiotic", "💊", "Antibiotics"),
        _medicine("antibiotic_3", "Doxycycline", "Doxycycline", "Teva", "100mg",
                  "Tetracycline antibiotic", "💊", "Antibiotics"),
    ],
    "Digestive": [
        _medicine("digestive_1", "Prilosec", "Omeprazole", "AstraZeneca", "20mg",
                  "Proton pump inhibitor", "🟢", "Digestive"),
        _medicine("digestive_2", "Pepcid", "Famotidine", "Johnson & Johnson", "20mg",
                  "H2 receptor antagonist", "🟢", "Digestive"),
        _medicine("digestive_3", "Zantac", "Ranitidine", "GSK", "150mg",
                  "Acid reducer", "🟢", "Digestive"),
    ],
    "Allergy": [
        _medicine("allergy_1", "Zyrtec", "Cetirizine", "UCB", "10mg",
                  "Antihistamine for allergies", "🌸", "Allergy"),
        _medicine("allergy_2", "Claritin", "Loratadine", "Bayer", "10mg",
                  "Non-drowsy antihistamine", "🌸", "Allergy"),
        _medicine("allergy_3", "Allegra", "Fexofenadine", "Sanofi", "180mg",
                  "24-hour allergy relief", "🌸", "Allergy"),
    ],
    "Mental Health": [
        _medicine("mental_1", "Zoloft", "Sertraline", "Pfizer", "50mg",
                  "SSRI antidepressant", "🧠", "Mental Health"),
        _medicine("mental_2", "Prozac", "Fluoxetine", "Eli Lilly", "20mg",
                  "SSRI antidepressant", "🧠", "Mental Health"),
        _medicine("mental_3", "Xanax", "Alprazolam", "Pfizer", "0.5mg",
                  "Anti-anxiety medication", "🧠", "Mental Health"),
    ],
}

ADMIN_CATEGORIES: list[str] = [
    "Pain Relief",
    "Antibiotics",
    "Cardiovascular",
    "Respiratory",
    "Gastrointestinal",
    "Neurological",
    "Endocrine",
    "Dermatology",
    "Mental Health",
    "Allergy",
    "Other",
]


def search_local_catalog(query: str, category: str = "all") -> list[dict[str, Any]]:
    """
    Case-insensitive substring search over the built-in catalog.

    Matches on name, generic name or category. When `category` is not
    "all", only that group is searched.

    Returns copies, so callers may annotate results freely.
    """
    needle = query.strip().lower()
    if not needle:
        return []

    results = []
    for category_name, medicines in MEDICINE_CATEGORIES.items():
        if category != "all" and category != category_name:
            continue
        for medicine in medicines:
            if (
                needle in medicine["name"].lower()
                or needle in medicine["genericName"].lower()
                or needle in medicine["category"].lower()
            ):
                results.append(dict(medicine))
    return results
