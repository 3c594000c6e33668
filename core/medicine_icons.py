# =============================================================================
# core/medicine_icons.py - Decorative Icon / Color Lookup
# =============================================================================
# String-matching tables that give every medicine an emoji icon and a
# placeholder image color. Purely presentational; nothing depends on the
# values beyond display.
# =============================================================================

from urllib.parse import quote

DEFAULT_ICON = "💊"
DEFAULT_COLOR = "28a745"
RXNAV_COLOR = "007bff"
PLACEHOLDER_URL = "https://via.placeholder.com/120x80/{color}/ffffff?text={text}"

MEDICINE_ICONS: dict[str, str] = {
    # Pain relievers
    "tylenol": "🟡",
    "acetaminophen": "🟡",
    "ibuprofen": "🔴",
    "advil": "🔴",
    "motrin": "🔴",
    "aspirin": "⚪",
    "bayer": "⚪",
    # Antibiotics
    "amoxicillin": "💊",
    "penicillin": "💉",
    "azithromycin": "💊",
    "doxycycline": "💊",
    # Heart
    "lisinopril": "❤️",
    "metoprolol": "💓",
    "atorvastatin": "💊",
    "lipitor": "💊",
    "amlodipine": "❤️",
    # Diabetes
    "metformin": "📊",
    "insulin": "💉",
    "glipizide": "📊",
    # Digestive
    "omeprazole": "🟢",
    "prilosec": "🟢",
    "lansoprazole": "🟢",
    # Allergy
    "cetirizine": "🌸",
    "zyrtec": "🌸",
    "loratadine": "🌸",
    "claritin": "🌸",
    # Mental health
    "sertraline": "🧠",
    "zoloft": "🧠",
    "fluoxetine": "🧠",
    "prozac": "🧠",
}

CATEGORY_KEYWORD_ICONS: dict[str, str] = {
    "pain": "🟡",
    "antibiotic": "💊",
    "cardiovascular": "❤️",
    "diabetes": "📊",
    "allergy": "🌸",
    "digestive": "🟢",
    "mental": "🧠",
}

# Category names and medicine names share one table; categories are looked
# up exactly, medicine names by substring.
IMAGE_COLORS: dict[str, str] = {
    "Pain Relief": "ff6b6b",
    "Cardiovascular": "e74c3c",
    "Diabetes": "3498db",
    "Antibiotics": "2ecc71",
    "Digestive": "95a5a6",
    "Allergy": "f39c12",
    "Mental Health": "9b59b6",
    "tylenol": "ff6b6b",
    "ibuprofen": "4ecdc4",
    "aspirin": "45b7d1",
    "metformin": "96ceb4",
    "lisinopril": "feca57",
    "omeprazole": "6c5ce7",
    "atorvastatin": "fd79a8",
}

ADMIN_CATEGORY_ICONS: dict[str, str] = {
    "Pain Relief": "💊",
    "Antibiotics": "🧬",
    "Cardiovascular": "❤️",
    "Respiratory": "🫁",
    "Gastrointestinal": "🍃",
    "Neurological": "🧠",
    "Endocrine": "⚡",
    "Dermatology": "🧴",
    "Mental Health": "🧘",
    "Allergy": "🤧",
    "Other": "🔬",
}

ADMIN_CATEGORY_COLORS: dict[str, str] = {
    "Pain Relief": "#ef4444",
    "Antibiotics": "#10b981",
    "Cardiovascular": "#f59e0b",
    "Respiratory": "#3b82f6",
    "Gastrointestinal": "#84cc16",
    "Neurological": "#8b5cf6",
    "Endocrine": "#f97316",
    "Dermatology": "#06b6d4",
    "Mental Health": "#ec4899",
    "Allergy": "#eab308",
    "Other": "#6b7280",
}


def get_medicine_icon(medicine_name: str, category: str | None = None) -> str:
    """
    Pick an icon for a medicine.

    Order: exact name, partial name (either string contains the other),
    category keyword, then the default pill.
    """
    name = medicine_name.lower()

    if name in MEDICINE_ICONS:
        return MEDICINE_ICONS[name]

    if name:
        for key, icon in MEDICINE_ICONS.items():
            if key in name or name in key:
                return icon

    if category:
        cat = category.lower()
        for key, icon in CATEGORY_KEYWORD_ICONS.items():
            if key in cat:
                return icon

    return DEFAULT_ICON


def get_medicine_image(medicine_name: str, source: str, category: str | None = None) -> str:
    """Placeholder image URL colored by category, medicine name, or source."""
    name = medicine_name.lower()
    color = DEFAULT_COLOR

    if category and category in IMAGE_COLORS:
        color = IMAGE_COLORS[category]
    else:
        for key, key_color in IMAGE_COLORS.items():
            if key in name:
                color = key_color
                break

    if source == "rxnav":
        color = RXNAV_COLOR

    short_name = medicine_name[:8] + "..." if len(medicine_name) > 8 else medicine_name
    return PLACEHOLDER_URL.format(color=color, text=quote(short_name, safe=""))


def get_category_icon(category: str) -> str:
    return ADMIN_CATEGORY_ICONS.get(category, DEFAULT_ICON)


def get_category_color(category: str) -> str:
    return ADMIN_CATEGORY_COLORS.get(category, "#6b7280")
