"""
Human-readable labels used in generated table names
"""

from typing import Callable, Dict, Optional

from app.services.bin_packing import BucketKey
from app.services.guest_selection import Category

LabelLookup = Callable[[Optional[BucketKey]], str]

SIDE_LABELS: Dict[str, Dict[str, str]] = {
    "he": {"bride": "כלה", "groom": "חתן", "both": "שניהם", "other": "אחר"},
    "en": {"bride": "Bride", "groom": "Groom", "both": "Both", "other": "Other"},
}

GROUP_LABELS: Dict[str, Dict[str, str]] = {
    "he": {"family": "משפחה", "friends": "חברים", "work": "עבודה", "other": "אחר"},
    "en": {"family": "Family", "friends": "Friends", "work": "Work", "other": "Other"},
}

OPEN_TABLE_LABELS = {"he": "פתוח", "en": "Open"}

def make_label_lookup(language: str = "he") -> LabelLookup:
    """Label lookup for a language; unlisted values are shown as-is, missing ones as "other"."""
    sides = SIDE_LABELS.get(language, SIDE_LABELS["en"])
    groups = GROUP_LABELS.get(language, GROUP_LABELS["en"])
    open_label = OPEN_TABLE_LABELS.get(language, OPEN_TABLE_LABELS["en"])

    def label(names: Dict[str, str], category: Category) -> str:
        if category.is_unknown:
            return names["other"]
        return names.get(category.value.lower(), category.value)

    def lookup(key: Optional[BucketKey]) -> str:
        if key is None:
            return open_label
        group_label = label(groups, key.group)
        if key.side is None:
            return group_label
        return f"{group_label} - {label(sides, key.side)}"

    return lookup
