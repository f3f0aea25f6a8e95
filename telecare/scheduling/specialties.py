"""Keyword table mapping diagnosis text to recommended specialties.

Order matters: the first keyword found in the diagnosis wins, so more specific
keywords ("infection respiratoire") must precede generic ones ("infection").
Keywords are matched as lowercase substrings of the diagnosis.
"""

from typing import List, Sequence, Tuple

GENERAL_MEDICINE = "General Medicine"
EMERGENCY = "Emergency"

# Substrings identifying a generalist in the catalog's primary specialty
GENERALIST_MARKERS = (
    "general medicine",
    "general practitioner",
    "médecine générale",
    "médecin généraliste",
)

DIAGNOSIS_SPECIALTY_MAP: Sequence[Tuple[str, List[str]]] = (
    # Pneumology
    ("pneumonie", ["Pneumology", GENERAL_MEDICINE]),
    ("bronchite", ["Pneumology", GENERAL_MEDICINE]),
    ("asthme", ["Pneumology", "Allergology"]),
    ("infection respiratoire", ["Pneumology", GENERAL_MEDICINE]),

    # Cardiology
    ("infarctus", ["Cardiology", GENERAL_MEDICINE]),
    ("hypertension", ["Cardiology", GENERAL_MEDICINE]),
    ("arythmie", ["Cardiology"]),
    ("angine de poitrine", ["Cardiology"]),

    # Gastroenterology
    ("gastrite", ["Gastroenterology", GENERAL_MEDICINE]),
    ("ulcère", ["Gastroenterology"]),
    ("reflux", ["Gastroenterology", GENERAL_MEDICINE]),

    # Neurology
    ("migraine", ["Neurology", GENERAL_MEDICINE]),
    ("épilepsie", ["Neurology"]),
    ("céphalée", ["Neurology", GENERAL_MEDICINE]),

    # Dermatology
    ("eczéma", ["Dermatology"]),
    ("psoriasis", ["Dermatology"]),
    ("acné", ["Dermatology"]),
    ("allergie cutanée", ["Dermatology", "Allergology"]),

    # Rheumatology
    ("arthrite", ["Rheumatology"]),
    ("arthrose", ["Rheumatology", GENERAL_MEDICINE]),
    ("lombalgie", ["Rheumatology", GENERAL_MEDICINE]),

    # Endocrinology
    ("diabète", ["Endocrinology", GENERAL_MEDICINE]),
    ("thyroïde", ["Endocrinology"]),

    # Urology
    ("infection urinaire", ["Urology", GENERAL_MEDICINE]),
    ("prostate", ["Urology"]),

    # Gynecology
    ("infection gynécologique", ["Gynecology"]),
    ("grossesse", ["Gynecology"]),

    # Pediatrics
    ("fièvre enfant", ["Pediatrics"]),
    ("infection enfant", ["Pediatrics"]),

    # Catch-all
    ("infection", [GENERAL_MEDICINE]),
    ("fièvre", [GENERAL_MEDICINE]),
    ("douleur", [GENERAL_MEDICINE]),
)


def lookup_specialties(diagnosis: str) -> List[str]:
    """Return the specialties of the first keyword contained in ``diagnosis``, or []."""
    text = (diagnosis or "").lower()
    for keyword, specialties in DIAGNOSIS_SPECIALTY_MAP:
        if keyword.lower() in text:
            return list(specialties)
    return []


def is_generalist(specialty: str) -> bool:
    value = (specialty or "").lower()
    return any(marker in value for marker in GENERALIST_MARKERS)
