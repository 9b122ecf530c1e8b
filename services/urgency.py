# services/urgency.py
"""Map the humanitarian and damage-severity predictions to an urgency tier"""

NOT_AVAILABLE = "N/A"

SEVERITY_LABELS = ("severe", "mild", "little_or_none")

HUMANITARIAN_LABELS = (
    "affected_injured_or_dead_people",
    "infrastructure_and_utility_damage",
    "rescue_volunteering_or_donation_effort",
    "not_humanitarian",
)

URGENCY_MATRIX = {
    "affected_injured_or_dead_people": {
        "severe": "5 (Critical)",
        "mild": "4 (High)",
        "little_or_none": "3 (Moderate)",
    },
    "infrastructure_and_utility_damage": {
        "severe": "4 (High)",
        "mild": "3 (Moderate)",
        "little_or_none": "2 (Low)",
    },
    "rescue_volunteering_or_donation_effort": {
        "severe": "3 (Moderate)",
        "mild": "2 (Low)",
        "little_or_none": "1 (Minimal)",
    },
    "not_humanitarian": {
        "severe": "2 (Low)",
        "mild": "1 (Minimal)",
        "little_or_none": "1 (Minimal)",
    },
}


def get_urgency_level(humanitarian: str, severity: str) -> str:
    """Return the urgency tier for a label pair, or "N/A" for unknown labels"""
    return URGENCY_MATRIX.get(humanitarian, {}).get(severity, NOT_AVAILABLE)
