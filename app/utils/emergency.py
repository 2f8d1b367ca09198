"""Emergency triage scoring."""

from collections.abc import Iterable

from app.schemas.emergency import SeverityLevel

# Weights per recognised symptom; anything else scores 0
SYMPTOM_SCORES: dict[str, int] = {
    "chest pain": 3,
    "difficulty breathing": 3,
    "heavy bleeding": 3,
    "loss of consciousness": 3,
    "vomiting blood": 3,
    "accident/trauma": 2,
    "high fever": 2,
    "severe headache": 1,
}

HIGH_SEVERITY_THRESHOLD = 6
MEDIUM_SEVERITY_THRESHOLD = 3
DOWNGRADE_MAX_SCORE = 2


def normalize_symptom(symptom: str) -> str:
    """Lowercase and trim a free-text symptom."""
    return symptom.strip().lower()


def calculate_emergency_score(symptoms: Iterable[str] | None) -> int:
    """
    Sum the weights of the distinct known symptoms.

    Each known symptom counts once no matter how often it is repeated, so the
    score does not depend on ordering or duplicates.

    Args:
        symptoms: Free-text symptom list

    Returns:
        Non-negative emergency score
    """
    if not isinstance(symptoms, (list, tuple)):
        return 0

    matched = {
        normalize_symptom(symptom)
        for symptom in symptoms
        if isinstance(symptom, str) and normalize_symptom(symptom) in SYMPTOM_SCORES
    }
    return sum(SYMPTOM_SCORES[symptom] for symptom in matched)


def get_severity_level(score: int) -> SeverityLevel:
    """Map an emergency score to its severity tier."""
    if score >= HIGH_SEVERITY_THRESHOLD:
        return SeverityLevel.HIGH
    if score >= MEDIUM_SEVERITY_THRESHOLD:
        return SeverityLevel.MEDIUM
    return SeverityLevel.LOW


def should_convert_to_normal(score: int) -> bool:
    """Whether an emergency request is too mild to keep its emergency type."""
    return score <= DOWNGRADE_MAX_SCORE
