"""
Helpers shared by test modules.
"""

from app.core.security import create_access_token

DEFAULT_PASSWORD = "Password123!"


def auth_headers(user):
    """Bearer headers for ``user`` without going through /auth/login."""
    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


def score_payload(value=40, **overrides):
    """All ten sub-scores set to ``value``."""
    scores = {
        "work_quality": value,
        "work_quantity": value,
        "knowledge": value,
        "initiative": value,
        "teamwork": value,
        "communication": value,
        "punctuality": value,
        "management": value,
        "reliability": value,
        "other_factors": value,
    }
    scores.update(overrides)
    return scores
