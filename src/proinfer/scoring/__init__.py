from .base import (
    SCORINGS,
    AdditiveScoring,
    GeometricMeanScoring,
    MultiplicativeScoring,
    PSMForScoring,
    Scoring,
    scoring_from_settings,
)

__all__ = [
    "SCORINGS",
    "AdditiveScoring",
    "GeometricMeanScoring",
    "MultiplicativeScoring",
    "PSMForScoring",
    "Scoring",
    "scoring_from_settings",
]
