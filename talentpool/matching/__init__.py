"""Matching module."""

from talentpool.matching.scorer import (
    CandidateMatcher,
    HeuristicScoringStrategy,
    ScoringStrategy,
    hashed_perturbation,
    no_perturbation,
    random_perturbation,
)

__all__ = [
    "CandidateMatcher",
    "HeuristicScoringStrategy",
    "ScoringStrategy",
    "hashed_perturbation",
    "no_perturbation",
    "random_perturbation",
]
