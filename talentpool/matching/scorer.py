"""Candidate-to-job scoring."""

import logging
import random
from abc import ABC, abstractmethod
from hashlib import sha256
from typing import Callable

from talentpool.models.internal import Employee
from talentpool.models.listing import AggregatedJobListing, MatchingCandidate
from talentpool.sources import EmployeeSource

logger = logging.getLogger(__name__)

TITLE_WEIGHT = 0.4
DEPARTMENT_WEIGHT = 0.3
PERTURBATION_STEPS = (0.1, 0.2, 0.3)

Perturbation = Callable[[AggregatedJobListing, Employee], float]


def hashed_perturbation(job: AggregatedJobListing, employee: Employee) -> float:
    """Stable pseudo-random step in [0.1, 0.3] for a (job, employee) pair."""
    digest = sha256(f"{job.source.value}:{job.id}:{employee.id}".encode()).digest()
    return PERTURBATION_STEPS[digest[0] % len(PERTURBATION_STEPS)]


def random_perturbation(rng: random.Random | None = None) -> Perturbation:
    """Random step in [0.1, 0.3]; pass a seeded ``rng`` for repeatable runs."""
    rng = rng or random.Random()

    def perturb(job: AggregatedJobListing, employee: Employee) -> float:
        return rng.choice(PERTURBATION_STEPS)

    return perturb


def no_perturbation(job: AggregatedJobListing, employee: Employee) -> float:
    return 0.0


def _contains(haystack: str | None, needle: str | None) -> bool:
    if not haystack or not needle:
        return False
    return needle.lower() in haystack.lower()


class ScoringStrategy(ABC):
    """Scores how well an employee fits a job, from 0.0 to 1.0."""

    @abstractmethod
    def score(self, job: AggregatedJobListing, employee: Employee) -> float:
        ...


class HeuristicScoringStrategy(ScoringStrategy):
    """
    Title and department overlap plus a perturbation.

    Formula:
        score = 0.4 * [job title contains employee title]
              + 0.3 * [job department contains employee department]
              + perturbation(job, employee)
    capped at 1.0. Empty titles or departments never match.
    """

    def __init__(self, perturbation: Perturbation = hashed_perturbation):
        self.perturbation = perturbation

    def score(self, job: AggregatedJobListing, employee: Employee) -> float:
        score = 0.0
        if _contains(job.title, employee.position_title):
            score += TITLE_WEIGHT
        if _contains(job.department, employee.department_name):
            score += DEPARTMENT_WEIGHT
        score += self.perturbation(job, employee)
        return round(min(score, 1.0), 4)


def matching_skills(job: AggregatedJobListing, employee: Employee) -> list[str]:
    """Job skills and keywords the employee lists among their own skills."""
    own = {skill.lower() for skill in employee.skills}
    seen = []
    for skill in [*job.required_skills, *job.keywords]:
        if skill.lower() in own and skill not in seen:
            seen.append(skill)
    return seen


class CandidateMatcher:
    """
    Finds internal candidates for a job.

    Only the first ``max_candidates`` employees of a bounded pool are
    scored; candidates at or below ``min_score`` are dropped.
    """

    def __init__(
        self,
        employee_source: EmployeeSource,
        strategy: ScoringStrategy | None = None,
        pool_size: int = 50,
        max_candidates: int = 5,
        min_score: float = 0.3,
    ):
        self.employee_source = employee_source
        self.strategy = strategy or HeuristicScoringStrategy()
        self.pool_size = pool_size
        self.max_candidates = max_candidates
        self.min_score = min_score

    async def load_pool(self) -> list[Employee]:
        return await self.employee_source.get_page(1, self.pool_size)

    def match(self, job: AggregatedJobListing, pool: list[Employee]) -> list[MatchingCandidate]:
        """Score ``job`` against ``pool``, best first."""
        candidates = []
        for employee in pool[:self.max_candidates]:
            score = self.strategy.score(job, employee)
            if score <= self.min_score:
                continue
            candidates.append(
                MatchingCandidate(
                    employee_id=employee.id,
                    full_name=employee.full_name,
                    email=employee.email or "",
                    match_score=score,
                    matching_skills=matching_skills(job, employee),
                    current_position=employee.position_title or "",
                )
            )

        candidates.sort(key=lambda c: c.match_score, reverse=True)
        return candidates

    async def find_candidates(self, job: AggregatedJobListing) -> list[MatchingCandidate]:
        """Load the pool and match; failures yield an empty list."""
        try:
            pool = await self.load_pool()
        except Exception:
            logger.exception("Error finding matching candidates for job: %s", job.id)
            return []
        return self.match(job, pool)
