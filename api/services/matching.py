"""Skill match scoring between a job and a job seeker."""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class MatchResult:
    score: int
    required: int
    matched: tuple[str, ...]
    missing: tuple[str, ...]


def compute_match(required_skills: Iterable[str], seeker_skills: Iterable[str]) -> MatchResult:
    """
    Percentage of a job's required skills the seeker has.

    Names compare case-insensitively. A job without required skills is a
    100% match. The score is informational only.

    Args:
        required_skills: Names of the job's required skills
        seeker_skills: Names of the seeker's skills

    Returns:
        MatchResult with the rounded percentage and the matched/missing names
    """
    required: dict[str, str] = {}
    for name in required_skills:
        required.setdefault(name.strip().lower(), name.strip())

    if not required:
        return MatchResult(score=100, required=0, matched=(), missing=())

    owned = {name.strip().lower() for name in seeker_skills}
    matched = tuple(required[key] for key in required if key in owned)
    missing = tuple(required[key] for key in required if key not in owned)

    return MatchResult(
        score=round(100 * len(matched) / len(required)),
        required=len(required),
        matched=matched,
        missing=missing,
    )
