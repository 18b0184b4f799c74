"""
Scoring Engine for worker/trade compatibility.

Responsibilities:
- Compute the six weighted sub-scores for one worker against one trade.
- Combine them into a total clamped to [0, 100].
- Emit skill and certification details for explainability.

Non-Responsibilities:
- No database access.
- No candidate selection.
- No ranking or truncation.

Invariant:
Given identical inputs (including the reference date), this module
always returns the same breakdown.

Point budget (sums to 100 before the penalty):

    trade match         25
    skill proficiency   25
    cert completeness   25
    availability        15
    experience          10
    assignment penalty  0 or -10

Skill and certification sub-scores fall back to the midpoint of their
range (12.5) when the trade defines no skills / certifications or the
trade is not in the ontology at all, so an incomplete ontology neither
rewards nor punishes candidates.
"""

from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Iterable, Optional

from .logger import StructuredLogger, get_logger

TRADE_MATCH_POINTS = 25.0
SKILL_POINTS = 25.0
CERT_POINTS = 25.0
AVAILABILITY_POINTS = 15.0
EXPERIENCE_POINTS = 10.0
ALREADY_ASSIGNED_PENALTY = -10.0

NEUTRAL_SKILL_SCORE = SKILL_POINTS / 2
NEUTRAL_CERT_SCORE = CERT_POINTS / 2

MAX_PROFICIENCY = 5
EXPERIENCE_CAP_YEARS = 15
VALID_CERT_CREDIT = 1.0
EXPIRED_CERT_CREDIT = 0.5

MIN_TOTAL = 0.0
MAX_TOTAL = 100.0


def round2(value: float) -> float:
    return round(value, 2)


@dataclass(frozen=True)
class ScoreBreakdown:
    trade_match: float
    skill_proficiency: float
    cert_completeness: float
    availability: float
    experience: float
    assignment_penalty: float
    total: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SkillDetails:
    trade_skill_count: int = 0
    worker_matched_skills: int = 0
    avg_proficiency: float = 0.0


@dataclass(frozen=True)
class CertDetails:
    required_cert_count: int = 0
    valid_certs: int = 0
    expired_certs: int = 0
    missing_certs: int = 0


@dataclass(frozen=True)
class SkillScore:
    score: float
    details: SkillDetails


@dataclass(frozen=True)
class CertScore:
    score: float
    details: CertDetails


def neutral_skill_score() -> SkillScore:
    return SkillScore(score=NEUTRAL_SKILL_SCORE, details=SkillDetails())


def neutral_cert_score() -> CertScore:
    return CertScore(score=NEUTRAL_CERT_SCORE, details=CertDetails())


def parse_iso_date(value) -> Optional[date]:
    """Parse an ISO date (or the date part of an ISO timestamp). None if unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except (ValueError, TypeError):
        return None


def is_cert_expired(
    expiry_date,
    today: Optional[date] = None,
    logger: Optional[StructuredLogger] = None,
) -> bool:
    """
    True once the reference date is past the expiry date.

    A certification without an expiry date never expires. Unparseable
    dates are treated as not expired and logged to `logger` (default:
    the shared logger at call time).
    """
    if not expiry_date:
        return False
    expiry = parse_iso_date(expiry_date)
    if expiry is None:
        (logger or get_logger()).warning("Unparseable certification expiry date", expiry_date=str(expiry_date))
        return False
    return expiry < (today or date.today())


def compute_skill_score(trade_skills: Iterable, worker_skills: Iterable) -> SkillScore:
    """
    Proficiency credit over the trade's skill set.

    Sum of the worker's proficiency levels on skills belonging to the
    trade, over the maximum attainable (skill count x 5), scaled to 25.
    Worker skills outside the trade and skills with no proficiency level
    earn nothing.
    """
    trade_skill_ids = {skill.id for skill in trade_skills}
    trade_skill_count = len(trade_skill_ids)

    if trade_skill_count == 0:
        return neutral_skill_score()

    matched = [
        ws for ws in worker_skills
        if ws.skill_id in trade_skill_ids and ws.proficiency_level is not None
    ]
    proficiency_sum = sum(ws.proficiency_level for ws in matched)
    avg_proficiency = proficiency_sum / len(matched) if matched else 0.0

    score = proficiency_sum / (trade_skill_count * MAX_PROFICIENCY) * SKILL_POINTS

    return SkillScore(
        score=min(SKILL_POINTS, score),
        details=SkillDetails(
            trade_skill_count=trade_skill_count,
            worker_matched_skills=len(matched),
            avg_proficiency=round2(avg_proficiency),
        ),
    )


def compute_cert_score(
    required_cert_links: Iterable,
    worker_certs: Iterable,
    today: Optional[date] = None,
    logger: Optional[StructuredLogger] = None,
) -> CertScore:
    """
    Completeness of the trade's required certifications.

    Each requirement earns 1.0 if held and current, 0.5 if held but
    expired, 0 if missing. Average credit is scaled to 25.
    """
    required = list(required_cert_links)
    required_cert_count = len(required)

    if required_cert_count == 0:
        return neutral_cert_score()

    # Last record wins when a worker holds the same certification twice
    held = {wc.certification_id: wc for wc in worker_certs}

    credits = 0.0
    valid_certs = expired_certs = missing_certs = 0

    for link in required:
        wc = held.get(link.certification_id)
        if wc is None:
            missing_certs += 1
        elif is_cert_expired(wc.expiry_date, today, logger):
            expired_certs += 1
            credits += EXPIRED_CERT_CREDIT
        else:
            valid_certs += 1
            credits += VALID_CERT_CREDIT

    score = credits / required_cert_count * CERT_POINTS

    return CertScore(
        score=min(CERT_POINTS, score),
        details=CertDetails(
            required_cert_count=required_cert_count,
            valid_certs=valid_certs,
            expired_certs=expired_certs,
            missing_certs=missing_certs,
        ),
    )


def compute_experience_score(years) -> float:
    """Linear ramp from 0 to 10 points, capped at 15 years."""
    years = max(0, min(years or 0, EXPERIENCE_CAP_YEARS))
    return years / EXPERIENCE_CAP_YEARS * EXPERIENCE_POINTS


def compute_availability_score(available: bool) -> float:
    return AVAILABILITY_POINTS if available else 0.0


def compute_assignment_penalty(already_assigned: bool) -> float:
    return ALREADY_ASSIGNED_PENALTY if already_assigned else 0.0


def clamp_score(score: float) -> float:
    return max(MIN_TOTAL, min(MAX_TOTAL, score))


def build_breakdown(
    trade_match: float,
    skill_proficiency: float,
    cert_completeness: float,
    availability: float,
    experience: float,
    assignment_penalty: float,
) -> ScoreBreakdown:
    """Sum and clamp the raw sub-scores; every field is rounded for display."""
    total = clamp_score(
        trade_match
        + skill_proficiency
        + cert_completeness
        + availability
        + experience
        + assignment_penalty
    )
    return ScoreBreakdown(
        trade_match=round2(trade_match),
        skill_proficiency=round2(skill_proficiency),
        cert_completeness=round2(cert_completeness),
        availability=round2(availability),
        experience=round2(experience),
        assignment_penalty=round2(assignment_penalty),
        total=round2(total),
    )


def score_candidate(
    worker,
    skill_result: SkillScore,
    cert_result: CertScore,
    already_assigned: bool,
) -> ScoreBreakdown:
    """
    Full breakdown for a worker already selected as a candidate for a trade.

    Candidates are pre-filtered by trade, so the trade match component is
    always awarded in full.
    """
    return build_breakdown(
        trade_match=TRADE_MATCH_POINTS,
        skill_proficiency=skill_result.score,
        cert_completeness=cert_result.score,
        availability=compute_availability_score(worker.available),
        experience=compute_experience_score(worker.experience),
        assignment_penalty=compute_assignment_penalty(already_assigned),
    )
