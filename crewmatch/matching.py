"""
Matching Orchestrator.

Responsibilities:
- Enumerate candidates in both directions (workers for a project,
  active projects for a worker).
- Resolve trade names through the trade tables and the ontology cache.
- Invoke scoring per candidate, rank by total, keep the top results.

Non-Responsibilities:
- No score arithmetic (crewmatch.scoring).
- No writes of any kind.
- No retries: store failures abort the whole call.

Invariant:
Each call starts from an empty ontology cache and returns at most
MAX_RESULTS entries sorted by total descending, equal totals keeping
the order in which candidates were encountered.
"""

from dataclasses import dataclass, asdict
from datetime import date
from typing import Dict, List, Optional, Set

from .cache import OntologyCache
from .database import Worker, Project
from .logger import StructuredLogger, get_logger
from .scoring import (
    CertDetails,
    CertScore,
    ScoreBreakdown,
    SkillDetails,
    SkillScore,
    compute_cert_score,
    compute_skill_score,
    neutral_cert_score,
    neutral_skill_score,
    score_candidate,
)
from .trades import resolve_to_ontology, resolve_to_worker_labels

MAX_RESULTS = 10


class NotFoundError(LookupError):
    """Root entity of a matching call does not exist."""

    entity = "Entity"

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"{self.entity} {entity_id} not found")


class ProjectNotFoundError(NotFoundError):
    entity = "Project"


class WorkerNotFoundError(NotFoundError):
    entity = "Worker"


def _worker_summary(worker: Worker) -> dict:
    return {
        "id": worker.id,
        "name": worker.name,
        "title": worker.title,
        "trade": worker.trade,
        "location": worker.location,
        "experience": worker.experience,
        "available": worker.available,
    }


def _project_summary(project: Project) -> dict:
    return {
        "id": project.id,
        "name": project.name,
        "client": project.client,
        "location": project.location,
        "status": project.status,
        "trades_needed": list(project.trades_needed or []),
    }


@dataclass(frozen=True)
class WorkerMatchResult:
    worker: Worker
    score: ScoreBreakdown
    matched_trade: str
    already_assigned: bool
    skill_details: SkillDetails
    cert_details: CertDetails

    def to_dict(self) -> dict:
        return {
            "worker": _worker_summary(self.worker),
            "score": self.score.to_dict(),
            "matched_trade": self.matched_trade,
            "already_assigned": self.already_assigned,
            "skill_details": asdict(self.skill_details),
            "cert_details": asdict(self.cert_details),
        }


@dataclass(frozen=True)
class ProjectMatchResult:
    project: Project
    score: ScoreBreakdown
    matched_trade: str
    already_assigned: bool
    skill_details: SkillDetails
    cert_details: CertDetails

    def to_dict(self) -> dict:
        return {
            "project": _project_summary(self.project),
            "score": self.score.to_dict(),
            "matched_trade": self.matched_trade,
            "already_assigned": self.already_assigned,
            "skill_details": asdict(self.skill_details),
            "cert_details": asdict(self.cert_details),
        }


def rank(results: list) -> list:
    """Sort by total descending (stable) and truncate to MAX_RESULTS."""
    return sorted(results, key=lambda r: r.score.total, reverse=True)[:MAX_RESULTS]


class MatchingEngine:
    """
    Ranks workers for a project and projects for a worker.

    Args:
        store: OntologyStore (or any object with the same read methods)
        cache: OntologyCache to reuse; cleared at the start of every call
        logger: StructuredLogger for run logging and metrics
        today: Fixed reference date for certification expiry (default: date of each call)
    """

    def __init__(
        self,
        store,
        cache: Optional[OntologyCache] = None,
        logger: Optional[StructuredLogger] = None,
        today: Optional[date] = None,
    ):
        self.store = store
        self.logger = logger or get_logger()
        self.cache = cache if cache is not None else OntologyCache(store, logger=self.logger)
        self.today = today

    def find_workers_for_project(self, project_id: str) -> List[WorkerMatchResult]:
        """Top candidates across every trade the project needs."""
        self.cache.clear()
        self.logger.record_matching_run("workers_for_project")
        self.logger.debug("Matching workers for project", project_id=project_id)

        try:
            results = self._match_workers(project_id)
        except Exception as e:
            self.logger.record_failure(type(e).__name__)
            raise

        ranked = rank(results)
        self.logger.info(
            "Worker matching complete",
            project_id=project_id,
            candidates=len(results),
            returned=len(ranked),
        )
        return ranked

    def find_jobs_for_worker(self, worker_id: str) -> List[ProjectMatchResult]:
        """Top active projects that need the worker's trade."""
        self.cache.clear()
        self.logger.record_matching_run("jobs_for_worker")
        self.logger.debug("Matching jobs for worker", worker_id=worker_id)

        try:
            results = self._match_jobs(worker_id)
        except Exception as e:
            self.logger.record_failure(type(e).__name__)
            raise

        ranked = rank(results)
        self.logger.info(
            "Job matching complete",
            worker_id=worker_id,
            candidates=len(results),
            returned=len(ranked),
        )
        return ranked

    # Internals

    def _match_workers(self, project_id: str) -> List[WorkerMatchResult]:
        project = self.store.get_project(project_id)
        if project is None:
            self.logger.warning("Project not found", project_id=project_id)
            raise ProjectNotFoundError(project_id)

        trades_needed = list(project.trades_needed or [])
        if not trades_needed:
            return []

        today = self.today or date.today()

        assigned_worker_ids: Set[str] = {
            a.worker_id for a in self.store.get_project_assignments_by_project(project_id)
        }

        trade_ids: Dict[str, str] = {}
        for trade_name in trades_needed:
            trade = self.store.get_trade_by_name(trade_name)
            if trade is not None:
                trade_ids[trade_name] = trade.id
            else:
                self._note_unresolved(trade_name)

        results: List[WorkerMatchResult] = []

        for trade_name in trades_needed:
            trade_id = trade_ids.get(trade_name)

            for worker in self._candidate_workers(trade_name):
                already_assigned = worker.id in assigned_worker_ids

                if trade_id is not None:
                    ontology = self.cache.get(trade_id)
                    worker_skills = self.store.get_worker_skills(worker.id)
                    worker_certs = self.store.get_worker_certifications(worker.id)
                    skill_result = compute_skill_score(ontology.skills, worker_skills)
                    cert_result = compute_cert_score(ontology.cert_links, worker_certs, today, self.logger)
                else:
                    skill_result = neutral_skill_score()
                    cert_result = neutral_cert_score()

                results.append(
                    WorkerMatchResult(
                        worker=worker,
                        score=score_candidate(worker, skill_result, cert_result, already_assigned),
                        matched_trade=trade_name,
                        already_assigned=already_assigned,
                        skill_details=skill_result.details,
                        cert_details=cert_result.details,
                    )
                )

        self.logger.record_candidate_scored(len(results))
        return results

    def _candidate_workers(self, trade_name: str) -> List[Worker]:
        """Workers under every label that staffs the trade, first occurrence wins."""
        seen: Set[str] = set()
        candidates: List[Worker] = []
        for label in resolve_to_worker_labels(trade_name):
            for worker in self.store.get_workers_by_trade(label):
                if worker.id not in seen:
                    seen.add(worker.id)
                    candidates.append(worker)
        return candidates

    def _match_jobs(self, worker_id: str) -> List[ProjectMatchResult]:
        worker = self.store.get_worker(worker_id)
        if worker is None:
            self.logger.warning("Worker not found", worker_id=worker_id)
            raise WorkerNotFoundError(worker_id)

        today = self.today or date.today()
        trade_name = resolve_to_ontology(worker.trade)

        worker_skills = self.store.get_worker_skills(worker_id)
        worker_certs = self.store.get_worker_certifications(worker_id)

        assigned_project_ids: Set[str] = {
            a.project_id for a in self.store.get_project_assignments_by_worker(worker_id)
        }

        skill_result, cert_result = self._trade_scores(trade_name, worker_skills, worker_certs, today)

        results: List[ProjectMatchResult] = []
        for project in self.store.get_active_projects():
            if trade_name not in (project.trades_needed or []):
                continue

            already_assigned = project.id in assigned_project_ids
            results.append(
                ProjectMatchResult(
                    project=project,
                    score=score_candidate(worker, skill_result, cert_result, already_assigned),
                    matched_trade=trade_name,
                    already_assigned=already_assigned,
                    skill_details=skill_result.details,
                    cert_details=cert_result.details,
                )
            )

        self.logger.record_candidate_scored(len(results))
        return results

    def _trade_scores(self, trade_name: str, worker_skills, worker_certs, today: date):
        """Skill and cert sub-scores against a trade, midpoints if it is not in the ontology."""
        trade = self.store.get_trade_by_name(trade_name)
        if trade is None:
            self._note_unresolved(trade_name)
            return neutral_skill_score(), neutral_cert_score()

        ontology = self.cache.get(trade.id)
        skill_result: SkillScore = compute_skill_score(ontology.skills, worker_skills)
        cert_result: CertScore = compute_cert_score(ontology.cert_links, worker_certs, today, self.logger)
        return skill_result, cert_result

    def _note_unresolved(self, trade_name: str) -> None:
        self.logger.record_unresolved_trade(trade_name)
        self.logger.warning("Trade not in ontology, using neutral scores", trade=trade_name)


def find_workers_for_project(store, project_id: str, **kwargs) -> List[WorkerMatchResult]:
    """Run a one-off match with its own engine and cache."""
    return MatchingEngine(store, **kwargs).find_workers_for_project(project_id)


def find_jobs_for_worker(store, worker_id: str, **kwargs) -> List[ProjectMatchResult]:
    """Run a one-off match with its own engine and cache."""
    return MatchingEngine(store, **kwargs).find_jobs_for_worker(worker_id)
