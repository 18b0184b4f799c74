"""
Ontology Store.

Responsibilities:
- Read-only lookups of trades, skills, certifications, workers,
  projects and assignments for the matching engine.
- Deterministic ordering of every list result.

Non-Responsibilities:
- No scoring.
- No trade name mapping.
- No writes (seeding lives in crewmatch.seed).

Invariant:
Lookups return None or an empty list for missing data and never
raise for it; database errors propagate to the caller unchanged.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from .database import (
    Trade,
    Skill,
    TradeCertification,
    Worker,
    WorkerSkill,
    WorkerCertification,
    Project,
    ProjectAssignment,
)


class OntologyStore:
    """SQLAlchemy-backed persistence collaborator."""

    def __init__(self, session: Session):
        self.session = session

    def get_project(self, project_id: str) -> Optional[Project]:
        return self.session.get(Project, project_id)

    def get_worker(self, worker_id: str) -> Optional[Worker]:
        return self.session.get(Worker, worker_id)

    def get_trade_by_name(self, name: str) -> Optional[Trade]:
        return self.session.query(Trade).filter_by(name=name).first()

    def get_skills_by_trade(self, trade_id: str) -> List[Skill]:
        return self.session.query(Skill).filter_by(trade_id=trade_id).order_by(Skill.id).all()

    def get_certifications_by_trade(self, trade_id: str) -> List[TradeCertification]:
        """Required-certification links for a trade (certification detail not joined)."""
        return (
            self.session.query(TradeCertification)
            .filter_by(trade_id=trade_id)
            .order_by(TradeCertification.id)
            .all()
        )

    def get_workers_by_trade(self, trade_label: str) -> List[Worker]:
        """Workers whose free-text trade label equals `trade_label` exactly."""
        return self.session.query(Worker).filter_by(trade=trade_label).order_by(Worker.id).all()

    def get_worker_skills(self, worker_id: str) -> List[WorkerSkill]:
        return (
            self.session.query(WorkerSkill)
            .filter_by(worker_id=worker_id)
            .order_by(WorkerSkill.id)
            .all()
        )

    def get_worker_certifications(self, worker_id: str) -> List[WorkerCertification]:
        return (
            self.session.query(WorkerCertification)
            .filter_by(worker_id=worker_id)
            .order_by(WorkerCertification.id)
            .all()
        )

    def get_project_assignments_by_project(self, project_id: str) -> List[ProjectAssignment]:
        return (
            self.session.query(ProjectAssignment)
            .filter_by(project_id=project_id)
            .order_by(ProjectAssignment.id)
            .all()
        )

    def get_project_assignments_by_worker(self, worker_id: str) -> List[ProjectAssignment]:
        return (
            self.session.query(ProjectAssignment)
            .filter_by(worker_id=worker_id)
            .order_by(ProjectAssignment.id)
            .all()
        )

    def get_active_projects(self) -> List[Project]:
        return self.session.query(Project).filter_by(status="active").order_by(Project.id).all()

    def count_trades(self) -> int:
        return self.session.query(Trade).count()
