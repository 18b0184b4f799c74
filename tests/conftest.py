"""
Pytest configuration and shared fixtures.
"""

import os

# Keep test runs from writing log files; must happen before crewmatch imports.
os.environ.setdefault("CREWMATCH_LOG_FILE", "0")

import pytest
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from crewmatch.database import (
    init_database,
    get_session,
    new_id,
    Trade,
    Skill,
    Certification,
    TradeCertification,
    Worker,
    WorkerSkill,
    WorkerCertification,
    Project,
    ProjectAssignment,
)
from crewmatch.logger import StructuredLogger
from crewmatch.matching import MatchingEngine
from crewmatch.storage import OntologyStore

TODAY = date(2026, 1, 15)
PAST = "2025-06-30"
FUTURE = "2027-06-30"


class OntologyBuilder:
    """Inserts ontology and marketplace rows with sensible defaults."""

    def __init__(self, session):
        self.session = session

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        return obj

    def trade(self, name: str, skills: int = 0, category: str = "General") -> Trade:
        trade = self._save(Trade(id=new_id(), name=name, category=category))
        for i in range(skills):
            self.skill(trade, f"{name} skill {i + 1}")
        return trade

    def skill(self, trade: Trade, name: str, difficulty_level: int = 3) -> Skill:
        return self._save(Skill(id=new_id(), trade_id=trade.id, name=name, difficulty_level=difficulty_level))

    def skills_of(self, trade: Trade) -> List[Skill]:
        return self.session.query(Skill).filter_by(trade_id=trade.id).order_by(Skill.id).all()

    def certification(self, name: str, validity_years: Optional[int] = None) -> Certification:
        return self._save(Certification(
            id=new_id(), name=name, issuing_body="OSHA", validity_years=validity_years,
        ))

    def require(self, trade: Trade, cert: Certification) -> TradeCertification:
        return self._save(TradeCertification(id=new_id(), trade_id=trade.id, certification_id=cert.id))

    def worker(
        self,
        worker_id: str,
        trade: str,
        experience: int = 0,
        available: bool = True,
        name: Optional[str] = None,
    ) -> Worker:
        return self._save(Worker(
            id=worker_id,
            name=name or worker_id,
            trade=trade,
            experience=experience,
            available=available,
        ))

    def worker_skill(self, worker: Worker, skill: Skill, proficiency: Optional[int]) -> WorkerSkill:
        return self._save(WorkerSkill(
            id=new_id(), worker_id=worker.id, skill_id=skill.id, proficiency_level=proficiency,
        ))

    def worker_cert(
        self, worker: Worker, cert: Certification, expiry_date: Optional[str] = None
    ) -> WorkerCertification:
        return self._save(WorkerCertification(
            id=new_id(),
            worker_id=worker.id,
            certification_id=cert.id,
            earned_date="2020-01-01",
            expiry_date=expiry_date,
        ))

    def project(self, project_id: str, trades_needed: List[str], status: str = "active") -> Project:
        return self._save(Project(
            id=project_id, name=f"Project {project_id}", status=status, trades_needed=trades_needed,
        ))

    def assign(self, worker: Worker, project: Project, role: str = "crew") -> ProjectAssignment:
        return self._save(ProjectAssignment(
            id=new_id(), worker_id=worker.id, project_id=project.id, role=role,
        ))


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Initialized temporary database."""
    path = tmp_path / "test.db"
    init_database(path)
    return path


@pytest.fixture
def db_session(db_path):
    session = get_session(db_path)
    yield session
    session.close()


@pytest.fixture
def store(db_session) -> OntologyStore:
    return OntologyStore(db_session)


@pytest.fixture
def build(db_session) -> OntologyBuilder:
    return OntologyBuilder(db_session)


@pytest.fixture
def quiet_logger() -> StructuredLogger:
    """Logger with no handlers, used to inspect metrics."""
    return StructuredLogger(name="crewmatch-test", enable_file=False, enable_console=False)


@pytest.fixture
def engine(store, quiet_logger) -> MatchingEngine:
    return MatchingEngine(store, logger=quiet_logger, today=TODAY)


@pytest.fixture
def seed_document() -> Dict[str, Any]:
    """Small but complete seed document."""
    return {
        "certifications": [
            {"name": "OSHA 10", "issuing_body": "OSHA", "validity_years": None},
            {"name": "NFPA 70E", "issuing_body": "NFPA", "validity_years": 3},
        ],
        "trades": [
            {
                "name": "Electrician",
                "category": "Electrical",
                "skills": [
                    {"name": "Cable Pulling", "difficulty_level": 2},
                    {"name": "Conduit Bending", "difficulty_level": 3},
                ],
                "certifications": ["OSHA 10", "NFPA 70E"],
            },
            {
                "name": "Plumber/Pipefitter",
                "category": "Mechanical",
                "skills": [{"name": "Pressure Testing", "difficulty_level": 3}],
                "certifications": ["OSHA 10"],
            },
        ],
        "workers": [
            {
                "id": "w-ana",
                "name": "Ana Reyes",
                "trade": "Electrician",
                "experience": 12,
                "available": True,
                "skills": [
                    {"name": "Cable Pulling", "proficiency": 5},
                    {"name": "Conduit Bending", "trade": "Electrician", "proficiency": 3},
                ],
                "certifications": [
                    {"name": "OSHA 10", "earned_date": "2019-03-01"},
                    {"name": "NFPA 70E", "earned_date": "2020-03-01", "expiry_date": "2023-03-01"},
                ],
            },
            {
                "id": "w-sam",
                "name": "Sam Okafor",
                "trade": "Pipefitter",
                "experience": 4,
                "available": False,
            },
        ],
        "projects": [
            {"id": "p-ash", "name": "Ashburn DC-4", "status": "active", "trades_needed": ["Electrician"]},
            {"id": "p-phx", "name": "Phoenix Hall B", "status": "planning", "trades_needed": ["Plumber/Pipefitter"]},
        ],
        "assignments": [
            {"worker_id": "w-ana", "project_id": "p-ash", "role": "lead"},
        ],
    }
