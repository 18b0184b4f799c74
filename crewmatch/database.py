"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for the trade ontology and the workers,
projects and assignments the matching engine reads.
"""

import uuid
from datetime import datetime
from pathlib import Path
from sqlalchemy import (
    create_engine,
    Column,
    String,
    Integer,
    Boolean,
    DateTime,
    Text,
    JSON,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()

PROJECT_STATUSES = ("planning", "active", "completed", "on_hold")
ASSIGNMENT_ROLES = ("foreman", "lead", "crew")


def new_id() -> str:
    return uuid.uuid4().hex


class Trade(Base):
    """Canonical occupation category in the ontology."""

    __tablename__ = "trades"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False, unique=True)
    category = Column(String, nullable=False)
    description = Column(Text)


class Skill(Base):
    """Competency owned by exactly one trade."""

    __tablename__ = "skills"

    id = Column(String, primary_key=True, default=new_id)
    trade_id = Column(String, ForeignKey("trades.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    difficulty_level = Column(Integer, nullable=False, default=1)  # 1-5, informational only

    __table_args__ = (UniqueConstraint("trade_id", "name"),)


class Certification(Base):
    """Credential definition. validity_years=None means it never expires."""

    __tablename__ = "certifications"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False, unique=True)
    issuing_body = Column(String, nullable=False)
    validity_years = Column(Integer)
    description = Column(Text)


class TradeCertification(Base):
    """Certification required for a trade."""

    __tablename__ = "trades_certifications"

    id = Column(String, primary_key=True, default=new_id)
    trade_id = Column(String, ForeignKey("trades.id"), nullable=False, index=True)
    certification_id = Column(String, ForeignKey("certifications.id"), nullable=False)

    __table_args__ = (UniqueConstraint("trade_id", "certification_id"),)


class Worker(Base):
    """Candidate professional. `trade` is a free-text label, not a trade id."""

    __tablename__ = "workers"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    title = Column(String, nullable=False, default="")
    trade = Column(String, nullable=False, index=True)
    email = Column(String, nullable=False, default="")
    phone = Column(String)
    location = Column(String, nullable=False, default="")
    experience = Column(Integer, nullable=False, default=0)  # years
    available = Column(Boolean, nullable=False, default=True)
    bio = Column(Text)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


class WorkerSkill(Base):
    __tablename__ = "worker_skills"

    id = Column(String, primary_key=True, default=new_id)
    worker_id = Column(String, ForeignKey("workers.id"), nullable=False, index=True)
    skill_id = Column(String, ForeignKey("skills.id"), nullable=False)
    proficiency_level = Column(Integer)  # 1-5, NULL earns no credit


class WorkerCertification(Base):
    __tablename__ = "worker_certifications"

    id = Column(String, primary_key=True, default=new_id)
    worker_id = Column(String, ForeignKey("workers.id"), nullable=False, index=True)
    certification_id = Column(String, ForeignKey("certifications.id"), nullable=False)
    earned_date = Column(String)  # ISO date
    expiry_date = Column(String)  # ISO date, NULL = never expires


class Project(Base):
    """Job site. trades_needed holds canonical trade names."""

    __tablename__ = "projects"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    client = Column(String, nullable=False, default="")
    location = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="planning", index=True)
    description = Column(Text)
    start_date = Column(String)
    end_date = Column(String)
    trades_needed = Column(JSON, nullable=False, default=list)


class ProjectAssignment(Base):
    __tablename__ = "project_assignments"

    id = Column(String, primary_key=True, default=new_id)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False, index=True)
    worker_id = Column(String, ForeignKey("workers.id"), nullable=False, index=True)
    role = Column(String, nullable=False, default="crew")
    assigned_at = Column(DateTime, nullable=False, default=datetime.now)


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()
