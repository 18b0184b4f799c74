"""
Seed loading for the trade ontology and sample marketplace data.

Reads a JSON document (see crewmatch.schema.validate_seed for its shape)
and inserts it in dependency order within one transaction. A database
that already holds trades is left untouched.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Session

from .database import (
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
from .logger import get_logger
from .schema import validate_seed
from .storage import OntologyStore

logger = get_logger()

COUNT_KEYS = [
    "trades",
    "skills",
    "certifications",
    "trade_certifications",
    "workers",
    "worker_skills",
    "worker_certifications",
    "projects",
    "assignments",
]


class SeedError(ValueError):
    """Seed document failed validation."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Invalid seed document ({len(errors)} errors): {'; '.join(errors[:3])}")


def read_seed_file(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_seed(session: Session, data: Dict[str, Any]) -> Dict[str, int]:
    """
    Insert a seed document.

    Args:
        session: SQLAlchemy session (committed on success, rolled back on failure)
        data: Parsed seed document

    Returns:
        Insert counts per table (all zero when the ontology was already seeded)

    Raises:
        SeedError: If the document does not validate
    """
    errors = validate_seed(data)
    if errors:
        logger.error("Seed document rejected", error_count=len(errors))
        raise SeedError(errors)

    counts = {key: 0 for key in COUNT_KEYS}

    store = OntologyStore(session)
    if store.count_trades() > 0:
        logger.info("Ontology already seeded, skipping")
        return counts

    try:
        certs: Dict[str, Certification] = {}
        for item in data.get("certifications", []):
            cert = Certification(
                id=new_id(),
                name=item["name"],
                issuing_body=item["issuing_body"],
                validity_years=item.get("validity_years"),
                description=item.get("description"),
            )
            session.add(cert)
            certs[cert.name] = cert
            counts["certifications"] += 1

        skills: Dict[Tuple[str, str], Skill] = {}
        skills_by_name: Dict[str, Skill] = {}
        for item in data.get("trades", []):
            trade = Trade(
                id=new_id(),
                name=item["name"],
                category=item["category"],
                description=item.get("description"),
            )
            session.add(trade)
            counts["trades"] += 1

            for skill_item in item.get("skills", []):
                skill = Skill(
                    id=new_id(),
                    trade_id=trade.id,
                    name=skill_item["name"],
                    description=skill_item.get("description"),
                    difficulty_level=skill_item.get("difficulty_level", 1),
                )
                session.add(skill)
                skills[(trade.name, skill.name)] = skill
                # validate_seed rejects bare names shared by several trades
                skills_by_name[skill.name] = skill
                counts["skills"] += 1

            for cert_name in item.get("certifications", []):
                session.add(TradeCertification(
                    id=new_id(),
                    trade_id=trade.id,
                    certification_id=certs[cert_name].id,
                ))
                counts["trade_certifications"] += 1

        for item in data.get("workers", []):
            worker = Worker(
                id=item["id"],
                name=item["name"],
                title=item.get("title", ""),
                trade=item["trade"],
                email=item.get("email", ""),
                phone=item.get("phone"),
                location=item.get("location", ""),
                experience=item.get("experience", 0),
                available=item.get("available", True),
                bio=item.get("bio"),
            )
            session.add(worker)
            counts["workers"] += 1

            for ws in item.get("skills", []):
                if ws.get("trade") is not None:
                    skill = skills[(ws["trade"], ws["name"])]
                else:
                    skill = skills_by_name[ws["name"]]
                session.add(WorkerSkill(
                    id=new_id(),
                    worker_id=worker.id,
                    skill_id=skill.id,
                    proficiency_level=ws.get("proficiency"),
                ))
                counts["worker_skills"] += 1

            for wc in item.get("certifications", []):
                session.add(WorkerCertification(
                    id=new_id(),
                    worker_id=worker.id,
                    certification_id=certs[wc["name"]].id,
                    earned_date=wc.get("earned_date"),
                    expiry_date=wc.get("expiry_date"),
                ))
                counts["worker_certifications"] += 1

        for item in data.get("projects", []):
            session.add(Project(
                id=item["id"],
                name=item["name"],
                client=item.get("client", ""),
                location=item.get("location", ""),
                status=item.get("status", "planning"),
                description=item.get("description"),
                start_date=item.get("start_date"),
                end_date=item.get("end_date"),
                trades_needed=list(item.get("trades_needed", [])),
            ))
            counts["projects"] += 1

        for item in data.get("assignments", []):
            session.add(ProjectAssignment(
                id=new_id(),
                project_id=item["project_id"],
                worker_id=item["worker_id"],
                role=item.get("role", "crew"),
            ))
            counts["assignments"] += 1

        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info("Seed loaded", **counts)
    return counts
