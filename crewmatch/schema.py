from typing import Any, Dict, List, Set

from .database import PROJECT_STATUSES, ASSIGNMENT_ROLES
from .scoring import parse_iso_date, MAX_PROFICIENCY

SECTIONS = ["certifications", "trades", "workers", "projects", "assignments"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _check_name(item: Any, where: str, errors: List[str]) -> bool:
    if not isinstance(item, dict):
        errors.append(f"{where}: must be an object")
        return False
    if not _is_non_empty_str(item.get("name")):
        errors.append(f"{where}: missing required field 'name'")
        return False
    return True


def _check_date(value: Any, where: str, field: str, errors: List[str]) -> None:
    if value is None:
        return
    if not isinstance(value, str) or parse_iso_date(value) is None:
        errors.append(f"{where}: '{field}' must be an ISO date (YYYY-MM-DD)")


def _validate_certifications(items: List[Any], errors: List[str]) -> Set[str]:
    names: Set[str] = set()
    for i, cert in enumerate(items):
        where = f"certifications[{i}]"
        if not _check_name(cert, where, errors):
            continue
        if cert["name"] in names:
            errors.append(f"{where}: duplicate certification '{cert['name']}'")
        names.add(cert["name"])
        if not _is_non_empty_str(cert.get("issuing_body")):
            errors.append(f"{where}: missing required field 'issuing_body'")
        validity = cert.get("validity_years")
        if validity is not None and (not _is_int(validity) or validity <= 0):
            errors.append(f"{where}: 'validity_years' must be a positive integer or null")
    return names


def _validate_trades(items: List[Any], cert_names: Set[str], errors: List[str]) -> Dict[str, Set[str]]:
    trades: Dict[str, Set[str]] = {}
    for i, trade in enumerate(items):
        where = f"trades[{i}]"
        if not _check_name(trade, where, errors):
            continue
        if trade["name"] in trades:
            errors.append(f"{where}: duplicate trade '{trade['name']}'")
        if not _is_non_empty_str(trade.get("category")):
            errors.append(f"{where}: missing required field 'category'")

        skill_names: Set[str] = set()
        for j, skill in enumerate(trade.get("skills", [])):
            skill_where = f"{where}.skills[{j}]"
            if not _check_name(skill, skill_where, errors):
                continue
            if skill["name"] in skill_names:
                errors.append(f"{skill_where}: duplicate skill '{skill['name']}'")
            skill_names.add(skill["name"])
            level = skill.get("difficulty_level", 1)
            if not _is_int(level) or not 1 <= level <= 5:
                errors.append(f"{skill_where}: 'difficulty_level' must be an integer 1-5")

        linked: Set[str] = set()
        for j, cert_name in enumerate(trade.get("certifications", [])):
            if not _is_non_empty_str(cert_name):
                errors.append(f"{where}.certifications[{j}]: must be a certification name")
            elif cert_name in linked:
                errors.append(f"{where}: duplicate certification '{cert_name}'")
            elif cert_name not in cert_names:
                errors.append(f"{where}: unknown certification '{cert_name}'")
            else:
                linked.add(cert_name)

        trades[trade["name"]] = skill_names
    return trades


def _validate_workers(
    items: List[Any],
    trades: Dict[str, Set[str]],
    cert_names: Set[str],
    errors: List[str],
) -> Set[str]:
    skill_owners: Dict[str, List[str]] = {}
    for trade_name, skill_names in trades.items():
        for skill_name in skill_names:
            skill_owners.setdefault(skill_name, []).append(trade_name)

    ids: Set[str] = set()
    for i, worker in enumerate(items):
        where = f"workers[{i}]"
        if not _check_name(worker, where, errors):
            continue
        if not _is_non_empty_str(worker.get("id")):
            errors.append(f"{where}: missing required field 'id'")
        elif worker["id"] in ids:
            errors.append(f"{where}: duplicate worker id '{worker['id']}'")
        else:
            ids.add(worker["id"])
        if not _is_non_empty_str(worker.get("trade")):
            errors.append(f"{where}: missing required field 'trade'")
        experience = worker.get("experience", 0)
        if not _is_int(experience) or experience < 0:
            errors.append(f"{where}: 'experience' must be a non-negative integer")
        if "available" in worker and not isinstance(worker["available"], bool):
            errors.append(f"{where}: 'available' must be a boolean")

        for j, ws in enumerate(worker.get("skills", [])):
            skill_where = f"{where}.skills[{j}]"
            if not _check_name(ws, skill_where, errors):
                continue
            trade_name = ws.get("trade")
            owners = skill_owners.get(ws["name"], [])
            if trade_name is not None:
                if not _is_non_empty_str(trade_name):
                    errors.append(f"{skill_where}: 'trade' must be a trade name")
                elif trade_name not in trades:
                    errors.append(f"{skill_where}: unknown trade '{trade_name}'")
                elif trade_name not in owners:
                    errors.append(f"{skill_where}: unknown skill '{ws['name']}' for trade '{trade_name}'")
            elif not owners:
                errors.append(f"{skill_where}: unknown skill '{ws['name']}'")
            elif len(owners) > 1:
                errors.append(
                    f"{skill_where}: ambiguous skill '{ws['name']}' (defined for {', '.join(owners)}), set 'trade'"
                )
            proficiency = ws.get("proficiency")
            if proficiency is not None and (not _is_int(proficiency) or not 1 <= proficiency <= MAX_PROFICIENCY):
                errors.append(f"{skill_where}: 'proficiency' must be an integer 1-{MAX_PROFICIENCY}")

        for j, wc in enumerate(worker.get("certifications", [])):
            cert_where = f"{where}.certifications[{j}]"
            if not _check_name(wc, cert_where, errors):
                continue
            if wc["name"] not in cert_names:
                errors.append(f"{cert_where}: unknown certification '{wc['name']}'")
            _check_date(wc.get("earned_date"), cert_where, "earned_date", errors)
            _check_date(wc.get("expiry_date"), cert_where, "expiry_date", errors)
    return ids


def _validate_projects(items: List[Any], errors: List[str]) -> Set[str]:
    ids: Set[str] = set()
    for i, project in enumerate(items):
        where = f"projects[{i}]"
        if not _check_name(project, where, errors):
            continue
        if not _is_non_empty_str(project.get("id")):
            errors.append(f"{where}: missing required field 'id'")
        elif project["id"] in ids:
            errors.append(f"{where}: duplicate project id '{project['id']}'")
        else:
            ids.add(project["id"])
        status = project.get("status", "planning")
        if status not in PROJECT_STATUSES:
            errors.append(f"{where}: 'status' must be one of {', '.join(PROJECT_STATUSES)}")
        trades_needed = project.get("trades_needed", [])
        if not isinstance(trades_needed, list) or not all(_is_non_empty_str(t) for t in trades_needed):
            errors.append(f"{where}: 'trades_needed' must be a list of trade names")
    return ids


def _validate_assignments(
    items: List[Any],
    worker_ids: Set[str],
    project_ids: Set[str],
    errors: List[str],
) -> None:
    for i, assignment in enumerate(items):
        where = f"assignments[{i}]"
        if not isinstance(assignment, dict):
            errors.append(f"{where}: must be an object")
            continue
        if assignment.get("worker_id") not in worker_ids:
            errors.append(f"{where}: unknown worker '{assignment.get('worker_id')}'")
        if assignment.get("project_id") not in project_ids:
            errors.append(f"{where}: unknown project '{assignment.get('project_id')}'")
        if assignment.get("role", "crew") not in ASSIGNMENT_ROLES:
            errors.append(f"{where}: 'role' must be one of {', '.join(ASSIGNMENT_ROLES)}")


def validate_seed(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.

    Checks field shapes and that every cross-reference (trade skills,
    certifications, assignment workers/projects) points at something
    declared in the same document.
    """
    if not isinstance(data, dict):
        return ["Seed document must be a JSON object"]

    errors: List[str] = []
    for section in SECTIONS:
        if section in data and not isinstance(data[section], list):
            errors.append(f"Section '{section}' must be a list")
    if errors:
        return errors

    cert_names = _validate_certifications(data.get("certifications", []), errors)
    trades = _validate_trades(data.get("trades", []), cert_names, errors)
    worker_ids = _validate_workers(data.get("workers", []), trades, cert_names, errors)
    project_ids = _validate_projects(data.get("projects", []), errors)
    _validate_assignments(data.get("assignments", []), worker_ids, project_ids, errors)

    return errors
