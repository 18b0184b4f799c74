import argparse
import json
from pathlib import Path
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from .env import load_env, get_settings

from . import __version__
from .database import init_database, get_session
from .logger import get_logger
from .matching import MatchingEngine, NotFoundError
from .schema import validate_seed
from .seed import SeedError, load_seed, read_seed_file
from .storage import OntologyStore


def _db_path(args: argparse.Namespace) -> Path:
    return Path(args.db) if args.db else get_settings().database_path


def _read_input(args: argparse.Namespace) -> dict:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    try:
        return read_seed_file(input_path)
    except json.JSONDecodeError as e:
        raise SystemExit(f"Input is not valid JSON: {e}")


def _print_score(result) -> None:
    s = result.score
    print(f"  Score: {s.total:.2f}")
    print(
        f"    trade={s.trade_match:.2f} skills={s.skill_proficiency:.2f} "
        f"certs={s.cert_completeness:.2f} availability={s.availability:.2f} "
        f"experience={s.experience:.2f} penalty={s.assignment_penalty:.2f}"
    )
    sd, cd = result.skill_details, result.cert_details
    print(
        f"  Skills: {sd.worker_matched_skills}/{sd.trade_skill_count} matched "
        f"(avg proficiency {sd.avg_proficiency})"
    )
    print(
        f"  Certs: {cd.valid_certs} valid, {cd.expired_certs} expired, "
        f"{cd.missing_certs} missing of {cd.required_cert_count} required"
    )
    if result.already_assigned:
        print("  Already assigned")


def cmd_init_db(args: argparse.Namespace) -> None:
    db_path = _db_path(args)
    init_database(db_path)
    print(f"Database ready: {db_path}")


def cmd_validate(args: argparse.Namespace) -> None:
    data = _read_input(args)
    errors = validate_seed(data)
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def cmd_seed(args: argparse.Namespace) -> None:
    data = _read_input(args)
    db_path = _db_path(args)
    init_database(db_path)
    session = get_session(db_path)
    try:
        counts = load_seed(session, data)
    except SeedError as e:
        print("Invalid:")
        for err in e.errors:
            print(f" - {err}")
        raise SystemExit(2)
    except IntegrityError as e:
        raise SystemExit(f"Seed conflicts with existing rows: {e.orig}")
    finally:
        session.close()
    if not any(counts.values()):
        print("Ontology already seeded, nothing loaded.")
        return
    print("Loaded: " + " ".join(f"{k}={v}" for k, v in counts.items()))


def _run_match(args: argparse.Namespace, direction: str, entity_id: str) -> None:
    db_path = _db_path(args)
    if not db_path.exists():
        raise SystemExit(f"Database not found: {db_path}")
    session = get_session(db_path)
    try:
        engine = MatchingEngine(OntologyStore(session))
        if direction == "workers":
            results = engine.find_workers_for_project(entity_id)
        else:
            results = engine.find_jobs_for_worker(entity_id)

        if args.json:
            print(json.dumps([r.to_dict() for r in results], indent=2))
            return
        if not results:
            print("No matches found.")
            return

        print(f"Top {len(results)} matches:\n")
        for i, result in enumerate(results, start=1):
            if direction == "workers":
                w = result.worker
                print(f"{i}. {w.name} ({w.trade}) [{w.id}] for {result.matched_trade}")
            else:
                p = result.project
                print(f"{i}. {p.name} ({p.client}) [{p.id}] as {result.matched_trade}")
            _print_score(result)
            print()
    except NotFoundError as e:
        raise SystemExit(str(e))
    finally:
        session.close()


def cmd_match_workers(args: argparse.Namespace) -> None:
    _run_match(args, "workers", args.project)


def cmd_match_jobs(args: argparse.Namespace) -> None:
    _run_match(args, "jobs", args.worker)


def main(argv: Optional[List[str]] = None):
    # Load .env if present (CREWMATCH_DB, CREWMATCH_LOG_LEVEL, etc.)
    load_env()
    parser = argparse.ArgumentParser(prog="crewmatch", description="Crew matching for data-center construction projects")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    ini = subparsers.add_parser("init-db", help="Create database tables")
    ini.add_argument("--db", help="Path to SQLite database (default: $CREWMATCH_DB or data/crewmatch.db)")
    ini.set_defaults(func=cmd_init_db)

    val = subparsers.add_parser("validate", help="Validate a seed JSON document")
    val.add_argument("--input", required=True, help="Path to seed JSON")
    val.set_defaults(func=cmd_validate)

    sed = subparsers.add_parser("seed", help="Validate and load a seed JSON document")
    sed.add_argument("--input", required=True, help="Path to seed JSON")
    sed.add_argument("--db", help="Path to SQLite database")
    sed.set_defaults(func=cmd_seed)

    mw = subparsers.add_parser("match-workers", help="Rank workers for a project")
    mw.add_argument("--project", required=True, help="Project id")
    mw.add_argument("--db", help="Path to SQLite database")
    mw.add_argument("--json", action="store_true", help="Print results as JSON")
    mw.set_defaults(func=cmd_match_workers)

    mj = subparsers.add_parser("match-jobs", help="Rank active projects for a worker")
    mj.add_argument("--worker", required=True, help="Worker id")
    mj.add_argument("--db", help="Path to SQLite database")
    mj.add_argument("--json", action="store_true", help="Print results as JSON")
    mj.set_defaults(func=cmd_match_jobs)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        if args.command in ("match-workers", "match-jobs"):
            get_logger().log_metrics_summary()
        return

    parser.print_help()


if __name__ == "__main__":
    main()
