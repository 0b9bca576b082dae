import argparse
import json
from pathlib import Path
from typing import List, Optional

from .env import load_env

from . import __version__
from .catalog import EXPERIENCE_OPTIONS, GENDER_OPTIONS, SKILLS
from .config import Settings, load_settings
from .logger import get_logger
from .models import Candidate
from .normalize import normalize_fields
from .schema import ValidationError, validate_candidate, validate_candidate_strict
from .storage import BACKENDS, PersistenceError, open_blob_store
from .store import CandidateStore, NotFoundError

TABLE_COLUMNS = ["ID", "Name", "Email", "Phone", "Gender", "Qualification", "Experience", "Skills"]


def build_store(args: argparse.Namespace) -> CandidateStore:
    settings: Settings = args.settings
    logger = get_logger(
        level=settings.log_level,
        log_dir=settings.log_dir,
        enable_console=args.verbose,
    )
    try:
        backend = open_blob_store(settings.backend, settings.data_dir)
    except PersistenceError as e:
        raise SystemExit(str(e))
    return CandidateStore(
        backend,
        page_size=settings.page_size,
        storage_key=settings.storage_key,
        logger=logger,
    )


def candidate_row(c: Candidate) -> List[str]:
    return [
        c.id,
        c.name,
        c.email,
        c.phone,
        c.gender,
        c.qualification or "-",
        c.experience,
        ", ".join(c.skills),
    ]


def render_table(candidates: List[Candidate]) -> str:
    rows = [TABLE_COLUMNS] + [candidate_row(c) for c in candidates]
    widths = [max(len(row[i]) for row in rows) for i in range(len(TABLE_COLUMNS))]
    lines = []
    for n, row in enumerate(rows):
        lines.append("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip())
        if n == 0:
            lines.append("  ".join("-" * w for w in widths))
    return "\n".join(lines)


def print_candidate(c: Candidate) -> None:
    print(f"ID: {c.id}")
    print(f"  Name: {c.name}")
    print(f"  Email: {c.email}")
    print(f"  Phone: {c.phone}")
    print(f"  Gender: {c.gender}")
    print(f"  Experience: {c.experience}")
    print(f"  Qualification: {c.qualification or '-'}")
    print(f"  Skills: {', '.join(c.skills) if c.skills else '-'}")


def print_validation_errors(e: ValidationError) -> None:
    print("Invalid:")
    for err in e.errors:
        print(f" - {err}")


def cmd_list(args: argparse.Namespace) -> None:
    store = build_store(args)
    store.set_search_term(args.search)
    store.set_filter("gender", args.gender or [])
    store.set_filter("experience", args.experience or [])
    store.set_filter("skills", args.skill or [])
    store.go_to_page(args.page)
    page = store.derive_view()

    if not page.records:
        print("No candidates found")
    else:
        print(render_table(page.records))
    print()
    print(f"Page {page.current_page} of {page.total_pages} ({page.total_count} matching)")


def cmd_show(args: argparse.Namespace) -> None:
    store = build_store(args)
    candidate = store.get_by_id(args.id)
    if candidate is None:
        raise SystemExit(f"Candidate not found: {args.id}")
    print_candidate(candidate)


def cmd_add(args: argparse.Namespace) -> None:
    store = build_store(args)
    fields = {
        "name": args.name,
        "phone": args.phone,
        "email": args.email,
        "gender": args.gender,
        "experience": args.experience,
        "qualification": args.qualification,
        "skills": args.skill or [],
    }
    try:
        candidate = store.create(fields)
    except ValidationError as e:
        print_validation_errors(e)
        raise SystemExit(2)
    except PersistenceError as e:
        raise SystemExit(f"Candidate added but not saved: {e}")
    print("Candidate added successfully")
    print_candidate(candidate)


def cmd_update(args: argparse.Namespace) -> None:
    store = build_store(args)
    existing = store.get_by_id(args.id)
    if existing is None:
        raise SystemExit(f"Candidate not found: {args.id}")

    fields = existing.fields()
    for key in ["name", "phone", "email", "gender", "experience", "qualification"]:
        value = getattr(args, key)
        if value is not None:
            fields[key] = value
    if args.clear_skills:
        fields["skills"] = []
    if args.skill:
        fields["skills"] = args.skill

    try:
        candidate = store.update(args.id, fields)
    except NotFoundError as e:
        raise SystemExit(str(e))
    except ValidationError as e:
        print_validation_errors(e)
        raise SystemExit(2)
    except PersistenceError as e:
        raise SystemExit(f"Candidate updated but not saved: {e}")
    print("Candidate updated successfully")
    print_candidate(candidate)


def cmd_delete(args: argparse.Namespace) -> None:
    store = build_store(args)
    try:
        store.remove(args.id)
    except NotFoundError as e:
        raise SystemExit(str(e))
    except PersistenceError as e:
        raise SystemExit(f"Candidate deleted but not saved: {e}")
    print(f"Candidate deleted: {args.id}")


def cmd_validate(args: argparse.Namespace) -> None:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Input is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise SystemExit("Input must be a JSON object")

    fields = normalize_fields(data)
    if args.strict:
        _, errors = validate_candidate_strict(fields)
    else:
        errors = validate_candidate(fields).errors
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def cmd_options(args: argparse.Namespace) -> None:
    print(f"Gender: {', '.join(GENDER_OPTIONS)}")
    print(f"Experience: {', '.join(EXPERIENCE_OPTIONS)}")
    print(f"Skills: {', '.join(SKILLS)}")


def add_field_arguments(p: argparse.ArgumentParser, required: bool) -> None:
    p.add_argument("--name", required=required, help="Full name (at least 2 characters)")
    p.add_argument("--phone", required=required, help="Phone number")
    p.add_argument("--email", required=required, help="Email address")
    p.add_argument("--gender", required=required, help=f"One of: {', '.join(GENDER_OPTIONS)}")
    p.add_argument("--experience", required=required, help="Experience label, e.g. \"3 Years\"")
    p.add_argument("--qualification", help="Optional qualification (empty string clears it)")
    p.add_argument("--skill", action="append", help="Skill; repeat for several")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="candidates", description="Candidate Manager CLI")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--backend", choices=list(BACKENDS), help="Storage backend (default: CANDIDATES_BACKEND or json)")
    parser.add_argument("--data-dir", help="Directory for stored data (default: CANDIDATES_DATA_DIR or data)")
    parser.add_argument("--page-size", type=int, help="Rows per page (default: CANDIDATES_PAGE_SIZE or 10)")
    parser.add_argument("--verbose", action="store_true", help="Echo log lines to the console")

    subparsers = parser.add_subparsers(dest="command")

    lst = subparsers.add_parser("list", help="List candidates with optional search, filters and paging")
    lst.add_argument("--search", default="", help="Case-insensitive match on name, email or phone")
    lst.add_argument("--gender", action="append", help="Gender filter; repeat to allow several")
    lst.add_argument("--experience", action="append", help="Experience filter; repeat to allow several")
    lst.add_argument("--skill", action="append", help="Skill filter; matches candidates with any given skill")
    lst.add_argument("--page", type=int, default=1, help="Page number (clamped to available pages)")
    lst.set_defaults(func=cmd_list)

    shw = subparsers.add_parser("show", help="Show one candidate")
    shw.add_argument("id", help="Candidate id")
    shw.set_defaults(func=cmd_show)

    add = subparsers.add_parser("add", help="Add a candidate")
    add_field_arguments(add, required=True)
    add.set_defaults(func=cmd_add)

    upd = subparsers.add_parser("update", help="Edit a candidate; omitted fields keep their values")
    upd.add_argument("id", help="Candidate id")
    add_field_arguments(upd, required=False)
    upd.add_argument("--clear-skills", action="store_true", help="Remove all skills")
    upd.set_defaults(func=cmd_update)

    dlt = subparsers.add_parser("delete", help="Delete a candidate")
    dlt.add_argument("id", help="Candidate id")
    dlt.set_defaults(func=cmd_delete)

    val = subparsers.add_parser("validate", help="Validate a candidate JSON file")
    val.add_argument("--input", required=True, help="Path to candidate JSON input")
    val.add_argument("--strict", action="store_true", help="Also reject skills outside the catalog")
    val.set_defaults(func=cmd_validate)

    opt = subparsers.add_parser("options", help="Show gender, experience and skill options")
    opt.set_defaults(func=cmd_options)

    return parser


def main(argv: Optional[List[str]] = None):
    # Load .env if present (CANDIDATES_BACKEND, CANDIDATES_DATA_DIR, etc.)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    try:
        settings = load_settings()
    except ValueError as e:
        raise SystemExit(str(e))
    if args.backend:
        settings.backend = args.backend
    if args.data_dir:
        settings.data_dir = Path(args.data_dir)
    if args.page_size is not None:
        if args.page_size < 1:
            raise SystemExit("--page-size must be at least 1")
        settings.page_size = args.page_size
    args.settings = settings

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
