#!/usr/bin/env python3
"""
Validate that the SQLite backend holds the same candidates as the JSON backend.

Usage:
    python scripts/validate_migration.py --json-dir data --db data/candidates.db
"""

import argparse
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from candidate_manager.catalog import STORAGE_KEY
from candidate_manager.database import Blob, get_session
from candidate_manager.storage import (
    JsonFileBlobStore,
    PersistenceError,
    SqliteBlobStore,
    deserialize_candidates,
)

FIELDS_TO_CHECK = ["name", "phone", "email", "gender", "experience", "qualification", "skills"]


def load(backend, key):
    blob = backend.get(key)
    return deserialize_candidates(blob) if blob is not None else []


def db_blob_updated_at(db_path: Path, key: str):
    """Return when the blob row was last written, or None if the DB has no such key."""
    session = get_session(db_path)
    try:
        row = session.query(Blob).filter_by(key=key).first()
        return row.updated_at if row is not None else None
    finally:
        session.close()


def validate(json_dir: Path, db_path: Path, key: str = STORAGE_KEY) -> bool:
    """
    Compare JSON and SQLite contents.

    Returns True if they match, False otherwise.
    """
    try:
        json_candidates = {c.id: c for c in load(JsonFileBlobStore(json_dir), key)}
        db_candidates = {c.id: c for c in load(SqliteBlobStore(db_path), key)}
    except PersistenceError as e:
        print(f"❌ {e}")
        return False

    updated_at = db_blob_updated_at(db_path, key)
    if updated_at is None:
        print(f"❌ No '{key}' blob in {db_path}")
        return False
    print(f"  DB blob last written {updated_at:%Y-%m-%d %H:%M:%S}")

    print(f"  JSON: {len(json_candidates)} candidates")
    print(f"  DB:   {len(db_candidates)} candidates")

    if len(json_candidates) != len(db_candidates):
        print(f"\n❌ COUNT MISMATCH: JSON has {len(json_candidates)}, DB has {len(db_candidates)}")
        return False

    print(f"\n✅ Counts match: {len(json_candidates)} candidates in both stores")

    print("\nValidating candidate data...")
    mismatches = []
    missing = []

    for candidate_id, json_c in json_candidates.items():
        db_c = db_candidates.get(candidate_id)
        if db_c is None:
            missing.append(candidate_id)
            continue
        for field in FIELDS_TO_CHECK:
            json_value = getattr(json_c, field)
            db_value = getattr(db_c, field)
            if json_value != db_value:
                mismatches.append({
                    "id": candidate_id,
                    "field": field,
                    "json": json_value,
                    "db": db_value,
                })

    if missing:
        print(f"\n❌ MISSING from DB: {len(missing)} candidates")
        for candidate_id in missing[:5]:
            print(f"   - {candidate_id}")
        if len(missing) > 5:
            print(f"   ... and {len(missing) - 5} more")

    if mismatches:
        print(f"\n❌ DATA MISMATCHES: {len(mismatches)} field differences")
        for mismatch in mismatches[:5]:
            print(f"   - {mismatch['id']}")
            print(f"     {mismatch['field']}: JSON='{mismatch['json']}' vs DB='{mismatch['db']}'")
        if len(mismatches) > 5:
            print(f"   ... and {len(mismatches) - 5} more")

    if not missing and not mismatches:
        print("✅ All candidates validated successfully!")
        return True

    return False


def main():
    parser = argparse.ArgumentParser(description="Validate migration from JSON files to SQLite")
    parser.add_argument("--json-dir", type=Path, default=Path("data"),
                        help="Directory holding the JSON candidates file")
    parser.add_argument("--db", type=Path, default=Path("data/candidates.db"),
                        help="Path to SQLite database file")
    parser.add_argument("--key", default=STORAGE_KEY, help="Storage key of the collection")

    args = parser.parse_args()

    if not args.db.exists():
        print(f"❌ Database file not found: {args.db}")
        sys.exit(1)

    success = validate(args.json_dir, args.db, key=args.key)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
