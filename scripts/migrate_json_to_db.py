#!/usr/bin/env python3
"""
Migrate the candidate collection from the JSON file backend to SQLite.

Usage:
    python scripts/migrate_json_to_db.py --json-dir data --db data/candidates.db
"""

import argparse
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from candidate_manager.catalog import STORAGE_KEY
from candidate_manager.normalize import normalize_fields
from candidate_manager.schema import validate_candidate
from candidate_manager.storage import (
    JsonFileBlobStore,
    PersistenceError,
    SqliteBlobStore,
    deserialize_candidates,
    serialize_candidates,
)


def migrate(json_dir: Path, db_path: Path, key: str = STORAGE_KEY, dry_run: bool = False) -> bool:
    """
    Copy the candidates blob from JSON storage into the SQLite blob table.

    Records that no longer pass validation are skipped and reported.

    Args:
        json_dir: Directory holding ``<key>.json``
        db_path: Path to SQLite database file
        key: Storage key of the collection
        dry_run: If True, don't write to database

    Returns:
        True if the blob was written (or would be, for a dry run)
    """
    source = JsonFileBlobStore(json_dir)
    print(f"Loading candidates from {source.path_for(key)}...")
    try:
        blob = source.get(key)
        if blob is None:
            print("❌ No stored candidates found")
            return False
        candidates = deserialize_candidates(blob)
    except PersistenceError as e:
        print(f"❌ {e}")
        return False

    print(f"Found {len(candidates)} candidates in JSON store")

    kept = []
    seen = set()
    skipped = 0
    for c in candidates:
        if c.id in seen:
            print(f"⚠️  Skipping {c.id}: duplicate id")
            skipped += 1
            continue
        result = validate_candidate(normalize_fields(c.fields()), require_skills=False)
        if not result.is_valid:
            print(f"⚠️  Skipping {c.id} ({c.name}): {', '.join(str(e) for e in result.errors)}")
            skipped += 1
            continue
        seen.add(c.id)
        kept.append(c)

    if dry_run:
        print("\n[DRY RUN] Would migrate the following candidates:")
        for i, c in enumerate(kept[:5], 1):
            print(f"  {i}. {c.id}: {c.name} <{c.email}>")
        if len(kept) > 5:
            print(f"  ... and {len(kept) - 5} more")
        print(f"Skipped: {skipped}")
        return True

    print(f"\nWriting to database at {db_path}...")
    try:
        SqliteBlobStore(db_path).set(key, serialize_candidates(kept))
    except PersistenceError as e:
        print(f"❌ {e}")
        return False

    print(f"✅ Migrated {len(kept)} candidates (skipped {skipped})")
    return True


def main():
    parser = argparse.ArgumentParser(description="Migrate candidates from JSON files to SQLite")
    parser.add_argument("--json-dir", type=Path, default=Path("data"),
                        help="Directory holding the JSON candidates file")
    parser.add_argument("--db", type=Path, default=Path("data/candidates.db"),
                        help="Path to SQLite database file")
    parser.add_argument("--key", default=STORAGE_KEY, help="Storage key of the collection")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be migrated")

    args = parser.parse_args()
    success = migrate(args.json_dir, args.db, key=args.key, dry_run=args.dry_run)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
