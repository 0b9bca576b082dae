"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from pathlib import Path
from typing import Dict, Any

from candidate_manager.logger import StructuredLogger, reset_logger
from candidate_manager.storage import MemoryBlobStore
from candidate_manager.store import CandidateStore


@pytest.fixture
def valid_candidate_fields() -> Dict[str, Any]:
    """Valid candidate fields (no id)."""
    return {
        "name": "Priya Natarajan",
        "phone": "+1 (555) 222-3344",
        "email": "priya.n@example.com",
        "gender": "Female",
        "experience": "4 Years",
        "qualification": "Master of Science (MS)",
        "skills": ["Python", "SQL"],
    }


@pytest.fixture
def invalid_candidate_fields() -> Dict[str, Any]:
    """Invalid candidate (bad email, missing experience, no skills)."""
    return {
        "name": "Jo",
        "phone": "555",
        "email": "bad-email",
        "gender": "Male",
        "skills": [],
    }


@pytest.fixture
def make_fields(valid_candidate_fields):
    """Build candidate fields from the valid defaults plus overrides."""
    def _make(**overrides) -> Dict[str, Any]:
        fields = dict(valid_candidate_fields)
        fields["skills"] = list(fields["skills"])
        fields.update(overrides)
        return fields
    return _make


@pytest.fixture
def quiet_logger(tmp_path) -> StructuredLogger:
    """Logger that writes nowhere but still tracks metrics."""
    return StructuredLogger(
        name="test",
        log_dir=tmp_path,
        enable_console=False,
        enable_file=False,
    )


@pytest.fixture
def memory_backend() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def empty_store(memory_backend, quiet_logger) -> CandidateStore:
    """Store that seeds to an empty collection."""
    return CandidateStore(memory_backend, seed=[], logger=quiet_logger)


@pytest.fixture
def seeded_store(memory_backend, quiet_logger) -> CandidateStore:
    """Store that seeds from the built-in sample candidates."""
    return CandidateStore(memory_backend, logger=quiet_logger)


@pytest.fixture
def stored_candidates() -> list:
    """Serialized candidates as they sit in storage."""
    return [
        {
            "id": "abc123def",
            "name": "Marcus Hale",
            "phone": "+1 (555) 100-2000",
            "email": "marcus.h@example.com",
            "gender": "Male",
            "experience": "2 Years",
            "skills": ["Java", "SQL"],
        },
        {
            "id": "xyz789uvw",
            "name": "Lena Ortiz",
            "phone": "+1 (555) 300-4000",
            "email": "lena.o@example.com",
            "gender": "Female",
            "experience": "6 Years",
            "qualification": "PhD in Physics",
            "skills": ["Python"],
        },
    ]


@pytest.fixture
def populated_data_dir(tmp_path, stored_candidates) -> Path:
    """Data directory holding a JSON candidates blob."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "candidates_data.json").write_text(json.dumps(stored_candidates, indent=2))
    return data_dir


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point CLI configuration at a temporary directory."""
    reset_logger()
    monkeypatch.setenv("CANDIDATES_BACKEND", "json")
    monkeypatch.setenv("CANDIDATES_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("CANDIDATES_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("CANDIDATES_PAGE_SIZE", raising=False)
    monkeypatch.delenv("CANDIDATES_STORAGE_KEY", raising=False)
    monkeypatch.delenv("CANDIDATES_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    reset_logger()
