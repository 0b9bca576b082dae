"""
Candidate collection manager.

Owns the canonical list of candidates, mirrors it into a blob backend after
every mutation, and derives the searched, filtered and paginated view.

Invariant:
The in-memory list is the only source of truth. Storage is written from it
and read from exactly once, when the store first becomes ready.
"""

from typing import Any, Dict, Iterable, List, Optional

from .catalog import DEFAULT_PAGE_SIZE, FACETS, SEED_CANDIDATES, STORAGE_KEY
from .logger import StructuredLogger, get_logger
from .models import Candidate, FilterState, PageView, generate_id
from .normalize import normalize_fields
from .schema import ValidationError, validate_candidate
from .storage import BlobStore, PersistenceError, deserialize_candidates, serialize_candidates
from . import view


class NotFoundError(Exception):
    """Raised when no candidate has the requested identifier."""

    def __init__(self, candidate_id: str):
        self.candidate_id = candidate_id
        super().__init__(f"Candidate not found: {candidate_id}")


class CandidateStore:
    def __init__(
        self,
        backend: BlobStore,
        page_size: int = DEFAULT_PAGE_SIZE,
        storage_key: str = STORAGE_KEY,
        seed: Optional[Iterable[Dict[str, Any]]] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Args:
            backend: Blob backend the collection is mirrored into
            page_size: Records per page of the derived view
            storage_key: Key the serialized collection lives under
            seed: Records (without ids) used when storage holds nothing
                usable; defaults to the built-in sample candidates
            logger: Logger for operations and failures
        """
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.backend = backend
        self.page_size = page_size
        self.storage_key = storage_key
        self.seed = list(SEED_CANDIDATES if seed is None else seed)
        self.logger = logger or get_logger()

        self._candidates: Optional[List[Candidate]] = None
        self._search_term = ""
        self._filters = FilterState()
        self._page = 1

    # Lifecycle

    @property
    def is_ready(self) -> bool:
        return self._candidates is not None

    def _ensure_loaded(self) -> List[Candidate]:
        if self._candidates is None:
            self._candidates = self._load()
        return self._candidates

    def _load(self) -> List[Candidate]:
        try:
            blob = self.backend.get(self.storage_key)
        except PersistenceError as e:
            self.logger.warning("Could not read stored candidates, reseeding", error=str(e))
            blob = None

        if blob is not None:
            try:
                candidates = deserialize_candidates(blob)
            except PersistenceError as e:
                self.logger.warning("Stored candidates unreadable, reseeding", error=str(e))
            else:
                candidates = self._drop_duplicate_ids(candidates)
                self.logger.info(
                    "Loaded candidates from storage",
                    count=len(candidates),
                    backend=self.backend.name,
                )
                return candidates

        return self._seed()

    def _drop_duplicate_ids(self, candidates: List[Candidate]) -> List[Candidate]:
        seen = set()
        unique = []
        for c in candidates:
            if c.id in seen:
                self.logger.warning("Dropping stored candidate with duplicate id", id=c.id, name=c.name)
                continue
            seen.add(c.id)
            unique.append(c)
        return unique

    def _seed(self) -> List[Candidate]:
        ids = set()
        candidates = []
        for entry in self.seed:
            candidate = self._build(self._new_id(ids), normalize_fields(entry))
            ids.add(candidate.id)
            candidates.append(candidate)

        try:
            self.backend.set(self.storage_key, serialize_candidates(candidates))
        except PersistenceError as e:
            self.logger.record_persistence_error()
            self.logger.error("Failed to write seed candidates", error=str(e))
        self.logger.info("Seeded candidates", count=len(candidates), backend=self.backend.name)
        return candidates

    def _persist(self) -> None:
        try:
            self.backend.set(self.storage_key, serialize_candidates(self._candidates or []))
        except PersistenceError as e:
            self.logger.record_persistence_error()
            self.logger.error("Failed to persist candidates", error=str(e), key=self.storage_key)
            raise

    # Helpers

    @staticmethod
    def _new_id(existing) -> str:
        candidate_id = generate_id()
        while candidate_id in existing:
            candidate_id = generate_id()
        return candidate_id

    @staticmethod
    def _build(candidate_id: str, data: Dict[str, Any]) -> Candidate:
        return Candidate(
            id=candidate_id,
            name=data["name"],
            phone=data["phone"],
            email=data["email"],
            gender=data["gender"],
            experience=data["experience"],
            skills=list(data.get("skills") or []),
            qualification=data.get("qualification"),
        )

    def _index_of(self, candidate_id: str) -> int:
        for i, c in enumerate(self._ensure_loaded()):
            if c.id == candidate_id:
                return i
        self.logger.record_not_found()
        self.logger.warning("Candidate not found", id=candidate_id)
        raise NotFoundError(candidate_id)

    def _validated(self, fields: Dict[str, Any], require_skills: bool) -> Dict[str, Any]:
        data = normalize_fields(fields)
        result = validate_candidate(data, require_skills=require_skills)
        if not result.is_valid:
            self.logger.record_validation_failure()
            self.logger.warning("Candidate failed validation", fields=result.fields())
            raise ValidationError(result.errors)
        return data

    # Reads

    def list_all(self) -> List[Candidate]:
        return [c.copy() for c in self._ensure_loaded()]

    def get_by_id(self, candidate_id: str) -> Optional[Candidate]:
        for c in self._ensure_loaded():
            if c.id == candidate_id:
                return c.copy()
        return None

    # Mutations

    def create(self, fields: Dict[str, Any]) -> Candidate:
        """
        Validate and append a new candidate, then persist the collection.

        Raises:
            ValidationError: If any field is missing or malformed
            PersistenceError: If the write-through fails (the record stays in memory)
        """
        candidates = self._ensure_loaded()
        data = self._validated(fields, require_skills=True)

        candidate = self._build(self._new_id({c.id for c in candidates}), data)
        candidates.append(candidate)
        self._page = 1
        self._persist()

        self.logger.record_operation("create")
        self.logger.info("Created candidate", id=candidate.id, name=candidate.name)
        return candidate.copy()

    def update(self, candidate_id: str, fields: Dict[str, Any]) -> Candidate:
        """
        Replace every field of an existing candidate, keeping its id and position.

        Raises:
            NotFoundError: If no candidate has ``candidate_id``
            ValidationError: If any field is malformed (skills may be empty)
            PersistenceError: If the write-through fails
        """
        index = self._index_of(candidate_id)
        data = self._validated(fields, require_skills=False)

        candidate = self._build(candidate_id, data)
        self._candidates[index] = candidate
        self._page = 1
        self._persist()

        self.logger.record_operation("update")
        self.logger.info("Updated candidate", id=candidate_id)
        return candidate.copy()

    def remove(self, candidate_id: str) -> None:
        """
        Raises:
            NotFoundError: If no candidate has ``candidate_id``
            PersistenceError: If the write-through fails
        """
        index = self._index_of(candidate_id)
        del self._candidates[index]
        self._page = 1
        self._persist()

        self.logger.record_operation("remove")
        self.logger.info("Removed candidate", id=candidate_id)

    # View inputs

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def filters(self) -> FilterState:
        return self._filters.copy()

    @property
    def current_page(self) -> int:
        return self._page

    def set_search_term(self, term: Optional[str]) -> None:
        self._search_term = term or ""
        self._page = 1

    def set_filter(self, facet: str, values: Iterable[str]) -> None:
        if facet not in FACETS:
            raise ValueError(f"Unknown filter facet '{facet}'. Use one of: {', '.join(FACETS)}")
        if isinstance(values, str):
            raise ValueError(f"Filter values for '{facet}' must be a list of strings, not a single string")
        selected: List[str] = []
        for value in values:
            if value not in selected:
                selected.append(value)
        setattr(self._filters, facet, selected)
        self._page = 1

    def reset_filters(self) -> None:
        """Clear every facet and the search term."""
        self._filters = FilterState()
        self._search_term = ""
        self._page = 1

    def go_to_page(self, page: int) -> int:
        """Move the page cursor, clamped to the pages of the current view."""
        matching = view.filter_candidates(self._ensure_loaded(), self._search_term, self._filters)
        pages = view.total_pages(len(matching), self.page_size)
        self._page = view.clamp_page(page, pages)
        return self._page

    def derive_view(self) -> PageView:
        result = view.derive_view(
            self._ensure_loaded(),
            self._search_term,
            self._filters,
            self._page,
            self.page_size,
        )
        result.records = [c.copy() for c in result.records]
        self.logger.debug(
            "Derived view",
            filters=view.describe_filters(self._search_term, self._filters),
            page=result.current_page,
            total_pages=result.total_pages,
            matches=result.total_count,
        )
        return result
