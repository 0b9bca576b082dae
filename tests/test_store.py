"""
Tests for the candidate store: lifecycle, CRUD, write-through and the derived view.
"""

import json

import pytest

from candidate_manager.catalog import SEED_CANDIDATES, STORAGE_KEY
from candidate_manager.models import Candidate
from candidate_manager.schema import ValidationError
from candidate_manager.storage import (
    BlobStore,
    MemoryBlobStore,
    PersistenceError,
    deserialize_candidates,
)
from candidate_manager.store import CandidateStore, NotFoundError


class FailingBackend(BlobStore):
    """Backend whose reads and/or writes always fail."""

    name = "failing"

    def __init__(self, fail_get=True, fail_set=True):
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.data = {}

    def get(self, key):
        if self.fail_get:
            raise PersistenceError("read failed")
        return self.data.get(key)

    def set(self, key, blob):
        if self.fail_set:
            raise PersistenceError("write failed")
        self.data[key] = blob


def persisted(backend, key=STORAGE_KEY):
    return deserialize_candidates(backend.get(key))


class TestLifecycle:
    """Test uninitialized -> ready transition and seeding."""

    def test_not_ready_until_first_access(self, seeded_store, memory_backend):
        assert not seeded_store.is_ready
        assert memory_backend.get(STORAGE_KEY) is None

        seeded_store.list_all()

        assert seeded_store.is_ready

    def test_empty_storage_seeds_sample_set(self, seeded_store, memory_backend):
        """Empty storage at startup yields the seed set, written through."""
        candidates = seeded_store.list_all()

        assert [c.name for c in candidates] == [s["name"] for s in SEED_CANDIDATES]
        assert persisted(memory_backend) == candidates

    def test_seed_ids_unique(self, seeded_store):
        ids = [c.id for c in seeded_store.list_all()]
        assert len(set(ids)) == len(ids) == len(SEED_CANDIDATES)

    def test_loads_existing_storage(self, stored_candidates, quiet_logger):
        backend = MemoryBlobStore({STORAGE_KEY: json.dumps(stored_candidates)})
        store = CandidateStore(backend, logger=quiet_logger)

        candidates = store.list_all()

        assert [c.id for c in candidates] == ["abc123def", "xyz789uvw"]
        assert candidates[0].qualification is None
        assert candidates[1].qualification == "PhD in Physics"

    def test_loads_only_once(self, stored_candidates, quiet_logger):
        """Storage is not re-read after the store is ready."""
        backend = MemoryBlobStore({STORAGE_KEY: json.dumps(stored_candidates)})
        store = CandidateStore(backend, logger=quiet_logger)
        store.list_all()

        backend.set(STORAGE_KEY, "[]")

        assert len(store.list_all()) == 2

    def test_unparsable_storage_reseeds(self, quiet_logger):
        backend = MemoryBlobStore({STORAGE_KEY: "{not json"})
        store = CandidateStore(backend, logger=quiet_logger)

        assert len(store.list_all()) == len(SEED_CANDIDATES)
        assert len(persisted(backend)) == len(SEED_CANDIDATES)

    def test_malformed_records_reseed(self, quiet_logger):
        backend = MemoryBlobStore({STORAGE_KEY: json.dumps([{"id": "1", "name": 5}])})
        store = CandidateStore(backend, logger=quiet_logger)

        assert len(store.list_all()) == len(SEED_CANDIDATES)

    def test_read_failure_reseeds(self, quiet_logger):
        """A failing read at startup is recovered locally, not raised."""
        backend = FailingBackend(fail_get=True, fail_set=False)
        store = CandidateStore(backend, logger=quiet_logger)

        assert len(store.list_all()) == len(SEED_CANDIDATES)
        assert STORAGE_KEY in backend.data

    def test_seed_write_failure_not_raised(self, quiet_logger):
        store = CandidateStore(FailingBackend(), logger=quiet_logger)

        assert len(store.list_all()) == len(SEED_CANDIDATES)
        assert quiet_logger.metrics["persistence_errors"] == 1

    def test_duplicate_stored_ids_dropped(self, stored_candidates, quiet_logger):
        dup = dict(stored_candidates[1], id="abc123def")
        backend = MemoryBlobStore({STORAGE_KEY: json.dumps(stored_candidates + [dup])})
        store = CandidateStore(backend, logger=quiet_logger)

        assert [c.id for c in store.list_all()] == ["abc123def", "xyz789uvw"]

    def test_custom_storage_key(self, memory_backend, quiet_logger):
        store = CandidateStore(memory_backend, storage_key="other", seed=[], logger=quiet_logger)
        store.list_all()
        assert memory_backend.get("other") == "[]"
        assert memory_backend.get(STORAGE_KEY) is None

    def test_page_size_must_be_positive(self, memory_backend, quiet_logger):
        with pytest.raises(ValueError):
            CandidateStore(memory_backend, page_size=0, logger=quiet_logger)


class TestReads:
    """Test list_all and get_by_id."""

    def test_list_all_empty(self, empty_store):
        assert empty_store.list_all() == []

    def test_list_all_returns_copies(self, empty_store, valid_candidate_fields):
        created = empty_store.create(valid_candidate_fields)
        listed = empty_store.list_all()
        listed[0].skills.append("Hacking")
        listed[0].name = "Changed"

        assert empty_store.get_by_id(created.id) == created

    def test_get_by_id(self, empty_store, valid_candidate_fields):
        created = empty_store.create(valid_candidate_fields)
        assert empty_store.get_by_id(created.id) == created

    def test_get_by_id_absent(self, empty_store):
        assert empty_store.get_by_id("missing") is None


class TestCreate:
    """Test candidate creation."""

    def test_create_assigns_unique_id(self, seeded_store, valid_candidate_fields):
        existing = {c.id for c in seeded_store.list_all()}

        created = seeded_store.create(valid_candidate_fields)

        assert created.id not in existing
        matches = [c for c in seeded_store.list_all() if c.id == created.id]
        assert len(matches) == 1
        assert matches[0].fields() == valid_candidate_fields

    def test_create_appends_in_order(self, empty_store, make_fields):
        a = empty_store.create(make_fields(name="Alpha One"))
        b = empty_store.create(make_fields(name="Beta Two"))
        assert [c.id for c in empty_store.list_all()] == [a.id, b.id]

    def test_create_persists(self, empty_store, memory_backend, valid_candidate_fields):
        empty_store.create(valid_candidate_fields)
        assert persisted(memory_backend) == empty_store.list_all()

    def test_create_ignores_supplied_id(self, empty_store, make_fields):
        created = empty_store.create(make_fields(id="chosen-id"))
        assert created.id != "chosen-id"

    def test_create_normalizes_fields(self, empty_store, make_fields):
        created = empty_store.create(make_fields(
            name="  Priya   Natarajan ",
            qualification="   ",
            skills=["Python", " Python ", "SQL", ""],
        ))
        assert created.name == "Priya Natarajan"
        assert created.qualification is None
        assert created.skills == ["Python", "SQL"]

    def test_create_bad_email_rejected(self, empty_store):
        """Bad email fails on the email field; nothing is added."""
        before = len(empty_store.list_all())

        with pytest.raises(ValidationError) as excinfo:
            empty_store.create({
                "name": "Jo",
                "phone": "555",
                "email": "bad-email",
                "gender": "Male",
                "experience": "1 Year",
                "skills": ["X"],
            })

        assert excinfo.value.fields == ["email"]
        assert len(empty_store.list_all()) == before

    def test_create_requires_skill(self, empty_store, memory_backend, make_fields):
        empty_store.list_all()
        blob_before = memory_backend.get(STORAGE_KEY)

        with pytest.raises(ValidationError) as excinfo:
            empty_store.create(make_fields(skills=[]))

        assert "skills" in excinfo.value.fields
        assert memory_backend.get(STORAGE_KEY) == blob_before

    def test_create_write_failure_keeps_memory(self, quiet_logger, valid_candidate_fields):
        """Write failures surface, but the in-memory record stays."""
        backend = FailingBackend(fail_get=False, fail_set=True)
        store = CandidateStore(backend, seed=[], logger=quiet_logger)

        with pytest.raises(PersistenceError):
            store.create(valid_candidate_fields)

        assert len(store.list_all()) == 1

    def test_create_records_metric(self, empty_store, quiet_logger, valid_candidate_fields):
        empty_store.create(valid_candidate_fields)
        assert quiet_logger.metrics["operations"]["create"] == 1


class TestUpdate:
    """Test candidate updates."""

    def test_update_replaces_fields(self, empty_store, memory_backend, make_fields):
        created = empty_store.create(make_fields())
        other = empty_store.create(make_fields(name="Other Person"))

        updated = empty_store.update(created.id, make_fields(
            name="Priya N",
            experience="5 Years",
            qualification=None,
            skills=["React"],
        ))

        assert updated.id == created.id
        assert updated.name == "Priya N"
        assert updated.qualification is None
        assert [c.id for c in empty_store.list_all()] == [created.id, other.id]
        assert persisted(memory_backend) == empty_store.list_all()

    def test_update_allows_empty_skills(self, empty_store, make_fields):
        created = empty_store.create(make_fields())
        updated = empty_store.update(created.id, make_fields(skills=[]))
        assert updated.skills == []

    def test_update_unknown_id(self, seeded_store, valid_candidate_fields):
        before = seeded_store.list_all()

        with pytest.raises(NotFoundError) as excinfo:
            seeded_store.update("missing", valid_candidate_fields)

        assert excinfo.value.candidate_id == "missing"
        assert seeded_store.list_all() == before

    def test_update_invalid_fields(self, empty_store, make_fields):
        created = empty_store.create(make_fields())

        with pytest.raises(ValidationError):
            empty_store.update(created.id, make_fields(gender="Robot"))

        assert empty_store.get_by_id(created.id) == created

    def test_update_uses_memory_not_storage(self, empty_store, memory_backend, make_fields):
        """Update writes from memory even if storage was changed underneath."""
        a = empty_store.create(make_fields(name="Alpha One"))
        b = empty_store.create(make_fields(name="Beta Two"))
        memory_backend.set(STORAGE_KEY, "[]")

        empty_store.update(a.id, make_fields(name="Alpha Prime"))

        assert [c.id for c in persisted(memory_backend)] == [a.id, b.id]

    def test_update_write_failure_keeps_memory(self, quiet_logger, make_fields):
        """A failed write surfaces and the updated record stays in memory."""
        backend = FailingBackend(fail_get=False, fail_set=False)
        store = CandidateStore(backend, seed=[], logger=quiet_logger)
        created = store.create(make_fields())
        backend.fail_set = True

        with pytest.raises(PersistenceError):
            store.update(created.id, make_fields(name="Priya Renamed"))

        assert store.get_by_id(created.id).name == "Priya Renamed"
        assert persisted(backend)[0].name == created.name
        assert quiet_logger.metrics["persistence_errors"] == 1


class TestRemove:
    """Test candidate removal."""

    def test_remove(self, empty_store, memory_backend, make_fields):
        a = empty_store.create(make_fields(name="Alpha One"))
        b = empty_store.create(make_fields(name="Beta Two"))

        empty_store.remove(a.id)

        assert [c.id for c in empty_store.list_all()] == [b.id]
        assert persisted(memory_backend) == empty_store.list_all()
        assert empty_store.get_by_id(a.id) is None

    def test_remove_unknown_id(self, seeded_store, quiet_logger):
        before = seeded_store.list_all()

        with pytest.raises(NotFoundError):
            seeded_store.remove("missing")

        assert seeded_store.list_all() == before
        assert quiet_logger.metrics["not_found"] == 1

    def test_remove_twice(self, empty_store, valid_candidate_fields):
        created = empty_store.create(valid_candidate_fields)
        empty_store.remove(created.id)
        with pytest.raises(NotFoundError):
            empty_store.remove(created.id)

    def test_remove_write_failure_keeps_memory(self, quiet_logger, valid_candidate_fields):
        """A failed write surfaces and the record stays removed in memory."""
        backend = FailingBackend(fail_get=False, fail_set=False)
        store = CandidateStore(backend, seed=[], logger=quiet_logger)
        created = store.create(valid_candidate_fields)
        backend.fail_set = True

        with pytest.raises(PersistenceError):
            store.remove(created.id)

        assert store.list_all() == []
        assert [c.id for c in persisted(backend)] == [created.id]


class TestDerivedView:
    """Test search, filters and pagination through the store."""

    @pytest.fixture
    def filter_store(self, empty_store, make_fields):
        empty_store.create(make_fields(name="Male A", gender="Male", skills=["A"]))
        empty_store.create(make_fields(name="Male B", gender="Male", skills=["B"]))
        empty_store.create(make_fields(name="Male AB", gender="Male", skills=["A", "B"]))
        empty_store.create(make_fields(name="Female A", gender="Female", skills=["A"]))
        empty_store.create(make_fields(name="Female B", gender="Female", skills=["B"]))
        empty_store.create(make_fields(name="Female AB", gender="Female", skills=["A", "B"]))
        return empty_store

    def test_filter_composition(self, filter_store):
        """Gender {Male} AND skills {B}."""
        filter_store.set_filter("gender", ["Male"])
        filter_store.set_filter("skills", ["B"])

        names = [c.name for c in filter_store.derive_view().records]

        assert names == ["Male B", "Male AB"]

    def test_skills_or_within_facet(self, filter_store):
        filter_store.set_filter("skills", ["A", "B"])
        assert filter_store.derive_view().total_count == 6

    def test_search_case_insensitive(self, filter_store):
        filter_store.set_search_term("female")
        assert [c.name for c in filter_store.derive_view().records] == [
            "Female A", "Female B", "Female AB",
        ]

    def test_search_matches_email_and_phone(self, empty_store, make_fields):
        empty_store.create(make_fields(name="Ann Lee", email="ann@corp.io", phone="+44 20 7946 0000"))
        empty_store.create(make_fields(name="Bo Chan", email="bo@corp.io", phone="+1 555 0100"))

        empty_store.set_search_term("ANN@")
        assert [c.name for c in empty_store.derive_view().records] == ["Ann Lee"]

        empty_store.set_search_term("7946")
        assert [c.name for c in empty_store.derive_view().records] == ["Ann Lee"]

    def test_reset_filters_clears_search(self, filter_store):
        filter_store.set_search_term("male a")
        filter_store.set_filter("gender", ["Female"])

        filter_store.reset_filters()

        assert filter_store.search_term == ""
        assert filter_store.filters.is_empty()
        assert filter_store.derive_view().total_count == 6

    def test_unknown_facet(self, empty_store):
        with pytest.raises(ValueError):
            empty_store.set_filter("age", ["30"])

    def test_set_filter_rejects_bare_string(self, empty_store):
        with pytest.raises(ValueError):
            empty_store.set_filter("gender", "Male")
        assert empty_store.filters.gender == []

    def test_set_filter_dedupes_values(self, empty_store):
        empty_store.set_filter("gender", ["Male", "Male", "Other"])
        assert empty_store.filters.gender == ["Male", "Other"]

    def test_filters_property_is_copy(self, empty_store):
        empty_store.filters.gender.append("Male")
        assert empty_store.filters.gender == []

    def test_derive_view_idempotent(self, filter_store):
        filter_store.set_filter("skills", ["A"])
        assert filter_store.derive_view() == filter_store.derive_view()

    def test_pagination_boundaries(self, empty_store, make_fields):
        """11 records, page size 10: two pages, out-of-range pages clamp."""
        for i in range(11):
            empty_store.create(make_fields(name=f"Person {i:02d}"))

        page = empty_store.derive_view()
        assert page.total_pages == 2
        assert len(page.records) == 10

        assert empty_store.go_to_page(0) == 1
        assert empty_store.derive_view().current_page == 1

        assert empty_store.go_to_page(3) == 2
        last = empty_store.derive_view()
        assert last.current_page == 2
        assert [c.name for c in last.records] == ["Person 10"]

    def test_empty_collection_has_one_page(self, empty_store):
        page = empty_store.derive_view()
        assert page.records == []
        assert page.current_page == 1
        assert page.total_pages == 1

    def test_filter_change_resets_page(self, empty_store, make_fields):
        for i in range(11):
            empty_store.create(make_fields(name=f"Person {i:02d}"))
        empty_store.go_to_page(2)

        empty_store.set_search_term("person")

        assert empty_store.current_page == 1

    def test_mutation_resets_page(self, empty_store, make_fields):
        for i in range(11):
            empty_store.create(make_fields(name=f"Person {i:02d}"))
        empty_store.go_to_page(2)

        empty_store.create(make_fields(name="Late Arrival"))

        assert empty_store.current_page == 1

    def test_view_records_are_copies(self, empty_store, valid_candidate_fields):
        created = empty_store.create(valid_candidate_fields)
        empty_store.derive_view().records[0].name = "Mutated"
        assert empty_store.get_by_id(created.id).name == created.name

    def test_custom_page_size(self, memory_backend, quiet_logger, make_fields):
        store = CandidateStore(memory_backend, page_size=3, seed=[], logger=quiet_logger)
        for i in range(7):
            store.create(make_fields(name=f"Person {i}"))
        assert store.derive_view().total_pages == 3


class TestRoundTrip:
    """Persisted blob always matches the in-memory collection."""

    def test_round_trip_after_each_mutation(self, seeded_store, memory_backend, make_fields):
        created = seeded_store.create(make_fields())
        assert persisted(memory_backend) == seeded_store.list_all()

        seeded_store.update(created.id, make_fields(name="Renamed Person", skills=[]))
        assert persisted(memory_backend) == seeded_store.list_all()

        first = seeded_store.list_all()[0]
        seeded_store.remove(first.id)
        assert persisted(memory_backend) == seeded_store.list_all()

    def test_fresh_store_rehydrates(self, empty_store, memory_backend, quiet_logger, make_fields):
        empty_store.create(make_fields(name="Alpha One"))
        empty_store.create(make_fields(name="Beta Two", qualification=None))

        reloaded = CandidateStore(memory_backend, logger=quiet_logger)

        assert reloaded.list_all() == empty_store.list_all()
        assert all(isinstance(c, Candidate) for c in reloaded.list_all())
