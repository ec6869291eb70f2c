"""
Tests for partyhub/store.py

PartyStore の初期化・作成・支持・絞り込み/並び替え・デモデータ再投入。
"""
import json
from datetime import datetime, timedelta, timezone

import pytest

from partyhub.errors import NotFoundError, PersistenceError, ValidationError
from partyhub.persistence import MemoryBackend
from partyhub.store import DEFAULT_STORAGE_KEY, PartyStore

from conftest import FakeClock


class FailingBackend(MemoryBackend):
    """set だけ失敗する保存先（容量超過などの再現）"""

    def __init__(self):
        super().__init__()
        self.fail = False

    def set(self, key, value):
        if self.fail:
            raise PersistenceError("quota exceeded")
        super().set(key, value)


# ── initialize ────────────────────────────────────────────────────────────────

class TestInitialize:
    def test_seeds_demo_when_slot_empty(self, store, backend):
        assert [p.id for p in store.parties] == [1, 2, 3]
        assert backend.get(DEFAULT_STORAGE_KEY) is not None

    def test_loads_persisted_list(self, backend, clock, make_input):
        first = PartyStore(backend, clock=clock).initialize()
        created = first.create(make_input())

        second = PartyStore(backend, clock=clock).initialize()
        assert second.parties == first.parties
        assert second.parties[0] == created

    def test_force_reseed_discards_saved_data(self, backend, clock, make_input):
        first = PartyStore(backend, clock=clock).initialize()
        first.create(make_input())

        second = PartyStore(backend, clock=clock).initialize(force_reseed=True)
        assert second.count == 3
        assert [p.name for p in second.parties][0] == "Progressive Democratic Alliance"

    def test_corrupt_slot_raises(self, clock):
        backend = MemoryBackend({DEFAULT_STORAGE_KEY: "{not json"})
        with pytest.raises(PersistenceError):
            PartyStore(backend, clock=clock).initialize()

    def test_non_list_slot_raises(self, clock):
        backend = MemoryBackend({DEFAULT_STORAGE_KEY: json.dumps({"id": 1})})
        with pytest.raises(PersistenceError):
            PartyStore(backend, clock=clock).initialize()

    def test_round_trip_with_real_clock(self, make_input):
        backend = MemoryBackend()
        store = PartyStore(backend).initialize()
        store.create(make_input())

        reloaded = PartyStore(backend).initialize()
        assert reloaded.parties == store.parties

    def test_sub_millisecond_clock_truncated(self, backend, make_input):
        clock = FakeClock(start=datetime(2025, 3, 1, 9, 30, 0, 123456, tzinfo=timezone.utc), step=timedelta(microseconds=777))
        store = PartyStore(backend, clock=clock).initialize()
        party = store.create(make_input())
        assert party.created_at.microsecond % 1000 == 0
        assert all(p.created_at.microsecond % 1000 == 0 for p in store.parties)

        reloaded = PartyStore(backend, clock=clock).initialize()
        assert reloaded.parties == store.parties

    def test_custom_storage_key(self, backend, clock):
        PartyStore(backend, storage_key="other", clock=clock).initialize()
        assert backend.get("other") is not None
        assert backend.get(DEFAULT_STORAGE_KEY) is None


# ── create ────────────────────────────────────────────────────────────────────

class TestCreate:
    def test_new_record_defaults(self, store, make_input):
        party = store.create(make_input())
        assert party.supports == 0
        assert party.id not in (1, 2, 3)
        assert store.parties[0] == party

    def test_ids_unique_with_same_timestamp(self, backend, make_input):
        frozen = FakeClock(step=FakeClock().step * 0)
        store = PartyStore(backend, clock=frozen).initialize()
        ids = {store.create(make_input(name=f"P{i}")).id for i in range(5)}
        assert len(ids) == 5
        assert not ids & {1, 2, 3}

    def test_strips_whitespace(self, store, make_input):
        party = store.create(make_input(name="  Padded  ", founder="\tF\n", ideology=" Other "))
        assert party.name == "Padded"
        assert party.founder == "F"
        assert party.ideology == "Other"

    def test_empty_name_rejected(self, store, backend, make_input):
        before = backend.get(DEFAULT_STORAGE_KEY)
        with pytest.raises(ValidationError) as exc:
            store.create(make_input(name="   "))
        assert exc.value.fields == ["name"]
        assert store.count == 3
        assert backend.get(DEFAULT_STORAGE_KEY) == before

    @pytest.mark.parametrize("field", ["slogan", "description", "color", "ideology", "founder"])
    def test_other_required_fields(self, store, make_input, field):
        with pytest.raises(ValidationError):
            store.create(make_input(**{field: ""}))
        assert store.count == 3

    def test_logo_optional(self, store, make_input):
        assert store.create(make_input()).logo is None
        assert store.create(make_input(logo="data:image/png;base64,AAAA")).logo == "data:image/png;base64,AAAA"

    def test_persistence_failure_keeps_memory_state(self, clock, make_input):
        backend = FailingBackend()
        store = PartyStore(backend, clock=clock).initialize()
        backend.fail = True

        with pytest.raises(PersistenceError):
            store.create(make_input())
        assert store.count == 4
        assert store.parties[0].name == "Test Party"

        # 失敗後も使い続けられる
        backend.fail = False
        store.support_party(2)
        saved = json.loads(backend.get(DEFAULT_STORAGE_KEY))
        assert len(saved) == 4


# ── support_party ─────────────────────────────────────────────────────────────

class TestSupportParty:
    def test_increments_only_target(self, store):
        before = {p.id: p.supports for p in store.parties}
        updated = store.support_party(2)
        assert updated.supports == 6
        after = {p.id: p.supports for p in store.parties}
        assert after == {**before, 2: 6}

    def test_count_matches_calls(self, store, make_input):
        party = store.create(make_input())
        for _ in range(7):
            store.support_party(party.id)
        assert store.get(party.id).supports == 7

    def test_unknown_id(self, store, backend):
        before = backend.get(DEFAULT_STORAGE_KEY)
        with pytest.raises(NotFoundError):
            store.support_party(999)
        assert backend.get(DEFAULT_STORAGE_KEY) == before

    def test_persisted(self, store, backend, clock):
        store.support_party(3)
        reloaded = PartyStore(backend, clock=clock).initialize()
        assert reloaded.get(3).supports == 3

    def test_keeps_created_at(self, store):
        before = store.get(1).created_at
        store.support_party(1)
        assert store.get(1).created_at == before


# ── query ─────────────────────────────────────────────────────────────────────

class TestQuery:
    def test_filter_by_ideology(self, store):
        result = store.query("Conservatism", "popular")
        assert len(result) == 1
        assert result[0].name == "Conservative Unity Party"
        assert result[0].supports == 5

    def test_filter_case_sensitive(self, store):
        assert store.query("conservatism", "popular") == []

    def test_alphabetical(self, store):
        names = [p.name for p in store.query("all", "alphabetical")]
        assert names == ["Conservative Unity Party", "Green Future Coalition", "Progressive Democratic Alliance"]

    def test_popular(self, store):
        assert [p.id for p in store.query("all", "popular")] == [2, 1, 3]

    def test_recent_new_record_first(self, store, make_input):
        party = store.create(make_input())
        assert store.query("all", "recent")[0] == party

    def test_query_does_not_touch_canonical_order(self, store, backend):
        before = store.parties
        saved = backend.get(DEFAULT_STORAGE_KEY)
        result = store.query("all", "alphabetical")
        result.clear()
        assert store.parties == before
        assert backend.get(DEFAULT_STORAGE_KEY) == saved

    def test_unknown_sort_key(self, store):
        with pytest.raises(ValidationError):
            store.query("all", "oldest")


# ── reset / misc ──────────────────────────────────────────────────────────────

class TestResetAndHelpers:
    def test_reset_to_demo(self, store, backend, make_input):
        store.create(make_input())
        store.support_party(1)
        parties = store.reset_to_demo()
        assert [p.supports for p in parties] == [3, 5, 2]
        assert len(json.loads(backend.get(DEFAULT_STORAGE_KEY))) == 3

    def test_ids_not_reused_after_reset(self, store, make_input):
        old = store.create(make_input())
        store.reset_to_demo()
        new = store.create(make_input())
        assert new.id > old.id

    def test_ideologies(self, store, make_input):
        store.create(make_input(ideology="Conservatism"))
        assert store.ideologies() == ["Conservatism", "Social Democracy", "Green Politics"]

    def test_get_unknown(self, store):
        with pytest.raises(NotFoundError):
            store.get(42)
