"""
Tests for partyhub/persistence (memory / JSON file / SQLAlchemy)
"""
import pytest

from partyhub.db.base import Base, make_engine, make_session_factory
from partyhub.errors import PersistenceError
from partyhub.persistence import JsonFileBackend, MemoryBackend, SqlBackend
from partyhub.store import PartyStore

from conftest import FakeClock


@pytest.fixture
def sql_backend(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'partyhub.db'}")
    Base.metadata.create_all(bind=engine)
    yield SqlBackend(make_session_factory(engine))
    engine.dispose()


@pytest.fixture(params=["memory", "file", "sql"])
def any_backend(request, tmp_path):
    if request.param == "memory":
        return MemoryBackend()
    if request.param == "file":
        return JsonFileBackend(tmp_path / "data")
    return request.getfixturevalue("sql_backend")


class TestSlotContract:
    def test_missing_key(self, any_backend):
        assert any_backend.get("nothing") is None

    def test_set_get_overwrite(self, any_backend):
        any_backend.set("k", "[1]")
        any_backend.set("k", "[1, 2]")
        assert any_backend.get("k") == "[1, 2]"

    def test_remove(self, any_backend):
        any_backend.set("k", "[]")
        any_backend.remove("k")
        any_backend.remove("k")
        assert any_backend.get("k") is None

    def test_store_round_trip(self, any_backend, make_input):
        store = PartyStore(any_backend, clock=FakeClock()).initialize()
        store.create(make_input(name="Ünïcode Party", logo="data:image/gif;base64,R0lG"))
        store.support_party(1)

        reloaded = PartyStore(any_backend, clock=FakeClock()).initialize()
        assert reloaded.parties == store.parties


class TestJsonFileBackend:
    def test_key_sanitized(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        assert backend.path_for("../evil key").parent == tmp_path

    def test_creates_directory(self, tmp_path):
        backend = JsonFileBackend(tmp_path / "a" / "b")
        backend.set("politicalParties", "[]")
        assert (tmp_path / "a" / "b" / "politicalParties.json").read_text(encoding="utf-8") == "[]"

    def test_no_temp_files_left(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        backend.set("k", "[]")
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test_unwritable_root(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        backend = JsonFileBackend(blocker / "sub")
        with pytest.raises(PersistenceError):
            backend.set("k", "[]")


class TestSqlBackend:
    def test_missing_table_raises_persistence_error(self, tmp_path):
        engine = make_engine(f"sqlite:///{tmp_path / 'empty.db'}")
        backend = SqlBackend(make_session_factory(engine))
        with pytest.raises(PersistenceError):
            backend.get("politicalParties")
        engine.dispose()
