import pytest

from gatebrawl.storage import STAT_COLUMNS, Database, StorageError


@pytest.fixture
def db():
    database = Database(":memory:")
    database.ensure_schema()
    yield database
    database.close()


def _insert(db, table, cls, level, values):
    cols = ", ".join(("class", "levelid") + STAT_COLUMNS)
    marks = ", ".join("?" * (2 + len(STAT_COLUMNS)))
    db.execute(f"INSERT INTO {table} ({cols}) VALUES ({marks})", (cls, level, *values))


def test_round_trip(db):
    values = tuple(float(i) for i in range(len(STAT_COLUMNS)))
    _insert(db, "origin", "Player", 1, values)
    rows = db.query("SELECT * FROM origin WHERE levelid=? AND class=?", STAT_COLUMNS, (1, "Player"))
    assert rows == [values]


def test_query_selects_columns_in_given_order(db):
    values = tuple(range(len(STAT_COLUMNS)))
    _insert(db, "user", "Enemy1", 2, values)
    rows = db.query("SELECT * FROM user", ["maxhealth", "health", "class"])
    assert rows == [(values[-1], values[0], "Enemy1")]


def test_delete_by_level(db):
    values = tuple(range(len(STAT_COLUMNS)))
    _insert(db, "user", "Boss", 1, values)
    _insert(db, "user", "Boss", 2, values)
    db.execute("DELETE FROM user WHERE levelid=?", (1,))
    assert db.query("SELECT levelid FROM user", ["levelid"]) == [(2,)]


def test_empty_query(db):
    assert db.query("SELECT class FROM user WHERE levelid=1", ["class"]) == []


def test_missing_column_raises(db):
    _insert(db, "user", "Player", 1, tuple(range(len(STAT_COLUMNS))))
    with pytest.raises(StorageError):
        db.query("SELECT class FROM user", ["health"])


def test_bad_sql_raises(db):
    with pytest.raises(StorageError):
        db.execute("INSERT INTO nowhere VALUES (1)")
    with pytest.raises(StorageError):
        db.query("SELECT * FROM nowhere", ["x"])


def test_ensure_schema_is_idempotent(db):
    db.ensure_schema()
    names = db.query("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name", ["name"])
    assert names == [("origin",), ("user",)]


def test_file_persists_and_context_manager_closes(tmp_path):
    path = tmp_path / "database.sqlite"
    with Database(path) as database:
        database.ensure_schema()
        _insert(database, "user", "Player", 1, tuple(range(len(STAT_COLUMNS))))
    with pytest.raises(StorageError):
        database.query("SELECT class FROM user", ["class"])
    with Database(path) as again:
        assert again.query("SELECT class FROM user", ["class"]) == [("Player",)]