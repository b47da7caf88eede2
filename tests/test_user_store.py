"""Contract tests for the user stores.

The ``store`` fixture is parametrized, so every test runs against both the
in-memory and the SQL implementation.
"""

import os
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from auth_service.database import Base, create_db_engine, create_session_factory, init_db
from auth_service.exceptions import DuplicateEmail, EmailInUse, NotFound
from auth_service.models.user import User
from auth_service.repositories.sql import SqlUserStore


def make_user(name="Alice", email="a@x.com"):
    return User(name=name, email=email, password_hash="$2b$04$placeholder")


def test_create_assigns_id_and_timestamps(store):
    user = store.create(make_user())
    assert user.id is not None
    assert user.created_at is not None
    assert user.updated_at is not None
    assert user.deleted_at is None


def test_create_assigns_distinct_ids(store):
    first = store.create(make_user(email="one@x.com"))
    second = store.create(make_user(email="two@x.com"))
    assert first.id != second.id


def test_create_duplicate_email(store):
    original = store.create(make_user())
    with pytest.raises(DuplicateEmail):
        store.create(make_user(name="Bob"))

    stored = store.find_by_email("a@x.com")
    assert stored.id == original.id
    assert stored.name == "Alice"


def test_email_match_is_case_sensitive(store):
    store.create(make_user(email="a@x.com"))
    with pytest.raises(NotFound):
        store.find_by_email("A@x.com")
    # A differently-cased address is a different email
    assert store.create(make_user(email="A@x.com")).id is not None


def test_find_by_email_and_id(store):
    user = store.create(make_user())
    assert store.find_by_email("a@x.com").id == user.id
    assert store.find_by_id(user.id).email == "a@x.com"


def test_find_missing(store):
    with pytest.raises(NotFound):
        store.find_by_email("nobody@x.com")
    with pytest.raises(NotFound):
        store.find_by_id(12345)


def test_update_name_keeping_email(store):
    user = store.create(make_user())
    user = store.find_by_id(user.id)
    user.name = "Alice2"
    updated = store.update(user)
    assert updated.name == "Alice2"
    assert store.find_by_id(user.id).name == "Alice2"


def test_update_email(store):
    user = store.create(make_user())
    user = store.find_by_id(user.id)
    user.email = "new@x.com"
    store.update(user)
    assert store.find_by_email("new@x.com").id == user.id
    with pytest.raises(NotFound):
        store.find_by_email("a@x.com")


def test_update_to_email_held_by_other_user(store):
    alice = store.create(make_user())
    bob = store.create(make_user(name="Bob", email="b@x.com"))

    bob = store.find_by_id(bob.id)
    bob.email = "a@x.com"
    with pytest.raises(EmailInUse):
        store.update(bob)

    assert store.find_by_id(alice.id).email == "a@x.com"
    assert store.find_by_id(bob.id).email == "b@x.com"


def test_update_missing_user(store):
    ghost = make_user()
    ghost.id = 999
    with pytest.raises(NotFound):
        store.update(ghost)


class TestSoftDelete:
    """Soft-deleted users are invisible and do not hold their email."""

    def _delete(self, store, user_id, request):
        if hasattr(store, "soft_delete"):
            store.soft_delete(user_id)
        else:
            db = request.getfixturevalue("db")
            user = db.get(User, user_id)
            user.soft_delete()
            db.commit()

    def test_deleted_user_is_not_found(self, store, request):
        user = store.create(make_user())
        self._delete(store, user.id, request)
        with pytest.raises(NotFound):
            store.find_by_id(user.id)
        with pytest.raises(NotFound):
            store.find_by_email("a@x.com")

    def test_email_of_deleted_user_can_be_reused(self, store, request):
        user = store.create(make_user())
        self._delete(store, user.id, request)
        replacement = store.create(make_user(name="Alice again"))
        assert replacement.id != user.id


def test_sql_uniqueness_is_enforced_by_database(db):
    """Bypass the store entirely: the index itself rejects a second active row."""
    from sqlalchemy.exc import IntegrityError

    db.add(make_user())
    db.commit()
    db.add(make_user(name="Bob"))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_memory_store_returns_copies(memory_store):
    user = memory_store.create(make_user())
    fetched = memory_store.find_by_id(user.id)
    fetched.email = "changed@x.com"
    assert memory_store.find_by_id(user.id).email == "a@x.com"


@pytest.fixture
def race_engine(settings, tmp_path):
    """Engine whose connections are independent, so two threads really race.

    The default in-memory SQLite test database shares one connection; a file
    database (or the PostgreSQL test database when configured) does not.
    """
    if "postgresql" not in os.getenv("TEST_DATABASE_URL", ""):
        settings = settings.model_copy(update={"database_url": f"sqlite:///{tmp_path}/race.db"})
    engine = create_db_engine(settings)
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


def _race_create(create_with_new_store):
    """Run two ``create`` calls for the same email at once; return outcomes."""
    barrier = threading.Barrier(2)

    def attempt(name):
        user = make_user(name=name, email="race@x.com")
        barrier.wait()
        try:
            create_with_new_store(user)
        except DuplicateEmail:
            return "duplicate"
        return "ok"

    with ThreadPoolExecutor(max_workers=2) as executor:
        return sorted(executor.map(attempt, ["Alice", "Bob"]))


def test_concurrent_create_memory(memory_store):
    assert _race_create(memory_store.create) == ["duplicate", "ok"]
    assert memory_store.find_by_email("race@x.com").name in ("Alice", "Bob")


def test_concurrent_create_sql(race_engine):
    session_factory = create_session_factory(race_engine)

    def create_in_own_session(user):
        with session_factory() as session:
            SqlUserStore(session).create(user)

    assert _race_create(create_in_own_session) == ["duplicate", "ok"]

    with session_factory() as session:
        active = session.query(User).filter(User.email == "race@x.com", User.deleted_at.is_(None))
        assert active.count() == 1
