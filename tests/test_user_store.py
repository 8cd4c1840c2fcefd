"""Tests for app.services.users.UserStore against SQLite (in-memory, plus a shared file for the race)."""

import os
import tempfile
import threading
import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from app.core.database import Database
from app.models import User
from app.services.users import DuplicateEmailError, StoreUnavailableError, UserStore
from helpers import make_database


class TestUserStore(unittest.TestCase):

    def setUp(self) -> None:
        self.database = make_database()
        self.session = self.database.session()
        self.store = UserStore(self.session)

    def tearDown(self) -> None:
        self.session.close()
        self.database.dispose()

    def _insert(self, email: str = "Maria@Example.com") -> User:
        return self.store.insert("  Maria Silva ", email, "(11) 98765-4321", "hash")

    def test_insert_assigns_id_and_canonical_email(self) -> None:
        user = self._insert()
        self.assertEqual(len(user.id), 36)
        self.assertEqual(user.email, "maria@example.com")
        self.assertEqual(user.name, "Maria Silva")
        self.assertEqual(user.role, "user")
        self.assertIsNotNone(user.created_at)

    def test_find_by_email_is_case_insensitive(self) -> None:
        created = self._insert()
        found = self.store.find_by_email("  MARIA@example.COM")
        self.assertIsNotNone(found)
        self.assertEqual(found.id, created.id)
        self.assertIsNone(self.store.find_by_email("other@example.com"))

    def test_find_by_id(self) -> None:
        created = self._insert()
        self.assertEqual(self.store.find_by_id(created.id).email, "maria@example.com")
        self.assertIsNone(self.store.find_by_id("missing"))

    def test_duplicate_insert_raises_and_keeps_one_row(self) -> None:
        self._insert()
        with self.assertRaises(DuplicateEmailError):
            self._insert("MARIA@EXAMPLE.COM")
        self.assertEqual(self.session.query(User).count(), 1)

    def test_session_usable_after_duplicate(self) -> None:
        self._insert()
        with self.assertRaises(DuplicateEmailError):
            self._insert()
        other = self._insert("joao@example.com")
        self.assertEqual(other.email, "joao@example.com")


class TestConcurrentRegistration(unittest.TestCase):
    """Two sessions on a shared sqlite file both pass the lookup, then race to insert."""

    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.database = Database(f"sqlite:///{os.path.join(tmp.name, 'users.db')}")
        self.addCleanup(self.database.dispose)
        self.database.create_all()

    def test_unique_index_decides_the_race(self) -> None:
        barrier = threading.Barrier(2, timeout=10)
        outcomes: list[str] = []
        lock = threading.Lock()

        def register(name: str) -> None:
            session = self.database.session()
            try:
                store = UserStore(session)
                seen = store.find_by_email("race@example.com")
                barrier.wait()
                if seen is not None:
                    outcome = "precheck"
                else:
                    try:
                        store.insert(name, "race@example.com", "(11) 98765-4321", "hash")
                        outcome = "created"
                    except DuplicateEmailError:
                        outcome = "duplicate"
                with lock:
                    outcomes.append(outcome)
            finally:
                session.close()

        threads = [threading.Thread(target=register, args=(n,)) for n in ("Maria", "Joana")]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        self.assertEqual(sorted(outcomes), ["created", "duplicate"])
        session = self.database.session()
        try:
            self.assertEqual(session.query(User).count(), 1)
        finally:
            session.close()


class TestUserStoreUnavailable(unittest.TestCase):
    """Driver failures surface as StoreUnavailableError without leaking detail."""

    def _failing_session(self) -> MagicMock:
        session = MagicMock()
        error = OperationalError("SELECT", {}, Exception("could not connect to server"))
        session.query.side_effect = error
        session.get.side_effect = error
        session.commit.side_effect = error
        return session

    def test_lookup_failure(self) -> None:
        session = self._failing_session()
        with self.assertRaises(StoreUnavailableError) as ctx:
            UserStore(session).find_by_email("a@b.co")
        self.assertNotIn("could not connect", ctx.exception.message)
        session.rollback.assert_called_once()

    def test_find_by_id_failure(self) -> None:
        with self.assertRaises(StoreUnavailableError):
            UserStore(self._failing_session()).find_by_id("u-1")

    def test_insert_failure(self) -> None:
        session = self._failing_session()
        with self.assertRaises(StoreUnavailableError):
            UserStore(session).insert("Maria", "a@b.co", "(11) 98765-4321", "hash")
        session.rollback.assert_called_once()
