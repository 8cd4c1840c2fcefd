"""Tests for the create_user CLI script."""

import unittest
from unittest.mock import MagicMock, patch

from app.models import User
from app.scripts.create_user import main
from helpers import make_database, make_settings

ARGS = ["Ana Lima", "Ana@Example.com", "(11) 91234-5678", "S3curePass"]


@patch("app.scripts.create_user.get_settings", MagicMock(return_value=make_settings()))
class TestCreateUser(unittest.TestCase):

    def setUp(self) -> None:
        self.database = make_database()

    def tearDown(self) -> None:
        self.database.dispose()

    def _users(self) -> list[User]:
        session = self.database.session()
        try:
            return session.query(User).all()
        finally:
            session.close()

    def test_creates_admin(self) -> None:
        self.assertEqual(main([*ARGS, "admin"], database=self.database), 0)
        users = self._users()
        self.assertEqual(len(users), 1)
        self.assertEqual(users[0].email, "ana@example.com")
        self.assertEqual(users[0].role, "admin")
        self.assertTrue(users[0].password_hash.startswith("$2b$04$"))

    def test_rejects_invalid_submission(self) -> None:
        self.assertEqual(main(["Ana", "ana@example.com", "123", "weak"], database=self.database), 1)
        self.assertEqual(self._users(), [])

    def test_rejects_duplicate(self) -> None:
        self.assertEqual(main(ARGS, database=self.database), 0)
        self.assertEqual(main(ARGS, database=self.database), 1)
        self.assertEqual(len(self._users()), 1)
