"""Unit tests for app.core.security: bcrypt hashing and the access/refresh token issuer."""

import unittest
from datetime import timedelta

import jwt

from app.core.errors import InvalidTokenError
from app.core.security import TokenIssuer, hash_password, verify_password
from helpers import ACCESS_SECRET, REFRESH_SECRET, make_settings


def _issuer(**kwargs: object) -> TokenIssuer:
    values = {"access_secret": ACCESS_SECRET, "refresh_secret": REFRESH_SECRET}
    values.update(kwargs)
    return TokenIssuer(**values)


class TestPasswordHashing(unittest.TestCase):

    def test_hash_is_salted_and_verifies(self) -> None:
        first = hash_password("Secret123", rounds=4)
        second = hash_password("Secret123", rounds=4)
        self.assertNotEqual(first, second)
        self.assertNotIn("Secret123", first)
        self.assertTrue(verify_password("Secret123", first))
        self.assertFalse(verify_password("secret123", first))

    def test_work_factor_is_encoded_in_hash(self) -> None:
        self.assertTrue(hash_password("Secret123", rounds=5).startswith("$2b$05$"))

    def test_malformed_hash_does_not_verify(self) -> None:
        self.assertFalse(verify_password("Secret123", "not-a-bcrypt-hash"))


class TestTokenIssuer(unittest.TestCase):

    def test_access_token_claims(self) -> None:
        issuer = _issuer()
        token = issuer.issue_access_token("u-1", "maria@example.com", "user")
        claims = issuer.verify_access_token(token)
        self.assertEqual(claims["sub"], "u-1")
        self.assertEqual(claims["email"], "maria@example.com")
        self.assertEqual(claims["role"], "user")
        self.assertEqual(claims["type"], "access")
        self.assertEqual(claims["exp"] - claims["iat"], 15 * 60)

    def test_refresh_token_claims(self) -> None:
        issuer = _issuer()
        claims = issuer.verify_refresh_token(issuer.issue_refresh_token("u-1"))
        self.assertEqual(claims["sub"], "u-1")
        self.assertEqual(claims["type"], "refresh")
        self.assertNotIn("email", claims)
        self.assertEqual(claims["exp"] - claims["iat"], 7 * 24 * 3600)

    def test_tokens_use_distinct_secrets(self) -> None:
        issuer = _issuer()
        access = issuer.issue_access_token("u-1", "maria@example.com", "user")
        refresh = issuer.issue_refresh_token("u-1")
        jwt.decode(access, ACCESS_SECRET, algorithms=["HS256"])
        jwt.decode(refresh, REFRESH_SECRET, algorithms=["HS256"])
        with self.assertRaises(jwt.InvalidSignatureError):
            jwt.decode(refresh, ACCESS_SECRET, algorithms=["HS256"])

    def test_refresh_token_rejected_as_access(self) -> None:
        issuer = _issuer()
        with self.assertRaises(InvalidTokenError):
            issuer.verify_access_token(issuer.issue_refresh_token("u-1"))

    def test_access_token_rejected_as_refresh(self) -> None:
        issuer = _issuer()
        with self.assertRaises(InvalidTokenError):
            issuer.verify_refresh_token(issuer.issue_access_token("u-1", "a@b.co", "user"))

    def test_type_marker_checked_even_with_shared_secret(self) -> None:
        issuer = _issuer(refresh_secret=ACCESS_SECRET)
        refresh = issuer.issue_refresh_token("u-1")
        with self.assertRaises(InvalidTokenError):
            issuer.verify_access_token(refresh)

    def test_expired_token(self) -> None:
        issuer = _issuer(access_ttl=timedelta(minutes=-1))
        token = issuer.issue_access_token("u-1", "a@b.co", "user")
        with self.assertRaises(InvalidTokenError):
            issuer.verify_access_token(token)

    def test_tampered_signature(self) -> None:
        issuer = _issuer()
        header, payload, signature = issuer.issue_access_token("u-1", "a@b.co", "user").split(".")
        flipped = "A" if signature[5] != "A" else "B"
        tampered = ".".join([header, payload, signature[:5] + flipped + signature[6:]])
        with self.assertRaises(InvalidTokenError):
            issuer.verify_access_token(tampered)

    def test_garbage_token(self) -> None:
        with self.assertRaises(InvalidTokenError):
            _issuer().verify_access_token("not.a.token")

    def test_missing_subject_rejected(self) -> None:
        token = jwt.encode({"type": "access", "iat": 0, "exp": 4102444800}, ACCESS_SECRET, algorithm="HS256")
        with self.assertRaises(InvalidTokenError):
            _issuer().verify_access_token(token)

    def test_issue_pair(self) -> None:
        pair = _issuer().issue_pair("u-1", "a@b.co", "admin")
        self.assertEqual(pair.expires_in, 900)
        self.assertTrue(pair.expires_at.endswith("Z"))
        self.assertNotEqual(pair.access_token, pair.refresh_token)

    def test_from_settings(self) -> None:
        settings = make_settings(JWT_EXPIRE_MINUTES=5, JWT_REFRESH_EXPIRE_DAYS=2)
        issuer = TokenIssuer.from_settings(settings)
        self.assertEqual(issuer.access_ttl, timedelta(minutes=5))
        self.assertEqual(issuer.refresh_ttl, timedelta(days=2))
        self.assertEqual(issuer.access_secret, ACCESS_SECRET)
        self.assertEqual(issuer.refresh_secret, REFRESH_SECRET)


class TestSettingsValidation(unittest.TestCase):

    def test_identical_jwt_secrets_rejected(self) -> None:
        with self.assertRaises(ValueError):
            make_settings(JWT_REFRESH_SECRET=ACCESS_SECRET)

    def test_bcrypt_rounds_bounds(self) -> None:
        with self.assertRaises(ValueError):
            make_settings(BCRYPT_ROUNDS=3)

    def test_cors_origins_list(self) -> None:
        settings = make_settings(CORS_ORIGINS=" https://a.example , ,https://b.example")
        self.assertEqual(settings.cors_origins_list, ["https://a.example", "https://b.example"])
