"""Unit tests for auth/tokens.py -- password hashing and JWT issue/verify.

Covers:
- bcrypt hashes are salted, never equal the plaintext, and verify correctly
- a token verifies immediately after issue and carries the expected claims
- the 24-hour lifetime is the expiry boundary, exclusive at the exp second
- passwords longer than 72 bytes hash and verify on their first 72 bytes
- wrong secret, tampering, and missing claims are all rejected
"""

import time
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth.tokens import InvalidToken, TokenIssuer, TokenVerifier, hash_password, verify_password


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self) -> None:
        hashed = hash_password("p1")
        assert hashed != "p1"
        assert hashed.startswith("$2")

    def test_hash_uses_cost_ten(self) -> None:
        assert hash_password("p1").split("$")[2] == "10"

    def test_same_password_hashes_differently(self) -> None:
        assert hash_password("p1") != hash_password("p1")

    def test_verify_password(self) -> None:
        hashed = hash_password("p1")
        assert verify_password("p1", hashed)
        assert not verify_password("p2", hashed)

    def test_verify_malformed_hash_is_false(self) -> None:
        assert not verify_password("p1", "not-a-bcrypt-hash")

    def test_long_password_hashes_and_verifies(self) -> None:
        password = "x" * 100
        hashed = hash_password(password)
        assert verify_password(password, hashed)
        # Only the first 72 bytes take part in the comparison
        assert verify_password("x" * 72, hashed)
        assert not verify_password("x" * 71, hashed)

    def test_long_multibyte_password(self) -> None:
        password = "\u0939" * 40
        assert verify_password(password, hash_password(password))


class TestIssueVerify:
    def test_round_trip_claims(self, issuer: TokenIssuer, verifier: TokenVerifier) -> None:
        token = issuer.issue("abc123", "user", email="a@x.com")
        claims = verifier.verify(token)
        assert claims["sub"] == "abc123"
        assert claims["role"] == "user"
        assert claims["email"] == "a@x.com"
        assert claims["exp"] - claims["iat"] == 24 * 60 * 60

    def test_email_omitted_when_not_given(self, issuer: TokenIssuer, verifier: TokenVerifier) -> None:
        claims = verifier.verify(issuer.issue("d1", "delivery"))
        assert "email" not in claims
        assert claims["role"] == "delivery"

    def test_accepted_just_before_expiry(self, issuer: TokenIssuer, verifier: TokenVerifier) -> None:
        issued = datetime.now(timezone.utc) - timedelta(hours=24) + timedelta(minutes=1)
        token = issuer.issue("abc123", "user", now=issued)
        assert verifier.verify(token)["sub"] == "abc123"

    def test_rejected_after_expiry(self, issuer: TokenIssuer, verifier: TokenVerifier) -> None:
        issued = datetime.now(timezone.utc) - timedelta(hours=24) - timedelta(seconds=5)
        token = issuer.issue("abc123", "user", now=issued)
        with pytest.raises(InvalidToken):
            verifier.verify(token)

    def test_rejected_at_exact_expiry(self, issuer: TokenIssuer, verifier: TokenVerifier) -> None:
        whole_second = datetime.fromtimestamp(int(time.time()), tz=timezone.utc)
        token = issuer.issue("abc123", "user", now=whole_second - timedelta(hours=24))
        with pytest.raises(InvalidToken):
            verifier.verify(token)

    def test_custom_lifetime(self, verifier: TokenVerifier, signing_secret: str) -> None:
        short = TokenIssuer(signing_secret, lifetime=timedelta(minutes=5))
        issued = datetime.now(timezone.utc) - timedelta(minutes=6)
        with pytest.raises(InvalidToken):
            verifier.verify(short.issue("abc123", "user", now=issued))


class TestRejection:
    def test_wrong_secret(self, issuer: TokenIssuer) -> None:
        other = TokenVerifier("another-signing-secret-0123456789abcdef")
        with pytest.raises(InvalidToken):
            other.verify(issuer.issue("abc123", "user"))

    def test_tampered_token(self, issuer: TokenIssuer, verifier: TokenVerifier) -> None:
        token = issuer.issue("abc123", "user")
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"
        with pytest.raises(InvalidToken):
            verifier.verify(tampered)

    def test_garbage_token(self, verifier: TokenVerifier) -> None:
        with pytest.raises(InvalidToken):
            verifier.verify("not.a.jwt")

    def test_missing_role_claim(self, verifier: TokenVerifier, signing_secret: str) -> None:
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode({"sub": "abc123", "exp": exp}, signing_secret, algorithm="HS256")
        with pytest.raises(InvalidToken):
            verifier.verify(token)

    def test_missing_exp_claim(self, verifier: TokenVerifier, signing_secret: str) -> None:
        token = jwt.encode({"sub": "abc123", "role": "user"}, signing_secret, algorithm="HS256")
        with pytest.raises(InvalidToken):
            verifier.verify(token)
