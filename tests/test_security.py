"""Testes para hash de senha e tokens JWT."""

from datetime import timedelta

import pytest
from jose import jwt

from app.config.settings import settings
from app.core import security
from app.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    hash_needs_update,
    verify_password,
)
from app.utils.errors import HashingError, InvalidOrExpiredTokenError, SigningError


def _flip_signature_char(token: str) -> str:
    header_payload, signature = token.rsplit(".", 1)
    index = len(signature) // 2
    replacement = "A" if signature[index] != "A" else "B"
    return f"{header_payload}.{signature[:index]}{replacement}{signature[index + 1:]}"


class TestPasswordHash:
    """Hash e verificação de senha com bcrypt."""

    @pytest.mark.parametrize("rounds", [4, 5])
    def test_verify_matches_own_hash(self, rounds):
        hashed = get_password_hash("Secret123!", rounds=rounds)
        assert verify_password("Secret123!", hashed) is True

    def test_verify_rejects_other_password(self):
        hashed = get_password_hash("Secret123!")
        assert verify_password("Secret124!", hashed) is False

    def test_hash_uses_fresh_salt(self):
        first = get_password_hash("Secret123!")
        second = get_password_hash("Secret123!")

        assert first != second
        assert verify_password("Secret123!", first)
        assert verify_password("Secret123!", second)

    def test_hash_never_contains_plaintext(self):
        hashed = get_password_hash("Secret123!")
        assert "Secret123!" not in hashed
        assert hashed.startswith("$2b$04$")

    def test_default_rounds_come_from_settings(self):
        hashed = get_password_hash("Secret123!")
        assert hashed.split("$")[2] == f"{settings.bcrypt_rounds:02d}"

    @pytest.mark.parametrize("rounds", [0, 3, 32])
    def test_hash_rejects_unsupported_rounds(self, rounds):
        with pytest.raises(HashingError):
            get_password_hash("Secret123!", rounds=rounds)

    def test_hash_rejects_password_over_72_bytes(self):
        with pytest.raises(HashingError):
            get_password_hash("a" * 73)

    def test_hash_accepts_password_of_72_bytes(self):
        hashed = get_password_hash("a" * 72)
        assert verify_password("a" * 72, hashed)

    def test_multibyte_password_counts_bytes(self):
        # 37 caracteres de 2 bytes = 74 bytes
        with pytest.raises(HashingError):
            get_password_hash("é" * 37)

    @pytest.mark.parametrize(
        "digest",
        ["", "not-a-hash", "$2b$04$short", "$1$04$" + "a" * 53, "$2b$99$" + "a" * 53],
    )
    def test_verify_rejects_malformed_digest(self, digest):
        with pytest.raises(HashingError):
            verify_password("Secret123!", digest)

    def test_verify_long_password_is_mismatch(self):
        hashed = get_password_hash("Secret123!")
        assert verify_password("a" * 100, hashed) is False

    def test_hash_needs_update(self):
        hashed = get_password_hash("Secret123!", rounds=5)
        assert hash_needs_update(hashed, rounds=5) is False
        assert hash_needs_update(hashed, rounds=4) is True


class TestAccessToken:
    """Emissão e validação de tokens JWT."""

    def test_round_trip_claims(self):
        issued = create_access_token({"sub": "user-1", "email": "alice@x.com"})
        claims = decode_access_token(issued.token)

        assert claims.sub == "user-1"
        assert claims.extra_claims == {"email": "alice@x.com"}
        assert claims.exp - claims.iat == settings.access_token_ttl_seconds
        assert int(issued.expires_at.timestamp()) == claims.exp

    def test_custom_ttl(self):
        issued = create_access_token({"sub": "user-1"}, timedelta(minutes=5))
        claims = decode_access_token(issued.token)
        assert claims.exp - claims.iat == 300

    def test_zero_ttl_is_immediately_expired(self):
        issued = create_access_token({"sub": "user-1"}, timedelta(0))
        with pytest.raises(InvalidOrExpiredTokenError):
            decode_access_token(issued.token)

    def test_token_rejected_after_ttl(self, monkeypatch):
        issued = create_access_token({"sub": "user-1"}, timedelta(minutes=5))
        later = security._utcnow() + timedelta(minutes=5, seconds=1)
        monkeypatch.setattr(security, "_utcnow", lambda: later)

        with pytest.raises(InvalidOrExpiredTokenError):
            decode_access_token(issued.token)

    def test_leeway_extends_validity(self, monkeypatch):
        issued = create_access_token({"sub": "user-1"}, timedelta(minutes=5))
        later = security._utcnow() + timedelta(minutes=5, seconds=1)
        monkeypatch.setattr(security, "_utcnow", lambda: later)
        monkeypatch.setattr(settings, "token_leeway_seconds", 30)

        assert decode_access_token(issued.token).sub == "user-1"

    def test_flipped_signature_is_rejected(self):
        issued = create_access_token({"sub": "user-1"})
        with pytest.raises(InvalidOrExpiredTokenError):
            decode_access_token(_flip_signature_char(issued.token))

    def test_wrong_secret_is_rejected(self, monkeypatch):
        issued = create_access_token({"sub": "user-1"})
        monkeypatch.setattr(settings, "secret_key", "another-secret")

        with pytest.raises(InvalidOrExpiredTokenError):
            decode_access_token(issued.token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "a.b"])
    def test_garbage_token_is_rejected(self, token):
        with pytest.raises(InvalidOrExpiredTokenError):
            decode_access_token(token)

    def test_token_without_sub_is_rejected(self):
        now = int(security._utcnow().timestamp())
        token = jwt.encode(
            {"email": "alice@x.com", "iat": now, "exp": now + 300},
            settings.secret_key,
            algorithm=settings.algorithm,
        )
        with pytest.raises(InvalidOrExpiredTokenError):
            decode_access_token(token)

    @pytest.mark.parametrize(
        "claims",
        [
            {"email": "alice@x.com"},
            {"sub": ""},
            {"sub": 123},
            {"sub": None},
        ],
    )
    def test_issue_requires_string_subject(self, claims):
        with pytest.raises(SigningError):
            create_access_token(claims)

    @pytest.mark.parametrize(
        "claims",
        [
            {"sub": "user-1", "aud": "web"},
            {"sub": "user-1", "nbf": 4102444800},
            {"sub": "user-1", "jti": 42},
        ],
    )
    def test_issue_rejects_claims_the_verifier_refuses(self, claims):
        with pytest.raises(SigningError):
            create_access_token(claims)

    def test_registered_string_claims_round_trip(self):
        issued = create_access_token({"sub": "user-1", "jti": "abc", "iss": "auth-api"})
        claims = decode_access_token(issued.token)
        assert claims.extra_claims == {"jti": "abc", "iss": "auth-api"}

    def test_reserved_claims_are_overwritten(self):
        issued = create_access_token({"sub": "user-1", "exp": 1, "iat": 1})
        claims = decode_access_token(issued.token)
        assert claims.exp > 1

    def test_non_scalar_claim_is_rejected(self):
        with pytest.raises(SigningError):
            create_access_token({"sub": "user-1", "roles": ["admin"]})

    def test_empty_secret_fails_to_sign(self, monkeypatch):
        monkeypatch.setattr(settings, "secret_key", "")
        with pytest.raises(SigningError):
            create_access_token({"sub": "user-1"})
