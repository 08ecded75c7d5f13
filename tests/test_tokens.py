"""Unit tests for auth/tokens.py -- bcrypt hashing and JWT issue/verify.

Covers:
- verify(p, hash(p)) holds; a different plaintext does not verify
- two hashes of the same password differ (per-call salt) yet both verify
- cost factor 10 is encoded in the hash
- passwords past 72 bytes (ASCII or multibyte) hash and verify on their prefix
- token decodes to the issuing user id
- expired, wrong-secret, tampered, and malformed tokens are rejected
"""

from datetime import datetime, timedelta, timezone

from jose import jwt

from auth.tokens import create_access_token, decode_access_token, hash_password, verify_password
from core.config import Settings

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


class TestPasswordHashing:
    def test_round_trip(self):
        hashed = hash_password("correct horse")
        assert verify_password("correct horse", hashed)

    def test_other_plaintext_does_not_verify(self):
        hashed = hash_password("correct horse")
        assert not verify_password("battery staple", hashed)

    def test_salt_makes_hashes_unique(self):
        first = hash_password("secret123")
        second = hash_password("secret123")
        assert first != second
        assert verify_password("secret123", first)
        assert verify_password("secret123", second)

    def test_hash_is_not_plaintext(self):
        assert "secret123" not in hash_password("secret123")

    def test_cost_factor_is_ten(self):
        assert hash_password("secret123").startswith("$2b$10$")

    def test_malformed_hash_returns_false(self):
        assert verify_password("secret123", "not-a-bcrypt-hash") is False

    def test_password_past_72_bytes_verifies(self):
        hashed = hash_password("p" * 80)
        assert verify_password("p" * 80, hashed)

    def test_only_first_72_bytes_count(self):
        """bcrypt ignores everything after byte 72; both spellings must agree."""
        hashed = hash_password("a" * 72 + "first-tail")
        assert verify_password("a" * 72 + "other-tail", hashed)
        assert not verify_password("b" + "a" * 71 + "first-tail", hashed)

    def test_multibyte_password_cut_mid_character(self):
        # 71 ASCII bytes then a 3-byte character: the cut lands inside it
        plain = "a" * 71 + "密" * 5
        assert verify_password(plain, hash_password(plain))


# ---------------------------------------------------------------------------
# JWT lifecycle
# ---------------------------------------------------------------------------


class TestAccessToken:
    def test_token_decodes_to_user_id(self, settings: Settings):
        token = create_access_token("abc123", settings)
        payload = decode_access_token(token, settings)
        assert payload is not None
        assert payload["user"] == {"id": "abc123"}

    def test_expiry_window_matches_settings(self, settings: Settings):
        issued = datetime(2030, 1, 1, tzinfo=timezone.utc)
        token = create_access_token("abc123", settings, issued_at=issued)
        claims = jwt.get_unverified_claims(token)
        assert claims["exp"] - claims["iat"] == settings.token_expire_seconds == 360000

    def test_token_valid_just_before_expiry(self, settings: Settings):
        issued = datetime.now(timezone.utc) - timedelta(seconds=settings.token_expire_seconds - 60)
        token = create_access_token("abc123", settings, issued_at=issued)
        assert decode_access_token(token, settings) is not None

    def test_expired_token_rejected(self, settings: Settings):
        issued = datetime.now(timezone.utc) - timedelta(seconds=settings.token_expire_seconds + 1)
        token = create_access_token("abc123", settings, issued_at=issued)
        assert decode_access_token(token, settings) is None

    def test_wrong_secret_rejected(self, settings: Settings):
        other = Settings(debug=True, jwt_secret="another-secret-0123456789abcdefghij")
        token = create_access_token("abc123", other)
        assert decode_access_token(token, settings) is None

    def test_tampered_payload_rejected(self, settings: Settings):
        """Splice the payload of a token for another user onto a valid signature."""
        victim = create_access_token("victim", settings)
        attacker = create_access_token("attacker", settings)
        header, _payload, signature = attacker.split(".")
        forged = ".".join([header, victim.split(".")[1], signature])
        assert decode_access_token(forged, settings) is None

    def test_malformed_token_rejected(self, settings: Settings):
        assert decode_access_token("not.a.jwt", settings) is None
        assert decode_access_token("garbage", settings) is None

    def test_token_without_user_claim_rejected(self, settings: Settings):
        token = jwt.encode(
            {"sub": "abc123", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            settings.jwt_secret,
            algorithm="HS256",
        )
        assert decode_access_token(token, settings) is None
