"""
Tests for the auth gate in front of protected routes.
"""

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from auth.dependencies import authenticate, extract_token
from auth.jwt import TokenService
from utils.errors import Unauthenticated


class TestExtractToken:
    def test_bearer_header(self):
        creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials="tok")
        assert extract_token(creds, None) == "tok"

    def test_bearer_wins_over_legacy_header(self):
        creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials="tok")
        assert extract_token(creds, "legacy") == "tok"

    def test_legacy_header(self):
        assert extract_token(None, "legacy") == "legacy"

    def test_nothing(self):
        assert extract_token(None, None) is None
        assert extract_token(None, "   ") is None


class TestAuthenticate:
    def setup_method(self):
        self.tokens = TokenService("secret", 3600)

    def test_valid_token_resolves_user(self):
        token = self.tokens.issue("user-1")
        assert authenticate(token, self.tokens) == "user-1"

    def test_missing_token(self):
        with pytest.raises(Unauthenticated) as info:
            authenticate(None, self.tokens)
        assert info.value.reason == "missing"
        assert info.value.message == "No token, authorization denied"

    @pytest.mark.parametrize(
        "token, reason",
        [
            ("garbage", "malformed"),
            (TokenService("other", 3600).issue("user-1"), "bad_signature"),
        ],
    )
    def test_invalid_tokens_share_one_message(self, token, reason):
        with pytest.raises(Unauthenticated) as info:
            authenticate(token, self.tokens)
        assert info.value.reason == reason
        assert info.value.message == "Token is not valid"

    def test_expired_token(self):
        expired = TokenService("secret", 1, clock=lambda: 0.0).issue("user-1")
        with pytest.raises(Unauthenticated) as info:
            authenticate(expired, self.tokens)
        assert info.value.reason == "expired"
        assert info.value.message == "Token is not valid"
