"""Unit tests for JWTAuthProvider.

Covers:
- validate_token claim handling (subject required, email optional, anon rejected)
- _get_jwks_keys() fetching, caching, and error handling
- _validate_es256() with mocked JWKS endpoint
- create_token round trip into TokenUser
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import httpx
import pytest
from jose import jwt as jose_jwt

from infrastructure.auth import jwt_provider as jwt_provider_module
from infrastructure.auth.jwt_provider import JWTAuthProvider, _get_jwks_keys
from infrastructure.auth.provider import TokenUser

JWKS_URL = "https://example.supabase.co/auth/v1/.well-known/jwks.json"


def _make_hs256_token(payload: dict, secret: str = "test-secret") -> str:
    """Create an HS256-signed JWT with a given payload."""
    return jose_jwt.encode(payload, secret, algorithm="HS256")


def _mock_jwks_client(response: MagicMock | None = None, error: Exception | None = None):
    client = AsyncMock()
    if error is not None:
        client.get.side_effect = error
    else:
        client.get.return_value = response
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


def _jwks_response(keys: list[dict]) -> MagicMock:
    response = MagicMock()
    response.json.return_value = {"keys": keys}
    response.raise_for_status = MagicMock()
    return response


@pytest.fixture(autouse=True)
def _clear_jwks_cache():
    """Reset the module-level JWKS cache before and after every test."""
    jwt_provider_module._jwks_cache = None
    yield
    jwt_provider_module._jwks_cache = None


@pytest.fixture
def hs256_provider() -> JWTAuthProvider:
    """JWTAuthProvider configured for HS256 (local/test tokens)."""
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


class TestValidateTokenClaims:
    async def test_should_return_user_for_subject_only_token(
        self, hs256_provider: JWTAuthProvider
    ):
        """Email is optional: a subject is enough to identify the profile."""
        user_id = str(uuid4())
        token = _make_hs256_token({"sub": user_id, "exp": 9999999999})

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.id == user_id
        assert result.email == ""

    async def test_should_return_none_when_token_has_no_sub_claim(
        self, hs256_provider: JWTAuthProvider
    ):
        token = _make_hs256_token({"email": "user@example.com", "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_should_return_none_when_token_has_empty_sub(
        self, hs256_provider: JWTAuthProvider
    ):
        token = _make_hs256_token({"sub": "", "email": "user@example.com", "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_should_reject_anon_role(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token({"sub": str(uuid4()), "role": "anon", "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_should_return_none_for_wrong_secret(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token({"sub": str(uuid4()), "exp": 9999999999}, secret="other")

        assert await hs256_provider.validate_token(token) is None

    async def test_should_return_none_for_garbage(self, hs256_provider: JWTAuthProvider):
        assert await hs256_provider.validate_token("not-a-jwt") is None

    async def test_should_read_display_name_from_full_name(
        self, hs256_provider: JWTAuthProvider
    ):
        token = _make_hs256_token(
            {
                "sub": str(uuid4()),
                "user_metadata": {"full_name": "Ann Example"},
                "exp": 9999999999,
            }
        )

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.display_name == "Ann Example"


class TestCreateToken:
    async def test_created_token_validates_back_to_same_user(
        self, hs256_provider: JWTAuthProvider
    ):
        user = TokenUser(id=str(uuid4()), email="ann@example.com", display_name="Ann")

        result = await hs256_provider.validate_token(hs256_provider.create_token(user))

        assert result is not None
        assert result.id == user.id
        assert result.email == "ann@example.com"
        assert result.display_name == "Ann"
        assert result.role == "authenticated"

    async def test_expired_token_is_rejected(self):
        expired = JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=-1)
        token = expired.create_token(TokenUser(id=str(uuid4())))

        validator = JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)

        assert await validator.validate_token(token) is None


class TestGetJwksKeys:
    """Tests for the module-level _get_jwks_keys() helper."""

    async def test_should_return_empty_dict_when_no_supabase_url(self):
        with patch.object(jwt_provider_module, "settings", create=True) as mock_settings:
            mock_settings.supabase_jwks_url = ""

            result = await _get_jwks_keys()

            assert result == {}

    async def test_should_fetch_and_cache_jwks_keys(self):
        client = _mock_jwks_client(
            _jwks_response(
                [
                    {"kid": "key-1", "kty": "EC", "crv": "P-256", "x": "aa", "y": "bb"},
                    {"kid": "key-2", "kty": "EC", "crv": "P-256", "x": "cc", "y": "dd"},
                ]
            )
        )

        with (
            patch.object(jwt_provider_module, "settings", create=True) as mock_settings,
            patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            result = await _get_jwks_keys()

            assert set(result) == {"key-1", "key-2"}
            assert result["key-1"]["kty"] == "EC"

            # Second call is served from the cache
            client.get.reset_mock()
            cached_result = await _get_jwks_keys()
            client.get.assert_not_called()
            assert cached_result == result

    async def test_should_return_empty_dict_on_http_error(self):
        client = _mock_jwks_client(error=httpx.ConnectError("Connection refused"))

        with (
            patch.object(jwt_provider_module, "settings", create=True) as mock_settings,
            patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            result = await _get_jwks_keys()

            assert result == {}
            assert jwt_provider_module._jwks_cache is None

    async def test_should_skip_keys_without_kid(self):
        client = _mock_jwks_client(
            _jwks_response(
                [
                    {"kty": "EC", "crv": "P-256", "x": "aa", "y": "bb"},
                    {"kid": "good-key", "kty": "EC", "crv": "P-256", "x": "cc", "y": "dd"},
                ]
            )
        )

        with (
            patch.object(jwt_provider_module, "settings", create=True) as mock_settings,
            patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client),
        ):
            mock_settings.supabase_jwks_url = JWKS_URL

            result = await _get_jwks_keys()

            assert list(result) == ["good-key"]


class TestValidateEs256:
    async def test_should_return_none_when_header_has_no_kid(
        self, hs256_provider: JWTAuthProvider
    ):
        result = await hs256_provider._validate_es256(
            token="dummy.token.value",
            header={"alg": "ES256"},
        )

        assert result is None

    async def test_should_return_none_when_kid_not_found_in_jwks(
        self, hs256_provider: JWTAuthProvider
    ):
        with patch.object(
            jwt_provider_module, "_get_jwks_keys", new_callable=AsyncMock
        ) as mock_get_jwks:
            mock_get_jwks.return_value = {"other-kid": {"kty": "EC"}}

            result = await hs256_provider._validate_es256(
                token="dummy.token.value",
                header={"alg": "ES256", "kid": "missing-kid"},
            )

            assert result is None
            # Initial lookup plus one refetch
            assert mock_get_jwks.call_count == 2

    async def test_should_refetch_jwks_and_succeed_on_key_rotation(
        self, hs256_provider: JWTAuthProvider
    ):
        key_data = {"kid": "rotated-kid", "kty": "EC", "crv": "P-256"}
        payload = {"sub": str(uuid4())}

        with (
            patch.object(
                jwt_provider_module,
                "_get_jwks_keys",
                new_callable=AsyncMock,
                side_effect=[{}, {"rotated-kid": key_data}],
            ) as mock_get_jwks,
            patch.object(jwt_provider_module, "ECKey") as mock_eckey_cls,
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
        ):
            mock_jwt.decode.return_value = payload

            result = await hs256_provider._validate_es256(
                token="rotated.token.value",
                header={"alg": "ES256", "kid": "rotated-kid"},
            )

            assert result == payload
            assert mock_get_jwks.call_count == 2
            mock_eckey_cls.assert_called_once_with(key_data, algorithm="ES256")
            mock_jwt.decode.assert_called_once_with(
                "rotated.token.value",
                mock_eckey_cls.return_value,
                algorithms=["ES256"],
                options={"verify_aud": False},
            )


class TestValidateTokenEs256Path:
    async def test_should_delegate_to_validate_es256_for_es256_token(
        self, hs256_provider: JWTAuthProvider
    ):
        user_id = str(uuid4())
        payload = {
            "sub": user_id,
            "user_metadata": {"display_name": "ES256 User"},
            "role": "authenticated",
        }

        with (
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
            patch.object(hs256_provider, "_validate_es256", new_callable=AsyncMock) as mock_es256,
        ):
            mock_jwt.get_unverified_header.return_value = {"alg": "ES256", "kid": "k1"}
            mock_es256.return_value = payload

            result = await hs256_provider.validate_token("es256.token.here")

            mock_es256.assert_called_once_with("es256.token.here", {"alg": "ES256", "kid": "k1"})
            assert result is not None
            assert result.id == user_id
            assert result.email == ""
            assert result.display_name == "ES256 User"

    async def test_should_return_none_when_es256_validation_returns_none(
        self, hs256_provider: JWTAuthProvider
    ):
        with (
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
            patch.object(hs256_provider, "_validate_es256", new_callable=AsyncMock) as mock_es256,
        ):
            mock_jwt.get_unverified_header.return_value = {"alg": "ES256", "kid": "k1"}
            mock_es256.return_value = None

            assert await hs256_provider.validate_token("es256.token.here") is None
