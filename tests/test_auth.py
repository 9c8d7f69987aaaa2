"""Tests for registration and authentication."""

import pytest

from url_shortener.lib.auth import AuthService
from url_shortener.lib.exceptions import ConflictError, UnauthorizedError, ValidationError


@pytest.fixture
def auth_service(test_db, logger):
    return AuthService(test_db, bcrypt_rounds=4, logger=logger)


@pytest.mark.asyncio
class TestAuthService:
    """Test user registration and credential checks."""

    async def test_register(self, auth_service):
        user = await auth_service.register("alice", "Alice@Example.com", "Secret123")

        assert user.id == 1
        assert user.login == "alice"
        assert user.email == "alice@example.com"
        assert user.password_hash != "Secret123"
        assert user.password_hash.startswith("$2")

    @pytest.mark.parametrize(
        "login,email,password",
        [
            ("al", "alice@example.com", "Secret123"),
            ("al ice", "alice@example.com", "Secret123"),
            ("alice", "not-an-email", "Secret123"),
            ("alice", "alice@example.com", "short1A"),
            ("alice", "alice@example.com", "secret123"),
            ("alice", "alice@example.com", "SecretPass"),
        ],
    )
    async def test_register_invalid(self, auth_service, login, email, password):
        with pytest.raises(ValidationError):
            await auth_service.register(login, email, password)

    async def test_register_duplicate_login(self, auth_service):
        await auth_service.register("alice", "alice@example.com", "Secret123")

        with pytest.raises(ConflictError, match="login"):
            await auth_service.register("alice", "other@example.com", "Secret123")

    async def test_register_duplicate_email_any_case(self, auth_service):
        await auth_service.register("alice", "alice@example.com", "Secret123")

        with pytest.raises(ConflictError, match="email"):
            await auth_service.register("alice2", "ALICE@example.com", "Secret123")

    async def test_authenticate_by_login(self, auth_service):
        user = await auth_service.register("alice", "alice@example.com", "Secret123")

        principal = await auth_service.authenticate("alice", "Secret123")

        assert principal.id == user.id
        assert principal.login == "alice"

    async def test_authenticate_by_email(self, auth_service):
        user = await auth_service.register("alice", "alice@example.com", "Secret123")

        principal = await auth_service.authenticate("Alice@Example.com", "Secret123")

        assert principal.id == user.id

    async def test_authenticate_wrong_password(self, auth_service):
        await auth_service.register("alice", "alice@example.com", "Secret123")

        with pytest.raises(UnauthorizedError):
            await auth_service.authenticate("alice", "Secret124")

    async def test_authenticate_unknown_user(self, auth_service):
        with pytest.raises(UnauthorizedError):
            await auth_service.authenticate("nobody", "Secret123")

    async def test_authenticate_missing_credentials(self, auth_service):
        with pytest.raises(UnauthorizedError):
            await auth_service.authenticate("", "")

    async def test_check_password_rejects_oversized_input(self, auth_service):
        password_hash = auth_service.hash_password("Secret123")

        assert AuthService.check_password("Secret123", password_hash)
        assert not AuthService.check_password("x" * 100, password_hash)
