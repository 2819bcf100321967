"""
Tests for user_service: registration, usernames, login and reset codes.
"""
import pytest
from sqlalchemy import select, func

from crickheroes.database.models import VerificationCode
from crickheroes.services import auth_service, user_service
from crickheroes.utils.exceptions import (
    AccountNotFound,
    DuplicateCredential,
    InvalidCode,
    InvalidCredentials,
    ValidationError,
)

PASSWORD = "cover-drive-42"


async def _register(session, name="Alex Kumar", phone="9876543210", email=None):
    return await user_service.create_account(
        session,
        name=name,
        phone=phone,
        password_hash=auth_service.hash_password(PASSWORD),
        email=email,
    )


class TestRegistration:
    @pytest.mark.asyncio
    async def test_new_account_is_pending_with_no_likes(self, session):
        account = await _register(session, email="alex@example.com")

        assert account["id"] is not None
        assert account["username"] == "alex-kumar"
        assert account["status"] == "pending"
        assert account["role"] == "player"
        assert account["likes"] == 0
        assert "password_hash" not in account

    @pytest.mark.asyncio
    async def test_username_collisions_get_numeric_suffix(self, session):
        first = await _register(session, phone="1000000001")
        second = await _register(session, phone="1000000002")
        third = await _register(session, phone="1000000003")

        assert first["username"] == "alex-kumar"
        assert second["username"] == "alex-kumar-1"
        assert third["username"] == "alex-kumar-2"

    @pytest.mark.asyncio
    async def test_whitespace_runs_become_single_hyphen(self, session):
        account = await _register(session, name="  Priya   Sharma ")
        assert account["username"] == "priya-sharma"

    @pytest.mark.asyncio
    async def test_duplicate_phone_rejected(self, session):
        await _register(session)
        with pytest.raises(DuplicateCredential) as exc_info:
            await _register(session, name="Someone Else")
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "User with this phone number already exists"

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, session):
        await _register(session, email="alex@example.com")
        with pytest.raises(DuplicateCredential) as exc_info:
            await _register(session, name="Someone Else", phone="1111111111", email="alex@example.com")
        assert exc_info.value.message == "User with this email already exists"

    @pytest.mark.asyncio
    async def test_accounts_without_email_do_not_collide(self, session):
        await _register(session, phone="1000000001")
        await _register(session, name="Priya Sharma", phone="1000000002")

    @pytest.mark.asyncio
    async def test_name_without_letters_rejected(self, session):
        with pytest.raises(ValidationError):
            await _register(session, name="!!!")


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_valid_credentials(self, session):
        await _register(session)
        account = await user_service.authenticate(session, "9876543210", PASSWORD)
        assert account["username"] == "alex-kumar"
        assert "password_hash" not in account

    @pytest.mark.asyncio
    async def test_unknown_phone_and_wrong_password_are_indistinguishable(self, session):
        await _register(session)

        with pytest.raises(InvalidCredentials) as unknown:
            await user_service.authenticate(session, "0000000000", PASSWORD)
        with pytest.raises(InvalidCredentials) as wrong:
            await user_service.authenticate(session, "9876543210", "wrong-password")

        assert unknown.value.message == wrong.value.message == "Invalid phone number or password"
        assert unknown.value.status_code == wrong.value.status_code == 400

    @pytest.mark.asyncio
    async def test_password_can_be_replaced(self, session):
        await _register(session, email="alex@example.com")
        await user_service.create_verification_code(session, "alex@example.com", "123456")
        code_id = await user_service.find_valid_code(session, "alex@example.com", "123456")
        new_hash = auth_service.hash_password("new-password-1")

        await user_service.reset_password_with_code(session, "alex@example.com", code_id, new_hash)
        await user_service.authenticate(session, "9876543210", "new-password-1")
        with pytest.raises(InvalidCredentials):
            await user_service.authenticate(session, "9876543210", PASSWORD)


class TestVerificationCodes:
    @pytest.mark.asyncio
    async def test_valid_code_found(self, session):
        await user_service.create_verification_code(session, "alex@example.com", "123456")
        code_id = await user_service.find_valid_code(session, "alex@example.com", "123456")
        assert code_id is not None

    @pytest.mark.asyncio
    async def test_wrong_code_or_email_not_found(self, session):
        await user_service.create_verification_code(session, "alex@example.com", "123456")
        assert await user_service.find_valid_code(session, "alex@example.com", "654321") is None
        assert await user_service.find_valid_code(session, "priya@example.com", "123456") is None

    @pytest.mark.asyncio
    async def test_expired_code_not_found(self, session):
        await user_service.create_verification_code(
            session, "alex@example.com", "123456", expires_in_minutes=-1
        )
        assert await user_service.find_valid_code(session, "alex@example.com", "123456") is None

    @pytest.mark.asyncio
    async def test_used_code_cannot_be_reused(self, session):
        await _register(session, email="alex@example.com")
        await user_service.create_verification_code(session, "alex@example.com", "123456")
        code_id = await user_service.find_valid_code(session, "alex@example.com", "123456")

        await user_service.reset_password_with_code(
            session, "alex@example.com", code_id, auth_service.hash_password("new-password-1")
        )

        assert await user_service.find_valid_code(session, "alex@example.com", "123456") is None
        with pytest.raises(InvalidCode):
            await user_service.reset_password_with_code(
                session, "alex@example.com", code_id, auth_service.hash_password("other-2")
            )

    @pytest.mark.asyncio
    async def test_racing_resets_use_code_once(self, session_maker):
        async with session_maker() as setup:
            await _register(setup, email="alex@example.com")
            await user_service.create_verification_code(setup, "alex@example.com", "123456")

        async with session_maker() as first, session_maker() as second:
            # Both requests pass the lookup before either consumes the code
            first_id = await user_service.find_valid_code(first, "alex@example.com", "123456")
            second_id = await user_service.find_valid_code(second, "alex@example.com", "123456")
            assert first_id == second_id is not None

            await user_service.reset_password_with_code(
                first, "alex@example.com", first_id, auth_service.hash_password("first-pass-1")
            )
            with pytest.raises(InvalidCode):
                await user_service.reset_password_with_code(
                    second, "alex@example.com", second_id, auth_service.hash_password("second-pass-2")
                )

        async with session_maker() as check:
            await user_service.authenticate(check, "9876543210", "first-pass-1")
            with pytest.raises(InvalidCredentials):
                await user_service.authenticate(check, "9876543210", "second-pass-2")

    @pytest.mark.asyncio
    async def test_code_for_missing_account_is_kept(self, session):
        await user_service.create_verification_code(session, "ghost@example.com", "123456")
        code_id = await user_service.find_valid_code(session, "ghost@example.com", "123456")

        with pytest.raises(AccountNotFound):
            await user_service.reset_password_with_code(
                session, "ghost@example.com", code_id, auth_service.hash_password("pw-1")
            )
        assert await user_service.find_valid_code(session, "ghost@example.com", "123456") == code_id

    @pytest.mark.asyncio
    async def test_new_request_purges_expired_codes(self, session):
        await user_service.create_verification_code(
            session, "old@example.com", "111111", expires_in_minutes=-5
        )
        await user_service.create_verification_code(session, "alex@example.com", "123456")

        result = await session.execute(select(func.count()).select_from(VerificationCode))
        assert result.scalar_one() == 1
