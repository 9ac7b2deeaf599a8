"""Unit tests for IdentityService."""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from tests.shared.fixtures.fakes import (
    FailingNotifier,
    InMemoryAccountRepository,
    InMemoryPasswordResetTokenRepository,
    RecordingNotifier,
    run_immediately,
)
from warden_auth import IssuedToken, JWTService, PasswordHashingService
from warden_identity import (
    Account,
    DuplicateAccountError,
    Err,
    ErrorKind,
    IdentityService,
    NotificationDispatcher,
    Ok,
    PasswordResetService,
    TokenPair,
    VerificationCodeService,
)
from warden_identity.domain.shared import utc_now

SECRET = "identity-service-test-secret-0123456789"
TEST_EMAIL = "ada@example.com"
TEST_PASSWORD = "Analytical1"


def _build_service(notifier=None, accounts=None, jwt_service=None, **windows):
    accounts = accounts or InMemoryAccountRepository()
    notifier = notifier or RecordingNotifier()
    password_service = PasswordHashingService(rounds=4)
    notifications = NotificationDispatcher(notifier, scheduler=run_immediately)
    jwt_service = jwt_service or JWTService(secret_key=SECRET)

    service = IdentityService(
        account_repository=accounts,
        password_service=password_service,
        jwt_service=jwt_service,
        verification_service=VerificationCodeService(),
        notifications=notifications,
        password_reset_service=PasswordResetService(
            account_repository=accounts,
            token_repository=InMemoryPasswordResetTokenRepository(),
            password_service=password_service,
            notifications=notifications,
            public_base_url="https://auth.example.com",
        ),
        **windows,
    )
    return service, accounts, notifier


class TestSignup:
    def setup_method(self):
        self.service, self.accounts, self.notifier = _build_service()

    @pytest.mark.asyncio
    async def test_signup_creates_disabled_account_and_sends_code(self):
        result = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)

        assert isinstance(result, Ok)
        account = result.value
        assert account.email == TEST_EMAIL
        assert account.display_name == "Ada Lovelace"
        assert not account.enabled
        assert account.password_hash != TEST_PASSWORD
        assert await self.accounts.find_by_email(TEST_EMAIL) is account

        to_email, code = self.notifier.verification_codes[0]
        assert to_email == TEST_EMAIL
        assert code == account.verification_code
        assert 100_000 <= int(code) <= 999_999

    @pytest.mark.asyncio
    async def test_signup_code_expires_in_fifteen_minutes(self):
        before = utc_now()

        result = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)

        expires_at = result.value.verification_code_expires_at
        assert before + timedelta(minutes=15) <= expires_at
        assert expires_at <= utc_now() + timedelta(minutes=15)

    @pytest.mark.asyncio
    async def test_signup_normalizes_email(self):
        result = await self.service.signup(
            "  Ada@Example.COM ",
            "Ada",
            "Lovelace",
            TEST_PASSWORD,
        )

        assert result.value.email == TEST_EMAIL

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("email", "first", "last", "password"),
        [
            ("bad-email", "Ada", "Lovelace", TEST_PASSWORD),
            (TEST_EMAIL, "Ada", "Lovelace", "short1A"),
            (TEST_EMAIL, "Ada", "Lovelace", "nouppercase1"),
            (TEST_EMAIL, "Ada", "Lovelace", "NoDigitsHere"),
            (TEST_EMAIL, " ", "Lovelace", TEST_PASSWORD),
            (TEST_EMAIL, "Ada", "", TEST_PASSWORD),
        ],
    )
    async def test_signup_rejects_invalid_input(self, email, first, last, password):
        result = await self.service.signup(email, first, last, password)

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.VALIDATION_FAILURE
        assert self.accounts.accounts == {}
        assert self.notifier.verification_codes == []

    @pytest.mark.asyncio
    async def test_signup_rejects_verified_duplicate_email(self):
        existing = Account.create(TEST_EMAIL, "Someone", "Else", "hash")
        existing.activate()
        await self.accounts.save(existing)

        result = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.DUPLICATE_ACCOUNT
        assert list(self.accounts.accounts.values()) == [existing]

    @pytest.mark.asyncio
    async def test_signup_reclaims_unverified_email(self):
        stale = Account.create(TEST_EMAIL, "Someone", "Else", "hash")
        await self.accounts.save(stale)

        result = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)

        assert isinstance(result, Ok)
        assert self.accounts.deleted == [stale.id]
        assert (await self.accounts.find_by_email(TEST_EMAIL)).id == result.value.id

    @pytest.mark.asyncio
    async def test_signup_rejects_verified_duplicate_name(self):
        existing = Account.create("other@example.com", "Ada", "Lovelace", "hash")
        existing.activate()
        await self.accounts.save(existing)

        result = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.DUPLICATE_ACCOUNT
        assert "name" in result.message

    @pytest.mark.asyncio
    async def test_pending_name_holder_with_other_email_is_kept(self):
        pending = await self.service.signup(
            "alice@example.com",
            "Ada",
            "Lovelace",
            TEST_PASSWORD,
        )
        code = pending.value.verification_code

        result = await self.service.signup(
            "mallory@example.com",
            "Ada",
            "Lovelace",
            TEST_PASSWORD,
        )

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.DUPLICATE_ACCOUNT
        assert self.accounts.deleted == []
        assert await self.accounts.find_by_email("mallory@example.com") is None
        assert await self.service.verify_account("alice@example.com", code) == Ok()

    @pytest.mark.asyncio
    async def test_same_email_and_name_resignup_replaces_pending_record(self):
        first = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)

        second = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", "Different9")

        assert isinstance(second, Ok)
        assert self.accounts.deleted == [first.value.id]
        assert second.value.display_name == "Ada Lovelace"

    @pytest.mark.asyncio
    async def test_signup_succeeds_when_notification_fails(self):
        service, accounts, _ = _build_service(notifier=FailingNotifier())

        result = await service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)

        assert isinstance(result, Ok)
        assert await accounts.find_by_email(TEST_EMAIL) is not None


class TestSignupWithMocks:
    """Collaborator interaction checks."""

    def setup_method(self):
        self.account_repo = AsyncMock()
        self.account_repo.find_by_email.return_value = None
        self.account_repo.find_by_display_name.return_value = None
        self.password_service = Mock(spec=PasswordHashingService)
        self.password_service.hash.return_value = "hashed_password"
        self.notifications = Mock(spec=NotificationDispatcher)

        self.service = IdentityService(
            account_repository=self.account_repo,
            password_service=self.password_service,
            jwt_service=Mock(spec=JWTService),
            verification_service=VerificationCodeService(),
            notifications=self.notifications,
            password_reset_service=Mock(spec=PasswordResetService),
            code_window=timedelta(minutes=30),
        )

    @pytest.mark.asyncio
    async def test_validation_happens_before_store_access(self):
        await self.service.signup("nope", "Ada", "Lovelace", TEST_PASSWORD)

        self.account_repo.find_by_email.assert_not_called()
        self.account_repo.save.assert_not_called()
        self.password_service.hash.assert_not_called()

    @pytest.mark.asyncio
    async def test_unique_violation_at_save_is_duplicate_account(self):
        self.account_repo.save.side_effect = DuplicateAccountError(TEST_EMAIL)

        result = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.DUPLICATE_ACCOUNT
        self.notifications.verification_code.assert_not_called()

    @pytest.mark.asyncio
    async def test_signup_hashes_saves_and_notifies(self):
        result = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)

        account = result.value
        self.password_service.hash.assert_called_once_with(TEST_PASSWORD)
        self.account_repo.save.assert_awaited_once_with(account)
        self.account_repo.find_by_display_name.assert_awaited_once_with("Ada Lovelace")
        self.notifications.verification_code.assert_called_once_with(
            TEST_EMAIL,
            account.verification_code,
            timedelta(minutes=30),
        )
        assert account.password_hash == "hashed_password"

    @pytest.mark.asyncio
    async def test_code_window_is_configurable(self):
        result = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)

        remaining = result.value.verification_code_expires_at - utc_now()
        assert timedelta(minutes=29) < remaining <= timedelta(minutes=30)


class TestAuthenticate:
    def setup_method(self):
        self.service, self.accounts, self.notifier = _build_service()

    async def _verified_account(self) -> Account:
        result = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)
        account = result.value
        await self.service.verify_account(TEST_EMAIL, account.verification_code)
        return account

    @pytest.mark.asyncio
    async def test_authenticate_returns_token_pair(self):
        await self._verified_account()

        result = await self.service.authenticate(TEST_EMAIL, TEST_PASSWORD)

        assert isinstance(result, Ok)
        tokens = result.value
        assert isinstance(tokens, TokenPair)
        assert tokens.access_token != tokens.refresh_token
        assert tokens.refresh_expires_at > tokens.access_expires_at
        assert tokens.access_expires_at - utc_now() <= timedelta(minutes=15)

    @pytest.mark.asyncio
    async def test_tokens_are_bound_to_the_email(self):
        await self._verified_account()
        jwt_service = JWTService(secret_key=SECRET)

        tokens = (await self.service.authenticate(TEST_EMAIL, TEST_PASSWORD)).value

        assert jwt_service.verify(tokens.access_token).subject == TEST_EMAIL
        assert jwt_service.verify(tokens.refresh_token).subject == TEST_EMAIL

    @pytest.mark.asyncio
    async def test_unknown_email(self):
        result = await self.service.authenticate("nobody@example.com", TEST_PASSWORD)

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_unverified_account_is_rejected_before_password_check(self):
        await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)

        result = await self.service.authenticate(TEST_EMAIL, "Wrong-password-1")

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.NOT_VERIFIED

    @pytest.mark.asyncio
    async def test_wrong_password(self):
        await self._verified_account()

        result = await self.service.authenticate(TEST_EMAIL, "Analytical2")

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.INVALID_CREDENTIALS


class TestRefreshAccessToken:
    def setup_method(self):
        self.jwt_service = JWTService(secret_key=SECRET)
        self.service, self.accounts, _ = _build_service(jwt_service=self.jwt_service)

    async def _login(self):
        result = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)
        await self.service.verify_account(TEST_EMAIL, result.value.verification_code)
        return (await self.service.authenticate(TEST_EMAIL, TEST_PASSWORD)).value

    @pytest.mark.asyncio
    async def test_refresh_issues_new_access_token(self):
        tokens = await self._login()

        result = await self.service.refresh_access_token(tokens.refresh_token)

        assert isinstance(result, Ok)
        assert isinstance(result.value, IssuedToken)
        assert self.jwt_service.verify(result.value.token).subject == TEST_EMAIL

    @pytest.mark.asyncio
    async def test_malformed_token(self):
        result = await self.service.refresh_access_token("garbage")

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_foreign_signature(self):
        await self._login()
        forged = JWTService(secret_key="someone-elses-secret-0123456789")

        result = await self.service.refresh_access_token(
            forged.create_refresh_token(TEST_EMAIL).token,
        )

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_unknown_subject(self):
        token = self.jwt_service.create_refresh_token("ghost@example.com").token

        result = await self.service.refresh_access_token(token)

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_expired_refresh_token(self):
        await self._login()
        expired = self.jwt_service.issue(TEST_EMAIL, timedelta(seconds=-1)).token

        result = await self.service.refresh_access_token(expired)

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.INVALID_TOKEN


class TestVerifyAccount:
    def setup_method(self):
        self.service, self.accounts, self.notifier = _build_service()

    @pytest.mark.asyncio
    async def test_verify_enables_account(self):
        signup = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)
        code = self.notifier.last_code_for(TEST_EMAIL)

        result = await self.service.verify_account(TEST_EMAIL, code)

        assert result == Ok()
        account = signup.value
        assert account.enabled
        assert account.verification_code is None
        assert account.verification_code_expires_at is None

    @pytest.mark.asyncio
    async def test_unknown_account(self):
        result = await self.service.verify_account("ghost@example.com", "123456")

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_wrong_code(self):
        signup = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)
        wrong = "100000" if signup.value.verification_code != "100000" else "100001"

        result = await self.service.verify_account(TEST_EMAIL, wrong)

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.CODE_MISMATCH
        assert not signup.value.enabled

    @pytest.mark.asyncio
    async def test_expired_code(self):
        signup = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)
        account = signup.value
        account.assign_verification_code(
            account.verification_code,
            utc_now() - timedelta(seconds=1),
        )

        result = await self.service.verify_account(TEST_EMAIL, account.verification_code)

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.CODE_EXPIRED
        assert not account.enabled

    @pytest.mark.asyncio
    async def test_already_verified(self):
        signup = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)
        code = signup.value.verification_code
        await self.service.verify_account(TEST_EMAIL, code)

        result = await self.service.verify_account(TEST_EMAIL, code)

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.ALREADY_VERIFIED


class TestResendVerificationCode:
    def setup_method(self):
        self.service, self.accounts, self.notifier = _build_service()

    @pytest.mark.asyncio
    async def test_resend_replaces_code_and_extends_expiry(self):
        signup = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)
        account = signup.value
        account.assign_verification_code("111111", utc_now() - timedelta(minutes=1))

        result = await self.service.resend_verification_code(TEST_EMAIL)

        assert result == Ok()
        assert account.verification_code_expires_at > utc_now()
        assert account.verification_code == self.notifier.last_code_for(TEST_EMAIL)
        assert len(self.notifier.verification_codes) == 2

    @pytest.mark.asyncio
    async def test_resent_code_verifies(self):
        await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)
        await self.service.resend_verification_code(TEST_EMAIL)

        result = await self.service.verify_account(
            TEST_EMAIL,
            self.notifier.last_code_for(TEST_EMAIL),
        )

        assert result == Ok()

    @pytest.mark.asyncio
    async def test_notification_carries_the_window_used(self):
        service, _, notifier = _build_service(
            code_window=timedelta(minutes=15),
            resend_window=timedelta(minutes=40),
        )
        await service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)

        await service.resend_verification_code(TEST_EMAIL)

        assert notifier.code_windows == [timedelta(minutes=15), timedelta(minutes=40)]

    @pytest.mark.asyncio
    async def test_unknown_account(self):
        result = await self.service.resend_verification_code("ghost@example.com")

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_already_verified(self):
        signup = await self.service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD)
        await self.service.verify_account(TEST_EMAIL, signup.value.verification_code)

        result = await self.service.resend_verification_code(TEST_EMAIL)

        assert isinstance(result, Err)
        assert result.kind is ErrorKind.ALREADY_VERIFIED
        assert len(self.notifier.verification_codes) == 1


class TestPasswordResetDelegation:
    def setup_method(self):
        self.reset_service = AsyncMock(spec=PasswordResetService)
        self.service = IdentityService(
            account_repository=AsyncMock(),
            password_service=Mock(spec=PasswordHashingService),
            jwt_service=Mock(spec=JWTService),
            verification_service=VerificationCodeService(),
            notifications=Mock(spec=NotificationDispatcher),
            password_reset_service=self.reset_service,
        )

    @pytest.mark.asyncio
    async def test_request_is_delegated(self):
        self.reset_service.request_reset.return_value = Ok()

        result = await self.service.request_password_reset(TEST_EMAIL)

        assert result == Ok()
        self.reset_service.request_reset.assert_awaited_once_with(TEST_EMAIL)

    @pytest.mark.asyncio
    async def test_reset_is_delegated(self):
        failure = Err(ErrorKind.INVALID_OR_EXPIRED_TOKEN, "nope")
        self.reset_service.reset_password.return_value = failure

        result = await self.service.reset_password("token", "Analytical2")

        assert result == failure
        self.reset_service.reset_password.assert_awaited_once_with(
            "token",
            "Analytical2",
        )


class TestFullLifecycle:
    @pytest.mark.asyncio
    async def test_signup_verify_login_refresh_reset(self):
        jwt_service = JWTService(secret_key=SECRET)
        service, _, notifier = _build_service(jwt_service=jwt_service)

        assert isinstance(
            await service.signup(TEST_EMAIL, "Ada", "Lovelace", TEST_PASSWORD),
            Ok,
        )
        code = notifier.last_code_for(TEST_EMAIL)
        assert await service.verify_account(TEST_EMAIL, code) == Ok()

        tokens = (await service.authenticate(TEST_EMAIL, TEST_PASSWORD)).value
        refreshed = (await service.refresh_access_token(tokens.refresh_token)).value
        assert jwt_service.extract_subject(refreshed.token) == TEST_EMAIL
        assert jwt_service.extract_subject(tokens.access_token) == TEST_EMAIL

        assert await service.request_password_reset(TEST_EMAIL) == Ok()
        link = notifier.last_link_for(TEST_EMAIL)
        token = link.split("token=", 1)[1]
        assert await service.reset_password(token, "Difference2") == Ok()

        old_login = await service.authenticate(TEST_EMAIL, TEST_PASSWORD)
        assert isinstance(old_login, Err)
        assert old_login.kind is ErrorKind.INVALID_CREDENTIALS
        assert isinstance(await service.authenticate(TEST_EMAIL, "Difference2"), Ok)
