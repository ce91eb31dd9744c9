import unittest
from datetime import timedelta
from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.core.exceptions import (
    AssetUploadError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from src.shared.models.user import User
from src.shared.repositories.user_repository import UserRepository
from src.shared.services.auth_service import AuthService
from src.shared.services.token_service import (
    INVALID_REFRESH_TOKEN,
    REFRESH_TOKEN_REUSED,
    TokenService,
)
from src.shared.utils.security import SecurityUtils
from tests.fakes import InMemoryAssetStore, make_database, make_settings, temp_asset


class AuthServiceTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.settings = make_settings()
        self.database = await make_database()
        self.asset_store = InMemoryAssetStore()

    async def asyncTearDown(self) -> None:
        await self.database.close()

    async def call(self, method: str, *args, **kwargs):
        async with self.database.session() as session:
            service = AuthService(session, self.asset_store, self.settings)
            return await getattr(service, method)(*args, **kwargs)

    async def load_user(self, user_id) -> User:
        async with self.database.session() as session:
            return await UserRepository(session).get(user_id)

    async def register_alice(self, **overrides) -> User:
        fields = dict(
            username="alice",
            email="a@x.com",
            full_name="Alice A",
            password="secret123",
            avatar=temp_asset("me.png"),
        )
        fields.update(overrides)
        return await self.call("register", **fields)


class RegisterTests(AuthServiceTestCase):
    async def test_register_normalizes_and_hashes(self):
        user = await self.register_alice(username="  Alice ", email=" A@X.com ")

        self.assertEqual(user.username, "alice")
        self.assertEqual(user.email, "a@x.com")
        self.assertNotEqual(user.password_hash, "secret123")
        self.assertTrue(user.verify_password("secret123"))
        self.assertTrue(user.avatar_url.startswith("https://cdn.test/"))
        self.assertEqual(user.cover_image_url, "")
        self.assertIsNone(user.refresh_token)
        self.assertEqual(user.watch_history, [])

    async def test_register_with_cover_image(self):
        user = await self.register_alice(cover_image=temp_asset("cover.png"))

        self.assertTrue(user.cover_image_url.endswith("cover.png"))
        self.assertEqual(self.asset_store.uploaded, ["me.png", "cover.png"])

    async def test_duplicate_username_in_any_case_conflicts(self):
        await self.register_alice()

        with self.assertRaises(ConflictError):
            await self.register_alice(username="ALICE", email="other@x.com")

    async def test_duplicate_email_conflicts(self):
        await self.register_alice()

        with self.assertRaises(ConflictError):
            await self.register_alice(username="bob", email="A@x.com")

    async def test_blank_field_rejected(self):
        with self.assertRaisesRegex(ValidationError, "All fields are required"):
            await self.register_alice(full_name="   ")

    async def test_missing_avatar_rejected(self):
        with self.assertRaisesRegex(ValidationError, "Avatar file is required"):
            await self.register_alice(avatar=None)

    async def test_avatar_upload_failure_creates_no_user(self):
        self.asset_store.fail_on.add("me.png")

        with self.assertRaises(AssetUploadError):
            await self.register_alice()

        async with self.database.session() as session:
            self.assertIsNone(await UserRepository(session).get_by_username("alice"))

    async def test_avatar_upload_failure_skips_cover_upload(self):
        self.asset_store.fail_on.add("me.png")

        with self.assertRaises(AssetUploadError):
            await self.register_alice(cover_image=temp_asset("cover.png"))

        self.assertEqual(self.asset_store.uploaded, [])

    async def test_cover_upload_failure_is_not_fatal(self):
        self.asset_store.fail_on.add("cover.png")

        user = await self.register_alice(cover_image=temp_asset("cover.png"))

        self.assertEqual(user.cover_image_url, "")


class SessionLifecycleTests(AuthServiceTestCase):
    async def asyncSetUp(self) -> None:
        await super().asyncSetUp()
        self.user = await self.register_alice()

    async def test_login_issues_tokens_and_stores_refresh_token(self):
        user, tokens = await self.call("login", password="secret123", username="Alice")

        claims = SecurityUtils.decode_token(tokens.access_token, self.settings.ACCESS_TOKEN_SECRET)
        self.assertEqual(claims["id"], str(self.user.id))
        self.assertEqual(claims["username"], "alice")

        stored = await self.load_user(user.id)
        self.assertEqual(stored.refresh_token, tokens.refresh_token)

    async def test_login_by_email(self):
        user, _ = await self.call("login", password="secret123", email="A@X.COM")

        self.assertEqual(user.id, self.user.id)

    async def test_login_failures(self):
        with self.assertRaises(ValidationError):
            await self.call("login", password="secret123")
        with self.assertRaises(NotFoundError):
            await self.call("login", password="secret123", username="nobody")
        with self.assertRaisesRegex(UnauthorizedError, "Invalid user credentials"):
            await self.call("login", password="wrong", username="alice")

    async def test_refresh_rotates_and_rejects_reuse(self):
        _, first = await self.call("login", password="secret123", username="alice")

        second = await self.call("refresh", first.refresh_token)

        self.assertNotEqual(second.refresh_token, first.refresh_token)
        stored = await self.load_user(self.user.id)
        self.assertEqual(stored.refresh_token, second.refresh_token)

        with self.assertRaises(UnauthorizedError) as ctx:
            await self.call("refresh", first.refresh_token)
        self.assertEqual(ctx.exception.message, REFRESH_TOKEN_REUSED)

        # The replayed token did not disturb the current one
        stored = await self.load_user(self.user.id)
        self.assertEqual(stored.refresh_token, second.refresh_token)

    async def test_rotation_that_loses_a_race_is_rejected(self):
        _, tokens = await self.call("login", password="secret123", username="alice")

        async with self.database.session() as slow:
            stale_user = await UserRepository(slow).get(self.user.id)

            winner = await self.call("refresh", tokens.refresh_token)

            with self.assertRaises(UnauthorizedError) as ctx:
                await TokenService(slow, self.settings).issue_token_pair(
                    stale_user,
                    expected_refresh_token=tokens.refresh_token,
                )
            self.assertEqual(ctx.exception.message, REFRESH_TOKEN_REUSED)

        stored = await self.load_user(self.user.id)
        self.assertEqual(stored.refresh_token, winner.refresh_token)

    async def test_expired_refresh_token_is_invalid(self):
        await self.call("login", password="secret123", username="alice")
        expired = SecurityUtils.create_token(
            {"id": str(self.user.id)},
            self.settings.REFRESH_TOKEN_SECRET,
            timedelta(minutes=-5),
        )

        with self.assertRaises(UnauthorizedError) as ctx:
            await self.call("refresh", expired)
        self.assertEqual(ctx.exception.message, INVALID_REFRESH_TOKEN)

    async def test_login_fails_when_refresh_token_cannot_be_committed(self):
        with patch.object(AsyncSession, "commit", side_effect=SQLAlchemyError("disk I/O error")):
            with self.assertRaises(InternalError):
                await self.call("login", password="secret123", username="alice")

        self.assertIsNone((await self.load_user(self.user.id)).refresh_token)

    async def test_second_login_invalidates_first_refresh_token(self):
        _, first = await self.call("login", password="secret123", username="alice")
        await self.call("login", password="secret123", username="alice")

        with self.assertRaisesRegex(UnauthorizedError, REFRESH_TOKEN_REUSED):
            await self.call("refresh", first.refresh_token)

    async def test_logout_then_refresh_fails(self):
        _, tokens = await self.call("login", password="secret123", username="alice")

        await self.call("logout", self.user.id)
        await self.call("logout", self.user.id)

        self.assertIsNone((await self.load_user(self.user.id)).refresh_token)
        with self.assertRaisesRegex(UnauthorizedError, REFRESH_TOKEN_REUSED):
            await self.call("refresh", tokens.refresh_token)

    async def test_refresh_rejects_garbage_and_access_tokens(self):
        _, tokens = await self.call("login", password="secret123", username="alice")

        for presented in ("not-a-jwt", tokens.access_token):
            with self.assertRaises(UnauthorizedError) as ctx:
                await self.call("refresh", presented)
            self.assertEqual(ctx.exception.message, INVALID_REFRESH_TOKEN)

        with self.assertRaisesRegex(UnauthorizedError, "Unauthorized request"):
            await self.call("refresh", None)


class AccountTests(AuthServiceTestCase):
    async def asyncSetUp(self) -> None:
        await super().asyncSetUp()
        self.user = await self.register_alice()

    async def test_wrong_old_password_leaves_hash_unchanged(self):
        with self.assertRaisesRegex(UnauthorizedError, "Invalid old password"):
            await self.call("change_password", self.user.id, "wrong", "newpass1")

        stored = await self.load_user(self.user.id)
        self.assertEqual(stored.password_hash, self.user.password_hash)

    async def test_change_password(self):
        await self.call("change_password", self.user.id, "secret123", "newpass1")

        await self.call("login", password="newpass1", username="alice")
        with self.assertRaises(UnauthorizedError):
            await self.call("login", password="secret123", username="alice")

    async def test_update_account_details_keeps_password(self):
        updated = await self.call("update_account_details", self.user.id, "Alice B", "New@X.com")

        self.assertEqual(updated.full_name, "Alice B")
        self.assertEqual(updated.email, "new@x.com")
        self.assertEqual(updated.password_hash, self.user.password_hash)

    async def test_update_account_email_conflict(self):
        await self.register_alice(username="bob", email="b@x.com")

        with self.assertRaisesRegex(ConflictError, "Email is already in use"):
            await self.call("update_account_details", self.user.id, "Alice", "b@x.com")

    async def test_email_claimed_after_check_conflicts(self):
        await self.register_alice(username="bob", email="b@x.com")

        with patch.object(UserRepository, "email_taken_by_other", return_value=False):
            with self.assertRaisesRegex(ConflictError, "Email is already in use"):
                await self.call("update_account_details", self.user.id, "Alice", "b@x.com")

        stored = await self.load_user(self.user.id)
        self.assertEqual(stored.email, "a@x.com")

    async def test_update_account_requires_both_fields(self):
        with self.assertRaises(ValidationError):
            await self.call("update_account_details", self.user.id, "Alice", None)

    async def test_update_avatar(self):
        updated = await self.call("update_avatar", self.user.id, temp_asset("new.png"))

        self.assertNotEqual(updated.avatar_url, self.user.avatar_url)
        self.assertTrue(updated.avatar_url.endswith("new.png"))

    async def test_update_cover_image_requires_file(self):
        with self.assertRaises(ValidationError):
            await self.call("update_cover_image", self.user.id, None)


if __name__ == "__main__":
    unittest.main()
