import tempfile
import unittest
from unittest.mock import patch

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.main import create_application
from src.shared.repositories.user_repository import UserRepository
from tests.fakes import InMemoryAssetStore, make_database, make_settings

USERS = "/api/v1/users"


class ApiTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.settings = make_settings(
            UPLOAD_TEMP_DIR=tempfile.mkdtemp(),
            LOCAL_ASSET_DIR=tempfile.mkdtemp(),
        )
        self.database = await make_database()
        self.asset_store = InMemoryAssetStore()
        app = create_application(self.settings, database=self.database, asset_store=self.asset_store)
        self.client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://testserver",
        )

    async def asyncTearDown(self) -> None:
        await self.client.aclose()
        await self.database.close()

    async def register(self, username="alice", email="a@x.com", avatar=True):
        files = {"avatar": ("me.png", b"\x89PNG-avatar", "image/png")} if avatar else None
        return await self.client.post(
            f"{USERS}/register",
            data={
                "username": username,
                "email": email,
                "full_name": username.title(),
                "password": "secret123",
            },
            files=files,
        )

    async def login(self, username="alice", password="secret123"):
        return await self.client.post(
            f"{USERS}/login",
            json={"username": username, "password": password},
        )


class RegisterApiTests(ApiTestCase):
    async def test_register_returns_sanitized_user(self):
        response = await self.register()

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["username"], "alice")
        self.assertEqual(body["full_name"], "Alice")
        self.assertNotIn("password", body)
        self.assertNotIn("password_hash", body)
        self.assertNotIn("refresh_token", body)
        self.assertEqual(self.asset_store.uploaded, ["me.png"])

    async def test_register_without_avatar(self):
        response = await self.register(avatar=False)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["code"], "VALIDATION_ERROR")

    async def test_register_duplicate(self):
        await self.register()

        response = await self.register(username="Alice", email="other@x.com")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"]["code"], "CONFLICT")

    async def test_register_upload_failure(self):
        self.asset_store.fail_on.add("me.png")

        response = await self.register()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"]["message"], "Avatar upload failed")


class SessionApiTests(ApiTestCase):
    async def asyncSetUp(self) -> None:
        await super().asyncSetUp()
        await self.register()

    async def test_login_sets_http_only_cookies(self):
        response = await self.login()

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user"]["username"], "alice")
        self.assertNotIn("refresh_token", body["user"])

        set_cookies = response.headers.get_list("set-cookie")
        self.assertEqual(len(set_cookies), 2)
        for header in set_cookies:
            self.assertIn("httponly", header.lower())
        self.assertEqual(response.cookies["accessToken"], body["access_token"])
        self.assertEqual(response.cookies["refreshToken"], body["refresh_token"])

    async def test_wrong_password(self):
        response = await self.login(password="nope")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"]["message"], "Invalid user credentials")

    async def test_unknown_user(self):
        response = await self.login(username="nobody")

        self.assertEqual(response.status_code, 404)

    async def test_login_without_durable_refresh_token(self):
        with patch.object(AsyncSession, "commit", side_effect=SQLAlchemyError("disk I/O error")):
            response = await self.login()

        self.assertEqual(response.status_code, 500)
        body = response.json()
        self.assertEqual(body["error"]["code"], "INTERNAL_ERROR")
        self.assertNotIn("access_token", body)
        self.assertNotIn("refresh_token", body)
        self.assertEqual(response.headers.get_list("set-cookie"), [])

        async with self.database.session() as session:
            user = await UserRepository(session).get_by_username("alice")
        self.assertIsNone(user.refresh_token)

    async def test_current_user_via_cookie_and_bearer(self):
        tokens = (await self.login()).json()

        by_cookie = await self.client.get(f"{USERS}/current-user")
        self.assertEqual(by_cookie.status_code, 200)
        self.assertEqual(by_cookie.json()["username"], "alice")

        self.client.cookies.clear()
        by_header = await self.client.get(
            f"{USERS}/current-user",
            headers={"Authorization": f"Bearer {tokens['access_token']}"},
        )
        self.assertEqual(by_header.status_code, 200)

    async def test_current_user_requires_token(self):
        response = await self.client.get(f"{USERS}/current-user")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"]["code"], "UNAUTHORIZED")

    async def test_current_user_rejects_bad_token(self):
        response = await self.client.get(
            f"{USERS}/current-user",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        self.assertEqual(response.status_code, 401)

    async def test_refresh_via_cookie_then_replay_via_body(self):
        first = (await self.login()).json()

        rotated = await self.client.post(f"{USERS}/refresh-token")
        self.assertEqual(rotated.status_code, 200)
        self.assertNotEqual(rotated.json()["refresh_token"], first["refresh_token"])
        self.assertEqual(rotated.cookies["refreshToken"], rotated.json()["refresh_token"])

        self.client.cookies.clear()
        replay = await self.client.post(
            f"{USERS}/refresh-token",
            json={"refresh_token": first["refresh_token"]},
        )
        self.assertEqual(replay.status_code, 401)
        self.assertEqual(replay.json()["error"]["message"], "Refresh token is expired or used")

    async def test_refresh_without_token(self):
        response = await self.client.post(f"{USERS}/refresh-token")

        self.assertEqual(response.status_code, 401)

    async def test_logout_clears_session(self):
        tokens = (await self.login()).json()

        response = await self.client.post(f"{USERS}/logout")
        self.assertEqual(response.status_code, 200)
        self.assertNotIn("refreshToken", self.client.cookies)

        replay = await self.client.post(
            f"{USERS}/refresh-token",
            json={"refresh_token": tokens["refresh_token"]},
        )
        self.assertEqual(replay.status_code, 401)


class AccountApiTests(ApiTestCase):
    async def asyncSetUp(self) -> None:
        await super().asyncSetUp()
        await self.register()
        await self.login()

    async def test_change_password(self):
        wrong = await self.client.post(
            f"{USERS}/change-password",
            json={"old_password": "nope", "new_password": "newpass1"},
        )
        self.assertEqual(wrong.status_code, 401)

        ok = await self.client.post(
            f"{USERS}/change-password",
            json={"old_password": "secret123", "new_password": "newpass1"},
        )
        self.assertEqual(ok.status_code, 200)
        self.assertEqual((await self.login(password="newpass1")).status_code, 200)

    async def test_update_account(self):
        response = await self.client.patch(
            f"{USERS}/update-account",
            json={"full_name": "Alice B", "email": "b@x.com"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["email"], "b@x.com")

    async def test_update_avatar(self):
        before = (await self.client.get(f"{USERS}/current-user")).json()["avatar_url"]

        response = await self.client.patch(
            f"{USERS}/avatar",
            files={"avatar": ("new.png", b"\x89PNG-new", "image/png")},
        )

        self.assertEqual(response.status_code, 200)
        self.assertNotEqual(response.json()["avatar_url"], before)

    async def test_update_cover_image_requires_file(self):
        response = await self.client.patch(f"{USERS}/cover-image")

        self.assertEqual(response.status_code, 400)


class ChannelApiTests(ApiTestCase):
    async def asyncSetUp(self) -> None:
        await super().asyncSetUp()
        await self.register("chan", "chan@x.com")
        await self.register()
        await self.login()

    async def test_subscribe_and_view_profile(self):
        response = await self.client.post(f"{USERS}/c/chan/subscription")
        self.assertEqual(response.status_code, 201)

        profile = await self.client.get(f"{USERS}/c/chan")
        self.assertEqual(profile.status_code, 200)
        self.assertEqual(profile.json()["subscribers_count"], 1)
        self.assertTrue(profile.json()["is_subscribed"])

        self.client.cookies.clear()
        anonymous = await self.client.get(f"{USERS}/c/chan")
        self.assertEqual(anonymous.json()["subscribers_count"], 1)
        self.assertFalse(anonymous.json()["is_subscribed"])

    async def test_unsubscribe(self):
        await self.client.post(f"{USERS}/c/chan/subscription")

        response = await self.client.delete(f"{USERS}/c/chan/subscription")

        self.assertEqual(response.status_code, 200)
        profile = await self.client.get(f"{USERS}/c/chan")
        self.assertEqual(profile.json()["subscribers_count"], 0)

    async def test_missing_channel(self):
        response = await self.client.get(f"{USERS}/c/ghost")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"]["message"], "Channel does not exist")

    async def test_self_subscription_rejected(self):
        response = await self.client.post(f"{USERS}/c/alice/subscription")

        self.assertEqual(response.status_code, 400)


class HealthApiTests(ApiTestCase):
    async def test_probes(self):
        for path, status in (("/health", "healthy"), ("/ready", "ready"), ("/live", "alive")):
            response = await self.client.get(path)
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json()["status"], status)

    async def test_request_id_header(self):
        minted = await self.client.get("/live")
        echoed = await self.client.get("/live", headers={"X-Request-ID": "req-123"})

        self.assertTrue(minted.headers["X-Request-ID"])
        self.assertEqual(echoed.headers["X-Request-ID"], "req-123")


if __name__ == "__main__":
    unittest.main()
