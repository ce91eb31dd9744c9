import unittest

from src.shared.core.exceptions import ChannelNotFoundError, NotFoundError, ValidationError
from src.shared.repositories.user_repository import UserRepository
from src.shared.services.channel_service import ChannelService
from tests.fakes import make_database


class ChannelServiceTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.database = await make_database()
        self.users = {}
        async with self.database.session() as session:
            repo = UserRepository(session)
            for name in ("chan", "viewer", "sub1", "sub2", "lurker"):
                user = await repo.create_user(
                    username=name,
                    email=f"{name}@x.com",
                    full_name=name.title(),
                    password="secret123",
                    avatar_url=f"https://cdn.test/{name}.png",
                )
                self.users[name] = user.id

    async def asyncTearDown(self) -> None:
        await self.database.close()

    async def call(self, method: str, *args, **kwargs):
        async with self.database.session() as session:
            return await getattr(ChannelService(session), method)(*args, **kwargs)

    async def subscribe_all(self, *subscribers: str, channel: str = "chan") -> None:
        for name in subscribers:
            await self.call("subscribe", self.users[name], channel)

    async def test_profile_counts_and_viewer_flag(self):
        await self.subscribe_all("viewer", "sub1", "sub2")
        await self.subscribe_all("chan", channel="sub1")

        profile = await self.call("get_channel_profile", "chan", viewer_id=self.users["viewer"])

        self.assertEqual(profile.username, "chan")
        self.assertEqual(profile.subscribers_count, 3)
        self.assertEqual(profile.channels_subscribed_to_count, 1)
        self.assertTrue(profile.is_subscribed)

    async def test_anonymous_viewer_is_never_subscribed(self):
        await self.subscribe_all("viewer", "sub1")

        profile = await self.call("get_channel_profile", "chan")

        self.assertEqual(profile.subscribers_count, 2)
        self.assertFalse(profile.is_subscribed)

    async def test_non_subscriber_viewer(self):
        await self.subscribe_all("sub1")

        profile = await self.call("get_channel_profile", "chan", viewer_id=self.users["lurker"])

        self.assertFalse(profile.is_subscribed)

    async def test_channel_without_edges(self):
        profile = await self.call("get_channel_profile", "lurker")

        self.assertEqual(profile.subscribers_count, 0)
        self.assertEqual(profile.channels_subscribed_to_count, 0)
        self.assertFalse(profile.is_subscribed)

    async def test_username_lookup_ignores_case_and_whitespace(self):
        profile = await self.call("get_channel_profile", "  CHAN ")

        self.assertEqual(profile.full_name, "Chan")

    async def test_missing_channel(self):
        with self.assertRaises(ChannelNotFoundError) as ctx:
            await self.call("get_channel_profile", "ghost")

        self.assertIsInstance(ctx.exception, NotFoundError)
        self.assertEqual(ctx.exception.status_code, 404)

    async def test_blank_username(self):
        with self.assertRaisesRegex(ValidationError, "Username is missing"):
            await self.call("get_channel_profile", "  ")

    async def test_cannot_subscribe_to_self(self):
        with self.assertRaises(ValidationError):
            await self.call("subscribe", self.users["chan"], "chan")

    async def test_subscribe_is_idempotent(self):
        first = await self.call("subscribe", self.users["sub1"], "chan")
        second = await self.call("subscribe", self.users["sub1"], "chan")

        self.assertEqual(first.id, second.id)
        profile = await self.call("get_channel_profile", "chan")
        self.assertEqual(profile.subscribers_count, 1)

    async def test_unsubscribe(self):
        await self.subscribe_all("sub1")

        self.assertTrue(await self.call("unsubscribe", self.users["sub1"], "chan"))
        self.assertFalse(await self.call("unsubscribe", self.users["sub1"], "chan"))

        profile = await self.call("get_channel_profile", "chan", viewer_id=self.users["sub1"])
        self.assertEqual(profile.subscribers_count, 0)
        self.assertFalse(profile.is_subscribed)


if __name__ == "__main__":
    unittest.main()
