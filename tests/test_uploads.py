import tempfile
import unittest
from io import BytesIO
from pathlib import Path

from fastapi import UploadFile

from src.api.dependencies.uploads import discard_uploads, spool_upload


class SpoolUploadTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.mkdtemp()

    async def test_spools_file_under_unique_name(self):
        upload = UploadFile(file=BytesIO(b"image-bytes"), filename="../../me.png")

        asset = await spool_upload(upload, self.temp_dir)

        self.assertEqual(asset.filename, "me.png")
        self.assertEqual(asset.local_path.parent, Path(self.temp_dir))
        self.assertTrue(asset.local_path.name.endswith("-me.png"))
        self.assertEqual(asset.local_path.read_bytes(), b"image-bytes")

        discard_uploads(asset, None)
        self.assertFalse(asset.local_path.exists())

    async def test_missing_or_empty_upload_is_none(self):
        self.assertIsNone(await spool_upload(None, self.temp_dir))
        self.assertIsNone(await spool_upload(UploadFile(file=BytesIO(b"x"), filename=""), self.temp_dir))
        self.assertIsNone(await spool_upload(UploadFile(file=BytesIO(b""), filename="me.png"), self.temp_dir))
        self.assertEqual(list(Path(self.temp_dir).iterdir()), [])


if __name__ == "__main__":
    unittest.main()
