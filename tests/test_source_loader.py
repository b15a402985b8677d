import os
import tempfile
import unittest
from unittest import mock

from iptv_resolver.extractor.source_loader import SourceError, SourceLoader
from iptv_resolver.models import FetchResult
from iptv_resolver.utils.http_client import FetchError


class SourceLoaderTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.client = mock.Mock()
        self.client.fetch = mock.AsyncMock(
            return_value=FetchResult(url="https://final.test/list.m3u", status=200, body="#EXTM3U\n")
        )
        self.loader = SourceLoader(self.client)

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, name: str, content: str) -> str:
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(content)
        return path

    async def test_remote_source_uses_fetch(self):
        loaded = await self.loader.load("https://short.test/abc")
        self.client.fetch.assert_awaited_once_with("https://short.test/abc")
        self.assertEqual("https://final.test/list.m3u", loaded.final_url)
        self.assertEqual(200, loaded.status)
        self.assertEqual("#EXTM3U\n", loaded.text)

    async def test_remote_failure_becomes_source_error(self):
        self.client.fetch.side_effect = FetchError("dns")
        with self.assertRaises(SourceError):
            await self.loader.load("http://down.test/list.m3u")

    async def test_local_file_with_file_scheme(self):
        path = self._write("channels.m3u8", "#EXTM3U\n#EXTINF:-1,A\nhttp://cdn.test/a.m3u8\n")
        loaded = await self.loader.load(f"file://{path}")
        self.assertIn("#EXTINF", loaded.text)
        self.assertIsNone(loaded.final_url)
        self.client.fetch.assert_not_awaited()

    async def test_local_file_validation(self):
        with self.assertRaises(SourceError):
            await self.loader.load(os.path.join(self.tmp.name, "missing.m3u"))
        with self.assertRaises(SourceError):
            await self.loader.load(self._write("empty.m3u", "  \n"))
        with self.assertRaises(SourceError):
            await self.loader.load(self._write("page.html", "<html></html>"))


if __name__ == "__main__":
    unittest.main()
