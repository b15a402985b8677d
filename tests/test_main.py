import contextlib
import io
import json
import os
import tempfile
import unittest

from iptv_resolver.main import build_resolver_config, main, parse_args

PLAYLIST = """#EXTM3U
#EXTINF:-1 tvg-id="a" group-title="News",Alpha
http://cdn.test/alpha.m3u8
http://cdn.test/bravo.m3u8
"""


class MainTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.playlist = os.path.join(self.tmp.name, "channels.m3u8")
        with open(self.playlist, "w", encoding="utf-8") as handle:
            handle.write(PLAYLIST)

    def tearDown(self):
        self.tmp.cleanup()

    def test_extracts_local_playlist_to_json(self):
        output = os.path.join(self.tmp.name, "out", "channels.json")
        self.assertEqual(0, main([self.playlist, "--output", output]))
        with open(output, encoding="utf-8") as handle:
            payload = json.load(handle)
        self.assertEqual(["http://cdn.test/alpha.m3u8", "http://cdn.test/bravo.m3u8"], [row["streamUrl"] for row in payload])
        self.assertEqual("Alpha", payload[0]["name"])

    def test_missing_source_returns_error_code(self):
        self.assertEqual(1, main([os.path.join(self.tmp.name, "missing.m3u")]))

    def test_resolve_prints_direct_stream(self):
        buffer = io.StringIO()
        with contextlib.redirect_stdout(buffer):
            self.assertEqual(0, main(["http://cdn.test/clip.mp4", "--resolve"]))
        self.assertEqual("http://cdn.test/clip.mp4", buffer.getvalue().strip())

    def test_parse_args_defaults(self):
        args = parse_args(["http://x.test/list.m3u"])
        self.assertFalse(args.resolve)
        self.assertIsNone(args.format)
        self.assertEqual(15, args.max_redirects)

    def test_resolver_config_defaults(self):
        config = build_resolver_config()
        self.assertEqual(8.0, config.head_timeout)
        self.assertEqual(200 * 1024, config.max_body_bytes)


if __name__ == "__main__":
    unittest.main()
