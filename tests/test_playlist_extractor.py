import unittest

from iptv_resolver.extractor.playlist_extractor import PlaylistExtractor, extract_entries, merge_tiers
from iptv_resolver.models import PlaylistEntry

MIXED = """#EXTM3U
#EXTINF:-1 tvg-id="one" group-title="News",One
http://cdn.test/one.m3u8
http://cdn.test/one.m3u8
http://cdn.test/two.m3u8
<script>var src = "http://cdn.test/three/index.m3u8";</script>
"""


class MergeTiersTests(unittest.TestCase):
    def test_structural_metadata_wins_ties(self):
        structural = [PlaylistEntry(stream_url="http://a.test/x.m3u8", name="X")]
        plain = [PlaylistEntry(stream_url="http://a.test/x.m3u8"), PlaylistEntry(stream_url="http://a.test/y.m3u8")]
        swept = [PlaylistEntry(stream_url="http://a.test/z.m3u8")]
        merged = merge_tiers(structural, plain, swept)
        self.assertEqual(
            ["http://a.test/x.m3u8", "http://a.test/y.m3u8", "http://a.test/z.m3u8"],
            [entry.stream_url for entry in merged],
        )
        self.assertEqual("X", merged[0].name)

    def test_duplicates_within_a_tier_are_collapsed(self):
        plain = [PlaylistEntry(stream_url="http://a.test/x.m3u8"), PlaylistEntry(stream_url="http://a.test/x.m3u8")]
        self.assertEqual(1, len(merge_tiers([], plain, [])))


class PlaylistExtractorTests(unittest.TestCase):
    def test_bundle_tiers_and_merged_entries(self):
        bundle = PlaylistExtractor().extract(MIXED)
        self.assertEqual(["http://cdn.test/one.m3u8"], [e.stream_url for e in bundle.structural])
        self.assertEqual(3, len(bundle.plain))
        self.assertEqual(["http://cdn.test/three/index.m3u8"], [e.stream_url for e in bundle.swept])
        self.assertEqual("#EXTM3U", bundle.header_line)

        entries = bundle.entries
        self.assertEqual(
            ["http://cdn.test/one.m3u8", "http://cdn.test/two.m3u8", "http://cdn.test/three/index.m3u8"],
            [entry.stream_url for entry in entries],
        )
        self.assertEqual("one", entries[0].tvg_id)
        self.assertEqual("News", entries[0].group)

    def test_unusable_input_gives_empty_result(self):
        self.assertEqual([], extract_entries("<html>no streams</html>\n#EXTINF:-1,Orphan"))
        self.assertEqual([], extract_entries(""))


if __name__ == "__main__":
    unittest.main()
