import unittest

from iptv_resolver.extractor.m3u_parser import (
    find_header_line,
    parse_extinf,
    parse_structural,
    scan_plain_lines,
)

PLAYLIST = """#EXTM3U x-tvg-url="http://epg.test/guide.xml"
#EXTINF:-1 tvg-id="news.uk" tvg-name="News HD" tvg-logo="http://img.test/news.png" group-title="News",News Channel
http://cdn.test/news/index.m3u8
#EXTINF:0 TVG-ID="sport.fr" GROUP-TITLE="Sports",Sport 1
https://cdn.test/sport/playlist.m3u8?token=1 "trailing"
"""


class ParseExtinfTests(unittest.TestCase):
    def test_attributes_and_label(self):
        meta = parse_extinf(
            '#EXTINF:-1 tvg-id="a" tvg-name="Alpha" tvg-logo="http://l/a.png" group-title="G" tvg-language="English",Alpha HD'
        )
        self.assertEqual("-1", meta["duration"])
        self.assertEqual("a", meta["tvg_id"])
        self.assertEqual("Alpha", meta["name"])
        self.assertEqual("http://l/a.png", meta["logo"])
        self.assertEqual("G", meta["group"])
        self.assertEqual("English", meta["language"])
        self.assertEqual("Alpha HD", meta["display_name"])

    def test_name_falls_back_to_label(self):
        meta = parse_extinf("#EXTINF:10.5,Only Label")
        self.assertEqual("10.5", meta["duration"])
        self.assertEqual("Only Label", meta["name"])
        self.assertEqual("Only Label", meta["display_name"])

    def test_display_name_falls_back_to_name(self):
        meta = parse_extinf('#EXTINF:-1 tvg-name="Named",')
        self.assertEqual("Named", meta["display_name"])

    def test_missing_duration_defaults_to_live(self):
        self.assertEqual("-1", parse_extinf("#EXTINF: tvg-id=\"x\",X")["duration"])


class ParseStructuralTests(unittest.TestCase):
    def test_pairs_metadata_with_urls_in_order(self):
        entries = parse_structural(PLAYLIST)
        self.assertEqual(2, len(entries))
        self.assertEqual("http://cdn.test/news/index.m3u8", entries[0].stream_url)
        self.assertEqual("news.uk", entries[0].tvg_id)
        self.assertEqual("News HD", entries[0].name)
        self.assertEqual("News Channel", entries[0].display_name)
        self.assertEqual("News", entries[0].group)
        self.assertEqual("https://cdn.test/sport/playlist.m3u8?token=1", entries[1].stream_url)
        self.assertEqual("sport.fr", entries[1].tvg_id)
        self.assertEqual("Sports", entries[1].group)
        self.assertEqual("Sport 1", entries[1].name)

    def test_consecutive_metadata_lines_drop_the_first(self):
        text = "#EXTINF:-1,First\n#EXTINF:-1,Second\nhttp://cdn.test/second.m3u8\n"
        entries = parse_structural(text)
        self.assertEqual(1, len(entries))
        self.assertEqual("Second", entries[0].name)

    def test_trailing_metadata_line_yields_nothing(self):
        self.assertEqual([], parse_structural("#EXTM3U\n#EXTINF:-1,Orphan"))

    def test_invalid_line_clears_pending_metadata(self):
        text = "#EXTINF:-1,Broken\nnot-a-url\nhttp://cdn.test/after.m3u8\n"
        self.assertEqual([], parse_structural(text))

    def test_handles_crlf_and_empty_input(self):
        entries = parse_structural("#EXTINF:-1,A\r\nhttp://cdn.test/a.m3u8\r\n")
        self.assertEqual(["http://cdn.test/a.m3u8"], [entry.stream_url for entry in entries])
        self.assertEqual([], parse_structural(""))


class ScanPlainLinesTests(unittest.TestCase):
    def test_collects_bare_urls_without_metadata(self):
        text = "#comment http://skip.test/x.m3u8\nhttp://a.test/one.m3u8\nftp://nope\nhttp://a.test/one.m3u8\n"
        entries = scan_plain_lines(text)
        self.assertEqual(["http://a.test/one.m3u8", "http://a.test/one.m3u8"], [e.stream_url for e in entries])
        self.assertEqual("", entries[0].name)
        self.assertEqual("-1", entries[0].duration)

    def test_short_urls_are_rejected(self):
        self.assertEqual([], scan_plain_lines("http://ab\n"))


class HeaderLineTests(unittest.TestCase):
    def test_header_is_kept_verbatim(self):
        self.assertEqual('#EXTM3U x-tvg-url="http://epg.test/guide.xml"', find_header_line(PLAYLIST))
        self.assertIsNone(find_header_line("http://a.test/x.m3u8"))


if __name__ == "__main__":
    unittest.main()
