from __future__ import annotations

import argparse
import asyncio
import logging
import os
from collections import Counter
from typing import List, Sequence, Tuple

from dotenv import load_dotenv

from .extractor.formatters import FORMATS, detect_format, render
from .extractor.playlist_extractor import PlaylistExtractor
from .extractor.source_loader import SourceError, SourceLoader
from .models import ExtractionBundle, PlaylistEntry, ResolvedStream, ResolverConfig
from .resolver.stream_resolver import StreamResolver
from .utils.file_utils import write_text_file
from .utils.http_client import DEFAULT_MAX_REDIRECTS, DEFAULT_TIMEOUT, HttpClient

load_dotenv()


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value


def _env_int(name: str) -> int | None:
    value = _env_str(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _env_float(name: str) -> float | None:
    value = _env_str(name)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _env_bool(name: str) -> bool:
    value = _env_str(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract IPTV stream URLs and resolve them to playable streams.")
    parser.add_argument("source", help="Playlist URL, wrapper page URL, or local M3U file")
    parser.add_argument("-o", "--output", default=_env_str("IPTV_OUTPUT") or "m3u8_urls.txt", help="File to write extracted entries to")
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default=_env_str("IPTV_FORMAT"),
        help="Output format (defaults to the output file extension, else txt)",
    )
    parser.add_argument("--resolve", action="store_true", help="Treat SOURCE as a single entry point and resolve it")
    parser.add_argument(
        "--resolve-entries",
        action="store_true",
        default=_env_bool("IPTV_RESOLVE_ENTRIES"),
        help="Resolve every extracted entry to its playable URL",
    )
    parser.add_argument("--workers", type=int, default=_env_int("IPTV_WORKERS") or 8, help="Concurrent resolutions")
    parser.add_argument("--timeout", type=float, default=_env_float("IPTV_TIMEOUT") or DEFAULT_TIMEOUT, help="Fetch timeout in seconds")
    parser.add_argument(
        "--max-redirects",
        type=int,
        default=_env_int("IPTV_MAX_REDIRECTS") or DEFAULT_MAX_REDIRECTS,
        help="Maximum redirects followed when fetching SOURCE",
    )
    parser.add_argument("--preview", type=int, default=25, help="Rows shown in the preview table")
    parser.add_argument("--debug-dump", default=_env_str("IPTV_DEBUG_DUMP"), help="Write the raw fetched body to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_resolver_config() -> ResolverConfig:
    config = ResolverConfig()
    head_timeout = _env_float("IPTV_HEAD_TIMEOUT")
    if head_timeout is not None:
        config.head_timeout = head_timeout
    get_timeout = _env_float("IPTV_GET_TIMEOUT")
    if get_timeout is not None:
        config.get_timeout = get_timeout
    max_body_bytes = _env_int("IPTV_MAX_BODY_BYTES")
    if max_body_bytes is not None:
        config.max_body_bytes = max_body_bytes
    return config


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def _shorten(value: str, width: int) -> str:
    value = value or ""
    if len(value) > width:
        return value[: width - 1] + "~"
    return value


def print_stats(entries: Sequence[PlaylistEntry]) -> None:
    groups = Counter(entry.group or "(no group)" for entry in entries)
    logging.info("Total channels : %s", len(entries))
    logging.info("With name      : %s", sum(1 for entry in entries if entry.label))
    logging.info("With logo      : %s", sum(1 for entry in entries if entry.logo))
    logging.info("With group     : %s", sum(1 for entry in entries if entry.group))
    logging.info("Top groups:")
    for group, count in groups.most_common(10):
        logging.info("  %4s  %s", count, group)
    if len(groups) > 10:
        logging.info("  ... and %s more groups", len(groups) - 10)


def print_table(entries: Sequence[PlaylistEntry], limit: int, output_file: str) -> None:
    logging.info("%-4s  %-30s  %-18s  %-5s  %s", "#", "Name", "Group", "Logo?", "Stream URL")
    logging.info("%s", "-" * 120)
    for index, entry in enumerate(entries[:limit], start=1):
        logging.info(
            "%-4s  %-30s  %-18s  %-5s  %s",
            index,
            _shorten(entry.label, 30),
            _shorten(entry.group, 18),
            "YES" if entry.logo else "-",
            _shorten(entry.stream_url, 55),
        )
    if len(entries) > limit:
        logging.info("  ... and %s more -> %s", len(entries) - limit, output_file)


async def resolve_many(
    resolver: StreamResolver,
    entries: Sequence[PlaylistEntry],
    workers: int,
) -> List[Tuple[PlaylistEntry, ResolvedStream]]:
    sem = asyncio.Semaphore(max(1, workers))

    async def _resolve(entry: PlaylistEntry) -> Tuple[PlaylistEntry, ResolvedStream]:
        async with sem:
            return entry, await resolver.resolve(entry.stream_url)

    return list(await asyncio.gather(*(_resolve(entry) for entry in entries)))


async def run(args: argparse.Namespace) -> int:
    async with HttpClient(timeout=args.timeout, max_redirects=args.max_redirects) as http_client:
        resolver = StreamResolver(http_client, build_resolver_config())

        if args.resolve:
            resolved = await resolver.resolve(args.source)
            logging.info("Resolved %s -> [%s] %s", args.source, resolved.type.value, resolved.url)
            print(resolved.url)
            return 0

        try:
            source = await SourceLoader(http_client).load(args.source)
        except SourceError as exc:
            logging.error("%s", exc)
            return 1

        bundle: ExtractionBundle = PlaylistExtractor().extract(source.text)
        entries = bundle.entries
        logging.info("[M3U parser]   %s entries (with metadata)", len(bundle.structural))
        logging.info("[Plain lines]  %s URLs", len(bundle.plain))
        logging.info("[Regex sweep]  %s extra URLs", len(bundle.swept))

        if args.debug_dump:
            write_text_file(args.debug_dump, source.text)
            logging.info("Debug: raw response -> %s", args.debug_dump)

        if not entries:
            logging.warning("Nothing found. Re-run with --debug-dump to inspect the raw response.")
            return 0

        print_stats(entries)
        print_table(entries, args.preview, args.output)

        fmt = detect_format(args.output, args.format)
        write_text_file(args.output, render(entries, fmt, bundle.header_line))
        logging.info("Saved -> %s [format=%s]", args.output, fmt)

        if args.resolve_entries:
            results = await resolve_many(resolver, entries, args.workers)
            for entry, resolved in results:
                logging.info("%s -> [%s] %s", entry.label or entry.stream_url, resolved.type.value, resolved.url)
        return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    return asyncio.run(run(args))


if __name__ == "__main__":
    raise SystemExit(main())
