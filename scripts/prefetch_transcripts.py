"""Prefetch YouTube transcripts into the local transcript store."""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tubetutor.api.dependencies import build_services
from tubetutor.errors import TranscriptServiceError
from tubetutor.transcripts.gateway import TranscriptGateway
from tubetutor.videos.youtube import resolve_video_id


def read_video_ids(values: list[str], file: str | None) -> list[str]:
    """Collect ids/URLs from the command line and an optional file (one per line, # comments)."""
    raw = list(values)
    if file:
        for line in Path(file).read_text(encoding="utf-8").splitlines():
            line = line.split("#", 1)[0].strip()
            if line:
                raw.append(line)
    return list(dict.fromkeys(resolve_video_id(v) for v in raw))


async def prefetch(
    gateway: TranscriptGateway,
    video_ids: list[str],
    force_refresh: bool = False,
    use_alternate_provider: bool = False,
) -> tuple[int, list[str]]:
    """Fetch each video in turn; returns (number stored, error messages)."""
    stored = 0
    errors: list[str] = []
    for i, video_id in enumerate(video_ids, 1):
        try:
            entry = await gateway.fetch_and_store(
                video_id,
                force_refresh=force_refresh,
                use_alternate_provider=use_alternate_provider,
            )
        except TranscriptServiceError as exc:
            errors.append(f"{video_id}: [{exc.kind.value}] {exc.message}")
            print(f"  [{i}/{len(video_ids)}] {video_id} FAILED: {exc.message}")
            continue
        stored += 1
        print(
            f"  [{i}/{len(video_ids)}] {video_id} "
            f"({entry.source.value}, {len(entry.transcript)} chars, fetched {entry.fetched_at})"
        )
    return stored, errors


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Prefetch transcripts into the local store")
    parser.add_argument("videos", nargs="*", help="Video ids or YouTube URLs")
    parser.add_argument("--file", help="File with one video id or URL per line")
    parser.add_argument("--force", action="store_true", help="Refetch even if already stored")
    parser.add_argument(
        "--alternate",
        action="store_true",
        help="Use the Supadata API instead of the caption track (needs SUPADATA_API_KEY)",
    )
    args = parser.parse_args(argv)

    video_ids = read_video_ids(args.videos, args.file)
    if not video_ids:
        parser.error("no video ids given")

    services = build_services()
    print(f"Prefetching {len(video_ids)} transcripts...")
    stored, errors = asyncio.run(
        prefetch(services.gateway, video_ids, args.force, args.alternate)
    )
    print(f"\nStored {stored}/{len(video_ids)} transcripts ({len(services.store)} in store)")
    if errors:
        print(f"{len(errors)} failed:")
        for err in errors:
            print(f"  - {err}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
