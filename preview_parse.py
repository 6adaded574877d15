# preview_parse.py — resolve storage paths from the shell (same logic as GET /admin/preview-parse)
import asyncio
import logging
import sys
from typing import List

from db_async import engine, session_scope
from park_lookups import SqlPathLookups
from path_resolver import LookupFailedError, preview_path

async def run(paths: List[str]) -> int:
    failed = 0
    try:
        async with session_scope() as session:
            lookups = SqlPathLookups(session)
            for path in paths:
                try:
                    preview = await preview_path(path, lookups)
                except LookupFailedError as e:
                    await session.rollback()
                    print(f"{path}: {e}", file=sys.stderr)
                    failed += 1
                    continue
                print(preview.model_dump_json(by_alias=True))
    finally:
        await engine.dispose()
    return 1 if failed else 0

if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s - %(message)s")
    if len(sys.argv) < 2:
        print("Usage: python preview_parse.py <path> [<path> ...]")
        sys.exit(2)
    sys.exit(asyncio.run(run(sys.argv[1:])))
