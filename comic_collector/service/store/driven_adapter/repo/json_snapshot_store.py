"""
JSON Snapshot Store

Keeps a whole collection as one orjson-encoded file. The in-memory
repositories load it once on construction and rewrite it after every
mutation, so a restart picks up the last known catalog / user list.
"""

from pathlib import Path
from typing import Any

import anyio
import orjson

from comic_collector.platform.logging.loguru_io import Logger


class JsonSnapshotStore:
    def __init__(self, *, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []

        raw = self.path.read_bytes()
        if not raw.strip():
            return []

        try:
            records = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            Logger.base.error(f'❌ [SNAPSHOT] Failed to decode {self.path}: {e}')
            raise

        if not isinstance(records, list):
            raise ValueError(f'Snapshot {self.path} must hold a JSON array')
        Logger.base.info(f'📂 [SNAPSHOT] Loaded {len(records)} record(s) from {self.path}')
        return records

    async def write(self, records: list[dict[str, Any]]) -> None:
        target = anyio.Path(self.path)
        await target.parent.mkdir(parents=True, exist_ok=True)

        # Write next to the target, then swap, so readers never see half a file
        tmp = target.with_name(f'{target.name}.tmp')
        await tmp.write_bytes(orjson.dumps(records, option=orjson.OPT_INDENT_2))
        await tmp.replace(target)
        Logger.base.debug(f'💾 [SNAPSHOT] Wrote {len(records)} record(s) to {self.path}')


def snapshot_store_for(path: Path | None) -> JsonSnapshotStore | None:
    """Store for the configured path; None keeps the repository memory-only"""
    return JsonSnapshotStore(path=path) if path is not None else None
