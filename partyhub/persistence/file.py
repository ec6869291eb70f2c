from __future__ import annotations
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from partyhub.errors import PersistenceError

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


class JsonFileBackend:
    """
    ディレクトリ内に 1スロット = 1ファイル（<key>.json）で保存する。
    書き込みは一時ファイル経由で置き換えるので、途中で失敗しても既存ファイルは壊れない。
    """

    def __init__(self, data_root: Path | str) -> None:
        self.data_root = Path(data_root).expanduser()

    def path_for(self, key: str) -> Path:
        return self.data_root / f"{_UNSAFE.sub('_', key)}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"読み込みに失敗しました: {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        target = self.path_for(key)
        try:
            self.data_root.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(prefix=f"{target.stem}.", suffix=".tmp", dir=str(self.data_root))
        except OSError as e:
            raise PersistenceError(f"書き込みに失敗しました: {target}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, target)
        except OSError as e:
            try:
                os.unlink(temp_path)
            except OSError:
                logger.debug("一時ファイルを削除できませんでした: %s", temp_path)
            raise PersistenceError(f"書き込みに失敗しました: {target}: {e}") from e
        logger.debug("saved slot %s -> %s", key, target)

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"削除に失敗しました: {path}: {e}") from e
