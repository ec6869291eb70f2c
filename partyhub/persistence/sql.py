from __future__ import annotations
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from partyhub.db.models import StorageSlot
from partyhub.errors import PersistenceError

logger = logging.getLogger(__name__)


class SqlBackend:
    """M_STORAGE_SLOT テーブルにスロットを保存する（スキーマは init-db で作成済みの前提）"""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        try:
            with self.session_factory() as db:
                slot = db.get(StorageSlot, key)
                return slot.value if slot is not None else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"スロットの読み込みに失敗しました: {key}: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            with self.session_factory() as db:
                # 既存キーなら UPDATE、なければ INSERT
                db.merge(StorageSlot(key=key, value=value))
                db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"スロットの保存に失敗しました: {key}: {e}") from e
        logger.debug("saved slot %s (%d chars)", key, len(value))

    def remove(self, key: str) -> None:
        try:
            with self.session_factory() as db:
                slot = db.get(StorageSlot, key)
                if slot is not None:
                    db.delete(slot)
                    db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"スロットの削除に失敗しました: {key}: {e}") from e
