from __future__ import annotations
import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, List, Tuple

from partyhub.config import DEFAULT_STORAGE_KEY
from partyhub.errors import NotFoundError, PersistenceError, ValidationError
from partyhub.models import FILTER_ALL, Party, PartyInput, SortKey
from partyhub.models.party import truncate_millis
from partyhub.persistence import PersistenceBackend
from partyhub.query import query_parties
from partyhub.seed import demo_parties

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PartyStore:
    """
    政党一覧の正規データを保持するストア。
    - 正規の並びは挿入順（新しいものが先頭）
    - 変更は create / support_party / reset_to_demo のみ
    - 返すレコードは frozen なので呼び出し側からは変更できない
    """

    def __init__(
        self,
        backend: PersistenceBackend,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.backend = backend
        self.storage_key = storage_key
        self.clock = clock
        self._parties: List[Party] = []
        self._last_id = 0

    def _now(self) -> datetime:
        return truncate_millis(self.clock())

    # ------------------------------------------------------------------
    # 読み込み・保存
    # ------------------------------------------------------------------

    def initialize(self, force_reseed: bool = False) -> PartyStore:
        """保存済みデータを読み込む。なければ（または force_reseed 時は）デモデータを投入する"""
        raw = None if force_reseed else self.backend.get(self.storage_key)
        if raw is None:
            if force_reseed:
                logger.warning("force_reseed: discarding saved data in slot %s", self.storage_key)
            self._seed()
            return self

        self._parties = self._decode(raw)
        self._last_id = max((p.id for p in self._parties), default=0)
        logger.info("loaded %d parties from slot %s", len(self._parties), self.storage_key)
        return self

    def reset_to_demo(self) -> List[Party]:
        """全件を破棄してデモデータを投入し直す"""
        self._seed(clear_slot=True)
        return list(self._parties)

    def _seed(self, clear_slot: bool = False) -> None:
        self._parties = demo_parties(self._now())
        self._last_id = max(self._last_id, max(p.id for p in self._parties))
        logger.info("seeded %d demo parties", len(self._parties))
        if clear_slot:
            self.backend.remove(self.storage_key)
        self._save()

    def _decode(self, raw: str) -> List[Party]:
        try:
            rows = json.loads(raw)
            if not isinstance(rows, list):
                raise ValueError("保存データが配列ではありません")
            parties = [Party.from_dict(r) for r in rows]
        except (ValueError, KeyError, TypeError) as e:
            raise PersistenceError(f"保存データを読み込めません（{self.storage_key}）: {e}") from e

        ids = [p.id for p in parties]
        if len(ids) != len(set(ids)):
            raise PersistenceError(f"保存データの id が重複しています（{self.storage_key}）")
        return parties

    def _encode(self) -> str:
        return json.dumps([p.to_dict() for p in self._parties], ensure_ascii=False)

    def _save(self) -> None:
        # 保存に失敗してもメモリ上の状態は巻き戻さない
        try:
            self.backend.set(self.storage_key, self._encode())
        except PersistenceError:
            logger.error("failed to persist %d parties to slot %s", len(self._parties), self.storage_key)
            raise

    # ------------------------------------------------------------------
    # 変更操作
    # ------------------------------------------------------------------

    def _next_id(self) -> int:
        # 作成時刻(ミリ秒)を基本にし、発行済みの最大値を必ず超える
        millis = int(self._now().timestamp() * 1000)
        self._last_id = max(millis, self._last_id + 1)
        return self._last_id

    def create(self, data: PartyInput) -> Party:
        cleaned = data.cleaned()
        missing = cleaned.missing_fields()
        if missing:
            raise ValidationError(f"必須項目が未入力です: {', '.join(missing)}", missing)

        party = Party(
            id=self._next_id(),
            name=cleaned.name,
            slogan=cleaned.slogan,
            description=cleaned.description,
            color=cleaned.color,
            ideology=cleaned.ideology,
            founder=cleaned.founder,
            logo=cleaned.logo,
            supports=0,
            created_at=self._now(),
        )
        self._parties.insert(0, party)
        logger.info("created party id=%s name=%r", party.id, party.name)
        self._save()
        return party

    def support_party(self, party_id: int) -> Party:
        for i, party in enumerate(self._parties):
            if party.id == party_id:
                updated = replace(party, supports=party.supports + 1)
                self._parties[i] = updated
                logger.info("supported party id=%s (%d supports)", party_id, updated.supports)
                self._save()
                return updated
        raise NotFoundError(party_id)

    # ------------------------------------------------------------------
    # 参照操作
    # ------------------------------------------------------------------

    def query(self, filter: str = FILTER_ALL, sort_key: str | SortKey = SortKey.recent) -> List[Party]:
        """絞り込み・並び替えた新しいリストを返す（正規の並びは変わらない）"""
        return query_parties(self._parties, filter, sort_key)

    def get(self, party_id: int) -> Party:
        for party in self._parties:
            if party.id == party_id:
                return party
        raise NotFoundError(party_id)

    def ideologies(self) -> List[str]:
        seen: List[str] = []
        for party in self._parties:
            if party.ideology not in seen:
                seen.append(party.ideology)
        return seen

    @property
    def parties(self) -> Tuple[Party, ...]:
        return tuple(self._parties)

    @property
    def count(self) -> int:
        return len(self._parties)
