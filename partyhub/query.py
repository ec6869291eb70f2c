from __future__ import annotations
import unicodedata
from typing import Iterable, List

from partyhub.errors import ValidationError
from partyhub.models import FILTER_ALL, Party, SortKey


def collation_key(s: str) -> tuple[str, str]:
    """
    ロケールを考慮した名前の比較キー。
    アクセント・大文字小文字を無視した文字列で比較し、同値なら元の文字列で順序を決める。
    """
    decomposed = unicodedata.normalize("NFKD", s)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), s)


def parse_sort_key(sort_key: str | SortKey) -> SortKey:
    try:
        return SortKey(sort_key)
    except ValueError:
        valid = ", ".join(k.value for k in SortKey)
        raise ValidationError(f"未知の並び順です: {sort_key} （候補: {valid}）", ["sort_key"]) from None


def filter_parties(parties: Iterable[Party], ideology: str = FILTER_ALL) -> List[Party]:
    # 大文字小文字を区別する完全一致
    if ideology == FILTER_ALL:
        return list(parties)
    return [p for p in parties if p.ideology == ideology]


def sort_parties(parties: Iterable[Party], sort_key: str | SortKey = SortKey.recent) -> List[Party]:
    # sorted() は安定ソートなので、同値の場合は元（正規）の順序が保たれる
    key = parse_sort_key(sort_key)
    if key is SortKey.recent:
        return sorted(parties, key=lambda p: p.created_at, reverse=True)
    if key is SortKey.popular:
        return sorted(parties, key=lambda p: p.supports, reverse=True)
    return sorted(parties, key=lambda p: collation_key(p.name))


def query_parties(
    parties: Iterable[Party],
    ideology: str = FILTER_ALL,
    sort_key: str | SortKey = SortKey.recent,
) -> List[Party]:
    return sort_parties(filter_parties(parties, ideology), sort_key)
