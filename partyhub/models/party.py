from __future__ import annotations
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Dict

# 入力時に前後の空白を取り除くテキスト項目
TEXT_FIELDS = ("name", "slogan", "description", "founder", "ideology")
# 空であってはならない項目（フォームの required 相当）
REQUIRED_FIELDS = ("name", "slogan", "description", "color", "ideology", "founder")


def truncate_millis(dt: datetime) -> datetime:
    # 保存形式はミリ秒までなので、取得時点で揃えておく
    return dt.replace(microsecond=dt.microsecond // 1000 * 1000)


def format_timestamp(dt: datetime) -> str:
    """UTC の ISO-8601（ミリ秒 + Z）。例: 2025-01-01T12:00:00.000Z"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(s: str) -> datetime:
    s = s.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class PartyInput:
    """create に渡す入力（id / supports / created_at はストア側で付与）"""

    name: str
    slogan: str
    description: str
    color: str
    ideology: str
    founder: str
    logo: str | None = None

    def cleaned(self) -> PartyInput:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for k in TEXT_FIELDS:
            values[k] = (values[k] or "").strip()
        values["color"] = (values["color"] or "").strip()
        values["logo"] = values["logo"] or None
        return PartyInput(**values)

    def missing_fields(self) -> list[str]:
        return [k for k in REQUIRED_FIELDS if not getattr(self, k)]


@dataclass(frozen=True)
class Party:
    id: int
    name: str
    slogan: str
    description: str
    color: str
    ideology: str
    founder: str
    logo: str | None = None
    supports: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """保存用の辞書（キー名は保存形式に合わせて createdAt）"""
        return {
            "id": self.id,
            "name": self.name,
            "slogan": self.slogan,
            "description": self.description,
            "color": self.color,
            "ideology": self.ideology,
            "founder": self.founder,
            "logo": self.logo,
            "supports": self.supports,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Party:
        supports = int(d.get("supports") or 0)
        if supports < 0:
            raise ValueError(f"supports が負の値です: {supports}")
        return cls(
            id=int(d["id"]),
            name=str(d.get("name") or ""),
            slogan=str(d.get("slogan") or ""),
            description=str(d.get("description") or ""),
            color=str(d.get("color") or ""),
            ideology=str(d.get("ideology") or ""),
            founder=str(d.get("founder") or ""),
            logo=d.get("logo") or None,
            supports=supports,
            created_at=parse_timestamp(d["createdAt"]),
        )
