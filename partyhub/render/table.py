from __future__ import annotations
import json
from typing import List, Sequence

from partyhub.models import Party

ALL_COLUMNS = ["id", "name", "slogan", "description", "color", "ideology", "founder", "logo", "supports", "createdAt"]
DEFAULT_COLUMNS = ["id", "name", "ideology", "founder", "supports", "createdAt"]

OUTPUT_FORMATS = ("table", "json")


class TableRenderer:
    """CLI 向けの簡易表示（固定幅テーブル または JSON）"""

    def __init__(self, columns: List[str] | None = None, output: str = "table") -> None:
        output = output.lower()
        if output not in OUTPUT_FORMATS:
            raise ValueError(f"出力形式が不正です: {output} （候補: {', '.join(OUTPUT_FORMATS)}）")
        columns = list(columns or DEFAULT_COLUMNS)
        unknown = [c for c in columns if c not in ALL_COLUMNS]
        if unknown:
            raise ValueError(f"未知の列があります: {unknown}  （利用可能: {ALL_COLUMNS}）")
        self.columns = columns
        self.output = output

    def render(self, parties: Sequence[Party], total: int) -> str:
        dict_rows = [{k: v for k, v in p.to_dict().items() if k in self.columns} for p in parties]

        if self.output == "json":
            return json.dumps(dict_rows, ensure_ascii=False, indent=2)

        cols = self.columns
        widths = {c: max([len(c)] + [len(str(d.get(c, ""))) for d in dict_rows]) for c in cols}
        lines = [
            " | ".join(c.ljust(widths[c]) for c in cols),
            "-+-".join("-" * widths[c] for c in cols),
        ]
        for d in dict_rows:
            lines.append(" | ".join(str(d.get(c, "")).ljust(widths[c]) for c in cols))
        lines.append(f"({len(parties)} / {total})")
        return "\n".join(lines)
