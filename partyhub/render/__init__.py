from typing import Protocol, Sequence

from partyhub.models import Party
from .html import HtmlRenderer
from .table import TableRenderer


class Renderer(Protocol):
    """query の結果を受け取って表示用の文字列を返す"""

    def render(self, parties: Sequence[Party], total: int) -> str:
        ...


__all__ = ["Renderer", "HtmlRenderer", "TableRenderer"]
