from typing import Optional, Protocol


class PersistenceBackend(Protocol):
    """名前付きの文字列スロットを読み書きする保存先"""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError
