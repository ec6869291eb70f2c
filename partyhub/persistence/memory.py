from typing import Dict, Optional


class MemoryBackend:
    """プロセス内の辞書に保存する（テスト・一時利用向け）"""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.slots: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        self.slots[key] = value

    def remove(self, key: str) -> None:
        self.slots.pop(key, None)
