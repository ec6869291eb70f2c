class PartyHubError(Exception):
    """partyhub の例外の基底クラス"""


class ValidationError(PartyHubError, ValueError):
    """必須入力の欠落など、利用者が修正できる入力エラー"""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = list(fields or [])


class NotFoundError(PartyHubError, LookupError):
    """指定 id の政党が存在しない"""

    def __init__(self, party_id: int) -> None:
        super().__init__(f"政党が見つかりません: id={party_id}")
        self.party_id = party_id


class PersistenceError(PartyHubError, OSError):
    """保存領域への読み書きに失敗した（メモリ上の状態はそのまま）"""


class LogoReadError(PartyHubError, OSError):
    """ロゴ画像ファイルを読み込めなかった"""
