from __future__ import annotations
import asyncio
import base64
import logging
import mimetypes
from dataclasses import replace
from pathlib import Path

from partyhub.errors import LogoReadError
from partyhub.models import Party, PartyInput

logger = logging.getLogger(__name__)

DEFAULT_MIME = "application/octet-stream"


def encode_data_url(data: bytes, mime: str = DEFAULT_MIME) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def _read_data_url(path: Path) -> str:
    if not path.is_file():
        raise LogoReadError(f"ロゴ画像が見つかりません: {path}")
    try:
        data = path.read_bytes()
    except OSError as e:
        raise LogoReadError(f"ロゴ画像を読み込めません: {path}: {e}") from e
    mime, _ = mimetypes.guess_type(path.name)
    return encode_data_url(data, mime or DEFAULT_MIME)


async def read_logo_data_url(path: Path | str) -> str:
    """画像ファイルを data URL に変換する（ファイル読み込みは別スレッドで行う）"""
    return await asyncio.to_thread(_read_data_url, Path(path).expanduser())


async def create_party_with_logo(store, data: PartyInput, logo_path: Path | str | None = None) -> Party:
    """ロゴの読み込みが終わってから create する。読み込みに失敗した場合はストアを変更しない"""
    if logo_path is not None:
        logo = await read_logo_data_url(logo_path)
        logger.debug("logo loaded from %s (%d chars)", logo_path, len(logo))
        data = replace(data, logo=logo)
    return store.create(data)
