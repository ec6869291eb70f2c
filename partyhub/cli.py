# partyhub/cli.py
import asyncio
import logging
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Iterator, Optional

import typer
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from partyhub.config import BACKENDS, Settings, load_settings
from partyhub.db.base import Base, make_engine, make_session_factory
from partyhub.db.models import *  # モデルを読み込む（create_all / drop_all 用）
from partyhub.errors import PartyHubError
from partyhub.log import setup_logging
from partyhub.logo import create_party_with_logo
from partyhub.models import FILTER_ALL, PartyInput, SortKey
from partyhub.persistence import JsonFileBackend, MemoryBackend, PersistenceBackend, SqlBackend
from partyhub.render import HtmlRenderer, TableRenderer
from partyhub.store import PartyStore

logger = logging.getLogger(__name__)

cli = typer.Typer(help="政党一覧の管理ツール（作成・一覧・支持・デモデータ再投入）")

# 作成フォームの色の初期値
DEFAULT_COLOR = "#2c5aa0"


@cli.callback()
def main(
    ctx: typer.Context,
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help=f"保存先: {' | '.join(BACKENDS)}（既定: PARTYHUB_BACKEND）"),
    force_reseed: bool = typer.Option(False, "--force-reseed", help="起動時に保存データを破棄してデモデータを投入"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="ログレベル（既定: PARTYHUB_LOG_LEVEL）"),
):
    """環境変数とオプションから設定を組み立てて各コマンドに渡す"""
    try:
        settings = load_settings()
    except ValueError as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(code=1)

    if backend is not None:
        if backend not in BACKENDS:
            typer.echo(f"❌ 未知の保存先です: {backend} （候補: {', '.join(BACKENDS)}）")
            raise typer.Exit(code=1)
        settings = replace(settings, backend=backend)
    if force_reseed:
        settings = replace(settings, force_reseed=True)
    if log_level:
        settings = replace(settings, log_level=log_level.upper())

    setup_logging(settings.log_level)
    ctx.obj = settings


# ==============================================================
# ストアの組み立て
# ==============================================================

def _engine(settings: Settings) -> Engine:
    return make_engine(settings.database_url)


def build_backend(settings: Settings) -> PersistenceBackend:
    if settings.backend == "file":
        return JsonFileBackend(settings.data_dir)
    if settings.backend == "memory":
        return MemoryBackend()
    engine = _engine(settings)
    # スロット用テーブルがなければ作成（既存テーブルには触れない）
    Base.metadata.create_all(bind=engine)
    return SqlBackend(make_session_factory(engine))


def open_store(settings: Settings) -> PartyStore:
    store = PartyStore(build_backend(settings), storage_key=settings.storage_key)
    return store.initialize(force_reseed=settings.force_reseed)


@contextmanager
def _handle_errors() -> Iterator[None]:
    """PartyHubError をメッセージ表示 + 終了コード1 に変換する"""
    try:
        yield
    except PartyHubError as e:
        logger.debug("command failed", exc_info=True)
        typer.echo(f"❌ {e}")
        raise typer.Exit(code=1)


def _sort_key(value: str) -> SortKey:
    try:
        return SortKey(value)
    except ValueError:
        valid = ", ".join(k.value for k in SortKey)
        typer.echo(f"❌ 並び順が不正です: {value} （候補: {valid}）")
        raise typer.Exit(code=1)


# ==============================================================
# DB メンテナンス
# ==============================================================

@cli.command()
def init_db(ctx: typer.Context):
    """DBスキーマを作成（初回のみ使用）"""
    Base.metadata.create_all(bind=_engine(ctx.obj))
    typer.echo("✅ Database schema created")


@cli.command()
def drop_db(ctx: typer.Context):
    """DBスキーマを全削除（開発用）"""
    Base.metadata.drop_all(bind=_engine(ctx.obj))
    typer.echo("🗑️ Database schema dropped")


@cli.command()
def connect_db(ctx: typer.Context):
    """DBへの接続可否テスト"""
    engine = _engine(ctx.obj)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).scalar_one()
            version = ".".join(str(v) for v in (engine.dialect.server_version_info or ()))
            typer.echo(f"✅ 接続成功！{engine.dialect.name} {version}".rstrip())
    except SQLAlchemyError as e:
        typer.echo(f"❌ 接続失敗: {e}")
        raise typer.Exit(code=1)


# ==============================================================
# 政党の操作
# ==============================================================

@cli.command("list")
def list_parties(
    ctx: typer.Context,
    ideology: str = typer.Option(FILTER_ALL, "--filter", "-i", help="理念で絞り込み（完全一致、all で全件）"),
    sort: str = typer.Option(SortKey.recent.value, "--sort", "-s", help="並び順: recent | popular | alphabetical"),
    columns: Optional[str] = typer.Option(None, "--columns", "-c", help="表示する列をカンマ区切りで指定（未指定は既定の列）"),
    output: str = typer.Option("table", "--output", "-f", help="出力形式: table | json", case_sensitive=False),
):
    """
    政党一覧を表示する。
    例:
      pa list -s popular
      pa list -i Conservatism -f json
      pa list -c id,name,slogan
    """
    key = _sort_key(sort)
    selected = [c.strip() for c in columns.split(",") if c.strip()] if columns else None
    try:
        renderer = TableRenderer(columns=selected, output=output)
    except ValueError as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(code=1)

    with _handle_errors():
        store = open_store(ctx.obj)
        typer.echo(renderer.render(store.query(ideology, key), store.count))


@cli.command()
def create(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", help="政党名"),
    slogan: str = typer.Option(..., "--slogan", help="スローガン"),
    description: str = typer.Option(..., "--description", help="説明"),
    ideology: str = typer.Option(..., "--ideology", help="理念（任意の文字列）"),
    founder: str = typer.Option(..., "--founder", help="党首・創設者"),
    color: str = typer.Option(DEFAULT_COLOR, "--color", help="党カラー"),
    logo: Optional[Path] = typer.Option(None, "--logo", help="ロゴ画像ファイル"),
):
    """政党を新規作成する"""
    data = PartyInput(
        name=name,
        slogan=slogan,
        description=description,
        color=color,
        ideology=ideology,
        founder=founder,
    )
    with _handle_errors():
        store = open_store(ctx.obj)
        party = asyncio.run(create_party_with_logo(store, data, logo))
    typer.echo(f"✅ 作成しました: id={party.id} {party.name}")


@cli.command()
def support(ctx: typer.Context, party_id: int = typer.Argument(..., help="支持する政党の id")):
    """政党を支持する（支持数 +1）"""
    with _handle_errors():
        store = open_store(ctx.obj)
        party = store.support_party(party_id)
    typer.echo(f"✅ {party.name}: {party.supports} supporters")


@cli.command()
def reset_demo(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="確認せずに実行"),
):
    """全件を削除してデモデータを投入し直す（開発用）"""
    if not yes and not typer.confirm("全ての政党を削除しますか？"):
        typer.echo("⚠ 中止しました")
        raise typer.Exit()
    with _handle_errors():
        store = open_store(ctx.obj)
        parties = store.reset_to_demo()
    typer.echo(f"✅ デモデータを投入しました（{len(parties)}件）")


@cli.command()
def count(ctx: typer.Context):
    """登録されている政党数を表示"""
    with _handle_errors():
        store = open_store(ctx.obj)
    typer.echo(str(store.count))


@cli.command()
def ideologies(ctx: typer.Context):
    """登録されている理念の一覧（絞り込み用）"""
    with _handle_errors():
        store = open_store(ctx.obj)
    for label in store.ideologies():
        typer.echo(f"- {label}")


@cli.command()
def render(
    ctx: typer.Context,
    ideology: str = typer.Option(FILTER_ALL, "--filter", "-i", help="理念で絞り込み（完全一致、all で全件）"),
    sort: str = typer.Option(SortKey.recent.value, "--sort", "-s", help="並び順: recent | popular | alphabetical"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="出力先ファイル（未指定は標準出力）"),
):
    """政党カードの HTML を出力する"""
    key = _sort_key(sort)
    with _handle_errors():
        store = open_store(ctx.obj)
        html = HtmlRenderer().render(store.query(ideology, key), store.count)

    if out is None:
        typer.echo(html)
        return
    try:
        out.write_text(html, encoding="utf-8")
    except OSError as e:
        typer.echo(f"❌ 出力に失敗しました: {out}: {e}")
        raise typer.Exit(code=1)
    typer.echo(f"✅ {out} に出力しました")


if __name__ == "__main__":
    cli()
