from __future__ import annotations
from datetime import datetime
from html import escape
from typing import Sequence

from partyhub.models import Party

EMPTY_STATE = """<div class="no-parties">
    <i class="fas fa-vote-yea"></i>
    <p>No political parties found.</p>
    <p>Create a new party or adjust the filter criteria.</p>
</div>"""

CARD_TEMPLATE = """<div class="party-card" style="--party-color: {color}; border-left-color: {color};">
    <div class="party-header">
        {logo}
        <div class="party-info">
            <h3>{name}</h3>
            <p class="party-slogan">&quot;{slogan}&quot;</p>
        </div>
    </div>
    <div class="party-details">
        <p class="party-description">{description}</p>
        <div class="party-meta">
            <div class="meta-item">
                <i class="fas fa-user-tie"></i>
                <span>Leader: {founder}</span>
            </div>
            <div class="meta-item">
                <i class="fas fa-balance-scale"></i>
                <span>{ideology}</span>
            </div>
            <div class="meta-item">
                <i class="fas fa-calendar-alt"></i>
                <span>Founded: {founded}</span>
            </div>
        </div>
    </div>
    <div class="party-footer">
        <div class="support-count">
            <i class="fas fa-users"></i>
            <span>{supports} supporters</span>
        </div>
        <button class="support-btn" data-party-id="{id}">
            <i class="fas fa-hand-paper"></i>
            Support
        </button>
    </div>
</div>"""


def format_date_en_us(dt: datetime) -> str:
    # toLocaleDateString("en-US") 相当: 閲覧側（ローカル）の日付で M/D/YYYY
    dt = dt.astimezone()
    return f"{dt.month}/{dt.day}/{dt.year}"


def logo_html(party: Party) -> str:
    color = escape(party.color)
    if party.logo:
        return f'<img src="{escape(party.logo)}" alt="Logo of {escape(party.name)}" class="party-logo">'
    # ロゴ未設定時は政党名の頭文字を党カラーの上に表示
    initial = escape(party.name[:1])
    return (
        f'<div class="party-logo" style="background: {color}; display: flex; align-items: center; '
        f'justify-content: center; color: white; font-weight: bold; font-size: 1.2rem;">{initial}</div>'
    )


def party_card(party: Party) -> str:
    return CARD_TEMPLATE.format(
        id=party.id,
        color=escape(party.color),
        logo=logo_html(party),
        name=escape(party.name),
        slogan=escape(party.slogan),
        description=escape(party.description),
        founder=escape(party.founder),
        ideology=escape(party.ideology),
        founded=format_date_en_us(party.created_at),
        supports=party.supports,
    )


class HtmlRenderer:
    """政党カードのグリッドを HTML 断片として出力する"""

    def __init__(self, title: str = "Political Parties") -> None:
        self.title = title

    def render(self, parties: Sequence[Party], total: int) -> str:
        header = f'<h2>{escape(self.title)} <span id="partyCount">({total})</span></h2>'
        if not parties:
            body = EMPTY_STATE
        else:
            body = "\n".join(party_card(p) for p in parties)
        return f'{header}\n<div id="partiesGrid" class="parties-grid">\n{body}\n</div>\n'
