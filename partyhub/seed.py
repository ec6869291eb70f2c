from __future__ import annotations
from datetime import datetime
from typing import List

from partyhub.models import Party

# デモ用の初期データ（3件固定）
DEMO_PARTIES = [
    {
        "id": 1,
        "name": "Progressive Democratic Alliance",
        "slogan": "Progress Through Unity",
        "description": "The Progressive Democratic Alliance advocates for comprehensive social reform, environmental sustainability, and economic equality. Our platform includes universal healthcare, progressive taxation, renewable energy transition, and strengthening democratic institutions.",
        "color": "#2563eb",
        "ideology": "Social Democracy",
        "founder": "Elizabeth Warren",
        "logo": "https://upload.wikimedia.org/wikipedia/commons/thumb/0/02/DemocraticLogo.svg/200px-DemocraticLogo.svg.png",
        "supports": 3,
    },
    {
        "id": 2,
        "name": "Conservative Unity Party",
        "slogan": "Tradition, Freedom, Prosperity",
        "description": "The Conservative Unity Party champions traditional values, free market economics, and limited government. We believe in fiscal responsibility, strong defense, constitutional originalism, and preserving our nation's founding principles.",
        "color": "#dc2626",
        "ideology": "Conservatism",
        "founder": "Robert Thompson",
        "logo": "https://upload.wikimedia.org/wikipedia/commons/thumb/9/9b/Republicanlogo.svg/200px-Republicanlogo.svg.png",
        "supports": 5,
    },
    {
        "id": 3,
        "name": "Green Future Coalition",
        "slogan": "Sustainability for Tomorrow",
        "description": "The Green Future Coalition prioritizes environmental protection, climate action, and sustainable development. Our comprehensive green new deal includes renewable energy investment, carbon neutrality goals, and environmental justice initiatives.",
        "color": "#16a34a",
        "ideology": "Green Politics",
        "founder": "Dr. Maria Rodriguez",
        "logo": "https://img.icons8.com/color/96/000000/leaf.png",
        "supports": 2,
    },
]


def demo_parties(now: datetime) -> List[Party]:
    """デモデータを生成する。created_at はすべて投入時刻 now"""
    return [Party(created_at=now, **row) for row in DEMO_PARTIES]
