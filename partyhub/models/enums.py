from enum import Enum

# 絞り込みなしを表すフィルタ値
FILTER_ALL = "all"


class SortKey(str, Enum):
    recent = "recent"
    popular = "popular"
    alphabetical = "alphabetical"
