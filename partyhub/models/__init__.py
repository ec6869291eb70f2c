from .enums import FILTER_ALL, SortKey
from .party import Party, PartyInput

__all__ = ["FILTER_ALL", "SortKey", "Party", "PartyInput"]
