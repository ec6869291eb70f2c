from partyhub.errors import LogoReadError, NotFoundError, PartyHubError, PersistenceError, ValidationError
from partyhub.models import FILTER_ALL, Party, PartyInput, SortKey
from partyhub.store import PartyStore

__version__ = "0.1.0"

__all__ = [
    "PartyStore", "Party", "PartyInput", "SortKey", "FILTER_ALL",
    "PartyHubError", "ValidationError", "NotFoundError", "PersistenceError", "LogoReadError",
]
