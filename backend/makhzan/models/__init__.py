from makhzan.models.state import PersistedState

__all__ = [
    "PersistedState",
]
