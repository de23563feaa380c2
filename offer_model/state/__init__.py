from .history import BestDealHistory, InMemoryBestDealHistory, JsonFileBestDealHistory

__all__ = ["BestDealHistory", "InMemoryBestDealHistory", "JsonFileBestDealHistory"]
