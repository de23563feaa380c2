# offer_model/state/history.py
"""
Previous-best-deal side-channel.

The aggregation step reads the last reported best deal to compute a
percent change and writes the new one back. Stores are last-write-wins and
carry no persistence guarantee: a missing or unreadable store simply means
"no previous value".
"""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable

from offer_model.utils.numeric import parse_number

logger = logging.getLogger(__name__)


@runtime_checkable
class BestDealHistory(Protocol):
    """Get/set pair for the previously reported best total deal (millions)."""

    def get(self) -> Optional[float]:
        ...

    def set(self, value: float) -> None:
        ...


class InMemoryBestDealHistory:
    """Process-local store, mostly useful in tests and notebooks."""

    def __init__(self, value: Optional[float] = None):
        self._value = value

    def get(self) -> Optional[float]:
        return self._value

    def set(self, value: float) -> None:
        self._value = float(value)


class JsonFileBestDealHistory:
    """
    Stores the previous result as ``{"metrics": {"totalDeal": {"value": x}}}``
    so files saved by earlier web sessions stay readable.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def get(self) -> Optional[float]:
        if not self.path.is_file():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read previous results from {self.path}: {e}")
            return None

        try:
            raw = data["metrics"]["totalDeal"]["value"]
        except (KeyError, TypeError):
            logger.warning(f"Previous results in {self.path} have no metrics.totalDeal.value")
            return None

        value = parse_number(raw)
        if value is None:
            logger.warning(f"Ignoring non-numeric previous total deal {raw!r} in {self.path}")
        return value

    def set(self, value: float) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"metrics": {"totalDeal": {"value": float(value)}}}
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        logger.debug(f"Saved best total deal {value:.4f} to {self.path}")
