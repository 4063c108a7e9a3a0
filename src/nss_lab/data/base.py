# src/nss_lab/data/base.py
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Union

LOGGER = logging.getLogger(__name__)


class BaseIngestor(ABC):
    """
    Async fetch -> transform pipeline over a single source.

    `source` is either a local path or an http(s) URL; subclasses decide
    how each is read.
    """

    def __init__(self, source: Union[str, Path]):
        self.source = str(source)

    @property
    def is_remote(self) -> bool:
        return self.source.startswith(("http://", "https://"))

    @abstractmethod
    async def fetch_data(self) -> Any:
        """Fetch the raw payload."""

    @abstractmethod
    async def transform(self, raw_data: Any) -> Any:
        """Turn the raw payload into validated records."""

    async def run(self) -> Any:
        LOGGER.info("Ingesting %s", self.source)
        raw_data = await self.fetch_data()
        return await self.transform(raw_data)
