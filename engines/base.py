"""
Base class for the seller analytics engines.
"""

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from config.config import EngineConfig
from connectors.base import MarketplaceDataSource
from utils.errors import DataAccessError

logger_base = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class BaseEngine:
    """Holds the storage collaborator and config; guards every storage call."""

    def __init__(
        self,
        data_source: MarketplaceDataSource,
        config: EngineConfig | None = None,
        timeout: float | None = None,
    ):
        self.data_source = data_source
        self.config = config or EngineConfig()
        # Per-engine override of the configured storage timeout
        self.timeout = timeout if timeout is not None else self.config.storage_timeout_seconds

    async def _query(self, operation: str, call: Awaitable[Any]) -> Any:
        """
        Await a storage call under the engine timeout. Failures and timeouts
        become DataAccessError; cancellation of the calling task propagates.
        """
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger_base.error(
                f"Storage call {operation} timed out after {self.timeout}s in {type(self).__name__}"
            )
            raise DataAccessError(operation, e) from e
        except Exception as e:
            logger_base.error(
                f"Storage call {operation} failed in {type(self).__name__}: {e}",
                exc_info=True,
            )
            raise DataAccessError(operation, e) from e

    def _normalize(
        self, operation: str, model: type[RecordT], rows: Iterable[Any] | None
    ) -> list[RecordT]:
        """Validate storage rows into their record model."""
        if rows is None:
            return []
        normalized = []
        for row in rows:
            if isinstance(row, model):
                normalized.append(row)
                continue
            try:
                normalized.append(model.model_validate(row))
            except ValidationError as e:
                logger_base.error(f"Malformed {model.__name__} row from {operation}: {e}")
                raise DataAccessError(operation, e) from e
        return normalized
