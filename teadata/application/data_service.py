"""Data service contract implemented by every tea data backend.

The ``*_async`` methods are the canonical operations. The blocking methods
run them to completion with ``asyncio.run`` and exist for callers that cannot
await; they must not be called while an event loop is running in the same
thread (await the ``*_async`` variant there instead).
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Coroutine
from typing import Any, Generic, TypeVar

from ..domain.entities import TeaVariety
from ..domain.exceptions import ArgumentError

T = TypeVar("T")
R = TypeVar("R")


def parse_tea_id(value: object) -> int:
    """Normalize a tea identifier before any lookup.

    Args:
        value: A positive int or a string of digits

    Returns:
        The identifier as int

    Raises:
        ArgumentError: If the value is not a positive integer identifier
    """
    if isinstance(value, bool):
        raise ArgumentError("id", f"Invalid tea id {value!r}")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value <= 0:
        raise ArgumentError("id", f"Invalid tea id {value!r}")
    return value


def require_saved_id(tea: TeaVariety) -> int:
    """Get the identity of a tea that must already exist in the store.

    Raises:
        ArgumentError: If the tea has no store-assigned id
    """
    if not tea.id:
        raise ArgumentError("id", f"Tea '{tea.name}' has no id; it was never saved")
    return parse_tea_id(tea.id)


def run_blocking(coro: Coroutine[Any, Any, R]) -> R:
    """Run a coroutine to completion from synchronous code.

    Raises:
        RuntimeError: If an event loop is already running in this thread
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    coro.close()
    raise RuntimeError(
        "Blocking data service methods cannot be called from a running event "
        + "loop; await the *_async method instead"
    )


class DataService(ABC, Generic[T]):
    """Capability set of a tea data backend, generic over its payload type."""

    @abstractmethod
    async def initialize_async(self, locator: str) -> T | None:
        """Set up the backend against a file path or base URL."""

    @abstractmethod
    async def find_all_async(self) -> list[T]:
        """Get every stored entry in the store's natural order."""

    @abstractmethod
    async def find_by_id_async(self, tea_id: object) -> T:
        """Get one entry by its store-assigned id."""

    @abstractmethod
    async def add_async(self, tea: TeaVariety) -> T:
        """Add a new tea variety; the result carries the assigned id."""

    @abstractmethod
    async def update_async(self, tea: TeaVariety) -> T:
        """Replace the stored fields of an existing tea variety."""

    @abstractmethod
    async def delete_async(self, tea: TeaVariety) -> bool | T:
        """Delete an existing tea variety."""

    # Blocking variants

    def initialize(self, locator: str) -> T | None:
        return run_blocking(self.initialize_async(locator))

    def find_all(self) -> list[T]:
        return run_blocking(self.find_all_async())

    def find_by_id(self, tea_id: object) -> T:
        return run_blocking(self.find_by_id_async(tea_id))

    def add(self, tea: TeaVariety) -> T:
        return run_blocking(self.add_async(tea))

    def update(self, tea: TeaVariety) -> T:
        return run_blocking(self.update_async(tea))

    def delete(self, tea: TeaVariety) -> bool | T:
        return run_blocking(self.delete_async(tea))
