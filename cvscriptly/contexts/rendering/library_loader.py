"""
Lazy Rendering Library Acquisition

Loads an optional rendering library on first use instead of at import time. The
DOCX renderer acquires python-docx through a LibraryLoader exactly once per
invocation and consumes the typed result; retry and timeout handling live here
and nowhere in the rendering code.

Acquisition:
- Tries each source module in order, each attempt bounded by a timeout
- Retries a failed round with exponential backoff, up to a fixed number of rounds
- Caches a successful result for the life of the loader
- Concurrent callers share one in-flight acquisition
"""

import asyncio
import importlib
import os
from dataclasses import dataclass
from types import ModuleType
from typing import Callable, Optional, Sequence, Union

from dotenv import load_dotenv

from cvscriptly.contexts.rendering.logger import _log_debug, log_library_attempt

load_dotenv()

DOCX_LIBRARY_TIMEOUT = float(os.getenv("DOCX_LIBRARY_TIMEOUT", "5"))
DOCX_LIBRARY_ATTEMPTS = int(os.getenv("DOCX_LIBRARY_ATTEMPTS", "3"))
BASE_DELAY = 0.5


@dataclass(frozen=True)
class LibraryReady:
    module: ModuleType
    source: str


@dataclass(frozen=True)
class LibraryFailed:
    reason: str
    attempts: int


LibraryResult = Union[LibraryReady, LibraryFailed]


class LibraryLoader:
    """
    Asynchronous, cached acquisition of one library.

    Args:
        sources: Module names to try in order (first success wins)
        timeout: Seconds allowed per import attempt
        attempts: Maximum rounds over all sources
        base_delay: Backoff before round n+1 is base_delay * 2**(n-1)
        importer: Import function (defaults to importlib.import_module)

    Example:
        >>> loader = LibraryLoader(["docx"])
        >>> result = await loader.acquire()
        >>> isinstance(result, LibraryReady)
        True
    """

    def __init__(
        self,
        sources: Sequence[str],
        timeout: float = DOCX_LIBRARY_TIMEOUT,
        attempts: int = DOCX_LIBRARY_ATTEMPTS,
        base_delay: float = BASE_DELAY,
        importer: Callable[[str], ModuleType] = importlib.import_module,
    ):
        if not sources:
            raise ValueError("LibraryLoader needs at least one source")
        self.sources = tuple(sources)
        self.timeout = timeout
        self.attempts = max(1, attempts)
        self.base_delay = base_delay
        self._importer = importer
        self._ready: Optional[LibraryReady] = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def is_ready(self) -> bool:
        return self._ready is not None

    async def acquire(self) -> LibraryResult:
        """
        Acquire the library, reusing a cached success or an in-flight attempt.

        Failures are not cached: the next call starts a fresh acquisition.
        """
        if self._ready is not None:
            return self._ready

        if self._pending is None:
            self._pending = asyncio.get_running_loop().create_task(self._load())
            self._pending.add_done_callback(self._clear_pending)

        # shield: one cancelled caller must not cancel the shared acquisition
        return await asyncio.shield(self._pending)

    def _clear_pending(self, task: asyncio.Task) -> None:
        if self._pending is task:
            self._pending = None

    async def _try_source(self, source: str) -> ModuleType:
        return await asyncio.wait_for(asyncio.to_thread(self._importer, source), self.timeout)

    async def _load(self) -> LibraryResult:
        reasons = []
        for attempt in range(1, self.attempts + 1):
            reasons = []
            for source in self.sources:
                try:
                    module = await self._try_source(source)
                except asyncio.TimeoutError:
                    reason = f"{source}: timed out after {self.timeout:g}s"
                except ImportError as e:
                    reason = f"{source}: {e}"
                except Exception as e:
                    reason = f"{source}: {type(e).__name__}: {e}"
                else:
                    self._ready = LibraryReady(module=module, source=source)
                    _log_debug(f"Loaded {source} (attempt {attempt}/{self.attempts})")
                    return self._ready

                reasons.append(reason)
                log_library_attempt(source, attempt, self.attempts, reason)

            if attempt < self.attempts:
                await asyncio.sleep(self.base_delay * (2 ** (attempt - 1)))

        return LibraryFailed(reason="; ".join(reasons), attempts=self.attempts)
