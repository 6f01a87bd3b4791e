"""Unit tests for lazy rendering library acquisition."""

import asyncio
import threading
import time
import types

import pytest

from cvscriptly.contexts.rendering import LibraryFailed, LibraryLoader, LibraryReady
from cvscriptly.contexts.rendering.library_loader import DOCX_LIBRARY_ATTEMPTS


class FakeImporter:
    """Importer that fails a set number of times per source before succeeding."""

    def __init__(self, failures=None, delay=0.0):
        self.failures = dict(failures or {})
        self.delay = delay
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, name):
        with self._lock:
            self.calls.append(name)
            remaining = self.failures.get(name, 0)
            if remaining:
                self.failures[name] = remaining - 1
        if self.delay:
            time.sleep(self.delay)
        if remaining:
            raise ImportError(f"No module named '{name}'")
        return types.ModuleType(name)


def make_loader(importer, sources=("docx",), **kwargs):
    kwargs.setdefault("base_delay", 0)
    kwargs.setdefault("timeout", 2)
    return LibraryLoader(sources, importer=importer, **kwargs)


@pytest.mark.unit
def test_default_attempts_is_bounded():
    """Test the default retry budget is a small positive number."""
    assert 1 <= DOCX_LIBRARY_ATTEMPTS <= 10


@pytest.mark.unit
def test_acquire_success():
    """Test a working source yields LibraryReady with the module."""
    importer = FakeImporter()
    loader = make_loader(importer)

    result = asyncio.run(loader.acquire())

    assert isinstance(result, LibraryReady)
    assert result.source == "docx"
    assert result.module.__name__ == "docx"
    assert loader.is_ready


@pytest.mark.unit
def test_success_is_cached():
    """Test a second acquire reuses the cached module without importing again."""
    importer = FakeImporter()
    loader = make_loader(importer)

    async def acquire_twice():
        return await loader.acquire(), await loader.acquire()

    first, second = asyncio.run(acquire_twice())

    assert first is second
    assert importer.calls == ["docx"]


@pytest.mark.unit
def test_retries_then_succeeds():
    """Test transient import failures are retried."""
    importer = FakeImporter(failures={"docx": 2})
    loader = make_loader(importer, attempts=3)

    result = asyncio.run(loader.acquire())

    assert isinstance(result, LibraryReady)
    assert importer.calls == ["docx", "docx", "docx"]


@pytest.mark.unit
def test_falls_through_sources():
    """Test a failing source is followed by the next source in the same round."""
    importer = FakeImporter(failures={"primary": 99})
    loader = make_loader(importer, sources=("primary", "fallback"), attempts=1)

    result = asyncio.run(loader.acquire())

    assert isinstance(result, LibraryReady)
    assert result.source == "fallback"
    assert importer.calls == ["primary", "fallback"]


@pytest.mark.unit
def test_gives_up_after_attempts():
    """Test acquisition is bounded and returns a typed failure."""
    importer = FakeImporter(failures={"docx": 99})
    loader = make_loader(importer, attempts=3)

    result = asyncio.run(loader.acquire())

    assert isinstance(result, LibraryFailed)
    assert result.attempts == 3
    assert "No module named 'docx'" in result.reason
    assert importer.calls == ["docx"] * 3
    assert not loader.is_ready


@pytest.mark.unit
def test_failure_not_cached():
    """Test a failed acquisition is retried fresh on the next call."""
    importer = FakeImporter(failures={"docx": 1})
    loader = make_loader(importer, attempts=1)

    async def acquire_twice():
        return await loader.acquire(), await loader.acquire()

    first, second = asyncio.run(acquire_twice())

    assert isinstance(first, LibraryFailed)
    assert isinstance(second, LibraryReady)


@pytest.mark.unit
def test_timeout_counts_as_failure():
    """Test an import slower than the timeout fails that attempt."""
    importer = FakeImporter(delay=0.5)
    loader = make_loader(importer, timeout=0.05, attempts=2)

    result = asyncio.run(loader.acquire())

    assert isinstance(result, LibraryFailed)
    assert "timed out" in result.reason


@pytest.mark.unit
def test_concurrent_callers_share_one_acquisition():
    """Test concurrent acquires share the in-flight attempt."""
    importer = FakeImporter(delay=0.05)
    loader = make_loader(importer)

    async def acquire_concurrently():
        return await asyncio.gather(*(loader.acquire() for _ in range(5)))

    results = asyncio.run(acquire_concurrently())

    assert all(result is results[0] for result in results)
    assert importer.calls == ["docx"]


@pytest.mark.unit
def test_requires_sources():
    """Test a loader needs at least one source."""
    with pytest.raises(ValueError):
        LibraryLoader([])


@pytest.mark.unit
def test_unexpected_import_error_is_a_typed_failure():
    """Test errors other than ImportError raised while importing become LibraryFailed."""

    def corrupt_import(name):
        raise OSError(f"cannot read {name}/__init__.py")

    loader = make_loader(corrupt_import, attempts=2)

    result = asyncio.run(loader.acquire())

    assert isinstance(result, LibraryFailed)
    assert result.attempts == 2
    assert "OSError: cannot read docx/__init__.py" in result.reason


@pytest.mark.unit
def test_syntax_error_then_success():
    """Test a broken import on one attempt is retried like any other failure."""
    importer = FakeImporter()
    calls = []

    def flaky_import(name):
        calls.append(name)
        if len(calls) == 1:
            raise SyntaxError("invalid syntax")
        return importer(name)

    result = asyncio.run(make_loader(flaky_import, attempts=2).acquire())

    assert isinstance(result, LibraryReady)
    assert calls == ["docx", "docx"]
