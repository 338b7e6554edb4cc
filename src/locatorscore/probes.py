from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
import time
from typing import Callable, TypeVar

from .document import QueryEngine
from .errors import InvalidInputError, LocatorSyntaxError
from .models import DEFAULT_PROBE_SETTINGS, LocatorKind, MatchProbe
from .normalization import normalize

logger = logging.getLogger(__name__)

T = TypeVar("T")
ProbeTask = Callable[[threading.Event], T]

PERFORMANCE_BUDGET_MS = 100.0
PERFORMANCE_FAILURE_SCORE = 0.0


def _start(task: ProbeTask[T], name: str) -> tuple[concurrent.futures.ThreadPoolExecutor, concurrent.futures.Future[T], threading.Event]:
    cancel = threading.Event()
    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"locatorscore-{name}")
    future = executor.submit(task, cancel)
    return executor, future, cancel


def _teardown(executor: concurrent.futures.ThreadPoolExecutor, cancel: threading.Event) -> None:
    cancel.set()
    executor.shutdown(wait=False, cancel_futures=True)


def _timeout_seconds(timeout_ms: int | None) -> float | None:
    if timeout_ms is None:
        return None
    if timeout_ms <= 0:
        raise InvalidInputError("timeout_ms must be a positive integer or None.")
    return timeout_ms / 1000.0


def run_isolated(task: ProbeTask[T], timeout_ms: int | None, fallback: T, *, name: str = "probe") -> T:
    """Run ``task`` in its own worker and wait at most ``timeout_ms``.

    The task receives a cancellation event that is set as soon as the caller
    stops waiting; it must check the event between units of work. The worker
    is torn down on every exit path, and the call settles exactly once with
    either the task's value or ``fallback``.
    """
    timeout = _timeout_seconds(timeout_ms)
    executor, future, cancel = _start(task, name)
    try:
        return future.result(timeout=timeout)
    except concurrent.futures.TimeoutError:
        logger.warning("%s probe timed out after %s ms; using fallback.", name, timeout_ms)
        return fallback
    finally:
        _teardown(executor, cancel)


async def run_isolated_async(task: ProbeTask[T], timeout_ms: int | None, fallback: T, *, name: str = "probe") -> T:
    timeout = _timeout_seconds(timeout_ms)
    executor, future, cancel = _start(task, name)
    try:
        return await asyncio.wait_for(asyncio.wrap_future(future), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("%s probe timed out after %s ms; using fallback.", name, timeout_ms)
        return fallback
    finally:
        _teardown(executor, cancel)


def _performance_task(
    engine: QueryEngine,
    locator: str,
    locator_type: LocatorKind,
    iterations: int,
) -> ProbeTask[float]:
    if iterations <= 0:
        raise InvalidInputError("iterations must be a positive integer.")

    def task(cancel: threading.Event) -> float:
        start = time.perf_counter()
        for _ in range(iterations):
            if cancel.is_set():
                return PERFORMANCE_FAILURE_SCORE
            try:
                engine.query(locator, locator_type)
            except LocatorSyntaxError as exc:
                logger.warning("Performance probe failed: %s", exc)
                return PERFORMANCE_FAILURE_SCORE
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        average_ms = elapsed_ms / iterations
        logger.debug("%s %r averaged %.4f ms over %d runs", locator_type, locator, average_ms, iterations)
        return normalize(PERFORMANCE_BUDGET_MS - average_ms, 0, PERFORMANCE_BUDGET_MS)

    return task


def measure_performance(
    engine: QueryEngine,
    locator: str,
    locator_type: LocatorKind,
    iterations: int = DEFAULT_PROBE_SETTINGS.iterations,
    timeout_ms: int | None = DEFAULT_PROBE_SETTINGS.timeout_ms,
) -> float:
    task = _performance_task(engine, locator, locator_type, iterations)
    return run_isolated(task, timeout_ms, PERFORMANCE_FAILURE_SCORE, name="performance")


async def measure_performance_async(
    engine: QueryEngine,
    locator: str,
    locator_type: LocatorKind,
    iterations: int = DEFAULT_PROBE_SETTINGS.iterations,
    timeout_ms: int | None = DEFAULT_PROBE_SETTINGS.timeout_ms,
) -> float:
    task = _performance_task(engine, locator, locator_type, iterations)
    return await run_isolated_async(task, timeout_ms, PERFORMANCE_FAILURE_SCORE, name="performance")


def _match_task(engine: QueryEngine, locator: str, locator_type: LocatorKind) -> ProbeTask[MatchProbe]:
    def task(cancel: threading.Event) -> MatchProbe:
        try:
            matches = engine.query(locator, locator_type)
        except LocatorSyntaxError as exc:
            logger.warning("Match probe failed: %s", exc)
            return MatchProbe(0, False, False, str(exc))
        count = len(matches)
        message = "Locator is unique." if count == 1 else f"Locator matched {count} nodes."
        return MatchProbe(count, True, False, message)

    return task


def _timed_out_probe(timeout_ms: int | None) -> MatchProbe:
    return MatchProbe(0, False, True, f"Locator probe timed out after {timeout_ms} ms.")


def probe_matches(
    engine: QueryEngine,
    locator: str,
    locator_type: LocatorKind,
    timeout_ms: int | None = DEFAULT_PROBE_SETTINGS.timeout_ms,
) -> MatchProbe:
    task = _match_task(engine, locator, locator_type)
    return run_isolated(task, timeout_ms, _timed_out_probe(timeout_ms), name="match")


async def probe_matches_async(
    engine: QueryEngine,
    locator: str,
    locator_type: LocatorKind,
    timeout_ms: int | None = DEFAULT_PROBE_SETTINGS.timeout_ms,
) -> MatchProbe:
    task = _match_task(engine, locator, locator_type)
    return await run_isolated_async(task, timeout_ms, _timed_out_probe(timeout_ms), name="match")


def check_uniqueness(
    engine: QueryEngine,
    locator: str,
    locator_type: LocatorKind,
    timeout_ms: int | None = DEFAULT_PROBE_SETTINGS.timeout_ms,
) -> bool:
    return probe_matches(engine, locator, locator_type, timeout_ms).unique


async def check_uniqueness_async(
    engine: QueryEngine,
    locator: str,
    locator_type: LocatorKind,
    timeout_ms: int | None = DEFAULT_PROBE_SETTINGS.timeout_ms,
) -> bool:
    probe = await probe_matches_async(engine, locator, locator_type, timeout_ms)
    return probe.unique
