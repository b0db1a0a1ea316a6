# -*- coding: utf-8 -*-
"""
Retry/Backoff Executor - retries a fallible coroutine with exponential backoff.

Domain-agnostic: knows nothing about forms. The wait between attempts is
cancellable through a CancellationToken, and the sleep function can be
replaced with a fake clock in tests.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

from models.retry import RetryConfig, RetryState
from services.exceptions import OperationCancelled
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
SleepFn = Callable[[float, Optional['CancellationToken']], Awaitable[None]]


class CancellationToken:
    """
    One-shot cancellation signal shared by everything a form session starts.

    Once cancelled it stays cancelled.
    """

    def __init__(self):
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "cancelled"):
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise OperationCancelled(self.reason or "cancelled")

    async def wait(self):
        await self._event.wait()


async def cancellable_sleep(delay: float, token: Optional[CancellationToken] = None):
    """
    Sleep for ``delay`` seconds unless the token fires first.

    Raises:
        OperationCancelled: the token fired before the delay elapsed
    """
    if token is None:
        await asyncio.sleep(delay)
        return
    token.raise_if_cancelled()
    try:
        await asyncio.wait_for(token.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return
    raise OperationCancelled(token.reason or "cancelled")


async def run_cancellable(awaitable: Awaitable[T], token: Optional[CancellationToken] = None) -> T:
    """
    Await ``awaitable`` but abandon it as soon as the token fires.

    The abandoned task is cancelled so its result never lands anywhere.
    """
    if token is None:
        return await awaitable
    token.raise_if_cancelled()

    work = asyncio.ensure_future(awaitable)
    stop = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({work, stop}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        stop.cancel()
        if not work.done():
            work.cancel()

    if not work.done() or work.cancelled():
        raise OperationCancelled(token.reason or "cancelled")
    if token.cancelled:
        # Completed at the same time the token fired: the caller is gone
        work.exception()
        raise OperationCancelled(token.reason or "cancelled")
    return work.result()


def retry_everything(error: BaseException) -> bool:
    return True


class RetryExecutor:
    """
    Runs an async operation, retrying failures with bounded exponential backoff.

    Usage:
        executor = RetryExecutor()
        result = await executor.execute(lambda: client.send(payload), RetryConfig(max_retries=3))
    """

    def __init__(self, sleep: Optional[SleepFn] = None):
        """
        Args:
            sleep: ``async sleep(delay, token)``; defaults to cancellable_sleep
        """
        self._sleep = sleep or cancellable_sleep

    async def execute(
        self,
        operation: Operation,
        config: Optional[RetryConfig] = None,
        *,
        token: Optional[CancellationToken] = None,
        is_retryable: Callable[[BaseException], bool] = retry_everything,
        on_retry: Optional[Callable[[RetryState], Any]] = None,
        state: Optional[RetryState] = None,
    ) -> Any:
        """
        Invoke ``operation`` until it succeeds or the retry budget is spent.

        Args:
            operation: Zero-argument callable returning an awaitable
            config: Retry policy (defaults to the configured policy)
            token: Cancellation token checked before each attempt, around each call
                and during each wait
            is_retryable: Failures for which it returns False propagate at once
            on_retry: Called with the retry state before each backoff wait
            state: RetryState to reset and update in place, for callers that
                report progress

        Returns:
            The operation's result

        Raises:
            The last failure once ``attempt > max_retries`` or a non-retryable failure;
            OperationCancelled if the token fires
        """
        config = config or RetryConfig.from_config()
        state = state if state is not None else RetryState()
        state.reset(config)

        while True:
            if token is not None:
                token.raise_if_cancelled()
            try:
                result = await run_cancellable(operation(), token)
            except OperationCancelled:
                raise
            except Exception as e:
                state.attempt += 1
                state.last_error = e

                if not is_retryable(e):
                    logger.warning(f"Attempt {state.attempt} failed with non-retryable error: {e}")
                    raise

                if state.attempt > config.max_retries:
                    logger.error(
                        f"Giving up after {state.attempt} attempts "
                        f"(max_retries={config.max_retries}): {e}"
                    )
                    raise

                state.next_delay = config.delay_for(state.attempt)
                logger.info(
                    f"Attempt {state.attempt} failed ({e}); "
                    f"retrying in {state.next_delay:.3f}s"
                )
                if on_retry is not None:
                    on_retry(state)
                await self._sleep(state.next_delay, token)
                continue

            if state.attempt:
                logger.info(f"Operation succeeded after {state.attempt} retries")
            return result
