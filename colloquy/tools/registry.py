"""Tool registry with validated, time-bounded and retried execution."""

import asyncio
import time
from typing import Any
from uuid import UUID

from colloquy.exceptions import (
    ColloquyError,
    ToolAlreadyRegisteredError,
    ToolExecutionFailedError,
    ToolNotFoundError,
    ToolTimeoutError,
    error_details,
)
from colloquy.observability.logging import get_logger
from colloquy.tools.models import Tool, ToolResult
from colloquy.tools.validation import apply_defaults, validate_parameters
from colloquy.utils.locks import AsyncReadWriteLock

logger = get_logger(__name__)

RETRYABLE_ERRORS = (ToolTimeoutError, ToolExecutionFailedError)


class ToolRegistry:
    """Tools keyed by id, with a unique name index.

    Locks are held only while resolving a tool; the tool body runs outside
    them, so a tool may call back into the registry.

    Timed-out executions are not cancelled. The registry keeps them in
    ``pending`` until they finish and then drops their result.
    """

    def __init__(self) -> None:
        self._tools: dict[UUID, Tool] = {}
        self._by_name: dict[str, UUID] = {}
        self._tools_lock = AsyncReadWriteLock()
        self._names_lock = AsyncReadWriteLock()
        self._pending: set[asyncio.Task[ToolResult]] = set()

    @property
    def pending(self) -> int:
        """Number of executions still running after their caller stopped waiting."""
        return sum(1 for task in self._pending if not task.done())

    async def register(self, tool: Tool) -> UUID:
        """Register a tool.

        Raises:
            ToolAlreadyRegisteredError: If the name or id is already taken
        """
        async with self._tools_lock.write(), self._names_lock.write():
            if tool.name in self._by_name or tool.id in self._tools:
                raise ToolAlreadyRegisteredError(tool.name)
            self._tools[tool.id] = tool
            self._by_name[tool.name] = tool.id

        logger.info("tool_registered", tool_id=str(tool.id), tool_name=tool.name)
        return tool.id

    async def unregister(self, tool_id: UUID) -> None:
        """Remove a tool.

        Raises:
            ToolNotFoundError: If the id is not registered
        """
        async with self._tools_lock.write(), self._names_lock.write():
            tool = self._tools.pop(tool_id, None)
            if tool is None:
                raise ToolNotFoundError(tool_id)
            self._by_name.pop(tool.name, None)

        logger.info("tool_unregistered", tool_id=str(tool_id), tool_name=tool.name)

    async def get(self, tool_id: UUID) -> Tool | None:
        async with self._tools_lock.read():
            return self._tools.get(tool_id)

    async def get_by_name(self, name: str) -> Tool | None:
        async with self._names_lock.read():
            tool_id = self._by_name.get(name)
        if tool_id is None:
            return None
        return await self.get(tool_id)

    async def list_tools(self) -> list[Tool]:
        async with self._tools_lock.read():
            return list(self._tools.values())

    async def _require(self, tool_id: UUID) -> Tool:
        tool = await self.get(tool_id)
        if tool is None:
            raise ToolNotFoundError(tool_id)
        return tool

    async def execute(self, tool_id: UUID, parameters: dict[str, Any] | None = None) -> ToolResult:
        """Apply defaults, validate and run a tool.

        Raises:
            ToolNotFoundError: If the id is not registered
            InvalidToolParametersError: If parameters fail the schema
            ToolExecutionFailedError: If the tool raises
        """
        tool = await self._require(tool_id)
        params = apply_defaults(tool.parameters, parameters)
        validate_parameters(tool.name, tool.parameters, params)

        logger.debug("tool_execution_started", tool_name=tool.name, params=sorted(params))
        start = time.perf_counter()
        try:
            result = await tool.execute(params)
        except ColloquyError:
            raise
        except Exception as e:
            logger.warning("tool_execution_failed", tool_name=tool.name, **error_details(e))
            raise ToolExecutionFailedError(tool.name, str(e)) from e

        logger.debug(
            "tool_execution_completed",
            tool_name=tool.name,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            soft_error=result.error,
        )
        return result

    async def execute_with_timeout(
        self,
        tool_id: UUID,
        parameters: dict[str, Any] | None,
        timeout: float,
    ) -> ToolResult:
        """Run ``execute`` but stop waiting after ``timeout`` seconds.

        Raises:
            ToolTimeoutError: If the tool has not finished in time; the tool
                keeps running in the background
        """
        tool = await self._require(tool_id)

        task = asyncio.ensure_future(self.execute(tool_id, parameters))
        self._pending.add(task)
        task.add_done_callback(self._forget)

        done, _ = await asyncio.wait({task}, timeout=timeout)
        if task in done:
            return task.result()

        logger.warning("tool_execution_timeout", tool_name=tool.name, timeout_s=timeout)
        raise ToolTimeoutError(tool.name, timeout)

    def _forget(self, task: asyncio.Task[ToolResult]) -> None:
        self._pending.discard(task)
        if not task.cancelled():
            # Marks a late failure as retrieved.
            task.exception()

    async def execute_with_retry(
        self,
        tool_id: UUID,
        parameters: dict[str, Any] | None,
        timeout: float,
        max_retries: int,
        base_backoff_ms: int,
    ) -> ToolResult:
        """Run with a per-attempt timeout and exponential backoff.

        Timeouts and tool failures are retried up to ``max_retries`` extra
        times, waiting ``base_backoff_ms * 2**n`` between attempts. Lookup
        and validation errors are raised immediately.
        """
        attempt = 0
        while True:
            try:
                return await self.execute_with_timeout(tool_id, parameters, timeout)
            except RETRYABLE_ERRORS as e:
                if attempt >= max_retries:
                    raise
                delay_ms = base_backoff_ms * (2**attempt)
                attempt += 1
                logger.info(
                    "tool_retry_scheduled",
                    tool_name=e.tool_name,
                    attempt=attempt,
                    max_retries=max_retries,
                    delay_ms=delay_ms,
                    error=e.message,
                )
                await asyncio.sleep(delay_ms / 1000)
