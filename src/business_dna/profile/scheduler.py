"""
Background profile refresh.

The scheduler is an explicit component with its own start/stop lifecycle.
Every refresh goes through ProfileService.get_or_build, so a scheduled
rebuild and an on-demand rebuild of the same key share one in-flight build.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Tuple, Union

from business_dna.errors import CacheBuildFailure
from business_dna.profile.service import ProfileService

logger = logging.getLogger(__name__)

OperatorKey = Tuple[str, Optional[str]]
OperatorsProvider = Callable[
    [], Union[Iterable[OperatorKey], Awaitable[Iterable[OperatorKey]]]
]


class ProfileRefreshScheduler:
    """Periodically force-refreshes the profiles of active operators."""

    def __init__(
        self,
        service: ProfileService,
        operators: OperatorsProvider,
        interval: Optional[float] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            service: The profile service whose builds are refreshed
            operators: Returns the (operator_id, scope) pairs to refresh; may be async
            interval: Seconds between runs (default: REFRESH_INTERVAL_SECONDS)
        """
        self.service = service
        self.operators = operators
        self.interval = interval or service.settings.REFRESH_INTERVAL_SECONDS
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> List[OperatorKey]:
        """
        Refresh every active operator once.

        A failed build is logged and does not stop the run.

        Returns:
            The keys that were refreshed successfully
        """
        keys = self.operators()
        if inspect.isawaitable(keys):
            keys = await keys

        refreshed: List[OperatorKey] = []
        for operator_id, scope in keys:
            try:
                await self.service.get_or_build(operator_id, scope, force_refresh=True)
                refreshed.append((operator_id, scope))
            except CacheBuildFailure as e:
                logger.warning(f"Scheduled refresh failed: {e}")

        logger.info(f"Scheduled refresh complete: {len(refreshed)} profiles rebuilt")
        return refreshed

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Scheduled refresh run failed: {e}")
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        """Start the refresh loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.ensure_future(self._loop())
        logger.info(f"ProfileRefreshScheduler started (interval={self.interval}s)")

    async def stop(self) -> None:
        """Cancel the refresh loop and wait for it to finish."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("ProfileRefreshScheduler stopped")
