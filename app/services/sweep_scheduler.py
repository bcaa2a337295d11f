"""
In-process status sweep loop.

Enabled with SWEEP_INTERVAL_SECONDS > 0. Each tick runs one sweep over a
fresh read of the store; a failed tick is logged and the loop keeps going.
"""

import asyncio
import logging
from typing import Optional

from app.services.report_service import run_status_sweep

logger = logging.getLogger(__name__)


async def sweep_forever(interval_seconds: float) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            # Store I/O is blocking; keep it off the event loop
            await asyncio.get_running_loop().run_in_executor(None, run_status_sweep)
        except Exception as e:
            logger.error(f"Status sweep tick failed: {e}", exc_info=True)


def start_sweep_task(interval_seconds: int) -> Optional[asyncio.Task]:
    """Start the sweep loop, or return None when it is disabled."""
    if interval_seconds <= 0:
        logger.info("In-process status sweep disabled (SWEEP_INTERVAL_SECONDS=0)")
        return None
    logger.info(f"In-process status sweep every {interval_seconds}s")
    return asyncio.create_task(sweep_forever(interval_seconds))


async def stop_sweep_task(task: Optional[asyncio.Task]) -> None:
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
