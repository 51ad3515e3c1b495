import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence

from .. import settings

logger = logging.getLogger(__name__)


class BatchItemResult:
    """Outcome of one call made by the batch runner"""

    def __init__(self, item: Any, success: bool, value: Any = None, error: Optional[str] = None):
        self.item = item
        self.success = success
        self.value = value
        self.error = error

    def __repr__(self) -> str:
        status = "ok" if self.success else f"failed: {self.error}"
        return f"BatchItemResult({self.item!r}, {status})"


class BatchRunner:
    """Runs calls in small concurrent batches with a pause between batches.

    A failing call never cancels the other calls of its batch; every item
    gets its own result, in input order.
    """

    def __init__(
        self,
        batch_size: int = settings.BATCH_SIZE,
        delay: float = settings.BATCH_DELAY_MS / 1000,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.batch_size = batch_size
        self.delay = delay
        self._sleep = sleep

    def run(self, items: Sequence[Any], func: Callable[[Any], Any]) -> List[BatchItemResult]:
        items = list(items)
        results: List[BatchItemResult] = []

        for start in range(0, len(items), self.batch_size):
            batch = items[start:start + self.batch_size]
            logger.debug(f"Running batch of {len(batch)} item(s) starting at {start}")

            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                futures = [executor.submit(func, item) for item in batch]
                for item, future in zip(batch, futures):
                    try:
                        results.append(BatchItemResult(item, True, value=future.result()))
                    except Exception as e:
                        logger.warning(f"Batch call failed for {item!r}: {e}")
                        results.append(BatchItemResult(item, False, error=str(e)))

            if start + self.batch_size < len(items) and self.delay > 0:
                self._sleep(self.delay)

        return results
