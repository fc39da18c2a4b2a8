"""
Background execution of combustion calculations.

Keeps an interactive front end responsive by running calculations on a
worker thread. Results and errors are delivered through futures or
callbacks; the engine itself stays a plain function.
"""

from __future__ import annotations

import logging
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import Callable, Optional

from combustion_calc.combustion.engine import CombustionEngine
from combustion_calc.combustion.results import CombustionResult
from combustion_calc.core.conditions import ProcessConditions
from combustion_calc.core.errors import EngineError
from combustion_calc.core.mixture import Mixture

logger = logging.getLogger(__name__)

ResultCallback = Callable[[CombustionResult], None]
ErrorCallback = Callable[[Exception], None]


class CalculationDispatcher:
    """
    Runs calculations off the caller's thread.

    Calculations run in submission order with the default single worker.

    Example:
        >>> with CalculationDispatcher() as dispatcher:
        ...     future = dispatcher.submit(mixture, conditions)
        ...     result = future.result(timeout=5)
    """

    def __init__(
        self,
        engine: Optional[CombustionEngine] = None,
        max_workers: int = 1,
    ) -> None:
        self.engine = engine or CombustionEngine()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="combustion-calc",
        )
        self._submitted = 0

    def submit(self, mixture: Mixture, conditions: ProcessConditions) -> Future:
        """
        Queue a calculation.

        Returns:
            Future resolving to a CombustionResult, or raising the
            EngineError of a failed calculation
        """
        self._submitted += 1
        logger.debug(
            f"Submitting calculation #{self._submitted} "
            f"({len(mixture)} fuel(s), flow {conditions.flow_rate})"
        )
        return self._executor.submit(self.engine.compute, mixture, conditions)

    def submit_with_callbacks(
        self,
        mixture: Mixture,
        conditions: ProcessConditions,
        on_result: ResultCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Future:
        """
        Queue a calculation and deliver its outcome to callbacks.

        Callbacks run on the worker thread, or on the cancelling thread for
        a cancelled calculation, which reaches ``on_error`` as a
        CancelledError. Without ``on_error``, failures are only logged.
        """
        future = self.submit(mixture, conditions)

        def _deliver(done: Future) -> None:
            if done.cancelled():
                logger.info("Calculation cancelled")
                if on_error is not None:
                    on_error(CancelledError())
                return
            error = done.exception()
            if error is None:
                on_result(done.result())
                return
            if isinstance(error, EngineError):
                logger.warning(f"Calculation failed: [{error.code}] {error}")
            else:
                logger.error(f"Unexpected calculation error: {error!r}")
            if on_error is not None:
                on_error(error)

        future.add_done_callback(_deliver)
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
        logger.debug("Calculation dispatcher shut down")

    def __enter__(self) -> CalculationDispatcher:
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()
