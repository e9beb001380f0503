"""
Step decorator for the optimization pipeline.

Wraps a pipeline method so that its start, duration and outcome are logged
through the instance's logger.
"""

import functools
import time
from typing import Any, Callable

from .logger import get_logger


def pipeline_step(step_name: str, step_number: int, total_steps: int):
    """
    Mark a method as step `step_number` of `total_steps`.

    Exceptions are logged with the elapsed time and re-raised unchanged.

    Usage:
        @pipeline_step("Validating items", 1, 4)
        def _validate_items(self):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs) -> Any:
            logger = getattr(self, 'logger', None) or get_logger(__name__)
            logger.log_workflow_step(step_name, step_number, total_steps)

            started = time.time()
            try:
                result = func(self, *args, **kwargs)
            except Exception as e:
                logger.error(f"Step '{step_name}' failed after {time.time() - started:.2f}s: {e}")
                raise

            logger.log_step_completion(step_name, time.time() - started)
            return result

        return wrapper
    return decorator
