"""First-error chaining for fluent builders.

A builder records the first failure of a configuration call and every later
configuration call becomes a no-op, so a long chain such as::

    new(url).set_proxy(proxy).set_form(files, fields).set_timeout(5).post()

needs no per-call error checks. The recorded error is raised by the next
dispatch.
"""

import functools
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ErrorChain:
    """Mixin holding the first recorded error of a builder chain."""

    _error: Optional[BaseException] = None

    @property
    def error(self) -> Optional[BaseException]:
        """First recorded error, or None while the chain is healthy."""
        return self._error

    def _fail(self, exc: BaseException) -> None:
        """Record exc unless an earlier error is already recorded."""
        if self._error is None:
            self._error = exc


def chained(method: Callable) -> Callable:
    """Decorator for builder configuration methods.

    The wrapped method is skipped while an error is recorded and the builder
    itself is always returned.

    Usage:
        class Request(ErrorChain):
            @chained
            def set_timeout(self, timeout):
                ...
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self._error is not None:
            logger.debug(f"Skipping {method.__name__}: chain already failed with {self._error!r}")
            return self
        method(self, *args, **kwargs)
        return self

    return wrapper
