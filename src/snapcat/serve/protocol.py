"""Transport protocol shared by the content-serving strategies.

A transport is anything with this shape::

    transport.start()       # bind / spawn, raise ServerError on failure
    transport.base_url      # "http://127.0.0.1:4200"
    transport.stop()        # idempotent, safe when never started

No base class required.  The orchestrator checks the shape, not the lineage.
"""

from typing import Protocol

from snapcat._types import BaseURL


class Transport(Protocol):
    """Serves the built application over local HTTP for the run's lifetime."""

    @property
    def base_url(self) -> BaseURL: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...
