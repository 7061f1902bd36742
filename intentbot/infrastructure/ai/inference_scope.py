from contextlib import contextmanager
from typing import Any, Iterator, List, TypeVar

from intentbot.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


class InferenceScope:
    """
    Tracks intermediate arrays created during one forward pass.

    Everything tracked is released when the owning ``inference_scope``
    exits, whether the pass returned normally, returned early or raised.
    Values that must outlive the scope are copied out with ``keep``.
    """

    def __init__(self, name: str):
        self.name = name
        self._tracked: List[Any] = []
        self.released = 0

    def track(self, value: T) -> T:
        self._tracked.append(value)
        return value

    def keep(self, value: Any) -> Any:
        """Detach a result from the scope as plain Python data."""
        if hasattr(value, "tolist"):
            return value.tolist()
        return value

    def release(self) -> None:
        self.released = len(self._tracked)
        for value in self._tracked:
            release = getattr(value, "dispose", None) or getattr(value, "close", None)
            if callable(release):
                release()
        self._tracked.clear()

    def __len__(self) -> int:
        return len(self._tracked)


@contextmanager
def inference_scope(name: str) -> Iterator[InferenceScope]:
    """
    Context manager for the intermediates of one inference call.

    Args:
        name: Label used in debug logs

    Yields:
        The scope to track intermediates in
    """
    scope = InferenceScope(name)
    try:
        yield scope
    finally:
        scope.release()
        logger.debug(f"Released {scope.released} intermediates after {name}")
