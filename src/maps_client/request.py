"""Base type shared by every per-operation request."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from maps_client.encoding import Params


class MapsRequest(BaseModel, ABC):
    """A typed request for one remote operation.

    Subclasses declare their fields plus three class attributes:

    - ``operation``: path segment of the endpoint, e.g. ``"elevation"``.
    - ``result_type``: pydantic model each decoded result is validated into.
    - ``payload_key``: where results live in the envelope. ``"results"``
      holds a list, ``"result"`` a single object, and ``None`` means the
      envelope itself carries the result fields.

    The dispatch pipeline calls :meth:`check` before any network activity,
    :meth:`params` to build the query and :meth:`check_results` on the
    decoded payload.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    operation: ClassVar[str]
    result_type: ClassVar[type[BaseModel]]
    payload_key: ClassVar[str | None] = "results"

    @classmethod
    def returns_many(cls) -> bool:
        return cls.payload_key == "results"

    @abstractmethod
    def check(self) -> None:
        """Enforce field combination rules.

        Raises:
            ValidationError: If the request must not be dispatched.
        """

    @abstractmethod
    def params(self) -> Params:
        """Return the ordered query parameters for this request."""

    def check_results(self, results: Sequence[Any]) -> None:
        """Verify decoded results against the request; no-op by default.

        Raises:
            DecodeError: If the results contradict the request.
        """
