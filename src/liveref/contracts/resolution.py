# liveref/contracts/resolution.py
"""
Observable resolution states of a reference.

A reference is always in exactly one of three states: still loading,
failed (:class:`ResolutionError`) or resolved (:class:`ResolvedEntity`).
Errors are values, never exceptions, so they can be shared by every caller
that joined the same request.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from liveref.contracts.entity import ResolvedEntity


@dataclass(frozen=True)
class Loading:
    """Resolution has not completed yet."""

    def __repr__(self) -> str:
        return "LOADING"


LOADING = Loading()


@dataclass(frozen=True)
class ResolutionError:
    """Resolution failed for ``identifier``.

    Attributes:
        identifier: The identifier as stored in the document.
        reason: One of ``invalid_identifier``, ``backend_error``,
            ``not_found``, ``malformed_payload``.
        message: Human-readable detail, for logs and diagnostics only.
    """

    identifier: str
    reason: str
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "resolution_error",
            "identifier": self.identifier,
            "reason": self.reason,
            "message": self.message,
        }


ResolutionState = Union[Loading, ResolutionError, ResolvedEntity]
