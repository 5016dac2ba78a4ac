"""
domain.ports - Abstract interfaces (Protocols) for the system boundaries.

These define WHAT the core needs without specifying HOW. Using
typing.Protocol (structural typing) instead of ABC. Any class that
implements the methods satisfies the port without explicit inheritance.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from domain.events import SynthesisEvent


@runtime_checkable
class SynthesisObserver(Protocol):
    """Receives the ordered progress notifications of one menu synthesis."""

    def notify(self, event: SynthesisEvent) -> None: ...
