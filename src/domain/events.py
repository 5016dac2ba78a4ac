"""
domain.events - Progress notifications emitted during menu synthesis.

A synthesis emits exactly two events, in order: SynthesisStarted before
the tree is built and SynthesisCompleted (carrying the tree) afterwards.
Renderers use them to show a loading placeholder and then swap in the menu.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from domain.models import MenuTree, UserRole


@dataclass(frozen=True)
class SynthesisStarted:
    role: UserRole
    utterance: str


@dataclass(frozen=True)
class SynthesisCompleted:
    tree: MenuTree


SynthesisEvent = Union[SynthesisStarted, SynthesisCompleted]
