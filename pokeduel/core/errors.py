"""
Error classes for clearer exception sources.
"""
from __future__ import annotations
from typing import Iterable

class PokeduelError(Exception):
    pass

class DataLoadError(PokeduelError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Failed to load {path}: {detail}")
        self.path = path
        self.detail = detail

class ValidationError(PokeduelError):
    pass

class InvalidStateError(PokeduelError):
    def __init__(self, state: str, action: str):
        super().__init__(f"Action '{action}' not accepted in state {state}")
        self.state = state
        self.action = action

class MissingCombatantError(PokeduelError):
    def __init__(self, keys: Iterable[str]):
        self.keys = tuple(keys)
        super().__init__(f"Missing combat data: {', '.join(self.keys)}")
