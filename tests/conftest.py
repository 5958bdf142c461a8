"""
Shared pytest configuration.

Puts the project root on sys.path so `import marquee` and `import tests.utils`
work without an editable install, and replaces the router cooldown so
retry tests do not sleep for real.
"""

import sys
from pathlib import Path
from typing import List

import pytest


ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))


class CooldownRecorder:
    """
    Stand-in for the router's cooldown; remembers each requested delay and
    how many backend calls had been made when it was requested.
    """

    def __init__(self) -> None:
        self.delays: List[float] = []
        self.calls_before: List[int] = []
        self.backend = None

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        self.calls_before.append(len(self.backend.calls) if self.backend else -1)


@pytest.fixture
def cooldown(monkeypatch) -> CooldownRecorder:
    import marquee.gemini.router as gemini_router

    recorder = CooldownRecorder()
    monkeypatch.setattr(gemini_router, "_cooldown", recorder)
    return recorder
