"""Deterministic stand-ins for the simulator's random source and sleeper."""

from collections.abc import Iterable


class ScriptedRandom:
    """Random source replaying fixed latency and outcome draws."""

    def __init__(self, latencies: Iterable[int], outcome: float):
        self._latencies = iter(latencies)
        self._outcome = outcome

    def randrange(self, stop: int) -> int:
        value = next(self._latencies)
        assert 0 <= value < stop
        return value

    def random(self) -> float:
        return self._outcome


async def no_sleep(_seconds: float) -> None:
    return None
