"""Per-function taint map."""

from typing import Dict, Iterable, Iterator, Tuple


class TaintState:
    """
    Mapping from variable name to a boolean taint flag for one function.

    Lookups of unknown or empty names return False. Writes to empty names
    are ignored, so unnamed values never enter the map. Entries are
    overwritten but never removed.
    """

    def __init__(self) -> None:
        self._taint: Dict[str, bool] = {}

    def seed_parameters(self, names: Iterable[str]) -> None:
        """Mark every named parameter as tainted."""
        for name in names:
            if name:
                self._taint[name] = True

    def lookup(self, name: str) -> bool:
        if not name:
            return False
        return self._taint.get(name, False)

    def set_taint(self, name: str, value: bool) -> None:
        if not name:
            return
        self._taint[name] = bool(value)

    def __contains__(self, name: object) -> bool:
        return bool(name) and name in self._taint

    def __len__(self) -> int:
        return len(self._taint)

    def items(self) -> Iterator[Tuple[str, bool]]:
        """Entries sorted by name, as dumped in the debug trace."""
        return iter(sorted(self._taint.items()))

    def snapshot(self) -> Dict[str, bool]:
        return dict(self._taint)
