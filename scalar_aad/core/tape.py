# scalar_aad/core/tape.py
from __future__ import annotations

import logging
import weakref
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, List, Optional

from ..errors import StaleNodeError

if TYPE_CHECKING:
    from .var import Value

logger = logging.getLogger(__name__)


class Tape:
    """
    Arena that records Values and issues their ids, in creation order.

    The tape keeps only weak references: a node lives as long as something
    outside the tape (a variable, or a node built from it) still uses it, and
    leaves the tape on its own once unreachable. Ids are never reused, and
    operands always carry lower ids than the node built from them.
    """
    def __init__(self):
        self._nodes: weakref.WeakValueDictionary = weakref.WeakValueDictionary()
        self._next_id = 0

    def __len__(self):
        """Number of live nodes still recorded."""
        return len(self._nodes)

    def __repr__(self):
        return f"Tape(nodes={len(self._nodes)}, next_id={self._next_id})"

    @property
    def nodes(self) -> List[Value]:
        """Live recorded nodes, ordered by id."""
        return [node for _, node in sorted(self._nodes.items(), key=lambda kv: kv[0])]

    def mark(self) -> int:
        """Id the next recorded node will get; pass it to `truncate` later."""
        return self._next_id

    def push(self, node: Value) -> int:
        """Record `node` and return the id it is addressed by."""
        idx = self._next_id
        self._nodes[idx] = node
        self._next_id += 1
        return idx

    def holds(self, node: Value) -> bool:
        """True if `node` is still recorded under its own id."""
        return self._nodes.get(node.id) is node

    def get(self, index: int) -> Value:
        node = self._nodes.get(index)
        if node is None:
            raise StaleNodeError(f"tape index {index} is no longer recorded")
        return node

    def reset(self):
        """Drop every node. Values created before the reset become stale."""
        self.truncate(0)

    def truncate(self, mark: int):
        """Drop every node recorded at or after `mark`; those Values become stale."""
        if mark < 0:
            raise ValueError(f"cannot truncate tape to mark {mark}")
        dropped = [idx for idx in list(self._nodes.keys()) if idx >= mark]
        for idx in dropped:
            self._nodes.pop(idx, None)
        if dropped:
            logger.debug("Tape truncated at id %d (%d nodes dropped)", mark, len(dropped))


# Tape that Value() records on when no other tape is active
global_tape = Tape()


def get_tape() -> Tape:
    """Return the currently active tape."""
    return global_tape


@contextmanager
def use_tape(tape: Optional[Tape] = None) -> Iterator[Tape]:
    """
    Record new leaves on `tape` (a new empty Tape by default) inside the block.

    Nodes built from existing Values keep following their operands' tape.
    """
    from . import tape as _tape_mod
    outer = _tape_mod.global_tape
    _tape_mod.global_tape = tape if tape is not None else Tape()
    try:
        yield _tape_mod.global_tape
    finally:
        _tape_mod.global_tape = outer
