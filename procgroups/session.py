"""Sessions: collections of process groups."""

from __future__ import annotations

import threading
import weakref
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from procgroups.process_group import ProcessGroup

Pid = int
"""A process ID, also used as session ID, process group ID and thread ID."""


class Session:
    """A collection of process groups.

    The session holds its groups weakly: a group lives only as long as
    some process (or caller) still refers to it.
    """

    def __init__(self, sid: Pid) -> None:
        self._sid = sid
        self._lock = threading.Lock()
        self._process_groups: weakref.WeakValueDictionary[Pid, ProcessGroup] = (
            weakref.WeakValueDictionary()
        )

    @property
    def sid(self) -> Pid:
        """The session ID."""
        return self._sid

    def process_groups(self) -> list[ProcessGroup]:
        """The live process groups in this session, ordered by group ID."""
        with self._lock:
            items = sorted(self._process_groups.items(), key=lambda item: item[0])
        return [group for _, group in items]

    def _add_group(self, group: ProcessGroup) -> None:
        with self._lock:
            self._process_groups[group.pgid] = group

    def __repr__(self) -> str:
        return f"Session({self._sid})"