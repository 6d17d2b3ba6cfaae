"""Process groups: collections of processes within a session."""

from __future__ import annotations

import threading
import weakref
from typing import TYPE_CHECKING

from procgroups.session import Pid, Session

if TYPE_CHECKING:
    from procgroups.process import Process


class ProcessGroup:
    """A collection of processes belonging to one session.

    The group keeps its session alive and holds its processes weakly.
    """

    def __init__(self, pgid: Pid, session: Session) -> None:
        self._pgid = pgid
        self._session = session
        self._lock = threading.Lock()
        self._processes: weakref.WeakValueDictionary[Pid, Process] = (
            weakref.WeakValueDictionary()
        )
        session._add_group(self)

    @property
    def pgid(self) -> Pid:
        """The process group ID."""
        return self._pgid

    def session(self) -> Session:
        """The session this group belongs to."""
        return self._session

    def processes(self) -> list[Process]:
        """The live processes in this group, ordered by process ID."""
        with self._lock:
            items = sorted(self._processes.items(), key=lambda item: item[0])
        return [process for _, process in items]

    def _add_process(self, process: Process) -> None:
        with self._lock:
            self._processes[process.pid] = process

    def _remove_process(self, pid: Pid) -> None:
        with self._lock:
            self._processes.pop(pid, None)

    def __repr__(self) -> str:
        return f"ProcessGroup({self._pgid}, session={self._session.sid})"