"""Threads belonging to a process."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

from procgroups.session import Pid

if TYPE_CHECKING:
    from procgroups.process import Process


class Thread:
    """A thread of a process.

    A thread keeps its process alive; the process only tracks its
    threads weakly.
    """

    def __init__(self, tid: Pid, process: Process, data: Any = None) -> None:
        self._tid = tid
        self._process = process
        self.data = data

    @property
    def tid(self) -> Pid:
        """The thread ID."""
        return self._tid

    @property
    def process(self) -> Process:
        """The process this thread belongs to."""
        return self._process

    def exit(self, exit_code: int) -> bool:
        """Exit the thread.

        Returns True if it was the last thread of its process.
        """
        return self._process._thread_exit(self._tid, exit_code)

    def __repr__(self) -> str:
        return f"Thread({self._tid}, process={self._process.pid})"


@dataclasses.dataclass(frozen=True)
class ThreadBuilder:
    """Builds a new thread within a process."""

    tid: Pid
    process: Process
    data: Any = None

    def with_data(self, data: Any) -> ThreadBuilder:
        """Return a builder that attaches ``data`` to the thread."""
        return dataclasses.replace(self, data=data)

    def build(self) -> Thread:
        """Create the thread and register it with its process."""
        thread = Thread(self.tid, self.process, self.data)
        self.process._add_thread(thread)
        return thread