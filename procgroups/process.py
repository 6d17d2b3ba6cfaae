"""Processes, their hierarchy, and the init process."""

from __future__ import annotations

import dataclasses
import threading
import weakref
from typing import Any, Optional

from procgroups.process_group import ProcessGroup
from procgroups.session import Pid, Session
from procgroups.thread import Thread, ThreadBuilder

_init_lock = threading.Lock()
_init_process: Optional[Process] = None


def init_proc() -> Process:
    """Return the init process.

    Raises RuntimeError if the init process has not been built yet.
    """
    if _init_process is None:
        raise RuntimeError("init process has not been initialized")
    return _init_process


class Process:
    """A process.

    A process owns its children and keeps its process group alive; its
    parent and its threads are referenced weakly.
    """

    def __init__(
        self,
        pid: Pid,
        parent: Optional[Process],
        group: ProcessGroup,
        data: Any = None,
    ) -> None:
        self._pid = pid
        self.data = data
        self._zombie = False
        self._tg_lock = threading.Lock()
        self._threads: weakref.WeakValueDictionary[Pid, Thread] = (
            weakref.WeakValueDictionary()
        )
        self._exit_code = 0
        self._group_exited = False
        self._children_lock = threading.Lock()
        self._children: dict[Pid, Process] = {}
        self._parent = weakref.ref(parent) if parent is not None else None
        self._group_lock = threading.RLock()
        self._group = group

    @property
    def pid(self) -> Pid:
        """The process ID."""
        return self._pid

    def is_init(self) -> bool:
        """Return True if this is the init process."""
        return self is init_proc()

    # Parent and children

    def parent(self) -> Optional[Process]:
        """The parent process, or None if there is none."""
        return self._parent() if self._parent is not None else None

    def children(self) -> list[Process]:
        """The child processes, ordered by process ID."""
        with self._children_lock:
            return [child for _, child in sorted(self._children.items())]

    # Process group and session

    def group(self) -> ProcessGroup:
        """The process group this process belongs to."""
        with self._group_lock:
            return self._group

    def _set_group(self, group: ProcessGroup) -> None:
        with self._group_lock:
            self._group._remove_process(self._pid)
            group._add_process(self)
            self._group = group

    def create_session(self) -> Optional[tuple[Session, ProcessGroup]]:
        """Move this process into a new session and a new group.

        Returns None if the process already leads its session, otherwise
        the new session and group. The caller must ensure the new group ID
        does not clash with an existing group.
        """
        with self._group_lock:
            if self._group.session().sid == self._pid:
                return None
            session = Session(self._pid)
            group = ProcessGroup(self._pid, session)
            self._set_group(group)
        return session, group

    def create_group(self) -> Optional[ProcessGroup]:
        """Move this process into a new group in the same session.

        Returns None if the process already leads its group, otherwise the
        new group. The caller must ensure the group ID does not clash.
        """
        with self._group_lock:
            if self._group.pgid == self._pid:
                return None
            group = ProcessGroup(self._pid, self._group.session())
            self._set_group(group)
        return group

    def move_to_group(self, group: ProcessGroup) -> bool:
        """Move this process to ``group``.

        Returns False if the group is in a different session, True if the
        process is now in the group.
        """
        with self._group_lock:
            if self._group is group:
                return True
            if self._group.session() is not group.session():
                return False
            self._set_group(group)
        return True

    # Threads

    def new_thread(self, tid: Pid) -> ThreadBuilder:
        """Start building a new thread in this process."""
        return ThreadBuilder(tid, self)

    def threads(self) -> list[Thread]:
        """The live threads of this process, ordered by thread ID."""
        with self._tg_lock:
            items = sorted(self._threads.items(), key=lambda item: item[0])
        return [thread for _, thread in items]

    def is_group_exited(self) -> bool:
        """Return True if the process has been marked as group exited."""
        with self._tg_lock:
            return self._group_exited

    def group_exit(self) -> None:
        """Mark the process as group exited."""
        with self._tg_lock:
            self._group_exited = True

    def exit_code(self) -> int:
        """The exit code of the process."""
        with self._tg_lock:
            return self._exit_code

    def _add_thread(self, thread: Thread) -> None:
        with self._tg_lock:
            self._threads[thread.tid] = thread

    def _thread_exit(self, tid: Pid, exit_code: int) -> bool:
        with self._tg_lock:
            if not self._group_exited:
                self._exit_code = exit_code
            self._threads.pop(tid, None)
            return len(self._threads) == 0

    # Status and exit

    def is_zombie(self) -> bool:
        """Return True if the process has exited but not been freed."""
        return self._zombie

    def exit(self) -> None:
        """Turn the process into a zombie and hand its children to init.

        Raises RuntimeError for the init process.
        """
        reaper = init_proc()
        if self is reaper:
            raise RuntimeError("init process cannot exit")

        with self._children_lock:
            self._zombie = True
            orphans, self._children = self._children, {}

        reaper_ref = weakref.ref(reaper)
        with reaper._children_lock:
            for pid, child in orphans.items():
                child._parent = reaper_ref
                reaper._children[pid] = child

    def free(self) -> None:
        """Remove a zombie process from its parent.

        Raises RuntimeError if the process is not a zombie.
        """
        if not self.is_zombie():
            raise RuntimeError("only zombie process can be freed")
        parent = self.parent()
        if parent is not None:
            with parent._children_lock:
                parent._children.pop(self._pid, None)

    def __repr__(self) -> str:
        fields = [f"pid={self._pid}"]
        with self._tg_lock:
            group_exited = self._group_exited
            exit_code = self._exit_code
        if group_exited:
            fields.append("group_exited=True")
        if self.is_zombie():
            fields.append(f"exit_code={exit_code}")
        parent = self.parent()
        if parent is not None:
            fields.append(f"parent={parent.pid}")
        fields.append(f"group={self.group()!r}")
        return f"Process({', '.join(fields)})"

    # Builders

    @staticmethod
    def new_init(pid: Pid) -> ProcessBuilder:
        """Start building the init process; build it only once."""
        return ProcessBuilder(pid, None)

    def fork(self, pid: Pid) -> ProcessBuilder:
        """Start building a child of this process."""
        return ProcessBuilder(pid, self)


@dataclasses.dataclass(frozen=True)
class ProcessBuilder:
    """Builds a new process."""

    pid: Pid
    parent: Optional[Process]
    data: Any = None

    def with_data(self, data: Any) -> ProcessBuilder:
        """Return a builder that attaches ``data`` to the process."""
        return dataclasses.replace(self, data=data)

    def build(self) -> Process:
        """Create the process and link it into its group and parent.

        Building a second init process raises RuntimeError.
        """
        global _init_process

        if self.parent is None:
            with _init_lock:
                if _init_process is not None:
                    raise RuntimeError("init process is already initialized")
                process = self._create(ProcessGroup(self.pid, Session(self.pid)))
                _init_process = process
            return process

        process = self._create(self.parent.group())
        with self.parent._children_lock:
            self.parent._children[self.pid] = process
        return process

    def _create(self, group: ProcessGroup) -> Process:
        process = Process(self.pid, self.parent, group, self.data)
        group._add_process(process)
        return process