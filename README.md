# procgroups

Bookkeeping for processes, threads, process groups and sessions. It follows
the way a Unix-like kernel tracks them.

- Every process has a pid, an optional parent and its children. It belongs
  to exactly one process group.
- Every process group has a pgid and belongs to exactly one session.
- A process keeps its threads, an exit code and a "group exited" flag.
- When a process exits, its children are handed over to the init process.
- Groups and sessions are held only by their members. A group or session
  goes away once nothing refers to it any more.

## Installation

```
pip install procgroups
```

The package is pure Python and has no dependencies. It needs Python 3.10 or
newer.

## Usage

```python
from procgroups.process import Process, init_proc

# Create the init process once. It also starts a new session and group.
init = Process.new_init(1).build()
assert init_proc() is init
assert init.group().pgid == 1
assert init.group().session().sid == 1

# Fork a child. It joins the parent's process group.
child = init.fork(2).with_data({"name": "shell"}).build()
assert child.parent() is init
assert child.group() is init.group()
assert child.data == {"name": "shell"}

# Give the child its own session and process group.
session, group = child.create_session()
assert session.sid == 2 and group.pgid == 2

# Threads
thread = child.new_thread(2).build()
last = thread.exit(0)          # True: no threads remain
assert last and child.exit_code() == 0

# Exit and reap
child.exit()
assert child.is_zombie()
child.free()                   # removes it from its parent
assert child not in init.children()
```

### Modules

- `procgroups.process`: `Process`, `ProcessBuilder` and `init_proc()`.
- `procgroups.process_group`: `ProcessGroup`.
- `procgroups.session`: `Session`.
- `procgroups.thread`: `Thread` and `ThreadBuilder`.

### Processes

- `Process.new_init(pid)` returns a `ProcessBuilder` for the init process.
  Its `build()` puts the process into a new session and group. A second
  init process cannot be built: `build()` raises `RuntimeError`.
- `process.fork(pid)` returns a `ProcessBuilder` for a child process. The
  child joins the parent's process group.
- `ProcessBuilder.with_data(data)` returns a builder that attaches any
  object to the new process. The process exposes it as `process.data`.
- `init_proc()` returns the init process. It raises `RuntimeError` if no
  init process has been built yet.
- `pid` is the process ID. `is_init()` tells whether this is the init
  process.
- `parent()` returns the parent, or `None`. `children()` returns the
  children, sorted by pid.
- `group()` returns the process's `ProcessGroup`.
- `create_group()` puts the process into a new group of its own within the
  same session. It returns `None` if the process already leads its group.
- `create_session()` puts the process into a new session and a new group.
  It returns the pair `(session, group)`, or `None` if the process already
  leads its session.
- `move_to_group(group)` returns `False` if the group belongs to a
  different session. Otherwise it moves the process and returns `True`.
- `exit()` makes the process a zombie and hands its children to init. It
  raises `RuntimeError` on the init process.
- `free()` removes a zombie from its parent's children. It raises
  `RuntimeError` on a process that is not a zombie.
- `is_zombie()`, `exit_code()`, `is_group_exited()` and `group_exit()` read
  or set the process's exit state.

### Groups and sessions

- `ProcessGroup.pgid` is the group ID. `session()` returns the group's
  session. `processes()` returns its live processes, sorted by pid.
- `Session.sid` is the session ID. `process_groups()` returns its live
  groups, sorted by pgid.

A group keeps its session alive. A process keeps its group alive.
Otherwise groups and sessions are referenced weakly. A group that no
process belongs to any more drops out of its session once the last
reference to it goes.

### Threads

`process.new_thread(tid)` returns a `ThreadBuilder`. Call
`with_data(...)` on it if needed, then `build()`. A thread has `tid`,
`process` and `data`.

`process.threads()` returns the live threads, sorted by tid. The process
holds its threads weakly, so a thread stays listed only while something
else refers to it.

`Thread.exit(exit_code)` records the exit code, unless the process has
already group-exited. It then removes the thread. It returns `True` when
it was the last thread in its process.

## What it does not do

This package only keeps the records. It does not start, schedule or signal
real processes or threads. It does not allocate pids and does not check
that they are unique. Orphans always go to the init process; there are no
subreapers. Sessions record their groups but do no terminal or job control.

## Running the tests

```
pip install -e ".[test]"
pytest
```