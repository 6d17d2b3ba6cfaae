import itertools
import weakref

import pytest

from procgroups.process import Process, init_proc

_pids = itertools.count(2000)


def _new_child(process):
    return process.fork(next(_pids)).build()


@pytest.fixture
def init():
    try:
        return init_proc()
    except RuntimeError:
        return Process.new_init(next(_pids)).build()


def test_basic(init):
    group = init.group()
    assert group.pgid == init.pid

    child = _new_child(init)
    assert group is child.group()

    processes = group.processes()
    assert any(p is init for p in processes)
    assert any(p is child for p in processes)


def test_create(init):
    child = _new_child(init)
    child_group = child.create_group()

    assert child_group is child.group()
    assert child_group.pgid == child.pid

    child_group_processes = child_group.processes()
    assert len(child_group_processes) == 1
    assert child_group_processes[0] is child

    assert all(p is not child for p in init.group().processes())


def test_create_leader(init):
    group = init.group()

    assert init.create_group() is None
    assert group is init.group()


def test_cleanup(init):
    child = _new_child(init)

    group = weakref.ref(child.create_group())
    assert group() is not None

    child.exit()
    child.free()
    del child
    assert group() is None


def test_inherit(init):
    parent = _new_child(init)
    group = parent.create_group()

    child = _new_child(parent)
    assert group is child.group()
    assert len(group.processes()) == 2


def test_move_to(init):
    child1 = _new_child(init)
    child1_group = child1.create_group()

    assert child1.move_to_group(child1.group()) is True
    assert child1_group is child1.group()
    assert len(child1_group.processes()) == 1

    child2 = _new_child(init)
    child2_group = child2.create_group()

    assert child2.move_to_group(child1_group) is True
    assert child1_group is child2.group()

    child1_group_processes = child1_group.processes()
    assert len(child1_group_processes) == 2
    assert child1_group_processes[0] is child1
    assert child1_group_processes[1] is child2

    assert len(child2_group.processes()) == 0


def test_move_cleanup(init):
    group = init.group()

    child = _new_child(init)
    child_group = weakref.ref(child.create_group())

    assert child_group() is not None
    assert child.move_to_group(group) is True
    assert child_group() is None


def test_move_back(init):
    group = init.group()

    child = _new_child(init)
    child_group = child.create_group()

    assert child.move_to_group(group) is True
    assert child.move_to_group(child_group) is True

    assert child_group is child.group()
    assert any(p is not child for p in group.processes())


def test_cleanup_processes(init):
    parent = _new_child(init)
    group = parent.create_group()

    parent.exit()
    parent.free()
    del parent

    assert group.processes() == []


def test_session_of_new_group_matches_parent(init):
    child = _new_child(init)
    group = child.create_group()
    assert group.session() is init.group().session()


def test_repr(init):
    child = _new_child(init)
    group = child.create_group()
    assert repr(group) == f"ProcessGroup({child.pid}, session={init.pid})"