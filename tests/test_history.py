from engine.history import HISTORY_CAP, EditMode, HistoryManager, HistoryStack
from graph import Graph


def snaps(count):
    """`count` distinct snapshots: graphs with 1..count nodes."""
    g = Graph()
    out = []
    for i in range(count):
        g.add_node(i * 10, 0)
        out.append(g.snapshot())
    return out


def test_empty_stack():
    stack = HistoryStack()
    assert stack.current is None
    assert stack.undo() is None
    assert stack.redo() is None
    assert not stack.can_undo and not stack.can_redo


def test_undo_redo_walks_entries():
    a, b, c = snaps(3)
    stack = HistoryStack()
    for s in (a, b, c):
        assert stack.checkpoint(s)

    assert stack.undo() == b
    assert stack.undo() == a
    assert stack.undo() is None
    assert stack.current == a
    assert stack.redo() == b
    assert stack.redo() == c
    assert stack.redo() is None


def test_identical_snapshot_is_not_recorded():
    a, b = snaps(2)
    stack = HistoryStack()
    stack.checkpoint(a)
    assert not stack.checkpoint(a)
    assert len(stack) == 1
    stack.checkpoint(b)
    assert not stack.checkpoint(Graph.from_snapshot(b).snapshot())
    assert len(stack) == 2


def test_new_edit_after_undo_discards_future():
    a, b, c, d = snaps(4)
    stack = HistoryStack()
    for s in (a, b, c):
        stack.checkpoint(s)
    stack.undo()
    stack.undo()
    stack.checkpoint(d)

    assert stack.entries == [a, d]
    assert not stack.can_redo
    assert stack.undo() == a


def test_cap_evicts_oldest():
    many = snaps(HISTORY_CAP + 5)
    stack = HistoryStack()
    for s in many:
        stack.checkpoint(s)

    assert len(stack) == HISTORY_CAP
    assert stack.entries[0] == many[5]
    assert stack.current == many[-1]
    undone = 0
    while stack.undo() is not None:
        undone += 1
    assert undone == HISTORY_CAP - 1
    assert stack.current == many[5]


def test_small_cap():
    a, b, c = snaps(3)
    stack = HistoryStack(cap=2)
    for s in (a, b, c):
        stack.checkpoint(s)
    assert stack.entries == [b, c]
    assert stack.cursor == 1


def test_modes_are_independent():
    a, b, c = snaps(3)
    manager = HistoryManager()
    manager.checkpoint(EditMode.GENERATIVE, a)
    manager.checkpoint(EditMode.GENERATIVE, b)
    manager.checkpoint(EditMode.USER, c)

    assert manager.undo(EditMode.USER) is None
    assert manager.undo(EditMode.GENERATIVE) == a
    assert manager.stack(EditMode.USER).current == c
    assert manager.redo(EditMode.GENERATIVE) == b


def test_reset_seeds_base_entry():
    a, b = snaps(2)
    manager = HistoryManager()
    manager.checkpoint(EditMode.USER, a)
    manager.reset(EditMode.USER, b)
    stack = manager.stack(EditMode.USER)
    assert stack.entries == [b]
    assert not stack.can_undo
    manager.reset(EditMode.USER)
    assert len(stack) == 0


def test_amend_replaces_current_entry():
    a, b = snaps(2)
    g = Graph.from_snapshot(b)
    g.move_node(0, 55, 66)
    moved = g.snapshot()

    stack = HistoryStack()
    stack.checkpoint(a)
    stack.checkpoint(b)
    stack.amend(moved)
    assert stack.entries == [a, moved]
    assert stack.undo() == a
    assert stack.redo() == moved


def test_amend_on_empty_stack_seeds_it():
    (a,) = snaps(1)
    stack = HistoryStack()
    stack.amend(a)
    assert stack.current == a
    assert not stack.can_undo
