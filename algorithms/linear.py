"""
linear.py — Stack, Queue, Array & Linked List Operations
==========================================================
Every operation runs against the contents a previous run left behind and
yields a short Trace whose final Step holds the resulting contents:

    stack  : push, pop, peek          (capacity from settings, default 10)
    queue  : enqueue, dequeue, front, rear                    (default 8)
    array  : insert at index, search, resize                  (default 12)
    list   : insert at position, delete by value, search
             (singly linked; bounded only by settings.max_input_size)

Full / empty conditions (and a search that finds nothing) end in a single
error Step.  Contents larger than the capacity, or an insert index
outside 0..len, are malformed input and raise InvalidInputError.
"""

from typing import Iterator, List, Optional, Sequence

from algorithms.errors import InvalidInputError, parse_values, require_capacity, require_int
from algorithms.step import LinearPayload, Step
from config import load_settings


DEFAULT_ARRAY = (10, 25, 3, 47, 18, 92, 33, 7)
DEFAULT_LIST  = (10, 25, 17, 8)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
STACK_PSEUDOCODE: List[str] = [
    "push(v):  if size = capacity: OVERFLOW;  top ← top + 1;  a[top] ← v",  # 0
    "pop():    if size = 0: UNDERFLOW;  v ← a[top];  top ← top − 1",        # 1
    "peek():   if size = 0: EMPTY;  return a[top]",                          # 2
]

QUEUE_PSEUDOCODE: List[str] = [
    "enqueue(v): if size = capacity: FULL;  a[rear] ← v;  rear ← rear + 1",  # 0
    "dequeue():  if size = 0: EMPTY;  v ← a[front];  front ← front + 1",     # 1
    "front():    if size = 0: EMPTY;  return a[front]",                      # 2
    "rear():     if size = 0: EMPTY;  return a[rear − 1]",                   # 3
]

ARRAY_PSEUDOCODE: List[str] = [
    "insert(i, v): for k in n .. i+1: a[k] ← a[k−1];  a[i] ← v",   # 0
    "search(v):    for i in 0 .. n−1: if a[i] = v: return i",       # 1
    "resize(c):    b ← new array(c);  copy a into b",               # 2
]

LIST_PSEUDOCODE: List[str] = [
    "insert(i, v): n ← Node(v);  walk to node i−1;  n.next ← cur.next;  cur.next ← n",  # 0
    "delete(v):    walk until cur.next.value = v;  cur.next ← cur.next.next",          # 1
    "search(v):    walk from head;  return the position whose value = v",              # 2
]


class _Linear:
    """Working contents of one stack / queue / array run."""

    def __init__(self, structure: str, items: Sequence[int], capacity: int):
        self.structure = structure
        self.items:    List[int] = list(items)
        self.capacity: int       = capacity

    def step(self, description: str, operation: str, line: int, highlighted: Sequence[int] = (),
             is_error: bool = False, is_complete: bool = False) -> Step:
        return Step(
            description=description,
            operation=operation,
            snapshot=LinearPayload(
                items=tuple(self.items),
                structure=self.structure,
                capacity=self.capacity,
                highlighted=tuple(highlighted),
            ),
            is_error=is_error,
            is_complete=is_complete,
            pseudocode_line=line,
        )


def _prepare(structure: str, items, capacity: Optional[int], default_capacity: int,
             default_items: Sequence[int] = ()) -> _Linear:
    cap = default_capacity if capacity is None else require_capacity(capacity)
    values = parse_values(default_items if items is None else items, "items")
    if len(values) > cap:
        raise InvalidInputError(f"{structure} holds {len(values)} items but its capacity is {cap}")
    return _Linear(structure, values, cap)


def _once(step: Step) -> Iterator[Step]:
    yield step


# ===========================================================================
# STACK
# ===========================================================================
def stack_push(items=None, value=None, capacity=None) -> Iterator[Step]:
    value = require_int(value)
    s = _prepare("stack", items, capacity, load_settings().stack_capacity)
    return _push(s, value)


def _push(s: _Linear, value: int) -> Iterator[Step]:
    if len(s.items) >= s.capacity:
        yield s.step(f"Stack is full! Cannot push {value}", "overflow", 0, is_error=True)
        return
    yield s.step(f"Preparing to push {value} onto stack", "push", 0)
    s.items.append(value)
    yield s.step(
        f"Pushed {value} onto stack. New top element is {value}", "push", 0,
        highlighted=(len(s.items) - 1,), is_complete=True,
    )


def stack_pop(items=None, capacity=None) -> Iterator[Step]:
    s = _prepare("stack", items, capacity, load_settings().stack_capacity)
    if not s.items:
        return _once(s.step("Stack is empty! Cannot pop from empty stack", "underflow", 1, is_error=True))
    return _pop(s)


def _pop(s: _Linear) -> Iterator[Step]:
    top = s.items[-1]
    yield s.step(f"Popping top element: {top}", "pop", 1, highlighted=(len(s.items) - 1,))
    s.items.pop()
    rest = f"New top: {s.items[-1]}" if s.items else "Stack is now empty"
    yield s.step(f"Popped {top}. {rest}", "pop", 1, is_complete=True)


def stack_peek(items=None, capacity=None) -> Iterator[Step]:
    s = _prepare("stack", items, capacity, load_settings().stack_capacity)
    if not s.items:
        return _once(s.step("Stack is empty! No element to peek", "empty", 2, is_error=True))
    return _once(s.step(
        f"Peeking at top element: {s.items[-1]}", "peek", 2,
        highlighted=(len(s.items) - 1,), is_complete=True,
    ))


# ===========================================================================
# QUEUE
# ===========================================================================
def queue_enqueue(items=None, value=None, capacity=None) -> Iterator[Step]:
    value = require_int(value)
    q = _prepare("queue", items, capacity, load_settings().queue_capacity)
    return _enqueue(q, value)


def _enqueue(q: _Linear, value: int) -> Iterator[Step]:
    if len(q.items) >= q.capacity:
        yield q.step(f"Queue is full! Cannot enqueue {value}", "overflow", 0, is_error=True)
        return
    yield q.step(f"Preparing to enqueue {value} at the rear", "enqueue", 0)
    q.items.append(value)
    yield q.step(
        f"Enqueued {value} at rear. Queue size is now {len(q.items)}", "enqueue", 0,
        highlighted=(len(q.items) - 1,), is_complete=True,
    )


def queue_dequeue(items=None, capacity=None) -> Iterator[Step]:
    q = _prepare("queue", items, capacity, load_settings().queue_capacity)
    if not q.items:
        return _once(q.step("Queue is empty! Cannot dequeue from empty queue", "underflow", 1, is_error=True))
    return _dequeue(q)


def _dequeue(q: _Linear) -> Iterator[Step]:
    front = q.items[0]
    yield q.step(f"Dequeuing front element: {front}", "dequeue", 1, highlighted=(0,))
    q.items.pop(0)
    rest = f"New front: {q.items[0]}" if q.items else "Queue is now empty"
    yield q.step(f"Dequeued {front}. {rest}", "dequeue", 1, is_complete=True)


def queue_front(items=None, capacity=None) -> Iterator[Step]:
    q = _prepare("queue", items, capacity, load_settings().queue_capacity)
    if not q.items:
        return _once(q.step("Queue is empty! No front element", "empty", 2, is_error=True))
    return _once(q.step(f"Front element is: {q.items[0]}", "front", 2, highlighted=(0,), is_complete=True))


def queue_rear(items=None, capacity=None) -> Iterator[Step]:
    q = _prepare("queue", items, capacity, load_settings().queue_capacity)
    if not q.items:
        return _once(q.step("Queue is empty! No rear element", "empty", 3, is_error=True))
    return _once(q.step(
        f"Rear element is: {q.items[-1]}", "rear", 3,
        highlighted=(len(q.items) - 1,), is_complete=True,
    ))


# ===========================================================================
# ARRAY
# ===========================================================================
def array_insert(items=None, index=None, value=None, capacity=None) -> Iterator[Step]:
    """Insert `value` at `index` (0..len), shifting later elements right."""
    value = require_int(value)
    a = _prepare("array", items, capacity, load_settings().array_capacity, DEFAULT_ARRAY)
    index = len(a.items) if index is None else require_int(index, "index")
    if not 0 <= index <= len(a.items):
        raise InvalidInputError(f"index {index} is outside 0..{len(a.items)}")
    return _insert(a, index, value)


def _insert(a: _Linear, index: int, value: int) -> Iterator[Step]:
    if len(a.items) >= a.capacity:
        yield a.step(f"Array is full (capacity {a.capacity})! Cannot insert {value}", "overflow", 0, is_error=True)
        return

    for i in range(index):
        yield a.step(f"Checking index {i}", "traverse", 0, highlighted=(i,))

    a.items.append(a.items[-1] if a.items else value)
    for k in range(len(a.items) - 1, index, -1):
        a.items[k] = a.items[k - 1]
        yield a.step(f"Shifting {a.items[k]} from index {k - 1} to index {k}", "shift", 0, highlighted=(k,))

    a.items[index] = value
    yield a.step(
        f"Successfully inserted {value} at index {index}", "insert", 0,
        highlighted=(index,), is_complete=True,
    )


def array_search(items=None, value=None, capacity=None) -> Iterator[Step]:
    value = require_int(value)
    a = _prepare("array", items, capacity, load_settings().array_capacity, DEFAULT_ARRAY)
    return _search(a, value)


def _search(a: _Linear, value: int) -> Iterator[Step]:
    for i, item in enumerate(a.items):
        relation = "==" if item == value else "!="
        yield a.step(f"Checking index {i}: {item} {relation} {value}", "search", 1, highlighted=(i,))
        if item == value:
            yield a.step(f"Found {value} at index {i}!", "found", 1, highlighted=(i,), is_complete=True)
            return
    yield a.step(f"{value} not found in the array", "not-found", 1, is_error=True)


def array_resize(items=None, new_capacity=None, capacity=None) -> Iterator[Step]:
    new_capacity = require_capacity(new_capacity, "new_capacity")
    a = _prepare("array", items, capacity, load_settings().array_capacity, DEFAULT_ARRAY)
    return _resize(a, new_capacity)


def _resize(a: _Linear, new_capacity: int) -> Iterator[Step]:
    old = a.capacity
    if new_capacity < len(a.items):
        yield a.step(
            f"Cannot resize to {new_capacity}: the array already holds {len(a.items)} elements",
            "resize", 2, is_error=True,
        )
        return
    yield a.step(f"Current capacity: {old}, need to resize to {new_capacity}", "resize", 2)
    a.capacity = new_capacity
    yield a.step(f"Resized array capacity from {old} to {new_capacity}", "resize", 2, is_complete=True)


# ===========================================================================
# LINKED LIST
# ===========================================================================
def list_insert(items=None, index=None, value=None) -> Iterator[Step]:
    """Insert `value` at position `index` (0..len); appends by default."""
    value = require_int(value)
    ll = _prepare_list(items)
    index = len(ll.items) if index is None else require_int(index, "index")
    if not 0 <= index <= len(ll.items):
        raise InvalidInputError(f"index {index} is outside 0..{len(ll.items)}")
    return _list_insert(ll, index, value)


def _prepare_list(items) -> _Linear:
    limit = load_settings().max_input_size
    return _prepare("linked-list", items, None, limit, DEFAULT_LIST)


def _list_insert(ll: _Linear, index: int, value: int) -> Iterator[Step]:
    if len(ll.items) >= ll.capacity:
        yield ll.step(f"List already holds {ll.capacity} nodes! Cannot insert {value}", "overflow", 0,
                      is_error=True)
        return

    yield ll.step(f"Creating new node with value {value}", "create", 0)
    if index == 0:
        ll.items.insert(0, value)
        yield ll.step(
            f"Inserted {value} at head. New head points to {value}", "insert", 0,
            highlighted=(0,), is_complete=True,
        )
        return

    for p in range(index):
        yield ll.step(f"Traversing to position {index}. Currently at position {p}", "traverse", 0,
                      highlighted=(p,))
    ll.items.insert(index, value)
    yield ll.step(f"Inserted {value} at position {index}", "insert", 0, highlighted=(index,), is_complete=True)


def list_delete(items=None, value=None) -> Iterator[Step]:
    """Unlink the first node holding `value`."""
    value = require_int(value)
    ll = _prepare_list(items)
    if not ll.items:
        return _once(ll.step("List is empty! Cannot delete from empty list", "underflow", 1, is_error=True))
    return _list_delete(ll, value)


def _list_delete(ll: _Linear, value: int) -> Iterator[Step]:
    if ll.items[0] == value:
        yield ll.step(f"Found {value} at head. Deleting head node", "found", 1, highlighted=(0,))
        ll.items.pop(0)
        head = ll.items[0] if ll.items else "null"
        yield ll.step(f"Deleted {value} from head. New head: {head}", "delete", 1, is_complete=True)
        return

    for p in range(1, len(ll.items)):
        yield ll.step(f"Checking node with value {ll.items[p]}", "check", 1, highlighted=(p,))
        if ll.items[p] == value:
            ll.items.pop(p)
            yield ll.step(
                f"Deleted {value}. Previous node now points to next node", "delete", 1,
                highlighted=(p - 1,), is_complete=True,
            )
            return
    yield ll.step(f"Value {value} not found in the list", "not-found", 1, is_error=True)


def list_search(items=None, value=None) -> Iterator[Step]:
    value = require_int(value)
    return _list_search(_prepare_list(items), value)


def _list_search(ll: _Linear, value: int) -> Iterator[Step]:
    for p, item in enumerate(ll.items):
        relation = "==" if item == value else "!="
        yield ll.step(f"Checking position {p}: {item} {relation} {value}", "search", 2, highlighted=(p,))
        if item == value:
            yield ll.step(f"Found {value} at position {p}!", "found", 2, highlighted=(p,), is_complete=True)
            return
    yield ll.step(f"{value} not found in the list", "not-found", 2, is_error=True)
