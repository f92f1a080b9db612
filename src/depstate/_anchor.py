"""Data anchor: plain Python structures that hold all per-instance state.

Components, cells and signals are thin handles holding an _id. Their data
lives here, keyed by that id, so a handle can be recreated on every pass
while the record survives until the owning instance is disposed.
"""

import itertools

# Component state
render_fns: dict[int, object] = {}
render_args: dict[int, tuple] = {}  # comp_id -> (args, kwargs) of the last pass
outputs: dict[int, object] = {}
pass_counts: dict[int, int] = {}
slots: dict[int, list] = {}  # comp_id -> objects in use_slot() call order
slot_cursors: dict[int, int] = {}
subscribers: dict[int, list] = {}

# Cell state
values: dict[int, object] = {}
last_deps: dict[int, tuple] = {}
initialized: dict[int, bool] = {}
reset_requested: dict[int, bool] = {}

# Signal state
counters: dict[int, int] = {}

# itertools.count is thread-safe (C-level GIL atomic)
_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)


def discard(obj_id: int) -> None:
    """Drop every record held for obj_id."""
    for table in (
        render_fns, render_args, outputs, pass_counts, slots, slot_cursors,
        subscribers, values, last_deps, initialized, reset_requested, counters,
    ):
        table.pop(obj_id, None)
