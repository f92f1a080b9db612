"""depstate: dependency-gated derived state for Python components."""

from importlib.metadata import version as _version

__version__ = _version("depstate")

from depstate._tracking import get_pending_count
from depstate.errors import HookError, RerenderLimitError
from depstate.compare import values_equal, sequences_equal
from depstate.component import Component, component, use_slot
from depstate.force_update import ForceUpdate, set_scheduler, use_force_update
from depstate.cell import StateCell, use_state_with_deps
from depstate.reducer import DispatchAdapter, use_reducer_with_deps
from depstate.action import action, transaction
# textual NOT auto-imported: opt-in only

__all__ = [
    "values_equal",
    "sequences_equal",
    "Component",
    "component",
    "use_slot",
    "ForceUpdate",
    "use_force_update",
    "set_scheduler",
    "StateCell",
    "use_state_with_deps",
    "DispatchAdapter",
    "use_reducer_with_deps",
    "action",
    "transaction",
    "get_pending_count",
    "HookError",
    "RerenderLimitError",
]
