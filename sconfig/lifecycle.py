# ==============================================
# Store Lifecycle
# ==============================================
#
# STATES:
# -------
#   UNINITIALIZED → LOADING → READY
#                           ↘ REPAIRING → LOADING → READY
#
#   READY is the only state that exposes get/set/add.
#   There is no closed/terminal state; stores live for the process.
#
# ==============================================

from enum import Enum

from sconfig.errors import StoreNotReadyError


class StoreState(Enum):
    """Load state shared by PropertiesStore and KeyValueStore."""
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    REPAIRING = "repairing"
    READY = "ready"


def require_ready(state: StoreState, path) -> None:
    """Raise StoreNotReadyError unless the store is READY."""
    if state is not StoreState.READY:
        raise StoreNotReadyError(
            f"Store at {path} is {state.value}, not ready for access."
        )
