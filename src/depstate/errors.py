"""Errors raised by the reference host. The state primitives themselves never raise."""


class HookError(RuntimeError):
    """A hook was used outside a pass, or on a disposed component."""


class RerenderLimitError(HookError):
    """A component kept requesting re-invocation without settling."""
