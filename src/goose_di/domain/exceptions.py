from typing import Any, Optional, Sequence


class InjectionError(Exception):
    """Base exception for injector and container errors.

    Every subclass signals a configuration or programming error. Callers are
    expected to let these propagate rather than recover from them.
    """


class DuplicateBindingError(InjectionError):
    """Raised when a key or scope tag is bound a second time.

    This occurs when:
    - The key is already bound on the same injector, an ancestor or a descendant.
    - A child exposes a key that its parent (or an ancestor of the parent) already binds.
    - A scope tag already has a scope registered.
    - A multi-binding entry is repeated on a map using the reject policy.

    Attributes:
        key: The key (or scope tag) that was already bound.
        reason: Optional detail about where the existing binding lives.
    """

    def __init__(self, key: Any, reason: Optional[str] = None) -> None:
        self.key = key
        self.reason = reason
        message = f"{key} is already bound"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class UnboundKeyError(InjectionError):
    """Raised when resolution is requested for a key with no reachable binding.

    Attributes:
        key: The key that could not be found.
        reason: Optional reason for the failure.
    """

    def __init__(self, key: Any, reason: Optional[str] = None) -> None:
        self.key = key
        self.reason = reason
        message = f"Unable to find {key} in injector"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class CyclicOrRepeatedLookupError(InjectionError):
    """Raised when a container is asked for a key it has already looked up.

    A container permits exactly one lookup per key, so both true cycles
    (A -> B -> A) and diamonds (A -> B, A -> C, B -> D, C -> D) end up here.

    Attributes:
        key: The key requested a second time.
        lookups: Keys requested from the container so far, in order.
    """

    def __init__(self, key: Any, lookups: Sequence[Any] = ()) -> None:
        self.key = key
        self.lookups = list(lookups)
        message = f"Already looked up {key}. Is there a cycle of dependencies?"
        if self.lookups:
            message += f" Lookups so far: {' -> '.join(str(lookup) for lookup in self.lookups)}"
        super().__init__(message)


class ScopeMisuseError(InjectionError):
    """Raised for invalid scope operations.

    This occurs when:
    - A scoped provider is invoked for a context that has not been entered.
    - A context is entered twice, or exited without being entered.
    - The singleton scope is entered or exited.
    - A binding names a scope tag that has no registered scope.
    """


class ExposureError(InjectionError):
    """Raised when a binding cannot be exposed to the parent injector.

    Attributes:
        key: The key being exposed.
        reason: Why the exposure failed.
    """

    def __init__(self, key: Any, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Cannot expose {key}: {reason}")
