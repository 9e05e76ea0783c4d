import logging
from typing import Any, Dict, Hashable, Optional, Tuple

from goose_di.domain import IContainer, IScope, Key, Provider, ScopeMisuseError

logger = logging.getLogger(__name__)


class ScopeEntry:
    """Handle returned by ``SimpleScope.enter``.

    Usable as a context manager so the scope is exited on every path out of
    a unit of work.

    Example:
        >>> with request_scope.enter(request_context):
        ...     handle(request_context)
    """

    def __init__(self, scope: "SimpleScope", context: Hashable) -> None:
        """Initialize the entry for ``context`` entered in ``scope``."""
        self.scope = scope
        self.context = context

    def exit(self) -> None:
        self.scope.exit(self.context)

    def __enter__(self) -> Hashable:
        return self.context

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.exit()
        return False


class SimpleScope(IScope):
    """Caches provided values per entered context.

    Each context moves from unentered to entered on ``enter`` (with an empty
    cache) and back on ``exit`` (dropping the cache). Scoped providers may
    only run for entered contexts.

    Attributes:
        name: Name used in error messages.
        _values: Cache per entered context, keyed by owner and binding key.
    """

    def __init__(self, name: str = "SimpleScope") -> None:
        """Initialize the scope with no entered contexts.

        Args:
            name: Name used in error messages.
        """
        self.name = name
        self._values: Dict[Hashable, Dict[Tuple[Optional[Hashable], Key], Any]] = {}

    def enter(self, context: Hashable) -> ScopeEntry:
        """Start caching for ``context``.

        Args:
            context: Hashable handle for the unit of work (e.g. one request).

        Returns:
            A ScopeEntry that exits the scope when used as a context manager.

        Raises:
            ScopeMisuseError: If the context is already entered.
        """
        if context in self._values:
            raise ScopeMisuseError(f"Context {context!r} has already entered scope {self.name}")
        self._values[context] = {}
        logger.debug("Entered scope %s for %r", self.name, context)
        return ScopeEntry(self, context)

    def exit(self, context: Hashable) -> None:
        """Drop the cache of ``context``.

        Raises:
            ScopeMisuseError: If the context is not entered.
        """
        if context not in self._values:
            raise ScopeMisuseError(f"Already out of context {context!r} when exiting scope {self.name}")
        del self._values[context]
        logger.debug("Exited scope %s for %r", self.name, context)

    def is_entered(self, context: Hashable) -> bool:
        return context in self._values

    @property
    def active_contexts(self) -> int:
        return len(self._values)

    def scope(self, key: Key, provider: Provider, owner: Optional[Hashable] = None) -> Provider:
        slot = (owner, key)

        def scoped_provider(context: Hashable, container: IContainer) -> Any:
            values = self._values.get(context)
            if values is None:
                raise ScopeMisuseError(
                    f"Attempt to access {key} outside of scope {self.name}. "
                    f"{len(self._values)} scopes are active."
                )
            if slot not in values:
                values[slot] = provider(context, container)
            return values[slot]

        return scoped_provider

    def __repr__(self) -> str:
        return f"SimpleScope(name={self.name!r})"


class SingletonScope(IScope):
    """Caches one value per owner and key for the lifetime of the injector tree.

    The singleton scope is always entered; ``enter`` and ``exit`` are errors.
    """

    def __init__(self) -> None:
        """Initialize the singleton scope with an empty cache."""
        self._values: Dict[Tuple[Optional[Hashable], Key], Any] = {}

    def enter(self, context: Hashable) -> None:
        raise ScopeMisuseError("You're always in the singleton scope. Do not try to enter this scope.")

    def exit(self, context: Hashable) -> None:
        raise ScopeMisuseError("You're always in the singleton scope. Do not try to exit this scope.")

    def scope(self, key: Key, provider: Provider, owner: Optional[Hashable] = None) -> Provider:
        slot = (owner, key)

        def singleton_provider(context: Hashable, container: IContainer) -> Any:
            if slot not in self._values:
                self._values[slot] = provider(context, container)
            return self._values[slot]

        return singleton_provider


def create_simple_scope(name: Optional[str] = None) -> SimpleScope:
    """Create a context scope, optionally named for error messages."""
    if name is None:
        return SimpleScope()
    return SimpleScope(name)
