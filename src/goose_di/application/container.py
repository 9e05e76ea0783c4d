from typing import TYPE_CHECKING, Any, Dict, Hashable, Optional, Tuple

from goose_di.domain import IContainer, Key, LookupSession, Provider, UnboundKeyError, key_for, tagged_key

if TYPE_CHECKING:
    from goose_di.application.injector import Injector


class Container(IContainer):
    """Resolution session over an injector.

    A container looks up each key at most once per injector. The key is
    recorded when it is requested, before its provider runs, so a provider
    asking for a key already on the way (a cycle) or already fetched (a
    repeated lookup) fails with CyclicOrRepeatedLookupError instead of
    recursing forever.

    Exposed providers run against the child injector that owns them, and
    their lookups are recorded in that child's own session. Sibling children
    exposed under different tags can therefore be resolved from one parent
    container, while a cycle still repeats a key within one session.

    Use a new container per top-level lookup. Providers receive the
    container resolving them and use it for their own dependencies.

    Attributes:
        _injector: The injector whose bindings (and ancestors' bindings) are visible.
        _sessions: Lookup sessions per injector, shared with derived containers.
        _session: The session of ``_injector``.

    Example:
        >>> container = injector.create_container()
        >>> greeting = container.get_tagged_instance(None, str, "Greeting")
    """

    def __init__(self, injector: "Injector", sessions: Optional[Dict["Injector", LookupSession]] = None) -> None:
        """Initialize the container.

        Args:
            injector: The injector to resolve from.
            sessions: Lookup sessions of a container this one is derived from.
                Defaults to a fresh, empty set of sessions.
        """
        self._injector = injector
        self._sessions = sessions if sessions is not None else {}
        self._session = self._sessions.setdefault(injector, LookupSession())

    @property
    def injector(self) -> "Injector":
        return self._injector

    def for_injector(self, injector: "Injector") -> "Container":
        """Return a container over ``injector`` derived from this container.

        Lookups through the returned container are recorded in the session
        of ``injector``, which lives as long as this container's sessions.
        Used to run exposed providers against the injector that owns them.
        """
        return Container(injector, self._sessions)

    @property
    def visited(self) -> Tuple[Key, ...]:
        return tuple(self._session.visited)
    def get_provider(self, key: Any) -> Provider:
        """Return the provider bound to ``key`` without invoking it.

        Args:
            key: The key, or a raw descriptor.

        Returns:
            The provider found on the injector or its nearest ancestor.

        Raises:
            CyclicOrRepeatedLookupError: If ``key`` was already requested from this container.
            UnboundKeyError: If neither the injector nor its ancestors bind ``key``.
        """
        key = key_for(key)
        self._session.mark(key)

        binding = self._injector.find_binding(key)
        if binding is None:
            raise UnboundKeyError(key)
        return binding.provider

    def get_tagged_provider(self, descriptor: Any, tag: Any) -> Provider:
        return self.get_provider(tagged_key(descriptor, tag))

    def get_instance(self, context: Optional[Hashable], key: Any) -> Any:
        """Resolve ``key`` by invoking its provider with ``context`` and this container.

        Args:
            context: Opaque handle for scoped providers, or None.
            key: The key, or a raw descriptor.

        Returns:
            The provided value.
        """
        return self.get_provider(key)(context, self)

    def get_tagged_instance(self, context: Optional[Hashable], descriptor: Any, tag: Any) -> Any:
        return self.get_instance(context, tagged_key(descriptor, tag))
