from abc import ABC, abstractmethod
from typing import Any, Callable, Hashable, Optional

from goose_di.domain.models import Key

Provider = Callable[[Any, "IContainer"], Any]


class IContainer(ABC):
    """Abstract interface for a resolution session."""

    @abstractmethod
    def get_provider(self, key: Any) -> Provider:
        """Return the provider bound to ``key`` without invoking it.

        Args:
            key: The key (or raw descriptor) to look up.

        Raises:
            CyclicOrRepeatedLookupError: If the key was already requested from this container.
            UnboundKeyError: If no binding is reachable.
        """

    @abstractmethod
    def get_instance(self, context: Optional[Hashable], key: Any) -> Any:
        """Resolve ``key`` and return the provided value.

        Args:
            context: Opaque scope context passed to the provider.
            key: The key (or raw descriptor) to resolve.
        """

    @abstractmethod
    def get_tagged_provider(self, descriptor: Any, tag: Any) -> Provider:
        """Return the provider bound to ``descriptor`` tagged with ``tag``."""

    @abstractmethod
    def get_tagged_instance(self, context: Optional[Hashable], descriptor: Any, tag: Any) -> Any:
        """Resolve ``descriptor`` tagged with ``tag``."""


class IScope(ABC):
    """Abstract interface for caching policies."""

    @abstractmethod
    def scope(self, key: Key, provider: Provider, owner: Optional[Hashable] = None) -> Provider:
        """Wrap ``provider`` so its value is cached under ``owner`` and ``key``.

        Args:
            key: The key of the binding, also used in error messages.
            provider: The provider to wrap.
            owner: The injector owning the binding. Bindings of the same key
                with different owners never share a cached value.

        Returns:
            A provider that consults the cache before calling ``provider``.
        """

    @abstractmethod
    def enter(self, context: Hashable) -> Any:
        """Start caching for ``context``."""

    @abstractmethod
    def exit(self, context: Hashable) -> None:
        """Stop caching for ``context`` and drop its cache."""


class IInjector(ABC):
    """Abstract interface for a node of the binding registry."""

    @abstractmethod
    def bind(self, key: Any, provider: Provider) -> None:
        """Bind ``key`` to ``provider``.

        Raises:
            DuplicateBindingError: If the key is bound in this node's lineage.
        """

    @abstractmethod
    def bind_instance(self, key: Any, instance: Any) -> None:
        """Bind ``key`` to a single value."""

    @abstractmethod
    def bind_in_scope(self, key: Any, provider: Provider, scope_tag: Any) -> None:
        """Bind ``key`` to ``provider`` cached in the scope registered under ``scope_tag``."""

    @abstractmethod
    def bind_scope(self, scope: IScope, scope_tag: Any) -> None:
        """Register ``scope`` under ``scope_tag`` for the whole injector tree."""

    @abstractmethod
    def create_child_injector(self) -> "IInjector":
        """Create a child injector sharing this tree's registry."""

    @abstractmethod
    def create_container(self) -> IContainer:
        """Create a resolution session over this injector."""

    @abstractmethod
    def expose(self, key: Any) -> None:
        """Copy this injector's binding for ``key`` into the parent injector."""

    @abstractmethod
    def expose_and_tag(self, key: Any, tag: Any) -> None:
        """Copy this injector's binding for ``key`` into the parent under ``key`` tagged with ``tag``."""
