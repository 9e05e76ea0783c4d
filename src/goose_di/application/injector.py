import logging
from typing import Any, Dict, List, Optional, Tuple

from goose_di.application.container import Container
from goose_di.application.registry import BindingRegistry
from goose_di.domain import (
    Binding,
    ExposureError,
    IInjector,
    IScope,
    Key,
    Provider,
    key_for,
    tagged_key,
)

logger = logging.getLogger(__name__)


def _constant(instance: Any) -> Provider:
    def provider(context: Any, container: Any) -> Any:
        return instance

    return provider


class Injector(IInjector):
    """A node in the hierarchical binding registry.

    Holds the bindings registered directly on this node and a reference to
    its parent. Key claims, scopes and multi-binding maps live in a
    BindingRegistry shared by the whole tree.

    A key may be bound once per lineage: binding a key that an ancestor or a
    descendant already binds raises DuplicateBindingError, while sibling
    injectors may bind the same key independently. Children see their
    ancestors' bindings; parents only see a child's bindings once the child
    exposes them.

    Attributes:
        _bindings: Bindings owned by this node.
        _parent: The parent injector, or None at the root.
        _children: Child injectors created from this node.
        _registry: Registry shared across the tree.

    Example:
        >>> injector = create_injector()
        >>> injector.bind_instance(Name, "world")
        >>> injector.bind(Greeting, lambda ctx, c: f"Hello, {c.get_instance(ctx, Name)}!")
        >>> injector.create_container().get_instance(None, Greeting)
        'Hello, world!'
    """

    def __init__(self, registry: BindingRegistry, parent: Optional["Injector"] = None) -> None:
        """Initialize the injector.

        Args:
            registry: Registry shared by every injector of the tree.
            parent: The parent injector. None for a root injector.
        """
        self._bindings: Dict[Key, Binding] = {}
        self._parent = parent
        self._children: List["Injector"] = []
        self._registry = registry

    @property
    def parent(self) -> Optional["Injector"]:
        return self._parent

    @property
    def children(self) -> Tuple["Injector", ...]:
        return tuple(self._children)

    @property
    def registry(self) -> BindingRegistry:
        return self._registry

    def is_ancestor_of(self, other: "Injector") -> bool:
        """Return True if this injector is a strict ancestor of ``other``."""
        node = other._parent
        while node is not None:
            if node is self:
                return True
            node = node._parent
        return False

    def _add_binding(self, binding: Binding) -> None:
        self._registry.claim(self, binding.key)
        self._bindings[binding.key] = binding
        logger.debug("Bound %s", binding.key)

    def bind(self, key: Any, provider: Provider) -> None:
        """Bind a key to a provider.

        Args:
            key: The key, or a raw descriptor promoted with ``key_for``.
            provider: Callable receiving ``(context, container)``.

        Raises:
            DuplicateBindingError: If the key is bound on this injector, an ancestor or a descendant.
        """
        self._add_binding(Binding(key=key_for(key), provider=provider))

    def bind_instance(self, key: Any, instance: Any) -> None:
        self.bind(key, _constant(instance))

    def scope(self, key: Any, provider: Provider, scope_tag: Any) -> Provider:
        """Wrap a provider in the scope registered under ``scope_tag`` without binding it.

        The cached value belongs to this injector, so siblings binding the
        same key in the same scope keep separate values.

        Raises:
            ScopeMisuseError: If no scope is registered under the tag.
        """
        scope = self._registry.get_scope(scope_tag)
        return scope.scope(key_for(key), provider, owner=self)

    def bind_in_scope(self, key: Any, provider: Provider, scope_tag: Any) -> None:
        """Bind a key to a provider whose value is cached in a scope.

        Args:
            key: The key, or a raw descriptor.
            provider: Callable receiving ``(context, container)``.
            scope_tag: Tag the scope was registered under with ``bind_scope``.

        Raises:
            ScopeMisuseError: If no scope is registered under the tag.
            DuplicateBindingError: If the key is already bound in this lineage.
        """
        key = key_for(key)
        scoped_provider = self.scope(key, provider, scope_tag)
        self._add_binding(Binding(key=key, provider=scoped_provider, scope_tag=scope_tag))

    def bind_instance_in_scope(self, key: Any, instance: Any, scope_tag: Any) -> None:
        self.bind_in_scope(key, _constant(instance), scope_tag)

    def bind_tagged(self, descriptor: Any, tag: Any, provider: Provider) -> None:
        self.bind(tagged_key(descriptor, tag), provider)

    def bind_tagged_instance(self, descriptor: Any, tag: Any, instance: Any) -> None:
        self.bind_instance(tagged_key(descriptor, tag), instance)

    def bind_tagged_in_scope(self, descriptor: Any, tag: Any, provider: Provider, scope_tag: Any) -> None:
        self.bind_in_scope(tagged_key(descriptor, tag), provider, scope_tag)

    def bind_tagged_instance_in_scope(self, descriptor: Any, tag: Any, instance: Any, scope_tag: Any) -> None:
        self.bind_instance_in_scope(tagged_key(descriptor, tag), instance, scope_tag)

    def bind_scope(self, scope: IScope, scope_tag: Any) -> None:
        """Register a scope under a tag for the whole injector tree.

        Raises:
            DuplicateBindingError: If the tag already has a scope.
        """
        self._registry.bind_scope(scope, scope_tag)

    def create_child_injector(self) -> "Injector":
        """Create a child injector that can bind additional keys.

        The child resolves its own bindings first, then this injector's and
        its ancestors'. This injector cannot see the child's bindings unless
        the child exposes them.
        """
        child = Injector(self._registry, parent=self)
        self._children.append(child)
        return child

    def create_container(self) -> Container:
        return Container(self)

    def expose_as(self, key: Any, parent_key: Any) -> None:
        """Copy this injector's binding for ``key`` into the parent under ``parent_key``.

        Exposure reaches the immediate parent only. To make the binding
        visible to a grandparent, the parent must expose it in turn. The
        exposed provider still resolves its own dependencies from this
        injector, recording them in this injector's session of the container
        that requested it.

        Args:
            key: Key bound on this injector.
            parent_key: Key to install the binding under in the parent.

        Raises:
            ExposureError: If there is no parent or no local binding for ``key``.
            DuplicateBindingError: If the parent or one of its ancestors binds ``parent_key``.
        """
        key = key_for(key)
        parent_key = key_for(parent_key)
        if self._parent is None:
            raise ExposureError(key, "no parent injector available")
        binding = self._bindings.get(key)
        if binding is None:
            raise ExposureError(key, "no binding is present in this injector")

        provider = binding.provider

        # Exposed providers resolve their dependencies from this injector.
        def exposed_provider(context: Any, container: Container) -> Any:
            return provider(context, container.for_injector(self))

        self._registry.claim_exposed(self._parent, parent_key)
        self._parent._bindings[parent_key] = binding.model_copy(
            update={"key": parent_key, "provider": exposed_provider}
        )
        logger.debug("Exposed %s to parent injector as %s", key, parent_key)

    def expose(self, key: Any) -> None:
        self.expose_as(key, key)

    def expose_tagged(self, descriptor: Any, tag: Any) -> None:
        self.expose(tagged_key(descriptor, tag))

    def expose_and_tag(self, key: Any, tag: Any) -> None:
        """Expose ``key`` to the parent under ``key`` tagged with ``tag``.

        Lets sibling injectors that bind the same key expose it side by side.
        """
        key = key_for(key)
        self.expose_as(key, key.tagged(tag))

    def _get_binding(self, key: Key) -> Optional[Binding]:
        return self._bindings.get(key)

    def _find_ancestor_binding(self, key: Key) -> Optional[Binding]:
        """Search strictly upward through the ancestors for ``key``."""
        node = self._parent
        while node is not None:
            binding = node._get_binding(key)
            if binding is not None:
                return binding
            node = node._parent
        return None

    def find_binding(self, key: Any) -> Optional[Binding]:
        """Look up ``key`` on this injector, then on its ancestors nearest first."""
        key = key_for(key)
        binding = self._get_binding(key)
        if binding is not None:
            return binding
        return self._find_ancestor_binding(key)


def create_injector() -> Injector:
    """Create a root injector with a fresh registry.

    The singleton scope is registered under ``BuiltinTag.SINGLETON``.
    """
    return Injector(BindingRegistry())
