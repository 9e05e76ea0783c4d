"""Application layer - Map-shaped bindings populated by independent contributors."""

import logging
from types import MappingProxyType
from typing import Any, Dict, Hashable, Mapping, Optional

from goose_di.application.injector import Injector
from goose_di.domain import (
    BuiltinTag,
    DuplicateBindingError,
    EntryPolicy,
    IContainer,
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


def values_key(key: Any) -> Key:
    """Return the key of the derived binding resolving a map to its values."""
    return key_for(key).tagged(BuiltinTag.VALUES)


class MultiBindingMap:
    """Live entry-key to provider map behind one multi-binding.

    Attributes:
        key: The outer key the map is bound under.
        policy: What to do when an entry key is bound twice.
        _entries: Providers per entry key.
    """

    def __init__(self, key: Key, policy: EntryPolicy = EntryPolicy.OVERWRITE) -> None:
        """Initialize an empty map.

        Args:
            key: The outer key the map is bound under.
            policy: What to do when an entry key is bound twice.
        """
        self.key = key
        self.policy = policy
        self._entries: Dict[Any, Provider] = {}

    @property
    def providers(self) -> Mapping[Any, Provider]:
        return MappingProxyType(self._entries)

    def put(self, entry_key: Any, provider: Provider) -> None:
        """Insert or replace the provider for ``entry_key``.

        Raises:
            DuplicateBindingError: If the entry exists and the policy is REJECT.
        """
        if self.policy == EntryPolicy.REJECT and entry_key in self._entries:
            raise DuplicateBindingError(self.key.tagged(entry_key), "map entry is already bound")
        self._entries[entry_key] = provider
        logger.debug("Bound map entry %r of %s", entry_key, self.key)

    def resolve_values(self, context: Optional[Hashable], container: IContainer) -> Dict[Any, Any]:
        """Invoke each entry provider once against a snapshot of the entries."""
        return {entry_key: provider(context, container) for entry_key, provider in list(self._entries.items())}


def _create_or_get_map(injector: Injector, key: Any, policy: Optional[EntryPolicy] = None) -> MultiBindingMap:
    key = key_for(key)
    registry = injector.registry
    multi_map = registry.get_map(injector, key)
    if multi_map is not None:
        return multi_map

    # Both keys must be free before either is bound.
    registry.check_claim(injector, key)
    registry.check_claim(injector, values_key(key))

    multi_map = MultiBindingMap(key, policy or EntryPolicy.OVERWRITE)
    # The map itself resolves to the providers.
    injector.bind_instance(key, multi_map.providers)

    # The map tagged with Values resolves to the provided values.
    injector.bind(values_key(key), multi_map.resolve_values)
    registry.set_map(injector, key, multi_map)
    return multi_map


def ensure_map_bound(injector: Injector, key: Any, policy: Optional[EntryPolicy] = None) -> None:
    """Bind ``key`` and ``key`` tagged Values on ``injector`` unless already bound.

    Safe to call from every module that contributes to or consumes the map.
    The entry policy is fixed by the first call; later calls keep it.

    Args:
        injector: The injector owning the map.
        key: The outer key, or a raw descriptor.
        policy: Entry collision policy. Defaults to OVERWRITE.
    """
    _create_or_get_map(injector, key, policy)


def bind_map(injector: Injector, key: Any, entry_key: Any, provider: Provider) -> None:
    """Bind ``provider`` as the ``entry_key`` entry of the map bound under ``key``.

    Unlike ``Injector.bind``, this may be called repeatedly for the same
    ``key`` by modules that know nothing about each other.

    Example:
        >>> bind_map(injector, Handlers, "/", index)
        >>> bind_map(injector, Handlers, "/foo/", foo)
        >>> injector.create_container().get_instance(None, values_key(Handlers))
        {'/': ..., '/foo/': ...}
    """
    _create_or_get_map(injector, key).put(entry_key, provider)


def bind_map_instance(injector: Injector, key: Any, entry_key: Any, instance: Any) -> None:
    bind_map(injector, key, entry_key, _constant(instance))


def bind_map_in_scope(injector: Injector, key: Any, entry_key: Any, provider: Provider, scope_tag: Any) -> None:
    """Bind a map entry whose value is cached in the scope registered under ``scope_tag``.

    Each entry is cached under its own key and the injector owning the map,
    so no two entries share a cache slot, even in sibling maps.
    """
    entry_cache_key = key_for(key).tagged((BuiltinTag.ENTRY, entry_key))
    bind_map(injector, key, entry_key, injector.scope(entry_cache_key, provider, scope_tag))


def bind_map_instance_in_scope(injector: Injector, key: Any, entry_key: Any, instance: Any, scope_tag: Any) -> None:
    bind_map_in_scope(injector, key, entry_key, _constant(instance), scope_tag)


def bind_map_tagged(injector: Injector, descriptor: Any, tag: Any, entry_key: Any, provider: Provider) -> None:
    bind_map(injector, tagged_key(descriptor, tag), entry_key, provider)


def bind_map_tagged_instance(injector: Injector, descriptor: Any, tag: Any, entry_key: Any, instance: Any) -> None:
    bind_map_instance(injector, tagged_key(descriptor, tag), entry_key, instance)


def bind_map_tagged_in_scope(
    injector: Injector, descriptor: Any, tag: Any, entry_key: Any, provider: Provider, scope_tag: Any
) -> None:
    bind_map_in_scope(injector, tagged_key(descriptor, tag), entry_key, provider, scope_tag)


def bind_map_tagged_instance_in_scope(
    injector: Injector, descriptor: Any, tag: Any, entry_key: Any, instance: Any, scope_tag: Any
) -> None:
    bind_map_instance_in_scope(injector, tagged_key(descriptor, tag), entry_key, instance, scope_tag)
