"""
goose-di: Hierarchical dependency injector with scopes and multi-bindings.

Public API exports for the goose-di package.
"""

# Application exports
from goose_di.application import (
    Container,
    Injector,
    MultiBindingMap,
    ScopeEntry,
    SimpleScope,
    SingletonScope,
    bind_map,
    bind_map_in_scope,
    bind_map_instance,
    bind_map_instance_in_scope,
    bind_map_tagged,
    bind_map_tagged_in_scope,
    bind_map_tagged_instance,
    bind_map_tagged_instance_in_scope,
    create_injector,
    create_simple_scope,
    ensure_map_bound,
    values_key,
)

# Domain exports
from goose_di.domain import (
    BuiltinTag,
    CyclicOrRepeatedLookupError,
    DuplicateBindingError,
    EntryPolicy,
    ExposureError,
    InjectionError,
    Key,
    ScopeMisuseError,
    UnboundKeyError,
    key_for,
    tagged_key,
)

Singleton = BuiltinTag.SINGLETON
Values = BuiltinTag.VALUES

__version__ = "0.1.0"

__all__ = [
    # Injector
    "create_injector",
    "Injector",
    "Container",
    # Keys
    "Key",
    "key_for",
    "tagged_key",
    "BuiltinTag",
    "Singleton",
    "Values",
    # Scopes
    "SimpleScope",
    "SingletonScope",
    "ScopeEntry",
    "create_simple_scope",
    # Multi-binding
    "EntryPolicy",
    "MultiBindingMap",
    "ensure_map_bound",
    "values_key",
    "bind_map",
    "bind_map_instance",
    "bind_map_in_scope",
    "bind_map_instance_in_scope",
    "bind_map_tagged",
    "bind_map_tagged_instance",
    "bind_map_tagged_in_scope",
    "bind_map_tagged_instance_in_scope",
    # Exceptions
    "InjectionError",
    "DuplicateBindingError",
    "UnboundKeyError",
    "CyclicOrRepeatedLookupError",
    "ScopeMisuseError",
    "ExposureError",
]
