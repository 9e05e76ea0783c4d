"""
Application layer - Binding and resolution.

This layer contains the injector tree, resolution sessions, scopes and
multi-binding maps. It depends only on the Domain layer.
"""

from .container import Container
from .injector import Injector, create_injector
from .multibinding import (
    MultiBindingMap,
    bind_map,
    bind_map_in_scope,
    bind_map_instance,
    bind_map_instance_in_scope,
    bind_map_tagged,
    bind_map_tagged_in_scope,
    bind_map_tagged_instance,
    bind_map_tagged_instance_in_scope,
    ensure_map_bound,
    values_key,
)
from .registry import BindingRegistry
from .scopes import ScopeEntry, SimpleScope, SingletonScope, create_simple_scope

__all__ = [
    "Injector",
    "create_injector",
    "Container",
    "BindingRegistry",
    # Scopes
    "SimpleScope",
    "SingletonScope",
    "ScopeEntry",
    "create_simple_scope",
    # Multi-binding
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
]
