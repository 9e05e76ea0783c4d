"""
Domain layer - Core value objects and contracts.

This layer contains the keys, bindings and error types of the injector.
It has no dependencies on other layers.
"""

from .enums import BuiltinTag, EntryPolicy
from .exceptions import (
    CyclicOrRepeatedLookupError,
    DuplicateBindingError,
    ExposureError,
    InjectionError,
    ScopeMisuseError,
    UnboundKeyError,
)
from .interfaces import IContainer, IInjector, IScope, Provider
from .models import Binding, Key, LookupSession, key_for, tagged_key

__all__ = [
    # Enums
    "BuiltinTag",
    "EntryPolicy",
    # Exceptions
    "InjectionError",
    "DuplicateBindingError",
    "UnboundKeyError",
    "CyclicOrRepeatedLookupError",
    "ScopeMisuseError",
    "ExposureError",
    # Interfaces
    "IContainer",
    "IInjector",
    "IScope",
    "Provider",
    # Models
    "Key",
    "Binding",
    "LookupSession",
    "key_for",
    "tagged_key",
]
