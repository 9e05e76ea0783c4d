"""Application layer - State shared by every injector of one tree."""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from goose_di.application.scopes import SingletonScope
from goose_di.domain import BuiltinTag, DuplicateBindingError, IScope, Key, ScopeMisuseError

if TYPE_CHECKING:
    from goose_di.application.injector import Injector
    from goose_di.application.multibinding import MultiBindingMap

logger = logging.getLogger(__name__)


class BindingRegistry:
    """Key claims, scopes and multi-binding maps of one injector tree.

    Created by ``create_injector`` and handed to every child, so each root
    gets its own registry and nothing is process-wide.

    Attributes:
        _claims: Injectors holding a binding, per key.
        _scopes: Registered scopes, per scope tag.
        _maps: Multi-binding maps, per (injector, key).
    """

    def __init__(self) -> None:
        """Initialize the registry with the singleton scope registered."""
        self._claims: Dict[Key, List["Injector"]] = {}
        self._scopes: Dict[Any, IScope] = {BuiltinTag.SINGLETON: SingletonScope()}
        self._maps: Dict[Tuple["Injector", Key], "MultiBindingMap"] = {}

    def claim(self, injector: "Injector", key: Key) -> None:
        """Record that ``injector`` binds ``key``.

        A key may be held once per lineage: the injector itself, its
        ancestors and its descendants are checked. Sibling subtrees are
        independent of each other.

        Raises:
            DuplicateBindingError: If the key is already held in the lineage.
        """
        self.check_claim(injector, key)
        self._claims.setdefault(key, []).append(injector)

    def check_claim(self, injector: "Injector", key: Key) -> None:
        """Raise if ``injector`` could not claim ``key``, without recording anything.

        Raises:
            DuplicateBindingError: If the key is already held in the lineage.
        """
        for holder in self._claims.get(key, []):
            if holder is injector:
                raise DuplicateBindingError(key)
            if holder.is_ancestor_of(injector):
                raise DuplicateBindingError(key, "bound in an ancestor injector")
            if injector.is_ancestor_of(holder):
                raise DuplicateBindingError(key, "bound in a descendant injector")

    def claim_exposed(self, parent: "Injector", key: Key) -> None:
        """Record that ``parent`` receives ``key`` exposed by one of its children.

        Only the parent and its ancestors are checked, since the exposing
        child and its siblings may legitimately hold the same key.

        Raises:
            DuplicateBindingError: If the parent or one of its ancestors binds the key.
        """
        for holder in self._claims.get(key, []):
            if holder is parent or holder.is_ancestor_of(parent):
                raise DuplicateBindingError(key, "already bound in the parent injector lineage")
        self._claims.setdefault(key, []).append(parent)

    def bind_scope(self, scope: IScope, scope_tag: Any) -> None:
        if scope_tag in self._scopes:
            raise DuplicateBindingError(scope_tag, "a scope is already bound for this tag")
        self._scopes[scope_tag] = scope
        logger.debug("Bound scope %r to tag %s", scope, scope_tag)

    def get_scope(self, scope_tag: Any) -> IScope:
        """Return the scope registered under ``scope_tag``.

        Raises:
            ScopeMisuseError: If no scope is registered under the tag.
        """
        if scope_tag not in self._scopes:
            raise ScopeMisuseError(f"Scope tag '{scope_tag}' is not bound")
        return self._scopes[scope_tag]

    def get_map(self, injector: "Injector", key: Key) -> Optional["MultiBindingMap"]:
        return self._maps.get((injector, key))

    def set_map(self, injector: "Injector", key: Key, multi_map: "MultiBindingMap") -> None:
        self._maps[(injector, key)] = multi_map
