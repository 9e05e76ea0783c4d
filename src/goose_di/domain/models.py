from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from goose_di.domain.exceptions import CyclicOrRepeatedLookupError


def _describe(value: Any) -> str:
    if isinstance(value, type):
        return value.__name__
    return str(value)


class Key(BaseModel):
    """Value object identifying a binding.

    A key is a descriptor (usually a class or other marker value) optionally
    paired with a tag. Two keys are equal iff descriptor and tag are both
    equal; an untagged key never equals a tagged one, whatever the tag value.

    Attributes:
        descriptor: Hashable value naming the shape of the bound thing.
        has_tag: Whether the key carries a tag.
        tag: The discriminating tag. Only meaningful when ``has_tag`` is set.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    descriptor: Any = Field(..., description="The descriptor of the bound value.")
    has_tag: bool = Field(default=False, description="Whether the key carries a tag.")
    tag: Any = Field(default=None, description="The tag discriminating keys with the same descriptor.")

    @model_validator(mode="after")
    def validate_tag(self) -> "Key":
        if not self.has_tag and self.tag is not None:
            raise ValueError("An untagged key cannot carry a tag. Use tagged_key() or has_tag=True.")
        return self

    def tagged(self, tag: Any) -> "Key":
        """Return a key for this key tagged with ``tag``.

        An untagged key keeps its descriptor. A key that is already tagged
        becomes the descriptor of the new key, so tags nest instead of
        replacing each other.

        Args:
            tag: The tag to apply.

        Returns:
            The tagged key.
        """
        if self.has_tag:
            return Key(descriptor=self, has_tag=True, tag=tag)
        return Key(descriptor=self.descriptor, has_tag=True, tag=tag)

    def __str__(self) -> str:
        if not self.has_tag:
            return _describe(self.descriptor)
        return f"{_describe(self.descriptor)}({_describe(self.tag)})"


def key_for(descriptor: Any) -> Key:
    """Create an untagged key, or return ``descriptor`` if it is already a Key."""
    if isinstance(descriptor, Key):
        return descriptor
    return Key(descriptor=descriptor)


def tagged_key(descriptor: Any, tag: Any) -> Key:
    """Create a key for ``descriptor`` tagged with ``tag``.

    Example:
        >>> tagged_key(str, "Greeting") == tagged_key(str, "Greeting")
        True
        >>> tagged_key(str, "Greeting") == key_for(str)
        False
    """
    return key_for(descriptor).tagged(tag)


class Binding(BaseModel):
    """Value object associating a key with its provider.

    Attributes:
        key: The key being bound.
        provider: Factory receiving ``(context, container)`` and returning the value.
        scope_tag: Tag of the scope wrapping the provider, if any.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: Key = Field(..., description="The key being bound.")
    provider: Callable[..., Any] = Field(..., description="The provider producing the bound value.")
    scope_tag: Optional[Any] = Field(default=None, description="The tag of the scope caching the value.")


class LookupSession(BaseModel):
    """Tracks the keys requested from one container.

    Keys are marked when requested, not when their provider completes, so any
    re-entrant request for the same key is reported.

    Attributes:
        visited: Keys requested so far, in request order.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    visited: List[Key] = Field(
        default_factory=list,
        description="Keys requested from the container so far.",
    )

    def mark(self, key: Key) -> None:
        """Record a request for ``key``.

        Args:
            key: The key being requested.

        Raises:
            CyclicOrRepeatedLookupError: If the key has already been requested.
        """
        if key in self.visited:
            raise CyclicOrRepeatedLookupError(key, self.visited)
        self.visited.append(key)
