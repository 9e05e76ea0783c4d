from enum import Enum


class BuiltinTag(Enum):
    """Tags reserved by the injector and the multi-binding extension.

    A plain ``Enum`` (no ``str`` mixin) so user tags such as ``"values"`` never
    compare equal to a built-in tag.

    Attributes:
        SINGLETON: Scope tag of the singleton scope registered on every root injector.
        VALUES: Tag of the derived binding that resolves a multi-binding map to values.
        ENTRY: Marker used to build per-entry cache keys for scoped map entries.
    """

    SINGLETON = "singleton"
    VALUES = "values"
    ENTRY = "entry"

    def __str__(self) -> str:
        return self.name.capitalize()


class EntryPolicy(str, Enum):
    """Defines what happens when a multi-binding entry key is bound twice.

    Attributes:
        OVERWRITE: The last writer for an entry key wins.
        REJECT: A repeated entry key raises DuplicateBindingError.
    """

    OVERWRITE = "overwrite"
    REJECT = "reject"

    def __str__(self) -> str:
        return self.value
