"""Error taxonomy for collections, containers and codecs.

Every failure the library reports is a subclass of ``CalcifyError`` so that
callers can catch the whole family at once, while the individual classes
stay distinguishable. Where a builtin exception already describes the
condition (``KeyError``, ``ValueError``, ``TypeError``) the class derives
from it as well.
"""


class CalcifyError(Exception):
    """Base exception for calcify errors."""

    pass


class DuplicateNameError(CalcifyError, KeyError):
    """Raised when a Field, Branch or Feed name is already taken."""

    def __init__(self, kind: str, name: str, owner: str) -> None:
        self.kind = kind
        self.name = name
        self.owner = owner
        super().__init__(f"{kind} '{name}' already exists in '{owner}'")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class UnknownNameError(CalcifyError, KeyError):
    """Raised when looking up a Field, Branch or Feed that does not exist."""

    def __init__(self, kind: str, name: str, owner: str) -> None:
        self.kind = kind
        self.name = name
        self.owner = owner
        super().__init__(f"No {kind} named '{name}' in '{owner}'")

    def __str__(self) -> str:
        return self.args[0]


class LengthMismatchError(CalcifyError, ValueError):
    """Raised when paired sequences (e.g. plot inputs) differ in length."""

    def __init__(self, left: int, right: int) -> None:
        self.left = left
        self.right = right
        super().__init__(f"Length mismatch: {left} != {right}")


class TypeTagMismatchError(CalcifyError, TypeError):
    """Raised when a collection's elements do not match the declared type tag."""

    pass


class UnsupportedReadTypeError(CalcifyError):
    """Raised when a payload holds an element type its container cannot rebuild."""

    def __init__(self, type_tag: str, series: str, container: str = "Tree") -> None:
        self.type_tag = type_tag
        self.series = series
        self.container = container
        if container == "Tree":
            hint = "Store it in a FeedTree if it has to be read back."
        else:
            hint = "Register the element class or pass it in `types`."
        super().__init__(
            f"'{series}' has type tag '{type_tag}', which a {container} cannot decode. {hint}"
        )


class MalformedPayloadError(CalcifyError):
    """Raised when a text or binary payload is structurally invalid."""

    pass


class EncodeFailureError(CalcifyError):
    """Raised when a value cannot be represented in the requested format."""

    pass
