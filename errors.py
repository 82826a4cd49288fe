class InvalidDomainError(ValueError):
    """A counter or shifter was built over an empty index domain."""


class SearchInvariantError(RuntimeError):
    """The search reached a state that correct inputs can never produce."""


class SearchLimitError(RuntimeError):
    """A configured search cap ran out before a placement was found."""


__all__ = ["InvalidDomainError", "SearchInvariantError", "SearchLimitError"]
