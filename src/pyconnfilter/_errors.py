"""Exception hierarchy for computed-column filtering."""


class FilterError(Exception):
    """Base exception for filter building and predicate resolution errors.

    Provides dual messaging: a sanitized user-facing message and
    internal details for logging (CWE-209 prevention).
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped

    def internal(self) -> str:
        return self.internal_details


class MissingArgumentError(FilterError):
    """Raised when a computed column argument is absent from ``args``."""

    def __init__(self, argument_name: str, internal_details: str = "") -> None:
        super().__init__(
            f"The value for argument {argument_name} is missing.",
            internal_details,
        )
        self.argument_name = argument_name


class InvalidFilterValueError(FilterError):
    """Raised when a filter value has the wrong shape."""


class InvalidOperatorError(FilterError):
    """Raised when a filter value names an operator the type does not have."""


class UnknownFieldError(FilterError):
    """Raised when resolving a field that was never registered."""


class InvalidIdentifierError(FilterError):
    """Raised when an identifier cannot be quoted safely."""


class RegistryConflictError(FilterError):
    """Raised when a registration clashes with an existing, different entry."""


class TypeConflictError(RegistryConflictError):
    """Raised when two structurally different types share a name."""


class DuplicateFieldError(RegistryConflictError):
    """Raised when two different fields share a name on one filter type."""


class ResolverConflictError(RegistryConflictError):
    """Raised when two different resolvers are registered for one field."""


class RegistryFrozenError(FilterError):
    """Raised when registering into a registry after it was frozen."""


class IntrospectionError(FilterError):
    """Raised when catalog introspection fails."""


# Sanitized user-facing error message constants
ERR_MSG_INVALID_FILTER_VALUE = "invalid filter value"
ERR_MSG_EMPTY_OBJECT = "Empty objects are forbidden in filter argument input."
ERR_MSG_NULL_LITERAL = "Null literals are forbidden in filter argument input."
ERR_MSG_INVALID_OPERATOR = "invalid operator"
ERR_MSG_UNKNOWN_FIELD = "unknown filter field"
ERR_MSG_REGISTRY_FROZEN = "filter registry is read-only"
