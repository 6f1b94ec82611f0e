# contacts_server/api/errors.py
"""
GraphQL errors raised by resolvers and the auth layer.

Each class carries a stable machine-readable code in ``extensions.code``;
extra keyword arguments are added to the extensions as diagnostics.
"""
from graphql import GraphQLError


class ContactsApiError(GraphQLError):
    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, **extensions):
        super().__init__(message, extensions={"code": self.code, **extensions})


class Unauthenticated(ContactsApiError):
    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "not authenticated", **extensions):
        super().__init__(message, **extensions)


class InvalidCredentials(ContactsApiError):
    code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "wrong credentials", **extensions):
        super().__init__(message, **extensions)


class InvalidToken(ContactsApiError):
    code = "INVALID_TOKEN"

    def __init__(self, message: str = "invalid token", **extensions):
        super().__init__(message, **extensions)


class BadUserInput(ContactsApiError):
    code = "BAD_USER_INPUT"


class NotFound(ContactsApiError):
    code = "NOT_FOUND"
