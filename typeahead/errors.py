"""Exceptions raised by the typeahead index."""


class FulltextError(Exception):
    """Base class for all index errors."""


class InvalidInputError(FulltextError, ValueError):
    """A document batch failed validation; nothing was indexed."""


class InsufficientQueryError(FulltextError, ValueError):
    """The query produced no n-grams to look up."""


class SearchCancelledError(FulltextError):
    """The caller cancelled a search before it finished."""
