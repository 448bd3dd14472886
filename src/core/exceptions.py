"""Custom exceptions shared across the layers."""


class TableTalkError(Exception):
    """Top-level exception for anything raised on purpose by this application."""


# --- API LAYER ---
class InvalidRequestError(TableTalkError):
    """Request data that cannot be interpreted. Raised from the pydantic validators."""


# --- PERSISTENCE LAYER ---
class RepositoryError(TableTalkError):
    """Something went wrong reading from / writing to the repository."""


class NotFoundError(RepositoryError):
    """No record exists for the requested ID."""


class DuplicateBoardError(RepositoryError):
    """A board with the same number already exists for this game."""
