class TodoError(Exception):
    """Base error; ``status_code`` is the HTTP status it is rendered with."""

    status_code = 500

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg

    def __str__(self) -> str:
        return self.msg


class ValidationError(TodoError):
    """Malformed id, malformed body or id mismatch."""

    status_code = 400


class NotFoundError(TodoError):
    status_code = 404


class StorageError(TodoError):
    """Any failure coming out of the persistence layer."""

    status_code = 500
