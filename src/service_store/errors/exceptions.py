"""Exception classes raised by the service store core and its handlers."""


class ServiceStoreError(Exception):
    """Base exception for the service store."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(ServiceStoreError):
    """A required request field is missing or invalid."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=400)


class DecodeError(ValidationError):
    """The request payload could not be decoded into a service view."""

    def __init__(self, message: str, details=None):
        super().__init__(message, details)
        self.code = "DECODE_ERROR"


class NotFoundError(ServiceStoreError):
    """Lookup by key matched no stored record."""

    def __init__(self, resource: str, resource_id: str | None = None):
        message = f"{resource} '{resource_id}' not found" if resource_id else f"{resource} not found"
        super().__init__("NOT_FOUND", message, status_code=404)


class ConflictError(ServiceStoreError):
    """The environment already has a build in progress."""

    def __init__(self, message: str):
        super().__init__("CONFLICT", message, status_code=409)


class InvalidStateError(ServiceStoreError):
    """The environment carries a status the state machine does not know."""

    def __init__(self, message: str, status: str | None = None):
        super().__init__("INVALID_STATE", message, {"status": status}, status_code=500)


class PersistenceError(ServiceStoreError):
    """The store rejected a statement, commit or connection.

    The store's own message is kept verbatim; the original exception is
    chained as ``__cause__`` by the code raising this.
    """

    def __init__(self, message: str):
        super().__init__("PERSISTENCE_ERROR", message, status_code=500)
