class PortalError(Exception):
    """Base class for every failure a workflow surfaces to its caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Precondition violations: rejected locally before any gateway call.

class ValidationError(PortalError):
    status_code = 400


class FileTooLargeError(PortalError):
    status_code = 413

    def __init__(self, size: int, limit: int):
        super().__init__(f"File size exceeds {limit // (1024 * 1024)}MB limit.")
        self.size = size
        self.limit = limit


class AuthenticationRequiredError(PortalError):
    status_code = 401

    def __init__(self, message: str = "Please log in to continue."):
        super().__init__(message)


class InvalidCredentialsError(PortalError):
    status_code = 401


class UploadInProgressError(PortalError):
    status_code = 409

    def __init__(self):
        super().__init__("Another upload is already in progress.")


class ConfirmationRequiredError(PortalError):
    status_code = 428


# Remote failures: the gateway refused or could not be reached.

class GatewayError(PortalError):
    status_code = 502


class RecordNotFoundError(PortalError):
    status_code = 404


# Partial failures: the first step of a two-step operation succeeded,
# the second did not, and the blob store and record store now disagree.

class PartialFailureError(GatewayError):
    operation = ""

    def __init__(self, message: str, storage_path: str):
        super().__init__(message)
        self.storage_path = storage_path


class OrphanedBlobError(PartialFailureError):
    """Blob written but its record could not be inserted."""

    operation = "upload"


class DanglingRecordError(PartialFailureError):
    """Blob removed but its record could not be deleted."""

    operation = "delete"
