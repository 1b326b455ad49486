from dataclasses import dataclass
from enum import Enum


class PaperHubError(Exception):
    """Base class for client-side failures."""


# ---------------- Chat transport ----------------
class TransportError(PaperHubError):
    pass


class TransportUnavailableError(TransportError):
    """The backend could not be reached or refused the request."""


class GenerationError(TransportError):
    """The backend reported an error while generating."""


# ---------------- Attachments ----------------
class AttachmentError(PaperHubError):
    pass


class UnsupportedFileType(AttachmentError):
    pass


# ---------------- Remote store ----------------
class StoreError(PaperHubError):
    pass


class WrongPasswordError(StoreError):
    pass


class CommentNotFoundError(StoreError):
    pass


# ---------------- UI-facing state ----------------
class ErrorKind(str, Enum):
    VALIDATION = "validation"
    TRANSPORT = "transport"
    GENERATION = "generation"
    UNSUPPORTED_FILE = "unsupported_file"
    ATTACHMENT = "attachment"
    STORE = "store"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class UIError:
    kind: ErrorKind
    message: str


def store_error_to_ui(error: StoreError) -> UIError:
    if isinstance(error, WrongPasswordError):
        return UIError(ErrorKind.UNAUTHORIZED, "Wrong password.")
    if isinstance(error, CommentNotFoundError):
        return UIError(ErrorKind.NOT_FOUND, "The comment no longer exists.")
    return UIError(ErrorKind.STORE, str(error) or "Server error, please try again.")
