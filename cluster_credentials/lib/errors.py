"""Exception hierarchy for credential resolution."""


class CredentialError(Exception):
    """Base class for every failure raised while resolving a client configuration."""


class SecretFetchError(CredentialError):
    """Secret backend lookup failed (not found, denied, unreachable...)."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"failed to get secret {name!r}")


class SecretNotFoundError(SecretFetchError):
    """Secret backend reported that the named secret does not exist."""

    def __init__(self, name: str, location: str | None = None) -> None:
        where = f" in {location}" if location else ""
        super().__init__(name, f"secret {name!r} not found{where}")


class MissingFieldError(CredentialError):
    """Source was read successfully but lacks a required entry."""

    def __init__(self, field: str, source: str, reason: str = "is missing") -> None:
        self.field = field
        self.source = source
        super().__init__(f"{source}: field {field!r} {reason}")


class PathResolutionError(CredentialError):
    """A dotted field path could not be resolved.

    Attributes:
        path: Full path string being resolved
        segment: Segment that failed ("" when the path itself is invalid)
        index: Zero-based position of ``segment`` in the path
    """

    def __init__(self, path: str, segment: str = "", index: int = 0, reason: str = "") -> None:
        self.path = path
        self.segment = segment
        self.index = index
        if segment:
            message = f"field path {path!r}: segment {index} ({segment!r}) {reason}"
        else:
            message = f"field path {path!r}: {reason}"
        super().__init__(message)


class DecodeError(CredentialError):
    """CA material present but not valid base64, PEM, certificate or key."""

    def __init__(self, part: str, reason: str) -> None:
        self.part = part
        super().__init__(f"invalid CA {part}: {reason}")


class KubeconfigError(CredentialError):
    """Kubeconfig document is malformed or internally inconsistent."""
