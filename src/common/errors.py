"""Error types shared across pipeline stages."""


class WikiStatusError(Exception):
    """Base class for errors that abort a report build."""


class ScanError(WikiStatusError):
    """The wiki tree could not be walked completely."""

    def __init__(self, message: str, failures: list[tuple[str, OSError]] | None = None):
        super().__init__(message)
        self.failures = failures or []


class MetadataError(WikiStatusError):
    """Front-matter or group-info YAML could not be decoded."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Malformed metadata at {path}: {reason}")
        self.path = path
        self.reason = reason


class GitCommandError(WikiStatusError):
    """A git invocation exited non-zero or wrote to stderr."""

    def __init__(self, args: tuple[str, ...], returncode: int, stderr: str):
        detail = stderr or f"exit code {returncode}"
        super().__init__(f"git {' '.join(args)} failed: {detail}")
        self.args_used = args
        self.returncode = returncode
        self.stderr = stderr


class TransientProcessError(WikiStatusError):
    """Launching git kept failing with a retryable OS error."""

    def __init__(self, attempts: int, cause: OSError):
        super().__init__(f"Could not launch git after {attempts} attempts: {cause}")
        self.attempts = attempts
        self.cause = cause
