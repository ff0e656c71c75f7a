class FileGenException(Exception):
    pass


class ConfigurationError(FileGenException, ValueError):
    pass


class SessionStateError(FileGenException):
    pass


class InsufficientSpace(FileGenException):

    def __init__(self, required: int, available: int, directory: str = None):
        self.required = required
        self.available = available
        self.directory = directory
        super().__init__(
            f"Insufficient disk space. Need {required:,} bytes, "
            f"but only {available:,} bytes available."
        )


class NamespaceExhausted(FileGenException):

    def __init__(self, directory: str, attempts: int):
        self.directory = directory
        self.attempts = attempts
        super().__init__(f"Unable to generate unique filename in {directory} after {attempts} attempts")


class WriteFailure(FileGenException):

    def __init__(self, path: str, bytes_written: int = 0, msg: str = ""):
        self.path = path
        self.bytes_written = bytes_written
        super().__init__(f"Write failed for {path} after {bytes_written} bytes: {msg}")


class AlreadyExists(WriteFailure):

    def __init__(self, path: str):
        super().__init__(path, 0, "file already exists")


class GenerationCancelled(FileGenException):

    def __init__(self, files_generated: int):
        self.files_generated = files_generated
        super().__init__(f"Generation cancelled after {files_generated} files")


class AttributeWarning(FileGenException, UserWarning):
    severity = "warning"

    def __init__(self, path: str, msg: str):
        self.path = path
        self.kind = "not_read_only"
        super().__init__(msg)


class VerificationMismatch(FileGenException):
    severity = "error"

    def __init__(self, path: str, kind: str, msg: str):
        self.path = path
        self.kind = kind
        super().__init__(msg)


class CleanupFailure(FileGenException):

    def __init__(self, path: str, msg: str):
        self.path = path
        super().__init__(f"Error deleting file {path}: {msg}")
