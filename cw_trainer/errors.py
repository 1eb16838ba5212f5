"""Error taxonomy for practice-material production."""

ERROR_KIND_CONFIG = "config"
ERROR_KIND_FILESYSTEM = "filesystem"
ERROR_KIND_EXTERNAL_TOOL = "external_tool"
ERROR_KIND_UNKNOWN = "unknown"


class ProductionError(RuntimeError):
    """Failure tagged with the category it belongs to."""

    def __init__(self, message: str, *, error_kind: str = ERROR_KIND_UNKNOWN) -> None:
        super().__init__(message)
        self.error_kind = str(error_kind or ERROR_KIND_UNKNOWN).strip().lower()


class ConfigError(ProductionError):
    def __init__(self, message: str) -> None:
        super().__init__(message, error_kind=ERROR_KIND_CONFIG)


class TranscodeError(ProductionError):
    def __init__(self, message: str, *, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message, error_kind=ERROR_KIND_EXTERNAL_TOOL)
        self.returncode = returncode
        self.stderr = stderr


def classify_error(exc: BaseException) -> str:
    """Map an exception onto one of the ERROR_KIND_* categories."""
    if isinstance(exc, ProductionError):
        return exc.error_kind
    if isinstance(exc, OSError):
        return ERROR_KIND_FILESYSTEM
    return ERROR_KIND_UNKNOWN
