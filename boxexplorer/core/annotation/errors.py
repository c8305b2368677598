class AnnotationError(Exception):
    """Base class for annotation pipeline errors."""


class AnnotationConfigError(AnnotationError):
    """A request cannot be built: missing service settings or empty input."""


class AnnotationHttpError(AnnotationError):
    """The completion service answered with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code
        self.body = body
