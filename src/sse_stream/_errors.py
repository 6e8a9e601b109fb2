"""
Exception hierarchy for the SSE stream parser.

Malformed event-stream input never raises; these exceptions cover the few
failures that can escape the library.
"""


class SSEError(Exception):
    """
    Base exception for all errors raised by this library.

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code is not None:
            return f"{self.message} [{self.code}]"
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r})"
        )


class SSEDecodeError(SSEError):
    """
    Exception raised when the byte stream is not valid UTF-8.

    Only raised by parsers created with errors="strict". The line holding
    the invalid bytes is dropped and the decoder is reset before this is
    raised, so the rest of the stream parses normally.

    Attributes:
        position: Offset of the first offending byte, counted from the first
            byte the decoder still held from the previous chunk (or from the
            start of the failing chunk when nothing was held)
    """

    def __init__(
        self,
        message: str = "Invalid UTF-8 in event stream",
        position: int | None = None,
    ) -> None:
        if position is not None:
            message = f"{message} at byte {position}"
        super().__init__(message, code="DECODE_ERROR")
        self.position = position
