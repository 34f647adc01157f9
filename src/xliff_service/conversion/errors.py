"""Classified failures of a conversion request.

Every subclass of ConversionError is an expected outcome: the HTTP layer
reports its message to the client and logs it without a traceback. Any other
exception reaching the request boundary is treated as an internal fault.
"""


class ConversionError(Exception):
    """Base class for classified conversion failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingInputError(ConversionError):
    """No file part was supplied with the request."""

    def __init__(self, message: str = "The input file has not been sent") -> None:
        super().__init__(message)


class InvalidLanguageError(ConversionError):
    """A language tag does not resolve to a registered language."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"The language '{tag}' is not valid")
        self.tag = tag


class UnsupportedFormatError(ConversionError):
    """The engine recognized the input as something it cannot convert."""


class UploadTooLargeError(ConversionError):
    """The uploaded content exceeds the configured size limit."""
