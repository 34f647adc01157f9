"""
Domain layer for XLIFF conversion.
Provides the request handler, its collaborators (language resolution,
per-request projects, the conversion engine) and the response envelopes,
so front-ends (HTTP or others) can use the same core logic.
"""

from .errors import (
    ConversionError,
    InvalidLanguageError,
    MissingInputError,
    UnsupportedFormatError,
    UploadTooLargeError,
)
from .interfaces import ConversionEngine, ProjectGateway
from .languages import Locale, resolve_language
from .project import Project, ProjectFactory, close_quietly, release_project
from .responses import ResponseEnvelope
from .service import ConversionRequest, ConversionService, Failure, Success
