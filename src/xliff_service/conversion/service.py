import logging
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union

from . import responses
from .errors import ConversionError, MissingInputError
from .interfaces import ConversionEngine, ProjectGateway
from .languages import Locale, resolve_language
from .project import Project, close_quietly, sanitize_filename
from .responses import ResponseEnvelope


@dataclass
class ConversionRequest:
    filename: str | None
    source_language: str
    target_language: str
    stream: BinaryIO | None


@dataclass(frozen=True)
class Success:
    artifact: Path


@dataclass(frozen=True)
class Failure:
    message: str
    expected: bool
    error: BaseException | None = None

    @classmethod
    def from_exception(cls, e: BaseException) -> "Failure":
        if isinstance(e, ConversionError):
            return cls(e.message, expected=True, error=e)
        if isinstance(e, OSError) and e.strerror:
            # Keep working paths out of the client message
            return cls(e.strerror, expected=False, error=e)
        return cls(str(e) or type(e).__name__, expected=False, error=e)


ConversionResult = Union[Success, Failure]


class ConversionService:
    """Handles one XLIFF conversion request from upload to response envelope.

    Each stage (language resolution, project creation, generation) yields a
    value or a Failure; the first Failure ends the request. The input stream
    and the project are released through a single ExitStack on every path,
    and the envelope is built before the project goes away since the
    artifact lives inside it.
    """

    def __init__(
        self,
        projects: ProjectGateway,
        engine: ConversionEngine,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._projects = projects
        self._engine = engine
        self._logger = logger or logging.getLogger(__name__)

    def handle(self, request: ConversionRequest) -> ResponseEnvelope:
        self._logger.info(
            "[CONVERSION REQUEST] %s: %s to %s",
            sanitize_filename(request.filename),
            request.source_language,
            request.target_language,
        )
        with ExitStack() as stack:
            stack.callback(close_quietly, request.stream)
            try:
                result = self._convert(request, stack)
                if isinstance(result, Success):
                    envelope = ResponseEnvelope(responses.OK, responses.success(result.artifact))
                    self._logger.info("[CONVERSION REQUEST FINISHED]")
                    return envelope
            except Exception as e:
                result = Failure.from_exception(e)
            return self._fail(result)

    def _convert(self, request: ConversionRequest, stack: ExitStack) -> ConversionResult:
        if request.stream is None:
            return Failure.from_exception(MissingInputError())

        source = self._resolve(request.source_language)
        if isinstance(source, Failure):
            return source
        target = self._resolve(request.target_language)
        if isinstance(target, Failure):
            return target

        project = self._open_project(request.filename, request.stream)
        if isinstance(project, Failure):
            return project
        stack.callback(project.release)

        return self._generate(source, target, project)

    def _resolve(self, tag: str) -> Locale | Failure:
        try:
            return resolve_language(tag)
        except ConversionError as e:
            return Failure.from_exception(e)

    def _open_project(self, filename: str | None, stream: BinaryIO) -> Project | Failure:
        try:
            return self._projects.open(filename, stream)
        except Exception as e:
            return Failure.from_exception(e)

    def _generate(self, source: Locale, target: Locale, project: Project) -> ConversionResult:
        try:
            return Success(self._engine.generate(source, target, project.file))
        except Exception as e:
            return Failure.from_exception(e)

    def _fail(self, failure: Failure) -> ResponseEnvelope:
        if failure.expected:
            self._logger.error("[CONVERSION REQUEST FAILED] %s", failure.message)
        else:
            self._logger.error("[CONVERSION REQUEST FAILED] %s", failure.message, exc_info=failure.error)
        return ResponseEnvelope(responses.BAD_REQUEST, responses.error(failure.message))
