import logging
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO

from .errors import UploadTooLargeError

logger = logging.getLogger(__name__)

CHUNK = 1024 * 1024
DEFAULT_FILENAME = "upload"


def sanitize_filename(filename: str | None) -> str:
    """Reduce a client supplied filename to its base name.

    Both POSIX and Windows separators are stripped so that a name such as
    ``../../etc/passwd`` or ``C:\\temp\\report.docx`` cannot escape the
    project directory.
    """
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1].strip()
    if name in {"", ".", ".."}:
        return DEFAULT_FILENAME
    return name


def close_quietly(stream: BinaryIO | None) -> None:
    if stream is None:
        return
    try:
        stream.close()
    except OSError:
        pass


class Project:
    """Working storage for a single conversion request.

    Owns a directory holding the materialized upload. The directory and
    everything written into it (including the generated artifact) is removed
    by release(), which may be called any number of times.
    """

    def __init__(self, directory: Path, file: Path) -> None:
        self._directory = directory
        self._file = file
        self._released = False

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def file(self) -> Path:
        return self._file

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        shutil.rmtree(self._directory, ignore_errors=True)
        logger.debug("Released project %s", self._directory)

    def __enter__(self) -> "Project":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


def release_project(project: Project | None) -> None:
    if project is not None:
        project.release()


class ProjectFactory:
    """Creates projects under ``<data_dir>/projects``, one directory each."""

    def __init__(self, data_dir: str | Path, *, max_upload_mb: int = 300) -> None:
        self._base = Path(data_dir).resolve() / "projects"
        self._max_upload_mb = max_upload_mb

    @property
    def base_dir(self) -> Path:
        return self._base

    def open(self, filename: str | None, stream: BinaryIO) -> Project:
        """Consume ``stream`` into a fresh project directory."""
        self._base.mkdir(parents=True, exist_ok=True)
        directory = Path(tempfile.mkdtemp(prefix="project-", dir=self._base))
        input_path = directory / sanitize_filename(filename)
        max_bytes = self._max_upload_mb * 1024 * 1024
        size_bytes = 0
        try:
            with input_path.open("wb") as f_out:
                while True:
                    chunk = stream.read(CHUNK)
                    if not chunk:
                        break
                    size_bytes += len(chunk)
                    if size_bytes > max_bytes:
                        raise UploadTooLargeError(f"upload exceeds {self._max_upload_mb} MB")
                    f_out.write(chunk)
        except BaseException:
            shutil.rmtree(directory, ignore_errors=True)
            raise
        logger.debug("Opened project %s (%d bytes)", directory, size_bytes)
        return Project(directory, input_path)
