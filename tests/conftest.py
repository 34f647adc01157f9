import io
import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from xliff_service import webapi
from xliff_service.conversion import ConversionService, ProjectFactory
from xliff_service.conversion.xliff import write_xliff


class StubEngine:
    """Writes a one-segment XLIFF from the raw input text, or fails on demand."""

    def __init__(self, error: BaseException | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, str, Path]] = []

    def generate(self, source, target, input_file: Path) -> Path:
        self.calls.append((source.tag, target.tag, input_file))
        if self.error is not None:
            raise self.error
        text = input_file.read_bytes().decode("utf-8", errors="replace")
        return write_xliff(
            input_file.with_name(f"{input_file.name}.xlf"),
            original=input_file.name,
            source=source,
            target=target,
            segments=[text],
        )


class TrackingStream(io.BytesIO):
    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.close_calls = 0

    def close(self) -> None:
        self.close_calls += 1
        super().close()


@pytest.fixture
def projects(tmp_path: Path) -> ProjectFactory:
    return ProjectFactory(tmp_path / "data", max_upload_mb=1)


@pytest.fixture
def engine() -> StubEngine:
    return StubEngine()


@pytest.fixture
def service(projects: ProjectFactory, engine: StubEngine) -> ConversionService:
    return ConversionService(projects=projects, engine=engine, logger=logging.getLogger("tests.conversion"))


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch, service: ConversionService) -> TestClient:
    # Startup is not triggered without the context manager, so the stub service stays in place
    monkeypatch.setattr(webapi, "SERVICE", service)
    return TestClient(webapi.app)


@pytest.fixture
def make_stream():
    return TrackingStream


@pytest.fixture
def make_service(projects: ProjectFactory):
    def _make(error: BaseException | None = None) -> tuple[ConversionService, StubEngine]:
        stub = StubEngine(error)
        return ConversionService(projects=projects, engine=stub, logger=logging.getLogger("tests.conversion")), stub

    return _make
