import asyncio
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from xliff_service import __version__
from xliff_service.conversion import ConversionRequest, ConversionService, ProjectFactory
from xliff_service.conversion.adapters import DoclingXliffEngine

# Global configuration defaults
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "300"))
DATA_DIR = Path(os.getenv("DATA_DIR", "./data")).resolve()
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)

SERVICE: ConversionService | None = None


def configure_logging() -> None:
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


def build_service() -> ConversionService:
    projects = ProjectFactory(DATA_DIR, max_upload_mb=MAX_UPLOAD_MB)
    return ConversionService(
        projects=projects,
        engine=DoclingXliffEngine(),
        logger=logging.getLogger("xliff_service.conversion"),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Ensure base directories
    (DATA_DIR / "projects").mkdir(parents=True, exist_ok=True)
    global SERVICE
    if SERVICE is None:
        SERVICE = build_service()
    logger.info("XLIFF service ready (data dir %s)", DATA_DIR)
    yield


app = FastAPI(
    title="XLIFF Conversion Service",
    version=os.getenv("XLIFF_SERVICE_VERSION", __version__),
    description=(
        "RESTful API for converting documents into XLIFF (.xlf) files "
        "for a given source and target language."
    ),
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed multipart bodies get the same envelope as every other failure
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.error("[CONVERSION REQUEST FAILED] %s", message)
    return JSONResponse(status_code=400, content={"message": message})


@app.get("/health")
def health() -> dict[str, str]:
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.post("/convert/{source_lang}/{target_lang}")
async def convert(source_lang: str, target_lang: str, file: UploadFile | None = File(None)) -> JSONResponse:
    """Convert an uploaded document into XLIFF.

    Accepts multipart/form-data with a single part named "file". Returns 200
    with the artifact (base64 in ``document_content``) or 400 with
    ``{"message": ...}`` for any failure.
    """
    global SERVICE
    assert SERVICE is not None

    request = ConversionRequest(
        filename=file.filename if file is not None else None,
        source_language=source_lang,
        target_language=target_lang,
        stream=file.file if file is not None else None,
    )
    # Blocking conversion runs in a worker thread; cleanup happens there too
    envelope = await asyncio.to_thread(SERVICE.handle, request)
    return JSONResponse(status_code=envelope.status, content=envelope.body)


def run() -> None:
    """Run a development ASGI server using uvicorn.

    Exposes the app at host:port (default 0.0.0.0:8080). Set PORT env var to override.
    """
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8080"))
    # Enable reload in dev unless explicitly disabled
    reload = os.getenv("RELOAD", "true").lower() in {"1", "true", "yes", "on"}

    uvicorn.run("xliff_service.webapi:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    run()
