import base64
import hashlib
from dataclasses import dataclass, field
from pathlib import Path

OK = 200
BAD_REQUEST = 400


@dataclass
class ResponseEnvelope:
    status: int
    body: dict[str, object] = field(default_factory=dict)


def success(artifact: Path) -> dict[str, object]:
    """Describe a produced artifact, embedding its content as base64."""
    content = artifact.read_bytes()
    return {
        "filename": artifact.name,
        "size_bytes": len(content),
        "checksum": hashlib.sha256(content).hexdigest(),
        "document_content": base64.b64encode(content).decode("ascii"),
    }


def error(message: str) -> dict[str, object]:
    return {"message": message}
