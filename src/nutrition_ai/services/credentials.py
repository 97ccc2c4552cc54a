"""
Service account credential resolution.

Credentials for each kind are looked up in a fixed order:

1. ``<KIND>_SERVICE_ACCOUNT_KEY_BASE64`` - base64-encoded JSON
2. ``<KIND>_SERVICE_ACCOUNT_KEY`` - raw JSON, possibly with mangled newlines
3. ``<credentials_dir>/<file>`` - JSON key file for local development

The first source that yields a valid key wins. Malformed sources are logged
and skipped; ``CredentialNotFoundError`` is raised only when every source
has been tried.
"""

import base64
import binascii
import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError

from nutrition_ai.core.config import CredentialKind, Settings, get_settings
from nutrition_ai.core.exceptions import CredentialNotFoundError
from nutrition_ai.models.analysis import ServiceAccountCredential

logger = logging.getLogger(__name__)

# A JSON string literal, escapes included
_JSON_STRING = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)


class _SourceError(ValueError):
    """A credential source was present but unusable."""


def _to_credential(data: Any) -> ServiceAccountCredential:
    if not isinstance(data, dict):
        raise _SourceError(f"expected a JSON object, got {type(data).__name__}")
    try:
        return ServiceAccountCredential.model_validate(data)
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise _SourceError(f"invalid service account fields: {missing}") from e


def _escape_raw_newlines(text: str) -> str:
    """Turn literal line breaks inside JSON strings into ``\\n`` escapes."""
    return _JSON_STRING.sub(
        lambda m: m.group(0).replace("\r\n", "\\n").replace("\n", "\\n"),
        text,
    )


def parse_base64_source(value: str) -> ServiceAccountCredential:
    """Decode a base64-encoded service account JSON document."""
    try:
        text = base64.b64decode("".join(value.split()), validate=True).decode("utf-8")
        return _to_credential(json.loads(text))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise _SourceError(f"base64 decode failed: {e}") from e


def parse_json_source(value: str) -> ServiceAccountCredential:
    """
    Parse a raw JSON service account document.

    Two malformations are common and mutually exclusive: the private key
    arrives with escaped ``\\n`` sequences (fixed up after parsing), or with
    real line breaks inside the string (invalid JSON until escaped). Both
    strategies are tried before giving up.
    """
    strategies: list[tuple[str, Callable[[str], str]]] = [
        ("escaped newlines", lambda text: text),
        ("raw newlines", _escape_raw_newlines),
    ]
    errors = []
    for name, prepare in strategies:
        try:
            return _to_credential(json.loads(prepare(value)))
        except (json.JSONDecodeError, _SourceError) as e:
            logger.debug(f"JSON credential parse ({name}) failed: {e}")
            errors.append(f"{name}: {e}")
    raise _SourceError("; ".join(errors))


def parse_file_source(path: Path) -> ServiceAccountCredential:
    """Load a service account JSON key file."""
    try:
        text = path.read_text(encoding="utf-8")
        return _to_credential(json.loads(text))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise _SourceError(f"could not load {path}: {e}") from e


def resolve_credential(
    kind: CredentialKind | str,
    settings: Settings | None = None,
) -> ServiceAccountCredential:
    """
    Resolve a service account credential for the given kind.

    Args:
        kind: Credential family (``vertex`` or ``firebase``)
        settings: Application settings (uses default if not provided)

    Returns:
        The first credential that parses successfully

    Raises:
        CredentialNotFoundError: If no source yields a usable credential
    """
    if settings is None:
        settings = get_settings()
    kind = CredentialKind(kind)

    b64_value, json_value, file_path = settings.credential_sources(kind)
    attempted: list[str] = []

    sources: list[tuple[str, bool, Callable[[], ServiceAccountCredential]]] = [
        ("base64 env", bool(b64_value.strip()), lambda: parse_base64_source(b64_value)),
        ("json env", bool(json_value.strip()), lambda: parse_json_source(json_value)),
        (f"file {file_path}", file_path.is_file(), lambda: parse_file_source(file_path)),
    ]

    for name, present, load in sources:
        if not present:
            continue
        attempted.append(name)
        try:
            credential = load()
        except _SourceError as e:
            logger.warning(f"Ignoring {kind.value} credential from {name}: {e}")
            continue
        logger.info(
            f"Loaded {kind.value} service account {credential.client_email} from {name}"
        )
        return credential

    logger.error(f"No usable {kind.value} credential (tried: {attempted or 'nothing'})")
    raise CredentialNotFoundError(kind.value, attempted)


@lru_cache(maxsize=1)
def get_vertex_credential() -> ServiceAccountCredential:
    """Get the process-wide Vertex AI credential."""
    return resolve_credential(CredentialKind.VERTEX)


@lru_cache(maxsize=1)
def get_firebase_credential() -> ServiceAccountCredential:
    """Get the process-wide Firebase credential."""
    return resolve_credential(CredentialKind.FIREBASE)


def clear_credential_cache():
    """Clear cached credentials (useful for testing)."""
    get_vertex_credential.cache_clear()
    get_firebase_credential.cache_clear()
