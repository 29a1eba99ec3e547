"""Translation-unit discovery for the analyzer's workspace enumeration request."""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from modgraph.config import TRANSLATION_UNIT_EXTENSIONS
from modgraph.exceptions import EnumerationError

logger = logging.getLogger(__name__)


def enumerate_translation_units(
    root: Path,
    extensions: tuple[str, ...] = TRANSLATION_UNIT_EXTENSIONS,
    skip_dirs: list[str] | None = None,
) -> list[Path]:
    """Recursively list C++ sources under ``root``, sorted by path."""
    if not root.is_dir():
        raise EnumerationError(f"Folder not found: {root}", details={"root": str(root)})

    skip_dirs = skip_dirs or []
    found: list[Path] = []
    for path in sorted(root.rglob("*")):
        if path.is_dir():
            continue
        if _should_skip(path.relative_to(root), skip_dirs):
            continue
        if path.suffix in extensions:
            found.append(path)
    logger.debug("Enumerated %d translation unit(s) under %s", len(found), root)
    return found


def enumerate_workspace_folder(
    folder_uri: str,
    extensions: tuple[str, ...] = TRANSLATION_UNIT_EXTENSIONS,
    skip_dirs: list[str] | None = None,
) -> list[dict[str, str]]:
    """Answer ``enumerateWorkspaceFolderContents``: one ``{uri, filepath}`` per source."""
    root = uri_to_path(folder_uri)
    return [
        {"uri": path.resolve().as_uri(), "filepath": str(path)}
        for path in enumerate_translation_units(root, extensions, skip_dirs)
    ]


def uri_to_path(uri: str) -> Path:
    parsed = urlparse(uri)
    if parsed.scheme in ("", "file"):
        return Path(url2pathname(parsed.path) if parsed.scheme else uri)
    raise EnumerationError(f"Unsupported folder URI scheme: {uri}", details={"uri": uri})


def _should_skip(relative: Path, skip_dirs: list[str]) -> bool:
    for part in relative.parts[:-1]:
        for pattern in skip_dirs:
            if fnmatch.fnmatch(part, pattern):
                return True
    return False
