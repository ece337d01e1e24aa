from typing import Any, List

import yaml

from reposync.config.schemas import Manifest, RepositoryEntry
from reposync.core.errors import ManifestIOError, ManifestNotFoundError, ManifestParseError
from reposync.utils.custom_logger import Logger

logger = Logger("manifest_store")


def _parse_entry(index: int, record: Any) -> RepositoryEntry:
    if not isinstance(record, dict):
        raise ManifestParseError(f"repos[{index}] is not a mapping")
    values = {}
    for key in ("directory", "remote"):
        value = record.get(key)
        if not isinstance(value, str) or not value:
            raise ManifestParseError(f"repos[{index}].{key} must be a non-empty string")
        values[key] = value
    return RepositoryEntry(**values)


def parse_manifest(text: str, source: str = "<string>") -> Manifest:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestParseError(f"Invalid YAML in {source}: {e}") from e
    if data is None:
        return Manifest()
    if not isinstance(data, dict):
        raise ManifestParseError(f"Expected a mapping with a 'repos' key in {source}")
    records = data.get("repos")
    if records is None:
        return Manifest()
    if not isinstance(records, list):
        raise ManifestParseError(f"'repos' must be a list in {source}")
    repos: List[RepositoryEntry] = [_parse_entry(i, record) for i, record in enumerate(records)]
    return Manifest(repos=repos)


def dump_manifest(manifest: Manifest) -> str:
    data = {"repos": [repo.to_dict() for repo in manifest.repos]}
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)


def load_manifest(path: str) -> Manifest:
    """Read the manifest at ``path``.

    Raises ManifestNotFoundError when the file is absent, ManifestIOError when
    it cannot be read and ManifestParseError when its content is not a valid
    manifest.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError as e:
        raise ManifestNotFoundError(f"Manifest not found: {path}") from e
    except OSError as e:
        raise ManifestIOError(f"Cannot read manifest {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ManifestParseError(f"Manifest {path} is not valid UTF-8: {e}") from e
    manifest = parse_manifest(text, source=path)
    logger.debug(f"Loaded {len(manifest)} repositories from {path}")
    return manifest


def save_manifest(path: str, manifest: Manifest) -> None:
    content = dump_manifest(manifest)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise ManifestIOError(f"Cannot write manifest {path}: {e}") from e
    logger.info(f"Saved {len(manifest)} repositories to {path}")
