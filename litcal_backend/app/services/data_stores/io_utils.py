# litcal_backend/app/services/data_stores/io_utils.py
from __future__ import annotations

import copy, json, logging, os, tempfile, shutil
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from litcal_backend.app.errors import InternalServerError, ServiceUnavailableError, StoreDecodeError

log = logging.getLogger("litcal.file_store")

# One lock for every store write: the hosting runtime serves a single
# request at a time, the lock only guards against threaded test clients.
_IO_LOCK = RLock()

# Read-through cache: str(path) -> ((mtime_ns, size), decoded JSON)
_CACHE: Dict[str, Tuple[Tuple[int, int], Any]] = {}

JsonContainer = Union[Type[dict], Type[list]]

def atomic_write(path: Path, text: str) -> None:
    """
    Atomic, locked text write (temp file in the same folder, then replace).
    """
    with _IO_LOCK:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile("w", delete=False, dir=path.parent, encoding="utf-8") as tf:
            tf.write(text)
            tmp = Path(tf.name)
        try:
            os.replace(tmp, path)   # atomic where supported
        except OSError:
            shutil.move(str(tmp), str(path))

def dump_json(obj: Any) -> str:
    """Pretty-printed, unescaped-unicode JSON as written to every store file."""
    return json.dumps(obj, ensure_ascii=False, indent=4) + "\n"

def write_json(path: Path, obj: Any, *, what: str = "data") -> None:
    """
    Encode and write `obj`, then invalidate the cached copy of `path`.
    Any encode or filesystem failure surfaces as InternalServerError.
    """
    try:
        text = dump_json(obj)
    except (TypeError, ValueError) as e:
        raise InternalServerError(f"Failed to encode {what} as JSON") from e
    try:
        atomic_write(path, text)
    except OSError as e:
        raise InternalServerError(f"Failed to write {what} to file") from e
    invalidate_cache(path)

def load_json(path: Path, expect: JsonContainer = dict) -> Any:
    """
    Strict reader with a read-through cache.

    Raises:
        FileNotFoundError: the file does not exist.
        ServiceUnavailableError: the file exists but cannot be read.
        StoreDecodeError: the content is not JSON of type `expect`.

    Returns a deep copy, so callers may mutate the result freely.
    """
    key = str(path)
    try:
        st = path.stat()
    except FileNotFoundError:
        _CACHE.pop(key, None)
        raise
    except OSError as e:
        raise ServiceUnavailableError(f"Unable to stat {path.name}") from e
    if not path.is_file():
        raise FileNotFoundError(key)

    stamp = (st.st_mtime_ns, st.st_size)
    with _IO_LOCK:
        hit = _CACHE.get(key)
        if hit is not None and hit[0] == stamp:
            return copy.deepcopy(hit[1])

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ServiceUnavailableError(f"Unable to read {path.name}") from e
    if not raw.strip():
        raise StoreDecodeError(path, "file is empty")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StoreDecodeError(path, str(e)) from e
    if not isinstance(data, expect):
        raise StoreDecodeError(path, f"expected a JSON {'object' if expect is dict else 'array'}")

    with _IO_LOCK:
        _CACHE[key] = (stamp, data)
    return copy.deepcopy(data)

def invalidate_cache(path: Path) -> None:
    with _IO_LOCK:
        if _CACHE.pop(str(path), None) is not None:
            log.debug("cache invalidated for %s", path)

def clear_cache() -> None:
    with _IO_LOCK:
        _CACHE.clear()

def list_json_files(folder: Path) -> List[Path]:
    """All readable *.json files directly under `folder` (sorted); [] if the folder is missing."""
    if not folder.is_dir():
        return []
    return sorted(p for p in folder.glob("*.json") if p.is_file() and os.access(p, os.R_OK))

def locale_of(path: Path) -> str:
    return path.stem

def mkdir_or_fail(folder: Path, what: Optional[str] = None) -> None:
    try:
        folder.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InternalServerError(f"Failed to create {what or 'data'} directory: {folder}") from e
