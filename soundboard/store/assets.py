from __future__ import annotations

from pathlib import Path

from ..domain.errors import AssetDeleteError, AssetNotFoundError, InvalidAssetPathError
from ..domain.filenames import is_audio_filename, sanitize_filename
from ..logging_conf import get_logger

__all__ = ["AssetCatalog"]

logger = get_logger("store.assets")


class AssetCatalog:
    """Read and delete access to the managed audio directory.

    Only regular files with an allowed audio extension count as assets. Every
    name coming from a client is sanitized and then checked to resolve inside
    the directory before it touches the filesystem.
    """

    def __init__(self, audio_dir: Path) -> None:
        self._dir = Path(audio_dir)

    @property
    def directory(self) -> Path:
        return self._dir

    def list(self) -> list[str]:
        if not self._dir.is_dir():
            return []
        return sorted(
            p.name for p in self._dir.iterdir() if p.is_file() and is_audio_filename(p.name)
        )

    def exists(self, filename: str) -> bool:
        try:
            return self.resolve(filename).is_file()
        except (InvalidAssetPathError, AssetNotFoundError):
            return False

    def resolve(self, filename: str) -> Path:
        """Return the absolute path of an existing asset.

        Raises:
            InvalidAssetPathError: the name is not an audio file name or
                escapes the managed directory.
            AssetNotFoundError: no such regular file.
        """
        path = self.contained_path(filename)
        if not path.is_file():
            raise AssetNotFoundError()
        return path

    def contained_path(self, filename: str) -> Path:
        """Sanitize `filename` and return where it lives inside the directory."""
        name = sanitize_filename(filename)
        if not name or not is_audio_filename(name):
            raise InvalidAssetPathError()
        root = self._dir.resolve()
        path = (root / name).resolve()
        if path.parent != root:
            raise InvalidAssetPathError()
        return path

    def delete(self, filename: str) -> str:
        """Remove an asset and return the sanitized name that was deleted."""
        path = self.resolve(filename)
        try:
            path.unlink()
        except FileNotFoundError:
            raise AssetNotFoundError() from None
        except OSError as e:
            logger.exception("asset.delete_failed", extra={"event": "asset_delete_failed", "file": path.name})
            raise AssetDeleteError() from e
        logger.info("asset.delete", extra={"event": "asset_delete", "file": path.name})
        return path.name
