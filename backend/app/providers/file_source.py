"""Local file data source for CSV files on disk."""
import asyncio
import logging
import pathlib

from app.core.exceptions import DataSourceError
from app.providers.base import CSVDataset, DataSourceInterface

logger = logging.getLogger(__name__)


def find_data_dir(configured: str) -> pathlib.Path:
    """Resolve the data directory across container and local dev layouts.

    An absolute or existing configured path wins; otherwise the backend's own
    ``data/`` directory is tried before falling back to the configured value.
    """
    configured_path = pathlib.Path(configured)
    if configured_path.is_absolute() or configured_path.is_dir():
        return configured_path

    candidates = [
        pathlib.Path(__file__).resolve().parent.parent.parent / configured,
        pathlib.Path("backend") / configured,
    ]
    for path in candidates:
        if path.is_dir():
            return path
    return configured_path


class FileDataSource(DataSourceInterface):
    """Reads CSV datasets from a directory.

    File reads run in the default executor so they never block the event loop.
    """

    def __init__(self, data_dir: str | pathlib.Path, filenames: dict[CSVDataset, str]):
        self.data_dir = pathlib.Path(data_dir)
        self.filenames = filenames

    @property
    def source_name(self) -> str:
        return "file"

    def path_for(self, dataset: CSVDataset) -> pathlib.Path:
        return self.data_dir / self.filenames[dataset]

    async def fetch_text(self, dataset: CSVDataset) -> str:
        path = self.path_for(dataset)
        loop = asyncio.get_running_loop()
        try:
            text = await loop.run_in_executor(None, lambda: path.read_text(encoding="utf-8"))
        except OSError as e:
            logger.error(f"Error reading {path}: {e}")
            raise DataSourceError(f"Failed to read {path}: {e}") from e
        except UnicodeDecodeError as e:
            logger.error(f"{path} is not valid UTF-8: {e}")
            raise DataSourceError(f"Failed to decode {path}: {e}") from e

        logger.info(f"Read {path} ({len(text)} characters)")
        return text
