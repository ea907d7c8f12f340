"""
Path utility module
Provides data directory, database and bundled resource locations
"""

from pathlib import Path
from typing import List, Optional

from agenda.core.logger import get_logger

logger = get_logger(__name__)


def get_package_root() -> Path:
    """Get the root path of the agenda package (core/paths.py -> agenda/)"""
    return Path(__file__).parent.parent


def find_config_file(
    filename: str, subdirs: Optional[List[str]] = None
) -> Optional[Path]:
    """
    Find a bundled configuration file

    Args:
        filename: Configuration file name (e.g., "locales_en.toml")
        subdirs: Optional list of extra subdirectories to search

    Returns:
        Complete path to the file, None if not found
    """
    package_root = get_package_root()
    subdirs = subdirs or []

    search_paths = [
        # 1. agenda/config/filename
        package_root / "config" / filename,
        # 2. agenda/filename
        package_root / filename,
        # 3. Current working directory/config/filename
        Path.cwd() / "config" / filename,
    ]

    for subdir in subdirs:
        search_paths.append(package_root / subdir / filename)
        search_paths.append(Path.cwd() / subdir / filename)

    for path in search_paths:
        if path.exists():
            logger.debug(f"Found configuration file: {path}")
            return path

    logger.warning(f"Configuration file not found: {filename}")
    return None


def ensure_dir(dir_path: Path) -> Path:
    """
    Ensure directory exists, create if it doesn't

    Args:
        dir_path: Directory path

    Returns:
        Directory path
    """
    dir_path = Path(dir_path)
    if not dir_path.exists():
        dir_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created directory: {dir_path}")
    return dir_path


def get_data_dir(subdir: Optional[str] = None) -> Path:
    """
    Get data directory (~/.config/agenda) for the database and logs

    Args:
        subdir: Optional subdirectory name

    Returns:
        Data directory path
    """
    data_dir = Path.home() / ".config" / "agenda"
    if subdir:
        data_dir = data_dir / subdir
    return ensure_dir(data_dir)


def get_db_path(db_name: str = "agenda.db") -> Path:
    """
    Get database file path

    Args:
        db_name: Database file name

    Returns:
        Database file path
    """
    return get_data_dir() / db_name
