# src/domstate/core/utils/path_utils.py
from pathlib import Path


class PathUtils:
    """
    A central utility for reliably retrieving important package paths.
    """

    @staticmethod
    def get_package_root() -> Path:
        """
        Returns the absolute path of the installed 'domstate' package.
        (e.g., /path/to/site-packages/domstate)
        """
        return Path(__file__).resolve().parent.parent.parent

    @staticmethod
    def get_predicates_dir() -> Path:
        return PathUtils.get_package_root() / "predicates"

    @staticmethod
    def get_settings_file() -> Path:
        """Returns the path to the bundled settings.json."""
        return PathUtils.get_package_root() / "settings.json"
