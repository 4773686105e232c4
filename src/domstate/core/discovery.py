import importlib
import inspect
import logging
from typing import Any, Callable, Dict

from domstate.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


def discover_predicates() -> Dict[str, Callable[..., Any]]:
    """
    Scans the predicates directory, imports every module and returns a map of
    predicate names to the functions marked with @predicate_spec.
    """
    predicates_dir = PathUtils.get_predicates_dir()
    base_module_path = "domstate.predicates"
    discovered: Dict[str, Callable[..., Any]] = {}

    logger.debug("Scanning for predicates in: '%s'", predicates_dir)

    if not predicates_dir.is_dir():
        logger.warning("Predicates directory not found, skipping: %s", predicates_dir)
        return discovered

    for file_path in sorted(predicates_dir.glob("*.py")):
        if file_path.stem.startswith("_"):
            continue
        module_name = f"{base_module_path}.{file_path.stem}"
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.error("Failed to load predicate module %s: %s", file_path.name, e, exc_info=True)
            continue

        for _, func in inspect.getmembers(module, inspect.isfunction):
            name = getattr(func, "predicate_name", None)
            # Skip predicates re-exported from another module
            if name and func.__module__ == module.__name__:
                discovered[name] = func
                logger.debug("Discovered predicate '%s'", name)

    return discovered
