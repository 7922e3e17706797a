# ============================================================
# ==================== CUSTOM SORTER LOADER ==================
# ============================================================

import importlib.util
import inspect
import logging
import os

from . import algorithms

logger = logging.getLogger(__name__)

_loaded: dict = {}


def load_custom_sorter(filepath: str):
    """
    Load a .py file as a custom sorting strategy.

    The file must define ``sort(buf)``, a generator that sorts ``buf`` in
    place and yields after every mutation, either ``(kind, indices)`` or just
    the list of touched indices. ``NAME`` and ``DESCRIPTION`` are optional.

    Returns ((display_name, key), None) on success, (None, error_str) on failure.
    """
    filepath = os.path.abspath(filepath)
    for key, path in _loaded.items():
        if path == filepath:
            return (algorithms.display_name(key), key), None
    try:
        spec   = importlib.util.spec_from_file_location("_custom_sorter", filepath)
        if spec is None:
            return None, f"Not a Python file: {filepath}"
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    except Exception as e:
        # arbitrary user code
        logger.warning("could not load %s: %s", filepath, e)
        return None, str(e)
    fn = getattr(module, "sort", None)
    if fn is None:
        return None, "No sort(buf) function found"
    if not inspect.isgeneratorfunction(fn):
        return None, "sort(buf) must be a generator function"
    name = getattr(module, "NAME", os.path.splitext(os.path.basename(filepath))[0])
    key  = f"custom_{len(_loaded)}"
    algorithms.register(key, name, fn, getattr(module, "DESCRIPTION", ""))
    _loaded[key] = filepath
    logger.info("loaded custom sorter %r from %s", name, filepath)
    return (name, key), None


def unload_all():
    for key in list(_loaded):
        algorithms.unregister(key)
    _loaded.clear()
