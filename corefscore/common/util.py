"""
Helpers shared by the readers, the metrics and the command line.
"""
import importlib
import json
import logging
import math
import os
import pkgutil
import sys
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Union

import numpy
import torch

logger = logging.getLogger(__name__)


def sanitize(x: Any) -> Any:
    """
    Converts metric values into plain JSON values. Tensors and arrays become lists, numpy
    scalars become Python scalars, and an undefined (NaN) score becomes `None`. Objects
    with a `to_json` method are converted through it.
    """
    if isinstance(x, numpy.generic):
        return sanitize(x.item())
    if isinstance(x, float):
        return None if math.isnan(x) else x
    if x is None or isinstance(x, (str, int)):
        return x
    if isinstance(x, torch.Tensor):
        return sanitize(x.detach().cpu().numpy())
    if isinstance(x, numpy.ndarray):
        return x.tolist()
    if isinstance(x, dict):
        return {key: sanitize(value) for key, value in x.items()}
    if isinstance(x, (list, tuple, set, frozenset)):
        return [sanitize(item) for item in x]
    if hasattr(x, "to_json"):
        return sanitize(x.to_json())
    raise ValueError(f"Cannot sanitize {x!r} of type {type(x)}; give it a `to_json` method")


def freeze(x: Any) -> Any:
    """
    Makes a mention read from JSON hashable: lists become tuples, and objects become
    sorted tuples of their items.
    """
    if isinstance(x, list):
        return tuple(freeze(item) for item in x)
    if isinstance(x, dict):
        return tuple(sorted((key, freeze(value)) for key, value in x.items()))
    return x


def nan_to_zero(x: float) -> float:
    return 0.0 if math.isnan(x) else x


@contextmanager
def push_python_path(path: Union[str, os.PathLike]) -> Iterator[None]:
    """
    Puts `path` at the front of `sys.path` for the duration of the `with` block.
    """
    path = os.fspath(path)
    sys.path.insert(0, path)
    try:
        yield
    finally:
        sys.path.remove(path)


def import_module_and_submodules(package_name: str) -> None:
    """
    Imports a package and everything below it, so that every scorer it registers is
    available by name.
    """
    importlib.invalidate_caches()
    with push_python_path("."):
        package = importlib.import_module(package_name)
        for module_info in pkgutil.walk_packages(
            getattr(package, "__path__", []), prefix=f"{package_name}."
        ):
            importlib.import_module(module_info.name)


def dump_metrics(file_path: Optional[str], metrics: Dict[str, Any], log: bool = False) -> None:
    metrics_json = json.dumps(sanitize(metrics), indent=2)
    if file_path:
        with open(file_path, "w") as metrics_file:
            metrics_file.write(metrics_json)
    if log:
        logger.info("Metrics: %s", metrics_json)
