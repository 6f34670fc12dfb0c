"""
Utilities and helpers for writing tests.
"""
import json
import re
from os import PathLike
from typing import Dict, List, Tuple, Union

import pytest
import torch

from corefscore.common.testing.test_case import CorefScoreTestCase


_available_devices = ["cpu"] + (["cuda:0"] if torch.cuda.is_available() else [])


def multi_device(test_method):
    """
    Decorator that provides an argument `device` of type `str` for each available PyTorch device.
    """
    return pytest.mark.parametrize("device", _available_devices)(pytest.mark.gpu(test_method))


_CLUSTER = re.compile(r"\(([^()]*)\)")


def parse_clustering(clustering: str) -> List[Tuple[int, ...]]:
    """
    Parses a clustering written as parenthesized groups of integers, e.g.
    `"(1,2) (3) (4,5,6)"`, into a list of tuples.
    """
    return [
        tuple(int(item) for item in group.split(",") if item.strip())
        for group in _CLUSTER.findall(clustering)
    ]


def read_clusterings(file_path: Union[str, PathLike]) -> Dict[str, List[Tuple[int, ...]]]:
    """
    Reads a JSON object of named clusterings in the format of `parse_clustering`. Keys whose
    values are not clusterings (such as a `"source"` note) are skipped.
    """
    with open(file_path) as clusterings_file:
        raw = json.load(clusterings_file)
    return {name: parse_clustering(value) for name, value in raw.items() if value.startswith("(")}
