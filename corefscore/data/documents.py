"""
Reading scored documents from JSON lines files. Each line holds one document:

    {"doc_key": "nw/wsj/00/wsj_0001", "gold_clusters": [[[0, 1], [5, 5]], [[8, 9]]],
     "predicted_clusters": [[[0, 1], [5, 5], [8, 9]]]}

Mentions may be any JSON value; lists (such as `[start, end]` spans) become tuples so
that they can be put in sets.
"""
import json
import logging
from os import PathLike
from typing import Any, Iterator, List, NamedTuple, Tuple, Union

from corefscore.common.checks import MalformedDocumentError
from corefscore.common.util import freeze

logger = logging.getLogger(__name__)

CLUSTER_FIELDS = ("gold_clusters", "predicted_clusters")


class Document(NamedTuple):
    doc_key: str
    gold_clusters: List[List[Any]]
    predicted_clusters: List[List[Any]]


def read_document_lines(file_path: Union[str, PathLike]) -> Iterator[Tuple[str, str]]:
    """
    Yields `(location, line)` for every non-blank line, where `location` is
    `"file_path:line_number"`.
    """
    with open(file_path, "r") as input_file:
        for line_number, line in enumerate(input_file, start=1):
            line = line.strip()
            if line:
                yield f"{file_path}:{line_number}", line


def parse_document(line: str, location: str) -> Document:
    """
    Parses one line of a documents file. The document key defaults to `line-<number>`.
    Raises `MalformedDocumentError` naming `location` if the line is not a document.
    """
    try:
        json_dict = json.loads(line)
    except json.JSONDecodeError as e:
        raise MalformedDocumentError(f"{location} is not valid JSON: {e}")
    if not isinstance(json_dict, dict):
        raise MalformedDocumentError(f"{location} is not a JSON object")

    clusters = {}
    for key in CLUSTER_FIELDS:
        if key not in json_dict:
            raise MalformedDocumentError(f"{location} has no '{key}' field")
        value = json_dict[key]
        if not isinstance(value, list) or not all(isinstance(c, list) for c in value):
            raise MalformedDocumentError(f"{location}: '{key}' must be a list of lists")
        clusters[key] = [list(freeze(cluster)) for cluster in value]

    line_number = location.rpartition(":")[2]
    return Document(doc_key=json_dict.get("doc_key", f"line-{line_number}"), **clusters)


def read_documents(file_path: Union[str, PathLike]) -> Iterator[Document]:
    for location, line in read_document_lines(file_path):
        yield parse_document(line, location)
