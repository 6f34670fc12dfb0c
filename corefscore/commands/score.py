"""
The `score` subcommand reads documents with gold and predicted coreference clusters
from a JSON lines file, scores every document with a set of coreference metrics, and
reports the corpus-level averages.

    $ corefscore score documents.jsonl --output-file metrics.json
"""

import argparse
import logging
from typing import Any, Dict, Optional

from corefscore.commands.subcommand import Subcommand
from corefscore.common import logging as common_logging
from corefscore.common.checks import MalformedDocumentError, PartitionError
from corefscore.common.params import Params, parse_overrides
from corefscore.common.util import dump_metrics
from corefscore.data.documents import parse_document, read_document_lines
from corefscore.metrics.coref_scores import CorefScores

logger = logging.getLogger(__name__)


@Subcommand.register("score")
class Score(Subcommand):
    def add_subparser(self, parser: argparse._SubParsersAction) -> argparse.ArgumentParser:
        description = """Score predicted coreference clusters against gold clusters"""
        subparser = parser.add_parser(
            self.name, description=description, help="Score coreference output."
        )

        subparser.add_argument(
            "input_file",
            type=str,
            help="path to a JSON lines file with one document per line, each with "
            "'gold_clusters' and 'predicted_clusters'",
        )

        subparser.add_argument(
            "--config",
            type=str,
            help="optional JSON file choosing the scorers, e.g. "
            '\'{"scorers": {"muc": "muc", "ceaf": {"type": "mention-ceaf"}}}\'',
        )

        subparser.add_argument(
            "-o",
            "--overrides",
            type=str,
            default="",
            help=(
                "a json structure used to override the scoring configuration, e.g., "
                "'{\"scorers.blanc.type\": \"standard-blanc\"}'.  Nested parameters can be "
                "specified either with nested dictionaries or with dot syntax."
            ),
        )

        subparser.add_argument(
            "--output-file", type=str, help="optional path to write the metrics to as JSON"
        )

        subparser.add_argument(
            "--serialization-dir",
            type=str,
            help="optional directory to write the log file out.log to",
        )

        subparser.add_argument(
            "--skip-invalid",
            action="store_true",
            default=False,
            help="log and skip malformed lines and documents whose clusterings a scorer "
            "rejects, instead of failing",
        )

        subparser.set_defaults(func=score_from_args)

        return subparser


def score_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    common_logging.prepare_global_logging(args.serialization_dir)
    return score_file(
        input_file=args.input_file,
        config_file=args.config,
        overrides=args.overrides,
        output_file=args.output_file,
        skip_invalid=args.skip_invalid,
    )


def score_file(
    input_file: str,
    config_file: Optional[str] = None,
    overrides: str = "",
    output_file: Optional[str] = None,
    skip_invalid: bool = False,
) -> Dict[str, Any]:
    """
    # Parameters

    input_file : `str`
        Path to the JSON lines file of documents to score.
    config_file : `str`, optional (default = `None`)
        Path to a JSON file of the form `{"scorers": {name: scorer params}}`. Without one,
        the default scorers of `CorefScores` are used.
    overrides : `str`, optional (default = `""`)
        A JSON structure applied on top of the configuration.
    output_file : `str`, optional (default = `None`)
        Where to write the metrics as JSON.
    skip_invalid : `bool`, optional (default = `False`)
        If `True`, lines that are not valid documents (`MalformedDocumentError`) and
        documents that a scorer rejects (`PartitionError`) are skipped with a warning;
        otherwise the error is raised.

    # Returns

    `Dict[str, Any]`
        The corpus-level metrics, plus `skipped`, the number of skipped documents.
    """
    if config_file:
        params = Params.from_file(config_file, overrides)
    else:
        params = Params(parse_overrides(overrides))

    metric = CorefScores.from_params(params)
    logger.info("Scoring %s with %s", input_file, ", ".join(metric.scorers))

    skipped = 0
    for location, line in read_document_lines(input_file):
        try:
            document = parse_document(line, location)
            metric.score_document(document.predicted_clusters, document.gold_clusters)
        except (MalformedDocumentError, PartitionError) as e:
            if not skip_invalid:
                raise
            logger.warning("Skipping %s: %s", location, e)
            skipped += 1

    metrics = metric.get_metric(reset=True)
    metrics["skipped"] = skipped
    dump_metrics(output_file, metrics, log=True)
    return metrics
