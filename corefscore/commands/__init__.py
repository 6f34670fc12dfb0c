"""
The `corefscore` command line. Every registered `Subcommand` becomes a subcommand of it;
`corefscore score` is the one shipped with the library.
"""
import argparse
import logging
from typing import Any, List, Optional

from overrides import overrides

from corefscore import __version__
from corefscore.commands.score import Score  # noqa: F401
from corefscore.commands.subcommand import Subcommand
from corefscore.common.util import import_module_and_submodules

logger = logging.getLogger(__name__)


class ArgumentParserWithDefaults(argparse.ArgumentParser):
    """
    Appends a meaningful default to the help text of each option.
    """

    _flag_actions = {"help", "store_true", "store_false", "store_const"}

    @overrides
    def add_argument(self, *args: Any, **kwargs: Any) -> argparse.Action:
        default = kwargs.get("default")
        if kwargs.get("action") not in self._flag_actions and default not in (None, "", []):
            kwargs["help"] = f"{kwargs.get('help', '')} (default = {default})"
        return super().add_argument(*args, **kwargs)


def create_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = ArgumentParserWithDefaults(description="Score coreference output", prog=prog)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(title="Commands", metavar="")

    for name in sorted(Subcommand.list_available()):
        subcommand_class = Subcommand.by_name(name)
        subparser = subcommand_class().add_subparser(subparsers)
        if subcommand_class.requires_plugins:
            subparser.add_argument(
                "--include-package",
                type=str,
                action="append",
                default=[],
                help="additional packages to import, e.g. ones registering custom scorers",
            )
    return parser


def main(prog: Optional[str] = None, argv: Optional[List[str]] = None) -> None:
    """
    Runs the subcommand named in `argv` (by default `sys.argv[1:]`), after importing the
    packages given with `--include-package` so that scorers they register can be named in
    the scoring configuration.
    """
    parser = create_parser(prog)
    args = parser.parse_args(argv)

    # subparsers set `func`; without one no subcommand was given
    if not hasattr(args, "func"):
        parser.print_help()
        return
    for package_name in getattr(args, "include_package", []):
        import_module_and_submodules(package_name)
    args.func(args)
