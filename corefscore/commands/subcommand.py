"""
Base class for subcommands under `corefscore`.
"""

import argparse

from corefscore.common import Registrable


class Subcommand(Registrable):
    """
    An abstract class representing subcommands for the `corefscore` command line.
    If you wanted to (for example) create your own custom `score-conll` command to use like

    `corefscore score-conll ...`

    you would create a `Subcommand` subclass, register it, and make its module importable
    with `--include-package`.
    """

    requires_plugins: bool = True
    """
    If `True`, the sub-command gets an additional `--include-package` flag for importing
    modules that register custom scorers.
    """

    def add_subparser(self, parser: argparse._SubParsersAction) -> argparse.ArgumentParser:
        raise NotImplementedError

    @property
    def name(self) -> str:
        name = Subcommand.registered_name(self.__class__)
        if name is None:
            raise KeyError(f"{self.__class__.__name__} is not a registered subcommand")
        return name
