#!/usr/bin/env python
import logging
import os
import sys

from corefscore.common.logging import LOG_FORMAT, level_from_environment

sys.path.insert(0, os.path.dirname(os.path.abspath(os.path.join(__file__, os.pardir))))
logging.basicConfig(format=LOG_FORMAT, level=level_from_environment())


def run():
    from corefscore.commands import main  # noqa

    main(prog="corefscore")


if __name__ == "__main__":
    run()
