try:
    import torch, numpy, scipy  # noqa

except ModuleNotFoundError:
    print(
        "Using corefscore requires the python packages PyTorch, "
        "Numpy and Scipy to be installed."
    )
    raise

from corefscore.version import VERSION as __version__  # noqa
