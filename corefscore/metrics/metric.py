from typing import Any, Dict, Tuple

import torch

from corefscore.common.registrable import Registrable


class Metric(Registrable):
    """
    Running corpus-level scores. Each call scores a batch of documents and adds the results
    to the totals, which `get_metric` reports.
    """

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        raise NotImplementedError

    def get_metric(self, reset: bool = False) -> Dict[str, Any]:
        """
        The scores over every document seen since the last reset. With `reset`, the totals
        are cleared afterwards.
        """
        raise NotImplementedError

    def reset(self) -> None:
        raise NotImplementedError

    @staticmethod
    def detach_tensors(*tensors: Any) -> Tuple[Any, ...]:
        """
        Detaches any tensors from their autograd graphs, which would otherwise be kept
        alive for as long as the metric holds on to them. Other values pass through.
        """
        return tuple(x.detach() if isinstance(x, torch.Tensor) else x for x in tensors)
