"""
A `~corefscore.metrics.metric.Metric` accumulates per-document coreference scores over a
corpus; for example, macro-averaged MUC, B3, CEAF and BLANC.
"""

from corefscore.metrics.metric import Metric
from corefscore.metrics.coref_scores import CorefScores
