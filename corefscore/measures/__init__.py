"""
Document-level coreference metrics. Every scorer compares a predicted clustering of
mentions against a gold clustering and is registered as a `CorefScorer`, so it can be
built by name, e.g. `CorefScorer.by_name("muc")()`.
"""

from corefscore.measures.partitions import Equivalence, KeyEquivalence
from corefscore.measures.fmeasure import FMeasureInfo, PrecisionRecallPair, aggregate_by_macro_pr
from corefscore.measures.coref_scorer import CorefScorer
from corefscore.measures.b3 import B3Method, B3Scorer
from corefscore.measures.muc import MUCScorer
from corefscore.measures.blanc_result import BLANCResult
from corefscore.measures.blanc import BLANCScorer, MultiBLANCScorer, StandardBLANCScorer
from corefscore.measures.matching import BipartiteMatcher, HungarianMatcher
from corefscore.measures.ceaf import MentionCEAFScorer
