"""Trade-off Referee.

Scores two technical options against weighted attributes and user
constraints, then explains the trade-off with a conditional pivot
recommendation.
"""

__version__ = "1.0.0"

from referee.engine import ComparisonEngine
from referee.explainer import TradeOffExplainer
from referee.scorer import ComparisonScorer
from referee.weight_resolver import WeightResolver

__all__ = [
    "ComparisonEngine",
    "ComparisonScorer",
    "TradeOffExplainer",
    "WeightResolver",
    "__version__",
]
