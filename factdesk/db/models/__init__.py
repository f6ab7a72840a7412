# factdesk/db/models/__init__.py

from .claim import Claim
from .fact_checker import FactChecker
from .verdict import Verdict
from .fact_checker_activity import FactCheckerActivity
from .moderation_action import ModerationAction

__all__ = [
    'Claim',
    'FactChecker',
    'Verdict',
    'FactCheckerActivity',
    'ModerationAction'
]
