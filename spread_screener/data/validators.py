"""Hard filters applied to legs before candidate generation.

Any leg that fails these checks is excluded from every combination.
"""

import logging
from typing import Dict, Iterable, List

from ..models.option_leg import OptionLeg

logger = logging.getLogger("spread_screener.validators")


def filter_usable_legs(legs: Iterable[OptionLeg]) -> List[OptionLeg]:
    """Drop legs that cannot take part in a strategy.

    A usable leg has a known, positive strike and a positive premium.

    Args:
        legs: Normalized option legs

    Returns:
        Usable legs in input order
    """
    filtered = []
    reject_reasons: Dict[str, int] = {}
    initial_count = 0

    for leg in legs:
        initial_count += 1

        if leg.strike is None:
            reject_reasons['missing_strike'] = reject_reasons.get('missing_strike', 0) + 1
            continue

        if leg.strike <= 0:
            reject_reasons['bad_strike'] = reject_reasons.get('bad_strike', 0) + 1
            continue

        if leg.premium <= 0:
            reject_reasons['no_premium'] = reject_reasons.get('no_premium', 0) + 1
            continue

        filtered.append(leg)

    logger.info("Leg filter: %d/%d legs usable", len(filtered), initial_count)
    if reject_reasons:
        reasons = [f"{count} ({reason})" for reason, count in reject_reasons.items()]
        logger.debug("Rejected: %s", ", ".join(reasons))

    return filtered
