"""Hot ranking for the trending feed.

The hot score is a logarithmic function of the net score plus a linear
function of creation time::

    hot = sign(score) * log10(max(|score|, 1)) + (created_at - epoch) / decay

A post needs ten times the net score to outrank a post ``decay`` seconds
(12.5 hours by default) newer. The value depends only on the score and the
creation time, so it is stored on the post and changes only when the post
is voted on. Pagination cursors therefore stay valid between requests.
"""

from __future__ import annotations

import math
from datetime import datetime

from ventboard.core.settings import settings
from ventboard.db.time import as_utc


def hot_score(
    score: int,
    created_at: datetime,
    *,
    epoch: datetime | None = None,
    decay_seconds: float | None = None,
) -> float:
    """Return the hot ranking value of a post.

    Args:
        score: Net score (upvotes minus downvotes).
        created_at: Creation time of the post; naive values are treated as UTC.
        epoch: Reference instant, defaults to ``settings.hot_score_epoch``.
        decay_seconds: Seconds worth one order of magnitude of score.

    Returns:
        The hot score; larger ranks first.
    """
    epoch = as_utc(epoch or settings.hot_score_epoch)
    decay = decay_seconds or settings.hot_score_decay_seconds

    order = math.log10(max(abs(score), 1))
    sign = (score > 0) - (score < 0)
    seconds = (as_utc(created_at) - epoch).total_seconds()
    return sign * order + seconds / decay
