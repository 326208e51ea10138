"""
Running-average rating arithmetic.

Ratings are integers scaled by 100 (``450`` means 4.50 stars).  Every party
starts at ``INITIAL_RATING``; the first real rating replaces that default
because it is weighted by zero prior rides.
"""

MIN_RATING = 100
MAX_RATING = 500
INITIAL_RATING = 400


def fold_rating(current: int, prior_rides: int, rating: int) -> int:
    """Fold *rating* into *current*, an average over *prior_rides* ratings."""
    prior_rides = max(prior_rides, 0)
    return (current * prior_rides + rating) // (prior_rides + 1)
