import logging
import numbers
from typing import List

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.95


def find_hpd(years: np.ndarray, distribution: np.ndarray, confidence: float, warnings: List[str] = None) -> List[List[int]]:
	"""
	Find the Highest Posterior Density (HPD) intervals of a probability distribution.
	
	Calendar years are included in order of decreasing probability until the included probability reaches
	`confidence` times the total probability. Years with equal probability are included in ascending order.
	The included years are then merged into contiguous intervals. Years with zero probability are never included,
	so an all-zero distribution has no intervals.
	
	Parameters:
	years (np.ndarray): Calendar years BP.
	distribution (np.ndarray): Probability for each calendar year (need not be normalized).
	confidence (float): Confidence level in the range (0, 1]. Invalid levels are replaced by 0.95.
	warnings (List[str], optional): If provided, non-fatal diagnostics are appended to this list.
	
	Returns:
	List[[min, max]]: Ascending, non-overlapping intervals of calendar years BP (inclusive).
	"""
	years = np.asarray(years)
	distribution = np.asarray(distribution, dtype=np.float64)
	if not distribution.size:
		return []
	
	if isinstance(confidence, bool) or (not isinstance(confidence, numbers.Real)) or not (0 < confidence <= 1):
		msg = "Invalid confidence level (%s) provided to find_hpd. Using %s as default." % (confidence, DEFAULT_CONFIDENCE)
		logger.warning(msg)
		if warnings is not None:
			warnings.append(msg)
		confidence = DEFAULT_CONFIDENCE
	
	# descending probability, ties by ascending calendar year
	order = np.lexsort((years, -distribution))
	cumulative = np.cumsum(distribution[order])
	
	# years with zero probability sort last and are never part of an interval
	n_positive = int(np.count_nonzero(distribution > 0))
	if confidence >= 1:
		n_included = n_positive
	else:
		# target taken from the same summation order as cumulative
		reached = np.nonzero(cumulative >= cumulative[-1] * confidence)[0]
		n_included = min(int(reached[0]) + 1, n_positive) if reached.size else n_positive
	if not n_included:
		return []
	
	included = np.sort(years[order[:n_included]])
	breaks = np.nonzero(np.diff(included) > 1)[0]
	starts = np.concatenate(([0], breaks + 1))
	ends = np.concatenate((breaks, [included.shape[0] - 1]))
	
	return [[int(included[i]), int(included[j])] for i, j in zip(starts, ends)]


def find_mode(years: np.ndarray, distribution: np.ndarray) -> int or None:
	"""
	Find the calendar year with the highest probability.
	
	If several years share the maximum, the earliest one in ascending order of calendar years BP is returned.
	
	Returns:
	int: Calendar year BP, or None if the distribution is empty.
	"""
	if not len(distribution):
		return None
	order = np.argsort(years, kind='stable')
	return int(np.asarray(years)[order][np.argmax(np.asarray(distribution)[order])])


def calc_mean(years: np.ndarray, distribution: np.ndarray) -> float or None:
	"""
	Calculate the mean of the given distribution.

	Parameters:
	years (np.ndarray): Array of years.
	distribution (np.ndarray): Array of probabilities for each year.

	Returns:
	float: The mean of the distribution, or None if the distribution sum is zero.
	"""
	if not distribution.sum():
		return None
	return float(np.average(years, weights=distribution))


def calc_mean_std(years: np.ndarray, distribution: np.ndarray) -> (float, float) or (None, None):
	"""
	Calculate the mean and standard deviation of the given distribution.

	Returns:
	(mean, std): The mean and standard deviation of the distribution, or (None, None) if the distribution sum is zero.
	"""
	mean = calc_mean(years, distribution)
	if mean is None:
		return None, None
	std = np.sqrt(np.average((years - mean) ** 2, weights=distribution))
	return mean, float(std)


def calc_interval_probabilities(years: np.ndarray, distribution: np.ndarray, intervals: List[List[int]]) -> List[float]:
	"""
	Calculate the share of the total probability falling within each interval.
	
	Returns:
	List[float]: One probability per interval, in the order of the intervals.
	"""
	total = distribution.sum()
	if not total:
		return [0.0 for _ in intervals]
	return [float(distribution[(years >= lower) & (years <= upper)].sum() / total) for lower, upper in intervals]


def get_overall_range(intervals: List[List[int]]) -> [int, int] or [None, None]:
	# span of all intervals, for consumers expecting a single range
	if not intervals:
		return [None, None]
	return [min(rng[0] for rng in intervals), max(rng[1] for rng in intervals)]
