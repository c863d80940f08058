from enum import Enum
from typing import Tuple

import numpy as np

SIGMA_SPAN = 5  # Search +/- 5 sigma around the measured age
RANGE_BUFFER = 500  # Calendar years added on both sides of the C-14 search range
FIXED_RANGE = (0, 12000)


class SearchMode(str, Enum):
	"""
	Policies for selecting the span of calendar years to evaluate.
	
	C14_BP: Search the calibration curve for the C-14 ages within +/- 5 sigma of the measurement.
	FULL_CURVE: Use the whole calibration curve.
	FIXED_RANGE: Use the fixed range 0 - 12000 cal BP.
	"""
	C14_BP = 'c14_bp'
	FULL_CURVE = 'full_curve'
	FIXED_RANGE = 'fixed_range'
	
	def __str__(self) -> str:
		return self.value


def parse_search_mode(search_mode: SearchMode or str) -> SearchMode or None:
	if isinstance(search_mode, SearchMode):
		return search_mode
	if not isinstance(search_mode, str):
		return None
	key = search_mode.strip().lower()
	for member in SearchMode:
		if key in (member.value, member.name.lower()):
			return member
	return None


def find_calendar_range_by_c14(curve: np.ndarray, c14_age: float, uncertainty: float) -> Tuple[float, float]:
	"""
	Find the span of calendar years where the calibration curve passes within +/- 5 sigma of a C-14 age.
	
	Parameters:
	curve (np.ndarray): Calibration curve `[[calendar year BP, C-14 year, uncertainty], ...]`.
	c14_age (float): C-14 age (years BP).
	uncertainty (float): 1-sigma uncertainty of the C-14 age.
	
	Returns:
	(min, max): Calendar years BP.
	"""
	c14_sorted = curve[np.argsort(curve[:, 1], kind='stable')]
	c14_values = c14_sorted[:, 1]
	n = c14_sorted.shape[0]
	
	min_c14 = c14_age - SIGMA_SPAN * uncertainty
	max_c14 = c14_age + SIGMA_SPAN * uncertainty
	
	# first point with C-14 age >= min_c14; the first point if all lie below the band
	idx_min = int(np.searchsorted(c14_values, min_c14, side='left'))
	if idx_min == n:
		idx_min = 0
	# last point with C-14 age <= max_c14; the last point if all lie above the band
	idx_max = int(np.searchsorted(c14_values, max_c14, side='right')) - 1
	if idx_max < 0:
		idx_max = n - 1
	
	if idx_min > idx_max:
		return float(curve[0, 0]), float(curve[-1, 0])
	
	cal_years = c14_sorted[idx_min:idx_max + 1, 0]
	return float(cal_years.min()), float(cal_years.max())


def get_search_range(curve: np.ndarray, corrected_age: float, uncertainty: float,
					 search_mode: SearchMode = SearchMode.C14_BP) -> Tuple[float, float]:
	"""
	Determine the span of calendar years to evaluate during calibration.
	
	The result is always clamped to the extent of the calibration curve.
	
	Parameters:
	curve (np.ndarray): Calibration curve sorted by calendar year.
	corrected_age (float): C-14 age after reservoir correction (years BP).
	uncertainty (float): 1-sigma uncertainty of the C-14 age.
	search_mode (SearchMode): Range selection policy. Default is SearchMode.C14_BP.
	
	Returns:
	(min_cal_bp, max_cal_bp)
	"""
	if search_mode == SearchMode.C14_BP:
		min_cal_bp, max_cal_bp = find_calendar_range_by_c14(curve, corrected_age, uncertainty)
		min_cal_bp = max(0, min_cal_bp - RANGE_BUFFER)
		max_cal_bp = max_cal_bp + RANGE_BUFFER
	elif search_mode == SearchMode.FULL_CURVE:
		min_cal_bp, max_cal_bp = curve[0, 0], curve[-1, 0]
	elif search_mode == SearchMode.FIXED_RANGE:
		min_cal_bp, max_cal_bp = FIXED_RANGE
	else:
		raise ValueError("Invalid search mode specified: %s" % (search_mode))
	
	min_cal_bp = max(min_cal_bp, curve[0, 0])
	max_cal_bp = min(max_cal_bp, curve[-1, 0])
	
	return float(min_cal_bp), float(max_cal_bp)
