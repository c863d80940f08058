"""
Unit tests for the selection of the calendar range to evaluate.
"""

import numpy as np
import pytest

from radiocal import SearchMode
from radiocal.utils.fnc_range import (find_calendar_range_by_c14, get_search_range, parse_search_mode)


class TestFindCalendarRangeByC14:
	
	def test_linear_curve(self, linear_curve):
		# +/- 5 sigma = 2750 - 3250
		assert find_calendar_range_by_c14(linear_curve, 3000, 50) == (2750, 3250)
	
	def test_non_monotonic_curve(self):
		# C-14 ages within 950 - 1050 at cal BP 20 and 40 only
		curve = np.array([
			[0, 500, 10],
			[10, 900, 10],
			[20, 1000, 10],
			[30, 1200, 10],
			[40, 1010, 10],
			[50, 1500, 10],
		], dtype=np.float64)
		assert find_calendar_range_by_c14(curve, 1000, 10) == (20, 40)
	
	def test_age_above_curve(self, linear_curve):
		# no point reaches the band; the lower index falls back to the first point
		assert find_calendar_range_by_c14(linear_curve, 50000, 100) == (0, 20000)
	
	def test_age_below_curve(self):
		curve = np.array([[0, 1000, 10], [10, 1100, 10], [20, 1200, 10]], dtype=np.float64)
		assert find_calendar_range_by_c14(curve, 100, 10) == (0, 20)


class TestGetSearchRange:
	
	def test_c14_bp_buffer(self, linear_curve):
		assert get_search_range(linear_curve, 3000, 50, SearchMode.C14_BP) == (2250, 3750)
	
	def test_c14_bp_lower_clamp(self, linear_curve):
		assert get_search_range(linear_curve, 200, 20, SearchMode.C14_BP) == (0, 800)
	
	def test_full_curve(self, wiggly_curve):
		assert get_search_range(wiggly_curve, 3000, 50, SearchMode.FULL_CURVE) == (0, 12000)
	
	def test_fixed_range(self, linear_curve):
		assert get_search_range(linear_curve, 3000, 50, SearchMode.FIXED_RANGE) == (0, 12000)
	
	def test_clamped_to_curve(self):
		cal_bp = np.arange(1000, 5001, 10, dtype=np.float64)
		curve = np.column_stack((cal_bp, cal_bp, np.full(cal_bp.shape, 10.0)))
		assert get_search_range(curve, 3000, 50, SearchMode.FIXED_RANGE) == (1000, 5000)
		assert get_search_range(curve, 1100, 50, SearchMode.C14_BP) == (1000, 1850)
		assert get_search_range(curve, 4900, 50, SearchMode.C14_BP) == (4150, 5000)
	
	def test_invalid_mode(self, linear_curve):
		with pytest.raises(ValueError):
			get_search_range(linear_curve, 3000, 50, "everything")


class TestParseSearchMode:
	
	def test_known(self):
		assert parse_search_mode("c14_bp") is SearchMode.C14_BP
		assert parse_search_mode("FULL_CURVE") is SearchMode.FULL_CURVE
		assert parse_search_mode(SearchMode.FIXED_RANGE) is SearchMode.FIXED_RANGE
	
	def test_unknown(self):
		assert parse_search_mode("everything") is None
		assert parse_search_mode(None) is None
