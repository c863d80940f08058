"""
Regression tests against calibrations published by OxCal, using the real IntCal20 curve.

The curve file intcal20.14c is looked up in the directory given by the RADIOCAL_CURVE_DIR environment variable
or in tests/data. If it is not there it is downloaded from intcal.org; the tests fail if that is not possible.
"""

import pytest

from radiocal import calibrate_date, CurveType
from radiocal.utils.fnc_data import cal_date_to_cal_bp

# (c14 age, uncertainty, OxCal 95.4% range)
OXCAL_REFERENCE_DATES = [
	(3000, 300, ("1976calBC", "476calBC")),
	(5000, 200, ("4253calBC", "3371calBC")),
	(2000, 500, ("1287calBC", "992calAD")),
]


def coverage(intervals, lower, upper):
	# share of the years lower..upper covered by the intervals
	covered = 0
	for rng_min, rng_max in intervals:
		covered += max(0, min(upper, rng_max) - max(lower, rng_min) + 1)
	return covered / (upper - lower + 1)


@pytest.mark.parametrize("age, uncertainty, oxcal_range", OXCAL_REFERENCE_DATES)
def test_hpd95_matches_oxcal(intcal20_curve, age, uncertainty, oxcal_range):
	result = calibrate_date(age, uncertainty, curves={CurveType.INTCAL20: intcal20_curve})
	start_bp, end_bp = [cal_date_to_cal_bp(cal_date) for cal_date in oxcal_range]
	lower, upper = min(start_bp, end_bp), max(start_bp, end_bp)
	assert coverage(result.hpd95_ranges, lower, upper) >= 0.8
	assert abs(result.probabilities.sum() - 1) < 1e-6
