"""
Unit tests for calendar conversions and serialization helpers.
"""

import numpy as np
import pytest

from radiocal.utils.fnc_data import (bp_to_ce, format_calendar_year, cal_bp_to_cal_date, cal_date_to_cal_bp,
									 dict_np_to_list)


def test_bp_to_ce():
	assert bp_to_ce(0) == 1950
	assert bp_to_ce(1950) == 0
	assert bp_to_ce(3200) == -1250


def test_format_calendar_year():
	assert format_calendar_year(3200) == "1250 BCE"
	assert format_calendar_year(1000) == "950 CE"


@pytest.mark.parametrize("cal_bp, cal_date", [(3926, "1976calBC"), (2426, "476calBC"), (958, "992calAD")])
def test_oxcal_notation(cal_bp, cal_date):
	assert cal_bp_to_cal_date(cal_bp) == cal_date
	assert cal_date_to_cal_bp(cal_date) == cal_bp


def test_invalid_oxcal_notation():
	with pytest.raises(ValueError):
		cal_date_to_cal_bp("1976 BC")


def test_dict_np_to_list():
	data = dict(a=np.array([1, 2]), b=[np.float64(0.5), dict(c=np.arange(2))], d="x")
	assert dict_np_to_list(data) == dict(a=[1, 2], b=[0.5, dict(c=[0, 1])], d="x")
