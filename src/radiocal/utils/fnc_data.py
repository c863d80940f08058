import re
from typing import Union

import numpy as np

BP_EPOCH = 1950  # Calendar year CE corresponding to 0 BP


def dict_np_to_list(data: Union[dict, list]) -> Union[dict, list]:
	"""
	Convert all numpy arrays and numpy scalars in a dictionary or list to Python lists and numbers.

	This is useful when preparing data for JSON serialization. The conversion is recursive and happens in place.

	Parameters:
	data: A dictionary or list.

	Returns:
	The input data with all numpy values converted.
	"""
	if isinstance(data, dict):
		for key in data:
			data[key] = dict_np_to_list(data[key])
	elif isinstance(data, list):
		for i, val in enumerate(data):
			data[i] = dict_np_to_list(val)
	elif isinstance(data, np.ndarray):
		return data.tolist()
	elif isinstance(data, np.generic):
		return data.item()
	return data


def bp_to_ce(cal_bp: float) -> float:
	"""
	Convert calendar years BP to a calendar year CE (negative values are BCE).
	"""
	return BP_EPOCH - cal_bp


def format_calendar_year(cal_bp: float) -> str:
	"""
	Format calendar years BP as a BCE / CE label, e.g. 3200 -> "1250 BCE", 1000 -> "950 CE".
	"""
	year = bp_to_ce(cal_bp)
	if year < 0:
		return "%d BCE" % (abs(year))
	return "%d CE" % (year)


def cal_bp_to_cal_date(cal_bp: float) -> str:
	"""
	Format calendar years BP in the OxCal notation, e.g. 3926 -> "1976calBC", 958 -> "992calAD".
	"""
	year = bp_to_ce(cal_bp)
	if year < 0:
		return "%dcalBC" % (abs(year))
	return "%dcalAD" % (year)


def cal_date_to_cal_bp(cal_date: str) -> int:
	"""
	Convert a date in the OxCal notation ("1976calBC", "992calAD") to calendar years BP.
	
	Raises:
	ValueError: If the date is not in the OxCal notation.
	"""
	match = re.fullmatch(r"\s*(\d+)\s*cal(BC|AD)\s*", cal_date)
	if match is None:
		raise ValueError("Invalid calendar date: %s" % (cal_date))
	year, era = int(match.group(1)), match.group(2)
	if era == 'BC':
		return year + BP_EPOCH
	return BP_EPOCH - year
