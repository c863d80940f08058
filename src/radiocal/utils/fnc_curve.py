from enum import Enum
from typing import Tuple

import numpy as np


class CurveType(str, Enum):
	"""
	Supported radiocarbon calibration curves.
	"""
	INTCAL20 = 'IntCal20'
	SHCAL20 = 'SHCal20'
	MARINE20 = 'Marine20'
	
	def __str__(self) -> str:
		return self.value


CURVE_FILES = {
	CurveType.INTCAL20: 'intcal20.14c',
	CurveType.SHCAL20: 'shcal20.14c',
	CurveType.MARINE20: 'marine20.14c',
}

CURVE_METADATA = {
	CurveType.INTCAL20: dict(
		name='IntCal20',
		full_name='IntCal20 Northern Hemisphere Atmospheric',
		citation='Reimer, P., Austin, W., Bard, E. et al. (2020). "The IntCal20 Northern Hemisphere Radiocarbon Age Calibration Curve (0-55 cal kBP)." Radiocarbon, 62(4), 725-757.',
		description='Standard curve for Northern Hemisphere terrestrial samples.',
	),
	CurveType.SHCAL20: dict(
		name='SHCal20',
		full_name='SHCal20 Southern Hemisphere Atmospheric',
		citation='Hogg, A., Heaton, T., Hua, Q. et al. (2020). "SHCal20 Southern Hemisphere Calibration, 0-55,000 Years cal BP." Radiocarbon, 62(4), 759-778.',
		description='For Southern Hemisphere terrestrial samples (affected by different carbon cycling).',
	),
	CurveType.MARINE20: dict(
		name='Marine20',
		full_name='Marine20 Marine Calibration',
		citation='Heaton, T., Kohler, P., Butzin, M. et al. (2020). "Marine20 - The Marine Radiocarbon Age Calibration Curve (0-55,000 cal BP)." Radiocarbon, 62(4), 779-820.',
		description='For marine samples (already accounts for global marine reservoir effect).',
	),
}


def parse_curve_type(curve_type: CurveType or str) -> CurveType or None:
	"""
	Convert a curve identifier to a CurveType.
	
	Accepts a CurveType, its value (e.g. 'IntCal20') or its name (e.g. 'INTCAL20'), case-insensitive.
	
	Returns:
	CurveType or None if the identifier is not recognized.
	"""
	if isinstance(curve_type, CurveType):
		return curve_type
	if not isinstance(curve_type, str):
		return None
	key = curve_type.strip().lower()
	for member in CurveType:
		if key in (member.value.lower(), member.name.lower()):
			return member
	return None


def interpolate(target_cal_bp: float, lower: np.ndarray, upper: np.ndarray) -> Tuple[float, float]:
	"""
	Linearly interpolate the C-14 age and its uncertainty between two curve points.
	
	Parameters:
	target_cal_bp (float): Calendar year BP to interpolate for.
	lower (np.ndarray): Curve point [calendar year BP, C-14 year, uncertainty] with calendar year <= target_cal_bp.
	upper (np.ndarray): Curve point [calendar year BP, C-14 year, uncertainty] with calendar year >= target_cal_bp.
	
	Returns:
	(c14_bp, error): Interpolated C-14 age and uncertainty.
	"""
	if lower[0] == upper[0]:
		return float(lower[1]), float(lower[2])
	
	factor = (target_cal_bp - lower[0]) / (upper[0] - lower[0])
	c14_bp = lower[1] + factor * (upper[1] - lower[1])
	error = lower[2] + factor * (upper[2] - lower[2])
	
	return float(c14_bp), float(error)


def get_curve_value_at(cal_bp: float, curve: np.ndarray) -> Tuple[float, float]:
	"""
	Look up the C-14 age and uncertainty of the calibration curve at a calendar year.
	
	Years outside of the curve are clamped to its first or last point (no extrapolation).
	
	Parameters:
	cal_bp (float): Calendar year BP.
	curve (np.ndarray): Non-empty calibration curve `[[calendar year BP, C-14 year, uncertainty], ...]` sorted by calendar year.
	
	Returns:
	(c14_bp, error)
	"""
	if cal_bp <= curve[0, 0]:
		return float(curve[0, 1]), float(curve[0, 2])
	if cal_bp >= curve[-1, 0]:
		return float(curve[-1, 1]), float(curve[-1, 2])
	
	# first index with calendar year >= cal_bp
	idx = int(np.searchsorted(curve[:, 0], cal_bp, side='left'))
	if curve[idx, 0] == cal_bp:
		return float(curve[idx, 1]), float(curve[idx, 2])
	
	return interpolate(cal_bp, curve[idx - 1], curve[idx])


def get_curve_values(years: np.ndarray, curve: np.ndarray) -> np.ndarray:
	"""
	Vectorized form of get_curve_value_at.
	
	Parameters:
	years (np.ndarray): Calendar years BP.
	curve (np.ndarray): Non-empty calibration curve sorted by calendar year.
	
	Returns:
	np.ndarray: A 2D array `[[C-14 year, uncertainty], ...]`, one row per year.
	"""
	years = np.asarray(years, dtype=np.float64)
	if curve.shape[0] == 1:
		return np.tile(curve[0, 1:], (years.shape[0], 1)).astype(np.float64)
	
	cal_bp = curve[:, 0]
	idx = np.clip(np.searchsorted(cal_bp, years, side='left'), 1, curve.shape[0] - 1)
	lower = curve[idx - 1]
	upper = curve[idx]
	span = upper[:, 0] - lower[:, 0]
	factor = np.divide(years - lower[:, 0], span, out=np.zeros_like(years), where=(span != 0))
	values = lower[:, 1:] + factor[:, None] * (upper[:, 1:] - lower[:, 1:])
	
	exact = (upper[:, 0] == years)
	values[exact] = upper[exact, 1:]
	values[years <= cal_bp[0]] = curve[0, 1:]
	values[years >= cal_bp[-1]] = curve[-1, 1:]
	
	return values
