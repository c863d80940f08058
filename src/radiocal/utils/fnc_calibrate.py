import logging
import math
import numbers
from typing import Dict, List, Any

import numpy as np

from radiocal.CalibrationResult import CalibrationResult
from radiocal.exceptions import (InvalidInputError, MissingCalibrationDataError, DataLoadError)
from radiocal.utils.fnc_curve import (CurveType, parse_curve_type)
from radiocal.utils.fnc_radiocarbon import (create_uniform_distribution, calc_likelihood, normalize)
from radiocal.utils.fnc_range import (SearchMode, parse_search_mode, get_search_range)
from radiocal.utils.fnc_stat import (find_hpd, find_mode, calc_mean_std, calc_interval_probabilities)

logger = logging.getLogger(__name__)

MAX_C14_AGE = 100000
HPD_1SIGMA = 0.682
HPD_2SIGMA = 0.954


def _is_number(value: Any) -> bool:
	if isinstance(value, bool) or not isinstance(value, numbers.Real):
		return False
	return not math.isnan(value)


def _warn(msg: str, warnings: List[str]) -> None:
	logger.warning(msg)
	warnings.append(msg)


def validate_input(c14_age: float, uncertainty: float, reservoir_correction: float) -> None:
	"""
	Check the numeric calibration inputs.
	
	Raises:
	InvalidInputError: If c14_age is not within 0 - 100000, uncertainty is not positive or reservoir_correction is not a number.
	"""
	if not _is_number(c14_age) or c14_age < 0 or c14_age > MAX_C14_AGE:
		raise InvalidInputError("Invalid radiocarbon age: %s. Must be a number between 0 and %d." % (c14_age, MAX_C14_AGE))
	if not _is_number(uncertainty) or not math.isfinite(uncertainty) or uncertainty <= 0:
		raise InvalidInputError("Invalid uncertainty: %s. Must be a positive number." % (uncertainty,))
	if not _is_number(reservoir_correction) or not math.isfinite(reservoir_correction):
		raise InvalidInputError("Invalid reservoir correction: %s. Must be a number." % (reservoir_correction,))


def get_curves(curves: Dict[CurveType, np.ndarray] = None, provider: object = None) -> Dict[CurveType, np.ndarray]:
	"""
	Obtain the calibration curve set, either as supplied or from a curve data provider.
	
	The provider is asked for already loaded data first and triggers a load only if none is available.
	
	Raises:
	DataLoadError: If no curve set is supplied and the provider fails to load the data.
	"""
	if curves is not None:
		return curves
	if provider is None:
		raise DataLoadError("Failed to load calibration data: no curve set or curve data provider supplied")
	curves = provider.get_calibration_data()
	if curves is None:
		try:
			curves = provider.load_calibration_data()
		except Exception as err:
			raise DataLoadError("Failed to load calibration data: %s" % (err)) from err
	if curves is None:
		raise DataLoadError("Failed to load calibration data: the provider returned no data")
	return curves


def calibrate_date(c14_age: float, uncertainty: float, reservoir_correction: float = 0,
				   curve_type: CurveType or str = CurveType.INTCAL20,
				   search_mode: SearchMode or str = SearchMode.C14_BP,
				   curves: Dict[CurveType, np.ndarray] = None, provider: object = None) -> CalibrationResult:
	"""
	Calibrate a radiocarbon date.
	
	Parameters:
	c14_age (float): Measured C-14 age (years BP), 0 - 100000.
	uncertainty (float): 1-sigma uncertainty of the measurement (years), > 0.
	reservoir_correction (float): Reservoir offset subtracted from the measured age. Default is 0.
	curve_type (CurveType or str): Calibration curve. Unknown curves are replaced by IntCal20 with a warning.
	search_mode (SearchMode or str): Calendar range selection policy. Default is SearchMode.C14_BP.
		Unknown modes are replaced by SearchMode.FIXED_RANGE with a warning.
	curves (Dict[CurveType, np.ndarray], optional): Curve set `{curve_type: np.array([[calendar year BP, C-14 year, uncertainty], ...]), ...}`.
	provider (CurveProvider, optional): Curve data provider used if curves is not supplied.
	
	Returns:
	CalibrationResult
	
	Raises:
	InvalidInputError, MissingCalibrationDataError, DataLoadError, CalibrationError
	"""
	warnings = []
	
	validate_input(c14_age, uncertainty, reservoir_correction)
	
	resolved_curve = parse_curve_type(curve_type)
	if resolved_curve is None:
		_warn("Invalid curve type: %s. Using default %s." % (curve_type, CurveType.INTCAL20), warnings)
		resolved_curve = CurveType.INTCAL20
	
	resolved_mode = parse_search_mode(search_mode)
	if resolved_mode is None:
		_warn("Invalid search mode: %s. Using %s." % (search_mode, SearchMode.FIXED_RANGE), warnings)
		resolved_mode = SearchMode.FIXED_RANGE
	
	curves = get_curves(curves, provider)
	curve = curves.get(resolved_curve)
	if curve is None:
		curve = curves.get(resolved_curve.value)
	if curve is None or len(curve) == 0:
		raise MissingCalibrationDataError("Calibration curve data for %s is missing or invalid." % (resolved_curve))
	curve = np.asarray(curve, dtype=np.float64)
	
	corrected_age = c14_age - reservoir_correction
	
	min_cal_bp, max_cal_bp = get_search_range(curve, corrected_age, uncertainty, resolved_mode)
	logger.debug("Evaluating %s from %s to %s cal BP", resolved_curve, min_cal_bp, max_cal_bp)
	
	uniform_curve = create_uniform_distribution(curve, min_cal_bp, max_cal_bp)
	years = uniform_curve[:, 0].astype(np.int64)
	probabilities = normalize(calc_likelihood(corrected_age, uncertainty, uniform_curve))
	
	mode = find_mode(years, probabilities)
	hpd68 = find_hpd(years, probabilities, HPD_1SIGMA, warnings)
	hpd95 = find_hpd(years, probabilities, HPD_2SIGMA, warnings)
	mean, std = calc_mean_std(years, probabilities)
	
	return CalibrationResult(
		input=dict(
			c14_age=c14_age,
			uncertainty=uncertainty,
			reservoir_correction=reservoir_correction,
			curve=resolved_curve.value,
			search_mode=resolved_mode.value,
		),
		years=years,
		probabilities=probabilities,
		mode=mode,
		hpd68=hpd68,
		hpd95=hpd95,
		hpd68_probabilities=calc_interval_probabilities(years, probabilities, hpd68),
		hpd95_probabilities=calc_interval_probabilities(years, probabilities, hpd95),
		mean=mean,
		std=std,
		warnings=warnings,
	)
