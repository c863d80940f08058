import numpy as np

from radiocal.exceptions import CalibrationError
from radiocal.utils.fnc_curve import get_curve_values


def calculate_probability(measured_age: float or np.ndarray, measured_error: float or np.ndarray,
						  curve_age: float or np.ndarray, curve_error: float or np.ndarray) -> float or np.ndarray:
	"""
	Calculate the probability density that a C-14 measurement corresponds to a calibration curve point.
	
	Measurement and curve uncertainties are combined in quadrature and the density of the normal distribution
	is evaluated at the deviation between the measured and the curve age. Accepts scalars or arrays.
	
	Parameters:
	measured_age (float): Measured C-14 age (years BP).
	measured_error (float): 1-sigma uncertainty of the measurement.
	curve_age (float): C-14 age of the calibration curve at the calendar year.
	curve_error (float): 1-sigma uncertainty of the calibration curve at the calendar year.
	
	Returns:
	float or np.ndarray: Probability density.
	"""
	sigma = np.sqrt(np.square(measured_error) + np.square(curve_error))
	deviation = measured_age - curve_age
	return np.exp(-0.5 * np.square(deviation / sigma)) / (sigma * np.sqrt(2 * np.pi))


def create_uniform_distribution(curve: np.ndarray, start_year: float, end_year: float) -> np.ndarray:
	"""
	Resample the calibration curve to a 1-year resolution between start_year and end_year (inclusive).
	
	Parameters:
	curve (np.ndarray): Calibration curve `[[calendar year BP, C-14 year, uncertainty], ...]` sorted by calendar year.
	start_year (float): First calendar year BP.
	end_year (float): Last calendar year BP.
	
	Returns:
	np.ndarray: A 2D array `[[calendar year BP, C-14 year, uncertainty], ...]` with one row per integer calendar year.
	"""
	years = np.arange(int(np.ceil(start_year)), int(np.floor(end_year)) + 1, dtype=np.float64)
	if not years.size:
		return np.empty((0, 3), dtype=np.float64)
	return np.column_stack((years, get_curve_values(years, curve)))


def calc_likelihood(age: float, uncertainty: float, uniform_curve: np.ndarray) -> np.ndarray:
	# unnormalized density for each row of the resampled curve
	return calculate_probability(age, uncertainty, uniform_curve[:, 1], uniform_curve[:, 2])


def normalize(dist: np.ndarray) -> np.ndarray:
	"""
	Normalize a distribution so that its probabilities sum to 1.
	
	Raises:
	CalibrationError: If the distribution carries no probability mass.
	"""
	s = dist.sum()
	if not (s > 0) or not np.isfinite(s):
		raise CalibrationError("The calibrated distribution has no probability mass over the evaluated range")
	return dist / s
