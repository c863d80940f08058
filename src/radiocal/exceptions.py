class RadioCalError(Exception):
	"""
	Base class for all errors raised by the calibration engine.
	"""
	pass


class InvalidInputError(RadioCalError, ValueError):
	"""
	Raised when a radiocarbon age, uncertainty or reservoir correction is out of range or not a number.
	"""
	pass


class MissingCalibrationDataError(RadioCalError):
	"""
	Raised when the requested calibration curve is absent or empty.
	"""
	pass


class DataLoadError(RadioCalError):
	"""
	Raised when the curve data provider fails to load the calibration curves.
	"""
	pass


class CurveFormatError(RadioCalError, ValueError):
	"""
	Raised when a calibration curve file contains no usable data.
	"""
	pass


class CalibrationError(RadioCalError):
	"""
	Raised when the calibrated distribution has no probability mass over the evaluated range.
	"""
	pass
