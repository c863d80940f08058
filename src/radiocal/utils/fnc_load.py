import logging
import os
import re

import numpy as np
import requests
from scipy.interpolate import interp1d
from tqdm import tqdm

from radiocal.exceptions import (CurveFormatError, DataLoadError)

logger = logging.getLogger(__name__)

MAX_CURVE_VALUE = 100000


def parse_curve(text: str) -> np.ndarray:
	"""
	Parse the content of a calibration curve file.
	
	The file should be in the following format:
	- Each line represents a calendar year BP, C-14 year and uncertainty, separated by commas or whitespace.
	- Lines starting with # and blank lines are skipped.
	- Additional columns are ignored.
	Lines which cannot be parsed or which contain values out of range (negative or > 100000 years, uncertainty <= 0)
	are skipped with a warning.
	
	Parameters:
	text (str): The content of the calibration curve file.
	
	Returns:
	np.ndarray: A 2D array `[[calendar year BP, C-14 year, uncertainty], ...]` sorted by calendar year,
		with duplicate calendar years removed (the first occurrence is kept).
	
	Raises:
	CurveFormatError: If the file contains no valid data.
	"""
	cal_curve = []
	for i, line in enumerate(text.split("\n")):
		line = line.strip()
		if (not line) or line.startswith("#"):
			continue
		if "," in line:
			values = line.split(",")
		else:
			values = re.split(r"\s+", line)
		if len(values) < 3:
			logger.warning("Insufficient data at line %d: %s", i + 1, line)
			continue
		try:
			cal_bp, c14_bp, error = [np.float64(value.strip()) for value in values[:3]]
		except ValueError:
			logger.warning("Invalid numeric data at line %d: %s", i + 1, line)
			continue
		if not np.all(np.isfinite([cal_bp, c14_bp, error])):
			logger.warning("Invalid numeric data at line %d: %s", i + 1, line)
			continue
		if (cal_bp < 0) or (cal_bp > MAX_CURVE_VALUE) or (c14_bp < 0) or (c14_bp > MAX_CURVE_VALUE) or (error <= 0):
			logger.warning("Out of range values at line %d: %s", i + 1, line)
			continue
		cal_curve.append([cal_bp, c14_bp, error])
	
	if not cal_curve:
		raise CurveFormatError("No valid data points found in calibration curve")
	
	cal_curve = np.array(cal_curve, dtype=np.float64)
	cal_curve = cal_curve[np.argsort(cal_curve[:, 0], kind='stable')]
	_, idxs = np.unique(cal_curve[:, 0], return_index=True)
	
	return cal_curve[idxs]


def resample_curve(cal_curve: np.ndarray) -> np.ndarray:
	"""
	Resample a calibration curve to a 1-year resolution.
	
	C-14 ages are interpolated quadratically and uncertainties linearly.
	
	Parameters:
	cal_curve (np.ndarray): Calibration curve `[[calendar year BP, C-14 year, uncertainty], ...]` sorted by calendar year.
	
	Returns:
	np.ndarray: The resampled calibration curve.
	"""
	if cal_curve.shape[0] < 3:
		return cal_curve.copy()
	years = np.arange(np.ceil(cal_curve[:, 0].min()), np.floor(cal_curve[:, 0].max()) + 1, 1)
	cal_curve = np.vstack((
		years,
		interp1d(cal_curve[:, 0], cal_curve[:, 1], kind="quadratic")(years),
		interp1d(cal_curve[:, 0], cal_curve[:, 2], kind="linear")(years),
	)).T
	return cal_curve.astype(np.float64)


def load_curve(fcurve: str, resample: bool = False) -> np.ndarray:
	"""
	Load a calibration curve from a file.

	Parameters:
	fcurve (str): Path to the calibration curve file (e.g. 'curves/intcal20.14c').
	resample (bool): If True, resample the curve to a 1-year resolution. Default is False.

	Returns:
	np.ndarray: A 2D array containing the calibration curve data. Each row represents a calendar year BP, C-14 year, and uncertainty.
	
	Raises:
	DataLoadError: If the file does not exist.
	CurveFormatError: If the file contains no valid data.
	"""
	if not os.path.isfile(fcurve):
		raise DataLoadError("Calibration curve not found: %s" % (fcurve))
	
	with open(fcurve, "r", encoding="latin1") as f:
		data = f.read()
	try:
		cal_curve = parse_curve(data)
	except CurveFormatError as err:
		raise CurveFormatError("%s: %s" % (err, fcurve)) from err
	
	if resample:
		cal_curve = resample_curve(cal_curve)
	
	return cal_curve


def download_curve(url: str, fcurve: str, timeout: float = 30) -> None:
	"""
	Download a calibration curve file.

	Parameters:
	url (str): The URL to download the curve from.
	fcurve (str): Local file path to save the curve to.
	timeout (float): Connection timeout in seconds. Default is 30.
	
	Raises:
	DataLoadError: If the download fails.
	"""
	logger.info("Downloading calibration curve from %s", url)
	
	ftmp = fcurve + ".part"
	try:
		with requests.get(url, stream=True, timeout=timeout) as response:
			response.raise_for_status()
			
			directory = os.path.dirname(fcurve)
			if directory:
				os.makedirs(directory, exist_ok=True)
			
			total_size_in_bytes = int(response.headers.get('content-length', 0))
			with open(ftmp, 'wb') as f, tqdm(total=total_size_in_bytes, unit='iB', unit_scale=True, leave=False) as progress_bar:
				for chunk in response.iter_content(chunk_size=8192):
					progress_bar.update(len(chunk))
					f.write(chunk)
	except (requests.exceptions.RequestException, OSError) as err:
		if os.path.isfile(ftmp):
			os.remove(ftmp)
		raise DataLoadError("Unable to download %s: %s" % (url, err)) from err
	os.replace(ftmp, fcurve)
