import copy
import logging
import os
from typing import Dict

import numpy as np

from radiocal.exceptions import (DataLoadError, RadioCalError)
from radiocal.utils.fnc_curve import (CurveType, CURVE_FILES, parse_curve_type)
from radiocal.utils.fnc_load import (load_curve, download_curve)

logger = logging.getLogger(__name__)

CURVE_BASE_URL = "https://intcal.org/curves/"


class CurveProvider(object):
	"""
	Loads the IntCal20, SHCal20 and Marine20 calibration curves from a local directory.
	
	Missing curve files are downloaded from intcal.org if `download` is True. Loaded curves are kept by the
	instance, so repeated calls to `load_calibration_data` do not read the files again.
	
	:param directory: Directory containing the curve files `intcal20.14c`, `shcal20.14c` and `marine20.14c` (default is "curves").
	:type directory: str
	
	:param download: Flag indicating whether to download missing curve files (default is True).
	:type download: bool
	
	:param urls: Download URLs by curve type; missing entries default to `https://intcal.org/curves/<file name>`.
	:type urls: dict, optional
	
	:param resample: Flag indicating whether to resample the curves to a 1-year resolution after loading (default is False).
	:type resample: bool
	"""
	
	def __init__(self, directory: str = "curves", download: bool = True, urls: Dict[CurveType, str] = None,
				 resample: bool = False):
		
		self._directory = directory
		self._download = download
		self._resample = resample
		self._urls = dict([(curve_type, CURVE_BASE_URL + CURVE_FILES[curve_type]) for curve_type in CurveType])
		for name, url in (urls or {}).items():
			curve_type = parse_curve_type(name)
			if curve_type is None:
				raise ValueError("Invalid curve name: %s" % (name))
			self._urls[curve_type] = url
		self._curves = None
	
	@property
	def directory(self) -> str:
		return self._directory
	
	@property
	def urls(self) -> Dict[CurveType, str]:
		return dict(self._urls)
	
	def curve_path(self, curve_type: CurveType) -> str:
		"""
		Local file path of the calibration curve.
		
		:param curve_type: The calibration curve.
		:type curve_type: CurveType
		:rtype: str
		"""
		return os.path.join(self._directory, CURVE_FILES[curve_type])
	
	def _load_curve(self, curve_type: CurveType) -> np.ndarray:
		fcurve = self.curve_path(curve_type)
		if not os.path.isfile(fcurve):
			if not self._download:
				raise DataLoadError("Calibration curve %s not found: %s" % (curve_type, fcurve))
			download_curve(self._urls[curve_type], fcurve)
		cal_curve = load_curve(fcurve, resample=self._resample)
		# curves cover calendar years from 0 BP onwards
		cal_curve = cal_curve[cal_curve[:, 0] >= 0]
		cal_curve.setflags(write=False)
		logger.info("Loaded %s (%d points) from %s", curve_type, cal_curve.shape[0], fcurve)
		return cal_curve
	
	def load_calibration_data(self) -> Dict[CurveType, np.ndarray]:
		"""
		Loads all calibration curves.
		
		:return: The curve set `{curve_type: np.array([[calendar year BP, C-14 year, uncertainty], ...]), ...}`.
		:rtype: Dict[CurveType, np.ndarray]
		:raises DataLoadError: If any of the curves cannot be loaded.
		"""
		if self._curves is not None:
			return copy.copy(self._curves)
		
		curves = {}
		for curve_type in CurveType:
			try:
				curves[curve_type] = self._load_curve(curve_type)
			except RadioCalError as err:
				raise DataLoadError("Failed to load %s calibration data: %s" % (curve_type, err)) from err
		self._curves = curves
		
		return copy.copy(self._curves)
	
	def get_calibration_data(self) -> Dict[CurveType, np.ndarray] or None:
		"""
		Returns the loaded calibration curves.
		
		:return: The curve set, or None if the curves have not been loaded yet.
		:rtype: Dict[CurveType, np.ndarray] or None
		"""
		if self._curves is None:
			return None
		return copy.copy(self._curves)
	
	def __repr__(self) -> str:
		return "<CurveProvider: directory=%s, loaded=%s>" % (self._directory, self._curves is not None)
