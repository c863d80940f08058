import logging
from typing import Dict, List, Any

import numpy as np
from tqdm import tqdm

from radiocal.CalibrationResult import CalibrationResult
from radiocal.CurveProvider import CurveProvider
from radiocal.exceptions import RadioCalError
from radiocal.utils.fnc_calibrate import (calibrate_date, get_curves)
from radiocal.utils.fnc_curve import (CurveType, CURVE_METADATA, parse_curve_type)
from radiocal.utils.fnc_mp import (process_mp)
from radiocal.utils.fnc_range import (SearchMode)

logger = logging.getLogger(__name__)


def _date_params(date: Any) -> Dict[str, Any]:
	# (c14_age, uncertainty[, reservoir_correction]) or a dict with the keyword arguments of calibrate_date
	if isinstance(date, dict):
		return dict(date)
	date = list(date)
	if len(date) not in [2, 3]:
		raise ValueError("Invalid date format: %s. Expected (c14_age, uncertainty[, reservoir_correction])." % (date,))
	return dict(zip(['c14_age', 'uncertainty', 'reservoir_correction'], date))


def calibrate_worker(params: Any, curves: Dict[CurveType, np.ndarray], curve_type: str, search_mode: str) -> tuple:
	# params = (index, {calibrate_date keyword arguments})
	idx, kwargs = params
	kwargs = dict(kwargs)
	kwargs.setdefault('curve_type', curve_type)
	kwargs.setdefault('search_mode', search_mode)
	try:
		return idx, calibrate_date(curves=curves, **kwargs)
	except (RadioCalError, ValueError, TypeError) as err:
		return idx, err


def calibrate_collect(data: tuple, results: list, pbar: tqdm) -> None:
	# data = (index, CalibrationResult or exception)
	idx, result = data
	results[idx] = result
	pbar.update(1)


class Calibrator(object):
	"""
	Calibrates radiocarbon dates using curves supplied by a curve data provider.
	
	:param curve_dir: Directory containing the calibration curve files (default is "curves").
	:type curve_dir: str
	
	:param download: Flag indicating whether to download missing curve files from intcal.org (default is True).
	:type download: bool
	
	:param curve_urls: Download URLs by curve name, e.g. `{"IntCal20": "https://..."}` (default is the intcal.org URLs).
	:type curve_urls: dict
	
	:param resample: Flag indicating whether to resample the curves to a 1-year resolution after loading (default is False).
	:type resample: bool
	
	:param curve_type: Default calibration curve: 'IntCal20', 'SHCal20' or 'Marine20' (default is "IntCal20").
	:type curve_type: str
	
	:param search_mode: Default calendar range selection: 'c14_bp', 'full_curve' or 'fixed_range' (default is "c14_bp").
	:type search_mode: str
	
	:param max_cpus: Maximum number of CPUs to use for batch calibration (1 = sequential, -1 = all available; default is 1).
	:type max_cpus: int
	
	:param provider: A curve data provider implementing `get_calibration_data()` and `load_calibration_data()`.
		Replaces the provider built from curve_dir, download, curve_urls and resample.
	:type provider: object, optional
	
	:param curves: An already loaded curve set `{curve_type: np.array([[calendar year BP, C-14 year, uncertainty], ...]), ...}`.
		If given, no provider is used.
	:type curves: dict, optional
	"""
	
	def __init__(self, **kwargs):
		
		defaults = dict(
			curve_dir='curves',
			download=True,
			curve_urls={},
			resample=False,
			curve_type=CurveType.INTCAL20.value,
			search_mode=SearchMode.C14_BP.value,
			max_cpus=1,
			provider=None,
			curves=None,
		)
		types = dict(
			curve_dir=(str,),
			download=(bool,),
			curve_urls=(dict,),
			resample=(bool,),
			curve_type=(str,),
			search_mode=(str,),
			max_cpus=(int,),
			provider=(object,),
			curves=(dict,),
		)
		
		# Check arguments
		for key in kwargs:
			if key not in defaults:
				raise Exception("Invalid argument: %s" % key)
			if (kwargs[key] is not None) and not isinstance(kwargs[key], types[key]):
				raise Exception("Invalid argument type for %s: %s" % (key, type(kwargs[key]).__name__))
		
		if isinstance(kwargs.get('max_cpus'), bool) or kwargs.get('max_cpus', 1) == 0:
			raise Exception("Invalid argument: max_cpus must be a positive number or -1")
		
		self._data = dict([(key, kwargs[key] if key in kwargs else defaults[key]) for key in defaults])
		
		if (self._data['provider'] is None) and (self._data['curves'] is None):
			for name in self._data['curve_urls']:
				if parse_curve_type(name) is None:
					raise Exception("Invalid curve name in curve_urls: %s" % (name))
			self._data['provider'] = CurveProvider(
				directory=self._data['curve_dir'], download=self._data['download'], urls=self._data['curve_urls'],
				resample=self._data['resample'],
			)
	
	@property
	def provider(self) -> object or None:
		"""
		The curve data provider, or None if a curve set was supplied directly.
		"""
		return self._data['provider']
	
	@property
	def curve_type(self) -> str:
		return self._data['curve_type']
	
	@property
	def search_mode(self) -> str:
		return self._data['search_mode']
	
	@property
	def max_cpus(self) -> int:
		return self._data['max_cpus']
	
	@property
	def curves(self) -> Dict[CurveType, np.ndarray]:
		"""
		The calibration curve set, loaded through the provider if necessary.
		
		:raises DataLoadError: If the curves cannot be loaded.
		"""
		return get_curves(self._data['curves'], self._data['provider'])
	
	def curve_metadata(self, curve_type: str = None) -> Dict[str, str] or None:
		"""
		Name, full name, citation and description of a calibration curve.
		
		:param curve_type: The calibration curve (default is the curve_type of the calibrator).
		:return: The curve metadata or None if the curve is unknown.
		"""
		curve_type = parse_curve_type(self.curve_type if curve_type is None else curve_type)
		if curve_type is None:
			return None
		return dict(CURVE_METADATA[curve_type])
	
	def calibrate(self, c14_age: float, uncertainty: float, reservoir_correction: float = 0,
				  curve_type: str = None, search_mode: str = None) -> CalibrationResult:
		"""
		Calibrates a single radiocarbon date.
		
		:param c14_age: Measured C-14 age (years BP).
		:param uncertainty: 1-sigma uncertainty of the measurement (years).
		:param reservoir_correction: Reservoir offset subtracted from the measured age (default is 0).
		:param curve_type: Calibration curve (default is the curve_type of the calibrator).
		:param search_mode: Calendar range selection policy (default is the search_mode of the calibrator).
		:return: The calibration result.
		:rtype: CalibrationResult
		"""
		return calibrate_date(
			c14_age, uncertainty, reservoir_correction,
			curve_type=self.curve_type if curve_type is None else curve_type,
			search_mode=self.search_mode if search_mode is None else search_mode,
			curves=self._data['curves'], provider=self._data['provider'],
		)
	
	def calibrate_batch(self, dates: List[Any], max_cpus: int = None, progress: bool = False) -> List[CalibrationResult or Exception]:
		"""
		Calibrates multiple independent radiocarbon dates.
		
		A date which cannot be calibrated does not stop the batch; its slot in the returned list holds the error instead.
		
		:param dates: List of `(c14_age, uncertainty)` or `(c14_age, uncertainty, reservoir_correction)` tuples,
			or dictionaries with keyword arguments of `calibrate_date` (c14_age, uncertainty, reservoir_correction, curve_type, search_mode).
		:param max_cpus: Maximum number of CPUs to use (1 = sequential, -1 = all available; default is the max_cpus of the calibrator).
		:param progress: Flag indicating whether to show a progress bar (default is False).
		:return: Calibration results (or errors) in the order of the dates.
		:rtype: List[CalibrationResult or Exception]
		:raises DataLoadError: If the curves cannot be loaded.
		"""
		if max_cpus is None:
			max_cpus = self.max_cpus
		params_list = [(idx, _date_params(date)) for idx, date in enumerate(dates)]
		curves = self.curves
		results = [None] * len(params_list)
		
		with tqdm(total=len(params_list), disable=not progress) as pbar:
			if max_cpus == 1 or len(params_list) < 2:
				for params in params_list:
					calibrate_collect(calibrate_worker(params, curves, self.curve_type, self.search_mode), results, pbar)
			else:
				logger.debug("Calibrating %d dates in parallel", len(params_list))
				process_mp(calibrate_worker, params_list,
						   worker_args=[curves, self.curve_type, self.search_mode],
						   collect_fnc=calibrate_collect, collect_args=[results, pbar],
						   max_cpus=max_cpus)
		
		n_failed = sum(isinstance(result, Exception) for result in results)
		if n_failed:
			logger.warning("%d of %d dates could not be calibrated", n_failed, len(results))
		
		return results
	
	def __repr__(self) -> str:
		return "<Calibrator: curve_type=%s, search_mode=%s, max_cpus=%s, provider=%s>" % (
			self.curve_type, self.search_mode, self.max_cpus, self.provider)
