import copy
from typing import Dict, List, Any

import numpy as np

from radiocal.utils.fnc_curve import (CURVE_METADATA, parse_curve_type)
from radiocal.utils.fnc_data import (bp_to_ce, format_calendar_year, dict_np_to_list)
from radiocal.utils.fnc_stat import (get_overall_range)


class CalibrationResult(object):
	"""
	The result of calibrating a single radiocarbon date.
	
	Instances are created by `calibrate_date` and are read-only. Arrays and lists are returned as copies.
	
	:param input: Echoed calibration input `{c14_age, uncertainty, reservoir_correction, curve, search_mode}`
	:type input: dict
	
	:param years: Calendar years BP of the distribution (ascending)
	:type years: np.ndarray
	
	:param probabilities: Normalized probability of each calendar year
	:type probabilities: np.ndarray
	
	:param mode: Calendar year BP with the highest probability
	:type mode: int
	
	:param hpd68: 68.2% HPD intervals `[[min, max], ...]` in calendar years BP
	:type hpd68: list
	
	:param hpd95: 95.4% HPD intervals `[[min, max], ...]` in calendar years BP
	:type hpd95: list
	
	:param hpd68_probabilities: Probability contained in each 68.2% interval
	:type hpd68_probabilities: list, optional
	
	:param hpd95_probabilities: Probability contained in each 95.4% interval
	:type hpd95_probabilities: list, optional
	
	:param mean: Mean of the distribution in calendar years BP
	:type mean: float, optional
	
	:param std: Standard deviation of the distribution in years
	:type std: float, optional
	
	:param warnings: Non-fatal diagnostics produced during calibration
	:type warnings: list, optional
	"""
	
	def __init__(self, input: Dict[str, Any], years: np.ndarray, probabilities: np.ndarray, mode: int,
				 hpd68: List[List[int]], hpd95: List[List[int]],
				 hpd68_probabilities: List[float] = None, hpd95_probabilities: List[float] = None,
				 mean: float = None, std: float = None, warnings: List[str] = None) -> None:
		
		years = np.asarray(years, dtype=np.int64)
		order = np.argsort(years, kind='stable')
		
		self._data = dict(
			input=copy.deepcopy(input),
			years=years[order],
			probabilities=np.asarray(probabilities, dtype=np.float64)[order],
			mode=mode,
			hpd68=copy.deepcopy(hpd68),
			hpd95=copy.deepcopy(hpd95),
			hpd68_probabilities=copy.copy(hpd68_probabilities) if hpd68_probabilities is not None else [],
			hpd95_probabilities=copy.copy(hpd95_probabilities) if hpd95_probabilities is not None else [],
			mean=mean,
			std=std,
			warnings=copy.copy(warnings) if warnings is not None else [],
		)
		self._data['years'].setflags(write=False)
		self._data['probabilities'].setflags(write=False)
	
	@property
	def input(self) -> Dict[str, Any]:
		"""
		The calibration input as supplied by the caller (after curve type and search mode resolution).
		
		:return: `{c14_age, uncertainty, reservoir_correction, curve, search_mode}`
		:rtype: dict
		"""
		return copy.deepcopy(self._data['input'])
	
	@property
	def curve_type(self) -> str:
		return self._data['input']['curve']
	
	@property
	def corrected_age(self) -> float:
		"""
		The C-14 age after subtracting the reservoir correction.
		"""
		return self._data['input']['c14_age'] - self._data['input']['reservoir_correction']
	
	@property
	def years(self) -> np.ndarray:
		"""
		Calendar years BP corresponding to the probability distribution, in ascending order.

		:rtype: np.ndarray
		"""
		return self._data['years'].copy()
	
	@property
	def probabilities(self) -> np.ndarray:
		"""
		The normalized probability of each calendar year in `years`.

		:rtype: np.ndarray
		"""
		return self._data['probabilities'].copy()
	
	@property
	def distribution(self) -> np.ndarray:
		"""
		The full distribution as a 2D array `[[calendar year BP, probability], ...]` sorted by calendar year.

		:rtype: np.ndarray
		"""
		return np.column_stack((self._data['years'].astype(np.float64), self._data['probabilities']))
	
	@property
	def calibrated_years_bp(self) -> int:
		"""
		The mode of the distribution (calendar year BP with the highest probability).

		:rtype: int
		"""
		return self._data['mode']
	
	@property
	def calendar_year(self) -> int:
		"""
		The mode of the distribution as a calendar year CE (negative = BCE).

		:rtype: int
		"""
		return int(bp_to_ce(self._data['mode']))
	
	@property
	def calendar_year_label(self) -> str:
		"""
		The mode of the distribution formatted as e.g. "1250 BCE" or "950 CE".

		:rtype: str
		"""
		return format_calendar_year(self._data['mode'])
	
	@property
	def hpd68_ranges(self) -> List[List[int]]:
		"""
		The 68.2% highest posterior density intervals `[[min, max], ...]` in calendar years BP.
		"""
		return copy.deepcopy(self._data['hpd68'])
	
	@property
	def hpd95_ranges(self) -> List[List[int]]:
		"""
		The 95.4% highest posterior density intervals `[[min, max], ...]` in calendar years BP.
		"""
		return copy.deepcopy(self._data['hpd95'])
	
	@property
	def hpd68_probabilities(self) -> List[float]:
		return copy.copy(self._data['hpd68_probabilities'])
	
	@property
	def hpd95_probabilities(self) -> List[float]:
		return copy.copy(self._data['hpd95_probabilities'])
	
	@property
	def range_1sigma(self) -> [int, int] or [None, None]:
		"""
		The overall span `[min, max]` of the 68.2% intervals in calendar years BP.
		"""
		return get_overall_range(self._data['hpd68'])
	
	@property
	def range_2sigma(self) -> [int, int] or [None, None]:
		"""
		The overall span `[min, max]` of the 95.4% intervals in calendar years BP.
		"""
		return get_overall_range(self._data['hpd95'])
	
	@property
	def mean(self) -> float or None:
		return self._data['mean']
	
	@property
	def std(self) -> float or None:
		return self._data['std']
	
	@property
	def warnings(self) -> List[str]:
		"""
		Non-fatal diagnostics, e.g. an unknown curve type replaced by IntCal20.

		:rtype: List[str]
		"""
		return copy.copy(self._data['warnings'])
	
	@property
	def curve_metadata(self) -> Dict[str, str] or None:
		"""
		Name, full name, citation and description of the calibration curve used.
		"""
		curve_type = parse_curve_type(self.curve_type)
		if curve_type is None:
			return None
		return dict(CURVE_METADATA[curve_type])
	
	def to_dict(self) -> dict:
		"""
		Converts the result to a dictionary with numpy arrays converted to lists, ready for JSON serialization.

		:rtype: dict
		"""
		data = dict(
			input=self.input,
			calibrated_years_bp=self.calibrated_years_bp,
			calendar_year=self.calendar_year,
			calendar_year_label=self.calendar_year_label,
			hpd68_ranges=self.hpd68_ranges,
			hpd95_ranges=self.hpd95_ranges,
			hpd68_probabilities=self.hpd68_probabilities,
			hpd95_probabilities=self.hpd95_probabilities,
			range_1sigma=self.range_1sigma,
			range_2sigma=self.range_2sigma,
			mean=self.mean,
			std=self.std,
			years=self.years,
			probabilities=self.probabilities,
			curve_metadata=self.curve_metadata,
			warnings=self.warnings,
		)
		return dict_np_to_list(data)
	
	def __repr__(self) -> str:
		return "<CalibrationResult: c14_age=%s, uncertainty=%s, curve=%s, mode=%s, hpd68=%s, hpd95=%s>" % (
			self._data['input']['c14_age'], self._data['input']['uncertainty'], self.curve_type,
			self.calibrated_years_bp, self._data['hpd68'], self._data['hpd95'],
		)
