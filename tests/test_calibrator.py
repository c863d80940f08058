"""
Tests of the Calibrator configuration and batch calibration.
"""

import numpy as np
import pytest
from tqdm import tqdm

from radiocal import Calibrator, CalibrationResult, CurveProvider, CurveType, InvalidInputError, DataLoadError
from radiocal.Calibrator import (calibrate_worker, calibrate_collect)
from radiocal.utils.fnc_mp import (process_mp, get_cpu_count)


class TestConfiguration:
	
	def test_defaults(self):
		calibrator = Calibrator()
		assert calibrator.curve_type == "IntCal20"
		assert calibrator.search_mode == "c14_bp"
		assert calibrator.max_cpus == 1
		assert isinstance(calibrator.provider, CurveProvider)
		assert calibrator.provider.directory == "curves"
	
	def test_invalid_argument(self):
		with pytest.raises(Exception, match="Invalid argument: curve"):
			Calibrator(curve="IntCal20")
	
	def test_invalid_argument_type(self):
		with pytest.raises(Exception, match="Invalid argument type for max_cpus"):
			Calibrator(max_cpus="4")
		with pytest.raises(Exception, match="Invalid argument"):
			Calibrator(max_cpus=0)
	
	def test_invalid_curve_url(self):
		with pytest.raises(Exception, match="IntCal13"):
			Calibrator(curve_urls={"IntCal13": "https://example.org/intcal13.14c"})
	
	def test_curve_urls(self):
		calibrator = Calibrator(curve_urls={"shcal20": "https://example.org/sh.14c"})
		assert calibrator.provider.urls[CurveType.SHCAL20] == "https://example.org/sh.14c"
	
	def test_supplied_curves(self, curves):
		calibrator = Calibrator(curves=curves)
		assert calibrator.provider is None
		assert calibrator.curves is curves
	
	def test_curve_metadata(self, curves):
		calibrator = Calibrator(curves=curves, curve_type="SHCal20")
		assert calibrator.curve_metadata()["name"] == "SHCal20"
		assert calibrator.curve_metadata("Marine20")["name"] == "Marine20"
		assert calibrator.curve_metadata("IntCal13") is None


class TestCalibrate:
	
	def test_defaults_applied(self, curves):
		calibrator = Calibrator(curves=curves, curve_type="Marine20", search_mode="full_curve")
		result = calibrator.calibrate(3000, 30)
		assert result.input["curve"] == "Marine20"
		assert result.input["search_mode"] == "full_curve"
		assert calibrator.calibrate(3000, 30, curve_type="IntCal20").input["curve"] == "IntCal20"
	
	def test_provider(self, curves, static_provider):
		provider = static_provider(curves)
		calibrator = Calibrator(provider=provider)
		calibrator.calibrate(3000, 30)
		calibrator.calibrate(4000, 30)
		assert provider.n_loads == 1
	
	def test_missing_curve_files(self, tmp_path):
		calibrator = Calibrator(curve_dir=str(tmp_path), download=False)
		with pytest.raises(DataLoadError):
			calibrator.calibrate(3000, 30)


class TestBatch:
	
	DATES = [(3000, 30), (4000, 50, 100), dict(c14_age=2500, uncertainty=40, curve_type="SHCal20"), (5000, 80)]
	
	def test_sequential(self, curves):
		calibrator = Calibrator(curves=curves)
		results = calibrator.calibrate_batch(self.DATES)
		assert len(results) == 4
		assert all(isinstance(result, CalibrationResult) for result in results)
		assert results[1].input["reservoir_correction"] == 100
		assert results[2].curve_type == "SHCal20"
		single = calibrator.calibrate(3000, 30)
		assert np.array_equal(results[0].probabilities, single.probabilities)
	
	def test_errors_do_not_stop_batch(self, curves):
		calibrator = Calibrator(curves=curves)
		results = calibrator.calibrate_batch([(3000, 30), (-100, 30), (4000, 0)])
		assert isinstance(results[0], CalibrationResult)
		assert isinstance(results[1], InvalidInputError)
		assert isinstance(results[2], InvalidInputError)
	
	def test_invalid_date_format(self, curves):
		with pytest.raises(ValueError):
			Calibrator(curves=curves).calibrate_batch([(3000,)])
	
	def test_empty(self, curves):
		assert Calibrator(curves=curves).calibrate_batch([]) == []
	
	def test_parallel_matches_sequential(self, curves):
		calibrator = Calibrator(curves=curves)
		sequential = calibrator.calibrate_batch(self.DATES, max_cpus=1)
		parallel = calibrator.calibrate_batch(self.DATES, max_cpus=2)
		assert len(parallel) == len(sequential)
		for res_seq, res_par in zip(sequential, parallel):
			assert res_par.input == res_seq.input
			assert np.array_equal(res_par.years, res_seq.years)
			assert np.array_equal(res_par.probabilities, res_seq.probabilities)
			assert res_par.hpd95_ranges == res_seq.hpd95_ranges


class TestProcessMP:
	
	def test_generator_input(self, curves):
		dates = [(idx, dict(c14_age=age, uncertainty=30)) for idx, age in enumerate([2500, 3000, 3500])]
		results = [None] * len(dates)
		with tqdm(total=len(dates), disable=True) as pbar:
			process_mp(calibrate_worker, (params for params in dates),
					   worker_args=[curves, "IntCal20", "c14_bp"],
					   collect_fnc=calibrate_collect, collect_args=[results, pbar], max_cpus=2)
		assert [result.input['c14_age'] for result in results] == [2500, 3000, 3500]
	
	def test_no_tasks(self):
		collected = []
		process_mp(calibrate_worker, [], collect_fnc=collected.append)
		assert collected == []
	
	def test_cpu_count(self):
		assert get_cpu_count(1) == 1
		assert get_cpu_count(-1, todo=1) == 1
		assert get_cpu_count(-1) >= 1
