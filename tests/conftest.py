import os

import numpy as np
import pytest

from radiocal import CurveType

CURVE_DIR = os.environ.get("RADIOCAL_CURVE_DIR", os.path.join(os.path.dirname(__file__), "data"))


def make_wiggly_curve() -> np.ndarray:
	# Smooth synthetic curve with wiggles, 5-year resolution, 0 - 12000 cal BP
	cal_bp = np.arange(0, 12001, 5, dtype=np.float64)
	c14_bp = cal_bp * 0.9 + 40 * np.sin(cal_bp / 150) + 50
	error = 12 + cal_bp / 600
	return np.column_stack((cal_bp, c14_bp, error))


def make_linear_curve() -> np.ndarray:
	# C-14 age equal to the calendar age with a constant uncertainty, 10-year resolution
	cal_bp = np.arange(0, 20001, 10, dtype=np.float64)
	return np.column_stack((cal_bp, cal_bp, np.full(cal_bp.shape, 10.0)))


@pytest.fixture
def linear_curve():
	return make_linear_curve()


@pytest.fixture
def wiggly_curve():
	return make_wiggly_curve()


@pytest.fixture
def curves():
	curve = make_wiggly_curve()
	shcal = curve.copy()
	shcal[:, 1] += 40
	shcal[:, 2] += 2
	marine = curve.copy()
	marine[:, 1] += 400
	marine[:, 2] += 5
	return {
		CurveType.INTCAL20: curve,
		CurveType.SHCAL20: shcal,
		CurveType.MARINE20: marine,
	}


@pytest.fixture
def linear_curves():
	curve = make_linear_curve()
	return dict([(curve_type, curve.copy()) for curve_type in CurveType])


class StaticProvider(object):
	"""
	Curve data provider serving a fixed curve set, counting loads.
	"""
	
	def __init__(self, curves=None, error=None, loaded=False):
		self._source = curves
		self._error = error
		self._curves = curves if loaded else None
		self.n_loads = 0
	
	def load_calibration_data(self):
		self.n_loads += 1
		if self._error is not None:
			raise self._error
		self._curves = self._source
		return self._curves
	
	def get_calibration_data(self):
		return self._curves


@pytest.fixture
def static_provider():
	return StaticProvider


@pytest.fixture(scope="session")
def intcal20_curve():
	from radiocal.CurveProvider import CURVE_BASE_URL
	from radiocal.exceptions import DataLoadError
	from radiocal.utils.fnc_curve import CURVE_FILES
	from radiocal.utils.fnc_load import (load_curve, download_curve)
	
	# the published IntCal20 curve is fetched into CURVE_DIR once and reused by later runs
	fname = CURVE_FILES[CurveType.INTCAL20]
	fcurve = os.path.join(CURVE_DIR, fname)
	if not os.path.isfile(fcurve):
		try:
			download_curve(CURVE_BASE_URL + fname, fcurve)
		except DataLoadError as err:
			pytest.fail("IntCal20 curve is required for the OxCal comparison (%s). Place %s in %s or set RADIOCAL_CURVE_DIR." % (err, fname, CURVE_DIR))
	return load_curve(fcurve)
