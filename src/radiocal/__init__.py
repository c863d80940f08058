version_info = (0, 1, 0)

__version__ = '.'.join(map(str, version_info))
__title__ = 'RadioCal'
__date__ = "18.10.2026"

from radiocal.exceptions import (RadioCalError, InvalidInputError, MissingCalibrationDataError, DataLoadError,
								 CurveFormatError, CalibrationError)
from radiocal.utils.fnc_curve import (CurveType, CURVE_METADATA)
from radiocal.utils.fnc_range import (SearchMode)
from radiocal.utils.fnc_calibrate import (calibrate_date)
from radiocal.CalibrationResult import CalibrationResult
from radiocal.CurveProvider import CurveProvider
from radiocal.Calibrator import Calibrator
