#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
**RadioCal**

Radiocarbon date calibration

Calibrates one or more radiocarbon dates and prints the mode and the highest posterior density ranges.

Example:
	python calibrate.py -date 3000,30 -date 5000,200 -curve IntCal20

"""

from radiocal import Calibrator, CalibrationResult, RadioCalError
from radiocal import __version__
from radiocal.utils.fnc_data import (cal_bp_to_cal_date)

import multiprocessing
import argparse
import logging
import json
import sys

DESCRIPTION = "RadioCal v%s - Radiocarbon date calibration" % (__version__)


def parse_date(value):
	
	try:
		values = [float(val) for val in value.split(",")]
	except ValueError:
		raise argparse.ArgumentTypeError("Invalid date: %s (expected AGE,UNCERTAINTY)" % (value))
	if len(values) != 2:
		raise argparse.ArgumentTypeError("Invalid date: %s (expected AGE,UNCERTAINTY)" % (value))
	return values


def parse_arguments(args):
	
	parser = argparse.ArgumentParser(description=DESCRIPTION, formatter_class=argparse.ArgumentDefaultsHelpFormatter)
	
	parser.add_argument('-date', type=parse_date, action='append', required=True,
		help="Radiocarbon date in the format AGE,UNCERTAINTY (years BP); can be repeated")
	parser.add_argument('-reservoir', type=float, default=0, required=False,
		help="Reservoir correction subtracted from the radiocarbon ages")
	parser.add_argument('-curve', type=str, default="IntCal20", required=False,
		help="Calibration curve ('IntCal20', 'SHCal20' or 'Marine20')")
	parser.add_argument('-search_mode', type=str, default="c14_bp", required=False,
		help="Calendar range selection ('c14_bp', 'full_curve' or 'fixed_range')")
	parser.add_argument('-curve_dir', type=str, default="curves", required=False,
		help="Directory with the calibration curve files")
	parser.add_argument('-download', type=int, default=1, required=False,
		help="Flag indicating whether to download missing calibration curves from intcal.org")
	parser.add_argument('-max_cpus', type=int, default=1, required=False,
		help="Maximum number of CPUs to use for parallel processing (-1 = all available)")
	parser.add_argument('-json', type=int, default=0, required=False,
		help="Flag indicating whether to print the full results as JSON")
	parser.add_argument('-verbose', type=int, default=0, required=False,
		help="Flag indicating whether to print debug messages")
	
	parsed_args = parser.parse_args(args)
	return vars(parsed_args)


def format_ranges(ranges, probabilities):
	
	return ", ".join(["%s - %s (%0.1f%%)" % (
		cal_bp_to_cal_date(upper), cal_bp_to_cal_date(lower), 100 * p
	) for (lower, upper), p in zip(ranges, probabilities)])


def print_result(result: CalibrationResult):
	
	inp = result.input
	print("%s +/- %s BP (%s, reservoir correction %s)" % (
		inp['c14_age'], inp['uncertainty'], inp['curve'], inp['reservoir_correction']))
	print("  Mode: %d cal BP (%s)" % (result.calibrated_years_bp, result.calendar_year_label))
	print("  68.2%%: %s" % (format_ranges(result.hpd68_ranges, result.hpd68_probabilities)))
	print("  95.4%%: %s" % (format_ranges(result.hpd95_ranges, result.hpd95_probabilities)))
	for warning in result.warnings:
		print("  Warning: %s" % (warning))
	print()


if __name__ == '__main__':
	multiprocessing.freeze_support()  # Needed for PyInstaller
	
	arguments = parse_arguments(sys.argv[1:])
	
	logging.basicConfig(
		level=logging.DEBUG if arguments['verbose'] else logging.INFO,
		format="%(levelname)s: %(message)s",
	)
	
	calibrator = Calibrator(
		curve_dir=arguments['curve_dir'],
		download=bool(arguments['download']),
		curve_type=arguments['curve'],
		search_mode=arguments['search_mode'],
		max_cpus=arguments['max_cpus'],
	)
	dates = [(age, uncertainty, arguments['reservoir']) for age, uncertainty in arguments['date']]
	
	try:
		results = calibrator.calibrate_batch(dates, progress=(len(dates) > 1))
	except RadioCalError as err:
		print("Error: %s" % (err))
		sys.exit(1)
	
	if arguments['json']:
		print(json.dumps([
			result.to_dict() if isinstance(result, CalibrationResult) else {"error": str(result)} for result in results
		], indent=2))
		sys.exit(0)
	
	failed = False
	for (age, uncertainty, _), result in zip(dates, results):
		if isinstance(result, Exception):
			print("%s +/- %s BP: %s\n" % (age, uncertainty, result))
			failed = True
			continue
		print_result(result)
	
	sys.exit(1 if failed else 0)
