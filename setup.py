# -*- coding: utf-8 -*-
#!/usr/bin/env python
#

from setuptools import setup, find_packages

import pathlib

import ast
import os

def get_version():
	with open(os.path.join(os.path.dirname(__file__), 'src', 'radiocal', '__init__.py')) as f:
		tree = ast.parse(f.read())
		for node in tree.body:
			if isinstance(node, ast.Assign):
				if node.targets[0].id == 'version_info':
					return '.'.join(map(str, ast.literal_eval(node.value)))

here = pathlib.Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

setup(
	name="radiocal",
	version=get_version(),
	description="RadioCal - Radiocarbon date calibration with highest posterior density ranges",
	long_description=long_description,
	long_description_content_type="text/markdown",
	classifiers=[
		"Development Status :: 4 - Beta",
		"Intended Audience :: Science/Research",
		"Topic :: Scientific/Engineering",
		"License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
		"Programming Language :: Python :: 3",
	],
	keywords="archaeology, radiocarbon, calibration, chronology",
	package_dir={"": "src"},
	packages=find_packages(where="src"),
	include_package_data=True,
	python_requires=">=3.10",
	install_requires=[
		'numpy>=1.26.4',
		'scipy>=1.13.0, <2',
		'tqdm>=4.66.0, <5',
		'requests>=2.31.0, <3',
	],
	extras_require={
		'test': [
			'pytest>=7.4',
		],
		'docs': [
			'sphinx',
			'myst-parser',
		],
	},
	scripts=['bin/calibrate.py'],
)
