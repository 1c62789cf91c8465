#!/usr/bin/env python3

# Copyright 2011-2026 tbmodel authors.
#
# This file is part of tbmodel.  It is subject to the license terms in the file
# LICENSE.rst found in the top-level directory of this distribution.  A list of
# tbmodel authors can be found in the file AUTHORS.rst at the top-level
# directory of this distribution.

import importlib.util
from pathlib import Path

from setuptools import setup, find_packages


distr_root = Path(__file__).resolve().parent


def check_versions():
    global version

    # Let tbmodel itself determine its own version.  We cannot simply import
    # tbmodel, as its dependencies may not be installed yet.
    spec = importlib.util.spec_from_file_location(
        'version', str(distr_root / 'tbmodel' / 'version.py'))
    version_module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(version_module)

    version_module.ensure_python()
    version = version_module.version


def long_description():
    source = distr_root / 'README.rst'
    if not source.is_file():
        return ''
    return source.read_text()


def main():
    check_versions()

    classifiers = """\
        Development Status :: 3 - Alpha
        Intended Audience :: Science/Research
        Intended Audience :: Developers
        Programming Language :: Python :: 3 :: Only
        Topic :: Software Development
        Topic :: Scientific/Engineering :: Physics
        Operating System :: OS Independent"""

    setup(name='tbmodel',
          version=version,
          author='tbmodel authors',
          description=("Selectors, terms and modifiers for tight-binding "
                       "models on periodic lattices"),
          long_description=long_description(),
          long_description_content_type='text/x-rst',
          license="BSD",
          packages=find_packages('.'),
          install_requires=['numpy >= 1.18.0', 'tinyarray >= 1.2.2'],
          extras_require={
              'test': ['pytest >= 7.0', 'scipy >= 1.3.0'],
          },
          python_requires='>=3.8',
          classifiers=[c.strip() for c in classifiers.split('\n')])

if __name__ == '__main__':
    main()
