# Copyright 2011-2026 tbmodel authors.
#
# This file is part of tbmodel.  It is subject to the license terms in the file
# LICENSE.rst found in the top-level directory of this distribution.  A list of
# tbmodel authors can be found in the file AUTHORS.rst at the top-level
# directory of this distribution.
"""Pytest plugin to ignore test modules that have uninstalled dependencies."""

import importlib


# map from test module to sequence of dependency module names
module_dependencies = {
    'tbmodel/tests/test_assembly': ['scipy'],
}


# map from test module to sequence of dependency modules that are not installed
dependencies_not_installed = {}
for module, dependencies in module_dependencies.items():
    not_installed = []
    for dep in dependencies:
        try:
            importlib.import_module(dep)
        except ImportError:
            not_installed.append(dep)
    if len(not_installed) != 0:
        dependencies_not_installed[module] = not_installed


def pytest_ignore_collect(collection_path, config):
    path = collection_path.as_posix()
    for module, not_installed in dependencies_not_installed.items():
        if module in path:
            print('ignoring {} because the following dependencies are not '
                  'installed: {}'.format(module, ', '.join(not_installed)))
            return True
