# Copyright 2011-2026 tbmodel authors.
#
# This file is part of tbmodel.  It is subject to the license terms in the file
# LICENSE.rst found in the top-level directory of this distribution.  A list of
# tbmodel authors can be found in the file AUTHORS.rst at the top-level
# directory of this distribution.

import sys

# No public API
__all__ = []

version = '0.1.0'


def ensure_python(required_version=(3, 8)):
    v = sys.version_info
    if v[:3] < required_version:
        error = "This version of tbmodel requires Python {} or above.".format(
            ".".join(str(p) for p in required_version))
        print(error, file=sys.stderr)
        sys.exit(1)
