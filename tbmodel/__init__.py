# Copyright 2011-2026 tbmodel authors.
#
# This file is part of tbmodel.  It is subject to the license terms in the file
# LICENSE.rst found in the top-level directory of this distribution.  A list of
# tbmodel authors can be found in the file AUTHORS.rst at the top-level
# directory of this distribution.

__all__ = []

from . import version
version.ensure_python()
__version__ = version.version

from ._common import (UserCodeError, InvalidSelectorSpec, DimensionMismatch,
                      UnresolvedSelectorUsed, InvalidModelStructure,
                      InvalidGroupSpec)
__all__.extend(['UserCodeError', 'InvalidSelectorSpec', 'DimensionMismatch',
                'UnresolvedSelectorUsed', 'InvalidModelStructure',
                'InvalidGroupSpec'])

from . import lattice
from . import selector
from . import model
from . import modifier
__all__.extend(['lattice', 'selector', 'model', 'modifier'])

# Make selected functionality available directly in the root namespace.
from .selector import (Any, make_onsite_selector, make_hopping_selector,
                       merge_selectors, resolve)
__all__.extend(['Any', 'make_onsite_selector', 'make_hopping_selector',
                'merge_selectors', 'resolve'])
from .model import (Model, onsite_term, hopping_term, only_onsite_terms,
                    only_hopping_terms, off_diagonal)
__all__.extend(['Model', 'onsite_term', 'hopping_term', 'only_onsite_terms',
                'only_hopping_terms', 'off_diagonal'])
from .modifier import onsite_modifier, hopping_modifier
__all__.extend(['onsite_modifier', 'hopping_modifier'])


def test(verbose=True):
    from pytest import main
    import os.path

    return main([os.path.dirname(os.path.abspath(__file__)),
                     "-s"] + (['-v'] if verbose else []))

test.__test__ = False
