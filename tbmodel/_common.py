# Copyright 2011-2026 tbmodel authors.
#
# This file is part of tbmodel.  It is subject to the license terms in the file
# LICENSE.rst found in the top-level directory of this distribution.  A list of
# tbmodel authors can be found in the file AUTHORS.rst at the top-level
# directory of this distribution.

import numbers

__all__ = ['UserCodeError', 'InvalidSelectorSpec', 'DimensionMismatch',
           'UnresolvedSelectorUsed', 'InvalidModelStructure',
           'InvalidGroupSpec']


class UserCodeError(Exception):
    """Class for errors that occur in user-provided code.

    Users define value functions for terms and transforming functions for
    modifiers.  If one of these functions raises an exception then it is
    caught and this error is raised in its place.  This makes it clear that
    the error is from the user's code (and not a bug in tbmodel).
    """
    pass


class InvalidSelectorSpec(ValueError):
    """A region, sublattice, cell distance or range argument is malformed."""
    pass


class DimensionMismatch(ValueError):
    """A cell distance does not match the number of lattice vectors."""
    pass


class UnresolvedSelectorUsed(TypeError):
    """A selector that still refers to sublattices by name was evaluated.

    Only selectors bound to a lattice with `~tbmodel.selector.resolve` can
    test sites and hoppings.  Seeing this error means the calling code skipped
    resolution.
    """
    pass


class InvalidModelStructure(TypeError):
    """A model contains terms of a kind that the operation does not accept."""
    pass


class InvalidGroupSpec(ValueError):
    """Sublattice group sizes are inconsistent with the lattice."""
    pass


def raise_user_error(exc, func):
    name = getattr(func, '__name__', repr(func))
    msg = ('Error occurred in user-supplied function "{0}".\n'
           'See the upper part of the above backtrace for more information.')
    raise UserCodeError(msg.format(name)) from exc


def ensure_isinstance(obj, typ, msg=None):
    if isinstance(obj, typ):
        return
    if msg is None:
        msg = "Expecting an instance of {}.".format(typ.__name__)
    raise TypeError(msg)


def is_integer(value):
    """Tell whether `value` is an integer that is not a bool."""
    return (isinstance(value, numbers.Integral)
            and not isinstance(value, bool))


def is_real(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool)
