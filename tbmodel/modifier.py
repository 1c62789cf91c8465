# Copyright 2011-2026 tbmodel authors.
#
# This file is part of tbmodel.  It is subject to the license terms in the file
# LICENSE.rst found in the top-level directory of this distribution.  A list of
# tbmodel authors can be found in the file AUTHORS.rst at the top-level
# directory of this distribution.

"""Modification of onsite energies and hoppings after assembly."""

__all__ = ['herm_conj', 'ElementModifier', 'OnsiteModifier',
           'HoppingModifier', 'onsite_modifier', 'hopping_modifier']

import tinyarray as ta

from .selector import (Any, OnsiteSelector, HoppingSelector,
                       make_onsite_selector, make_hopping_selector,
                       selector_from)
from ._common import (InvalidSelectorSpec, UnresolvedSelectorUsed,
                      raise_user_error)


def herm_conj(value):
    """
    Calculate the hermitian conjugate of a python object.

    If the object is neither a complex number nor a matrix, the original value
    is returned.
    """
    if hasattr(value, 'conjugate'):
        value = value.conjugate()
        if hasattr(value, 'transpose'):
            value = value.transpose()
    return value


class ElementModifier:
    """Abstract base class of transformations of existing matrix elements.

    Parameters
    ----------
    function : callable
        Called with the existing value first, followed by the positions if
        `positions` is true, and by any keyword parameters passed when the
        modifier is called.
    selector : `~tbmodel.selector.Selector`
        The elements to which the modifier applies.
    positions : bool
        Whether `function` takes positions after the value.
    add_conjugate : bool, optional
        Whether results are symmetrized with the hermitian conjugate.  Onsite
        modifiers always follow ``selector.force_hermitian``.  For hopping
        modifiers it is derived from an unresolved selector and must be given
        explicitly with a resolved one.
    """
    __slots__ = ('function', 'positions', 'selector', 'add_conjugate')

    _selector_type = None

    def __init__(self, function, selector, positions=False,
                 add_conjugate=None):
        if not callable(function):
            raise TypeError('Modifier functions must be callable.')
        if not isinstance(selector, self._selector_type):
            raise InvalidSelectorSpec('{0} requires an {1}, not {2!r}.'.format(
                self.__class__.__name__, self._selector_type.__name__,
                selector))
        self.function = function
        self.positions = bool(positions)
        self.selector = selector
        self.add_conjugate = self._conjugation_policy(add_conjugate)

    def _conjugation_policy(self, add_conjugate):
        raise NotImplementedError()

    def resolve(self, lattice):
        """Bind the modifier to `lattice`.

        The conjugation policy is carried over unchanged.
        """
        selector = self.selector.resolve(lattice)
        if selector is self.selector:
            return self
        return type(self)(self.function, selector, self.positions,
                          self.add_conjugate)

    def _apply(self, value, args, params):
        try:
            return self.function(value, *args, **params)
        except Exception as exc:
            raise_user_error(exc, self.function)

    def _modify(self, value, args, conj_args, params):
        if not self.selector.is_resolved:
            raise UnresolvedSelectorUsed(
                'Modifiers must be resolved against a lattice before use.')
        if not self.add_conjugate:
            return self._apply(value, args, params)
        return 0.5 * (self._apply(value, args, params)
                      + herm_conj(self._apply(herm_conj(value), conj_args,
                                              params)))

    def __repr__(self):
        return '{0}({1!r}, {2!r}, positions={3!r}, add_conjugate={4!r})'.format(
            self.__class__.__name__, self.function, self.selector,
            self.positions, self.add_conjugate)


class OnsiteModifier(ElementModifier):
    """Modifier of onsite energies.

    Calling ``modifier(value, r, **params)`` returns the modified value.  The
    position ``r`` is only needed if the modifier was made with
    ``positions=True``.
    """
    __slots__ = ()

    _selector_type = OnsiteSelector

    def _conjugation_policy(self, add_conjugate):
        return self.selector.force_hermitian

    def __call__(self, value, r=None, dr=None, **params):
        if self.positions:
            if r is None:
                raise TypeError('This modifier depends on the position, '
                                'which was not given.')
            args = (r,)
        else:
            args = ()
        return self._modify(value, args, args, params)


class HoppingModifier(ElementModifier):
    """Modifier of hoppings.

    Calling ``modifier(value, r, dr, **params)`` returns the modified value.
    The bond center ``r`` and bond vector ``dr`` are only needed if the
    modifier was made with ``positions=True``.
    """
    __slots__ = ()

    _selector_type = HoppingSelector

    def _conjugation_policy(self, add_conjugate):
        if add_conjugate is not None:
            return bool(add_conjugate)
        if self.selector.is_resolved:
            raise InvalidSelectorSpec(
                'Resolved selectors no longer tell whether their sublattices '
                'were constrained.  Build hopping modifiers from unresolved '
                'selectors, or pass `add_conjugate` explicitly.')
        # The conjugate of a hopping between two given sublattices lies in
        # another, unselected, block.
        return self.selector.sublats is Any and self.selector.force_hermitian

    def __call__(self, value, r=None, dr=None, **params):
        if self.positions:
            if r is None or dr is None:
                raise TypeError('This modifier depends on the bond center '
                                'and bond vector, which were not given.')
            dr = ta.array(dr)
            args, conj_args = (r, dr), (r, -dr)
        else:
            args = conj_args = ()
        return self._modify(value, args, conj_args, params)


def onsite_modifier(function, selector=None, *, positions=False, **kwargs):
    """Make a modifier of onsite energies.

    Parameters
    ----------
    function : callable
        ``function(o, **params)``, or ``function(o, r, **params)`` if
        `positions` is true, returning the new onsite energy given the
        existing one ``o`` (and the site position ``r``).
    selector : `~tbmodel.selector.OnsiteSelector`, optional
        If not given, one is made from the remaining keyword arguments with
        `~tbmodel.selector.make_onsite_selector`.
    positions : bool
        Whether `function` depends on the position.  Position-independent
        modifiers are cheaper to apply.

    Returns
    -------
    modifier : `OnsiteModifier`
        Must be resolved against a lattice before it is applied.
    """
    selector = selector_from(selector, kwargs, make_onsite_selector,
                             OnsiteSelector)
    return OnsiteModifier(function, selector, positions)


def hopping_modifier(function, selector=None, *, positions=False, **kwargs):
    """Make a modifier of hoppings.

    Parameters
    ----------
    function : callable
        ``function(t, **params)``, or ``function(t, r, dr, **params)`` if
        `positions` is true, returning the new hopping given the existing one
        ``t`` (and the bond center ``r`` and bond vector ``dr``).
    selector : `~tbmodel.selector.HoppingSelector`, optional
        If not given, one is made from the remaining keyword arguments with
        `~tbmodel.selector.make_hopping_selector`.  Unlike for hopping terms,
        ``range`` is unconstrained unless given.
    positions : bool
        Whether `function` depends on the bond.

    Returns
    -------
    modifier : `HoppingModifier`
        Must be resolved against a lattice before it is applied.

    Raises
    ------
    InvalidSelectorSpec
        If `selector` is already resolved: the symmetrization policy depends
        on whether the sublattices were constrained by name.

    Notes
    -----
    If neither sublattices are given nor ``force_hermitian=False``, the
    resolved modifier returns ``(f(t) + f(t')') / 2`` so that a hopping and
    its reverse stay hermitian conjugates of each other.
    """
    if selector is None:
        kwargs.setdefault('range', Any)
    selector = selector_from(selector, kwargs, make_hopping_selector,
                             HoppingSelector)
    return HoppingModifier(function, selector, positions)
