# Copyright 2011-2026 tbmodel authors.
#
# This file is part of tbmodel.  It is subject to the license terms in the file
# LICENSE.rst found in the top-level directory of this distribution.  A list of
# tbmodel authors can be found in the file AUTHORS.rst at the top-level
# directory of this distribution.

__all__ = ['Term', 'OnsiteTerm', 'HoppingTerm', 'Model', 'onsite_term',
           'hopping_term', 'only_onsite_terms', 'only_hopping_terms',
           'off_diagonal']

import numbers
import warnings

from .selector import (Any, OnsiteSelector, HoppingSelector,
                       ResolvedHoppingSelector, make_onsite_selector,
                       make_hopping_selector, merge_selectors,
                       selector_from)
from ._common import (InvalidSelectorSpec, InvalidModelStructure,
                      InvalidGroupSpec, raise_user_error, ensure_isinstance,
                      is_integer)


################ Terms

class Term:
    """Abstract base class of model terms.

    A term pairs a value (a constant, or a function of position) with a
    selector and a scalar coefficient.  Terms are immutable.  Evaluating a
    term never consults its selector: testing whether a term applies to a
    given site or hopping is up to the caller.
    """
    __slots__ = ('value', 'selector', 'coefficient')

    _selector_type = None

    def __init__(self, value, selector, coefficient=1):
        if not isinstance(selector, self._selector_type):
            raise InvalidSelectorSpec('{0} requires an {1}, not {2!r}.'.format(
                self.__class__.__name__, self._selector_type.__name__,
                selector))
        self.value = value
        self.selector = selector
        self.coefficient = coefficient

    def _evaluate(self, *args):
        value = self.value
        if callable(value):
            try:
                value = value(*args)
            except Exception as exc:
                raise_user_error(exc, value)
        return self.coefficient * value

    def with_selector(self, selector):
        """Return a copy of the term using `selector`."""
        return type(self)(self.value, selector, self.coefficient)

    def resolve(self, lattice):
        selector = self.selector.resolve(lattice)
        if selector is self.selector:
            return self
        return self.with_selector(selector)

    def is_hermitian(self):
        return self.selector.force_hermitian

    def __mul__(self, x):
        if not isinstance(x, numbers.Number):
            return NotImplemented
        return type(self)(self.value, self.selector, x * self.coefficient)

    __rmul__ = __mul__

    def __neg__(self):
        return (-1) * self

    def _value_str(self):
        if callable(self.value):
            return 'Function'
        return type(self.value).__name__

    def __repr__(self):
        return '{0}({1!r}, {2!r}, {3!r})'.format(
            self.__class__.__name__, self.value, self.selector,
            self.coefficient)


class OnsiteTerm(Term):
    """Onsite energy given by a constant or by a function ``value(r)``."""
    __slots__ = ()

    _selector_type = OnsiteSelector

    def __call__(self, r, dr=None):
        return self._evaluate(r)

    def __str__(self, indent=''):
        sublats = self.selector.sublats
        return '\n'.join([
            '{0}OnsiteTerm{{{1}}}:'.format(indent, self._value_str()),
            '{0}  Sublattices      : {1}'.format(
                indent, 'any' if sublats is Any else sublats),
            '{0}  Force hermitian  : {1}'.format(
                indent, self.selector.force_hermitian),
            '{0}  Coefficient      : {1}'.format(indent, self.coefficient)])


class HoppingTerm(Term):
    """Hopping given by a constant or by a function ``value(r, dr)``.

    ``r`` is the bond center and ``dr`` the bond vector.
    """
    __slots__ = ()

    _selector_type = HoppingSelector

    def __call__(self, r, dr=None):
        return self._evaluate(r, dr)

    def __str__(self, indent=''):
        selector = self.selector
        sublats = selector.sublats
        if sublats is Any:
            sublats = 'any'
        elif not selector.is_resolved:
            sublats = tuple('{1}->{0}'.format(*pair) for pair in sublats)
        dns = selector.dns
        if dns is not Any:
            dns = tuple(tuple(dn) for dn in dns)
        hop_range = selector.range
        if hop_range is not Any:
            hop_range = round(hop_range, 6)
        return '\n'.join([
            '{0}HoppingTerm{{{1}}}:'.format(indent, self._value_str()),
            '{0}  Sublattice pairs : {1}'.format(indent, sublats),
            '{0}  dn cell distance : {1}'.format(
                indent, 'any' if dns is Any else dns),
            '{0}  Hopping range    : {1}'.format(
                indent, 'any' if hop_range is Any else hop_range),
            '{0}  Force hermitian  : {1}'.format(
                indent, selector.force_hermitian),
            '{0}  Coefficient      : {1}'.format(indent, self.coefficient)])


################ Models

class Model:
    """An ordered collection of onsite and hopping terms.

    Models support multiplication by a scalar, negation, addition and
    subtraction.  Calling ``model(r, dr)`` returns the sum of all term values
    at bond center ``r`` and bond vector ``dr``; the caller is responsible
    for summing only terms whose selectors match.

    Parameters
    ----------
    *terms : `Term` instances
    """
    __slots__ = ('terms',)

    def __init__(self, *terms):
        for term in terms:
            ensure_isinstance(term, Term)
        self.terms = terms

    def __call__(self, r, dr=None):
        return sum(term(r, dr) for term in self.terms)

    def __len__(self):
        return len(self.terms)

    def __iter__(self):
        return iter(self.terms)

    def __mul__(self, x):
        if not isinstance(x, numbers.Number):
            return NotImplemented
        return Model(*(x * term for term in self.terms))

    __rmul__ = __mul__

    def __neg__(self):
        return Model(*(-term for term in self.terms))

    def __add__(self, other):
        if isinstance(other, Term):
            other = Model(other)
        if not isinstance(other, Model):
            return NotImplemented
        return Model(*(self.terms + other.terms))

    def __radd__(self, other):
        if isinstance(other, Term):
            return Model(other) + self
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Term):
            other = Model(other)
        if not isinstance(other, Model):
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other):
        if isinstance(other, Term):
            return Model(other) - self
        return NotImplemented

    def is_hermitian(self):
        """Whether all terms are declared hermitian.

        This reflects the ``force_hermitian`` flags of the selectors, not the
        actual values of the terms.
        """
        return all(term.is_hermitian() for term in self.terms)

    def resolve(self, lattice):
        """Return the model with all selectors bound to `lattice`."""
        return Model(*(term.resolve(lattice) for term in self.terms))

    def __repr__(self):
        return 'Model({0})'.format(', '.join(repr(t) for t in self.terms))

    def __str__(self):
        n = len(self.terms)
        lines = ['Model: model with {0} term{1}'.format(
            n, '' if n == 1 else 's')]
        lines.extend(term.__str__(indent='  ') for term in self.terms)
        return '\n'.join(lines)


################ Model building

def onsite_term(value, selector=None, **kwargs):
    """Make a model with a single onsite term.

    Parameters
    ----------
    value : number, matrix, or callable
        The onsite energy.  A callable is called as ``value(r)`` with the
        position ``r`` of the site.
    selector : `~tbmodel.selector.OnsiteSelector`, optional
        The sites to which the term applies.  If not given, one is made by
        passing the remaining keyword arguments to
        `~tbmodel.selector.make_onsite_selector`.

    Returns
    -------
    model : `Model`

    Examples
    --------
    >>> model = onsite_term(1, sublats=('A', 'B')) - hopping_term(2)
    >>> model.is_hermitian()
    True
    """
    selector = selector_from(selector, kwargs, make_onsite_selector,
                             OnsiteSelector)
    return Model(OnsiteTerm(value, selector, 1))


def hopping_term(value, selector=None, **kwargs):
    """Make a model with a single hopping term.

    Parameters
    ----------
    value : number, matrix, or callable
        The hopping amplitude.  A callable is called as ``value(r, dr)`` with
        the bond center ``r`` and the bond vector ``dr``.
    selector : `~tbmodel.selector.HoppingSelector`, optional
        The hoppings to which the term applies.  If not given, one is made by
        passing the remaining keyword arguments to
        `~tbmodel.selector.make_hopping_selector`; note that ``range``
        defaults to 1.

    Returns
    -------
    model : `Model`
    """
    selector = selector_from(selector, kwargs, make_hopping_selector,
                             HoppingSelector)
    return Model(HoppingTerm(value, selector, 1))


def only_onsite_terms(model, selector=None, **kwargs):
    """Return a model with only the onsite terms of `model`.

    The constrained fields of `selector` (made from the keyword arguments
    with `~tbmodel.selector.make_onsite_selector` if not given) replace those
    of every term.  Since ``force_hermitian`` is never unconstrained, it is
    always replaced: unless given, it is reset to True, so the result may be
    hermitian even if `model` is not.
    """
    override = selector_from(selector, kwargs, make_onsite_selector,
                             OnsiteSelector)
    return Model(*(term.with_selector(merge_selectors(term.selector, override))
                   for term in model.terms if isinstance(term, OnsiteTerm)))


def only_hopping_terms(model, selector=None, **kwargs):
    """Return a model with only the hopping terms of `model`.

    Like `only_onsite_terms`, but for hoppings.  Unlike in `hopping_term`,
    ``range`` is unconstrained unless given, so that the ranges of the terms
    are kept.  ``force_hermitian`` is reset to True unless given.
    """
    if selector is None:
        kwargs.setdefault('range', Any)
    override = selector_from(selector, kwargs, make_hopping_selector,
                             HoppingSelector)
    return Model(*(term.with_selector(merge_selectors(term.selector, override))
                   for term in model.terms if isinstance(term, HoppingTerm)))


################ Off-diagonal restriction

def _sublat_groups(group_sizes, num_sublats):
    """Map each sublattice index to the index of its group."""
    try:
        sizes = list(group_sizes)
    except TypeError:
        raise InvalidGroupSpec('Group sizes must be a sequence of integers, '
                               'not {0!r}.'.format(group_sizes)) from None
    if not all(is_integer(n) and n >= 0 for n in sizes):
        raise InvalidGroupSpec('Group sizes must be non-negative integers, '
                               'not {0!r}.'.format(group_sizes))
    if sum(sizes) != num_sublats:
        raise InvalidGroupSpec('Group sizes {0!r} do not add up to the {1} '
                               'sublattices of the lattice.'
                               .format(tuple(sizes), num_sublats))
    groups = []
    for group, size in enumerate(sizes):
        groups.extend([group] * size)
    return groups


def off_diagonal(model, lattice, group_sizes):
    """Restrict `model` to hoppings between different groups of sublattices.

    Parameters
    ----------
    model : `Model`
        Must contain only hopping terms.
    lattice : `~tbmodel.lattice.Lattice`
    group_sizes : sequence of int
        The sublattices of `lattice` are split, in order, into contiguous
        groups of these sizes.

    Returns
    -------
    model : `Model`
        The hopping terms of `model`, with their selectors resolved against
        `lattice` and restricted to sublattice pairs from different groups.

    Raises
    ------
    InvalidModelStructure
        If `model` contains an onsite term.
    InvalidGroupSpec
        If the group sizes do not add up to the number of sublattices.
    """
    for term in model.terms:
        if not isinstance(term, HoppingTerm):
            raise InvalidModelStructure(
                'No onsite terms allowed in off-diagonal coupling.')
    groups = _sublat_groups(group_sizes, lattice.num_sublats)

    terms = []
    for term in model.terms:
        selector = term.selector.resolve(lattice)
        pairs = tuple((row, col) for row, col in selector.sublats
                      if groups[row] != groups[col])
        if not pairs:
            warnings.warn('A hopping term couples no sublattices of different '
                          'groups and will not contribute.', RuntimeWarning,
                          stacklevel=2)
        selector = ResolvedHoppingSelector(
            selector.region, pairs, selector.force_hermitian, selector.dns,
            selector.range, selector.lattice)
        terms.append(term.with_selector(selector))
    return Model(*terms)
