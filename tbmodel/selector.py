# Copyright 2011-2026 tbmodel authors.
#
# This file is part of tbmodel.  It is subject to the license terms in the file
# LICENSE.rst found in the top-level directory of this distribution.  A list of
# tbmodel authors can be found in the file AUTHORS.rst at the top-level
# directory of this distribution.

"""Selection of onsite energies and hoppings on a lattice.

A selector bundles optional constraints (a region in space, sublattices, cell
distances, a maximal bond length).  Freshly made selectors refer to
sublattices by name and cannot test anything; `resolve` binds them to a
lattice, turning names into sublattice indices.  Only resolved selectors are
callable.
"""

__all__ = ['Any', 'RANGE_TOLERANCE', 'Selector', 'OnsiteSelector',
           'HoppingSelector', 'ResolvedOnsiteSelector',
           'ResolvedHoppingSelector', 'make_onsite_selector',
           'make_hopping_selector', 'merge_selectors', 'resolve']

import operator
from itertools import product
import numpy as np
import tinyarray as ta

from ._common import (InvalidSelectorSpec, DimensionMismatch,
                      UnresolvedSelectorUsed, is_integer, is_real)


# A bond of length exactly `range` must be selected in spite of rounding.
RANGE_TOLERANCE = float(np.sqrt(np.finfo(float).eps))


class _Unconstrained:
    """Marker for a selector field that places no constraint.

    Not to be confused with an empty tuple, which selects nothing.
    """
    __slots__ = ()

    def __repr__(self):
        return 'Any'

    def __reduce__(self):
        return 'Any'


Any = _Unconstrained()


################ Sanitization of user input

_SEQUENCE_TYPES = (tuple, list, np.ndarray, ta.ndarray_int)
_PAIR_ARROW = '->'


def _sanitize_region(region):
    if region is Any or callable(region):
        return region
    raise InvalidSelectorSpec('`region` must be a callable or `Any`, '
                              'not {0!r}.'.format(region))


def _sanitize_force_hermitian(force_hermitian):
    if isinstance(force_hermitian, (bool, np.bool_)):
        return bool(force_hermitian)
    raise InvalidSelectorSpec('`force_hermitian` must be a bool, not {0!r}.'
                              .format(force_hermitian))


def _sanitize_sublats(sublats):
    if sublats is Any:
        return Any
    if isinstance(sublats, str):
        return (sublats,)
    if (isinstance(sublats, (tuple, list))
        and all(isinstance(s, str) for s in sublats)):
        return tuple(sublats)
    raise InvalidSelectorSpec(
        '`sublats` for onsites must be either `Any`, a sublattice name or a '
        'tuple of sublattice names, not {0!r}.'.format(sublats))


def _is_pair_syntax(name):
    return isinstance(name, str) and _PAIR_ARROW in name


def _sanitize_sublat_pair(item):
    """Return the (row, column) name pair described by `item`."""
    if isinstance(item, str):
        src, arrow, dst = item.partition(_PAIR_ARROW)
        if not arrow:
            return (item, item)
        src, dst = src.strip(), dst.strip()
        if src and dst and _PAIR_ARROW not in dst:
            # 'a->b' is a hopping from a to b: row b, column a.
            return (dst, src)
    elif (isinstance(item, (tuple, list)) and len(item) == 2
          and all(isinstance(s, str) and not _is_pair_syntax(s)
                  for s in item)):
        return tuple(item)
    raise InvalidSelectorSpec(
        '`sublats` for hoppings must be either `Any`, a pair `(s1, s2)`, '
        'a string "s1->s2", a sublattice name, or a tuple of such items, '
        'not {0!r}.'.format(item))


def _sanitize_sublat_pairs(sublats):
    if sublats is Any:
        return Any
    if isinstance(sublats, str):
        return (_sanitize_sublat_pair(sublats),)
    if not isinstance(sublats, (tuple, list)):
        raise InvalidSelectorSpec(
            '`sublats` for hoppings must be either `Any`, a pair, a '
            'sublattice name or a tuple of such items, not {0!r}.'
            .format(sublats))
    if (len(sublats) == 2
        and all(isinstance(s, str) and not _is_pair_syntax(s)
                for s in sublats)):
        # A tuple of exactly two plain names is a single pair.
        return (tuple(sublats),)
    return tuple(_sanitize_sublat_pair(s) for s in sublats)


def _sanitize_dn(dn):
    if dn is Any:
        return Any
    if not isinstance(dn, _SEQUENCE_TYPES):
        raise InvalidSelectorSpec('`dn` must be either `Any`, a tuple of '
                                  'integers or a tuple of such tuples, not '
                                  '{0!r}.'.format(dn))
    items = list(dn)
    if not items:
        return ()
    if all(is_integer(i) for i in items):
        return (ta.array(items, int),)
    if not all(isinstance(v, _SEQUENCE_TYPES)
               and all(is_integer(i) for i in v) for v in items):
        raise InvalidSelectorSpec('Cell distances in `dn` must be sequences '
                                  'of integers, not {0!r}.'.format(dn))
    if len(set(len(v) for v in items)) != 1:
        raise InvalidSelectorSpec('All cell distances in `dn` must have the '
                                  'same length, got {0!r}.'.format(dn))
    return tuple(ta.array(list(v), int) for v in items)


def _sanitize_range(range):
    if range is Any:
        return Any
    if not is_real(range) or np.isnan(range) or range < 0:
        raise InvalidSelectorSpec('`range` must be either `Any` or a '
                                  'non-negative real number, not {0!r}.'
                                  .format(range))
    range = float(range)
    if np.isfinite(range):
        return range + RANGE_TOLERANCE
    return range


def _check_dims(dns, lattice):
    if dns is Any:
        return dns
    for dn in dns:
        if len(dn) != lattice.lattice_dim:
            msg = ('Specified cell distance `dn` {0} does not match lattice '
                   'dimension {1}.')
            raise DimensionMismatch(msg.format(tuple(dn), lattice.lattice_dim))
    return dns


def _resolve_names(names, lattice):
    """Indices of `names` in `lattice`, None for those not present."""
    return [lattice.sublat_index(name) for name in names]


def _check_indices(indices, lattice):
    n = lattice.num_sublats
    if any(i >= n for i in indices):
        msg = ('Sublattice indices {0!r} do not all exist in a lattice with '
               '{1} sublattices.')
        raise InvalidSelectorSpec(msg.format(tuple(indices), n))


def _home_cell(dn, lattice):
    if dn is None:
        return ta.zeros(lattice.lattice_dim, int)
    return ta.array(dn, int)


################ Selectors

class Selector(tuple):
    """Abstract base class of onsite and hopping selectors.

    Selectors are immutable.  Instances are made with `make_onsite_selector`
    or `make_hopping_selector` and bound to a lattice with `resolve`.
    """
    __slots__ = ()

    is_resolved = False

    region = property(operator.itemgetter(0),
                      doc="Region function, or `Any`.")
    sublats = property(operator.itemgetter(1),
                       doc="Selected sublattices (names or indices), or `Any`.")
    force_hermitian = property(operator.itemgetter(2),
                               doc="Whether selected values are to be made "
                                   "hermitian.")

    def __eq__(self, other):
        return type(self) is type(other) and tuple.__eq__(self, other)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((type(self), tuple(self)))

    def __call__(self, *args, **kwargs):
        raise UnresolvedSelectorUsed(
            'Sublattices {0!r} in selector are not resolved.  Call '
            '`resolve(selector, lattice)` first.'.format(self.sublats))

    def resolve(self, lattice):
        raise NotImplementedError()

    def _fields_repr(self):
        return 'region={0!r}, sublats={1!r}, force_hermitian={2!r}'.format(
            self.region, self.sublats, self.force_hermitian)

    def __repr__(self):
        return '{0}({1})'.format(self.__class__.__name__, self._fields_repr())


class OnsiteSelector(Selector):
    """Selector of onsite energies, with sublattices given by name.

    See `make_onsite_selector` for the meaning of the parameters.
    """
    __slots__ = ()

    def __new__(cls, region=Any, sublats=Any, force_hermitian=True,
                _i_know_what_i_do=False):
        if not _i_know_what_i_do:
            region = _sanitize_region(region)
            sublats = _sanitize_sublats(sublats)
            force_hermitian = _sanitize_force_hermitian(force_hermitian)
        return tuple.__new__(cls, (region, sublats, force_hermitian))

    def __getnewargs__(self):
        return tuple(self) + (True,)

    def resolve(self, lattice):
        """Bind the selector to `lattice`.

        Sublattice names not present in `lattice` are dropped silently.
        """
        if self.sublats is Any:
            sublats = tuple(range(lattice.num_sublats))
        else:
            sublats = tuple(i for i in _resolve_names(self.sublats, lattice)
                            if i is not None)
        return ResolvedOnsiteSelector(self.region, sublats,
                                      self.force_hermitian, lattice)


class ResolvedOnsiteSelector(OnsiteSelector):
    """Onsite selector bound to a lattice.

    Calling ``selector(site, dn)`` tells whether the onsite energy of site
    number `site` in unit cell `dn` (the home cell if omitted) is selected.
    """
    __slots__ = ()

    is_resolved = True

    lattice = property(operator.itemgetter(3),
                       doc="The lattice the selector is bound to.")

    def __new__(cls, region, sublats, force_hermitian, lattice):
        return tuple.__new__(cls, (region, sublats, force_hermitian, lattice))

    def __getnewargs__(self):
        return tuple(self)

    def __call__(self, site, dn=None):
        lattice = self.lattice
        region = self.region
        if region is not Any and not region(lattice.pos(site, dn)):
            return False
        sublats = self.sublats
        return sublats is Any or lattice.sublat(site) in sublats

    def resolve(self, lattice):
        if lattice is self.lattice:
            return self
        _check_indices(self.sublats, lattice)
        return ResolvedOnsiteSelector(self.region, self.sublats,
                                      self.force_hermitian, lattice)


class HoppingSelector(Selector):
    """Selector of hoppings, with sublattices given by name.

    See `make_hopping_selector` for the meaning of the parameters.
    """
    __slots__ = ()

    dns = property(operator.itemgetter(3),
                   doc="Selected cell distances, or `Any`.")
    range = property(operator.itemgetter(4),
                     doc="Maximal bond length (tolerance included), or `Any`.")

    def __new__(cls, region=Any, sublats=Any, dn=Any, range=1,
                force_hermitian=True, _i_know_what_i_do=False):
        if not _i_know_what_i_do:
            region = _sanitize_region(region)
            sublats = _sanitize_sublat_pairs(sublats)
            dn = _sanitize_dn(dn)
            range = _sanitize_range(range)
            force_hermitian = _sanitize_force_hermitian(force_hermitian)
        return tuple.__new__(cls, (region, sublats, force_hermitian, dn,
                                   range))

    def __getnewargs__(self):
        return (self.region, self.sublats, self.dns, self.range,
                self.force_hermitian, True)

    def _fields_repr(self):
        dns = self.dns
        if dns is not Any:
            dns = tuple(tuple(dn) for dn in dns)
        return ('region={0!r}, sublats={1!r}, dn={2!r}, range={3!r}, '
                'force_hermitian={4!r}').format(
                    self.region, self.sublats, dns, self.range,
                    self.force_hermitian)

    def resolve(self, lattice):
        """Bind the selector to `lattice`.

        Sublattice pairs with a name not present in `lattice` are dropped
        silently.

        Raises
        ------
        DimensionMismatch
            If a cell distance does not match the number of lattice vectors.
        """
        dns = _check_dims(self.dns, lattice)
        if self.sublats is Any:
            n = lattice.num_sublats
            sublats = tuple(product(range(n), range(n)))
        else:
            sublats = []
            for row, col in self.sublats:
                i, j = _resolve_names((row, col), lattice)
                if i is not None and j is not None:
                    sublats.append((i, j))
            sublats = tuple(sublats)
        return ResolvedHoppingSelector(self.region, sublats,
                                       self.force_hermitian, dns, self.range,
                                       lattice)


class ResolvedHoppingSelector(HoppingSelector):
    """Hopping selector bound to a lattice.

    Calling ``selector(row, col, dn_row, dn_col)`` tells whether the hopping
    from site `col` in cell `dn_col` to site `row` in cell `dn_row` is
    selected.  Omitted cells are the home cell.
    """
    __slots__ = ()

    is_resolved = True

    lattice = property(operator.itemgetter(5),
                       doc="The lattice the selector is bound to.")

    def __new__(cls, region, sublats, force_hermitian, dns, range, lattice):
        return tuple.__new__(cls, (region, sublats, force_hermitian, dns,
                                   range, lattice))

    def __getnewargs__(self):
        return tuple(self)

    def __call__(self, row, col, dn_row=None, dn_col=None):
        lattice = self.lattice
        dn_row = _home_cell(dn_row, lattice)
        dn_col = _home_cell(dn_col, lattice)

        # Cheapest tests first.
        if row == col and dn_row == dn_col:
            return False

        region = self.region
        range = self.range
        if region is not Any or range is not Any:
            r_row = lattice.pos(row, dn_row)
            r_col = lattice.pos(col, dn_col)
            dr = r_row - r_col
        if region is not Any and not region((r_row + r_col) / 2, dr):
            return False

        dns = self.dns
        if dns is not Any and dn_row - dn_col not in dns:
            return False

        if range is not Any and np.linalg.norm(dr) > range:
            return False

        sublats = self.sublats
        return (sublats is Any
                or (lattice.sublat(row), lattice.sublat(col)) in sublats)

    def resolve(self, lattice):
        if lattice is self.lattice:
            return self
        _check_indices([i for pair in self.sublats for i in pair], lattice)
        return ResolvedHoppingSelector(self.region, self.sublats,
                                       self.force_hermitian,
                                       _check_dims(self.dns, lattice),
                                       self.range, lattice)


################ Public API

def make_onsite_selector(region=Any, sublats=Any, force_hermitian=True):
    """Specify a subset of onsite energies.

    Parameters
    ----------
    region : callable or `Any`
        ``region(r)`` must return a truth value for position ``r``.
    sublats : str, tuple of str, or `Any`
        Names of the selected sublattices.  An empty tuple selects nothing.
    force_hermitian : bool
        Whether an onsite term applied to a selected site should be made
        hermitian.

    Returns
    -------
    selector : `OnsiteSelector`
        Only sites at position ``r`` on a sublattice named ``s`` for which
        ``region(r) and s in sublats`` are selected.  A field that is `Any`
        does not constrain the selection.

    Raises
    ------
    InvalidSelectorSpec
        If any of the arguments is malformed.
    """
    return OnsiteSelector(region, sublats, force_hermitian)


def make_hopping_selector(region=Any, sublats=Any, dn=Any, range=1,
                          force_hermitian=True):
    """Specify a subset of hoppings.

    Parameters
    ----------
    region : callable or `Any`
        ``region(r, dr)`` must return a truth value for a bond with center
        ``r`` and bond vector ``dr`` (pointing from the column site to the
        row site).
    sublats : `Any`, or sublattice pair(s)
        Either a pair of names ``(s1, s2)`` (row sublattice, column
        sublattice), a string ``'s2->s1'`` (a hopping from ``s2`` to ``s1``,
        equivalent to ``(s1, s2)``), a single name ``s`` standing for
        ``(s, s)``, or a tuple of such items.
    dn : `Any`, a tuple of integers, or a tuple of such tuples
        Allowed distances between the unit cells of the row and column sites.
        An empty tuple selects nothing.
    range : real or `Any`
        Maximal bond length.  Bonds exactly ``range`` long are selected; the
        tolerance is `RANGE_TOLERANCE`.
    force_hermitian : bool
        Whether a hopping term applied to a selected hopping should be made
        hermitian.

    Returns
    -------
    selector : `HoppingSelector`

    Raises
    ------
    InvalidSelectorSpec
        If any of the arguments is malformed.
    """
    return HoppingSelector(region, sublats, dn, range, force_hermitian)


def selector_from(selector, kwargs, make, kind):
    """Return `selector`, or one made by calling ``make(**kwargs)``."""
    if selector is None:
        return make(**kwargs)
    if kwargs:
        raise TypeError('Selector keyword arguments cannot be combined with '
                        'an explicit selector.')
    if not isinstance(selector, kind):
        raise InvalidSelectorSpec('Expecting an {0}, not {1!r}.'
                                  .format(kind.__name__, selector))
    return selector


def merge_selectors(base, override):
    """Return a copy of `base` with the constrained fields of `override`.

    Each field of `override` that is not `Any` replaces that of `base`.
    Neither argument is modified.  `base` may be resolved, in which case the
    result stays bound to the same lattice and `override` may not specify
    sublattices.
    """
    kind = HoppingSelector if isinstance(base, HoppingSelector) else OnsiteSelector
    if not isinstance(base, kind):
        raise InvalidSelectorSpec('Expecting a selector, not {0!r}.'
                                  .format(base))
    if not isinstance(override, kind) or override.is_resolved:
        raise InvalidSelectorSpec('Expecting an unresolved {0}, not {1!r}.'
                                  .format(kind.__name__, override))

    fields = tuple(b if o is Any else o for b, o in zip(base, override))
    if not base.is_resolved:
        return tuple.__new__(kind, fields)

    if override.sublats is not Any:
        raise InvalidSelectorSpec('Sublattice names cannot be merged into a '
                                  'resolved selector.')
    if kind is HoppingSelector:
        _check_dims(override.dns, base.lattice)
    return type(base)(*fields, base.lattice)


def resolve(obj, lattice):
    """Bind a selector, term, model or modifier to `lattice`.

    Returns a new object, `obj` is left untouched.  Resolving an object that
    is already bound to `lattice` returns it unchanged.
    """
    try:
        method = obj.resolve
    except AttributeError:
        raise TypeError('Cannot resolve {0} objects.'
                        .format(type(obj).__name__)) from None
    return method(lattice)
