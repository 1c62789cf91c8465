# Copyright 2011-2026 tbmodel authors.
#
# This file is part of tbmodel.  It is subject to the license terms in the file
# LICENSE.rst found in the top-level directory of this distribution.  A list of
# tbmodel authors can be found in the file AUTHORS.rst at the top-level
# directory of this distribution.

"""Minimal periodic lattices with named sublattices.

Selectors and terms only need read access to a lattice: the ordered site
positions of the unit cell, the sublattice each site belongs to, the
sublattice names and the Bravais vectors.  Any object that provides the
attributes and methods of `Lattice` can be used in their place.
"""

__all__ = ['Lattice', 'general', 'chain', 'square', 'cubic', 'triangular',
           'honeycomb', 'kagome']

import warnings
from math import sqrt
import numpy as np
import tinyarray as ta


def _check_prim_vecs(prim_vecs):
    """Check constraints to ensure that prim_vecs is correct."""
    if prim_vecs.ndim != 2:
        raise ValueError('``prim_vecs`` must be a 2d array-like object.')

    if prim_vecs.shape[0] > prim_vecs.shape[1]:
        raise ValueError('Number of primitive vectors exceeds '
                         'the space dimensionality.')

    if len(prim_vecs) and np.linalg.matrix_rank(prim_vecs) < len(prim_vecs):
        raise ValueError('"prim_vecs" must be linearly independent.')


def _warn_coinciding(sites, prim_vecs, rtol=1e-8):
    if len(prim_vecs):
        scale = min(np.linalg.norm(vec) for vec in prim_vecs)
    else:
        scale = 1
    for i, a in enumerate(sites):
        for b in sites[i + 1:]:
            if np.linalg.norm(np.subtract(a, b)) < rtol * scale:
                warnings.warn("Some sites of the unit cell have nearly "
                              "coinciding positions.", RuntimeWarning,
                              stacklevel=3)
                return


class Lattice:
    """
    A Bravais lattice whose unit cell holds named groups of sites.

    Parameters
    ----------
    prim_vecs : 2d array-like of floats
        The primitive vectors of the Bravais lattice, one per row.  There may
        be fewer vectors than space dimensions (e.g. a ribbon in 2D space).
    sublattices : sequence of ``(name, positions)`` pairs
        ``name`` is a string, unique within the lattice.  ``positions`` is a
        2d array-like of the coordinates of the sites of this sublattice
        inside the unit cell (a single position vector is also accepted).

    Raises
    ------
    ValueError
        If dimensionalities do not match or sublattice names are repeated.

    Notes
    -----
    Sites are numbered in the order in which they are given, so that the
    sites of each sublattice form a contiguous block.  Sublattices are
    numbered from zero in the same order.
    """
    def __init__(self, prim_vecs, sublattices):
        prim_vecs = np.array(prim_vecs, float)
        _check_prim_vecs(prim_vecs)
        dim = prim_vecs.shape[1]

        names = []
        sites = []
        sublat_of = []
        for name, positions in sublattices:
            if not isinstance(name, str):
                raise TypeError('Sublattice names must be strings, not {0}.'
                                .format(type(name).__name__))
            if name in names:
                raise ValueError('Duplicate sublattice name {0!r}.'
                                 .format(name))
            positions = np.array(positions, float)
            if positions.ndim == 1 and len(positions) == dim:
                positions = positions.reshape(1, dim)
            if positions.ndim != 2 or positions.shape[1] != dim:
                raise ValueError('Site positions of sublattice {0!r} do not '
                                 'match the space dimensionality.'
                                 .format(name))
            sites.extend(ta.array(pos) for pos in positions)
            sublat_of.extend([len(names)] * len(positions))
            names.append(name)

        _warn_coinciding(sites, prim_vecs)

        self._prim_vecs = prim_vecs
        self.names = tuple(names)
        self.sites = tuple(sites)
        self._sublat_of = tuple(sublat_of)
        self._name_index = {name: i for i, name in enumerate(names)}
        self.dim = dim
        self.lattice_dim = len(prim_vecs)

    def __str__(self):
        return '<{0}D lattice in {1}D space with sublattices {2}>'.format(
            self.lattice_dim, self.dim, ', '.join(self.names))

    def __repr__(self):
        return '<Lattice with {0} sites in {1} sublattices>'.format(
            self.num_sites, self.num_sublats)

    @property
    def prim_vecs(self):
        """(sequence of vectors) Primitive vectors

        ``prim_vecs[i]`` is the `i`-th primitive basis vector of the lattice.
        """
        return self._prim_vecs.copy()

    @property
    def num_sites(self):
        return len(self.sites)

    @property
    def num_sublats(self):
        return len(self.names)

    def sublat(self, i):
        """Return the index of the sublattice to which site `i` belongs."""
        return self._sublat_of[i]

    def sublat_index(self, name):
        """Return the index of the sublattice called `name`, or None."""
        return self._name_index.get(name)

    def vec(self, int_vec):
        """
        Return the coordinates of a Bravais lattice vector in real space.

        Parameters
        ----------
        int_vec : integer vector

        Returns
        -------
        output : real vector
        """
        int_vec = np.asarray(int_vec, int)
        if int_vec.shape != (self.lattice_dim,):
            raise ValueError("Dimensionality mismatch.")
        return ta.array(np.dot(int_vec, self._prim_vecs))

    def pos(self, i, dn=None):
        """Return the position of site `i` in the unit cell `dn`.

        ``dn=None`` stands for the home cell.
        """
        if dn is None:
            return self.sites[i]
        return self.sites[i] + self.vec(dn)


def general(prim_vecs, basis=None, name=''):
    """
    Create a lattice with one site per sublattice.

    Parameters
    ----------
    prim_vecs : 2d array-like of floats
        The primitive vectors of the Bravais lattice
    basis : 2d array-like of floats, optional
        The coordinates of the basis sites inside the unit cell.  Defaults to
        a single site at the origin.
    name : string or sequence of strings
        Name of the lattice, or sequence of names of all of the sublattices.
        If the name of the lattice is given and there is more than one basis
        site, the names of sublattices are obtained by appending their number
        to the name of the lattice.

    Returns
    -------
    lattice : `Lattice`
    """
    prim_vecs = np.array(prim_vecs, float)
    if basis is None:
        basis = np.zeros((1, prim_vecs.shape[-1]))
        if isinstance(name, str):
            name = [name]
    elif isinstance(name, str):
        name = [name + str(i) for i in range(len(basis))]
    name = list(name)
    if len(name) != len(basis):
        raise ValueError('Number of sublattice names is not the same as '
                         'the number of basis vectors.')
    return Lattice(prim_vecs, [(n, [pos]) for n, pos in zip(name, basis)])


################ Library of lattices

def chain(a=1, name='A'):
    """Make a one-dimensional lattice."""
    return general(((a,),), name=name)


def square(a=1, name='A'):
    """Make a square lattice."""
    return general(((a, 0), (0, a)), name=name)


def cubic(a=1, name='A'):
    """Make a cubic lattice."""
    return general(((a, 0, 0), (0, a, 0), (0, 0, a)), name=name)


tri = np.array(((1, 0), (0.5, 0.5 * sqrt(3))))

def triangular(a=1, name='A'):
    """Make a triangular lattice."""
    return general(a * tri, name=name)


def honeycomb(a=1, name=('A', 'B')):
    """Make a honeycomb lattice."""
    return general(a * tri, ((0, 0), (0, a / sqrt(3))), name=name)


def kagome(a=1, name=('A', 'B', 'C')):
    """Make a kagome lattice."""
    return general(a * tri, ((0, 0),) + tuple(0.5 * a * tri), name=name)
