# Copyright 2011-2026 tbmodel authors.
#
# This file is part of tbmodel.  It is subject to the license terms in the file
# LICENSE.rst found in the top-level directory of this distribution.  A list of
# tbmodel authors can be found in the file AUTHORS.rst at the top-level
# directory of this distribution.

import warnings

import numpy as np
import tinyarray as ta
import pytest
from pytest import raises, warns

from tbmodel import (lattice, Any, Model, onsite_term, hopping_term,
                     only_onsite_terms, only_hopping_terms, off_diagonal,
                     make_onsite_selector, make_hopping_selector, resolve,
                     UserCodeError, InvalidSelectorSpec, InvalidModelStructure,
                     InvalidGroupSpec)
from tbmodel.model import OnsiteTerm, HoppingTerm
from tbmodel.selector import RANGE_TOLERANCE, ResolvedHoppingSelector


sigma_y = np.array([[0, -1j], [1j, 0]])


def sample_model():
    return (onsite_term(lambda r: r[0] + 2, sublats='A')
            + hopping_term(lambda r, dr: 3 * dr[0] + 1j)
            - onsite_term(sigma_y, force_hermitian=False))


def test_evaluation():
    assert onsite_term(2)(ta.array((0, 0))) == 2
    assert onsite_term(lambda r: r[1])(ta.array((1, 5))) == 5
    assert hopping_term(lambda r, dr: dr[0] * r[0])((2,), (3,)) == 6
    np.testing.assert_array_equal(hopping_term(sigma_y)((0,), (1,)), sigma_y)

    # Terms are summed irrespective of their selectors.
    model = onsite_term(1, sublats='A') + onsite_term(2, sublats='B')
    assert model((0,)) == 3
    assert Model()((0,)) == 0


@pytest.mark.parametrize("a", [2, -0.5, 1j])
def test_scalar_distributivity(a):
    model = sample_model()
    r, dr = ta.array((0.5, 1)), ta.array((1, 0))
    expected = a * ((2.5 + 3 + 1j) - sigma_y)
    np.testing.assert_allclose((a * model)(r, dr), expected)
    np.testing.assert_allclose((model * a)(r, dr), expected)
    np.testing.assert_allclose((a * model)(r, dr), a * model(r, dr))


def test_additive_inverse():
    model = sample_model()
    r, dr = ta.array((0.3, -1)), ta.array((0, 1))
    np.testing.assert_allclose((model + (-model))(r, dr), np.zeros((2, 2)))
    np.testing.assert_allclose((model - model)(r, dr), np.zeros((2, 2)))
    assert len(model - model) == 2 * len(model)


def test_algebra_structure():
    on = onsite_term(1)
    hop = hopping_term(2)
    model = on + 2 * hop
    assert len(model) == 2
    assert [type(t) for t in model] == [OnsiteTerm, HoppingTerm]
    assert [t.coefficient for t in model] == [1, 2]

    model = on - hop
    assert [t.coefficient for t in model] == [1, -1]
    model = (hop - on) * 1j
    assert [t.coefficient for t in model] == [1j, -1j]
    assert [t.coefficient for t in -model] == [-1j, 1j]

    term, = hop
    assert len(on + term) == 2
    assert len(term + on) == 2
    assert [t.coefficient for t in term - on] == [1, -1]
    assert (3 * term).coefficient == 3
    assert (-term).coefficient == -1

    # Terms are immutable: arithmetic never touches the operands.
    assert [t.coefficient for t in on] == [1]
    assert term.coefficient == 1

    with raises(TypeError):
        on + 1
    with raises(TypeError):
        on * on
    with raises(TypeError):
        Model(1)


def test_is_hermitian():
    assert (onsite_term(1) + hopping_term(1)).is_hermitian()
    assert Model().is_hermitian()
    assert not sample_model().is_hermitian()
    assert not hopping_term(1, force_hermitian=False).is_hermitian()


def test_builders():
    model = onsite_term(1, sublats=('A', 'B'))
    term, = model
    assert term.selector == make_onsite_selector(sublats=('A', 'B'))
    term, = hopping_term(1)
    assert term.selector.range == 1 + RANGE_TOLERANCE

    sel = make_hopping_selector(sublats='A->B')
    term, = hopping_term(1, sel)
    assert term.selector is sel

    raises(InvalidSelectorSpec, onsite_term, 1, make_hopping_selector())
    raises(InvalidSelectorSpec, hopping_term, 1, make_onsite_selector())
    raises(TypeError, onsite_term, 1, make_onsite_selector(), sublats='A')
    raises(InvalidSelectorSpec, hopping_term, 1, sublats=3)


def test_user_errors():
    def broken(r):
        return 1 / 0

    model = onsite_term(broken)
    with raises(UserCodeError) as exc_info:
        model((0,))
    assert isinstance(exc_info.value.__cause__, ZeroDivisionError)
    assert 'broken' in str(exc_info.value)

    with raises(UserCodeError):
        hopping_term(lambda r: r)((0,), (1,))


def test_only_terms():
    model = (onsite_term(1, sublats='A') + hopping_term(2, range=2)
             + onsite_term(3, force_hermitian=False)
             + hopping_term(4, sublats='A->B', dn=(1, 0)))

    onsite = only_onsite_terms(model)
    assert [t.value for t in onsite] == [1, 3]
    assert [t.selector.sublats for t in onsite] == [('A',), Any]
    # `force_hermitian` is always overridden.
    assert onsite.is_hermitian()

    onsite = only_onsite_terms(model, sublats='B', force_hermitian=False)
    assert [t.selector.sublats for t in onsite] == [('B',), ('B',)]
    assert not any(t.is_hermitian() for t in onsite)

    hopping = only_hopping_terms(model)
    assert [t.value for t in hopping] == [2, 4]
    assert ([t.selector.range for t in hopping]
            == [2 + RANGE_TOLERANCE, 1 + RANGE_TOLERANCE])
    assert [t.selector.sublats for t in hopping] == [Any, (('B', 'A'),)]

    hopping = only_hopping_terms(model, range=3, dn=(0, 1))
    for term in hopping:
        assert term.selector.range == 3 + RANGE_TOLERANCE
        assert term.selector.dns == (ta.array((0, 1)),)

    hopping = only_hopping_terms(model,
                                 make_hopping_selector(sublats='B->A',
                                                       range=Any))
    assert [t.selector.sublats for t in hopping] == [(('A', 'B'),)] * 2
    assert [t.selector.range for t in hopping] == [2 + RANGE_TOLERANCE,
                                                   1 + RANGE_TOLERANCE]

    # The original model is untouched.
    assert len(model) == 4
    assert [t.selector.sublats for t in model][:2] == [('A',), Any]

    assert len(only_hopping_terms(onsite_term(1))) == 0

    # Without an override, `force_hermitian` is reset to True.
    model = hopping_term(1, force_hermitian=False)
    assert not model.is_hermitian()
    assert only_hopping_terms(model).is_hermitian()
    assert not only_hopping_terms(model, force_hermitian=False).is_hermitian()
    raises(InvalidSelectorSpec, only_onsite_terms, model,
           make_hopping_selector())


def test_resolve_model():
    lat = lattice.honeycomb()
    model = onsite_term(1, sublats='B') + hopping_term(1, sublats='A->B')
    resolved = resolve(model, lat)
    assert all(t.selector.is_resolved for t in resolved)
    assert [t.selector.sublats for t in resolved] == [(1,), ((1, 0),)]
    assert not any(t.selector.is_resolved for t in model)
    assert all(a is b for a, b in zip(resolve(resolved, lat), resolved))


def test_str():
    model = (onsite_term(1, sublats='A')
             + hopping_term(lambda r, dr: 1, sublats='A->B', dn=(1, 0)))
    text = str(model)
    assert text.startswith('Model: model with 2 terms')
    assert 'OnsiteTerm{int}' in text
    assert 'HoppingTerm{Function}' in text
    assert "('A->B',)" in text
    assert '((1, 0),)' in text
    assert 'Hopping range    : 1.0' in text
    assert str(onsite_term(1)).startswith('Model: model with 1 term\n')
    assert 'any' in str(hopping_term(1, range=Any))

    text = str(resolve(hopping_term(1, sublats='A->B'), lattice.honeycomb()))
    assert '((1, 0),)' in text


################ Off-diagonal restriction

def test_off_diagonal():
    lat = lattice.kagome()
    model = hopping_term(1, range=0.5) + hopping_term(2, sublats='B->A')
    result = off_diagonal(model, lat, (1, 2))
    assert len(result) == 2
    first, second = result
    assert first.selector.sublats == ((0, 1), (0, 2), (1, 0), (2, 0))
    assert second.selector.sublats == ((0, 1),)
    assert first.value == 1
    assert isinstance(first.selector, ResolvedHoppingSelector)
    assert first.selector.range == 0.5 + RANGE_TOLERANCE

    # Closure: every remaining pair couples different groups.
    groups = [0, 1, 1]
    for term in result:
        for row, col in term.selector.sublats:
            assert groups[row] != groups[col]

    # Applying the restriction again changes nothing.
    again = off_diagonal(result, lat, (1, 2))
    assert [t.selector for t in again] == [t.selector for t in result]

    # Membership follows the filtered pairs.
    sel = first.selector
    assert sel(1, 0)
    assert sel(0, 2)
    assert not sel(1, 2)
    assert not sel(2, 1)

    # A single group leaves nothing, several singleton groups leave all
    # pairs between different sublattices.
    with warns(RuntimeWarning):
        off_diagonal(hopping_term(1), lat, (3,))
    result = off_diagonal(hopping_term(1), lat, (1, 1, 1))
    term, = result
    assert term.selector.sublats == ((0, 1), (0, 2), (1, 0), (1, 2),
                                     (2, 0), (2, 1))

    # Zero-sized groups are allowed.
    term, = off_diagonal(hopping_term(1), lat, (0, 1, 2))
    assert term.selector.sublats == first.selector.sublats


def test_off_diagonal_errors():
    lat = lattice.kagome()
    with raises(InvalidModelStructure):
        off_diagonal(hopping_term(1) + onsite_term(1), lat, (1, 2))
    # Validation happens before any work.
    with raises(InvalidModelStructure):
        off_diagonal(onsite_term(1) + hopping_term(1), lat, (1, 1))

    for sizes in [(1, 1), (-1, 4), (1.5, 1.5), 3, (1, 1, 1, 0, 1)]:
        with raises(InvalidGroupSpec):
            off_diagonal(hopping_term(1), lat, sizes)

    # Terms bound to a lattice with more sublattices.
    model = resolve(hopping_term(1), lat)
    with raises(InvalidSelectorSpec):
        off_diagonal(model, lattice.honeycomb(), (1, 1))
    model = resolve(hopping_term(1, sublats='A->B'), lat)
    term, = off_diagonal(model, lattice.honeycomb(), (1, 1))
    assert term.selector.sublats == ((1, 0),)


def test_off_diagonal_warning():
    lat = lattice.kagome()
    with warns(RuntimeWarning):
        result = off_diagonal(hopping_term(1, sublats=('B', 'C')), lat,
                              (1, 2))
    term, = result
    assert term.selector.sublats == ()

    with warnings.catch_warnings():
        warnings.simplefilter('error')
        off_diagonal(hopping_term(1, sublats='A->B'), lat, (1, 2))
        off_diagonal(Model(), lat, (1, 2))
