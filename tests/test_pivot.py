import numpy as np
import pytest
import torch

from scipy.optimize import nnls as scipy_nnls
from nnls import pivot
from nnls.utils._pivot import PIVOT_PATIENCE, _exchange_set


def test_exchange_set_accepts_improvement():
    V = torch.tensor([True, False, True, True, False])
    V_new, alpha, beta = _exchange_set(V, 1, 6)
    assert torch.equal(V_new, V)
    assert alpha == PIVOT_PATIENCE
    assert beta == 3


def test_exchange_set_backup_rule_after_patience():
    V = torch.tensor([True, False, True, True, False])
    alpha, beta = PIVOT_PATIENCE, 3

    # Non-improving exchanges are tolerated PIVOT_PATIENCE times.
    for expected_alpha in range(PIVOT_PATIENCE - 1, -1, -1):
        V_new, alpha, beta = _exchange_set(V, alpha, beta)
        assert torch.equal(V_new, V)
        assert alpha == expected_alpha
        assert beta == 3

    # Then only the last infeasible index is exchanged.
    V_new, alpha, beta = _exchange_set(V, alpha, beta)
    assert V_new.tolist() == [False, False, False, True, False]
    assert alpha == 0
    assert beta == 3
    # The caller's mask is not modified.
    assert V.tolist() == [True, False, True, True, False]


def test_exchange_set_backup_rule_requires_infeasible_variable():
    V = torch.zeros(4, dtype=torch.bool)
    with pytest.raises(RuntimeError):
        _exchange_set(V, 0, 0)


def test_terminates_on_correlated_problems():
    rng = np.random.RandomState(7)
    for _ in range(20):
        # Strongly correlated columns lead to large infeasible sets at every exchange.
        A = rng.randn(50, 3) @ rng.randn(3, 25) + 0.3 * rng.randn(50, 25)
        b = rng.randn(50)
        AtA = torch.as_tensor(A.T @ A)
        Atb = torch.as_tensor(A.T @ b)

        x, n_iter = pivot(AtA, Atb)
        expected, _ = scipy_nnls(A, b)
        assert 0 <= n_iter <= 30 * 25
        np.testing.assert_allclose(x.numpy(), expected, atol=1e-6)


def test_backup_rule_is_used(monkeypatch):
    import nnls.utils._pivot as pivot_module

    calls = []

    def single_index_only(V, alpha, beta):
        # Force the backup rule on every exchange.
        V_new, alpha, beta = _exchange_set(V, 0, 0)
        calls.append(int(V_new.sum()))
        return V_new, alpha, beta

    monkeypatch.setattr(pivot_module, "_exchange_set", single_index_only)

    rng = np.random.RandomState(11)
    A = rng.randn(30, 10)
    b = rng.randn(30)
    x, n_iter = pivot(A.T @ A, A.T @ b)
    expected, _ = scipy_nnls(A, b)

    assert n_iter == len(calls) > 0
    assert set(calls) == {1}
    np.testing.assert_allclose(x.numpy(), expected, atol=1e-6)


def test_iteration_budget_is_reported():
    AtA = torch.tensor([[1.0, 0.9], [0.9, 1.0]], dtype=torch.double)
    Atb = torch.tensor([1.0, 0.5], dtype=torch.double)

    x, n_iter = pivot(AtA, Atb, max_iter=1)
    assert n_iter == -1
    x_full, n_iter = pivot(AtA, Atb, max_iter=2)
    assert n_iter == 2
    np.testing.assert_allclose(x_full.numpy(), [1.0, 0.0], atol=1e-12)


def test_dual_variables_on_active_set():
    AtA = torch.tensor([[2.0, 1.0, 0.0], [1.0, 2.0, 1.0], [0.0, 1.0, 2.0]], dtype=torch.double)
    Atb = torch.tensor([1.0, -4.0, 1.0], dtype=torch.double)
    x, n_iter = pivot(AtA, Atb)
    y = AtA @ x - Atb

    assert n_iter >= 0
    assert x[1] == 0
    assert y[1] >= 0
    np.testing.assert_allclose(x.numpy(), [0.5, 0.0, 0.5], atol=1e-12)
