### NNLS Block principal pivoting: Kim and Park et al 2011, Algorithm 1.

import torch

from ._problem import check_problem, initial_point
from typing import Tuple

# Number of non-improving exchanges tolerated before the backup rule kicks in.
PIVOT_PATIENCE = 3


def _exchange_set(V, alpha, beta):
    """
        Choose which infeasible variables to exchange between the passive and active sets.
        Return (V, alpha, beta).
    """
    n_infeasible = int(V.sum())
    if n_infeasible < beta:
        # Fewer infeasible variables than ever before: exchange the full block.
        return V, PIVOT_PATIENCE, n_infeasible

    if alpha >= 1:
        return V, alpha - 1, beta

    # Backup rule: exchange only the infeasible variable with the largest index.
    idx = torch.nonzero(V).flatten()
    if idx.numel() == 0:
        raise RuntimeError("Backup rule requires at least one infeasible variable, but V had no true values.")
    V = torch.zeros_like(V)
    V[idx[-1]] = True
    return V, alpha, beta


def _primal_dual(gram, Atb, P):
    x = torch.zeros_like(Atb)
    if P.any():
        x[P] = gram.solve(P, Atb)
    y = torch.zeros_like(Atb)
    y[~P] = gram.restricted_matvec(~P, P, x[P]) - Atb[~P]
    return x, y


def _infeasible(x, y, P, tol):
    return (P & (x < -tol)) | (~P & (y < -tol))


def pivot(AtA, Atb, tol=None, max_iter=None, x0=None) -> Tuple[torch.Tensor, int]:
    """
        min ||Ax-b||_2^2 s.t. x >= 0, given AtA = A.T @ A and Atb = A.T @ b.
        KKT conditions:
           1) y = AtA @ x - Atb
           2) y >= 0, x >= 0
           3) x * y = 0
        x lives on the passive set P and y on its complement.
        Return (x, niter); if niter < 0, pivot does not converge within max_iter (default 30 * k).
    """
    gram, Atb, tol, max_iter = check_problem(AtA, Atb, tol, max_iter)
    k = gram.shape[0]

    _, P = initial_point(x0, Atb, tol)
    x, y = _primal_dual(gram, Atb, P)

    alpha = PIVOT_PATIENCE
    beta = k + 1

    V = _infeasible(x, y, P, tol)
    n_iter = 0
    while V.any():
        if n_iter >= max_iter:
            return x, -n_iter
        n_iter += 1

        V, alpha, beta = _exchange_set(V, alpha, beta)

        # P & ~V leaves the passive set, V & ~P joins it.
        P = P ^ V

        x, y = _primal_dual(gram, Atb, P)
        V = _infeasible(x, y, P, tol)

    x[~P] = 0.0
    return x, n_iter
