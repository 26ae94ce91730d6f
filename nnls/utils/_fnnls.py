### Fast NNLS: Bro and De Jong 1997.

import torch

from ._problem import check_problem, initial_point
from typing import Tuple


def _passive_solution(gram, Atb, P):
    s = torch.zeros_like(Atb)
    s[P] = gram.solve(P, Atb)
    return s


def _shrink_passive_set(gram, Atb, x, P, tol, n_iter, max_iter):
    """
        Inner loop: step from the feasible x towards the passive solution s until s[P] > tol,
        moving every x_i that reaches zero back to the active set.
        Return (x, P, niter, finished); finished is False if the budget ran out first.
    """
    s = _passive_solution(gram, Atb, P)
    while (s[P] <= tol).any():
        if n_iter >= max_iter:
            x[~P] = 0.0
            return x, P, n_iter, False
        n_iter += 1

        ind = (s <= tol) & P
        if not ind.any():
            raise RuntimeError("fnnls found no infeasible passive variable to step towards.")

        # Largest step keeping x >= 0; x_i == s_i does not bound the step.
        diff = x[ind] - s[ind]
        ratio = torch.where(diff > 0, x[ind] / diff, torch.ones_like(diff))
        alpha = ratio.min().clamp(0.0, 1.0)
        x = x + alpha * (s - x)

        P = P & (x.abs() >= tol)
        s = _passive_solution(gram, Atb, P)

    return s, P, n_iter, True


def fnnls(AtA, Atb, tol=None, max_iter=None, x0=None) -> Tuple[torch.Tensor, int]:
    """
        min ||Ax-b||_2^2 s.t. x >= 0, given AtA = A.T @ A and Atb = A.T @ b.
        Optimal when either
           1) all elements of x are in the passive set, or
           2) w = Atb - AtA @ x <= tol for every element in the active set.
        Both outer and inner iterations count against max_iter (default 30 * k).
        Return (x, niter); if niter < 0, fnnls does not converge.
    """
    gram, Atb, tol, max_iter = check_problem(AtA, Atb, tol, max_iter)

    x, P = initial_point(x0, Atb, tol)
    n_iter = 0
    finished = True
    if P.any():
        x, P, n_iter, finished = _shrink_passive_set(gram, Atb, x, P, tol, n_iter, max_iter)
    w = Atb - gram.matvec(x)

    while finished and not P.all() and (w[~P] > tol).any() and n_iter < max_iter:
        n_iter += 1

        # Move the most violating active variable to P.
        i = torch.argmax(w.masked_fill(P, -float('inf')))
        P[i] = True

        x, P, n_iter, finished = _shrink_passive_set(gram, Atb, x, P, tol, n_iter, max_iter)
        w = Atb - gram.matvec(x)

    converged = finished and (bool(P.all()) or not bool((w[~P] > tol).any()))
    return x, (n_iter if converged else -n_iter)
