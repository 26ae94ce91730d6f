import numpy as np
import torch

from ._gram import GramBase, as_gram


def default_tol(dtype: torch.dtype) -> float:
    # 1e-8 for double, 1e-4 for float.
    if dtype.is_floating_point:
        return float(10.0 ** np.floor(np.log10(np.sqrt(torch.finfo(dtype).eps))))
    return 1e-8


def check_problem(AtA, Atb, tol, max_iter):
    """
        Validate a single right-hand-side problem and fill in the default tol and max_iter.
        Return (gram, Atb, tol, max_iter) with Atb cast to the dtype of gram.
    """
    if isinstance(AtA, GramBase):
        dtype = AtA.dtype
    elif isinstance(Atb, torch.Tensor) and Atb.dtype.is_floating_point:
        dtype = Atb.dtype
    else:
        dtype = torch.double

    gram = as_gram(AtA, dtype)
    Atb = torch.as_tensor(Atb).to(dtype=gram.dtype).flatten()

    k = gram.shape[0]
    if Atb.shape[0] != k:
        raise ValueError(f"Atb must have length {k} to match AtA. Got length {Atb.shape[0]}.")
    if not (gram.is_finite() and bool(torch.isfinite(Atb).all())):
        raise ValueError("AtA and Atb must contain only finite values.")

    if tol is None:
        tol = default_tol(gram.dtype)
    if max_iter is None:
        max_iter = 30 * max(k, 1)
    if max_iter < 1:
        raise ValueError(f"max_iter must be a positive integer. Got {max_iter}.")

    return gram, Atb, tol, max_iter


def initial_point(x0, Atb, tol):
    """
        Starting primal vector and passive set for a warm start.
        Negative entries of x0 are clipped; entries <= tol start in the active set.
    """
    if x0 is None:
        x = torch.zeros_like(Atb)
    else:
        x = torch.as_tensor(x0).to(dtype=Atb.dtype).flatten().clamp(min=0.0)
        if x.shape != Atb.shape:
            raise ValueError(f"x0 must have length {Atb.shape[0]}. Got length {x.shape[0]}.")
    P = x > tol
    x[~P] = 0.0
    return x, P
