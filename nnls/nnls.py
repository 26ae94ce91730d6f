import numpy as np
import scipy.sparse as sp
import torch
from typing import Optional, Union

from .nnls_models import NNLSFnnls, NNLSPivot

def nonneg_lsq(
    A: Union[np.array, torch.tensor, sp.spmatrix],
    B: Union[np.array, torch.tensor],
    alg: str = "pivot",
    gram: bool = False,
    use_parallel: bool = True,
    tol: Optional[float] = None,
    max_iter: Optional[int] = None,
    n_jobs: int = -1,
    fp_precision: Union[str, torch.dtype] = "double",
    X0: Optional[Union[np.array, torch.tensor]] = None,
) -> np.array:
    """
    Solve the Non-negative Least Squares (NNLS) problem.

    Find X with non-negative entries that best fits B by a linear combination of the columns of A.
    It is useful for spectral unmixing, the subproblems of non-negative matrix factorization, and any regression whose coefficients must not be negative.

    The objective function is

        .. math::

            \\min_{X \\geq 0} ||AX - B||_{Fro}^2

    where

    :math:`||A||_{Fro}^2 = \\sum_{i, j} A_{ij}^2` (Frobenius norm)

    A^T A and A^T B are computed once; then every column of B is solved as an independent problem by the active-set solver specified in ``alg``.

    Parameters
    ----------

    A: ``numpy.array``, ``torch.tensor`` or ``scipy.sparse`` matrix
        The design matrix of shape (n_samples, n_features). If ``gram`` is ``True``, the cross-product matrix A^T A of shape (n_features, n_features).
    B: ``numpy.array`` or ``torch.tensor``
        The target of shape (n_samples,) or (n_samples, n_targets). If ``gram`` is ``True``, the cross-product A^T B of shape (n_features,) or (n_features, n_targets).
    alg: ``str``, optional, default: ``pivot``
        Choose from ``fnnls`` (Fast NNLS of Bro and De Jong) and ``pivot`` (Block Principal Pivoting of Kim and Park). ``pivot_cache`` is an alias of ``pivot``.
    gram: ``bool``, optional, default: ``False``
        If ``True``, A and B are treated as the precomputed cross-products A^T A and A^T B.
    use_parallel: ``bool``, optional, default: ``True``
        If ``True``, solve the columns of B in a pool of threads when there is more than one column and more than one worker.
    tol: ``float``, optional, default: ``None``
        Tolerance for the non-negativity constraints. If ``None``, use ``10^floor(log10(sqrt(eps)))`` of the floating point precision, i.e. ``1e-8`` for double and ``1e-4`` for float.
    max_iter: ``int``, optional, default: ``None``
        The maximum number of iterations per column. If ``None``, use 30 times n_features.
    n_jobs: ``int``, optional, default: ``-1``
        Number of threads to use. If -1, use all available CPUs for the column pool and PyTorch's default setting otherwise.
    fp_precision: ``str``, optional, default: ``double``
        The numeric precision on the results.
        If ``float``, set precision to ``torch.float``; if ``double``, set precision to ``torch.double``.
        Alternatively, choose Pytorch's `torch dtype <https://pytorch.org/docs/stable/tensor_attributes.html>`_ of your own.
    X0: ``numpy.array`` or ``torch.tensor``, optional, default: ``None``
        Warm start of shape (n_features,) or (n_features, n_targets). Entries above ``tol`` form the initial passive set.

    Returns
    -------
    X: ``numpy.array``
        The non-negative solution of shape (n_features,) if B is a vector, or (n_features, n_targets) otherwise. Column i of X solves column i of B.

    Examples
    --------
    >>> X = nonneg_lsq(A, B)
    >>> X = nonneg_lsq(A.T @ A, A.T @ B, alg='fnnls', gram=True)
    """
    if alg not in {'fnnls', 'pivot', 'pivot_cache'}:
        raise ValueError("Parameter alg must be a valid value from ['fnnls', 'pivot', 'pivot_cache']!")

    model_class = NNLSFnnls if alg == 'fnnls' else NNLSPivot

    model = model_class(
                tol=tol,
                max_iter=max_iter,
                fp_precision=fp_precision,
                n_jobs=n_jobs,
                use_parallel=use_parallel,
            )

    X = model.fit_transform(A, B, gram=gram, X0=X0)

    return X.cpu().numpy()
