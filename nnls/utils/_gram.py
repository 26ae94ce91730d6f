### Cross-product (Gram) matrices and the restricted least-squares solve on a passive set.

import numpy as np
import torch
import scipy.sparse as sp

from scipy.sparse.linalg import splu
from typing import Union


class GramBase:
    """
        Read-only wrapper around AtA = A.T @ A.
        Subclasses provide:
           1) solve(P, Atb): unconstrained solution of AtA[P, P] @ z = Atb[P]
           2) restricted_matvec(rows, cols, v): AtA[rows, cols] @ v
           3) matvec(x): AtA @ x
    """
    def __init__(self, dtype: torch.dtype):
        self.dtype = dtype


    @property
    def shape(self):
        return self._shape


    def solve(self, P, Atb):
        return None


    def restricted_matvec(self, rows, cols, v):
        return None


    def matvec(self, x):
        return None


    def is_finite(self):
        return True


class DenseGram(GramBase):
    def __init__(self, AtA: torch.Tensor, dtype: torch.dtype):
        super().__init__(dtype)
        self._AtA = AtA.to(dtype=dtype)
        self._shape = tuple(self._AtA.shape)


    def solve(self, P, Atb):
        if not P.any():
            return Atb.new_zeros(0)
        # Passive blocks may be rank deficient.
        return torch.linalg.pinv(self._AtA[P][:, P]) @ Atb[P]


    def restricted_matvec(self, rows, cols, v):
        return self._AtA[rows][:, cols] @ v


    def matvec(self, x):
        return self._AtA @ x


    def is_finite(self):
        return bool(torch.isfinite(self._AtA).all())


class SparseGram(GramBase):
    def __init__(self, AtA, dtype: torch.dtype):
        super().__init__(dtype)
        np_dtype = np.float32 if dtype == torch.float32 else np.float64
        self._AtA = sp.csc_matrix(AtA, dtype=np_dtype)
        self._shape = self._AtA.shape


    def _to_numpy(self, t):
        return t.detach().cpu().numpy()


    def _to_tensor(self, a):
        return torch.as_tensor(np.asarray(a).ravel(), dtype=self.dtype)


    def solve(self, P, Atb):
        idx = np.flatnonzero(self._to_numpy(P))
        if idx.size == 0:
            return Atb.new_zeros(0)

        block = self._AtA[idx][:, idx].tocsc()
        rhs = self._to_numpy(Atb)[idx]
        try:
            z = splu(block).solve(rhs)
        except RuntimeError:
            # splu refuses exactly singular blocks.
            z = np.linalg.pinv(block.toarray()) @ rhs
        return self._to_tensor(z)


    def restricted_matvec(self, rows, cols, v):
        rows = np.flatnonzero(self._to_numpy(rows))
        cols = np.flatnonzero(self._to_numpy(cols))
        return self._to_tensor(self._AtA[rows][:, cols] @ self._to_numpy(v))


    def matvec(self, x):
        return self._to_tensor(self._AtA @ self._to_numpy(x))


    def is_finite(self):
        return bool(np.isfinite(self._AtA.data).all())


def _torch_sparse_to_scipy(AtA: torch.Tensor):
    AtA = AtA.coalesce()
    rows, cols = AtA.indices().cpu().numpy()
    return sp.csc_matrix((AtA.values().cpu().numpy(), (rows, cols)), shape=tuple(AtA.shape))


def as_gram(
    AtA: Union[GramBase, np.ndarray, torch.Tensor, sp.spmatrix],
    dtype: torch.dtype = torch.double,
) -> GramBase:
    """
        Wrap AtA into the dense or sparse implementation, depending on its storage.
        An existing GramBase is returned unchanged.
    """
    if isinstance(AtA, GramBase):
        return AtA

    if sp.issparse(AtA):
        gram = SparseGram(AtA, dtype)
    elif isinstance(AtA, torch.Tensor) and AtA.layout != torch.strided:
        gram = SparseGram(_torch_sparse_to_scipy(AtA), dtype)
    else:
        gram = DenseGram(torch.as_tensor(AtA), dtype)

    if len(gram.shape) != 2 or gram.shape[0] != gram.shape[1]:
        raise ValueError(f"AtA must be a square matrix. Got shape {tuple(gram.shape)}.")
    return gram
