import numpy
import torch
import scipy.sparse as sp

from joblib import Parallel, delayed, effective_n_jobs
from ..utils import as_gram
from typing import Optional, Union


class NNLSBase:
    def __init__(
        self,
        tol: Optional[float],
        max_iter: Optional[int],
        fp_precision: Union[str, torch.dtype],
        n_jobs: int,
        use_parallel: bool,
    ):
        if fp_precision == 'float':
            self._tensor_dtype = torch.float
        elif fp_precision == 'double':
            self._tensor_dtype = torch.double
        elif isinstance(fp_precision, torch.dtype) and fp_precision.is_floating_point:
            self._tensor_dtype = fp_precision
        else:
            raise ValueError(f"Invalid fp_precision parameter. Got {fp_precision}, but require one of ('float', 'double') or a floating point torch.dtype.")

        self._tol = tol
        self._max_iter = max_iter
        self._n_jobs = n_jobs
        self._use_parallel = use_parallel

        if n_jobs > 0:
            torch.set_num_threads(n_jobs)


    def _solve_column(self, gram, atb, x0): # not defined here
        return None


    def _cast_tensor(self, X):
        if sp.issparse(X):
            X = X.toarray()
        if not isinstance(X, torch.Tensor):
            if isinstance(X, numpy.ndarray) and ((self._tensor_dtype == torch.float32 and X.dtype == numpy.float32) or (self._tensor_dtype == torch.double and X.dtype == numpy.float64)):
                X = torch.from_numpy(X)
            else:
                X = torch.tensor(numpy.asarray(X), dtype=self._tensor_dtype)
        else:
            if X.layout != torch.strided:
                X = X.to_dense()
            if X.dtype != self._tensor_dtype:
                X = X.type(self._tensor_dtype)
        return X


    def _cross_products(self, A, B, gram):
        """
            Return (AtA, AtB). AtA stays sparse if A is sparse.
        """
        if gram:
            is_sparse = sp.issparse(A) or (isinstance(A, torch.Tensor) and A.layout != torch.strided)
            AtA = A if is_sparse else self._cast_tensor(A)
            AtB = self._cast_tensor(B)
        elif sp.issparse(A):
            AtA = (A.T @ A).tocsc()
            AtB = self._cast_tensor(numpy.asarray(A.T @ self._cast_tensor(B).numpy()))
        else:
            A = self._cast_tensor(A)
            B = self._cast_tensor(B)
            AtA = A.T @ A
            AtB = A.T @ B
        return AtA, AtB


    def _check_shapes(self, A, B, gram):
        if len(A.shape) != 2:
            raise ValueError(f"A must be a matrix. Got shape {tuple(A.shape)}.")
        if gram and A.shape[0] != A.shape[1]:
            raise ValueError("When gram=True, A must be a square matrix.")
        if A.shape[0] != B.shape[0]:
            raise ValueError(f"Incompatible shapes: A has {A.shape[0]} rows, B has {B.shape[0]} rows.")


    def fit(
        self,
        A: Union[numpy.ndarray, torch.tensor, sp.spmatrix],
        B: Union[numpy.ndarray, torch.tensor],
        gram: bool = False,
        X0: Optional[Union[numpy.ndarray, torch.tensor]] = None,
    ):
        if not (sp.issparse(A) or isinstance(A, torch.Tensor)):
            A = numpy.asarray(A)
        if sp.issparse(B):
            B = B.toarray()
        elif not isinstance(B, torch.Tensor):
            B = numpy.asarray(B)
        self._vector_input = len(B.shape) == 1
        if self._vector_input:
            B = B.reshape(-1, 1)
        self._check_shapes(A, B, gram)

        AtA, AtB = self._cross_products(A, B, gram)
        # Wrapped once and shared read-only by every column.
        gram_mat = as_gram(AtA, self._tensor_dtype)
        k, n = gram_mat.shape[0], AtB.shape[1]

        if X0 is not None:
            X0 = self._cast_tensor(X0).reshape(k, -1)
            if X0.shape[1] != n:
                raise ValueError(f"X0 must have {n} column(s). Got {X0.shape[1]}.")

        def solve(i):
            return self._solve_column(gram_mat, AtB[:, i], None if X0 is None else X0[:, i])

        if self._use_parallel and n > 1 and effective_n_jobs(self._n_jobs) > 1:
            results = Parallel(n_jobs=self._n_jobs, prefer='threads')(delayed(solve)(i) for i in range(n))
        else:
            results = [solve(i) for i in range(n)]

        if n > 0:
            self.X = torch.stack([x for x, _ in results], dim=1)
        else:
            self.X = torch.zeros((k, 0), dtype=self._tensor_dtype)
        self.n_iters = [n_iter for _, n_iter in results]
        self.converged = all(n_iter >= 0 for n_iter in self.n_iters)

        if not self.converged:
            failed = [i for i, n_iter in enumerate(self.n_iters) if n_iter < 0]
            print(f"    Not converged for {len(failed)} of {n} column(s): {failed}. Returning the last iterate.")


    def fit_transform(self, A, B, gram=False, X0=None):
        self.fit(A, B, gram=gram, X0=X0)
        return self.X[:, 0] if self._vector_input else self.X
