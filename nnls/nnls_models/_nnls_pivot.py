import torch

from ._nnls_base import NNLSBase
from ..utils import pivot
from typing import Optional, Union


class NNLSPivot(NNLSBase):
    def __init__(
        self,
        tol: Optional[float] = None,
        max_iter: Optional[int] = None,
        fp_precision: Union[str, torch.dtype] = 'double',
        n_jobs: int = -1,
        use_parallel: bool = True,
    ):
        super().__init__(
            tol=tol,
            max_iter=max_iter,
            fp_precision=fp_precision,
            n_jobs=n_jobs,
            use_parallel=use_parallel,
        )


    def _solve_column(self, gram, atb, x0):
        return pivot(gram, atb, tol=self._tol, max_iter=self._max_iter, x0=x0)
