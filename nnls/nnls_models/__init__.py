from ._nnls_fnnls import NNLSFnnls
from ._nnls_pivot import NNLSPivot
