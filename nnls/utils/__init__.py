from ._gram import GramBase, DenseGram, SparseGram, as_gram
from ._problem import default_tol
from ._fnnls import fnnls
from ._pivot import pivot
