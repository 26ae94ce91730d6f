from .nnls import nonneg_lsq
from .nnls_models import NNLSFnnls, NNLSPivot
from .utils import fnnls, pivot

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version('nnls-torch')
    del version
except PackageNotFoundError:
    pass
