import numpy as np
import nnls
import time
import torch

from scipy.optimize import nnls as scipy_nnls
from scipy.sparse import csr_matrix
from termcolor import cprint


def residual(A, B, X):
    return np.linalg.norm(A @ X - B)


def run_test(m, k, n, density=1.0, alg='pivot', random_state=0, use_parallel=True):
    rng = np.random.RandomState(random_state)
    A = rng.randn(m, k)
    if density < 1.0:
        A[rng.rand(m, k) > density] = 0.0
    B = A @ np.abs(rng.randn(k, n)) + 0.5 * rng.randn(m, n)
    print((m, k, n))

    cprint("Scipy:", 'green')
    ts_start = time.time()
    X1 = np.stack([scipy_nnls(A, B[:, i])[0] for i in range(n)], axis=1)
    ts_end = time.time()
    print(f"Scipy uses {ts_end - ts_start} s, with residual {residual(A, B, X1)}.")
    print(f"X has {np.sum(X1!=0)} non-zero elements.")

    cprint(f"NNLS-torch {alg}:", 'green')
    ts_start = time.time()
    X2 = nnls.nonneg_lsq(csr_matrix(A) if density < 1.0 else A, B, alg=alg, use_parallel=use_parallel)
    ts_end = time.time()
    print(f"NNLS-torch uses {ts_end - ts_start} s, with residual {residual(A, B, X2)}.")
    print(f"X has {np.sum(X2!=0)} non-zero elements, max difference to Scipy is {np.abs(X1 - X2).max()}.")


def run_small_example():
    A = np.array([
        [-0.24, -0.82, 1.35, 0.36, 0.35],
        [-0.53, -0.20, -0.76, 0.98, -0.54],
        [0.22, 1.25, -1.60, -1.37, -1.94],
        [-0.51, -0.56, -0.08, 0.96, 0.46],
        [0.48, -2.25, 0.38, 0.06, -1.29],
    ])
    b = np.array([-1.6, 0.19, 0.17, 0.31, -1.27])
    AtA = torch.tensor(A.T @ A)
    Atb = torch.tensor(A.T @ b)

    for solver in [nnls.fnnls, nnls.pivot]:
        x, n_iter = solver(AtA, Atb)
        print(f"{solver.__name__}: x={x.numpy().round(3)}, n_iter={n_iter}.")


if __name__ == '__main__':
    cprint("Test 1:", 'yellow')
    run_small_example()

    cprint("Test 2:", 'yellow')
    run_test(2000, 200, 50, alg='fnnls')
    run_test(2000, 200, 50, alg='pivot')

    cprint("Test 3:", 'yellow')
    run_test(2000, 200, 50, density=0.1, alg='pivot')
