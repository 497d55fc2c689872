import time

import numpy as np

from statmatrix import Matrix, SymmetricMatrix


def linear_r_matrix(n, variance=2.0, slope=0.2):
    """Covariance with linearly decaying correlation along a transect."""
    coords = np.arange(n, dtype=float)
    dist = np.abs(coords[:, None] - coords[None, :])
    corr = np.clip(1.0 - slope * dist, 0.0, None)
    return SymmetricMatrix.from_array(variance * corr)


def block_diagonal(n_blocks, size, seed=0):
    rng = np.random.default_rng(seed)
    out = None
    for _ in range(n_blocks):
        A = rng.standard_normal((size, size))
        block = SymmetricMatrix.from_array(A @ A.T + size * np.eye(size))
        out = block if out is None else out.diag_block(block)
    return out


def residual(m, inv):
    return float(np.max(np.abs(m.multiply(inv).to_array() - np.eye(m.rows))))


def main():
    S = block_diagonal(n_blocks=6, size=5)
    dense = Matrix.from_array(S.to_array())

    t0 = time.time()
    inv_blocks = S.inverse()
    sec_b = time.time() - t0

    # same values, but a non-symmetric perturbation forces a single block
    perturbed = dense.clone()
    perturbed.set(0, 1, perturbed.get(0, 1) * (1.0 + 1e-3))
    t0 = time.time()
    inv_single = perturbed.inverse()
    sec_s = time.time() - t0

    print("=== Block-diagonal vs single-block inversion ===")
    print(f"n={S.rows}  blocks={len(S.block_configuration())}")
    print(f"blocks: sec={sec_b:.4f}  max|M M^-1 - I|={residual(S, inv_blocks):.2e}")
    print(f"single: sec={sec_s:.4f}  max|M M^-1 - I|={residual(perturbed, inv_single):.2e}")

    R = linear_r_matrix(20)
    print(f"R-matrix 20x20: blocks={len(R.block_configuration())}  "
          f"max|R R^-1 - I|={residual(R, R.inverse()):.2e}")


if __name__ == "__main__":
    main()
