"""
Lenia kernel and growth functions.

Both are pure and accept scalars or numpy arrays:

- kernel(r): sum of Gaussian rings centred at (i + 0.5) / N, zero for r >= 1
- growth(u): Gaussian bump mapped to [-1, 1], exactly 1 at u = mu

Reference: Bert Chan, "Lenia - Biology of Artificial Life" (2019)
"""

import numpy as np

from .config import GROWTH_SIGMA_FLOOR, KERNEL_SIGMA_FLOOR, MAX_KERNEL_RADIUS


def _scalar_or_array(x):
    return float(x) if np.ndim(x) == 0 else x


def bell(x, center, width):
    """Gaussian bell curve"""
    return np.exp(-0.5 * ((x - center) / width) ** 2)


def kernel(r, ring_count, beta, kernel_sigma):
    """Kernel weight at normalized radius ``r``.

    Args:
        r: Distance divided by the kernel radius R (scalar or array)
        ring_count: Number of concentric rings N
        beta: Ring heights; entries past the end of the list weigh 0
        kernel_sigma: Ring width, floored at KERNEL_SIGMA_FLOOR

    Returns:
        Non-negative weight(s), 0 wherever r >= 1
    """
    r = np.asarray(r, dtype=np.float64)
    ks = max(kernel_sigma, KERNEL_SIGMA_FLOOR)
    total = np.zeros_like(r)
    for i in range(min(ring_count, len(beta))):
        total += beta[i] * bell(r, (i + 0.5) / ring_count, ks)
    total = np.where(r >= 1.0, 0.0, total)
    return _scalar_or_array(total)


def growth(u, mu, sigma):
    """Growth mapping: neighbourhood potential -> growth rate in [-1, 1]"""
    s = max(sigma, GROWTH_SIGMA_FLOOR)
    return _scalar_or_array(2.0 * bell(np.asarray(u, dtype=np.float64), mu, s) - 1.0)


def kernel_radius_cap(R, max_radius=MAX_KERNEL_RADIUS):
    """Integer half-width of the offset window actually sampled."""
    return int(min(R, max_radius))


def build_kernel_table(R, beta, kernel_sigma, max_radius=MAX_KERNEL_RADIUS):
    """Offset -> weight table for a parameter set.

    The window is (2 * iR + 1) square with iR = min(R, max_radius), but
    distances are still normalized by the uncapped R, so a kernel wider
    than the cap is truncated rather than shrunk.

    Returns:
        Un-normalized weights indexed ``[iR + dy, iR + dx]``
    """
    iR = kernel_radius_cap(R, max_radius)
    y, x = np.ogrid[-iR:iR + 1, -iR:iR + 1]
    dist = np.sqrt(x * x + y * y)
    K = kernel(dist / R, len(beta), beta, kernel_sigma)
    K = np.asarray(K, dtype=np.float64)
    K[dist > R] = 0.0
    return K


def kernel_fft(table, shape):
    """Fold a kernel table onto a torus of ``shape`` and return its rfft2.

    Taps are scattered with np.add.at so a window wider than the field
    wraps exactly as the direct toroidal sum would.
    """
    h, w = shape
    iR = table.shape[0] // 2
    dy, dx = np.nonzero(table)
    weights = table[dy, dx]
    dy = dy - iR
    dx = dx - iR
    padded = np.zeros((h, w), dtype=np.float64)
    # Convolution flips the kernel; index by -offset so the sum is a correlation
    np.add.at(padded, ((-dy) % h, (-dx) % w), weights)
    return np.fft.rfft2(padded)
