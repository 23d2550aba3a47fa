"""
Run a few ndhistogram examples on synthetic data.

Usage:
    python tools/examples.py
"""

import numpy as np

import ndhistogram as nh


def main():
    rng = np.random.default_rng(0)
    points = np.column_stack([rng.normal(size=1000), rng.exponential(size=1000)])

    for name in ["sqrt", "rice", "sturges", "fd", "auto"]:
        fitted = nh.get_strategy(name).from_array(points[:, 0])
        print(f"{name}: {fitted.n_bins()} bins of width {fitted.bin_width():.4f}")

    print("Quartiles of the exponential column:")
    print(nh.quantiles_mut(points[:, 1].copy(), [0.25, 0.5, 0.75]))

    h = nh.histogramdd(points, "sturges")
    print("Histogram shape:", h.counts.shape, "total:", h.counts.sum())
    print(h.to_dataframe(["normal", "exponential"]).head(10))


if __name__ == "__main__":
    main()
