import matplotlib.pyplot as plt
import numpy as np
from pathlib import Path

from funcapprox.grid import load_grid_data, load_n_samples_per_dim


def plot_grid_data(directory: Path, outpath: Path, plot_lines: bool = True) -> None:
    """
    Plot the grid data saved by `ModelParameters.save_grid_data` in `directory` to `outpath`.

    For 1-D grids, the activation of every basis function (and optionally its line segment) is
    plotted against the input. For 2-D grids, the contours of the summed activations are plotted.

    Raises:
        ValueError: If the grid has more than two dimensions.
    """
    df = load_grid_data(directory)
    n_samples_per_dim = load_n_samples_per_dim(directory)
    activation_columns = [c for c in df.columns if c.startswith("activation_")]
    line_columns = [c for c in df.columns if c.startswith("line_")]

    plt.close()
    ax = plt.gca()
    fig = plt.gcf()

    if len(n_samples_per_dim) == 1:
        for column in activation_columns:
            ax.plot(df["input_0"], df[column], label=column)
        ax.set_xlabel("input")
        ax.set_ylabel("activation")

        if plot_lines and len(line_columns) > 0:
            ax_lines = ax.twinx()
            for column in line_columns:
                ax_lines.plot(df["input_0"], df[column], linestyle="--", linewidth=0.5)
            ax_lines.set_ylabel("lines")

    elif len(n_samples_per_dim) == 2:
        shape = tuple(n_samples_per_dim)
        x = df["input_0"].to_numpy().reshape(shape)
        y = df["input_1"].to_numpy().reshape(shape)
        z = np.sum(df[activation_columns].to_numpy(), axis=1).reshape(shape)
        contours = ax.contourf(x, y, z)
        fig.colorbar(contours, ax=ax, label="summed activations")
        ax.set_xlabel("input_0")
        ax.set_ylabel("input_1")

    else:
        plt.close()
        raise ValueError(
            f"Can only plot grids with 1 or 2 dimensions, got {len(n_samples_per_dim)}"
        )

    fig.tight_layout()
    fig.savefig(outpath)
    plt.close()
