"""Loss-curve rendering for training runs."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from ..core.network import Network

PLOT_FILENAME = "loss.png"


class PlotAdapter:
    """Epoch observer that renders the loss curve to ``run_dir/loss.png``.

    Nothing is recorded or written unless ``enable_plots`` is set; the figure
    is produced by :meth:`close` once training has finished.
    """

    def __init__(
        self, run_dir: str | Path, enable_plots: bool = False, title: str | None = None
    ):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.title = title
        self._points: List[Tuple[int, float]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_epoch(self, epoch: int, loss: float, network: Network) -> None:
        if self.enable_plots:
            self._points.append((epoch, float(loss)))

    def close(self) -> Path | None:
        """Write the figure and return its path, or ``None`` if nothing was recorded."""

        if not self.enable_plots or not self._points:
            return None
        # Agg must be selected before pyplot is first imported.
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt

        epochs = [epoch for epoch, _ in self._points]
        losses = [loss for _, loss in self._points]
        fig, ax = plt.subplots()
        try:
            ax.plot(epochs, losses, linewidth=1.0)
            ax.set_xlabel("epoch")
            ax.set_ylabel("mean summed squared error")
            ax.set_title(self.title or "loss per epoch")
            target = self.run_dir / PLOT_FILENAME
            fig.savefig(target)
        finally:
            plt.close(fig)
        return target

    __call__ = on_epoch


__all__ = ["PLOT_FILENAME", "PlotAdapter"]
