from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from entropic.core.constants import BACKGROUND_RGB, SCREEN_HEIGHT, SCREEN_WIDTH  # noqa: E402
from entropic.engine.simulation import SimulationEngine  # noqa: E402
from entropic.render.overlay import overlay_lines  # noqa: E402
from entropic.render.projection import project_many  # noqa: E402
from entropic.utils.logging import get_logger  # noqa: E402

logger = get_logger(__name__)


def render_frame(
    engine: SimulationEngine,
    out_path: Path,
    width: int = SCREEN_WIDTH,
    height: int = SCREEN_HEIGHT,
    show_ui: bool = True,
    dpi: int = 100,
    title: Optional[str] = None,
) -> Path:
    """
    Draw the current ensemble into a PNG, the way one window frame looks.

    Trails are drawn only while enabled and only once they hold two points;
    non-finite positions are dropped by matplotlib.
    """
    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    ax = fig.add_axes([0.0, 0.0, 1.0, 1.0])
    ax.set_facecolor(BACKGROUND_RGB)
    fig.patch.set_facecolor(BACKGROUND_RGB)
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)  # screen coordinates, y grows downward
    ax.set_axis_off()

    system = engine.active_system
    if engine.trails_enabled:
        for particle in engine.particles:
            if len(particle.trail) < 2:
                continue
            points = project_many(particle.trail.as_array(), system, width, height)
            ax.plot(points[:, 0], points[:, 1], color=particle.color, linewidth=1.0)

    heads = project_many(engine.states(), system, width, height)
    ax.scatter(heads[:, 0], heads[:, 1], s=4.0, c=[p.color for p in engine.particles], linewidths=0)

    if show_ui:
        for i, line in enumerate(overlay_lines(engine.status())):
            ax.text(20, 20 + i * 20, line, color="white", fontsize=10, va="top", family="monospace")
    if title:
        ax.text(width - 20, height - 20, title, color="white", fontsize=9, ha="right", va="bottom")

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_path, dpi=dpi, facecolor=fig.get_facecolor())
    plt.close(fig)
    logger.info("Rendered frame %d -> %s", engine.frame, out_path)
    return out_path
