"""
SVG Generation Module

This module contains the ContributorsSvgGenerator class responsible for
rendering a contributor ranking as a grid of round avatars.
"""

import logging
import math
from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment

from .models import Ranking

logger = logging.getLogger("gh-contrib-svg.generator")

SVG_TEMPLATE = """\
<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" width="{{ width }}" height="{{ height }}" viewBox="0 0 {{ width }} {{ height }}" role="img" aria-label="Contributors">
{% for cell in cells %}
  <a href="https://github.com/{{ cell.login }}" target="_blank">
    <title>{{ cell.login }} ({{ cell.commits }} commits)</title>
    <clipPath id="avatar-{{ loop.index0 }}">
      <circle cx="{{ cell.cx }}" cy="{{ cell.cy }}" r="{{ cell.radius }}"/>
    </clipPath>
    <image x="{{ cell.x }}" y="{{ cell.y }}" width="{{ cell.size }}" height="{{ cell.size }}" href="{{ cell.avatar_url }}" xlink:href="{{ cell.avatar_url }}" clip-path="url(#avatar-{{ loop.index0 }})"/>
  </a>
{% endfor %}
</svg>
"""


class ContributorsSvgGenerator:
    """
    Compose an SVG string from a contributor ranking.

    Contributors are laid out left to right, ``line_count`` per row, in
    ranking order. Each one gets a square cell of ``img_width / line_count``
    pixels holding an avatar of at most ``block_size`` pixels.
    """

    # Space kept between neighbouring avatars, as a share of the cell
    GAP_RATIO = 0.1

    def __init__(self, img_width: int = 1000, block_size: int = 120, line_count: int = 8) -> None:
        if img_width <= 0 or block_size <= 0 or line_count <= 0:
            raise ValueError("img_width, block_size and line_count must be positive")
        self.img_width = img_width
        self.block_size = block_size
        self.line_count = line_count
        self._env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)

    @property
    def cell_size(self) -> float:
        return self.img_width / self.line_count

    @property
    def avatar_size(self) -> float:
        return min(self.block_size, self.cell_size * (1 - self.GAP_RATIO))

    def layout(self, ranking: Ranking) -> List[Dict[str, Any]]:
        """Position each contributor; returns one dict per cell, in ranking order."""
        cell = self.cell_size
        size = self.avatar_size
        offset = (cell - size) / 2
        cells = []
        for index, (login, record) in enumerate(ranking):
            row, col = divmod(index, self.line_count)
            x = col * cell + offset
            y = row * cell + offset
            cells.append({
                "login": login,
                "commits": record.commit_count,
                "avatar_url": record.avatar_url,
                "x": round(x, 2),
                "y": round(y, 2),
                "size": round(size, 2),
                "cx": round(x + size / 2, 2),
                "cy": round(y + size / 2, 2),
                "radius": round(size / 2, 2),
            })
        return cells

    def generate_svg(self, ranking: Ranking) -> str:
        """
        Build the SVG document for ``ranking``.

        Args:
            ranking: Contributors in display order

        Returns:
            Complete SVG content as a string
        """
        rows = math.ceil(len(ranking) / self.line_count)
        template = self._env.from_string(SVG_TEMPLATE)
        return template.render(
            width=self.img_width,
            height=round(rows * self.cell_size, 2),
            cells=self.layout(ranking),
        )


def save_svg(svg: str, identifier: str, output_dir: Path) -> Path:
    """Write ``svg`` to ``<output_dir>/<identifier>.svg`` and return the path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{identifier}.svg"
    with open(path, "w", encoding="utf-8") as f:
        f.write(svg)
    logger.info("Wrote %s", path)
    return path
