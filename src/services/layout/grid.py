"""Column grid over a theme's canvas."""
from src.core.errors import InvalidTheme
from src.models import BoundingBox, Theme


class GridSystem:
    """
    Column grid derived from a theme.

    Construction validates the grid geometry for both the safe and the
    readable margin, so every later computation can assume positive widths.

    Raises:
        InvalidTheme: If the grid is degenerate.
    """

    def __init__(self, theme: Theme):
        grid = theme.grid
        self.canvas_width = grid.canvas.width
        self.canvas_height = grid.canvas.height
        self.safe_margin = grid.safe_margin
        self.readable_margin = max(grid.safe_margin, grid.readable_margin)
        self.columns = grid.columns
        self.gutter = grid.gutter
        self.baseline_unit = grid.baseline_unit
        self._validate()

    def _validate(self) -> None:
        if self.columns < 1:
            raise InvalidTheme(f"Grid needs at least one column, got {self.columns}")
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise InvalidTheme(
                f"Canvas must be positive, got {self.canvas_width}x{self.canvas_height}"
            )
        if self.safe_margin < 0 or self.readable_margin < 0:
            raise InvalidTheme("Margins must not be negative")
        if self.gutter < 0:
            raise InvalidTheme(f"Gutter must not be negative, got {self.gutter}")
        if self.baseline_unit < 0:
            raise InvalidTheme(f"Baseline unit must not be negative, got {self.baseline_unit}")

        for readable in (False, True):
            area = self.content_area(readable=readable)
            if area.w <= 0 or area.h <= 0:
                margin = self.readable_margin if readable else self.safe_margin
                raise InvalidTheme(f"Margin {margin} leaves no usable area on the canvas")
            if self.column_width(area.w) <= 0:
                raise InvalidTheme(
                    f"{self.columns} columns with gutter {self.gutter} do not fit in {area.w:.3f} inches"
                )

    def content_area(self, readable: bool = False) -> BoundingBox:
        """Get the canvas minus the safe (or readable) margin on all sides."""
        margin = self.readable_margin if readable else self.safe_margin
        return BoundingBox(
            x=margin,
            y=margin,
            w=self.canvas_width - 2 * margin,
            h=self.canvas_height - 2 * margin,
        )

    def column_width(self, area_width: float) -> float:
        return (area_width - self.gutter * (self.columns - 1)) / self.columns

    def span(self, area: BoundingBox, start: int, count: int) -> tuple[float, float]:
        """Get (x, width) of ``count`` tracks starting at track ``start``."""
        col_w = self.column_width(area.w)
        x = area.x + start * (col_w + self.gutter)
        w = count * col_w + (count - 1) * self.gutter
        return x, w

    @property
    def half_columns(self) -> int:
        """Tracks per side on a two-column slide (0 when the grid cannot split)."""
        return self.columns // 2
