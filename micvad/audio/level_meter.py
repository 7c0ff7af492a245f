"""Textual audio level gauge."""

from typing import Optional, TextIO

from ..models.audio import LevelMeterConfig

FILL = "*"
BLANK = " "
BORDER = "|"
MARKER = "O"


def render_level(level: float, config: LevelMeterConfig, label: Optional[float] = None) -> str:
    """Render ``level`` as a fixed-width bar.

    The bar between the borders is always exactly ``config.content_width``
    characters, whatever the level. With a threshold configured, the column
    matching the threshold is replaced by a marker.
    """
    width = config.content_width
    filled = min(width, max(0, round(level / config.max_level * width)))
    bar = [FILL] * filled + [BLANK] * (width - filled)

    if config.threshold is not None:
        position = min(width - 1, max(0, round(config.threshold / config.max_level * width)))
        bar[position] = MARKER

    if label is None:
        label = level
    return f"{BORDER}{''.join(bar)}{BORDER} {label:.1f}"


class LevelMeter:
    """Writes a level bar in place, one line per call, to a text sink."""

    def __init__(self, config: LevelMeterConfig, sink: TextIO):
        self.config = config
        self.sink = sink
        self._closed = False

    def show(self, level: float, label: Optional[float] = None) -> None:
        # Trailing spaces wipe leftovers of a longer previous label
        self.sink.write(f"\r{render_level(level, self.config, label)}    ")
        self.sink.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.sink.write("\n")
        self.sink.flush()

    def __enter__(self) -> "LevelMeter":
        return self

    def __exit__(self, *args) -> None:
        self.close()
