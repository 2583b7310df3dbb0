"""Text rendering of the CHIP-8 display for headless hosts."""

import numpy as np

import jax.numpy as jnp


def display_to_text(display: jnp.ndarray, on: str = "#", off: str = ".") -> str:
    """Render the display as one text line per pixel row."""
    pixels = np.array(display, dtype=np.bool_)
    return "\n".join("".join(on if p else off for p in row) for row in pixels)
