"""
Console countdown with a progress bar.

Used to hold off a script until the next TOTP window (see
:func:`core.totp.remaining_seconds`), rendering something like::

    🟨🟨🟨🟨⬛⬛⬛⬛⬛⬛⬛⬛ 33% Starting script in... 4s
"""

import logging
import math
import sys
import time
from typing import Callable, Optional, TextIO

logger = logging.getLogger(__name__)

_CLEAR_SCREEN = "\x1b[2J\x1b[H"


def _percent(tick: int, char_length: int) -> int:
    return math.floor(tick / char_length * 100 + 0.5)


def _seconds_text(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def render_tick(
    tick: int,
    seconds: float,
    char_length: int = 12,
    in_progress_msg: str = "Starting script in...",
    done_msg: str = "👉👈 Running...",
    bg_char: str = "⬛",
    fg_char: str = "🟨",
    done_char: str = "🟩",
) -> str:
    """Return the status line shown for *tick* (``0..char_length``)."""
    if tick >= char_length:
        return f"[{done_char * char_length}] 100% {done_msg}..."

    bar = fg_char * tick + bg_char * (char_length - tick)
    remaining = max(0, seconds - math.floor(seconds * tick / char_length))
    return f"{bar} {_percent(tick, char_length)}% {in_progress_msg} {_seconds_text(remaining)}s"


def blocking_delay(
    seconds: float = 5.0,
    char_length: int = 12,
    in_progress_msg: str = "Starting script in...",
    done_msg: str = "👉👈 Running...",
    clear_on_update: bool = True,
    bg_char: str = "⬛",
    fg_char: str = "🟨",
    done_char: str = "🟩",
    *,
    stream: Optional[TextIO] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """
    Block for *seconds*, redrawing a progress bar ``char_length + 1`` times.

    Args:
        seconds:         Total delay.  Nothing is drawn if ``<= 0``.
        char_length:     Width of the bar in characters.
        in_progress_msg: Text shown while counting down.
        done_msg:        Text shown on the final frame.
        clear_on_update: Clear the terminal before each frame.
        bg_char:         Unfilled bar character.
        fg_char:         Filled bar character.
        done_char:       Bar character on the final frame.
        stream:          Output stream (defaults to ``sys.stdout``).
        sleep:           Sleep function, injectable for tests.

    Raises:
        ValueError: If ``char_length`` is less than 1.
    """
    if seconds <= 0:
        return
    if char_length < 1:
        raise ValueError("char_length must be at least 1.")

    out = stream if stream is not None else sys.stdout
    tick_seconds = seconds / char_length
    logger.debug("Delaying %.2f s in %d ticks", seconds, char_length)

    for tick in range(char_length + 1):
        if clear_on_update:
            out.write(_CLEAR_SCREEN)
        out.write(
            render_tick(
                tick,
                seconds,
                char_length,
                in_progress_msg,
                done_msg,
                bg_char,
                fg_char,
                done_char,
            )
            + "\n"
        )
        out.flush()
        sleep(tick_seconds)
