"""Decoder for the Apache mod_status scoreboard string."""

from collections import Counter
from typing import Dict

# One character per worker slot.
SCOREBOARD_LABELS: Dict[str, str] = {
    '_': "idle",
    'S': "startup",
    'R': "read",
    'W': "reply",
    'K': "keepalive",
    'D': "dns",
    'C': "closing",
    'L': "logging",
    'G': "graceful_stop",
    'I': "idle_cleanup",
    '.': "open_slot",
}


def decode_scoreboard(scoreboard: str) -> Dict[str, int]:
    """
    Tally worker slots by state.

    Every known state is present in the result, with 0 when no slot is in
    it, so label sets stay stable between scrapes. Characters outside the
    table are counted under the character itself.

    Args:
        scoreboard: Raw scoreboard value, e.g. "_W_K...."

    Returns:
        Dict[str, int]: State label to number of slots in that state
    """
    tally = {label: 0 for label in SCOREBOARD_LABELS.values()}
    for symbol, count in Counter(scoreboard).items():
        label = SCOREBOARD_LABELS.get(symbol, symbol)
        tally[label] = tally.get(label, 0) + count
    return tally
