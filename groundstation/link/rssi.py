"""
Wi-Fi RSSI reader for Linux hosts.

/proc/net/wireless looks like:

    Inter-| sta-|   Quality        |   Discarded packets
     face | tus | link level noise |  nwid  crypt   frag  retry   misc | ...
     wlan0: 0000   54.  -56.  -256        0      0      0      0     12

The "level" column is the signal level in dBm.
"""

import logging
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

PROC_WIRELESS = Path("/proc/net/wireless")


class WirelessRssiReader:
    """Callable returning the current RSSI in dBm, or None when unavailable."""

    def __init__(self, interface: str = "", path: Path = PROC_WIRELESS):
        self.interface = interface
        self.path = path

    def __call__(self) -> Optional[int]:
        try:
            lines = self.path.read_text().splitlines()
        except OSError:
            return None

        for line in lines[2:]:
            name, sep, rest = line.partition(":")
            if not sep:
                continue
            if self.interface and name.strip() != self.interface:
                continue
            fields = rest.split()
            if len(fields) < 3:
                continue
            try:
                return int(float(fields[2].rstrip(".")))
            except ValueError:
                logger.debug("Unreadable signal level in %r", line)
                return None

        return None
