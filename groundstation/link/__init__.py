"""
Link Quality

Components:
- rssi: Default Wi-Fi RSSI reader (Linux /proc/net/wireless)
- sampler: Periodic RSSI -> SignalLevel classification
"""

from groundstation.link.rssi import WirelessRssiReader
from groundstation.link.sampler import SignalSampler, classify_rssi, MISSING_RSSI

__all__ = [
    "WirelessRssiReader",
    "SignalSampler",
    "classify_rssi",
    "MISSING_RSSI",
]
