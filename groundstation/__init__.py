"""
Ground station receiver for the device telemetry and video stream.

Stages:
- ingestion: framing, decoding and the device connection
- detection: throttled classification of video frames
- link: periodic link quality sampling
- state: published values
- api: HTTP status and control
"""

__version__ = "1.0.0"
