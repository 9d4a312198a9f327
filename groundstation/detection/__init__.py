"""
Detection Stage

Classifies video frames without holding up the read loop.

Components:
- processing_gate: Single-flight, rate-limited hand-off to the classifier
- yolo_detector: ultralytics YOLO classifier (imported on demand, it pulls in torch)

Usage:
    from groundstation.detection import ProcessingGate
    from groundstation.detection.yolo_detector import YOLODetector

    detector = YOLODetector()
    gate = ProcessingGate(detector.detect, state)

    gate.offer(video_frame)
"""

from groundstation.detection.processing_gate import ProcessingGate, Classifier

__all__ = [
    "ProcessingGate",
    "Classifier",
]
