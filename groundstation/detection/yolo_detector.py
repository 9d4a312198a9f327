import logging
import time

import numpy as np
from ultralytics import YOLO

from groundstation.config import settings
from groundstation.state.models import Classification


logger = logging.getLogger(__name__)


class YOLODetector:
    """
    Object classifier backed by an ultralytics YOLO model.

    detect(image) returns at most max_results (label, score) pairs,
    highest score first. Inject `model` to use an already loaded model
    (or a stand-in exposing predict() and names).
    """

    def __init__(self, model=None, weights_path=None):
        # Load from config
        self.weights_path = weights_path or settings.weights_path
        self.conf_threshold = settings.detection.conf_threshold
        self.max_results = settings.detection.max_results
        self.device = settings.detection.device
        self.imgsz = settings.detection.imgsz

        if model is None:
            if not self.weights_path.exists():
                raise FileNotFoundError(f"Weights not found: {self.weights_path}")

            logger.info("Loading YOLO model from %s", self.weights_path)
            model = YOLO(str(self.weights_path))
            model.to(self.device)

        self.model = model

        logger.info(
            "YOLO detector ready (device=%s, conf=%.2f, max=%d, imgsz=%d)",
            self.device,
            self.conf_threshold,
            self.max_results,
            self.imgsz,
        )

    def detect(self, image: np.ndarray) -> list[Classification]:
        start_time = time.time()

        results = self.model.predict(
            image,
            conf=self.conf_threshold,
            max_det=self.max_results,
            # ultralytics logs every prediction otherwise
            verbose=False,
            imgsz=self.imgsz,
            device=self.device,
        )

        inference_time = time.time() - start_time

        classifications = self._parse_results(results[0])

        logger.debug(
            "Classified %d objects (%.3fs)", len(classifications), inference_time
        )

        return classifications

    def _parse_results(self, results) -> list[Classification]:
        """
        Takes raw YOLO results (ultralytics format)
        Converts each box into a Classification, best score first
        """
        boxes = results.boxes
        if boxes is None or len(boxes) == 0:
            return []

        confidences = boxes.conf.cpu().numpy()  # (N,)
        class_ids = boxes.cls.cpu().numpy()  # (N,)
        names = results.names

        classifications = [
            Classification(label=self._label_for(names, int(cls)), score=float(conf))
            for conf, cls in zip(confidences, class_ids)
            if conf >= self.conf_threshold
        ]
        classifications.sort(key=lambda c: c.score, reverse=True)

        return classifications[: self.max_results]

    @staticmethod
    def _label_for(names, class_id: int) -> str:
        # ultralytics exposes class names as {id: name}
        if not names:
            return str(class_id)
        return names.get(class_id, str(class_id))
