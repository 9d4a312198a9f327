"""
Tests for the YOLO classifier wrapper, using a stand-in model.
"""

from pathlib import Path

import numpy as np
import pytest

from groundstation.detection.yolo_detector import YOLODetector
from groundstation.state.models import Classification


class FakeTensor:
    def __init__(self, values):
        self._values = np.asarray(values, dtype=np.float32)

    def cpu(self):
        return self

    def numpy(self):
        return self._values


class FakeBoxes:
    def __init__(self, conf, cls):
        self.conf = FakeTensor(conf)
        self.cls = FakeTensor(cls)

    def __len__(self):
        return len(self.conf.numpy())


class FakeResult:
    def __init__(self, conf, cls, names):
        self.boxes = FakeBoxes(conf, cls)
        self.names = names


class FakeModel:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def predict(self, image, **kwargs):
        self.calls.append((image, kwargs))
        return [self.result]


NAMES = {0: "person", 1: "car", 2: "dog"}


@pytest.fixture
def image():
    return np.zeros((240, 320, 3), dtype=np.uint8)


class TestYOLODetector:
    def test_results_sorted_by_score(self, image):
        model = FakeModel(FakeResult([0.6, 0.9, 0.75], [1, 0, 2], NAMES))
        detector = YOLODetector(model=model)

        results = detector.detect(image)

        assert [r.label for r in results] == ["person", "dog", "car"]
        assert results[0].score == pytest.approx(0.9)

    def test_low_scores_dropped(self, image):
        model = FakeModel(FakeResult([0.3, 0.55], [0, 1], NAMES))
        detector = YOLODetector(model=model)

        results = detector.detect(image)

        assert len(results) == 1
        assert results[0].label == "car"

    def test_at_most_five_results(self, image):
        scores = [0.95, 0.9, 0.85, 0.8, 0.75, 0.7, 0.65]
        model = FakeModel(FakeResult(scores, [0] * len(scores), NAMES))

        results = YOLODetector(model=model).detect(image)

        assert len(results) == 5
        assert results[-1].score == pytest.approx(0.75)

    def test_no_boxes(self, image):
        model = FakeModel(FakeResult([], [], NAMES))
        assert YOLODetector(model=model).detect(image) == []

    def test_unknown_class_id_uses_number(self, image):
        model = FakeModel(FakeResult([0.8], [7], NAMES))
        (result,) = YOLODetector(model=model).detect(image)

        assert isinstance(result, Classification)
        assert result.label == "7"
        assert result.score == pytest.approx(0.8)

    def test_predict_arguments(self, image):
        model = FakeModel(FakeResult([], [], NAMES))
        YOLODetector(model=model).detect(image)

        passed_image, kwargs = model.calls[0]
        assert passed_image is image
        assert kwargs["conf"] == 0.5
        assert kwargs["max_det"] == 5
        assert kwargs["verbose"] is False

    def test_missing_weights(self):
        with pytest.raises(FileNotFoundError):
            YOLODetector(weights_path=Path("/nonexistent/detect.pt"))
