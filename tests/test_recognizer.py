"""
Test cases for the conversion of hand landmarker results.
"""
import unittest
from types import SimpleNamespace

from gesture_keys.config import RecognizerConfig
from gesture_keys.models import Handedness
from gesture_keys.recognizer import Recognizer


def make_result(*hands):
    """Build an object shaped like a HandLandmarkerResult from (category name, score, x) tuples."""
    return SimpleNamespace(
        hand_landmarks=[[SimpleNamespace(x=x, y=0.5, z=0.0)] * 21 for _name, _score, x in hands],
        handedness=[[SimpleNamespace(category_name=name, score=score)] for name, score, _x in hands],
    )


class TestRecognizerResult(unittest.TestCase):
    """Test landmark frames built from detector results, without loading the model."""

    def make_recognizer(self, mirroring=False):
        recognizer = Recognizer.__new__(Recognizer)
        recognizer.config = RecognizerConfig()
        recognizer.mirroring = mirroring
        recognizer.last_result = None
        recognizer.landmarker = None
        return recognizer

    def test_two_hands(self):
        recognizer = self.make_recognizer()
        recognizer.save_result(make_result(("Left", 0.9, 0.2), ("Right", 0.7, 0.8)), None, 1500)

        result = recognizer.last_result
        self.assertEqual(result.timestamp, 1.5)
        self.assertEqual([hand.handedness for hand in result.hands], [Handedness.LEFT, Handedness.RIGHT])
        self.assertEqual([hand.confidence for hand in result.hands], [0.9, 0.7])
        self.assertEqual(len(result.hands[0].landmarks), 21)
        self.assertEqual(result.hands[0].landmarks[0].x, 0.2)
        self.assertEqual(result.hands[0].timestamp, 1.5)

    def test_mirroring(self):
        recognizer = self.make_recognizer(mirroring=True)
        recognizer.save_result(make_result(("Right", 0.9, 0.2)), None, 0)
        self.assertAlmostEqual(recognizer.last_result.hands[0].landmarks[0].x, 0.8)

    def test_no_hand(self):
        recognizer = self.make_recognizer()
        recognizer.save_result(make_result(), None, 100)
        self.assertEqual(recognizer.last_result.hands, [])

    def test_closed_recognizer(self):
        recognizer = self.make_recognizer()
        with self.assertRaises(RuntimeError):
            recognizer.recognize_image(None, 0.0)


if __name__ == "__main__":
    unittest.main()
