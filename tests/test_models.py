"""
Test cases for landmarks, finger states and keybinding models.
"""
import math
import unittest

import numpy as np
from pydantic import ValidationError

from gesture_keys.gestures import Gestures, gesture_label
from gesture_keys.models import (
    FingerIndex,
    FingerState,
    HandConstraint,
    Handedness,
    InvalidLandmarkSet,
    Keybinding,
    KeyCombo,
    Landmark,
    Profiles,
    extract_finger_state,
)
from gesture_keys.models.landmarks import landmarks_array

from .helpers import make_landmarks


class TestLandmarks(unittest.TestCase):
    """Test the validation of landmark sets."""

    def test_array_shape(self):
        points = landmarks_array(make_landmarks())
        self.assertEqual(points.shape, (21, 3))

    def test_extra_landmarks_are_ignored(self):
        points = landmarks_array(make_landmarks() + [Landmark(0.1, 0.1)])
        self.assertEqual(points.shape, (21, 3))

    def test_two_dimensional_points_are_accepted(self):
        points = landmarks_array([(0.5, 0.5)] * 21)
        self.assertEqual(points.shape, (21, 2))

    def test_too_few_landmarks(self):
        with self.assertRaises(InvalidLandmarkSet):
            landmarks_array(make_landmarks()[:20])

    def test_non_finite_coordinates(self):
        landmarks = make_landmarks()
        landmarks[3] = Landmark(math.nan, 0.5)
        with self.assertRaises(InvalidLandmarkSet):
            landmarks_array(landmarks)

    def test_malformed_points(self):
        with self.assertRaises(InvalidLandmarkSet):
            landmarks_array([(0.5,)] * 21)
        with self.assertRaises(InvalidLandmarkSet):
            landmarks_array([("a", "b")] * 21)

    def test_invalid_landmark_set_is_a_value_error(self):
        self.assertTrue(issubclass(InvalidLandmarkSet, ValueError))


class TestFingerState(unittest.TestCase):
    """Test finger extension detection."""

    def test_all_flexed(self):
        self.assertEqual(extract_finger_state(make_landmarks()), FingerState(False, False, False, False, False))

    def test_all_extended(self):
        state = extract_finger_state(make_landmarks(thumb=True, index=True, middle=True, ring=True, pinky=True))
        self.assertEqual(state.extended_count, 5)

    def test_thumb_is_lateral(self):
        # Tip to the right of the MCP joint, whatever its height
        self.assertTrue(extract_finger_state(make_landmarks(thumb_tip=(0.51, 0.9))).thumb)
        self.assertFalse(extract_finger_state(make_landmarks(thumb_tip=(0.49, 0.1))).thumb)

    def test_accepts_numpy_array(self):
        points = np.array([tuple(landmark) for landmark in make_landmarks(index=True)])
        state = extract_finger_state(points)
        self.assertTrue(state.only(FingerIndex.INDEX))

    def test_only_and_count(self):
        state = FingerState(thumb=True, index=True, middle=False, ring=False, pinky=True)
        self.assertTrue(state.only(FingerIndex.THUMB, FingerIndex.INDEX, FingerIndex.PINKY))
        self.assertFalse(state.only(FingerIndex.THUMB, FingerIndex.INDEX))
        self.assertEqual(state.count_extended(FingerIndex.MIDDLE, FingerIndex.PINKY), 1)
        self.assertEqual(state.extended_count, 3)

    def test_invalid_landmarks(self):
        with self.assertRaises(InvalidLandmarkSet):
            extract_finger_state([])


class TestKeyCombo(unittest.TestCase):
    """Test parsing of key combinations."""

    def test_single_key(self):
        self.assertEqual(KeyCombo.parse("space"), KeyCombo(modifiers=(), key="space"))

    def test_modifiers(self):
        combo = KeyCombo.parse("Ctrl + Shift+C")
        self.assertEqual(combo.modifiers, ("ctrl", "shift"))
        self.assertEqual(combo.key, "c")
        self.assertEqual(str(combo), "ctrl+shift+c")

    def test_empty_tokens(self):
        for keys in ("", "ctrl+", "+c", "ctrl++c"):
            with self.subTest(keys=keys), self.assertRaises(ValueError):
                KeyCombo.parse(keys)


class TestKeybinding(unittest.TestCase):
    """Test the keybinding model."""

    def test_keys_are_normalized(self):
        binding = Keybinding(gesture=Gestures.FIST, keys=" CTRL+c ")
        self.assertEqual(binding.keys, "ctrl+c")
        self.assertEqual(binding.combo, KeyCombo(("ctrl",), "c"))

    def test_defaults(self):
        binding = Keybinding(gesture=Gestures.FIST, keys="space")
        self.assertEqual(binding.hand, HandConstraint.ANY)
        self.assertTrue(binding.enabled)
        self.assertTrue(binding.id)
        self.assertNotEqual(binding.id, Keybinding(gesture=Gestures.FIST, keys="space").id)

    def test_invalid_keys(self):
        with self.assertRaises(ValidationError):
            Keybinding(gesture=Gestures.FIST, keys="ctrl+")

    def test_frozen(self):
        binding = Keybinding(gesture=Gestures.FIST, keys="space")
        with self.assertRaises(ValidationError):
            binding.keys = "enter"

    def test_label(self):
        binding = Keybinding(gesture=Gestures.PEACE_SIGN, keys="alt+tab", hand=HandConstraint.LEFT, description="Switch")
        self.assertEqual(binding.label, "peace_sign (left) -> alt+tab [Switch]")

    def test_json_round_trip(self):
        profiles = Profiles(profiles={"Gaming": [Keybinding(gesture=Gestures.FIST, keys="space")]})
        loaded = Profiles.model_validate_json(profiles.model_dump_json())
        self.assertEqual(loaded, profiles)

    def test_default_profiles(self):
        profiles = Profiles()
        self.assertEqual(list(profiles.profiles), ["Gaming", "Productivity", "Custom"])
        self.assertEqual(profiles.active, "Gaming")


class TestHands(unittest.TestCase):
    """Test handedness and hand constraints."""

    def test_from_data(self):
        self.assertEqual(Handedness.from_data(" Left "), Handedness.LEFT)
        self.assertEqual(Handedness.from_data("Right"), Handedness.RIGHT)

    def test_constraints(self):
        self.assertTrue(HandConstraint.ANY.accepts(Handedness.LEFT))
        self.assertTrue(HandConstraint.ANY.accepts(None))
        self.assertTrue(HandConstraint.LEFT.accepts(Handedness.LEFT))
        self.assertFalse(HandConstraint.LEFT.accepts(Handedness.RIGHT))
        self.assertFalse(HandConstraint.RIGHT.accepts(None))

    def test_gesture_label(self):
        self.assertEqual(gesture_label(Gestures.OK_SIGN), "OK Sign")
        self.assertEqual(gesture_label(None), "None")


if __name__ == "__main__":
    unittest.main()
