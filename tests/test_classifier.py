"""
Unit tests for the classifier module.
Tests each rule, threshold boundaries, rule ordering and object coverage edge cases.
"""

import pytest

from scenesift.classifier import (
    ClassifierThresholds,
    classify,
    object_coverage,
    tag_confidences,
)
from scenesift.models import ImageAnalysis


def analysis_from(doc: dict) -> ImageAnalysis:
    return ImageAnalysis.model_validate(doc)


def set_tag(doc: dict, name: str, confidence: float) -> None:
    doc["tags"] = [t for t in doc["tags"] if t["name"] != name]
    doc["tags"].append({"name": name, "confidence": confidence})


class TestScenarios:
    """End-to-end verdicts for representative analyses."""

    def test_landscape_passes(self, landscape_doc):
        """A clean mountain landscape should pass with no issues."""
        result = classify(analysis_from(landscape_doc))

        assert result.passed is True
        assert result.issues == []

    def test_low_nature_confidence_fails(self, landscape_doc):
        """Nature below the threshold should fail the outdoor rule."""
        set_tag(landscape_doc, "nature", 0.5)

        result = classify(analysis_from(landscape_doc))

        assert result.passed is False
        assert result.issues == ["!outdoor&&!nature"]

    def test_objects_covering_30_percent(self, landscape_doc):
        """Objects covering 30% of the frame should be reported with their coverage."""
        landscape_doc["objects"] = [
            {"rectangle": {"x": 0, "y": 0, "w": 30, "h": 50}, "object": "tree", "confidence": 0.7},
            {"rectangle": {"x": 50, "y": 0, "w": 30, "h": 50}, "object": "tree", "confidence": 0.6},
        ]

        result = classify(analysis_from(landscape_doc))

        assert result.issues == ["objects 30.00%"]

    def test_issues_follow_rule_order(self, landscape_doc):
        """Every failing rule should be listed in rule order."""
        landscape_doc["adult"]["isRacyContent"] = True
        landscape_doc["color"]["isBWImg"] = True
        landscape_doc["tags"] = []
        landscape_doc["objects"] = [
            {"rectangle": {"x": 0, "y": 0, "w": 30, "h": 100}, "object": "car", "confidence": 0.9},
        ]

        result = classify(analysis_from(landscape_doc))

        assert result.issues == [
            "adult/racy/gory",
            "bw",
            "!outdoor&&!nature",
            "!mountain&&!hill",
            "!sky&&!landscape",
            "objects 30.00%",
        ]

    def test_deterministic(self, landscape_doc):
        """Classifying the same analysis twice should give the same verdict."""
        set_tag(landscape_doc, "sky", 0.1)
        analysis = analysis_from(landscape_doc)

        assert classify(analysis) == classify(analysis)


class TestAdultAndColorRules:
    """Tests for the adult content and color rules."""

    @pytest.mark.parametrize("flag", ["isAdultContent", "isRacyContent", "isGoryContent"])
    def test_any_adult_flag_fails(self, landscape_doc, flag):
        """Any one of the adult, racy or gory flags should fail."""
        landscape_doc["adult"][flag] = True

        assert classify(analysis_from(landscape_doc)).issues == ["adult/racy/gory"]

    def test_black_and_white_fails(self, landscape_doc):
        """Black-and-white images should fail."""
        landscape_doc["color"]["isBWImg"] = True

        assert classify(analysis_from(landscape_doc)).issues == ["bw"]


class TestTagRules:
    """Tests for the tag-based rules."""

    def test_threshold_is_inclusive(self, landscape_doc):
        """A confidence equal to the threshold should count as present."""
        set_tag(landscape_doc, "outdoor", 0.8)
        set_tag(landscape_doc, "nature", 0.8)

        assert classify(analysis_from(landscape_doc)).passed is True

    def test_just_below_threshold_fails(self, landscape_doc):
        """A confidence just under the threshold should count as absent."""
        set_tag(landscape_doc, "nature", 0.7999)

        assert classify(analysis_from(landscape_doc)).issues == ["!outdoor&&!nature"]

    def test_outdoor_and_nature_both_required(self, landscape_doc):
        """Outdoor without nature should still fail."""
        landscape_doc["tags"] = [t for t in landscape_doc["tags"] if t["name"] != "outdoor"]

        assert classify(analysis_from(landscape_doc)).issues == ["!outdoor&&!nature"]

    def test_hill_substitutes_for_mountain(self, landscape_doc):
        """A hill tag should satisfy the mountain rule."""
        landscape_doc["tags"] = [t for t in landscape_doc["tags"] if t["name"] != "mountain"]
        set_tag(landscape_doc, "hill", 0.81)

        assert classify(analysis_from(landscape_doc)).passed is True

    def test_missing_mountain_and_hill(self, landscape_doc):
        """Neither mountain nor hill should fail."""
        set_tag(landscape_doc, "mountain", 0.3)

        assert classify(analysis_from(landscape_doc)).issues == ["!mountain&&!hill"]

    def test_landscape_substitutes_for_sky(self, landscape_doc):
        """A landscape tag should satisfy the sky rule."""
        set_tag(landscape_doc, "sky", 0.2)
        set_tag(landscape_doc, "landscape", 0.95)

        assert classify(analysis_from(landscape_doc)).passed is True

    def test_missing_sky_and_landscape(self, landscape_doc):
        """Neither sky nor landscape should fail."""
        landscape_doc["tags"] = [t for t in landscape_doc["tags"] if t["name"] != "sky"]

        assert classify(analysis_from(landscape_doc)).issues == ["!sky&&!landscape"]

    def test_duplicate_tag_last_one_wins(self, landscape_doc):
        """A repeated tag name should take its last confidence."""
        landscape_doc["tags"].append({"name": "nature", "confidence": 0.1})
        analysis = analysis_from(landscape_doc)

        assert tag_confidences(analysis)["nature"] == 0.1
        assert classify(analysis).issues == ["!outdoor&&!nature"]

    def test_duplicate_tag_later_high_confidence_passes(self, landscape_doc):
        """A later confident duplicate should override an earlier weak one."""
        landscape_doc["tags"].insert(0, {"name": "nature", "confidence": 0.1})

        assert classify(analysis_from(landscape_doc)).passed is True

    def test_custom_threshold(self, landscape_doc):
        """A lower tag threshold should accept weaker tags."""
        thresholds = ClassifierThresholds(tag_confidence=0.9)

        # nature is 0.85
        assert classify(analysis_from(landscape_doc), thresholds).issues == ["!outdoor&&!nature"]


class TestObjectCoverage:
    """Tests for the object coverage rule."""

    def test_no_objects(self, landscape_doc):
        """No detected objects means zero coverage."""
        assert object_coverage(analysis_from(landscape_doc)) == 0.0

    def test_exactly_twenty_percent_passes(self, landscape_doc):
        """Coverage exactly at the limit should pass."""
        landscape_doc["objects"] = [
            {"rectangle": {"x": 0, "y": 0, "w": 20, "h": 100}, "object": "tree", "confidence": 0.9},
        ]

        assert classify(analysis_from(landscape_doc)).passed is True

    def test_overlapping_boxes_double_count(self, landscape_doc):
        """Overlapping boxes should be summed, not merged."""
        box = {"rectangle": {"x": 0, "y": 0, "w": 50, "h": 50}, "object": "rock", "confidence": 0.9}
        landscape_doc["objects"] = [box, box]

        assert object_coverage(analysis_from(landscape_doc)) == pytest.approx(0.5)

    def test_coverage_may_exceed_one(self, landscape_doc):
        """Coverage is not capped at 100%."""
        landscape_doc["objects"] = [
            {"rectangle": {"x": 0, "y": 0, "w": 200, "h": 100}, "object": "wall", "confidence": 0.9},
        ]

        assert classify(analysis_from(landscape_doc)).issues == ["objects 200.00%"]

    @pytest.mark.parametrize("width,height", [(0, 100), (100, 0), (0, 0)])
    def test_zero_area_image_counts_as_no_coverage(self, landscape_doc, width, height):
        """A zero-area image should report 0.0 coverage instead of dividing by zero."""
        landscape_doc["metadata"] = {"width": width, "height": height, "format": "Jpeg"}
        landscape_doc["objects"] = [
            {"rectangle": {"x": 0, "y": 0, "w": 50, "h": 50}, "object": "rock", "confidence": 0.9},
        ]
        analysis = analysis_from(landscape_doc)

        assert object_coverage(analysis) == 0.0
        assert classify(analysis).passed is True

    def test_custom_coverage_limit(self, landscape_doc):
        """A stricter coverage limit should reject smaller objects."""
        landscape_doc["objects"] = [
            {"rectangle": {"x": 0, "y": 0, "w": 10, "h": 100}, "object": "tree", "confidence": 0.9},
        ]
        thresholds = ClassifierThresholds(max_object_coverage=0.05)

        assert classify(analysis_from(landscape_doc), thresholds).issues == ["objects 10.00%"]
