"""
Landscape Classifier

Deterministic rule set deciding whether an analyzed photo qualifies as a
landscape shot: no adult content, in colour, outdoors in nature, showing
mountains or hills under an open sky, and not dominated by foreground objects.
"""

from dataclasses import dataclass
from typing import Dict, List

from .models import Classification, ImageAnalysis


@dataclass(frozen=True)
class ClassifierThresholds:
    """Tunable limits for the rule set."""

    tag_confidence: float = 0.8  # Inclusive
    max_object_coverage: float = 0.2  # Exclusive


DEFAULT_THRESHOLDS = ClassifierThresholds()


def tag_confidences(analysis: ImageAnalysis) -> Dict[str, float]:
    """
    Map tag names to confidence.

    If the service reports a name more than once, the last occurrence wins.
    """
    confidences: Dict[str, float] = {}
    for tag in analysis.tags:
        confidences[tag.name] = tag.confidence
    return confidences


def object_coverage(analysis: ImageAnalysis) -> float:
    """
    Ratio of summed object box areas to image area.

    Boxes are neither clipped nor de-overlapped, so the ratio may exceed 1.
    A zero-area image has no meaningful coverage and yields 0.0.
    """
    image_area = analysis.metadata.width * analysis.metadata.height
    if image_area <= 0:
        return 0.0
    objects_area = sum(obj.rectangle.area for obj in analysis.objects)
    return float(objects_area) / float(image_area)


def classify(
    analysis: ImageAnalysis,
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> Classification:
    """
    Evaluate every rule and collect the codes of those that fail.

    Args:
        analysis: Vision analysis of one photo
        thresholds: Tag confidence and object coverage limits

    Returns:
        Classification whose issues follow rule order; passes iff empty
    """
    issues: List[str] = []

    adult = analysis.adult
    if adult.is_adult_content or adult.is_racy_content or adult.is_gory_content:
        issues.append("adult/racy/gory")

    if analysis.color.is_bw_img:
        issues.append("bw")

    tags = tag_confidences(analysis)

    def has(name: str) -> bool:
        return tags.get(name, 0.0) >= thresholds.tag_confidence

    if not (has("outdoor") and has("nature")):
        issues.append("!outdoor&&!nature")
    if not (has("mountain") or has("hill")):
        issues.append("!mountain&&!hill")
    if not (has("sky") or has("landscape")):
        issues.append("!sky&&!landscape")

    coverage = object_coverage(analysis)
    if coverage > thresholds.max_object_coverage:
        issues.append(f"objects {coverage * 100:.2f}%")

    return Classification(issues=issues)
