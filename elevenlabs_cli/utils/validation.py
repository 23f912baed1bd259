"""Voice settings validation."""

from typing import Any, Dict, Optional

from ..exceptions import ValidationError


def _check_unit_range(name: str, value: float) -> float:
    if not 0.0 <= value <= 1.0:
        raise ValidationError(f"{name} must be between 0.0 and 1.0, got {value}")
    return value


def validate_stability(value: float) -> float:
    return _check_unit_range("Stability", value)


def validate_similarity_boost(value: float) -> float:
    return _check_unit_range("Similarity boost", value)


def validate_style(value: float) -> float:
    return _check_unit_range("Style", value)


def validate_voice_settings(
    stability: Optional[float] = None,
    similarity_boost: Optional[float] = None,
    style: Optional[float] = None,
) -> None:
    """Raise ``ValidationError`` unless every given value is within [0.0, 1.0]."""
    if stability is not None:
        validate_stability(stability)
    if similarity_boost is not None:
        validate_similarity_boost(similarity_boost)
    if style is not None:
        validate_style(style)


def build_voice_settings(
    stability: Optional[float] = None,
    similarity_boost: Optional[float] = None,
    style: Optional[float] = None,
    speaker_boost: Optional[bool] = None,
) -> Optional[Dict[str, Any]]:
    """Validated ``voice_settings`` request body, or None when nothing was set."""
    validate_voice_settings(stability, similarity_boost, style)

    settings: Dict[str, Any] = {}
    if stability is not None:
        settings["stability"] = stability
    if similarity_boost is not None:
        settings["similarity_boost"] = similarity_boost
    if style is not None:
        settings["style"] = style
    if speaker_boost:
        settings["use_speaker_boost"] = True
    return settings or None
