"""
Listing completeness scoring.
"""

from typing import Any, Dict, List


class CompletionScorer:
    """Score how complete a listing form is and suggest what to add next."""

    # Field weights based on impact on listing performance
    FIELD_WEIGHTS = {
        # Essential
        "title": 15,
        "description": 15,
        "images": 20,
        "price": 15,
        # Important
        "location": 10,
        "house_size_value": 8,
        "amenities": 7,
        # Helpful
        "year_built": 5,
        "region": 3,
        "city": 2,
    }

    FIELD_RECOMMENDATIONS = {
        "location": {
            "impact": "85%",
            "suggestion": "Add area or neighborhood (e.g., 'Near Main St' for privacy)",
        },
        "house_size_value": {
            "impact": "73%",
            "suggestion": "Approximate size helps buyers understand space",
        },
        "year_built": {
            "impact": "62%",
            "suggestion": "Even approximate age builds buyer confidence",
        },
        "amenities": {
            "impact": "91%",
            "suggestion": "List 3-5 key features that make this property special",
        },
        "images": {
            "impact": "95%",
            "suggestion": "Add 8+ photos showing different rooms and exterior",
        },
        "description": {
            "impact": "78%",
            "suggestion": "Detailed description attracts serious inquiries",
        },
    }

    MIN_IMAGES = 3
    MIN_DESCRIPTION_LENGTH = 50
    MIN_TITLE_LENGTH = 10
    MAX_RECOMMENDATIONS = 3

    @classmethod
    def is_field_complete(cls, field: str, value: Any) -> bool:
        if field == "images":
            return isinstance(value, list) and len(value) >= cls.MIN_IMAGES
        if field == "amenities":
            return isinstance(value, list) and len(value) > 0
        if field == "description":
            return isinstance(value, str) and len(value) >= cls.MIN_DESCRIPTION_LENGTH
        if field == "title":
            return isinstance(value, str) and len(value) >= cls.MIN_TITLE_LENGTH
        return value is not None and value != ""

    @classmethod
    def analyze(cls, form_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Calculate completion for a listing form.

        Args:
            form_data: Raw form fields (draft data or a listing as a dict)

        Returns:
            Dict with percentage, completed_fields, missing_fields, recommendations
        """
        completed: List[str] = []
        missing: List[str] = []
        total_weight = 0
        completed_weight = 0

        for field, weight in cls.FIELD_WEIGHTS.items():
            total_weight += weight
            if cls.is_field_complete(field, form_data.get(field)):
                completed.append(field)
                completed_weight += weight
            else:
                missing.append(field)

        recommendations = [
            {"field": field, **cls.FIELD_RECOMMENDATIONS[field]}
            for field in missing
            if field in cls.FIELD_RECOMMENDATIONS
        ][: cls.MAX_RECOMMENDATIONS]

        return {
            "percentage": round(completed_weight / total_weight * 100),
            "completed_fields": completed,
            "missing_fields": missing,
            "recommendations": recommendations,
        }

    @classmethod
    def percentage(cls, form_data: Dict[str, Any]) -> int:
        return cls.analyze(form_data)["percentage"]
