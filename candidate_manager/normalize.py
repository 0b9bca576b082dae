from typing import Any, Dict, List, Optional

from .models import CANDIDATE_FIELDS


def clean_text(s: str) -> str:
    return " ".join(s.strip().split())


def normalize_text(s: str) -> str:
    return clean_text(s).lower()


def normalize_qualification(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    cleaned = clean_text(value)
    return cleaned or None


def normalize_skills(skills: Any) -> Any:
    if not isinstance(skills, (list, tuple)):
        return skills
    seen = set()
    result: List[Any] = []
    for skill in skills:
        if not isinstance(skill, str):
            result.append(skill)
            continue
        skill = clean_text(skill)
        if not skill or skill in seen:
            continue
        seen.add(skill)
        result.append(skill)
    return result


def normalize_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Clean user-supplied candidate fields before validation.

    Only known candidate fields are kept (an ``id`` key is dropped). Values of
    the wrong type are passed through unchanged so validation can report them.
    """
    normalized: Dict[str, Any] = {}
    for key in CANDIDATE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key == "qualification":
            normalized[key] = normalize_qualification(value)
        elif key == "skills":
            normalized[key] = normalize_skills(value)
        elif isinstance(value, str):
            normalized[key] = clean_text(value)
        else:
            normalized[key] = value
    return normalized
