import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .catalog import EXPERIENCE_OPTIONS, GENDER_OPTIONS, SKILLS

REQUIRED_STR_FIELDS = ["name", "phone", "email", "gender", "experience"]

NAME_MIN_LENGTH = 2

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@.]+(\.[^\s@.]+)*\.[A-Za-z]{2,}$")


@dataclass
class FieldError:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass
class ValidationResult:
    errors: List[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def fields(self) -> List[str]:
        return [e.field for e in self.errors]

    def add(self, field_name: str, message: str) -> None:
        self.errors.append(FieldError(field_name, message))


class ValidationError(Exception):
    """Raised when candidate fields fail validation."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        detail = "; ".join(str(e) for e in self.errors)
        super().__init__(f"Invalid candidate: {detail}")

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _valid_email(v: str) -> bool:
    return bool(EMAIL_RE.match(v.strip()))


def validate_candidate(data: Dict[str, Any], require_skills: bool = True) -> ValidationResult:
    """
    Check candidate fields and collect one error per offending field.

    Args:
        data: Candidate fields (identifier excluded)
        require_skills: Whether an empty skill list is an error. New
            candidates need at least one skill; edits may clear them.

    Returns:
        ValidationResult; ``is_valid`` is True when no errors were found
    """
    result = ValidationResult()

    for f in REQUIRED_STR_FIELDS:
        if f not in data or data[f] is None:
            result.add(f, "is required")
        elif not _is_non_empty_str(data[f]):
            result.add(f, "must be a non-empty string")

    name = data.get("name")
    if _is_non_empty_str(name) and len(name.strip()) < NAME_MIN_LENGTH:
        result.add("name", f"must be at least {NAME_MIN_LENGTH} characters")

    email = data.get("email")
    if _is_non_empty_str(email) and not _valid_email(email):
        result.add("email", "must be a valid email address")

    gender = data.get("gender")
    if _is_non_empty_str(gender) and gender not in GENDER_OPTIONS:
        result.add("gender", f"must be one of {', '.join(GENDER_OPTIONS)}")

    experience = data.get("experience")
    if _is_non_empty_str(experience) and experience not in EXPERIENCE_OPTIONS:
        result.add("experience", f"must be one of {', '.join(EXPERIENCE_OPTIONS)}")

    qualification = data.get("qualification")
    if qualification is not None and not isinstance(qualification, str):
        result.add("qualification", "must be a string if provided")

    skills = data.get("skills", [])
    if skills is None:
        skills = []
    if not isinstance(skills, (list, tuple)) or not all(isinstance(s, str) for s in skills):
        result.add("skills", "must be a list of strings")
    elif require_skills and not skills:
        result.add("skills", "select at least one skill")

    return result


def validate_candidate_strict(data: Dict[str, Any], require_skills: bool = True) -> Tuple[bool, List[FieldError]]:
    """
    Validation plus a catalog check: every skill must be a known catalog skill.

    Returns:
        Tuple of (is_valid, errors)
    """
    result = validate_candidate(data, require_skills=require_skills)
    skills = data.get("skills")
    if isinstance(skills, (list, tuple)) and "skills" not in result.fields():
        unknown = [s for s in skills if s not in SKILLS]
        if unknown:
            result.add("skills", f"unknown skills: {', '.join(str(s) for s in unknown)}")
    return result.is_valid, result.errors
