from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from uuid import uuid4

CANDIDATE_FIELDS = ["name", "phone", "email", "gender", "experience", "qualification", "skills"]


def generate_id() -> str:
    return uuid4().hex[:9]


@dataclass
class Candidate:
    """A single candidate record. ``qualification`` is None when absent."""

    id: str
    name: str
    phone: str
    email: str
    gender: str
    experience: str
    skills: List[str] = field(default_factory=list)
    qualification: Optional[str] = None

    def fields(self) -> Dict[str, Any]:
        """Return every field except the identifier."""
        return {
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "gender": self.gender,
            "experience": self.experience,
            "qualification": self.qualification,
            "skills": list(self.skills),
        }

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "gender": self.gender,
            "experience": self.experience,
            "skills": list(self.skills),
        }
        if self.qualification is not None:
            data["qualification"] = self.qualification
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Candidate":
        """
        Build a candidate from its serialized form.

        Raises:
            ValueError: If a required key is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError("candidate entry must be an object")
        values = {}
        for key in ["id", "name", "phone", "email", "gender", "experience"]:
            value = data.get(key)
            if not isinstance(value, str):
                raise ValueError(f"candidate field '{key}' must be a string")
            values[key] = value

        skills = data.get("skills", [])
        if not isinstance(skills, list) or not all(isinstance(s, str) for s in skills):
            raise ValueError("candidate field 'skills' must be a list of strings")

        qualification = data.get("qualification")
        if qualification is not None and not isinstance(qualification, str):
            raise ValueError("candidate field 'qualification' must be a string")
        # Older blobs store an absent qualification as ""
        if qualification == "":
            qualification = None

        return cls(skills=list(skills), qualification=qualification, **values)

    def copy(self) -> "Candidate":
        return Candidate(id=self.id, **self.fields())


@dataclass
class FilterState:
    gender: List[str] = field(default_factory=list)
    experience: List[str] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.gender or self.experience or self.skills)

    def copy(self) -> "FilterState":
        return FilterState(
            gender=list(self.gender),
            experience=list(self.experience),
            skills=list(self.skills),
        )


@dataclass
class PageView:
    """One page of the searched and filtered collection."""

    records: List[Candidate]
    current_page: int
    total_pages: int
    total_count: int = 0
