"""
Fixed option lists and the built-in sample candidates.

The seed records carry no identifiers; the store assigns fresh ones when it
seeds an empty persistence backend.
"""

from typing import Any, Dict, List

GENDER_OPTIONS = ["Male", "Female", "Other"]

EXPERIENCE_OPTIONS = [
    "1 Year",
    "2 Years",
    "3 Years",
    "4 Years",
    "5 Years",
    "6 Years",
    "7 Years",
    "8 Years",
    "9 Years",
    "10+ Years",
]

SKILLS = [
    "JavaScript", "TypeScript", "React", "Angular", "Vue.js",
    "Node.js", "Python", "Java", "C#", "PHP",
    "HTML", "CSS", "SQL", "MongoDB", "AWS",
    "Docker", "Kubernetes", "Git", "Redux", "GraphQL",
]

FACETS = ("gender", "experience", "skills")

STORAGE_KEY = "candidates_data"

DEFAULT_PAGE_SIZE = 10

SEED_CANDIDATES: List[Dict[str, Any]] = [
    {
        "name": "John Doe",
        "phone": "+1 (555) 123-4567",
        "email": "john.doe@example.com",
        "gender": "Male",
        "experience": "3 Years",
        "qualification": "Bachelor of Arts (BA)",
        "skills": ["JavaScript", "React", "Node.js"],
    },
    {
        "name": "Jane Smith",
        "phone": "+1 (555) 987-6543",
        "email": "jane.smith@example.com",
        "gender": "Female",
        "experience": "5 Years",
        "qualification": "Master of Computer Science (MCS)",
        "skills": ["Python", "Django", "SQL"],
    },
    {
        "name": "Michael Johnson",
        "phone": "+1 (555) 456-7890",
        "email": "michael.j@example.com",
        "gender": "Male",
        "experience": "2 Years",
        "qualification": "Bachelor of Science (BS)",
        "skills": ["Java", "Spring", "Hibernate"],
    },
    {
        "name": "Emily Wilson",
        "phone": "+1 (555) 789-0123",
        "email": "emily.w@example.com",
        "gender": "Female",
        "experience": "4 Years",
        "qualification": "Master of Business Administration (MBA)",
        "skills": ["TypeScript", "Angular", "MongoDB"],
    },
    {
        "name": "Alex Rivera",
        "phone": "+1 (555) 234-5678",
        "email": "alex.r@example.com",
        "gender": "Other",
        "experience": "6 Years",
        "qualification": "PhD in Computer Science",
        "skills": ["C#", ".NET", "SQL", "Azure"],
    },
    {
        "name": "Samantha Lee",
        "phone": "+1 (555) 345-6789",
        "email": "samantha.l@example.com",
        "gender": "Female",
        "experience": "3 Years",
        "qualification": "Bachelor of Engineering (BE)",
        "skills": ["React", "Redux", "JavaScript", "HTML", "CSS"],
    },
    {
        "name": "David Kim",
        "phone": "+1 (555) 876-5432",
        "email": "david.k@example.com",
        "gender": "Male",
        "experience": "7 Years",
        "qualification": "Master of Science (MS)",
        "skills": ["Python", "Machine Learning", "TensorFlow"],
    },
    {
        "name": "Olivia Martinez",
        "phone": "+1 (555) 567-8901",
        "email": "olivia.m@example.com",
        "gender": "Female",
        "experience": "2 Years",
        "qualification": "Bachelor of Technology (BTech)",
        "skills": ["Vue.js", "JavaScript", "CSS"],
    },
    {
        "name": "Ethan Brown",
        "phone": "+1 (555) 678-9012",
        "email": "ethan.b@example.com",
        "gender": "Male",
        "experience": "4 Years",
        "qualification": "Bachelor of Computer Applications (BCA)",
        "skills": ["PHP", "Laravel", "MySQL"],
    },
    {
        "name": "Sophia Chen",
        "phone": "+1 (555) 789-0123",
        "email": "sophia.c@example.com",
        "gender": "Female",
        "experience": "5 Years",
        "qualification": "Master of Computer Applications (MCA)",
        "skills": ["AWS", "DevOps", "Docker", "Kubernetes"],
    },
    {
        "name": "Daniel Wilson",
        "phone": "+1 (555) 890-1234",
        "email": "daniel.w@example.com",
        "gender": "Male",
        "experience": "8 Years",
        "qualification": "PhD in Data Science",
        "skills": ["Data Science", "R", "Python", "Statistics"],
    },
    {
        "name": "Ava Rodriguez",
        "phone": "+1 (555) 901-2345",
        "email": "ava.r@example.com",
        "gender": "Female",
        "experience": "3 Years",
        "qualification": "Bachelor of Science (BS)",
        "skills": ["JavaScript", "React Native", "Mobile Development"],
    },
]
