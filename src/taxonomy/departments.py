from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping

TAXONOMY_VERSION: Final = "2025.1"

AI_DEPARTMENT: Final = "Artificial Intelligence"

# Machine-learning vocabulary that only ever targets the AI department.
AI_TERMS: Final = (
    "artificial intelligence",
    "ai",
    "machine learning",
    "ml",
    "deep learning",
    "neural network",
    "computer vision",
    "natural language processing",
    "nlp",
)

_DEPARTMENT_DOMAINS: dict[str, tuple[str, ...]] = {
    "Computer Science": (
        "Algorithms & Data Structures",
        "Software Development",
        "Database Systems",
        "Operating Systems",
        "Computer Networks",
        "Cybersecurity",
        "Cloud Computing",
        "Data Science",
        "Computer Graphics & AR/VR",
        "Distributed Systems",
        "Theory of Computation",
    ),
    "Information Technology": (
        "Web Development",
        "Mobile App Development",
        "Software Engineering",
        "Information Security",
        "Cloud & DevOps",
        "Big Data Analytics",
        "Database Management",
        "IT Infrastructure & Networking",
        "E-commerce & ERP Systems",
        "Human-Computer Interaction",
    ),
    "Electrical Engineering": (
        "Power Systems",
        "Electrical Machines",
        "Control Systems",
        "Power Electronics & Drives",
        "Renewable Energy Systems",
        "High Voltage Engineering",
        "Smart Grid & Energy Management",
        "Microgrids & Distributed Generation",
        "Instrumentation & Measurement",
        "Electromagnetics",
    ),
    "Electronics and Telecommunication": (
        "VLSI Design",
        "Embedded Systems",
        "Digital Signal Processing (DSP)",
        "Control Systems",
        "Communication Systems (Wireless, Optical, Satellite)",
        "Antennas & Microwave Engineering",
        "Internet of Things (IoT)",
        "Robotics & Automation",
        "Nanoelectronics",
        "Power Electronics",
    ),
    "Mechanical Engineering": (
        "Design Engineering",
        "Thermal Engineering",
        "Manufacturing & Production",
        "Mechatronics",
        "CAD/CAM & Robotics",
        "Fluid Mechanics & Hydraulics",
        "Automotive Engineering",
        "Aerospace Engineering",
        "Energy Systems & Power Plants",
        "Industrial Engineering",
    ),
    "Civil Engineering": (
        "Structural Engineering",
        "Geotechnical Engineering",
        "Transportation Engineering",
        "Environmental Engineering",
        "Construction Management",
        "Water Resources Engineering",
        "Surveying & Geoinformatics",
        "Coastal & Offshore Engineering",
        "Urban Planning & Smart Cities",
        "Earthquake Engineering",
    ),
    AI_DEPARTMENT: (
        "Machine Learning",
        "Deep Learning",
        "Natural Language Processing (NLP)",
        "Computer Vision",
        "Reinforcement Learning",
        "Neural Networks",
        "AI in Robotics",
        "Explainable AI",
        "AI in Healthcare / Finance / IoT",
        "Data Mining & Knowledge Discovery",
    ),
}

DEPARTMENT_DOMAINS: Final[Mapping[str, tuple[str, ...]]] = MappingProxyType(_DEPARTMENT_DOMAINS)


def known_departments() -> list[str]:
    """Department names in taxonomy order."""

    return list(DEPARTMENT_DOMAINS)


def canonical_department(department: str | None) -> str | None:
    """Resolve ``department`` to its taxonomy spelling, or ``None`` when unknown.

    Lookup tolerates surrounding whitespace and case differences so stored
    profile values such as ``"computer science "`` still resolve.
    """

    if not department or not isinstance(department, str):
        return None
    if department in DEPARTMENT_DOMAINS:
        return department
    wanted = " ".join(department.split()).casefold()
    for name in DEPARTMENT_DOMAINS:
        if name.casefold() == wanted:
            return name
    return None


def department_domains(department: str | None) -> tuple[str, ...]:
    name = canonical_department(department)
    if name is None:
        return ()
    return DEPARTMENT_DOMAINS[name]
