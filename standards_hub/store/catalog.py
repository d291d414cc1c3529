"""
Standards Catalog

Seed data for the base layer: the national baseline for each subject
and the state crosswalk that re-publishes those templates under a
state framework. Stores are seeded from here; the engine never reads
this module directly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from standards_hub.schemas.base import (
    DEFAULT_STATE,
    MAX_GRADE,
    MIN_GRADE,
    StandardSource,
    Subject,
    grade_label,
)
from standards_hub.schemas.standards import BaseStandard


class StandardFramework(str, Enum):
    """Published frameworks a base standard can belong to."""
    CCSS = "CCSS"
    NGSS = "NGSS"
    TEKS = "TEKS"
    BEST = "B.E.S.T."
    CA_CCSS = "CA-CCSS"
    NY_NEXTGEN = "NY-NextGen"
    IL_STANDARDS = "IL-Standards"
    VA_SOL = "VA-SOL"
    GA_EXCELLENCE = "GA-Excellence"
    SHAPE_AMERICA = "SHAPE-America"
    HEALTH_ED = "Health-Ed"
    CSTA = "CSTA"
    ISTE = "ISTE"
    C3_FRAMEWORK = "C3-Framework"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    StandardFramework.CCSS: "Common Core (CCSS)",
    StandardFramework.NGSS: "Next Generation Science (NGSS)",
    StandardFramework.TEKS: "Texas TEKS",
    StandardFramework.BEST: "Florida B.E.S.T.",
    StandardFramework.CA_CCSS: "California CCSS",
    StandardFramework.NY_NEXTGEN: "New York Next Gen",
    StandardFramework.IL_STANDARDS: "Illinois Standards",
    StandardFramework.VA_SOL: "Virginia SOL",
    StandardFramework.GA_EXCELLENCE: "Georgia Standards of Excellence",
    StandardFramework.SHAPE_AMERICA: "SHAPE America (PE)",
    StandardFramework.HEALTH_ED: "National Health Education",
    StandardFramework.CSTA: "CSTA Computer Science",
    StandardFramework.ISTE: "ISTE Digital Citizenship",
    StandardFramework.C3_FRAMEWORK: "C3 Social Studies Framework",
}


@dataclass(frozen=True)
class StateMapping:
    """Which framework a state publishes each subject under."""
    state_code: str
    state_name: str
    subject_frameworks: dict[Subject, StandardFramework] = field(default_factory=dict)


STATE_MAPPINGS: dict[str, StateMapping] = {
    m.state_code: m
    for m in (
        StateMapping(DEFAULT_STATE, "National Default", {
            Subject.MATH: StandardFramework.CCSS,
            Subject.ELA: StandardFramework.CCSS,
            Subject.SCIENCE: StandardFramework.NGSS,
            Subject.SOCIAL_STUDIES: StandardFramework.C3_FRAMEWORK,
            Subject.PE: StandardFramework.SHAPE_AMERICA,
            Subject.HEALTH: StandardFramework.HEALTH_ED,
            Subject.COMPUTER_SCIENCE: StandardFramework.CSTA,
        }),
        StateMapping("TX", "Texas", {
            Subject.MATH: StandardFramework.TEKS,
            Subject.ELA: StandardFramework.TEKS,
            Subject.SCIENCE: StandardFramework.TEKS,
            Subject.SOCIAL_STUDIES: StandardFramework.TEKS,
        }),
        StateMapping("FL", "Florida", {
            Subject.MATH: StandardFramework.BEST,
            Subject.ELA: StandardFramework.BEST,
            Subject.SCIENCE: StandardFramework.NGSS,
        }),
        StateMapping("CA", "California", {
            Subject.MATH: StandardFramework.CA_CCSS,
            Subject.ELA: StandardFramework.CA_CCSS,
            Subject.SCIENCE: StandardFramework.NGSS,
        }),
        StateMapping("NY", "New York", {
            Subject.MATH: StandardFramework.NY_NEXTGEN,
            Subject.ELA: StandardFramework.NY_NEXTGEN,
            Subject.SCIENCE: StandardFramework.NGSS,
        }),
        StateMapping("IL", "Illinois", {
            Subject.MATH: StandardFramework.IL_STANDARDS,
            Subject.ELA: StandardFramework.IL_STANDARDS,
            Subject.SCIENCE: StandardFramework.NGSS,
        }),
        StateMapping("VA", "Virginia", {
            Subject.MATH: StandardFramework.VA_SOL,
            Subject.ELA: StandardFramework.VA_SOL,
            Subject.SCIENCE: StandardFramework.VA_SOL,
        }),
        StateMapping("GA", "Georgia", {
            Subject.MATH: StandardFramework.GA_EXCELLENCE,
            Subject.ELA: StandardFramework.GA_EXCELLENCE,
            Subject.SCIENCE: StandardFramework.NGSS,
        }),
    )
}

# ELA strands share one template set
_ELA_FAMILY = {Subject.ELA, Subject.READING, Subject.WRITING}


# =============================================================================
# TEMPLATES
# =============================================================================
# (id template, description). {p} is the framework prefix, {g} the grade.

_MATH = [
    ("{p}.MATH.{g}.OA.1", "Operations & Algebraic Thinking — Represent and solve problems involving addition, subtraction, multiplication, and division."),
    ("{p}.MATH.{g}.NBT.1", "Number & Operations in Base Ten — Understand place value system and perform multi-digit arithmetic."),
    ("{p}.MATH.{g}.NF.1", "Number & Operations — Fractions: Develop understanding of fractions as numbers and equivalent fractions."),
    ("{p}.MATH.{g}.MD.1", "Measurement & Data — Solve problems involving measurement, data representation, and geometric measurement."),
    ("{p}.MATH.{g}.G.1", "Geometry — Reason with shapes and their attributes; classify two-dimensional figures."),
    ("{p}.MATH.PRACTICE.MP1", "Make sense of problems and persevere in solving them."),
    ("{p}.MATH.PRACTICE.MP4", "Model with mathematics."),
    ("{p}.MATH.PRACTICE.MP6", "Attend to precision."),
]

_ELA = [
    ("{p}.ELA.RL.{g}.1", "Read closely and cite textual evidence to support analysis of what the text says explicitly and by inference."),
    ("{p}.ELA.RL.{g}.2", "Determine central ideas or themes of a text and analyze their development; summarize key details."),
    ("{p}.ELA.RL.{g}.4", "Interpret words and phrases as they are used in a text, including figurative and connotative meanings."),
    ("{p}.ELA.W.{g}.1", "Write arguments / opinion pieces to support claims with clear reasons and relevant evidence."),
    ("{p}.ELA.W.{g}.4", "Produce clear and coherent writing appropriate to task, purpose, and audience."),
    ("{p}.ELA.SL.{g}.1", "Prepare for and participate effectively in collaborative discussions."),
]

_SCIENCE = [
    ("{p}.SCI.{g}.PS.1", "Physical Science — Matter and Its Interactions: Develop models to describe the atomic composition of simple molecules."),
    ("{p}.SCI.{g}.LS.1", "Life Science — From Molecules to Organisms: Use evidence to support explanations of how organisms grow, develop, and reproduce."),
    ("{p}.SCI.{g}.ESS.1", "Earth & Space Science — Earth's Place in the Universe: Develop and use models of the Earth-sun-moon system."),
    ("{p}.SCI.{g}.ETS.1", "Engineering & Technology — Define criteria and constraints of a design problem and evaluate competing solutions."),
]

_SOCIAL_STUDIES = [
    ("C3.D2.His.{g}.1", "History — Evaluate sources and use evidence to construct historical arguments."),
    ("C3.D2.Geo.{g}.1", "Geography — Create and use geographic representations to analyze spatial patterns."),
    ("C3.D2.Civ.{g}.1", "Civics — Analyze the origins, purposes, and impact of constitutions, laws, and key documents."),
    ("C3.D4.{g}.1", "Communicating Conclusions — Construct arguments using claims and evidence from multiple sources."),
]

_PE = [
    ("SHAPE.{g}.S1", "Motor Competence — Demonstrate competency in a variety of motor skills and movement patterns."),
    ("SHAPE.{g}.S3", "Physical Activity — Demonstrate the knowledge and skills to achieve and maintain a health-enhancing level of physical activity."),
    ("SHAPE.{g}.S5", "Value of Physical Activity — Recognize the value of physical activity for health, enjoyment, challenge, and social interaction."),
]

_HEALTH = [
    ("NHES.{g}.1", "Comprehend concepts related to health promotion and disease prevention to enhance health."),
    ("NHES.{g}.5", "Demonstrate the ability to use decision-making skills to enhance health."),
]

_COMPUTER_SCIENCE = [
    ("CSTA.{g}.AP.1", "Algorithms & Programming — Design and iteratively develop programs that combine control structures.", StandardFramework.CSTA),
    ("CSTA.{g}.DA.1", "Data & Analysis — Collect, create, and transform data to identify patterns and make predictions.", StandardFramework.CSTA),
    ("ISTE.{g}.CC.1", "Digital Citizenship — Cultivate and manage digital identity and reputation with an awareness of permanence.", StandardFramework.ISTE),
]

# Subjects whose templates take the mapped framework as prefix
_FRAMEWORK_TEMPLATES = {
    Subject.MATH: _MATH,
    Subject.ELA: _ELA,
    Subject.SCIENCE: _SCIENCE,
}

# Subjects published under one fixed national framework
_FIXED_TEMPLATES = {
    Subject.SOCIAL_STUDIES: (_SOCIAL_STUDIES, StandardFramework.C3_FRAMEWORK),
    Subject.PE: (_PE, StandardFramework.SHAPE_AMERICA),
    Subject.HEALTH: (_HEALTH, StandardFramework.HEALTH_ED),
}


def state_mapping(state_code: str) -> StateMapping | None:
    return STATE_MAPPINGS.get(state_code)


def _template_subject(subject: Subject) -> Subject:
    return Subject.ELA if subject in _ELA_FAMILY else subject


def _build(
    templates: list[tuple],
    framework: StandardFramework,
    subject: Subject,
    grade: int,
    source: StandardSource,
    state_code: str,
) -> list[BaseStandard]:
    standards = []
    for template in templates:
        id_template, description = template[0], template[1]
        entry_framework = template[2] if len(template) > 2 else framework
        standards.append(BaseStandard(
            standard_id=id_template.format(p=entry_framework.value, g=grade),
            framework=entry_framework.value,
            description=description,
            subject=subject,
            grade=grade,
            source=source,
            state_code=state_code,
            source_name=entry_framework.display_name,
        ))
    return standards


def _general(subject: Subject, grade: int, framework: StandardFramework) -> list[BaseStandard]:
    """Cross-cutting entries for subjects without a published framework (Art, Music)."""
    label = grade_label(grade)
    rows = [
        (f"GEN.{subject.value}.{grade}.1", framework.value, f"Aligned to {subject.value} Grade {label} State Standards", framework.display_name),
        (f"21C.{grade}.CT", "21st-Century", "21st Century Skills — Critical Thinking and Collaboration", "21st Century Learning"),
        (f"SEL.{grade}.SM", "SEL", "SEL Competency — Self-Management and Responsible Decision-Making", "Social-Emotional Learning"),
    ]
    return [
        BaseStandard(
            standard_id=standard_id,
            framework=fw,
            description=description,
            subject=subject,
            grade=grade,
            source=StandardSource.NATIONAL,
            source_name=source_name,
        )
        for standard_id, fw, description, source_name in rows
    ]


def national_standards(subject: Subject, grade: int) -> list[BaseStandard]:
    """National baseline for one subject and grade."""
    subject = Subject(subject)
    template_subject = _template_subject(subject)
    national = STATE_MAPPINGS[DEFAULT_STATE]

    if template_subject in _FRAMEWORK_TEMPLATES:
        framework = national.subject_frameworks[template_subject]
        return _build(_FRAMEWORK_TEMPLATES[template_subject], framework, subject, grade,
                      StandardSource.NATIONAL, DEFAULT_STATE)
    if subject in _FIXED_TEMPLATES:
        templates, framework = _FIXED_TEMPLATES[subject]
        return _build(templates, framework, subject, grade, StandardSource.NATIONAL, DEFAULT_STATE)
    if subject == Subject.COMPUTER_SCIENCE:
        return _build(_COMPUTER_SCIENCE, StandardFramework.CSTA, subject, grade,
                      StandardSource.NATIONAL, DEFAULT_STATE)
    return _general(subject, grade, StandardFramework.CCSS)


def state_standards(state_code: str, subject: Subject, grade: int) -> list[BaseStandard]:
    """
    State crosswalk for one subject and grade.

    Only subjects the state maps to a framework and whose templates are
    framework-parameterized produce entries; everything else falls back
    to the national baseline during resolution.
    """
    mapping = state_mapping(state_code)
    if mapping is None or state_code == DEFAULT_STATE:
        return []
    subject = Subject(subject)
    template_subject = _template_subject(subject)
    framework = mapping.subject_frameworks.get(template_subject)
    if framework is None or template_subject not in _FRAMEWORK_TEMPLATES:
        return []
    return _build(_FRAMEWORK_TEMPLATES[template_subject], framework, subject, grade,
                  StandardSource.STATE, state_code)


def iter_catalog() -> Iterator[BaseStandard]:
    """Every base standard the catalog knows about, national first."""
    for subject in Subject:
        for grade in range(MIN_GRADE, MAX_GRADE + 1):
            yield from national_standards(subject, grade)
    for state_code in STATE_MAPPINGS:
        if state_code == DEFAULT_STATE:
            continue
        for subject in Subject:
            for grade in range(MIN_GRADE, MAX_GRADE + 1):
                yield from state_standards(state_code, subject, grade)
