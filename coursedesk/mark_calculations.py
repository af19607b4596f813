"""
Rubrics and arithmetic for continuous assessment marks.
"""

from typing import Optional, Dict, Mapping, Iterable, Tuple


ASSIGNMENT_CRITERIA = (
    {"key": "relevantKnowledge", "label": "Relevant Knowledge", "max_mark": 1},
    {"key": "problemStatement", "label": "Defining Problem Statement", "max_mark": 1},
    {"key": "appropriateMethod", "label": "Use of appropriate method/formula", "max_mark": 2},
    {"key": "findingsSolution", "label": "Findings/Solution", "max_mark": 1},
)

PRESENTATION_CRITERIA = (
    {"key": "getupOutfit", "label": "Getup and Outfit", "max_mark": 0.8},
    {"key": "bodyLanguage", "label": "Body Language", "max_mark": 0.8},
    {"key": "englishCommunication", "label": "English Communication", "max_mark": 0.8},
    {"key": "eyeContact", "label": "Eye Contact", "max_mark": 0.8},
    {"key": "knowledgeContent", "label": "Knowledge/Content", "max_mark": 3.2},
    {"key": "handlingQA", "label": "Handling Q&A", "max_mark": 1.6},
)

MARK_TYPES = (
    {"value": "assignment", "label": "Assignment", "max_mark": 5},
    {"value": "presentation", "label": "Presentation", "max_mark": 8},
    {"value": "quiz", "label": "Quiz", "max_mark": 15},
    {"value": "midterm", "label": "Midterm", "max_mark": 25},
    {"value": "final", "label": "Final", "max_mark": 40},
)


def _sum_marks(marks: Mapping[str, Optional[float]]) -> float:
    return sum(mark or 0 for mark in marks.values())


def calculate_assignment_total(marks: Mapping[str, Optional[float]]) -> float:
    """Sum of the filled-in assignment criteria; blanks count as zero"""
    return _sum_marks(marks)


def calculate_presentation_total(marks: Mapping[str, Optional[float]]) -> float:
    """Sum of the filled-in presentation criteria; blanks count as zero"""
    return _sum_marks(marks)


def validate_mark_range(mark: float, max_mark: float) -> bool:
    return 0 <= mark <= max_mark


def format_mark(mark: float) -> str:
    """Whole marks print bare, fractional ones with one decimal"""
    if mark % 1 == 0:
        return str(int(mark))
    return f"{mark:.1f}"


def calculate_quiz_average(quiz_marks: Iterable[float]) -> float:
    quiz_marks = list(quiz_marks)
    if not quiz_marks:
        return 0
    return sum(quiz_marks) / len(quiz_marks)


def get_mark_type_config(mark_type: str) -> Optional[Dict]:
    for config in MARK_TYPES:
        if config["value"] == mark_type:
            return config
    return None


def _criterion_at(criteria: Tuple[Dict, ...], index: int) -> Optional[Dict]:
    if 0 <= index < len(criteria):
        return criteria[index]
    return None


def get_assignment_criteria_by_index(index: int) -> Optional[Dict]:
    return _criterion_at(ASSIGNMENT_CRITERIA, index)


def get_presentation_criteria_by_index(index: int) -> Optional[Dict]:
    return _criterion_at(PRESENTATION_CRITERIA, index)
