"""
Unit Tests for Mark Calculations
"""
import pytest

from coursedesk.mark_calculations import (
    ASSIGNMENT_CRITERIA,
    PRESENTATION_CRITERIA,
    calculate_assignment_total,
    calculate_presentation_total,
    validate_mark_range,
    format_mark,
    calculate_quiz_average,
    get_mark_type_config,
    get_assignment_criteria_by_index,
    get_presentation_criteria_by_index,
)


class TestRubrics:
    """Test rubric tables"""

    def test_assignment_rubric_totals_five(self):
        """Test assignment criteria add up to the assignment maximum"""
        total = sum(c["max_mark"] for c in ASSIGNMENT_CRITERIA)
        assert total == get_mark_type_config("assignment")["max_mark"]

    def test_presentation_rubric_totals_eight(self):
        """Test presentation criteria add up to the presentation maximum"""
        total = sum(c["max_mark"] for c in PRESENTATION_CRITERIA)
        assert total == pytest.approx(get_mark_type_config("presentation")["max_mark"])

    def test_criteria_by_index(self):
        """Test index lookups"""
        assert get_assignment_criteria_by_index(2)["key"] == "appropriateMethod"
        assert get_presentation_criteria_by_index(5)["label"] == "Handling Q&A"

    @pytest.mark.parametrize("index", [-1, 4, 99])
    def test_assignment_index_out_of_range(self, index):
        """Test that indexes outside the rubric return None"""
        assert get_assignment_criteria_by_index(index) is None

    @pytest.mark.parametrize("index", [-1, 6, 99])
    def test_presentation_index_out_of_range(self, index):
        """Test that indexes outside the rubric return None"""
        assert get_presentation_criteria_by_index(index) is None

    def test_unknown_mark_type(self):
        """Test unknown type lookup"""
        assert get_mark_type_config("viva") is None


class TestCalculations:
    """Test mark arithmetic"""

    def test_assignment_total_with_blanks(self):
        """Test that unset criteria count as zero"""
        marks = {"relevantKnowledge": 1, "problemStatement": None,
                 "appropriateMethod": 1.5, "findingsSolution": 1}
        assert calculate_assignment_total(marks) == pytest.approx(3.5)

    def test_presentation_total(self):
        """Test presentation sum"""
        marks = {"getupOutfit": 0.8, "bodyLanguage": 0.6, "englishCommunication": 0.7,
                 "eyeContact": 0.8, "knowledgeContent": 2.4, "handlingQA": 1.2}
        assert calculate_presentation_total(marks) == pytest.approx(6.5)

    @pytest.mark.parametrize("mark,max_mark,expected", [
        (0, 5, True),
        (5, 5, True),
        (5.5, 5, False),
        (-1, 5, False),
    ])
    def test_validate_mark_range(self, mark, max_mark, expected):
        """Test inclusive range check"""
        assert validate_mark_range(mark, max_mark) is expected

    @pytest.mark.parametrize("mark,expected", [
        (4, "4"),
        (4.0, "4"),
        (3.5, "3.5"),
        (2.25, "2.2"),
    ])
    def test_format_mark(self, mark, expected):
        """Test display formatting"""
        assert format_mark(mark) == expected

    def test_quiz_average(self):
        """Test quiz averaging"""
        assert calculate_quiz_average([12, 14, 10]) == pytest.approx(12)
        assert calculate_quiz_average([]) == 0
