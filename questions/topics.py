"""
questions/topics.py — Grade → curriculum topic table.

This is the only file that needs to change when the curriculum changes.
The remote source names the topic in its prompt so questions stay
grade-appropriate; grades outside the table fall back to a generic topic.
"""

GRADE_TOPICS: dict[int, str] = {
    1:  "simple addition and subtraction with numbers 0-20",
    2:  "addition and subtraction with 2-digit numbers",
    3:  "multiplication facts (1-10) and basic division",
    4:  "multi-digit multiplication, long division, and basic fractions",
    5:  "operations with fractions, decimals, and volume",
    6:  "ratios, rates, percentages, and introduction to negative numbers",
    7:  "proportions, rational numbers, linear expressions, and probability",
    8:  "linear equations, functions, exponents, and pythagorean theorem",
    9:  "Algebra I: quadratics, polynomials, and systems of equations",
    10: "Geometry: proofs, theorems, trigonometry basics, and circle properties",
    11: "Algebra II: logarithms, complex numbers, and advanced functions",
    12: "Pre-Calculus/Calculus: limits, derivatives, and integrals",
}


def topic_for_grade(grade_level: int) -> str:
    """Return the curriculum topic for a grade.

    Args:
        grade_level: School grade. 1..12 have dedicated topics.

    Returns:
        Topic description to embed in a generation prompt.
    """
    return GRADE_TOPICS.get(grade_level, f"general math suitable for Grade {grade_level}")
