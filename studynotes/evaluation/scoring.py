from typing import Any, Dict, List
import math

TOP_ISSUES_PER_SEVERITY = 3

# Correct-fraction thresholds → (grade, message, color)
GRADE_BANDS = [
    (0.9, "S", "매우 정확한 노트입니다! (S등급)", "blue"),
    (0.8, "A", "정확도가 높은 우수한 노트입니다. (A등급)", "green"),
    (0.6, "B", "대체로 정확하지만 일부 확인이 필요합니다. (B등급)", "yellow"),
]
LOW_GRADE = ("C", "많은 부분에서 수정이 필요합니다. (C등급)", "orange")
CRITICAL_MESSAGE = "{count}개의 중대한 오류가 발견되었습니다. 수정이 필요합니다."


def _with_verdict(claims: List[Dict[str, Any]], verdict: str) -> List[Dict[str, Any]]:
    return [c for c in claims if c.get("verdict") == verdict]


def _with_severity(claims: List[Dict[str, Any]], severity: str) -> List[Dict[str, Any]]:
    return [c for c in claims if c.get("severity") == severity]


# Percentage rounded half up
def accuracy_percent(correct: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(math.floor(correct * 100.0 / total + 0.5))


def overall_assessment(claims: List[Dict[str, Any]]) -> Dict[str, str]:

    # Any critical claim caps the grade, whatever its verdict
    critical_count = len(_with_severity(claims, "critical"))
    if critical_count > 0:
        return {
            "grade": "C",
            "message": CRITICAL_MESSAGE.format(count=critical_count),
            "color": "red",
        }

    if claims:
        accuracy = len(_with_verdict(claims, "correct")) / len(claims)
        for threshold, grade, message, color in GRADE_BANDS:
            if accuracy >= threshold:
                return {"grade": grade, "message": message, "color": color}

    grade, message, color = LOW_GRADE
    return {"grade": grade, "message": message, "color": color}


# Aggregate verified claims into the fact-check report
def generate_fact_check_report(claims: List[Dict[str, Any]]) -> Dict[str, Any]:

    errors = _with_verdict(claims, "incorrect")
    warnings = _with_verdict(claims, "partially_correct")
    unclear = _with_verdict(claims, "unclear")
    correct = _with_verdict(claims, "correct")

    critical_errors = _with_severity(errors, "critical")
    major_errors = _with_severity(errors, "major")

    top = critical_errors[:TOP_ISSUES_PER_SEVERITY] + major_errors[:TOP_ISSUES_PER_SEVERITY]

    return {
        "summary": {
            "total_checked": len(claims),
            "correct": len(correct),
            "incorrect": len(errors),
            "partially_correct": len(warnings),
            "unclear": len(unclear),
            "accuracy": accuracy_percent(len(correct), len(claims)),
        },
        "severity": {
            "critical": len(critical_errors),
            "major": len(major_errors),
            "minor": len(_with_severity(errors, "minor")),
        },
        "top_issues": [
            {
                "text": c.get("text"),
                "verdict": c.get("verdict"),
                "severity": c.get("severity"),
                "correction": c.get("correction"),
            }
            for c in top
        ],
        "overall_assessment": overall_assessment(claims),
    }
