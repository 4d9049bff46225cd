import json
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.ticker import MaxNLocator
from pathlib import Path
import sys

VERDICT_ORDER = ["correct", "partially_correct", "unclear", "incorrect", "error"]
VERDICT_COLORS = {
    "correct": "#2e7d32",
    "partially_correct": "#f9a825",
    "unclear": "#9e9e9e",
    "incorrect": "#c62828",
    "error": "#6a1b9a",
}


# count verdicts over checked claims
def verdict_counts(claims):
    counts = {v: 0 for v in VERDICT_ORDER}
    for c in claims:
        v = c.get("verdict")
        if v in counts:
            counts[v] += 1
    return counts


# bar chart of verdicts with accuracy + grade in the title
def plot_verdicts(result, out_path):
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    counts = verdict_counts(result.get("claims", []))
    report = result.get("report", {})
    accuracy = report.get("summary", {}).get("accuracy", 0)
    grade = report.get("overall_assessment", {}).get("grade", "-")

    fig, ax = plt.subplots(figsize=(7, 4))
    ax.bar(
        list(counts.keys()),
        list(counts.values()),
        color=[VERDICT_COLORS[v] for v in counts],
    )
    ax.set_ylabel("Claims")
    ax.set_title(f"Fact-check verdicts: accuracy {accuracy}% (grade {grade})")
    ax.yaxis.set_major_locator(MaxNLocator(integer=True))
    fig.tight_layout()
    fig.savefig(out_path, dpi=120)
    plt.close(fig)

    return out_path


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python -m studynotes.visualization.dashboard <fact_check.json> <out.png>")
        sys.exit(1)

    data = json.loads(Path(sys.argv[1]).read_text(encoding="utf-8"))
    print("Saved:", plot_verdicts(data, sys.argv[2]))
