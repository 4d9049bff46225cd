import logging
import os
import sys
from pathlib import Path

from studynotes.config import Config
from studynotes.evaluation.pipeline import fact_check_note
from studynotes.utils.io import load_note, write_json
from studynotes.visualization.dashboard import plot_verdicts


def main():
    #parse args
    if len(sys.argv) < 2:
        print("Usage: python -m studynotes.experiments.run_fact_check <note_path> [subject] [all]")
        sys.exit(1)

    note_path = Path(sys.argv[1].strip())
    subject = sys.argv[2].strip() if len(sys.argv) > 2 else None
    check_all = len(sys.argv) > 3 and sys.argv[3].strip().lower() == "all"

    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")

    print(f"\nNote selected: {note_path}")
    print(f"Subject: {subject or '-'}")
    print(f"Check all priorities: {check_all}")

    #load note
    note = load_note(str(note_path))
    print(f"Loaded {len(note)} characters")

    #run pipeline
    result = fact_check_note(note, subject=subject, check_all=check_all)

    #save outputs
    out_dir = Config.OUTPUT_DIR / note_path.stem
    write_json(os.path.join(out_dir, "fact_check.json"), result)
    chart = plot_verdicts(result, out_dir / "verdicts.png")

    report = result["report"]
    summary = report["summary"]
    assessment = report["overall_assessment"]

    #print final results
    print("\n===== FACT-CHECK REPORT =====")
    print(f"Grade: {assessment['grade']}  ({assessment['message']})")
    print(f"Accuracy: {summary['accuracy']}%")
    print(
        f"Checked: {summary['total_checked']}  correct: {summary['correct']}  "
        f"incorrect: {summary['incorrect']}  partial: {summary['partially_correct']}  "
        f"unclear: {summary['unclear']}"
    )
    print("Severity:", report["severity"])
    print("Grounded claims:", f"{result['metadata']['grounding']['grounded_ratio']:.0%}")

    if report["top_issues"]:
        print("\nTop issues:")
        for issue in report["top_issues"]:
            print(f" - [{issue['severity']}] {issue['text']}")
            if issue.get("correction"):
                print(f"   → {issue['correction']}")

    print("\nOutputs saved to:", out_dir)
    print("Chart:", chart)


if __name__ == "__main__":
    main()
