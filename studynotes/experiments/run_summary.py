import sys

from studynotes.models.summarizer import generate_summary
from studynotes.utils.io import load_note


def main():
    #parse args
    if len(sys.argv) < 2:
        print("Usage: python -m studynotes.experiments.run_summary <note_path> [subject] [title]")
        sys.exit(1)

    note_path = sys.argv[1].strip()
    subject = sys.argv[2].strip() if len(sys.argv) > 2 else None
    title = sys.argv[3].strip() if len(sys.argv) > 3 else None

    note = load_note(note_path)
    summary = generate_summary(note, title=title, subject=subject)

    #print summary
    print("\n===== STUDY SUMMARY =====")
    print("Difficulty:", summary["difficulty"])
    print("Estimated time:", summary["estimated_time"])
    print("\nKey points:")
    for point in summary["key_points"]:
        print(" -", point)
    print("\nSummary:\n", summary["summary"])
    print("\nTags:", ", ".join(summary["tags"]))


if __name__ == "__main__":
    main()
