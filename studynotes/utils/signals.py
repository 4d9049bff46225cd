from typing import Any, Dict, List
import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from studynotes.utils.text import sentence_split


# Note sentences worth comparing against (drop headings / bullets)
def note_sentences(note_content: str, min_chars: int = 8) -> List[str]:
    return [s for s in sentence_split(note_content) if len(s) >= min_chars]


# Deterministic check that extracted claims actually come from the note
def compute_claim_grounding(
    note_content: str,
    claims: List[Dict[str, Any]],
    threshold: float = 0.2,
) -> Dict[str, Any]:

    sentences = note_sentences(note_content)
    claim_texts = [str(c.get("text") or "") for c in claims]

    if not sentences or not claim_texts:
        return {"grounded_ratio": 0.0, "ungrounded_ids": [], "similarities": []}

    # Character n-grams work for Korean and mixed-script notes
    vec = TfidfVectorizer(analyzer="char_wb", ngram_range=(2, 3))
    vec.fit(sentences + claim_texts)
    sent_mat = vec.transform(sentences)
    claim_mat = vec.transform(claim_texts)

    best = np.asarray(cosine_similarity(claim_mat, sent_mat).max(axis=1)).ravel()

    # One entry per claim in claim order; ids can repeat or be missing
    similarities = []
    ungrounded = []
    for claim, score in zip(claims, best):
        similarities.append({"id": claim.get("id"), "similarity": round(float(score), 4)})
        if score < threshold:
            ungrounded.append(claim.get("id"))

    grounded = len(claims) - len(ungrounded)

    return {
        "grounded_ratio": float(grounded / len(claims)),
        "ungrounded_ids": ungrounded,
        "similarities": similarities,
    }
