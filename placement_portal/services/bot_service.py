"""
PlacementBot - keyword scoring over the static FAQ corpus.

Scoring, against the lower-cased question:
    +2 for every FAQ tag that appears as a substring of the question
    +1 for every whitespace token of the question that appears as a
       substring of the lower-cased FAQ question

FAQs scoring 0 are dropped; the rest are stable-sorted by score, so ties
keep corpus order. The best match answers, the next three are "related".
With no match the fallback answer is returned with the first three FAQs.
"""

from typing import List, Tuple

from loguru import logger

from placement_portal.db.repositories import Store
from placement_portal.models.entities import FAQ

FALLBACK_ANSWER = (
    "I couldn't find a specific answer to your question. "
    "Please contact the Placement Office for assistance."
)
RELATED_LIMIT = 3


def score_faq(question: str, faq: FAQ) -> int:
    text = question.lower()
    faq_question = faq.question.lower()

    score = 0
    for tag in faq.tags:
        if tag.lower() in text:
            score += 2
    for token in text.split():
        if token in faq_question:
            score += 1
    return score


def rank_faqs(question: str, faqs: List[FAQ]) -> List[Tuple[int, FAQ]]:
    scored = [(score_faq(question, faq), faq) for faq in faqs]
    scored = [pair for pair in scored if pair[0] > 0]
    # sorted() is stable
    return sorted(scored, key=lambda pair: pair[0], reverse=True)


def _related(faqs: List[FAQ]) -> List[dict]:
    return [{"question": faq.question, "answer": faq.answer} for faq in faqs]


class BotService:

    def __init__(self, store: Store):
        self.store = store

    def list_faqs(self) -> List[FAQ]:
        return self.store.faqs.list_all()

    def answer(self, question: str) -> dict:
        """
        Returns:
            {"answer": str, "related_faqs": [{"question", "answer"}, ...]}
        """
        faqs = self.store.faqs.list_all()
        ranked = rank_faqs(question or "", faqs)

        if not ranked:
            logger.debug(f"[Bot] no FAQ matched: {question!r}")
            return {"answer": FALLBACK_ANSWER, "related_faqs": _related(faqs[:RELATED_LIMIT])}

        best_score, best = ranked[0]
        logger.debug(f"[Bot] FAQ {best.id} matched with score {best_score}")
        return {
            "answer": best.answer,
            "related_faqs": _related([faq for _, faq in ranked[1:1 + RELATED_LIMIT]]),
        }
