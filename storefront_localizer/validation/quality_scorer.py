"""Quality scoring system for translations."""

from typing import Any, Dict, List, Mapping, Optional

from ..models import ProviderTranslation, QualityAssessment, content_type_of

DEFAULT_WEIGHTS = {
    "accuracy": 0.4,
    "fluency": 0.3,
    "consistency": 0.2,
    "style": 0.1,
}

# Informal markers penalized in formal copy
SLANG_MARKERS = ("lol", "omg", "btw")


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(high, max(low, value))


def _terms(value: Any) -> List[str]:
    """A single term or a list of terms."""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(term) for term in value]


class QualityScorer:
    """
    Scores translation quality with lightweight heuristics (all scores 0-1).

    Components and default weights:
    - Accuracy: 40% (word overlap with the source, length ratio sanity)
    - Fluency: 30% (spacing and punctuation smells)
    - Consistency: 20% (required, forbidden and preferred terminology)
    - Style: 10% (content type and tone expectations)

    The weighted total is blended 70/30 with the provider confidence when one
    is reported.
    """

    def __init__(self, weights: Optional[Dict[str, float]] = None):
        """
        Initialize the quality scorer.

        Args:
            weights: Optional override of the component weights
        """
        self.weights = {**DEFAULT_WEIGHTS, **(weights or {})}

    def assess_translation_quality(
        self,
        result: ProviderTranslation,
        original: str,
        from_lang: str,
        to_lang: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> QualityAssessment:
        """
        Assess a provider translation against its source text.

        Args:
            result: Provider answer (text and confidence)
            original: Source text
            from_lang: Source language code
            to_lang: Target language code
            context: Request hints (contentType, tone, requiredTerms, ...)

        Returns:
            QualityAssessment with component scores and recommendations
        """
        context = context or {}
        translated = result.text or ""

        accuracy = self.score_accuracy(original, translated)
        fluency = self.score_fluency(translated)
        consistency = self.score_consistency(translated, context)
        style = self.score_style(translated, context)

        overall = (
            accuracy * self.weights["accuracy"]
            + fluency * self.weights["fluency"]
            + consistency * self.weights["consistency"]
            + style * self.weights["style"]
        )

        if result.confidence:
            overall = overall * 0.7 + result.confidence * 0.3

        return QualityAssessment(
            overall_score=_clamp(overall),
            accuracy=accuracy,
            fluency=fluency,
            consistency=consistency,
            style=style,
            recommendations=self.recommendations(
                overall, accuracy, fluency, consistency, style, context
            ),
        )

    def gate_score(
        self,
        candidate: ProviderTranslation,
        original: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> float:
        """
        Score used to decide whether a translation needs human review.

        Starts from the provider confidence and applies penalties for a
        suspicious length ratio, blank output and technical content.
        """
        score = candidate.confidence or 0.8
        translated = candidate.text or ""

        if original:
            ratio = len(translated) / len(original)
            if ratio < 0.3 or ratio > 3:
                score *= 0.7

        if not translated.strip():
            score = 0.1

        # Technical content needs higher scrutiny
        if content_type_of(context) == "technical" and score > 0.7:
            score *= 0.9

        return _clamp(score, 0.1, 1.0)

    def score_accuracy(self, original: str, translation: str) -> float:
        """Share of words kept between source and translation."""
        if not original or not translation:
            return 0.0

        original_words = original.lower().split()
        translated_words = set(translation.lower().split())

        common = sum(1 for word in original_words if word in translated_words)
        max_words = max(len(original_words), len(translated_words))
        score = 1.0 if max_words == 0 else common / max_words

        ratio = len(translation) / len(original)
        if ratio < 0.5 or ratio > 2.0:
            score *= 0.7

        return _clamp(score)

    def score_fluency(self, translation: str) -> float:
        if not translation:
            return 0.1

        score = 0.9
        if "  " in translation or " ," in translation or " ." in translation:
            score -= 0.2
        if len(translation) < 5:
            score += 0.1  # short strings are rarely awkward

        return _clamp(score)

    def score_consistency(self, translation: str, context: Mapping[str, Any]) -> float:
        """Check terminology: required, forbidden and preferred terms."""
        lowered = translation.lower()
        score = 1.0

        for term in _terms(context.get("requiredTerms")):
            if term.lower() not in lowered:
                score -= 0.2

        for term in _terms(context.get("forbiddenTerms")):
            if term.lower() in lowered:
                score -= 0.3

        preferred_terms = context.get("preferredTerms")
        if not isinstance(preferred_terms, Mapping):
            preferred_terms = {}
        for term, preferred in preferred_terms.items():
            if str(term).lower() in lowered and str(preferred).lower() not in lowered:
                score -= 0.1

        return _clamp(score)

    def score_style(self, translation: str, context: Mapping[str, Any]) -> float:
        score = 0.9

        if content_type_of(context) == "marketing" and "!" not in translation:
            score -= 0.1
        if context.get("tone") == "formal":
            words = set(translation.lower().split())
            if any(marker in words for marker in SLANG_MARKERS):
                score -= 0.3

        return _clamp(score)

    def recommendations(
        self,
        overall: float,
        accuracy: float,
        fluency: float,
        consistency: float,
        style: float,
        context: Mapping[str, Any],
    ) -> List[str]:
        """Advisory notes for reviewers."""
        notes = []

        if overall < 0.7:
            notes.append("Translation requires human review due to low overall quality.")
        if accuracy < 0.7:
            notes.append(
                "Accuracy issues detected. Review for factual correctness and meaning preservation."
            )
        if fluency < 0.7:
            notes.append(
                "Fluency issues detected. Review for grammatical errors, awkward phrasing, and naturalness."
            )
        if consistency < 0.8:
            notes.append("Consistency issues detected. Check against terminology and style guides.")
        if style < 0.8:
            notes.append("Style issues detected. Ensure translation adheres to brand voice and tone.")
        if content_type_of(context) == "product_description" and overall < 0.85:
            notes.append(
                "High priority: Product descriptions need to be highly accurate and persuasive."
            )

        return notes
