"""Quality scorer tests."""

import pytest

from storefront_localizer.models import ProviderTranslation
from storefront_localizer.validation.quality_scorer import QualityScorer


def candidate(text, confidence=0.9, provider="deepl"):
    return ProviderTranslation(text=text, confidence=confidence, provider=provider)


@pytest.fixture
def scorer():
    return QualityScorer()


class TestComponentScores:
    def test_empty_translation_fluency(self, scorer):
        assert scorer.score_fluency("") == 0.1

    def test_spacing_smell_lowers_fluency(self, scorer):
        assert scorer.score_fluency("Hola , mundo") < scorer.score_fluency("Hola, mundo")

    def test_accuracy_zero_for_empty(self, scorer):
        assert scorer.score_accuracy("Hello", "") == 0.0

    def test_missing_required_term_lowers_consistency(self, scorer):
        context = {"requiredTerms": ["Storefront"]}
        with_term = scorer.score_consistency("Bienvenido a Storefront", context)
        without_term = scorer.score_consistency("Bienvenido a la tienda", context)
        assert without_term < with_term

    def test_forbidden_term_lowers_consistency(self, scorer):
        assert scorer.score_consistency("Oferta barata", {"forbiddenTerms": ["barata"]}) == pytest.approx(0.7)

    def test_single_required_term_counts_once(self, scorer):
        as_string = scorer.score_consistency("Hola", {"requiredTerms": "Storefront"})
        as_list = scorer.score_consistency("Hola", {"requiredTerms": ["Storefront"]})
        assert as_string == as_list == pytest.approx(0.8)

    def test_single_forbidden_term(self, scorer):
        assert scorer.score_consistency("Oferta barata", {"forbiddenTerms": "barata"}) == pytest.approx(0.7)
        assert scorer.score_consistency("Oferta", {"forbiddenTerms": "barata"}) == 1.0

    def test_preferred_terms(self, scorer):
        context = {"preferredTerms": {"cart": "carrito"}}
        assert scorer.score_consistency("Añadir al cart", context) == pytest.approx(0.9)
        assert scorer.score_consistency("Añadir al carrito", context) == 1.0

    def test_preferred_terms_without_mapping_are_ignored(self, scorer):
        assert scorer.score_consistency("Añadir al cart", {"preferredTerms": "cart=carrito"}) == 1.0

    def test_marketing_without_exclamation(self, scorer):
        context = {"contentType": "marketing"}
        assert scorer.score_style("Compra ahora", context) < scorer.score_style("Compra ahora!", context)

    def test_slang_in_formal_tone(self, scorer):
        assert scorer.score_style("Gracias btw", {"tone": "formal"}) == pytest.approx(0.6)


class TestAssessment:
    def test_scores_in_range(self, scorer):
        assessment = scorer.assess_translation_quality(
            candidate("Hola, mundo!"), "Hello, world!", "en", "es", {}
        )
        for value in (
            assessment.overall_score,
            assessment.accuracy,
            assessment.fluency,
            assessment.consistency,
            assessment.style,
        ):
            assert 0.0 <= value <= 1.0

    def test_empty_translation_scores_low(self, scorer):
        assessment = scorer.assess_translation_quality(
            candidate("", confidence=0.0), "Hello, world!", "en", "es", {}
        )
        assert assessment.fluency == 0.1
        assert assessment.needs_human_review
        assert any("low overall quality" in note for note in assessment.recommendations)

    def test_adding_required_term_never_lowers_score(self, scorer):
        context = {"requiredTerms": ["Storefront"]}
        without_term = scorer.assess_translation_quality(
            candidate("Bienvenido a la tienda"), "Welcome to Storefront", "en", "es", context
        )
        with_term = scorer.assess_translation_quality(
            candidate("Bienvenido a la tienda Storefront"), "Welcome to Storefront", "en", "es", context
        )
        assert with_term.overall_score >= without_term.overall_score

    def test_custom_weights(self):
        scorer = QualityScorer({"accuracy": 1.0, "fluency": 0.0, "consistency": 0.0, "style": 0.0})
        assessment = scorer.assess_translation_quality(
            candidate("Hello world", confidence=0.0), "Hello world", "en", "en", {}
        )
        assert assessment.overall_score == pytest.approx(1.0)


class TestGateScore:
    def test_uses_provider_confidence(self, scorer):
        assert scorer.gate_score(candidate("Hola, mundo!", 0.9), "Hello, world!") == pytest.approx(0.9)

    def test_suspicious_length_ratio(self, scorer):
        score = scorer.gate_score(candidate("Hi", 0.9), "A considerably longer source sentence")
        assert score == pytest.approx(0.63)

    def test_blank_translation(self, scorer):
        assert scorer.gate_score(candidate("   ", 0.9), "Hi") == pytest.approx(0.1)

    def test_technical_content_penalty(self, scorer):
        score = scorer.gate_score(
            candidate("Configurar el servidor", 0.9), "Configure the server", {"contentType": "technical"}
        )
        assert score == pytest.approx(0.81)
