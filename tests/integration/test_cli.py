"""CLI smoke tests through click's test runner."""

import json

import pytest
from click.testing import CliRunner

from storefront_localizer import cli as cli_module
from storefront_localizer.config import Config
from storefront_localizer.translation.translator import TranslationPipeline


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def data_dir(tmp_path):
    return str(tmp_path / "state")


@pytest.fixture
def fake_cli(monkeypatch, fake_provider_factory):
    """Point the CLI at a configured pipeline backed by a fake provider."""
    test_config = Config(deepl_api_key="test-key", google_api_key="", azure_subscription_key="")
    translations = {"Hello, world!": "Hola, mundo!", "Add to cart": "Añadir"}
    confidences = {"Add to cart": 0.5}

    def build(data_dir):
        pipeline = TranslationPipeline.from_config(
            Config(deepl_api_key="", google_api_key="", azure_subscription_key=""), data_dir=data_dir
        )
        provider = fake_provider_factory("deepl", translations)
        original = provider._translate_texts

        async def with_confidence(texts, from_lang, to_lang, context):
            results = await original(texts, from_lang, to_lang, context)
            for text, result in zip(texts, results):
                result.confidence = confidences.get(text, result.confidence)
            return results

        provider._translate_texts = with_confidence
        pipeline.providers = [provider]
        return pipeline

    monkeypatch.setattr(cli_module, "config", test_config)
    monkeypatch.setattr(cli_module, "_build_pipeline", build)
    return test_config


def invoke(runner, data_dir, *args):
    return runner.invoke(cli_module.cli, ["--data-dir", data_dir, "--log-level", "ERROR", *args])


class TestTranslateCommand:
    def test_translate_json(self, runner, data_dir, fake_cli):
        result = invoke(runner, data_dir, "translate", "Hello, world!", "--to", "es", "--json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["translation"] == "Hola, mundo!"
        assert data["source"] == "ai"
        assert data["needs_review"] is False

    def test_translate_panel(self, runner, data_dir, fake_cli):
        result = invoke(
            runner, data_dir, "translate", "Hello, world!", "-t", "es",
            "--content-type", "marketing", "--context", "tone=formal",
        )
        assert result.exit_code == 0, result.output
        assert "Hola, mundo!" in result.output

    def test_bad_context_pair(self, runner, data_dir, fake_cli):
        result = invoke(runner, data_dir, "translate", "Hello", "-t", "es", "--context", "tone")
        assert result.exit_code != 0

    def test_single_required_term(self, runner, data_dir, fake_cli):
        result = invoke(
            runner, data_dir, "translate", "Hello, world!", "-t", "es",
            "--context", "requiredTerms=Hola", "--json",
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["quality"]["consistency"] == 1.0

    def test_preferred_terms_need_a_mapping(self, runner, data_dir, fake_cli):
        result = invoke(
            runner, data_dir, "translate", "Hello, world!", "-t", "es",
            "--context", "preferredTerms=cart=carrito",
        )
        assert result.exit_code == 1
        assert "preferredTerms" in result.output

    def test_aborts_without_provider_credentials(self, runner, data_dir, monkeypatch):
        monkeypatch.setattr(
            cli_module, "config", Config(deepl_api_key="", google_api_key="", azure_subscription_key="")
        )
        result = invoke(runner, data_dir, "translate", "Hello", "-t", "es")
        assert result.exit_code == 1
        assert "Configuration errors" in result.output


class TestReviewCommands:
    def test_review_flow(self, runner, data_dir, fake_cli):
        translated = invoke(runner, data_dir, "translate", "Add to cart", "-t", "es", "--json")
        assert translated.exit_code == 0, translated.output
        data = json.loads(translated.output)
        assert data["needs_review"] is True
        review_id = data["review_id"]

        listed = invoke(runner, data_dir, "review", "list", "--status", "pending")
        assert listed.exit_code == 0, listed.output
        assert "Review queue" in listed.output

        approved = invoke(runner, data_dir, "review", "approve", review_id, "--translation", "Añadir al carrito")
        assert approved.exit_code == 0, approved.output
        assert "Approved" in approved.output

        again = invoke(runner, data_dir, "review", "reject", review_id)
        assert again.exit_code == 1
        assert "already approved" in again.output

        from_memory = invoke(runner, data_dir, "translate", "Add to cart", "-t", "es", "--json")
        data = json.loads(from_memory.output)
        assert data["source"] == "memory"
        assert data["translation"] == "Añadir al carrito"

    def test_rejected_translation_is_not_reused(self, runner, data_dir, fake_cli):
        translated = invoke(runner, data_dir, "translate", "Add to cart", "-t", "es", "--json")
        review_id = json.loads(translated.output)["review_id"]

        rejected = invoke(runner, data_dir, "review", "reject", review_id, "--notes", "wrong term")
        assert rejected.exit_code == 0, rejected.output
        assert "Rejected" in rejected.output

        again = invoke(runner, data_dir, "translate", "Add to cart", "-t", "es", "--json")
        data = json.loads(again.output)
        assert data["source"] == "ai"
        assert data["review_id"] != review_id

    def test_unknown_review_item(self, runner, data_dir, fake_cli):
        result = invoke(runner, data_dir, "review", "approve", "review_missing")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_empty_queue(self, runner, data_dir, fake_cli):
        result = invoke(runner, data_dir, "review", "list")
        assert result.exit_code == 0
        assert "Review queue is empty" in result.output


class TestBatchAndStats:
    def test_batch_file(self, runner, data_dir, fake_cli, tmp_path):
        batch_file = tmp_path / "batch.json"
        batch_file.write_text(
            json.dumps({"items": [
                {"id": "greeting", "text": "Hello, world!"},
                {"id": "cta", "text": "Add to cart", "context": {"contentType": "product"}},
            ]}),
            encoding="utf-8",
        )

        result = invoke(runner, data_dir, "batch", "--input", str(batch_file), "--to", "es")
        assert result.exit_code == 0, result.output
        assert "greeting" in result.output
        assert "Translating:" in result.output

    def test_invalid_batch_file(self, runner, data_dir, fake_cli, tmp_path):
        batch_file = tmp_path / "batch.json"
        batch_file.write_text(json.dumps([{"id": "no-text"}]), encoding="utf-8")

        result = invoke(runner, data_dir, "batch", "--input", str(batch_file), "--to", "es")
        assert result.exit_code != 0

    def test_batch_file_with_broken_json(self, runner, data_dir, fake_cli, tmp_path):
        batch_file = tmp_path / "batch.json"
        batch_file.write_text("{not json", encoding="utf-8")

        result = invoke(runner, data_dir, "batch", "--input", str(batch_file), "--to", "es")
        assert result.exit_code == 2
        assert "not valid JSON" in result.output

    def test_batch_file_with_scalar_json(self, runner, data_dir, fake_cli, tmp_path):
        batch_file = tmp_path / "batch.json"
        batch_file.write_text("42", encoding="utf-8")

        result = invoke(runner, data_dir, "batch", "--input", str(batch_file), "--to", "es")
        assert result.exit_code == 2
        assert "expected a list of items" in result.output

    def test_stats(self, runner, data_dir, fake_cli):
        invoke(runner, data_dir, "translate", "Hello, world!", "-t", "es")
        result = invoke(runner, data_dir, "stats")

        assert result.exit_code == 0, result.output
        assert "Translation memory entries" in result.output
        assert "deepl" in result.output

    def test_dynamic(self, runner, data_dir, fake_cli):
        result = invoke(runner, data_dir, "dynamic", "Hello, world!", "-t", "es", "--content-type", "comment")
        assert result.exit_code == 0, result.output
        assert "Hola, mundo!" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli_module.cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
