"""Tests for core entry points."""

import threading

import pytest

from cupping_compass import create_evaluation, generate_narrative
from cupping_compass.core import select_provider, serialize_for_narrative, toggle_favorite
from cupping_compass.exceptions import AuthenticationError, ValidationError
from cupping_compass.providers import TemplateNarrativeProvider
from cupping_compass.storage import InMemoryEvaluationStore


def test_create_evaluation_scores_and_stores(make_cup, make_evaluation):
    """create_evaluation() should persist the scored evaluation."""
    store = InMemoryEvaluationStore()

    created = create_evaluation(store, make_evaluation(make_cup(), make_cup(defects=(1, 2))))

    assert created.overall_score == 78.5
    assert store.get("user-1", created.id) == created


def test_create_evaluation_rejects_duplicate_name(make_evaluation):
    """A second evaluation with the same name for the same owner is rejected."""
    store = InMemoryEvaluationStore()
    create_evaluation(store, make_evaluation())

    with pytest.raises(ValidationError) as exc_info:
        create_evaluation(store, make_evaluation(coffee_name="ETHIOPIA YIRGACHEFFE"))

    assert exc_info.value.field == "coffee_name"
    assert len(store.list("user-1")) == 1


def test_create_evaluation_allows_same_name_for_other_owner(make_evaluation):
    """Name uniqueness is scoped to the owner."""
    store = InMemoryEvaluationStore()
    create_evaluation(store, make_evaluation())

    other = create_evaluation(store, make_evaluation(owner_id="user-2"))

    assert other.owner_id == "user-2"


def test_create_evaluation_does_not_store_invalid_scores(make_cup, make_evaluation):
    """Nothing is stored when a score is invalid."""
    store = InMemoryEvaluationStore()

    with pytest.raises(ValidationError):
        create_evaluation(store, make_evaluation(make_cup(aroma=10.5)))

    assert store.list("user-1") == []


def test_toggle_favorite_flips_flag(make_evaluation):
    """toggle_favorite() should flip the favorite flag each call."""
    store = InMemoryEvaluationStore()
    created = create_evaluation(store, make_evaluation())

    assert toggle_favorite(store, "user-1", created.id).is_favorite is True
    assert toggle_favorite(store, "user-1", created.id).is_favorite is False


def test_generate_narrative_requires_api_key(monkeypatch, make_evaluation):
    """generate_narrative() should raise AuthenticationError without API key."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with pytest.raises(AuthenticationError):
        generate_narrative(make_evaluation(), provider="gemini")


def test_generate_narrative_with_mock_gemini_provider(mocker, make_evaluation):
    """generate_narrative() should hand the serialized evaluation to the provider."""
    evaluation = make_evaluation()
    mock_provider = mocker.MagicMock()
    mock_provider.generate.return_value = "Bright and clean."
    mocker.patch("cupping_compass.core._build_gemini_provider", return_value=mock_provider)

    result = generate_narrative(evaluation, api_key="test-key", provider="gemini")

    assert result == "Bright and clean."
    mock_provider.generate.assert_called_once_with(serialize_for_narrative(evaluation))


def test_generate_narrative_with_template_provider(make_cup, make_evaluation):
    """The template provider should work offline."""
    result = generate_narrative(make_evaluation(make_cup()), provider="template")

    assert "Ethiopia Yirgacheffe" in result
    assert "79.50" in result


def test_select_provider_uses_env_var(monkeypatch, mocker):
    """select_provider() should fall back to CUPPING_COMPASS_PROVIDER."""
    monkeypatch.setenv("CUPPING_COMPASS_PROVIDER", "offline")
    build_gemini = mocker.patch("cupping_compass.core._build_gemini_provider")

    provider = select_provider(None)

    assert isinstance(provider, TemplateNarrativeProvider)
    build_gemini.assert_not_called()


def test_select_provider_passes_model(mocker):
    """Model and key should reach the Gemini builder."""
    build_gemini = mocker.patch("cupping_compass.core._build_gemini_provider")

    select_provider("LLM", "test-key", model="gemini-2.5-pro")

    build_gemini.assert_called_once_with("test-key", "gemini-2.5-pro")


def test_select_provider_rejects_unknown_provider():
    """Unknown provider names should raise ValueError."""
    with pytest.raises(ValueError, match="Unsupported provider"):
        select_provider("openai")


def test_serialize_for_narrative_includes_water_temperature(make_evaluation):
    """The narrative payload should carry the water temperature."""
    payload = serialize_for_narrative(make_evaluation(water_temperature="warm"))
    assert '"water_temperature": "warm"' in payload


def test_concurrent_creates_keep_names_unique(make_evaluation):
    """Two requests racing past the name lookup still store one evaluation."""
    barrier = threading.Barrier(2)

    class RacingStore(InMemoryEvaluationStore):
        def coffee_names(self, owner_id):
            names = super().coffee_names(owner_id)
            barrier.wait(timeout=5)
            return names

    store = RacingStore()
    rejected = []

    def submit():
        try:
            create_evaluation(store, make_evaluation(coffee_name="Kenya AA"))
        except ValidationError as e:
            rejected.append(e)

    threads = [threading.Thread(target=submit) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert [item.coffee_name for item in store.list("user-1")] == ["Kenya AA"]
    assert [e.field for e in rejected] == ["coffee_name"]


def test_select_provider_defaults_to_spanish(monkeypatch):
    """The template provider follows the default report language."""
    monkeypatch.delenv("CUPPING_COMPASS_PROVIDER", raising=False)

    provider = select_provider("template")

    assert provider.get_generation_metadata()["language"] == "es"


def test_generate_narrative_passes_language(make_evaluation):
    """generate_narrative() should label the template summary in the requested language."""
    spanish = generate_narrative(make_evaluation(), provider="template")
    english = generate_narrative(make_evaluation(), provider="template", language="en")

    assert "Medio" in spanish
    assert "Medium" in english
