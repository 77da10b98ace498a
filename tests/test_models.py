"""Tests for the static model table."""

import pytest

from heckproxy.core.exceptions import InvalidRequestError, ModelNotFoundError
from heckproxy.core.models import MODEL_MAPPING, list_model_names, resolve_model


class TestResolveModel:
    """Tests for caller -> upstream model resolution."""

    @pytest.mark.parametrize(
        "caller, upstream",
        [
            ("deepseek", "deepseek/deepseek-chat"),
            ("gpt-4o-mini", "openai/gpt-4o-mini"),
            ("gemini-flash-1.5", "google/gemini-flash-1.5"),
            ("deepseek-reasoner", "deepseek-reasoner"),
            ("minimax-01", "minimax/minimax-01"),
        ],
    )
    def test_maps_known_models(self, caller, upstream):
        assert resolve_model(caller) == upstream

    @pytest.mark.parametrize("name", ["gpt-4", "DeepSeek", " deepseek", "deepseek/deepseek-chat", ""])
    def test_rejects_unknown_or_inexact_names(self, name):
        """No case folding, trimming or reverse lookup."""
        with pytest.raises(ModelNotFoundError) as excinfo:
            resolve_model(name)
        assert excinfo.value.code == "unsupported_model"
        assert excinfo.value.model_name == name

    def test_not_found_is_a_client_error(self):
        assert issubclass(ModelNotFoundError, InvalidRequestError)


class TestModelTable:
    """Tests for the shared mapping itself."""

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            MODEL_MAPPING["new-model"] = "x/y"  # type: ignore[index]

    def test_lists_caller_names(self):
        assert list_model_names() == [
            "deepseek",
            "gpt-4o-mini",
            "gemini-flash-1.5",
            "deepseek-reasoner",
            "minimax-01",
        ]
