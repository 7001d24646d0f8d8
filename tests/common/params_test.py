import json
import os

import pytest

from amrgen.common.checks import ConfigurationError
from amrgen.common.params import Params, unflatten, with_fallback
from amrgen.common.testing import AmrGenTestCase


class TestParams(AmrGenTestCase):
    def test_load_from_file(self):
        filename = self.FIXTURES_ROOT / "generator.jsonnet"
        params = Params.from_file(filename)

        assert "hyperparameters" in params
        assert "models" in params

        structural = params.pop("models").pop("structural")
        assert structural.pop("type") == "lookup"

    def test_replace_none(self):
        params = Params({"a": "None", "b": [1.0, "None", 2], "c": {"d": "None"}})
        assert params["a"] is None
        assert params["b"][1] is None
        assert params["c"]["d"] is None

    def test_unflatten(self):
        flat = {"hyperparameters.lm_weight": 20, "hyperparameters.reordering.take_best_n": 3}
        assert unflatten(flat) == {
            "hyperparameters": {"lm_weight": 20, "reordering": {"take_best_n": 3}}
        }

    def test_unflatten_rejects_conflicting_keys(self):
        with pytest.raises(ConfigurationError):
            unflatten({"a": 1, "a.b": 2})

    def test_with_fallback(self):
        preferred = {"a": {"b": 1}, "c": [0, 1, 2]}
        fallback = {"a": {"b": 0, "d": 2}, "c": [5, 5, 5], "e": 3}
        assert with_fallback(preferred, fallback) == {"a": {"b": 1, "d": 2}, "c": [0, 1, 2], "e": 3}

    def test_with_fallback_sparse_list(self):
        merged = with_fallback({"c": {"1": 9}}, {"c": [0, 1, 2]})
        assert merged == {"c": [0, 9, 2]}

    @pytest.mark.parametrize("input_type", [dict, str])
    def test_overrides(self, input_type):
        filename = self.FIXTURES_ROOT / "generator.jsonnet"
        overrides = {
            "hyperparameters.lm_weight": 20,
            "models.language_model.order": 2,
        }
        params = Params.from_file(
            filename, overrides if input_type == dict else json.dumps(overrides)
        )

        assert params["hyperparameters"]["lm_weight"] == 20
        assert params["hyperparameters"]["reordering"]["take_best_n"] == 5
        assert params["models"]["language_model"]["order"] == 2

    def test_ext_vars(self):
        config_file = self.TEST_DIR / "config.jsonnet"
        with open(config_file, "w") as f:
            f.write('{"hyperparameters": {"lm_weight": std.parseJson(std.extVar("LM_WEIGHT"))}}')

        params = Params.from_file(config_file, ext_vars={"LM_WEIGHT": "12.5"})
        assert params["hyperparameters"]["lm_weight"] == 12.5

    def test_environment_variables_are_ext_vars(self):
        config_file = self.TEST_DIR / "config.jsonnet"
        with open(config_file, "w") as f:
            f.write('{"order": std.extVar("AMRGEN_TEST_ORDER")}')

        os.environ["AMRGEN_TEST_ORDER"] = "4"
        try:
            params = Params.from_file(config_file)
        finally:
            del os.environ["AMRGEN_TEST_ORDER"]
        assert params["order"] == "4"

    def test_pop_consumes_keys(self):
        params = Params({"a": 1, "b": {"c": 2}})
        assert params.pop("a") == 1
        nested = params.pop("b")
        assert isinstance(nested, Params)
        assert nested.history == "b."
        assert nested.pop_int("c") == 2
        params.assert_empty("TestParams")

    def test_missing_key_names_location(self):
        params = Params({"b": {}}).pop("b")
        with pytest.raises(ConfigurationError, match='key "c" is required at location "b."'):
            params.pop("c")

    def test_pop_bool(self):
        params = Params({"a": "true", "b": False, "c": "maybe"})
        assert params.pop_bool("a") is True
        assert params.pop_bool("b") is False
        with pytest.raises(ValueError):
            params.pop_bool("c")

    def test_assert_empty_reports_extra_keys(self):
        with pytest.raises(ConfigurationError, match="Extra parameters passed to Hyperparameters"):
            Params({"lm_wieght": 3}).assert_empty("Hyperparameters")

    def test_pop_choice(self):
        params = Params({"type": "lookup"})
        assert params.pop_choice("type", ["lookup", "nltk"]) == "lookup"
        with pytest.raises(ConfigurationError):
            Params({"type": "unknown"}).pop_choice("type", ["lookup", "nltk"])
        assert Params({}).pop_choice("type", ["lookup"], default_to_first_choice=True) == "lookup"

    def test_to_file_orders_keys(self):
        params = Params({"models": {"type": "x", "a": 1}, "hyperparameters": {"lm_weight": 1}})
        output = self.TEST_DIR / "config.json"
        params.to_file(str(output))
        with open(output) as f:
            text = f.read()
        assert text.index("hyperparameters") < text.index("models")
        assert list(json.loads(text)["models"].keys()) == ["type", "a"]

    def test_duplicate_is_deep(self):
        params = Params({"a": {"b": 1}})
        copy = params.duplicate()
        copy["a"]["b"] = 2
        assert params["a"]["b"] == 1
