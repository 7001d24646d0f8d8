import copy
import json
import logging
import os
from collections import OrderedDict
from collections.abc import MutableMapping
from os import PathLike
from typing import Any, Dict, List, Union, Optional

from _jsonnet import evaluate_file, evaluate_snippet
from overrides import overrides

from amrgen.common.checks import ConfigurationError

logger = logging.getLogger(__name__)


def _is_encodable(value: str) -> bool:
    """
    Environment variables that can't be unicode-encoded make jsonnet fail with a
    "surrogates not allowed" error, so we filter them out.
    """
    return (value == "") or (value.encode("utf-8", "ignore") != b"")


def _environment_variables() -> Dict[str, str]:
    return {key: value for key, value in os.environ.items() if _is_encodable(value)}


def unflatten(flat_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turns `{"hyperparameters.lm_weight": 30}` into `{"hyperparameters": {"lm_weight": 30}}`.
    """
    unflat: Dict[str, Any] = {}

    for compound_key, value in flat_dict.items():
        curr_dict = unflat
        parts = compound_key.split(".")
        for key in parts[:-1]:
            curr_value = curr_dict.get(key)
            if key not in curr_dict:
                curr_dict[key] = {}
                curr_dict = curr_dict[key]
            elif isinstance(curr_value, dict):
                curr_dict = curr_value
            else:
                raise ConfigurationError("flattened dictionary is invalid")
        if not isinstance(curr_dict, dict) or parts[-1] in curr_dict:
            raise ConfigurationError("flattened dictionary is invalid")
        curr_dict[parts[-1]] = value

    return unflat


def with_fallback(preferred: Dict[str, Any], fallback: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dicts, preferring values from `preferred`.
    """

    def merge(preferred_value: Any, fallback_value: Any) -> Any:
        if isinstance(preferred_value, dict) and isinstance(fallback_value, dict):
            return with_fallback(preferred_value, fallback_value)
        elif isinstance(preferred_value, dict) and isinstance(fallback_value, list):
            # A dict overriding a list is read as a sparse list keyed by index.
            merged_list = fallback_value
            for elem_key, preferred_element in preferred_value.items():
                try:
                    index = int(elem_key)
                    merged_list[index] = merge(preferred_element, fallback_value[index])
                except ValueError:
                    raise ConfigurationError(
                        f"could not merge dicts - key {elem_key} is not a valid list index"
                    )
                except IndexError:
                    raise ConfigurationError(
                        f"could not merge dicts - key {index} is out of bounds"
                    )
            return merged_list
        else:
            return copy.deepcopy(preferred_value)

    merged: Dict[str, Any] = {}
    for key in preferred.keys() - fallback.keys():
        merged[key] = copy.deepcopy(preferred[key])
    for key in fallback.keys() - preferred.keys():
        merged[key] = copy.deepcopy(fallback[key])
    for key in preferred.keys() & fallback.keys():
        merged[key] = merge(preferred[key], fallback[key])
    return merged


def parse_overrides(serialized_overrides: str) -> Dict[str, Any]:
    if serialized_overrides:
        ext_vars = _environment_variables()

        return unflatten(json.loads(evaluate_snippet("", serialized_overrides, ext_vars=ext_vars)))
    else:
        return {}


def _is_dict_free(obj: Any) -> bool:
    if isinstance(obj, dict):
        return False
    elif isinstance(obj, list):
        return all(_is_dict_free(item) for item in obj)
    else:
        return True


class Params(MutableMapping):
    """
    A parameter dictionary that remembers where in the configuration it came from.

    Parameters are *consumed* as they are read: every `pop` removes the key and logs the
    value that was used (including defaults), so the log shows the complete set of
    hyperparameters a generation run used.  When a constructor is done reading, it calls
    `assert_empty`, which catches misspelled or unsupported keys in a configuration file.
    """

    # Distinguishes "no default given" from a default of `None`.
    DEFAULT = object()

    def __init__(self, params: Dict[str, Any], history: str = "") -> None:
        self.params = _replace_none(params)
        self.history = history

    @overrides
    def pop(self, key: str, default: Any = DEFAULT, keep_as_dict: bool = False) -> Any:
        """
        Like `dict.pop`, except that nested dictionaries come back as `Params` with an
        extended history, and a missing key without a default raises a `ConfigurationError`.
        """
        if default is self.DEFAULT:
            try:
                value = self.params.pop(key)
            except KeyError:
                msg = f'key "{key}" is required'
                if self.history:
                    msg += f' at location "{self.history}"'
                raise ConfigurationError(msg)
        else:
            value = self.params.pop(key, default)

        if keep_as_dict or _is_dict_free(value):
            logger.info(f"{self.history}{key} = {value}")
            return value
        else:
            return self._check_is_dict(key, value)

    def pop_int(self, key: str, default: Any = DEFAULT) -> Optional[int]:
        value = self.pop(key, default)
        if value is None:
            return None
        else:
            return int(value)

    def pop_float(self, key: str, default: Any = DEFAULT) -> Optional[float]:
        value = self.pop(key, default)
        if value is None:
            return None
        else:
            return float(value)

    def pop_bool(self, key: str, default: Any = DEFAULT) -> Optional[bool]:
        value = self.pop(key, default)
        if value is None:
            return None
        elif isinstance(value, bool):
            return value
        elif value == "true":
            return True
        elif value == "false":
            return False
        else:
            raise ValueError("Cannot convert variable to bool: " + value)

    @overrides
    def get(self, key: str, default: Any = DEFAULT):
        default = None if default is self.DEFAULT else default
        value = self.params.get(key, default)
        return self._check_is_dict(key, value)

    def pop_choice(
        self,
        key: str,
        choices: List[Any],
        default_to_first_choice: bool = False,
        allow_class_names: bool = True,
    ) -> Any:
        """
        Pops `key` and checks that its value is one of `choices`.

        # Parameters

        key : `str`
            The key to pop.
        choices : `List[Any]`
            The acceptable values, e.g. the registered names of some `Registrable` base class.
        default_to_first_choice : `bool`, optional (default = `False`)
            If `True`, a missing key means the first choice.  Otherwise the key is required.
        allow_class_names : `bool`, optional (default = `True`)
            Accept values containing a "." as fully qualified class names, which are imported
            on the fly.
        """
        default = choices[0] if default_to_first_choice else self.DEFAULT
        value = self.pop(key, default)
        ok_because_class_name = allow_class_names and "." in value
        if value not in choices and not ok_because_class_name:
            key_str = self.history + key
            message = (
                f"{value} not in acceptable choices for {key_str}: {choices}. "
                "Make sure the module defining it is imported, or use a fully qualified "
                """class name in your config file like {"type": "my_module.oracles.MyOracle"}."""
            )
            raise ConfigurationError(message)
        return value

    def as_dict(self, quiet: bool = False):
        """
        Returns the remaining parameters as a plain dict, logging them unless `quiet`.
        """
        if quiet:
            return self.params

        def log_recursively(parameters, history):
            for key, value in parameters.items():
                if isinstance(value, dict):
                    log_recursively(value, history + key + ".")
                else:
                    logger.info(f"{history}{key} = {value}")

        log_recursively(self.params, self.history)
        return self.params

    def duplicate(self) -> "Params":
        return copy.deepcopy(self)

    def assert_empty(self, class_name: str):
        """
        Raises a `ConfigurationError` if any parameters were left unread.  `class_name` is the
        class that received them, so the error points at the right part of the configuration.
        """
        if self.params:
            raise ConfigurationError(
                "Extra parameters passed to {}: {}".format(class_name, self.params)
            )

    def __getitem__(self, key):
        if key in self.params:
            return self._check_is_dict(key, self.params[key])
        else:
            raise KeyError

    def __setitem__(self, key, value):
        self.params[key] = value

    def __delitem__(self, key):
        del self.params[key]

    def __iter__(self):
        return iter(self.params)

    def __len__(self):
        return len(self.params)

    def _check_is_dict(self, new_history, value):
        if isinstance(value, dict):
            new_history = self.history + new_history + "."
            return Params(value, history=new_history)
        if isinstance(value, list):
            value = [self._check_is_dict(f"{new_history}.{i}", v) for i, v in enumerate(value)]
        return value

    @classmethod
    def from_file(
        cls,
        params_file: Union[str, PathLike],
        params_overrides: Union[str, Dict[str, Any]] = "",
        ext_vars: dict = None,
    ) -> "Params":
        """
        Loads a jsonnet (or plain json) configuration file.

        # Parameters

        params_file : `Union[str, PathLike]`
            The configuration file.
        params_overrides : `Union[str, Dict[str, Any]]`, optional (default = `""`)
            Flattened overrides applied on top of the file, e.g.
            `{"hyperparameters.lm_weight": 20}`.
        ext_vars : `dict`, optional
            External variables for the jsonnet evaluation.  Environment variables are always
            available; these take priority over them.
        """
        if ext_vars is None:
            ext_vars = {}

        ext_vars = {**_environment_variables(), **ext_vars}

        file_dict = json.loads(evaluate_file(str(params_file), ext_vars=ext_vars))

        if isinstance(params_overrides, dict):
            params_overrides = json.dumps(params_overrides)
        overrides_dict = parse_overrides(params_overrides)
        param_dict = with_fallback(preferred=overrides_dict, fallback=file_dict)

        return cls(param_dict)

    def to_file(self, params_file: str, preference_orders: List[List[str]] = None) -> None:
        with open(params_file, "w") as handle:
            json.dump(self.as_ordered_dict(preference_orders), handle, indent=4)

    def as_ordered_dict(self, preference_orders: List[List[str]] = None) -> OrderedDict:
        """
        Returns the parameters ordered by partial preference orders; keys in no order come
        last, alphabetically.  By default the hyperparameters come before the models and
        `"type"` comes first inside every registrable block.
        """
        params_dict = self.as_dict(quiet=True)
        if not preference_orders:
            preference_orders = [["hyperparameters", "models"], ["type"]]

        def order_func(key):
            order_tuple = [
                order.index(key) if key in order else len(order) for order in preference_orders
            ]
            return order_tuple + [key]

        def order_dict(dictionary):
            result = OrderedDict()
            for key, val in sorted(dictionary.items(), key=lambda item: order_func(item[0])):
                result[key] = order_dict(val) if isinstance(val, dict) else val
            return result

        return order_dict(params_dict)

    def __str__(self) -> str:
        return f"{self.history}Params({self.params})"


def _replace_none(params: Any) -> Any:
    if params == "None":
        return None
    elif isinstance(params, dict):
        for key, value in params.items():
            params[key] = _replace_none(value)
        return params
    elif isinstance(params, list):
        return [_replace_none(value) for value in params]
    return params
