"""
`amrgen.common.registrable.Registrable` gives a base class a named registry of its
subclasses.  Every oracle interface in `amrgen.oracles` is one, so a configuration file
picks an implementation with `"type": "<name>"`.
"""
import importlib
import logging
from collections import defaultdict
from typing import Callable, ClassVar, DefaultDict, Dict, List, Optional, Tuple, Type, TypeVar, cast

from amrgen.common.checks import ConfigurationError
from amrgen.common.from_params import FromParams

logger = logging.getLogger(__name__)

_T = TypeVar("_T")
_RegistrableT = TypeVar("_RegistrableT", bound="Registrable")

_SubclassRegistry = Dict[str, Tuple[type, Optional[str]]]


class Registrable(FromParams):
    """
    Subclasses register themselves with `@BaseClass.register(name)`; afterwards
    `BaseClass.by_name(name)` returns the subclass and `BaseClass.list_available()` the known
    names.  The registry holds classes, not instances.

    `default_implementation`, when set, is used when a configuration block has no `"type"`
    and is listed first by `list_available()`.

    Subclasses only register when their module is imported, so each package's `__init__.py`
    imports all of its implementations.
    """

    _registry: ClassVar[DefaultDict[type, _SubclassRegistry]] = defaultdict(dict)

    default_implementation: Optional[str] = None

    @classmethod
    def register(
        cls, name: str, constructor: Optional[str] = None, exist_ok: bool = False
    ) -> Callable[[Type[_T]], Type[_T]]:
        """
        Register a class under a particular name.

        # Parameters

        name : `str`
            The name to register the class under.
        constructor : `str`, optional (default=`None`)
            A `@classmethod` to construct the object with instead of `__init__`.
        exist_ok : `bool`, optional (default=`False`)
            Overwrite an existing registration under `name` instead of raising.

        # Examples

        ```python
        @LanguageModelOracle.register("my-lm")
        class MyLanguageModel(LanguageModelOracle):
            def __init__(self, order: int, path: str):
                ...
        ```

        The class can then be built from a configuration block like
        `{"type": "my-lm", "order": 3, "path": "lm.arpa"}`.
        """
        registry = Registrable._registry[cls]

        def add_subclass_to_registry(subclass: Type[_T]) -> Type[_T]:
            if name in registry:
                if exist_ok:
                    message = (
                        f"{name} has already been registered as {registry[name][0].__name__}, but "
                        f"exist_ok=True, so overwriting with {cls.__name__}"
                    )
                    logger.info(message)
                else:
                    message = (
                        f"Cannot register {name} as {cls.__name__}; "
                        f"name already in use for {registry[name][0].__name__}"
                    )
                    raise ConfigurationError(message)
            registry[name] = (subclass, constructor)
            return subclass

        return add_subclass_to_registry

    @classmethod
    def by_name(cls: Type[_RegistrableT], name: str) -> Callable[..., _RegistrableT]:
        """
        Returns a callable that constructs the class registered as `name`.  This is the
        registered constructor method when there is one, else the class itself.
        """
        logger.debug(f"instantiating registered subclass {name} of {cls}")
        subclass, constructor = cls.resolve_class_name(name)
        if not constructor:
            return cast(Type[_RegistrableT], subclass)
        else:
            return cast(Callable[..., _RegistrableT], getattr(subclass, constructor))

    @classmethod
    def resolve_class_name(
        cls: Type[_RegistrableT], name: str
    ) -> Tuple[Type[_RegistrableT], Optional[str]]:
        """
        Returns the subclass registered as `name` and its constructor name.  A `name`
        containing dots is also accepted as a fully qualified class path and imported.
        """
        if name in Registrable._registry[cls]:
            subclass, constructor = Registrable._registry[cls][name]
            return subclass, constructor
        elif "." in name:
            parts = name.split(".")
            submodule = ".".join(parts[:-1])
            class_name = parts[-1]

            try:
                module = importlib.import_module(submodule)
            except ModuleNotFoundError:
                raise ConfigurationError(
                    f"tried to interpret {name} as a path to a class "
                    f"but unable to import module {submodule}"
                )

            try:
                subclass = getattr(module, class_name)
                constructor = None
                return subclass, constructor
            except AttributeError:
                raise ConfigurationError(
                    f"tried to interpret {name} as a path to a class "
                    f"but unable to find class {class_name} in {submodule}"
                )

        else:
            raise ConfigurationError(
                f"{name} is not a registered name for {cls.__name__}. "
                f"Available names are {Registrable._registry[cls].keys()}. "
                "You can also give a fully qualified class path, "
                """e.g. {"type": "my_module.oracles.MyOracle"}."""
            )

    @classmethod
    def list_available(cls) -> List[str]:
        """List default first if it exists"""
        keys = list(Registrable._registry[cls].keys())
        default = cls.default_implementation

        if default is None:
            return keys
        elif default not in keys:
            raise ConfigurationError(f"Default implementation {default} is not registered")
        else:
            return [default] + [k for k in keys if k != default]
