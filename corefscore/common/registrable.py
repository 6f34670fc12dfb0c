"""
Named registries of implementations, so that configuration can refer to a scorer, a
matcher or a subcommand by name.
"""
import importlib
import logging
from collections import defaultdict
from typing import Callable, ClassVar, DefaultDict, Dict, List, Optional, Tuple, Type, TypeVar

from corefscore.common.checks import ConfigurationError
from corefscore.common.from_params import FromParams

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

# registered name -> (class, name of the classmethod that builds it, if not the class itself)
_Entries = Dict[str, Tuple[type, Optional[str]]]


class Registrable(FromParams):
    """
    A base class deriving directly from `Registrable` gets its own registry. Implementations
    join it with `@Base.register(name)` when their module is imported, so a package's
    `__init__.py` imports every module that registers something.

    `Base.default_implementation`, if set, is listed first by `list_available` and is used
    when a configuration gives no `"type"`.
    """

    _registry: ClassVar[DefaultDict[type, _Entries]] = defaultdict(dict)

    default_implementation: Optional[str] = None

    @classmethod
    def register(
        cls, name: str, constructor: Optional[str] = None, exist_ok: bool = False
    ) -> Callable[[Type[_T]], Type[_T]]:
        """
        Class decorator registering the decorated class as `name`.

        `constructor` names a classmethod to build instances with in place of the class
        itself. Re-using a taken name is a `ConfigurationError` unless `exist_ok` is set, in
        which case the new class replaces the old one.
        """
        entries = Registrable._registry[cls]

        def add(subclass: Type[_T]) -> Type[_T]:
            if name in entries:
                previous = entries[name][0].__name__
                if not exist_ok:
                    raise ConfigurationError(
                        f"Cannot register {name} as {subclass.__name__}; "
                        f"name already in use for {previous}"
                    )
                logger.info("replacing %s registered as %s with %s", previous, name, subclass)
            entries[name] = (subclass, constructor)
            return subclass

        return add

    @classmethod
    def by_name(cls, name: str) -> Callable:
        """
        The callable that builds the implementation registered as `name`: the class itself,
        or its registered constructor classmethod.
        """
        subclass, constructor = cls.resolve_class_name(name)
        return getattr(subclass, constructor) if constructor else subclass

    @classmethod
    def resolve_class_name(cls, name: str) -> Tuple[type, Optional[str]]:
        """
        Looks `name` up in the registry. A dotted name that is not registered is treated as
        a `module.ClassName` path and imported.
        """
        entries = Registrable._registry[cls]
        if name in entries:
            return entries[name]
        if "." not in name:
            raise ConfigurationError(
                f"{name} is not a registered name for {cls.__name__}. Load the module "
                "registering it with --include-package, or give a fully qualified class name "
                'such as {"type": "my_module.scorers.MyScorer"}.'
            )

        module_name, _, class_name = name.rpartition(".")
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError:
            raise ConfigurationError(
                f"{name} names a class path, but unable to import module {module_name}"
            )
        if not hasattr(module, class_name):
            raise ConfigurationError(
                f"{name} names a class path, but unable to find class {class_name} in {module_name}"
            )
        return getattr(module, class_name), None

    @classmethod
    def registered_name(cls, subclass: type) -> Optional[str]:
        for name, (registered, _) in Registrable._registry[cls].items():
            if registered is subclass:
                return name
        return None

    @classmethod
    def list_available(cls) -> List[str]:
        names = list(Registrable._registry[cls])
        default = cls.default_implementation
        if default is None:
            return names
        if default not in names:
            raise ConfigurationError(f"Default implementation {default} is not registered")
        return [default] + [name for name in names if name != default]
