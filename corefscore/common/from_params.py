"""
Builds scorers and metrics from configuration by reading their constructor signatures.

Each constructor argument is looked up in the configuration under its own name and
converted according to its annotation. The annotations scorer configuration needs are
plain JSON scalars (`bool`, `int`, `float`, `str`), other `FromParams` classes, `Dict[str, X]`
and `Union`/`Optional` of those. Anything else is passed through as decoded from JSON.
"""
import copy
import inspect
import logging
from typing import Any, Callable, Dict, Type, TypeVar, Union, get_args, get_origin

from corefscore.common.checks import ConfigurationError
from corefscore.common.params import Params

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="FromParams")

_SCALARS = (bool, int, float, str)


def takes_arg(obj: Callable, arg: str) -> bool:
    """
    Whether the callable `obj` (a class meaning its `__init__`) has a parameter named `arg`.
    """
    function = obj.__init__ if inspect.isclass(obj) else obj
    return arg in inspect.signature(function).parameters


def remove_optional(annotation: Any) -> Any:
    """
    `Optional[X]` becomes `X`; anything else is returned unchanged.
    """
    if get_origin(annotation) is Union:
        members = [member for member in get_args(annotation) if member is not type(None)]
        if len(members) == 1:
            return members[0]
        return Union[tuple(members)]
    return annotation


def construct_value(value: Any, annotation: Any, location: str) -> Any:
    """
    Converts the configuration `value` found at `location` to `annotation`.
    """
    if value is None:
        return None

    annotation = remove_optional(annotation)
    origin = get_origin(annotation)

    if inspect.isclass(annotation) and hasattr(annotation, "from_params"):
        return annotation.from_params(value)

    if annotation in _SCALARS:
        # bool is an int subclass but true is not a count
        if isinstance(value, bool) and annotation is not bool:
            raise TypeError(f"expected {annotation.__name__} for {location}, got {value!r}")
        if annotation is float and isinstance(value, int):
            return float(value)
        if not isinstance(value, annotation):
            raise TypeError(f"expected {annotation.__name__} for {location}, got {value!r}")
        return value

    if origin is dict:
        _, value_type = get_args(annotation) or (str, Any)
        if not isinstance(value, (Params, dict)):
            raise TypeError(f"expected an object for {location}, got {value!r}")
        return {
            key: construct_value(entry, value_type, f"{location}.{key}")
            for key, entry in value.items()
        }

    if origin is Union:
        failures = []
        for member in get_args(annotation):
            try:
                return construct_value(copy.deepcopy(value), member, location)
            except (TypeError, ValueError, ConfigurationError) as e:
                failures.append(str(e))
        raise ConfigurationError(f"could not build {location} from {value!r}: {failures}")

    if isinstance(value, Params):
        return value.as_dict()
    return value


def _constructor_kwargs(constructor: Callable, owner: str, params: Params) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {}
    for name, parameter in inspect.signature(constructor).parameters.items():
        if name == "self" or parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            continue
        location = f"{params.path}{name}"
        if name in params:
            kwargs[name] = construct_value(params.pop(name), parameter.annotation, location)
        elif parameter.default is parameter.empty:
            raise ConfigurationError(f'key "{location}" is required to build {owner}')
    params.assert_empty(owner)
    return kwargs


class FromParams:
    """
    Mixin giving a class a `from_params` method that builds it from configuration.
    """

    @classmethod
    def from_params(cls: Type[T], params: Any) -> T:
        """
        Builds an instance of `cls` from `params`, which may be a `Params`, a plain dict or
        `None` (meaning no configuration). For a `Registrable` base class the `"type"` key
        selects the registered subclass, and a bare string is read as `{"type": string}`.
        """
        from corefscore.common.registrable import Registrable

        logger.debug("instantiating class %s from params %s", cls, params)

        if params is None:
            params = Params({})
        elif isinstance(params, str):
            params = Params({"type": params})
        elif isinstance(params, dict):
            params = Params(params)
        elif not isinstance(params, Params):
            raise ConfigurationError(
                f"{cls.__name__} must be configured with an object or a registered name, "
                f"got {params!r}"
            )

        if Registrable in cls.__bases__:
            available = cls.list_available()  # type: ignore
            if not available:
                raise ConfigurationError(f"{cls.__name__} has no registered implementations")
            has_default = cls.default_implementation is not None  # type: ignore
            choice = params.pop_choice("type", available, default_to_first_choice=has_default)
            subclass, constructor_name = cls.resolve_class_name(choice)  # type: ignore
            if constructor_name is None:
                return subclass.from_params(params)
            constructor = getattr(subclass, constructor_name)
            return constructor(**_constructor_kwargs(constructor, subclass.__name__, params))

        if cls.__init__ is object.__init__:
            params.assert_empty(cls.__name__)
            return cls()
        return cls(**_constructor_kwargs(cls.__init__, cls.__name__, params))
