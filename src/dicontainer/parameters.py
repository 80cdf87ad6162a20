from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from inspect import Parameter
from typing import Annotated, Any, NoReturn, Union, get_args, get_origin, get_type_hints

from dicontainer.collection_adapter import CollectionAdapter
from dicontainer.exceptions import DIContainerResolutionError
from dicontainer.registry import InstanceRegistry

_NONE_TYPE = type(None)
_VARIADIC_KINDS = frozenset({Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD})
_NOT_FOUND = object()


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """Describe a single injectable parameter of a constructor or method."""

    name: str
    annotation: Any
    """The requested capability shape, or ``Parameter.empty`` when unannotated."""
    default: Any = Parameter.empty
    kind: Any = Parameter.POSITIONAL_OR_KEYWORD
    unresolved_annotation: str | None = None
    """The string annotation left over when type hints could not be evaluated."""
    annotation_error: Exception | None = field(default=None, compare=False)
    """The error raised while evaluating type hints, if any."""

    @property
    def has_default(self) -> bool:
        """Return true when the parameter declares a default value."""
        return self.default is not Parameter.empty


class ParameterInspector:
    """Turn callables into parameter descriptors using runtime type hints."""

    def inspect_callable(self, target: Callable[..., Any]) -> tuple[ParameterDescriptor, ...]:
        """Describe the injectable parameters of a function or bound method.

        Variadic ``*args``/``**kwargs`` parameters are skipped.

        Args:
            target: Callable whose signature is inspected.

        """
        annotations, annotation_error = self._resolved_type_hints(target)
        return self._describe(inspect.signature(target), annotations, annotation_error)

    def inspect_class(self, concrete_type: type[Any]) -> tuple[ParameterDescriptor, ...]:
        """Describe the injectable parameters of a class call.

        Type hints from ``__init__`` take precedence over ``__new__`` and class-level
        annotations, which covers dataclasses and ``NamedTuple`` classes.

        Args:
            concrete_type: Class whose call signature is inspected.

        """
        annotations: dict[str, Any] = {}
        merged_error: Exception | None = None
        for hints_source in (concrete_type.__init__, concrete_type.__new__, concrete_type):
            source_annotations, annotation_error = self._resolved_type_hints(hints_source)
            if merged_error is None:
                merged_error = annotation_error
            for name, annotation in source_annotations.items():
                annotations.setdefault(name, annotation)
        return self._describe(inspect.signature(concrete_type), annotations, merged_error)

    def _describe(
        self,
        signature: inspect.Signature,
        annotations: dict[str, Any],
        annotation_error: Exception | None,
    ) -> tuple[ParameterDescriptor, ...]:
        descriptors: list[ParameterDescriptor] = []
        for parameter in signature.parameters.values():
            if parameter.kind in _VARIADIC_KINDS:
                continue
            annotation = self._resolve_annotation(parameter, annotations)
            unresolved_annotation = None
            if annotation is Parameter.empty and isinstance(parameter.annotation, str):
                unresolved_annotation = parameter.annotation
            descriptors.append(
                ParameterDescriptor(
                    name=parameter.name,
                    annotation=annotation,
                    default=parameter.default,
                    kind=parameter.kind,
                    unresolved_annotation=unresolved_annotation,
                    annotation_error=annotation_error if unresolved_annotation else None,
                ),
            )
        return tuple(descriptors)

    def _resolve_annotation(self, parameter: Parameter, annotations: dict[str, Any]) -> Any:
        annotation = annotations.get(parameter.name, Parameter.empty)
        if annotation is not Parameter.empty:
            return annotation

        raw_annotation = parameter.annotation
        if raw_annotation is not Parameter.empty and not isinstance(raw_annotation, str):
            return raw_annotation
        return Parameter.empty

    def _resolved_type_hints(
        self,
        target: Callable[..., Any],
    ) -> tuple[dict[str, Any], Exception | None]:
        try:
            return get_type_hints(target, include_extras=True), None
        except (AttributeError, NameError, TypeError) as error:
            return {}, error


class ParameterResolver:
    """Produce argument values for parameter descriptors from the registry.

    Each parameter is resolved in declaration order:

    1. Collection shapes recognized by ``CollectionAdapter`` resolve to every
       registered instance of the element capability.
    2. Otherwise the annotation is treated as a single capability. The only
       registered instance wins, then the declared default, then ``None`` for
       ``X | None`` annotations.

    ``Annotated[X, ...]`` is looked up as written first and then as ``X``. The
    ``X`` of ``X | None`` goes through both steps, so ``Sequence[X] | None`` is
    still a collection request. Anything else raises ``DIContainerResolutionError``.
    The registry is read on every call; nothing is cached.
    """

    def __init__(self, registry: InstanceRegistry, collection_adapter: CollectionAdapter) -> None:
        self._registry = registry
        self._collection_adapter = collection_adapter

    def resolve(self, parameters: Sequence[ParameterDescriptor], context: str) -> list[Any]:
        """Resolve argument values for parameters.

        Args:
            parameters: Descriptors to satisfy, in declaration order.
            context: Description of the enclosing operation used in error messages,
                for example ``"instantiating Service"``.

        """
        return [self.resolve_parameter(parameter, context) for parameter in parameters]

    def resolve_parameter(self, parameter: ParameterDescriptor, context: str) -> Any:
        """Resolve the argument value for a single parameter."""
        annotation = parameter.annotation
        if annotation is Parameter.empty:
            if parameter.has_default:
                return parameter.default
            self._raise_unannotated(parameter, context)

        value = self._lookup(annotation)
        if value is not _NOT_FOUND:
            return value

        optional_capability = _strip_optional(_unwrap_annotated(annotation))
        if optional_capability is not None:
            value = self._lookup(optional_capability)
            if value is not _NOT_FOUND:
                return value

        if parameter.has_default:
            return parameter.default
        if optional_capability is not None:
            return None
        raise DIContainerResolutionError(annotation, parameter.name, context)

    def bind(
        self,
        parameters: Sequence[ParameterDescriptor],
        values: Sequence[Any],
    ) -> tuple[tuple[Any, ...], dict[str, Any]]:
        """Split resolved values into call arguments.

        Positional-only parameters are passed positionally, everything else by keyword.
        """
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for parameter, value in zip(parameters, values, strict=True):
            if parameter.kind is Parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[parameter.name] = value
        return tuple(args), kwargs

    def _lookup(self, annotation: Any) -> Any:
        candidates = [annotation]
        unwrapped = _unwrap_annotated(annotation)
        if unwrapped is not annotation:
            candidates.append(unwrapped)

        for candidate in candidates:
            collection_request = self._collection_adapter.match(candidate)
            if collection_request is not None:
                return self._collection_adapter.build(collection_request)
            instance = self._registry.find_single(candidate)
            if instance is not None:
                return instance
        return _NOT_FOUND

    def _raise_unannotated(self, parameter: ParameterDescriptor, context: str) -> NoReturn:
        if parameter.unresolved_annotation is None:
            raise DIContainerResolutionError(Parameter.empty, parameter.name, context)
        reason = "its annotation could not be evaluated"
        if parameter.annotation_error is not None:
            reason = f"{reason}: {parameter.annotation_error}"
        raise DIContainerResolutionError(
            parameter.unresolved_annotation,
            parameter.name,
            context,
            reason=reason,
        ) from parameter.annotation_error


def _unwrap_annotated(annotation: Any) -> Any:
    """Recursively unwrap ``Annotated[T, ...]`` into ``T``."""
    if get_origin(annotation) is not Annotated:
        return annotation
    return _unwrap_annotated(get_args(annotation)[0])


def _strip_optional(annotation: Any) -> Any | None:
    """Return ``X`` for ``X | None`` / ``Optional[X]`` annotations, else ``None``."""
    if get_origin(annotation) not in (Union, types.UnionType):
        return None
    members = [member for member in get_args(annotation) if member is not _NONE_TYPE]
    if len(members) != 1 or len(members) == len(get_args(annotation)):
        return None
    return members[0]
