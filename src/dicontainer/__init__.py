from dicontainer.collection_adapter import CollectionAdapter
from dicontainer.container import Container
from dicontainer.container_interface import IContainer
from dicontainer.exceptions import (
    DIContainerConfigurationError,
    DIContainerError,
    DIContainerInvalidRegistrationError,
    DIContainerNotFoundError,
    DIContainerResolutionError,
)
from dicontainer.instantiator import Instantiator
from dicontainer.markers import constructor
from dicontainer.parameters import ParameterDescriptor, ParameterInspector, ParameterResolver
from dicontainer.registry import InstanceRegistry

__all__ = [
    "CollectionAdapter",
    "Container",
    "DIContainerConfigurationError",
    "DIContainerError",
    "DIContainerInvalidRegistrationError",
    "DIContainerNotFoundError",
    "DIContainerResolutionError",
    "IContainer",
    "InstanceRegistry",
    "Instantiator",
    "ParameterDescriptor",
    "ParameterInspector",
    "ParameterResolver",
    "constructor",
]
