"""
Element Registry
================

Name -> factory mapping for the elements a host pipeline can instantiate.

There is no module-level registry. A host builds one explicitly:

    registry = init_registry()
    stamper = registry.create("tslatencystamper", {"stamper-type": "fast-robust"})

or registers the elements into a registry it already owns:

    plugin_init(host_registry)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, Union

from pydantic import BaseModel

from tslatency.config import MeasureConfig, StamperConfig
from tslatency.elements.measurer import Measurer
from tslatency.elements.stamper import Stamper
from tslatency.elements.transform import FrameTransform


logger = logging.getLogger(__name__)


ElementFactory = Callable[..., FrameTransform]


@dataclass(frozen=True, slots=True)
class ElementRegistration:
    """One registered element."""

    name: str
    factory: ElementFactory
    config_type: Type[BaseModel]
    description: str = ""


class ElementRegistry:
    """
    Registry of frame transform factories.

    Configuration passed to create() is validated against the element's
    config model before the factory runs.
    """

    def __init__(self) -> None:
        self._elements: Dict[str, ElementRegistration] = {}

    def register(
        self,
        name: str,
        factory: ElementFactory,
        config_type: Type[BaseModel],
        description: str = "",
    ) -> None:
        """
        Register an element factory.

        Raises:
            ValueError: If the name is already registered
        """
        if name in self._elements:
            raise ValueError(f"Element {name!r} is already registered")

        self._elements[name] = ElementRegistration(
            name=name,
            factory=factory,
            config_type=config_type,
            description=description,
        )
        logger.debug(f"Registered element {name!r}")

    def create(
        self,
        name: str,
        config: Optional[Union[Mapping[str, Any], BaseModel]] = None,
        **kwargs: Any,
    ) -> FrameTransform:
        """
        Instantiate a registered element.

        Args:
            name: Registered element name
            config: Options mapping or config model; defaults if None
            **kwargs: Passed through to the factory (clock, reporter, ...)

        Raises:
            KeyError: If no element has that name
            pydantic.ValidationError: If the options are invalid
        """
        try:
            registration = self._elements[name]
        except KeyError:
            raise KeyError(f"Unknown element {name!r}; known: {self.names()}") from None

        if not isinstance(config, registration.config_type):
            config = registration.config_type.model_validate(dict(config or {}))

        return registration.factory(config, **kwargs)

    def get(self, name: str) -> ElementRegistration:
        return self._elements[name]

    def names(self) -> List[str]:
        return sorted(self._elements)

    def __contains__(self, name: object) -> bool:
        return name in self._elements

    def __len__(self) -> int:
        return len(self._elements)


def plugin_init(registry: ElementRegistry) -> None:
    """Register the stamper and measurer elements."""
    registry.register(
        Stamper.name,
        Stamper,
        StamperConfig,
        description="Stamps the current time into each frame as a binary time code",
    )
    registry.register(
        Measurer.name,
        Measurer,
        MeasureConfig,
        description="Decodes the binary time code and measures latency",
    )


def init_registry() -> ElementRegistry:
    """Fresh registry with both elements registered."""
    registry = ElementRegistry()
    plugin_init(registry)
    return registry
