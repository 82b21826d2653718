"""Layered method-to-handler resolution."""

from __future__ import annotations

from collections.abc import Mapping

from .types import Handler


class HandlerTable:
    """Method-name keyed handlers assembled from ordered layers.

    Layers are given lowest precedence first: a method present in several
    layers resolves to the handler of the last one. The provider builds it
    as compatibility fixes < built-in account handlers < caller overrides.
    """

    def __init__(self, *layers: Mapping[str, Handler] | None):
        self._layers: tuple[dict[str, Handler], ...] = tuple(
            dict(layer) for layer in layers if layer
        )

    def resolve(self, method: str) -> Handler | None:
        for layer in reversed(self._layers):
            handler = layer.get(method)
            if handler is not None:
                return handler
        return None

    def methods(self) -> set[str]:
        return {method for layer in self._layers for method in layer}

    def __contains__(self, method: object) -> bool:
        return isinstance(method, str) and self.resolve(method) is not None
