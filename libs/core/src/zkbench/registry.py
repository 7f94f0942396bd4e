
from __future__ import annotations
from typing import Any, Dict, List, Optional

from .errors import ConfigError, ConfigErrorKind
from .interfaces import Circuit


class CircuitRegistry:
    """Name -> circuit mapping, populated once and then frozen.

    Backends build one of these at startup and pass it to the validator and
    the executor; nothing registers into it after `freeze()`.
    """

    def __init__(self) -> None:
        self._items: Dict[str, Circuit] = {}
        self._frozen = False

    def register(self, name: str, circuit: Optional[Circuit] = None) -> Any:
        if circuit is not None:
            self._add(name, circuit)
            return circuit

        def _inner(cls_or_obj: Any) -> Any:
            self._add(name, cls_or_obj() if isinstance(cls_or_obj, type) else cls_or_obj)
            return cls_or_obj
        return _inner

    def _add(self, name: str, circuit: Circuit) -> None:
        if self._frozen:
            raise RuntimeError(f"circuit registry is frozen; cannot register {name!r}")
        if name in self._items:
            raise RuntimeError(f"circuit {name!r} is already registered")
        self._items[name] = circuit

    def freeze(self) -> "CircuitRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, name: str) -> Circuit:
        try:
            return self._items[name]
        except KeyError:
            raise ConfigError(
                ConfigErrorKind.UNKNOWN_CIRCUIT,
                f"unknown circuit {name!r}. must be one of {self.names()}",
            ) from None

    def names(self) -> List[str]:
        return list(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def list(self) -> Dict[str, Circuit]:
        return dict(self._items)


