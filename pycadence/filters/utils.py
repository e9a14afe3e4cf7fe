from __future__ import annotations

from abc import abstractmethod
from typing import Any, ClassVar

from deepdiff import DeepDiff

from pycadence.logging import getLogger

LOGGER = getLogger("PyCadence.Filters")


class FilterMixin:
    __slots__ = ("_default",)

    def __init__(self):
        self._default = None

    def __eq__(self, other):
        """Overrides the default implementation"""
        if isinstance(other, self.__class__):
            return not DeepDiff(
                self.to_dict(),
                other.to_dict(),
                ignore_order=True,
                max_passes=1,
                cache_size=100,
                exclude_paths=["root['name']"],
            )
        return NotImplemented

    def __hash__(self):
        """Overrides the default implementation"""
        return hash(repr(sorted(self.to_dict().items())))

    def __bool__(self):
        return self.changed

    @abstractmethod
    def to_dict(self) -> dict:
        """Returns a dictionary representation of the Filter"""
        raise NotImplementedError

    @abstractmethod
    def get(self) -> Any:
        """Returns the payload sent to the node for this filter"""
        raise NotImplementedError

    @abstractmethod
    def reset(self) -> None:
        raise NotImplementedError

    @property
    def off(self) -> bool:
        return not self.changed

    @property
    def changed(self) -> bool:
        if self._default is None:
            self._default = self.default()
        changed = DeepDiff(
            self.to_dict(),
            self._default.to_dict(),
            ignore_order=True,
            max_passes=1,
            cache_size=100,
            exclude_paths=["root['name']"],
        )
        return bool(changed)

    @classmethod
    def default(cls) -> FilterMixin:
        return cls()


class FilterValue:
    """A single optional numeric setting of a filter.

    Parameters
    ----------
    key : str
        The camelCase key the node expects for this setting.
    minimum : float | None
        The lowest accepted value, if any.
    maximum : float | None
        The highest accepted value, if any.
    exclusive_minimum : bool
        Whether ``minimum`` itself is rejected.
    """

    __slots__ = ("name", "key", "minimum", "maximum", "exclusive_minimum")

    def __init__(
        self, key: str, minimum: float | None = None, maximum: float | None = None, exclusive_minimum: bool = False
    ):
        self.name = key
        self.key = key
        self.minimum = minimum
        self.maximum = maximum
        self.exclusive_minimum = exclusive_minimum

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: ParameterFilter | None, owner: type) -> float | None | FilterValue:
        if instance is None:
            return self
        return instance._values.get(self.name)

    def __set__(self, instance: ParameterFilter, value: float | None) -> None:
        if value is not None:
            if self.minimum is not None and (
                value < self.minimum or (self.exclusive_minimum and value == self.minimum)
            ):
                bound = ">" if self.exclusive_minimum else "≥"
                raise ValueError(f"{self.name} must be {bound} {self.minimum}, not {value}")
            if self.maximum is not None and value > self.maximum:
                raise ValueError(f"{self.name} must be ≤ {self.maximum}, not {value}")
        instance._values[self.name] = value


class ParameterFilter(FilterMixin):
    """Base for filters made of independent optional settings."""

    __slots__ = ("_values",)

    _settings: ClassVar[dict[str, FilterValue]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        settings = dict(cls._settings)
        settings.update({name: value for name, value in vars(cls).items() if isinstance(value, FilterValue)})
        cls._settings = settings

    def __init__(self, **kwargs: float | None):
        super().__init__()
        if unknown := set(kwargs) - set(self._settings):
            raise TypeError(f"{self.__class__.__name__} got unexpected settings: {', '.join(sorted(unknown))}")
        self._values: dict[str, float | None] = {}
        for name in self._settings:
            setattr(self, name, kwargs.get(name))

    def __repr__(self):
        values = ", ".join(f"{name}={value}" for name, value in self._values.items())
        return f"<{self.__class__.__name__}: {values}>"

    def to_dict(self) -> dict[str, float | None]:
        return dict(self._values)

    @classmethod
    def from_dict(cls, data: dict[str, float | None]):
        return cls(**{name: data.get(name) for name in cls._settings})

    def get(self) -> dict[str, float]:
        if self.off:
            return {}
        return {
            setting.key: self._values[name]
            for name, setting in self._settings.items()
            if self._values[name] is not None
        }

    def reset(self) -> None:
        for name in self._settings:
            self._values[name] = None
