from dataclasses import dataclass
from typing import Any, Generic, Optional, Tuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar('T')


class ModelMetadata(BaseModel):
    """
    Metadata published next to a trained model.

    The position of each label in ``labels`` is its class index and must
    match the ordering used at training time. ``sequence_length`` is only
    present for tagging models.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    labels: Tuple[str, ...]
    sequence_length: Optional[int] = Field(default=None, alias="sequenceLength")

    @field_validator("labels")
    @classmethod
    def validate_labels(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            raise ValueError("labels must not be empty")
        return v

    @field_validator("sequence_length")
    @classmethod
    def validate_sequence_length(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("sequenceLength must be positive")
        return v

    def label_for(self, index: int) -> str:
        return self.labels[index]


@dataclass(frozen=True)
class Loaded(Generic[T]):
    """A successfully loaded artifact."""
    value: T

    @property
    def is_available(self) -> bool:
        return True


@dataclass(frozen=True)
class Unavailable:
    """An artifact that could not be loaded, with the reason why."""
    reason: str

    @property
    def is_available(self) -> bool:
        return False


LoadResult = Union[Loaded[Any], Unavailable]


class ModelHandle:
    """
    Borrowable wrapper around a deserialized model.

    The wrapped object is opaque; only its forward pass is used. Objects
    exposing ``predict_proba`` (scikit-learn estimators) are asked for
    probabilities, anything else is called through ``predict``.
    """

    def __init__(self, name: str, model: Any):
        self.name = name
        self._model = model
        if hasattr(model, "predict_proba"):
            self._forward = model.predict_proba
        elif hasattr(model, "predict"):
            self._forward = model.predict
        else:
            raise TypeError(f"Model '{name}' exposes neither predict nor predict_proba")

    def predict(self, batch: Any) -> Any:
        return self._forward(batch)

    def __repr__(self) -> str:
        return f"ModelHandle(name={self.name!r}, model={type(self._model).__name__})"
