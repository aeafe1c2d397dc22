"""Contract shared by the pipeline stage handlers."""

from abc import ABC, abstractmethod
from typing import ClassVar

from pydantic import BaseModel


class TaskHandler(ABC):
    """A pipeline stage driven by queue messages of one type."""

    message_model: ClassVar[type[BaseModel]]

    @abstractmethod
    def process(self, message: BaseModel) -> None:
        """Runs one attempt of the stage. Failures propagate to the retry policy."""

    @abstractmethod
    def on_failure(self, message: BaseModel, error: Exception) -> None:
        """Runs once after the final attempt has failed."""
