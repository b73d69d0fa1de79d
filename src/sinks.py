"""
Output channels handed to the walker and the classifier.

The log sink is anything with ``info``, ``warning`` and ``error`` methods taking a message
(a ``logging.Logger`` qualifies). The tag sink is a callable taking a list of ``DataTag``.
"""
import logging
from typing import Callable, Dict, List, Protocol

from cdm import DataTag

logger = logging.getLogger(__name__)

class LogSink(Protocol):
    def info(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...

TagSink = Callable[[List[DataTag]], None]

class UserLog:
    """In-memory log sink that keeps the messages addressed to the end user, by level."""

    def __init__(self):
        self.messages: Dict[str, List[str]] = {
            "info": [],
            "warning": [],
            "error": [],
        }

    def info(self, message: str) -> None:
        self.messages["info"].append(message)

    def warning(self, message: str) -> None:
        self.messages["warning"].append(message)

    def error(self, message: str) -> None:
        self.messages["error"].append(message)

    def get_messages(self) -> Dict[str, List[str]]:
        return self.messages

class DataTagCollector:
    """Tag sink that records every published tag in order."""

    def __init__(self):
        self.tags: List[DataTag] = []

    def __call__(self, tags: List[DataTag]) -> None:
        self.publish(tags)

    def publish(self, tags: List[DataTag]) -> None:
        for tag in tags:
            logger.debug(f"Publishing data tag '{tag.label}' = '{tag.value}'")
        self.tags.extend(tags)

    def values(self, label: str) -> List[str]:
        return [tag.value for tag in self.tags if tag.label == label]

def discard_tags(tags: List[DataTag]) -> None:
    logger.debug(f"Discarding {len(tags)} data tags (no tag sink configured).")
