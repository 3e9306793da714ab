"""Wizard state: selection model, URL codec and navigation history.

The session controller lives in ``service_starter.wizard.controller``; it
depends on the scaffolder and is not re-exported here.
"""

from .models import DataFormat, Database, Editor, LoggingFramework, Page, Selection
from .navigator import HistoryNavigator, Navigator
from .url_codec import deserialize, from_url, serialize, to_url

__all__ = [
    "DataFormat",
    "Database",
    "Editor",
    "HistoryNavigator",
    "LoggingFramework",
    "Navigator",
    "Page",
    "Selection",
    "deserialize",
    "from_url",
    "serialize",
    "to_url",
]
