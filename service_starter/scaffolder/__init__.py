"""Service Starter scaffolder -- composes project files from wizard answers.

Quick usage::

    from service_starter.scaffolder import ProjectComposer, ArchiveAssembler
    from service_starter.wizard import Selection, Database

    selection = Selection().choose_database(Database.POSTGRES)
    files = ProjectComposer().compose(selection)
    archive = ArchiveAssembler().assemble(files, timestamp)
"""

from .archive import Archive, ArchiveAssembler
from .dependencies import Dependency, DependencyTable, format_dependencies
from .generator import CompositionError, ProjectComposer, compose
from .models import FileEntry
from .templates import TemplateRenderer

__all__ = [
    "Archive",
    "ArchiveAssembler",
    "CompositionError",
    "Dependency",
    "DependencyTable",
    "FileEntry",
    "ProjectComposer",
    "TemplateRenderer",
    "compose",
    "format_dependencies",
]
