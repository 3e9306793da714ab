"""Service Starter -- a project-scaffolding wizard for Clojure backend services."""

__version__ = "0.1.0"
