"""Workspace, packages and their dependency graph."""

from monodeps.workspace.graph import DependencyGraph, GraphNode
from monodeps.workspace.package import Package
from monodeps.workspace.workspace import Workspace, find_root, load_packages

__all__ = [
    "DependencyGraph",
    "GraphNode",
    "Package",
    "Workspace",
    "find_root",
    "load_packages",
]
