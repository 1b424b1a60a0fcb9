"""
mcmod - Multi-loader Minecraft mod scaffolding

Generates Architectury-style Gradle projects (common + Fabric/NeoForge),
adds features to existing projects, and keeps the CLI itself up to date.
"""

__version__ = "0.4.0"

from mcmod.descriptor import load_descriptor, save_descriptor
from mcmod.features import add_feature, VALID_FEATURES
from mcmod.schemas import ProjectDescriptor, GlobalPreferences

__all__ = [
    "__version__",
    "load_descriptor",
    "save_descriptor",
    "add_feature",
    "VALID_FEATURES",
    "ProjectDescriptor",
    "GlobalPreferences",
]
