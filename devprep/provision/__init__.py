"""
Provisioning recipes and steps.
"""

from devprep.provision.pkgconfig import PackageConfigDescriptor, parse_pc
from devprep.provision.recipes import RECIPES, DependencyProvisioner
from devprep.provision.steps import ProvisionContext, ProvisionRecipe, RecipeReport

__all__ = [
    "PackageConfigDescriptor",
    "parse_pc",
    "RECIPES",
    "DependencyProvisioner",
    "ProvisionContext",
    "ProvisionRecipe",
    "RecipeReport",
]
