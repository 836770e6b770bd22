# msixbuild/__init__.py
from .ToolLocator import ToolLocator
from .SigningCredentialResolver import SigningCredentialResolver
from .PackagingConfig import MsixConfig, ManifestConfig, load_config
from .PackagingPipeline import PackagingPipeline
from .types import AppPackageLayout, SigningCredential

__all__ = [
    'ToolLocator',
    'SigningCredentialResolver',
    'MsixConfig',
    'ManifestConfig',
    'load_config',
    'PackagingPipeline',
    'AppPackageLayout',
    'SigningCredential',
]
