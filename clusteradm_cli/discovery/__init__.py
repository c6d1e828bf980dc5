"""Discovery of the resources for cluster API components.

A component name is mapped to a repository location (user override or
default repository), and the location is read into a ComponentResources:

- GitHub release assets: https://github.com/{owner}/{repo}/releases/{latest|tag}/{asset}
- GitHub source tree: https://github.com/{owner}/{repo}/tree/{branch|tag|sha}/{path}
- Local folder or file: [file://]{path}
"""

from .errors import AssetNotFoundError
from .errors import GitHubAPIError
from .errors import InvalidRepositoryPathError
from .errors import InvalidRepositoryURLError
from .errors import LocalRepositoryError
from .errors import MissingRepositoryError
from .errors import NoLatestReleaseError
from .errors import RateLimitExceededError
from .errors import RefNotFoundError
from .errors import ReleaseNotFoundError
from .errors import ResourceDiscoveryError
from .errors import UnsupportedEncodingError
from .errors import UnsupportedLocationError
from .location import LocationKind
from .location import classify_location
from .lookup import lookup
from .models import ComponentResources
from .models import Resource
from .registry import DEFAULT_REPOSITORIES

__all__ = [
    "ComponentResources",
    "Resource",
    "lookup",
    "classify_location",
    "LocationKind",
    "DEFAULT_REPOSITORIES",
    "ResourceDiscoveryError",
    "MissingRepositoryError",
    "InvalidRepositoryURLError",
    "InvalidRepositoryPathError",
    "UnsupportedLocationError",
    "RefNotFoundError",
    "ReleaseNotFoundError",
    "NoLatestReleaseError",
    "AssetNotFoundError",
    "UnsupportedEncodingError",
    "RateLimitExceededError",
    "GitHubAPIError",
    "LocalRepositoryError",
]
