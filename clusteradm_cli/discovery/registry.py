"""Default repositories for cluster API components.

Used as a fallback when the user does not provide a repository for a component.
"""

from types import MappingProxyType

DEFAULT_REPOSITORIES = MappingProxyType(
    {
        # cluster API
        "CAPI": "https://github.com/kubernetes-sigs/cluster-api/releases/latest/cluster-api-components.yaml",
        # Infrastructure providers
        "aws": "https://github.com/kubernetes-sigs/cluster-api-provider-aws/releases/latest/infrastructure-components.yaml",
        "vsphere": "https://github.com/kubernetes-sigs/cluster-api-provider-vsphere/releases/latest/infrastructure-components.yaml",
        # Bootstrap providers
        "kubeadm": "https://github.com/kubernetes-sigs/cluster-api-bootstrap-provider-kubeadm/releases/latest/bootstrap-components.yaml",
    }
)


def get_default_repository(component: str) -> str | None:
    """Get the default repository URL for a component, or None if there is none."""
    return DEFAULT_REPOSITORIES.get(component)
