"""Credential resolution configuration dataclasses."""

from dataclasses import dataclass


@dataclass
class CredentialConfig:
    """Secret key names and backend defaults used by the resolvers."""

    cert_key: str = "cert"
    key_key: str = "key"
    kubeconfig_key: str = "kubeconfig"
    namespace: str = "default"
    region: str = "eu-west-2"
    project_name: str = "cluster-upgrade"
