"""Secret accessors: fetch a secret's key/value data by name.

Resolvers only depend on ``SecretAccessor``; the concrete stores below read
Kubernetes Secrets, SSM Parameter Store, or an in-memory mapping.
"""

import base64
import json
from collections.abc import Mapping
from typing import Protocol

import boto3
from botocore.exceptions import ClientError
from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.client.rest import ApiException

from .config import CredentialConfig
from .errors import SecretFetchError, SecretNotFoundError


class SecretAccessor(Protocol):
    """Fetch-by-name capability.

    ``get`` raises when the secret cannot be read (``SecretNotFoundError`` when
    it does not exist) and returns ``None`` when it exists without data.
    """

    def get(self, name: str) -> Mapping[str, bytes] | None: ...


class InMemorySecretStore:
    """Dict-backed secret accessor."""

    def __init__(self, secrets: Mapping[str, Mapping[str, bytes] | None] | None = None) -> None:
        self._secrets = dict(secrets or {})

    def get(self, name: str) -> Mapping[str, bytes] | None:
        if name not in self._secrets:
            raise SecretNotFoundError(name, "memory")
        return self._secrets[name]


class KubernetesSecretStore:
    """Reads ``v1/Secret`` objects from a single namespace."""

    def __init__(self, namespace: str = "default", api: k8s_client.CoreV1Api | None = None) -> None:
        """Initialize Kubernetes secret store.

        Args:
            namespace: Namespace holding the cluster secrets
            api: CoreV1Api to use; built from the loaded client configuration if omitted
        """
        self.namespace = namespace
        self.api = api or k8s_client.CoreV1Api()

    @classmethod
    def from_kubeconfig(
        cls,
        namespace: str = "default",
        config_file: str | None = None,
        context: str | None = None,
    ) -> "KubernetesSecretStore":
        """Build a store talking to the cluster selected by a kubeconfig file."""
        api_client = k8s_config.new_client_from_config(config_file=config_file, context=context)
        return cls(namespace=namespace, api=k8s_client.CoreV1Api(api_client))

    def get(self, name: str) -> Mapping[str, bytes] | None:
        """Fetch a secret and base64-decode its data.

        Raises:
            SecretNotFoundError: If the API answers 404
            ApiException: For any other API failure
        """
        try:
            secret = self.api.read_namespaced_secret(name=name, namespace=self.namespace)
        except ApiException as e:
            if e.status == 404:
                raise SecretNotFoundError(name, f"namespace {self.namespace!r}") from e
            raise

        if not secret.data:
            return None
        return {key: base64.b64decode(value) for key, value in secret.data.items()}


class SSMSecretStore:
    """Reads secrets stored as JSON objects in SSM SecureString parameters.

    Parameter path: ``/{project_name}/{namespace}/secrets/{name}``.
    """

    def __init__(
        self,
        region: str = "eu-west-2",
        project_name: str = "cluster-upgrade",
        namespace: str = "default",
    ) -> None:
        """Initialize SSM secret store.

        Args:
            region: AWS region for SSM client
            project_name: Project name prefix for parameter paths
            namespace: Environment/namespace segment of parameter paths
        """
        self.client = boto3.client("ssm", region_name=region)
        self.project_name = project_name
        self.namespace = namespace

    @classmethod
    def from_config(cls, config: CredentialConfig) -> "SSMSecretStore":
        return cls(
            region=config.region,
            project_name=config.project_name,
            namespace=config.namespace,
        )

    def parameter_name(self, name: str) -> str:
        return f"/{self.project_name}/{self.namespace}/secrets/{name}"

    def get(self, name: str) -> Mapping[str, bytes] | None:
        """Fetch and decode the JSON object stored for ``name``.

        Raises:
            SecretNotFoundError: If the parameter does not exist
            SecretFetchError: If the parameter is not a JSON object of strings
            ClientError: For any other SSM failure
        """
        parameter = self.parameter_name(name)

        try:
            response = self.client.get_parameter(Name=parameter, WithDecryption=True)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code == "ParameterNotFound":
                raise SecretNotFoundError(name, f"SSM parameter {parameter}") from e
            raise

        try:
            payload = json.loads(response["Parameter"]["Value"])
        except json.JSONDecodeError as e:
            raise SecretFetchError(name, f"SSM parameter {parameter} is not JSON") from e

        if not isinstance(payload, dict):
            raise SecretFetchError(name, f"SSM parameter {parameter} is not a JSON object")
        if not all(isinstance(value, str) for value in payload.values()):
            raise SecretFetchError(name, f"SSM parameter {parameter} has non-string values")

        return {key: value.encode("utf-8") for key, value in payload.items()} or None
