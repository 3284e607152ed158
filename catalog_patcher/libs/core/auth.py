"""
Authentication Module

Loads the ambient cluster context (kubeconfig or in-cluster service account)
and builds the Kubernetes API clients used by the cluster stages.
"""

import logging

import urllib3
from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException
from openshift.dynamic import DynamicClient

from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class OpenShiftAuth:
    """Handles OpenShift context discovery and API client creation"""

    def __init__(self, skip_tls: bool = False):
        """
        Initialize OpenShift authentication handler

        Args:
            skip_tls: Whether to skip TLS verification for API requests
        """
        self.skip_tls = skip_tls
        self.k8s_client = None
        self.core_api = None
        self.dynamic_client = None

    def configure_auth(self) -> bool:
        """
        Discover authentication from kubeconfig, falling back to in-cluster config

        Returns:
            bool: True if authentication was configured successfully

        Raises:
            AuthenticationError: If neither source can be loaded
        """
        try:
            config.load_kube_config()
            logger.debug("Loaded kubeconfig")
        except (ConfigException, OSError) as kubeconfig_error:
            logger.debug(f"Failed to load kubeconfig: {kubeconfig_error}")
            try:
                config.load_incluster_config()
                logger.debug("Loaded in-cluster config")
            except ConfigException as incluster_error:
                raise AuthenticationError(
                    "No cluster context found. Log in with 'oc login' or set KUBECONFIG "
                    f"({kubeconfig_error}; {incluster_error})"
                )

        configuration = client.Configuration.get_default_copy()
        if self.skip_tls:
            configuration.verify_ssl = False
            configuration.ssl_ca_cert = None
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        self.k8s_client = client.ApiClient(configuration)
        self.core_api = client.CoreV1Api(self.k8s_client)
        logger.info(f"Using cluster {configuration.host}")
        return True

    def is_authenticated(self) -> bool:
        """
        Check if authentication is properly configured

        Returns:
            bool: True if authenticated
        """
        return self.k8s_client is not None

    def get_dynamic_client(self) -> DynamicClient:
        """
        Get a dynamic client for applying arbitrary kinds

        Discovery runs against the API server on first use.

        Raises:
            AuthenticationError: If called before configure_auth or discovery fails
        """
        if not self.is_authenticated():
            raise AuthenticationError("Not authenticated - no Kubernetes client available")

        if self.dynamic_client is None:
            try:
                self.dynamic_client = DynamicClient(self.k8s_client)
            except Exception as e:
                raise AuthenticationError(f"Failed to connect to OpenShift cluster: {e}")
        return self.dynamic_client
