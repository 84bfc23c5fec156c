"""AWS credential selection for the registry client."""

import logging
import uuid
from collections.abc import Callable

import boto3
import botocore.session
from botocore.credentials import Credentials, RefreshableCredentials
from botocore.exceptions import ProfileNotFound

from .config import GlueSerdeConfig
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ROLE_SESSION_PREFIX = "glue-serde-"


def _has_static_keys(config: GlueSerdeConfig) -> bool:
    return bool(config.aws_access_key_id and config.aws_secret_access_key)


def _static_credentials(config: GlueSerdeConfig) -> Credentials:
    return Credentials(config.aws_access_key_id, config.aws_secret_access_key)


def _session_credentials(config: GlueSerdeConfig) -> Credentials:
    return Credentials(config.aws_access_key_id, config.aws_secret_access_key, config.aws_session_token)


def _assume_role_credentials(config: GlueSerdeConfig) -> RefreshableCredentials:
    sts = boto3.Session().client("sts", region_name=config.region)
    session_name = f"{ROLE_SESSION_PREFIX}{uuid.uuid4()}"

    def refresh() -> dict[str, str]:
        response = sts.assume_role(RoleArn=config.role_arn, RoleSessionName=session_name)
        credentials = response["Credentials"]
        return {
            "access_key": credentials["AccessKeyId"],
            "secret_key": credentials["SecretAccessKey"],
            "token": credentials["SessionToken"],
            "expiry_time": credentials["Expiration"].isoformat(),
        }

    return RefreshableCredentials.create_from_metadata(
        metadata=refresh(),
        refresh_using=refresh,
        method="sts-assume-role",
    )


def _profile_credentials(config: GlueSerdeConfig) -> Credentials:
    session = botocore.session.Session(profile=config.aws_profile_name)
    if config.aws_profile_file:
        session.set_config_variable("credentials_file", config.aws_profile_file)
    try:
        credentials = session.get_credentials()
    except ProfileNotFound as e:
        raise ConfigurationError(str(e)) from e
    if credentials is None:
        raise ConfigurationError(
            f"No credentials found for profile {config.aws_profile_name or 'default'}"
        )
    return credentials


def _default_credentials(config: GlueSerdeConfig) -> Credentials:
    credentials = boto3.Session().get_credentials()
    if credentials is None:
        raise ConfigurationError("No AWS credentials found in the default provider chain")
    return credentials


# tried in order, first matching predicate wins
CREDENTIAL_STRATEGIES: list[tuple[str, Callable[[GlueSerdeConfig], bool], Callable[[GlueSerdeConfig], Credentials]]] = [
    ("static", lambda c: _has_static_keys(c) and not c.aws_session_token, _static_credentials),
    ("session", lambda c: _has_static_keys(c) and bool(c.aws_session_token), _session_credentials),
    ("assume-role", lambda c: bool(c.role_arn), _assume_role_credentials),
    ("profile", lambda c: bool(c.aws_profile_name or c.aws_profile_file), _profile_credentials),
    ("default", lambda c: True, _default_credentials),
]


def create_credentials(config: GlueSerdeConfig) -> Credentials:
    """Pick the credentials the registry client signs requests with.

    Static keys win over session keys, then an assumed role, then a named
    profile, then the default boto3 provider chain.

    Raises:
        ConfigurationError: If the selected source yields no credentials
    """
    for name, applies, build in CREDENTIAL_STRATEGIES:
        if applies(config):
            logger.debug("Using %s AWS credentials", name)
            return build(config)
    raise ConfigurationError("No AWS credentials strategy applies")
