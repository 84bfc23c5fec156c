"""Tests for AWS credential selection."""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

import pytest
from botocore.credentials import RefreshableCredentials

from glueserde.config import GlueSerdeConfig
from glueserde.credentials import create_credentials
from glueserde.exceptions import ConfigurationError

ROLE_ARN = "arn:aws:iam::123456789012:role/schema-reader"


@pytest.fixture(autouse=True)
def clean_aws_environment(monkeypatch, tmp_path):
    """Keep the developer's AWS setup out of the tests."""
    for name in ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_SESSION_TOKEN", "AWS_PROFILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "missing-credentials"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")


def config(**kwargs):
    return GlueSerdeConfig(region="eu-west-1", registry="main", **kwargs)


@pytest.fixture
def sts():
    """Mocked STS client returned by boto3.Session().client('sts')."""
    sts = Mock()
    sts.assume_role.return_value = {
        "Credentials": {
            "AccessKeyId": "ASIAROLE",
            "SecretAccessKey": "role-secret",
            "SessionToken": "role-token",
            "Expiration": datetime.now(timezone.utc) + timedelta(hours=1),
        }
    }
    with patch("glueserde.credentials.boto3.Session") as session:
        session.return_value.client.return_value = sts
        yield sts


class TestCreateCredentials:
    """Test cases for the credential strategy chain."""

    def test_static_keys(self):
        credentials = create_credentials(config(aws_access_key_id="AKIDEXAMPLE", aws_secret_access_key="secret"))

        assert credentials.access_key == "AKIDEXAMPLE"
        assert credentials.secret_key == "secret"
        assert credentials.token is None

    def test_session_keys(self):
        credentials = create_credentials(config(
            aws_access_key_id="ASIAEXAMPLE", aws_secret_access_key="secret", aws_session_token="token"
        ))

        assert credentials.access_key == "ASIAEXAMPLE"
        assert credentials.token == "token"

    def test_static_keys_win_over_role(self, sts):
        credentials = create_credentials(config(
            aws_access_key_id="AKIDEXAMPLE", aws_secret_access_key="secret", role_arn=ROLE_ARN
        ))

        assert credentials.access_key == "AKIDEXAMPLE"
        sts.assume_role.assert_not_called()

    def test_access_key_without_secret_is_ignored(self, sts):
        credentials = create_credentials(config(aws_access_key_id="AKIDEXAMPLE", role_arn=ROLE_ARN))

        assert credentials.access_key == "ASIAROLE"

    def test_assume_role(self, sts):
        credentials = create_credentials(config(role_arn=ROLE_ARN))

        assert isinstance(credentials, RefreshableCredentials)
        frozen = credentials.get_frozen_credentials()
        assert frozen.access_key == "ASIAROLE"
        assert frozen.secret_key == "role-secret"
        assert frozen.token == "role-token"
        kwargs = sts.assume_role.call_args.kwargs
        assert kwargs["RoleArn"] == ROLE_ARN
        assert kwargs["RoleSessionName"].startswith("glue-serde-")

    def test_role_wins_over_profile(self, sts):
        credentials = create_credentials(config(role_arn=ROLE_ARN, aws_profile_name="analytics"))

        assert credentials.access_key == "ASIAROLE"

    def test_profile_file(self, tmp_path):
        credentials_file = tmp_path / "credentials"
        credentials_file.write_text(
            "[analytics]\n"
            "aws_access_key_id = AKIDPROFILE\n"
            "aws_secret_access_key = profile-secret\n"
        )

        credentials = create_credentials(config(
            aws_profile_name="analytics", aws_profile_file=str(credentials_file)
        ))

        assert credentials.access_key == "AKIDPROFILE"
        assert credentials.secret_key == "profile-secret"

    def test_profile_file_default_profile(self, tmp_path):
        credentials_file = tmp_path / "credentials"
        credentials_file.write_text(
            "[default]\n"
            "aws_access_key_id = AKIDDEFAULT\n"
            "aws_secret_access_key = default-secret\n"
        )

        credentials = create_credentials(config(aws_profile_file=str(credentials_file)))

        assert credentials.access_key == "AKIDDEFAULT"

    def test_unknown_profile(self, tmp_path):
        credentials_file = tmp_path / "credentials"
        credentials_file.write_text("[other]\naws_access_key_id = A\naws_secret_access_key = B\n")

        with pytest.raises(ConfigurationError):
            create_credentials(config(aws_profile_name="analytics", aws_profile_file=str(credentials_file)))

    def test_default_chain(self):
        chain_credentials = Mock()
        with patch("glueserde.credentials.boto3.Session") as session:
            session.return_value.get_credentials.return_value = chain_credentials

            assert create_credentials(config()) is chain_credentials

    def test_default_chain_without_credentials(self):
        with patch("glueserde.credentials.boto3.Session") as session:
            session.return_value.get_credentials.return_value = None

            with pytest.raises(ConfigurationError, match="default provider chain"):
                create_credentials(config())
