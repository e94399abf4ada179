"""
Tests for credential masking and resolution precedence.
"""

import pytest

from vidlens.config import HunyuanConfig
from vidlens.exceptions import ConfigurationException
from vidlens.providers import ProviderFactory
from vidlens.providers.credentials import (
    HunyuanCredentials,
    StartupCredentials,
    mask_secret_id,
    mask_secret_key,
    resolve_credentials,
    sanitize_arguments,
)
from vidlens.tests.conftest import SECRET_ID, SECRET_KEY


def test_mask_secret_id_shows_last_four():
    assert mask_secret_id(SECRET_ID) == "***wxyz"
    assert mask_secret_id("") == "***"
    assert mask_secret_id(None) == "***"


@pytest.mark.parametrize("secret_id", ["a", "abc", "wxyz"])
def test_mask_secret_id_hides_short_ids(secret_id):
    assert mask_secret_id(secret_id) == "***"


def test_mask_secret_id_five_chars_shows_suffix():
    assert mask_secret_id("vwxyz") == "***wxyz"


def test_mask_secret_key_hides_everything():
    assert mask_secret_key(SECRET_KEY) == "***hidden***"


def test_sanitize_arguments_masks_both_spellings():
    sanitized = sanitize_arguments(
        {"secret_id": SECRET_ID, "secretKey": SECRET_KEY, "video_path": "/tmp/v.mp4", "secret_key": None}
    )
    assert sanitized["secret_id"] == "***wxyz"
    assert sanitized["secretKey"] == "***hidden***"
    assert sanitized["video_path"] == "/tmp/v.mp4"
    assert sanitized["secret_key"] is None


def test_credentials_repr_is_masked(credentials):
    text = repr(credentials)
    assert SECRET_KEY not in text
    assert SECRET_ID not in text
    assert "***wxyz" in text


@pytest.mark.parametrize("secret_id,secret_key", [("", "key"), ("id", ""), (None, None)])
def test_incomplete_credentials_rejected(secret_id, secret_key):
    with pytest.raises(ConfigurationException):
        HunyuanCredentials(secret_id=secret_id, secret_key=secret_key)


def test_environment_wins_over_call_and_startup(monkeypatch):
    monkeypatch.setenv("HUNYUAN_SECRET_ID", "env-id-1111")
    monkeypatch.setenv("HUNYUAN_SECRET_KEY", "env-key")
    resolved = resolve_credentials(
        secret_id="call-id-2222",
        secret_key="call-key",
        startup=StartupCredentials("start-id-3333", "start-key"),
    )
    assert resolved.secret_id == "env-id-1111"
    assert resolved.secret_key == "env-key"


def test_call_parameters_win_over_startup():
    resolved = resolve_credentials(
        secret_id="call-id-2222",
        secret_key="call-key",
        startup=StartupCredentials("start-id-3333", "start-key"),
    )
    assert resolved.secret_id == "call-id-2222"


def test_startup_used_as_last_resort():
    resolved = resolve_credentials(startup=StartupCredentials("start-id-3333", "start-key", region="ap-shanghai"))
    assert resolved.secret_id == "start-id-3333"
    assert resolved.region == "ap-shanghai"


def test_partial_call_pair_is_not_mixed_with_startup():
    resolved = resolve_credentials(
        secret_id="call-id-2222",
        startup=StartupCredentials("start-id-3333", "start-key"),
    )
    assert resolved.secret_id == "start-id-3333"
    assert resolved.secret_key == "start-key"


def test_missing_everywhere_raises():
    with pytest.raises(ConfigurationException):
        resolve_credentials()


def test_region_defaults_to_beijing():
    resolved = resolve_credentials(secret_id="id-0000", secret_key="key")
    assert resolved.region == "ap-beijing"
    assert resolved.endpoint == "hunyuan.tencentcloudapi.com"


def test_environment_region_wins(monkeypatch):
    monkeypatch.setenv("HUNYUAN_REGION", "ap-guangzhou")
    resolved = resolve_credentials(secret_id="id-0000", secret_key="key", region="ap-shanghai")
    assert resolved.region == "ap-guangzhou"


def test_call_region_used_without_environment_region():
    resolved = resolve_credentials(secret_id="id-0000", secret_key="key", region="ap-shanghai")
    assert resolved.region == "ap-shanghai"


def test_factory_builds_client_from_config():
    config = HunyuanConfig(request_interval_seconds=0.5, max_images_per_request=2, max_image_size_mb=1)
    client = ProviderFactory.create_hunyuan_client(secret_id="id-0000", secret_key="key", config=config)
    assert client.policy.request_interval_seconds == 0.5
    assert client.policy.max_images_per_request == 2
    assert client.max_image_bytes == 1024 * 1024
    assert client.credentials.secret_id == "id-0000"
