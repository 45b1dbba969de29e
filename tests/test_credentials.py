import pytest
from pydantic import ValidationError

from models.credentials import (
    ApiKeyCredentials,
    BasicAuthCredentials,
    CustomCredentials,
    EdiCredentials,
    OAuth2Credentials,
    SftpCredentials,
    parse_credentials,
)
from models.vendor import Vendor, VendorConnectorConfig


def test_legacy_bag_with_api_key_becomes_api_key_credentials():
    creds = parse_credentials(
        {"apiKey": "k-1", "apiSecret": "s-1", "customHeaders": {"X-Tenant": "t"}}
    )
    assert isinstance(creds, ApiKeyCredentials)
    assert creds.api_key == "k-1"
    assert creds.api_secret == "s-1"
    assert creds.custom_headers == {"X-Tenant": "t"}


def test_api_key_takes_precedence_over_other_material():
    creds = parse_credentials({"apiKey": "k", "accessToken": "tok", "username": "u", "password": "p"})
    assert isinstance(creds, ApiKeyCredentials)


def test_oauth_from_access_token_or_client_pair():
    assert isinstance(parse_credentials({"accessToken": "tok"}), OAuth2Credentials)
    creds = parse_credentials({"clientId": "id", "clientSecret": "secret"})
    assert isinstance(creds, OAuth2Credentials)
    assert creds.has_client_credentials
    assert creds.access_token is None


def test_basic_sftp_and_edi_variants():
    assert isinstance(parse_credentials({"username": "u", "password": "p"}), BasicAuthCredentials)

    sftp = parse_credentials({"sftpHost": "sftp.example.com", "sftpUsername": "u", "sftpPassword": "p"})
    assert isinstance(sftp, SftpCredentials)
    assert sftp.port == 22

    edi = parse_credentials({"ediPartnerId": "P", "ediSenderId": "S", "ediReceiverId": "R"})
    assert isinstance(edi, EdiCredentials)
    assert edi.is_complete


def test_empty_bag_is_custom_credentials():
    assert isinstance(parse_credentials({}), CustomCredentials)
    assert isinstance(parse_credentials(None), CustomCredentials)


def test_tagged_dict_uses_discriminator():
    creds = parse_credentials({"auth_type": "basic", "username": "u", "password": "p"})
    assert isinstance(creds, BasicAuthCredentials)


def test_instances_pass_through_unchanged():
    creds = ApiKeyCredentials(api_key="k")
    assert parse_credentials(creds) is creds


def test_invalid_variants_are_rejected():
    with pytest.raises(ValidationError):
        OAuth2Credentials()
    with pytest.raises(ValidationError):
        SftpCredentials(host="h", username="u")
    with pytest.raises(TypeError):
        parse_credentials("not-a-dict")


def test_connector_config_coerces_legacy_bag():
    config = VendorConnectorConfig(credentials={"apiKey": "k"})
    assert isinstance(config.credentials, ApiKeyCredentials)
    assert config.timeout == 30.0
    assert config.retry_attempts == 3
    assert config.retry_base_delay == 1.0


def test_vendor_type_is_normalized():
    vendor = Vendor(id="v", tenant_id="t", name="Acme", type="  SP_Richards ")
    assert vendor.type == "sp_richards"
