import pytest

from pubface.constants.standalone import DEFAULT_RESOLV_TIMEOUT, DEFAULT_RESOLV_URL
from pubface.exceptions import ConfigurationError
from pubface.settings import Settings, parse_timeout


def test_defaults_from_empty_environment():
    settings = Settings.from_environ({})

    assert settings.service_url == DEFAULT_RESOLV_URL
    assert settings.timeout == DEFAULT_RESOLV_TIMEOUT
    assert settings.nameservers == []


def test_values_from_environment():
    settings = Settings.from_environ({
        'RESOLV_URL': 'https://ip.example.org/json',
        'RESOLV_TIMEOUT': '2.5',
        'RESOLV_NAMESERVERS': '1.1.1.1, 2606:4700:4700::1111,',
    })

    assert settings.service_url == 'https://ip.example.org/json'
    assert settings.timeout == 2.5
    assert settings.nameservers == ['1.1.1.1', '2606:4700:4700::1111']


@pytest.mark.parametrize('value', [None, '', 'soon', '0', '-3', 'nan'])
def test_unusable_timeout_falls_back_to_default(value):
    assert parse_timeout(value) == DEFAULT_RESOLV_TIMEOUT


@pytest.mark.parametrize('url', ['ftp://ip.example.org/', 'https:///ip', 'ip.example.org'])
def test_invalid_service_url_is_rejected(url):
    with pytest.raises(ConfigurationError):
        Settings.from_environ({'RESOLV_URL': url})


def test_invalid_nameserver_is_rejected():
    with pytest.raises(ConfigurationError):
        Settings.from_environ({'RESOLV_NAMESERVERS': 'dns.example.org'})
