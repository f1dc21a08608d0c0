import pytest
from pydantic import ValidationError

from reelhub.core.config import Settings


def test_defaults():
    settings = Settings(tmdb_api_key="k")

    assert settings.tmdb_api_url == "https://api.themoviedb.org/3"
    assert settings.tmdb_timeout == 10
    assert settings.proxy is None


def test_api_url_trailing_slash_is_stripped():
    settings = Settings(tmdb_api_key="k", tmdb_api_url="https://proxy.local/tmdb/3/")

    assert settings.tmdb_api_url == "https://proxy.local/tmdb/3"


@pytest.mark.parametrize("url", ["api.themoviedb.org/3", "ftp://example.com"])
def test_api_url_must_be_http(url):
    with pytest.raises(ValidationError):
        Settings(tmdb_api_key="k", tmdb_api_url=url)


@pytest.mark.parametrize("proxy", ["proxy.local:8080", "ftp://proxy.local", "socks5://"])
def test_invalid_proxy(proxy):
    with pytest.raises(ValidationError):
        Settings(tmdb_api_key="k", proxy=proxy)


def test_socks_proxy_allowed():
    settings = Settings(tmdb_api_key="k", proxy="socks5h://127.0.0.1:9050")

    assert settings.proxy == "socks5h://127.0.0.1:9050"
