from lumina.utils import (is_data_url, is_http_url, new_entry_id,
                          remove_b64_header, split_data_url)


def test_is_http_url():
    assert is_http_url("http://example.com/image.png")
    assert is_http_url("https://example.com/image.png")
    assert not is_http_url("ftp://example.com/image.png")
    assert not is_http_url("example.com/image.png")


def test_is_data_url():
    assert is_data_url("data:image/png;base64,AAAA")
    assert not is_data_url("https://example.com/image.png")


def test_remove_b64_header():
    data_url = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAUA..."
    b64_no_padding = "iVBORw0KGgoAAAANSUhEUgAAAAUA..."
    result = remove_b64_header(data_url)
    assert result.startswith(b64_no_padding)
    assert len(result) % 4 == 0

    non_data_url = "https://example.com/image.png"
    assert remove_b64_header(non_data_url) == non_data_url


def test_split_data_url():
    assert split_data_url("data:image/jpeg;base64,/9j/") == ("image/jpeg", "/9j/")
    assert split_data_url("data:;base64,AAAA") == ("", "AAAA")


def test_new_entry_id_is_unique():
    assert new_entry_id() != new_entry_id()
