import time
import uuid

import requests


def is_http_url(data: str) -> bool:
    """
    Check if the provided data is an http(s) URL
    """
    return data.startswith(("http://", "https://"))


def is_data_url(data: str) -> bool:
    return data.startswith("data:")


def get_image_bytes_from_url(url: str) -> bytes:
    """
    Fetch image bytes from a URL.
    """
    resp = requests.get(url, timeout=10)
    if resp.status_code != 200:
        raise ValueError(f"Failed to fetch image from {url}")
    return resp.content


def split_data_url(data: str) -> tuple[str, str]:
    """
    Split a data URL into its mime type and its base64 payload.
    The mime type is empty when the header does not declare one.
    """
    header, _, payload = data.partition(",")
    mime_type = header[len("data:"):].split(";", 1)[0]
    return mime_type, payload


def remove_b64_header(data: str) -> str:
    """
    Remove the base64 header from a data URL and restore the padding.
    """
    if is_data_url(data):
        img_b64 = data.split(",", 1)[-1]
        img_b64 = "".join(img_b64.split())
        padding = len(img_b64) % 4
        if padding:
            img_b64 += "=" * (4 - padding)
        return img_b64
    return data


def new_entry_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)
