# dripdesk_ui/api_client.py
# Every HTTP request to the record API goes through this module.
# Functions raise requests.RequestException on network or HTTP errors.

import requests
from urllib.parse import quote

from .config import config


def check_backend():
    """Checks the record API status."""
    try:
        response = requests.get(config.ROOT_URL, timeout=2)
        if response.status_code == 200:
            return "🟢 Record API online"
        return f"🟡 Record API degraded (status code: {response.status_code})"
    except requests.ConnectionError:
        return "🔴 Record API unreachable"


def _record_url(collection, record_id):
    return f"{config.collection_url(collection)}/{quote(str(record_id), safe='')}"


def list_records(collection, **filters):
    """Fetches every record of a collection, optionally filtered by field equality."""
    params = {k: v for k, v in filters.items() if v is not None}
    response = requests.get(config.collection_url(collection), params=params, timeout=config.timeout)
    response.raise_for_status()
    return response.json().get("records", [])


def get_record(collection, record_id):
    response = requests.get(_record_url(collection, record_id), timeout=config.timeout)
    response.raise_for_status()
    return response.json().get("record")


def create_record(collection, payload):
    response = requests.post(config.collection_url(collection), json=payload, timeout=config.timeout)
    response.raise_for_status()
    return response.json().get("record")


def update_record(collection, record_id, payload):
    response = requests.put(_record_url(collection, record_id), json=payload, timeout=config.timeout)
    response.raise_for_status()
    return response.json().get("record")


def delete_record(collection, record_id):
    response = requests.delete(_record_url(collection, record_id), timeout=config.timeout)
    response.raise_for_status()
    return response.json()


def delete_where(collection, **filters):
    """Deletes every record matching the equality filters. At least one filter is required."""
    if not filters:
        raise ValueError("delete_where needs at least one filter.")
    response = requests.delete(config.collection_url(collection), params=filters, timeout=config.timeout)
    response.raise_for_status()
    return response.json()


def error_detail(exc: requests.RequestException) -> str:
    """Extracts the API's 'detail' message from a failed request."""
    response = getattr(exc, "response", None)
    if response is None:
        return str(exc)
    try:
        body = response.json()
    except ValueError:
        return response.text or str(exc)
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return response.text or str(exc)
