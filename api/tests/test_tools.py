"""
Tests for the tool endpoints.

These cover the profile tools, the confirmation gate on account tools, and
the conversion of failures into structured results:
- gated tool unconfirmed returns the prompt and never builds a client
- confirmed tool runs with the confirmed identity
- switching profile closes the gate again
- automation errors come back as success=false with an error kind
"""

from __future__ import annotations

import json

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from api.main import create_app
from shared.errors import NotAuthenticatedError

from conftest import FakeRetailClient, RecordingClientFactory

GATED_TOOLS = [
    ("get-cart-content", None),
    ("add-to-cart", {"asin": "B0F2255HFW"}),
    ("clear-cart", None),
    ("get-orders-history", None),
    ("perform-purchase", None),
]


def _post(client, tool, body=None):
    if body is None:
        return client.post(f"/tools/{tool}")
    return client.post(f"/tools/{tool}", json=body)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok", "profile": "personal"}


def test_list_profiles(client):
    response = _post(client, "list-profiles")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["success"] is True
    assert data["data"]["current_profile"] == "personal"
    assert data["data"]["session_confirmed"] is False
    assert data["data"]["profiles"] == [
        {"name": "personal", "cookie_count": 2, "domain": "amazon.com", "active": True},
        {"name": "work", "cookie_count": 1, "domain": "amazon.co.uk", "active": False},
    ]


def test_get_current_profile(client):
    data = _post(client, "get-current-profile").json()

    assert data["profile"] == "personal"
    assert data["data"]["domain"] == "amazon.com"
    assert data["data"]["cookie_count"] == 2
    assert data["data"]["session_confirmed"] is False


@pytest.mark.parametrize(("tool", "body"), GATED_TOOLS)
def test_gated_tool_unconfirmed_returns_prompt_without_browser(client, client_factory, tool, body):
    response = _post(client, tool, body)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["success"] is False
    assert data["error_kind"] == "confirmation_required"
    assert data["confirmation"]["type"] == "PROFILE_CONFIRMATION_REQUIRED"
    assert data["confirmation"]["current_profile"] == "personal"
    assert data["confirmation"]["available_profiles"] == ["personal", "work"]
    assert data["confirmation"]["options"][0]["label"] == "personal (current)"
    assert client_factory.sessions == []


def test_confirmed_tool_runs_with_active_identity(client, client_factory):
    assert _post(client, "confirm-profile").json()["success"] is True

    data = _post(client, "get-cart-content").json()

    assert data["success"] is True
    assert data["profile"] == "personal"
    assert data["data"]["items"][0]["asin"] == "B07THHPGCV"
    assert len(client_factory.sessions) == 1
    assert client_factory.sessions[0].profile == "personal"
    assert client_factory.sessions[0].domain == "amazon.com"


def test_confirm_with_profile_switches_and_confirms(client, client_factory):
    data = _post(client, "confirm-profile", {"profile": "work"}).json()

    assert data["success"] is True
    assert data["profile"] == "work"
    assert data["data"]["session_confirmed"] is True

    cart = _post(client, "add-to-cart", {"asin": "B0F2255HFW"}).json()
    assert cart["success"] is True
    assert cart["profile"] == "work"
    assert client_factory.sessions[-1].domain == "amazon.co.uk"


def test_switch_profile_closes_gate(client, client_factory):
    _post(client, "confirm-profile")

    switched = _post(client, "switch-profile", {"profile": "work"}).json()
    assert switched["success"] is True
    assert switched["data"]["session_confirmed"] is False

    gated = _post(client, "get-orders-history").json()
    assert gated["error_kind"] == "confirmation_required"
    assert gated["confirmation"]["current_profile"] == "work"
    assert client_factory.sessions == []


def test_switch_to_unknown_profile(client):
    _post(client, "confirm-profile")

    data = _post(client, "switch-profile", {"profile": "family"}).json()

    assert data["success"] is False
    assert data["error_kind"] == "not_found"
    assert data["profile"] == "personal"
    assert data["data"]["available_profiles"] == ["personal", "work"]
    assert data["data"]["session_confirmed"] is True


def test_switch_to_invalid_name(client):
    data = _post(client, "switch-profile", {"profile": "Work Account"}).json()

    assert data["success"] is False
    assert data["error_kind"] == "invalid_name"


def test_save_profile_then_list(client):
    payload = json.dumps([{"domain": ".amazon.de", "name": "session-id", "value": "de-1"}])

    saved = _post(client, "save-profile", {"profile": "family", "cookies_json": payload}).json()
    listing = _post(client, "list-profiles").json()

    assert saved["success"] is True
    assert saved["profile"] == "personal"
    names = [p["name"] for p in listing["data"]["profiles"]]
    assert names == ["family", "personal", "work"]


def test_save_profile_invalid_payload(client):
    data = _post(client, "save-profile", {"profile": "family", "cookies_json": "[]"}).json()

    assert data["success"] is False
    assert data["error_kind"] == "invalid_payload"
    assert "Cookies array is empty" in data["message"]


def test_save_profile_rejects_bad_name_in_schema(client):
    response = _post(client, "save-profile", {"profile": "Family!", "cookies_json": "[]"})

    assert response.status_code == 422


def test_public_tools_do_not_require_confirmation(client, client_factory):
    search = _post(client, "search-products", {"search_term": "usb cable"}).json()
    detail = _post(client, "get-product-details", {"asin": "B07THHPGCV"}).json()

    assert search["success"] is True
    assert search["data"][0]["title"] == "usb cable result"
    assert detail["success"] is True
    assert detail["data"]["asin"] == "B07THHPGCV"
    assert len(client_factory.sessions) == 2


def test_asin_length_is_validated(client):
    response = _post(client, "add-to-cart", {"asin": "B0F2"})

    assert response.status_code == 422


def test_clear_cart_reports_partial_success(client):
    _post(client, "confirm-profile")

    data = _post(client, "clear-cart").json()

    assert data["success"] is True
    assert data["data"]["partial"] is True
    assert data["data"]["items_removed"] == 1


def test_perform_purchase_is_simulated(client, client_factory):
    _post(client, "confirm-profile")

    data = _post(client, "perform-purchase").json()

    assert data["success"] is True
    assert "(Profile: personal)" in data["message"]


class NotLoggedInClient(FakeRetailClient):
    async def get_cart_content(self):
        raise NotAuthenticatedError("getCartContent")


class BrokenClient(FakeRetailClient):
    async def get_orders_history(self):
        raise RuntimeError("selector engine crashed")


@pytest.mark.parametrize(
    ("client_class", "tool", "error_kind"),
    [
        (NotLoggedInClient, "get-cart-content", "not_authenticated"),
        (BrokenClient, "get-orders-history", "internal_error"),
    ],
)
def test_failures_become_structured_results(test_config, controller, client_class, tool, error_kind):
    app = create_app(
        config=test_config,
        controller=controller,
        client_factory=RecordingClientFactory(client_class),
    )
    controller.confirm_session()

    with TestClient(app) as test_client:
        response = _post(test_client, tool)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["success"] is False
    assert data["error_kind"] == error_kind
    assert data["profile"] == "personal"
