"""
Tests for the nonce and health endpoints.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from pycomments.core.config import settings
from pycomments.core.security import get_nonce_manager


@pytest.mark.asyncio
async def test_issue_nonce_for_anonymous_visitor(client: AsyncClient) -> None:
    response = await client.get(f"{settings.api_v1_prefix}/nonces/comment-form")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["action"] == "comment-form"
    assert data["field_name"] == settings.nonce_field_name
    assert data["expires_in"] == settings.nonce_lifetime_minutes * 60
    assert get_nonce_manager().verify("comment-form", data["token"], None) is True


@pytest.mark.asyncio
async def test_issue_nonce_bound_to_session_user(
    client: AsyncClient,
    user_headers: dict[str, str],
) -> None:
    response = await client.get(
        f"{settings.api_v1_prefix}/nonces/comment-form",
        headers=user_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    token = response.json()["token"]
    nonces = get_nonce_manager()
    assert nonces.verify("comment-form", token, 7) is True
    assert nonces.verify("comment-form", token, None) is False


@pytest.mark.asyncio
async def test_issue_nonce_rejects_bad_action(client: AsyncClient) -> None:
    response = await client.get(f"{settings.api_v1_prefix}/nonces/Not%20Valid!")

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_issued_nonce_accepted_by_comment_form(
    client: AsyncClient,
    fake_client: AsyncClient,
    fake_store,
) -> None:
    """A nonce from the nonce endpoint authorizes a comment submission."""
    token = (await client.get(f"{settings.api_v1_prefix}/nonces/comment-form")).json()["token"]

    response = await fake_client.post(
        settings.comment_post_path,
        data={"comment_post_ID": "42", "comment": "hello", "_nonce": token},
    )

    assert response.status_code == status.HTTP_302_FOUND
    assert response.headers["location"] == "https://example.com/p/42#comment-101"


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    response = await client.get(f"{settings.api_v1_prefix}/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"
    assert response.json()["environment"] == "test"


@pytest.mark.asyncio
async def test_liveness_check(client: AsyncClient) -> None:
    response = await client.get(f"{settings.api_v1_prefix}/live")

    assert response.json() == {"status": "alive"}


@pytest.mark.asyncio
async def test_readiness_check(client: AsyncClient) -> None:
    response = await client.get(f"{settings.api_v1_prefix}/ready")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ready", "database": "connected"}
