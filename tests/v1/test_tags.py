# mypy: ignore-errors
# tests/v1/test_tags.py
"""Tests for tag endpoints."""

from fastapi import status


def test_list_tags_with_counts(client, services, test_post) -> None:
    services.threads.create_tag("unused")

    response = client.get("/api/v1/tags/")
    assert response.status_code == status.HTTP_200_OK
    assert [(t["name"], t["post_count"]) for t in response.json()] == [
        ("general", 1),
        ("unused", 0),
    ]


def test_create_tag_requires_admin(client, auth_token) -> None:
    anonymous = client.post("/api/v1/tags/", json={"name": "news"})
    assert anonymous.status_code == status.HTTP_403_FORBIDDEN

    regular = client.post("/api/v1/tags/", json={"name": "news"}, headers=auth_token)
    assert regular.status_code == status.HTTP_403_FORBIDDEN


def test_admin_creates_tag(client, admin_auth_token) -> None:
    response = client.post("/api/v1/tags/", json={"name": "news"}, headers=admin_auth_token)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["name"] == "news"

    duplicate = client.post("/api/v1/tags/", json={"name": "news"}, headers=admin_auth_token)
    assert duplicate.status_code == status.HTTP_409_CONFLICT


def test_admin_renames_tag(client, admin_auth_token, auth_token, test_tag, test_post) -> None:
    denied = client.patch(f"/api/v1/tags/{test_tag.id}", json={"name": "chat"}, headers=auth_token)
    assert denied.status_code == status.HTTP_403_FORBIDDEN

    response = client.patch(
        f"/api/v1/tags/{test_tag.id}",
        json={"name": "chat"},
        headers=admin_auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "chat"

    posts = client.get("/api/v1/posts/", params={"tag": "chat"}).json()
    assert [p["id"] for p in posts] == [test_post.id]


def test_admin_deletes_tag(client, admin_auth_token, test_tag, test_post) -> None:
    response = client.delete(f"/api/v1/tags/{test_tag.id}", headers=admin_auth_token)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    assert client.get("/api/v1/tags/").json() == []
    post = client.get(f"/api/v1/posts/{test_post.id}").json()["post"]
    assert post["tag"] is None

    again = client.delete(f"/api/v1/tags/{test_tag.id}", headers=admin_auth_token)
    assert again.status_code == status.HTTP_404_NOT_FOUND
