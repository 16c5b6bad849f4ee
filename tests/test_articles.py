from conftest import login, register

from knowledge_hub import articles as article_manager


def create_category(client, name="Guides"):
    return client.post("/api/categories", json={"name": name}).json()


def create_tag(client, name):
    return client.post("/api/tags", json={"name": name}).json()


def create_article(client, **fields):
    payload = {"title": "Hello", "content": "World", "status": "draft"}
    payload.update(fields)
    return client.post("/api/articles", json=payload)


def test_articles_require_a_session(client):
    assert client.get("/api/articles").status_code == 401
    assert create_article(client).status_code == 401


def test_create_article_sets_author_and_defaults(auth_client, clock):
    me = auth_client.get("/api/auth/me").json()
    guides = create_category(auth_client)
    intro = create_tag(auth_client, "intro")
    tutorial = create_tag(auth_client, "tutorial")

    resp = create_article(auth_client, category_id=guides["id"], tag_ids=[intro["id"], tutorial["id"]])
    assert resp.status_code == 201

    data = resp.json()
    assert data["author_id"] == me["id"]
    assert data["published_at"] is None
    assert data["views"] == 0
    assert "tags" not in data

    detail = auth_client.get(f"/api/articles/{data['id']}?edit=true").json()
    assert detail["author"]["username"] == "alice"
    assert "password" not in detail["author"]
    assert detail["category"]["name"] == "Guides"
    assert [tag["name"] for tag in detail["tags"]] == ["intro", "tutorial"]


def test_publish_then_view_flow(auth_client, clock):
    intro = create_tag(auth_client, "intro")
    article = create_article(auth_client, tag_ids=[intro["id"]]).json()

    patched = auth_client.patch(f"/api/articles/{article['id']}", json={"status": "published"})
    assert patched.status_code == 200
    assert patched.json()["published_at"] is not None

    viewed = auth_client.get(f"/api/articles/{article['id']}").json()
    assert viewed["views"] == 1
    assert [tag["name"] for tag in viewed["tags"]] == ["intro"]


def test_edit_flag_suppresses_view_count(auth_client, clock):
    article = create_article(auth_client).json()

    for _ in range(3):
        auth_client.get(f"/api/articles/{article['id']}?edit=true")
    assert auth_client.get(f"/api/articles/{article['id']}?edit=true").json()["views"] == 0

    auth_client.get(f"/api/articles/{article['id']}")
    auth_client.get(f"/api/articles/{article['id']}")
    assert auth_client.get(f"/api/articles/{article['id']}?edit=true").json()["views"] == 2


def test_patch_distinguishes_empty_from_omitted_tags(auth_client, clock):
    t1 = create_tag(auth_client, "t1")
    t2 = create_tag(auth_client, "t2")
    article = create_article(auth_client, tag_ids=[t1["id"], t2["id"]]).json()
    url = f"/api/articles/{article['id']}"

    auth_client.patch(url, json={"title": "Still tagged"})
    assert [tag["name"] for tag in auth_client.get(f"{url}/tags").json()] == ["t1", "t2"]

    auth_client.patch(url, json={"title": "Still tagged", "tag_ids": None})
    assert len(auth_client.get(f"{url}/tags").json()) == 2

    auth_client.patch(url, json={"tag_ids": []})
    assert auth_client.get(f"{url}/tags").json() == []


def test_blank_optional_fields_are_stored_as_null(auth_client, clock):
    data = create_article(auth_client, excerpt="", cover_image="  ", category_id="").json()
    assert data["excerpt"] is None
    assert data["cover_image"] is None
    assert data["category_id"] is None


def test_article_payload_validation(auth_client):
    assert create_article(auth_client, title="").status_code == 422
    assert create_article(auth_client, content="").status_code == 422
    assert create_article(auth_client, status="archived").status_code == 422

    article = create_article(auth_client).json()
    assert auth_client.patch(f"/api/articles/{article['id']}", json={"title": None}).status_code == 422
    assert auth_client.patch(f"/api/articles/{article['id']}", json={"status": "archived"}).status_code == 422


def test_immutable_fields_in_patch_are_ignored(auth_client, clock):
    article = create_article(auth_client).json()

    resp = auth_client.patch(
        f"/api/articles/{article['id']}",
        json={"views": 99, "id": "other", "created_at": "2000-01-01T00:00:00", "title": "New"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == article["id"]
    assert data["views"] == 0
    assert data["created_at"] == article["created_at"]
    assert data["title"] == "New"


def test_unknown_tag_id_is_a_server_error(auth_client):
    resp = create_article(auth_client, tag_ids=["does-not-exist"])
    assert resp.status_code == 500
    assert "integrity" in resp.json()["detail"].lower()
    assert auth_client.get("/api/articles").json() == []


def test_missing_article_is_404(auth_client):
    assert auth_client.get("/api/articles/missing").status_code == 404
    assert auth_client.get("/api/articles/missing/tags").status_code == 404
    assert auth_client.patch("/api/articles/missing", json={"title": "x"}).status_code == 404
    resp = auth_client.delete("/api/articles/missing")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Article not found"}


def test_delete_article(auth_client, clock):
    t1 = create_tag(auth_client, "t1")
    article = create_article(auth_client, tag_ids=[t1["id"]]).json()

    resp = auth_client.delete(f"/api/articles/{article['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert auth_client.get(f"/api/articles/{article['id']}").status_code == 404
    assert [tag["name"] for tag in auth_client.get("/api/tags").json()] == ["t1"]


def test_list_and_filter_articles(auth_client, clock):
    guides = create_category(auth_client)
    create_article(auth_client, title="Deploy checklist", category_id=guides["id"], status="published")
    create_article(auth_client, title="Holiday policy", excerpt="Booking leave")
    create_article(auth_client, title="Onboarding", category_id=guides["id"])

    def titles(query=""):
        resp = auth_client.get(f"/api/articles{query}")
        assert resp.status_code == 200
        return [item["title"] for item in resp.json()]

    assert titles() == ["Onboarding", "Holiday policy", "Deploy checklist"]
    assert titles("?search=LEAVE") == ["Holiday policy"]
    assert titles(f"?category_id={guides['id']}") == ["Onboarding", "Deploy checklist"]
    assert titles("?status=published") == ["Deploy checklist"]
    assert auth_client.get("/api/articles?status=archived").status_code == 422


def test_recent_articles(auth_client, clock):
    for index in range(7):
        create_article(auth_client, title=f"Article {index}")

    recent = auth_client.get("/api/articles/recent").json()
    assert [item["title"] for item in recent] == ["Article 6", "Article 5", "Article 4", "Article 3", "Article 2"]
    assert len(auth_client.get("/api/articles/recent?limit=2").json()) == 2


def test_any_author_may_edit_any_article(client, clock):
    register(client, "alice")
    register(client, "bob")
    login(client, "alice")
    article = create_article(client).json()

    login(client, "bob")
    resp = client.patch(f"/api/articles/{article['id']}", json={"content": "Edited by bob"})
    assert resp.status_code == 200
    assert resp.json()["author_id"] == article["author_id"]


def test_article_vanishing_before_resolution_is_404(auth_client, clock, monkeypatch):
    article = create_article(auth_client).json()
    monkeypatch.setattr(article_manager, "get_article_with_relations", lambda db, article_id: None)

    resp = auth_client.get(f"/api/articles/{article['id']}?edit=true")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Article not found"}
