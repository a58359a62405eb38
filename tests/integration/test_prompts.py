"""
Integration tests for prompts endpoints.
"""

from uuid import uuid4

from api.dependencies import get_optional_text_service
from services.prompt_filter import compose


class TestListPrompts:
    """Tests for GET /api/prompts."""

    def test_list_prompts_empty(self, client):
        response = client.get("/api/prompts")

        assert response.status_code == 200
        data = response.json()
        assert data["prompts"] == []
        assert data["pagination"] == {"page": 1, "limit": 20, "total": 0, "has_more": False}
        assert data["semantic"] is False

    def test_newest_first_with_paging(self, client, create_entry):
        for i in range(3):
            create_entry(f"entry {i}")

        response = client.get("/api/prompts?page=1&limit=2")

        data = response.json()
        assert [p["prompt"] for p in data["prompts"]] == ["entry 2", "entry 1"]
        assert data["pagination"]["total"] == 3
        assert data["pagination"]["has_more"] is True

        last_page = client.get("/api/prompts?page=2&limit=2").json()
        assert [p["prompt"] for p in last_page["prompts"]] == ["entry 0"]
        assert last_page["pagination"]["has_more"] is False

    def test_keyword_search(self, client, create_entry):
        create_entry("a snowy owl")
        create_entry("a desert fox")

        response = client.get("/api/prompts?search=owl")

        assert [p["prompt"] for p in response.json()["prompts"]] == ["a snowy owl"]

    def test_favorites_only(self, client, create_entry):
        favorite = create_entry("favorite")
        create_entry("other")
        client.post(f"/api/prompts/{favorite['id']}/favorite")

        response = client.get("/api/prompts?favorites_only=true")

        assert [p["id"] for p in response.json()["prompts"]] == [favorite["id"]]

    def test_semantic_search(self, client, create_entry, mock_text_service):
        fox = create_entry("a red fox in snow")
        city = create_entry("a neon city at night")
        create_entry("no embedding yet")
        mock_text_service.embed.side_effect = [
            [1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
            [1.0, 0.1, 0.0],
        ]
        client.post(f"/api/prompts/{fox['id']}/embedding")
        client.post(f"/api/prompts/{city['id']}/embedding")

        response = client.get("/api/prompts?search=fox&semantic=true")

        assert response.status_code == 200
        data = response.json()
        assert data["semantic"] is True
        assert [p["id"] for p in data["prompts"]] == [fox["id"]]
        assert data["prompts"][0]["score"] > 0.3
        assert data["pagination"]["total"] == 1

    def test_semantic_search_without_key_uses_keywords(self, client, app, create_entry):
        create_entry("a red fox")
        app.dependency_overrides[get_optional_text_service] = lambda: None

        response = client.get("/api/prompts?search=fox&semantic=true")

        data = response.json()
        assert data["semantic"] is False
        assert len(data["prompts"]) == 1

    def test_without_database(self, no_db_client):
        response = no_db_client.get("/api/prompts")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "database_unavailable"


class TestCreatePrompt:
    """Tests for POST /api/prompts."""

    def test_mock_provider(self, client):
        response = client.post(
            "/api/prompts",
            json={"prompt": "a lighthouse", "seed": 42, "analyze": False},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["prompt"] == "a lighthouse"
        assert data["original_prompt"] == "a lighthouse"
        assert data["image_url"] == "https://picsum.photos/seed/42/1024/1024"
        assert data["seed"] == 42
        assert data["sampler"] == "Euler a"
        assert data["tags"] == "Engine:mock"
        assert data["has_embedding"] is False

    def test_random_seed_when_missing(self, client):
        for seed in (None, -1):
            response = client.post(
                "/api/prompts",
                json={"prompt": "a lighthouse", "seed": seed, "analyze": False},
            )
            assert 0 <= response.json()["seed"] < 1_000_000

    def test_analysis_adds_translation_and_tags(self, client, mock_text_service):
        response = client.post("/api/prompts", json={"prompt": "mountains at sunset"})

        data = response.json()
        assert data["prompt_zh"] == "夕陽下的山脈"
        assert data["tags"] == "Engine:mock, 風景, 日落"
        mock_text_service.analyze_prompt.assert_awaited_once_with("mountains at sunset")

    def test_master_filter(self, client):
        response = client.post(
            "/api/prompts",
            json={"prompt": "a watch, 50mm", "analyze": False, "use_master_filter": True},
        )

        data = response.json()
        assert data["prompt"] == compose("a watch, 50mm", "full")
        assert data["original_prompt"] == "a watch, 50mm"

    def test_gemini_provider_stores_image(self, client, mock_image_service, storage):
        response = client.post(
            "/api/prompts",
            json={
                "prompt": "a lighthouse",
                "provider": "gemini",
                "image_engine": "imagen",
                "width": 1920,
                "height": 1080,
                "analyze": False,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["image_url"].startswith("/uploads/imagen-")
        assert storage.exists(data["image_url"])
        assert data["tags"] == "Engine:imagen"

        kwargs = mock_image_service.generate.call_args.kwargs
        assert kwargs["aspect_ratio"] == "16:9"
        assert kwargs["sample_count"] == 1

    def test_preview_mode_does_not_save(self, client, mock_image_service, png_bytes):
        mock_image_service.generate.return_value.images = [png_bytes, png_bytes]

        response = client.post(
            "/api/prompts",
            json={"prompt": "a lighthouse", "provider": "gemini", "image_count": 2, "analyze": False},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["preview_mode"] is True
        assert len(data["images"]) == 2
        assert data["image_engine"] == "imagen"
        assert client.get("/api/prompts").json()["pagination"]["total"] == 0

    def test_save_selected_preview(self, client):
        response = client.put(
            "/api/prompts",
            json={
                "image_url": "/uploads/imagen-1-abcdef01.png",
                "prompt": "a lighthouse",
                "tags": "sea",
                "seed": 7,
                "image_engine": "imagen",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["image_url"] == "/uploads/imagen-1-abcdef01.png"
        assert data["tags"] == "Engine:imagen, sea"
        assert data["cfg_scale"] == 7.0
        assert data["steps"] == 25

    def test_empty_prompt_rejected(self, client):
        response = client.post("/api/prompts", json={"prompt": ""})

        assert response.status_code == 422


class TestSinglePrompt:
    """Tests for /api/prompts/{id} endpoints."""

    def test_get(self, client, create_entry):
        entry = create_entry("a lighthouse")

        response = client.get(f"/api/prompts/{entry['id']}")

        assert response.status_code == 200
        assert response.json()["prompt"] == "a lighthouse"

    def test_get_missing(self, client):
        response = client.get(f"/api/prompts/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "prompt_not_found"

    def test_get_invalid_id(self, client):
        response = client.get("/api/prompts/not-a-uuid")

        assert response.status_code == 422

    def test_update(self, client, create_entry):
        entry = create_entry("a lighthouse")

        response = client.patch(
            f"/api/prompts/{entry['id']}",
            json={"prompt": "a tall lighthouse", "prompt_zh": "高聳的燈塔"},
        )

        data = response.json()
        assert data["prompt"] == "a tall lighthouse"
        assert data["prompt_zh"] == "高聳的燈塔"
        assert data["tags"] == entry["tags"]

    def test_update_tags(self, client, create_entry):
        entry = create_entry("a lighthouse")

        response = client.patch(f"/api/prompts/{entry['id']}/tags", json={"tags": "sea,night"})

        assert response.json()["tags"] == "sea,night"

    def test_toggle_favorite(self, client, create_entry):
        entry = create_entry("a lighthouse")

        first = client.post(f"/api/prompts/{entry['id']}/favorite").json()
        second = client.post(f"/api/prompts/{entry['id']}/favorite").json()

        assert first["is_favorite"] is True
        assert second["is_favorite"] is False

    def test_delete(self, client, create_entry):
        entry = create_entry("a lighthouse")

        response = client.delete(f"/api/prompts/{entry['id']}")

        assert response.status_code == 200
        assert client.get(f"/api/prompts/{entry['id']}").status_code == 404
        assert client.delete(f"/api/prompts/{entry['id']}").status_code == 404

    def test_batch_delete(self, client, create_entry):
        a = create_entry("a")
        b = create_entry("b")
        keep = create_entry("keep")

        response = client.request(
            "DELETE", "/api/prompts/batch", json={"ids": [a["id"], b["id"], str(uuid4())]}
        )

        assert response.status_code == 200
        assert response.json()["deleted"] == 2
        remaining = client.get("/api/prompts").json()["prompts"]
        assert [p["id"] for p in remaining] == [keep["id"]]

    def test_embedding(self, client, create_entry, mock_text_service):
        entry = create_entry("a lighthouse")

        response = client.post(f"/api/prompts/{entry['id']}/embedding")

        assert response.status_code == 200
        assert response.json()["dimensions"] == 3
        assert client.get(f"/api/prompts/{entry['id']}").json()["has_embedding"] is True
        mock_text_service.embed.assert_awaited_once_with("a lighthouse")


class TestUpload:
    """Tests for POST /api/prompts/upload."""

    def test_upload_creates_entry(self, client, upload_entry, storage):
        entry = upload_entry("photo.png")

        assert entry["prompt"] == "[Uploaded image] photo.png"
        assert entry["tags"] == "upload"
        assert (entry["width"], entry["height"]) == (8, 8)
        assert storage.exists(entry["image_url"])

    def test_upload_rejects_non_image(self, client):
        response = client.post("/api/prompts/upload", json={"image": "aGVsbG8gd29ybGQ="})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"
