from urllib.parse import quote

import pytest

from gunce.api.deps import get_sync_service
from gunce.main import app
from gunce.services.sync_service import SyncService

ENTRY = {
    "title": "İlk gün",
    "content": "Bugün yeni günlük uygulamama ilk girişimi yapıyorum.",
    "entry_date": "2024-01-15",
    "tags": ["ilk"],
}


@pytest.mark.unit
class TestEntryRoutes:
    @pytest.mark.asyncio
    async def test_create_and_get(self, client):
        response = await client.post("/api/v1/entries", json=ENTRY)

        assert response.status_code == 201
        created = response.json()
        assert created["word_count"] == 7
        assert created["read_time"] == 1
        assert created["day_of_week"] == "Pazartesi"
        assert created["sync_status"] == "pending"

        response = await client.get(f"/api/v1/entries/{created['id']}")
        assert response.status_code == 200
        assert response.json()["title"] == "İlk gün"

    @pytest.mark.asyncio
    async def test_blank_title_names_field(self, client):
        response = await client.post("/api/v1/entries", json={**ENTRY, "title": "  "})

        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "title"

    @pytest.mark.asyncio
    async def test_unknown_entry(self, client):
        response = await client.get("/api/v1/entries/does-not-exist")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "RESOURCE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_list_with_filters(self, client):
        await client.post("/api/v1/entries", json=ENTRY)
        await client.post("/api/v1/entries", json={**ENTRY, "title": "Deniz", "tags": ["tatil"], "is_favorite": True})

        response = await client.get("/api/v1/entries", params={"tag": "tatil"})
        assert [e["title"] for e in response.json()["items"]] == ["Deniz"]

        response = await client.get("/api/v1/entries", params={"is_favorite": "true"})
        assert response.json()["total"] == 1

        response = await client.get("/api/v1/entries", params={"limit": 1})
        data = response.json()
        assert data["total"] == 2
        assert len(data["items"]) == 1

    @pytest.mark.asyncio
    async def test_search(self, client):
        await client.post("/api/v1/entries", json={**ENTRY, "title": "Deniz", "content": "kumsalda yürüdüm"})
        await client.post("/api/v1/entries", json=ENTRY)

        response = await client.get("/api/v1/entries/search", params={"q": "kumsal"})
        assert response.status_code == 200
        assert [e["title"] for e in response.json()["items"]] == ["Deniz"]

        response = await client.get("/api/v1/entries/search", params={"q": " "})
        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "q"

    @pytest.mark.asyncio
    async def test_update_favorite_and_delete(self, client):
        entry_id = (await client.post("/api/v1/entries", json=ENTRY)).json()["id"]

        response = await client.put(f"/api/v1/entries/{entry_id}", json={"content": "Kısa bir not"})
        assert response.status_code == 200
        assert response.json()["word_count"] == 3

        response = await client.post(f"/api/v1/entries/{entry_id}/favorite")
        assert response.json()["is_favorite"] is True

        response = await client.delete(f"/api/v1/entries/{entry_id}")
        assert response.status_code == 204
        assert (await client.get(f"/api/v1/entries/{entry_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_all(self, client):
        await client.post("/api/v1/entries", json=ENTRY)
        await client.post("/api/v1/entries", json=ENTRY)

        response = await client.delete("/api/v1/entries")

        assert response.json() == {"deleted": 2}
        assert (await client.get("/api/v1/entries")).json()["total"] == 0

    @pytest.mark.asyncio
    async def test_encrypted_entry_with_turkish_password(self, client):
        password = "giriş-parolası"
        created = (await client.post("/api/v1/entries", json={**ENTRY, "entry_password": password})).json()

        assert created["is_encrypted"] is True
        assert created["content"] == ""
        assert "entry_password" not in created

        sealed = (await client.get(f"/api/v1/entries/{created['id']}")).json()
        assert sealed["content"] == ""

        opened = await client.get(f"/api/v1/entries/{created['id']}", headers={"X-Entry-Password": quote(password)})
        assert opened.json()["content"] == ENTRY["content"]

        wrong = await client.get(f"/api/v1/entries/{created['id']}", headers={"X-Entry-Password": quote("yanlış")})
        assert wrong.status_code == 400
        assert wrong.json()["detail"]["error"] == "DECRYPTION_ERROR"

    @pytest.mark.asyncio
    async def test_update_encrypted_entry(self, client):
        password = "giriş-parolası"
        entry_id = (await client.post("/api/v1/entries", json={**ENTRY, "entry_password": password})).json()["id"]

        missing = await client.put(f"/api/v1/entries/{entry_id}", json={"content": "Yeni içerik burada"})
        assert missing.status_code == 422
        assert missing.json()["detail"]["field"] == "password"

        response = await client.put(
            f"/api/v1/entries/{entry_id}", json={"content": "Yeni içerik burada", "entry_password": password}
        )
        assert response.status_code == 200
        assert response.json()["is_encrypted"] is True
        assert response.json()["word_count"] == 3

        opened = await client.get(f"/api/v1/entries/{entry_id}", headers={"X-Entry-Password": quote(password)})
        assert opened.json()["content"] == "Yeni içerik burada"

    @pytest.mark.asyncio
    async def test_malformed_password_header(self, client):
        entry_id = (await client.post("/api/v1/entries", json=ENTRY)).json()["id"]

        response = await client.get(f"/api/v1/entries/{entry_id}", headers={"X-Entry-Password": "%ff%fe"})

        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "X-Entry-Password"



@pytest.mark.unit
class TestProtectedEntryRoutes:
    @pytest.mark.asyncio
    async def test_mutations_need_bearer_token(self, client, gate):
        await gate.set_password("Güçlü-Parola1")

        response = await client.post("/api/v1/entries", json=ENTRY)
        assert response.status_code == 423

        # Reads stay open
        assert (await client.get("/api/v1/entries")).status_code == 200

        token = (await client.post("/api/v1/auth/unlock", json={"password": "Güçlü-Parola1"})).json()["access_token"]
        response = await client.post("/api/v1/entries", json=ENTRY, headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_invalid_token(self, client, gate):
        await gate.set_password("Güçlü-Parola1")

        response = await client.post(
            "/api/v1/entries", json=ENTRY, headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 423

    @pytest.mark.asyncio
    async def test_lock_revokes_bearer_token(self, client, gate):
        await gate.set_password("Güçlü-Parola1")
        token = (await client.post("/api/v1/auth/unlock", json={"password": "Güçlü-Parola1"})).json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}
        assert (await client.post("/api/v1/entries", json=ENTRY, headers=headers)).status_code == 201

        assert (await client.post("/api/v1/auth/lock")).json()["locked"] is True

        response = await client.post("/api/v1/entries", json=ENTRY, headers=headers)
        assert response.status_code == 423

    @pytest.mark.asyncio
    async def test_password_change_revokes_bearer_token(self, client, gate):
        await gate.set_password("Güçlü-Parola1")
        token = (await client.post("/api/v1/auth/unlock", json={"password": "Güçlü-Parola1"})).json()["access_token"]

        changed = await client.post(
            "/api/v1/auth/password", json={"password": "Yeni-Parola2!", "current_password": "Güçlü-Parola1"}
        )
        assert changed.status_code == 200

        response = await client.post("/api/v1/entries", json=ENTRY, headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 423

        fresh = (await client.post("/api/v1/auth/unlock", json={"password": "Yeni-Parola2!"})).json()["access_token"]
        response = await client.post("/api/v1/entries", json=ENTRY, headers={"Authorization": f"Bearer {fresh}"})
        assert response.status_code == 201


@pytest.mark.unit
class TestTagStatsAndSyncRoutes:
    @pytest.mark.asyncio
    async def test_tags(self, client):
        await client.post("/api/v1/entries", json={**ENTRY, "tags": ["aile"]})

        response = await client.post("/api/v1/tags", json={"name": "aile", "color": "#00ff00"})
        assert response.status_code == 201
        tag_id = response.json()["id"]

        duplicate = await client.post("/api/v1/tags", json={"name": "aile"})
        assert duplicate.status_code == 422

        tags = (await client.get("/api/v1/tags")).json()
        assert [(t["name"], t["usage_count"]) for t in tags] == [("aile", 1)]

        assert (await client.delete(f"/api/v1/tags/{tag_id}")).status_code == 204
        assert (await client.delete(f"/api/v1/tags/{tag_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_stats(self, client):
        await client.post("/api/v1/entries", json=ENTRY)

        data = (await client.get("/api/v1/stats")).json()

        assert data["total_entries"] == 1
        assert data["total_words"] == 7
        assert data["first_entry_date"] == "2024-01-15"

    @pytest.mark.asyncio
    async def test_sync_without_remote(self, client):
        response = await client.post("/api/v1/sync")

        assert response.status_code == 200
        assert response.json()["status"] == "unavailable"

    @pytest.mark.asyncio
    async def test_sync_pushes_to_remote(self, client, local_adapter, remote_adapter, fake_supabase):
        app.dependency_overrides[get_sync_service] = lambda: SyncService(local_adapter, remote_adapter)
        await client.post("/api/v1/entries", json=ENTRY)

        response = await client.post("/api/v1/sync")

        assert response.json()["pushed"] == 1
        assert len(fake_supabase.tables["diary_entries"]) == 1

    @pytest.mark.asyncio
    async def test_backup_round_trip(self, client):
        await client.post("/api/v1/entries", json=ENTRY)
        document = (await client.get("/api/v1/backup")).json()

        response = await client.post("/api/v1/backup/restore", json=document)

        assert response.json()["restored_entries"] == 1
        assert (await client.get("/api/v1/entries")).json()["total"] == 2
