"""HTTP-level tests: auth, CSRF, privacy 404s and export downloads."""

from unittest.mock import patch

import pytest

from app.db.enums import ConnectCardStatus, Role
from app.db.models import ConnectCard, PrayerRequest


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers


@pytest.mark.asyncio
async def test_requires_authentication(client):
    response = await client.get("/prayer-requests")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_mutation_requires_csrf_header(client_for, staff_user):
    async with client_for(staff_user, csrf=False) as c:
        response = await c.post("/prayer-requests", json={"request": "Pray for rain"})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_prayer_request_auto_detects_privacy(client_for, staff_user):
    async with client_for(staff_user) as c:
        response = await c.post(
            "/prayer-requests",
            json={"request": "Struggling with addiction, please pray"},
        )

    assert response.status_code == 201
    body = response.json()
    assert body["is_private"] is True
    assert body["status"] == "PENDING"
    assert body["location_id"] == str(staff_user.default_location_id)


@pytest.mark.asyncio
async def test_hidden_private_request_is_404(db, test_org, main_campus, client_for, make_user, staff_user):
    other = make_user(Role.STAFF, location=main_campus)
    hidden = PrayerRequest(
        organization_id=test_org.id,
        location_id=main_campus.id,
        request="Confidential",
        is_private=True,
        assigned_to_id=other.id,
    )
    db.add(hidden)
    db.commit()

    async with client_for(staff_user) as c:
        get_response = await c.get(f"/prayer-requests/{hidden.id}")
        assign_response = await c.post(
            f"/prayer-requests/{hidden.id}/assign",
            json={"assigned_to_id": str(staff_user.id)},
        )
        list_response = await c.get("/prayer-requests")

    assert get_response.status_code == 404
    assert assign_response.status_code == 404
    assert list_response.json()["total"] == 0


@pytest.mark.asyncio
async def test_owner_can_read_private_request(db, test_org, main_campus, client_for, owner_user):
    private = PrayerRequest(
        organization_id=test_org.id,
        location_id=main_campus.id,
        request="Confidential",
        is_private=True,
    )
    db.add(private)
    db.commit()

    async with client_for(owner_user) as c:
        response = await c.get(f"/prayer-requests/{private.id}")

    assert response.status_code == 200
    assert response.json()["request"] == "Confidential"


@pytest.mark.asyncio
async def test_active_batch_requires_default_location(client_for, make_user):
    floating = make_user(Role.STAFF)

    async with client_for(floating) as c:
        response = await c.post("/connect-cards/batches/active")

    assert response.status_code == 400
    assert response.json()["detail"] == "User must have a default location to upload cards"


@pytest.mark.asyncio
async def test_active_batch_is_reused(client_for, staff_user):
    async with client_for(staff_user) as c:
        first = await c.post("/connect-cards/batches/active")
        second = await c.post("/connect-cards/batches/active")

    assert first.status_code == 200
    assert first.json()["id"] == second.json()["id"]
    assert first.json()["name"].startswith("Main Campus - ")


@pytest.mark.asyncio
async def test_staff_cannot_export(client_for, staff_user):
    async with client_for(staff_user) as c:
        response = await c.get("/exports/formats")

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_export_and_download(db, test_org, main_campus, client_for, owner_user):
    db.add(
        ConnectCard(
            organization_id=test_org.id,
            location_id=main_campus.id,
            name="Jane Doe",
            email="jane@test.com",
            status=ConnectCardStatus.REVIEWED.value,
        )
    )
    db.commit()

    async with client_for(owner_user) as c:
        with patch("app.services.export_service.storage_service.put_object") as mock_put:
            created = await c.post("/exports", json={"format": "GENERIC_CSV"})
        body = mock_put.call_args.args[1]

        with patch(
            "app.services.export_service.storage_service.get_object_bytes",
            return_value=body,
        ):
            download = await c.get(f"/exports/{created.json()['export_id']}/download")
        history = await c.get("/exports")

    assert created.status_code == 201
    assert created.json()["record_count"] == 1
    assert download.status_code == 200
    assert download.headers["content-type"].startswith("text/csv")
    assert download.headers["content-disposition"] == (
        f'attachment; filename="{created.json()["file_name"]}"'
    )
    assert "Jane Doe" in download.text
    assert len(history.json()) == 1


@pytest.mark.asyncio
async def test_export_with_no_matches_is_400(client_for, owner_user):
    async with client_for(owner_user) as c:
        response = await c.post("/exports", json={"format": "BREEZE_CSV"})

    assert response.status_code == 400
    assert response.json()["detail"] == "No records match your filter criteria"


@pytest.mark.asyncio
async def test_staff_cannot_change_privacy_or_delete(db, test_org, main_campus, client_for, staff_user):
    mine = PrayerRequest(
        organization_id=test_org.id,
        location_id=main_campus.id,
        request="Private matter",
        is_private=True,
        assigned_to_id=staff_user.id,
    )
    db.add(mine)
    db.commit()

    async with client_for(staff_user) as c:
        privacy = await c.post(f"/prayer-requests/{mine.id}/privacy", json={"is_private": False})
        deleted = await c.delete(f"/prayer-requests/{mine.id}")
        still_there = await c.get(f"/prayer-requests/{mine.id}")

    assert privacy.status_code == 403
    assert deleted.status_code == 403
    assert still_there.json()["is_private"] is True


@pytest.mark.asyncio
async def test_placeholder_image_resolves_to_static_path(client_for, staff_user):
    async with client_for(staff_user) as c:
        created = await c.post("/connect-cards", json={"image_key": "placeholder:card-1"})
        listed = await c.get("/connect-cards")

    assert created.status_code == 201
    assert created.json()["image_url"] == "/static/placeholders/card-1.jpg"
    assert created.json()["image_key"] == "placeholder:card-1"
    assert listed.json()[0]["image_url"] == "/static/placeholders/card-1.jpg"


@pytest.mark.asyncio
async def test_delete_connect_card(client_for, staff_user):
    async with client_for(staff_user) as c:
        created = await c.post("/connect-cards", json={"image_key": "org/cards/fake.jpg"})
        card_id = created.json()["id"]
        with patch(
            "app.services.connect_card_service.storage_service.delete_object", return_value=True
        ) as mock_delete:
            deleted = await c.delete(f"/connect-cards/{card_id}")
        missing = await c.get(f"/connect-cards/{card_id}")

    assert deleted.status_code == 204
    assert missing.status_code == 404
    mock_delete.assert_called_once_with("org/cards/fake.jpg")
