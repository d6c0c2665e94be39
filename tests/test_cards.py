"""
Tests for business card endpoints.

These tests verify:
  - Signed-in users own the cards they create; anonymous callers need a
    device id and prove it with the X-Device-Id header
  - Updates merge only the fields sent, reject unknown fields, and refresh
    updated_at
  - Auto-save creates on first call (201) and updates afterwards (200)
  - A signed-in user adopts the anonymous card saved on their device
  - Deleting a card deletes every link bound to it
"""

import uuid

from cardfolio.models.business_card import BusinessCard


# ---------------------------------------------------------------------------
# Create and Read Tests
# ---------------------------------------------------------------------------

class TestCreateCard:
    """Tests for POST /business-cards."""

    async def test_create_owned_card(self, authenticated_client):
        response = await authenticated_client.post(
            "/business-cards",
            json={
                "first_name": "Alice",
                "last_name": "Smith",
                "job_title": "Engineer",
                "company": "Acme",
                "email": "alice@acme.example.com",
                "social_media": [
                    {"platform": "GitHub", "url": "https://github.com/alice"}
                ],
            },
        )
        assert response.status_code == 201
        data = response.json()
        me = (await authenticated_client.get("/auth/me")).json()
        assert data["owner_user_id"] == me["id"]
        assert data["device_id"] is None
        assert data["template"] == "Classic"
        assert data["social_media"][0]["platform"] == "GitHub"
        assert data["is_template"] is False

    async def test_anonymous_card_needs_device_id(self, client):
        response = await client.post("/business-cards", json={"first_name": "Anon"})
        assert response.status_code == 400

    async def test_anonymous_card_with_device_id(self, client):
        response = await client.post(
            "/business-cards", json={"first_name": "Anon", "device_id": "device-abc"}
        )
        assert response.status_code == 201
        assert response.json()["owner_user_id"] is None
        assert response.json()["device_id"] == "device-abc"

    async def test_unknown_field_rejected(self, authenticated_client):
        response = await authenticated_client.post(
            "/business-cards", json={"first_name": "Alice", "nickname": "Al"}
        )
        assert response.status_code == 422

    async def test_unknown_template_rejected(self, authenticated_client):
        response = await authenticated_client.post(
            "/business-cards", json={"template": "Baroque"}
        )
        assert response.status_code == 422

    async def test_bad_social_platform_rejected(self, authenticated_client):
        response = await authenticated_client.post(
            "/business-cards",
            json={"social_media": [{"platform": "MySpace", "url": "https://myspace.com/a"}]},
        )
        assert response.status_code == 422

    async def test_list_my_cards(self, authenticated_client, second_authenticated_client):
        await authenticated_client.post("/business-cards", json={"first_name": "One"})
        await authenticated_client.post("/business-cards", json={"first_name": "Two"})
        await second_authenticated_client.post("/business-cards", json={"first_name": "Bob"})

        response = await authenticated_client.get("/business-cards/mine")
        assert response.status_code == 200
        assert [c["first_name"] for c in response.json()] == ["One", "Two"]


class TestCardAccess:
    """Who may read, edit and delete a card."""

    async def test_owner_reads_card(self, authenticated_client):
        card = (await authenticated_client.post(
            "/business-cards", json={"first_name": "Alice"}
        )).json()

        response = await authenticated_client.get(f"/business-cards/{card['id']}")
        assert response.status_code == 200
        assert response.json()["first_name"] == "Alice"

    async def test_other_user_forbidden(self, authenticated_client, second_authenticated_client):
        card = (await authenticated_client.post(
            "/business-cards", json={"first_name": "Alice"}
        )).json()

        response = await second_authenticated_client.get(f"/business-cards/{card['id']}")
        assert response.status_code == 403

        response = await second_authenticated_client.put(
            f"/business-cards/{card['id']}", json={"first_name": "Mallory"}
        )
        assert response.status_code == 403

    async def test_admin_reads_any_card(self, authenticated_client, admin_client):
        card = (await authenticated_client.post(
            "/business-cards", json={"first_name": "Alice"}
        )).json()

        response = await admin_client.get(f"/business-cards/{card['id']}")
        assert response.status_code == 200

    async def test_device_header_grants_access_to_anonymous_card(self, client):
        card = (await client.post(
            "/business-cards", json={"first_name": "Anon", "device_id": "device-abc"}
        )).json()

        response = await client.get(f"/business-cards/{card['id']}")
        assert response.status_code == 403

        response = await client.get(
            f"/business-cards/{card['id']}", headers={"X-Device-Id": "device-abc"}
        )
        assert response.status_code == 200

        response = await client.get(
            f"/business-cards/{card['id']}", headers={"X-Device-Id": "someone-else"}
        )
        assert response.status_code == 403

    async def test_device_header_ignored_once_owned(self, authenticated_client, client):
        """An owned card can't be reached through its device id."""
        await authenticated_client.post(
            "/business-cards/auto-save",
            json={"device_id": "device-abc", "first_name": "Alice"},
        )
        card = (await authenticated_client.get("/business-cards/mine")).json()[0]

        response = await client.get(
            f"/business-cards/{card['id']}", headers={"X-Device-Id": "device-abc"}
        )
        assert response.status_code == 403

    async def test_missing_card(self, authenticated_client):
        response = await authenticated_client.get(f"/business-cards/{uuid.uuid4()}")
        assert response.status_code == 404

    async def test_lookup_by_device_id(self, client):
        await client.post(
            "/business-cards", json={"first_name": "Anon", "device_id": "device-xyz"}
        )

        response = await client.get("/business-cards", params={"device_id": "device-xyz"})
        assert response.status_code == 200
        assert response.json()["first_name"] == "Anon"

        response = await client.get("/business-cards", params={"device_id": "nothing-here"})
        assert response.status_code == 200
        assert response.json() is None


# ---------------------------------------------------------------------------
# Update Tests
# ---------------------------------------------------------------------------

class TestUpdateCard:
    """Tests for PUT /business-cards/{card_id}."""

    async def test_partial_update(self, authenticated_client):
        card = (await authenticated_client.post(
            "/business-cards",
            json={"first_name": "Alice", "company": "Acme", "phone": "555-0100"},
        )).json()

        response = await authenticated_client.put(
            f"/business-cards/{card['id']}",
            json={"company": "Globex", "phone": None, "template": "Vibrant"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["first_name"] == "Alice"
        assert data["company"] == "Globex"
        assert data["phone"] is None
        assert data["template"] == "Vibrant"
        assert data["updated_at"] >= card["updated_at"]

    async def test_identity_fields_not_patchable(self, authenticated_client):
        card = (await authenticated_client.post("/business-cards", json={})).json()

        response = await authenticated_client.put(
            f"/business-cards/{card['id']}", json={"owner_user_id": str(uuid.uuid4())}
        )
        assert response.status_code == 422

        response = await authenticated_client.put(
            f"/business-cards/{card['id']}", json={"is_template": True}
        )
        assert response.status_code == 422

    async def test_empty_patch_rejected(self, authenticated_client):
        card = (await authenticated_client.post("/business-cards", json={})).json()

        response = await authenticated_client.put(f"/business-cards/{card['id']}", json={})
        assert response.status_code == 400

    async def test_bio_length_limit(self, authenticated_client):
        card = (await authenticated_client.post("/business-cards", json={})).json()

        response = await authenticated_client.put(
            f"/business-cards/{card['id']}", json={"bio": "x" * 201}
        )
        assert response.status_code == 422

    async def test_update_social_media(self, authenticated_client):
        card = (await authenticated_client.post(
            "/business-cards",
            json={"social_media": [{"platform": "Twitter", "url": "https://twitter.com/a"}]},
        )).json()

        response = await authenticated_client.put(
            f"/business-cards/{card['id']}", json={"social_media": []}
        )
        assert response.json()["social_media"] == []


# ---------------------------------------------------------------------------
# Auto-save Tests
# ---------------------------------------------------------------------------

class TestAutoSave:
    """Tests for POST /business-cards/auto-save."""

    async def test_create_then_update(self, client):
        first = await client.post(
            "/business-cards/auto-save",
            json={"device_id": "device-1", "first_name": "Dra"},
        )
        assert first.status_code == 201

        second = await client.post(
            "/business-cards/auto-save",
            json={"device_id": "device-1", "last_name": "Draft"},
        )
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["first_name"] == "Dra"
        assert second.json()["last_name"] == "Draft"

    async def test_signed_in_user_adopts_device_card(self, client, authenticated_client):
        anonymous = (await client.post(
            "/business-cards/auto-save",
            json={"device_id": "device-2", "first_name": "Alice"},
        )).json()
        assert anonymous["owner_user_id"] is None

        response = await authenticated_client.post(
            "/business-cards/auto-save",
            json={"device_id": "device-2", "company": "Acme"},
        )
        assert response.status_code == 200
        adopted = response.json()
        me = (await authenticated_client.get("/auth/me")).json()
        assert adopted["id"] == anonymous["id"]
        assert adopted["owner_user_id"] == me["id"]

    async def test_cannot_save_over_another_users_card(
        self, authenticated_client, second_authenticated_client
    ):
        await authenticated_client.post(
            "/business-cards/auto-save",
            json={"device_id": "device-3", "first_name": "Alice"},
        )

        response = await second_authenticated_client.post(
            "/business-cards/auto-save",
            json={"device_id": "device-3", "first_name": "Bob"},
        )
        assert response.status_code == 403

    async def test_device_id_required(self, client):
        response = await client.post("/business-cards/auto-save", json={"first_name": "A"})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Delete Tests
# ---------------------------------------------------------------------------

class TestDeleteCard:
    """Tests for DELETE /business-cards/{card_id}."""

    async def test_delete_removes_bound_links(self, authenticated_client, client, db_session):
        card = (await authenticated_client.post(
            "/business-cards", json={"first_name": "Alice"}
        )).json()
        for slug in ("alice-one", "alice-two"):
            await authenticated_client.post(
                "/public-links",
                json={"business_card_id": card["id"], "unique_slug": slug},
            )

        response = await authenticated_client.delete(f"/business-cards/{card['id']}")
        assert response.status_code == 204

        for slug in ("alice-one", "alice-two"):
            assert (await client.get(f"/public-links/{slug}")).status_code == 404
        assert await db_session.get(BusinessCard, uuid.UUID(card["id"])) is None

    async def test_delete_claimed_card_removes_its_nfc_link(
        self, admin_client, authenticated_client, client
    ):
        slug = (await admin_client.post(
            "/admin/generate-links", json={"count": 1}
        )).json()["slugs"][0]
        claimed = (await authenticated_client.post(f"/nfc-links/{slug}/claim")).json()

        await authenticated_client.delete(f"/business-cards/{claimed['business_card_id']}")

        assert (await client.get(f"/nfc-links/{slug}")).status_code == 404

    async def test_other_user_cannot_delete(
        self, authenticated_client, second_authenticated_client
    ):
        card = (await authenticated_client.post("/business-cards", json={})).json()

        response = await second_authenticated_client.delete(f"/business-cards/{card['id']}")
        assert response.status_code == 403

    async def test_anonymous_delete_with_device_header(self, client):
        card = (await client.post(
            "/business-cards", json={"device_id": "device-del"}
        )).json()

        response = await client.delete(
            f"/business-cards/{card['id']}", headers={"X-Device-Id": "device-del"}
        )
        assert response.status_code == 204
