"""
Tests for admin endpoints: NFC link provisioning, templates and users.

These tests verify:
  - Batch generation creates `count` unbound, claimable links (1-1000)
  - Prefixed slugs follow "<prefix>-<8 characters>"
  - Bad counts, prefixes and templates fail without creating anything
  - A batch that can't find enough unique slugs persists nothing
  - Admins can list, toggle and delete links, and manage users
  - Members are refused on every admin endpoint (403)
"""

import re
import uuid

import pytest

from cardfolio.exceptions import GenerationExhaustedError, SlugConflictError
from cardfolio.models.public_link import PublicLink
from cardfolio.repositories.links import LinkRepository
from cardfolio.services import link_service


# ---------------------------------------------------------------------------
# Batch Generation Tests
# ---------------------------------------------------------------------------

class TestGenerateLinks:
    """Tests for POST /admin/generate-links."""

    async def test_generate_with_prefix(self, admin_client):
        response = await admin_client.post(
            "/admin/generate-links", json={"count": 10, "prefix": "conf"}
        )
        assert response.status_code == 201
        data = response.json()
        assert data["count"] == 10
        assert len(set(data["slugs"])) == 10
        for slug in data["slugs"]:
            assert re.fullmatch(r"conf-[A-Za-z0-9]{8}", slug)
        for link in data["links"]:
            assert link["business_card_id"] is None
            assert link["is_pre_generated"] is True
            assert link["is_claimed"] is False
            assert link["is_active"] is True
            assert link["view_count"] == 0
        assert data["claim_urls"][0].endswith(f"/nfc/{data['slugs'][0]}")

    async def test_generate_without_prefix(self, admin_client):
        response = await admin_client.post("/admin/generate-links", json={"count": 3})
        assert response.status_code == 201
        for slug in response.json()["slugs"]:
            assert re.fullmatch(r"[A-Za-z0-9]{10}", slug)

    @pytest.mark.parametrize("count", [0, -1, 1001])
    async def test_count_out_of_range(self, admin_client, count):
        response = await admin_client.post(
            "/admin/generate-links", json={"count": count}
        )
        assert response.status_code == 400
        assert response.json()["error_type"] == "invalid_argument"

        listed = await admin_client.get("/admin/public-links")
        assert listed.json() == []

    async def test_bad_prefix(self, admin_client):
        response = await admin_client.post(
            "/admin/generate-links", json={"count": 1, "prefix": "no spaces"}
        )
        assert response.status_code == 400

    async def test_unknown_template(self, admin_client):
        response = await admin_client.post(
            "/admin/generate-links",
            json={"count": 5, "template_id": str(uuid.uuid4())},
        )
        assert response.status_code == 404

        listed = await admin_client.get("/admin/public-links")
        assert listed.json() == []

    async def test_template_recorded_on_links(self, admin_client):
        template = (await admin_client.post(
            "/admin/template-cards", json={"company": "Acme"}
        )).json()

        response = await admin_client.post(
            "/admin/generate-links",
            json={"count": 2, "template_id": template["id"]},
        )
        assert all(link["template_id"] == template["id"] for link in response.json()["links"])

    async def test_members_forbidden(self, authenticated_client):
        response = await authenticated_client.post(
            "/admin/generate-links", json={"count": 1}
        )
        assert response.status_code == 403


class TestBatchAtomicity:
    """A batch is written completely or not at all."""

    async def test_exhausted_batch_persists_nothing(self, db_session):
        await link_service.batch_generate(
            db_session, 1, prefix="conf", token_generator=lambda length: "a" * length
        )

        with pytest.raises(GenerationExhaustedError):
            await link_service.batch_generate(
                db_session, 3, prefix="conf", token_generator=lambda length: "a" * length
            )

        links = await LinkRepository(db_session).list_all()
        assert [link.unique_slug for link in links] == ["conf-aaaaaaaa"]

    async def test_duplicates_within_batch_count_as_collisions(self, db_session):
        """A generator that repeats itself can't fill a batch of two."""
        with pytest.raises(GenerationExhaustedError):
            await link_service.batch_generate(
                db_session, 2, token_generator=lambda length: "z" * length
            )

        assert await LinkRepository(db_session).list_all() == []

    async def test_concurrent_insert_conflict_has_short_detail(self, db_session):
        """A batch insert that collides at the unique index reports one short message."""
        links = LinkRepository(db_session)
        await links.add(PublicLink(unique_slug="taken-slug", is_pre_generated=True))

        batch = [
            PublicLink(unique_slug=f"fresh-{i:04d}", is_pre_generated=True)
            for i in range(200)
        ]
        batch.append(PublicLink(unique_slug="taken-slug", is_pre_generated=True))

        with pytest.raises(SlugConflictError) as exc_info:
            await links.add_all(batch)

        assert exc_info.value.detail == "A slug in this batch of 201 was taken concurrently"
        assert "fresh-0000" not in exc_info.value.detail


# ---------------------------------------------------------------------------
# Link Administration Tests
# ---------------------------------------------------------------------------

class TestLinkAdministration:
    """Tests for /admin/unassigned-links and /admin/public-links."""

    async def test_unassigned_excludes_claimed_and_inactive(
        self, admin_client, authenticated_client
    ):
        batch = (await admin_client.post(
            "/admin/generate-links", json={"count": 3, "prefix": "pool"}
        )).json()
        claimed, deactivated, remaining = batch["links"]

        await authenticated_client.post(f"/nfc-links/{claimed['unique_slug']}/claim")
        await admin_client.patch(
            f"/admin/public-links/{deactivated['id']}", json={"is_active": False}
        )

        response = await admin_client.get("/admin/unassigned-links")
        assert response.status_code == 200
        assert [link["id"] for link in response.json()] == [remaining["id"]]

    async def test_reactivate_link(self, admin_client):
        link = (await admin_client.post(
            "/admin/generate-links", json={"count": 1}
        )).json()["links"][0]

        await admin_client.patch(f"/admin/public-links/{link['id']}", json={"is_active": False})
        response = await admin_client.patch(
            f"/admin/public-links/{link['id']}", json={"is_active": True}
        )
        assert response.json()["is_active"] is True

        unassigned = await admin_client.get("/admin/unassigned-links")
        assert len(unassigned.json()) == 1

    async def test_delete_any_link(self, admin_client, authenticated_client):
        card = (await authenticated_client.post(
            "/business-cards", json={"first_name": "Alice"}
        )).json()
        link = (await authenticated_client.post(
            "/public-links", json={"business_card_id": card["id"]}
        )).json()

        response = await admin_client.delete(f"/admin/public-links/{link['id']}")
        assert response.status_code == 204

        response = await admin_client.delete(f"/admin/public-links/{link['id']}")
        assert response.status_code == 404

    async def test_toggle_unknown_link(self, admin_client):
        response = await admin_client.patch(
            f"/admin/public-links/{uuid.uuid4()}", json={"is_active": False}
        )
        assert response.status_code == 404

    async def test_list_all_cards(self, admin_client, authenticated_client):
        await authenticated_client.post("/business-cards", json={"first_name": "Alice"})
        await admin_client.post("/admin/template-cards", json={"company": "Acme"})

        response = await admin_client.get("/admin/business-cards")
        assert response.status_code == 200
        assert len(response.json()) == 2

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/admin/unassigned-links"),
            ("get", "/admin/public-links"),
            ("get", "/admin/template-cards"),
            ("get", "/admin/business-cards"),
            ("get", "/admin/users"),
        ],
    )
    async def test_members_forbidden(self, authenticated_client, method, path):
        response = await getattr(authenticated_client, method)(path)
        assert response.status_code == 403

    async def test_anonymous_unauthorized(self, client):
        response = await client.get("/admin/public-links")
        assert response.status_code == 401


# ---------------------------------------------------------------------------
# User Administration Tests
# ---------------------------------------------------------------------------

class TestUserAdministration:
    """Tests for /admin/users."""

    async def test_list_users(self, admin_client, authenticated_client):
        response = await admin_client.get("/admin/users")
        assert response.status_code == 200
        assert {u["username"] for u in response.json()} == {"admin", "alice"}

    async def test_promote_user(self, admin_client, authenticated_client):
        me = (await authenticated_client.get("/auth/me")).json()

        response = await admin_client.patch(f"/admin/users/{me['id']}", json={"role": "admin"})
        assert response.status_code == 200
        assert response.json()["role"] == "admin"

        # Alice's existing token now carries admin rights
        response = await authenticated_client.get("/admin/users")
        assert response.status_code == 200

    async def test_admin_cannot_demote_self(self, admin_client):
        me = (await admin_client.get("/auth/me")).json()

        response = await admin_client.patch(f"/admin/users/{me['id']}", json={"role": "user"})
        assert response.status_code == 400

    async def test_delete_user_cascades(self, admin_client, authenticated_client, client):
        me = (await authenticated_client.get("/auth/me")).json()
        card = (await authenticated_client.post(
            "/business-cards", json={"first_name": "Alice"}
        )).json()
        await authenticated_client.post(
            "/public-links",
            json={"business_card_id": card["id"], "unique_slug": "alice-gone"},
        )

        response = await admin_client.delete(f"/admin/users/{me['id']}")
        assert response.status_code == 204

        assert (await client.get("/public-links/alice-gone")).status_code == 404
        assert (await admin_client.get("/admin/business-cards")).json() == []
        # Alice's token no longer resolves to a user
        assert (await authenticated_client.get("/auth/me")).status_code == 401

    async def test_admin_cannot_delete_self(self, admin_client):
        me = (await admin_client.get("/auth/me")).json()

        response = await admin_client.delete(f"/admin/users/{me['id']}")
        assert response.status_code == 400

    async def test_delete_unknown_user(self, admin_client):
        response = await admin_client.delete(f"/admin/users/{uuid.uuid4()}")
        assert response.status_code == 404
