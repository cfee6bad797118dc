# =============================================================================
# tests/test_routers.py - API Endpoint Tests
# =============================================================================
# This module contains tests for:
# - Health checks
# - Authentication (bearer tokens, admin-only endpoints)
# - Event, category and hero endpoints
# - Section editor saves (JSON and multipart) and their banners
# - Public pages, blog, company profile and image library endpoints
# - Error response shape
# =============================================================================

import json
import time

import pytest
from jose import jwt

from tests.conftest import ADMIN_ID, PUBLIC_URL_BASE, FakeAPIError

PUBLISHED = "2025-01-01T00:00:00+00:00"


def make_token(
    subject: str = ADMIN_ID,
    secret: str = "test-jwt-secret",
    expires_in: int = 3600,
    **claims,
) -> str:
    payload = {
        "sub": subject,
        "aud": "authenticated",
        "role": "authenticated",
        "email": "admin@example.com",
        "exp": int(time.time()) + expires_in,
        **claims,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def published_event(fake_db):
    return fake_db.seed("events", [{
        "title": "GITEX Global", "slug": "gitex-global", "is_active": True,
        "published_at": PUBLISHED, "start_date": "2025-10-13", "end_date": "2025-10-17",
    }])[0]


@pytest.fixture
def draft_event(fake_db):
    return fake_db.seed("events", [{
        "title": "Draft Expo", "slug": "draft-expo", "is_active": True, "published_at": None,
    }])[0]


# =============================================================================
# Health
# =============================================================================

class TestHealth:

    def test_health(self, anonymous_client):
        response = anonymous_client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready(self, anonymous_client, fake_db):
        from app.routers.health import REQUIRED_BUCKETS

        for name in REQUIRED_BUCKETS:
            fake_db.storage.buckets[name] = {}

        body = anonymous_client.get("/api/v1/health/ready").json()

        assert body["status"] == "ready"
        assert body["checks"] == {"database": "healthy", "storage": "healthy", "missing_buckets": []}

    def test_missing_bucket_degrades(self, anonymous_client, fake_db):
        fake_db.storage.buckets["event-images"] = {}

        body = anonymous_client.get("/api/v1/health/ready").json()

        assert body["status"] == "degraded"
        assert "company-profile-documents" in body["checks"]["missing_buckets"]
        assert "event-images" not in body["checks"]["missing_buckets"]

    def test_degraded(self, anonymous_client, fake_db):
        from tests.conftest import FakeAPIError

        fake_db.fail("events", "select", FakeAPIError("connection refused"))

        body = anonymous_client.get("/api/v1/health/ready").json()

        assert body["status"] == "degraded"
        assert body["checks"]["database"].startswith("unhealthy")

    def test_root(self, anonymous_client):
        assert anonymous_client.get("/").status_code == 200


# =============================================================================
# Authentication
# =============================================================================

class TestAuth:

    def test_admin_endpoint_needs_token(self, anonymous_client):
        response = anonymous_client.get("/api/admin/sections")
        assert response.status_code in (401, 403)

    def test_me_with_valid_token(self, anonymous_client):
        response = anonymous_client.get("/api/v1/auth/me", headers=bearer(make_token()))

        assert response.status_code == 200
        assert response.json()["id"] == ADMIN_ID
        assert response.json()["email"] == "admin@example.com"

    def test_me_uses_admin_profile(self, anonymous_client, fake_db):
        fake_db.seed("admin_users", [{"email": "admin@example.com", "full_name": "Site Admin"}])

        response = anonymous_client.get("/api/v1/auth/me", headers=bearer(make_token()))

        assert response.json()["full_name"] == "Site Admin"
        assert response.json()["id"] == ADMIN_ID

    def test_verify(self, anonymous_client):
        body = anonymous_client.get("/api/v1/auth/verify", headers=bearer(make_token())).json()
        assert body == {"valid": True, "user_id": ADMIN_ID, "email": "admin@example.com"}

    def test_expired_token(self, anonymous_client):
        response = anonymous_client.get("/api/v1/auth/verify", headers=bearer(make_token(expires_in=-60)))

        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    def test_wrong_secret(self, anonymous_client):
        token = make_token(secret="someone-elses-secret")
        assert anonymous_client.get("/api/v1/auth/verify", headers=bearer(token)).status_code == 401

    def test_non_uuid_subject(self, anonymous_client):
        token = make_token(subject="not-a-uuid")
        response = anonymous_client.get("/api/v1/auth/verify", headers=bearer(token))

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token: malformed user ID"

    def test_empty_secret_token_rejected_when_secret_unset(self, anonymous_client, monkeypatch):
        from app.config import settings

        monkeypatch.setattr(settings, "SUPABASE_JWT_SECRET", "")
        token = make_token(secret="")

        response = anonymous_client.get("/api/v1/auth/verify", headers=bearer(token))

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token: signing key not available"

    def test_admin_write_rejects_empty_secret_token(self, anonymous_client, fake_db, monkeypatch):
        from app.config import settings

        monkeypatch.setattr(settings, "SUPABASE_JWT_SECRET", "")
        token = make_token(secret="")

        response = anonymous_client.post(
            "/api/events", json={"title": "Forged"}, headers=bearer(token)
        )

        assert response.status_code == 401
        assert fake_db.rows("events") == []


# =============================================================================
# Events
# =============================================================================

class TestEventEndpoints:

    def test_public_listing(self, anonymous_client, published_event, draft_event):
        body = anonymous_client.get("/api/events").json()

        assert [event["slug"] for event in body["events"]] == ["gitex-global"]
        assert body["total"] == 1

    def test_invalid_sort_order(self, anonymous_client):
        assert anonymous_client.get("/api/events?sort_order=sideways").status_code == 422

    def test_categories_not_treated_as_event_id(self, anonymous_client, fake_db):
        fake_db.seed("event_categories", [{"name": "Technology", "slug": "technology", "display_order": 1}])

        response = anonymous_client.get("/api/events/categories")

        assert response.status_code == 200
        assert [c["slug"] for c in response.json()["categories"]] == ["technology"]

    def test_hero_defaults(self, anonymous_client):
        body = anonymous_client.get("/api/events/hero").json()
        assert body["hero"]["id"] is None

    def test_get_by_slug(self, anonymous_client, published_event):
        body = anonymous_client.get("/api/events/gitex-global").json()

        assert body["event"]["id"] == published_event["id"]
        assert body["event"]["display_date_range"] == "OCT 13 - OCT 17, 2025"
        assert body["related_events"] == []

    def test_admin_flag_ignored_without_token(self, anonymous_client, draft_event):
        response = anonymous_client.get("/api/events/draft-expo?admin=true")
        assert response.status_code == 404

    def test_admin_flag_with_token(self, anonymous_client, draft_event):
        response = anonymous_client.get(
            "/api/events/draft-expo?admin=true", headers=bearer(make_token())
        )
        assert response.status_code == 200
        assert response.json()["event"]["title"] == "Draft Expo"

    def test_not_found_shape(self, anonymous_client, fake_db):
        response = anonymous_client.get("/api/events/no-such-event")

        assert response.status_code == 404
        body = response.json()
        assert body["detail"] == "Event not found"
        assert body["code"] == "NOT_FOUND"
        assert body["details"] == {"resource": "Event", "id": "no-such-event"}

    def test_create_requires_auth(self, anonymous_client):
        response = anonymous_client.post("/api/events", json={"title": "GITEX"})
        assert response.status_code in (401, 403)

    def test_create(self, client, fake_db):
        response = client.post(
            "/api/events",
            json={"title": "Arab Health 2025", "start_date": "2025-01-27", "end_date": "2025-01-30"},
        )

        assert response.status_code == 201
        event = response.json()["event"]
        assert event["slug"] == "arab-health-2025"
        assert event["date_range"] == "JAN 27 - JAN 30, 2025"
        assert event["created_by"] == ADMIN_ID

    def test_create_missing_title(self, client):
        assert client.post("/api/events", json={"venue": "DWTC"}).status_code == 422

    def test_create_conflict_sets_banner(self, client, fake_db):
        from tests.conftest import FakeAPIError

        fake_db.fail("events", "insert", FakeAPIError(
            'duplicate key value violates unique constraint "events_slug_key"', code="23505"))

        response = client.post("/api/events", json={"title": "GITEX"})

        assert response.status_code == 400
        assert response.json()["code"] == "CONFLICT"

        banner = client.get("/api/admin/notifications").json()["notification"]
        assert banner == {
            "type": "error",
            "title": "Create Failed",
            "message": "An event with this URL slug already exists",
        }

    def test_bulk_publish(self, client, fake_db, draft_event):
        response = client.put("/api/events", json={"action": "publish", "event_ids": [draft_event["id"]]})

        assert response.status_code == 200
        assert response.json()["message"] == "1 event(s) updated"
        assert fake_db.rows("events")[0]["published_at"] is not None

    def test_bulk_unknown_action(self, client, draft_event):
        response = client.put("/api/events", json={"action": "explode", "event_ids": [draft_event["id"]]})
        assert response.status_code == 422

    def test_bulk_delete(self, client, fake_db, published_event, draft_event):
        response = client.request(
            "DELETE", "/api/events", json={"event_ids": [published_event["id"], draft_event["id"]]}
        )

        assert response.json()["deleted_count"] == 2
        assert fake_db.rows("events") == []

    def test_update_and_delete(self, client, fake_db, published_event):
        event_id = published_event["id"]

        updated = client.put(f"/api/events/{event_id}", json={"venue": "Expo City"}).json()
        assert updated["event"]["venue"] == "Expo City"

        deleted = client.delete(f"/api/events/{event_id}").json()
        assert deleted["message"] == 'Event "GITEX Global" deleted successfully'

    def test_category_delete_refused(self, client, fake_db):
        category = fake_db.seed("event_categories", [{"name": "Tech", "slug": "tech"}])[0]
        fake_db.seed("events", [{"title": "A", "slug": "a", "category_id": category["id"]}])

        response = client.delete(f"/api/events/categories/{category['id']}")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_event_images(self, client, fake_db, published_event):
        event_id = published_event["id"]

        created = client.post(
            f"/api/events/{event_id}/images",
            json={"filename": "g.png", "file_path": "uploads/g.png"},
        )
        assert created.status_code == 201

        listing = client.get("/api/events/gitex-global/images").json()
        assert listing["total"] == 1
        assert listing["images"]["gallery"][0]["filename"] == "g.png"

    def test_reorder_images_shows_banner(self, client, fake_db, published_event):
        image = fake_db.seed("event_images", [{"event_id": published_event["id"], "display_order": 1}])[0]

        response = client.put(
            f"/api/events/{published_event['id']}/images",
            json={"images": [{"id": image["id"], "display_order": 4}, {"id": "unknown", "display_order": 5}]},
        )

        assert response.status_code == 200
        assert response.json()["updated_count"] == 1
        banner = client.get("/api/admin/notifications").json()["notification"]
        assert banner["type"] == "success"

    def test_update_lookup_failure_gets_friendly_banner(self, client, fake_db, published_event):
        fake_db.fail("events", "select", FakeAPIError("permission denied for table events"))

        response = client.put(f"/api/events/{published_event['id']}", json={"venue": "DWTC"})

        assert response.status_code == 500
        assert response.json()["code"] == "DATABASE_ERROR"
        assert "Permission denied. Please check your authentication." in response.json()["detail"]
        banner = client.get("/api/admin/notifications").json()["notification"]
        assert banner["type"] == "error"
        assert banner["message"] == "Failed to fetch event: Permission denied. Please check your authentication."

    def test_unexpected_error_in_write_still_banners(self, client, fake_db, published_event, monkeypatch):
        from core.services.event_service import EventService

        def broken(*args, **kwargs):
            raise RuntimeError("permission denied for relation events")

        monkeypatch.setattr(EventService, "delete_event", staticmethod(broken))

        response = client.delete(f"/api/events/{published_event['id']}")

        assert response.status_code == 500
        assert response.json()["code"] == "DATABASE_ERROR"
        banner = client.get("/api/admin/notifications").json()["notification"]
        assert banner == {
            "type": "error",
            "title": "Delete Failed",
            "message": "Permission denied. Please check your authentication.",
        }

    def test_category_blank_slug_rederived(self, client, fake_db):
        category = fake_db.seed("event_categories", [{"name": "Big Tech", "slug": "big-tech"}])[0]

        blank = client.put(f"/api/events/categories/{category['id']}", json={"slug": "   "})
        typed = client.put(f"/api/events/categories/{category['id']}", json={"slug": "Big Tech Events"})

        assert blank.json()["category"]["slug"] == "big-tech"
        assert typed.json()["category"]["slug"] == "big-tech-events"
        assert fake_db.rows("event_categories")[0]["slug"] == "big-tech-events"


# =============================================================================
# Section Editors
# =============================================================================

class TestSectionEndpoints:

    def test_list_sections(self, client):
        sections = client.get("/api/admin/sections").json()["sections"]
        keys = {section["key"] for section in sections}

        assert "conference-solution" in keys
        dedication = next(s for s in sections if s["key"] == "about-dedication")
        assert dedication["has_items"] is True

    def test_unknown_section(self, client):
        response = client.get("/api/admin/sections/pricing-table")

        assert response.status_code == 404
        assert response.json()["code"] == "UNKNOWN_SECTION"

    def test_save_json(self, client, fake_db, notification_center):
        response = client.put(
            "/api/admin/sections/conference-solution",
            json={"main_heading": "Need a stand?"},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Conference solution section saved successfully"
        assert fake_db.rows("conference_solution_sections")[0]["main_heading"] == "Need a stand?"

        current = notification_center.current(ADMIN_ID)
        assert current.title == "Success!"
        assert current.message == "Conference solution section saved successfully!"

    def test_save_multipart_with_image(self, client, fake_db, png_bytes):
        response = client.put(
            "/api/admin/sections/conference-solution",
            data={"data": json.dumps({"main_heading": "With picture"})},
            files={"main_image_url": ("stand.png", png_bytes, "image/png")},
        )

        assert response.status_code == 200
        path = fake_db.rows("conference_solution_sections")[0]["main_image_url"]
        assert path.startswith("conference-solution/")
        assert response.json()["section"]["main_image_url"] == (
            f"{PUBLIC_URL_BASE}/conference-solution-section-images/{path}"
        )

    def test_save_multipart_rejected_file(self, client, fake_db, notification_center):
        response = client.put(
            "/api/admin/sections/conference-solution",
            data={"data": json.dumps({"main_heading": "With picture"})},
            files={"main_image_url": ("brochure.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 400
        assert fake_db.storage.uploads == []
        assert notification_center.current(ADMIN_ID).title == "Save Failed"

    def test_save_bad_json_data(self, client):
        response = client.put(
            "/api/admin/sections/conference-solution",
            data={"data": "{not json"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Section data is not valid JSON"

    def test_validation_failure_banner(self, client, notification_center, clock):
        response = client.put("/api/admin/sections/conference-solution", json={"main_heading": ""})

        assert response.status_code == 400
        banner = client.get("/api/admin/notifications").json()["notification"]
        assert banner["type"] == "error"
        assert banner["message"] == "Main heading is required"

        clock.advance(5)
        assert client.get("/api/admin/notifications").json()["notification"] is None

    def test_dismiss_banner(self, client):
        client.put("/api/admin/sections/conference-solution", json={"main_heading": "Hi"})

        client.delete("/api/admin/notifications")

        assert client.get("/api/admin/notifications").json()["notification"] is None

    def test_upload_section_image(self, client, fake_db, png_bytes):
        response = client.post(
            "/api/admin/sections/conference-hero/images",
            files={"file": ("hero.png", png_bytes, "image/png")},
            data={"alt_text": "Hall"},
        )

        assert response.status_code == 201
        assert len(fake_db.rows("conference_hero_images")) == 1


# =============================================================================
# Public Pages and Content
# =============================================================================

class TestContentEndpoints:

    def test_about_page(self, anonymous_client):
        body = anonymous_client.get("/api/pages/about").json()
        assert set(body) == {"about_main", "about_description", "about_dedication"}

    def test_event_detail_page(self, anonymous_client, published_event):
        body = anonymous_client.get("/api/pages/events/gitex-global").json()
        assert body["event"]["title"] == "GITEX Global"
        assert body["gallery_images"] == []

    def test_blog_related(self, anonymous_client, fake_db):
        fake_db.rpc_handlers["get_related_blog_posts"] = lambda params: [{"id": "p2"}]

        body = anonymous_client.get("/api/blog/posts?related_to=p1&page_size=3").json()

        assert body["total_count"] == 1
        assert fake_db.rpc_calls[0][1] == {"current_post_id": "p1", "limit_count": 3}

    def test_blog_post_missing(self, anonymous_client, fake_db):
        assert anonymous_client.get("/api/blog/posts/nope").status_code == 404

    def test_company_profile_upload_and_current(self, client, fake_db):
        uploaded = client.post(
            "/api/company-profile",
            files={"file": ("profile.pdf", b"%PDF-1.7", "application/pdf")},
            data={"title": "Company Profile", "is_active": "true", "is_current": "true"},
        )
        assert uploaded.status_code == 201

        current = client.get("/api/company-profile").json()
        assert current["document"]["title"] == "Company Profile"
        assert current["download_url"].startswith(f"{PUBLIC_URL_BASE}/company-profile-documents/")

    def test_company_profile_requires_pdf(self, client, png_bytes):
        response = client.post(
            "/api/company-profile",
            files={"file": ("photo.png", png_bytes, "image/png")},
            data={"title": "Company Profile"},
        )
        assert response.status_code == 400

    def test_image_library_upload(self, client, fake_db, png_bytes):
        response = client.post(
            "/api/images",
            files={"file": ("hall.png", png_bytes, "image/png")},
            data={"bucket": "about-dedication", "category": "uploads"},
        )

        assert response.status_code == 201
        assert response.json()["image"]["storage_path"].startswith("uploads/")

    def test_section_image_too_large(self, client, fake_db):
        big = b"0" * (10 * 1024 * 1024 + 1)
        response = client.post(
            "/api/admin/sections/conference-hero/images",
            files={"file": ("big.png", big, "image/png")},
        )

        assert response.status_code == 413

    def test_portfolio_crud(self, client, fake_db):
        created = client.post("/api/admin/portfolio", json={"alt_text": "Stand"})
        assert created.status_code == 201
        item_id = created.json()["item"]["id"]

        listing = client.get("/api/admin/portfolio").json()
        assert listing["total"] == 1

        assert client.delete(f"/api/admin/portfolio/{item_id}").status_code == 200
        assert client.get(f"/api/admin/portfolio/{item_id}").status_code == 404


# =============================================================================
# Event Enquiries and Statistics
# =============================================================================

class TestSubmissionEndpoints:

    def test_public_form_needs_no_sign_in(self, anonymous_client, fake_db):
        response = anonymous_client.post(
            "/api/events/submissions",
            json={"name": "Sara Khan", "email": "sara@acme.ae", "budget": "50k-100k"},
            headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1", "Referer": "https://example.com/events"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Form submitted successfully"

        stored = fake_db.rows("event_form_submissions")[0]
        assert stored["id"] == body["submission_id"]
        assert stored["ip_address"] == "203.0.113.7"
        assert stored["referrer"] == "https://example.com/events"
        assert stored["status"] == "new"

    def test_public_form_validates_email(self, anonymous_client, fake_db):
        response = anonymous_client.post("/api/events/submissions", json={"name": "Sara", "email": "sara"})

        assert response.status_code == 422
        assert fake_db.rows("event_form_submissions") == []

    def test_inbox_requires_admin(self, anonymous_client):
        response = anonymous_client.get("/api/events/submissions")
        assert response.status_code in (401, 403)

    def test_inbox_not_treated_as_event_id(self, client, fake_db, published_event):
        fake_db.seed("event_form_submissions", [
            {"name": "Sara", "email": "sara@acme.ae", "is_spam": False, "event_id": published_event["id"]},
        ])

        response = client.get("/api/events/submissions")

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"]["total_count"] == 1
        assert body["submissions"][0]["event"]["slug"] == "gitex-global"

    def test_patch_status_and_banner(self, client, fake_db):
        submission = fake_db.seed("event_form_submissions", [
            {"name": "Sara", "email": "sara@acme.ae", "status": "new", "is_spam": False},
        ])[0]

        response = client.patch(f"/api/events/submissions/{submission['id']}", json={"status": "read"})

        assert response.status_code == 200
        assert response.json()["submission"]["status"] == "read"
        banner = client.get("/api/admin/notifications").json()["notification"]
        assert banner["message"] == "Submission updated successfully!"

    def test_patch_unknown_status(self, client, fake_db):
        response = client.patch("/api/events/submissions/some-id", json={"status": "shredded"})
        assert response.status_code == 422

    def test_missing_submission(self, client, fake_db):
        assert client.get("/api/events/submissions/missing").status_code == 404
        assert client.delete("/api/events/submissions/missing").status_code == 404

    def test_bulk_update_and_delete(self, client, fake_db):
        rows = fake_db.seed("event_form_submissions", [
            {"name": "Sara", "email": "sara@acme.ae", "status": "new", "is_spam": False},
            {"name": "Omar", "email": "omar@acme.ae", "status": "new", "is_spam": False},
        ])
        ids = [row["id"] for row in rows]

        updated = client.put("/api/events/submissions", json={"action": "mark_replied", "submission_ids": ids})
        assert updated.json()["updated_count"] == 2
        assert {row["status"] for row in fake_db.rows("event_form_submissions")} == {"replied"}

        deleted = client.request("DELETE", "/api/events/submissions", json={"submission_ids": ids[:1]})
        assert deleted.json()["deleted_count"] == 1
        assert [row["name"] for row in fake_db.rows("event_form_submissions")] == ["Omar"]

    def test_statistics(self, client, fake_db, published_event, draft_event):
        fake_db.rpc_handlers["get_event_statistics"] = lambda params: [{"total_events": 2}]

        response = client.get("/api/events/statistics")

        assert response.status_code == 200
        stats = response.json()["statistics"]
        assert stats["total_events"] == 2
        assert stats["draft_events"] == 1

    def test_statistics_requires_admin(self, anonymous_client):
        assert anonymous_client.get("/api/events/statistics").status_code in (401, 403)


# =============================================================================
# Events Portfolio
# =============================================================================

class TestEventsPortfolioEndpoints:

    def test_upload_then_public_listing(self, client, anonymous_client, fake_db, png_bytes):
        uploaded = client.post(
            "/api/events-portfolio",
            files={"file": ("stage.png", png_bytes, "image/png")},
            data={
                "title": "Summit stage",
                "event_type": "conference",
                "is_active": "true",
                "tags": json.dumps(["stage", "lighting"]),
            },
        )
        assert uploaded.status_code == 201
        assert uploaded.json()["image"]["tags"] == ["stage", "lighting"]

        listing = anonymous_client.get("/api/events-portfolio?active_only=true&event_type=conference").json()
        assert [image["title"] for image in listing["images"]] == ["Summit stage"]
        assert listing["images"][0]["url"].startswith(f"{PUBLIC_URL_BASE}/events-portfolio-images/portfolio/")

        conference = anonymous_client.get("/api/pages/conference").json()
        assert [image["title"] for image in conference["events_portfolio"]] == ["Summit stage"]

    def test_upload_bad_tags(self, client, fake_db, png_bytes):
        response = client.post(
            "/api/events-portfolio",
            files={"file": ("stage.png", png_bytes, "image/png")},
            data={"title": "Summit stage", "tags": "stage, lighting"},
        )

        assert response.status_code == 400
        assert fake_db.storage.uploads == []

    def test_upload_requires_admin(self, anonymous_client, png_bytes):
        response = anonymous_client.post(
            "/api/events-portfolio",
            files={"file": ("stage.png", png_bytes, "image/png")},
            data={"title": "Summit stage"},
        )
        assert response.status_code in (401, 403)

    def test_edit_toggle_and_reorder(self, client, fake_db):
        image = fake_db.seed("events_portfolio_images", [
            {"title": "Stand", "file_path": "portfolio/a.png", "is_featured": False},
        ])[0]
        fake_db.rpc_handlers["toggle_events_portfolio_featured"] = lambda params: True
        fake_db.rpc_handlers["reorder_events_portfolio_images"] = lambda params: None

        edited = client.put(f"/api/events-portfolio?id={image['id']}", json={"caption": "Hall 4"})
        assert edited.json()["image"]["caption"] == "Hall 4"

        toggled = client.put(f"/api/events-portfolio?id={image['id']}&action=toggle_featured")
        assert toggled.status_code == 200

        reordered = client.put(
            "/api/events-portfolio?action=reorder",
            json={"items": [{"id": image["id"], "display_order": 3}]},
        )
        assert reordered.status_code == 200
        assert fake_db.rpc_calls[-1] == (
            "reorder_events_portfolio_images",
            {"image_ids": [image["id"]], "new_orders": [3]},
        )

    def test_edit_needs_id(self, client, fake_db):
        response = client.put("/api/events-portfolio", json={"caption": "Hall 4"})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_reorder_needs_items(self, client, fake_db):
        response = client.put("/api/events-portfolio?action=reorder", json={"items": []})
        assert response.status_code == 400

    def test_get_and_delete(self, client, fake_db):
        image = fake_db.seed("events_portfolio_images", [{"title": "Stand", "file_path": "portfolio/a.png"}])[0]
        fake_db.storage.buckets["events-portfolio-images"] = {"portfolio/a.png": b"x"}

        fetched = client.get(f"/api/events-portfolio?id={image['id']}").json()
        assert fetched["download_url"].endswith("/events-portfolio-images/portfolio/a.png")

        assert client.delete(f"/api/events-portfolio?id={image['id']}").status_code == 200
        assert fake_db.storage.buckets["events-portfolio-images"] == {}
        assert client.get(f"/api/events-portfolio?id={image['id']}").status_code == 404
