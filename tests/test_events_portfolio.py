# =============================================================================
# tests/test_events_portfolio.py - Events Portfolio Gallery Tests
# =============================================================================
# This module contains tests for:
# - Listing with filters, search, sorting and paging
# - Upload validation and cleanup
# - Metadata edits, featured toggling, reordering and deletion
# =============================================================================

import pytest
from pydantic import ValidationError

from app.exceptions import (
    DatabaseError,
    InvalidFileTypeError,
    NotFoundError,
    ValidationFailedError,
)
from core.models.content import (
    EventsPortfolioImageUpdate,
    EventsPortfolioReorder,
    ReorderEntry,
)
from core.services.events_portfolio_service import (
    BUCKET,
    TABLE,
    EventsPortfolioService,
    parse_event_type,
    portfolio_filename,
)
from lib.uploads import ImageFile
from tests.conftest import PUBLIC_URL_BASE, FakeAPIError


@pytest.fixture
def png(png_bytes):
    return ImageFile(filename="Hall 4.PNG", content_type="image/png", content=png_bytes)


@pytest.fixture
def gallery(fake_db):
    return fake_db.seed(TABLE, [
        {"title": "GITEX stand", "file_path": "portfolio/a.png", "event_name": "GITEX",
         "event_type": "exhibition", "is_active": True, "is_featured": True, "display_order": 2},
        {"title": "Summit stage", "file_path": "portfolio/b.png", "event_name": "Leaders Summit",
         "event_type": "conference", "is_active": True, "is_featured": False, "display_order": 1},
        {"title": "Hidden", "file_path": "portfolio/c.png", "event_name": "Arab Health",
         "event_type": "conference", "is_active": False, "is_featured": False, "display_order": 0},
    ])


class TestHelpers:

    def test_portfolio_filename(self):
        assert portfolio_filename("Hall 4.JPG", now=1700000000.0, token="x1y2") == (
            "events-portfolio-1700000000000-x1y2.jpg"
        )

    @pytest.mark.parametrize("value", [None, "", "  ", "none"])
    def test_event_type_cleared(self, value):
        assert parse_event_type(value) is None

    def test_event_type_known(self):
        assert parse_event_type(" trade_show ") == "trade_show"

    def test_event_type_unknown(self):
        with pytest.raises(ValidationFailedError) as exc:
            parse_event_type("wedding")
        assert exc.value.field == "event_type"

    def test_reorder_needs_items(self):
        with pytest.raises(ValidationError):
            EventsPortfolioReorder(items=[])


class TestListing:

    def test_display_order(self, gallery):
        result = EventsPortfolioService.list_images()

        assert [image["title"] for image in result["images"]] == ["Hidden", "Summit stage", "GITEX stand"]
        assert result["images"][0]["url"] == f"{PUBLIC_URL_BASE}/{BUCKET}/portfolio/c.png"
        assert result["page"] == 1
        assert result["has_more"] is False

    def test_active_conference_only(self, gallery):
        result = EventsPortfolioService.list_images(active_only=True, event_type="conference")
        assert [image["title"] for image in result["images"]] == ["Summit stage"]

    def test_unknown_event_type_ignored(self, gallery):
        assert EventsPortfolioService.list_images(event_type="wedding")["total"] == 3

    def test_featured_and_search(self, gallery):
        assert EventsPortfolioService.list_images(featured_only=True)["total"] == 1
        found = EventsPortfolioService.list_images(search="arab")["images"]
        assert [image["title"] for image in found] == ["Hidden"]

    def test_sort_and_page(self, gallery):
        result = EventsPortfolioService.list_images(sort_by="title", sort_order="desc", limit=2, offset=0)

        assert [image["title"] for image in result["images"]] == ["Summit stage", "Hidden"]
        assert result["has_more"] is True

        second = EventsPortfolioService.list_images(sort_by="title", sort_order="desc", limit=2, offset=2)
        assert second["page"] == 2
        assert [image["title"] for image in second["images"]] == ["GITEX stand"]

    def test_failure(self, fake_db):
        fake_db.fail(TABLE, "select", FakeAPIError("connection reset"))
        with pytest.raises(DatabaseError):
            EventsPortfolioService.list_images()

    def test_get_missing(self, fake_db):
        with pytest.raises(NotFoundError):
            EventsPortfolioService.get_image("missing")

    def test_get_with_download_url(self, gallery):
        result = EventsPortfolioService.get_image(gallery[0]["id"])
        assert result["download_url"].endswith(f"/{BUCKET}/portfolio/a.png")


class TestUpload:

    def test_upload(self, fake_db, png):
        result = EventsPortfolioService.upload_image(
            png,
            title="  Summit stage ",
            event_type="conference",
            description="  ",
            tags=["stage", "lighting"],
            is_active=True,
        )

        image = result["image"]
        assert image["title"] == "Summit stage"
        assert image["alt_text"] == "Summit stage"
        assert image["description"] is None
        assert image["event_type"] == "conference"
        assert image["original_filename"] == "Hall 4.PNG"
        assert image["tags"] == ["stage", "lighting"]
        assert result["path"].startswith("portfolio/events-portfolio-")
        assert result["path"].endswith(".png")
        assert result["path"] in fake_db.storage.buckets[BUCKET]

    def test_requires_title(self, fake_db, png):
        with pytest.raises(ValidationFailedError):
            EventsPortfolioService.upload_image(png, title="  ")
        assert fake_db.storage.uploads == []

    def test_images_only(self, fake_db):
        pdf = ImageFile(filename="plan.pdf", content_type="application/pdf", content=b"%PDF-1.7")
        with pytest.raises(InvalidFileTypeError):
            EventsPortfolioService.upload_image(pdf, title="Floor plan")

    def test_unknown_event_type_not_uploaded(self, fake_db, png):
        with pytest.raises(ValidationFailedError):
            EventsPortfolioService.upload_image(png, title="Stand", event_type="wedding")
        assert fake_db.storage.uploads == []

    def test_failed_insert_removes_file(self, fake_db, png):
        fake_db.fail(TABLE, "insert", FakeAPIError("connection reset"))

        with pytest.raises(DatabaseError):
            EventsPortfolioService.upload_image(png, title="Stand")

        assert fake_db.storage.buckets[BUCKET] == {}
        assert len(fake_db.storage.removals) == 1


class TestEditing:

    def test_update_sent_fields(self, gallery):
        image = EventsPortfolioService.update_image(
            gallery[0]["id"],
            EventsPortfolioImageUpdate(caption="  ", event_type="none", is_featured=False),
        )

        assert image["caption"] is None
        assert image["event_type"] is None
        assert image["is_featured"] is False
        assert image["title"] == "GITEX stand"

    def test_blank_alt_text_takes_new_title(self, gallery):
        image = EventsPortfolioService.update_image(
            gallery[1]["id"],
            EventsPortfolioImageUpdate(title="Main stage", alt_text=""),
        )
        assert image["alt_text"] == "Main stage"

    def test_blank_title(self, gallery):
        with pytest.raises(ValidationFailedError):
            EventsPortfolioService.update_image(gallery[0]["id"], EventsPortfolioImageUpdate(title=" "))

    def test_update_missing(self, fake_db):
        with pytest.raises(NotFoundError):
            EventsPortfolioService.update_image("missing", EventsPortfolioImageUpdate(caption="x"))

    def test_toggle_featured(self, fake_db):
        fake_db.rpc_handlers["toggle_events_portfolio_featured"] = lambda params: True

        EventsPortfolioService.toggle_featured("img-1")

        assert fake_db.rpc_calls == [("toggle_events_portfolio_featured", {"image_id": "img-1"})]

    def test_toggle_featured_missing(self, fake_db):
        fake_db.rpc_handlers["toggle_events_portfolio_featured"] = lambda params: False
        with pytest.raises(NotFoundError):
            EventsPortfolioService.toggle_featured("missing")

    def test_reorder(self, fake_db):
        fake_db.rpc_handlers["reorder_events_portfolio_images"] = lambda params: None

        EventsPortfolioService.reorder([
            ReorderEntry(id="a", display_order=1),
            ReorderEntry(id="b", display_order=0),
        ])

        assert fake_db.rpc_calls[0][1] == {"image_ids": ["a", "b"], "new_orders": [1, 0]}

    def test_reorder_without_function(self, fake_db):
        with pytest.raises(DatabaseError):
            EventsPortfolioService.reorder([ReorderEntry(id="a", display_order=1)])

    def test_delete_survives_storage_failure(self, fake_db, gallery):
        fake_db.storage.failing_buckets.add(BUCKET)

        EventsPortfolioService.delete_image(gallery[0]["id"])

        assert [row["title"] for row in fake_db.rows(TABLE)] == ["Summit stage", "Hidden"]

    def test_delete_missing(self, fake_db):
        with pytest.raises(NotFoundError):
            EventsPortfolioService.delete_image("missing")
