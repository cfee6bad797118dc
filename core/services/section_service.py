# =============================================================================
# core/services/section_service.py - Page Section Editors
# =============================================================================
# Every editable page area (About hero, Conference solution banner, ...) is a
# singleton row in its own table, with an optional image library table, an
# optional child-items table and its own storage bucket. The registry below
# describes each area so one service can read and save all of them.
#
# Save is two-phase: deferred images are uploaded first, then the section row
# is updated (or inserted), then child items are replaced. None of this is
# atomic; a failure part-way leaves earlier steps applied.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from lib.supabase_client import SupabaseClient
from lib.db_errors import friendly_database_message
from lib.uploads import DeferredImage, ImageFile, commit_images, validate_image
from core.models.sections import (
    AboutDedicationSectionInput,
    AboutDescriptionSectionInput,
    AboutHeroSectionInput,
    AboutMainSectionInput,
    CommunicateSectionInput,
    ConferenceHeroSectionInput,
    ConferenceManagementSectionInput,
    ConferenceSolutionSectionInput,
    EventManagementSectionInput,
    EventsHeroInput,
    SectionInput,
)
from core.services.storage_service import StorageService
from app.config import settings
from app.exceptions import (
    DatabaseError,
    NotFoundError,
    UnknownSectionError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SectionDefinition:
    """
    Where one page area lives.

    Attributes:
        key: URL key used by the admin API ("about-hero")
        title: Human name used in messages
        table: Singleton section table
        bucket: Storage bucket for the area's images
        model: Pydantic input model for the editor form
        read_rpc: Database function returning the current row, if any
        images_table: Image library table, if the area has one
        items_table: Child rows table, if the area has items
        items_parent_column: Column linking items to the section row;
            None means the items table belongs to the area as a whole
        image_columns: Record columns that hold an image path or URL
        required: (column, label) pairs that must be non-blank
        folder: Folder inside the bucket for new uploads
    """
    key: str
    title: str
    table: str
    bucket: str
    model: type[SectionInput]
    read_rpc: str | None = None
    images_table: str | None = None
    items_table: str | None = None
    items_parent_column: str | None = "section_id"
    image_columns: tuple[str, ...] = ()
    required: tuple[tuple[str, str], ...] = ()
    folder: str = "uploads"

    @property
    def defaults(self) -> dict[str, Any]:
        """Field defaults shown when the table has no row yet."""
        return self.model().model_dump(exclude={"items"})


SECTIONS: dict[str, SectionDefinition] = {
    definition.key: definition
    for definition in (
        SectionDefinition(
            key="about-main",
            title="About main section",
            table="about_main_sections",
            bucket="about-main",
            model=AboutMainSectionInput,
            read_rpc="get_about_main_section",
            images_table="about_main_images",
            image_columns=("logo_fallback_url",),
            required=(
                ("section_label", "Section label"),
                ("main_heading", "Main heading"),
                ("description", "Description"),
            ),
        ),
        SectionDefinition(
            key="about-description",
            title="About description section",
            table="about_description_sections",
            bucket="about-description",
            model=AboutDescriptionSectionInput,
            read_rpc="get_about_description_section",
            images_table="about_description_images",
            image_columns=("service_1_icon_url", "service_2_icon_url", "service_3_icon_url"),
            required=(
                ("section_heading", "Section heading"),
                ("section_description", "Section description"),
                ("service_1_title", "Service 1 title"),
                ("service_2_title", "Service 2 title"),
                ("service_3_title", "Service 3 title"),
            ),
        ),
        SectionDefinition(
            key="about-hero",
            title="About hero section",
            table="about_hero_sections",
            bucket="about-hero",
            model=AboutHeroSectionInput,
            images_table="about_hero_images",
            image_columns=("background_image_url",),
            required=(
                ("hero_heading", "Hero heading"),
                ("hero_subheading", "Hero subheading"),
            ),
        ),
        SectionDefinition(
            key="about-dedication",
            title="Dedication section",
            table="about_dedication_sections",
            bucket="about-dedication",
            model=AboutDedicationSectionInput,
            read_rpc="get_about_dedication_section",
            images_table="about_dedication_images",
            items_table="about_dedication_items",
            required=(("section_heading", "Section heading"),),
        ),
        SectionDefinition(
            key="conference-hero",
            title="Conference hero section",
            table="conference_hero_sections",
            bucket="conference-hero-images",
            model=ConferenceHeroSectionInput,
            images_table="conference_hero_images",
            image_columns=("background_image_url",),
            required=(("heading", "Heading"),),
            folder="conference-hero",
        ),
        SectionDefinition(
            key="conference-management",
            title="Conference management section",
            table="conference_management_sections",
            bucket="conference-management-images",
            model=ConferenceManagementSectionInput,
            images_table="conference_management_images",
            items_table="conference_management_services",
            items_parent_column=None,
            image_columns=("main_image_url",),
            required=(("main_heading", "Main heading"),),
            folder="conference-management",
        ),
        SectionDefinition(
            key="conference-solution",
            title="Conference solution section",
            table="conference_solution_sections",
            bucket="conference-solution-section-images",
            model=ConferenceSolutionSectionInput,
            images_table="conference_solution_images",
            image_columns=("main_image_url",),
            required=(("main_heading", "Main heading"),),
            folder="conference-solution",
        ),
        SectionDefinition(
            key="conference-communicate",
            title="Communicate section",
            table="communicate_sections",
            bucket="communicate-section-images",
            model=CommunicateSectionInput,
            images_table="communicate_images",
            image_columns=("main_image_url",),
            required=(("main_heading", "Main heading"),),
            folder="communicate",
        ),
        SectionDefinition(
            key="event-management",
            title="Event management section",
            table="event_management_sections",
            bucket="event-management-images",
            model=EventManagementSectionInput,
            images_table="event_management_images",
            image_columns=("main_image_url",),
            required=(("main_heading", "Main heading"),),
            folder="event-management",
        ),
        SectionDefinition(
            key="events-hero",
            title="Events hero section",
            table="events_hero",
            bucket="events-hero-images",
            model=EventsHeroInput,
            image_columns=("background_image_url",),
            required=(("main_heading", "Main heading"),),
        ),
    )
}


def get_definition(key: str) -> SectionDefinition:
    """
    Look up a page area by key.

    Raises:
        UnknownSectionError: If the key isn't registered
    """
    try:
        return SECTIONS[key]
    except KeyError:
        raise UnknownSectionError(key, sorted(SECTIONS))


def _database_error(action: str, error: Exception) -> DatabaseError:
    message = friendly_database_message(error)
    logger.error(f"Failed to {action}: {error}")
    return DatabaseError(action, message)


def _clean(record: dict[str, Any]) -> dict[str, Any]:
    """Trim surrounding whitespace from every string value."""
    return {
        key: value.strip() if isinstance(value, str) else value
        for key, value in record.items()
    }


class SectionService:
    """
    Service for the page section editors.

    All methods take the section key from the registry.
    """

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    @staticmethod
    def get_section(key: str) -> dict[str, Any]:
        """
        Get the current content of a page area.

        Reads through the area's RPC when one exists, otherwise the latest
        active row. When nothing is stored yet, the form defaults come back
        with id None. Stored image paths are resolved to public URLs.

        Raises:
            UnknownSectionError: Unknown key
            DatabaseError: The read failed
        """
        definition = get_definition(key)

        try:
            if definition.read_rpc:
                rows = SupabaseClient.call_rpc(definition.read_rpc)
                if isinstance(rows, list):
                    row = rows[0] if rows else None
                else:
                    row = rows
            else:
                row = SupabaseClient.fetch_latest_active(definition.table)
        except Exception as e:
            raise _database_error(f"load {definition.title.lower()}", e)

        section = dict(row) if row else {"id": None, **definition.defaults}

        for column in definition.image_columns:
            section[column] = StorageService.resolve_url(definition.bucket, section.get(column))

        if definition.items_table:
            section["items"] = SectionService.list_items(definition, section.get("id"))

        return section

    @staticmethod
    def list_items(definition: SectionDefinition, section_id: str | None) -> list[dict[str, Any]]:
        """
        Active child rows in display order, each with a browser-ready image_url.

        Items reference the area's image library by image_id; an item without
        a library image falls back to its fallback_image_url.
        """
        if definition.items_parent_column and not section_id:
            return []

        client = SupabaseClient.get_client()
        query = client.table(definition.items_table).select("*").eq("is_active", True)
        if definition.items_parent_column:
            query = query.eq(definition.items_parent_column, section_id)

        try:
            items = query.order("display_order").execute().data or []
        except Exception as e:
            raise _database_error(f"load {definition.title.lower()} items", e)

        image_ids = [item["image_id"] for item in items if item.get("image_id")]
        paths: dict[str, str] = {}
        if image_ids and definition.images_table:
            try:
                response = (
                    client.table(definition.images_table)
                    .select("id, file_path")
                    .in_("id", image_ids)
                    .execute()
                )
            except Exception as e:
                raise _database_error(f"load {definition.title.lower()} item images", e)
            paths = {image["id"]: image["file_path"] for image in response.data or []}

        for item in items:
            path = paths.get(item.get("image_id"))
            if path:
                item["image_url"] = StorageService.get_public_url(definition.bucket, path)
            else:
                item["image_url"] = StorageService.resolve_url(
                    definition.bucket,
                    item.get("image_url") or item.get("fallback_image_url"),
                )

        return items

    # -------------------------------------------------------------------------
    # Save
    # -------------------------------------------------------------------------

    @staticmethod
    def validate(definition: SectionDefinition, payload: dict[str, Any]) -> SectionInput:
        """
        Parse and check an editor form.

        Raises:
            ValidationFailedError: First problem found, in form order
        """
        try:
            section = definition.model.model_validate(payload)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise ValidationFailedError(f"{field}: {first['msg']}", field=field)

        for column, label in definition.required:
            value = getattr(section, column, None)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationFailedError(f"{label} is required", field=column)

        for index, item in enumerate(getattr(section, "items", None) or [], start=1):
            if not item.title.strip():
                raise ValidationFailedError(f"Item {index}: Title is required", field="items")
            if not item.description.strip():
                raise ValidationFailedError(f"Item {index}: Description is required", field="items")

        return section

    @staticmethod
    def save_section(
        key: str,
        payload: dict[str, Any],
        images: dict[str, DeferredImage | None] | None = None,
    ) -> dict[str, Any]:
        """
        Save an editor form.

        Args:
            key: Section key
            payload: Form fields (and "items" for areas that have them)
            images: Deferred images keyed by the column they fill

        Returns:
            The saved row, with image URLs resolved and items attached

        Raises:
            ValidationFailedError: Missing required field or unknown image column
            DatabaseError: Any table write failed
            StorageUploadError: A deferred image failed to upload
        """
        definition = get_definition(key)
        section = SectionService.validate(definition, payload)

        images = images or {}
        unknown = [column for column in images if column not in definition.image_columns]
        if unknown:
            raise ValidationFailedError(
                f"{definition.title} has no image field {unknown[0]}",
                field=unknown[0],
            )

        record = _clean(section.model_dump(exclude={"items"}))
        record = commit_images(
            record,
            images,
            StorageService.uploader_for(definition.bucket, definition.folder),
        )

        client = SupabaseClient.get_client()

        try:
            existing = SupabaseClient.fetch_latest_active(definition.table, "id")
            if existing:
                response = (
                    client.table(definition.table)
                    .update(record)
                    .eq("id", existing["id"])
                    .execute()
                )
                logger.info(f"Updated {definition.table}: {existing['id']}")
            else:
                response = client.table(definition.table).insert(record).execute()
                logger.info(f"Inserted {definition.table} row")
        except Exception as e:
            raise _database_error(f"save {definition.title.lower()}", e)

        if not response.data:
            raise DatabaseError(f"save {definition.title.lower()}", "no row returned")
        saved = dict(response.data[0])

        # Items are replaced only when the form sent the key; [] clears them
        if definition.items_table and "items" in section.model_fields_set:
            SectionService.replace_items(definition, saved["id"], section.items)

        for column in definition.image_columns:
            saved[column] = StorageService.resolve_url(definition.bucket, saved.get(column))
        if definition.items_table:
            saved["items"] = SectionService.list_items(definition, saved["id"])

        return saved

    @staticmethod
    def replace_items(definition: SectionDefinition, section_id: str, items: list) -> list[dict[str, Any]]:
        """
        Replace a section's child rows with the given list.

        Existing rows are deleted, then the new ones inserted with
        display_order = position + 1. An empty list only deletes. If the
        insert fails the old rows are already gone.
        """
        client = SupabaseClient.get_client()

        rows = []
        for index, item in enumerate(items):
            row = {
                "title": item.title.strip(),
                "description": item.description.strip(),
                "image_id": item.image_id or None,
                "fallback_image_url": (item.fallback_image_url or "").strip() or None,
                "display_order": index + 1,
                "is_active": True,
            }
            if item.image_url:
                row["image_url"] = item.image_url
            if definition.items_parent_column:
                row[definition.items_parent_column] = section_id
            rows.append(row)

        try:
            query = client.table(definition.items_table).delete()
            if definition.items_parent_column:
                query = query.eq(definition.items_parent_column, section_id)
            else:
                query = query.neq("id", "00000000-0000-0000-0000-000000000000")
            query.execute()

            created = []
            if rows:
                created = client.table(definition.items_table).insert(rows).execute().data or []
        except Exception as e:
            raise _database_error(f"save {definition.title.lower()} items", e)

        logger.info(f"Replaced {len(rows)} item(s) in {definition.items_table}")
        return created

    # -------------------------------------------------------------------------
    # Image Library
    # -------------------------------------------------------------------------

    @staticmethod
    def _images_table(definition: SectionDefinition) -> str:
        if not definition.images_table:
            raise ValidationFailedError(f"{definition.title} has no image library")
        return definition.images_table

    @staticmethod
    def list_section_images(key: str) -> list[dict[str, Any]]:
        """
        List the area's uploaded images, newest first, each with its URL.
        """
        definition = get_definition(key)
        table = SectionService._images_table(definition)
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(table)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise _database_error(f"load {definition.title.lower()} images", e)

        images = response.data or []
        for image in images:
            image["url"] = StorageService.get_public_url(definition.bucket, image["file_path"])
        return images

    @staticmethod
    def upload_section_image(
        key: str,
        file: ImageFile,
        alt_text: str | None = None,
    ) -> dict[str, Any]:
        """
        Upload an image straight into the area's library.

        Returns:
            The new image row with its public URL

        Raises:
            InvalidFileTypeError / FileTooLargeError: Rejected file
            StorageUploadError: Upload failed
            DatabaseError: Metadata insert failed
        """
        definition = get_definition(key)
        table = SectionService._images_table(definition)
        validate_image(file, settings.MAX_SECTION_UPLOAD_MB, settings.allowed_image_types_list)

        uploaded = StorageService.upload_image(definition.bucket, definition.folder, file)
        client = SupabaseClient.get_client()

        data = {
            "filename": uploaded.path.rsplit("/", 1)[-1],
            "original_filename": file.filename,
            "file_path": uploaded.path,
            "file_size": file.size,
            "mime_type": file.content_type,
            "alt_text": alt_text or file.stem,
            "is_active": True,
        }

        try:
            response = client.table(table).insert(data).execute()
        except Exception as e:
            raise _database_error("save image record", e)

        image = dict(response.data[0]) if response.data else data
        image["url"] = uploaded.url
        logger.info(f"Uploaded {definition.key} image: {uploaded.path}")
        return image

    @staticmethod
    def delete_section_image(key: str, image_id: str) -> None:
        """
        Delete a library image: storage file first, then the row.

        A storage failure is only logged so the row can still be removed.

        Raises:
            NotFoundError: No such image
            DatabaseError: Row delete failed
        """
        definition = get_definition(key)
        table = SectionService._images_table(definition)

        image = SupabaseClient.fetch_one(table, "id", image_id)
        if not image:
            raise NotFoundError("Image", image_id)

        if not StorageService.delete_files(definition.bucket, [image["file_path"]]):
            logger.warning(f"Storage file not removed: {definition.bucket}/{image['file_path']}")

        client = SupabaseClient.get_client()
        try:
            client.table(table).delete().eq("id", image_id).execute()
        except Exception as e:
            raise _database_error("delete image", e)

        logger.info(f"Deleted {definition.key} image: {image_id}")
