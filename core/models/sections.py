# =============================================================================
# core/models/sections.py - Page Section Schemas
# =============================================================================
# A section record is a singleton-per-page-area row holding editable
# marketing copy (the About page hero, the Conference solution banner, ...).
# Each editor posts one of these models; the section registry in
# core/services/section_service.py maps it to its table and bucket.
# =============================================================================

from pydantic import BaseModel, Field


class SectionItemInput(BaseModel):
    """
    A child row of a section (dedication items, conference services).

    display_order is assigned from list position when saved.
    """
    title: str = ""
    description: str = ""
    image_id: str | None = None
    image_url: str | None = None
    fallback_image_url: str | None = None
    is_active: bool = True


class SectionInput(BaseModel):
    """Common base: every section can be switched off."""
    is_active: bool = True

    model_config = {"extra": "ignore"}


# =============================================================================
# About Page
# =============================================================================

class AboutMainSectionInput(SectionInput):
    section_label: str = ""
    main_heading: str = ""
    description: str = ""
    cta_text: str = ""
    cta_url: str = ""
    video_url: str | None = None
    video_title: str | None = None
    logo_image_id: str | None = None
    logo_fallback_url: str | None = None
    esc_main_text: str = ""
    esc_sub_text: str = ""
    primary_color: str | None = None
    secondary_color: str | None = None


class AboutDescriptionSectionInput(SectionInput):
    section_heading: str = ""
    section_description: str = ""
    background_color: str | None = None
    service_1_title: str = ""
    service_1_icon_url: str = ""
    service_1_description: str | None = None
    service_2_title: str = ""
    service_2_icon_url: str = ""
    service_2_description: str | None = None
    service_3_title: str = ""
    service_3_icon_url: str = ""
    service_3_description: str | None = None


class AboutHeroSectionInput(SectionInput):
    hero_heading: str = ""
    hero_subheading: str = ""
    background_image_id: str | None = None
    background_image_url: str | None = None
    fallback_image_url: str | None = None
    overlay_opacity: float = Field(default=0.5, ge=0, le=1)
    overlay_color: str = "#000000"
    text_color: str = "#ffffff"
    height_class: str = "h-screen"
    show_scroll_indicator: bool = True


class AboutDedicationSectionInput(SectionInput):
    section_heading: str = ""
    section_description: str | None = None
    items: list[SectionItemInput] = Field(default_factory=list)


# =============================================================================
# Conference Page
# =============================================================================

class ConferenceHeroSectionInput(SectionInput):
    heading: str = ""
    background_image_url: str | None = None
    background_image_id: str | None = None


class ConferenceManagementSectionInput(SectionInput):
    main_heading: str = ""
    main_description: str = ""
    main_image_id: str | None = None
    main_image_url: str | None = None
    main_image_alt: str = ""
    items: list[SectionItemInput] = Field(default_factory=list)


class ConferenceSolutionSectionInput(SectionInput):
    main_heading: str = ""
    phone_number: str = ""
    call_to_action_text: str = ""
    background_color: str = "#a5cd39"
    main_image_id: str | None = None
    main_image_url: str | None = None
    main_image_alt: str = ""


class CommunicateSectionInput(SectionInput):
    main_heading: str = ""
    company_name: str = ""
    first_paragraph: str = ""
    second_paragraph: str = ""
    main_image_id: str | None = None
    main_image_url: str | None = None
    main_image_alt: str = ""


class EventManagementSectionInput(SectionInput):
    main_heading: str = ""
    main_description: str = ""
    secondary_heading: str = ""
    first_paragraph: str = ""
    second_paragraph: str = ""
    main_image_id: str | None = None
    main_image_url: str | None = None
    main_image_alt: str = ""


# =============================================================================
# Events Page
# =============================================================================

class EventsHeroInput(SectionInput):
    main_heading: str = ""
    sub_heading: str | None = None
    background_image_url: str | None = None
    background_overlay_opacity: float = Field(default=0.5, ge=0, le=1)
    background_overlay_color: str = "#000000"
    text_color: str = "#ffffff"
    heading_font_size: str = "responsive"
    subheading_font_size: str | None = None
    text_alignment: str | None = "center"
    button_text: str | None = None
    button_url: str | None = None
    button_style: str | None = "primary"
