"""
school_portal.resources.catalog

Every content resource served by the API.

Responsibilities:
- Declare each resource (fields, uploads, uniqueness, categories, content types).
- Expose them through `REGISTRY`, keyed by slug.
"""

from __future__ import annotations

from school_portal.db import models
from school_portal.resources.fields import Amount, DateValue, Email, HttpsUrl, MobileNumber, text
from school_portal.resources.registry import (
    DOCUMENT_TYPES,
    FORM_DATA,
    IMAGE_TYPES,
    FileRule,
    ResourceSpec,
)

SINGLE_IMAGE = FileRule(mime_types=IMAGE_TYPES, min_count=1, max_count=1)
OPTIONAL_IMAGE = FileRule(mime_types=IMAGE_TYPES, min_count=0, max_count=1)
IMAGES = FileRule(mime_types=IMAGE_TYPES, min_count=1, max_count=10)
DOCUMENTS = FileRule(mime_types=DOCUMENT_TYPES, min_count=1, max_count=10)
SINGLE_DOCUMENT = FileRule(mime_types=DOCUMENT_TYPES, min_count=1, max_count=1)

ANNOUNCEMENT_CATEGORIES = ("notice", "leave_calender", "transportation", "admission_info")
ACADEMIC_CATEGORIES = ("routine", "result", "admission_form")
FACULTY_CATEGORIES = ("teacher", "board", "ex_head_teacher", "merit_student")

FAQ = ResourceSpec(
    slug="faq",
    label="FAQ",
    model=models.Faq,
    fields={"question": text(100), "answer": text()},
    unique=(("question",),),
    display_field="question",
)

CAREER = ResourceSpec(
    slug="career",
    label="Career",
    model=models.Career,
    fields={
        "title": text(100),
        "sub_title": text(100),
        "description": text(),
        "date": DateValue,
    },
    files={"files": IMAGES},
    unique=(("title",),),
    display_field="title",
    content_types=(FORM_DATA,),
)

BLOG = ResourceSpec(
    slug="blog",
    label="Blog",
    model=models.Blog,
    fields={"title": text(100), "description": text(), "date": DateValue},
    files={"banner": SINGLE_IMAGE, "files": DOCUMENTS, "images": IMAGES},
    unique=(("title",),),
    display_field="title",
    content_types=(FORM_DATA,),
)

ANNOUNCEMENT = ResourceSpec(
    slug="announcement",
    label="Announcement",
    model=models.Announcement,
    fields={
        "title": text(50),
        "description": text(50),
        "date": DateValue,
        "is_headline": (bool, False),
        "is_advertise": (bool, False),
        "advertise_mail_time": (DateValue, None),
    },
    files={"files": IMAGES},
    categories=ANNOUNCEMENT_CATEGORIES,
    unique=(("category", "title"),),
    display_field="title",
    content_types=(FORM_DATA,),
)

ACADEMIC = ResourceSpec(
    slug="academic",
    label="Academic",
    model=models.Academic,
    fields={
        "title": text(100),
        "description": text(),
        "publish_date": DateValue,
        "badge": text(50),
    },
    files={"file": SINGLE_DOCUMENT},
    categories=ACADEMIC_CATEGORIES,
    unique=(("category", "title"),),
    display_field="title",
    content_types=(FORM_DATA,),
)

FACULTY = ResourceSpec(
    slug="faculty",
    label="Faculty",
    model=models.Faculty,
    fields={
        "name": text(50),
        "designation": text(50),
        "email": Email,
        "mobile": MobileNumber,
        "portfolio": (HttpsUrl, None),
    },
    files={"image": SINGLE_IMAGE},
    categories=FACULTY_CATEGORIES,
    unique=(("email",),),
    display_field="email",
    content_types=(FORM_DATA,),
)

ABOUT_US = ResourceSpec(
    slug="about-us",
    label="About us",
    model=models.AboutUs,
    fields={"title": text(100), "description": text()},
    files={"files": DOCUMENTS, "images": IMAGES},
    unique=(("title",),),
    display_field="title",
    content_types=(FORM_DATA,),
)

GALLERY_PHOTO = ResourceSpec(
    slug="gallery/photo",
    label="Gallery photo",
    model=models.GalleryPhoto,
    fields={"title": text(100), "description": text()},
    files={"images": IMAGES},
    unique=(("title",),),
    display_field="title",
    content_types=(FORM_DATA,),
)

GALLERY_VIDEO = ResourceSpec(
    slug="gallery/video",
    label="Gallery video",
    model=models.GalleryVideo,
    fields={
        "title": text(100),
        "description": text(),
        "youtube_links": list[HttpsUrl],
    },
    unique=(("title",),),
    display_field="title",
)

HOME_CAROUSEL = ResourceSpec(
    slug="home/carousel",
    label="Home carousel",
    model=models.HomeCarousel,
    fields={},
    files={"images": IMAGES},
    content_types=(FORM_DATA,),
)

SCHOOL_ACHIEVEMENT = ResourceSpec(
    slug="school/achievement",
    label="School achievement",
    model=models.SchoolAchievement,
    fields={"title": text(100), "description": text()},
    files={"icon": SINGLE_IMAGE},
    unique=(("title",),),
    display_field="title",
    content_types=(FORM_DATA,),
)

SCHOOL_INFO = ResourceSpec(
    slug="school/info",
    label="School info",
    model=models.SchoolInfo,
    fields={"title": text(100), "description": text()},
    files={"icon": SINGLE_IMAGE},
    unique=(("title",),),
    display_field="title",
    content_types=(FORM_DATA,),
)

SCHOOL_SPEECH = ResourceSpec(
    slug="school/speech",
    label="School speech",
    model=models.SchoolSpeech,
    fields={"title": text(100), "description": text()},
    files={"image": SINGLE_IMAGE},
    unique=(("title",),),
    display_field="title",
    content_types=(FORM_DATA,),
)

TEAM = ResourceSpec(
    slug="team",
    label="Team",
    model=models.Team,
    fields={
        "name": text(50),
        "email": Email,
        "join_date": DateValue,
        "designation": text(50),
        "organization": text(100),
    },
    files={"image": SINGLE_IMAGE},
    unique=(("email",),),
    display_field="email",
    content_types=(FORM_DATA,),
)

DONATION = ResourceSpec(
    slug="donation",
    label="Donation",
    model=models.Donation,
    fields={
        "member_name": text(100),
        "amount": Amount,
        "payment_method": text(50),
        "bank_name": (text(100), None),
        "branch_name": (text(100), None),
        "date": DateValue,
    },
    display_field="member_name",
    public_read=False,
)

CONFIGURATION = ResourceSpec(
    slug="configuration",
    label="Configuration",
    model=models.Configuration,
    fields={
        "name": text(100),
        "description": text(),
        "address": text(200),
        "emails": list[Email],
        "contacts": list[MobileNumber],
        "social_links": list[HttpsUrl],
    },
    files={"logo": SINGLE_IMAGE, "banner": OPTIONAL_IMAGE},
    content_types=(FORM_DATA,),
    singleton=True,
    generic_routes=False,
)

NEWSLETTER = ResourceSpec(
    slug="newsletter",
    label="Newsletter",
    model=models.Newsletter,
    fields={"email": Email},
    unique=(("email",),),
    display_field="email",
    public_read=False,
    generic_routes=False,
)

CONTACT = ResourceSpec(
    slug="contact",
    label="Contact",
    model=models.Contact,
    fields={"email": Email, "subject": text(100), "message": text()},
    public_read=False,
    generic_routes=False,
)

REGISTRY: dict[str, ResourceSpec] = {
    spec.slug: spec
    for spec in (
        FAQ,
        CAREER,
        BLOG,
        ANNOUNCEMENT,
        ACADEMIC,
        FACULTY,
        ABOUT_US,
        GALLERY_PHOTO,
        GALLERY_VIDEO,
        HOME_CAROUSEL,
        SCHOOL_ACHIEVEMENT,
        SCHOOL_INFO,
        SCHOOL_SPEECH,
        TEAM,
        DONATION,
        CONFIGURATION,
        NEWSLETTER,
        CONTACT,
    )
}


# --- Module Notes -----------------------------------------------------------
# Configuration, newsletter and contact have bespoke routers; every other entry is
# served by the generic router factory.
