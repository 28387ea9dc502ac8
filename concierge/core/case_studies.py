"""Case studies contained in the combined capabilities deck.

Each row maps a physical page of the combined PDF to the client, title and
capability/industry tags of the case study printed on it. Page 1 is the
cover and has no row.
"""

from pydantic import BaseModel, Field, field_validator

DEFAULT_COMBINED_PDF = "content/AG single page case studies 2025.pdf"


class CaseStudyPage(BaseModel):
    """One case study page of the combined deck."""

    page: int = Field(..., ge=1, description="1-based page number in the combined PDF")
    client: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    capabilities: list[str] = Field(default_factory=list)
    industries: list[str] = Field(default_factory=list)

    @field_validator("client", "title")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @property
    def label(self) -> str:
        return f"{self.client}: {self.title}"


def load_case_study_pages(
    rows: list[tuple[int, str, str, list[str], list[str]]],
) -> list[CaseStudyPage]:
    """
    Validate raw page rows.

    Raises:
        ValueError: If a row is invalid or a page number appears twice
    """
    pages = [
        CaseStudyPage(
            page=page,
            client=client,
            title=title,
            capabilities=capabilities,
            industries=industries,
        )
        for page, client, title, capabilities, industries in rows
    ]

    seen: set[int] = set()
    duplicates = []
    for entry in pages:
        if entry.page in seen:
            duplicates.append(entry.page)
        seen.add(entry.page)
    if duplicates:
        raise ValueError(f"Duplicate case study pages: {sorted(set(duplicates))}")

    return pages


def out_of_range_pages(pages: list[CaseStudyPage], page_count: int) -> list[tuple[int, str]]:
    """Rows whose page number is beyond the end of the source PDF."""
    return [(entry.page, entry.label) for entry in pages if entry.page > page_count]


# (page, client, title, capabilities, industries)
_CASE_STUDY_ROWS = [
    (2, "Renew Home", "Go-to-Market Story for Sustainable Energy Launch",
     ["brand-strategy", "content-marketing"], ["technology"]),
    (3, "Twitch", "Brand Partnership Studio Creative Assets",
     ["creative-direction", "content-marketing"], ["media-entertainment"]),
    (4, "AIG", "Investor Day Visual Narrative",
     ["creative-direction", "content-marketing"], ["finance"]),
    (5, "AWS", "Amazon SageMaker Product Demo",
     ["video-production", "creative-direction"], ["technology"]),
    (6, "AWS", "Amazon Nova AI Models Video Campaign",
     ["video-production", "creative-direction"], ["technology"]),
    (7, "Chrome Enterprise", "Chrome Enterprise Premium Security Video",
     ["video-production", "content-marketing"], ["technology"]),
    (8, "Chrome Enterprise", "No Place Like Chrome Campaign Reset",
     ["brand-strategy", "creative-direction"], ["technology"]),
    (9, "J.P. Morgan", "Payments Hardware Terminal Naming",
     ["brand-strategy"], ["finance"]),
    (10, "Android Enterprise", "Gen Z Workforce Research & Outreach",
     ["brand-strategy", "content-marketing"], ["technology"]),
    (11, "Chorus (Alphabet X)", "Brand & Narrative for Asset Visibility Platform",
     ["brand-strategy", "creative-direction"], ["technology"]),
    (12, "Google", "Cross-Product Narrative Unification",
     ["brand-strategy", "content-marketing"], ["technology"]),
    (13, "Android Enterprise", "Financial Services Industry Story",
     ["content-marketing"], ["technology", "finance"]),
    (14, "Google", "Executive Thought Leadership in Education",
     ["content-marketing", "social-strategy"], ["technology"]),
    (15, "Google for Education", "Future of Education Video Series",
     ["video-production", "content-marketing"], ["technology"]),
    (16, "Google Learning", "LinkedIn Executive Presence",
     ["content-marketing", "social-strategy"], ["technology"]),
    (17, "ChromeOS", "Small Business Market Campaign",
     ["content-marketing", "growth-marketing"], ["technology"]),
    (18, "Google/Cameyo", "VAD Platform Integration Marketing",
     ["content-marketing", "growth-marketing"], ["technology"]),
    (19, "Google Workspace", "G Suite to Workspace Rebrand",
     ["brand-strategy", "creative-direction"], ["technology"]),
    (20, "Google Workspace", "Future of Work Thought Leadership",
     ["content-marketing", "brand-strategy"], ["technology"]),
    (21, "Google Workspace", "Demand Generation Content Strategy",
     ["content-marketing", "growth-marketing"], ["technology"]),
    (22, "Task Mate", "Inclusive Data eBook for Google I/O",
     ["content-marketing", "creative-direction"], ["technology"]),
    (23, "Task Mate", "In-Market App Campaign India",
     ["growth-marketing", "creative-direction"], ["technology"]),
    (24, "MyLink (Google)", "Link-in-Bio Brand Identity",
     ["brand-strategy", "creative-direction"], ["technology"]),
    (25, "Google NBU", "Nigeria Digital Behavior Research",
     ["brand-strategy"], ["technology"]),
    (26, "Chrome Enterprise", "Remote Work Thought Leadership",
     ["content-marketing"], ["technology"]),
    (27, "Google/MCA", "Modern Computing Alliance Report",
     ["content-marketing"], ["technology"]),
    (28, "Chrome Enterprise", "Demo Day Virtual Event",
     ["experience-design", "creative-direction"], ["technology"]),
    (29, "Google Messages", "Product Awareness Campaign",
     ["creative-direction", "video-production"], ["technology"]),
    (30, "Android", "Mobile Security Messaging",
     ["brand-strategy", "content-marketing"], ["technology"]),
    (31, "UpShow/ChromeOS", "Retail Health Partner Marketing",
     ["content-marketing", "growth-marketing"], ["technology", "healthcare"]),
    (32, "ChromeOS", "SMB Consideration Campaign",
     ["growth-marketing", "content-marketing"], ["technology"]),
    (33, "Salesforce/Slack", "Partner Sales Enablement Training",
     ["content-marketing"], ["technology"]),
    (34, "Slalom/Salesforce", "Customer Success Stories",
     ["content-marketing", "creative-direction"], ["technology", "b2b-services"]),
    (35, "Salesforce/WhatsApp", "LATAM Holiday Messaging Campaign",
     ["growth-marketing", "content-marketing"], ["technology"]),
    (36, "Android Enterprise", "Brand Repositioning & Virtual Event",
     ["brand-strategy", "experience-design"], ["technology"]),
    (37, "Google Cloud", "Cloud Innovators Program Identity",
     ["brand-strategy", "creative-direction"], ["technology"]),
    (38, "AWS", "re:Invent Keynote Presentations",
     ["creative-direction", "content-marketing"], ["technology"]),
    (39, "CrowdStrike", "Marketecture & Product Portfolio",
     ["brand-strategy", "content-marketing"], ["technology"]),
    (40, "Amazon re:MARS", "Branded Docuseries",
     ["video-production", "creative-direction"], ["technology"]),
    (41, "ADP", "HR Keynote Presentations",
     ["creative-direction", "content-marketing"], ["technology", "b2b-services"]),
    (42, "Simons Foundation", "Brand Identity & Sub-brand Unification",
     ["brand-strategy", "creative-direction"], ["non-profit"]),
    (43, "AWS", "Global Brand Advertising Campaign",
     ["brand-strategy", "creative-direction"], ["technology"]),
    (44, "Salt Security", "API Security Brand Refresh",
     ["brand-strategy", "creative-direction"], ["technology"]),
    (45, "Meta", "B2B Messaging Platform Story",
     ["brand-strategy", "content-marketing"], ["technology"]),
    (46, "Omnicell", "Autonomous Pharmacy Positioning",
     ["brand-strategy", "content-marketing"], ["healthcare", "technology"]),
    (47, "AWS", "Digital Audit Symposium Solution",
     ["digital-transformation", "content-marketing"], ["technology"]),
    (48, "ADP", "Meeting of the Minds Product Videos",
     ["video-production", "creative-direction"], ["technology", "b2b-services"]),
    (49, "AWS/NVIDIA", "Project Ceiba AI Supercomputer Video",
     ["video-production", "creative-direction"], ["technology"]),
]

CASE_STUDY_PAGES = load_case_study_pages(_CASE_STUDY_ROWS)
