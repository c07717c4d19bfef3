from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..company.model import CompanyProfile
from ..core.constants import DEFAULT_PRIMARY_COLOR, DEFAULT_SECONDARY_COLOR

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates" / "email"


def branding_context(company: Optional[CompanyProfile]) -> dict:
    """Header/footer values, falling back to neutral defaults when no profile exists."""
    if company is None:
        return {
            "company_name": "Your Company",
            "brand_name": "Site Engineer",
            "logo_url": None,
            "primary_color": DEFAULT_PRIMARY_COLOR,
            "secondary_color": DEFAULT_SECONDARY_COLOR,
            "support_email": "support@company.com",
            "contact_number": "",
            "address": "",
        }
    return {
        "company_name": company.company_name,
        "brand_name": company.brand_name,
        "logo_url": company.logo_url,
        "primary_color": company.primary_color,
        "secondary_color": company.secondary_color,
        "support_email": company.support_email,
        "contact_number": company.contact_number,
        "address": company.address,
    }


class EmailRenderer:
    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self._env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, *, company: Optional[CompanyProfile], **context: Any) -> str:
        template = self._env.get_template(template_name)
        return template.render(brand=branding_context(company), **context)
