"""
Jinja2 Template Renderer

Implements ITemplateRenderer with a Jinja2 environment loading templates
from a directory.
"""

import os
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from domain.errors import TemplateNotFoundError
from domain.notification import ITemplateRenderer

DEFAULT_TEMPLATE_PATH = os.path.join(os.path.dirname(__file__), "templates", "mail")


class JinjaTemplateRenderer(ITemplateRenderer):
    """Renders named templates from a directory. HTML templates are autoescaped."""

    def __init__(self, template_path: Optional[str] = None):
        self.template_path = template_path or DEFAULT_TEMPLATE_PATH
        self.env = Environment(
            loader=FileSystemLoader(self.template_path),
            autoescape=select_autoescape(["html", "xml"]),
            keep_trailing_newline=True,
        )

    def render(self, name: str, values: Dict[str, Any]) -> str:
        try:
            template = self.env.get_template(name)
        except TemplateNotFound as e:
            raise TemplateNotFoundError(
                f"Template {name} not found in {self.template_path}", e
            )
        return template.render(**values)
