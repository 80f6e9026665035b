"""Placeholder rendering for notification templates.

Tokens look like ``{{key}}``, where a key is any text without braces, so
``{{user.name}}`` and ``{{first-name}}`` are tokens too. Every occurrence of
a key present in the placeholder map is replaced by ``str(value)``; tokens
without a value are left exactly as written. Rendering never touches the
database.
"""

import re
from typing import Any

from core.models import NotificationTemplate
from core.schemas.template import RenderedContent

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


def render_text(text: str, placeholders: dict[str, Any]) -> str:
    """Substitute placeholder tokens in one string.

    Args:
        text: Text containing ``{{key}}`` tokens
        placeholders: Values keyed by token name

    Returns:
        Text with every known token replaced.

    Example:
        >>> render_text("Hi {{name}}, {{name}}!", {"name": "Alice"})
        'Hi Alice, Alice!'
        >>> render_text("Hi {{name}}", {})
        'Hi {{name}}'
    """

    def substitute(match: re.Match) -> str:
        key = match.group(1)
        if key not in placeholders:
            return match.group(0)
        return str(placeholders[key])

    return PLACEHOLDER_PATTERN.sub(substitute, text)


def render(
    template: NotificationTemplate,
    placeholders: dict[str, Any],
    locale: str | None = None,
) -> RenderedContent:
    """Render a template's title and body.

    When ``locale`` has an entry in the template's localization map, the
    localized title and body are rendered instead of the defaults.

    Args:
        template: Template to render
        placeholders: Values keyed by token name
        locale: Optional locale code such as ``es`` or ``pt-BR``

    Returns:
        Rendered title and body.
    """
    title, body = template.title, template.body
    localized = (template.localization or {}).get(locale) if locale else None
    if localized:
        title = localized.get("title", title)
        body = localized.get("body", body)

    return RenderedContent(
        title=render_text(title, placeholders),
        body=render_text(body, placeholders),
    )
