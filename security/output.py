"""
HTML output encoding (CWE-79).

Every untrusted value embedded in markup goes through encode_for_html().
"""

from markupsafe import escape


def encode_for_html(text) -> str:
    """HTML-entity encode &, <, >, " and ' in text. None encodes to an empty string."""
    if text is None:
        return ""
    return str(escape(str(text)))


def render_recipe_card(name: str, description: str = None, ingredients=()) -> str:
    """Render a small HTML card for a recipe; all fields are encoded."""
    items = "".join(
        "<li>" + encode_for_html(item) + "</li>" for item in ingredients
    )
    parts = [
        "<!DOCTYPE html>",
        "<html><head><meta charset=\"utf-8\"><title>",
        encode_for_html(name),
        "</title></head><body>",
        "<h1>Recipe: " + encode_for_html(name) + "</h1>",
    ]
    if description:
        parts.append("<p>" + encode_for_html(description) + "</p>")
    if items:
        parts.extend(["<ul>", items, "</ul>"])
    parts.append("</body></html>")
    return "".join(parts)
