"""
Pages of the browser-extension shell.

Each route renders one page into the shared layout. The layout owns the root
node the pages are mounted into; pages only provide their body.
"""
from fastapi import APIRouter
from fastapi.responses import HTMLResponse
from jinja2 import DictLoader, Environment, StrictUndefined, select_autoescape

ROOT_ELEMENT_ID = "root"

_TEMPLATES = {
    "layout.html": """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>{{ title }} - Remember</title>
  </head>
  <body>
    <div id="{{ root_id }}">
      <div class="w-96 p-4">
        {% block content %}{% endblock %}
      </div>
    </div>
  </body>
</html>
""",
    "app.html": """{% extends "layout.html" %}
{% block content %}
<h1 class="text-lg font-bold">Remember</h1>
<p>Save the current page to your bookmarks.</p>
<a href="/options">Options</a>
{% endblock %}
""",
    "not_configured.html": """{% extends "layout.html" %}
{% block content %}
<h1 class="text-lg font-bold">Not configured</h1>
<p>The extension doesn't know which Remember server to talk to yet.</p>
<a href="/options">Configure it in the options</a>
{% endblock %}
""",
    "options.html": """{% extends "layout.html" %}
{% block content %}
<h1 class="text-lg font-bold">Options</h1>
<form>
  <label for="address">Server address</label>
  <input id="address" name="address" type="url" placeholder="http://localhost:3000">
  <button type="submit">Save</button>
</form>
{% endblock %}
""",
}

_jinja_env = Environment(
    loader=DictLoader(_TEMPLATES),
    undefined=StrictUndefined,
    autoescape=select_autoescape(default=True),
)

router = APIRouter(tags=["extension"])


def render_page(template_name: str, title: str) -> str:
    """Render a page template inside the shared layout."""
    template = _jinja_env.get_template(template_name)
    return template.render(title=title, root_id=ROOT_ELEMENT_ID)


@router.get("/", response_class=HTMLResponse)
async def app_page() -> str:
    """Popup shown when the extension icon is clicked."""
    return render_page("app.html", "Home")


@router.get("/notconfigured", response_class=HTMLResponse)
async def not_configured_page() -> str:
    """Shown when no server has been configured yet."""
    return render_page("not_configured.html", "Not configured")


@router.get("/options", response_class=HTMLResponse)
async def options_page() -> str:
    """Extension options."""
    return render_page("options.html", "Options")
