from __future__ import annotations

from html import escape
from typing import Any, Dict, List

API_PREFIX = "/api/v1/todos"

_PAGE = """<!doctype html>
<html>
  <head><meta charset="utf-8"><title>Todo Store</title></head>
  <body>
    <h1>Todo Store</h1>
    <p><a href="{back_href}"><button>Go Back to Add Todo</button></a></p>
    {error}
    <ul id="todoList">
{rows}
    </ul>
    <script>
      const api = '{api}';
      async function call(method, path, body) {{
        await fetch(api + path, {{
          method: method,
          headers: {{'Content-Type': 'application/json'}},
          body: body === undefined ? undefined : JSON.stringify(body)
        }});
        window.location.reload();
      }}
      document.querySelectorAll('[data-action]').forEach(b => {{
        const id = encodeURIComponent(b.dataset.id || '');
        b.onclick = async () => {{
          switch (b.dataset.action) {{
            case 'edit': return call('POST', '/' + id + '/edit');
            case 'toggle': return call('POST', '/' + id + '/toggle');
            case 'delete': return call('DELETE', '/' + id);
            case 'cancel': return call('POST', '/draft/cancel');
            case 'save':
              await fetch(api + '/draft', {{
                method: 'PUT',
                headers: {{'Content-Type': 'application/json'}},
                body: JSON.stringify({{title: document.getElementById('draftTitle').value}})
              }});
              return call('POST', '/draft/save');
          }}
        }};
      }});
    </script>
  </body>
</html>
"""


def _render_row(todo: Dict[str, Any], editing_id: Any, draft_title: str) -> str:
    todo_id = escape(todo["id"], quote=True)
    css = "completed" if todo["completed"] else "open"
    title = f'<span class="title">{escape(todo["title"])}</span>'
    if todo["id"] == editing_id:
        controls = (
            f'<input id="draftTitle" type="text" value="{escape(draft_title, quote=True)}"/>'
            f'<button data-action="save" data-id="{todo_id}">Save</button>'
            f'<button data-action="cancel" data-id="{todo_id}">Cancel</button>'
        )
    else:
        toggle_label = "Mark as Incomplete" if todo["completed"] else "Mark as Completed"
        controls = (
            f'<button data-action="edit" data-id="{todo_id}">Edit</button>'
            f'<button data-action="toggle" data-id="{todo_id}">{toggle_label}</button>'
            f'<button data-action="delete" data-id="{todo_id}">Delete</button>'
        )
    return f'      <li id="todo-{todo_id}" class="{css}">{title} {controls}</li>'


# PUBLIC_INTERFACE
def render_page(state: Dict[str, Any], back_href: str = "./") -> str:
    """
    Render the todo store page from a view state snapshot.

    Args:
        state: dict as returned by TodoStoreView.state()
        back_href: target of the link back to the todo creation page

    Returns:
        A complete HTML document.
    """
    editing = state.get("editing_item")
    editing_id = editing["id"] if editing else None
    rows: List[str] = [_render_row(t, editing_id, state.get("draft_title", "")) for t in state["items"]]
    error = state.get("error")
    return _PAGE.format(
        back_href=escape(back_href, quote=True),
        error=f'<p class="error">Error: {escape(error)}</p>' if error else "",
        rows="\n".join(rows),
        api=API_PREFIX,
    )
