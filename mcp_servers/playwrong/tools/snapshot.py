"""
Compact page outline (the default get_page_content format).

The browser-side script only collects a bounded raw element tree; role/name
inference and rendering happen here so they can be exercised without a browser.
"""

from __future__ import annotations

from typing import Any

MAX_DEPTH = 4
MAX_CHILDREN = 15
MAX_OUTLINE_CHARS = 3000
MAX_NAME_CHARS = 60
MAX_TEXT_NAME_CHARS = 50
TRUNCATION_MARKER = "\n... (outline truncated)"

OUTLINE_JS = r"""
(opts) => {
  const SKIP = new Set(['SCRIPT', 'STYLE', 'NOSCRIPT', 'TEMPLATE', 'META', 'LINK', 'HEAD']);
  const ATTRS = ['role', 'aria-label', 'aria-level', 'title', 'alt', 'placeholder', 'name', 'type'];
  const squash = (s) => (s || '').replace(/\s+/g, ' ').trim();
  const visit = (el, depth) => {
    const node = { tag: el.tagName.toLowerCase(), attrs: {}, text: '', children: [], omitted: 0 };
    for (const name of ATTRS) {
      const v = el.getAttribute(name);
      if (v !== null) node.attrs[name] = v;
    }
    if (typeof el.href === 'string' && el.href) node.attrs.href = el.href;
    if (typeof el.value === 'string' && el.value && el.tagName !== 'BUTTON' && el.tagName !== 'LI') {
      node.value = el.value.slice(0, 200);
    }
    node.text = squash(el.innerText !== undefined ? el.innerText : el.textContent).slice(0, 200);
    // Vector graphics are summarized as a single node.
    if (node.tag === 'svg') return node;
    const eligible = Array.from(el.children).filter((c) => !SKIP.has(c.tagName.toUpperCase()));
    if (depth >= opts.maxDepth) {
      node.omitted = eligible.length;
      return node;
    }
    const visited = eligible.slice(0, opts.maxChildren);
    node.omitted = eligible.length - visited.length;
    node.children = visited.map((c) => visit(c, depth + 1));
    return node;
  };
  const root = document.body || document.documentElement;
  return root ? visit(root, 0) : null;
}
"""

TAG_ROLES: dict[str, str] = {
    "a": "link",
    "article": "article",
    "aside": "complementary",
    "body": "document",
    "button": "button",
    "caption": "caption",
    "dialog": "dialog",
    "fieldset": "group",
    "figure": "figure",
    "footer": "contentinfo",
    "form": "form",
    "h1": "heading",
    "h2": "heading",
    "h3": "heading",
    "h4": "heading",
    "h5": "heading",
    "h6": "heading",
    "header": "banner",
    "hr": "separator",
    "img": "img",
    "label": "label",
    "li": "listitem",
    "main": "main",
    "nav": "navigation",
    "ol": "list",
    "option": "option",
    "p": "paragraph",
    "progress": "progressbar",
    "section": "region",
    "select": "combobox",
    "svg": "graphics",
    "table": "table",
    "tbody": "rowgroup",
    "td": "cell",
    "textarea": "textbox",
    "th": "columnheader",
    "thead": "rowgroup",
    "tr": "row",
    "ul": "list",
}

INPUT_ROLES: dict[str, str] = {
    "button": "button",
    "checkbox": "checkbox",
    "image": "button",
    "radio": "radio",
    "range": "slider",
    "reset": "button",
    "search": "searchbox",
    "submit": "button",
}

# Tags whose own text content is a reasonable accessible name.
TEXT_TAGS = frozenset(
    "a button caption code dd dt em figcaption h1 h2 h3 h4 h5 h6 label legend li option p span strong summary td th".split()
)

FORM_TAGS = frozenset({"input", "textarea", "select"})


def _clip(value: str, limit: int) -> str:
    value = " ".join(str(value).split())
    if len(value) <= limit:
        return value
    return value[: max(0, limit - 1)] + "…"


def infer_role(node: dict[str, Any]) -> str:
    attrs = node.get("attrs") or {}
    explicit = str(attrs.get("role") or "").strip()
    if explicit:
        return explicit.split()[0].lower()
    tag = str(node.get("tag") or "").lower()
    if tag == "input":
        return INPUT_ROLES.get(str(attrs.get("type") or "text").lower(), "textbox")
    return TAG_ROLES.get(tag, tag)


def infer_name(node: dict[str, Any]) -> str:
    attrs = node.get("attrs") or {}
    for key in ("aria-label", "title", "alt"):
        value = str(attrs.get(key) or "").strip()
        if value:
            return _clip(value, MAX_NAME_CHARS)
    tag = str(node.get("tag") or "").lower()
    if tag in TEXT_TAGS:
        text = str(node.get("text") or "").strip()
        if text:
            return _clip(text, MAX_TEXT_NAME_CHARS)
    if tag in FORM_TAGS:
        for key in ("placeholder", "name"):
            value = str(attrs.get(key) or "").strip()
            if value:
                return _clip(value, MAX_NAME_CHARS)
    return ""


def _heading_level(node: dict[str, Any]) -> int | None:
    tag = str(node.get("tag") or "").lower()
    if len(tag) == 2 and tag[0] == "h" and tag[1] in "123456":
        return int(tag[1])
    level = (node.get("attrs") or {}).get("aria-level")
    try:
        return int(level) if level is not None else None
    except (TypeError, ValueError):
        return None


def _selected_attributes(node: dict[str, Any], role: str) -> list[str]:
    attrs = node.get("attrs") or {}
    tag = str(node.get("tag") or "").lower()
    out: list[str] = []
    if role == "heading":
        level = _heading_level(node)
        if level is not None:
            out.append(f"level={level}")
    if tag == "input":
        input_type = str(attrs.get("type") or "text").lower()
        out.append(f"type={input_type}")
        value = node.get("value")
        if value and input_type != "password":
            out.append(f"value={_clip(value, MAX_TEXT_NAME_CHARS)}")
    href = attrs.get("href")
    if tag == "a" and isinstance(href, str) and href.lower().startswith(("http://", "https://")):
        out.append(f"href={href}")
    return out


def describe_node(node: dict[str, Any]) -> str:
    role = infer_role(node)
    line = role
    name = infer_name(node)
    if name:
        line += f' "{name}"'
    attributes = _selected_attributes(node, role)
    if attributes:
        line += f" [{', '.join(attributes)}]"
    return line


def render_outline(tree: dict[str, Any] | None, *, max_chars: int = MAX_OUTLINE_CHARS) -> str:
    """Render the raw tree as one line per node, indented by depth."""
    if not tree:
        return "(empty page)"

    lines: list[str] = []

    def walk(node: dict[str, Any], depth: int) -> None:
        indent = "  " * depth
        lines.append(f"{indent}- {describe_node(node)}")
        for child in node.get("children") or []:
            if isinstance(child, dict):
                walk(child, depth + 1)
        omitted = int(node.get("omitted") or 0)
        if omitted > 0:
            lines.append(f"{indent}  - ... {omitted} more")

    walk(tree, 0)
    text = "\n".join(lines)
    if len(text) > max_chars:
        text = text[: max(0, max_chars - len(TRUNCATION_MARKER))] + TRUNCATION_MARKER
    return text


async def page_outline(page: Any) -> str:
    tree = await page.evaluate(OUTLINE_JS, {"maxDepth": MAX_DEPTH, "maxChildren": MAX_CHILDREN})
    return render_outline(tree)
