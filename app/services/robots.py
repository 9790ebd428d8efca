"""robots.txt policy for the blog host."""

from typing import List

# API/admin paths, raw JSON and any URL carrying a query string
DISALLOWED_PATTERNS = (
    "/api/",
    "/admin/",
    "/*.json$",
    "/*?*",
)


def render_robots(base_url: str) -> str:
    """Return the robots.txt body for *base_url*."""
    base = base_url.rstrip("/")
    lines: List[str] = ["User-agent: *", "Allow: /"]
    lines.extend(f"Disallow: {pattern}" for pattern in DISALLOWED_PATTERNS)
    lines.append("")
    lines.append(f"Sitemap: {base}/sitemap.xml")
    lines.append(f"Sitemap: {base}/blog/sitemap.xml")
    lines.append(f"Host: {base}")
    return "\n".join(lines) + "\n"
