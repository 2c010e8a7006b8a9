import markdown
import bleach

ALLOWED_TAGS = list(bleach.sanitizer.ALLOWED_TAGS) + [
    "p", "pre", "h1", "h2", "h3", "h4", "h5", "h6",
    "table", "thead", "tbody", "tr", "th", "td",
    "hr", "br", "img", "span", "div",
]
ALLOWED_ATTRIBUTES = {
    **bleach.sanitizer.ALLOWED_ATTRIBUTES,
    "img": ["src", "alt", "title"],
    "span": ["class"],
    "div": ["class"],
    "code": ["class"],
    "th": ["align"],
    "td": ["align"],
}

class MarkdownService:
    def __init__(self):
        self.md = markdown.Markdown(
            extensions=[
                'extra',
                'fenced_code',
                'tables',
                'admonition',
                'codehilite',
                'nl2br',
                'sane_lists',
                'toc',
            ]
        )
    
    def convert_to_html(self, markdown_text: str) -> str:
        """Конвертирует Markdown урока в безопасный HTML"""
        self.md.reset()
        html = self.md.convert(markdown_text or "")
        return self.sanitize_html(html)
    
    def sanitize_html(self, html: str) -> str:
        """Удаляет скрипты и небезопасные атрибуты"""
        return bleach.clean(html, tags=ALLOWED_TAGS, attributes=ALLOWED_ATTRIBUTES, strip=True)
