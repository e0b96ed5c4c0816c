"""Law text viewer: split raw statute text into articles and search it."""
import re

from rich.markup import escape

from adjuster_tutor.models import LawArticle

LAW_TABS = {
    "sangbub": "상법(보험편)",
    "insurance": "농어업재해보험법",
    "guideline": "손해평가요령",
}

NOISE_MARKER = "조문체계도버튼"
ARTICLE_RE = re.compile(r"^(제\d+조(?:의\d+)?)\s*(\(.*?\))?\s*(.*)")
CHAPTER_RE = re.compile(r"^제\d+[장절]\s")
PART_RE = re.compile(r"^제\d+편\s")
ARTICLE_NUMBER_RE = re.compile(r"제\d+조(?:의\d+)?")
LAW_REF_RE = re.compile(r"(?:상법\s*)?제\d+조(?:의\d+)?")
EXPLANATION_MARK_RE = re.compile(r"(제\d+조(?:의\d+)?(?:\([^)]*\))?)|(【[^】]+】)|(▶[^:\n]+)")
MAX_REFS = 3
# Lines before the first article that are kept as headings
PREAMBLE_LINES = 5


def parse_law(text: str) -> list[LawArticle]:
    """Split statute text into chapter headings and articles, in document order."""
    lines = [line for line in text.split("\n") if NOISE_MARKER not in line and line.strip()]
    articles = []
    title = None
    body = []

    def flush():
        if title is not None:
            articles.append(LawArticle(title=title, content="\n".join(body)))

    for i, raw in enumerate(lines):
        line = raw.strip()
        match = ARTICLE_RE.match(line)
        if match:
            flush()
            title = match.group(1) + (match.group(2) or "")
            body = [line]
        elif CHAPTER_RE.match(line):
            flush()
            title, body = None, []
            articles.append(LawArticle(title=line, is_chapter=True))
        elif title is not None:
            body.append(line)
        elif PART_RE.match(line) or i < PREAMBLE_LINES:
            articles.append(LawArticle(title=line, is_chapter=True))
    flush()
    return articles


def search_articles(articles: list, query: str) -> list[LawArticle]:
    """Articles whose title or body contains ``query``, ignoring case."""
    query = query.strip().lower()
    if not query:
        return list(articles)
    return [a for a in articles if query in a.title.lower() or query in a.content.lower()]


def highlight(text: str, query: str, style: str = "reverse") -> str:
    """Rich markup for ``text`` with every occurrence of ``query`` styled."""
    if not query or not text:
        return escape(text or "")
    pattern = re.compile(re.escape(query), re.IGNORECASE)
    parts = []
    last = 0
    for match in pattern.finditer(text):
        parts.append(escape(text[last:match.start()]))
        parts.append(f"[{style}]{escape(match.group(0))}[/{style}]")
        last = match.end()
    parts.append(escape(text[last:]))
    return "".join(parts)


def extract_law_refs(text: str) -> list[str]:
    """Up to three distinct article references such as "상법 제651조" in ``text``."""
    if not text:
        return []
    return list(dict.fromkeys(LAW_REF_RE.findall(text)))[:MAX_REFS]


def law_tab_for_ref(ref: str) -> str:
    ref = ref.lower()
    if "손해평가" in ref or "평가요령" in ref:
        return "guideline"
    if "재해보험" in ref or "농어업" in ref:
        return "insurance"
    return "sangbub"


def resolve_law_ref(ref: str) -> tuple[str, str]:
    """Which law tab to open and what to search for when following ``ref``."""
    match = ARTICLE_NUMBER_RE.search(ref)
    return law_tab_for_ref(ref), match.group(0) if match else ""


def format_explanation(text: str) -> str:
    """Rich markup for an explanation with article numbers and 【】/▶ markers in bold."""
    if not text:
        return ""
    parts = []
    last = 0
    for match in EXPLANATION_MARK_RE.finditer(text):
        style = "bold cyan" if match.group(1) else "bold"
        parts.append(escape(text[last:match.start()]))
        parts.append(f"[{style}]{escape(match.group(0))}[/{style}]")
        last = match.end()
    parts.append(escape(text[last:]))
    return "".join(parts)
