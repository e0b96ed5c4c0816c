"""Static study content: question bank, flashcards, law texts, pass rates, tips, summaries."""
import json
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from adjuster_tutor.models import Flashcard, Question

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"

# Law tab -> file stem inside the content directory
LAW_SOURCES = {
    "sangbub": "law",
    "insurance": "law_insurance",
    "guideline": "law_guideline",
}
LAW_SUFFIXES = (".txt", ".md", ".html", ".htm", ".pdf", ".docx")
DATA_SUFFIXES = (".json", ".yaml", ".yml")


class ContentLoadError(Exception):
    """Raised when any part of the study content cannot be loaded."""


@dataclass
class Content:
    questions: list = field(default_factory=list)
    flashcards: list = field(default_factory=list)
    law_texts: dict = field(default_factory=dict)
    pass_rates: dict = field(default_factory=dict)
    tips: list = field(default_factory=list)
    summaries: list = field(default_factory=list)


def read_text_source(file_path: str) -> str:
    """Plain text from a txt/md, html, pdf or docx file."""
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix in (".txt", ".md"):
        return path.read_text(encoding="utf-8")
    elif suffix in (".html", ".htm"):
        from bs4 import BeautifulSoup
        html = path.read_text(encoding="utf-8")
        return BeautifulSoup(html, "html.parser").get_text()
    elif suffix == ".pdf":
        from PyPDF2 import PdfReader
        reader = PdfReader(file_path)
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    elif suffix == ".docx":
        from docx import Document
        doc = Document(file_path)
        return "\n".join(p.text for p in doc.paragraphs)
    else:
        return path.read_text(encoding="utf-8")


def read_data_file(file_path: str):
    """Parsed JSON or YAML document."""
    path = Path(file_path)
    if path.suffix.lower() in (".yaml", ".yml"):
        import yaml
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    return json.loads(path.read_text(encoding="utf-8"))


def _find_source(content_dir: Path, stem: str, suffixes: tuple) -> Path:
    for suffix in suffixes:
        candidate = content_dir / f"{stem}{suffix}"
        if candidate.exists():
            return candidate
    raise FileNotFoundError(f"No {stem}{{{','.join(suffixes)}}} in {content_dir}")


def _load_data(content_dir: Path, stem: str):
    return read_data_file(str(_find_source(content_dir, stem, DATA_SUFFIXES)))


def load_content(content_dir: str | Path = CONTENT_DIR) -> Content:
    """Load every content file or fail as a whole with ContentLoadError."""
    content_dir = Path(content_dir)
    try:
        questions = [Question.from_dict(q) for q in _load_data(content_dir, "questions")]
        flashcards = [Flashcard.from_dict(c) for c in _load_data(content_dir, "flashcards")]
        law_texts = {
            tab: read_text_source(str(_find_source(content_dir, stem, LAW_SUFFIXES)))
            for tab, stem in LAW_SOURCES.items()
        }
        pass_rates = _load_data(content_dir, "pass_rates")
        tips = _load_data(content_dir, "tips")
        summaries = _load_data(content_dir, "summaries")
    except Exception as e:
        logger.error("Data loading error from %s: %s", content_dir, e)
        raise ContentLoadError(f"Could not load study content from {content_dir}: {e}") from e
    logger.info(
        "Loaded %d questions and %d flashcards from %s",
        len(questions), len(flashcards), content_dir,
    )
    return Content(
        questions=questions,
        flashcards=flashcards,
        law_texts=law_texts,
        pass_rates=pass_rates or {},
        tips=tips or [],
        summaries=summaries or [],
    )


def daily_tip(tips: list, today: date | None = None) -> str:
    """The same tip all day, rotating through the list day by day."""
    if not tips:
        return ""
    today = today or date.today()
    idx = (today.year * 366 + (today.month - 1) * 31 + today.day) % len(tips)
    return tips[idx]


def summary_text(html: str) -> str:
    """Readable text of an HTML summary section."""
    from bs4 import BeautifulSoup
    soup = BeautifulSoup(html, "html.parser")
    blocks = soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6", "p", "li"])
    if not blocks:
        return soup.get_text().strip()
    lines = []
    for block in blocks:
        text = " ".join(block.get_text().split())
        if not text:
            continue
        lines.append(f"- {text}" if block.name == "li" else text)
    return "\n".join(lines)
