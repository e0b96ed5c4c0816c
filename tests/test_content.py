# tests/test_content.py
import json
from datetime import date

import pytest

from adjuster_tutor.content import (
    CONTENT_DIR, ContentLoadError, daily_tip, load_content, read_data_file,
    read_text_source, summary_text,
)
from adjuster_tutor.laws import parse_law


def _write_minimal_content(directory):
    (directory / "questions.json").write_text(json.dumps([{
        "id": "q1", "exam_year": 2024, "subject": "S", "number": 1,
        "question": "Q?", "options": ["a", "b"], "answer": "1",
    }]), encoding="utf-8")
    (directory / "flashcards.json").write_text(json.dumps([
        {"id": "c1", "subject": "S", "front": "F", "back": "B"},
    ]), encoding="utf-8")
    (directory / "pass_rates.json").write_text("{}", encoding="utf-8")
    (directory / "tips.json").write_text('["tip"]', encoding="utf-8")
    (directory / "summaries.json").write_text("[]", encoding="utf-8")
    for stem in ("law", "law_insurance", "law_guideline"):
        (directory / f"{stem}.txt").write_text("제1조(목적) 목적", encoding="utf-8")


def test_load_bundled_content():
    content = load_content()
    assert len(content.questions) > 0
    assert len(content.flashcards) > 0
    assert set(content.law_texts) == {"sangbub", "insurance", "guideline"}
    assert "first" in content.pass_rates
    assert content.tips
    assert content.summaries


def test_bundled_questions_have_required_fields():
    content = load_content(CONTENT_DIR)
    ids = [q.id for q in content.questions]
    assert len(ids) == len(set(ids))
    for q in content.questions:
        assert q.question
        assert len(q.options) >= 2
        assert q.answer


def test_load_minimal_content(tmp_path):
    _write_minimal_content(tmp_path)
    content = load_content(tmp_path)
    assert content.questions[0].id == "q1"
    assert content.flashcards[0].front == "F"
    assert content.law_texts["insurance"].startswith("제1조")


def test_yaml_content_is_accepted(tmp_path):
    _write_minimal_content(tmp_path)
    (tmp_path / "tips.json").unlink()
    (tmp_path / "tips.yaml").write_text("- first tip\n- second tip\n", encoding="utf-8")
    assert load_content(tmp_path).tips == ["first tip", "second tip"]


def test_missing_file_fails_wholesale(tmp_path):
    _write_minimal_content(tmp_path)
    (tmp_path / "law_guideline.txt").unlink()
    with pytest.raises(ContentLoadError):
        load_content(tmp_path)


def test_malformed_json_fails_wholesale(tmp_path):
    _write_minimal_content(tmp_path)
    (tmp_path / "questions.json").write_text("[{", encoding="utf-8")
    with pytest.raises(ContentLoadError):
        load_content(tmp_path)


def test_malformed_record_fails_wholesale(tmp_path):
    _write_minimal_content(tmp_path)
    (tmp_path / "flashcards.json").write_text('[{"id": "c1"}]', encoding="utf-8")
    with pytest.raises(ContentLoadError):
        load_content(tmp_path)


def test_read_text_source_txt(tmp_path):
    f = tmp_path / "law.txt"
    f.write_text("제638조(보험계약의 의의)", encoding="utf-8")
    assert "제638조" in read_text_source(str(f))


def test_read_text_source_html(tmp_path):
    f = tmp_path / "law.html"
    f.write_text("<html><body><p>제1조(목적)</p></body></html>", encoding="utf-8")
    content = read_text_source(str(f))
    assert "제1조(목적)" in content
    assert "<p>" not in content


def _write_pdf(path, text):
    """One-page PDF showing ``text`` in Helvetica."""
    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref)
    path.write_bytes(bytes(out))


def test_read_text_source_pdf(tmp_path):
    f = tmp_path / "law.pdf"
    _write_pdf(f, "Crop insurance guideline")
    assert "Crop insurance guideline" in read_text_source(str(f))


def test_pdf_law_source_is_loaded(tmp_path):
    _write_minimal_content(tmp_path)
    (tmp_path / "law_guideline.txt").unlink()
    _write_pdf(tmp_path / "law_guideline.pdf", "Loss assessment guideline")
    assert "Loss assessment guideline" in load_content(tmp_path).law_texts["guideline"]


def test_docx_law_source_parses_into_articles(tmp_path):
    from docx import Document

    _write_minimal_content(tmp_path)
    (tmp_path / "law_guideline.txt").unlink()
    doc = Document()
    doc.add_paragraph("제1장 총칙")
    doc.add_paragraph("제1조(목적) 이 요령은 손해평가에 필요한 사항을 정한다.")
    doc.add_paragraph("제2조(용어의 정의) 이 요령에서 사용하는 용어의 뜻은 다음과 같다.")
    doc.save(str(tmp_path / "law_guideline.docx"))

    articles = parse_law(load_content(tmp_path).law_texts["guideline"])
    assert articles[0].is_chapter
    assert [a.title for a in articles if not a.is_chapter] == ["제1조(목적)", "제2조(용어의 정의)"]
    assert "손해평가에 필요한" in articles[1].content


def test_read_data_file_json(tmp_path):
    f = tmp_path / "data.json"
    f.write_text('{"a": 1}', encoding="utf-8")
    assert read_data_file(str(f)) == {"a": 1}


def test_daily_tip_is_stable_for_a_day():
    tips = ["a", "b", "c", "d", "e", "f", "g"]
    day = date(2024, 5, 1)
    idx = (2024 * 366 + 4 * 31 + 1) % len(tips)
    assert daily_tip(tips, day) == tips[idx]
    assert daily_tip(tips, day) == daily_tip(tips, date(2024, 5, 1))


def test_daily_tip_empty():
    assert daily_tip([]) == ""


def test_summary_text_strips_html():
    html = "<h4>1. 정의</h4><ul><li><strong>2인 이상 1조</strong>로 구성</li></ul>"
    assert summary_text(html) == "1. 정의\n- 2인 이상 1조로 구성"
