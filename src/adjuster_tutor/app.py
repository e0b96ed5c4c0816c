"""Interactive CLI application."""
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from adjuster_tutor.analytics import (
    get_score_color, get_wrong_rate_color, home_stats, recent_wrong,
    subject_stats, weak_points, year_stats,
)
from adjuster_tutor.content import (
    Content, ContentLoadError, daily_tip, load_content, summary_text,
)
from adjuster_tutor.db import DEFAULT_DB_PATH
from adjuster_tutor.filters import (
    QUIZ_MODES, available_subjects, available_years, select_questions,
    short_subject_name,
)
from adjuster_tutor.flashcards import FlashcardDeck, level_name
from adjuster_tutor.laws import (
    LAW_TABS, extract_law_refs, format_explanation, highlight, parse_law,
    resolve_law_ref, search_articles,
)
from adjuster_tutor.quiz import (
    ACTIVE, QuizSession, bookmark_review_questions, quick_quiz_questions,
    wrong_review_questions,
)
from adjuster_tutor.scheduler import initialize_progress
from adjuster_tutor.store import ProgressStore, get_setting, set_setting

console = Console()

EXIT_COMMANDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the user leaves a quiz or flashcard session early."""


def session_prompt(prompt: str, **kwargs) -> str:
    value = Prompt.ask(prompt, **kwargs)
    if value.strip().lower() in EXIT_COMMANDS:
        raise SessionExitRequested()
    return value


def show_welcome():
    console.print(Panel(
        "[bold]손해평가사 1차 시험 대비[/bold]\n[dim]Crop-insurance loss adjuster exam prep[/dim]",
        title="손평마스터", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("home", "Progress overview, daily tip, pass rates"),
        ("quiz", "Filtered quiz (years, subjects, mode)"),
        ("quick", "Quick quiz: 10 random questions"),
        ("wrong", "Review wrongly answered questions"),
        ("bookmarks", "Review bookmarked questions"),
        ("flashcards", "Flashcard drill"),
        ("law", "Search the law texts"),
        ("summary", "Subject summaries"),
        ("analytics", "Detailed statistics"),
        ("reset", "Erase all progress"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def ask_selection(title: str, values: list, labels: list | None = None) -> list:
    """Pick a subset by number; Enter keeps everything selected."""
    labels = labels or [str(v) for v in values]
    for i, label in enumerate(labels, 1):
        console.print(f"  [cyan]{i}[/cyan]) {escape(str(label))}")
    raw = Prompt.ask(f"{title} (comma-separated numbers, Enter for all)", default="")
    if not raw.strip():
        return list(values)
    picked = []
    for token in raw.split(","):
        token = token.strip()
        if token.isdigit() and 1 <= int(token) <= len(values):
            picked.append(values[int(token) - 1])
    return picked


def render_question(session: QuizSession) -> None:
    q = session.current_question
    bookmarked = session.store.snapshot.is_bookmarked(q.id)
    star = "[yellow]★[/yellow]" if bookmarked else "☆"
    console.print(
        f"\n[dim]{session.progress_label}[/dim]  {star}  "
        f"[magenta]{q.exam_year}년[/magenta] [blue]{escape(short_subject_name(q.subject))}[/blue] [dim]{q.number}번[/dim]"
    )
    console.print(f"[bold]{escape(q.question)}[/bold]\n")
    selected = session.selected_option
    for i, option in enumerate(q.options, 1):
        marker = "[bold]>[/bold]" if selected == i else " "
        console.print(f" {marker} [cyan]{i})[/cyan] {escape(option)}")


def show_answer_feedback(session: QuizSession, correct: bool) -> None:
    q = session.current_question
    if correct:
        console.print("[green]Correct![/green]")
    else:
        console.print(f"[red]Incorrect.[/red] Answer: [green]{escape(q.answer)}[/green]")
    if q.explanation:
        console.print(f"[dim]{format_explanation(q.explanation)}[/dim]")
    if q.memory_tip:
        console.print(f"[yellow]💡 {escape(q.memory_tip)}[/yellow]")
    refs = extract_law_refs(q.explanation)
    if refs:
        console.print(f"[dim]Related articles: {escape(', '.join(refs))} (type 'l' to look up)[/dim]")


def show_result(session: QuizSession) -> None:
    result = session.compute_result()
    color = get_score_color(result.percentage)
    console.print(Panel(
        f"[bold {color}]{result.percentage}%[/bold {color}]  {result.correct_count} / {result.total} correct",
        title="Quiz Result", border_style=color,
    ))
    if not result.wrong_list:
        console.print("[green]All answered questions correct![/green]")
        return
    table = Table(title="Wrong Answers")
    table.add_column("Year")
    table.add_column("Subject")
    table.add_column("No.", justify="right")
    table.add_column("Question")
    table.add_column("Yours", justify="right")
    table.add_column("Correct", justify="right")
    for w in result.wrong_list:
        table.add_row(
            str(w.question.exam_year), escape(short_subject_name(w.question.subject)),
            str(w.question.number), escape(w.question.question),
            f"[red]{w.selected_option}[/red]", f"[green]{escape(w.correct_answer)}[/green]",
        )
    console.print(table)


def run_quiz_session(session: QuizSession, laws: dict | None = None) -> None:
    """Drive an active session until it reaches the result view."""
    while session.state == ACTIVE:
        render_question(session)
        q = session.current_question
        choice = session_prompt(
            f"\nOption 1-{len(q.options)}, n=next, p=prev, b=bookmark, l=law, q=quit"
        ).strip().lower()
        if choice.isdigit() and 1 <= int(choice) <= len(q.options):
            correct = session.answer(int(choice))
            if correct is None:
                console.print("[dim]Already answered.[/dim]")
            else:
                show_answer_feedback(session, correct)
        elif choice == "n":
            if session.is_last and not session.is_answered:
                console.print("[yellow]Answer this question to see the result.[/yellow]")
            session.next()
        elif choice == "p":
            session.prev()
        elif choice == "b":
            marked = session.toggle_bookmark()
            console.print("[yellow]Bookmarked.[/yellow]" if marked else "[dim]Bookmark removed.[/dim]")
        elif choice == "l" and laws:
            refs = extract_law_refs(q.explanation)
            if refs:
                show_law_lookup(laws, refs[0])
            else:
                console.print("[dim]No article references for this question.[/dim]")
        else:
            console.print("[red]Unknown input.[/red]")
    show_result(session)


def start_quiz(store: ProgressStore, questions: list, laws: dict | None, empty_message: str) -> None:
    session = QuizSession(store)
    if not session.start(questions):
        console.print(f"[yellow]{empty_message}[/yellow]")
        return
    run_quiz_session(session, laws)
    wrong = session.wrong_questions()
    if wrong and Confirm.ask("Review the wrong answers now?", default=False):
        start_quiz(store, wrong, laws, "No wrong answers!")


def run_flashcard_session(deck: FlashcardDeck) -> None:
    """Cycle through the deck until the user quits."""
    if deck.current_card is None:
        console.print("[yellow]No cards selected.[/yellow]")
        return
    while True:
        card = deck.current_card
        progress = deck.current_progress
        console.print(Panel(
            escape(card.front),
            title=f"Card {deck.progress_label}  [dim]{level_name(progress.level)}[/dim]",
            subtitle=escape(short_subject_name(card.subject)), border_style="cyan",
        ))
        session_prompt("[dim]Press Enter to flip[/dim]", default="")
        console.print(Panel(escape(card.back), border_style="green"))
        choice = session_prompt("k=know, d=don't know, s=skip", choices=["k", "d", "s", *EXIT_COMMANDS])
        if choice == "k":
            deck.know()
        elif choice == "d":
            deck.dont_know()
        else:
            deck.skip()
        console.print(f"[dim]Mastered: {deck.mastered_count()} / {len(deck.cards)}[/dim]\n")


def show_law_lookup(laws: dict, ref: str) -> None:
    tab, article_number = resolve_law_ref(ref)
    render_law(laws[tab], article_number, LAW_TABS[tab])


def render_law(articles: list, query: str, title: str) -> None:
    matches = search_articles(articles, query)
    if not matches:
        console.print("[yellow]No matching articles.[/yellow]")
        return
    console.print(f"\n[bold]{title}[/bold] [dim]({len(matches)} entries)[/dim]")
    for art in matches:
        if art.is_chapter:
            console.print(f"\n[bold blue]{highlight(art.title, query)}[/bold blue]")
        else:
            console.print(Panel(highlight(art.content, query), title=highlight(art.title, query)))


def cmd_home(content: Content, store: ProgressStore):
    stats = home_stats(content.questions, content.flashcards, store.snapshot)
    accuracy = f"{stats['accuracy']}%" if stats["solved"] else "-"
    console.print(Panel(
        f"Questions: [bold]{stats['total_questions']}[/bold]  |  "
        f"Flashcards: [bold]{stats['total_flashcards']}[/bold]  |  "
        f"Accuracy: [bold]{accuracy}[/bold]\n"
        f"Solved {stats['solved']} of {stats['total_questions']} ({stats['progress']}%)",
        title="Progress", border_style="blue",
    ))
    if stats["wrong"]:
        console.print(f"  [red]Wrong answers to review: {stats['wrong']}[/red] (use 'wrong')")
    if stats["bookmarks"]:
        console.print(f"  [yellow]Bookmarks: {stats['bookmarks']}[/yellow] (use 'bookmarks')")
    tip = daily_tip(content.tips)
    if tip:
        console.print(Panel(escape(tip), title="Today's tip", border_style="yellow"))
    for kind, label in (("first", "1차"), ("second", "2차")):
        show_pass_rates(content.pass_rates, kind, f"{label} 합격률")


def show_pass_rates(pass_rates: dict, kind: str, title: str) -> None:
    data = pass_rates.get(kind)
    if not data:
        console.print("[dim]No pass-rate data.[/dim]")
        return
    table = Table(title=title)
    for header in data["headers"]:
        table.add_column(escape(header))
    for row in data["data"]:
        table.add_row(f"[bold]{escape(row['label'])}[/bold]", *(escape(str(v)) for v in row["values"]))
    console.print(table)


def cmd_quiz(content: Content, store: ProgressStore, laws: dict):
    console.print("\n[bold]Quiz Setup[/bold]")
    years = ask_selection("Years", available_years(content.questions),
                          [f"{y}년" for y in available_years(content.questions)])
    subjects_all = available_subjects(content.questions)
    subjects = ask_selection("Subjects", subjects_all, [short_subject_name(s) for s in subjects_all])
    default_mode = get_setting(store.db_path, "quiz_mode", "sequential")
    if default_mode not in QUIZ_MODES:
        default_mode = "sequential"
    mode = Prompt.ask("Mode", choices=list(QUIZ_MODES), default=default_mode)
    set_setting(store.db_path, "quiz_mode", mode)
    questions = select_questions(content.questions, years, subjects, mode, store.snapshot.solved)
    console.print(f"[dim]{len(questions)} questions selected[/dim]")
    start_quiz(store, questions, laws, "No questions selected. Check your filters.")


def cmd_quick(content: Content, store: ProgressStore, laws: dict):
    start_quiz(store, quick_quiz_questions(content.questions), laws, "No questions available!")


def cmd_wrong(content: Content, store: ProgressStore, laws: dict):
    questions = wrong_review_questions(content.questions, store.snapshot.solved)
    start_quiz(store, questions, laws, "No wrong answers!")


def cmd_bookmarks(content: Content, store: ProgressStore, laws: dict):
    questions = bookmark_review_questions(content.questions, store.snapshot.bookmarks)
    start_quiz(store, questions, laws, "No bookmarked questions!")


def cmd_flashcards(content: Content, store: ProgressStore):
    console.print("\n[bold]Flashcard Drill[/bold]")
    subjects_all = available_subjects(content.flashcards)
    subjects = ask_selection("Subjects", subjects_all, [short_subject_name(s) for s in subjects_all])
    deck = FlashcardDeck(store, content.flashcards)
    deck.filter(subjects)
    run_flashcard_session(deck)


def cmd_law(laws: dict):
    tab = Prompt.ask("Law", choices=list(LAW_TABS), default="sangbub")
    query = Prompt.ask("Search (article number or keyword, Enter for all)", default="").strip()
    render_law(laws[tab], query, LAW_TABS[tab])


def cmd_summary(content: Content):
    if not content.summaries:
        console.print("[dim]No summaries available.[/dim]")
        return
    for i, section in enumerate(content.summaries, 1):
        console.print(f"  [cyan]{i}[/cyan]) {escape(section['title'])}")
    choice = Prompt.ask("Section", choices=[str(i) for i in range(1, len(content.summaries) + 1)])
    section = content.summaries[int(choice) - 1]
    console.print(Panel(escape(summary_text(section["content"])), title=escape(section["title"]), border_style="green"))


def cmd_analytics(content: Content, store: ProgressStore):
    solved = store.snapshot.solved
    stats = home_stats(content.questions, content.flashcards, store.snapshot)
    console.print(
        f"\n  Solved: [bold]{stats['solved']}[/bold]  |  "
        f"Correct: [green]{stats['correct']}[/green]  |  Wrong: [red]{stats['wrong']}[/red]\n"
    )

    table = Table(title="By Subject")
    table.add_column("Subject", style="cyan")
    table.add_column("Accuracy", justify="right")
    table.add_column("Solved", justify="right")
    for s in subject_stats(content.questions, solved):
        table.add_row(escape(s["short_name"]), f"{s['accuracy']}%", f"{s['solved']}/{s['total']} ({s['progress']}%)")
    console.print(table)

    years = year_stats(content.questions, solved)
    table = Table(title="By Year")
    table.add_column("Year")
    table.add_column("Correct", justify="right")
    table.add_column("Wrong", justify="right")
    table.add_column("Accuracy", justify="right")
    for y in years:
        color = get_score_color(y["accuracy"])
        accuracy = f"[{color}]{y['accuracy']}%[/{color}]" if y["solved"] else "-"
        table.add_row(str(y["year"]), str(y["correct"]), str(y["wrong"]), accuracy)
    console.print(table)

    weak = weak_points(content.questions, solved)
    if weak:
        console.print("\n[bold]Weak Points:[/bold]")
        for w in weak:
            color = get_wrong_rate_color(w["wrong_rate"])
            console.print(f"  [{color}]{w['wrong_rate']:>3}% wrong[/{color}] {escape(w['tip'])} ({w['wrong']}/{w['total']})")
    else:
        console.print("\n[dim]Weak points appear once you have some wrong answers.[/dim]")

    recent = recent_wrong(content.questions, solved)
    if recent:
        console.print("\n[bold]Recent Wrong Answers:[/bold]")
        for q, entry in recent:
            text = q.question if len(q.question) <= 60 else q.question[:60] + "..."
            console.print(
                f"  [magenta]{q.exam_year}년[/magenta] {escape(short_subject_name(q.subject))} {q.number}번: {escape(text)} "
                f"[red]yours {entry.selected_answer}[/red] · [green]answer {escape(q.answer)}[/green]"
            )


def cmd_reset(store: ProgressStore):
    if Confirm.ask("This erases all study progress. Continue?", default=False):
        store.reset()
        console.print("[green]Progress has been reset.[/green]")


def setup_logging(level: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    setup_logging()
    db_path = DEFAULT_DB_PATH
    store = ProgressStore(db_path)
    store.load()

    try:
        content = load_content()
    except ContentLoadError as e:
        console.print(Panel(
            f"[bold]Data loading failed[/bold]\nCheck the content directory.\n[dim]{escape(str(e))}[/dim]",
            title="Error", border_style="red",
        ))
        raise SystemExit(1)

    initialize_progress(content.flashcards, store.snapshot.fc_cards)
    store.save()
    laws = {tab: parse_law(text) for tab, text in content.law_texts.items()}

    show_welcome()
    cmd_home(content, store)

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="home").strip().lower()
        try:
            if choice == "home":
                cmd_home(content, store)
            elif choice == "quiz":
                cmd_quiz(content, store, laws)
            elif choice == "quick":
                cmd_quick(content, store, laws)
            elif choice == "wrong":
                cmd_wrong(content, store, laws)
            elif choice == "bookmarks":
                cmd_bookmarks(content, store, laws)
            elif choice == "flashcards":
                cmd_flashcards(content, store)
            elif choice == "law":
                cmd_law(laws)
            elif choice == "summary":
                cmd_summary(content)
            elif choice == "analytics":
                cmd_analytics(content, store)
            elif choice == "reset":
                cmd_reset(store)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck on your exam![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("[dim]Back to the menu.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")


if __name__ == "__main__":
    main()
