#!/usr/bin/env python3
"""ToDone command line.

Presentation layer for the task tracker: list, search and sort tasks, create
and edit them, add comments, mark them complete and show statistics.
"""

from datetime import datetime
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import get_settings
from .core.events import ChangeNotifier
from .database import (
    create_db_and_tables,
    get_sync_session,
    init_database,
    verify_database,
)
from .errors import PersistenceError, TaskNotFoundError
from .logging_setup import setup_logging
from .schemas.models import (
    AccentColor,
    AppTheme,
    CommitResult,
    DueStatus,
    SortOption,
    TaskCore,
    TaskPriority,
)
from .services import PreferencesService, TaskService
from .utils.task_calculations import TaskCalculations


# Initialize CLI and console
app = typer.Typer(help="ToDone task tracker CLI")
console = Console()

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M"]

PRIORITY_STYLES = {
    TaskPriority.LOW: "green",
    TaskPriority.MEDIUM: "yellow",
    TaskPriority.HIGH: "red",
}

DUE_STYLES = {
    DueStatus.OVERDUE: "red",
    DueStatus.UPCOMING: "dark_orange",
    DueStatus.SCHEDULED: "dim",
}

ACCENT_STYLES = {
    AccentColor.GREEN: "green",
    AccentColor.BLUE: "blue",
    AccentColor.RED: "red",
    AccentColor.ORANGE: "dark_orange",
    AccentColor.PURPLE: "purple",
    AccentColor.PINK: "hot_pink",
    AccentColor.YELLOW: "yellow",
    AccentColor.MINT: "aquamarine1",
    AccentColor.TEAL: "dark_cyan",
    AccentColor.INDIGO: "slate_blue1",
    AccentColor.BROWN: "orange4",
}


class TodoneCLI:
    """CLI interface holding the services for one invocation."""

    def __init__(self):
        """Initialize CLI without opening the database yet."""
        self.notifier = ChangeNotifier()
        self.service: TaskService | None = None
        self.preferences: PreferencesService | None = None

    def initialize(self) -> TaskService:
        """Open the database and build the services if not already done."""
        if self.service is None:
            settings = get_settings()
            setup_logging(settings.effective_log_level)
            create_db_and_tables()

            session = get_sync_session()
            self.service = TaskService(
                session, notifier=self.notifier, analytics=settings.analytics
            )
            self.preferences = PreferencesService(
                session, defaults=settings.appearance, notifier=self.notifier
            )
        return self.service

    def cleanup(self):
        """Release the database session."""
        if self.service:
            self.service.close()


# Global CLI instance
cli_instance = TodoneCLI()


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]{escape(message)}[/bold red]")
    raise typer.Exit(code=1)


def _report_commit(result: CommitResult, success: str) -> None:
    if result.ok:
        console.print(f"[bold green]✓ {success}[/bold green]")
        return
    if result.reason is not None:
        title = result.reason.value.replace("_", " ").title()
        _fail(f"{title}: {result.message}")
    _fail(result.message or "Could not save changes")


def _task_table(title: str, tasks: list[TaskCore], now: datetime) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="white", max_width=40)
    table.add_column("Priority")
    table.add_column("Due", justify="right")

    for task in tasks:
        status = TaskCalculations.due_status(task, now)
        title_text = escape(task.title)
        if task.is_completed:
            title_text = f"[strike dim]{title_text}[/strike dim]"
        table.add_row(
            str(task.id),
            title_text,
            f"[{PRIORITY_STYLES[task.priority]}]⚑ {task.priority.label}[/]",
            f"[{DUE_STYLES[status]}]{TaskCalculations.date_label(task, now)}[/]",
        )
    return table


@app.command("init-db")
def init_db():
    """Create the database tables and check the schema."""
    try:
        count = init_database()
    except Exception as e:
        _fail(f"Error initializing database: {e}")

    if not verify_database():
        _fail("Database verification failed")
    console.print(f"[green]Database ready. Current task count: {count}[/green]")


@app.command()
def add(
    title: str = typer.Argument(..., help="Task title"),
    content: str = typer.Option("", "--content", "-c", help="Notes"),
    priority: TaskPriority = typer.Option(
        TaskPriority.MEDIUM, "--priority", "-p", case_sensitive=False
    ),
    due: datetime | None = typer.Option(
        None, "--due", "-d", formats=DATE_FORMATS, help="Due date (default: now)"
    ),
):
    """Create a new task."""
    service = cli_instance.initialize()
    try:
        result = service.create_task(title, content=content, priority=priority, due_date=due)
        _report_commit(result, f"Created task {result.task_id}")
    finally:
        cli_instance.cleanup()


@app.command("list")
def list_tasks(
    search: str = typer.Option("", "--search", "-s", help="Filter by title or notes"),
    sort: SortOption = typer.Option(SortOption.DATE, "--sort", case_sensitive=False),
):
    """List active tasks."""
    service = cli_instance.initialize()
    try:
        if not service.list_tasks():
            console.print(
                Panel.fit(
                    "Start by creating your first task\n[dim]todone add TITLE[/dim]",
                    title="No Tasks",
                )
            )
            return

        tasks = service.active_tasks(search, sort)
        if search and not tasks:
            console.print(f'[yellow]No results for "{escape(search)}"[/yellow]')
            return

        console.print(_task_table(f"Tasks ({sort.label})", tasks, service.now()))
    finally:
        cli_instance.cleanup()


@app.command()
def completed(
    search: str = typer.Option("", "--search", "-s", help="Filter by title or notes"),
    sort: SortOption = typer.Option(SortOption.DATE, "--sort", case_sensitive=False),
):
    """List completed tasks."""
    service = cli_instance.initialize()
    try:
        tasks = service.completed_tasks(search, sort)
        if search and not tasks:
            console.print(f'[yellow]No results for "{escape(search)}"[/yellow]')
            return
        if not tasks:
            console.print(
                Panel.fit("No tasks have been completed yet.", title="No Completed Tasks")
            )
            return

        console.print(_task_table(f"Completed ({sort.label})", tasks, service.now()))
    finally:
        cli_instance.cleanup()


@app.command()
def show(task_id: int = typer.Argument(..., help="ID of the task to show")):
    """Show a task with its comments."""
    service = cli_instance.initialize()
    try:
        task = service.get_task(task_id)
        now = service.now()

        console.print(
            Panel.fit(
                f"[bold blue]Title:[/bold blue] {escape(task.title)}\n"
                f"[bold blue]Priority:[/bold blue] "
                f"[{PRIORITY_STYLES[task.priority]}]{task.priority.label}[/]\n"
                f"[bold blue]Due Date:[/bold blue] "
                f"{TaskCalculations.format_datetime(task.due_date)}\n"
                f"[bold blue]Status:[/bold blue] "
                f"{'Completed' if task.is_completed else 'Pending'}\n"
                f"[bold blue]Created:[/bold blue] "
                f"{TaskCalculations.format_datetime(task.created_at)}",
                title=f"Task {task_id}",
            )
        )

        if task.content:
            console.print(Panel(escape(task.content), title="Notes", border_style="green"))

        if task.comments:
            comment_table = Table(title="Comments", show_header=False)
            comment_table.add_column("Comment", style="white")
            comment_table.add_column("Date", style="dim")
            for comment in task.sorted_comments:
                comment_table.add_row(
                    escape(comment.text), TaskCalculations.format_datetime(comment.date)
                )
            console.print(comment_table)

        if not task.is_completed and TaskCalculations.is_overdue(task, now):
            console.print(
                f"[red]{TaskCalculations.date_label(task, now).splitlines()[-1]}[/red]"
            )
    except TaskNotFoundError as e:
        _fail(str(e))
    finally:
        cli_instance.cleanup()


@app.command()
def edit(
    task_id: int = typer.Argument(..., help="ID of the task to edit"),
    title: str | None = typer.Option(None, "--title", "-t"),
    content: str | None = typer.Option(None, "--content", "-c"),
    priority: TaskPriority | None = typer.Option(
        None, "--priority", "-p", case_sensitive=False
    ),
    due: datetime | None = typer.Option(None, "--due", "-d", formats=DATE_FORMATS),
):
    """Edit the fields of a task."""
    service = cli_instance.initialize()
    try:
        editor = service.open_task_editor(task_id)
        editor.begin_edit()

        changes = {
            "title": title,
            "content": content,
            "priority": priority,
            "due_date": due,
        }
        editor.update_draft(**{k: v for k, v in changes.items() if v is not None})
        _report_commit(editor.commit(), f"Updated task {task_id}")
    except TaskNotFoundError as e:
        _fail(str(e))
    finally:
        cli_instance.cleanup()


@app.command()
def comment(
    task_id: int = typer.Argument(..., help="ID of the task"),
    text: str = typer.Argument(..., help="Comment text"),
):
    """Add a comment to a task."""
    service = cli_instance.initialize()
    try:
        editor = service.open_task_editor(task_id)
        editor.comment_text = text
        added = editor.add_comment()
        if added is None:
            _fail("Comment text is empty")
        console.print(f"[bold green]✓ Comment added to task {task_id}[/bold green]")
    except (TaskNotFoundError, PersistenceError) as e:
        _fail(str(e))
    finally:
        cli_instance.cleanup()


@app.command()
def complete(task_id: int = typer.Argument(..., help="ID of the task")):
    """Mark a task complete."""
    service = cli_instance.initialize()
    try:
        task = service.complete_task(task_id)
        console.print(f"[bold green]✓ Completed: {escape(task.title)}[/bold green]")
    except (TaskNotFoundError, PersistenceError) as e:
        _fail(str(e))
    finally:
        cli_instance.cleanup()


@app.command()
def reopen(task_id: int = typer.Argument(..., help="ID of the task")):
    """Move a completed task back to the active list."""
    service = cli_instance.initialize()
    try:
        task = service.reopen_task(task_id)
        console.print(f"[bold blue]↺ Reopened: {escape(task.title)}[/bold blue]")
    except (TaskNotFoundError, PersistenceError) as e:
        _fail(str(e))
    finally:
        cli_instance.cleanup()


@app.command()
def delete(
    task_id: int = typer.Argument(..., help="ID of the task"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a task and its comments."""
    service = cli_instance.initialize()
    try:
        task = service.get_task(task_id)
        if not yes and not typer.confirm(f"Delete '{task.title}'?"):
            console.print("[yellow]Cancelled[/yellow]")
            return
        service.delete_task(task_id)
        console.print(f"[bold red]Deleted task {task_id}[/bold red]")
    except (TaskNotFoundError, PersistenceError) as e:
        _fail(str(e))
    finally:
        cli_instance.cleanup()


@app.command()
def suggest():
    """Show search suggestions from existing task titles."""
    service = cli_instance.initialize()
    try:
        suggestions = service.search_suggestions()
        if not suggestions:
            console.print("[yellow]No suggestions[/yellow]")
            return
        for suggestion in suggestions:
            console.print(f"  • {escape(suggestion)}")
    finally:
        cli_instance.cleanup()


@app.command()
def stats():
    """Show task overview and weekly progress."""
    service = cli_instance.initialize()
    try:
        overview = service.overview()
        stats_table = Table(
            title="Task Overview", show_header=True, header_style="bold blue"
        )
        stats_table.add_column("Metric", style="cyan")
        stats_table.add_column("Value", style="white")
        stats_table.add_row("Total", str(overview.total))
        stats_table.add_row("Pending", str(overview.pending))
        stats_table.add_row(
            "Completed", f"{overview.completed} ({service.completion_rate():.1f}%)"
        )
        console.print(stats_table)

        weekly_table = Table(
            title="Weekly Progress", show_header=True, header_style="bold green"
        )
        weekly_table.add_column("Day", style="cyan")
        weekly_table.add_column("Completed", style="green")
        for day in service.weekly_completions():
            weekly_table.add_row(
                f"{day.date:%a} {day.date:%b} {day.date.day}",
                f"{'█' * day.count} {day.count}",
            )
        console.print(weekly_table)
    finally:
        cli_instance.cleanup()


@app.command()
def settings(
    show_current: bool = typer.Option(False, "--show", help="Show current preferences"),
    theme: AppTheme | None = typer.Option(None, "--theme", case_sensitive=False),
    accent: AccentColor | None = typer.Option(None, "--accent", case_sensitive=False),
):
    """Show or change appearance preferences."""
    cli_instance.initialize()
    try:
        if theme is not None or accent is not None:
            prefs = cli_instance.preferences.update(theme=theme, accent_color=accent)
            console.print(
                f"[green]Preferences saved: theme={prefs.theme.value}, "
                f"accent={prefs.accent_color.value}[/green]"
            )
            if not show_current:
                return

        prefs = cli_instance.preferences.load()
        console.print(
            Panel(
                f"Theme: {prefs.theme.value}\nAccent Color: {prefs.accent_color.value}",
                title="Appearance",
                border_style=ACCENT_STYLES[prefs.accent_color],
            )
        )
    except PersistenceError as e:
        _fail(str(e))
    finally:
        cli_instance.cleanup()


@app.callback()
def main():
    """ToDone task tracker.

    Create tasks with notes, priority and due date, comment on them, mark
    them complete and follow your weekly progress.
    """
    pass


if __name__ == "__main__":
    app()
