"""Datagraph CLI - Project assignment for annotation workers."""

import json
import sys
import uuid
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from datagraph.config import DATABASE_URL, DB_PATH
from datagraph.db.assignments import AssignmentConflictError, get_assignments
from datagraph.db.connection import init_tables
from datagraph.db.projects import (
    delete_project as db_delete_project,
    get_all_projects,
    get_open_projects,
    insert_project,
    set_project_flags,
)
from datagraph.db.users import complete_onboarding, get_all_users
from datagraph.schemas.match import Assignment
from datagraph.schemas.project import Project
from datagraph.services.assignment_service import (
    AssignmentError,
    assign_project,
    auto_assign_projects,
)
from datagraph.services.import_service import load_projects_from_file, load_users_from_file

app = typer.Typer(help="Datagraph - Match annotation workers to projects")
console = Console()


def _split_terms(value: str | None) -> list[str]:
    if not value:
        return []
    return [term.strip() for term in value.split(",") if term.strip()]


@app.command(name="init-db")
def init_db() -> None:
    """Create database tables if they don't exist."""
    try:
        init_tables()
    except Exception as e:
        console.print(f"[red]Error initializing database: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    target = "PostgreSQL (cloud)" if DATABASE_URL else str(DB_PATH)
    console.print(f"[bold green]Database ready:[/bold green] {target}")


@app.command(name="import-projects")
def import_projects(
    projects_file: Path = typer.Option(
        ..., "--file", "-f", help="Path to projects JSON file"
    ),
) -> None:
    """Import projects from a JSON file.

    The JSON file should contain an array of project objects:
    [{"id": "...", "title": "...", "required_skills": [...], "max_assignments": 5, ...}]
    """
    if not projects_file.exists():
        console.print(f"[red]Error: File not found: {projects_file}[/red]")
        raise typer.Exit(1)

    try:
        count = load_projects_from_file(file_path=projects_file)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Invalid projects file: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold green]Imported {count} projects from {projects_file}[/bold green]")


@app.command(name="import-users")
def import_users(
    users_file: Path = typer.Option(..., "--file", "-f", help="Path to users JSON file"),
) -> None:
    """Import worker profiles from a JSON file.

    The JSON file should contain an array of user objects:
    [{"id": "...", "skills": [...], "languages": [...], "has_onboarded": true}]
    """
    if not users_file.exists():
        console.print(f"[red]Error: File not found: {users_file}[/red]")
        raise typer.Exit(1)

    try:
        count = load_users_from_file(file_path=users_file)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Invalid users file: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold green]Imported {count} users from {users_file}[/bold green]")


@app.command()
def onboard(
    user_id: str = typer.Option(..., "--user-id", "-u", help="User id"),
    skills: str | None = typer.Option(
        None, "--skills", "-s", help="Comma-separated skills"
    ),
    languages: str | None = typer.Option(
        None, "--languages", "-l", help="Comma-separated languages"
    ),
    experience: str | None = typer.Option(
        None, "--experience", "-e", help="Experience: beginner, intermediate, advanced, expert"
    ),
) -> None:
    """Record a user's onboarding answers so they can be matched."""
    try:
        init_tables()
        user = complete_onboarding(
            user_id,
            skills=_split_terms(skills),
            languages=_split_terms(languages),
            experience_level=experience,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid onboarding answers: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if user is None:
        console.print(f"[red]Error: User not found: {user_id}[/red]")
        raise typer.Exit(1)

    if not user.is_matchable:
        console.print(
            f"[yellow]User {user_id} onboarded without skills or languages; "
            "they will not be matched.[/yellow]"
        )
        return

    console.print(f"[bold green]User {user_id} onboarded.[/bold green]")


@app.command(name="add-project")
def add_project(
    title: str = typer.Option(..., "--title", "-t", help="Project title"),
    max_assignments: int = typer.Option(
        ..., "--max-assignments", "-m", help="Maximum number of assigned workers"
    ),
    skills: str | None = typer.Option(
        None, "--skills", "-s", help="Comma-separated required skills"
    ),
    languages: str | None = typer.Option(
        None, "--languages", "-l", help="Comma-separated required languages"
    ),
    experience: str | None = typer.Option(
        None, "--experience", "-e", help="Required experience: beginner, intermediate, advanced, expert"
    ),
    project_id: str | None = typer.Option(
        None, "--id", help="Project id (generated if omitted)"
    ),
    publish: bool = typer.Option(False, "--publish", help="Publish immediately"),
) -> None:
    """Create a new project. Projects start unpublished unless --publish is given."""
    try:
        project = Project(
            id=project_id or uuid.uuid4().hex,
            title=title,
            required_skills=_split_terms(skills),
            required_languages=_split_terms(languages),
            required_experience=experience,
            max_assignments=max_assignments,
            is_published=publish,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid project: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    init_tables()
    if insert_project(project):
        console.print(f"[bold green]Project '{title}' added![/bold green] id: {project.id}")
    else:
        console.print(f"[yellow]Project '{project.id}' already exists.[/yellow]")


@app.command()
def publish(
    project_id: str = typer.Option(..., "--project-id", "-p", help="Project id"),
    unpublish: bool = typer.Option(False, "--unpublish", help="Hide the project instead"),
) -> None:
    """Publish (or unpublish) a project."""
    init_tables()
    if not set_project_flags(project_id, is_published=not unpublish):
        console.print(f"[red]Error: Project not found: {project_id}[/red]")
        raise typer.Exit(1)

    state = "unpublished" if unpublish else "published"
    console.print(f"[bold green]Project {project_id} {state}.[/bold green]")


@app.command()
def deactivate(
    project_id: str = typer.Option(..., "--project-id", "-p", help="Project id"),
    activate: bool = typer.Option(False, "--activate", help="Re-activate the project instead"),
) -> None:
    """Deactivate (or re-activate) a project."""
    init_tables()
    if not set_project_flags(project_id, is_active=activate):
        console.print(f"[red]Error: Project not found: {project_id}[/red]")
        raise typer.Exit(1)

    state = "activated" if activate else "deactivated"
    console.print(f"[bold green]Project {project_id} {state}.[/bold green]")


@app.command(name="delete-project")
def delete_project(
    project_id: str = typer.Option(..., "--project-id", "-p", help="Project id"),
) -> None:
    """Delete a project and all of its assignments."""
    init_tables()
    if not db_delete_project(project_id):
        console.print(f"[red]Error: Project not found: {project_id}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold green]Project {project_id} deleted.[/bold green]")


@app.command(name="list-projects")
def list_projects() -> None:
    """List all projects with their requirements and capacity."""
    try:
        projects = get_all_projects()
    except Exception as e:
        console.print(f"[red]Error listing projects: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not projects:
        console.print("[yellow]No projects found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Projects")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Skills")
    table.add_column("Languages")
    table.add_column("Experience")
    table.add_column("Assigned", style="green")
    table.add_column("Status")

    for project in projects:
        if not project.is_active:
            status = "[red]inactive[/red]"
        elif project.is_published:
            status = "[green]published[/green]"
        else:
            status = "[yellow]draft[/yellow]"
        table.add_row(
            project.id,
            project.title,
            ", ".join(project.required_skills) or "-",
            ", ".join(project.required_languages) or "-",
            project.required_experience.label if project.required_experience is not None else "-",
            f"{project.current_assigned_count}/{project.max_assignments}",
            status,
        )

    console.print(table)


@app.command()
def assign(
    project_id: str = typer.Option(..., "--project-id", "-p", help="Project to assign"),
    output_json: bool = typer.Option(False, "--json", help="Output result as JSON"),
) -> None:
    """Assign the best-matching workers to a single project."""
    try:
        init_tables()
        report = assign_project(project_id)
    except AssignmentError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except AssignmentConflictError as e:
        console.print(
            f"[red]Error: assignment kept conflicting with another run: {escape(str(e))}[/red]"
        )
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Failed to assign project: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if output_json:
        json.dump(obj=report.model_dump(mode="json"), fp=sys.stdout, indent=2)
        sys.stdout.write("\n")
        return

    console.print(f"[bold green]{report.message}[/bold green]")
    if report.assignments:
        _output_assignments(report.assignments)


@app.command(name="auto-assign")
def auto_assign() -> None:
    """Assign workers to every published, active project with open slots."""
    try:
        init_tables()
        stats = auto_assign_projects()
    except Exception as e:
        console.print(f"[red]Error during auto-assignment: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[bold green]Auto-assigned {stats['total_assignments']} project assignments[/bold green]"
    )
    console.print(f"  Projects considered: {stats['projects_considered']}")
    console.print(f"  Projects assigned: {stats['projects_assigned']}")
    if stats["projects_failed"]:
        console.print(f"  [yellow]Projects skipped on error: {stats['projects_failed']}[/yellow]")


@app.command(name="list-assignments")
def list_assignments(
    project_id: str | None = typer.Option(
        None, "--project-id", "-p", help="Only show this project"
    ),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> None:
    """List stored assignments."""
    try:
        assignments = get_assignments(project_id=project_id)
    except Exception as e:
        console.print(f"[red]Error listing assignments: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if output_json:
        output = [assignment.model_dump(mode="json") for assignment in assignments]
        json.dump(obj=output, fp=sys.stdout, indent=2)
        sys.stdout.write("\n")
        return

    if not assignments:
        console.print("[yellow]No assignments found.[/yellow]")
        raise typer.Exit(0)

    _output_assignments(assignments)


@app.command()
def info() -> None:
    """Display system information and database stats."""
    console.print("[bold cyan]Datagraph System Information[/bold cyan]\n")

    is_cloud = DATABASE_URL is not None
    if not is_cloud and not DB_PATH.exists():
        console.print("[yellow]Database not found. Run 'datagraph init-db' first.[/yellow]")
        raise typer.Exit(0)

    try:
        projects = get_all_projects()
        open_projects = get_open_projects()
        users = get_all_users()
        assignments = get_assignments()

        table = Table(title="Database Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        if is_cloud:
            table.add_row("Database", "PostgreSQL (cloud)")
        else:
            table.add_row("Database", str(DB_PATH))
        table.add_row("Total Projects", str(len(projects)))
        table.add_row("Open Projects", str(len(open_projects)))
        table.add_row("Users", str(len(users)))
        table.add_row("Matchable Users", str(sum(1 for u in users if u.is_matchable)))
        table.add_row("Assignments", str(len(assignments)))

        console.print(table)

    except Exception as e:
        console.print(f"[red]Error reading database: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _output_assignments(assignments: list[Assignment]) -> None:
    """Output assignments as a table."""
    table = Table(title="Assignments")
    table.add_column("Project", style="dim")
    table.add_column("User", style="cyan")
    table.add_column("Name")
    table.add_column("Match Score", style="green")
    table.add_column("Status")

    for assignment in assignments:
        table.add_row(
            assignment.project_id,
            assignment.user_id,
            assignment.user_name or "-",
            f"{assignment.match_score:.1%}",
            assignment.status,
        )

    console.print(table)


if __name__ == "__main__":
    app()
