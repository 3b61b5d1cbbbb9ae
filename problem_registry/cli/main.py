import typer
import httpx
from typing import Optional, Dict, Any
from rich.console import Console
from rich.table import Table
import os

app = typer.Typer(help="Command-line client for the Problem Registry API")
console = Console()

# API URL - configurable through an environment variable
API_URL = os.environ.get("PROBLEM_REGISTRY_API_URL", "http://localhost:3001")


class APIError(Exception):
    """The API answered with success=false, or could not be reached."""


def get_client() -> httpx.Client:
    """HTTP client bound to the configured API URL."""
    return httpx.Client(base_url=API_URL, timeout=10.0)


def call_api(method: str, path: str, **kwargs) -> Dict[str, Any]:
    """
    Send a request to the API and return the decoded JSON envelope.

    Args:
        method: HTTP verb
        path: Path relative to the API URL
        **kwargs: Passed to httpx (json, params, ...)

    Returns:
        The response body

    Raises:
        APIError: If the API reports a failure or cannot be reached
    """
    try:
        with get_client() as client:
            response = client.request(method, path, **kwargs)
    except httpx.RequestError as e:
        raise APIError(f"Request error: {str(e)}") from e

    try:
        body = response.json()
    except ValueError:
        raise APIError(f"HTTP error: {response.status_code} - {response.text}") from None

    if response.is_error or not body.get("success", False):
        raise APIError(body.get("message") or f"HTTP error: {response.status_code}")
    return body


def run_api(method: str, path: str, **kwargs) -> Dict[str, Any]:
    """call_api() that prints the failure and exits with status 1."""
    try:
        return call_api(method, path, **kwargs)
    except APIError as e:
        console.print(f"[bold red]Error: {str(e)}")
        raise typer.Exit(code=1)


def print_problem(problem: Dict[str, Any]) -> None:
    console.print(f"\n[bold]Problem #{problem['id']}: [cyan]{problem['title']}[/]")
    console.print(f"Description: [cyan]{problem['description']}[/]")
    console.print(f"Category: [cyan]{problem['category']}[/]")
    console.print(f"Location: [cyan]{problem['location']}[/]")
    console.print(f"Status: [cyan]{problem['status']}[/]")
    console.print(f"Upvotes: [cyan]{problem['upvotes']}[/]")
    console.print(f"Reported: [cyan]{problem['createdAt']}[/]")
    console.print(f"Updated: [cyan]{problem['updatedAt']}[/]")


def problems_table(problems) -> Table:
    table = Table(show_header=True, header_style="bold green")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Location")
    table.add_column("Status")
    table.add_column("Upvotes")

    for problem in problems:
        table.add_row(
            str(problem["id"]),
            problem["title"],
            problem["category"],
            problem["location"],
            problem["status"],
            str(problem["upvotes"]),
        )
    return table


@app.command("list")
def list_problems(
    status: Optional[str] = typer.Option(None, help="Filter by status (open, in-progress, resolved)"),
    category: Optional[str] = typer.Option(None, help="Filter by category"),
):
    """
    List reported problems.
    """
    params = {key: value for key, value in {"status": status, "category": category}.items() if value}
    body = run_api("GET", "/problems", params=params)

    if not body["data"]:
        console.print("[yellow]No problems found.")
        return

    console.print(problems_table(body["data"]))
    console.print(f"Total: [cyan]{body['count']}[/]")


@app.command()
def show(problem_id: int = typer.Argument(..., help="Problem ID")):
    """
    Show the details of a problem.
    """
    body = run_api("GET", f"/problems/{problem_id}")
    print_problem(body["data"])


@app.command()
def report(
    title: str = typer.Option(..., help="Short title"),
    description: str = typer.Option(..., help="What is wrong"),
    category: str = typer.Option(..., help="infrastructure, safety, environment, education, health, ..."),
    location: str = typer.Option(..., help="Where the problem is"),
):
    """
    Report a new problem.
    """
    body = run_api(
        "POST",
        "/problems",
        json={"title": title, "description": description, "category": category, "location": location},
    )
    console.print(f"[green]{body['message']}")
    print_problem(body["data"])


@app.command()
def update(
    problem_id: int = typer.Argument(..., help="Problem ID"),
    title: Optional[str] = typer.Option(None, help="New title"),
    description: Optional[str] = typer.Option(None, help="New description"),
    category: Optional[str] = typer.Option(None, help="New category"),
    location: Optional[str] = typer.Option(None, help="New location"),
    status: Optional[str] = typer.Option(None, help="New status"),
):
    """
    Update some fields of a problem.
    """
    changes = {
        "title": title,
        "description": description,
        "category": category,
        "location": location,
        "status": status,
    }
    changes = {key: value for key, value in changes.items() if value is not None}
    if not changes:
        console.print("[yellow]Nothing to update.")
        raise typer.Exit(code=1)

    body = run_api("PUT", f"/problems/{problem_id}", json=changes)
    console.print(f"[green]{body['message']}")
    print_problem(body["data"])


@app.command()
def upvote(problem_id: int = typer.Argument(..., help="Problem ID")):
    """
    Upvote a problem.
    """
    body = run_api("POST", f"/problems/{problem_id}/upvote")
    console.print(f"[green]{body['message']}: [bold]#{problem_id}[/] now has {body['data']['upvotes']} upvote(s)")


@app.command("status")
def change_status(
    problem_id: int = typer.Argument(..., help="Problem ID"),
    new_status: str = typer.Argument(..., help="open, in-progress or resolved"),
):
    """
    Change the status of a problem.
    """
    body = run_api("PATCH", f"/problems/{problem_id}/status", json={"status": new_status})
    console.print(f"[green]{body['message']}: [bold]#{problem_id}[/] is {body['data']['status']}")


@app.command()
def delete(problem_id: int = typer.Argument(..., help="Problem ID")):
    """
    Delete a problem.
    """
    body = run_api("DELETE", f"/problems/{problem_id}")
    console.print(f"[green]{body['message']}: [bold]#{problem_id}[/] {body['data']['title']}")


@app.command()
def stats():
    """
    Show aggregate statistics.
    """
    data = run_api("GET", "/stats")["data"]

    console.print(f"\n[bold]Total problems: [cyan]{data['total']}[/]")
    console.print(f"Open: [cyan]{data['open']}[/]")
    console.print(f"In progress: [cyan]{data['inProgress']}[/]")
    console.print(f"Resolved: [cyan]{data['resolved']}[/]")

    categories = Table(show_header=True, header_style="bold green")
    categories.add_column("Category")
    categories.add_column("Problems")
    for name, count in data["categories"].items():
        categories.add_row(name, str(count))
    console.print(categories)

    if data["topUpvoted"]:
        console.print("[bold]Most upvoted")
        console.print(problems_table(data["topUpvoted"]))


@app.command()
def health():
    """
    Check that the API is up.
    """
    body = run_api("GET", "/health")
    console.print(f"[green]{body['message']}[/] ({body['timestamp']})")


def main():
    app()


if __name__ == "__main__":
    main()
